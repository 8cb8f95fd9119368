from __future__ import annotations
import json
import streamlit as st

from pk_codec import MAX_INPUT_BYTES, clamp_bytes, hex_encode, try_decode_utf8
from pk_ops import OPS, magic_detect
from pk_recipe import Recipe, Step, recipe_from_b64url, recipe_from_json, recipe_to_b64url, run_recipe

APP = "PalsKitchen"
st.set_page_config(page_title=APP, page_icon="🔐", layout="wide")

# ------------------------------
# Session model
# ------------------------------
if "recipe" not in st.session_state:
    st.session_state.recipe = Recipe(steps=[])
if "input_bytes" not in st.session_state:
    st.session_state.input_bytes = b""

def load_recipe_from_url_if_any():
    # once per session, so later edits are not overwritten on rerun
    if st.session_state.get("url_recipe_loaded"):
        return
    st.session_state.url_recipe_loaded = True
    r = st.query_params.get("r")
    if r:
        try:
            st.session_state.recipe = recipe_from_b64url(r)
            st.toast("Loaded recipe from URL", icon="✅")
        except ValueError as e:
            st.toast(f"Failed to load recipe: {e}", icon="⚠️")

load_recipe_from_url_if_any()

# ------------------------------
# Top toolbar
# ------------------------------
c1, c2, c3, c4 = st.columns([1.2, 2.2, 2.6, 1.8])
with c1:
    st.markdown("### 🔐 PalsKitchen")

with c2:
    if st.button("🎯 Magic Detect", use_container_width=True):
        sample = try_decode_utf8(st.session_state.input_bytes)[:4000]
        hints = magic_detect(sample)
        if hints:
            st.info("\n".join([f"- {name} (confidence {int(conf*100)}%)" for name, conf in hints]))
        else:
            st.info("No obvious patterns detected.")

with c3:
    export_col1, export_col2 = st.columns(2)
    with export_col1:
        data = json.dumps(st.session_state.recipe.to_json(), indent=2).encode("utf-8")
        st.download_button("💾 Save Recipe JSON", data, file_name="recipe.json", mime="application/json", use_container_width=True)
    with export_col2:
        if st.button("🔗 Share Query", use_container_width=True):
            st.code(f"?r={recipe_to_b64url(st.session_state.recipe)}")

with c4:
    uploaded = st.file_uploader("Load Recipe JSON", type=["json"])
    if uploaded:
        try:
            st.session_state.recipe = recipe_from_json(json.loads(uploaded.read().decode("utf-8")))
            st.success("Recipe loaded.")
        except ValueError as e:
            st.error(f"Load failed: {e}")

st.divider()

# ------------------------------
# Workspace layout
# ------------------------------
left, middle, right = st.columns([2,3,2])

# --- Left: Input
with left:
    st.subheader("📝 Input")
    txt = st.text_area("Paste hex or text", height=220, value=try_decode_utf8(st.session_state.input_bytes))
    st.session_state.input_bytes = clamp_bytes(txt.encode("utf-8", errors="replace"), MAX_INPUT_BYTES)

    with st.expander("Preview & Formats"):
        t1, t2 = st.tabs(["Text", "Hex"])
        with t1: st.code(try_decode_utf8(st.session_state.input_bytes)[:4000] or "∅", language="text")
        with t2: st.code(hex_encode(st.session_state.input_bytes[:4000]) or "∅", language="text")

# --- Middle: Operations builder
with middle:
    st.subheader("🔧 Recipe Builder")

    cols = st.columns([2,1,1])
    with cols[0]:
        new_op = st.selectbox("Add operation", ["—"] + [f"{o.category} · {o.name} ({k})" for k,o in OPS.items()])
    with cols[1]:
        if st.button("➕ Add"):
            if new_op != "—":
                key = new_op.split("(")[-1].rstrip(")")
                st.session_state.recipe.steps.append(Step(op_key=key, enabled=True, params={}))
                st.rerun()
    with cols[2]:
        if st.button("🧹 Clear"):
            st.session_state.recipe = Recipe(steps=[])
            st.rerun()

    steps = st.session_state.recipe.steps
    for idx, step in enumerate(steps):
        op = OPS.get(step.op_key)
        if op is None:
            st.warning(f"Step {idx+1}: unknown operation {step.op_key!r}")
            continue
        with st.expander(f"Step {idx+1}: {op.name} [{op.category}]  ({step.op_key})", expanded=False):
            top = st.columns([0.9,0.7,0.7,0.7])
            with top[0]:
                step.enabled = st.checkbox("Enabled", value=step.enabled, key=f"en_{idx}")
            with top[1]:
                if st.button("⬆️ Up", key=f"up_{idx}") and idx>0:
                    steps[idx-1], steps[idx] = steps[idx], steps[idx-1]
                    st.rerun()
            with top[2]:
                if st.button("⬇️ Down", key=f"down_{idx}") and idx < len(steps)-1:
                    steps[idx+1], steps[idx] = steps[idx], steps[idx+1]
                    st.rerun()
            with top[3]:
                if st.button("🗑️ Remove", key=f"rm_{idx}"):
                    del steps[idx]
                    st.rerun()

            step.params = step.params or {}
            for pname, default in (op.params_schema or {}).items():
                step.params[pname] = st.text_input(f"{pname} (hex)", value=step.params.get(pname, default), key=f"{pname}_{idx}")

# --- Right: Output
with right:
    st.subheader("📤 Output")
    intermediate_previews = st.checkbox("Show intermediate outputs", value=False)
    result = run_recipe(st.session_state.recipe, st.session_state.input_bytes)

    if intermediate_previews:
        for idx, name, out in result.previews:
            with st.expander(f"After step {idx+1}: {name}"):
                t1, t2 = st.tabs(["Text", "Hex"])
                with t1: st.code(try_decode_utf8(out)[:4000] or "∅")
                with t2: st.code(hex_encode(out[:4000]) or "∅")

    if not result.ok:
        st.error("\n".join(result.errors))
    else:
        views = {
            "Text": lambda: st.code(try_decode_utf8(result.data)[:8000] or "∅"),
            "Hex": lambda: st.code(hex_encode(result.data[:8000]) or "∅"),
        }
        if result.output_hint == "json":
            views = {"JSON": lambda: st.json(try_decode_utf8(result.data)), **views}
        elif result.output_hint == "auto" and result.previews:
            # raw bytes read better as hex
            views = {"Hex": views["Hex"], "Text": views["Text"]}
        for tab, show in zip(st.tabs(list(views)), views.values()):
            with tab: show()

    st.caption(f"Bytes out: {len(result.data)}")

st.markdown("---")
st.caption("PalsKitchen • set 1: hex, base64, fixed XOR, single-byte XOR")
