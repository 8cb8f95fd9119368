from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import base64, json

from provide.foundation import logger

from pk_codec import clamp_bytes
from pk_ops import OPS

# ------------------------------
# Recipe model
# ------------------------------
@dataclass
class Step:
    op_key: str
    enabled: bool = True
    params: Optional[Dict[str, Any]] = None
    def to_json(self):
        return {"op_key": self.op_key, "enabled": self.enabled, "params": self.params or {}}

@dataclass
class Recipe:
    steps: List[Step] = field(default_factory=list)
    def to_json(self):
        return {"steps": [s.to_json() for s in self.steps]}

@dataclass
class RecipeResult:
    data: bytes
    errors: List[str] = field(default_factory=list)
    previews: List[tuple] = field(default_factory=list)  # (step index, op name, bytes)
    output_hint: str = "auto"  # hint of the last op that ran

    @property
    def ok(self) -> bool:
        return not self.errors

# ------------------------------
# Encode/decode
# ------------------------------
def recipe_from_json(obj: Any) -> Recipe:
    """Build a Recipe from parsed JSON, raising ValueError on a malformed shape."""
    if not isinstance(obj, dict):
        raise ValueError("recipe must be a JSON object")
    items = obj.get("steps", [])
    if not isinstance(items, list):
        raise ValueError("recipe steps must be a list")
    steps = []
    for n, it in enumerate(items, 1):
        if not isinstance(it, dict) or not isinstance(it.get("op_key"), str):
            raise ValueError(f"step {n} needs a string op_key")
        params = it.get("params") or {}
        if not isinstance(params, dict):
            raise ValueError(f"step {n} params must be an object")
        steps.append(Step(op_key=it["op_key"], enabled=bool(it.get("enabled", True)), params=params))
    return Recipe(steps=steps)

def recipe_to_b64url(recipe: Recipe) -> str:
    raw = json.dumps(recipe.to_json(), separators=(",",":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")

def recipe_from_b64url(s: str) -> Recipe:
    data = base64.urlsafe_b64decode(s.encode("ascii"))
    return recipe_from_json(json.loads(data.decode("utf-8")))

# ------------------------------
# Runner
# ------------------------------
def run_recipe(recipe: Recipe, data: bytes) -> RecipeResult:
    """Apply the enabled steps in order, stopping at the first failure."""
    result = RecipeResult(data=data)
    for idx, step in enumerate(recipe.steps):
        if not step.enabled:
            continue
        op = OPS.get(step.op_key)
        if op is None:
            result.errors.append(f"Step {idx+1} ({step.op_key}): unknown operation")
            logger.warning(f"recipe step {idx+1}: unknown operation {step.op_key!r}")
            break
        try:
            out, _meta = op.fn(result.data, step.params or {})
        except ValueError as e:
            result.errors.append(f"Step {idx+1} ({op.name}): {e}")
            logger.warning(f"recipe step {idx+1} ({op.key}) failed: {e}")
            break
        result.data = clamp_bytes(out)
        result.output_hint = op.output_hint
        result.previews.append((idx, op.name, result.data))
    return result
