from streamlit.testing.v1 import AppTest
from pk_recipe import Recipe, Step, recipe_to_b64url

APP_FILE = "../streamlit_app.py"

def _button(at, label):
    return next(b for b in at.button if b.label == label)

def test_url_recipe_loads():
    at = AppTest.from_file(APP_FILE)
    at.query_params["r"] = recipe_to_b64url(Recipe([Step("hex2bin")]))
    at.run()
    assert not at.exception
    assert [s.op_key for s in at.session_state.recipe.steps] == ["hex2bin"]

def test_url_recipe_does_not_undo_clear():
    at = AppTest.from_file(APP_FILE)
    at.query_params["r"] = recipe_to_b64url(Recipe([Step("hex2bin")]))
    at.run()
    _button(at, "🧹 Clear").click().run()
    assert not at.exception
    assert at.session_state.recipe.steps == []

def test_bad_url_recipe_is_reported():
    at = AppTest.from_file(APP_FILE)
    at.query_params["r"] = "W10="  # "[]"
    at.run()
    assert not at.exception
    assert at.session_state.recipe.steps == []
