import pytest

from nextpint_backend.app.services.analytics import events
from nextpint_backend.app.services.data_stores import sessions
from nextpint_backend.app.services.prompts.engine import PromptVariableError
from nextpint_backend.app.services.prompts.service import PromptService, TemplateNotFound

PROFILE = {
    "session_goal": "try something sour",
    "mood": "curious",
    "taste_preference": {"primary": "tart", "avoid": ["smoky", "peaty"], "intensity": 4},
    "constraints": {"other": []},
    "search_keywords": ["gose", "berliner"],
}

def _custom(**kw):
    return {
        "id": "quick-pick", "name": "Quick pick", "category": "search",
        "template": "Pick me a {{style}} beer", "variables": [{"name": "style", "required": True}],
        **kw,
    }

def test_bundled_templates_loaded():
    svc = PromptService()
    ids = [t["id"] for t in svc.get_templates()]
    assert ids == ["beer-discovery-session", "taste-analysis", "brewery-exploration", "food-pairing", "data-import"]
    assert {t["id"] for t in svc.get_templates(category="search")} == {"beer-discovery-session", "brewery-exploration"}
    assert svc.get_templates(locale="fr-FR") == []
    assert svc.get_template("nope") is None

def test_render_applies_defaults_and_checks_required():
    svc = PromptService()
    out = svc.render_template("food-pairing", {"foodDescription": "grilled mackerel"}, ai_service="claude")
    assert "grilled mackerel" in out["content"]
    assert "casual" in out["content"]
    assert out["template_id"] == "food-pairing" and out["ai_service"] == "claude"
    assert out["copied_count"] == 0

    with pytest.raises(PromptVariableError) as exc:
        svc.render_template("food-pairing", {"foodDescription": "ok"})
    assert exc.value.errors == ["foodDescription must be at least 3 long"]
    with pytest.raises(TemplateNotFound):
        svc.render_template("missing", {})

def test_save_template_persists_for_new_instances():
    svc = PromptService()
    saved = svc.save_template(_custom())
    assert saved["created_at"] and saved["updated_at"]

    fresh = PromptService()
    assert fresh.get_template("quick-pick")["template"] == "Pick me a {{style}} beer"
    assert fresh.render_template("quick-pick", {"style": "Gose"})["content"] == "Pick me a Gose beer"
    assert PromptService(load_saved=False).get_template("quick-pick") is None

def test_save_template_validates():
    with pytest.raises(ValueError, match="Invalid template category"):
        PromptService().save_template(_custom(category="poetry"))

def test_delete_rules():
    svc = PromptService()
    with pytest.raises(ValueError):
        svc.delete_template("taste-analysis")
    with pytest.raises(TemplateNotFound):
        svc.delete_template("missing")

    svc.save_template(_custom())
    svc.delete_template("quick-pick")
    assert svc.get_template("quick-pick") is None
    assert PromptService().get_template("quick-pick") is None

def test_overriding_a_bundled_template_and_reverting():
    svc = PromptService()
    bundled = svc.get_template("food-pairing")["template"]
    svc.save_template(_custom(id="food-pairing", category="comparison", template="Pair {{style}}"))
    assert svc.get_template("food-pairing")["template"] == "Pair {{style}}"

    svc.delete_template("food-pairing")
    assert svc.get_template("food-pairing")["template"] == bundled

def test_session_prompt_fills_profile_and_defaults():
    text = PromptService().generate_session_prompt(PROFILE)
    assert "try something sour" in text
    assert "smoky, peaty" in text
    assert "gose, berliner" in text
    assert "any location" in text and "any budget" in text
    assert "{{" not in text

def test_fallback_prompt_when_session_template_missing():
    svc = PromptService()
    del svc._templates["beer-discovery-session"]
    text = svc.generate_session_prompt(PROFILE)
    assert text == PromptService.generate_fallback_prompt(PROFILE)
    assert text.startswith("I'm looking for beer recommendations")
    assert "Tastes to avoid: smoky, peaty" in text

def test_prompt_for_session_is_stored_and_tracked():
    s = sessions.create_session({"profile": PROFILE})
    svc = PromptService()
    entry = svc.generate_prompt_for_session(s["session_id"], ai_service="chatgpt")
    assert entry["template_id"] == "beer-discovery-session"
    assert "try something sour" in entry["content"]

    stored = sessions.get_session(s["session_id"])["generated_prompts"]
    assert [p["id"] for p in stored] == [entry["id"]]
    tracked = events.get_events_by_type("prompt_generated")
    assert len(tracked) == 1 and tracked[0]["session_id"] == s["session_id"]

    with pytest.raises(KeyError):
        svc.generate_prompt_for_session("missing")

def test_taste_analysis_prompt_lists_history():
    beers = [
        {"name": "Old One", "brewery": "Baird", "style": "Porter", "rating": 3, "checkin_date": "2023-01-01"},
        {"name": "New One", "brewery": "Far Yeast", "style": "IPA", "rating": 4.5, "checkin_date": "2024-05-01", "notes": "juicy"},
    ]
    text = PromptService().generate_taste_analysis_prompt(beers)
    assert text.index("New One") < text.index("Old One")
    assert "- New One by Far Yeast (IPA), rated 4.5/5 on 2024-05-01: juicy" in text
    assert "not specified" in text

    empty = PromptService().generate_taste_analysis_prompt([])
    assert "No beers recorded yet." in empty
    assert "not sure yet" in empty

def test_data_import_prompt():
    svc = PromptService()
    text = svc.generate_data_import_prompt("untappd", max_beers=20)
    assert "at most 20 beers" in text
    assert '"source": "untappd"' in text
    assert "reviews on untappd" in text
    assert '"source": "manual"' in svc.generate_data_import_prompt()
    with pytest.raises(PromptVariableError):
        svc.generate_data_import_prompt(max_beers=0)

def test_registry_hands_out_copies():
    svc = PromptService()
    t = svc.get_template("food-pairing")
    t["template"] = "changed"
    t["variables"].clear()
    listed = svc.get_templates(category="comparison")[0]
    listed["name"] = "changed"

    fresh = svc.get_template("food-pairing")
    assert fresh["template"] != "changed"
    assert fresh["name"] != "changed"
    assert fresh["variables"]

    saved = svc.save_template(_custom())
    saved["template"] = "changed"
    assert svc.get_template("quick-pick")["template"] == "Pick me a {{style}} beer"
