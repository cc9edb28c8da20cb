from nextpint_backend.app.services.prompts.engine import (
    find_placeholders, process_template, resolve_variables, to_text,
)

def test_substitution_is_single_pass_and_literal():
    out = process_template("Goal: {{goal}} / Mood: {{mood}}", {"goal": "{{mood}}", "mood": "a $1 \\1 day"})
    assert out == "Goal: {{mood}} / Mood: a $1 \\1 day"

def test_unknown_placeholders_are_left_alone():
    assert process_template("Hi {{name}}, {{missing}}", {"name": "Ken"}) == "Hi Ken, {{missing}}"
    assert find_placeholders("{{a}} {{b}} {{a}}") == ["a", "b"]

def test_to_text_formats():
    assert to_text(None) == ""
    assert to_text(True) == "true"
    assert to_text(["IPA", "Stout"]) == "IPA, Stout"
    assert to_text(12) == "12"

def test_resolve_applies_defaults_and_blanks():
    defs = [
        {"name": "goal", "required": True},
        {"name": "budget", "default_value": "any budget"},
        {"name": "notes"},
    ]
    resolved, errors = resolve_variables(defs, {"goal": "explore", "extra": 1})
    assert errors == []
    assert resolved == {"goal": "explore", "budget": "any budget", "notes": "", "extra": 1}

def test_resolve_reports_every_problem():
    defs = [
        {"name": "goal", "required": True},
        {"name": "count", "type": "number", "validation": {"min": 1, "max": 10}},
        {"name": "food", "validation": {"min_length": 3}},
        {"name": "code", "validation": {"pattern": "^[A-Z]{3}$"}},
        {"name": "flag", "type": "boolean"},
    ]
    _, errors = resolve_variables(defs, {"goal": "  ", "count": 11, "food": "ab", "code": "abc", "flag": "yes"})
    assert errors == [
        "goal is required",
        "count must be at most 10",
        "food must be at least 3 long",
        "code does not match the expected format",
        "flag must be a boolean",
    ]

def test_number_type_rejects_strings():
    _, errors = resolve_variables([{"name": "n", "type": "number"}], {"n": "5"})
    assert errors == ["n must be a number"]

def test_dict_values_render_as_json():
    out = process_template("Prefs: {{prefs}}", {"prefs": {"hoppy": 5, "sour": True, "note": "ビール"}})
    assert out == 'Prefs: {"hoppy": 5, "sour": true, "note": "ビール"}'
    assert to_text({"a": None}) == '{"a": null}'
