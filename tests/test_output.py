import json
from datetime import datetime

from webform.output import assemble, exclude_metadata, format_as_text, render_formatted, render_structured, write_output


def test_assemble_adds_metadata():
    output = assemble({"title": "Hi"})
    assert output["title"] == "Hi"
    assert output["_metadata"]["schemaVersion"] == "1.0"
    datetime.fromisoformat(output["_metadata"]["extractedAt"].replace("Z", "+00:00"))


def test_exclude_metadata_is_a_pure_projection():
    output = assemble({"title": "Hi", "tags": ["a"]})
    before = json.dumps(output, sort_keys=True)
    stripped = exclude_metadata(output)
    assert "_metadata" not in stripped
    assert json.dumps(output, sort_keys=True) == before
    assert json.dumps(stripped, sort_keys=True) == json.dumps({"title": "Hi", "tags": ["a"]}, sort_keys=True)


def test_text_rendering():
    text = format_as_text({"title": "Hi", "tags": ["a", "b"], "empty": [], "ok": True, "none": None})
    assert text.splitlines() == ["title: Hi", "tags:   - a", "  - b", "empty: []", "ok: true", "none: null"]


def test_text_rendering_marks_metadata():
    text = render_structured(assemble({"a": 1}), fmt="text")
    assert "// Metadata:" in text


def test_render_structured_without_metadata():
    rendered = render_structured(assemble({"a": 1}), include_metadata=False)
    assert json.loads(rendered) == {"a": 1}


def test_render_formatted_falls_back_to_text():
    assert render_formatted('{"a":1}') == '{\n  "a": 1\n}'
    assert render_formatted("plain words") == "plain words"
    assert render_formatted('{"a":1}', fmt="text") == '{"a":1}'


def test_write_output(tmp_path, capsys):
    target = tmp_path / "out" / "result.json"
    write_output("{}", target)
    assert target.read_text(encoding="utf-8") == "{}"
    write_output("printed")
    assert capsys.readouterr().out == "printed\n"
