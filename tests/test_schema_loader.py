import pytest

from webform.coercion import coerce_fields
from webform.schema_loader import (
    InvalidSchemaError,
    SchemaNotFoundError,
    list_schemas,
    load_schema,
    view_schema,
)


def test_load_schema_normalizes(tmp_path):
    (tmp_path / "article.json").write_text('{"title": "h1.title"}', encoding="utf-8")
    schema = load_schema("article", tmp_path)
    assert schema.selectors == {"title": "h1.title"}


def test_missing_schema(tmp_path):
    with pytest.raises(SchemaNotFoundError) as excinfo:
        load_schema("nope", tmp_path)
    assert excinfo.value.schema_name == "nope"
    assert "nope" in str(excinfo.value)


def test_invalid_json(tmp_path):
    (tmp_path / "bad.json").write_text("{oops", encoding="utf-8")
    with pytest.raises(InvalidSchemaError) as excinfo:
        load_schema("bad", tmp_path)
    assert excinfo.value.schema_name == "bad"


def test_list_and_view(tmp_path):
    (tmp_path / "b.json").write_text("{}", encoding="utf-8")
    (tmp_path / "a.json").write_text('{"x": ".x"}', encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    assert list_schemas(tmp_path) == ["a", "b"]
    assert view_schema("a", tmp_path) == '{"x": ".x"}'
    assert list_schemas(tmp_path / "absent") == []


def test_bundled_schemas_found_from_any_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    names = list_schemas("schemas")
    assert {"article", "blog", "hackernews", "product"} <= set(names)
    assert "title" in load_schema("article", "schemas").selectors


def test_local_schemas_dir_takes_precedence(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "schemas").mkdir()
    (tmp_path / "schemas" / "mine.json").write_text('{"title": "h1"}', encoding="utf-8")
    assert list_schemas("schemas") == ["mine"]


def test_bundled_hackernews_keeps_score_text():
    schema = load_schema("hackernews", "schemas")
    assert coerce_fields({"points": ["123 points", "7 points"]}, schema)["points"] == ["123 points", "7 points"]
