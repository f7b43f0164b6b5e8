from webform.normalizer import normalize
from webform.validation import schema_validator, validate, validate_schema_file


def test_valid_canonical_schema():
    schema = normalize(
        {
            "selectors": {"tags": ".tag"},
            "structure": {"tags": {"type": "array", "items": {"type": "string"}, "maxItems": 3}},
        }
    )
    report = validate(schema)
    assert report.valid is True
    assert report.errors is None


def test_bad_type_is_reported_with_its_path():
    report = validate(
        {
            "selectors": {"price": ".price"},
            "structure": {"price": {"type": "integer"}, "tags": {"type": "array", "items": {"type": "text"}}},
        }
    )
    assert report.valid is False
    paths = {error.path for error in report.errors}
    assert "/structure/price/type" in paths
    assert "/structure/tags/items/type" in paths


def test_missing_type_and_non_string_selector():
    report = validate({"selectors": {"a": 3}, "structure": {"a": {"description": "no type"}}})
    assert report.valid is False
    paths = {error.path for error in report.errors}
    assert "/selectors/a" in paths
    assert "/structure/a/type" in paths


def test_validate_never_raises_on_garbage():
    report = validate("definitely not a schema")
    assert report.valid is False
    assert report.errors


def test_validator_is_compiled_once():
    assert schema_validator() is schema_validator()


def test_validate_schema_file_reports_parse_errors(tmp_path):
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    report = validate_schema_file("broken", tmp_path)
    assert report.valid is False
    assert len(report.errors) == 1
    assert "broken" in report.errors[0].message


def test_validate_schema_file_normalizes_first(tmp_path):
    (tmp_path / "flat.json").write_text('{"title": "h1.title"}', encoding="utf-8")
    assert validate_schema_file("flat", tmp_path).valid is True
