from techpack.placeholders import (
    extract_fields_needing_input,
    not_provided_marker,
    replace_placeholder,
)


def test_extract_keeps_first_occurrence_order_without_duplicates():
    content = "{{Season}} then {{Brand}} and {{Season}} again, {{Brand}}, {{Style Number}}"
    assert extract_fields_needing_input(content) == ["Season", "Brand", "Style Number"]


def test_extract_brand_and_season():
    content = "## Brand\n{{Brand}}\n\n## Season\n{{Season}}"
    assert extract_fields_needing_input(content) == ["Brand", "Season"]


def test_extract_is_case_sensitive():
    assert extract_fields_needing_input("{{brand}} {{Brand}}") == ["brand", "Brand"]


def test_extract_ignores_empty_and_nested_braces():
    assert extract_fields_needing_input("{{}} {{{Brand}}} text") == ["Brand"]


def test_extract_empty_content():
    assert extract_fields_needing_input("") == []
    assert extract_fields_needing_input("no tokens here") == []


def test_replace_every_occurrence():
    content, changed = replace_placeholder("{{Brand}} / {{Brand}}", "Brand", "Nike")
    assert changed is True
    assert content == "Nike / Nike"


def test_replace_miss_is_logged_and_keeps_content(caplog):
    content, changed = replace_placeholder("## Brand\nAcme", "Brand", "Nike")
    assert changed is False
    assert content == "## Brand\nAcme"
    assert "No replacement occurred for field: Brand" in caplog.text


def test_replace_value_is_literal():
    content, _ = replace_placeholder("{{Size}}", "Size", r"XS \1 [M] $&")
    assert content == r"XS \1 [M] $&"


def test_not_provided_marker():
    assert not_provided_marker("Measurements") == "[Measurements - Not Provided]"
