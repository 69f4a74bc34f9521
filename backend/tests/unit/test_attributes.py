"""Unit tests for attribute extraction and attribute scoring"""

from reunite.matching.attributes import (
    attribute_score,
    attribute_text,
    expand_with_synonyms,
    extract_attributes,
    extract_brands,
    extract_colors,
    extract_models,
    implies_laptop,
    implies_phone,
    sanitize_text,
)


def test_sanitize_text():
    assert sanitize_text("  Black,   SAMSUNG!! phone ") == "black samsung phone"


def test_expand_with_synonyms_adds_group_members():
    expanded = expand_with_synonyms("Lost umbrella")
    assert expanded.startswith("lost umbrella")
    assert "parasol" in expanded


def test_expand_with_synonyms_maps_synonym_back_to_word():
    assert "wallet" in expand_with_synonyms("brown billfold")


def test_expand_with_synonyms_leaves_unrelated_text():
    assert expand_with_synonyms("Red Scarf") == "red scarf"


def test_extract_brands_and_colors():
    text = "Silver Dell laptop with black sleeve"
    assert extract_brands(text) == {"dell"}
    assert {"silver", "black"} <= extract_colors(text)


def test_extract_models_letter_and_number_forms():
    models = extract_models("Samsung A52 and iPhone 13 Pro")
    assert "A52" in models
    assert "13" in models


def test_extract_models_plain_text():
    assert extract_models("blue water bottle") == set()


def test_extract_attributes_bundle():
    attrs = extract_attributes("White Apple iPhone 12")
    assert "white" in attrs.colors
    assert {"apple", "iphone"} <= attrs.brands
    assert "12" in attrs.models


def test_implies_phone_and_laptop():
    assert implies_phone("my Redmi went missing")
    assert implies_laptop("ThinkPad in a grey sleeve")
    assert not implies_phone("blue water bottle")


class TestAttributeScore:

    def test_no_shared_attributes(self):
        assert attribute_score("blue water bottle", "steel keyring") == 0

    def test_shared_color_only(self):
        assert attribute_score("blue water bottle", "blue scarf") == 2

    def test_shared_model_only(self):
        assert attribute_score("ticket S21", "bus S21 pass") == 1

    def test_capped_at_four(self):
        lost = attribute_text("Black Samsung A52", "black phone")
        found = attribute_text("Samsung A52", "black case")
        assert attribute_score(lost, found) == 4

    def test_attribute_text_handles_missing_description(self):
        assert attribute_text("Wallet", None) == "Wallet "
