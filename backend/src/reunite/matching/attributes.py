"""Keyword tables and attribute extraction for item text.

Colours, brands and model numbers are pulled out of `item_name + description`
with plain substring / regex scans. Model extraction is a heuristic and stays
behind `extract_models()` so it can be replaced without touching the scorer.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Set

SYNONYMS: Dict[str, List[str]] = {
    "phone": ["mobile", "smartphone", "device", "cellphone", "cell"],
    "laptop": ["notebook", "computer", "pc"],
    "bag": ["backpack", "satchel", "purse", "pouch"],
    "wallet": ["purse", "billfold"],
    "keys": ["keychain", "key"],
    "watch": ["timepiece", "wristwatch"],
    "glasses": ["spectacles", "eyeglasses", "specs"],
    "bottle": ["flask", "container"],
    "umbrella": ["parasol"],
    "charger": ["adapter", "cable"],
    "earphones": ["headphones", "earbuds", "airpods"],
    "book": ["notebook", "textbook", "novel"],
}

PHONE_BRANDS: List[str] = [
    "samsung", "apple", "iphone", "oppo", "vivo", "xiaomi", "redmi",
    "oneplus", "realme", "nokia", "motorola", "huawei", "honor", "asus",
    "lenovo", "lg", "sony", "google", "pixel",
]

LAPTOP_BRANDS: List[str] = [
    "dell", "hp", "lenovo", "asus", "acer", "apple", "macbook",
    "msi", "razer", "alienware", "surface", "microsoft", "samsung",
    "lg", "huawei", "thinkpad",
]

COLORS: List[str] = [
    "black", "white", "red", "blue", "green", "yellow", "orange",
    "purple", "pink", "brown", "gray", "grey", "silver", "gold",
    "rose", "navy", "maroon", "beige", "cream", "dark", "light",
]

PHONE_TERMS = ["phone", "mobile", "smartphone", "device", "cellphone"]
LAPTOP_TERMS = ["laptop", "notebook", "computer", "pc", "macbook"]

# "A52", "S21"
_LETTER_MODEL_RE = re.compile(r"\b[A-Z]\d{1,3}\b")
# "12", "13 Pro", "14plus"
_NUMBER_MODEL_RE = re.compile(r"\b\d{1,2}(?:s|pro|plus|max)?\b", re.IGNORECASE)

_NON_WORD_RE = re.compile(r"[^\w\s]", re.ASCII)
_SPACES_RE = re.compile(r"\s+")

MAX_ATTRIBUTE_SCORE = 4


@dataclass
class ItemAttributes:
    """Attributes found in one item's text."""
    colors: Set[str] = field(default_factory=set)
    brands: Set[str] = field(default_factory=set)
    models: Set[str] = field(default_factory=set)


def sanitize_text(text: str) -> str:
    """Lowercase, turn punctuation into spaces and collapse whitespace."""
    text = _NON_WORD_RE.sub(" ", (text or "").lower())
    return _SPACES_RE.sub(" ", text).strip()


def expand_with_synonyms(text: str) -> str:
    """Append synonyms for every synonym-table term found in the text.

    The scan runs over the growing string, so a term appended by an earlier
    entry can pull in its own group later. Matching is by substring.

    Example:
        "lost phone" -> "lost phone mobile smartphone device cellphone cell phone ..."
    """
    expanded = (text or "").lower()

    for word, synonyms in SYNONYMS.items():
        if word in expanded:
            expanded += " " + " ".join(synonyms)
        for synonym in synonyms:
            if synonym in expanded:
                others = [s for s in synonyms if s != synonym]
                expanded += " " + word + " " + " ".join(others)

    return expanded


def extract_brands(text: str) -> Set[str]:
    lower_text = (text or "").lower()
    brands = {brand for brand in PHONE_BRANDS if brand in lower_text}
    brands.update(brand for brand in LAPTOP_BRANDS if brand in lower_text)
    return brands


def extract_colors(text: str) -> Set[str]:
    lower_text = (text or "").lower()
    return {color for color in COLORS if color in lower_text}


def extract_models(text: str) -> Set[str]:
    """Extract model-number-like tokens (case preserved)."""
    text = text or ""
    models = set(_LETTER_MODEL_RE.findall(text))
    models.update(m.group(0) for m in _NUMBER_MODEL_RE.finditer(text))
    return models


def extract_attributes(text: str) -> ItemAttributes:
    return ItemAttributes(
        colors=extract_colors(text),
        brands=extract_brands(text),
        models=extract_models(text),
    )


def implies_phone(text: str) -> bool:
    lower_text = (text or "").lower()
    return any(brand in lower_text for brand in PHONE_BRANDS) or any(
        term in lower_text for term in PHONE_TERMS
    )


def implies_laptop(text: str) -> bool:
    lower_text = (text or "").lower()
    return any(brand in lower_text for brand in LAPTOP_BRANDS) or any(
        term in lower_text for term in LAPTOP_TERMS
    )


def attribute_text(item_name: str, description: str) -> str:
    """Text the attribute extractor runs on."""
    return f"{item_name or ''} {description or ''}"


def attribute_score(lost_text: str, found_text: str) -> int:
    """Score shared attributes between two item texts.

    +2 for any shared colour, +2 for any shared brand, +1 for any shared
    model token; capped at 4.

    Args:
        lost_text: Lost item's `item_name + " " + description`
        found_text: Found item's `item_name + " " + description`

    Returns:
        Attribute score (0-4)
    """
    lost_attrs = extract_attributes(lost_text)
    found_attrs = extract_attributes(found_text)

    score = 0
    if lost_attrs.colors & found_attrs.colors:
        score += 2
    if lost_attrs.brands & found_attrs.brands:
        score += 2
    if lost_attrs.models & found_attrs.models:
        score += 1

    return min(MAX_ATTRIBUTE_SCORE, score)
