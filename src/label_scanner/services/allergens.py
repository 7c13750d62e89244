"""Allergen and intolerance detection over warnings and ingredient text."""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from label_scanner.domain.comparison import AllergenReason, IntoleranceReason

_logger = logging.getLogger(__name__)

_MILK = (
    "milk",
    "cream",
    "butter",
    "ghee",
    "cheese",
    "yogurt",
    "yoghurt",
    "whey",
    "casein",
    "caseinate",
    "milkfat",
    "skim milk",
    "buttermilk",
    "lactalbumin",
    "dairy",
)
_GLUTEN = (
    "gluten",
    "wheat",
    "barley",
    "rye",
    "malt",
    "spelt",
    "semolina",
    "durum",
    "triticale",
    "farro",
    "seitan",
    "brewer's yeast",
)
_SOY = (
    "soy",
    "soya",
    "soybean",
    "soy lecithin",
    "soy sauce",
    "tofu",
    "edamame",
    "miso",
    "tempeh",
)

ALLERGEN_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "milk": _MILK,
        "egg": (
            "egg",
            "egg white",
            "egg yolk",
            "albumen",
            "albumin",
            "ovalbumin",
            "meringue",
            "mayonnaise",
        ),
        "soy": _SOY,
        "wheat": (
            "wheat",
            "wheat flour",
            "whole wheat",
            "semolina",
            "durum",
            "spelt",
            "farina",
            "bulgur",
            "couscous",
        ),
        "gluten": _GLUTEN,
        "peanut": (
            "peanut",
            "peanut butter",
            "peanut oil",
            "groundnut",
            "arachis",
        ),
        "tree_nut": (
            "tree nut",
            "almond",
            "walnut",
            "pecan",
            "cashew",
            "hazelnut",
            "filbert",
            "pistachio",
            "macadamia",
            "brazil nut",
            "pine nut",
            "praline",
        ),
        "sesame": ("sesame", "sesame seed", "sesame oil", "tahini", "sesamum"),
        "fish": (
            "fish",
            "anchovy",
            "salmon",
            "tuna",
            "cod",
            "sardine",
            "tilapia",
            "pollock",
            "haddock",
            "fish sauce",
        ),
        "shellfish": (
            "shellfish",
            "shrimp",
            "prawn",
            "crab",
            "lobster",
            "crayfish",
            "krill",
            "scallop",
            "clam",
            "oyster",
            "mussel",
        ),
    }
)

INTOLERANCE_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "lactose": ("lactose", *_MILK),
        "gluten": _GLUTEN,
        "histamine": (
            "histamine",
            "vinegar",
            "wine",
            "sauerkraut",
            "kimchi",
            "fermented",
            "aged cheese",
            "cured",
            "smoked",
            "salami",
            "pepperoni",
            "soy sauce",
            "anchovy",
            "tomato",
            "spinach",
        ),
        "salicylate": (
            "salicylate",
            "mint",
            "peppermint",
            "cinnamon",
            "curry",
            "paprika",
            "cumin",
            "honey",
            "almond",
            "tomato paste",
            "raisin",
        ),
        "soy": _SOY,
        "corn": (
            "corn",
            "maize",
            "cornstarch",
            "corn starch",
            "corn syrup",
            "high fructose corn syrup",
            "cornmeal",
            "dextrose",
            "maltodextrin",
            "polenta",
            "hominy",
        ),
        "caffeine": (
            "caffeine",
            "coffee",
            "espresso",
            "tea",
            "matcha",
            "guarana",
            "yerba mate",
            "cola",
            "cocoa",
            "chocolate",
        ),
        "sulfite": (
            "sulfite",
            "sulphite",
            "sulfur dioxide",
            "sulphur dioxide",
            "sodium bisulfite",
            "sodium metabisulfite",
            "potassium metabisulfite",
            "sodium sulfite",
        ),
    }
)

_NON_DAIRY = (
    "cocoa butter",
    "shea butter",
    "peanut butter",
    "almond butter",
    "nut butter",
    "apple butter",
    "coconut milk",
    "coconut cream",
    "almond milk",
    "oat milk",
    "soy milk",
    "rice milk",
    "cream of tartar",
)

# Phrases that mention an alias without implying the allergen.
ALIAS_EXCLUSIONS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "milk": _NON_DAIRY,
        "lactose": _NON_DAIRY,
        "wheat": ("buckwheat",),
    }
)

DISPLAY_TO_CANONICAL: Mapping[str, str] = MappingProxyType(
    {
        "nuts": "tree_nut",
        "tree nuts": "tree_nut",
        "tree nut": "tree_nut",
        "peanuts": "peanut",
        "eggs": "egg",
        "sulfites": "sulfite",
        "sulphites": "sulfite",
        "salicylates": "salicylate",
        "soya": "soy",
        "dairy": "milk",
    }
)

_STRIP_PUNCTUATION = re.compile(r"[^\w\s'&/\-,]")
_TOKEN_SPLIT = re.compile(r"[\s,/;]+")
# Shorter aliases ("egg", "nut", "cod") only match whole tokens.
_MIN_SUBSTRING_ALIAS = 4


def canonical_key(term: str) -> str:
    """Map a UI-facing restriction name to its internal key."""
    cleaned = " ".join(term.lower().split())
    if cleaned in DISPLAY_TO_CANONICAL:
        return DISPLAY_TO_CANONICAL[cleaned]
    return cleaned.replace(" ", "_")


def canonical_keys(terms: Iterable[str]) -> list[str]:
    """Canonicalize terms, dropping blanks and duplicates but keeping order."""
    keys: list[str] = []
    for term in terms:
        key = canonical_key(term)
        if key and key not in keys:
            keys.append(key)
    return keys


def tokenize(text: str) -> list[str]:
    """Split ingredient text into lowercase tokens."""
    cleaned = _STRIP_PUNCTUATION.sub(" ", text.lower())
    return [token for token in _TOKEN_SPLIT.split(cleaned) if token]


def find_alias(
    text: str, aliases: Sequence[str], exclusions: Sequence[str] = ()
) -> str | None:
    """Return the first alias present in ``text``, or None.

    Whole-token hits win: single-word aliases must equal a token (plural
    forms are tolerated) and multi-word aliases must appear as a run of
    whole tokens. Failing that, aliases of at least four letters also hit
    as a substring of one word, which catches OCR-merged words such as
    "skimmilk".
    """
    tokens = tokenize(text)
    if not tokens:
        return None
    joined = f" {' '.join(tokens)} "
    for phrase in exclusions:
        joined = joined.replace(f" {' '.join(tokenize(phrase))} ", " ")
    words = set(joined.split())
    words.update(_singular(word) for word in list(words))
    for alias in aliases:
        alias_tokens = tokenize(alias)
        if not alias_tokens:
            continue
        if len(alias_tokens) == 1:
            if alias_tokens[0] in words:
                return alias
        elif f" {' '.join(alias_tokens)} " in joined or _plural_phrase_in(
            alias_tokens, joined
        ):
            return alias
    for alias in aliases:
        alias_tokens = tokenize(alias)
        compact = "".join(alias_tokens)
        if len(compact) < _MIN_SUBSTRING_ALIAS:
            continue
        if f" {' '.join(alias_tokens)}" in joined or any(
            compact in word for word in words
        ):
            return alias
    return None


def resolve_allergens(
    keys: Iterable[str],
    *,
    ingredients: str,
    warnings: Sequence[str],
    aliases: Mapping[str, tuple[str, ...]] = ALLERGEN_ALIASES,
    fallback_aliases: Mapping[str, tuple[str, ...]] = INTOLERANCE_ALIASES,
) -> list[AllergenReason]:
    """Detect allergens, preferring declared warnings over ingredient aliases.

    Keys without an allergen table (e.g. "lactose") borrow the intolerance
    table before falling back to their own name.
    """
    reasons: list[AllergenReason] = []
    for key in keys:
        declared = _find_declared(key, warnings)
        if declared is not None:
            reasons.append(
                AllergenReason(term=key, matched_by="warning", snippet=declared)
            )
            continue
        key_aliases = aliases.get(key) or fallback_aliases.get(key)
        alias = find_alias(
            ingredients,
            key_aliases or (_phrase(key),),
            ALIAS_EXCLUSIONS.get(key, ()),
        )
        if alias is not None:
            reasons.append(AllergenReason(term=key, matched_by="alias", snippet=alias))
        elif key_aliases is None:
            _logger.debug("No alias table for allergen key=%s", key)
    return reasons


def resolve_intolerances(
    keys: Iterable[str],
    *,
    ingredients: str,
    aliases: Mapping[str, tuple[str, ...]] = INTOLERANCE_ALIASES,
) -> list[IntoleranceReason]:
    """Detect intolerance triggers from ingredient text only."""
    reasons: list[IntoleranceReason] = []
    for key in keys:
        alias = find_alias(
            ingredients,
            aliases.get(key, (_phrase(key),)),
            ALIAS_EXCLUSIONS.get(key, ()),
        )
        if alias is not None:
            reasons.append(IntoleranceReason(term=key, snippet=alias))
    return reasons


def _find_declared(key: str, warnings: Sequence[str]) -> str | None:
    """Return the warning entry that names ``key``, if any."""
    pattern = re.compile(rf"\b{re.escape(_phrase(key))}(?:e?s)?\b", re.IGNORECASE)
    for entry in warnings:
        if pattern.search(" ".join(entry.split())):
            return entry
    return None


def _phrase(key: str) -> str:
    return key.replace("_", " ")


def _singular(word: str) -> str:
    if len(word) > 4 and word.endswith("ies"):
        return f"{word[:-3]}y"
    if len(word) > 3 and word.endswith(("ches", "shes", "oes")):
        return word[:-2]
    if len(word) > 3 and word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def _plural_phrase_in(alias_tokens: list[str], joined: str) -> bool:
    """Check a multi-word alias whose last word is pluralized in the text."""
    head = " ".join(alias_tokens[:-1])
    last = alias_tokens[-1]
    return any(f" {head} {last}{suffix} " in joined for suffix in ("s", "es"))
