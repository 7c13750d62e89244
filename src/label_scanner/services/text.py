"""OCR text normalization and numeric token coercion."""

import re

LESS_THAN_ONE_SENTINEL = "0.5"

# A lone O/o read where a zero was printed: "Og", "Omg", "O%", "1O%".
_LETTER_ZERO = re.compile(r"(?:\b|(?<=\d))[Oo](?=%|(?:mcg|mg|g|iu)\b)", re.IGNORECASE)
_TOTAL_CARB = re.compile(
    r"\bTotal[^\S\n]+Carb(?:ohydrates?|ohyd\.?|s\.?|\.)?(?![A-Za-z])",
    re.IGNORECASE,
)
_INLINE_SPACE = re.compile(r"[^\S\n]+")

_LESS_THAN_ONE = re.compile(r"<1(?:\.0+)?(?:mcg|mg|g|iu)?", re.IGNORECASE)
_UNIT_SUFFIX = re.compile(r"(?:mcg|mg|g|iu)$", re.IGNORECASE)
_DECIMAL = re.compile(r"\d+(?:\.\d+)?")


def normalize_text(raw: str) -> str:
    """Return OCR text in the canonical form used for label searches.

    Row structure is kept: newlines survive, every other whitespace run
    becomes a single space. Applying this to its own output is a no-op.
    """
    if not raw:
        return ""
    text = _LETTER_ZERO.sub("0", raw)
    text = _TOTAL_CARB.sub("Total Carbohydrate", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _INLINE_SPACE.sub(" ", text)
    return text.strip()


def coerce_value(token: str) -> str:
    """Convert a matched label token such as "0.5g" or "< 1 mg" to a decimal string."""
    if not token:
        return ""
    compact = "".join(token.split())
    if _LESS_THAN_ONE.fullmatch(compact):
        return LESS_THAN_ONE_SENTINEL
    compact = _UNIT_SUFFIX.sub("", compact)
    match = _DECIMAL.search(compact)
    if not match:
        return ""
    return match.group(0)
