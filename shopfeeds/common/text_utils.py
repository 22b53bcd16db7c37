"""
Text Utilities

Helpers for turning Shopify text into feed-safe text: HTML stripping,
XML escaping, number formatting and cleanup of broken characters.
"""

import math
import re

from bs4 import BeautifulSoup

# Characters that must be escaped in XML text and attribute values
_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

REPLACEMENT_CHAR = "\ufffd"

# Code points XML 1.0 does not allow anywhere in a document
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

DESCRIPTION_LIMIT = 5000


def strip_html(html: str | None, limit: int | None = DESCRIPTION_LIMIT) -> str:
    """
    Convert an HTML description to a single line of plain text.

    Tags become spaces, entities are decoded and runs of whitespace
    collapse to one space.

    Args:
        html: HTML fragment (may be None or empty)
        limit: Maximum length of the result (None for no limit)

    Returns:
        Plain text

    Example:
        >>> strip_html("<p>Ασήμι&nbsp;925</p><p>Χειροποίητο</p>")
        'Ασήμι 925 Χειροποίητο'
    """
    if not html:
        return ""

    text = BeautifulSoup(html, "lxml").get_text(" ")
    text = re.sub(r"\s+", " ", text).strip()

    if limit is not None:
        text = text[:limit]
    return text


def escape_xml(text) -> str:
    """
    Escape the five XML-reserved characters.

    Control characters XML 1.0 forbids are dropped.

    Args:
        text: Value to escape (None becomes an empty string)

    Returns:
        Escaped string safe for element text and attribute values
    """
    if text is None:
        return ""
    text = strip_invalid_xml_chars(str(text))
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def strip_invalid_xml_chars(text: str) -> str:
    """Remove characters that may not appear in an XML 1.0 document (e.g. vertical tab)."""
    return _INVALID_XML_CHARS.sub("", text)


def cdata(text) -> str:
    """
    Wrap text in a CDATA section.

    A literal ``]]>`` inside the text is split across two sections so the
    document stays well-formed. Control characters XML 1.0 forbids are
    dropped, since CDATA cannot carry them either.
    """
    if text is None:
        text = ""
    text = strip_invalid_xml_chars(str(text)).replace("]]>", "]]]]><![CDATA[>")
    return f"<![CDATA[{text}]]>"


def format_amount(amount) -> str:
    """
    Format a money amount with two decimals.

    Unparseable values format as ``0.00``.

    Example:
        >>> format_amount("45")
        '45.00'
    """
    value = parse_amount(amount)
    return f"{value:.2f}" if value is not None else "0.00"


def format_number(amount) -> str:
    """
    Format a number without trailing zeros (``45.50`` -> ``45.5``, ``45.00`` -> ``45``).
    """
    value = parse_amount(amount)
    if value is None:
        return "0"
    return f"{value:.2f}".rstrip("0").rstrip(".")


def parse_amount(amount) -> float | None:
    """Parse a price string from the API; None when missing or invalid."""
    if amount is None or amount == "":
        return None
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def remove_replacement_chars(text: str) -> tuple[str, int]:
    """
    Drop U+FFFD replacement characters left by broken encodings upstream.

    Returns:
        Tuple of (cleaned text, number of characters removed)
    """
    count = text.count(REPLACEMENT_CHAR)
    if count:
        text = text.replace(REPLACEMENT_CHAR, "")
    return text, count


def truncate(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` characters."""
    return text[:limit] if text else ""
