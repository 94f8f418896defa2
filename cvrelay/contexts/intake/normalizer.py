"""
CV text normalizer for the Intake context.

Cleans raw lines before classification and reduces headings to a comparable
form for section detection.

Design principle: normalize BEFORE classifying. Dashes are deliberately left
alone because durations are kept in their raw form ("09/2024 – today").
"""

import re
import unicodedata

from cvrelay.contexts.intake.patterns import MarkdownPatterns

# Unicode replacements: problematic char → ASCII equivalent
UNICODE_REPLACEMENTS = {
    # Spaces
    "\u00a0": " ",  # non-breaking space
    "\u202f": " ",  # narrow no-break space
    "\u2009": " ",  # thin space
    # Zero-width characters → remove
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u200d": "",  # zero-width joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM
    "\ufe0f": "",  # emoji variation selector
}


def normalize_unicode(text: str) -> str:
    """
    Replace invisible and exotic whitespace characters.

    Applies NFC normalization (not NFKC, which would rewrite ligatures and
    superscripts inside names) followed by explicit replacements.

    Args:
        text: Raw text possibly containing problematic unicode

    Returns:
        Text with normalized unicode
    """
    text = unicodedata.normalize("NFC", text)

    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)

    return text


def strip_markup(text: str) -> str:
    """
    Remove inline markdown decoration, keeping the visible text.

    Handles links ([text](url) → text), bold/italic markers and inline code.

    Args:
        text: A single line of markdown

    Returns:
        Plain text with collapsed whitespace
    """
    text = MarkdownPatterns.LINK.sub(lambda m: m.group("text"), text)
    text = MarkdownPatterns.BOLD.sub(lambda m: m.group("text"), text)
    text = MarkdownPatterns.ITALIC.sub(lambda m: m.group("text"), text)
    text = text.replace("`", "")
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def normalize_heading_text(text: str) -> str:
    """
    Reduce heading text to an upper-cased, decoration-free form.

    "## 💼 Work *Experience*:" → "WORK EXPERIENCE"

    Args:
        text: Heading line (with or without leading hashes)

    Returns:
        Normalized heading text used for synonym matching
    """
    text = re.sub(r"^#+\s*", "", text.strip())
    text = strip_markup(text)
    # Keep letters, digits and spaces only (drops emoji, colons, ampersands)
    text = "".join(ch if (ch.isalnum() or ch.isspace()) else " " for ch in text)
    text = re.sub(r"\s+", " ", text)
    return text.strip().upper()
