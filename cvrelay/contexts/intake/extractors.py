"""
Field extractors for CV lines.

Pure, stateless functions that classify or pick apart a single line of text.
The document parser combines them with its section state; nothing here knows
which section a line belongs to.
"""

import re
from enum import Enum
from typing import Optional

from cvrelay.contexts.intake.normalizer import normalize_heading_text, strip_markup
from cvrelay.contexts.intake.patterns import (
    INSTITUTION_KEYWORDS,
    KNOWN_REGIONS,
    MAX_DURATION_LINE_LENGTH,
    MAX_LOCATION_LINE_LENGTH,
    MAX_PHONE_DIGITS,
    MIN_PHONE_DIGITS,
    NAME_TAGLINE_SEPARATORS,
    SECTION_SYNONYMS,
    SKILL_SEPARATORS,
    ContactPatterns,
    DatePatterns,
    MarkdownPatterns,
    Section,
)


class LineKind(str, Enum):
    """Semantic category of a single line."""

    BLANK = "blank"
    HEADING = "heading"
    DURATION = "duration"
    LOCATION = "location"
    INSTITUTION = "institution"
    BULLET = "bullet"
    TEXT = "text"


# =============================================================================
# HEADINGS AND SECTIONS
# =============================================================================


def parse_heading(line: str) -> Optional[tuple[int, str]]:
    """
    Split an ATX heading into level and text.

    Args:
        line: Stripped line

    Returns:
        (level, text) for "## Experience" → (2, "Experience"), else None
    """
    match = MarkdownPatterns.HEADING.match(line)
    if not match:
        return None
    return len(match.group("hashes")), match.group("text").strip()


def classify_section(heading_text: str) -> Optional[Section]:
    """
    Map heading text to the section it opens.

    Synonyms match at word starts of the normalized heading, so "Work
    Experience", "💼 EXPERIENCE" and "Skills & Tools" are recognized while
    "Network Engineer" is not.

    Args:
        heading_text: Heading text with or without hashes/decoration

    Returns:
        Section, or None if the heading names no known section
    """
    normalized = normalize_heading_text(heading_text)
    if not normalized:
        return None

    for section, synonyms in SECTION_SYNONYMS:
        for synonym in synonyms:
            if re.search(rf"(?<![A-Z0-9]){re.escape(synonym)}", normalized):
                return section
    return None


# =============================================================================
# BULLETS AND EMPHASIS
# =============================================================================


def is_bullet(line: str) -> bool:
    return bool(MarkdownPatterns.BULLET.match(line))


def strip_bullet(line: str) -> str:
    """Remove one leading "-", "*" or "•" bullet marker."""
    return MarkdownPatterns.BULLET.sub("", line, count=1).strip()


def bold_span(line: str) -> Optional[tuple[str, str]]:
    """
    Find the first bold span.

    Returns:
        (span text, rest of the line with the span removed), or None
    """
    match = MarkdownPatterns.BOLD.search(line)
    if not match:
        return None
    rest = (line[: match.start()] + " " + line[match.end() :]).strip()
    return match.group("text").strip(), _clean_remainder(rest)


def italic_span(line: str) -> Optional[tuple[str, str]]:
    """
    Find the first italic span (bold spans are not italic).

    Returns:
        (span text, rest of the line with the span removed), or None
    """
    match = MarkdownPatterns.ITALIC.search(line)
    if not match:
        return None
    rest = (line[: match.start()] + " " + line[match.end() :]).strip()
    return match.group("text").strip(), _clean_remainder(rest)


def wrapped_emphasis(line: str) -> Optional[str]:
    """
    Return the inner text when the whole line is exactly one emphasized span.

    "- **09/2024 – today**" → "09/2024 – today" (a leading bullet is allowed);
    "**Acme** Hamburg" → None.
    """
    text = strip_bullet(line) if is_bullet(line) else line.strip()
    for pattern in (MarkdownPatterns.BOLD, MarkdownPatterns.ITALIC):
        match = pattern.fullmatch(text)
        if match and "**" not in match.group("text") and "__" not in match.group("text"):
            return match.group("text").strip()
    return None


def is_emphasized_boundary(line: str) -> bool:
    """A line wrapping one emphasized span that carries a date range starts an entry."""
    inner = wrapped_emphasis(line)
    return bool(inner and find_date_range(inner))


def _clean_remainder(text: str) -> str:
    """Strip separators left behind once a span has been cut out of a line."""
    text = strip_markup(text)
    return text.strip(" \t-–—|,·:").strip()


# =============================================================================
# DURATIONS, LOCATIONS, INSTITUTIONS
# =============================================================================


def find_date_range(text: str) -> Optional[re.Match]:
    return DatePatterns.DATE_RANGE.search(text)


def is_duration(text: str) -> bool:
    """
    Two date-like tokens joined by a dash/en-dash/"to" on a short line.

    Long lines are prose that merely mentions dates.
    """
    text = strip_markup(text)
    return len(text) <= MAX_DURATION_LINE_LENGTH and find_date_range(text) is not None


def is_location(text: str) -> bool:
    """
    "City, ST" or "City, Country" on a short line.

    The trailing part must be a two-letter code or a known state/country so
    that comma-separated prose ("Python, Django") is not taken as a place.
    """
    text = strip_markup(text)
    if not text or len(text) >= MAX_LOCATION_LINE_LENGTH or "," not in text:
        return False
    if any(ch.isdigit() for ch in text):
        return False

    parts = [part.strip() for part in text.split(",")]
    city, tail = parts[0], parts[-1]
    if not city or not city[0].isupper() or not tail:
        return False
    if not all(word[:1].isupper() for word in city.split()):
        return False

    return bool(re.fullmatch(r"[A-Z]{2}", tail)) or tail in KNOWN_REGIONS


def is_institution(text: str) -> bool:
    return any(keyword in text for keyword in INSTITUTION_KEYWORDS)


def classify_line(line: str) -> LineKind:
    """
    Classify a single stripped line.

    Priority: heading, duration, location, institution, bullet, text.
    """
    if not line:
        return LineKind.BLANK
    if parse_heading(line):
        return LineKind.HEADING
    if is_duration(line):
        return LineKind.DURATION
    if is_location(line):
        return LineKind.LOCATION
    if is_institution(line):
        return LineKind.INSTITUTION
    if is_bullet(line):
        return LineKind.BULLET
    return LineKind.TEXT


# =============================================================================
# PERSONAL INFORMATION
# =============================================================================


def extract_email(line: str) -> Optional[str]:
    match = ContactPatterns.EMAIL.search(line)
    return match.group(0) if match else None


def extract_phone(line: str) -> Optional[str]:
    """
    Loose international phone number with 7-15 digits.

    Date ranges ("2019-2021") are rejected even though they look like digit groups.
    """
    line = ContactPatterns.EMAIL.sub(" ", line)
    line = ContactPatterns.URL.sub(" ", line)
    for match in ContactPatterns.PHONE.finditer(line):
        candidate = match.group(0).strip()
        digits = sum(ch.isdigit() for ch in candidate)
        if not MIN_PHONE_DIGITS <= digits <= MAX_PHONE_DIGITS:
            continue
        if find_date_range(candidate):
            continue
        return candidate
    return None


def extract_links(line: str) -> tuple[Optional[str], Optional[str]]:
    """
    Find a LinkedIn profile and a personal website on a line.

    Markdown links are checked first, then bare URLs and domains.

    Returns:
        (linkedin_url, website_url); either may be None
    """
    linkedin = None
    website = None

    candidates = [m.group("url") for m in MarkdownPatterns.LINK.finditer(line)]
    plain = MarkdownPatterns.LINK.sub(" ", line)
    plain = ContactPatterns.EMAIL.sub(" ", plain)
    candidates += [m.group(0) for m in ContactPatterns.URL.finditer(plain)]
    plain = ContactPatterns.URL.sub(" ", plain)
    candidates += [m.group(0) for m in ContactPatterns.BARE_DOMAIN.finditer(plain)]

    for url in candidates:
        if url.lower().startswith("mailto:"):
            continue
        if ContactPatterns.LINKEDIN.search(url):
            linkedin = linkedin or _with_scheme(ContactPatterns.LINKEDIN.search(url).group(0))
        else:
            website = website or _with_scheme(url)

    return linkedin, website


def _with_scheme(url: str) -> str:
    url = url.rstrip(".,;")
    if url.lower().startswith(("http://", "https://")):
        return url
    return f"https://{url}"


def extract_name(line: str) -> Optional[str]:
    """
    Name candidate from a heading-like line near the top of the CV.

    "# Steven Schulz – Senior Developer" → "Steven Schulz". Lines that name a
    section, contain contact details or start with a digit are rejected.
    """
    heading = parse_heading(line)
    if heading:
        text = heading[1]
    elif wrapped_emphasis(line):
        text = wrapped_emphasis(line)
    else:
        return None

    if "@" in text or text[:1].isdigit():
        return None

    text = strip_markup(text)
    for separator in NAME_TAGLINE_SEPARATORS:
        if separator in text:
            text = text.split(separator)[0]
            break
    text = text.strip()

    if classify_section(text) is not None:
        return None

    if not 2 < len(text) < 100:
        return None
    return text


# =============================================================================
# LIST SECTIONS
# =============================================================================


def split_skills(line: str) -> list[str]:
    """
    Split a skills line into individual skills.

    "- **Backend:** Python, Go | Rust" → ["Python", "Go", "Rust"]
    A line without separators is a single skill.
    """
    text = strip_markup(strip_bullet(line))
    if not text:
        return []

    if SKILL_SEPARATORS.search(text):
        # "Category: a, b" - drop the category label
        head, colon, tail = text.partition(":")
        if colon and tail.strip():
            text = tail
        return [part.strip() for part in SKILL_SEPARATORS.split(text) if part.strip()]

    return [text]


def list_item(line: str) -> str:
    """A certification/language line without bullet or markup."""
    return strip_markup(strip_bullet(line))
