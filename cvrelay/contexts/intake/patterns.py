"""
Reusable patterns and constants for CV parsing.

This module provides the regex patterns, keyword tables and section synonyms
used by the field extractors and the document parser.

Pattern classes follow one convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions (in extractors.py) that use these patterns
"""

import re
from dataclasses import dataclass
from enum import Enum

# =============================================================================
# SECTIONS
# =============================================================================


class Section(str, Enum):
    """Sections a CV line can belong to."""

    NONE = "none"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    SUMMARY = "summary"
    CERTIFICATIONS = "certifications"
    LANGUAGES = "languages"
    PERSONAL = "personal"


# Checked in order; the first section with a matching synonym wins.
# Synonyms match at word starts of the normalized (upper-cased) heading text.
SECTION_SYNONYMS = (
    (Section.EXPERIENCE, ("EXPERIENCE", "WORK", "EMPLOYMENT", "CAREER", "RECENT PROJECTS", "PROJECTS")),
    (Section.EDUCATION, ("EDUCATION", "ACADEMIC", "STUDIES")),
    (Section.CERTIFICATIONS, ("CERTIFICATION", "CERTIFICATE")),
    (Section.LANGUAGES, ("LANGUAGE",)),
    (Section.SKILLS, ("SKILL", "TECH", "COMPETENC")),
    (Section.SUMMARY, ("SUMMARY", "ABOUT", "PROFILE")),
    (Section.PERSONAL, ("CONTACT", "PERSONAL")),
)

# Sections whose content is a sequence of structured entries
ENTRY_SECTIONS = (Section.EXPERIENCE, Section.EDUCATION)

# =============================================================================
# GEOGRAPHIC CONSTANTS
# =============================================================================

US_STATES = (
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado",
    "Connecticut", "Delaware", "Florida", "Georgia", "Hawaii", "Idaho",
    "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky", "Louisiana", "Maine",
    "Maryland", "Massachusetts", "Michigan", "Minnesota", "Mississippi",
    "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire", "New Jersey",
    "New Mexico", "New York", "North Carolina", "North Dakota", "Ohio",
    "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island", "South Carolina",
    "South Dakota", "Tennessee", "Texas", "Utah", "Vermont", "Virginia",
    "Washington", "West Virginia", "Wisconsin", "Wyoming",
)

COUNTRIES = (
    "Australia", "Austria", "Belgium", "Brazil", "Canada", "China", "Czechia",
    "Denmark", "Deutschland", "England", "Finland", "France", "Germany",
    "Greece", "Hungary", "India", "Ireland", "Israel", "Italy", "Japan",
    "Luxembourg", "Mexico", "Netherlands", "New Zealand", "Norway", "Poland",
    "Portugal", "Remote", "Romania", "Scotland", "Singapore", "Spain",
    "Sweden", "Switzerland", "Turkey", "UK", "USA", "Ukraine",
    "United Kingdom", "United States",
)

# Place names accepted as the trailing part of "City, <place>"
KNOWN_REGIONS = frozenset(US_STATES + COUNTRIES)

# =============================================================================
# DATE PATTERNS
# =============================================================================

MONTH_NUMBERS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

OPEN_END_TOKENS = ("present", "current", "today", "now", "ongoing", "heute")

_MONTH_NAME = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
# A month name standing alone must be capitalized ("may" is a common word)
_BARE_MONTH = r"(?-i:(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?)"
_DATE_TOKEN = rf"(?:{_MONTH_NAME}\s+\d{{4}}|\d{{1,2}}/\d{{4}}|\d{{4}}|{_BARE_MONTH})"
_OPEN_END = r"(?:" + "|".join(OPEN_END_TOKENS) + r")"
_RANGE_SEPARATOR = r"\s*(?:-{1,2}|–|—|\bto\b|\bbis\b)\s*"


@dataclass(frozen=True)
class DatePatterns:
    """
    Regex patterns for date ranges in CV durations.

    Supports:
    - MM/YYYY – MM/YYYY | today
    - Mon YYYY - Mon YYYY | Present
    - YYYY – YYYY
    - Since 04/2010 – today (prefix words are ignored by search())
    """

    DATE_RANGE: re.Pattern = re.compile(
        rf"(?<![\w/])(?P<start>{_DATE_TOKEN}){_RANGE_SEPARATOR}"
        rf"(?P<end>{_DATE_TOKEN}|{_OPEN_END})(?![\w/])",
        re.IGNORECASE,
    )

    MONTH_YEAR: re.Pattern = re.compile(rf"^(?P<month>{_MONTH_NAME})\s+(?P<year>\d{{4}})$", re.IGNORECASE)
    NUMERIC_MONTH_YEAR: re.Pattern = re.compile(r"^(?P<month>\d{1,2})/(?P<year>\d{4})$")
    YEAR: re.Pattern = re.compile(r"^(?P<year>\d{4})$")

    # Education boundary: a line opening with a bare year range ("2015 – 2019")
    LEADING_YEAR_RANGE: re.Pattern = re.compile(r"^\**\d{4}\s*[-–—]\s*\d{4}")


# =============================================================================
# MARKDOWN PATTERNS
# =============================================================================


@dataclass(frozen=True)
class MarkdownPatterns:
    """
    Regex patterns for the markdown constructs found in CVs.

    Only the constructs the parser relies on are modeled: ATX headings,
    emphasis spans, bullets, links, rules, fences and front matter.
    """

    # "## Experience" -> hashes="##", text="Experience"
    HEADING: re.Pattern = re.compile(r"^(?P<hashes>#{1,6})\s+(?P<text>.+?)\s*#*\s*$")

    # **text** or __text__
    BOLD: re.Pattern = re.compile(r"(\*\*|__)(?P<text>.+?)\1")

    # *text* or _text_, not part of a bold marker or a snake_case word
    ITALIC: re.Pattern = re.compile(r"(?<![\w*])(\*|_)(?![\s*_])(?P<text>.+?)(?<![\s*_])\1(?![\w*])")

    BULLET: re.Pattern = re.compile(r"^[-*•·]\s+")

    LINK: re.Pattern = re.compile(r"\[(?P<text>[^\]]+)\]\((?P<url>[^)\s]+)\)")

    HORIZONTAL_RULE: re.Pattern = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})$")

    CODE_FENCE: re.Pattern = re.compile(r"^(?:```|~~~)")

    FRONT_MATTER_DELIMITER: str = "---"


# =============================================================================
# CONTACT PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ContactPatterns:
    """Regex patterns for personal/contact information."""

    EMAIL: re.Pattern = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")

    # Loose international grouping; digit count is checked separately
    PHONE: re.Pattern = re.compile(r"(?<![\w/])\+?\(?\d[\d\s().-]{5,}\d(?![\w/])")

    LINKEDIN: re.Pattern = re.compile(
        r"(?:https?://)?(?:[a-z]{2,3}\.)?linkedin\.com/in/[A-Za-z0-9_%-]+/?", re.IGNORECASE
    )

    URL: re.Pattern = re.compile(r"https?://[^\s)>\]]+", re.IGNORECASE)

    BARE_DOMAIN: re.Pattern = re.compile(
        r"(?<![@\w.])(?:www\.)?[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*"
        r"\.(?:com|net|org|io|dev|de|eu|me|co|info|app|ch|at|uk)(?:/[^\s)\]]*)?(?![\w@])",
        re.IGNORECASE,
    )


MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15

# =============================================================================
# ENTITY KEYWORDS
# =============================================================================

INSTITUTION_KEYWORDS = (
    "University",
    "College",
    "Institute",
    "School",
    "Academy",
    "Hochschule",
    "Universität",
)

# Separators between a person's name and a tagline in the title heading
NAME_TAGLINE_SEPARATORS = (" – ", " — ", " | ", " - ")

# "Senior Engineer at Acme" / "Senior Engineer @ Acme"
TITLE_AT_COMPANY: re.Pattern = re.compile(r"^(?P<title>.+?)\s+(?:at|@)\s+(?P<company>.+)$")

SKILL_SEPARATORS: re.Pattern = re.compile(r"[,;|]")

# Maximum length of a line still considered a standalone duration/location
MAX_DURATION_LINE_LENGTH = 60
MAX_LOCATION_LINE_LENGTH = 50

# Lines searched for the candidate's name
NAME_SEARCH_LINES = 10
