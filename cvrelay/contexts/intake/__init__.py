"""
Intake Context

Responsibilities:
- Reads CV documents (markdown-ish text) from disk
- Classifies lines heuristically and recovers personal info, summary,
  experience, education, skills, certifications and languages
- Parses entry durations into start/end dates

Owns: CV parsing logic and the immutable CV entity model
Never: Talks to a remote surface or decides what gets synchronized
"""

from cvrelay.contexts.intake.cv_data_structure import (
    CVDocument,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
)
from cvrelay.contexts.intake.cv_parser import ParserOptions, parse, parse_file
from cvrelay.contexts.intake.dates import DateRange, ParsedDate, parse_date_range
from cvrelay.contexts.intake.exceptions import DocumentReadError

__all__ = [
    # Parsing entry points
    "parse",
    "parse_file",
    "ParserOptions",
    "DocumentReadError",
    # Data structure classes
    "CVDocument",
    "PersonalInfo",
    "ExperienceEntry",
    "EducationEntry",
    # Dates
    "DateRange",
    "ParsedDate",
    "parse_date_range",
]
