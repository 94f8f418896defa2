"""
CV data structures for the Intake context.

Defines the immutable records produced by the CV parser and consumed by the
Syncing context. A CVDocument is built once per run and never mutated; the
entry sequences are tuples in document order, which is also replay order.
"""

from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Optional, Union

# Categories the sync driver can replay
REPLAY_CATEGORIES = ("experience", "education", "skills", "summary", "intro")


@dataclass(frozen=True)
class PersonalInfo:
    """
    Contact details found at the top of a CV.

    Every field holds at most one value; the first match wins.
    """

    name: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None

    def with_missing(self, **values: Optional[str]) -> "PersonalInfo":
        """
        Return a copy with the given fields filled in where still unset.

        Already-set fields are never overwritten; empty values are ignored.
        """
        updates = {
            name: value
            for name, value in values.items()
            if value and getattr(self, name) is None
        }
        return replace(self, **updates) if updates else self

    def name_parts(self) -> tuple[str, str]:
        """
        Split the name into (first name, last name).

        The first word is the first name, everything after it the last name:
        "Anna Maria Schmidt" → ("Anna", "Maria Schmidt").
        """
        words = (self.name or "").split()
        if not words:
            return "", ""
        return words[0], " ".join(words[1:])

    def label(self) -> str:
        return self.name or "Intro"


@dataclass(frozen=True)
class ExperienceEntry:
    """
    One position from the experience section.

    Attributes:
        title: Role or job title
        company: Employer or client
        location: "City, Country" style location
        duration: Raw duration text, e.g. "09/2024 – today"
        description: One bullet per element, in source order
    """

    title: str = ""
    company: str = ""
    location: str = ""
    duration: str = ""
    description: tuple[str, ...] = ()

    def is_retained(self) -> bool:
        """Entries without title, company and description are dropped."""
        return bool(self.title or self.company or self.description)

    def label(self) -> str:
        return f"{self.title or 'Position'} at {self.company or 'Company'}"


@dataclass(frozen=True)
class EducationEntry:
    """One degree or program from the education section."""

    degree: str = ""
    institution: str = ""
    duration: str = ""
    location: str = ""

    def is_retained(self) -> bool:
        return bool(self.degree or self.duration)

    def label(self) -> str:
        return f"{self.degree or 'Degree'} at {self.institution or 'Institution'}"


@dataclass(frozen=True)
class CVDocument:
    """
    Parsed CV.

    Factory methods:
        from_text(text) - Parse raw markdown text
        from_file(path) - Read and parse a CV file
    """

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    summary: str = ""
    experience: tuple[ExperienceEntry, ...] = ()
    education: tuple[EducationEntry, ...] = ()
    skills: tuple[str, ...] = ()
    certifications: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_text(cls, text: str, options=None) -> "CVDocument":
        """Parse CV text. Malformed content yields a sparser document, never an error."""
        from cvrelay.contexts.intake.cv_parser import parse

        return parse(text, options)

    @classmethod
    def from_file(cls, path: Union[str, Path], options=None) -> "CVDocument":
        """
        Read and parse a CV file.

        Raises:
            DocumentReadError: If the file cannot be read
        """
        from cvrelay.contexts.intake.cv_parser import parse_file

        return parse_file(path, options)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def entries_for(self, category: str) -> tuple:
        """
        Return the ordered entries replayed for a category.

        "summary" and "intro" are single-entry categories: the summary text
        and the personal info, each present only when there is something to
        replay (a summary, a name).

        Args:
            category: One of REPLAY_CATEGORIES

        Raises:
            ValueError: For unknown categories
        """
        if category not in REPLAY_CATEGORIES:
            raise ValueError(
                f"Unknown category '{category}'. Expected one of: {', '.join(REPLAY_CATEGORIES)}"
            )
        if category == "summary":
            return (self.summary,) if self.summary else ()
        if category == "intro":
            return (self.personal_info,) if self.personal_info.name else ()
        return getattr(self, category)

    def to_dict(self) -> dict:
        """Plain dict form (tuples become lists) for YAML/JSON dumps."""
        data = asdict(self)
        for entry in data["experience"]:
            entry["description"] = list(entry["description"])
        for key in ("experience", "education", "skills", "certifications", "languages"):
            data[key] = list(data[key])
        return data
