"""
CV parsing for the Intake context.

Turns semi-structured markdown CV text into a CVDocument. There is no fixed
grammar: every line is classified on its own and routed by the current section.

The loop state is explicit. A frozen ParserState (current section, the entry
under construction, line counters) is threaded through step(); entries are
appended to the output only through finalize() and transition(). Malformed
content yields a sparser document, never an exception.

Pattern follows the job parser: parser produces data, CVDocument consumes it.
"""

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Union

from cvrelay.contexts.intake.cv_data_structure import (
    CVDocument,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
)
from cvrelay.contexts.intake.exceptions import DocumentReadError
from cvrelay.contexts.intake.extractors import (
    LineKind,
    bold_span,
    classify_line,
    classify_section,
    extract_email,
    extract_links,
    extract_name,
    extract_phone,
    find_date_range,
    is_bullet,
    is_duration,
    is_emphasized_boundary,
    is_institution,
    is_location,
    italic_span,
    list_item,
    parse_heading,
    split_skills,
    strip_bullet,
    wrapped_emphasis,
)
from cvrelay.contexts.intake.logger import _log_debug, _log_info, log_parse_summary
from cvrelay.contexts.intake.normalizer import normalize_unicode, strip_markup
from cvrelay.contexts.intake.patterns import (
    ENTRY_SECTIONS,
    NAME_SEARCH_LINES,
    NAME_TAGLINE_SEPARATORS,
    TITLE_AT_COMPANY,
    DatePatterns,
    MarkdownPatterns,
    Section,
)

EMPHASIS_ORDERS = ("company_first", "title_first")


@dataclass(frozen=True)
class ParserOptions:
    """
    Tunable parsing behaviour.

    Attributes:
        emphasis_order: Which slot the first emphasized span of an experience
            entry fills. "company_first" reads "**Acme** / **Engineer**" as
            company then title; "title_first" reads it the other way round.
    """

    emphasis_order: str = "company_first"

    def __post_init__(self):
        if self.emphasis_order not in EMPHASIS_ORDERS:
            raise ValueError(
                f"emphasis_order must be one of {EMPHASIS_ORDERS}, got '{self.emphasis_order}'"
            )

    @property
    def emphasis_slots(self) -> tuple[str, str]:
        if self.emphasis_order == "title_first":
            return ("title", "company")
        return ("company", "title")


@dataclass(frozen=True)
class ParserState:
    """
    Parser loop state.

    Attributes:
        section: Section the next line belongs to
        section_level: Heading level that opened the section (0 = none)
        experience: Experience entry under construction
        education: Education entry under construction
        line_number: 1-based number of the last line consumed
        in_front_matter: Inside a leading YAML front matter block
        in_code_fence: Inside a fenced code block
    """

    section: Section = Section.NONE
    section_level: int = 0
    experience: Optional[ExperienceEntry] = None
    education: Optional[EducationEntry] = None
    line_number: int = 0
    in_front_matter: bool = False
    in_code_fence: bool = False


@dataclass
class DocumentBuilder:
    """Mutable output collected while parsing; finalized entries are append-only."""

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    summary_parts: list[str] = field(default_factory=list)
    experience: list[ExperienceEntry] = field(default_factory=list)
    education: list[EducationEntry] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    certifications: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)

    def add_skill(self, skill: str) -> None:
        # Exact-equality dedup, first occurrence keeps its position
        if skill and skill not in self.skills:
            self.skills.append(skill)

    def build(self) -> CVDocument:
        return CVDocument(
            personal_info=self.personal_info,
            summary=" ".join(self.summary_parts).strip(),
            experience=tuple(self.experience),
            education=tuple(self.education),
            skills=tuple(self.skills),
            certifications=tuple(self.certifications),
            languages=tuple(self.languages),
        )


# =============================================================================
# PUBLIC API
# =============================================================================


def parse(text: str, options: Optional[ParserOptions] = None) -> CVDocument:
    """
    Parse CV text into a CVDocument.

    Args:
        text: Raw CV markdown
        options: Parsing options (defaults to company-first emphasis)

    Returns:
        CVDocument with entries in document order
    """
    options = options or ParserOptions()
    builder = DocumentBuilder()
    state = ParserState()

    for line in text.splitlines():
        state = step(state, line, builder, options)

    finalize(state, builder)
    return builder.build()


def parse_file(path: Union[str, Path], options: Optional[ParserOptions] = None) -> CVDocument:
    """
    Read a CV file and parse it.

    Args:
        path: Path to a markdown/text CV
        options: Parsing options

    Returns:
        Parsed CVDocument

    Raises:
        DocumentReadError: If the file is missing, unreadable or not UTF-8
    """
    path = Path(path)
    _log_info(f"Reading CV: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentReadError("Could not read CV file", path=path, original_error=e) from e

    document = parse(text, options)
    log_parse_summary(document)
    return document


# =============================================================================
# STATE TRANSITIONS
# =============================================================================


def finalize(state: ParserState, builder: DocumentBuilder) -> ParserState:
    """
    Append the entries under construction that satisfy their retention rule.

    Returns:
        State with both entry slots cleared
    """
    if state.experience is not None:
        if state.experience.is_retained():
            builder.experience.append(state.experience)
        else:
            _log_debug(f"Discarded empty experience entry before line {state.line_number}")

    if state.education is not None:
        if state.education.is_retained():
            builder.education.append(state.education)
        else:
            _log_debug(f"Discarded education entry without degree/duration before line {state.line_number}")

    return replace(state, experience=None, education=None)


def transition(
    state: ParserState, section: Section, level: int, builder: DocumentBuilder
) -> ParserState:
    """Close the current section and open another one."""
    state = finalize(state, builder)
    _log_debug(f"Line {state.line_number}: section {state.section.value} -> {section.value}")
    return replace(state, section=section, section_level=level)


def step(
    state: ParserState, raw_line: str, builder: DocumentBuilder, options: ParserOptions
) -> ParserState:
    """
    Consume one line.

    Args:
        state: State after the previous line
        raw_line: Next input line
        builder: Output collector
        options: Parsing options

    Returns:
        State after this line
    """
    line = normalize_unicode(raw_line).strip()
    state = replace(state, line_number=state.line_number + 1)

    # Front matter, code fences and rules carry no CV content
    if state.line_number == 1 and line == MarkdownPatterns.FRONT_MATTER_DELIMITER:
        return replace(state, in_front_matter=True)
    if state.in_front_matter:
        if line in (MarkdownPatterns.FRONT_MATTER_DELIMITER, "..."):
            return replace(state, in_front_matter=False)
        return state

    if MarkdownPatterns.CODE_FENCE.match(line):
        return replace(state, in_code_fence=not state.in_code_fence)
    if state.in_code_fence:
        return state

    if not line or MarkdownPatterns.HORIZONTAL_RULE.match(line):
        return state

    heading = parse_heading(line)
    if heading:
        return _step_heading(state, line, heading, builder)

    if state.section == Section.EXPERIENCE:
        return _step_experience(state, line, builder, options)
    if state.section == Section.EDUCATION:
        return _step_education(state, line, builder)

    if state.section == Section.SKILLS:
        for skill in split_skills(line):
            builder.add_skill(skill)
    elif state.section == Section.SUMMARY:
        text = strip_markup(strip_bullet(line))
        if text:
            builder.summary_parts.append(text)
    elif state.section == Section.CERTIFICATIONS:
        item = list_item(line)
        if item:
            builder.certifications.append(item)
    elif state.section == Section.LANGUAGES:
        item = list_item(line)
        if item:
            builder.languages.append(item)
    else:
        _collect_personal_info(state, line, builder)

    return state


# =============================================================================
# HEADINGS
# =============================================================================


def _step_heading(
    state: ParserState, line: str, heading: tuple[int, str], builder: DocumentBuilder
) -> ParserState:
    level, text = heading
    section = classify_section(text)

    if _is_name_heading(state, text, section, builder):
        builder.personal_info = builder.personal_info.with_missing(name=extract_name(line))
        return state

    in_entry_section = state.section in ENTRY_SECTIONS

    # Deeper headings inside experience/education are entry boundaries,
    # even when their text happens to contain a section synonym. A dated
    # heading is one at any level ("## Experience" then "## 2020 – Present").
    if in_entry_section and (level > state.section_level or find_date_range(text)):
        state = finalize(state, builder)
        if state.section == Section.EXPERIENCE:
            return replace(state, experience=_seed_experience(text))
        return replace(state, education=_seed_education(text))

    if section is not None:
        return transition(state, section, level, builder)

    # Unknown heading at or above the current section's level closes it
    if state.section != Section.NONE and level <= state.section_level:
        return transition(state, Section.NONE, 0, builder)

    return state


def _is_name_heading(
    state: ParserState, text: str, section: Optional[Section], builder: DocumentBuilder
) -> bool:
    """
    Top-of-document heading that names the candidate.

    "# Jane Doe – Technical Lead" would otherwise open the skills section
    through "TECH"; a tagline separator marks it as a name line.
    """
    if builder.personal_info.name is not None:
        return False
    if state.section not in (Section.NONE, Section.PERSONAL):
        return False
    if state.line_number > NAME_SEARCH_LINES:
        return False
    if section is not None and not any(sep in text for sep in NAME_TAGLINE_SEPARATORS):
        return False
    return extract_name(f"# {text}") is not None


# =============================================================================
# ENTRY SEEDING
# =============================================================================


def _split_seed_text(text: str) -> tuple[str, str]:
    """
    Split boundary text into (duration, remaining text).

    "Senior Dev at Acme (2019 – 2021)" → ("2019 – 2021", "Senior Dev at Acme")
    """
    text = strip_markup(text)
    match = find_date_range(text)
    if not match:
        return "", _clean_fragment(text)

    remainder = text[: match.start()] + " " + text[match.end() :]
    return match.group(0), _clean_fragment(remainder)


def _clean_fragment(text: str) -> str:
    text = re.sub(r"\(\s*\)|\[\s*\]", "", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip(" \t-–—|,·:").strip()


def _split_company_location(company: str) -> tuple[str, str]:
    """
    "Acme GmbH, Berlin, Germany" → ("Acme GmbH", "Berlin, Germany")

    Only split when the tail is location-shaped; "Smith, Jones & Co" stays whole.
    """
    head, comma, tail = company.partition(",")
    if comma and head.strip() and is_location(tail.strip()):
        return head.strip(), tail.strip()
    return company, ""


def _seed_experience(text: str) -> ExperienceEntry:
    duration, remainder = _split_seed_text(text)
    entry = ExperienceEntry(duration=duration)
    if not remainder:
        return entry

    match = TITLE_AT_COMPANY.match(remainder)
    if match:
        company, location = _split_company_location(match.group("company").strip())
        return replace(
            entry, title=match.group("title").strip(), company=company, location=location
        )
    return replace(entry, title=remainder)


def _seed_education(text: str) -> EducationEntry:
    duration, remainder = _split_seed_text(text)
    entry = EducationEntry(duration=duration)
    if not remainder:
        return entry

    match = TITLE_AT_COMPANY.match(remainder)
    if match:
        return replace(
            entry, degree=match.group("title").strip(), institution=match.group("company").strip()
        )
    if is_institution(remainder):
        return replace(entry, institution=remainder)
    return replace(entry, degree=remainder)


# =============================================================================
# EXPERIENCE
# =============================================================================


def _leading_bold(line: str) -> Optional[tuple[str, str]]:
    """Bold span at the very start of a non-bullet line."""
    if is_bullet(line) or not line.startswith(("**", "__")):
        return None
    return bold_span(line)


def _leading_italic(line: str) -> Optional[tuple[str, str]]:
    """Italic span at the very start of a non-bullet line."""
    if is_bullet(line) or line.startswith(("**", "__")) or not line.startswith(("*", "_")):
        return None
    return italic_span(line)


def _add_description(entry: ExperienceEntry, text: str) -> ExperienceEntry:
    text = strip_markup(strip_bullet(text)) if text else ""
    if not text:
        return entry
    return replace(entry, description=entry.description + (text,))


def _route_remainder(entry: ExperienceEntry, rest: str) -> ExperienceEntry:
    """Text left on a line after its emphasized span was taken."""
    if not rest:
        return entry
    if is_duration(rest) and not entry.duration:
        return replace(entry, duration=rest)
    if is_location(rest) and not entry.location:
        return replace(entry, location=rest)
    return _add_description(entry, rest)


def _assign_emphasis(entry: ExperienceEntry, slot: str, text: str) -> ExperienceEntry:
    if slot == "company":
        company, location = _split_company_location(text)
        entry = replace(entry, company=company)
        if location and not entry.location:
            entry = replace(entry, location=location)
        return entry
    return replace(entry, title=text)


def _step_experience(
    state: ParserState, line: str, builder: DocumentBuilder, options: ParserOptions
) -> ParserState:
    if is_emphasized_boundary(line):
        inner = wrapped_emphasis(line)
        current = state.experience
        # A date line right under a sub-heading dates that entry
        if current is not None and not current.duration and not current.description:
            duration, remainder = _split_seed_text(inner)
            current = replace(current, duration=duration)
            if remainder and not current.title:
                current = replace(current, title=remainder)
            return replace(state, experience=current)

        state = finalize(state, builder)
        return replace(state, experience=_seed_experience(inner))

    # Content before any boundary opens an entry implicitly
    entry = state.experience if state.experience is not None else ExperienceEntry()

    bold = _leading_bold(line)
    if bold:
        text, rest = bold
        text = strip_markup(text)

        if is_duration(text) and not entry.duration:
            entry = replace(entry, duration=text)
            return replace(state, experience=_route_remainder(entry, rest))

        if not rest and entry.title and entry.company:
            state = finalize(replace(state, experience=entry), builder)
            entry = ExperienceEntry()

        for slot in options.emphasis_slots:
            if not getattr(entry, slot):
                entry = _assign_emphasis(entry, slot, text)
                return replace(state, experience=_route_remainder(entry, rest))

        return replace(state, experience=_add_description(entry, line))

    italic = _leading_italic(line)
    if italic:
        text, rest = italic
        if not entry.title:
            entry = replace(entry, title=strip_markup(text))
            return replace(state, experience=_route_remainder(entry, rest))
        return replace(state, experience=_add_description(entry, line))

    plain = strip_markup(strip_bullet(line))
    kind = classify_line(plain)

    if kind == LineKind.DURATION and not entry.duration:
        return replace(state, experience=replace(entry, duration=plain))

    if kind == LineKind.LOCATION and not entry.location:
        return replace(state, experience=replace(entry, location=plain))

    # "Engineer at Acme" on a plain line of a still-empty entry
    if not is_bullet(line) and not entry.title and not entry.company:
        match = TITLE_AT_COMPANY.match(plain)
        if match:
            company, location = _split_company_location(match.group("company").strip())
            entry = replace(entry, title=match.group("title").strip(), company=company)
            if location and not entry.location:
                entry = replace(entry, location=location)
            return replace(state, experience=entry)

    return replace(state, experience=_add_description(entry, line))


# =============================================================================
# EDUCATION
# =============================================================================


def _step_education(state: ParserState, line: str, builder: DocumentBuilder) -> ParserState:
    plain = strip_markup(strip_bullet(line))

    if is_emphasized_boundary(line) or DatePatterns.LEADING_YEAR_RANGE.match(plain):
        current = state.education
        if current is not None and not current.duration:
            duration, remainder = _split_seed_text(plain)
            current = replace(current, duration=duration)
            if remainder and not current.degree:
                current = replace(current, degree=remainder)
            return replace(state, education=current)

        state = finalize(state, builder)
        return replace(state, education=_seed_education(plain))

    entry = state.education if state.education is not None else EducationEntry()

    bold = _leading_bold(line)
    if bold and not bold[1] and entry.degree and entry.institution:
        state = finalize(replace(state, education=entry), builder)
        entry = EducationEntry()

    kind = classify_line(plain)
    if kind == LineKind.DURATION and not entry.duration:
        entry = replace(entry, duration=plain)
    elif kind == LineKind.LOCATION and not entry.location:
        entry = replace(entry, location=plain)
    elif kind == LineKind.INSTITUTION and not entry.institution:
        entry = replace(entry, institution=plain)
    elif not entry.degree:
        entry = replace(entry, degree=plain)
    elif not entry.institution:
        entry = replace(entry, institution=plain)
    else:
        _log_debug(f"Line {state.line_number}: unplaced education text '{plain[:40]}'")

    return replace(state, education=entry)


# =============================================================================
# PERSONAL INFORMATION
# =============================================================================


def _collect_personal_info(state: ParserState, line: str, builder: DocumentBuilder) -> None:
    """Pick contact details from a line outside any content section."""
    linkedin, website = extract_links(line)
    location = None

    plain = strip_markup(strip_bullet(line))
    for part in re.split(r"\s+[|·•]\s+", plain):
        if is_location(part):
            location = part
            break

    name = None
    if state.line_number <= NAME_SEARCH_LINES:
        name = extract_name(line)

    builder.personal_info = builder.personal_info.with_missing(
        name=name,
        email=extract_email(line),
        phone=extract_phone(line),
        linkedin=linkedin,
        website=website,
        location=location,
    )
