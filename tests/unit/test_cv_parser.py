"""Unit tests for the CV document parser."""

from dataclasses import replace

import pytest

from cvrelay.contexts.intake import (
    CVDocument,
    DocumentReadError,
    EducationEntry,
    ExperienceEntry,
    ParserOptions,
    PersonalInfo,
    parse,
    parse_file,
)
from cvrelay.contexts.intake.cv_parser import (
    DocumentBuilder,
    ParserState,
    finalize,
    step,
    transition,
)
from cvrelay.contexts.intake.patterns import Section


@pytest.mark.unit
def test_heading_boundary_with_emphasis():
    """Test the canonical heading/bold/italic/bullet entry layout."""
    text = "## Experience\n### Jan 2020 – Present\n**Acme Corp**\n_Engineer_\n- Built things"

    document = parse(text)

    assert document.experience == (
        ExperienceEntry(
            title="Engineer",
            company="Acme Corp",
            duration="Jan 2020 – Present",
            description=("Built things",),
        ),
    )


@pytest.mark.unit
def test_emphasis_inside_text_stays_description():
    """Test that emphasis in a bullet or later in a line is kept as description text."""
    text = (
        "## Experience\n"
        "### 2020 – 2021\n"
        "**Acme**\n"
        "_Engineer_\n"
        "- Led the **Kubernetes** migration\n"
        "Shipped *fast* releases"
    )

    entry = parse(text).experience[0]

    assert entry.company == "Acme"
    assert entry.title == "Engineer"
    assert entry.description == ("Led the Kubernetes migration", "Shipped fast releases")


@pytest.mark.unit
def test_parse_is_deterministic():
    """Test that parsing the same text twice gives equal documents."""
    text = "# Jane Doe\n## Experience\n**2019 – 2020**\n**Acme**\n- a\n## Skills\n- Go, Rust"

    assert parse(text) == parse(text)


@pytest.mark.unit
def test_empty_text():
    """Test that empty input yields an empty document."""
    assert parse("") == CVDocument()


@pytest.mark.unit
def test_dated_entry_without_content_is_discarded():
    """Test that entries without title, company and description are dropped."""
    document = parse("## Experience\n### 2019 – 2020\n\n## Skills\n- Python")

    assert document.experience == ()
    assert document.skills == ("Python",)


@pytest.mark.unit
def test_education_without_degree_or_duration_is_discarded():
    """Test the education retention rule."""
    document = parse("## Education\n**Some University**")

    assert document.education == ()


@pytest.mark.unit
def test_skills_are_deduplicated_in_first_seen_order():
    """Test exact-match skill deduplication."""
    document = parse("## Skills\n- Python, Go\n- Go; Rust\n- Python")

    assert document.skills == ("Python", "Go", "Rust")


@pytest.mark.unit
def test_emphasis_order():
    """Test company-first default and the title-first option."""
    text = "## Experience\n### 2020 – 2021\n**Engineer**\n**Acme**"

    company_first = parse(text).experience[0]
    assert company_first.company == "Engineer"
    assert company_first.title == "Acme"

    title_first = parse(text, ParserOptions(emphasis_order="title_first")).experience[0]
    assert title_first.title == "Engineer"
    assert title_first.company == "Acme"


@pytest.mark.unit
def test_invalid_emphasis_order():
    """Test ParserOptions validation."""
    with pytest.raises(ValueError):
        ParserOptions(emphasis_order="bogus")


@pytest.mark.unit
def test_front_matter_and_code_fences_are_skipped():
    """Test that front matter and fenced blocks never produce entries."""
    text = "---\ntitle: CV\n---\n## Experience\n```\n**Fake Corp**\n```\n### 2019 – 2020\n**Acme**"

    document = parse(text)

    assert len(document.experience) == 1
    assert document.experience[0].company == "Acme"


@pytest.mark.unit
def test_unknown_heading_closes_section():
    """Test that an unrecognized heading at section level ends the section."""
    document = parse("## Experience\n### 2019 – 2020\n**Acme**\n## Hobbies\n- Chess")

    assert document.experience[0].description == ()


@pytest.mark.unit
@pytest.mark.parametrize("hashes", ["#", "##", "###"])
def test_dated_heading_at_section_level_is_entry_boundary(hashes):
    """Test that dated headings on the section's own level start entries instead of closing it."""
    text = (
        f"{hashes} Experience\n"
        f"{hashes} Jan 2020 – Present\n"
        "**Acme Corp**\n"
        "_Engineer_\n"
        "- Built things\n"
        f"{hashes} 03/2018 – 12/2019\n"
        "**Beta GmbH**\n"
        "_Developer_\n"
        f"{hashes} Skills\n"
        "- Go"
    )

    document = parse(text)

    assert document.experience == (
        ExperienceEntry(
            title="Engineer", company="Acme Corp", duration="Jan 2020 – Present", description=("Built things",)
        ),
        ExperienceEntry(title="Developer", company="Beta GmbH", duration="03/2018 – 12/2019"),
    )
    assert document.personal_info.name is None
    assert document.skills == ("Go",)


@pytest.mark.unit
def test_dated_heading_at_section_level_in_education():
    """Test the same layout in the education section."""
    document = parse("## Education\n## 2015 – 2017\nM.Sc. Physics\nUniversity of Hamburg\n## 2011 – 2015\nB.Sc. Physics")

    assert document.education == (
        EducationEntry(degree="M.Sc. Physics", institution="University of Hamburg", duration="2015 – 2017"),
        EducationEntry(degree="B.Sc. Physics", duration="2011 – 2015"),
    )


@pytest.mark.unit
def test_sub_heading_with_section_word_is_entry_boundary():
    """Test that deeper headings inside experience start entries."""
    document = parse("## Experience\n### Work Student at Acme\n- Stuff")

    assert document.experience == (
        ExperienceEntry(title="Work Student", company="Acme", description=("Stuff",)),
    )


@pytest.mark.unit
def test_date_line_under_heading_dates_that_entry():
    """Test that a date line right after a sub-heading joins the heading's entry."""
    document = parse("## Experience\n### Engineer at Acme\n- **09/2024 – today**\n- Shipped it")

    assert len(document.experience) == 1
    assert document.experience[0].duration == "09/2024 – today"
    assert document.experience[0].description == ("Shipped it",)


@pytest.mark.unit
def test_title_at_company_line():
    """Test a plain "Title at Company, City, ST" line."""
    text = "## Experience\n**2019 – 2020**\nBackend Developer at Initech, Austin, TX\n- Wrote code"

    entry = parse(text).experience[0]

    assert entry.title == "Backend Developer"
    assert entry.company == "Initech"
    assert entry.location == "Austin, TX"
    assert entry.duration == "2019 – 2020"


@pytest.mark.unit
def test_bold_company_with_location_remainder():
    """Test that text after a bold company becomes the location."""
    entry = parse("## Experience\n**Acme GmbH** – Hamburg, Germany\n_Engineer_").experience[0]

    assert entry.company == "Acme GmbH"
    assert entry.location == "Hamburg, Germany"
    assert entry.title == "Engineer"


@pytest.mark.unit
def test_consecutive_bold_pairs_split_entries():
    """Test entries separated only by a new bold company/title pair."""
    text = "## Experience\n**Acme**\n**Engineer**\n- a\n**Globex**\n**Manager**\n- b"

    document = parse(text)

    assert [entry.label() for entry in document.experience] == [
        "Engineer at Acme",
        "Manager at Globex",
    ]


@pytest.mark.unit
def test_education_entries():
    """Test education with date-first and degree-first layouts."""
    degree_first = parse(
        "## Education\n**B.Sc. Physics**\nUniversity of Hamburg\n2011 – 2015\n"
        "**M.Sc. Physics**\nUniversity of Hamburg\n2015 – 2017"
    )
    assert degree_first.education == (
        EducationEntry(degree="B.Sc. Physics", institution="University of Hamburg", duration="2011 – 2015"),
        EducationEntry(degree="M.Sc. Physics", institution="University of Hamburg", duration="2015 – 2017"),
    )

    date_first = parse("## Education\n2011 – 2015\nB.Sc. Physics\n2015 – 2017\nM.Sc. Physics")
    assert [entry.degree for entry in date_first.education] == ["B.Sc. Physics", "M.Sc. Physics"]
    assert [entry.duration for entry in date_first.education] == ["2011 – 2015", "2015 – 2017"]


@pytest.mark.unit
def test_personal_info_and_summary():
    """Test contact details above the first section and summary collection."""
    text = (
        "# Jane Doe\n"
        "jane@example.com | +49 170 1234567\n"
        "Berlin, Germany\n"
        "## Summary\n"
        "Backend engineer\n"
        "with ten years of experience.\n"
    )

    document = parse(text)

    info = document.personal_info
    assert info.name == "Jane Doe"
    assert info.email == "jane@example.com"
    assert info.phone == "+49 170 1234567"
    assert info.location == "Berlin, Germany"
    assert document.summary == "Backend engineer with ten years of experience."


@pytest.mark.unit
def test_certifications_and_languages():
    """Test list sections."""
    document = parse("## Certifications\n- **CKA**\n## Languages\n- German (native)\n- English")

    assert document.certifications == ("CKA",)
    assert document.languages == ("German (native)", "English")


@pytest.mark.unit
def test_step_and_transition():
    """Test explicit state threading through step and transition."""
    builder = DocumentBuilder()
    options = ParserOptions()

    state = step(ParserState(), "## Skills", builder, options)
    assert state.section == Section.SKILLS
    assert state.section_level == 2
    assert state.line_number == 1

    state = replace(state, experience=ExperienceEntry(title="Engineer"))
    state = transition(state, Section.EDUCATION, 2, builder)

    assert state.experience is None
    assert state.section == Section.EDUCATION
    assert builder.experience == [ExperienceEntry(title="Engineer")]


@pytest.mark.unit
def test_finalize_applies_retention_rules():
    """Test that finalize keeps retained entries only and clears the slots."""
    builder = DocumentBuilder()
    state = ParserState(experience=ExperienceEntry(duration="2019 – 2020"), education=EducationEntry(duration="2015"))

    state = finalize(state, builder)

    assert builder.experience == []
    assert builder.education == [EducationEntry(duration="2015")]
    assert state.experience is None and state.education is None


@pytest.mark.unit
def test_parse_file_errors(tmp_path):
    """Test that unreadable files raise DocumentReadError."""
    missing = tmp_path / "missing.md"
    with pytest.raises(DocumentReadError) as exc_info:
        parse_file(missing)
    assert exc_info.value.path == missing

    binary = tmp_path / "cv.md"
    binary.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(DocumentReadError):
        CVDocument.from_file(binary)


@pytest.mark.unit
def test_entries_for():
    """Test category accessor and its validation."""
    document = parse("## Skills\n- Go")

    assert document.entries_for("skills") == ("Go",)
    with pytest.raises(ValueError):
        document.entries_for("hobbies")


@pytest.mark.unit
def test_entries_for_single_entry_categories():
    """Test that summary and intro replay as one entry, and only when there is content."""
    document = parse("# Jane Doe\nBerlin, Germany\n## Summary\nBackend engineer.")

    assert document.entries_for("summary") == ("Backend engineer.",)
    assert document.entries_for("intro") == (document.personal_info,)

    empty = parse("## Skills\n- Go")
    assert empty.entries_for("summary") == ()
    assert empty.entries_for("intro") == ()


@pytest.mark.unit
def test_name_parts():
    """Test the first/last name split used for the intro form."""
    assert PersonalInfo(name="Anna Maria Schmidt").name_parts() == ("Anna", "Maria Schmidt")
    assert PersonalInfo(name="Cher").name_parts() == ("Cher", "")
    assert PersonalInfo().name_parts() == ("", "")
