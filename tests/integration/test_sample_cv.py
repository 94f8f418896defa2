"""
Integration test for parsing a complete markdown CV.
Tests: file -> CVDocument with personal info, all sections and entry boundaries.

The fixture mixes heading, bold/italic and "Title at Company" layouts, front
matter, a fenced block and a horizontal rule.
"""

import pytest

from cvrelay.contexts.intake import CVDocument, EducationEntry, ExperienceEntry, ParserOptions, parse_file


@pytest.mark.integration
def test_personal_info(sample_cv_path):
    """Test contact details from the top of the CV."""
    info = CVDocument.from_file(sample_cv_path).personal_info

    assert info.name == "Jane Doe"
    assert info.email == "jane.doe@example.com"
    assert info.phone == "+49 170 1234567"
    assert info.linkedin == "https://www.linkedin.com/in/jane-doe"
    assert info.website == "https://janedoe.dev"
    assert info.location == "Hamburg, Germany"


@pytest.mark.integration
def test_experience_entries(sample_cv_path):
    """Test all three experience layouts of the fixture."""
    document = parse_file(sample_cv_path)

    assert document.experience == (
        ExperienceEntry(
            title="Senior Backend Engineer",
            company="Acme GmbH",
            location="Hamburg, Germany",
            duration="09/2024 – today",
            description=("Designed an event-driven billing platform", "Led a team of four engineers"),
        ),
        ExperienceEntry(
            title="Platform Engineer",
            company="Globex Corporation",
            location="Berlin, Germany",
            duration="06/2023 – 08/2024",
            description=("Migrated 40 services to Kubernetes", "Built internal developer tooling"),
        ),
        ExperienceEntry(
            title="Software Developer",
            company="Initech",
            duration="Jan 2020 - May 2023",
            description=("Maintained the payment gateway",),
        ),
    )


@pytest.mark.integration
def test_education_entries(sample_cv_path):
    """Test education entries with sub-headings, institutions and dates."""
    document = parse_file(sample_cv_path)

    assert document.education == (
        EducationEntry(
            degree="M.Sc. Computer Science",
            institution="Technical University of Munich",
            duration="2015 – 2017",
            location="Munich, Germany",
        ),
        EducationEntry(
            degree="B.Sc. Informatics",
            institution="University of Hamburg",
            duration="2011 – 2015",
        ),
    )


@pytest.mark.integration
def test_list_sections(sample_cv_path):
    """Test summary, skills, certifications and languages."""
    document = parse_file(sample_cv_path)

    assert document.summary == "Backend engineer with 10 years of experience building distributed systems."
    assert document.skills == ("Python", "Go", "SQL", "Kubernetes", "Terraform", "AWS", "PostgreSQL")
    assert document.certifications == (
        "AWS Certified Solutions Architect",
        "Certified Kubernetes Administrator",
    )
    assert document.languages == ("German (native)", "English (fluent)")


@pytest.mark.integration
def test_title_first_option(sample_cv_path):
    """Test that title-first reads a bold pair as title then company."""
    document = parse_file(sample_cv_path, ParserOptions(emphasis_order="title_first"))

    assert document.experience[0].company == "Acme GmbH"
    assert document.experience[2].title == "Initech"
    assert document.experience[2].company == "Software Developer"


@pytest.mark.integration
def test_to_dict(sample_cv_path):
    """Test the plain dict form used for YAML dumps."""
    data = CVDocument.from_file(sample_cv_path).to_dict()

    assert data["personal_info"]["name"] == "Jane Doe"
    assert isinstance(data["experience"], list)
    assert data["experience"][0]["description"][1] == "Led a team of four engineers"
