from __future__ import annotations

import pytest

from europass_builder.schemas import ResumeDocument, normalize


@pytest.mark.parametrize("candidate", [None, {}, "résumé", 42, 3.5, True, [], [{"personalInfo": {}}]])
def test_normalize_degrades_non_objects_to_empty_document(candidate: object) -> None:
    """Anything that is not an object becomes the all-default document."""
    assert normalize(candidate) == ResumeDocument()


def test_normalize_empty_document_shape() -> None:
    """Defaults: string fields empty, list fields empty lists, no photo."""
    data = normalize({}).to_dict()

    assert data["personalInfo"] == {
        "firstName": "",
        "lastName": "",
        "nationality": "",
        "phone": "",
        "email": "",
        "linkedin": "",
        "address": "",
        "aboutMe": "",
        "profilePhoto": None,
    }
    assert data["education"] == []
    assert data["experience"] == []
    assert data["languages"] == []
    assert data["medicalSkills"] == []
    assert data["motherTongue"] == ""
    assert data["hobbies"] == ""


def test_normalize_keeps_fully_populated_document(full_resume_data: dict) -> None:
    """A valid document passes through unchanged (apart from skill/hobby text kept verbatim)."""
    assert normalize(full_resume_data).to_dict() == full_resume_data


@pytest.mark.parametrize(
    "candidate",
    [
        None,
        {},
        {"education": "Oxford", "experience": None, "languages": {"id": "x"}, "medicalSkills": "CPR"},
        {"education": [{"degree": "BSc"}, "junk", {"id": "edu-1"}], "languages": [{"reading": "c1"}]},
        {"personalInfo": {"firstName": 7, "profilePhoto": ""}, "hobbies": ["x"]},
    ],
)
def test_normalize_is_idempotent(candidate: object) -> None:
    """normalize(normalize(x)) == normalize(x), also through the wire form."""
    once = normalize(candidate)

    assert normalize(once) == once
    assert normalize(once.to_dict()) == once


def test_normalize_is_idempotent_for_full_document(full_resume_data: dict) -> None:
    once = normalize(full_resume_data)
    assert normalize(once.to_dict()) == once


def test_normalize_wrong_typed_fields_fall_back_per_field() -> None:
    """One bad field does not abort the rest of the document."""
    doc = normalize(
        {
            "personalInfo": {"firstName": "Ada", "lastName": None, "email": ["a@b.c"]},
            "education": "Oxford",
            "experience": None,
            "languages": {"language": "French"},
            "medicalSkills": "CPR",
            "motherTongue": {"value": "English"},
            "hobbies": "Chess",
        }
    )

    assert doc.personal_info.first_name == "Ada"
    assert doc.personal_info.last_name == ""
    assert doc.personal_info.email == ""
    assert doc.education == []
    assert doc.experience == []
    assert doc.languages == []
    assert doc.medical_skills == []
    assert doc.mother_tongue == ""
    assert doc.hobbies == "Chess"


def test_normalize_assigns_positional_fallback_ids() -> None:
    doc = normalize(
        {
            "education": [{"degree": "BSc"}, {"degree": "MSc", "id": ""}],
            "experience": [{"position": "Nurse"}],
            "languages": [{"language": "French"}, {"language": "German"}],
        }
    )

    assert [e.id for e in doc.education] == ["edu-1", "edu-2"]
    assert [e.id for e in doc.experience] == ["exp-1"]
    assert [lang.id for lang in doc.languages] == ["lang-1", "lang-2"]


def test_normalize_drops_non_object_elements_and_keeps_original_positions() -> None:
    doc = normalize({"education": ["junk", None, {"degree": "BSc"}]})

    assert len(doc.education) == 1
    assert doc.education[0].id == "edu-3"
    assert doc.education[0].degree == "BSc"


def test_normalize_makes_duplicate_ids_unique() -> None:
    doc = normalize(
        {
            "education": [
                {"id": "edu-2", "degree": "A"},
                {"id": "edu-2", "degree": "B"},
                {"degree": "C"},
            ]
        }
    )

    ids = [e.id for e in doc.education]
    assert ids[0] == "edu-2"
    assert len(set(ids)) == 3


def test_normalize_defaults_sub_fields_of_entries() -> None:
    doc = normalize({"experience": [{"id": "x", "responsibilities": "do things", "currentJob": "yes"}]})
    entry = doc.experience[0]

    assert entry.start_date == ""
    assert entry.end_date == ""
    assert entry.responsibilities == []
    assert entry.current_job is False


def test_normalize_coerces_scalars_to_strings() -> None:
    doc = normalize(
        {
            "education": [{"startYear": 2008, "endYear": 2011.0, "degree": True}],
            "experience": [{"responsibilities": ["Triage", 3, None, {"x": 1}], "currentJob": "TRUE"}],
        }
    )

    assert doc.education[0].start_year == "2008"
    assert doc.education[0].end_year == "2011.0"
    assert doc.education[0].degree == ""
    assert doc.experience[0].responsibilities == ["Triage", "3"]
    assert doc.experience[0].current_job is True


def test_normalize_language_levels_default_to_b2() -> None:
    doc = normalize({"languages": [{"language": "French", "reading": "c1", "speaking": "fluent"}]})
    lang = doc.languages[0]

    assert lang.reading == "C1"
    assert lang.speaking == "B2"
    assert lang.writing == "B2"


def test_normalize_medical_skills_behave_as_a_set() -> None:
    doc = normalize({"medicalSkills": ["CPR", "ACLS", "CPR", "", "  ", 5, None]})
    assert doc.medical_skills == ["CPR", "ACLS", "5"]


def test_normalize_empty_profile_photo_becomes_none() -> None:
    assert normalize({"personalInfo": {"profilePhoto": ""}}).personal_info.profile_photo is None
    photo = "data:image/png;base64,AAAA"
    assert normalize({"personalInfo": {"profilePhoto": photo}}).personal_info.profile_photo == photo


def test_normalize_drops_unknown_top_level_keys() -> None:
    data = normalize({"hobbies": "Chess", "projects": [1, 2], "exportedAt": "2025-01-01"}).to_dict()
    assert "projects" not in data
    assert "exportedAt" not in data


def test_normalize_partial_personal_info_scenario() -> None:
    """{"personalInfo": {"firstName": "Ada"}} fills every other field with defaults."""
    doc = normalize({"personalInfo": {"firstName": "Ada"}})

    assert doc.personal_info.first_name == "Ada"
    assert doc.personal_info.last_name == ""
    assert doc.education == []
    assert doc.experience == []


def test_normalize_accepts_model_instances(full_resume_data: dict) -> None:
    doc = normalize(full_resume_data)
    rebuilt = normalize({"personalInfo": doc.personal_info, "education": list(doc.education)})

    assert rebuilt.personal_info == doc.personal_info
    assert rebuilt.education == doc.education
