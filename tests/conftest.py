from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from europass_builder.state import MemoryStore, ResumeController


class FakeClock:
    """Deterministic clock for the controller; advance() moves it forward."""

    def __init__(self) -> None:
        self.now = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def controller(store: MemoryStore, clock: FakeClock) -> ResumeController:
    ctrl = ResumeController(store, clock=clock)
    ctrl.load()
    return ctrl


@pytest.fixture
def full_resume_data() -> dict:
    """A fully populated document in wire (camelCase) form."""
    return {
        "personalInfo": {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "nationality": "British",
            "phone": "+44 20 7946 0000",
            "email": "ada@example.org",
            "linkedin": "linkedin.com/in/ada",
            "address": "12 St James's Square, London",
            "aboutMe": "Registered nurse with ten years of ICU experience.",
            "profilePhoto": None,
        },
        "education": [
            {
                "id": "edu-1",
                "startYear": "2008",
                "endYear": "2011",
                "location": "London",
                "degree": "BSc Nursing",
                "institution": "King's College London",
            }
        ],
        "experience": [
            {
                "id": "exp-1",
                "startDate": "2019-04",
                "endDate": "",
                "location": "London",
                "position": "ICU Nurse",
                "company": "St Thomas' Hospital",
                "responsibilities": ["Ventilator management", "Patient assessment"],
                "currentJob": True,
            },
            {
                "id": "exp-2",
                "startDate": "2012-01",
                "endDate": "2019-03",
                "location": "Leeds",
                "position": "Staff Nurse",
                "company": "Leeds General Infirmary",
                "responsibilities": [],
                "currentJob": False,
            },
        ],
        "motherTongue": "English",
        "languages": [
            {"id": "lang-1", "language": "French", "reading": "C1", "speaking": "B2", "writing": "B1"}
        ],
        "medicalSkills": ["CPR & BLS", "IV Therapy"],
        "hobbies": "Chess, hiking , ",
    }
