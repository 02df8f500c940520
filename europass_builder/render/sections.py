"""Europass section model shared by the on-screen preview and the PDF renderer."""

from dataclasses import dataclass, field
from typing import List, Tuple

from europass_builder.schemas import PersonalInfo, ResumeDocument
from europass_builder.utils.helpers import format_month_year, split_hobbies


@dataclass
class SectionEntry:
    period: str = ""
    heading: str = ""
    detail: str = ""
    bullets: List[str] = field(default_factory=list)


@dataclass
class Section:
    title: str
    text: str = ""
    entries: List[SectionEntry] = field(default_factory=list)
    items: List[str] = field(default_factory=list)


def _period(start: str, end: str) -> str:
    start, end = start.strip(), end.strip()
    if start and end:
        return f"{start} – {end}"
    return start or end


def _join(*parts: str) -> str:
    return ", ".join(p.strip() for p in parts if p and p.strip())


def contact_items(info: PersonalInfo) -> List[Tuple[str, str]]:
    """(label, value) pairs for the non-empty contact fields, in display order."""
    pairs = [
        ("Nationality", info.nationality),
        ("Phone number", info.phone),
        ("Email address", info.email),
        ("LinkedIn", info.linkedin),
        ("Address", info.address),
    ]
    return [(label, value) for label, value in pairs if value.strip()]


def full_name(info: PersonalInfo) -> str:
    return f"{info.first_name} {info.last_name}".strip()


def build_sections(document: ResumeDocument) -> List[Section]:
    """Sections in Europass order; empty ones are left out."""
    sections: List[Section] = []
    info = document.personal_info

    if info.about_me.strip():
        sections.append(Section("ABOUT ME", text=info.about_me.strip()))

    if document.education:
        sections.append(
            Section(
                "EDUCATION AND TRAINING",
                entries=[
                    SectionEntry(
                        period=_period(edu.start_year, edu.end_year),
                        heading=edu.degree,
                        detail=_join(edu.institution, edu.location),
                    )
                    for edu in document.education
                ],
            )
        )

    if document.experience:
        sections.append(
            Section(
                "WORK EXPERIENCE",
                entries=[
                    SectionEntry(
                        period=_period(
                            format_month_year(exp.start_date),
                            "PRESENT" if exp.current_job else format_month_year(exp.end_date),
                        ),
                        heading=exp.position,
                        detail=_join(exp.company, exp.location),
                        bullets=[r for r in exp.responsibilities if r.strip()],
                    )
                    for exp in document.experience
                ],
            )
        )

    if document.mother_tongue.strip() or document.languages:
        sections.append(
            Section(
                "LANGUAGE SKILLS",
                text=f"Mother tongue(s): {document.mother_tongue.strip()}" if document.mother_tongue.strip() else "",
                entries=[
                    SectionEntry(
                        heading=lang.language,
                        detail=f"Reading: {lang.reading} | Speaking: {lang.speaking} | Writing: {lang.writing}",
                    )
                    for lang in document.languages
                ],
            )
        )

    if document.medical_skills:
        sections.append(Section("MEDICAL SKILLS", items=list(document.medical_skills)))

    hobbies = split_hobbies(document.hobbies)
    if hobbies:
        sections.append(Section("HOBBIES AND INTERESTS", text=" | ".join(hobbies)))

    return sections
