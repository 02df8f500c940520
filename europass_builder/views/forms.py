"""Wizard step forms. Widgets read from and write to the session's ResumeController."""

import streamlit as st

from europass_builder.config import MEDICAL_SKILL_GROUPS
from europass_builder.schemas import CEFR_LEVEL_LABELS, CEFR_LEVELS
from europass_builder.state import ResumeController
from europass_builder.utils.helpers import decode_data_uri, encode_data_uri

PHOTO_TYPES = ["png", "jpg", "jpeg", "webp"]


def _key(controller: ResumeController, *parts: object) -> str:
    """Widget key scoped to the current document generation, so import/clear resets widgets."""
    return "-".join(str(p) for p in (controller.generation, *parts))


def render_personal_info_form(controller: ResumeController) -> None:
    info = controller.document.personal_info
    st.subheader("Personal Information")

    photo = decode_data_uri(info.profile_photo or "")
    pcol1, pcol2 = st.columns([1, 3])
    with pcol1:
        if photo:
            st.image(photo[1], width=120)
            if st.button("Remove photo", key=_key(controller, "photo-remove")):
                controller.update_personal_info(profile_photo=None)
                st.rerun()
    with pcol2:
        upload = st.file_uploader("Profile photo", type=PHOTO_TYPES, key=_key(controller, "photo-upload"))
        if upload is not None and st.button("Use this photo", key=_key(controller, "photo-apply")):
            controller.update_personal_info(profile_photo=encode_data_uri(upload.getvalue(), upload.type or "image/png"))
            st.rerun()

    col1, col2 = st.columns(2)
    with col1:
        first_name = st.text_input("First Name *", value=info.first_name, key=_key(controller, "pi-first"))
        nationality = st.text_input("Nationality", value=info.nationality, key=_key(controller, "pi-nationality"))
        email = st.text_input("Email *", value=info.email, key=_key(controller, "pi-email"))
        address = st.text_input("Address", value=info.address, key=_key(controller, "pi-address"))
    with col2:
        last_name = st.text_input("Last Name *", value=info.last_name, key=_key(controller, "pi-last"))
        phone = st.text_input("Phone", value=info.phone, key=_key(controller, "pi-phone"))
        linkedin = st.text_input("LinkedIn", value=info.linkedin, key=_key(controller, "pi-linkedin"))
    about_me = st.text_area(
        "About Me",
        value=info.about_me,
        height=120,
        placeholder="A short professional summary",
        key=_key(controller, "pi-about"),
    )

    edited = {
        "first_name": first_name,
        "last_name": last_name,
        "nationality": nationality,
        "phone": phone,
        "email": email,
        "linkedin": linkedin,
        "address": address,
        "about_me": about_me,
    }
    changes = {k: v for k, v in edited.items() if getattr(info, k) != v}
    if changes:
        controller.update_personal_info(**changes)


def render_education_form(controller: ResumeController) -> None:
    st.subheader("Education and Training")
    for edu in controller.document.education:
        with st.container(border=True):
            col1, col2 = st.columns(2)
            with col1:
                start_year = st.text_input("Start Year", value=edu.start_year, key=_key(controller, "edu", edu.id, "start"))
                degree = st.text_input("Degree", value=edu.degree, key=_key(controller, "edu", edu.id, "degree"))
                location = st.text_input("Location", value=edu.location, key=_key(controller, "edu", edu.id, "location"))
            with col2:
                end_year = st.text_input("End Year", value=edu.end_year, key=_key(controller, "edu", edu.id, "end"))
                institution = st.text_input(
                    "Institution", value=edu.institution, key=_key(controller, "edu", edu.id, "institution")
                )
            edited = {
                "start_year": start_year,
                "end_year": end_year,
                "location": location,
                "degree": degree,
                "institution": institution,
            }
            changes = {k: v for k, v in edited.items() if getattr(edu, k) != v}
            if changes:
                controller.update_education(edu.id, **changes)
            if st.button("Remove", key=_key(controller, "edu", edu.id, "remove")):
                controller.remove_education(edu.id)
                st.rerun()
    if st.button("Add Education", key=_key(controller, "edu-add")):
        controller.add_education()
        st.rerun()


def render_experience_form(controller: ResumeController) -> None:
    st.subheader("Work Experience")
    for exp in controller.document.experience:
        with st.container(border=True):
            col1, col2 = st.columns(2)
            with col1:
                start_date = st.text_input(
                    "Start Date", value=exp.start_date, placeholder="YYYY-MM", key=_key(controller, "exp", exp.id, "start")
                )
            with col2:
                # key includes the flag so the field is rebuilt when the toggle clears it
                end_date = st.text_input(
                    "End Date",
                    value=exp.end_date,
                    placeholder="YYYY-MM",
                    disabled=exp.current_job,
                    key=_key(controller, "exp", exp.id, "end", exp.current_job),
                )
            current_job = st.checkbox("Currently working here", value=exp.current_job, key=_key(controller, "exp", exp.id, "current"))
            if current_job != exp.current_job:
                controller.set_current_job(exp.id, current_job)
                st.rerun()

            position = st.text_input("Position", value=exp.position, key=_key(controller, "exp", exp.id, "position"))
            company = st.text_input(
                "Hospital/Healthcare Facility", value=exp.company, key=_key(controller, "exp", exp.id, "company")
            )
            location = st.text_input(
                "Location", value=exp.location, placeholder="City, Country", key=_key(controller, "exp", exp.id, "location")
            )
            responsibilities = st.text_area(
                "Job Responsibilities",
                value="\n".join(exp.responsibilities),
                placeholder="Enter each responsibility on a new line",
                key=_key(controller, "exp", exp.id, "resp"),
            )

            edited = {"start_date": start_date, "position": position, "company": company, "location": location}
            if not exp.current_job:
                edited["end_date"] = end_date
            changes = {k: v for k, v in edited.items() if getattr(exp, k) != v}
            if changes:
                controller.update_experience(exp.id, **changes)
            if responsibilities != "\n".join(exp.responsibilities):
                controller.set_responsibilities_text(exp.id, responsibilities)
            if st.button("Remove", key=_key(controller, "exp", exp.id, "remove")):
                controller.remove_experience(exp.id)
                st.rerun()
    if st.button("Add Experience", key=_key(controller, "exp-add")):
        controller.add_experience()
        st.rerun()


def _level_select(controller: ResumeController, label: str, current: str, *key_parts: object) -> str:
    return st.selectbox(
        label,
        options=list(CEFR_LEVELS),
        index=CEFR_LEVELS.index(current),
        format_func=lambda level: CEFR_LEVEL_LABELS[level],
        key=_key(controller, *key_parts),
    )


def render_skills_languages_form(controller: ResumeController) -> None:
    document = controller.document
    st.subheader("Languages")
    mother_tongue = st.text_input("Mother tongue", value=document.mother_tongue, key=_key(controller, "mother-tongue"))
    if mother_tongue != document.mother_tongue:
        controller.update(mother_tongue=mother_tongue)

    for lang in document.languages:
        with st.container(border=True):
            language = st.text_input("Language", value=lang.language, key=_key(controller, "lang", lang.id, "name"))
            col1, col2, col3 = st.columns(3)
            with col1:
                reading = _level_select(controller, "Reading", lang.reading, "lang", lang.id, "reading")
            with col2:
                speaking = _level_select(controller, "Speaking", lang.speaking, "lang", lang.id, "speaking")
            with col3:
                writing = _level_select(controller, "Writing", lang.writing, "lang", lang.id, "writing")
            edited = {"language": language, "reading": reading, "speaking": speaking, "writing": writing}
            changes = {k: v for k, v in edited.items() if getattr(lang, k) != v}
            if changes:
                controller.update_language(lang.id, **changes)
            if st.button("Remove", key=_key(controller, "lang", lang.id, "remove")):
                controller.remove_language(lang.id)
                st.rerun()
    if st.button("Add Language", key=_key(controller, "lang-add")):
        controller.add_language()
        st.rerun()

    st.subheader("Medical Skills")
    selected = set(controller.document.medical_skills)
    predefined = set()
    for group, skills in MEDICAL_SKILL_GROUPS.items():
        st.markdown(f"**{group}**")
        cols = st.columns(2)
        for i, skill in enumerate(skills):
            predefined.add(skill)
            with cols[i % 2]:
                checked = st.checkbox(skill, value=skill in selected, key=_key(controller, "skill", skill))
            if checked != (skill in selected):
                controller.toggle_medical_skill(skill, checked)

    custom = [s for s in controller.document.medical_skills if s not in predefined]
    if custom:
        st.caption("Other skills: " + ", ".join(custom))
    ccol1, ccol2 = st.columns([3, 1])
    with ccol1:
        new_skill = st.text_input("Add another skill", key=_key(controller, "skill-custom"))
    with ccol2:
        if st.button("Add", key=_key(controller, "skill-custom-add")) and controller.add_custom_medical_skill(new_skill):
            st.rerun()

    st.subheader("Hobbies and Interests")
    hobbies = st.text_input(
        "Hobbies (comma-separated)", value=controller.document.hobbies, key=_key(controller, "hobbies")
    )
    if hobbies != controller.document.hobbies:
        controller.update(hobbies=hobbies)
