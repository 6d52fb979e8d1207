"""
Patient Database

Persistence helpers for patient records and the patient-scoped rows that
hang off them.  Routers go through these functions rather than querying
Patient directly, so lookup-by-code and the 404 behaviour live in one place.
"""

import logging
import secrets
import string
from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fertility_planner.core.errors import NotFoundError
from fertility_planner.core.pathway_calculator import calculate_treatment_pathways
from fertility_planner.models.records import (
    MedicalFile,
    Patient,
    TimelineEvent,
    TreatmentPathway,
    utcnow,
)
from fertility_planner.models.schemas import (
    CoupleHistory,
    FemaleProfile,
    HolisticAssessment,
    Lifestyle,
    MaleProfile,
    PatientProfile,
    TreatmentPathwayOption,
)

logger = logging.getLogger(__name__)

PATIENT_CODE_PREFIX = "SNT"
PATIENT_CODE_LENGTH = 6
DEMO_PATIENT_CODE = "SNTDEMO001"

_BASE36 = string.digits + string.ascii_uppercase


def generate_patient_code() -> str:
    """Return a new code such as "SNT4K9ZQ1"."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(PATIENT_CODE_LENGTH))
    return PATIENT_CODE_PREFIX + suffix


def parse_date(value: Any) -> Optional[datetime]:
    """Parse an ISO date or datetime string; None/empty/unparseable -> None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    # Stored timestamps are naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def get_patient(db: Session, patient_code: str) -> Optional[Patient]:
    """Look up a patient by external code.

    Args:
        db: Open session.
        patient_code: The patient code (e.g. "SNTDEMO001").

    Returns:
        The Patient row if found, otherwise None.
    """
    if not patient_code:
        return None
    return db.query(Patient).filter(Patient.patient_code == patient_code).first()


def require_patient(db: Session, patient_code: str) -> Patient:
    """Like get_patient but raises NotFoundError (404 PATIENT_NOT_FOUND)."""
    patient = get_patient(db, patient_code)
    if patient is None:
        raise NotFoundError("Patient not found", "PATIENT_NOT_FOUND")
    return patient


def upsert_patient(db: Session, profile: PatientProfile) -> Patient:
    """Create or update the patient row for ``profile.patient_code``.

    Only the intake fields are written; location, interface mode and phase
    are owned by other operations.  The caller commits.
    """
    patient = get_patient(db, profile.patient_code)
    if patient is None:
        patient = Patient(patient_code=profile.patient_code)
        db.add(patient)

    female = profile.female_profile
    male = profile.male_profile
    history = profile.couple_history
    holistic = profile.holistic

    patient.female_age = female.age
    patient.female_cycle = female.cycle
    patient.female_conditions = list(female.conditions or [])
    patient.female_lifestyle = (
        female.lifestyle.model_dump(by_alias=True) if female.lifestyle else {}
    )
    patient.male_age = male.age
    patient.male_conditions = list(male.conditions or [])
    patient.time_trying = history.time_trying
    patient.previous_treatments = history.previous_treatments
    patient.fertility_history = history.model_dump(by_alias=True)
    patient.emotional_state = holistic.emotional_state
    patient.financial_comfort = holistic.financial_comfort
    patient.social_support = holistic.social_support
    if profile.interface_mode:
        patient.interface_mode = profile.interface_mode

    db.flush()
    return patient


def profile_from_patient(patient: Patient) -> PatientProfile:
    """Rebuild the wire profile from a stored patient row."""
    history = patient.fertility_history or {}
    return PatientProfile(
        patient_code=patient.patient_code,
        female_profile=FemaleProfile(
            age=patient.female_age,
            cycle=patient.female_cycle,
            conditions=patient.female_conditions or [],
            lifestyle=Lifestyle(**(patient.female_lifestyle or {})),
        ),
        male_profile=MaleProfile(
            age=patient.male_age,
            conditions=patient.male_conditions or [],
        ),
        couple_history=CoupleHistory(
            time_trying=patient.time_trying,
            previous_treatments=patient.previous_treatments,
            fertility_challenges=history.get("fertilityChallenges") or [],
        ),
        holistic=HolisticAssessment(
            emotional_state=patient.emotional_state,
            financial_comfort=patient.financial_comfort,
            social_support=patient.social_support,
        ),
        interface_mode=patient.interface_mode,
    )


def replace_pathways(
    db: Session,
    patient: Patient,
    pathways: list[TreatmentPathwayOption],
) -> list[TreatmentPathway]:
    """Delete the patient's stored pathways and store ``pathways`` instead."""
    db.query(TreatmentPathway).filter(
        TreatmentPathway.patient_id == patient.id
    ).delete(synchronize_session=False)

    rows = [
        TreatmentPathway(
            patient_id=patient.id,
            name=option.name,
            description=option.description,
            success_rate=option.success_rate,
            timeline=option.timeline,
            cost_min=option.cost_min,
            cost_max=option.cost_max,
            suitability=option.suitability,
            pros=list(option.pros),
            cons=list(option.cons),
            recommendation=option.recommendation,
            priority=option.priority or 0,
        )
        for option in pathways
    ]
    db.add_all(rows)
    db.flush()
    db.expire(patient, ["pathways"])
    return rows


def add_timeline_event(
    db: Session,
    patient: Patient,
    title: str,
    category: str,
    details: Optional[str] = None,
    when: Optional[datetime] = None,
    source_file: Optional[str] = None,
    extracted_data: Optional[Any] = None,
) -> Optional[TimelineEvent]:
    """Record a timeline event without risking the surrounding transaction.

    The insert runs in a SAVEPOINT; a database failure is logged and rolled
    back to the savepoint, and None is returned.
    """
    try:
        with db.begin_nested():
            event = TimelineEvent(
                patient_id=patient.id,
                date=when or utcnow(),
                title=title,
                category=category,
                details=details,
                source_file=source_file,
                extracted_data=extracted_data,
            )
            db.add(event)
        return event
    except SQLAlchemyError as exc:
        logger.error("Failed to create timeline event '%s': %s", title, exc)
        return None


def record_medical_file(
    db: Session,
    patient_code: str,
    file_name: str,
    file_type: Optional[str],
    file_size: int,
    category: Optional[str],
    extracted_data: Any,
    analysis_status: str,
    error_message: Optional[str] = None,
    processing_time: Optional[int] = None,
) -> Optional[MedicalFile]:
    """Store an upload record for a known patient; unknown codes are skipped."""
    patient = get_patient(db, patient_code)
    if patient is None:
        logger.info("Skipping medical file record for unknown patient %s", patient_code)
        return None
    row = MedicalFile(
        patient_id=patient.id,
        file_name=file_name,
        file_type=file_type,
        file_size=file_size,
        category=category,
        extracted_data=extracted_data,
        analysis_status=analysis_status,
        error_message=error_message,
        processing_time=processing_time,
    )
    db.add(row)
    db.commit()
    return row


def seed_demo_patient(db: Session) -> Patient:
    """Create the demo patient and its pathways if they do not exist yet."""
    existing = get_patient(db, DEMO_PATIENT_CODE)
    if existing is not None:
        return existing

    profile = PatientProfile(
        patient_code=DEMO_PATIENT_CODE,
        female_profile=FemaleProfile(
            age="30-34",
            cycle="mostly-regular",
            conditions=["pcos"],
            lifestyle=Lifestyle(smoking="never", alcohol="occasionally", bmi="normal"),
        ),
        male_profile=MaleProfile(age="30-39", conditions=["none"]),
        couple_history=CoupleHistory(time_trying="1-2 years", previous_treatments="none"),
        holistic=HolisticAssessment(
            emotional_state="some-stress",
            financial_comfort="150000-300000",
        ),
    )
    patient = upsert_patient(db, profile)
    replace_pathways(db, patient, calculate_treatment_pathways(profile))
    db.commit()
    logger.info("Seeded demo patient %s", DEMO_PATIENT_CODE)
    return patient
