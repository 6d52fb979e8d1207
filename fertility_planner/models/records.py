"""
ORM Records

SQLAlchemy table classes for every patient-scoped record.  Rows are keyed
internally by a string UUID; the external key is Patient.patient_code.

All tables share a to_dict() that emits camelCase keys and ISO dates so the
routers can return rows directly as JSON.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declared_attr, relationship

from fertility_planner.core.database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite drops tzinfo on round-trip anyway)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id() -> str:
    return uuid.uuid4().hex


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class RecordMixin:
    """Columns and serialization shared by every table."""

    id = Column(String(32), primary_key=True, default=_new_id)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            out[_camel(column.name)] = value
        return out


def _children(target: str, **kwargs: Any):
    return relationship(
        target,
        backref="patient",
        cascade="all, delete-orphan",
        **kwargs,
    )


class Patient(RecordMixin, Base):
    __tablename__ = "patients"

    patient_code = Column(String(32), unique=True, index=True, nullable=False)

    female_age = Column(String(16))
    female_cycle = Column(String(32))
    female_conditions = Column(JSON, default=list)
    female_lifestyle = Column(JSON, default=dict)
    male_age = Column(String(16))
    male_conditions = Column(JSON, default=list)
    time_trying = Column(String(32))
    previous_treatments = Column(String(32))
    fertility_history = Column(JSON, default=dict)
    emotional_state = Column(String(32))
    financial_comfort = Column(String(32))
    social_support = Column(String(32))

    # Location and doctor preferences (updated by doctor searches)
    zip_code = Column(String(16))
    preferred_gender = Column(String(16))
    experience_level = Column(String(16))
    specialization = Column(String(64))
    location_data = Column(JSON)

    interface_mode = Column(String(16), default="patient", nullable=False)
    current_phase = Column(Integer, default=1, nullable=False)
    estimated_completion = Column(DateTime)

    pathways = _children(
        "TreatmentPathway",
        order_by="[TreatmentPathway.priority, TreatmentPathway.suitability.desc()]",
    )
    timeline_events = _children("TimelineEvent")
    doctor_recommendations = _children("DoctorRecommendation")
    manual_data_entries = _children("ManualDataEntry")
    journey_steps = _children("JourneyStep", order_by="JourneyStep.step")
    journey_milestones = _children("JourneyMilestone")
    remote_care_sessions = _children("RemoteCareSession")
    provider_reviews = _children("ProviderReview")
    personalized_timelines = _children("PersonalizedTimeline")
    story_board = _children("StoryBoardChapter", order_by="StoryBoardChapter.chapter")
    patient_choices = _children("PatientChoice")
    medical_files = _children("MedicalFile")


class _PatientScoped(RecordMixin):
    """Adds the owning patient foreign key."""

    @declared_attr
    def patient_id(cls):
        return Column(
            String(32),
            ForeignKey("patients.id", ondelete="CASCADE"),
            index=True,
            nullable=False,
        )


class TreatmentPathway(_PatientScoped, Base):
    __tablename__ = "treatment_pathways"

    name = Column(String(128), nullable=False)
    description = Column(Text)
    success_rate = Column(Float, nullable=False)
    timeline = Column(String(64))
    cost_min = Column(Integer)
    cost_max = Column(Integer)
    suitability = Column(Float, nullable=False)
    pros = Column(JSON, default=list)
    cons = Column(JSON, default=list)
    recommendation = Column(Text)
    priority = Column(Integer, default=0, nullable=False)


class TimelineEvent(_PatientScoped, Base):
    __tablename__ = "timeline_events"

    date = Column(DateTime, nullable=False)
    title = Column(String(255), nullable=False)
    category = Column(String(32), nullable=False)
    details = Column(Text)
    source_file = Column(String(255))
    extracted_data = Column(JSON)


class DoctorRecommendation(_PatientScoped, Base):
    __tablename__ = "doctor_recommendations"

    doctor_name = Column(String(128), nullable=False)
    clinic_name = Column(String(128))
    specialization = Column(String(64))
    gender = Column(String(16))
    experience = Column(String(16))
    address = Column(String(255))
    zip_code = Column(String(16))
    distance = Column(Float)
    phone_number = Column(String(32))
    email = Column(String(128))
    website = Column(String(255))
    rating = Column(Float)
    review_count = Column(Integer, default=0)
    accepts_insurance = Column(Boolean, default=False)
    average_wait_time = Column(String(32))
    offers_telemedicine = Column(Boolean, default=False)
    virtual_consult_fee = Column(Integer)
    consultation_fee = Column(Integer)
    treatment_costs = Column(JSON)
    match_score = Column(Float)
    match_reason = Column(Text)


class ManualDataEntry(_PatientScoped, Base):
    __tablename__ = "manual_data_entries"

    entry_type = Column(String(32), nullable=False)
    source_type = Column(String(32), default="manual_entry")
    original_text = Column(Text)
    structured_data = Column(JSON)
    ai_processed = Column(Boolean, default=False)
    ai_extracted = Column(JSON)
    confidence = Column(Float, default=1.0)
    test_date = Column(DateTime)
    facility_name = Column(String(128))
    doctor_name = Column(String(128))
    entry_date = Column(DateTime, default=utcnow, nullable=False)
    timeline_event_id = Column(String(32))


class JourneyStep(_PatientScoped, Base):
    __tablename__ = "journey_steps"

    step = Column(Integer, nullable=False)
    title = Column(String(128), nullable=False)
    description = Column(Text)
    status = Column(String(16), default="upcoming", nullable=False)
    category = Column(String(32))
    scheduled_date = Column(DateTime)
    completed_date = Column(DateTime)
    estimated_duration = Column(String(64))
    can_be_remote = Column(Boolean, default=False)
    requires_in_person = Column(Boolean, default=True)
    preparation_steps = Column(JSON, default=list)
    what_to_expect = Column(Text)
    after_care = Column(Text)
    icon_name = Column(String(32))
    patient_tips = Column(JSON, default=list)


class JourneyMilestone(_PatientScoped, Base):
    __tablename__ = "journey_milestones"

    milestone_type = Column(String(64), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(32), default="milestone")
    expected_date = Column(DateTime)
    actual_date = Column(DateTime)
    status = Column(String(16), default="upcoming", nullable=False)
    progress_percent = Column(Integer, default=0)
    patient_notes = Column(Text)
    satisfaction_score = Column(Integer)
    experience_rating = Column(Integer)
    clinical_notes = Column(Text)
    outcomes = Column(JSON)
    complications = Column(Text)
    next_milestone = Column(String(255))
    preparation_needed = Column(JSON)
    advice_given = Column(Text)
    was_remote = Column(Boolean, default=False)
    remote_session_id = Column(String(32))


class RemoteCareSession(_PatientScoped, Base):
    __tablename__ = "remote_care_sessions"

    session_type = Column(String(32), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(32), default="monitoring")
    can_be_remote = Column(Boolean, default=True)
    requires_in_person = Column(Boolean, default=False)
    uploaded_files = Column(JSON)
    scheduled_date = Column(DateTime)
    completed_date = Column(DateTime)
    priority = Column(String(16), default="normal", nullable=False)
    status = Column(String(32), default="pending", nullable=False)
    reviewed_by = Column(String(128))
    reviewed_at = Column(DateTime)
    provider_notes = Column(Text)
    recommendations = Column(JSON)
    follow_up_required = Column(Boolean, default=False)
    follow_up_type = Column(String(32))
    follow_up_date = Column(DateTime)


class ProviderReview(_PatientScoped, Base):
    __tablename__ = "provider_reviews"

    provider_id = Column(String(64), index=True, nullable=False)
    provider_name = Column(String(128), nullable=False)
    provider_role = Column(String(32), default="doctor")
    review_type = Column(String(32), default="file_review")
    title = Column(String(255), default="Provider Review")
    findings = Column(Text)
    recommendations = Column(Text)
    reviewed_file_ids = Column(JSON, default=list)
    urgency_level = Column(String(16), default="normal")
    action_required = Column(Boolean, default=False)
    action_items = Column(JSON, default=list)
    treatment_changes = Column(Boolean, default=False)
    new_recommendations = Column(JSON)
    status = Column(String(16), default="submitted", nullable=False)


class PersonalizedTimeline(_PatientScoped, Base):
    __tablename__ = "personalized_timelines"

    treatment_pathway = Column(String(128), nullable=False)
    total_duration = Column(String(64))
    start_date = Column(DateTime)
    estimated_end_date = Column(DateTime)
    phases = Column(JSON)
    milestones = Column(JSON)
    patient_age = Column(Integer)
    medical_history = Column(JSON)
    selected_options = Column(JSON)
    current_phase = Column(String(128))
    phase_advice = Column(JSON)
    preparation_tips = Column(JSON)
    ai_generated = Column(Boolean, default=True)
    is_active = Column(Boolean, default=True, nullable=False)
    status = Column(String(16), default="active", nullable=False)


class StoryBoardChapter(_PatientScoped, Base):
    __tablename__ = "story_board_chapters"

    chapter = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    subtitle = Column(String(255))
    description = Column(Text)
    patient_content = Column(Text)
    partner_content = Column(Text)
    family_content = Column(Text)
    action_items = Column(JSON, default=list)
    checklist_items = Column(JSON, default=list)
    estimated_timeframe = Column(String(64))
    dependencies = Column(JSON, default=list)
    encouragement_note = Column(Text)
    common_concerns = Column(JSON, default=list)
    support_tips = Column(JSON, default=list)
    icon_name = Column(String(32))
    color_theme = Column(String(32))
    is_completed = Column(Boolean, default=False)
    completed_date = Column(DateTime)


class PatientChoice(_PatientScoped, Base):
    __tablename__ = "patient_choices"

    treatment_pathway_id = Column(String(32), default="")
    selected_option = Column(String(128), nullable=False)
    choice_reason = Column(JSON)
    reasoning = Column(Text)
    confidence = Column(Integer)
    cost_importance = Column(Integer)
    timeline_importance = Column(Integer)
    success_rate_importance = Column(Integer)
    invasiveness_importance = Column(Integer)
    alternatives_considered = Column(JSON)
    preferred_start_date = Column(DateTime)
    max_timeline_months = Column(Integer)
    additional_concerns = Column(Text)
    partner_involvement = Column(String(32))
    status = Column(String(16), default="confirmed", nullable=False)
    decision_date = Column(DateTime, default=utcnow, nullable=False)
    last_modified = Column(DateTime, default=utcnow)


class MedicalFile(_PatientScoped, Base):
    __tablename__ = "medical_files"

    file_name = Column(String(255), nullable=False)
    file_type = Column(String(64))
    file_size = Column(Integer)
    category = Column(String(32))
    extracted_data = Column(JSON)
    analysis_status = Column(String(16), default="pending", nullable=False)
    error_message = Column(Text)
    processing_time = Column(Integer)
    uploaded_at = Column(DateTime, default=utcnow, nullable=False)
