"""
Pydantic Schemas

Request models for the JSON endpoints.  The wire format is camelCase
(patientCode, femaleProfile, ...); every model also accepts snake_case.

Required fields are declared Optional on purpose: the routers check them
and answer 400 with a specific errorCode instead of FastAPI's generic 422.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Patient profile
# ---------------------------------------------------------------------------

class Lifestyle(CamelModel):
    smoking: Optional[str] = None
    alcohol: Optional[str] = None
    bmi: Optional[str] = None


class FemaleProfile(CamelModel):
    age: Optional[str] = None
    cycle: Optional[str] = None
    conditions: list[str] = []
    lifestyle: Optional[Lifestyle] = None


class MaleProfile(CamelModel):
    age: Optional[str] = None
    conditions: list[str] = []


class CoupleHistory(CamelModel):
    time_trying: Optional[str] = None
    previous_treatments: Optional[str] = None
    fertility_challenges: list[str] = []


class HolisticAssessment(CamelModel):
    emotional_state: Optional[str] = None
    financial_comfort: Optional[str] = None
    social_support: Optional[str] = None


class Coordinates(CamelModel):
    lat: float
    lng: float


class LocationPreferences(CamelModel):
    zip_code: Optional[str] = None
    preferred_gender: Optional[str] = None
    experience_level: Optional[str] = None
    specialization: Optional[str] = None
    max_distance: Optional[float] = None
    coordinates: Optional[Coordinates] = None


class PatientProfile(CamelModel):
    """Everything the intake wizard collects about a couple."""

    patient_code: Optional[str] = None
    female_profile: FemaleProfile = Field(default_factory=FemaleProfile)
    male_profile: MaleProfile = Field(default_factory=MaleProfile)
    couple_history: CoupleHistory = Field(default_factory=CoupleHistory)
    holistic: HolisticAssessment = Field(default_factory=HolisticAssessment)
    location: Optional[LocationPreferences] = None
    interface_mode: Optional[str] = None


class TreatmentPathwayOption(CamelModel):
    """A scored treatment modality, as produced by the pathway calculator."""

    name: str
    description: str = ""
    success_rate: float = 0
    timeline: str = ""
    cost_min: int = 0
    cost_max: int = 0
    suitability: float = 0
    pros: list[str] = []
    cons: list[str] = []
    priority: int = 0
    recommendation: Optional[str] = None


# ---------------------------------------------------------------------------
# Patient record / pathways
# ---------------------------------------------------------------------------

class SavePatientRecordRequest(CamelModel):
    patient_profile: Optional[PatientProfile] = None
    treatment_pathways: Optional[list[TreatmentPathwayOption]] = None
    selected_pathway: Optional[Any] = None


class CalculatePathwaysRequest(CamelModel):
    patient_profile: Optional[PatientProfile] = None


class InterfaceModeRequest(CamelModel):
    patient_code: Optional[str] = None
    interface_mode: Optional[str] = None


# ---------------------------------------------------------------------------
# Doctors
# ---------------------------------------------------------------------------

class FindDoctorsRequest(CamelModel):
    patient_code: Optional[str] = None
    zip_code: Optional[str] = None
    preferred_gender: Optional[str] = None
    experience_level: Optional[str] = None
    specialization: Optional[str] = None
    max_distance: Optional[float] = None
    accepts_insurance: Optional[bool] = None
    offers_telemedicine: Optional[bool] = None
    coordinates: Optional[Coordinates] = None


# ---------------------------------------------------------------------------
# AI-backed analysis
# ---------------------------------------------------------------------------

class RecommendationsRequest(CamelModel):
    patient_profile: Optional[PatientProfile] = None
    patient_code: Optional[str] = None


class ManualDataEntryRequest(CamelModel):
    patient_code: Optional[str] = None
    entry_type: Optional[str] = None
    source_type: Optional[str] = None
    original_text: Optional[str] = None
    structured_data: Optional[dict[str, Any]] = None
    test_date: Optional[str] = None
    facility_name: Optional[str] = None
    doctor_name: Optional[str] = None


# ---------------------------------------------------------------------------
# Journey
# ---------------------------------------------------------------------------

class JourneyStepsRequest(CamelModel):
    patient_code: Optional[str] = None
    treatment_type: str = "IVF"


class JourneyStepUpdate(CamelModel):
    step_id: Optional[str] = None
    status: Optional[str] = None
    completed_date: Optional[str] = None


class MilestoneCreate(CamelModel):
    patient_code: Optional[str] = None
    milestone_type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    expected_date: Optional[str] = None
    actual_date: Optional[str] = None
    status: Optional[str] = None
    progress_percent: Optional[int] = None
    patient_notes: Optional[str] = None
    satisfaction_score: Optional[int] = None
    experience_rating: Optional[int] = None
    clinical_notes: Optional[str] = None
    outcomes: Optional[Any] = None
    complications: Optional[str] = None
    next_milestone: Optional[str] = None
    preparation_needed: Optional[Any] = None
    advice_given: Optional[str] = None
    was_remote: Optional[bool] = None
    remote_session_id: Optional[str] = None


class MilestoneUpdate(CamelModel):
    milestone_id: Optional[str] = None
    status: Optional[str] = None
    actual_date: Optional[str] = None
    progress_percent: Optional[int] = None
    patient_notes: Optional[str] = None
    satisfaction_score: Optional[int] = None
    experience_rating: Optional[int] = None
    clinical_notes: Optional[str] = None
    outcomes: Optional[Any] = None
    complications: Optional[str] = None


class PersonalizedTimelineRequest(CamelModel):
    patient_code: Optional[str] = None
    treatment_pathway: Optional[str] = None
    start_date: Optional[str] = None
    patient_preferences: Optional[dict[str, Any]] = None


class StoryBoardRequest(CamelModel):
    patient_code: Optional[str] = None


# ---------------------------------------------------------------------------
# Remote care / provider / choices
# ---------------------------------------------------------------------------

class RemoteCareSessionCreate(CamelModel):
    patient_code: Optional[str] = None
    session_type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    can_be_remote: Optional[bool] = None
    requires_in_person: Optional[bool] = None
    uploaded_files: Optional[Any] = None
    scheduled_date: Optional[str] = None
    priority: Optional[str] = None


class RemoteCareSessionUpdate(CamelModel):
    session_id: Optional[str] = None
    status: Optional[str] = None
    reviewed_by: Optional[str] = None
    provider_notes: Optional[str] = None
    recommendations: Optional[Any] = None
    follow_up_required: Optional[bool] = None
    follow_up_type: Optional[str] = None
    follow_up_date: Optional[str] = None
    priority: Optional[str] = None


class ProviderReviewCreate(CamelModel):
    patient_code: Optional[str] = None
    provider_id: Optional[str] = None
    provider_name: Optional[str] = None
    provider_role: Optional[str] = None
    review_type: Optional[str] = None
    title: Optional[str] = None
    findings: Optional[str] = None
    recommendations: Optional[str] = None
    reviewed_file_ids: Optional[list[str]] = None
    urgency_level: Optional[str] = None
    action_required: Optional[bool] = None
    action_items: Optional[list[str]] = None
    treatment_changes: Optional[bool] = None
    new_recommendations: Optional[Any] = None


class PatientChoiceRequest(CamelModel):
    patient_code: Optional[str] = None
    treatment_pathway_id: Optional[str] = None
    selected_option: Optional[str] = None
    choice_reason: Optional[Any] = None
    reasoning: Optional[str] = None
    confidence: Optional[int] = None
    cost_importance: Optional[int] = None
    timeline_importance: Optional[int] = None
    success_rate_importance: Optional[int] = None
    invasiveness_importance: Optional[int] = None
    alternatives_considered: Optional[Any] = None
    preferred_start_date: Optional[str] = None
    max_timeline_months: Optional[int] = None
    additional_concerns: Optional[str] = None
    partner_involvement: Optional[str] = None


# ---------------------------------------------------------------------------
# Wizard sessions
# ---------------------------------------------------------------------------

class WizardSessionCreate(CamelModel):
    patient_code: Optional[str] = None


class WizardProfileUpdate(CamelModel):
    section: Optional[str] = None
    data: dict[str, Any] = {}
