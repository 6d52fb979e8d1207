"""
Doctors Router

POST /find-doctors - Rank the doctor roster for a patient's preferences,
store the results as recommendation snapshots, and remember the search
on the patient record.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fertility_planner.config import settings
from fertility_planner.core import patient_db
from fertility_planner.core.database import get_db
from fertility_planner.core.doctor_matching import DoctorPreferences, rank_doctors
from fertility_planner.core.errors import require
from fertility_planner.models.records import DoctorRecommendation, utcnow
from fertility_planner.models.schemas import FindDoctorsRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _snapshot(patient_id: str, doctor: dict) -> DoctorRecommendation:
    return DoctorRecommendation(
        patient_id=patient_id,
        doctor_name=doctor["doctorName"],
        clinic_name=doctor.get("clinicName"),
        specialization=doctor.get("specialization"),
        gender=doctor.get("gender"),
        experience=doctor.get("experience"),
        address=doctor.get("address"),
        zip_code=doctor.get("zipCode"),
        distance=doctor["distance"],
        phone_number=doctor.get("phoneNumber"),
        email=doctor.get("email"),
        website=doctor.get("website"),
        rating=doctor.get("rating"),
        review_count=doctor.get("reviewCount", 0),
        accepts_insurance=bool(doctor.get("acceptsInsurance")),
        average_wait_time=doctor.get("averageWaitTime"),
        offers_telemedicine=bool(doctor.get("offersTelemedicine")),
        virtual_consult_fee=doctor.get("virtualConsultFee"),
        consultation_fee=doctor.get("consultationFee"),
        treatment_costs=doctor.get("treatmentCosts"),
        match_score=doctor["matchScore"],
        match_reason="; ".join(doctor["matchReasons"]),
    )


@router.post("/find-doctors")
def find_doctors(body: FindDoctorsRequest, db: Session = Depends(get_db)) -> dict:
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    zip_code = require(
        body.zip_code,
        "Zip code is required for location-based recommendations",
        "MISSING_ZIP_CODE",
    )
    patient = patient_db.require_patient(db, code)

    preferences = DoctorPreferences(
        preferred_gender=body.preferred_gender,
        experience_level=body.experience_level,
        specialization=body.specialization,
        max_distance=(
            body.max_distance
            if body.max_distance is not None
            else settings.DEFAULT_SEARCH_RADIUS_KM
        ),
        accepts_insurance=body.accepts_insurance,
        offers_telemedicine=body.offers_telemedicine,
    )
    coordinates = body.coordinates.model_dump() if body.coordinates else None

    recommendations = rank_doctors(
        zip_code,
        preferences,
        coordinates=coordinates,
        limit=settings.DOCTOR_RESULT_LIMIT,
    )
    db.add_all([_snapshot(patient.id, doctor) for doctor in recommendations])

    search_criteria = {"zipCode": zip_code, **preferences.to_dict()}
    patient.zip_code = zip_code
    patient.preferred_gender = preferences.preferred_gender
    patient.experience_level = preferences.experience_level
    patient.specialization = preferences.specialization
    patient.location_data = {
        "zipCode": zip_code,
        "coordinates": coordinates,
        "searchRadius": preferences.max_distance,
        "lastSearched": utcnow().isoformat(),
        "preferences": {
            k: v for k, v in search_criteria.items() if k not in ("zipCode", "maxDistance")
        },
    }
    db.commit()

    logger.info("find-doctors: %d results for %s", len(recommendations), code)
    return {
        "success": True,
        "recommendations": recommendations,
        "searchCriteria": search_criteria,
        "message": (
            f"Found {len(recommendations)} doctor recommendations based on "
            "your preferences"
        ),
    }
