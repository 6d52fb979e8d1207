"""
Patients Router

POST /save-patient-record   - Upsert the profile and replace stored pathways.
GET  /patients/{code}       - Stored patient with pathways.
POST /calculate-pathways    - Rank treatment pathways for a profile (no storage).
POST /toggle-interface-mode - Switch a patient between patient and doctor views.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fertility_planner.core import patient_db
from fertility_planner.core.database import get_db
from fertility_planner.core.errors import BadRequestError, require
from fertility_planner.core.pathway_calculator import calculate_treatment_pathways
from fertility_planner.models.schemas import (
    CalculatePathwaysRequest,
    InterfaceModeRequest,
    SavePatientRecordRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

INTERFACE_MODES = ("patient", "doctor")


@router.post("/save-patient-record")
def save_patient_record(
    body: SavePatientRecordRequest,
    db: Session = Depends(get_db),
) -> dict:
    """Persist the wizard profile.

    Pathways sent by the client are stored as given; when none are sent they
    are computed server-side, so a saved patient always has a ranked list.
    """
    profile = require(
        body.patient_profile, "Patient profile is required", "MISSING_PATIENT_PROFILE"
    )
    require(profile.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")

    patient = patient_db.upsert_patient(db, profile)
    pathways = body.treatment_pathways or calculate_treatment_pathways(profile)
    patient_db.replace_pathways(db, patient, pathways)
    db.commit()

    logger.info("Saved patient %s with %d pathways", patient.patient_code, len(pathways))
    return {
        "success": True,
        "patientId": patient.id,
        "patientCode": patient.patient_code,
        "pathwaysSaved": len(pathways),
        "message": "Patient record saved successfully",
    }


@router.get("/patients/{patient_code}")
def get_patient(patient_code: str, db: Session = Depends(get_db)) -> dict:
    patient = patient_db.require_patient(db, patient_code)
    return {
        "success": True,
        "patient": patient.to_dict(),
        "profile": patient_db.profile_from_patient(patient).model_dump(by_alias=True),
        "pathways": [p.to_dict() for p in patient.pathways],
    }


@router.post("/calculate-pathways")
def calculate_pathways(body: CalculatePathwaysRequest) -> dict:
    profile = require(
        body.patient_profile, "Patient profile is required", "MISSING_PATIENT_PROFILE"
    )
    pathways = calculate_treatment_pathways(profile)
    return {
        "success": True,
        "pathways": [p.model_dump(by_alias=True) for p in pathways],
    }


@router.post("/toggle-interface-mode")
def toggle_interface_mode(
    body: InterfaceModeRequest,
    db: Session = Depends(get_db),
) -> dict:
    code = require(body.patient_code, "Patient code is required", "MISSING_PATIENT_CODE")
    mode = require(body.interface_mode, "Interface mode is required", "MISSING_INTERFACE_MODE")
    if mode not in INTERFACE_MODES:
        raise BadRequestError(
            "Interface mode must be 'patient' or 'doctor'", "INVALID_INTERFACE_MODE"
        )

    patient = patient_db.require_patient(db, code)
    patient.interface_mode = mode
    db.commit()
    return {
        "success": True,
        "interfaceMode": patient.interface_mode,
        "message": f"Interface mode switched to {mode}",
    }
