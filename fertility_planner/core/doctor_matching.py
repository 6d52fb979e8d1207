"""
Doctor Matching

Ranks a static roster of fertility doctors against a patient's stated
preferences using an additive point budget:

    gender           20  (10 neutral bonus when no preference is given)
    experience       25  exact, 15 for experienced <-> senior
    specialization   30  exact, 20 for a high-relevance fertility specialist
    distance         15  within radius, 8 within 1.5x radius
    insurance         5
    telemedicine      5

Scores are capped at 100.  Distance is a real haversine distance when the
patient supplies coordinates; otherwise it falls back to a postal-code
placeholder estimate (see estimate_postal_distance).
"""

import math
import random
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Optional

# Sample roster; a production deployment would query a medical directory.
DOCTOR_ROSTER: list[dict[str, Any]] = [
    {
        "doctorName": "Dr. Priya Sharma",
        "clinicName": "Mumbai Fertility Centre",
        "specialization": "reproductive_endocrinology",
        "gender": "female",
        "experience": "senior",
        "address": "Bandra West, Mumbai, Maharashtra 400050",
        "zipCode": "400050",
        "coordinates": {"lat": 19.0596, "lng": 72.8295},
        "phoneNumber": "+91-9876543210",
        "email": "dr.priya@mumbaifc.com",
        "website": "https://mumbaifc.com",
        "rating": 4.8,
        "reviewCount": 245,
        "acceptsInsurance": True,
        "averageWaitTime": "2-3 weeks",
        "offersTelemedicine": True,
        "virtualConsultFee": 1500,
        "consultationFee": 2500,
        "treatmentCosts": {
            "IUI": {"min": 15000, "max": 25000},
            "IVF": {"min": 150000, "max": 200000},
            "ICSI": {"min": 180000, "max": 250000},
        },
    },
    {
        "doctorName": "Dr. Rajesh Kumar",
        "clinicName": "Delhi IVF Institute",
        "specialization": "ivf_specialist",
        "gender": "male",
        "experience": "experienced",
        "address": "CP, New Delhi, Delhi 110001",
        "zipCode": "110001",
        "coordinates": {"lat": 28.6315, "lng": 77.2167},
        "phoneNumber": "+91-9876543211",
        "email": "dr.rajesh@delhiivf.com",
        "website": "https://delhiivf.com",
        "rating": 4.6,
        "reviewCount": 189,
        "acceptsInsurance": True,
        "averageWaitTime": "1-2 weeks",
        "offersTelemedicine": True,
        "virtualConsultFee": 1200,
        "consultationFee": 2000,
        "treatmentCosts": {
            "IUI": {"min": 12000, "max": 20000},
            "IVF": {"min": 140000, "max": 180000},
            "ICSI": {"min": 170000, "max": 220000},
        },
    },
    {
        "doctorName": "Dr. Anita Desai",
        "clinicName": "Bangalore Reproductive Health",
        "specialization": "gynecologist",
        "gender": "female",
        "experience": "experienced",
        "address": "Koramangala, Bangalore, Karnataka 560034",
        "zipCode": "560034",
        "coordinates": {"lat": 12.9352, "lng": 77.6245},
        "phoneNumber": "+91-9876543212",
        "email": "dr.anita@bangalorerepro.com",
        "website": "https://bangalorerepro.com",
        "rating": 4.7,
        "reviewCount": 156,
        "acceptsInsurance": False,
        "averageWaitTime": "3-4 weeks",
        "offersTelemedicine": False,
        "virtualConsultFee": None,
        "consultationFee": 1800,
        "treatmentCosts": {
            "IUI": {"min": 10000, "max": 18000},
            "IVF": {"min": 120000, "max": 160000},
            "ICSI": {"min": 150000, "max": 200000},
        },
    },
    {
        "doctorName": "Dr. Suresh Patel",
        "clinicName": "Ahmedabad Fertility Solutions",
        "specialization": "urologist",
        "gender": "male",
        "experience": "senior",
        "address": "Satellite, Ahmedabad, Gujarat 380015",
        "zipCode": "380015",
        "coordinates": {"lat": 23.0300, "lng": 72.5170},
        "phoneNumber": "+91-9876543213",
        "email": "dr.suresh@ahmedabadfertility.com",
        "website": "https://ahmedabadfertility.com",
        "rating": 4.5,
        "reviewCount": 98,
        "acceptsInsurance": True,
        "averageWaitTime": "1 week",
        "offersTelemedicine": True,
        "virtualConsultFee": 1000,
        "consultationFee": 1500,
        "treatmentCosts": {
            "consultation": {"min": 1500, "max": 2000},
            "procedures": {"min": 50000, "max": 100000},
        },
    },
    {
        "doctorName": "Dr. Meera Nair",
        "clinicName": "Chennai Advanced Fertility",
        "specialization": "fertility_counselor",
        "gender": "female",
        "experience": "junior",
        "address": "T. Nagar, Chennai, Tamil Nadu 600017",
        "zipCode": "600017",
        "coordinates": {"lat": 13.0418, "lng": 80.2341},
        "phoneNumber": "+91-9876543214",
        "email": "dr.meera@chennaifertility.com",
        "website": "https://chennaifertility.com",
        "rating": 4.4,
        "reviewCount": 67,
        "acceptsInsurance": False,
        "averageWaitTime": "1-2 weeks",
        "offersTelemedicine": True,
        "virtualConsultFee": 800,
        "consultationFee": 1200,
        "treatmentCosts": {
            "counseling": {"min": 1200, "max": 1500},
            "therapy": {"min": 2000, "max": 3000},
        },
    },
]

HIGH_RELEVANCE_SPECIALIZATIONS = {"reproductive_endocrinology", "ivf_specialist"}
ADJACENT_EXPERIENCE = {("experienced", "senior"), ("senior", "experienced")}
NO_PREFERENCE = "no_preference"
EARTH_RADIUS_KM = 6371.0
SCORE_TIE_BAND = 5


@dataclass
class DoctorPreferences:
    """What the patient asked for; every field is optional."""

    preferred_gender: Optional[str] = None
    experience_level: Optional[str] = None
    specialization: Optional[str] = None
    max_distance: Optional[float] = None
    accepts_insurance: Optional[bool] = None
    offers_telemedicine: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "preferredGender": self.preferred_gender,
            "experienceLevel": self.experience_level,
            "specialization": self.specialization,
            "maxDistance": self.max_distance,
            "acceptsInsurance": self.accepts_insurance,
            "offersTelemedicine": self.offers_telemedicine,
        }


def calculate_match_score(
    doctor: dict[str, Any],
    preferences: DoctorPreferences,
) -> tuple[int, list[str]]:
    """Score one doctor against the patient's preferences.

    Args:
        doctor: Roster entry, optionally carrying a computed "distance".
        preferences: The patient's preferences.

    Returns:
        (score capped at 100, human-readable reasons for each award)
    """
    score = 0
    reasons: list[str] = []

    gender = preferences.preferred_gender
    if gender and gender != NO_PREFERENCE:
        if doctor.get("gender") == gender:
            score += 20
            reasons.append(f"Matches preferred gender ({gender})")
    else:
        score += 10

    level = preferences.experience_level
    if level:
        if doctor.get("experience") == level:
            score += 25
            reasons.append(f"Matches experience level ({level})")
        elif (level, doctor.get("experience")) in ADJACENT_EXPERIENCE:
            score += 15
            reasons.append("Close match for experience level")

    wanted = preferences.specialization
    if wanted:
        if doctor.get("specialization") == wanted:
            score += 30
            reasons.append(f"Exact specialization match ({wanted})")
        elif doctor.get("specialization") in HIGH_RELEVANCE_SPECIALIZATIONS:
            score += 20
            reasons.append("High-relevance fertility specialist")

    distance = doctor.get("distance")
    if preferences.max_distance and distance is not None:
        if distance <= preferences.max_distance:
            score += 15
            reasons.append(f"Within preferred distance ({distance:.1f}km)")
        elif distance <= preferences.max_distance * 1.5:
            score += 8
            reasons.append("Reasonably close to preferred distance")

    if preferences.accepts_insurance and doctor.get("acceptsInsurance"):
        score += 5
        reasons.append("Accepts insurance")

    if preferences.offers_telemedicine and doctor.get("offersTelemedicine"):
        score += 5
        reasons.append("Offers telemedicine consultations")

    return min(score, 100), reasons


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lng2 - lng1)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def estimate_postal_distance(
    zip_a: str,
    zip_b: str,
    rng: Optional[random.Random] = None,
) -> float:
    """Placeholder distance from the numeric gap between two postal codes.

    This is NOT a geodesic: the absolute difference of the codes selects a
    bucket and a random value is drawn inside it.  Used only when the patient
    gives no coordinates.
    """
    rng = rng or random.Random()
    try:
        diff = abs(int(zip_a) - int(zip_b))
    except (TypeError, ValueError):
        diff = math.inf

    if diff < 10:
        return rng.random() * 5 + 1      # 1-6 km
    if diff < 100:
        return rng.random() * 15 + 5     # 5-20 km
    if diff < 1000:
        return rng.random() * 50 + 20    # 20-70 km
    return rng.random() * 200 + 100      # 100-300 km


def estimate_distance(
    zip_code: str,
    doctor: dict[str, Any],
    coordinates: Optional[dict[str, float]] = None,
    rng: Optional[random.Random] = None,
) -> float:
    """Distance from the patient to a doctor's clinic in kilometres."""
    clinic = doctor.get("coordinates")
    if coordinates and clinic:
        return haversine_km(
            coordinates["lat"], coordinates["lng"], clinic["lat"], clinic["lng"]
        )
    return estimate_postal_distance(zip_code, doctor.get("zipCode", ""), rng)


def _compare(a: dict[str, Any], b: dict[str, Any]) -> float:
    # Close scores: nearer doctor first; otherwise higher score first
    if abs(a["matchScore"] - b["matchScore"]) < SCORE_TIE_BAND:
        return a["distance"] - b["distance"]
    return b["matchScore"] - a["matchScore"]


def rank_doctors(
    zip_code: str,
    preferences: DoctorPreferences,
    coordinates: Optional[dict[str, float]] = None,
    rng: Optional[random.Random] = None,
    limit: int = 10,
    roster: Optional[list[dict[str, Any]]] = None,
) -> list[dict[str, Any]]:
    """Score, sort and truncate the roster for one search.

    Args:
        zip_code: The patient's postal code.
        preferences: The patient's preferences.
        coordinates: Optional {"lat", "lng"} of the patient.
        rng: Random source for the postal-code placeholder distance.
        limit: Maximum number of doctors to return.
        roster: Doctors to rank (defaults to DOCTOR_ROSTER).

    Returns:
        Copies of the roster entries with distance, matchScore and
        matchReasons added, best match first.
    """
    ranked = []
    for doctor in roster if roster is not None else DOCTOR_ROSTER:
        enriched = dict(doctor)
        enriched["distance"] = estimate_distance(zip_code, doctor, coordinates, rng)
        score, reasons = calculate_match_score(enriched, preferences)
        enriched["matchScore"] = score
        enriched["matchReasons"] = reasons
        ranked.append(enriched)

    ranked.sort(key=cmp_to_key(_compare))
    return ranked[:limit]
