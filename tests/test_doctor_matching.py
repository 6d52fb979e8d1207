"""Tests for doctor match scoring, distance estimation and ranking.

Run with:  python -m pytest tests/test_doctor_matching.py -v
"""

import random

import pytest

from fertility_planner.core.doctor_matching import (
    DOCTOR_ROSTER,
    DoctorPreferences,
    calculate_match_score,
    estimate_postal_distance,
    haversine_km,
    rank_doctors,
)

MUMBAI = {"lat": 19.0596, "lng": 72.8295}


def _doctor(**fields):
    base = {"doctorName": "Dr. Test", "zipCode": "400050"}
    base.update(fields)
    return base


# ── Match score ──────────────────────────────────────────────────────────
def test_no_preferences_gives_neutral_gender_bonus_only():
    score, reasons = calculate_match_score(_doctor(), DoctorPreferences())
    assert score == 10
    assert reasons == []


def test_no_preference_gender_value_is_neutral():
    prefs = DoctorPreferences(preferred_gender="no_preference")
    assert calculate_match_score(_doctor(gender="male"), prefs)[0] == 10


def test_gender_mismatch_earns_nothing():
    prefs = DoctorPreferences(preferred_gender="female")
    assert calculate_match_score(_doctor(gender="male"), prefs) == (0, [])


def test_full_match_capped_at_100():
    doctor = dict(DOCTOR_ROSTER[0], distance=3.0)
    prefs = DoctorPreferences(
        preferred_gender="female",
        experience_level="senior",
        specialization="reproductive_endocrinology",
        max_distance=50,
        accepts_insurance=True,
        offers_telemedicine=True,
    )
    score, reasons = calculate_match_score(doctor, prefs)
    assert score == 100
    assert len(reasons) == 6


@pytest.mark.parametrize("wanted,doctor_level,points", [
    ("experienced", "senior", 15),
    ("senior", "experienced", 15),
    ("senior", "senior", 25),
    ("junior", "senior", 0),
])
def test_experience_points(wanted, doctor_level, points):
    prefs = DoctorPreferences(preferred_gender="male", experience_level=wanted)
    score, _ = calculate_match_score(_doctor(gender="male", experience=doctor_level), prefs)
    assert score == 20 + points


@pytest.mark.parametrize("wanted,doctor_spec,points", [
    ("urologist", "urologist", 30),
    ("gynecologist", "ivf_specialist", 20),
    ("gynecologist", "reproductive_endocrinology", 20),
    ("gynecologist", "fertility_counselor", 0),
])
def test_specialization_points(wanted, doctor_spec, points):
    prefs = DoctorPreferences(specialization=wanted)
    score, _ = calculate_match_score(_doctor(specialization=doctor_spec), prefs)
    assert score == 10 + points


@pytest.mark.parametrize("distance,points", [
    (0.0, 15),
    (10.0, 15),
    (50.0, 15),
    (70.0, 8),
    (75.0, 8),
    (80.0, 0),
])
def test_distance_points(distance, points):
    prefs = DoctorPreferences(max_distance=50)
    score, _ = calculate_match_score(_doctor(distance=distance), prefs)
    assert score == 10 + points


def test_unknown_distance_earns_nothing():
    prefs = DoctorPreferences(max_distance=50)
    assert calculate_match_score(_doctor(), prefs) == (10, [])


def test_patient_at_the_clinic_gets_distance_points():
    prefs = DoctorPreferences(max_distance=50)
    ranked = rank_doctors("400050", prefs, coordinates=MUMBAI, limit=1)
    assert ranked[0]["doctorName"] == "Dr. Priya Sharma"
    assert ranked[0]["distance"] == 0
    assert ranked[0]["matchScore"] == 25
    assert ranked[0]["matchReasons"] == ["Within preferred distance (0.0km)"]


def test_insurance_and_telemedicine_need_both_sides():
    prefs = DoctorPreferences(accepts_insurance=True, offers_telemedicine=True)
    with_flags = _doctor(acceptsInsurance=True, offersTelemedicine=True)
    without = _doctor(acceptsInsurance=False, offersTelemedicine=False)
    assert calculate_match_score(with_flags, prefs)[0] == 20
    assert calculate_match_score(without, prefs)[0] == 10


# ── Distance ─────────────────────────────────────────────────────────────
def test_haversine_one_degree_of_longitude_at_equator():
    assert haversine_km(0, 0, 0, 1) == pytest.approx(111.19, abs=0.05)


def test_haversine_same_point_is_zero():
    assert haversine_km(MUMBAI["lat"], MUMBAI["lng"], MUMBAI["lat"], MUMBAI["lng"]) == 0


@pytest.mark.parametrize("zip_b,low,high", [
    ("400051", 1, 6),
    ("400080", 5, 20),
    ("400500", 20, 70),
    ("110001", 100, 300),
    ("not-a-zip", 100, 300),
])
def test_postal_distance_buckets(zip_b, low, high):
    rng = random.Random(42)
    for _ in range(20):
        assert low <= estimate_postal_distance("400050", zip_b, rng) <= high


# ── Ranking ──────────────────────────────────────────────────────────────
def test_rank_doctors_best_match_first():
    prefs = DoctorPreferences(
        preferred_gender="female",
        experience_level="senior",
        specialization="reproductive_endocrinology",
        max_distance=50,
    )
    ranked = rank_doctors("400050", prefs, coordinates=MUMBAI)
    assert ranked[0]["doctorName"] == "Dr. Priya Sharma"
    assert ranked[0]["distance"] == pytest.approx(0, abs=0.01)
    assert len(ranked) == len(DOCTOR_ROSTER)
    for doctor in ranked:
        assert 0 <= doctor["matchScore"] <= 100
        assert isinstance(doctor["matchReasons"], list)


def test_rank_doctors_does_not_mutate_roster():
    rank_doctors("400050", DoctorPreferences(), rng=random.Random(1))
    assert all("matchScore" not in d and "distance" not in d for d in DOCTOR_ROSTER)


def test_rank_doctors_limit():
    assert len(rank_doctors("400050", DoctorPreferences(), rng=random.Random(1), limit=2)) == 2


def test_close_scores_sorted_by_distance():
    far = _doctor(doctorName="Far", coordinates={"lat": 28.6, "lng": 77.2})
    near = _doctor(doctorName="Near", coordinates={"lat": 19.1, "lng": 72.8})
    ranked = rank_doctors("400050", DoctorPreferences(), coordinates=MUMBAI,
                          roster=[far, near])
    assert [d["doctorName"] for d in ranked] == ["Near", "Far"]


def test_clear_score_gap_beats_distance():
    far = _doctor(doctorName="Far", gender="female", coordinates={"lat": 28.6, "lng": 77.2})
    near = _doctor(doctorName="Near", gender="male", coordinates={"lat": 19.1, "lng": 72.8})
    prefs = DoctorPreferences(preferred_gender="female")
    ranked = rank_doctors("400050", prefs, coordinates=MUMBAI, roster=[near, far])
    assert [d["doctorName"] for d in ranked] == ["Far", "Near"]
