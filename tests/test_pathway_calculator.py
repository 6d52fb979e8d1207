"""Tests for the rule-based treatment pathway scorer.

Run with:  python -m pytest tests/test_pathway_calculator.py -v
"""

import pytest

from fertility_planner.core.pathway_calculator import (
    calculate_treatment_pathways,
    parse_age_bracket,
    suitability_priority,
)
from fertility_planner.models.schemas import PatientProfile

IUI = "IUI (Intrauterine Insemination)"
FET = "FET (Frozen Embryo Transfer)"
IVF = "IVF/ICSI"
PGTA = "IVF with PGT-A"


def _profile(age=None, conditions=(), previous=None, time_trying=None, financial=None):
    return PatientProfile.model_validate({
        "femaleProfile": {"age": age, "conditions": list(conditions)},
        "coupleHistory": {"timeTrying": time_trying, "previousTreatments": previous},
        "holistic": {"financialComfort": financial},
    })


def _by_name(pathways):
    return {p.name: p for p in pathways}


# ── Age brackets ─────────────────────────────────────────────────────────
@pytest.mark.parametrize("value,expected", [
    ("30-34", 30),
    ("25-29", 25),
    ("> 42", 42),
    ("40-42", 40),
    (None, 30),
    ("", 30),
    ("unknown", 30),
])
def test_parse_age_bracket(value, expected):
    assert parse_age_bracket(value) == expected


@pytest.mark.parametrize("suitability,tier", [
    (100, 1), (80, 1), (79.9, 2), (60, 2), (59, 3), (40, 3), (39, 4), (0, 4),
])
def test_suitability_priority(suitability, tier):
    assert suitability_priority(suitability) == tier


# ── Catalogue membership ─────────────────────────────────────────────────
@pytest.mark.parametrize("previous,has_fet", [
    ("ivf", True),
    ("iui", False),
    ("none", False),
    (None, False),
])
def test_fet_offered_only_after_ivf(previous, has_fet):
    names = [p.name for p in calculate_treatment_pathways(_profile(previous=previous))]
    assert (FET in names) is has_fet
    assert len(names) == (4 if has_fet else 3)


def test_empty_profile_never_raises():
    pathways = calculate_treatment_pathways(PatientProfile())
    assert [p.name for p in pathways] == [IUI, IVF, PGTA]


# ── Scores ───────────────────────────────────────────────────────────────
def test_default_profile_scores():
    scored = _by_name(calculate_treatment_pathways(_profile(age="30-34")))
    assert scored[IUI].success_rate == 15
    assert scored[IUI].suitability == 80
    assert scored[IVF].success_rate == 50
    assert scored[IVF].suitability == 80
    assert scored[PGTA].success_rate == 65
    assert scored[PGTA].suitability == 60
    assert scored[PGTA].priority == 2


def test_oldest_bracket_with_low_reserve_hits_ivf_floor():
    scored = _by_name(calculate_treatment_pathways(
        _profile(age="> 42", conditions=["lowOvarianReserve"])
    ))
    assert scored[IVF].success_rate == 20
    assert scored[PGTA].success_rate == 45
    assert scored[IUI].success_rate == 5


def test_blocked_tubes_steers_away_from_iui():
    scored = _by_name(calculate_treatment_pathways(
        _profile(age="30-34", conditions=["blockedTubes"])
    ))
    assert scored[IUI].suitability == 50
    assert scored[IUI].success_rate == 7
    assert "blocked tubes" in scored[IUI].recommendation
    assert scored[IVF].suitability == 95


def test_scores_clamped_to_percentage_range():
    profiles = [
        _profile(age="> 42", previous="ivf", financial="> 300000"),
        _profile(age="> 42", conditions=["blockedTubes", "lowOvarianReserve",
                                         "endometriosis", "pcos", "fibroids"],
                 previous="ivf", time_trying="> 3 years"),
        _profile(age="18-24", conditions=["endometriosis", "blockedTubes"],
                 time_trying="> 3 years"),
    ]
    for profile in profiles:
        for p in calculate_treatment_pathways(profile):
            assert 0 <= p.suitability <= 100, p.name
            assert 0 <= p.success_rate <= 100, p.name


def test_pgta_suitability_capped_at_100():
    scored = _by_name(calculate_treatment_pathways(
        _profile(age="> 42", previous="ivf", financial="> 300000")
    ))
    assert scored[PGTA].suitability == 100


# ── Ordering ─────────────────────────────────────────────────────────────
def test_ranked_by_tier_then_suitability():
    pathways = calculate_treatment_pathways(_profile(age="> 42", previous="ivf"))
    assert [p.name for p in pathways] == [PGTA, FET, IVF, IUI]
    keys = [(p.priority, -p.suitability) for p in pathways]
    assert keys == sorted(keys)


def test_older_patient_ivf_recommendation_mentions_pgta():
    scored = _by_name(calculate_treatment_pathways(_profile(age="> 42")))
    assert scored[IVF].recommendation.startswith("Consider PGT-A")
