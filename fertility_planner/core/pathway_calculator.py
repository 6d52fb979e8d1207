"""
Treatment Pathway Calculator

Deterministic, rule-based scoring of the treatment catalogue
(IUI, FET, IVF/ICSI, IVF with PGT-A) against a patient profile.

For each modality:
  - success rate: fixed base rate, signed deltas for age thresholds and
    conditions, floored at a modality-specific minimum
  - suitability:  independent base score with its own deltas, clamped to 0-100
  - priority:     step function of suitability, used only for ordering

The point values are placeholder business rules, not clinical evidence.
"""

import re
from typing import Optional

from fertility_planner.models.schemas import PatientProfile, TreatmentPathwayOption

DEFAULT_AGE = 30

# Condition tags as sent by the intake form
PCOS = "pcos"
ENDOMETRIOSIS = "endometriosis"
BLOCKED_TUBES = "blockedTubes"
LOW_OVARIAN_RESERVE = "lowOvarianReserve"
FIBROIDS = "fibroids"

LONG_TIME_TRYING = "> 3 years"
HIGH_FINANCIAL_COMFORT = "> 300000"


def parse_age_bracket(value: Optional[str]) -> int:
    """Return the lower bound of an age bracket such as "30-34" or "> 42".

    Missing or unparseable values fall back to DEFAULT_AGE.
    """
    if not value:
        return DEFAULT_AGE
    match = re.search(r"\d+", value.split("-")[0])
    return int(match.group()) if match else DEFAULT_AGE


def suitability_priority(suitability: float) -> int:
    """Map a suitability score to a sort tier (1 sorts first)."""
    if suitability >= 80:
        return 1
    if suitability >= 60:
        return 2
    if suitability >= 40:
        return 3
    return 4


def _clamp(score: float) -> float:
    return max(min(score, 100), 0)


class _Inputs:
    """The handful of profile fields the rules look at."""

    def __init__(self, profile: PatientProfile) -> None:
        self.age = parse_age_bracket(profile.female_profile.age)
        self.conditions = set(profile.female_profile.conditions or [])
        self.time_trying = profile.couple_history.time_trying
        self.previous_ivf = profile.couple_history.previous_treatments == "ivf"
        self.financial_comfort = profile.holistic.financial_comfort


# ---------------------------------------------------------------------------
# Success rates
# ---------------------------------------------------------------------------

def _iui_success(p: _Inputs) -> float:
    rate = 15
    if p.age > 35:
        rate -= 5
    if p.age > 40:
        rate -= 5
    if PCOS in p.conditions:
        rate -= 2
    if ENDOMETRIOSIS in p.conditions:
        rate -= 3
    if BLOCKED_TUBES in p.conditions:
        rate -= 8
    if LOW_OVARIAN_RESERVE in p.conditions:
        rate -= 4
    if p.time_trying == LONG_TIME_TRYING:
        rate -= 3
    return max(rate, 5)


def _fet_success(p: _Inputs) -> float:
    rate = 45
    if p.age > 35:
        rate -= 5
    if p.age > 40:
        rate -= 10
    if ENDOMETRIOSIS in p.conditions:
        rate -= 5
    if FIBROIDS in p.conditions:
        rate -= 3
    return max(rate, 25)


def _ivf_success(p: _Inputs) -> float:
    rate = 50
    if p.age > 35:
        rate -= 10
    if p.age > 40:
        rate -= 15
    if p.age > 42:
        rate -= 10
    if LOW_OVARIAN_RESERVE in p.conditions:
        rate -= 10
    if ENDOMETRIOSIS in p.conditions:
        rate -= 5
    return max(rate, 20)


def _pgta_success(p: _Inputs) -> float:
    rate = 65
    if p.age > 35:
        rate -= 5
    if p.age > 40:
        rate -= 10
    if p.age > 42:
        rate -= 5
    return max(rate, 45)


# ---------------------------------------------------------------------------
# Suitability
# ---------------------------------------------------------------------------

def _iui_suitability(p: _Inputs) -> float:
    score = 70
    if p.age < 35:
        score += 10
    if BLOCKED_TUBES in p.conditions:
        score -= 30
    if LOW_OVARIAN_RESERVE in p.conditions:
        score -= 15
    if p.previous_ivf:
        score -= 20
    return _clamp(score)


def _fet_suitability(p: _Inputs) -> float:
    score = 85
    if p.age > 40:
        score -= 10
    if p.previous_ivf:
        score += 15
    return _clamp(score)


def _ivf_suitability(p: _Inputs) -> float:
    score = 80
    if p.age > 35:
        score += 10
    if BLOCKED_TUBES in p.conditions:
        score += 15
    if ENDOMETRIOSIS in p.conditions:
        score += 10
    if p.time_trying == LONG_TIME_TRYING:
        score += 10
    return _clamp(score)


def _pgta_suitability(p: _Inputs) -> float:
    score = 60
    if p.age > 35:
        score += 20
    if p.age > 40:
        score += 10
    if p.previous_ivf:
        score += 15
    if p.financial_comfort == HIGH_FINANCIAL_COMFORT:
        score += 10
    return _clamp(score)


# ---------------------------------------------------------------------------
# Recommendation text
# ---------------------------------------------------------------------------

def _iui_recommendation(p: _Inputs) -> str:
    if BLOCKED_TUBES in p.conditions:
        return "IUI may not be effective due to blocked tubes. Consider IVF."
    if p.age < 35 and LOW_OVARIAN_RESERVE not in p.conditions:
        return "Good candidate for IUI. Consider 3-4 cycles before moving to IVF."
    return (
        "IUI can be attempted, but success rates may be lower. Consider "
        "moving to IVF if unsuccessful after 2-3 cycles."
    )


def _fet_recommendation(p: _Inputs) -> str:
    return (
        "Excellent first choice to utilize existing embryos. Cost-effective "
        "with reasonable success rates."
    )


def _ivf_recommendation(p: _Inputs) -> str:
    if p.age > 40:
        return "Consider PGT-A to improve embryo selection and reduce miscarriage risk."
    return "Comprehensive treatment option with good success rates for your profile."


def _pgta_recommendation(p: _Inputs) -> str:
    if p.age > 35:
        return (
            "Strongly recommended to maximize success per transfer and reduce "
            "miscarriage risk."
        )
    return "Consider if multiple IVF failures or if wanting to minimize cycles needed."


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

_CATALOGUE = [
    {
        "name": "IUI (Intrauterine Insemination)",
        "description": (
            "A simple procedure where prepared sperm is placed directly in "
            "the uterus around the time of ovulation."
        ),
        "timeline": "1 month per attempt",
        "cost_min": 15000,
        "cost_max": 30000,
        "pros": ["Less invasive", "Lower cost", "Shorter timeline",
                 "Can be repeated multiple times"],
        "cons": ["Lower success rate", "May not address underlying issues",
                 "Multiple cycles may be needed"],
        "success": _iui_success,
        "suitability": _iui_suitability,
        "recommendation": _iui_recommendation,
        "requires_previous_ivf": False,
    },
    {
        "name": "FET (Frozen Embryo Transfer)",
        "description": "Transfer of previously frozen embryos from a previous IVF cycle.",
        "timeline": "1-2 months",
        "cost_min": 50000,
        "cost_max": 90000,
        "pros": ["Uses existing embryos", "Cost-effective",
                 "Less medication required", "Proven embryo quality"],
        "cons": ["Requires previous IVF cycle", "Embryos may not survive thawing",
                 "No genetic testing"],
        "success": _fet_success,
        "suitability": _fet_suitability,
        "recommendation": _fet_recommendation,
        "requires_previous_ivf": True,
    },
    {
        "name": "IVF/ICSI",
        "description": (
            "In vitro fertilization with intracytoplasmic sperm injection "
            "for optimal fertilization."
        ),
        "timeline": "2-3 months per cycle",
        "cost_min": 150000,
        "cost_max": 300000,
        "pros": ["Higher success rate", "Addresses multiple fertility issues",
                 "Can freeze extra embryos", "Comprehensive treatment"],
        "cons": ["More invasive", "Higher cost", "Requires hormone injections",
                 "Risk of multiple pregnancy"],
        "success": _ivf_success,
        "suitability": _ivf_suitability,
        "recommendation": _ivf_recommendation,
        "requires_previous_ivf": False,
    },
    {
        "name": "IVF with PGT-A",
        "description": (
            "IVF with preimplantation genetic testing to select "
            "chromosomally normal embryos."
        ),
        "timeline": "3-4 months per cycle",
        "cost_min": 250000,
        "cost_max": 400000,
        "pros": ["Highest success rate per transfer", "Reduces miscarriage risk",
                 "Genetic screening", "Single embryo transfer"],
        "cons": ["Most expensive", "Longest timeline", "Complex process",
                 "May require multiple cycles"],
        "success": _pgta_success,
        "suitability": _pgta_suitability,
        "recommendation": _pgta_recommendation,
        "requires_previous_ivf": False,
    },
]


def calculate_treatment_pathways(
    profile: PatientProfile,
) -> list[TreatmentPathwayOption]:
    """Score every applicable modality for a patient and rank them.

    FET is only offered when the couple has already been through IVF.
    The list is ordered by priority tier (ascending), ties broken by
    suitability (descending).  Missing profile fields never raise; they
    simply contribute nothing.

    Args:
        profile: The (possibly partial) patient profile.

    Returns:
        Ranked list of TreatmentPathwayOption.
    """
    inputs = _Inputs(profile)
    pathways: list[TreatmentPathwayOption] = []

    for entry in _CATALOGUE:
        if entry["requires_previous_ivf"] and not inputs.previous_ivf:
            continue
        suitability = entry["suitability"](inputs)
        pathways.append(
            TreatmentPathwayOption(
                name=entry["name"],
                description=entry["description"],
                success_rate=_clamp(entry["success"](inputs)),
                timeline=entry["timeline"],
                cost_min=entry["cost_min"],
                cost_max=entry["cost_max"],
                suitability=suitability,
                pros=list(entry["pros"]),
                cons=list(entry["cons"]),
                priority=suitability_priority(suitability),
                recommendation=entry["recommendation"](inputs),
            )
        )

    return sorted(pathways, key=lambda p: (p.priority, -p.suitability))
