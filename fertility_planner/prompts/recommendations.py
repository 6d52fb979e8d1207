"""
Clinical Recommendation Prompts

User prompt for the recommendation endpoint plus the fixed sample list
returned when the model cannot be used.
"""

RECOMMENDATIONS_TEMPLATE = """Based on the following patient fertility profile, \
generate personalized clinical recommendations:

Patient Profile:
- Female Age: {female_age}
- Menstrual Cycle: {female_cycle}
- Female Medical Conditions: {female_conditions}
- Male Age: {male_age}
- Male Medical Conditions: {male_conditions}
- Time Trying to Conceive: {time_trying}
- Previous Treatments: {previous_treatments}
- Emotional State: {emotional_state}
- Financial Comfort: {financial_comfort}

Generate clinical recommendations in the following categories:
1. Additional Tests - What new tests or updated tests should be considered?
2. Lifestyle Recommendations - Diet, exercise, supplements, stress management
3. Treatment Considerations - Specific treatment approaches based on the profile

For each recommendation, include:
- category (additional_tests | lifestyle | treatment_considerations)
- title (concise)
- description (detailed explanation)
- priority (high/medium/low)
- reasoning (clinical reasoning)

Respond with ONLY this JSON structure:
{{"recommendations": [{{"category": "...", "title": "...", "description": "...", \
"priority": "...", "reasoning": "..."}}]}}"""

_NOT_SPECIFIED = "Not specified"

SAMPLE_RECOMMENDATIONS = [
    {
        "id": "1",
        "category": "additional_tests",
        "title": "Updated Hormone Panel",
        "description": (
            "Consider fresh AMH, FSH, and thyroid function tests as hormone "
            "levels can change over time."
        ),
        "priority": "high",
        "source": "ai_analysis",
        "isActionable": True,
    },
    {
        "id": "2",
        "category": "lifestyle",
        "title": "Fertility Optimization Protocol",
        "description": (
            "Ensure folic acid supplementation (400-800 mcg daily), maintain "
            "healthy BMI, and consider CoQ10 supplementation."
        ),
        "priority": "medium",
        "source": "clinical_guidelines",
        "isActionable": True,
    },
    {
        "id": "3",
        "category": "treatment_considerations",
        "title": "Treatment Strategy Discussion",
        "description": (
            "Based on patient profile, discuss appropriate treatment options "
            "including timing and approach."
        ),
        "priority": "high",
        "source": "ai_analysis",
        "isActionable": True,
    },
]


def _joined(values) -> str:
    return ", ".join(values) if values else "None specified"


def build_recommendations_prompt(profile) -> str:
    """Fill the recommendation template from a PatientProfile."""
    female = profile.female_profile
    male = profile.male_profile
    return RECOMMENDATIONS_TEMPLATE.format(
        female_age=female.age or _NOT_SPECIFIED,
        female_cycle=female.cycle or _NOT_SPECIFIED,
        female_conditions=_joined(female.conditions),
        male_age=male.age or _NOT_SPECIFIED,
        male_conditions=_joined(male.conditions),
        time_trying=profile.couple_history.time_trying or _NOT_SPECIFIED,
        previous_treatments=profile.couple_history.previous_treatments or "None",
        emotional_state=profile.holistic.emotional_state or _NOT_SPECIFIED,
        financial_comfort=profile.holistic.financial_comfort or _NOT_SPECIFIED,
    )
