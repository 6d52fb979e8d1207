"""
Personalized Timeline Prompts

Prompt used by the timeline workflow and the two-phase skeleton returned
when the model is unavailable.
"""

import json

TIMELINE_TEMPLATE = """Generate a detailed, personalized fertility treatment \
timeline for:

Treatment Path: {pathway}
Patient Profile: {profile}
Patient Choice Details: {choice}

Create a comprehensive timeline with:
1. Multiple phases (preparation, treatment cycles, monitoring, follow-up)
2. Specific milestones with dates
3. Patient-specific advice for each phase
4. Preparation requirements
5. Recovery guidance

Consider:
- Patient age and medical history
- Chosen treatment preferences
- Timeline preferences
- Specific concerns mentioned

Return structured JSON with:
{{
  "total_duration": "3-4 months",
  "phases": [
    {{
      "phase_name": "Preparation Phase",
      "duration": "2-3 weeks",
      "start_offset_days": 0,
      "tasks": [
        {{
          "task": "Initial consultation",
          "timeline": "Day 1-3",
          "category": "consultation",
          "can_be_remote": false,
          "preparation": ["Bring medical records", "List current medications"],
          "what_to_expect": "Detailed discussion of treatment plan"
        }}
      ],
      "advice": "Focus on lifestyle optimization during this phase"
    }}
  ],
  "milestones": [
    {{"milestone": "Treatment Start", "expected_day": 21, "category": "treatment", \
"importance": "high"}}
  ],
  "phase_advice": {{
    "preparation": "Tips for preparation phase",
    "treatment": "Tips for treatment phase",
    "recovery": "Tips for recovery"
  }},
  "personalized_tips": ["Based on your age, consider..."]
}}

Respond with raw JSON only."""


def build_timeline_prompt(pathway: str, profile: dict, choice: dict | None) -> str:
    return TIMELINE_TEMPLATE.format(
        pathway=pathway,
        profile=json.dumps(profile, default=str),
        choice=json.dumps(choice, default=str),
    )


def timeline_fallback(pathway: str) -> dict:
    """Generic preparation + treatment skeleton for the chosen pathway."""
    return {
        "total_duration": "3-4 months",
        "phases": [
            {
                "phase_name": "Preparation Phase",
                "duration": "2-3 weeks",
                "start_offset_days": 0,
                "tasks": [
                    {
                        "task": "Initial consultation and assessment",
                        "timeline": "Week 1",
                        "category": "consultation",
                        "can_be_remote": False,
                        "preparation": [
                            "Gather medical records",
                            "List current medications",
                        ],
                        "what_to_expect": "Comprehensive fertility assessment",
                    }
                ],
                "advice": "Focus on optimizing health and preparing for treatment",
            },
            {
                "phase_name": f"{pathway} Treatment Phase",
                "duration": "4-6 weeks",
                "start_offset_days": 21,
                "tasks": [
                    {
                        "task": "Begin treatment protocol",
                        "timeline": "Week 4",
                        "category": "treatment",
                        "can_be_remote": False,
                        "preparation": [
                            "Follow medication schedule",
                            "Attend monitoring appointments",
                        ],
                        "what_to_expect": "Regular monitoring and treatment procedures",
                    }
                ],
                "advice": (
                    "Maintain medication schedule and attend all monitoring "
                    "appointments"
                ),
            },
        ],
        "milestones": [
            {
                "milestone": "Treatment Start",
                "expected_day": 21,
                "category": "treatment",
                "importance": "high",
            },
            {
                "milestone": "Pregnancy Test",
                "expected_day": 70,
                "category": "test",
                "importance": "high",
            },
        ],
        "phase_advice": {
            "preparation": (
                "Use this time to optimize your health and prepare mentally "
                "for treatment"
            ),
            "treatment": (
                "Stay consistent with medications and communicate any concerns "
                "with your team"
            ),
            "recovery": (
                "Allow time for physical and emotional recovery regardless of "
                "outcome"
            ),
        },
        "personalized_tips": [
            "Timeline generated successfully but AI customization temporarily unavailable",
            "Please consult with your healthcare provider for personalized advice",
        ],
    }
