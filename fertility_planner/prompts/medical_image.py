"""
Medical Image Analysis Prompts

One vision prompt per upload category, each asking for a fixed JSON shape,
and a matching placeholder analysis used when the model cannot answer.
"""

_RAW_JSON = "Respond with raw JSON only. Use this structure:"

ULTRASOUND_PROMPT = f"""Analyze this ultrasound scan image for fertility assessment. \
Extract and provide:

1. Antral Follicle Count (AFC) - count visible follicles on both ovaries
2. Endometrial thickness - measure in millimeters if visible
3. Follicle sizes - measure individual follicles in millimeters
4. Ovarian volume - estimate if possible
5. Any abnormalities or notable findings
6. Overall assessment of ovarian reserve
7. Date of scan if visible
8. Any text or annotations visible in the image

{_RAW_JSON}
{{
  "afc_left": "number or 'not visible'",
  "afc_right": "number or 'not visible'",
  "afc_total": "number or 'not visible'",
  "endometrial_thickness": "measurement in mm or 'not visible'",
  "follicle_sizes": ["list of sizes in mm"],
  "ovarian_volume": "estimate or 'not visible'",
  "abnormalities": "description or 'none noted'",
  "overall_assessment": "description",
  "scan_date": "date if visible or null",
  "visible_text": "any text visible in image",
  "quality_assessment": "good/fair/poor",
  "confidence": "0.0 to 1.0"
}}"""

SPERM_ANALYSIS_PROMPT = f"""Analyze this sperm analysis image/microscopy and provide:

1. Sperm morphology assessment
2. Motility patterns observed
3. Concentration estimation
4. Overall quality grading
5. Any specific observations

{_RAW_JSON}
{{
  "morphology_normal_percent": "percentage or 'not visible'",
  "motility_grade_a": "percentage or 'not visible'",
  "motility_grade_b": "percentage or 'not visible'",
  "motility_grade_c": "percentage or 'not visible'",
  "motility_grade_d": "percentage or 'not visible'",
  "concentration": "count per ml or 'not visible'",
  "volume": "ml or 'not visible'",
  "overall_grade": "excellent/good/fair/poor",
  "who_reference_comparison": "above/below reference values",
  "abnormalities": "description or 'none noted'",
  "recommendations": "clinical recommendations",
  "confidence": "0.0 to 1.0"
}}"""

EMBRYO_IMAGE_PROMPT = f"""Analyze this embryo image for grading and assessment:

1. Embryo development stage
2. ICM (Inner Cell Mass) quality
3. Trophectoderm quality
4. Cell count and symmetry
5. Fragmentation assessment
6. Overall viability

{_RAW_JSON}
{{
  "development_stage": "day 3/day 5/blastocyst/etc",
  "icm_grade": "A/B/C or not applicable",
  "trophectoderm_grade": "A/B/C or not applicable",
  "overall_grade": "combined grade like 4AA",
  "cell_count": "number or estimate",
  "symmetry": "excellent/good/fair/poor",
  "fragmentation": "percentage or description",
  "expansion": "rating if blastocyst",
  "viability_assessment": "excellent/good/fair/poor",
  "implantation_potential": "high/medium/low",
  "recommendations": "clinical recommendations",
  "confidence": "0.0 to 1.0"
}}"""

LAB_RESULTS_PROMPT = f"""Analyze this laboratory results image and extract:

1. All numerical values and their units
2. Reference ranges where visible
3. Test names and categories
4. Date of testing
5. Any abnormal results

{_RAW_JSON}
{{
  "test_date": "date if visible",
  "lab_values": [
    {{
      "test_name": "name",
      "value": "numerical value",
      "unit": "unit",
      "reference_range": "range if visible",
      "status": "normal/high/low"
    }}
  ],
  "abnormal_results": ["list of abnormal findings"],
  "overall_assessment": "description",
  "recommendations": "clinical recommendations",
  "confidence": "0.0 to 1.0"
}}"""

GENERIC_IMAGE_PROMPT = f"""Analyze this medical image and provide relevant clinical \
observations for fertility treatment planning.

{_RAW_JSON}
{{
  "image_type": "identified type",
  "key_findings": ["list of important findings"],
  "measurements": "any measurements visible",
  "abnormalities": "any abnormalities noted",
  "clinical_relevance": "relevance to fertility treatment",
  "recommendations": "next steps or recommendations",
  "confidence": "0.0 to 1.0"
}}"""

IMAGE_PROMPTS = {
    "ultrasound": ULTRASOUND_PROMPT,
    "sperm_analysis": SPERM_ANALYSIS_PROMPT,
    "embryo_image": EMBRYO_IMAGE_PROMPT,
    "lab_results": LAB_RESULTS_PROMPT,
}

SUPPORTED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/bmp",
}

_UNAVAILABLE = "AI analysis temporarily unavailable"
_PENDING = "Analysis pending - image uploaded successfully"

_FALLBACKS = {
    "ultrasound": {
        "afc_total": _PENDING,
        "endometrial_thickness": "Please review manually",
        "overall_assessment": "Image uploaded and saved for manual review",
        "quality_assessment": "good",
    },
    "sperm_analysis": {
        "overall_grade": _PENDING,
        "who_reference_comparison": "Please review manually",
        "recommendations": "Image uploaded and saved for manual review",
    },
    "embryo_image": {
        "development_stage": _PENDING,
        "viability_assessment": "Please review manually",
        "recommendations": "Image uploaded and saved for manual review",
    },
    "lab_results": {
        "lab_values": [],
        "overall_assessment": _PENDING,
        "recommendations": "Please review manually and enter values",
    },
}

_GENERIC_FALLBACK = {
    "image_type": "Medical image",
    "key_findings": ["Image uploaded successfully"],
    "clinical_relevance": "Please review manually",
    "recommendations": "Manual review recommended",
}


def image_prompt_for(category: str) -> str:
    return IMAGE_PROMPTS.get(category, GENERIC_IMAGE_PROMPT)


def image_fallback_for(category: str) -> dict:
    """Placeholder analysis for a category; unknown categories get the generic one."""
    analysis = dict(_FALLBACKS.get(category, _GENERIC_FALLBACK))
    analysis["confidence"] = 0.0
    analysis["error_note"] = _UNAVAILABLE
    return analysis
