"""
Medical Document Prompts

Extraction prompt for uploaded reports and the free-text parser used by
manual data entry, with their fallbacks.
"""

from datetime import date

DOCUMENT_EXTRACTION_PROMPT = """Analyze this medical document and extract key \
information to create a structured timeline.

Extract:
1. Date of the document/procedure
2. Type of document (consultation, lab results, ultrasound, treatment, etc.)
3. Key findings or values
4. Important notes or recommendations

Respond with ONLY this JSON structure:
{
  "date": "YYYY-MM-DD",
  "type": "document type",
  "title": "short title",
  "category": "consultation | lab_results | ultrasound | treatment | procedure",
  "findings": "key findings or values",
  "details": "important notes or recommendations"
}"""

MANUAL_ENTRY_TEMPLATE = """Parse this medical data and extract structured \
information. This appears to be {entry_type} type data.

Original text:
{text}

Extract relevant medical information and return structured JSON. For different types:
- lab_results: Extract test names, values, units, reference ranges, dates
- ultrasound: Extract measurements, findings, dates
- consultation_notes: Extract symptoms, diagnoses, recommendations, dates
- sperm_analysis: Extract counts, motility, morphology values
- hormone_levels: Extract hormone names, values, units, reference ranges

Return structured data with these fields:
{{
  "extracted_data": {{
    "date": "test/procedure date if found",
    "type": "specific test type",
    "values": [
      {{
        "parameter": "name",
        "value": "numerical value",
        "unit": "unit",
        "reference_range": "normal range if available",
        "status": "normal/high/low/abnormal"
      }}
    ],
    "findings": "key findings or observations",
    "recommendations": "any recommendations mentioned",
    "facility": "lab/clinic name if mentioned",
    "doctor": "doctor name if mentioned"
  }},
  "confidence": 0.8,
  "data_quality": "good/fair/poor",
  "missing_info": ["list of missing important info"]
}}

Respond with raw JSON only. Do not include code blocks."""

FINDINGS_PREVIEW_CHARS = 200


def document_fallback(today: date | None = None) -> dict:
    """Minimal extraction dated today, used when the model cannot read the file."""
    today = today or date.today()
    return {
        "date": today.isoformat(),
        "type": "Medical Document",
        "findings": "Document uploaded and processed successfully",
        "category": "consultation",
    }


def build_manual_entry_prompt(text: str, entry_type: str) -> str:
    return MANUAL_ENTRY_TEMPLATE.format(entry_type=entry_type, text=text)


def manual_entry_fallback(text: str, entry_type: str, today: date | None = None) -> dict:
    """Low-confidence parse that keeps a preview of the original text."""
    today = today or date.today()
    preview = text[:FINDINGS_PREVIEW_CHARS]
    if len(text) > FINDINGS_PREVIEW_CHARS:
        preview += "..."
    return {
        "extracted_data": {
            "date": today.isoformat(),
            "type": entry_type,
            "values": [],
            "findings": preview,
            "recommendations": "Manual review recommended",
        },
        "confidence": 0.1,
        "data_quality": "poor",
        "missing_info": ["AI parsing failed - manual entry required"],
    }
