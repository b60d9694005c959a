"""Default question bank and first-run seeding.

Nineteen questions in four groups. Personal Information comes first and is
the mandatory group under the default configuration.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from survey.logic.repository_questions import count_questions, insert_questions

logger = logging.getLogger(__name__)


DEFAULT_QUESTIONS: List[Dict[str, Any]] = [
    {"title": "Name", "description": "Please provide your full name.", "input_type": "text", "field": "Personal Information"},
    {"title": "Age", "description": "Please provide your age in years.", "input_type": "number", "field": "Personal Information"},
    {"title": "Email Address", "description": "Please provide your email address.", "input_type": "email", "field": "Personal Information"},
    {"title": "Phone Number", "description": "Please provide your phone number.", "input_type": "tel", "field": "Personal Information"},
    {"title": "Address", "description": "Please provide your address.", "input_type": "text", "field": "Personal Information"},
    {"title": "Gender", "description": "Please select your gender.", "input_type": "text", "field": "Demographic Information"},
    {"title": "Ethnicity", "description": "Please select your ethnicity.", "input_type": "text", "field": "Demographic Information"},
    {"title": "Country of Residence", "description": "Please select your country of residence.", "input_type": "text", "field": "Demographic Information"},
    {"title": "Highest Education", "description": "Please select your highest level of education.", "input_type": "text", "field": "Demographic Information"},
    {"title": "Employment Status", "description": "Please select your employment status.", "input_type": "text", "field": "Demographic Information"},
    {"title": "General Health Status", "description": "Please select your general health status.", "input_type": "text", "field": "Health Information"},
    {"title": "Chronic Conditions", "description": "Please list any chronic conditions you have.", "input_type": "textarea", "field": "Health Information"},
    {"title": "Primary Health Provider", "description": "Please list your primary health care provider.", "input_type": "text", "field": "Health Information"},
    {"title": "Medications", "description": "Please list any medications you are currently taking.", "input_type": "textarea", "field": "Health Information"},
    {"title": "Physical Activity Level", "description": "Please describe your physical activity level.", "input_type": "text", "field": "Health Information"},
    {"title": "Income Level", "description": "Please describe your income level.", "input_type": "text", "field": "Financial Information"},
    {"title": "Healthcare Debt", "description": "Please describe your healthcare debt situation.", "input_type": "textarea", "field": "Financial Information"},
    {"title": "FICA and Medicare Savings", "description": "Please describe your FICA and Medicare savings.", "input_type": "text", "field": "Financial Information"},
    {
        "title": "Access to Financial Resources",
        "description": "Do you have any health insurance? If yes, please specify the insurance details.",
        "input_type": "textarea",
        "field": "Financial Information",
    },
]


def seed_questions() -> int:
    """Insert the default bank when the questions table is empty.

    Returns the number of rows inserted (0 when questions already exist).
    """
    existing = count_questions()
    if existing > 0:
        logger.info("seed_questions_skipped existing=%s", existing)
        return 0
    inserted = insert_questions(DEFAULT_QUESTIONS)
    logger.info("seed_questions_inserted count=%s", inserted)
    return inserted
