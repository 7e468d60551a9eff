# app/catalog.py
"""
Static catalog of assessment types and their questionnaires.

Every answer is a 0-100 severity/frequency rating.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

MIN_ANSWER = 0
MAX_ANSWER = 100


class AssessmentType(str, Enum):
    DIABETES = "diabetes"
    HEART_DISEASE = "heart_disease"
    THYROID = "thyroid"


@dataclass(frozen=True)
class Question:
    key: str
    label: str
    description: str
    unit: str = "%"


@dataclass(frozen=True)
class Assessment:
    """
    One questionnaire.

    Attributes:
        type: Assessment type
        title: Screen title
        card_title: Short title used on selection cards
        description: Card/screen description
        questions: Ordered questions; keys are unique within the type
    """
    type: AssessmentType
    title: str
    card_title: str
    description: str
    questions: Tuple[Question, ...]

    @property
    def question_keys(self) -> Tuple[str, ...]:
        return tuple(q.key for q in self.questions)

    def has_question(self, key: str) -> bool:
        return key in self.question_keys


CATALOG: Dict[AssessmentType, Assessment] = {
    AssessmentType.DIABETES: Assessment(
        type=AssessmentType.DIABETES,
        title="Diabetes Risk Assessment",
        card_title="Diabetes Risk",
        description="Assess your risk of developing Type 2 diabetes based on lifestyle and health factors.",
        questions=(
            Question("frequent_urination", "Frequent Urination",
                     "How often do you need to urinate, especially at night?"),
            Question("excessive_thirst", "Excessive Thirst",
                     "How often do you feel unusually thirsty?"),
            Question("unexplained_weight_loss", "Unexplained Weight Loss",
                     "Have you lost weight without trying?"),
            Question("fatigue", "Fatigue Levels",
                     "How tired or fatigued do you feel regularly?"),
            Question("blurred_vision", "Blurred Vision",
                     "How often do you experience blurred vision?"),
            Question("slow_healing", "Slow Healing Wounds",
                     "Do cuts and wounds take longer to heal?"),
        ),
    ),
    AssessmentType.HEART_DISEASE: Assessment(
        type=AssessmentType.HEART_DISEASE,
        title="Heart Disease Risk Assessment",
        card_title="Heart Disease Risk",
        description="Evaluate cardiovascular disease risk factors and heart health indicators.",
        questions=(
            Question("chest_pain", "Chest Pain Frequency",
                     "How often do you experience chest pain or discomfort?"),
            Question("shortness_breath", "Shortness of Breath",
                     "How often are you short of breath during normal activities?"),
            Question("high_blood_pressure", "Blood Pressure Concerns",
                     "Rate your blood pressure levels (if known)"),
            Question("cholesterol_levels", "Cholesterol Levels",
                     "Rate your cholesterol concerns (if known)"),
            Question("exercise_tolerance", "Exercise Intolerance",
                     "How difficult is it to exercise or do physical activity?"),
            Question("family_history", "Family History",
                     "How strong is your family history of heart disease?"),
        ),
    ),
    AssessmentType.THYROID: Assessment(
        type=AssessmentType.THYROID,
        title="Thyroid Disorder Assessment",
        card_title="Thyroid Disorder",
        description="Check for potential thyroid dysfunction symptoms and metabolic indicators.",
        questions=(
            Question("weight_changes", "Unexplained Weight Changes",
                     "Have you experienced sudden weight gain or loss?"),
            Question("energy_levels", "Low Energy Levels",
                     "How often do you feel unusually tired or sluggish?"),
            Question("temperature_sensitivity", "Temperature Sensitivity",
                     "Are you unusually sensitive to hot or cold?"),
            Question("hair_skin_changes", "Hair and Skin Changes",
                     "Have you noticed changes in hair or skin texture?"),
            Question("mood_changes", "Mood Changes",
                     "Have you experienced mood swings or depression?"),
            Question("sleep_patterns", "Sleep Pattern Changes",
                     "Have your sleep patterns changed significantly?"),
        ),
    ),
}


def parse_assessment_type(value: Union[str, AssessmentType]) -> Optional[AssessmentType]:
    """Return the AssessmentType for `value`, or None if unknown."""
    if isinstance(value, AssessmentType):
        return value
    try:
        return AssessmentType(value)
    except ValueError:
        return None


def get_assessment(value: Union[str, AssessmentType]) -> Optional[Assessment]:
    assessment_type = parse_assessment_type(value)
    if assessment_type is None:
        return None
    return CATALOG[assessment_type]


def list_assessments() -> Tuple[Assessment, ...]:
    return tuple(CATALOG.values())
