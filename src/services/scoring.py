"""
Deterministic risk scoring for a finalized screening questionnaire
"""
from typing import Any, Iterable

from src.models.assessment import (
    QUESTIONNAIRE_ITEMS,
    AssessmentInput,
    AssessmentResult,
    Gender,
    QuestionnaireResponse,
    QuestionScore,
    RiskLevel,
)


MAX_TOTAL_SCORE = 40

SCORE_WEIGHT = 0.85
DEMOGRAPHIC_WEIGHT = 0.15

YOUNG_AGE_LIMIT = 3
YOUNG_AGE_ADJUSTMENT = 0.1
OLDER_AGE_LIMIT = 10
OLDER_AGE_ADJUSTMENT = 0.05

GENDER_ADJUSTMENT = {
    Gender.MALE: 0.1,
    Gender.FEMALE: 0.05,
}

HIGH_RISK_COUNT_THRESHOLD = 6
HIGH_RISK_BONUS = 0.1
LOW_ENGAGEMENT_COUNT_THRESHOLD = 7
LOW_ENGAGEMENT_BONUS = 0.05

LOW_RISK_CEILING = 35.0
HIGH_RISK_FLOOR = 65.0

MIN_CONFIDENCE = 0.6
MAX_CONFIDENCE = 0.95
MEDIUM_CONFIDENCE = 0.7

RECOMMENDATIONS = {
    RiskLevel.HIGH: (
        "We recommend consulting with a pediatric developmental specialist or child "
        "psychologist for a comprehensive evaluation. Early screening and intervention "
        "can significantly improve outcomes."
    ),
    RiskLevel.MEDIUM: (
        "Some responses suggest areas worth watching. Continue monitoring your child's "
        "development and consult with your pediatrician if you have concerns."
    ),
    RiskLevel.LOW: (
        "The assessment suggests typical development patterns. Continue regular "
        "developmental check-ups with your pediatrician."
    ),
}


def _age_adjustment(age: int) -> float:
    if age <= YOUNG_AGE_LIMIT:
        return YOUNG_AGE_ADJUSTMENT
    if age >= OLDER_AGE_LIMIT:
        return OLDER_AGE_ADJUSTMENT
    return 0.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def risk_level_for(risk_percentage: float) -> RiskLevel:
    """Map a risk percentage onto the three reporting buckets"""
    if risk_percentage < LOW_RISK_CEILING:
        return RiskLevel.LOW
    if risk_percentage < HIGH_RISK_FLOOR:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def confidence_for(risk_percentage: float, risk_level: RiskLevel) -> float:
    """Confidence grows with the distance from the Medium band, within [0.6, 0.95]"""
    span = MAX_CONFIDENCE - MIN_CONFIDENCE
    if risk_level is RiskLevel.LOW:
        confidence = MIN_CONFIDENCE + (LOW_RISK_CEILING - risk_percentage) / LOW_RISK_CEILING * span
    elif risk_level is RiskLevel.HIGH:
        confidence = MIN_CONFIDENCE + (risk_percentage - HIGH_RISK_FLOOR) / (100.0 - HIGH_RISK_FLOOR) * span
    else:
        confidence = MEDIUM_CONFIDENCE
    return _clamp(confidence, MIN_CONFIDENCE, MAX_CONFIDENCE)


def score(assessment: AssessmentInput) -> AssessmentResult:
    """
    Score a finalized assessment

    Args:
        assessment: Validated questionnaire submission

    Returns:
        A new AssessmentResult; the same input always yields an equal result
    """
    values = [response.score for response in assessment.responses]
    total_score = sum(values)
    normalized_score = total_score / MAX_TOTAL_SCORE

    demographic = _age_adjustment(assessment.age) + GENDER_ADJUSTMENT[assessment.gender]
    risk_score = normalized_score * SCORE_WEIGHT + demographic * DEMOGRAPHIC_WEIGHT

    high_risk_responses = sum(1 for v in values if v >= QuestionnaireResponse.OFTEN.score)
    low_engagement_responses = sum(1 for v in values if v <= QuestionnaireResponse.RARELY.score)
    if high_risk_responses >= HIGH_RISK_COUNT_THRESHOLD:
        risk_score += HIGH_RISK_BONUS
    if low_engagement_responses >= LOW_ENGAGEMENT_COUNT_THRESHOLD:
        risk_score += LOW_ENGAGEMENT_BONUS

    risk_score = _clamp(risk_score, 0.0, 1.0)
    risk_percentage = risk_score * 100
    risk_level = risk_level_for(risk_percentage)

    breakdown = tuple(
        QuestionScore(question=question, response=response, score=response.score)
        for question, response in zip(QUESTIONNAIRE_ITEMS, assessment.responses)
    )

    return AssessmentResult(
        total_score=total_score,
        risk_score=risk_score,
        risk_percentage=risk_percentage,
        risk_level=risk_level,
        confidence=confidence_for(risk_percentage, risk_level),
        recommendation=RECOMMENDATIONS[risk_level],
        breakdown=breakdown,
    )


def score_responses(age: Any, gender: Any, responses: Iterable[Any]) -> AssessmentResult:
    """Build an AssessmentInput from raw form values and score it (raises InvalidInput)"""
    return score(AssessmentInput.build(age, gender, responses))
