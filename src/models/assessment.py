"""
Domain types for the screening questionnaire
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple


MIN_AGE = 2
MAX_AGE = 14
QUESTION_COUNT = 10

QUESTIONNAIRE_ITEMS = (
    "Does your child make eye contact when you call their name?",
    "Does your child show interest in other children or prefer to play alone?",
    "Does your child use gestures like pointing or waving to communicate?",
    "Does your child understand and follow simple instructions?",
    "Does your child have difficulty with changes in routine or environment?",
    "Does your child show repetitive behaviors or intense interests in specific topics?",
    "Does your child have conversations or mainly speaks in single words?",
    "Does your child respond appropriately to emotions of others?",
    "Does your child have unusual sensory reactions (sounds, textures, lights)?",
    "Does your child engage in pretend or imaginative play?",
)


class InvalidInput(ValueError):
    """Raised when an assessment does not have the expected shape"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class QuestionnaireResponse(str, Enum):
    """Ordinal frequency answer to a screening question"""
    NEVER = "never"
    RARELY = "rarely"
    SOMETIMES = "sometimes"
    OFTEN = "often"
    ALWAYS = "always"

    @property
    def score(self) -> int:
        return _RESPONSE_SCORES[self]

    @classmethod
    def parse(cls, value: Any) -> "QuestionnaireResponse":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidInput(f"Unrecognized response value: {value!r}", field="responses")


_RESPONSE_SCORES = {
    QuestionnaireResponse.NEVER: 0,
    QuestionnaireResponse.RARELY: 1,
    QuestionnaireResponse.SOMETIMES: 2,
    QuestionnaireResponse.OFTEN: 3,
    QuestionnaireResponse.ALWAYS: 4,
}


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"

    @classmethod
    def parse(cls, value: Any) -> "Gender":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidInput(f"Gender must be 'M' or 'F', got {value!r}", field="gender")


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class AssessmentInput:
    """Finalized questionnaire submission"""
    age: int
    gender: Gender
    responses: Tuple[QuestionnaireResponse, ...]

    @classmethod
    def build(cls, age: Any, gender: Any, responses: Iterable[Any]) -> "AssessmentInput":
        """
        Normalize raw form values into an AssessmentInput

        Raises:
            InvalidInput: If age, gender or responses are malformed
        """
        # bool is a subclass of int but never a valid age
        if isinstance(age, bool) or not isinstance(age, int):
            raise InvalidInput(f"Age must be an integer, got {age!r}", field="age")
        if age < MIN_AGE or age > MAX_AGE:
            raise InvalidInput(
                f"Age must be between {MIN_AGE} and {MAX_AGE}, got {age}", field="age"
            )
        if responses is None or isinstance(responses, (str, bytes)):
            raise InvalidInput("Responses must be a list of answers", field="responses")

        try:
            parsed = tuple(QuestionnaireResponse.parse(r) for r in responses)
        except TypeError:
            raise InvalidInput("Responses must be a list of answers", field="responses")
        if len(parsed) != QUESTION_COUNT:
            raise InvalidInput(
                f"Expected exactly {QUESTION_COUNT} responses, got {len(parsed)}",
                field="responses",
            )

        return cls(age=age, gender=Gender.parse(gender), responses=parsed)


@dataclass(frozen=True)
class QuestionScore:
    question: str
    response: QuestionnaireResponse
    score: int

    def to_dict(self) -> dict:
        return {"question": self.question, "response": self.response.value, "score": self.score}


@dataclass(frozen=True)
class AssessmentResult:
    """Outcome of scoring one assessment. Never edited after it is computed."""
    total_score: int
    risk_score: float
    risk_percentage: float
    risk_level: RiskLevel
    confidence: float
    recommendation: str
    breakdown: Tuple[QuestionScore, ...]

    def to_dict(self) -> dict:
        return {
            "totalScore": self.total_score,
            "riskScore": self.risk_score,
            "riskPercentage": self.risk_percentage,
            "riskLevel": self.risk_level.value,
            "confidence": self.confidence,
            "recommendation": self.recommendation,
            "scoreBreakdown": [item.to_dict() for item in self.breakdown],
        }
