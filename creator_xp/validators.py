"""
Pydantic Input Validation Layer

The scoring functions and the progression engine accept any numbers; the
preconditions that keep XP meaningful are checked here, at the caller
boundary, before an event reaches the engine.

Validation Categories:
1. Awards - non-negative amount, non-empty event tag
2. Scoring inputs - viral score and engagement in [0, 100], trends >= 0
"""

import logging
from typing import Type, TypeVar
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from creator_xp.exceptions import ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


# ============================================================================
# AWARD VALIDATION
# ============================================================================

class AwardInput(BaseModel):
    """XP award as supplied by an event source"""
    user_id: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0, description="XP to award")
    source: str = Field(..., min_length=1, description="Event tag")

    @field_validator("source")
    @classmethod
    def normalize_source(cls, v: str) -> str:
        """Event tags are compared exactly; only surrounding whitespace is dropped"""
        trimmed = v.strip()
        if not trimmed:
            raise ValueError("Event tag cannot be only whitespace")
        return trimmed


# ============================================================================
# SCORING INPUT VALIDATION
# ============================================================================

class ContentPlanScoreInput(BaseModel):
    """
    Inputs to content_plan_xp

    Constraints:
    - viral_score: 0-100
    - engagement: 0-100 (percent)
    """
    viral_score: float = Field(..., ge=0, le=100)
    engagement: float = Field(..., ge=0, le=100)


class PostScoreInput(BaseModel):
    """Inputs to post_xp"""
    platform: str = Field(..., min_length=1)
    viral_score: float = Field(..., ge=0, le=100)


class TrendInput(BaseModel):
    """Inputs to trend_xp"""
    trends_used: int = Field(..., ge=0)


# ============================================================================
# HELPERS
# ============================================================================

def validate_input(model: Type[ModelT], **data) -> ModelT:
    """
    Validate keyword data against `model`

    Raises:
        ValidationError: first failing field, with the pydantic message
    """
    try:
        return model(**data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(
            message=first.get("msg", str(e)),
            field=field,
            value=first.get("input"),
            operation=f"validate_{model.__name__}",
            cause=e,
        )
