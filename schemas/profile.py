"""User profile and skill schemas."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SkillLevel(str, Enum):
    """Proficiency level of a skill, in ascending order."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class Skill(BaseModel):
    """A skill a user can offer or wants to learn."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str = Field(min_length=1, description="Skill name")
    description: Optional[str] = None
    level: SkillLevel = SkillLevel.BEGINNER
    category: Optional[str] = None


class UserProfile(BaseModel):
    """A user taking part in the skill exchange."""
    id: str
    username: str = ""
    email: str = ""
    languages: list[str] = Field(
        default_factory=lambda: ["en"],
        description="Declared language codes; the first entry is the primary language"
    )
    offers: list[Skill] = Field(default_factory=list, description="Skills the user can teach")
    wants: list[Skill] = Field(default_factory=list, description="Skills the user wants to learn")
    trust_score: float = Field(0.5, description="Raw trust rating, clamped to 0-1 by consumers")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
