# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Interaction and analysis request schemas."""
from datetime import datetime
from typing import Any, ClassVar, Optional

from pydantic import Field, field_validator

from skillmatrix.models.entities import (
    ANALYSIS_STATUSES,
    ANALYSIS_TYPES,
    INTERACTION_STATUSES,
    INTERACTION_TYPES,
    RISK_LEVELS,
)
from skillmatrix.schemas.common import (
    DocumentModel,
    check_object_ids,
    normalise_choice,
    split_labels,
)


class AIAnalysis(DocumentModel):
    strategic_value: int = Field(5, ge=1, le=10)
    risk_level: str = "medium"
    recommended_actions: list[str] = []
    summary: str = ""
    simulated: bool = False

    @field_validator("risk_level")
    @classmethod
    def normalise_risk(cls, v: str) -> str:
        return normalise_choice(v, RISK_LEVELS, "riskLevel")

    @field_validator("recommended_actions", mode="before")
    @classmethod
    def split_actions(cls, v):
        return split_labels(v) if isinstance(v, str) else v


class InteractionCreate(DocumentModel):
    type: str = "collaboration"
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    sender: str = Field(..., alias="from")
    to: list[str] = []
    projects: list[str] = []
    groups: list[str] = []
    specialties: list[str] = []
    status: str = "pending"
    intensity: int = Field(5, ge=1, le=10)
    duration: int = Field(0, ge=0)
    score: int = Field(3, ge=1, le=5)
    ai_analysis: Optional[AIAnalysis] = None

    @field_validator("type")
    @classmethod
    def normalise_type(cls, v: str) -> str:
        return normalise_choice(v, INTERACTION_TYPES, "type")

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: str) -> str:
        return normalise_choice(v, INTERACTION_STATUSES, "status")

    @field_validator("sender")
    @classmethod
    def check_sender(cls, v: str) -> str:
        return check_object_ids([v], "from")[0]

    @field_validator("to", "projects", "groups", "specialties")
    @classmethod
    def check_references(cls, v: list[str], info) -> list[str]:
        return check_object_ids(v, info.field_name)


class InteractionUpdate(DocumentModel):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"aiAnalysis"})

    type: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    to: Optional[list[str]] = None
    projects: Optional[list[str]] = None
    groups: Optional[list[str]] = None
    specialties: Optional[list[str]] = None
    status: Optional[str] = None
    intensity: Optional[int] = Field(None, ge=1, le=10)
    duration: Optional[int] = Field(None, ge=0)
    score: Optional[int] = Field(None, ge=1, le=5)
    ai_analysis: Optional[AIAnalysis] = None

    @field_validator("type")
    @classmethod
    def normalise_type(cls, v: Optional[str]) -> Optional[str]:
        return normalise_choice(v, INTERACTION_TYPES, "type")

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: Optional[str]) -> Optional[str]:
        return normalise_choice(v, INTERACTION_STATUSES, "status")

    @field_validator("to", "projects", "groups", "specialties")
    @classmethod
    def check_references(cls, v: Optional[list[str]], info) -> Optional[list[str]]:
        return check_object_ids(v, info.field_name)


class AnalysisCreate(DocumentModel):
    type: str
    title: str = Field(..., min_length=1, max_length=300)
    description: str = ""
    analysis_data: Any = None
    insights: Any = None
    suggestions: Any = None
    statistics: Any = None
    status: str = "completed"
    ai_enhanced: bool = False
    ai_model: str = ""

    @field_validator("type")
    @classmethod
    def normalise_type(cls, v: str) -> str:
        return normalise_choice(v, ANALYSIS_TYPES, "type")

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: str) -> str:
        return normalise_choice(v, ANALYSIS_STATUSES, "status")


class AnalysisUpdate(DocumentModel):
    nullable_fields: ClassVar[frozenset[str]] = frozenset(
        {"analysisData", "insights", "suggestions", "statistics"}
    )

    type: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    analysis_data: Any = None
    insights: Any = None
    suggestions: Any = None
    statistics: Any = None
    status: Optional[str] = None
    ai_enhanced: Optional[bool] = None
    ai_model: Optional[str] = None

    @field_validator("type")
    @classmethod
    def normalise_type(cls, v: Optional[str]) -> Optional[str]:
        return normalise_choice(v, ANALYSIS_TYPES, "type")

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: Optional[str]) -> Optional[str]:
        return normalise_choice(v, ANALYSIS_STATUSES, "status")


class SynergyAnalysisCreate(DocumentModel):
    """A professional synergy analysis computed by a client and saved as-is."""

    title: str = Field(..., min_length=1, max_length=300)
    description: str = ""
    analysis_data: dict[str, Any]
    statistics: Optional[dict[str, Any]] = None
    timestamp: Optional[datetime] = None
