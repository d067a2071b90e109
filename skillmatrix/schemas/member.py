# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Member request schemas."""
from typing import Optional

from pydantic import Field, field_validator

from skillmatrix.core.config import settings
from skillmatrix.models.entities import MEMBER_STATUSES
from skillmatrix.schemas.common import DocumentModel, normalise_choice, split_labels

_EMAIL = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _capped(values: list[str], cap: int, field: str) -> list[str]:
    if len(values) > cap:
        raise ValueError(f"{field} accepts at most {cap} entries")
    return values


class MemberCreate(DocumentModel):
    name: str = Field(..., min_length=2, max_length=100)
    title: str = ""
    email: str = Field(..., pattern=_EMAIL, max_length=254)
    phone: str = ""
    specialties: list[str] = []
    skills: list[str] = []
    organization: str = ""
    location: str = ""
    experience_years: int = Field(0, ge=0, le=60)
    availability: str = ""
    statut_membre: str = "Actif"
    photo: str = ""
    cv_link: str = ""
    linkedin: str = ""
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("skills", "specialties", mode="before")
    @classmethod
    def split_lists(cls, v):
        return split_labels(v)

    @field_validator("skills")
    @classmethod
    def cap_skills(cls, v: list[str]) -> list[str]:
        return _capped(v, settings.MAX_MEMBER_SKILLS, "skills")

    @field_validator("specialties")
    @classmethod
    def cap_specialties(cls, v: list[str]) -> list[str]:
        return _capped(v, settings.MAX_MEMBER_SPECIALTIES, "specialties")

    @field_validator("statut_membre")
    @classmethod
    def check_status(cls, v: str) -> str:
        return normalise_choice(v, MEMBER_STATUSES, "statutMembre", lower=False)


class MemberUpdate(DocumentModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    title: Optional[str] = None
    email: Optional[str] = Field(None, pattern=_EMAIL, max_length=254)
    phone: Optional[str] = None
    specialties: Optional[list[str]] = None
    skills: Optional[list[str]] = None
    organization: Optional[str] = None
    location: Optional[str] = None
    experience_years: Optional[int] = Field(None, ge=0, le=60)
    availability: Optional[str] = None
    statut_membre: Optional[str] = None
    photo: Optional[str] = None
    cv_link: Optional[str] = None
    linkedin: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v is not None else v

    @field_validator("skills", "specialties", mode="before")
    @classmethod
    def split_lists(cls, v):
        return None if v is None else split_labels(v)

    @field_validator("skills")
    @classmethod
    def cap_skills(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return v if v is None else _capped(v, settings.MAX_MEMBER_SKILLS, "skills")

    @field_validator("specialties")
    @classmethod
    def cap_specialties(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return v if v is None else _capped(v, settings.MAX_MEMBER_SPECIALTIES, "specialties")

    @field_validator("statut_membre")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        return normalise_choice(v, MEMBER_STATUSES, "statutMembre", lower=False)
