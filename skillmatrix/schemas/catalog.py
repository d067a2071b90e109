# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Skill and specialty request schemas.

Both catalogs share one shape; the accepted categories differ, so the
category is checked by the service against the catalog being written.
``memberCount`` and ``popularity`` are derived by sync and never accepted
from a request body.
"""
from typing import Optional

from pydantic import Field, field_validator

from skillmatrix.models.entities import CATALOG_LEVELS
from skillmatrix.schemas.common import DocumentModel, normalise_choice


class CatalogEntryCreate(DocumentModel):
    name: str = Field(..., min_length=2, max_length=255)
    category: Optional[str] = None
    level: str = "intermédiaire"
    description: str = Field("", max_length=1000)
    is_active: bool = True

    @field_validator("category")
    @classmethod
    def lower_category(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else None

    @field_validator("level")
    @classmethod
    def check_level(cls, v: str) -> str:
        return normalise_choice(v, CATALOG_LEVELS, "level")


class CatalogEntryUpdate(DocumentModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    category: Optional[str] = None
    level: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None

    @field_validator("category")
    @classmethod
    def lower_category(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else None

    @field_validator("level")
    @classmethod
    def check_level(cls, v: Optional[str]) -> Optional[str]:
        return normalise_choice(v, CATALOG_LEVELS, "level")
