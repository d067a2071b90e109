# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Project and group request schemas."""
from typing import ClassVar, Optional

from pydantic import Field, field_validator, model_validator

from skillmatrix.models.entities import (
    GROUP_CREATION_TYPES,
    GROUP_PRIVACIES,
    GROUP_TYPES,
    PROJECT_STATUSES,
)
from skillmatrix.schemas.common import (
    DocumentModel,
    check_object_ids,
    normalise_choice,
    split_labels,
)


class ProjectCreate(DocumentModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    members: list[str] = []
    status: str = "idea"
    organization: str = ""
    tags: list[str] = []

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: str) -> str:
        return normalise_choice(v, PROJECT_STATUSES, "status")

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return split_labels(v)

    @field_validator("members")
    @classmethod
    def check_members(cls, v: list[str]) -> list[str]:
        return check_object_ids(v, "members")


class ProjectUpdate(DocumentModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    members: Optional[list[str]] = None
    status: Optional[str] = None
    organization: Optional[str] = None
    tags: Optional[list[str]] = None

    @field_validator("status")
    @classmethod
    def normalise_status(cls, v: Optional[str]) -> Optional[str]:
        return normalise_choice(v, PROJECT_STATUSES, "status")

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return None if v is None else split_labels(v)

    @field_validator("members")
    @classmethod
    def check_members(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return check_object_ids(v, "members")


class MemberReference(DocumentModel):
    member_id: str

    @field_validator("member_id")
    @classmethod
    def check_member_id(cls, v: str) -> str:
        return check_object_ids([v], "memberId")[0]


class AutoGroupRequest(DocumentModel):
    criteria: Optional[str] = None
    type: str = "technique"
    privacy: str = "public"


class GroupCreate(DocumentModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: str = ""
    type: str = "technique"
    privacy: str = "public"
    tags: list[str] = []
    members: list[str] = []
    leader: Optional[str] = None
    auto_created: bool = False
    creation_type: str = "manual"

    @field_validator("type")
    @classmethod
    def normalise_type(cls, v: str) -> str:
        return normalise_choice(v, GROUP_TYPES, "type")

    @field_validator("privacy")
    @classmethod
    def normalise_privacy(cls, v: str) -> str:
        return normalise_choice(v, GROUP_PRIVACIES, "privacy")

    @field_validator("creation_type")
    @classmethod
    def check_creation_type(cls, v: str) -> str:
        return normalise_choice(v, GROUP_CREATION_TYPES, "creationType", lower=False)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return split_labels(v)

    @field_validator("members")
    @classmethod
    def check_members(cls, v: list[str]) -> list[str]:
        return check_object_ids(v, "members")

    @field_validator("leader")
    @classmethod
    def check_leader(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        return check_object_ids([v], "leader")[0]

    @model_validator(mode="after")
    def leader_is_member(self):
        if self.leader and self.leader not in self.members:
            raise ValueError("leader must be one of the group members")
        return self


class GroupUpdate(DocumentModel):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"leader"})

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    type: Optional[str] = None
    privacy: Optional[str] = None
    tags: Optional[list[str]] = None
    members: Optional[list[str]] = None
    leader: Optional[str] = None

    @field_validator("type")
    @classmethod
    def normalise_type(cls, v: Optional[str]) -> Optional[str]:
        return normalise_choice(v, GROUP_TYPES, "type")

    @field_validator("privacy")
    @classmethod
    def normalise_privacy(cls, v: Optional[str]) -> Optional[str]:
        return normalise_choice(v, GROUP_PRIVACIES, "privacy")

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return None if v is None else split_labels(v)

    @field_validator("members")
    @classmethod
    def check_members(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return check_object_ids(v, "members")

    @field_validator("leader")
    @classmethod
    def check_leader(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        return check_object_ids([v], "leader")[0]
