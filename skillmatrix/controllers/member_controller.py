# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: member directory CRUD and filtered listing."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from skillmatrix.core.dependencies import get_member_service
from skillmatrix.schemas.envelope import paginated, success
from skillmatrix.schemas.member import MemberCreate, MemberUpdate
from skillmatrix.services.member_service import MemberService

router = APIRouter(prefix="/api/v1", tags=["Members"])


@router.get("/members")
def list_members(
    search: Optional[str] = None,
    organization: Optional[str] = None,
    location: Optional[str] = None,
    skill: Optional[str] = None,
    specialty: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    service: MemberService = Depends(get_member_service),
):
    return paginated(service.list_members(
        search=search, organization=organization, location=location,
        skill=skill, specialty=specialty, page=page, limit=limit,
    ))


@router.get("/members/{member_id}")
def get_member(member_id: str, service: MemberService = Depends(get_member_service)):
    return success(service.get(member_id))


@router.post("/members", status_code=201)
def create_member(body: MemberCreate, service: MemberService = Depends(get_member_service)):
    return success(service.create(body.model_dump(by_alias=True)), message="Member created")


@router.put("/members/{member_id}")
def update_member(member_id: str, body: MemberUpdate,
                  service: MemberService = Depends(get_member_service)):
    changes = body.model_dump(by_alias=True, exclude_unset=True)
    return success(service.update(member_id, changes), message="Member updated")


@router.delete("/members/{member_id}")
def delete_member(member_id: str, service: MemberService = Depends(get_member_service)):
    return success(message="Member deactivated", **service.delete(member_id))
