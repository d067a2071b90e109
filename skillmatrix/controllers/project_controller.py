# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: projects and groups, including member list management."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from skillmatrix.core.dependencies import get_group_service, get_project_service
from skillmatrix.schemas.envelope import paginated, success
from skillmatrix.schemas.project import (
    AutoGroupRequest,
    GroupCreate,
    GroupUpdate,
    MemberReference,
    ProjectCreate,
    ProjectUpdate,
)
from skillmatrix.services.project_service import GroupService, ProjectService

router = APIRouter(prefix="/api/v1", tags=["Projects & Groups"])


# ── Projects ──

@router.get("/projects")
def list_projects(
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    service: ProjectService = Depends(get_project_service),
):
    return paginated(service.list_projects(status=status, search=search, page=page, limit=limit))


@router.get("/projects/stats/summary")
def project_stats(service: ProjectService = Depends(get_project_service)):
    return success(service.stats())


@router.get("/projects/{project_id}")
def get_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    return success(service.get_detail(project_id))


@router.post("/projects", status_code=201)
def create_project(body: ProjectCreate, service: ProjectService = Depends(get_project_service)):
    return success(service.create(body.model_dump(by_alias=True)), message="Project created")


@router.put("/projects/{project_id}")
def update_project(project_id: str, body: ProjectUpdate,
                   service: ProjectService = Depends(get_project_service)):
    changes = body.model_dump(by_alias=True, exclude_unset=True)
    return success(service.update(project_id, changes), message="Project updated")


@router.delete("/projects/{project_id}")
def delete_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    return success(message="Project deleted", **service.delete(project_id))


@router.post("/projects/{project_id}/members")
def add_project_member(project_id: str, body: MemberReference,
                       service: ProjectService = Depends(get_project_service)):
    return success(service.add_member(project_id, body.member_id), message="Member added to project")


@router.delete("/projects/{project_id}/members/{member_id}")
def remove_project_member(project_id: str, member_id: str,
                          service: ProjectService = Depends(get_project_service)):
    return success(service.remove_member(project_id, member_id),
                   message="Member removed from project")


# ── Groups ──

@router.get("/groups")
def list_groups(
    type: Optional[str] = None,
    privacy: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    service: GroupService = Depends(get_group_service),
):
    return paginated(service.list_groups(type=type, privacy=privacy, search=search,
                                         page=page, limit=limit))


@router.get("/groups/{group_id}")
def get_group(group_id: str, service: GroupService = Depends(get_group_service)):
    return success(service.get(group_id))


@router.post("/groups", status_code=201)
def create_group(body: GroupCreate, service: GroupService = Depends(get_group_service)):
    return success(service.create(body.model_dump(by_alias=True)), message="Group created")


@router.put("/groups/{group_id}")
def update_group(group_id: str, body: GroupUpdate,
                 service: GroupService = Depends(get_group_service)):
    changes = body.model_dump(by_alias=True, exclude_unset=True)
    return success(service.update(group_id, changes), message="Group updated")


@router.delete("/groups/{group_id}")
def delete_group(group_id: str, service: GroupService = Depends(get_group_service)):
    return success(message="Group deleted", **service.delete(group_id))


@router.post("/groups/{group_id}/members")
def add_group_member(group_id: str, body: MemberReference,
                     service: GroupService = Depends(get_group_service)):
    return success(service.add_member(group_id, body.member_id), message="Member added to group")


@router.delete("/groups/{group_id}/members/{member_id}")
def remove_group_member(group_id: str, member_id: str,
                        service: GroupService = Depends(get_group_service)):
    return success(service.remove_member(group_id, member_id), message="Member removed from group")


@router.get("/groups/{group_id}/members")
def group_members(group_id: str, service: GroupService = Depends(get_group_service)):
    return success(service.members_overview(group_id))


@router.post("/groups/auto-create")
def auto_create_groups(body: AutoGroupRequest,
                       service: GroupService = Depends(get_group_service)):
    report = service.auto_create(body.criteria, type=body.type, privacy=body.privacy)
    return success(report.to_dict(), message=report.message)
