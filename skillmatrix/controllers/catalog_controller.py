# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: skill and specialty catalogs, statistics and synchronisation.

Both catalogs expose the same routes; ``catalog_router`` builds one router per
catalog bound to its service dependency.
"""
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Query

from skillmatrix.core.dependencies import get_skill_service, get_specialty_service
from skillmatrix.models.entities import Entity
from skillmatrix.schemas.catalog import CatalogEntryCreate, CatalogEntryUpdate
from skillmatrix.schemas.envelope import paginated, success
from skillmatrix.services.catalog_service import DEFAULT_SORT, CatalogService


def catalog_router(kind: Entity, get_service: Callable[..., CatalogService]) -> APIRouter:
    collection = kind.value
    label = kind.label
    router = APIRouter(prefix="/api/v1", tags=[label])

    @router.get(f"/{collection}", name=f"list_{collection}")
    def list_entries(
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort: str = DEFAULT_SORT,
        limit: Optional[int] = Query(default=None, ge=1),
        service: CatalogService = Depends(get_service),
    ):
        return paginated(service.list_entries(category=category, search=search,
                                              sort=sort, limit=limit))

    @router.get(f"/{collection}/stats/overview", name=f"{collection}_stats")
    def catalog_stats(service: CatalogService = Depends(get_service)):
        return success(service.stats())

    @router.post(f"/{collection}/sync", name=f"sync_{collection}")
    def sync_catalog(service: CatalogService = Depends(get_service)):
        report = service.sync()
        return success(report.to_dict(), message=report.message)

    @router.post(f"/{collection}/sync-from-default", name=f"seed_{collection}")
    def sync_defaults(service: CatalogService = Depends(get_service)):
        report = service.sync_defaults()
        return success(report.to_dict(), message=report.message)

    @router.get(f"/{collection}/{{entry_id}}", name=f"get_{collection}")
    def get_entry(entry_id: str, service: CatalogService = Depends(get_service)):
        return success(service.get_detail(entry_id))

    @router.post(f"/{collection}", status_code=201, name=f"create_{collection}")
    def create_entry(body: CatalogEntryCreate, service: CatalogService = Depends(get_service)):
        return success(service.create(body.model_dump(by_alias=True)), message=f"{label} created")

    @router.put(f"/{collection}/{{entry_id}}", name=f"update_{collection}")
    def update_entry(entry_id: str, body: CatalogEntryUpdate,
                     service: CatalogService = Depends(get_service)):
        changes = body.model_dump(by_alias=True, exclude_unset=True)
        return success(service.update(entry_id, changes), message=f"{label} updated")

    @router.delete(f"/{collection}/{{entry_id}}", name=f"delete_{collection}")
    def delete_entry(entry_id: str, service: CatalogService = Depends(get_service)):
        return success(message=f"{label} deleted", **service.delete(entry_id))

    return router


skills_router = catalog_router(Entity.SKILLS, get_skill_service)
specialties_router = catalog_router(Entity.SPECIALTIES, get_specialty_service)
