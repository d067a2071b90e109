# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: global statistics and the full matrix snapshot."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from skillmatrix.core.dependencies import get_stats_service
from skillmatrix.schemas.envelope import success
from skillmatrix.services.stats_service import StatsService

router = APIRouter(prefix="/api/v1", tags=["Statistics"])


@router.get("/stats")
def global_stats(service: StatsService = Depends(get_stats_service)):
    return success(service.global_stats())


@router.get("/all-data")
def all_data(
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    service: StatsService = Depends(get_stats_service),
):
    snapshot = service.all_data(page=page, limit=limit)
    return success(snapshot.pop("data"), **snapshot)
