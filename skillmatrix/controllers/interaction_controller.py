# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: interactions between members and stored analyses."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from skillmatrix.core.dependencies import get_analysis_service, get_interaction_service
from skillmatrix.schemas.envelope import paginated, success
from skillmatrix.schemas.interaction import (
    AnalysisCreate,
    AnalysisUpdate,
    InteractionCreate,
    InteractionUpdate,
    SynergyAnalysisCreate,
)
from skillmatrix.services.interaction_service import AnalysisService, InteractionService

router = APIRouter(prefix="/api/v1", tags=["Interactions & Analyses"])


# ── Interactions ──

@router.get("/interactions")
def list_interactions(
    type: Optional[str] = None,
    status: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    service: InteractionService = Depends(get_interaction_service),
):
    return paginated(service.list_interactions(type=type, status=status, page=page, limit=limit))


@router.get("/interactions/stats/overview")
def interaction_stats(service: InteractionService = Depends(get_interaction_service)):
    return success(service.stats())


@router.get("/interactions/member/{member_id}")
def member_interactions(
    member_id: str,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    service: InteractionService = Depends(get_interaction_service),
):
    return paginated(service.list_for_member(member_id, page=page, limit=limit))


@router.get("/interactions/{interaction_id}")
def get_interaction(interaction_id: str,
                    service: InteractionService = Depends(get_interaction_service)):
    return success(service.get(interaction_id))


@router.post("/interactions", status_code=201)
def create_interaction(body: InteractionCreate,
                       service: InteractionService = Depends(get_interaction_service)):
    return success(service.create(body.model_dump(by_alias=True)), message="Interaction created")


@router.put("/interactions/{interaction_id}")
def update_interaction(interaction_id: str, body: InteractionUpdate,
                       service: InteractionService = Depends(get_interaction_service)):
    changes = body.model_dump(by_alias=True, exclude_unset=True)
    return success(service.update(interaction_id, changes), message="Interaction updated")


@router.delete("/interactions/{interaction_id}")
def delete_interaction(interaction_id: str,
                       service: InteractionService = Depends(get_interaction_service)):
    return success(message="Interaction deleted", **service.delete(interaction_id))


@router.post("/interactions/{interaction_id}/analyze")
def analyze_interaction(interaction_id: str,
                        service: InteractionService = Depends(get_interaction_service)):
    return success(service.analyze(interaction_id), message="Interaction analysed")


# ── Analyses ──

@router.get("/analyses")
def list_analyses(
    type: Optional[str] = None,
    status: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    service: AnalysisService = Depends(get_analysis_service),
):
    return paginated(service.list_analyses(type=type, status=status, page=page, limit=limit))


@router.delete("/analyses/cleanup")
def cleanup_analyses(days: int = Query(default=30, ge=1),
                     service: AnalysisService = Depends(get_analysis_service)):
    result = service.cleanup(days)
    return success(message=f"{result['deletedCount']} analyses deleted", **result)


@router.post("/analyses/save-synergy-analysis", status_code=201)
def save_synergy_analysis(body: SynergyAnalysisCreate,
                          service: AnalysisService = Depends(get_analysis_service)):
    saved = service.save_synergy(body.model_dump(by_alias=True, exclude_none=True))
    return success(saved, message="Synergy analysis saved", analysisId=saved["_id"])


@router.get("/analyses/synergy-analyses")
def list_synergy_analyses(
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    service: AnalysisService = Depends(get_analysis_service),
):
    return paginated(service.list_synergies(page=page, limit=limit))


@router.get("/analyses/synergy-analyses/recent")
@router.get("/analyses/synergy-analyses/recent/{limit}")
def recent_synergy_analyses(limit: int = 10,
                            service: AnalysisService = Depends(get_analysis_service)):
    analyses = service.recent_synergies(limit)
    return success(analyses, total=len(analyses))


@router.get("/analyses/stats/synergies")
def synergy_analysis_stats(service: AnalysisService = Depends(get_analysis_service)):
    return success(service.synergy_stats())


@router.get("/analyses/{analysis_id}")
def get_analysis(analysis_id: str, service: AnalysisService = Depends(get_analysis_service)):
    return success(service.get(analysis_id))


@router.post("/analyses", status_code=201)
def create_analysis(body: AnalysisCreate,
                    service: AnalysisService = Depends(get_analysis_service)):
    return success(service.create(body.model_dump(by_alias=True)), message="Analysis created")


@router.put("/analyses/{analysis_id}")
def update_analysis(analysis_id: str, body: AnalysisUpdate,
                    service: AnalysisService = Depends(get_analysis_service)):
    changes = body.model_dump(by_alias=True, exclude_unset=True)
    return success(service.update(analysis_id, changes), message="Analysis updated")


@router.delete("/analyses/{analysis_id}")
def delete_analysis(analysis_id: str, service: AnalysisService = Depends(get_analysis_service)):
    return success(message="Analysis deleted", **service.delete(analysis_id))
