# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection: wire the application's Database into services.

The Database is owned by the application lifespan (``app.state.database``);
services are cheap wrappers built per request around it.
"""
from fastapi import Depends, Request

from skillmatrix.core.database import Database
from skillmatrix.core.errors import ConfigurationError
from skillmatrix.models.entities import Entity
from skillmatrix.services.catalog_service import CatalogService
from skillmatrix.services.interaction_service import AnalysisService, InteractionService
from skillmatrix.services.member_service import MemberService
from skillmatrix.services.project_service import GroupService, ProjectService
from skillmatrix.services.registry import build_service
from skillmatrix.services.stats_service import StatsService
from skillmatrix.services.synergy_client import SynergyClient


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        reason = getattr(request.app.state, "database_error", None)
        raise ConfigurationError(reason or "Database is not configured")
    return database


def get_synergy_client(request: Request) -> SynergyClient:
    client = getattr(request.app.state, "synergy_client", None)
    return client or SynergyClient()


def get_member_service(database: Database = Depends(get_database)) -> MemberService:
    return build_service(Entity.MEMBERS, database)


def get_project_service(database: Database = Depends(get_database)) -> ProjectService:
    return build_service(Entity.PROJECTS, database)


def get_group_service(database: Database = Depends(get_database)) -> GroupService:
    return build_service(Entity.GROUPS, database)


def get_skill_service(database: Database = Depends(get_database)) -> CatalogService:
    return build_service(Entity.SKILLS, database)


def get_specialty_service(database: Database = Depends(get_database)) -> CatalogService:
    return build_service(Entity.SPECIALTIES, database)


def get_interaction_service(
    database: Database = Depends(get_database),
    synergy_client: SynergyClient = Depends(get_synergy_client),
) -> InteractionService:
    return build_service(Entity.INTERACTIONS, database, synergy_client)


def get_analysis_service(database: Database = Depends(get_database)) -> AnalysisService:
    return build_service(Entity.ANALYSES, database)


def get_stats_service(database: Database = Depends(get_database)) -> StatsService:
    return StatsService(database)
