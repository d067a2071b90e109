# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Entity → typed service mapping. The only place services are constructed."""
from typing import Optional

from skillmatrix.core.database import Database
from skillmatrix.models.entities import Entity
from skillmatrix.repositories.document_repository import DocumentRepository
from skillmatrix.services.catalog_service import CatalogService
from skillmatrix.services.entity_service import EntityService
from skillmatrix.services.interaction_service import AnalysisService, InteractionService
from skillmatrix.services.member_service import MemberService
from skillmatrix.services.project_service import GroupService, ProjectService
from skillmatrix.services.synergy_client import SynergyClient


def repository(database: Database, entity: Entity) -> DocumentRepository:
    return DocumentRepository(database.collection(entity), entity.label)


def build_service(entity: Entity, database: Database,
                  synergy_client: Optional[SynergyClient] = None) -> EntityService:
    members = repository(database, Entity.MEMBERS)
    if entity is Entity.MEMBERS:
        return MemberService(members)
    if entity is Entity.PROJECTS:
        return ProjectService(repository(database, entity), members)
    if entity is Entity.GROUPS:
        return GroupService(repository(database, entity), members)
    if entity in (Entity.SKILLS, Entity.SPECIALTIES):
        return CatalogService(entity, repository(database, entity), members)
    if entity is Entity.INTERACTIONS:
        return InteractionService(repository(database, entity), members, synergy_client)
    if entity is Entity.ANALYSES:
        return AnalysisService(repository(database, entity))
    raise ValueError(f"No service for {entity!r}")
