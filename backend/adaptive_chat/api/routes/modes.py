"""Persona (mode) catalog routes. Public: no authentication required."""

from fastapi import APIRouter

from adaptive_chat.api.deps import DbSession
from adaptive_chat.schemas.modes import ModeDefinition
from adaptive_chat.services import personas

router = APIRouter(prefix="/modes", tags=["modes"])


@router.get("", response_model=list[ModeDefinition])
async def list_modes(db: DbSession) -> list[ModeDefinition]:
    """All personas with their themes, in catalog order."""
    modes = await personas.list_modes(db)
    return [ModeDefinition.model_validate(m) for m in modes]


@router.get("/{name}", response_model=ModeDefinition)
async def get_mode(name: str, db: DbSession) -> ModeDefinition:
    mode = await personas.get_mode(db, name)
    return ModeDefinition.model_validate(mode)
