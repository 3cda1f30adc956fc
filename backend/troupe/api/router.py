from __future__ import annotations
"""Master API router, mounts all sub-routers."""

from fastapi import APIRouter

from troupe.api.sketches import router as sketches_router
from troupe.api.characters import router as characters_router
from troupe.api.props import router as props_router
from troupe.api.props import sketch_router as sketch_props_router
from troupe.api.scripts import router as scripts_router
from troupe.api.media import prop_router as prop_media_router
from troupe.api.media import sketch_router as sketch_media_router
from troupe.api.team_members import router as team_members_router
from troupe.api.storage import router as storage_router
from troupe.api.system import router as system_router

api_router = APIRouter(prefix="/api", redirect_slashes=False)

api_router.include_router(sketches_router, prefix="/sketches", tags=["Sketches"])
api_router.include_router(characters_router, prefix="/sketches/{sketch_id}/characters", tags=["Characters"])
api_router.include_router(sketch_props_router, prefix="/sketches/{sketch_id}/props", tags=["Props"])
api_router.include_router(scripts_router, prefix="/sketches/{sketch_id}/scripts", tags=["Scripts"])
api_router.include_router(sketch_media_router, prefix="/sketches/{sketch_id}/media", tags=["Media"])
api_router.include_router(props_router, prefix="/props", tags=["Props"])
api_router.include_router(prop_media_router, prefix="/props/{prop_id}/media", tags=["Media"])
api_router.include_router(team_members_router, prefix="/team-members", tags=["Team"])
api_router.include_router(storage_router, prefix="/storage", tags=["Storage"])
api_router.include_router(system_router, prefix="/system", tags=["System"])
