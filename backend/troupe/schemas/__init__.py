"""Pydantic v2 schemas package."""

from troupe.schemas.sketch import SketchCreate, SketchRead, SketchReorder, SketchUpdate
from troupe.schemas.team_member import (
    TeamMemberCreate,
    TeamMemberRead,
    TeamMemberReorder,
    TeamMemberUpdate,
)
from troupe.schemas.character import CharacterCreate, CharacterRead, CharacterUpdate
from troupe.schemas.prop import PropCreate, PropRead, PropUpdate
from troupe.schemas.script import ScriptCreate, ScriptRead
from troupe.schemas.media import MediaCreate, MediaRead
from troupe.schemas.storage import FileUrlRead, StoredFileRead, UploadUrlRead

__all__ = [
    "SketchCreate",
    "SketchRead",
    "SketchReorder",
    "SketchUpdate",
    "TeamMemberCreate",
    "TeamMemberRead",
    "TeamMemberReorder",
    "TeamMemberUpdate",
    "CharacterCreate",
    "CharacterRead",
    "CharacterUpdate",
    "PropCreate",
    "PropRead",
    "PropUpdate",
    "ScriptCreate",
    "ScriptRead",
    "MediaCreate",
    "MediaRead",
    "FileUrlRead",
    "StoredFileRead",
    "UploadUrlRead",
]
