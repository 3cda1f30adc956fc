"""ORM model package — registers all models with Base.metadata."""

from troupe.models.sketch import Sketch
from troupe.models.team_member import TeamMember
from troupe.models.character import Character
from troupe.models.prop import Prop, PropStatus, SketchProp
from troupe.models.script import Script
from troupe.models.media import PropMedia, SketchMedia
from troupe.models.stored_file import StoredFile, UploadSlot
from troupe.models.order_counter import OrderCounter

__all__ = [
    "Sketch",
    "TeamMember",
    "Character",
    "Prop",
    "PropStatus",
    "SketchProp",
    "Script",
    "SketchMedia",
    "PropMedia",
    "StoredFile",
    "UploadSlot",
    "OrderCounter",
]
