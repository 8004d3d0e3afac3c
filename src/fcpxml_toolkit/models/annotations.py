"""
Annotation models.

Markers, keywords, ratings and metadata attach to a whole timeline or to
individual clips. Everything except Metadata is immutable so the same
annotation can be compared and removed by value.
"""

from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

from .rational_time import RationalTime


def _one_frame_at_24() -> RationalTime:
    return RationalTime(1, 24)


class Marker(BaseModel):
    """A standard or to-do marker."""
    model_config = ConfigDict(frozen=True)

    start: RationalTime = Field(..., description="Marker position")
    duration: RationalTime = Field(default_factory=_one_frame_at_24, description="Marker length")
    value: str = Field(..., description="Marker label")
    note: Optional[str] = Field(None, description="Free-form note")
    completed: Optional[bool] = Field(None, description="None for standard markers, set for to-do markers")

    @property
    def is_todo(self) -> bool:
        return self.completed is not None


class ChapterMarker(BaseModel):
    """A chapter marker with an optional poster frame."""
    model_config = ConfigDict(frozen=True)

    start: RationalTime = Field(..., description="Chapter position")
    duration: RationalTime = Field(default_factory=_one_frame_at_24, description="Marker length")
    value: str = Field(..., description="Chapter title")
    note: Optional[str] = Field(None, description="Free-form note")
    poster_offset: Optional[RationalTime] = Field(None, description="Poster frame relative to start")


class Keyword(BaseModel):
    """A keyword range."""
    model_config = ConfigDict(frozen=True)

    start: RationalTime = Field(..., description="Range start")
    duration: RationalTime = Field(..., description="Range length")
    value: str = Field(..., description="Comma separated keywords")
    note: Optional[str] = Field(None, description="Free-form note")

    @property
    def keywords(self):
        return [word.strip() for word in self.value.split(",") if word.strip()]


class RatingValue(str, Enum):
    """Favorite or reject rating."""
    FAVORITE = "favorite"
    REJECTED = "reject"


class Rating(BaseModel):
    """A favorite or rejected range."""
    model_config = ConfigDict(frozen=True)

    start: RationalTime = Field(..., description="Range start")
    duration: RationalTime = Field(..., description="Range length")
    value: RatingValue = Field(..., description="Favorite or rejected")
    note: Optional[str] = Field(None, description="Free-form note")


class MetadataKey(str, Enum):
    """Well-known metadata keys written by Final Cut Pro."""
    REEL = "com.apple.proapps.studio.reel"
    SCENE = "com.apple.proapps.studio.scene"
    TAKE = "com.apple.proapps.studio.take"
    DESCRIPTION = "com.apple.proapps.spotlight.kMDItemDescription"
    CAMERA_NAME = "com.apple.proapps.studio.cameraName"
    CAMERA_ANGLE = "com.apple.proapps.studio.cameraAngle"
    SHOT_TYPE = "com.apple.proapps.studio.shotType"


class Metadata(BaseModel):
    """Key/value metadata entries."""
    entries: Dict[str, str] = Field(default_factory=dict, description="Metadata key to value")

    def get(self, key) -> Optional[str]:
        return self.entries.get(_key_name(key))

    def set(self, key, value: Optional[str]) -> None:
        """Set an entry; None removes it."""
        name = _key_name(key)
        if value is None:
            self.entries.pop(name, None)
        else:
            self.entries[name] = value

    @property
    def reel(self) -> Optional[str]:
        return self.get(MetadataKey.REEL)

    @reel.setter
    def reel(self, value: Optional[str]) -> None:
        self.set(MetadataKey.REEL, value)

    @property
    def scene(self) -> Optional[str]:
        return self.get(MetadataKey.SCENE)

    @scene.setter
    def scene(self, value: Optional[str]) -> None:
        self.set(MetadataKey.SCENE, value)

    @property
    def take(self) -> Optional[str]:
        return self.get(MetadataKey.TAKE)

    @take.setter
    def take(self, value: Optional[str]) -> None:
        self.set(MetadataKey.TAKE, value)

    @property
    def description(self) -> Optional[str]:
        return self.get(MetadataKey.DESCRIPTION)

    @description.setter
    def description(self, value: Optional[str]) -> None:
        self.set(MetadataKey.DESCRIPTION, value)

    @property
    def camera_name(self) -> Optional[str]:
        return self.get(MetadataKey.CAMERA_NAME)

    @camera_name.setter
    def camera_name(self, value: Optional[str]) -> None:
        self.set(MetadataKey.CAMERA_NAME, value)

    @property
    def camera_angle(self) -> Optional[str]:
        return self.get(MetadataKey.CAMERA_ANGLE)

    @camera_angle.setter
    def camera_angle(self, value: Optional[str]) -> None:
        self.set(MetadataKey.CAMERA_ANGLE, value)

    @property
    def shot_type(self) -> Optional[str]:
        return self.get(MetadataKey.SHOT_TYPE)

    @shot_type.setter
    def shot_type(self, value: Optional[str]) -> None:
        self.set(MetadataKey.SHOT_TYPE, value)

    @property
    def is_empty(self) -> bool:
        return not self.entries


def _key_name(key) -> str:
    return key.value if isinstance(key, MetadataKey) else str(key)
