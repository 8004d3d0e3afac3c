"""FCPXML schema versions."""

from enum import Enum
from typing import Optional, Tuple

from ..config import Settings, settings as default_settings


class SchemaVersion(str, Enum):
    """Supported FCPXML DTD versions, ordered by release."""
    V1_5 = "1.5"
    V1_6 = "1.6"
    V1_7 = "1.7"
    V1_8 = "1.8"
    V1_9 = "1.9"
    V1_10 = "1.10"
    V1_11 = "1.11"
    V1_12 = "1.12"
    V1_13 = "1.13"
    V1_14 = "1.14"

    @property
    def minor(self) -> int:
        return int(self.value.split(".")[1])

    @property
    def key(self) -> Tuple[int, int]:
        major, minor = self.value.split(".")
        return int(major), int(minor)

    @property
    def dtd_resource_name(self) -> str:
        """Base name of the bundled grammar for this version."""
        return f"Final_Cut_Pro_XML_DTD_version_{self.value}"

    @property
    def uses_asset_src(self) -> bool:
        """True before 1.9, where ``asset`` carried ``src`` directly."""
        return self < SchemaVersion.V1_9

    def is_at_least(self, other: "SchemaVersion") -> bool:
        return self >= other

    def __lt__(self, other):
        if not isinstance(other, SchemaVersion):
            return NotImplemented
        return self.key < other.key

    # str mixin would otherwise compare lexically ("1.10" < "1.9")
    def __le__(self, other):
        if not isinstance(other, SchemaVersion):
            return NotImplemented
        return self.key <= other.key

    def __gt__(self, other):
        if not isinstance(other, SchemaVersion):
            return NotImplemented
        return self.key > other.key

    def __ge__(self, other):
        if not isinstance(other, SchemaVersion):
            return NotImplemented
        return self.key >= other.key

    def __hash__(self):
        return hash(self.value)

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, text: Optional[str]) -> Optional["SchemaVersion"]:
        """Parse ``"1.14"`` or ``"1_14"``; None when unsupported."""
        if not text:
            return None
        normalized = text.strip().replace("_", ".")
        for version in cls:
            if version.value == normalized:
                return version
        return None

    @classmethod
    def default(cls, settings: Optional[Settings] = None) -> "SchemaVersion":
        """The configured ``default_version``.

        Raises:
            ValueError: If the configured version is not supported
        """
        configured = (settings or default_settings).default_version
        version = cls.from_string(configured)
        if version is None:
            raise ValueError(f"Unsupported default_version {configured!r}")
        return version

    @classmethod
    def latest(cls) -> "SchemaVersion":
        return max(cls)
