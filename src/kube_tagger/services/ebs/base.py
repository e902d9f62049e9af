"""Base volume tag provider interface."""

from __future__ import annotations

from typing import Protocol

from ..aws.models import EBSVolume


class VolumeTagProvider(Protocol):
    """Protocol defining the tag operations needed on a block-storage volume."""

    def get_volume_tags(self, volume: EBSVolume) -> set[tuple[str, str]]:
        """Return the (key, value) tags currently attached to the volume."""
        ...

    def create_tag(self, volume: EBSVolume, key: str, value: str) -> None:
        """Create or overwrite a single tag on the volume."""
        ...
