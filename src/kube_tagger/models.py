"""Data models for watched PersistentVolumeClaims."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import InvalidClaimError


@dataclass(frozen=True)
class StorageClaim:
    """The parts of a PersistentVolumeClaim the tagger reads."""

    namespace: str
    name: str
    annotations: dict[str, str] = field(default_factory=dict)
    volume_name: str = ""

    @classmethod
    def from_body(cls, body: Any) -> StorageClaim:
        """Build a claim from a raw watch object.

        Args:
            body: The ``object`` of a watch event

        Returns:
            StorageClaim

        Raises:
            InvalidClaimError: If the object does not look like a claim
        """
        if not isinstance(body, Mapping):
            raise InvalidClaimError(f"Unexpected event object type: {type(body).__name__}")

        meta = body.get("metadata")
        if not isinstance(meta, Mapping) or not meta.get("name"):
            raise InvalidClaimError("Event object has no metadata.name")

        annotations = meta.get("annotations") or {}
        if not isinstance(annotations, Mapping):
            raise InvalidClaimError("metadata.annotations is not a mapping")

        spec = body.get("spec") or {}
        if not isinstance(spec, Mapping):
            raise InvalidClaimError("spec is not a mapping")

        return cls(
            namespace=meta.get("namespace", ""),
            name=meta["name"],
            annotations={str(k): str(v) for k, v in annotations.items()},
            volume_name=spec.get("volumeName") or "",
        )
