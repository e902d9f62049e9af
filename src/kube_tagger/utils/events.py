"""Utilities for emitting Kubernetes events on claims."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import EVENT_REASON_TAG_FAILED, EVENT_REASON_VOLUME_TAGGED


def emit_event(
    body: Any,
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Object the event is about
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_volume_tagged(body: Any, volume_id: str, tags: list[tuple[str, str]]) -> None:
    """Emit volume tagged event."""
    tag_list = ", ".join(f"{key}={value}" for key, value in tags)
    emit_event(body, EVENT_REASON_VOLUME_TAGGED, f"Volume {volume_id} tagged with {tag_list}")


def emit_tag_failed(body: Any, volume_id: str, key: str) -> None:
    """Emit tag failed event."""
    emit_event(body, EVENT_REASON_TAG_FAILED, f"Failed to tag volume {volume_id} with {key}", type_="Warning")
