"""Utility functions for the kube-tagger operator."""

from .errors import sanitize_error_message, sanitize_exception
from .events import emit_event, emit_tag_failed, emit_volume_tagged

__all__ = [
    "sanitize_error_message",
    "sanitize_exception",
    "emit_event",
    "emit_tag_failed",
    "emit_volume_tagged",
]
