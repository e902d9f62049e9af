"""Exception types raised by the kube-tagger operator."""

from __future__ import annotations


class KubeTaggerError(Exception):
    """Base class for all kube-tagger errors."""


class ConfigError(KubeTaggerError):
    """Raised when the operator configuration is invalid."""


class InvalidClaimError(KubeTaggerError):
    """Raised when a watch event carries something that is not a claim."""


class InvalidVolumeIDError(KubeTaggerError):
    """Raised when an EBS volume URL does not have the aws://zone/id shape."""

    def __init__(self, volume_url: str, reason: str) -> None:
        self.volume_url = volume_url
        self.reason = reason
        super().__init__(f"Invalid EBS volume id {volume_url!r}: {reason}")


class VolumeResolutionError(KubeTaggerError):
    """Raised when a claim cannot be resolved to its backing EBS volume."""

    def __init__(self, volume_name: str, reason: str, cause: Exception | None = None) -> None:
        self.volume_name = volume_name
        self.reason = reason
        self.cause = cause
        super().__init__(f"Cannot resolve volume {volume_name!r}: {reason}")
