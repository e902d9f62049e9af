"""Data models for AWS EBS volumes."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ...constants import VOLUME_URL_SCHEME
from ...exceptions import InvalidVolumeIDError

_ZONE_SUFFIX = re.compile(r"[a-z]$")


@dataclass(frozen=True)
class EBSVolume:
    """An EBS volume addressed by region and bare volume id."""

    region: str
    volume_id: str


def zone_to_region(zone: str) -> str:
    """Strip the availability-zone letter from a zone name (eu-west-1b -> eu-west-1)."""
    return _ZONE_SUFFIX.sub("", zone)


def parse_volume_id(volume_url: str) -> EBSVolume:
    """Decompose a Kubernetes EBS volume URL into region and volume id.

    Kubernetes reports in-tree EBS volumes as ``aws://eu-west-1b/vol-0123``.

    Args:
        volume_url: Volume URL from the PersistentVolume spec

    Returns:
        EBSVolume with the region and the bare volume id

    Raises:
        InvalidVolumeIDError: If the URL does not have exactly four
            slash-separated segments, or the scheme, zone or id is wrong
    """
    segments = volume_url.split("/")
    if len(segments) != 4:
        raise InvalidVolumeIDError(volume_url, f"expected 4 segments, got {len(segments)}")

    scheme, empty, zone, volume_id = segments
    if scheme != VOLUME_URL_SCHEME or empty:
        raise InvalidVolumeIDError(volume_url, f"expected {VOLUME_URL_SCHEME}// prefix")
    if not zone:
        raise InvalidVolumeIDError(volume_url, "missing availability zone")
    if not volume_id:
        raise InvalidVolumeIDError(volume_url, "missing volume id")

    return EBSVolume(region=zone_to_region(zone), volume_id=volume_id)
