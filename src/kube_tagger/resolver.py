"""Resolve a claim to the EBS volume that backs it."""

from __future__ import annotations

import time
from typing import Any

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from .exceptions import InvalidVolumeIDError, VolumeResolutionError
from .metrics import TaggerMetrics
from .models import StorageClaim
from .services.aws.models import EBSVolume, parse_volume_id


def resolve_volume(
    core_api: Any,
    claim: StorageClaim,
    metrics: TaggerMetrics | None = None,
) -> EBSVolume:
    """Look up the bound PersistentVolume and return its EBS volume.

    Args:
        core_api: Kubernetes CoreV1Api instance
        claim: Claim to resolve
        metrics: Optional metrics to record the API call on

    Returns:
        EBSVolume backing the claim

    Raises:
        VolumeResolutionError: If the claim is unbound, the volume cannot be
            read, or it is not an EBS volume with a well-formed id
    """
    if not claim.volume_name:
        raise VolumeResolutionError("", "claim is not bound to a volume")

    start_time = time.time()
    try:
        volume = core_api.read_persistent_volume(claim.volume_name)
    except ApiException as e:
        if metrics is not None:
            metrics.record_api_call("k8s", "read_persistent_volume", "error", time.time() - start_time)
        raise VolumeResolutionError(claim.volume_name, f"API error {e.status}", cause=e) from e
    except HTTPError as e:
        if metrics is not None:
            metrics.record_api_call("k8s", "read_persistent_volume", "error", time.time() - start_time)
        raise VolumeResolutionError(claim.volume_name, f"connection error: {e}", cause=e) from e
    if metrics is not None:
        metrics.record_api_call("k8s", "read_persistent_volume", "success", time.time() - start_time)

    ebs_source = volume.spec.aws_elastic_block_store if volume.spec else None
    if ebs_source is None or not ebs_source.volume_id:
        raise VolumeResolutionError(claim.volume_name, "volume has no awsElasticBlockStore source")

    try:
        return parse_volume_id(ebs_source.volume_id)
    except InvalidVolumeIDError as e:
        raise VolumeResolutionError(claim.volume_name, e.reason, cause=e) from e
