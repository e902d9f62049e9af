"""Shared fixtures for kube-tagger tests."""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from kubernetes import client
from prometheus_client import CollectorRegistry

from kube_tagger.constants import (
    ANNOTATION_STORAGE_PROVISIONER,
    ANNOTATION_TAGS,
    EBS_PROVISIONER,
)
from kube_tagger.logging import LogContext
from kube_tagger.metrics import TaggerMetrics
from kube_tagger.services.aws.models import EBSVolume


class FakeTagProvider:
    """In-memory stand-in for the EC2 tagging API."""

    def __init__(self, tags: dict[str, set[tuple[str, str]]] | None = None) -> None:
        self.tags = tags or {}
        self.create_calls: list[tuple[str, str, str]] = []
        self.failing_keys: set[str] = set()

    def get_volume_tags(self, volume: EBSVolume) -> set[tuple[str, str]]:
        return set(self.tags.get(volume.volume_id, set()))

    def create_tag(self, volume: EBSVolume, key: str, value: str) -> None:
        self.create_calls.append((volume.volume_id, key, value))
        if key in self.failing_keys:
            raise ClientError({"Error": {"Code": "InvalidParameterValue"}}, "CreateTags")
        current = {(k, v) for k, v in self.tags.get(volume.volume_id, set()) if k != key}
        current.add((key, value))
        self.tags[volume.volume_id] = current


def metric_value(tagger_metrics: TaggerMetrics, name: str) -> float:
    """Read a counter sample from the private registry."""
    return tagger_metrics.registry.get_sample_value(name) or 0.0


def make_claim_body(
    name: str = "data-postgres-0",
    namespace: str = "default",
    volume_name: str = "pvc-1234",
    annotations: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Build a PersistentVolumeClaim as it appears in a watch event."""
    if annotations is None:
        annotations = {
            ANNOTATION_STORAGE_PROVISIONER: EBS_PROVISIONER,
            ANNOTATION_TAGS: "env=prod,team=infra",
        }
    return {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "uid": "3f1c7a2e-0000-0000-0000-000000000001",
            "annotations": annotations,
        },
        "spec": {"volumeName": volume_name},
    }


def make_persistent_volume(volume_url: str | None = "aws://eu-west-1b/vol-0123456789abcdef0") -> client.V1PersistentVolume:
    """Build a PersistentVolume, EBS-backed unless volume_url is None."""
    ebs = client.V1AWSElasticBlockStoreVolumeSource(volume_id=volume_url) if volume_url else None
    return client.V1PersistentVolume(
        metadata=client.V1ObjectMeta(name="pvc-1234"),
        spec=client.V1PersistentVolumeSpec(aws_elastic_block_store=ebs),
    )


@pytest.fixture
def tagger_metrics() -> TaggerMetrics:
    """Metrics on a private registry."""
    return TaggerMetrics(CollectorRegistry())


@pytest.fixture
def log_context() -> LogContext:
    """Logging context for tests."""
    return LogContext(logging.getLogger("kube_tagger.tests"))


@pytest.fixture
def fake_provider() -> FakeTagProvider:
    """Empty in-memory tag provider."""
    return FakeTagProvider()


@pytest.fixture
def core_api() -> MagicMock:
    """CoreV1Api mock resolving every claim to an EBS volume."""
    api = MagicMock()
    api.read_persistent_volume.return_value = make_persistent_volume()
    return api
