"""Main entry point for the kube-tagger operator."""

from __future__ import annotations

import logging
import threading
from typing import Any

import kopf
from kubernetes import client, config as k8s_config

from . import health
from . import logging as structured_logging
from .config import TaggerConfig
from .constants import CLAIM_PLURAL, CLAIM_VERSION
from .exceptions import ConfigError
from .metrics import TaggerMetrics
from .processor import ClaimProcessor
from .reconciler import TagReconciler
from .services.aws.client import AWSVolumeTagProvider

logger = logging.getLogger(__name__)


def get_config(memo: kopf.Memo) -> TaggerConfig:
    """Return the configuration handed over by the CLI, or read it from the environment."""
    tagger_config = memo.get("config")
    if tagger_config is None:
        tagger_config = TaggerConfig.from_env()
        memo["config"] = tagger_config
    return tagger_config


def build_core_api(tagger_config: TaggerConfig) -> client.CoreV1Api:
    """Create the CoreV1 client from in-cluster credentials or a kubeconfig.

    Raises:
        kubernetes.config.ConfigException: If no usable credentials are found
    """
    if tagger_config.local:
        k8s_config.load_kube_config(config_file=tagger_config.kubeconfig)
    else:
        k8s_config.load_incluster_config()
    return client.CoreV1Api()


def build_processor(tagger_config: TaggerConfig, tagger_metrics: TaggerMetrics) -> ClaimProcessor:
    """Wire the claim processor with its Kubernetes and AWS collaborators."""
    provider = AWSVolumeTagProvider(metrics=tagger_metrics)
    reconciler = TagReconciler(provider, tagger_metrics, dry_run=tagger_config.dry_run)
    return ClaimProcessor(
        build_core_api(tagger_config),
        reconciler,
        tagger_metrics,
        post_events=tagger_config.post_events,
    )


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator."""
    try:
        tagger_config = get_config(memo)
    except ConfigError as e:
        raise kopf.PermanentError(str(e)) from e

    structured_logging.setup_structured_logging(tagger_config.debug)

    # Claims are handled strictly one at a time
    settings.execution.max_workers = 1
    settings.posting.enabled = tagger_config.post_events

    tagger_metrics = memo.get("metrics") or TaggerMetrics()
    memo["metrics"] = tagger_metrics

    ready = threading.Event()
    memo["ready"] = ready
    memo["server"] = health.start_metrics_server(
        tagger_config.metrics_port, tagger_metrics.registry, ready
    )

    try:
        memo["processor"] = build_processor(tagger_config, tagger_metrics)
    except k8s_config.ConfigException as e:
        raise kopf.PermanentError(f"Error building Kubernetes client config: {e}") from e

    ready.set()
    logger.info(
        f"kube-tagger started (dry_run={tagger_config.dry_run}, local={tagger_config.local}, "
        f"metrics_port={tagger_config.metrics_port})"
    )


@kopf.on.login()
def login(memo: kopf.Memo, **kwargs: Any) -> kopf.ConnectionInfo | None:
    """Authenticate with a kubeconfig in local mode, the service account otherwise."""
    if get_config(memo).local:
        return kopf.login_with_kubeconfig(**kwargs)
    return kopf.login_with_service_account(**kwargs)


@kopf.on.cleanup()
def shutdown(memo: kopf.Memo, **_: Any) -> None:
    """Stop the metrics server."""
    server = memo.get("server")
    if server is not None:
        server.shutdown()


@kopf.on.event(CLAIM_VERSION, CLAIM_PLURAL)
def handle_claim_event(event: dict[str, Any], memo: kopf.Memo, **_: Any) -> None:
    """Handle a PersistentVolumeClaim watch event."""
    memo["processor"].handle_event(event.get("type"), event.get("object"))
