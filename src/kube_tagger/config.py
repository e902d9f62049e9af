"""Operator configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import DEFAULT_METRICS_PORT
from .exceptions import ConfigError

MIN_PORT = 1
MAX_PORT = 65535

TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class TaggerConfig:
    """Process configuration.

    Invalid values raise ConfigError at construction so the operator fails
    before it starts watching.
    """

    debug: bool = False
    local: bool = False
    kubeconfig: str | None = None
    dry_run: bool = False
    metrics_port: int = DEFAULT_METRICS_PORT
    post_events: bool = True

    def __post_init__(self) -> None:
        if not (MIN_PORT <= self.metrics_port <= MAX_PORT):
            raise ConfigError(
                f"METRICS_PORT must be between {MIN_PORT} and {MAX_PORT}: {self.metrics_port}"
            )

    @classmethod
    def from_env(cls) -> TaggerConfig:
        """Load configuration from environment variables.

        Environment Variables:
            KUBE_TAGGER_DEBUG: Enable debug logging (default: false)
            KUBE_TAGGER_LOCAL: Run outside the cluster using a kubeconfig (default: false)
            KUBECONFIG: Path to the kubeconfig used in local mode
            KUBE_TAGGER_DRY_RUN: Do not tag volumes, only log (default: false)
            METRICS_PORT: Port for /metrics, /healthz and /readyz (default: 2112)
            KUBE_TAGGER_POST_EVENTS: Post Kubernetes events on tagged claims (default: true)
        """

        def get_int(key: str, default: int) -> int:
            value = os.environ.get(key)
            if value is None or value == "":
                return default
            try:
                return int(value)
            except ValueError as e:
                raise ConfigError(f"{key} must be an integer: {value}") from e

        def get_bool(key: str, default: bool) -> bool:
            value = os.environ.get(key, "").lower()
            if not value:
                return default
            return value in TRUE_VALUES

        return cls(
            debug=get_bool("KUBE_TAGGER_DEBUG", False),
            local=get_bool("KUBE_TAGGER_LOCAL", False),
            kubeconfig=os.environ.get("KUBECONFIG") or None,
            dry_run=get_bool("KUBE_TAGGER_DRY_RUN", False),
            metrics_port=get_int("METRICS_PORT", DEFAULT_METRICS_PORT),
            post_events=get_bool("KUBE_TAGGER_POST_EVENTS", True),
        )
