"""kube-tagger command line.

Usage:
    kube-tagger                       # Run in cluster
    kube-tagger --local --dry-run     # Run against a kubeconfig without tagging
"""

from __future__ import annotations

import dataclasses
import os

import click
import kopf

from . import __version__
from . import main as handlers  # noqa: F401  # registers the kopf handlers
from .config import TaggerConfig
from .exceptions import ConfigError


@click.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--local", is_flag=True, help="Run outside the cluster using a kubeconfig")
@click.option("--kubeconfig", type=click.Path(dir_okay=False), default=None, help="Path to kubeconfig")
@click.option("--dry-run", is_flag=True, help="Don't actually tag the volumes")
@click.option("--metrics-port", type=int, default=None, help="Port for /metrics, /healthz and /readyz")
@click.version_option(__version__, prog_name="kube-tagger")
def main(
    debug: bool,
    local: bool,
    kubeconfig: str | None,
    dry_run: bool,
    metrics_port: int | None,
) -> None:
    """Watch PersistentVolumeClaims and tag their EBS volumes."""
    try:
        tagger_config = resolve_config(debug, local, kubeconfig, dry_run, metrics_port)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if tagger_config.kubeconfig:
        # kopf's kubeconfig login only reads the environment
        os.environ["KUBECONFIG"] = tagger_config.kubeconfig

    kopf.run(
        clusterwide=True,
        standalone=True,
        memo=kopf.Memo(config=tagger_config),
    )


def resolve_config(
    debug: bool,
    local: bool,
    kubeconfig: str | None,
    dry_run: bool,
    metrics_port: int | None,
) -> TaggerConfig:
    """Overlay command line flags on the environment configuration.

    Flags can only switch options on; an absent flag keeps the environment value.
    """
    overrides: dict[str, object] = {}
    if debug:
        overrides["debug"] = True
    if local:
        overrides["local"] = True
    if dry_run:
        overrides["dry_run"] = True
    if kubeconfig:
        overrides["kubeconfig"] = kubeconfig
    if metrics_port is not None:
        overrides["metrics_port"] = metrics_port
    return dataclasses.replace(TaggerConfig.from_env(), **overrides)
