"""Diff desired claim tags against a volume's tags and apply what is missing."""

from __future__ import annotations

from dataclasses import dataclass, field

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import VolumeResolutionError
from .logging import LogContext
from .metrics import TaggerMetrics
from .services.aws.models import EBSVolume
from .services.ebs.base import VolumeTagProvider


@dataclass
class ReconcileResult:
    """What happened to each desired pair during one reconciliation."""

    applied: list[tuple[str, str]] = field(default_factory=list)
    existing: list[tuple[str, str]] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)

    @property
    def volume_tagged(self) -> bool:
        """True if at least one pair was newly applied."""
        return bool(self.applied)


class TagReconciler:
    """Apply desired tags to a volume, one create call per missing pair.

    A pair counts as present only when both key and value match a remote tag;
    a key with a different value is applied again, which overwrites it.
    Remote tags are fetched fresh on every call.
    """

    def __init__(
        self,
        provider: VolumeTagProvider,
        metrics: TaggerMetrics,
        dry_run: bool = False,
    ) -> None:
        self.provider = provider
        self.metrics = metrics
        self.dry_run = dry_run

    def reconcile(
        self,
        volume: EBSVolume,
        pairs: list[tuple[str, str]],
        log: LogContext,
    ) -> ReconcileResult | None:
        """Reconcile one volume.

        Args:
            volume: Target EBS volume
            pairs: Desired (key, value) tags
            log: Logging context of the claim being handled

        Returns:
            ReconcileResult, or None if the current tags could not be fetched
        """
        log = log.bind(volId=volume.volume_id, region=volume.region)

        try:
            remote_tags = self.provider.get_volume_tags(volume)
        except (ClientError, BotoCoreError, VolumeResolutionError) as e:
            log.error("Cannot get volume", error=e)
            self.metrics.processing_errors.inc()
            return None

        result = ReconcileResult()
        for key, value in pairs:
            tag_log = log.bind(tagKey=key, tagValue=value)
            tag_log.info("Processing EBS Volume")

            if (key, value) in remote_tags:
                tag_log.info("Tag value already exists")
                self.metrics.tags_existing.inc()
                result.existing.append((key, value))
                continue

            if self.dry_run:
                tag_log.info("Running in dry run mode, not adding tag")
                result.skipped.append((key, value))
                continue

            try:
                self.provider.create_tag(volume, key, value)
            except (ClientError, BotoCoreError) as e:
                tag_log.error("Error creating tags", error=e)
                self.metrics.processing_errors.inc()
                result.failed.append((key, value))
                continue

            self.metrics.tags_added.inc()
            result.applied.append((key, value))

        if result.volume_tagged:
            self.metrics.volumes_tagged.inc()

        return result
