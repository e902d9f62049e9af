"""Per-event claim processing: filter, parse, resolve, reconcile."""

from __future__ import annotations

import logging
from typing import Any

from .constants import HANDLED_EVENT_TYPES
from .exceptions import InvalidClaimError, VolumeResolutionError
from .logging import LogContext
from .metrics import TaggerMetrics
from .models import StorageClaim
from .reconciler import ReconcileResult, TagReconciler
from .resolver import resolve_volume
from .tags import TagSpec, is_ebs_claim
from .utils.events import emit_tag_failed, emit_volume_tagged


class ClaimProcessor:
    """Handle PersistentVolumeClaim watch events one at a time.

    Every failure that concerns a single claim or tag is logged, counted in
    the error counter, and swallowed so the watch keeps going.
    """

    def __init__(
        self,
        core_api: Any,
        reconciler: TagReconciler,
        metrics: TaggerMetrics,
        post_events: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            core_api: Kubernetes CoreV1Api instance used to read PersistentVolumes
            reconciler: Tag reconciler for the resolved volumes
            metrics: Process metrics
            post_events: Whether to post Kubernetes events on tagged claims
            logger: Logger to use, defaults to this module's logger
        """
        self.core_api = core_api
        self.reconciler = reconciler
        self.metrics = metrics
        self.post_events = post_events
        self.logger = logger or logging.getLogger(__name__)

    def handle_event(self, event_type: str | None, body: Any) -> ReconcileResult | None:
        """Process one watch event.

        Args:
            event_type: Watch event type (ADDED, MODIFIED, DELETED, ...), None for
                the initial listing of existing claims
            body: The claim object carried by the event

        Returns:
            ReconcileResult when tags were reconciled, None otherwise
        """
        self.metrics.events_processed.inc()
        log = LogContext(self.logger)

        if event_type not in HANDLED_EVENT_TYPES:
            log.debug("Ignoring event", eventType=event_type)
            return None

        try:
            claim = StorageClaim.from_body(body)
        except InvalidClaimError as e:
            log.error("Unexpected event type", error=e, eventType=event_type)
            self.metrics.processing_errors.inc()
            return None

        log = log.bind(
            namespace=claim.namespace,
            volumeClaimName=claim.name,
            volumeName=claim.volume_name,
        )

        if not is_ebs_claim(claim.annotations):
            log.warning("Volume is not EBS. Ignoring")
            return None

        tag_spec = TagSpec.from_annotations(claim.annotations)
        if tag_spec is None:
            log.debug("No tags requested")
            return None

        parsed = tag_spec.parse()
        for token in parsed.malformed:
            log.error("Skipping malformed tag", tag=token)
            self.metrics.processing_errors.inc()
        if not parsed.pairs:
            return None

        try:
            volume = resolve_volume(self.core_api, claim, self.metrics)
        except VolumeResolutionError as e:
            log.error("Cannot find EBS volume associated with Volume Claim", error=e)
            self.metrics.processing_errors.inc()
            return None

        log.info("Processing Volume Tags", volId=volume.volume_id, region=volume.region)
        result = self.reconciler.reconcile(volume, parsed.pairs, log)
        if result is None:
            return None

        if result.skipped:
            log.info(
                "Running in dry run mode, not adding tags",
                tags=tag_spec.raw,
                volId=volume.volume_id,
            )

        if self.post_events:
            if result.applied:
                emit_volume_tagged(body, volume.volume_id, result.applied)
            for key, _ in result.failed:
                emit_tag_failed(body, volume.volume_id, key)

        return result
