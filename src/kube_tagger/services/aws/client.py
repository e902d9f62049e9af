"""AWS EC2 client implementation for EBS volume tags."""

from __future__ import annotations

import logging
import time
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ...exceptions import VolumeResolutionError
from ...metrics import TaggerMetrics
from .models import EBSVolume

logger = logging.getLogger(__name__)


class AWSVolumeTagProvider:
    """Tag EBS volumes through the EC2 API.

    One EC2 client is created per region on first use and reused afterwards.
    Credentials come from the default boto3 chain (environment, web identity
    or instance profile).
    """

    def __init__(
        self,
        session: boto3.session.Session | None = None,
        metrics: TaggerMetrics | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            session: Optional boto3 session, a default session is used otherwise
            metrics: Optional metrics to record API calls on
        """
        self.session = session or boto3.session.Session()
        self.metrics = metrics
        self.config = boto3.session.Config(retries={"mode": "standard"})
        self._clients: dict[str, Any] = {}

    def client_for(self, region: str) -> Any:
        """Return the EC2 client for a region, creating it on first use."""
        if region not in self._clients:
            logger.debug(f"Creating EC2 client for region {region}")
            self._clients[region] = self.session.client("ec2", region_name=region, config=self.config)
        return self._clients[region]

    def _record(self, operation: str, result: str, start_time: float) -> None:
        if self.metrics is not None:
            self.metrics.record_api_call("ec2", operation, result, time.time() - start_time)

    def get_volume_tags(self, volume: EBSVolume) -> set[tuple[str, str]]:
        """Fetch the tags currently attached to a volume.

        Args:
            volume: Target EBS volume

        Returns:
            Set of (key, value) pairs

        Raises:
            ClientError: If the EC2 API call fails
            VolumeResolutionError: If EC2 returns no volume for the id
        """
        start_time = time.time()
        try:
            response = self.client_for(volume.region).describe_volumes(VolumeIds=[volume.volume_id])
        except (ClientError, BotoCoreError) as e:
            self._record("describe_volumes", "error", start_time)
            logger.error(f"Failed to describe volume {volume.volume_id} in {volume.region}: {e}")
            raise
        self._record("describe_volumes", "success", start_time)

        volumes = response.get("Volumes", [])
        if not volumes:
            raise VolumeResolutionError(volume.volume_id, f"volume not found in {volume.region}")

        return {(tag["Key"], tag["Value"]) for tag in volumes[0].get("Tags", [])}

    def create_tag(self, volume: EBSVolume, key: str, value: str) -> None:
        """Create or overwrite a single tag on a volume.

        Raises:
            ClientError: If the EC2 API call fails
        """
        start_time = time.time()
        try:
            response = self.client_for(volume.region).create_tags(
                Resources=[volume.volume_id],
                Tags=[{"Key": key, "Value": value}],
            )
        except (ClientError, BotoCoreError) as e:
            self._record("create_tags", "error", start_time)
            logger.error(f"Failed to tag volume {volume.volume_id} with {key}: {e}")
            raise
        self._record("create_tags", "success", start_time)
        logger.debug(f"Returned value from CreateTags call: {response}")
