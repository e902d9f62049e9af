"""Tests for the tag reconciler."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from conftest import FakeTagProvider, metric_value
from kube_tagger.reconciler import ReconcileResult, TagReconciler
from kube_tagger.services.aws.models import EBSVolume

VOLUME = EBSVolume(region="eu-west-1", volume_id="vol-0123456789abcdef0")


class TestTagReconciler:
    """Test cases for TagReconciler.reconcile."""

    def test_applies_only_missing_pairs(self, tagger_metrics, log_context):
        """Test a pair already on the volume is counted as existing and not re-applied."""
        provider = FakeTagProvider({VOLUME.volume_id: {("env", "prod")}})
        reconciler = TagReconciler(provider, tagger_metrics)

        result = reconciler.reconcile(VOLUME, [("env", "prod"), ("team", "infra")], log_context)

        assert provider.create_calls == [(VOLUME.volume_id, "team", "infra")]
        assert result.applied == [("team", "infra")]
        assert result.existing == [("env", "prod")]
        assert metric_value(tagger_metrics, "kubetagger_volume_tags_existing_total") == 1
        assert metric_value(tagger_metrics, "kubetagger_volume_tags_added_total") == 1
        assert metric_value(tagger_metrics, "kubetagger_volumes_tagged_total") == 1

    def test_same_key_different_value_is_reapplied(self, tagger_metrics, log_context):
        provider = FakeTagProvider({VOLUME.volume_id: {("env", "dev")}})
        reconciler = TagReconciler(provider, tagger_metrics)

        result = reconciler.reconcile(VOLUME, [("env", "prod")], log_context)

        assert result.applied == [("env", "prod")]
        assert provider.tags[VOLUME.volume_id] == {("env", "prod")}

    def test_second_pass_is_idempotent(self, tagger_metrics, log_context):
        """Test reconciling twice makes no create calls the second time."""
        provider = FakeTagProvider()
        reconciler = TagReconciler(provider, tagger_metrics)
        pairs = [("env", "prod"), ("team", "infra")]

        reconciler.reconcile(VOLUME, pairs, log_context)
        calls_after_first = len(provider.create_calls)
        second = reconciler.reconcile(VOLUME, pairs, log_context)

        assert calls_after_first == 2
        assert len(provider.create_calls) == 2
        assert second.applied == []
        assert second.existing == pairs
        assert metric_value(tagger_metrics, "kubetagger_volumes_tagged_total") == 1

    def test_volume_tagged_counted_once_per_claim(self, tagger_metrics, log_context):
        reconciler = TagReconciler(FakeTagProvider(), tagger_metrics)

        reconciler.reconcile(VOLUME, [("a", "1"), ("b", "2"), ("c", "3")], log_context)

        assert metric_value(tagger_metrics, "kubetagger_volume_tags_added_total") == 3
        assert metric_value(tagger_metrics, "kubetagger_volumes_tagged_total") == 1

    def test_nothing_missing_does_not_count_volume(self, tagger_metrics, log_context):
        provider = FakeTagProvider({VOLUME.volume_id: {("env", "prod")}})
        reconciler = TagReconciler(provider, tagger_metrics)

        result = reconciler.reconcile(VOLUME, [("env", "prod")], log_context)

        assert result.volume_tagged is False
        assert metric_value(tagger_metrics, "kubetagger_volumes_tagged_total") == 0

    def test_fetch_failure_aborts(self, tagger_metrics, log_context):
        """Test a describe failure abandons the claim without any create call."""
        provider = MagicMock()
        provider.get_volume_tags.side_effect = ClientError(
            {"Error": {"Code": "UnauthorizedOperation"}}, "DescribeVolumes"
        )
        reconciler = TagReconciler(provider, tagger_metrics)

        result = reconciler.reconcile(VOLUME, [("env", "prod")], log_context)

        assert result is None
        provider.create_tag.assert_not_called()
        assert metric_value(tagger_metrics, "kubetagger_errors_total") == 1

    def test_fetch_connection_failure_aborts(self, tagger_metrics, log_context):
        provider = MagicMock()
        provider.get_volume_tags.side_effect = EndpointConnectionError(endpoint_url="https://ec2")
        reconciler = TagReconciler(provider, tagger_metrics)

        assert reconciler.reconcile(VOLUME, [("env", "prod")], log_context) is None
        assert metric_value(tagger_metrics, "kubetagger_errors_total") == 1

    def test_apply_failure_isolated_per_tag(self, tagger_metrics, log_context):
        """Test one failing create call does not stop the remaining tags."""
        provider = FakeTagProvider()
        provider.failing_keys = {"bad"}
        reconciler = TagReconciler(provider, tagger_metrics)

        result = reconciler.reconcile(VOLUME, [("bad", "1"), ("good", "2")], log_context)

        assert result.failed == [("bad", "1")]
        assert result.applied == [("good", "2")]
        assert metric_value(tagger_metrics, "kubetagger_errors_total") == 1
        assert metric_value(tagger_metrics, "kubetagger_volume_tags_added_total") == 1
        assert metric_value(tagger_metrics, "kubetagger_volumes_tagged_total") == 1

    def test_all_applies_failing_does_not_count_volume(self, tagger_metrics, log_context):
        provider = FakeTagProvider()
        provider.failing_keys = {"a"}
        reconciler = TagReconciler(provider, tagger_metrics)

        result = reconciler.reconcile(VOLUME, [("a", "1")], log_context)

        assert result.volume_tagged is False
        assert metric_value(tagger_metrics, "kubetagger_volumes_tagged_total") == 0


class TestDryRun:
    """Test cases for dry-run reconciliation."""

    def test_dry_run_issues_no_create_calls(self, tagger_metrics, log_context):
        provider = FakeTagProvider({VOLUME.volume_id: {("env", "prod")}})
        reconciler = TagReconciler(provider, tagger_metrics, dry_run=True)

        result = reconciler.reconcile(VOLUME, [("env", "prod"), ("team", "infra")], log_context)

        assert provider.create_calls == []
        assert result.skipped == [("team", "infra")]
        assert result.existing == [("env", "prod")]
        assert metric_value(tagger_metrics, "kubetagger_volume_tags_existing_total") == 1
        assert metric_value(tagger_metrics, "kubetagger_volume_tags_added_total") == 0
        assert metric_value(tagger_metrics, "kubetagger_volumes_tagged_total") == 0

    def test_dry_run_still_fetches_tags(self, tagger_metrics, log_context):
        provider = MagicMock()
        provider.get_volume_tags.return_value = set()
        reconciler = TagReconciler(provider, tagger_metrics, dry_run=True)

        reconciler.reconcile(VOLUME, [("env", "prod")], log_context)

        provider.get_volume_tags.assert_called_once_with(VOLUME)
        provider.create_tag.assert_not_called()


class TestReconcileResult:
    """Test cases for ReconcileResult."""

    @pytest.mark.parametrize(
        "applied,expected",
        [([], False), ([("env", "prod")], True)],
    )
    def test_volume_tagged(self, applied, expected):
        assert ReconcileResult(applied=applied).volume_tagged is expected
