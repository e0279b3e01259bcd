"""Tests for metric name selectors."""

import pytest

from promrouter.exceptions import ConfigValidationError
from promrouter.rules import MetricNameSelector


class TestMetricNameSelector:
    """Tests for MetricNameSelector."""

    def test_start_with(self):
        """Test prefix matching."""
        selector = MetricNameSelector("start_with", "kafka_")

        assert selector.match("kafka_brokers_number") is True
        assert selector.match("node_cpu") is False

    def test_eq(self):
        """Test exact matching."""
        selector = MetricNameSelector("eq", "up")

        assert selector.match("up") is True
        assert selector.match("up_total") is False
        assert selector.match("u") is False

    def test_regex_is_unanchored(self):
        """Test that regex selectors search anywhere in the name."""
        selector = MetricNameSelector("regex", "cpu")

        assert selector.match("node_cpu_seconds_total") is True
        assert selector.match("node_memory_bytes") is False

    def test_regex_with_anchor(self):
        """Test that explicit anchors are honored."""
        selector = MetricNameSelector("regex", "^node_")

        assert selector.match("node_cpu_usage") is True
        assert selector.match("kafka_node_up") is False

    def test_invalid_regex(self):
        """Test that a bad regex fails at construction."""
        with pytest.raises(ConfigValidationError, match="Invalid selector regex"):
            MetricNameSelector("regex", "(unclosed")

    def test_unknown_method(self):
        """Test that an unknown method fails at construction."""
        with pytest.raises(ConfigValidationError, match="Unknown selector method") as exc_info:
            MetricNameSelector("contains", "cpu")

        assert exc_info.value.context["method"] == "contains"
