"""Tests for label rewriters."""

import pytest

from promrouter.exceptions import ConfigValidationError
from promrouter.rules import FieldPattern, LabelRewriter


@pytest.fixture
def node_rewriter():
    """Rewriter splitting an ip:port node label."""
    return LabelRewriter(
        name="node",
        regex=r"(?P<ip>.*?):(?P<port>.*)",
        labels=[FieldPattern("ip", "$1"), FieldPattern("port", "$port")],
    )


class TestLabelRewriter:
    """Tests for LabelRewriter.gen_new_labels."""

    def test_generates_labels_from_groups(self, node_rewriter):
        """Test indexed and named group resolution."""
        assert node_rewriter.gen_new_labels("node", "10.10.89.61:8080") == {
            "ip": "10.10.89.61",
            "port": "8080",
        }

    def test_trigger_key_mismatch(self, node_rewriter):
        """Test that other labels produce nothing."""
        assert node_rewriter.gen_new_labels("instance", "10.10.89.61:8080") == {}

    def test_regex_no_match(self, node_rewriter):
        """Test that a non-matching value is a silent no-op."""
        assert node_rewriter.gen_new_labels("node", "localhost") == {}

    def test_no_output_labels(self):
        """Test that a rewriter without output labels produces nothing."""
        rewriter = LabelRewriter(name="node", regex=".*", labels=[])

        assert rewriter.gen_new_labels("node", "anything") == {}

    def test_identity_and_literal_bindings(self):
        """Test identity markers and literal patterns."""
        rewriter = LabelRewriter(
            name="device",
            regex=r"^(sd[a-z])(\d+)$",
            labels=[
                FieldPattern("__name__", "$1"),
                FieldPattern("raw", "__value__"),
                FieldPattern("slot", "01"),
                FieldPattern("$1", "$2"),
            ],
        )

        assert rewriter.gen_new_labels("device", "sda3") == {
            "device": "sda",
            "raw": "sda3",
            "slot": "01",
            "sda": "3",
        }

    def test_later_patterns_overwrite_earlier(self):
        """Test that the last pattern resolving to a name wins."""
        rewriter = LabelRewriter(
            name="node",
            regex=r"(\w+)",
            labels=[FieldPattern("host", "first"), FieldPattern("host", "$1")],
        )

        assert rewriter.gen_new_labels("node", "web01") == {"host": "web01"}

    def test_whole_match_group(self):
        """Test that $0 resolves to the whole match."""
        rewriter = LabelRewriter(
            name="path", regex=r"/api/v\d+", labels=[FieldPattern("prefix", "$0")]
        )

        assert rewriter.gen_new_labels("path", "/api/v2/users") == {"prefix": "/api/v2"}

    def test_invalid_regex(self):
        """Test that a bad regex fails at construction."""
        with pytest.raises(ConfigValidationError, match="Invalid rewriter regex"):
            LabelRewriter(name="node", regex="[", labels=[FieldPattern("a", "b")])
