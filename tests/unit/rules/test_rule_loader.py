"""Tests for rule set loading."""

from pathlib import Path

import pytest

from promrouter.exceptions import ConfigValidationError
from promrouter.rules import build_rule_set, load_rule_set

RULES_YAML = """
defaultOrg: 8888
rules:
  - topic: custom_HOST
    token: T
    selectors:
      - method: regex
        value: "^node_"
    labelRewriter:
      - name: node
        regex: "(?P<ip>.*?):(?P<port>.*)"
        overwrite: false
        labels:
          - name: ip
            value: "$1"
          - name: port
            value: "$port"
    deleteLabels:
      instance: true
      job: false
  - topic: kafka
    token: K
    org: 12
    selectors:
      - method: start_with
        value: kafka_
      - method: eq
        value: up
"""


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(RULES_YAML)
    return path


class TestLoadRuleSet:
    """Tests for load_rule_set."""

    def test_load_from_yaml(self, rules_file):
        """Test loading and compiling a rule set file."""
        rule_set = load_rule_set(rules_file)

        assert rule_set.default_org == 8888
        assert len(rule_set) == 2

        host, kafka = rule_set.rules
        assert host.topic == "custom_HOST"
        assert host.token == "T"
        assert host.org == 0
        assert host.delete_labels == frozenset({"instance", "job"})
        assert list(host.rewriters) == ["node"]
        assert kafka.org == 12
        assert len(kafka.selectors) == 2

    def test_loaded_rules_rewrite(self, rules_file):
        """Test that loaded rules behave like hand-built ones."""
        rule_set = load_rule_set(rules_file)
        rule = rule_set.select("node_cpu_usage")
        labels = {"node": "10.10.89.61:8080", "instance": "a"}

        rule.rewrite_labels(labels)

        assert labels == {"node": "10.10.89.61:8080", "ip": "10.10.89.61", "port": "8080"}
        assert rule_set.resolve_org(rule) == 8888

    def test_missing_file(self, tmp_path):
        """Test that an unreadable file is a configuration error."""
        with pytest.raises(ConfigValidationError, match="Failed to read rule set"):
            load_rule_set(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test that malformed YAML is a configuration error."""
        path = tmp_path / "broken.yaml"
        path.write_text("defaultOrg: [1,\n")

        with pytest.raises(ConfigValidationError):
            load_rule_set(path)


class TestBuildRuleSet:
    """Tests for build_rule_set validation."""

    def test_missing_default_org(self):
        """Test that defaultOrg is required."""
        with pytest.raises(ConfigValidationError, match="defaultOrg") as exc_info:
            build_rule_set({"rules": []})

        assert exc_info.value.context["errors"]

    def test_missing_rule_fields(self):
        """Test that topic, token and selectors are required."""
        with pytest.raises(ConfigValidationError) as exc_info:
            build_rule_set({"defaultOrg": 1, "rules": [{"topic": "t"}]})

        message = exc_info.value.message
        assert "token" in message
        assert "selectors" in message

    def test_unknown_selector_method(self):
        """Test that selector methods are restricted."""
        with pytest.raises(ConfigValidationError, match="method"):
            build_rule_set(
                {
                    "defaultOrg": 1,
                    "rules": [
                        {
                            "topic": "t",
                            "token": "k",
                            "selectors": [{"method": "contains", "value": "x"}],
                        }
                    ],
                }
            )

    def test_invalid_selector_regex(self):
        """Test that a bad selector regex names the failing rule."""
        with pytest.raises(ConfigValidationError, match="Rule 0") as exc_info:
            build_rule_set(
                {
                    "defaultOrg": 1,
                    "rules": [
                        {
                            "topic": "t",
                            "token": "k",
                            "selectors": [{"method": "regex", "value": "(bad"}],
                        }
                    ],
                }
            )

        assert exc_info.value.context["topic"] == "t"

    def test_invalid_rewriter_regex(self):
        """Test that a bad rewriter regex fails the build."""
        with pytest.raises(ConfigValidationError, match="Invalid rewriter regex"):
            build_rule_set(
                {
                    "defaultOrg": 1,
                    "rules": [
                        {
                            "topic": "t",
                            "token": "k",
                            "selectors": [{"method": "eq", "value": "up"}],
                            "labelRewriter": [
                                {"name": "node", "regex": "[", "labels": [{"name": "a", "value": "b"}]}
                            ],
                        }
                    ],
                }
            )

    def test_rewriter_requires_labels(self):
        """Test that rewriter labels are required."""
        with pytest.raises(ConfigValidationError, match="labels"):
            build_rule_set(
                {
                    "defaultOrg": 1,
                    "rules": [
                        {
                            "topic": "t",
                            "token": "k",
                            "selectors": [{"method": "eq", "value": "up"}],
                            "labelRewriter": [{"name": "node", "regex": ".*"}],
                        }
                    ],
                }
            )

    def test_delete_labels_as_list(self):
        """Test that deleteLabels may be a plain list."""
        rule_set = build_rule_set(
            {
                "defaultOrg": 1,
                "rules": [
                    {
                        "topic": "t",
                        "token": "k",
                        "selectors": [{"method": "eq", "value": "up"}],
                        "deleteLabels": ["a", "b"],
                    }
                ],
            }
        )

        assert rule_set.rules[0].delete_labels == frozenset({"a", "b"})

    def test_delete_labels_mapping_ignores_flag(self):
        """Test that a mapping key deletes its label even when set to false."""
        rule_set = build_rule_set(
            {
                "defaultOrg": 1,
                "rules": [
                    {
                        "topic": "t",
                        "token": "k",
                        "selectors": [{"method": "eq", "value": "up"}],
                        "deleteLabels": {"instance": False},
                    }
                ],
            }
        )
        rule = rule_set.rules[0]

        assert rule.delete_labels == frozenset({"instance"})
        assert rule.rewrite_labels({"instance": "x", "job": "node"}) == {"job": "node"}

    def test_negative_org(self):
        """Test that only a zero org falls back to the default."""
        rule_set = build_rule_set(
            {
                "defaultOrg": 1,
                "rules": [
                    {
                        "topic": "t",
                        "token": "k",
                        "org": -5,
                        "selectors": [{"method": "eq", "value": "up"}],
                    }
                ],
            }
        )

        assert rule_set.resolve_org(rule_set.rules[0]) == -5

    def test_not_a_mapping(self):
        """Test that a non-mapping document is rejected."""
        with pytest.raises(ConfigValidationError, match="must be a mapping"):
            build_rule_set(["not", "a", "mapping"])  # type: ignore[arg-type]
