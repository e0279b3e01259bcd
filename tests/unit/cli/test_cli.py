"""Tests for the promrouter CLI."""

import json

import pytest
from typer.testing import CliRunner

from promrouter.cli.main import app

runner = CliRunner()

RULES_YAML = """\
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
        labels:
          - name: ip
            value: "$1"
          - name: port
            value: "$port"
    deleteLabels:
      - instance
  - topic: kafka
    token: K
    org: 12
    selectors:
      - method: start_with
        value: kafka_
"""


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text(RULES_YAML)
    return path


@pytest.fixture
def batch_file(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(
        json.dumps(
            [
                {
                    "labels": {"__name__": "node_load1", "node": "10.0.0.1:9100", "instance": "a"},
                    "samples": [[1698765432000, 0.5], [1698765433000, 0.75]],
                },
                {
                    "labels": {"__name__": "kafka_up", "job": "kafka"},
                    "samples": [[1698765432000, 1]],
                },
                {
                    "labels": {"__name__": "http_requests_total"},
                    "samples": [[1698765432000, 10]],
                },
            ]
        )
    )
    return path


class TestVersion:
    """Tests for --version."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "promrouter version:" in result.output

    def test_package_exposes_app(self):
        from promrouter import cli_app

        assert cli_app is app


class TestRulesValidate:
    """Tests for rules validate command."""

    def test_valid(self, rules_file):
        """Test validating a well-formed rule set."""
        result = runner.invoke(app, ["rules", "validate", str(rules_file)])

        assert result.exit_code == 0
        assert "Rule set valid: 2 rules, default org 8888" in result.output
        assert "custom_HOST" in result.output

    def test_invalid(self, tmp_path):
        """Test validating a rule set with a bad regex."""
        path = tmp_path / "bad.yaml"
        path.write_text(
            "defaultOrg: 1\n"
            "rules:\n"
            "  - topic: t\n"
            "    token: x\n"
            "    selectors:\n"
            "      - method: regex\n"
            "        value: '('\n"
        )

        result = runner.invoke(app, ["rules", "validate", str(path)])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_file(self, tmp_path):
        """Test validating a file that does not exist."""
        result = runner.invoke(app, ["rules", "validate", str(tmp_path / "absent.yaml")])

        assert result.exit_code != 0


class TestRulesMatch:
    """Tests for rules match command."""

    def test_match(self, rules_file):
        """Test a metric name selecting a rule."""
        result = runner.invoke(app, ["rules", "match", str(rules_file), "kafka_brokers"])

        assert result.exit_code == 0
        assert "kafka" in result.output
        assert "12" in result.output

    def test_no_match(self, rules_file):
        """Test a metric name selecting no rule."""
        result = runner.invoke(app, ["rules", "match", str(rules_file), "up"])

        assert result.exit_code == 1
        assert "No rule matches up" in result.output


class TestTransform:
    """Tests for transform command."""

    def test_routed(self, rules_file, batch_file):
        """Test the routed pipeline over a batch file."""
        result = runner.invoke(
            app, ["transform", str(batch_file), "--rules", str(rules_file), "--show-payloads"]
        )

        assert result.exit_code == 0
        assert "Transforming 3 series with the routed pipeline" in result.output
        assert "custom_HOST" in result.output
        assert "serialize_total" in result.output
        assert '"ip":"10.0.0.1"' in result.output
        assert '"org":12' in result.output

    def test_templated(self, batch_file):
        """Test the templated pipeline with a topic template and filter."""
        result = runner.invoke(
            app,
            [
                "transform",
                str(batch_file),
                "--pipeline",
                "templated",
                "--topic-template",
                "prom.{{ __name__ }}",
                "--match",
                "kafka_up",
                "--show-payloads",
            ],
        )

        assert result.exit_code == 0
        assert "prom.kafka_up" in result.output
        assert '"value":"1"' in result.output
        assert "prom.node_load1" not in result.output

    def test_no_payloads(self, batch_file):
        """Test a run where every sample is filtered."""
        result = runner.invoke(
            app,
            ["transform", str(batch_file), "-p", "templated", "-m", 'up{job="none"}'],
        )

        assert result.exit_code == 0
        assert "No payloads produced" in result.output

    def test_routed_without_rules(self, batch_file):
        """Test that the routed pipeline needs a rules file."""
        result = runner.invoke(app, ["transform", str(batch_file)])

        assert result.exit_code == 1
        assert "requires rules_path" in result.output

    def test_config_file(self, tmp_path, rules_file, batch_file):
        """Test settings taken from --config."""
        config = tmp_path / "config.yaml"
        config.write_text(f"routing:\n  rules_path: {rules_file}\nlogging:\n  format: text\n")

        result = runner.invoke(app, ["--config", str(config), "transform", str(batch_file)])

        assert result.exit_code == 0
        assert "custom_HOST" in result.output

    def test_malformed_batch(self, tmp_path, rules_file):
        """Test a batch file that is not valid JSON."""
        path = tmp_path / "batch.json"
        path.write_text("{not json")

        result = runner.invoke(app, ["transform", str(path), "--rules", str(rules_file)])

        assert result.exit_code == 1
