"""Tests for the regradar command-line interface."""

import json
from datetime import datetime
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from regradar.cli import cli
from regradar.feeds.base import FetchResult, SourceAdapter


class StaticAdapter(SourceAdapter):
    def __init__(self, items):
        self._items = items

    @property
    def name(self):
        return "Static"

    @property
    def source_id(self):
        return "static"

    def fetch(self, days=None):
        return FetchResult(
            total_entries=len(self._items),
            entries=list(self._items),
            sources_fetched=1,
            fetch_time=datetime.now(),
        )


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("REGRADAR_BASE_DIR", str(tmp_path))
    return CliRunner()


@pytest.fixture
def fetched(runner, enforcement_item, final_rule_item):
    adapters = [StaticAdapter([enforcement_item, final_rule_item])]
    with patch("regradar.cli.get_all_adapters", return_value=adapters):
        result = runner.invoke(cli, ["fetch", "--no-progress"])
    assert result.exit_code == 0, result.output
    return result


class TestAnalyzeCommand:
    def test_text_report(self, runner):
        result = runner.invoke(
            cli,
            [
                "analyze",
                "--title",
                "SEC Charges Fintech Company with AML Violations",
                "--description",
                "The firm agreed to pay a $500,000 civil penalty within 90 days.",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "enforcement action" in result.output
        assert "Action Items:" in result.output
        assert "$500,000" in result.output

    def test_json_output(self, runner):
        result = runner.invoke(
            cli,
            [
                "analyze",
                "-t",
                "SEC Adopts Final Rule on Digital Asset Custody",
                "-d",
                "Final rule with new requirements and compliance dates",
                "--json",
            ],
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["success"] is True
        assert payload["analysis"]["regulation_type"] == "final-rule"

    def test_invalid_item_fails(self, runner):
        result = runner.invoke(cli, ["analyze", "-t", "Title", "-d", "", "-l", "not-a-valid-url"])
        assert result.exit_code == 1
        assert "Feed item missing description" in result.output
        assert "Feed item missing or invalid URL" in result.output


class TestStoredCommands:
    def test_fetch_reports_alerts(self, fetched, enforcement_item):
        assert "Processed 2 regulations" in fetched.output
        assert "Immediate attention:" in fetched.output
        assert enforcement_item.title in fetched.output

    def test_list(self, runner, fetched, enforcement_item, final_rule_item):
        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0
        assert enforcement_item.title in result.output
        assert final_rule_item.title in result.output

    def test_list_min_severity(self, runner, fetched, enforcement_item, final_rule_item):
        result = runner.invoke(cli, ["list", "--min-severity", "8"])
        assert enforcement_item.title in result.output
        assert final_rule_item.title not in result.output

    def test_list_empty(self, runner):
        result = runner.invoke(cli, ["list"])
        assert "No regulations found." in result.output

    def test_dry_run_stores_nothing(self, runner, final_rule_item):
        with patch("regradar.cli.get_all_adapters", return_value=[StaticAdapter([final_rule_item])]):
            result = runner.invoke(cli, ["fetch", "--dry-run", "--no-progress"])
        assert result.exit_code == 0, result.output
        assert "No regulations found." in runner.invoke(cli, ["list"]).output

    def test_stats(self, runner, fetched):
        result = runner.invoke(cli, ["stats"])
        assert result.exit_code == 0
        assert "Total regulations:  2" in result.output
        assert "enforcement: 1" in result.output

    def test_cleanup(self, runner, fetched):
        result = runner.invoke(cli, ["cleanup", "--days", "7"])
        assert result.exit_code == 0
        assert "Removed 0 regulations older than 7 days" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert "1.0.0" in result.output
