"""
Tests for the CLI commands.

Commands run through typer's CliRunner inside a temporary working directory
so no settings file or environment override from the host leaks in.
"""

import json

import pytest
from typer.testing import CliRunner

from nostr_publisher.cli.cli import app
from nostr_publisher.core.publishing import MARKDOWN_LEVEL_MESSAGE


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run every command from an empty directory with no publisher variables set."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "NOSTR_PUBLISHER_PUBKEY",
        "NOSTR_PUBLISHER_CLIENT_TAG",
        "NOSTR_PUBLISHER_STATIC_D_TAG",
        "NOSTR_PUBLISHER_AUTO_UPDATE",
        "NOSTR_PUBLISHER_PUBLICATION_TYPE",
        "NOSTR_PUBLISHER_RELAYS",
        "NOSTR_PUBLISHER_RELAY_CATEGORIES",
        "NOSTR_PUBLISHER_LOG_LEVEL",
        "NOSTR_PUBLISHER_LOG_FORMAT",
        "NOSTR_PUBLISHER_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestPublishCommand:

    def test_dry_run_json_report(self, runner, fixture_path):
        result = runner.invoke(
            app, ["publish", str(fixture_path("simple-guide.adoc")), "--dry-run", "--static-d-tag", "--json"]
        )

        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["success"] is True
        assert report["dry_run"] is True
        assert (report["content_sections"], report["index_sections"]) == (3, 3)
        assert report["publish_order"][-1] == "simple-nostr-guide"

    def test_content_level_option(self, runner, fixture_path):
        result = runner.invoke(
            app, ["publish", str(fixture_path("simple-guide.adoc")), "-l", "3", "--dry-run", "--json"]
        )

        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["total_events"] == 14
        assert report["configuration"]["sources"]["content_level"] == "argument"

    def test_rich_report(self, runner, fixture_path):
        result = runner.invoke(app, ["publish", str(fixture_path("default-test.adoc")), "--dry-run"])

        assert result.exit_code == 0
        assert "Publication Report" in result.output
        assert "Dry run" in result.output

    def test_output_file(self, runner, fixture_path, isolated_settings):
        output = isolated_settings / "events.jsonl"
        result = runner.invoke(app, [
            "publish", str(fixture_path("header-priority-test.adoc")), "-o", str(output), "--json",
        ])

        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["dry_run"] is False
        assert len(report["published_events"]) == 2
        events = [json.loads(line) for line in output.read_text().splitlines()]
        assert [event["kind"] for event in events] == [30041, 30040]
        assert all(len(event["id"]) == 64 for event in events)

    def test_constraint_failure_exits_non_zero(self, runner, fixture_path):
        result = runner.invoke(
            app, ["publish", str(fixture_path("markdown-longform.md")), "-l", "2", "--dry-run", "--json"]
        )

        assert result.exit_code == 1
        assert json.dumps(MARKDOWN_LEVEL_MESSAGE) in result.output

    def test_missing_settings_file(self, runner, fixture_path):
        result = runner.invoke(
            app, ["--config-path", "missing.json", "publish", str(fixture_path("default-test.adoc")), "--dry-run"]
        )

        assert result.exit_code == 1
        assert "Configuration Error" in result.output

    def test_settings_file_supplies_static_identifiers(self, runner, fixture_path, isolated_settings):
        (isolated_settings / "nostrpublisher.config.json").write_text(
            json.dumps({"publisher": {"static_d_tag": True}})
        )
        result = runner.invoke(app, ["publish", str(fixture_path("default-test.adoc")), "--dry-run", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["publish_order"] == ["default-behavior-test"]


class TestOtherCommands:

    def test_kinds(self, runner):
        result = runner.invoke(app, ["kinds"])

        assert result.exit_code == 0
        for kind in ("30023", "30040", "30041", "30818"):
            assert kind in result.output

    def test_inspect_asciidoc(self, runner, fixture_path):
        result = runner.invoke(app, ["inspect", str(fixture_path("simple-guide.adoc"))])

        assert result.exit_code == 0
        assert "Getting Started" in result.output
        assert "Key Storage" in result.output

    def test_inspect_markdown(self, runner, fixture_path):
        result = runner.invoke(app, ["inspect", str(fixture_path("markdown-longform.md"))])

        assert result.exit_code == 0
        assert "Flat article" in result.output

    def test_inspect_missing_file(self, runner, isolated_settings):
        result = runner.invoke(app, ["inspect", str(isolated_settings / "missing.adoc")])

        assert result.exit_code == 1

    def test_version(self, runner):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "Nostr Publisher v0.1.0" in result.output
