"""
Tests for the command-line interface (people_of_history/cli/main.py)
"""

import pytest
from typer.testing import CliRunner

from people_of_history.cli.main import app
from people_of_history.errors import TransportError
from tests.conftest import hit

runner = CliRunner()


@pytest.fixture
def cli_kb(kb, monkeypatch):
    """Make every CLI session use the fake knowledge base."""
    kb.hits = {"Caesar": [hit("Q1048", "Julius Caesar", "Roman general and dictator")]}
    monkeypatch.setattr("people_of_history.session.WikidataClient", lambda: kb)
    return kb


class TestSearchCommand:
    """Test `history-tree search`."""

    def test_lists_people(self, cli_kb):
        result = runner.invoke(app, ["search", "Caesar"])

        assert result.exit_code == 0
        assert "Q1048" in result.output
        assert "Julius Caesar" in result.output
        assert cli_kb.closed

    def test_no_results(self, cli_kb):
        result = runner.invoke(app, ["search", "Nobody"])

        assert result.exit_code == 0
        assert "No results." in result.output

    def test_transport_error(self, cli_kb):
        cli_kb.search_error = TransportError("HTTP 500")
        result = runner.invoke(app, ["search", "Caesar"])

        assert result.exit_code == 1
        assert "Search failed" in result.output


class TestPersonCommand:
    """Test `history-tree person`."""

    def test_person(self, cli_kb):
        result = runner.invoke(app, ["person", "Q1048"])

        assert result.exit_code == 0
        assert "Julius Caesar" in result.output
        assert "100 BCE – 44 BCE" in result.output
        assert "died at 56" in result.output

    def test_not_found(self, cli_kb):
        result = runner.invoke(app, ["person", "Q404"])
        assert result.exit_code == 1


class TestTreeCommand:
    """Test `history-tree tree`."""

    def test_tree(self, cli_kb):
        result = runner.invoke(app, ["tree", "Q100", "--depth", "1"])

        assert result.exit_code == 0
        assert "Father" in result.output
        assert "Child C" in result.output
        assert "Not expanded." in result.output

    def test_depth_limit_marker(self, cli_kb):
        result = runner.invoke(app, ["tree", "Q100", "--depth", "3", "--relation", "parents"])

        assert result.exit_code == 0
        assert "Great-grandfather" in result.output
        assert "Depth limit reached." in result.output
        assert "Q401" not in cli_kb.fetched_ids

    def test_failed_relative(self, cli_kb):
        cli_kb.failing_ids = {"Q102"}
        result = runner.invoke(app, ["tree", "Q100"])

        assert result.exit_code == 0
        assert "Couldn't load." in result.output

    def test_missing_root(self, cli_kb):
        result = runner.invoke(app, ["tree", "Q404"])
        assert result.exit_code == 1

    def test_bad_relation(self, cli_kb):
        result = runner.invoke(app, ["tree", "Q100", "--relation", "spouses"])
        assert result.exit_code == 2
