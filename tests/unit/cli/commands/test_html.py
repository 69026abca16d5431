"""Unit tests for the 'html' command."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from codeflow.cli.commands.html import html


class TestHtmlCommand:
    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def mock_cwd(self, tmp_path):
        with patch("pathlib.Path.cwd", return_value=tmp_path):
            yield tmp_path

    @patch("codeflow.graph.visualize.webbrowser.open")
    def test_writes_page(self, mock_open, runner, analysis_file, mock_cwd):
        out = mock_cwd / "page.html"
        result = runner.invoke(html, [str(analysis_file), "-o", str(out), "-t", "Shop"])

        assert result.exit_code == 0
        assert "Visualization written" in result.output
        assert "<title>Shop</title>" in out.read_text(encoding="utf-8")
        mock_open.assert_not_called()

    @patch("codeflow.graph.visualize.webbrowser.open")
    def test_open_flag(self, mock_open, runner, analysis_file, mock_cwd):
        result = runner.invoke(html, [str(analysis_file), "-o", str(mock_cwd / "p.html"), "--open"])

        assert result.exit_code == 0
        mock_open.assert_called_once()

    def test_configured_title(self, runner, analysis_file, mock_cwd):
        config_dir = mock_cwd / ".codeflow"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("title: From Config\n")

        out = mock_cwd / "page.html"
        result = runner.invoke(html, [str(analysis_file), "-o", str(out)])

        assert result.exit_code == 0
        assert "<title>From Config</title>" in out.read_text(encoding="utf-8")

    def test_configured_diagram_kinds(self, runner, analysis_file, mock_cwd):
        config_dir = mock_cwd / ".codeflow"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("diagrams: [event]\n")

        out = mock_cwd / "page.html"
        result = runner.invoke(html, [str(analysis_file), "-o", str(out)])

        assert result.exit_code == 0
        page = out.read_text(encoding="utf-8")
        assert '"name": "Events"' in page
        assert '"name": "Architecture"' not in page
