"""Unit tests for the 'chains' command."""

import json

import pytest
from click.testing import CliRunner

from codeflow.cli.commands.chains import chain_filename, chains


class TestChainsCommand:
    @pytest.fixture
    def runner(self):
        return CliRunner()

    def test_table(self, runner, analysis_file):
        result = runner.invoke(chains, [str(analysis_file)])

        assert result.exit_code == 0
        assert "OrderController.Post" in result.output

    def test_json(self, runner, analysis_file):
        result = runner.invoke(chains, [str(analysis_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data[0]["name"] == "OrderController.Post"
        assert data[0]["edges"][0]["label"] == "sends"

    def test_command_chains_json(self, runner, analysis_file):
        result = runner.invoke(chains, [str(analysis_file), "--commands", "--json"])

        assert result.exit_code == 0
        names = [c["name"] for c in json.loads(result.output)]
        assert names == [
            "OrderController -> CreateOrderCommand",
            "OrderCreatedIntegrationEventHandler -> ReserveStockCommand",
        ]

    def test_export(self, runner, analysis_file, tmp_path):
        out = tmp_path / "chains"
        result = runner.invoke(chains, [str(analysis_file), "-o", str(out)])

        assert result.exit_code == 0
        files = sorted(p.name for p in out.iterdir())
        assert files == ["001-OrderController.Post.mmd"]
        assert (out / files[0]).read_text(encoding="utf-8").startswith("flowchart TD")

    def test_no_chains(self, runner, tmp_path):
        f = tmp_path / "empty.json"
        f.write_text("{}")

        result = runner.invoke(chains, [str(f)])
        assert result.exit_code == 0
        assert "No chains found" in result.output

    def test_chain_filename(self):
        assert chain_filename(3, "A -> B") == "003-A_-_B.mmd"
        assert chain_filename(1, "***") == "001-chain.mmd"
