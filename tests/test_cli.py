"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from siterisk import __version__
from siterisk.cli import app

runner = CliRunner()

CSV = (
    "Site name,Site URL,Privacy,Sensitivity,EEEU permission count,Everyone permission count,"
    "Anyone link count,Number of users having access\n"
    "Intranet,https://contoso.sharepoint.com/sites/intranet,Public,,2,1,0,1247\n"
    "Legal,https://contoso.sharepoint.com/sites/legal,Private,Confidential,0,0,0,12\n"
    "Projects,https://contoso.sharepoint.com/sites/projects,Private,General,0,0,4,892\n"
)


@pytest.fixture
def export_file(tmp_path):
    path = tmp_path / "sites.csv"
    path.write_text(CSV, encoding="utf-8")
    return path


class TestAnalyze:
    """Tests for the analyze command."""

    def test_writes_report_and_exports(self, export_file, tmp_path):
        html_path = tmp_path / "report.html"
        json_path = tmp_path / "sites.json"
        csv_path = tmp_path / "out.csv"

        result = runner.invoke(
            app,
            [
                "analyze",
                str(export_file),
                "-o", str(html_path),
                "--json", str(json_path),
                "--csv", str(csv_path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert html_path.exists()
        assert csv_path.exists()
        records = json.loads(json_path.read_text(encoding="utf-8"))
        assert [r["Site Name"] for r in records] == ["Intranet", "Projects", "Legal"]
        assert records[0]["Score"] == 13
        assert "Total sites: 3" in result.output
        assert "Intranet" in result.output

    def test_default_report_path(self, export_file):
        result = runner.invoke(app, ["analyze", str(export_file)])

        assert result.exit_code == 0, result.output
        assert (export_file.parent / "sites_risk_report.html").exists()

    def test_weight_override(self, export_file, tmp_path):
        json_path = tmp_path / "sites.json"

        result = runner.invoke(
            app,
            [
                "analyze",
                str(export_file),
                "-o", str(tmp_path / "r.html"),
                "--json", str(json_path),
                "--user-threshold", "1000",
            ],
        )

        assert result.exit_code == 0, result.output
        records = {r["Site Name"]: r for r in json.loads(json_path.read_text(encoding="utf-8"))}
        assert records["Projects"]["Score"] == 2
        assert records["Intranet"]["Score"] == 13  # 1247 users still over 1000

    def test_config_file_from_env(self, export_file, tmp_path):
        config_path = tmp_path / "weights.yaml"
        config_path.write_text("PublicSite: 10\n")
        json_path = tmp_path / "sites.json"

        result = runner.invoke(
            app,
            ["analyze", str(export_file), "-o", str(tmp_path / "r.html"), "--json", str(json_path)],
            env={"SITERISK_CONFIG": str(config_path)},
        )

        assert result.exit_code == 0, result.output
        records = json.loads(json_path.read_text(encoding="utf-8"))
        assert records[0]["Score"] == 20

    def test_cli_flag_overrides_config_file(self, export_file, tmp_path):
        config_path = tmp_path / "weights.yaml"
        config_path.write_text("PublicSite: 10\n")
        json_path = tmp_path / "sites.json"

        result = runner.invoke(
            app,
            [
                "analyze",
                str(export_file),
                "-o", str(tmp_path / "r.html"),
                "--json", str(json_path),
                "--config", str(config_path),
                "--public-site", "0",
            ],
        )

        assert result.exit_code == 0, result.output
        records = json.loads(json_path.read_text(encoding="utf-8"))
        assert records[0]["Score"] == 10

    def test_missing_input(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "missing.csv")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_config(self, export_file, tmp_path):
        config_path = tmp_path / "weights.yaml"
        config_path.write_text("Bogus: 1\n")

        result = runner.invoke(app, ["analyze", str(export_file), "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Invalid config file" in result.output

    def test_unwritable_output(self, export_file, tmp_path):
        result = runner.invoke(
            app, ["analyze", str(export_file), "-o", str(tmp_path / "no" / "such" / "dir" / "r.html")]
        )
        assert result.exit_code == 1
        assert "Could not write output" in result.output

    def test_reports_malformed_rows(self, tmp_path):
        path = tmp_path / "odd.csv"
        path.write_text("Site name,Users\nOdd,lots\n", encoding="utf-8")

        result = runner.invoke(app, ["analyze", str(path), "-o", str(tmp_path / "r.html")])

        assert result.exit_code == 0, result.output
        assert "unreadable values" in result.output


class TestOtherCommands:
    """Tests for defaults and version."""

    def test_defaults(self):
        result = runner.invoke(app, ["defaults"])
        assert result.exit_code == 0
        assert "PublicSite" in result.output
        assert "UserCountThreshold" in result.output
        assert "Critical" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
