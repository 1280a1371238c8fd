"""Unit tests for the bpax CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from bpax import __version__
from bpax.cli import app

runner = CliRunner()


class TestAnalyzeCommand:
    """Test the analyze command."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_process_json(self, write_export, process_xml):
        path = write_export("Invoice.bpprocess", process_xml)
        result = runner.invoke(app, ["analyze", str(path), "--log-level", "error"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["kind"] == "process"
        assert data["processName"] == "Invoice Processing"
        assert data["fileSize"] == path.stat().st_size
        assert data["vboCount"] == 5

    def test_vbo_json(self, write_export, vbo_xml):
        path = write_export("Calculator.bpobject", vbo_xml)
        result = runner.invoke(app, ["analyze", str(path), "--log-level", "error"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["elementCount"] == 4
        assert data["notes"][0]["component"] == "elements"

    def test_json_to_file(self, write_export, tmp_path, release_xml):
        path = write_export("q3.bprelease", release_xml)
        out = tmp_path / "out" / "q3.json"
        result = runner.invoke(app, ["analyze", str(path), "--out", str(out), "--log-level", "error"])

        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["releaseName"] == "Q3 Release"
        assert data["totalActionCount"] == 3

    def test_table_format(self, write_export, process_xml):
        path = write_export("Invoice.bpprocess", process_xml)
        result = runner.invoke(app, ["analyze", str(path), "--format", "table", "--log-level", "error"])

        assert result.exit_code == 0
        assert "Invoice Processing" in result.stdout
        assert "Subsheets" in result.stdout

    def test_invalid_format(self, write_export, process_xml):
        path = write_export("Invoice.bpprocess", process_xml)
        result = runner.invoke(app, ["analyze", str(path), "--format", "xml"])

        assert result.exit_code == 1
        assert "Invalid format" in result.stdout

    def test_format_from_config(self, write_export, tmp_path, process_xml):
        path = write_export("Invoice.bpprocess", process_xml)
        config = tmp_path / "custom.json"
        config.write_text(json.dumps({"output": {"format": "table"}, "logging": {"level": "error"}}))
        result = runner.invoke(app, ["analyze", str(path), "--config", str(config)])

        assert result.exit_code == 0
        assert "Stages" in result.stdout

    def test_table_note_counts(self, write_export, vbo_xml):
        """The summary table tallies data-quality notes by severity."""
        path = write_export("Calculator.bpobject", vbo_xml)
        result = runner.invoke(app, ["analyze", str(path), "--format", "table", "--log-level", "error"])

        assert result.exit_code == 0
        assert "1 warning" in result.stdout


class TestAnalyzeErrors:
    """Test error reporting and exit codes."""

    def test_malformed_xml(self, write_export):
        path = write_export("broken.bpprocess", '<process name="x">')
        result = runner.invoke(app, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "not well-formed XML" in result.stdout

    def test_wrong_root(self, write_export):
        path = write_export("odd.bpprocess", "<workflow />")
        result = runner.invoke(app, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "Unrecognized format" in result.stdout

    def test_rejected_extension(self, write_export, process_xml):
        path = write_export("Invoice.xml", process_xml)
        result = runner.invoke(app, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "Unsupported file type" in result.stdout

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "absent.bpprocess")])

        assert result.exit_code == 1
        assert "File not found" in result.stdout

    def test_invalid_log_level(self, write_export, process_xml):
        path = write_export("Invoice.bpprocess", process_xml)
        result = runner.invoke(app, ["analyze", str(path), "--log-level", "loud"])

        assert result.exit_code == 1
        assert "Unknown log level" in result.stdout


class TestInspectionCommands:
    """Test deps, actions and elements commands."""

    def test_deps_process(self, write_export, process_xml):
        path = write_export("Invoice.bpprocess", process_xml)
        result = runner.invoke(app, ["deps", str(path), "--log-level", "error"])

        assert result.exit_code == 0
        assert "Publish" in result.stdout

    def test_deps_release(self, write_export, release_xml):
        path = write_export("q3.bprelease", release_xml)
        result = runner.invoke(app, ["deps", str(path), "--log-level", "error"])

        assert result.exit_code == 0
        assert "Worksheet" in result.stdout

    def test_deps_rejects_vbo(self, write_export, vbo_xml):
        path = write_export("Calculator.bpobject", vbo_xml)
        result = runner.invoke(app, ["deps", str(path), "--log-level", "error"])

        assert result.exit_code == 1

    def test_deps_none_found(self, write_export, build_process):
        path = write_export("Empty.bpprocess", build_process('<stage stageid="a" name="Start" type="Start" />'))
        result = runner.invoke(app, ["deps", str(path), "--log-level", "error"])

        assert result.exit_code == 0
        assert "No VBO dependencies" in result.stdout

    def test_actions_vbo(self, write_export, vbo_xml):
        path = write_export("Calculator.bpobject", vbo_xml)
        result = runner.invoke(app, ["actions", str(path), "--log-level", "error"])

        assert result.exit_code == 0
        assert "Initialise" in result.stdout
        assert "Timeout" in result.stdout

    def test_actions_release_lists_stub(self, write_export, release_xml):
        path = write_export("q3.bprelease", release_xml)
        result = runner.invoke(app, ["actions", str(path), "--log-level", "error"])

        assert result.exit_code == 0
        assert "not included in release" in result.stdout

    def test_actions_rejects_process(self, write_export, process_xml):
        path = write_export("Invoice.bpprocess", process_xml)
        result = runner.invoke(app, ["actions", str(path), "--log-level", "error"])

        assert result.exit_code == 1

    @pytest.mark.parametrize("flag", [[], ["--flat"]])
    def test_elements(self, write_export, vbo_xml, flag):
        path = write_export("Calculator.bpobject", vbo_xml)
        result = runner.invoke(app, ["elements", str(path), "--log-level", "error", *flag])

        assert result.exit_code == 0
        assert "Equals" in result.stdout
        assert "Broken" not in result.stdout

    def test_elements_rejects_process(self, write_export, process_xml):
        path = write_export("Invoice.bpprocess", process_xml)
        result = runner.invoke(app, ["elements", str(path), "--log-level", "error"])

        assert result.exit_code == 1


class TestSchemaCommand:
    """Test the schema command."""

    def test_schema_stdout(self):
        result = runner.invoke(app, ["schema"])

        assert result.exit_code == 0
        assert set(json.loads(result.stdout)) == {"process_analysis", "vbo_analysis", "release_analysis"}

    def test_schema_to_dir(self, tmp_path):
        result = runner.invoke(app, ["schema", "--out", str(tmp_path)])

        assert result.exit_code == 0
        assert (tmp_path / "vbo_analysis.schema.json").exists()


class TestMarkupInExportData:
    """Export text containing Rich markup syntax is printed literally."""

    VBO = (
        '<process name="Grid [v2]" type="object"><appdef>'
        '<element name="Row [/] total"><id>r1</id><type>Table</type></element>'
        "</appdef></process>"
    )

    @pytest.mark.parametrize("flag", [[], ["--flat"]])
    def test_elements_with_closing_tag_name(self, write_export, flag):
        path = write_export("Grid.bpobject", self.VBO)
        result = runner.invoke(app, ["elements", str(path), "--log-level", "error", *flag])

        assert result.exit_code == 0
        assert "Row [/] total" in result.stdout

    def test_deps_with_style_tag_object(self, write_export, build_process):
        xml = build_process(
            '<stage stageid="a" name="Go" type="Action"><resource object="[bold]Custom" action="Go" /></stage>'
        )
        path = write_export("Styled.bpprocess", xml)
        result = runner.invoke(app, ["deps", str(path), "--log-level", "error"])

        assert result.exit_code == 0
        assert "[bold]Custom" in result.stdout

    def test_summary_with_markup_name(self, write_export):
        path = write_export("Grid.bpobject", self.VBO)
        result = runner.invoke(app, ["analyze", str(path), "--format", "table", "--log-level", "error"])

        assert result.exit_code == 0
        assert "Grid [v2]" in result.stdout
