import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from abi_openapi.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
ARTIFACTS = FIXTURES / "artifacts"


class TestCliGenerate:
    def test_generate_from_artifacts(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--contract", "Token",
            "--artifacts", str(ARTIFACTS),
            "-o", str(tmp_path),
        ])

        assert result.exit_code == 0, result.output
        out = tmp_path / "Token-openapi.json"
        assert out.exists()
        doc = json.loads(out.read_text(encoding="utf-8"))
        assert "/api/Token/balanceOf" in doc["paths"]
        assert "Wrote 5 operations" in result.output

    def test_generate_from_abi_file_uses_file_stem(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--abi", str(FIXTURES / "legacy_abi.yaml"),
            "-o", str(tmp_path), "--format", "yaml", "--title", "Legacy API",
        ])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "legacy_abi-openapi.yaml").exists()

    def test_generate_contract_overrides_artifact_name(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--abi", str(ARTIFACTS / "contracts" / "Token.sol" / "Token.json"),
            "--contract", "MyToken", "-o", str(tmp_path),
        ])

        assert result.exit_code == 0, result.output
        doc = json.loads((tmp_path / "MyToken-openapi.json").read_text(encoding="utf-8"))
        assert doc["info"]["title"] == "MyToken Smart Contract API"

    def test_missing_contract_fails_without_writing(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--contract", "Vault",
            "--artifacts", str(ARTIFACTS),
            "-o", str(tmp_path / "docs"),
        ])

        assert result.exit_code == 1
        assert "Error generating OpenAPI spec" in result.output
        assert not (tmp_path / "docs").exists()

    def test_abi_without_functions_fails(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--abi", str(FIXTURES / "events_only_abi.json"),
            "-o", str(tmp_path),
        ])

        assert result.exit_code == 1
        assert "No functions found in ABI" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_unwritable_output_reports_error(self, tmp_path):
        blocker = tmp_path / "docs"
        blocker.write_text("not a directory")

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--contract", "Token",
            "--artifacts", str(ARTIFACTS),
            "-o", str(blocker),
        ])

        assert result.exit_code == 1
        assert "Error generating OpenAPI spec" in result.output
        assert "Generated API specification" not in result.output

    def test_reject_overloads(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--abi", str(FIXTURES / "overloaded_abi.json"),
            "--overloads", "reject", "-o", str(tmp_path),
        ])

        assert result.exit_code == 1
        assert "safeTransferFrom" in result.output

    def test_collision_warning_reported(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", "--abi", str(FIXTURES / "overloaded_abi.json"),
            "-o", str(tmp_path),
        ])

        assert result.exit_code == 0
        assert "warning:" in result.output
        assert "replaces" in result.output

    def test_requires_contract_or_abi(self):
        runner = CliRunner()
        result = runner.invoke(main, ["generate"])
        assert result.exit_code == 2

    def test_config_file(self, tmp_path):
        cfg = tmp_path / "abi-openapi.yaml"
        cfg.write_text(f"artifacts_dir: {ARTIFACTS}\noutput_dir: {tmp_path / 'out'}\nformat: yaml\n")

        runner = CliRunner()
        result = runner.invoke(main, ["generate", "--contract", "Token", "--config", str(cfg)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "out" / "Token-openapi.yaml").exists()


class TestCliServe:
    @patch("abi_openapi.cli.serve_docs")
    def test_serve_builds_document(self, mock_serve):
        runner = CliRunner()
        result = runner.invoke(main, [
            "serve", "--contract", "Token",
            "--artifacts", str(ARTIFACTS), "--port", "4100",
        ])

        assert result.exit_code == 0, result.output
        mock_serve.assert_called_once()
        document, name = mock_serve.call_args.args
        assert name == "Token"
        assert document["openapi"] == "3.0.0"
        assert mock_serve.call_args.kwargs["port"] == 4100
        assert "http://127.0.0.1:4100/docs" in result.output

    @patch("abi_openapi.cli.serve_docs")
    def test_serve_failure_does_not_start(self, mock_serve):
        runner = CliRunner()
        result = runner.invoke(main, ["serve", "--contract", "Vault", "--artifacts", str(ARTIFACTS)])

        assert result.exit_code == 1
        mock_serve.assert_not_called()


class TestCliTypes:
    def test_fixed_array(self):
        runner = CliRunner()
        result = runner.invoke(main, ["types", "address[2]"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "type": "array",
            "items": {"type": "string", "format": "ethereum-address"},
            "minItems": 2,
            "maxItems": 2,
        }

    def test_tuple_with_components(self):
        runner = CliRunner()
        result = runner.invoke(main, [
            "types", "tuple", "--components", '[{"name": "a", "type": "uint256"}]',
        ])
        assert result.exit_code == 0
        assert json.loads(result.output)["required"] == ["a"]

    def test_tuple_without_components_is_bad_parameter(self):
        runner = CliRunner()
        result = runner.invoke(main, ["types", "tuple"])
        assert result.exit_code == 2
