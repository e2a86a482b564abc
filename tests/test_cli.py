"""Tests for the command line interface."""

import io

import pytest
from rich.console import Console

from flutter_codegen.cli import CLIHandler
from flutter_codegen.main import create_parser, main


@pytest.fixture
def out(tmp_path):
    return tmp_path / "flutter"


def _handler(confirm):
    console = Console(file=io.StringIO(), width=200)
    return CLIHandler(console=console, confirm=confirm), console


class TestMain:
    """Tests running the CLI end to end through ``main``."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "generate-all" in capsys.readouterr().out

    def test_list_models(self, manifest_path, capsys):
        assert main(["list-models", "--manifest", str(manifest_path)]) == 0
        output = capsys.readouterr().out
        for name in ("AuditLog", "Post", "User"):
            assert name in output

    def test_log_level_is_case_insensitive(self, manifest_path):
        assert main(["--log-level", "debug", "list-models", "--manifest", str(manifest_path)]) == 0

    def test_missing_backend(self, capsys):
        assert main(["generate-model", "User"]) == 1
        assert "No backend given" in capsys.readouterr().out

    def test_database_url_needs_models_module(self, capsys):
        assert main(["generate-model", "User", "--database-url", "sqlite://"]) == 1
        assert "--models-module" in capsys.readouterr().out

    def test_generate_model(self, manifest_path, out):
        code = main(["generate-model", "User", "--manifest", str(manifest_path), "-o", str(out)])
        assert code == 0
        assert (out / "models" / "user.dart").exists()
        assert not (out / "services").exists()

    def test_generate_service_with_routes(self, manifest_path, out):
        args = ["generate-service", "User", "--with-routes", "--manifest", str(manifest_path)]
        assert main(args + ["--output", str(out)]) == 0
        service = (out / "services" / "user_service.dart").read_text()
        assert "Future<User> activate(int user, Map<String, dynamic> data) async {" in service
        assert (out / "services" / "api_service.dart").exists()

    def test_generate_service_without_routes(self, manifest_path, out):
        assert main(["generate-service", "User", "--manifest", str(manifest_path), "-o", str(out)]) == 0
        assert "activate" not in (out / "services" / "user_service.dart").read_text()

    def test_generate_feature_with_skips(self, manifest_path, out):
        args = [
            "generate-feature",
            "Post",
            "--skip-widgets",
            "--skip-screens",
            "--manifest",
            str(manifest_path),
            "-o",
            str(out),
        ]
        assert main(args) == 0
        assert (out / "models" / "post.dart").exists()
        assert (out / "services" / "post_service.dart").exists()
        assert not (out / "widgets").exists()
        assert not (out / "screens").exists()

    def test_generate_all(self, manifest_path, out):
        args = ["generate-all", "--yes", "--manifest", str(manifest_path), "-o", str(out)]
        assert main(args) == 0
        assert len(list(out.rglob("*.dart"))) == 28

    def test_generate_all_reports_failures(self, manifest_path, out):
        args = ["generate-all", "-y", "--models", "User, Invoice", "--manifest", str(manifest_path)]
        assert main(args + ["-o", str(out)]) == 1
        assert (out / "models" / "user.dart").exists()


class TestCLIHandler:
    """Tests for prompts and reporting."""

    def test_existing_file_declined(self, manifest_path, out):
        args = create_parser().parse_args(
            ["generate-model", "User", "--manifest", str(manifest_path), "-o", str(out)]
        )
        questions = []
        handler, console = _handler(lambda q: questions.append(q) or False)

        assert handler.run(args) == 0
        assert handler.run(args) == 0
        assert len(questions) == 1
        assert questions[0].endswith("already exists. Overwrite?")
        assert "Skipped: 1" in console.file.getvalue()

    def test_generate_all_cancelled(self, manifest_path, out):
        args = create_parser().parse_args(
            ["generate-all", "--manifest", str(manifest_path), "-o", str(out)]
        )
        handler, console = _handler(lambda q: False)
        assert handler.run(args) == 0
        assert "Generation cancelled." in console.file.getvalue()
        assert not out.exists()

    def test_generate_all_shows_plan(self, manifest_path, out):
        args = create_parser().parse_args(
            ["generate-all", "--models", "User", "--manifest", str(manifest_path), "-o", str(out)]
        )
        handler, console = _handler(lambda q: True)
        assert handler.run(args) == 0
        output = console.file.getvalue()
        assert "Generation Plan" in output
        assert "Estimated files: 10" in output
        assert "Succeeded: 10" in output

    def test_everything_skipped(self, manifest_path, out):
        args = create_parser().parse_args(
            [
                "generate-feature",
                "User",
                "--skip-model",
                "--skip-service",
                "--skip-widgets",
                "--skip-screens",
                "--manifest",
                str(manifest_path),
            ]
        )
        handler, console = _handler(lambda q: True)
        assert handler.run(args) == 1
        assert "nothing to generate" in console.file.getvalue()

    def test_bad_manifest(self, tmp_path):
        args = create_parser().parse_args(
            ["list-models", "--manifest", str(tmp_path / "missing.json")]
        )
        handler, console = _handler(lambda q: True)
        assert handler.run(args) == 1
        assert "Error" in console.file.getvalue()
