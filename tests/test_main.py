"""Tests for the command line entry point in main.py."""

import logging
import os

import pytest

import main
from conftest import make_file
from filesystem.metadata_reader import MetadataReader
from pipeline.orchestrator import OrganizePipeline
from utils.exceptions import MetadataExtractionError

EXPECTED_RELATIVE = os.path.join("Daft Punk", "Discovery (2001)", "01 - One More Time.mp3")


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    """main() reconfigures the root logger; put it back afterwards."""
    for name in list(os.environ):
        if name.startswith("MUSIC_ORGANIZE_"):
            monkeypatch.delenv(name)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def tagged(monkeypatch, daft_punk):
    """Every file reads as the same Daft Punk track, except files named broken*."""
    def fake_read(self, file_path):
        if file_path.name.startswith("broken"):
            raise MetadataExtractionError(str(file_path), "corrupt header")
        return daft_punk
    monkeypatch.setattr(MetadataReader, "read", fake_read)


class TestMain:

    def test_missing_arguments_is_usage_error(self, capsys):
        assert main.main([]) == main.EXIT_USAGE
        assert "--src" in capsys.readouterr().out

    def test_missing_source(self, tmp_path, capsys):
        code = main.main(["--src", str(tmp_path / "nope"), "--dst", str(tmp_path / "out")])
        assert code == main.EXIT_SOURCE_NOT_FOUND
        assert "Source not found" in capsys.readouterr().out

    def test_dry_run_reports_without_writing(self, tagged, source_dir, dest_dir, capsys):
        src = make_file(source_dir, "a.mp3")

        code = main.main(["--src", str(source_dir), "--dst", str(dest_dir), "--dryrun"])

        out = capsys.readouterr().out.splitlines()
        assert code == main.EXIT_OK
        assert "a.mp3" in out
        assert f"  -> {EXPECTED_RELATIVE}" in out
        assert out[-1] == "Done. Processed: 1, Skipped: 0, Errors: 0"
        assert not dest_dir.exists()
        assert src.exists()

    def test_move(self, tagged, source_dir, dest_dir):
        src = make_file(source_dir, "a.mp3")

        code = main.main(["--src", str(source_dir), "--dest", str(dest_dir), "--move"])

        assert code == main.EXIT_OK
        assert (dest_dir / EXPECTED_RELATIVE).exists()
        assert not src.exists()

    def test_errors_give_non_zero_exit_but_batch_completes(self, tagged, source_dir, dest_dir, capsys):
        make_file(source_dir, "a.mp3")
        make_file(source_dir, "broken.mp3")

        code = main.main(["--src", str(source_dir), "--dst", str(dest_dir)])

        out = capsys.readouterr().out
        assert code == main.EXIT_FILE_ERRORS
        assert "  ! Error: " in out
        assert "Done. Processed: 1, Skipped: 0, Errors: 1" in out
        assert (dest_dir / EXPECTED_RELATIVE).exists()

    def test_skipped_files_are_counted(self, tagged, source_dir, dest_dir, capsys):
        make_file(source_dir, "a.mp3")

        code = main.main([
            "--src", str(source_dir), "--dst", str(dest_dir), "--pattern", "{playlist_name}"
        ])

        assert code == main.EXIT_OK
        assert "Done. Processed: 0, Skipped: 1, Errors: 0" in capsys.readouterr().out

    def test_strict_placeholders_rejects_unknown_tokens(self, tagged, source_dir, dest_dir, capsys):
        make_file(source_dir, "a.mp3")

        code = main.main([
            "--src", str(source_dir), "--dst", str(dest_dir),
            "--pattern", "{genre}/{track_name}", "--strict-placeholders"
        ])

        captured = capsys.readouterr()
        assert code == main.EXIT_FILE_ERRORS
        assert "{genre}" in captured.err
        assert "Scanning" not in captured.out
        assert not dest_dir.exists()

    def test_unknown_placeholders_kept_by_default(self, tagged, source_dir, dest_dir, capsys):
        make_file(source_dir, "a.mp3")

        code = main.main([
            "--src", str(source_dir), "--dst", str(dest_dir),
            "--pattern", "{genre}/{track_name}", "--dryrun"
        ])

        assert code == main.EXIT_OK
        assert f"  -> {os.path.join('{genre}', 'One More Time.mp3')}" in capsys.readouterr().out

    def test_config_file_and_cli_override(self, tagged, source_dir, dest_dir, tmp_path):
        make_file(source_dir, "a.mp3")
        config = tmp_path / "config.yaml"
        config.write_text("organize:\n  pattern: \"{album_name}/{track_name}\"\n  move: true\n")

        code = main.main([
            "--src", str(source_dir), "--dst", str(dest_dir),
            "--config", str(config), "--pattern", "{artist_name}/{track_name}"
        ])

        assert code == main.EXIT_OK
        assert (dest_dir / "Daft Punk" / "One More Time.mp3").exists()
        assert not (source_dir / "a.mp3").exists()

    def test_missing_config_file(self, source_dir, dest_dir, tmp_path, capsys):
        code = main.main([
            "--src", str(source_dir), "--dst", str(dest_dir),
            "--config", str(tmp_path / "absent.yaml")
        ])
        assert code == main.EXIT_FILE_ERRORS
        assert "Config file not found" in capsys.readouterr().err

    def test_csv_report(self, tagged, source_dir, dest_dir, tmp_path):
        make_file(source_dir, "a.mp3")
        report = tmp_path / "report.csv"

        main.main(["--src", str(source_dir), "--dst", str(dest_dir), "--report", str(report)])

        content = report.read_text(encoding="utf-8")
        assert "Source Path,Relative Path,Target Path,Status,Error" in content
        assert "processed" in content

    def test_log_file(self, tagged, source_dir, dest_dir, tmp_path):
        make_file(source_dir, "a.mp3")
        log_file = tmp_path / "logs" / "run.log"

        main.main([
            "--src", str(source_dir), "--dst", str(dest_dir), "--verbose", "--log-file", str(log_file)
        ])

        assert "Copied file" in log_file.read_text(encoding="utf-8")

    def test_print_config_template(self, capsys):
        assert main.main(["--print-config-template"]) == main.EXIT_OK
        assert "organize:" in capsys.readouterr().out

    def test_unexpected_error_is_reported(self, source_dir, dest_dir, monkeypatch, capsys):
        def explode(self, source_dir):
            raise RuntimeError("boom")

        monkeypatch.setattr(OrganizePipeline, "discover", explode)

        code = main.main(["--src", str(source_dir), "--dst", str(dest_dir)])

        assert code == main.EXIT_USAGE
        assert "Unexpected error: boom" in capsys.readouterr().err
