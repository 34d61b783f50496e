"""Tests for utils/reporting.py."""

import csv
from pathlib import Path

from models.schemas import BatchResult, FileOutcome, OutcomeStatus, Plan
from utils.reporting import format_outcome, format_summary, write_csv_report

PLAN = Plan(abs_target=Path("/dst/A/B/01 - T.mp3"), relative_target="A/B/01 - T.mp3")


class TestFormatOutcome:

    def test_processed(self):
        outcome = FileOutcome(source_path=Path("/src/x.mp3"), status=OutcomeStatus.PROCESSED, plan=PLAN)
        assert format_outcome(outcome) == ["x.mp3", "  -> A/B/01 - T.mp3"]

    def test_errored_after_planning(self):
        outcome = FileOutcome(
            source_path=Path("/src/x.mp3"), status=OutcomeStatus.ERRORED,
            plan=PLAN, error_message="disk full"
        )
        assert format_outcome(outcome) == ["x.mp3", "  -> A/B/01 - T.mp3", "  ! Error: disk full"]

    def test_errored_before_planning(self):
        outcome = FileOutcome(
            source_path=Path("/src/x.mp3"), status=OutcomeStatus.ERRORED, error_message="bad tags"
        )
        assert format_outcome(outcome) == ["x.mp3", "  ! Error: bad tags"]

    def test_skipped_is_silent(self):
        outcome = FileOutcome(source_path=Path("/src/x.mp3"), status=OutcomeStatus.SKIPPED)
        assert format_outcome(outcome) == []


class TestSummary:

    def test_counts(self):
        result = BatchResult()
        result.record(FileOutcome(source_path=Path("a"), status=OutcomeStatus.PROCESSED, plan=PLAN))
        result.record(FileOutcome(source_path=Path("b"), status=OutcomeStatus.SKIPPED))
        result.record(FileOutcome(source_path=Path("c"), status=OutcomeStatus.ERRORED, error_message="x"))

        assert format_summary(result) == "Done. Processed: 1, Skipped: 1, Errors: 1"
        assert result.total_files == 3
        assert not result.success

    def test_empty_run_succeeds(self):
        result = BatchResult()
        assert format_summary(result) == "Done. Processed: 0, Skipped: 0, Errors: 0"
        assert result.success


class TestCsvReport:

    def test_writes_one_row_per_file(self, tmp_path):
        result = BatchResult()
        result.record(FileOutcome(
            source_path=Path("/src/a.mp3"), status=OutcomeStatus.PROCESSED, plan=PLAN,
            final_target=Path("/dst/A/B/01 - T (2).mp3")
        ))
        result.record(FileOutcome(
            source_path=Path("/src/b.mp3"), status=OutcomeStatus.ERRORED, error_message="bad tags"
        ))
        report = tmp_path / "out" / "report.csv"

        write_csv_report(result, report)

        with open(report, newline='', encoding='utf-8') as f:
            rows = list(csv.reader(f))

        assert rows[0] == ['Source Path', 'Relative Path', 'Target Path', 'Status', 'Error']
        assert rows[1] == [
            str(Path("/src/a.mp3")), "A/B/01 - T.mp3", str(Path("/dst/A/B/01 - T (2).mp3")),
            "processed", ""
        ]
        assert rows[2] == [str(Path("/src/b.mp3")), "", "", "errored", "bad tags"]
