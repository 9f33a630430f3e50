import csv
import io

from paper_eval.findings.models import Finding


class FindingsExporter:
    """Converts findings to tabular rows for spreadsheet export."""

    COLUMNS: tuple[tuple[str, str], ...] = (
        ("Key Finding Number", "number"),
        ("Criteria", "criteria"),
        ("Value", "value"),
        ("Evidence Level", "evidence_level"),
        ("Methodology Quality", "methodology_quality"),
        ("Importance", "importance"),
        ("Source", "source"),
    )

    def to_rows(self, findings: list[Finding]) -> list[dict[str, str]]:
        """Return one JSON-serializable dict per finding, keyed by column header."""
        return [self._finding_to_row(f) for f in findings]

    def to_csv(self, findings: list[Finding]) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(
            buffer,
            fieldnames=[header for header, _ in self.COLUMNS],
            lineterminator="\n",
        )
        writer.writeheader()
        writer.writerows(self.to_rows(findings))
        return buffer.getvalue()

    def _finding_to_row(self, finding: Finding) -> dict[str, str]:
        return {header: str(getattr(finding, attr)) for header, attr in self.COLUMNS}
