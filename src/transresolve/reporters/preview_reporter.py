"""A reporter that lists every pattern in a file with its resolved output."""

import logging

from transresolve import paths
from transresolve.models import RunContext
from transresolve.orchestrator import Occurrence
from transresolve.scan_state import OccurrenceStatus

logger = logging.getLogger(__name__)

_STATUS_ICONS = {
    OccurrenceStatus.RESOLVED: "✅",
    OccurrenceStatus.FALLBACK: "🔑",
    OccurrenceStatus.UNRESOLVED: "⏸️",
}


def _cell(text: str | None) -> str:
    """Make text safe for a single Markdown table cell."""
    if text is None:
        return ""
    return text.replace("|", "\\|").replace("\n", " ")


class PreviewReporter:
    """Generates a Markdown preview report for one source file."""

    def generate(self, context: RunContext) -> None:
        """
        Write the preview report to the project's report directory.

        Args:
            context: The run context holding the scan result.

        """
        report_path = None
        try:
            report_dir = paths.get_report_dir(context.project_root)
            paths.ensure_dir_exists(report_dir)
            report_path = report_dir / f"{context.source_path.stem}_preview.md"
            logger.info("Generating preview report at: %s", report_path)

            report_path.write_text(self.build_report(context), encoding="utf-8")
            logger.info("Successfully wrote preview report to %s", report_path)
        except FileNotFoundError:
            logger.exception("Could not generate preview report because the project root could not be determined.")
        except OSError:
            logger.exception("Failed to write preview report to %s", report_path)

    def build_report(self, context: RunContext) -> str:
        """Construct the full Markdown content for the report."""
        occurrences = context.result.occurrences if context.result else []
        parts = [self._build_header(context, occurrences), self._build_table(occurrences)]
        return "\n".join(parts)

    def _build_header(self, context: RunContext, occurrences: list[Occurrence]) -> str:
        keys = {occurrence.key for occurrence in occurrences}
        missing = sorted(key for key in keys if key not in context.dictionary)
        header = (
            f"# Translation Preview for `{context.source_path.name}`\n\n"
            f"- **Language:** `{context.dictionary.locale}`\n"
            f"- **Dictionary Keys:** {len(context.dictionary.entries)}\n"
            f"- **Patterns Found:** {len(occurrences)}\n"
            f"- **Distinct Keys:** {len(keys)}\n"
        )
        if missing:
            header += f"- **Missing Keys:** {', '.join(f'`{key}`' for key in missing)}\n"
        return header

    def _build_table(self, occurrences: list[Occurrence]) -> str:
        if not occurrences:
            return "## Patterns\n\nNo `ct_translate(` patterns were found.\n"

        rows = ["## Patterns\n", "| # | Key | Status | Pattern | Output |", "|---|---|---|---|---|"]
        for index, occurrence in enumerate(occurrences, start=1):
            status = f"{_STATUS_ICONS[occurrence.status]} {occurrence.status.value}"
            if occurrence.reason is not None:
                status += f" ({occurrence.reason.code})"
            rows.append(
                f"| {index} | `{occurrence.key}` | {status} | `{_cell(occurrence.raw)}` | {_cell(occurrence.text)} |",
            )
        return "\n".join(rows) + "\n"
