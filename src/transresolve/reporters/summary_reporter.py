"""A reporter for generating concise run summaries."""

import logging

from transresolve.models import RunContext
from transresolve.scan_state import OccurrenceStatus

logger = logging.getLogger(__name__)


class SummaryReporter:
    """Logs a concise summary of a resolve run."""

    def generate(self, context: RunContext) -> None:
        """Log a summary of the run to the console."""
        logger.info("--- Resolve Summary for '%s' ---", context.source_path.name)

        result = context.result
        if result is None:
            logger.info("Nothing was scanned.")
            logger.info("-------------------------------------------------")
            return

        logger.info("Patterns found: %d", len(result.occurrences))
        logger.info("  - Resolved from dictionary: %d", result.count(OccurrenceStatus.RESOLVED))
        logger.info("  - Rendered as key: %d", result.count(OccurrenceStatus.FALLBACK))
        logger.info("  - Left unresolved: %d", result.count(OccurrenceStatus.UNRESOLVED))

        reasons: dict[str, int] = {}
        for occurrence in result.occurrences:
            if occurrence.reason is not None:
                reasons[occurrence.reason.code] = reasons.get(occurrence.reason.code, 0) + 1
        for code, count in sorted(reasons.items()):
            logger.info("      %s: %d", code, count)

        logger.info("Text units visited: %d", result.nodes_visited)
        if result.truncated:
            logger.info("The scan stopped early at its configured limits.")
        if context.fallback_applied:
            logger.info("Resolved by async fallback: %d unit(s)", context.fallback_applied)
        if context.output_path is not None:
            logger.info("Output written to %s", context.output_path)

        logger.info("-------------------------------------------------")
