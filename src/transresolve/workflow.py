"""Manages file-level resolve and preview runs."""

import asyncio
import logging
from pathlib import Path
from typing import Any

from .config import TransResolveConfig
from .dictionary import load_dictionary
from .dom import parse_fragment, serialize_fragment
from .fallback import FallbackClient, build_fallback_client
from .models import RunContext, RunMode
from .orchestrator import Orchestrator
from .reporters.preview_reporter import PreviewReporter
from .reporters.summary_reporter import SummaryReporter
from .session import ScanSession
from .types import Dictionary, TextBuffer

logger = logging.getLogger(__name__)


def _load_run_dictionary(config: TransResolveConfig, project_root: Path, language: str | None) -> Dictionary:
    """Load the configured dictionary. An explicit language drops the configured locale overlay."""
    directory = project_root / config.dictionary.directory
    if language:
        return load_dictionary(directory, language)
    return load_dictionary(directory, config.dictionary.language, config.dictionary.locale)


def build_orchestrator(config: TransResolveConfig, dictionary: Dictionary, *, chip: bool = False) -> Orchestrator:
    """Create an Orchestrator from the render and limit settings."""
    return Orchestrator(
        dictionary,
        limits=config.limits,
        mode="chip" if chip else config.render.mode,
        defer_unknown_keys=config.render.defer_unknown_keys,
        escape=config.render.escape,
    )


def _build_client(config: TransResolveConfig, project_root: Path) -> FallbackClient | None:
    kwargs: dict[str, Any] = {}
    if config.fallback.provider == "local":
        kwargs = {"dictionary_dir": project_root / config.dictionary.directory, "limits": config.limits}
    return build_fallback_client(config.fallback, **kwargs)


async def _resolve_async(context: RunContext, text: str, orchestrator: Orchestrator, client: FallbackClient | None) -> None:
    session = ScanSession(orchestrator, client, context.dictionary.locale)
    try:
        if context.is_html:
            root = parse_fragment(text)
            context.result = await session.run_tree(root)
            context.output = serialize_fragment(root)
        else:
            buffer = TextBuffer(text, name=context.source_path.name)
            context.result = await session.run_text(buffer)
            context.output = buffer.get()
    finally:
        if client is not None:
            await client.aclose()
    context.fallback_applied = len(session.applied)
    context.session_history = list(session.history)


def run_resolve(
    source_path: Path,
    config: TransResolveConfig,
    project_root: Path,
    *,
    language: str | None = None,
    is_html: bool = False,
    chip: bool = False,
    output_path: Path | None = None,
) -> RunContext:
    """
    Resolve every pattern in one file.

    Args:
        source_path: The file to read.
        config: The loaded configuration.
        project_root: The project root; the dictionary directory is relative to it.
        language: Overrides the configured language (and drops the locale overlay).
        is_html: Treat the file as an HTML fragment instead of plain text.
        chip: Render chips instead of plain text (HTML only).
        output_path: Where to write the result. When None, the caller prints it.

    Returns:
        The run context with the output and scan result.

    """
    dictionary = _load_run_dictionary(config, project_root, language)
    if chip and not is_html:
        logger.warning("Chip rendering needs HTML input; falling back to text mode.")
        chip = False

    context = RunContext(
        source_path=source_path,
        project_root=project_root,
        config=config,
        dictionary=dictionary,
        mode=RunMode.RESOLVE,
        is_html=is_html,
        output_path=output_path,
    )

    text = source_path.read_text(encoding="utf-8")
    orchestrator = build_orchestrator(config, dictionary, chip=chip)
    client = _build_client(config, project_root)
    logger.info("Resolving '%s' as %s for '%s'.", source_path.name, "HTML" if is_html else "text", dictionary.locale)

    asyncio.run(_resolve_async(context, text, orchestrator, client))

    if output_path is not None and context.output is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(context.output, encoding="utf-8")

    SummaryReporter().generate(context)
    return context


def run_preview(
    source_path: Path,
    config: TransResolveConfig,
    project_root: Path,
    *,
    language: str | None = None,
) -> RunContext:
    """
    List every pattern in a file with the text it resolves to, without writing the file.

    Returns:
        The run context; the Markdown report is written to the report directory.

    """
    dictionary = _load_run_dictionary(config, project_root, language)
    context = RunContext(
        source_path=source_path,
        project_root=project_root,
        config=config,
        dictionary=dictionary,
        mode=RunMode.PREVIEW,
    )

    text = source_path.read_text(encoding="utf-8")
    orchestrator = Orchestrator(dictionary, limits=config.limits, defer_unknown_keys=config.render.defer_unknown_keys)
    _, context.result = orchestrator.resolve_text(text)

    PreviewReporter().generate(context)
    return context
