"""Main entry point for the TransResolve command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__, paths
from .config import TransResolveConfig, load_config
from .logging_utils import setup_logging
from .templates import DEFAULT_CONFIG_YAML, EXAMPLE_DICTIONARY_JSON
from .workflow import run_preview, run_resolve

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the TransResolve CLI.

    Returns:
        argparse.Namespace: An object containing the parsed command-line arguments.

    """
    parser = argparse.ArgumentParser(description="TransResolve: resolve ct_translate() patterns in text and HTML")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"TransResolve {__version__}",
        help="Show the version number and exit.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init", help="Initialize a new TransResolve project.")
    init_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="The directory to initialize the project in (default: current directory).",
    )
    init_parser.add_argument("--debug", action="store_true", help="Enable debug level logging.")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve all patterns in a file.")
    resolve_parser.add_argument("file", help="The text or HTML file to resolve.")
    resolve_parser.add_argument("--lang", help="ISO-2 language code overriding the configured language.")
    resolve_parser.add_argument("--output", "-o", help="Write the result to this file instead of stdout.")
    resolve_parser.add_argument("--html", action="store_true", help="Treat the input as an HTML fragment.")
    resolve_parser.add_argument("--chip", action="store_true", help="Render resolved patterns as chips (HTML only).")
    resolve_parser.add_argument("--debug", action="store_true", help="Enable debug level logging.")

    preview_parser = subparsers.add_parser("preview", help="Write a Markdown report of every pattern in a file.")
    preview_parser.add_argument("file", help="The text or HTML file to inspect.")
    preview_parser.add_argument("--lang", help="ISO-2 language code overriding the configured language.")
    preview_parser.add_argument("--debug", action="store_true", help="Enable debug level logging.")

    args_list = sys.argv[1:] if argv is None else argv
    if not args_list:
        parser.print_help(sys.stderr)
        sys.exit(1)

    return parser.parse_args(args_list)


def _init_project(target_path: Path) -> None:
    """Initialize a new TransResolve project structure."""
    logger.info("Initializing TransResolve project in: %s", target_path)

    config_file = target_path / paths.APP_SUBDIR / paths.CONFIG_FILE_NAMES[0]
    if config_file.exists():
        logger.warning("Configuration file already exists at: %s", config_file)
        return

    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
        logger.info("Created default configuration at: %s", config_file)

        dictionary_file = target_path / "translations" / "en.json"
        if not dictionary_file.exists():
            dictionary_file.parent.mkdir(parents=True, exist_ok=True)
            dictionary_file.write_text(EXAMPLE_DICTIONARY_JSON, encoding="utf-8")
            logger.info("Created example dictionary at: %s", dictionary_file)
        logger.info("Project initialized successfully!")
    except OSError:
        logger.exception("Failed to initialize project")
        sys.exit(1)


def _load_config(start_path: Path) -> tuple[TransResolveConfig, Path] | None:
    """
    Find the project root from `start_path` and load its configuration.

    Returns:
        The configuration and the project root, or None if loading failed.

    """
    try:
        project_root = paths.find_project_root(start_path)
        config_path = paths.get_config_file_path(project_root)
        logger.info("Loading configuration from: %s", config_path)
        return load_config(config_path), project_root
    except FileNotFoundError:
        logger.exception("Could not find a valid configuration file.")
        return None
    except Exception:
        logger.exception("An unexpected error occurred while loading the configuration.")
        return None


def main(argv: list[str] | None = None) -> None:
    """
    Run the main entry point for the TransResolve command-line interface.

    1. Parses command-line arguments.
    2. Loads the configuration.
    3. Runs the requested command.
    """
    try:
        args = _parse_args(argv)

        if args.command == "init":
            init_path = Path(args.path).resolve()
            if not init_path.is_dir():
                logger.error("Path is not a directory: %s", init_path)
                sys.exit(1)
            setup_logging(version=__version__, debug=args.debug, project_root=init_path)
            _init_project(init_path)
            return

        source_path = Path(args.file).resolve()
        if not source_path.is_file():
            logger.error("File does not exist: %s", source_path)
            sys.exit(1)

        setup_logging(version=__version__, debug=args.debug, project_root=Path.cwd())

        loaded = _load_config(Path.cwd())
        if loaded is None:
            logger.critical("Failed to load configuration. Aborting.")
            sys.exit(1)
        config, project_root = loaded

        if args.command == "resolve":
            output_path = Path(args.output).resolve() if args.output else None
            context = run_resolve(
                source_path,
                config,
                project_root,
                language=args.lang,
                is_html=args.html,
                chip=args.chip,
                output_path=output_path,
            )
            if output_path is None and context.output is not None:
                sys.stdout.write(context.output)
        elif args.command == "preview":
            run_preview(source_path, config, project_root, language=args.lang)

    except Exception:
        logger.exception("An unexpected error occurred")
        logger.critical("An unrecoverable error occurred. Please check the logs for details.")
        sys.exit(1)


if __name__ == "__main__":
    main()
