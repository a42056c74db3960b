"""Command-line entry point: reprice an HTML file."""

import argparse
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import ValidationError

from repricer.config.environment import EnvironmentConfig
from repricer.config.exceptions import ConfigurationError
from repricer.config.loader import load_config, validate_config_file
from repricer.config.models import AppConfig
from repricer.document import DocumentError, HtmlDocument
from repricer.logging import get_logger
from repricer.logging.config import configure_logging
from repricer.pricing import AdjustmentParseError, adjust

logger = get_logger(__name__, component="cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repricer",
        description="Adjust every price in an HTML document by a fixed amount or percentage",
    )
    parser.add_argument("input", type=Path, nargs="?", help="HTML file to reprice")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Where to write the result (default: stdout)",
    )
    parser.add_argument(
        "-a",
        "--adjustment",
        default=None,
        help="Signed amount (e.g. -2.46) or percentage (e.g. -14%%); overrides config",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of matched elements to adjust",
    )
    parser.add_argument(
        "--selector",
        default=None,
        help="CSS selector of the element to scan (default: whole document)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: repricer.yaml if present)",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Validate the configuration file and exit (no input needed)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def load_runtime_config(
    config_path: Optional[Path],
    overrides: Dict[str, Any],
    log_level_override: Optional[str] = None,
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and apply command-line overrides.

    Priority for every setting: CLI > environment > config file > default.

    Args:
        config_path: Explicit configuration file, or None for the default lookup
        overrides: CLI values keyed by AppConfig field; None values are ignored
        log_level_override: Log level from the CLI

    Returns:
        Tuple of (AppConfig, EnvironmentConfig); env_config.log_level and
        env_config.log_format hold the effective logging settings

    Raises:
        ConfigurationError: If configuration or overrides are invalid
    """
    app_config, env_config = load_config(config_path)

    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        try:
            app_config = AppConfig.model_validate({**app_config.model_dump(), **updates})
        except ValidationError as e:
            raise ConfigurationError.from_validation_error(
                e, suggestions=["Check the command-line arguments"]
            )

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    if not env_config.log_format:
        env_config.log_format = app_config.logging.format

    return app_config, env_config


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the repricer CLI.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    load_dotenv()
    start_time = time.time()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.check_config:
        return 0 if validate_config_file(args.config) else 1

    if args.input is None:
        parser.error("the following arguments are required: input")

    try:
        app_config, env_config = load_runtime_config(
            args.config,
            {"adjustment": args.adjustment, "limit": args.limit, "selector": args.selector},
            args.log_level,
        )

        # The document goes to stdout unless -o is given; keep logs off it then
        configure_logging(
            level=env_config.log_level,
            format_type=env_config.log_format,
            environment=env_config.environment,
            stream=sys.stderr if args.output is None else None,
        )

        spec = app_config.get_adjustment_spec()
        if spec is None:
            raise ConfigurationError(
                "No adjustment given",
                suggestions=[
                    "Pass --adjustment, e.g. --adjustment -2.46 or --adjustment=-14%",
                    "Or set 'adjustment' in repricer.yaml",
                ],
            )

        document = HtmlDocument.from_file(
            args.input, parser=app_config.parser, encoding=app_config.encoding
        )
        root = document.select(app_config.selector) if app_config.selector else document.root

        report = adjust(spec, root, app_config.limit)

        if args.output is None:
            sys.stdout.write(document.to_string())
        else:
            document.write(args.output, encoding=app_config.encoding)

        logger.info(
            f"Repriced {report.amounts_adjusted} amounts in {report.nodes_adjusted} elements",
            extra={
                "event": "cli.run.completed",
                "input": str(args.input),
                "output": str(args.output) if args.output else "stdout",
                "had_errors": report.had_errors,
                "duration_seconds": round(time.time() - start_time, 3),
            },
        )

        return 1 if report.had_errors else 0

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except (DocumentError, AdjustmentParseError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
