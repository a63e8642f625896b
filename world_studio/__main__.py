#!/usr/bin/env python3
"""
World Studio TUI
Browse a gallery of worlds and create new ones with an AI architect.
"""
import sys
import logging
from pathlib import Path
from datetime import datetime

import click


def setup_logging(debug: bool = False, log_dir: Path | None = None) -> Path:
    """Configure logging to both console and file.

    Returns:
        Path to the log file
    """
    logs_dir = log_dir or Path.cwd() / "logs" / "studio"
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    log_file = logs_dir / f"studio_{timestamp}.log"

    # File handler - verbose with --debug
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    ))

    # Console handler - only errors, so the TUI is not disturbed
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.ERROR)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Keep provider SDKs quiet
    for noisy in ("litellm", "LiteLLM", "httpx", "httpcore", "google_genai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return log_file


@click.command()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--log-dir', type=click.Path(file_okay=False, path_type=Path),
              default=None, help='Directory for log files (default: ./logs/studio)')
def main(debug: bool, log_dir: Path | None):
    """Launch the World Studio TUI."""
    log_file = setup_logging(debug=debug, log_dir=log_dir)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("World Studio starting")
    logger.info(f"Debug mode: {debug}")
    logger.info(f"Log file: {log_file}")
    logger.info("=" * 60)

    from world_studio.core.errors import ConfigurationError
    from world_studio.core.provider import StudioProvider

    # Missing credentials are reported before the UI starts
    try:
        provider = StudioProvider()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        raise click.ClickException(e.message)

    from world_studio.app import WorldStudioApp

    app = WorldStudioApp(provider=provider)

    try:
        app.run()
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        raise
    finally:
        logger.info("World Studio shutdown")


if __name__ == "__main__":
    main()
