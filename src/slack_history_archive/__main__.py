import asyncio
import sys

from dotenv import load_dotenv
from loguru import logger

from slack_history_archive.app_config import (
    build_archive_config,
    load_json_config,
    parse_app_config,
    resolve_runtime_env,
)
from slack_history_archive.bootstrap import open_output, run_archive
from slack_history_archive.errors import ArchiveError
from slack_history_archive.logging_config import setup_logging

EXIT_OK = 0
EXIT_ARCHIVE_FAILED = 1
EXIT_BAD_CONFIG = 2
EXIT_INTERRUPTED = 130


def main() -> int:
    load_dotenv()

    try:
        app = parse_app_config(load_json_config())
    except (ValueError, TypeError) as ex:
        logger.error(f"Invalid config.json: {ex}")
        return EXIT_BAD_CONFIG

    try:
        setup_logging(level=app.log_level, log_file=app.log_file, archive_path=app.output_path)
    except ValueError as ex:
        logger.error(f"Invalid logging configuration: {ex}")
        return EXIT_BAD_CONFIG

    try:
        config = build_archive_config(app, resolve_runtime_env())
    except ValueError as ex:
        logger.error(f"Invalid configuration: {ex}")
        return EXIT_BAD_CONFIG

    try:
        with open_output(app.output_path) as sink:
            asyncio.run(run_archive(config, sink))
    except ArchiveError as ex:
        logger.error(f"Archive failed: {ex}")
        return EXIT_ARCHIVE_FAILED
    except KeyboardInterrupt:
        logger.warning("Interrupted; partial archive written.")
        return EXIT_INTERRUPTED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
