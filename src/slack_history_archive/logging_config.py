import sys
from pathlib import Path

from loguru import logger

_CONSOLE_FORMAT = "<level>{level:<8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"

# names that would land log lines inside the JSON archive on stdout
_STDOUT_TARGETS = {"-", "/dev/stdout", "/dev/fd/1", "/proc/self/fd/1"}


def _check_log_file(log_file: str, archive_path: str | None) -> Path:
    if log_file.strip() in _STDOUT_TARGETS:
        raise ValueError(f"LogFile {log_file!r} is standard output, which carries the archive")
    path = Path(log_file)
    if archive_path and path.resolve() == Path(archive_path).resolve():
        raise ValueError(f"LogFile {log_file!r} is the archive OutputPath")
    return path


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    *,
    archive_path: str | None = None,
) -> list[str]:
    """Send logs to stderr and, optionally, a rotating file.

    Standard output is never a log sink: it (or ``archive_path``) holds the
    JSON array. Raises ValueError for a log file that would collide with it,
    before any sink is replaced. Returns a description of each sink.
    """
    path = _check_log_file(log_file, archive_path) if log_file else None

    logger.remove()
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT)
    descriptions = [f"console (stderr, {level})"]

    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(str(path), level=level, format=_FILE_FORMAT, rotation="10 MB", retention=3)
        descriptions.append(f"file ({path}, {level})")

    return descriptions
