import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

# Resolution logs per-library summaries and skipped directives at DEBUG.
DEFAULT_LEVEL = "INFO"
VERBOSE_LEVEL = "DEBUG"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)

_logging_configured = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def _only_ngreflector(record) -> bool:
    return record["name"].startswith("ngreflector")


def setup_logging(
    level: Optional[str] = None,
    suppress_console: Optional[bool] = None,
    enable_file_logging: Optional[bool] = None,
    force: bool = False,
):
    """
    Configures the global logger for resolution runs.

    Args:
        level: Console level. Defaults to NGREFLECTOR_LOG_LEVEL, else INFO.
        suppress_console: If None, NGREFLECTOR_MACHINE_MODE decides.
        enable_file_logging: If None, NGREFLECTOR_FILE_LOGGING decides. The
            file always records DEBUG so linking decisions can be audited.
        force: Reconfigure even if logging was already set up.
    """
    global _logging_configured
    if _logging_configured and not force:
        return
    _logging_configured = True

    logger.remove()

    if level is None:
        level = os.getenv("NGREFLECTOR_LOG_LEVEL", DEFAULT_LEVEL).upper()
    if suppress_console is None:
        suppress_console = _env_flag("NGREFLECTOR_MACHINE_MODE")
    if enable_file_logging is None:
        enable_file_logging = _env_flag("NGREFLECTOR_FILE_LOGGING")

    if not suppress_console:
        # DEBUG output from other libraries is noise next to resolver decisions.
        logger.add(
            sys.stderr,
            level=level,
            format=CONSOLE_FORMAT,
            filter=_only_ngreflector if level == VERBOSE_LEVEL else None,
            colorize=True,
        )

    if enable_file_logging:
        log_dir = Path(os.getenv("NGREFLECTOR_LOG_DIR", ".ngreflector/logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "ngreflector.log",
            level=VERBOSE_LEVEL,
            rotation="10 MB",
            retention="1 day",
            compression="gz",
            catch=True,
        )


def enable_verbose():
    """Switch console logging to resolver DEBUG output."""
    setup_logging(level=VERBOSE_LEVEL, suppress_console=False, force=True)


setup_logging()
