"""Logging configuration for the spacecomm_sim package."""

import coloredlogs

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> None:
  """Install a colored handler on the root logger.

  Call once from an entry point; library modules only create loggers.

  Args:
    level: Logging level name (e.g., "INFO", "DEBUG", "WARNING").
  """
  coloredlogs.install(
    level=level.upper(),
    fmt=LOG_FORMAT,
    datefmt="%H:%M:%S",
    field_styles={**coloredlogs.DEFAULT_FIELD_STYLES, "name": {"color": "cyan"}},
  )
