"""
Configuration constants for matchain
"""

import logging
import os

# Cost model constants
FLOPS_PER_MAC = 2  # a multiply-add counts as two floating point operations
STRUCTURED_KERNEL_DIVISOR = 2  # TRMM / SYMM touch half of the structured operand

# Display and formatting constants
LEVEL_SPACES = 2  # indentation per tree level in printer.walk
UNSET_CELL = "-"  # how unfilled DP table cells are rendered

# Logging
LOG_LEVEL_ENV_VAR = "MATCHAIN_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_log_level():
    name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level=None):
    logging.basicConfig(
        level=get_log_level() if level is None else level,
        format=LOG_FORMAT,
    )
