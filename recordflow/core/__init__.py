"""recordflow Core - Shared utilities.

Import specific functions from submodules:
    from recordflow.core.config import ConfigManager
    from recordflow.core.logging import get_logger
    from recordflow.core import constants
"""

from recordflow.core import config, constants, logging

__all__ = [
    "config",
    "constants",
    "logging",
]
