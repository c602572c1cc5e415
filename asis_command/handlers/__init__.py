"""
Action handler registration.

Each handler module exposes register_handlers() to add its functions
to the router registry.
"""

import logging

logger = logging.getLogger("asis-command.handlers")


def register_all_handlers() -> None:
    """Import all handler modules and register their functions."""
    from . import attendance

    attendance.register_handlers()
    logger.info("All command handlers registered")
