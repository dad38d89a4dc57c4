"""CLI command modules for anki-link.

- shared.py: Common utilities (config/logger loading, console)
- sync_commands.py: sync and check commands
- vault_commands.py: add-flashcard and benchmark-notes commands
"""

from .shared import console, get_config_and_logger

__all__ = [
    "console",
    "get_config_and_logger",
]
