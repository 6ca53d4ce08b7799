# logging_utils.py
# Root logger wiring. Library modules only ever call logging.getLogger(__name__).

import logging

from rich.console import Console
from rich.logging import RichHandler

_CONFIGURED_ATTR = "_agent_actions_configured"


def configure_logging(level: int = logging.WARNING) -> None:
    """
    Install a single RichHandler on the root logger, writing to stderr.

    Calling again only adjusts the level; handlers are never duplicated.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, _CONFIGURED_ATTR, False):
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    setattr(root, _CONFIGURED_ATTR, True)
