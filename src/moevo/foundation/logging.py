from __future__ import annotations

import logging

_DEFAULT_FORMAT = "%(message)s"
_GENERATION_FORMAT = "[%(name)s] %(message)s"


def configure_moevo_logging(*, level: int | str = logging.INFO, verbose_names: bool = False) -> None:
    """
    Attach a console handler to the "moevo" logger.

    Opt-in only: library modules never call logging.basicConfig(). Nothing is
    attached when the root logger or the "moevo" logger already has handlers,
    so an application's own configuration always wins.

    Args:
        level: Logging level (int or level name such as "DEBUG").
        verbose_names: Prefix each record with the emitting module name.

    Raises:
        ValueError: Unknown level name, even when no handler is attached.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level!r}")
        level = resolved

    root = logging.getLogger()
    moevo_logger = logging.getLogger("moevo")

    if root.handlers or moevo_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_GENERATION_FORMAT if verbose_names else _DEFAULT_FORMAT))
    moevo_logger.addHandler(handler)
    moevo_logger.setLevel(level)
    moevo_logger.propagate = False


__all__ = ["configure_moevo_logging"]
