"""Structured logging for codeswitch (structlog).

Configures structlog once at process start so every module can do::

    import structlog
    logger = structlog.get_logger()
    logger.debug("cache_hit", entries=42)

Everything is rendered to stderr: stdout is reserved for the resolved path,
which the shell wrapper captures.  The default level is ``WARNING`` so a
normal run prints nothing but its answer.

Repository paths are handled as raw ``bytes`` throughout; a processor turns
them into ``str`` (``os.fsdecode``) right before rendering so both the JSON
and the console renderer can cope with them.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping, MutableMapping
from typing import Any

import structlog


def _fsdecode_processor(
    _logger: Any,
    _method: str,
    event_dict: MutableMapping[str, Any],
) -> Mapping[str, Any]:
    """Render ``bytes`` values (and tuples/lists of them) as filesystem strings."""
    for k, v in event_dict.items():
        if isinstance(v, bytes):
            event_dict[k] = os.fsdecode(v)
        elif isinstance(v, (list, tuple)) and v and all(isinstance(x, bytes) for x in v):
            event_dict[k] = [os.fsdecode(x) for x in v]
    return event_dict


def configure_logging(*, level: str = "WARNING", json_output: bool = False) -> None:
    """Route structlog through a single stderr handler on the root logger.

    Events are rendered completely by structlog; the stdlib handler only
    prints the finished line.  Nothing else in the process logs, so there
    is no foreign-record chain to format.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            _fsdecode_processor,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level)
