"""Logging setup driven by the ``[logging]`` settings section.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. An embedding application calls
:func:`configure_logging` once; records under the ``graphstore``
namespace are then rendered by structlog, as console lines or JSON.
"""

from __future__ import annotations

import logging
import sys

import structlog

from graphstore.config.models import LoggingConfig
from graphstore.config.settings import GraphStoreSettings

STORE_LOGGER = "graphstore"

# Marks the handler installed here so reconfiguring replaces it in place.
_HANDLER_NAME = "graphstore-structlog"


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _build_handler(json_logs: bool) -> logging.Handler:
    renderer: structlog.types.Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def _resolve(
    config: LoggingConfig | None, verbose: bool | None, log_json: bool | None
) -> LoggingConfig:
    if config is None and (verbose is None or log_json is None):
        config = GraphStoreSettings.load().logging
    config = config or LoggingConfig()
    updates: dict[str, bool] = {}
    if verbose is not None:
        updates["verbose"] = verbose
    if log_json is not None:
        updates["json_logs"] = log_json
    return config.model_copy(update=updates) if updates else config


def configure_logging(
    config: LoggingConfig | None = None,
    *,
    verbose: bool | None = None,
    log_json: bool | None = None,
) -> LoggingConfig:
    """Route graph store log records through structlog.

    Without *config*, the ``[logging]`` section is read from
    :class:`~graphstore.config.settings.GraphStoreSettings` (env vars and
    ``graphstore.toml``). *verbose* and *log_json* override the section.
    Calling again replaces the previous handler.

    Returns:
        The effective logging section.
    """
    effective = _resolve(config, verbose, log_json)

    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(old)
    root.addHandler(_build_handler(effective.json_logs))
    root.setLevel(logging.WARNING)

    logging.getLogger(STORE_LOGGER).setLevel(
        logging.DEBUG if effective.verbose else logging.WARNING
    )
    # Engine echo and pool chatter stay quiet even in verbose mode.
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    return effective
