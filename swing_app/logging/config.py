"""
Structured logging for the swing signal engine.

All modules log through structlog. Scoring and gating code take their
loggers from here so every vote and every gate check is emitted as a
structured event that can be filtered by ``component``.
"""
import logging
import sys
from typing import Any, Optional, TextIO

import structlog
from structlog.types import FilteringBoundLogger, Processor


def _shared_processors(timestamps: bool, caller: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    if caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.MODULE,
                        structlog.processors.CallsiteParameter.LINENO]
        ))
    return processors


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    timestamps: bool = True,
    caller: bool = False,
    extra_processors: Optional[list[Processor]] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Route structlog through the stdlib root logger.

    Args:
        level: Minimum level name (DEBUG shows every gate check and vote)
        json_output: Render one JSON object per line instead of console text
        timestamps: Add a UTC ISO timestamp
        caller: Add module and line number
        extra_processors: Inserted before the renderer
        stream: Output stream, stdout by default
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=stream or sys.stdout,
        format="%(message)s",
        force=True,
    )

    processors = _shared_processors(timestamps, caller)
    processors.extend(extra_processors or [])
    if json_output:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream is None and sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    return structlog.get_logger(name)


def get_gating_logger(name: str) -> FilteringBoundLogger:
    """Logger for quality-gate checks; events carry ``component="gating"``."""
    return structlog.get_logger(name, component="gating")


def get_scoring_logger(name: str) -> FilteringBoundLogger:
    """Logger for composite-score votes; events carry ``component="scoring"``."""
    return structlog.get_logger(name, component="scoring")


def log_gate_decision(
    logger: FilteringBoundLogger,
    gate_name: str,
    passed: bool,
    symbol: str,
    strategy_id: str,
    reason: str,
    context: Optional[dict[str, Any]] = None,
) -> None:
    """
    Emit one ``gate_check`` event.

    Passing checks log at debug, failing ones at info, so a default INFO
    configuration shows why setups were rejected without the noise of every
    passing check.
    """
    emit = logger.debug if passed else logger.info
    emit(
        "gate_check",
        gate=gate_name,
        outcome="pass" if passed else "fail",
        symbol=symbol,
        strategy_id=strategy_id,
        reason=reason,
        **(context or {}),
    )
