# src/ciuupi/progress.py
"""
Progress observers for the long-running optimization pipeline.

The pipeline never prints; it calls `observer.notify(event, **fields)` and
lets the observer decide. `LoggingObserver` is the default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

LOG = logging.getLogger("ciuupi.progress")

_WARN_EVENTS = frozenset({"knots.not_converged"})


class ProgressObserver(Protocol):
    def notify(self, event: str, **fields: Any) -> None: ...


class NullObserver:
    def notify(self, event: str, **fields: Any) -> None:
        return None


@dataclass
class LoggingObserver:
    logger: logging.Logger = LOG
    level: int = logging.INFO

    def notify(self, event: str, **fields: Any) -> None:
        level = logging.WARNING if event in _WARN_EVENTS else self.level
        if not self.logger.isEnabledFor(level):
            return
        detail = " ".join(f"{k}={_fmt(v)}" for k, v in fields.items())
        self.logger.log(level, "%s %s", event, detail)


@dataclass
class RecordingObserver:
    """Keeps every event in memory; handy in tests and notebooks."""

    events: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def notify(self, event: str, **fields: Any) -> None:
        self.events.append((event, dict(fields)))

    def names(self) -> List[str]:
        return [e for e, _ in self.events]


def _fmt(v: Any) -> str:
    if isinstance(v, float):
        return f"{v:.6g}"
    return str(v)


def resolve_observer(observer: Optional[ProgressObserver]) -> ProgressObserver:
    return LoggingObserver() if observer is None else observer


__all__ = [
    "LoggingObserver",
    "NullObserver",
    "ProgressObserver",
    "RecordingObserver",
    "resolve_observer",
]
