from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple, Optional
from sceneplay.models.enums import LogLevel, LogCategory


def _ansi(code: int) -> str:
    return f"\033[{code}m"


RESET = _ansi(0)
DIM = _ansi(2)
PLAIN = _ansi(37)


class LevelStyle(NamedTuple):
    rank: int
    symbol: str
    color: str


LEVEL_STYLES: Dict[LogLevel, LevelStyle] = {
    LogLevel.DEBUG: LevelStyle(0, '·', DIM),
    LogLevel.INFO: LevelStyle(1, '✓', _ansi(32)),
    LogLevel.WARN: LevelStyle(2, '⚠', _ansi(33)),
    LogLevel.ERROR: LevelStyle(3, '✗', _ansi(31)),
}

CATEGORY_COLORS: Dict[LogCategory, str] = {
    LogCategory.CONFIG: _ansi(36),
    LogCategory.SCENE: _ansi(92),
    LogCategory.ANIMATION: _ansi(93),
    LogCategory.RENDER: _ansi(35),
    LogCategory.PATH: _ansi(95),
    LogCategory.PLAYBACK: _ansi(96),
    LogCategory.FRAME_LOOP: _ansi(94),
    LogCategory.EVENT: _ansi(95),
    LogCategory.SESSION: _ansi(97),
}

CATEGORY_WIDTH = max(len(c.name) for c in LogCategory) + 1


@dataclass(frozen=True)
class LogRecord:
    """One emitted log line, as handed to sinks"""
    timestamp: datetime
    level: LogLevel
    category: LogCategory
    message: str
    details: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "category": self.category.name,
            "message": self.message,
            "details": list(self.details),
        }


LogSink = Callable[[LogRecord], None]


def format_detail(key: str, value: Any) -> str:
    """key: value; exceptions render as 'Type: message'"""
    if isinstance(value, BaseException):
        value = f"{type(value).__name__}: {value}"
    return f"{key}: {value}"


class Logger:
    """
    Console logger: one header line per message, tree-style detail lines.

        [14:23:45] PLAYBACK   ✓ Scene loaded
                   ├─ scene: solar_system
                   └─ layers: 6

    Records that pass min_level are also handed to every registered sink
    (add_sink); transports use that to forward logs to a client.
    """

    DETAIL_INDENT = " " * 11

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
        """
        Args:
            min_level: Records below this level are dropped
            use_colors: Wrap output in ANSI codes (turn off when piping to a file)
        """
        self.min_level = min_level
        self.use_colors = use_colors
        self._sinks: List[LogSink] = []

    def enabled_for(self, level: LogLevel) -> bool:
        return LEVEL_STYLES[level].rank >= LEVEL_STYLES[self.min_level].rank

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{RESET}" if self.use_colors else text

    def add_sink(self, sink: LogSink) -> None:
        self._sinks.append(sink)

    def remove_sink(self, sink: LogSink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    def _format_line(self, record: LogRecord) -> str:
        style = LEVEL_STYLES[record.level]
        category = record.category.name.ljust(CATEGORY_WIDTH)
        return " ".join((
            record.timestamp.strftime('[%H:%M:%S]'),
            self._paint(category, CATEGORY_COLORS.get(record.category, PLAIN)),
            self._paint(style.symbol, style.color),
            self._paint(record.message, style.color),
        ))

    def _format_details(self, details: List[str]) -> List[str]:
        last = len(details) - 1
        return [
            f"{self.DETAIL_INDENT}{self._paint('└─' if i == last else '├─', DIM)} {d}"
            for i, d in enumerate(details)
        ]

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        **kwargs
    ):
        """
        Emit one record.

        Extra keyword arguments become "key: value" detail lines after any
        preformatted `details` strings:

            logger.log(LogCategory.PATH, "Skipped path command", command="C", layer="wave")

            [14:23:45] PATH       ✓ Skipped path command
                       ├─ command: C
                       └─ layer: wave
        """
        if not self.enabled_for(level):
            return

        lines = list(details or [])
        lines.extend(format_detail(k, v) for k, v in kwargs.items())
        record = LogRecord(datetime.now(), level, category, message, lines)

        print(self._format_line(record))
        for line in self._format_details(lines):
            print(line)

        for sink in list(self._sinks):
            sink(record)

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        """Logger with `category` pre-filled."""
        return BoundLogger(self, category)


class BoundLogger:
    """Category-bound view of a Logger; pass category= to log elsewhere once."""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category)


# === Shared instance ===
_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    """Returns a logger bound to a specific category"""
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """
    Configure the shared logger in place.

    Bound loggers created at import time keep a reference to the shared
    instance, so replacing it would silently detach them (and its sinks).
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
