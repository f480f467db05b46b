"""Check results, log details and their text rendering."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

MAX_RESULT_SCORE = 10
MIN_RESULT_SCORE = 0
INCONCLUSIVE_RESULT_SCORE = -1


class ScorecardError(Exception):
    """An internal error raised while computing or rendering results."""


class LogLevel(enum.IntEnum):
    """Verbosity levels used when rendering details."""

    DEBUG = -1
    INFO = 0
    WARN = 1
    ERROR = 2


class DetailType(enum.Enum):
    """Kind of a detail recorded by a check."""

    INFO = 0
    WARN = 1
    DEBUG = 2


class FileType(enum.Enum):
    """Kind of file a detail points at."""

    NONE = 0
    SOURCE = 1
    BINARY = 2
    TEXT = 3
    URL = 4


@dataclass
class LogMessage:
    """A message logged by a check, optionally tied to a file location."""

    text: str = ""
    path: str = ""
    type: FileType = FileType.NONE
    offset: int = 0
    snippet: str = ""
    version: int = 0


@dataclass
class CheckDetail:
    """A single detail of a check result."""

    type: DetailType
    msg: LogMessage = field(default_factory=LogMessage)


@dataclass
class CheckResult:
    """The outcome of running one check."""

    name: str = ""
    score: int = 0
    reason: str = ""
    details: list[CheckDetail] = field(default_factory=list)
    error: BaseException | None = None
    passed: bool = False
    confidence: int = 0


_TYPE_NAMES = {
    DetailType.INFO: "Info",
    DetailType.WARN: "Warn",
    DetailType.DEBUG: "Debug",
}


def type_to_string(detail_type: DetailType) -> str:
    """Return the display name of a detail type."""
    try:
        return _TYPE_NAMES[detail_type]
    except (KeyError, TypeError):
        raise ValueError(f"invalid detail type: {detail_type!r}") from None


def text_to_markdown(s: str) -> str:
    """Turn single line breaks into Markdown paragraph breaks."""
    return s.replace("\n", "\n\n")


def detail_to_string(detail: CheckDetail, log_level: LogLevel) -> str:
    """Render a detail as a line of text; debug details vanish unless at debug level."""
    if detail.type is DetailType.DEBUG and log_level != LogLevel.DEBUG:
        return ""
    prefix = f"{type_to_string(detail.type)}: {detail.msg.text}"
    msg = detail.msg
    if msg.version != 3 or not msg.path:
        return prefix
    if msg.offset != 0:
        return f"{prefix}: {msg.path}:{msg.offset}"
    return f"{prefix}: {msg.path}"


def details_to_string(details: list[CheckDetail], log_level: LogLevel) -> tuple[str, bool]:
    """Render details as lines; the flag tells whether any line was produced."""
    lines = [s for s in (detail_to_string(d, log_level) for d in details) if s]
    return "\n".join(lines), bool(lines)