"""A detail logger that records messages, and helpers for checking them in tests."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from scorekit.checks import CheckDetail, CheckResult, DetailType, LogMessage

_log = logging.getLogger(__name__)


@dataclass
class ExpectedReturn:
    """Expected outcome of a check: its score, error and detail counts."""

    error: BaseException | type[BaseException] | None = None
    score: int = 0
    number_of_warn: int = 0
    number_of_info: int = 0
    number_of_debug: int = 0


@dataclass
class RecordingDetailLogger:
    """Keeps every detail it is given, in order."""

    messages: list[CheckDetail] = field(default_factory=list)

    def _record(self, detail_type: DetailType, desc: str, args: tuple) -> None:
        text = desc % args if args else desc
        self.messages.append(CheckDetail(detail_type, LogMessage(text=text)))

    def _record3(self, detail_type: DetailType, msg: LogMessage) -> None:
        self.messages.append(CheckDetail(detail_type, dataclasses.replace(msg, version=3)))

    def info(self, desc: str, *args) -> None:
        self._record(DetailType.INFO, desc, args)

    def warn(self, desc: str, *args) -> None:
        self._record(DetailType.WARN, desc, args)

    def debug(self, desc: str, *args) -> None:
        self._record(DetailType.DEBUG, desc, args)

    def info3(self, msg: LogMessage) -> None:
        self._record3(DetailType.INFO, msg)

    def warn3(self, msg: LogMessage) -> None:
        self._record3(DetailType.WARN, msg)

    def debug3(self, msg: LogMessage) -> None:
        self._record3(DetailType.DEBUG, msg)


def summarize(result: CheckResult, logger: RecordingDetailLogger) -> ExpectedReturn:
    """Count the logger's details by type and pair them with the result's score and error."""
    counts = {DetailType.INFO: 0, DetailType.WARN: 0, DetailType.DEBUG: 0}
    for detail in logger.messages:
        if detail.type not in counts:
            raise ValueError(f"invalid type {detail.type!r}")
        counts[detail.type] += 1
    return ExpectedReturn(
        error=result.error,
        score=result.score,
        number_of_warn=counts[DetailType.WARN],
        number_of_info=counts[DetailType.INFO],
        number_of_debug=counts[DetailType.DEBUG],
    )


def _error_class(err):
    return err if isinstance(err, type) else type(err)


def _errors_match(a, b) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if a is b:
        return True
    ca, cb = _error_class(a), _error_class(b)
    return issubclass(ca, cb) or issubclass(cb, ca)


def validate_test_return(
    expected: ExpectedReturn, result: CheckResult, logger: RecordingDetailLogger
) -> bool:
    """Tell whether the result and recorded details match what was expected."""
    actual = summarize(result, logger)
    same = (
        _errors_match(actual.error, expected.error)
        and actual.score == expected.score
        and actual.number_of_warn == expected.number_of_warn
        and actual.number_of_info == expected.number_of_info
        and actual.number_of_debug == expected.number_of_debug
    )
    if not same:
        _log.info("actual %r, expected %r", actual, expected)
    return same


def validate_log_message(
    predicate: Callable[[LogMessage, DetailType], bool], logger: RecordingDetailLogger
) -> bool:
    """Tell whether at least one recorded message satisfies the predicate."""
    return any(predicate(d.msg, d.type) for d in logger.messages)


def validate_log_message_offsets(logger: RecordingDetailLogger, offsets: Sequence[int]) -> bool:
    """Tell whether the recorded messages carry exactly these offsets, in order."""
    if len(logger.messages) != len(offsets):
        return False
    for detail, expected in zip(logger.messages, offsets):
        if detail.msg.offset != expected:
            _log.info("offset %d, expected %d", detail.msg.offset, expected)
            return False
    return True