"""Scorecard run results and their text and JSON renderings."""

from __future__ import annotations

import itertools
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TextIO

from scorekit.checks import (
    INCONCLUSIVE_RESULT_SCORE,
    MAX_RESULT_SCORE,
    MIN_RESULT_SCORE,
    CheckResult,
    LogLevel,
    ScorecardError,
    detail_to_string,
    details_to_string,
)

_RISK_WEIGHTS = {"Critical": 10.0, "High": 7.5, "Medium": 5.0, "Low": 2.5}


@dataclass
class RepoInfo:
    """The repository that was analysed."""

    name: str = ""
    commit_sha: str = ""


@dataclass
class ScorecardInfo:
    """The scorecard build that produced a result."""

    version: str = ""
    commit_sha: str = ""


@dataclass
class CheckDoc:
    """Documentation of one check."""

    name: str
    risk: str
    short: str = ""
    description: str = ""
    url: str = ""
    tags: list[str] = field(default_factory=list)
    remediation: list[str] = field(default_factory=list)

    def documentation_url(self, commit: str) -> str:
        """Return the check's documentation URL; a '{commit}' placeholder is filled in."""
        return self.url.replace("{commit}", commit)


def score_to_string(score: float) -> str:
    """Render a score with one decimal, or '?' when inconclusive."""
    if score == INCONCLUSIVE_RESULT_SCORE:
        return "?"
    return f"{score:.1f}"


def _lookup_doc(check_docs: Mapping[str, CheckDoc], name: str) -> CheckDoc:
    try:
        return check_docs[name]
    except KeyError:
        raise ScorecardError(f"GetCheck: {name}: check not found") from None


# --- compact JSON encoding with HTML-safe escaping ----------------------------

@dataclass(frozen=True)
class _OneDecimal:
    """A number always written with exactly one decimal place."""

    value: float


_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _quote(s: str) -> str:
    parts = []
    for ch in s:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ch < " ":
            parts.append(f"\\u{ord(ch):04x}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


def _encode(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, _OneDecimal):
        return f"{value.value:.1f}"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(v) for v in value) + "]"
    if isinstance(value, dict):
        return "{" + ",".join(f"{_quote(k)}:{_encode(v)}" for k, v in value.items()) + "}"
    raise TypeError(f"cannot encode {type(value).__name__}")


def _write_json(value, writer: TextIO) -> None:
    try:
        writer.write(_encode(value) + "\n")
    except (OSError, TypeError, ValueError) as exc:
        raise ScorecardError(f"encoder.Encode: {exc}") from exc


# --- table rendering ---------------------------------------------------------

def _render_table(header: list[str], rows: list[list[str]], writer: TextIO) -> None:
    header = [h.upper() for h in header]
    split_rows = [[cell.split("\n") for cell in row] for row in [header, *rows]]
    widths = [
        max((len(line) for cell in column for line in cell), default=0)
        for column in zip(*split_rows)
    ]
    separator = "|" + "|".join("-" * (w + 2) for w in widths) + "|\n"

    def emit(cells: list[list[str]]) -> None:
        for lines in itertools.zip_longest(*cells, fillvalue=""):
            writer.write(
                "| " + " | ".join(line.ljust(w) for line, w in zip(lines, widths)) + " |\n"
            )
        writer.write(separator)

    writer.write(separator)
    for cells in split_rows:
        emit(cells)


@dataclass
class ScorecardResult:
    """The outcome of a scorecard run on one repository."""

    repo: RepoInfo = field(default_factory=RepoInfo)
    date: datetime = field(default_factory=datetime.now)
    scorecard: ScorecardInfo = field(default_factory=ScorecardInfo)
    checks: list[CheckResult] = field(default_factory=list)
    metadata: list[str] | None = None

    def get_aggregate_score(self, check_docs: Mapping[str, CheckDoc]) -> float:
        """Return the risk-weighted mean of conclusive check scores, or the inconclusive score."""
        total = 0.0
        score = 0.0
        for check in self.checks:
            doc = _lookup_doc(check_docs, check.name)
            weight = _RISK_WEIGHTS.get(doc.risk)
            if weight is None:
                raise ScorecardError(f"Invalid risk for {check.name}: '{doc.risk}'")
            if check.score < MIN_RESULT_SCORE:
                continue
            total += weight
            score += weight * check.score
        if total == 0:
            return float(INCONCLUSIVE_RESULT_SCORE)
        return score / total

    def as_string(
        self,
        show_details: bool,
        log_level: LogLevel,
        check_docs: Mapping[str, CheckDoc],
        writer: TextIO,
    ) -> None:
        """Write the aggregate score and a table of check scores."""
        rows = []
        for check in self.checks:
            if check.score == INCONCLUSIVE_RESULT_SCORE:
                score_cell = "?"
            else:
                score_cell = f"{check.score} / {MAX_RESULT_SCORE}"
            doc = _lookup_doc(check_docs, check.name)
            doc_url = doc.documentation_url(self.scorecard.commit_sha)
            row = [score_cell, check.name, check.reason]
            if show_details:
                details, shown = details_to_string(check.details, log_level)
                row.append(details if shown else "")
            row.append(doc_url)
            rows.append(row)

        score = self.get_aggregate_score(check_docs)
        if score == INCONCLUSIVE_RESULT_SCORE:
            writer.write("Aggregate score: ?\n\n")
        else:
            writer.write(f"Aggregate score: {score_to_string(score)} / {MAX_RESULT_SCORE}\n\n")
        writer.write("Check scores:\n")

        header = ["Score", "Name", "Reason"]
        if show_details:
            header.append("Details")
        header.append("Documentation/Remediation")
        _render_table(header, rows, writer)

    def _rendered_details(self, check: CheckResult, log_level: LogLevel) -> list[str] | None:
        lines = [s for s in (detail_to_string(d, log_level) for d in check.details) if s]
        return lines or None

    def as_json(self, show_details: bool, log_level: LogLevel, writer: TextIO) -> None:
        """Write the result in the legacy JSON format, one line."""
        checks = []
        for check in self.checks:
            checks.append(
                {
                    "Name": check.name,
                    "Details": self._rendered_details(check, log_level) if show_details else None,
                    "Confidence": check.confidence,
                    "Pass": check.passed,
                }
            )
        out = {
            "Repo": self.repo.name,
            "Date": self.date.strftime("%Y-%m-%d"),
            "Checks": checks or None,
            "Metadata": self.metadata,
        }
        _write_json(out, writer)

    def as_json2(
        self,
        show_details: bool,
        log_level: LogLevel,
        check_docs: Mapping[str, CheckDoc],
        writer: TextIO,
    ) -> None:
        """Write the result in the version 2 JSON format, one line."""
        score = self.get_aggregate_score(check_docs)
        checks = []
        for check in self.checks:
            doc = _lookup_doc(check_docs, check.name)
            checks.append(
                {
                    "details": self._rendered_details(check, log_level) if show_details else None,
                    "score": check.score,
                    "reason": check.reason,
                    "name": check.name,
                    "documentation": {
                        "url": doc.documentation_url(self.scorecard.commit_sha),
                        "short": doc.short,
                    },
                }
            )
        out = {
            "date": self.date.strftime("%Y-%m-%d"),
            "repo": {"name": self.repo.name, "commit": self.repo.commit_sha},
            "scorecard": {
                "version": self.scorecard.version,
                "commit": self.scorecard.commit_sha,
            },
            "score": _OneDecimal(score),
            "checks": checks or None,
            "metadata": self.metadata,
        }
        _write_json(out, writer)