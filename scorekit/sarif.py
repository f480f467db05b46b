"""Rendering of scorecard results as SARIF 2.1.0."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import datetime
from typing import TextIO

from scorekit.checks import (
    INCONCLUSIVE_RESULT_SCORE,
    CheckDetail,
    DetailType,
    FileType,
    LogLevel,
    ScorecardError,
    text_to_markdown,
)
from scorekit.policy import CheckMode, ScorecardPolicy
from scorekit.result import CheckDoc, ScorecardResult

_SCHEMA = (
    "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/"
    "sarif-schema-2.1.0.json"
)
_INFORMATION_URI = "https://github.com/ossf/scorecard"
_SRCROOT = "%SRCROOT%"

# "over 9.0 is critical, 7.0 to 8.9 is high, 4.0 to 6.9 is medium and 3.9 or less is low".
_SEVERITY_LEVELS = {"Critical": "9.0", "High": "7.0", "Medium": "4.0", "Low": "1.0"}
_PROBLEM_SEVERITIES = {
    "Critical": "error",
    "High": "error",
    "Medium": "warning",
    "Low": "recommendation",
}
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _severity_level(risk: str) -> str:
    try:
        return _SEVERITY_LEVELS[risk]
    except KeyError:
        raise ValueError(f"invalid risk: {risk!r}") from None


def _problem_severity(risk: str) -> str:
    try:
        return _PROBLEM_SEVERITIES[risk]
    except KeyError:
        raise ValueError(f"invalid risk: {risk!r}") from None


def _text(s: str) -> dict:
    return {"text": s} if s else {}


def _rfc822z(t: datetime) -> str:
    if t.tzinfo is None or t.utcoffset() is None:
        t = t.astimezone()
    minutes = int(t.utcoffset().total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, mins = divmod(abs(minutes), 60)
    return (
        f"{t.day:02d} {_MONTHS[t.month - 1]} {t.year % 100:02d} "
        f"{t.hour:02d}:{t.minute:02d} {sign}{hours:02d}{mins:02d}"
    )


def _detail_to_region(detail: CheckDetail) -> dict:
    msg = detail.msg
    if msg.offset < 0:
        raise ValueError(f"invalid offset: {msg.offset}")
    snippet = {"snippet": _text(msg.snippet)} if msg.snippet else {}
    if msg.type in (FileType.URL, FileType.SOURCE):
        return {"startLine": max(1, msg.offset), **snippet}
    if msg.type is FileType.NONE:
        return {}
    if msg.type is FileType.TEXT:
        return {"charOffset": msg.offset, **snippet}
    if msg.type is FileType.BINARY:
        return {"byteOffset": msg.offset}
    raise ValueError(f"invalid file type: {msg.type!r}")


def _should_add_location(detail: CheckDetail, show_details: bool,
                         min_score: int, score: int) -> bool:
    if (
        not detail.msg.path
        or not show_details
        or detail.type is not DetailType.WARN
        or detail.msg.type is FileType.URL
    ):
        return False
    return score == INCONCLUSIVE_RESULT_SCORE or min_score >= score


def _details_to_locations(details: list[CheckDetail], show_details: bool,
                          min_score: int, score: int) -> list[dict]:
    if not show_details:
        return []
    return [
        {
            "physicalLocation": {
                "region": _detail_to_region(d),
                "artifactLocation": {"uri": d.msg.path, "uriBaseId": _SRCROOT},
            },
            "message": _text(d.msg.text),
        }
        for d in details
        if _should_add_location(d, show_details, min_score, score)
    ]


def _default_location(policy_file: str) -> dict:
    # GitHub needs at least one location to display a result.
    return {
        "physicalLocation": {
            "region": {"startLine": 1},
            "artifactLocation": {"uri": policy_file, "uriBaseId": _SRCROOT},
        }
    }


def _remediation_markdown(remediation: list[str]) -> str:
    if not remediation:
        raise ValueError("no remediation")
    return "\n".join(f"- {s}" for s in remediation)


def _markdown_text(long_desc: str, risk: str, remediation: list[str]) -> str:
    return text_to_markdown(
        f"**Remediation**:\n{_remediation_markdown(remediation)}\n\n"
        f"**Severity**: {risk}\n\n"
        f"**Details**:\n{long_desc}"
    )


def _rule(check_name: str, doc: CheckDoc, commit: str) -> dict:
    return {
        "id": check_name,
        "name": check_name,
        "helpUri": doc.documentation_url(commit),
        "shortDescription": _text(check_name),
        "fullDescription": _text(doc.short),
        "help": {
            "text": doc.short,
            **({"markdown": md} if (md := _markdown_text(doc.description, doc.risk,
                                                         doc.remediation)) else {}),
        },
        "defaultConfiguration": {"level": "error"},
        "properties": {
            "precision": "high",
            "problem.severity": _problem_severity(doc.risk),
            "security-severity": _severity_level(doc.risk),
            "tags": list(doc.tags) if doc.tags is not None else None,
        },
    }


def _sarif_result(pos: int, check_id: str, message: str, location: dict) -> dict:
    return {
        "ruleId": check_id,
        "ruleIndex": pos,
        "message": _text(message),
        "locations": [location],
    }


def _policy_info(policy: ScorecardPolicy, name: str) -> tuple[int, bool]:
    check_policy = policy.policies.get(name)
    if check_policy is None:
        raise ScorecardError(f"Missing policy for check: {name}")
    if check_policy.mode is CheckMode.DISABLED:
        return 0, False
    return check_policy.score, True


_ESCAPE_PAIR = re.compile(r"\\(.)", re.DOTALL)
_PAIR_REWRITES = {"b": "\\u0008", "f": "\\u000c"}
_CHAR_REWRITES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _dumps(document: dict) -> str:
    raw = json.dumps(document, indent=3, ensure_ascii=False)
    raw = _ESCAPE_PAIR.sub(lambda m: _PAIR_REWRITES.get(m.group(1), m.group(0)), raw)
    return "".join(_CHAR_REWRITES.get(ch, ch) for ch in raw) + "\n"


def as_sarif(
    result: ScorecardResult,
    show_details: bool,
    log_level: LogLevel,
    writer: TextIO,
    check_docs: Mapping[str, CheckDoc],
    policy: ScorecardPolicy,
    policy_file: str,
) -> None:
    """Write the checks that violate the policy as a SARIF 2.1.0 document."""
    commit = result.scorecard.commit_sha
    rules: list[dict] = []
    results: list[dict] = []

    for pos, check in enumerate(result.checks):
        doc = check_docs.get(check.name)
        if doc is None:
            raise ScorecardError(f"GetCheck: check not found: {check.name}")

        min_score, enabled = _policy_info(policy, check.name)
        if not enabled or check.score >= min_score:
            continue

        check_id = check.name
        rules.append(_rule(check.name, doc, commit))

        locations = _details_to_locations(check.details, show_details, min_score, check.score)
        if not locations:
            results.append(
                _sarif_result(pos, check_id, check.reason, _default_location(policy_file))
            )
        else:
            results.extend(
                _sarif_result(pos, check_id, loc["message"].get("text", ""), loc)
                for loc in locations
            )

    name = "scorecard"
    document = {
        "$schema": _SCHEMA,
        "version": "2.1.0",
        "runs": [
            {
                "automationDetails": {
                    "id": f"supply-chain/{name}/{commit}-{_rfc822z(result.date)}",
                },
                "tool": {
                    "driver": {
                        "name": name.title(),
                        "informationUri": _INFORMATION_URI,
                        "semanticVersion": result.scorecard.version,
                        "rules": rules,
                    },
                },
                "results": results,
            }
        ],
    }

    try:
        writer.write(_dumps(document))
    except (OSError, TypeError, ValueError) as exc:
        raise ScorecardError(str(exc)) from exc