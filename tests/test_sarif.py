import io
import json
from datetime import datetime, timezone

import pytest

from scorekit.checks import (
    INCONCLUSIVE_RESULT_SCORE,
    MAX_RESULT_SCORE,
    MIN_RESULT_SCORE,
    CheckDetail,
    CheckResult,
    DetailType,
    FileType,
    LogLevel,
    LogMessage,
    ScorecardError,
)
from scorekit.policy import CheckMode, CheckPolicy, ScorecardPolicy
from scorekit.result import CheckDoc, RepoInfo, ScorecardInfo, ScorecardResult
from scorekit.sarif import as_sarif

REPO_COMMIT = "68bc59901773ab4c051dfcea0cc4201a1567ab32"
SCORECARD_COMMIT = "ccbc59901773ab4c051dfcea0cc4201a1567abdd"
DATE = datetime(2021, 8, 17, 18, 57, tzinfo=timezone.utc)
POLICY_FILE = "/path/to/policy.yml"


def docs():
    return {
        "Check-Name": CheckDoc(
            name="Check-Name", risk="High", short="short description",
            description="long description\n other line",
            url="https://github.com/ossf/scorecard/blob/main/docs/checks.md#check-name",
            tags=["tag1", "tag2"], remediation=["not-used1", "not-used2"],
        ),
        "Check-Name2": CheckDoc(
            name="Check-Name2", risk="Medium", short="short description 2",
            description="long description\n other line 2",
            url="https://github.com/ossf/scorecard/blob/main/docs/checks.md#check-name2",
            tags=[" tag1 ", " tag2 ", "tag3"], remediation=["not-used1", "not-used2"],
        ),
        "Check-Name3": CheckDoc(
            name="Check-Name3", risk="Low", short="short description 3",
            description="long description\n other line 3",
            url="https://github.com/ossf/scorecard/blob/main/docs/checks.md#check-name3",
            tags=[" tag1", " tag2", "tag3", "tag 4 "], remediation=["not-used1", "not-used2"],
        ),
    }


def policy(**modes):
    return ScorecardPolicy(
        version=1,
        policies={
            name.replace("_", "-"): CheckPolicy(score=score, mode=mode)
            for name, (score, mode) in modes.items()
        },
    )


def scorecard(checks):
    return ScorecardResult(
        repo=RepoInfo(name="repo not used", commit_sha=REPO_COMMIT),
        scorecard=ScorecardInfo(version="1.2.3", commit_sha=SCORECARD_COMMIT),
        date=DATE,
        checks=checks,
        metadata=[],
    )


def warn(text, path, ftype, offset=0, snippet=""):
    return CheckDetail(DetailType.WARN, LogMessage(text=text, path=path, type=ftype,
                                                   offset=offset, snippet=snippet))


def three_checks():
    return [
        CheckResult(name="Check-Name", score=MIN_RESULT_SCORE, reason="min result reason",
                    details=[warn("warn message", "bin/binary.elf", FileType.BINARY)]),
        CheckResult(name="Check-Name2", score=MIN_RESULT_SCORE, reason="min result reason",
                    details=[warn("warn message", "src/doc.txt", FileType.TEXT, 3, "some text")]),
        CheckResult(
            name="Check-Name3", score=INCONCLUSIVE_RESULT_SCORE, reason="inconclusive reason",
            details=[
                CheckDetail(DetailType.INFO, LogMessage(
                    text="info message", path="some/path.js", type=FileType.SOURCE,
                    offset=3, snippet="if (bad) {BUG();}")),
                warn("warn message", "some/path.py", FileType.SOURCE, 3, "if (bad) {BUG2();}"),
                CheckDetail(DetailType.DEBUG, LogMessage(
                    text="debug message", path="some/path.go", type=FileType.SOURCE,
                    offset=3, snippet="if (bad) {BUG5();}")),
            ],
        ),
    ]


def render(result, pol, show_details=True, level=LogLevel.DEBUG):
    out = io.StringIO()
    as_sarif(result, show_details, level, out, docs(), pol, POLICY_FILE)
    return out.getvalue()


def run_of(text):
    return json.loads(text)["runs"][0]


def test_check1_header_rule_and_location():
    result = scorecard([
        CheckResult(name="Check-Name", score=5, reason="half score reason",
                    details=[warn("warn message", "src/file1.cpp", FileType.SOURCE, 5,
                                  "if (bad) {BUG();}")]),
    ])
    pol = policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED),
                 Check_Name2=(MAX_RESULT_SCORE, CheckMode.DISABLED))
    text = render(result, pol)
    assert text.startswith('{\n   "$schema": ')
    assert text.endswith("}\n")
    doc = json.loads(text)
    assert doc["version"] == "2.1.0"
    run = doc["runs"][0]
    assert run["automationDetails"]["id"] == (
        f"supply-chain/scorecard/{SCORECARD_COMMIT}-17 Aug 21 18:57 +0000"
    )
    driver = run["tool"]["driver"]
    assert driver["name"] == "Scorecard"
    assert driver["semanticVersion"] == "1.2.3"
    assert driver["rules"] == [{
        "id": "Check-Name",
        "name": "Check-Name",
        "helpUri": "https://github.com/ossf/scorecard/blob/main/docs/checks.md#check-name",
        "shortDescription": {"text": "Check-Name"},
        "fullDescription": {"text": "short description"},
        "help": {
            "text": "short description",
            "markdown": "**Remediation**:\n\n- not-used1\n\n- not-used2\n\n\n\n"
                        "**Severity**: High\n\n\n\n**Details**:\n\nlong description\n\n other line",
        },
        "defaultConfiguration": {"level": "error"},
        "properties": {
            "precision": "high",
            "problem.severity": "error",
            "security-severity": "7.0",
            "tags": ["tag1", "tag2"],
        },
    }]
    assert run["results"] == [{
        "ruleId": "Check-Name",
        "ruleIndex": 0,
        "message": {"text": "warn message"},
        "locations": [{
            "physicalLocation": {
                "region": {"startLine": 5, "snippet": {"text": "if (bad) {BUG();}"}},
                "artifactLocation": {"uri": "src/file1.cpp", "uriBaseId": "%SRCROOT%"},
            },
            "message": {"text": "warn message"},
        }],
    }]


def test_check2_binary_offset_zero():
    result = scorecard([
        CheckResult(name="Check-Name", score=MIN_RESULT_SCORE, reason="min score reason",
                    details=[warn("warn message", "bin/binary.elf", FileType.BINARY)]),
    ])
    pol = policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED))
    loc = run_of(render(result, pol))["results"][0]["locations"][0]
    assert loc["physicalLocation"]["region"] == {"byteOffset": 0}
    assert loc["physicalLocation"]["artifactLocation"]["uri"] == "bin/binary.elf"


def test_check3_all_enforced():
    pol = policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED),
                 Check_Name2=(MAX_RESULT_SCORE, CheckMode.ENFORCED),
                 Check_Name3=(MAX_RESULT_SCORE, CheckMode.ENFORCED))
    run = run_of(render(scorecard(three_checks()), pol, level=LogLevel.INFO))
    assert [r["id"] for r in run["tool"]["driver"]["rules"]] == [
        "Check-Name", "Check-Name2", "Check-Name3"]
    props = [r["properties"] for r in run["tool"]["driver"]["rules"]]
    assert [p["problem.severity"] for p in props] == ["error", "warning", "recommendation"]
    assert [p["security-severity"] for p in props] == ["7.0", "4.0", "1.0"]
    assert props[2]["tags"] == [" tag1", " tag2", "tag3", "tag 4 "]
    results = run["results"]
    assert [r["ruleIndex"] for r in results] == [0, 1, 2]
    regions = [r["locations"][0]["physicalLocation"]["region"] for r in results]
    assert regions == [
        {"byteOffset": 0},
        {"charOffset": 3, "snippet": {"text": "some text"}},
        {"startLine": 3, "snippet": {"text": "if (bad) {BUG2();}"}},
    ]
    assert results[2]["locations"][0]["physicalLocation"]["artifactLocation"]["uri"] == (
        "some/path.py")


def test_check5_score_meets_policy_gives_empty_run():
    result = scorecard([
        CheckResult(name="Check-Name", score=6, reason="six score reason",
                    details=[warn("warn message", "src/file1.cpp", FileType.SOURCE, 5)]),
    ])
    pol = policy(Check_Name=(5, CheckMode.ENFORCED))
    text = render(result, pol, level=LogLevel.WARN)
    run = run_of(text)
    assert run["tool"]["driver"]["rules"] == []
    assert run["results"] == []
    assert '"rules": []' in text


def test_check6_url_detail_uses_default_location():
    result = scorecard([
        CheckResult(name="Check-Name", score=6, reason="six score reason",
                    details=[warn("warn message", "https://domain.com/something", FileType.URL)]),
    ])
    pol = policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED))
    results = run_of(render(result, pol, level=LogLevel.WARN))["results"]
    assert results == [{
        "ruleId": "Check-Name",
        "ruleIndex": 0,
        "message": {"text": "six score reason"},
        "locations": [{
            "physicalLocation": {
                "region": {"startLine": 1},
                "artifactLocation": {"uri": POLICY_FILE, "uriBaseId": "%SRCROOT%"},
            },
        }],
    }]


def test_check7_disabled_checks_are_skipped():
    pol = policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED),
                 Check_Name2=(MAX_RESULT_SCORE, CheckMode.DISABLED),
                 Check_Name3=(MAX_RESULT_SCORE, CheckMode.DISABLED))
    run = run_of(render(scorecard(three_checks()), pol))
    assert [r["id"] for r in run["tool"]["driver"]["rules"]] == ["Check-Name"]
    assert [r["ruleId"] for r in run["results"]] == ["Check-Name"]


def test_without_details_reason_is_used():
    result = scorecard([
        CheckResult(name="Check-Name", score=2, reason="low reason",
                    details=[warn("warn message", "src/a.c", FileType.SOURCE, 4)]),
    ])
    pol = policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED))
    res = run_of(render(result, pol, show_details=False))["results"]
    assert res[0]["message"] == {"text": "low reason"}
    assert res[0]["locations"][0]["physicalLocation"]["artifactLocation"]["uri"] == POLICY_FILE


def test_three_space_indentation():
    result = scorecard([])
    text = render(result, policy())
    lines = text.splitlines()
    assert lines[1] == '   "$schema": "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/'\
        'master/Schemata/sarif-schema-2.1.0.json",'
    assert lines[2] == '   "version": "2.1.0",'
    assert lines[3] == '   "runs": ['
    assert lines[4] == "      {"


def test_html_characters_are_escaped():
    result = scorecard([
        CheckResult(name="Check-Name", score=1, reason="a<b&c>d", details=[]),
    ])
    pol = policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED))
    text = render(result, pol)
    assert "a\\u003cb\\u0026c\\u003ed" in text
    assert run_of(text)["results"][0]["message"]["text"] == "a<b&c>d"


def test_missing_policy_raises():
    result = scorecard([CheckResult(name="Check-Name", score=1)])
    with pytest.raises(ScorecardError, match="Missing policy for check: Check-Name"):
        render(result, policy())


def test_unknown_check_doc_raises():
    result = scorecard([CheckResult(name="Unknown", score=1)])
    with pytest.raises(ScorecardError):
        render(result, policy(Unknown=(MAX_RESULT_SCORE, CheckMode.ENFORCED)))


def test_negative_offset_raises():
    result = scorecard([
        CheckResult(name="Check-Name", score=1,
                    details=[warn("warn message", "src/a.c", FileType.SOURCE, -1)]),
    ])
    with pytest.raises(ValueError):
        render(result, policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED)))


def test_invalid_risk_raises():
    check_docs = docs()
    check_docs["Check-Name"].risk = "Bogus"
    result = scorecard([CheckResult(name="Check-Name", score=1)])
    with pytest.raises(ValueError):
        as_sarif(result, True, LogLevel.DEBUG, io.StringIO(), check_docs,
                 policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED)), POLICY_FILE)


def test_empty_remediation_raises():
    check_docs = docs()
    check_docs["Check-Name"].remediation = []
    result = scorecard([CheckResult(name="Check-Name", score=1)])
    with pytest.raises(ValueError, match="no remediation"):
        as_sarif(result, True, LogLevel.DEBUG, io.StringIO(), check_docs,
                 policy(Check_Name=(MAX_RESULT_SCORE, CheckMode.ENFORCED)), POLICY_FILE)