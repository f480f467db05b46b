# scorekit

scorekit holds the results of security scorecard checks run on a source
repository and turns them into reports. It does four things:

- It reads a policy file that sets, for each check, whether the check is
  enforced and the minimum score it must reach.
- It computes a risk-weighted aggregate score.
- It writes the results as a text table, as JSON, or as SARIF 2.1.0.
- It records the details that checks log, which helps when testing checks.

## Installation

```
pip install scorekit
```

## Modules

### `scorekit.checks`

This module has the building blocks:

- `CheckResult` holds a check's name, score, reason, details, error, pass
  flag and confidence.
- `CheckDetail` pairs a `DetailType` (`INFO`, `WARN`, `DEBUG`) with a
  `LogMessage`.
- `LogMessage` holds text, path, `FileType`, offset, snippet and version.
- `LogLevel` controls rendering. Debug details are rendered only at
  `LogLevel.DEBUG`.

It also has these functions and names:

- `detail_to_string(detail, log_level)` renders one detail as a line such as
  `Warn: message`. For messages with `version == 3` that have a path, it
  appends the path and, if the offset is not zero, `:offset`.
- `details_to_string(details, log_level)` joins the rendered lines and
  returns a flag that tells whether any line was produced.
- `type_to_string` and `text_to_markdown` are helpers.
- `ScorecardError` is the error raised for internal failures.

### `scorekit.repo_url`

- `RepoURL.parse(s)` accepts `owner/repo`, `host/owner/repo` or a full URL.
  A missing scheme defaults to https, and a bare `owner/repo` means
  github.com. If the path does not hold both an owner and a repository, it
  raises `InvalidURLError`.
- `RepoURL.url()` returns `host/owner/repo`.
- `str()` of a `RepoURL` gives `host-owner-repo`.
- `RepoURL.validate_github()` raises `UnsupportedHostError` for any host
  other than github.com. It raises `InvalidGitHubURLError` if the owner or
  repository is blank.

### `scorekit.policy`

`parse_from_yaml(content, known_checks)` reads a policy document into a
`ScorecardPolicy`:

- The result has a version and a mapping from check name to `CheckPolicy`.
- A `CheckPolicy` has a `score` from 0 to 10 and a `CheckMode` (`ENFORCED` or
  `DISABLED`).

It raises `ScorecardError` in any of these cases:

- the YAML is malformed;
- the version is not 1;
- a check name is not in `known_checks`;
- a mode is unknown;
- a score is out of range;
- a key is repeated.

### `scorekit.result`

`CheckDoc` describes a check: its risk (`Critical`, `High`, `Medium` or
`Low`), short and long descriptions, documentation URL, tags and
remediation. `documentation_url(commit)` fills a `{commit}` placeholder in
the URL.

`ScorecardResult` holds the repository info, the date, the scorecard build
info, the check results and the metadata. Its methods:

- `get_aggregate_score(check_docs)`
  - Returns the risk-weighted mean of the conclusive scores.
  - The weights are Critical 10, High 7.5, Medium 5 and Low 2.5.
  - Returns -1 when no score is conclusive.
- `as_string(show_details, log_level, check_docs, writer)`
  - Writes the aggregate score, then a bordered table of check scores.
- `as_json(show_details, log_level, writer)` and
  `as_json2(show_details, log_level, check_docs, writer)`
  - Each writes a single line of JSON in the legacy format and the version 2
    format respectively.
  - `<`, `>` and `&` are escaped as `\u003c`, `\u003e` and `\u0026`.

`score_to_string(score)` renders a score with one decimal, or `?` when the
score is inconclusive.

### `scorekit.sarif`

`as_sarif(result, show_details, log_level, writer, check_docs, policy, policy_file)`
writes a SARIF 2.1.0 document, indented by three spaces:

- Only the enforced checks that score below their policy minimum appear.
- Each such check gets a rule. It also gets a result for each warning detail
  that has a file location.
- A check with no such detail gets one result that points at line 1 of
  `policy_file`.
- Every check in the result must have an entry in the policy. Otherwise
  `ScorecardError` is raised.

### `scorekit.detail_logger`

- `RecordingDetailLogger` keeps every detail logged through `info`, `warn`,
  `debug`, `info3`, `warn3` and `debug3`.
- `summarize(result, logger)` counts the details by type into an
  `ExpectedReturn`.
- `validate_test_return`, `validate_log_message` and
  `validate_log_message_offsets` compare recorded details with expectations.

### `scorekit.version`

This module gives build and runtime information:

- `tag_version`, `semantic_version`, `commit`, `tree_state` and `build_date`
  return `unknown` unless build information is stamped in.
- `python_version`, `os_name`, `arch` and `compiler` describe the running
  interpreter.

## Example

```python
import io
from datetime import datetime

from scorekit.checks import CheckResult, LogLevel
from scorekit.policy import parse_from_yaml
from scorekit.result import CheckDoc, RepoInfo, ScorecardResult
from scorekit.sarif import as_sarif

docs = {
    "Vulnerabilities": CheckDoc(
        name="Vulnerabilities",
        risk="High",
        short="Known vulnerabilities",
        description="Checks for open vulnerabilities.",
        remediation=["Fix the vulnerabilities."],
    )
}
policy = parse_from_yaml(
    b"version: 1\npolicies:\n  Vulnerabilities:\n    mode: enforced\n    score: 8\n",
    known_checks=docs,
)
result = ScorecardResult(
    repo=RepoInfo(name="github.com/owner/repo"),
    date=datetime(2021, 8, 25),
    checks=[CheckResult(name="Vulnerabilities", score=7, reason="one open issue")],
)

print(result.get_aggregate_score(docs))  # 7.0

out = io.StringIO()
result.as_json2(True, LogLevel.INFO, docs, out)
as_sarif(result, True, LogLevel.INFO, io.StringIO(), docs, policy, "policy.yml")
```

## What scorekit does not do

scorekit does not have these:

- It does not fetch repositories.
- It does not run the checks themselves.
- It ships no command-line program.

Check results have to be built by the caller and handed to `ScorecardResult`.
The check documentation has to be supplied too, as a mapping of names to
`CheckDoc`.