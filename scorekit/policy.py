"""Scorecard policy files: per-check minimum scores and modes."""

from __future__ import annotations

import enum
from collections.abc import Container
from dataclasses import dataclass, field

import yaml

from scorekit.checks import ScorecardError

_ALLOWED_VERSIONS = frozenset({1})


class CheckMode(enum.Enum):
    """Whether a check's policy is enforced."""

    ENFORCED = "enforced"
    DISABLED = "disabled"


@dataclass
class CheckPolicy:
    """The minimum score and mode for one check."""

    score: int = 0
    mode: CheckMode = CheckMode.ENFORCED


@dataclass
class ScorecardPolicy:
    """A parsed policy file."""

    version: int = 1
    policies: dict[str, CheckPolicy] = field(default_factory=dict)


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that rejects mappings with repeated keys."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=True)
            try:
                hash(key)
            except TypeError:
                continue
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    None, None, f"mapping key {key!r} already defined", key_node.start_mark
                )
            seen.add(key)
        return super().construct_mapping(node, deep)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_from_yaml(content: bytes | str, known_checks: Container[str]) -> ScorecardPolicy:
    """Parse a policy document, accepting only checks named in known_checks."""
    try:
        data = yaml.load(content, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ScorecardError(str(exc)) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ScorecardError("policy document must be a mapping")

    version = data.get("version")
    if version is None:
        version = 0
    if not _is_int(version):
        raise ScorecardError(f"cannot read version: {version!r}")
    if version not in _ALLOWED_VERSIONS:
        raise ScorecardError("invalid version")

    raw_policies = data.get("policies") or {}
    if not isinstance(raw_policies, dict):
        raise ScorecardError("policies must be a mapping")

    policies: dict[str, CheckPolicy] = {}
    for name, raw in raw_policies.items():
        if not isinstance(name, str) or name not in known_checks:
            raise ScorecardError(f"invalid check name: {name}")

        raw = raw or {}
        if not isinstance(raw, dict):
            raise ScorecardError(f"policy for {name} must be a mapping")

        mode = raw.get("mode")
        mode = "" if mode is None else str(mode)
        try:
            check_mode = CheckMode(mode)
        except ValueError:
            raise ScorecardError(f"invalid mode: {mode}") from None

        score = raw.get("score")
        if score is None:
            score = 0
        if not _is_int(score):
            raise ScorecardError(f"cannot read score for {name}: {score!r}")
        if not 0 <= score <= 10:
            raise ScorecardError(f"invalid score: {score}")

        if name in policies:
            raise ScorecardError(f"check has multiple definitions: {name}")
        policies[name] = CheckPolicy(score=score, mode=check_mode)

    return ScorecardPolicy(version=version, policies=policies)