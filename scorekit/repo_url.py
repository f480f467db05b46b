"""Parsing and validation of repository URLs."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlsplit

from scorekit.checks import ScorecardError


class UnsupportedHostError(ValueError):
    """The repository's host is not supported."""


class InvalidGitHubURLError(ValueError):
    """The GitHub repository URL is not in the proper form."""


class InvalidURLError(ValueError):
    """A full repository URL was not given."""


@dataclass
class RepoURL:
    """A repository identified by host, owner and name."""

    host: str = ""
    owner: str = ""
    repo: str = ""
    metadata: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, s: str) -> RepoURL:
        """Parse 'owner/repo', 'host/owner/repo' or a full URL; the scheme defaults to https."""
        parts = s.split("/")
        if len(parts) == 2:
            target = f"github.com/{parts[0]}/{parts[1]}"
        elif len(parts) >= 3:
            target = s
        else:
            target = ""
        if "://" not in target:
            target = "https://" + target

        try:
            parsed = urlsplit(target)
            parsed.port  # validates the port
        except ValueError as exc:
            raise ScorecardError(f"url parse: {exc}") from exc

        pieces = parsed.path.strip("/").split("/", 1)
        if len(pieces) != 2:
            raise InvalidURLError(f"{s}. Expected full repository url")

        host = parsed.netloc.rpartition("@")[2]
        return cls(host=host, owner=pieces[0], repo=pieces[1])

    def url(self) -> str:
        """Return the URL without scheme: host/owner/repo."""
        return f"{self.host}/{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.host}-{self.owner}-{self.repo}"

    def validate_github(self) -> None:
        """Raise unless this names a repository on github.com."""
        if self.host != "github.com":
            raise UnsupportedHostError(self.host)
        if not self.owner.strip() or not self.repo.strip():
            raise InvalidGitHubURLError(f"{self.url()}. Expected the full repository url")