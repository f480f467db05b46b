"""Build and runtime version information."""

from __future__ import annotations

import platform

# Fallback values used when no build information was stamped in.
_GIT_VERSION = "unknown"
_GIT_COMMIT = "unknown"
_GIT_TREE_STATE = "unknown"
_BUILD_DATE = "unknown"


def tag_version() -> str:
    """Return the release tag, such as vX.Y.Z."""
    return _GIT_VERSION


def semantic_version() -> str:
    """Return the semantic version X.Y.Z, without a leading 'v'."""
    tv = tag_version()
    return tv[1:] if tv.startswith("v") else tv


def commit() -> str:
    """Return the commit hash the package was built from."""
    return _GIT_COMMIT


def tree_state() -> str:
    """Return the git tree state, 'clean' or 'dirty'."""
    return _GIT_TREE_STATE


def build_date() -> str:
    """Return the build date in ISO 8601 format."""
    return _BUILD_DATE


def python_version() -> str:
    """Return the version of the running Python interpreter."""
    return platform.python_version()


def os_name() -> str:
    """Return the operating system name in lower case."""
    return platform.system().lower()


def arch() -> str:
    """Return the machine architecture."""
    return platform.machine()


def compiler() -> str:
    """Return the Python implementation in use."""
    return platform.python_implementation().lower()