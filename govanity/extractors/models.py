"""Data models produced by package extraction."""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass
class PackageListing:
    """One package as reported by a package lister."""
    import_path: str
    source_dir: str


@dataclass
class VanityImport:
    """A package whose import comment matched the vanity prefix."""
    import_path: str
    repo_url: str
    path_depth: int = 0

    def __post_init__(self):
        if self.path_depth < 0:
            raise ValueError(f"path_depth must be >= 0, got {self.path_depth}")

    @property
    def import_prefix(self) -> str:
        """Import path of the repository root, or "" if unparsable."""
        return import_prefix(self.import_path, self.path_depth)


def import_prefix(import_path: str, depth: int) -> str:
    """Strip the last ``depth`` path segments from an import path.

    A package at ``example.com/repo/sub/pkg`` living two directories below
    its repository root has the repository-level prefix ``example.com/repo``.
    Scheme and authority, if present, are preserved.

    Returns an empty string when the import path is not a valid URL
    reference. A depth larger than the number of segments is clamped, so the
    whole path is dropped rather than indexing past the start.

    Depth 0 returns ``import_path`` verbatim; other depths are re-serialised
    with ``urlunsplit``, which does not re-escape characters such as spaces.
    """
    if depth < 0:
        raise ValueError(f"depth must be >= 0, got {depth}")

    if _CONTROL_CHARS.search(import_path) or _BAD_ESCAPE.search(import_path):
        return ""
    try:
        parts = urlsplit(import_path)
    except ValueError:
        return ""

    # A scheme-less reference may not carry a colon in its first segment,
    # it would be read back as a scheme.
    if not parts.scheme and ":" in parts.path.split("/", 1)[0]:
        return ""

    if depth == 0:
        return import_path

    segments = parts.path.split("/")
    keep = max(len(segments) - depth, 0)
    return urlunsplit(parts._replace(path="/".join(segments[:keep])))
