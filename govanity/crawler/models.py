"""Shared data models for repository crawlers."""

from dataclasses import dataclass


@dataclass
class RepoRef:
    """A repository to scan for vanity packages."""
    clone_url: str
    full_name: str | None = None
    explicit: bool = False

    @property
    def label(self) -> str:
        return self.full_name or self.clone_url
