"""GitHub API client for repository discovery."""

import logging

from github import Auth, BadCredentialsException, Github, GithubException
from requests.exceptions import RequestException
from rich.console import Console

from ..errors import EnumerationError
from .models import RepoRef

logger = logging.getLogger(__name__)

console = Console()

GITHUB_URL = "https://github.com/"


def split_search(search: list[str]) -> tuple[list[str], list[str]]:
    """Separate ``owner/repo`` references from bare owner names."""
    repos, owners = [], []
    for entry in search:
        if "/" in entry:
            repos.append(entry)
        else:
            owners.append(entry)
    return repos, owners


class GitHubClient:
    """Client for finding repositories written in a given language."""

    def __init__(
        self,
        token: str | None = None,
        language: str = "Go",
        gh: Github | None = None,
    ):
        if gh is None:
            # Every API call is attempted once; failures are reported per owner.
            auth = Auth.Token(token) if token else None
            gh = Github(auth=auth, retry=None)
        self.gh = gh
        self.language = language

    def discover_repos(self, search: list[str]) -> list[RepoRef]:
        """Resolve search entries into repositories to scan.

        Explicit ``owner/repo`` entries are always included. Owner entries
        expand to every non-fork repository of that owner that contains any
        code in the target language, except those also listed explicitly.
        """
        explicit, owners = split_search(search)

        repos: list[RepoRef] = []
        seen_urls: set[str] = set()
        listed: set[str] = set()

        for full_name in explicit:
            listed.add(full_name.lower())
            self._add(repos, seen_urls, RepoRef(
                clone_url=GITHUB_URL + full_name,
                full_name=full_name,
                explicit=True,
            ))

        for owner in owners:
            try:
                for repo in self.gh.get_user(owner).get_repos():
                    ref = self._check_repo(owner, repo, listed)
                    if ref is not None:
                        self._add(repos, seen_urls, ref)
            except BadCredentialsException as e:
                raise EnumerationError(f"GitHub rejected the API token: {e}") from e
            except (GithubException, RequestException) as e:
                console.print(f"[yellow]Warning:[/yellow] {owner}: {e}")

        return repos

    def _add(self, repos: list[RepoRef], seen_urls: set[str], ref: RepoRef) -> None:
        key = ref.clone_url.lower()
        if key in seen_urls:
            logger.debug("%s: already queued", ref.label)
            return
        seen_urls.add(key)
        repos.append(ref)

    def _check_repo(self, owner: str, repo, listed: set[str]) -> RepoRef | None:
        full_name = f"{owner}/{repo.name}"

        if full_name.lower() in listed:
            console.print(f"{full_name}: is explicitly listed")
            return None

        if repo.fork:
            console.print(f"{full_name}: is a fork")
            return None

        if repo.language != self.language and not self._has_language(full_name, repo):
            return None

        return RepoRef(clone_url=repo.svn_url, full_name=full_name)

    def _has_language(self, full_name: str, repo) -> bool:
        """Check the per-language byte breakdown of a repository."""
        try:
            languages = repo.get_languages()
        except BadCredentialsException:
            raise
        except (GithubException, RequestException) as e:
            console.print(f"[yellow]Warning:[/yellow] {full_name}: {e}")
            return False

        if self.language not in languages:
            console.print(f"{full_name}: not a {self.language} repository")
            return False
        return True
