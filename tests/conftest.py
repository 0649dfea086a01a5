"""Shared test fixtures."""

import os

import pytest
from github import GithubException

from govanity.errors import CloneError
from govanity.extractors.models import PackageListing


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep GOVANITY_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("GOVANITY_"):
            monkeypatch.delenv(key)


class FakeRepo:
    """Stands in for a PyGithub Repository."""

    def __init__(self, owner, name, language=None, fork=False, languages=None, languages_error=None):
        self.owner = owner
        self.name = name
        self.language = language
        self.fork = fork
        self._languages = languages or {}
        self._languages_error = languages_error
        self.languages_calls = 0

    @property
    def svn_url(self):
        return f"https://github.com/{self.owner}/{self.name}"

    def get_languages(self):
        self.languages_calls += 1
        if self._languages_error is not None:
            raise self._languages_error
        return self._languages


class FakeUser:
    def __init__(self, repos=None, error=None):
        self._repos = repos or []
        self._error = error

    def get_repos(self):
        if self._error is not None:
            raise self._error
        return iter(self._repos)


class FakeGithub:
    """Stands in for github.Github, keyed by login."""

    def __init__(self, users):
        self.users = users
        self.requested = []

    def get_user(self, login):
        self.requested.append(login)
        if login not in self.users:
            raise GithubException(404, {"message": "Not Found"}, None)
        user = self.users[login]
        if isinstance(user, Exception):
            raise user
        return user


class FakeCloner:
    """Creates a package layout instead of running git.

    ``layouts`` maps clone URLs to ``{import_comment: relative_dir}``.
    """

    def __init__(self, layouts, failing=()):
        self.layouts = layouts
        self.failing = set(failing)
        self.cloned_into = []

    def clone(self, url, dest):
        self.cloned_into.append(dest)
        if url in self.failing:
            raise CloneError(f"clone of {url} failed with status 128", stderr="fatal: repository not found")
        for rel in self.layouts.get(url, {}).values():
            (dest / rel).mkdir(parents=True, exist_ok=True)
        (dest / ".layout").write_text(
            "\n".join(f"{imp}:{rel}" for imp, rel in self.layouts.get(url, {}).items())
        )


class FakeLister:
    """Reports the packages FakeCloner laid out, with absolute directories."""

    def list_packages(self, directory):
        listings = []
        for line in (directory / ".layout").read_text().splitlines():
            imp, _, rel = line.partition(":")
            source_dir = directory / rel if rel not in ("", ".") else directory
            listings.append(PackageListing(import_path=imp, source_dir=str(source_dir)))
        return listings


@pytest.fixture
def tftp_layouts():
    """Three repositories; the second is not reachable."""
    return {
        "https://github.com/vcabbage/go-tftp": {
            "pack.ag/tftp": ".",
            "pack.ag/tftp/netascii": "netascii",
            "": "internal/tools",
        },
        "https://github.com/packag/broken": {},
        "https://github.com/packag/amqp": {
            "pack.ag/amqp": ".",
            "pack.ag/amqp/internal/testconn": "internal/testconn",
            "github.com/other/amqp": "vendor/amqp",
        },
    }


@pytest.fixture
def fake_cloner(tftp_layouts):
    return FakeCloner(tftp_layouts, failing={"https://github.com/packag/broken"})


@pytest.fixture
def fake_lister():
    return FakeLister()


@pytest.fixture
def fake_go(tmp_path):
    """A ``go`` stand-in that reports one package in a non-UTF-8 directory."""
    script = tmp_path / "bin" / "go"
    script.parent.mkdir()
    script.write_text("#!/bin/sh\nprintf 'pack.ag/x:%s/\\377dir\\n' \"$(pwd -P)\"\n")
    script.chmod(0o755)
    return str(script)
