"""Settings resolution: YAML file, then environment, then command-line flags."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlsplit

import yaml

from .errors import ConfigError

ENV_PREFIX = "GOVANITY_"

# setting name -> environment variable
ENV_VARS = {
    "prefix": "GOVANITY_PREFIX",
    "search": "GOVANITY_SEARCH",
    "out": "GOVANITY_OUT",
    "cname": "GOVANITY_CNAME",
    "token": "GOVANITY_GITHUB_TOKEN",
    "workers": "GOVANITY_WORKERS",
}
CONFIG_ENV_VAR = "GOVANITY_CONFIG"

SETTINGS = set(ENV_VARS)


@dataclass
class Config:
    """Validated run settings."""
    prefix: str
    search_list: list[str]
    out: Path
    cname: bool = False
    token: str | None = field(default=None, repr=False)
    workers: int = 1
    prefix_host: str = ""

    def summary(self) -> str:
        return (
            f"Prefix={self.prefix!r} Search List={self.search_list} Out={str(self.out)!r} "
            f"Token={self.token is not None} Write CNAME={self.cname}"
        )


def parse_bool(value: Any) -> bool:
    """Environment-style boolean: anything but empty or "0" is true."""
    if isinstance(value, bool):
        return value
    value = str(value).strip()
    return value != "" and value != "0"


def split_search(search: str | list[str] | None) -> list[str]:
    """Split a comma separated search string, dropping blank entries."""
    if search is None:
        return []
    if isinstance(search, str):
        search = search.split(",")
    entries = []
    for entry in search:
        entry = str(entry).strip()
        if entry:
            entries.append(entry)
    return entries


def prefix_host(prefix: str) -> str:
    """Authority of the vanity prefix, e.g. ``pack.ag`` for ``pack.ag/x``."""
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in prefix):
        raise ConfigError("invalid URL (prefix contains control characters)")
    try:
        parts = urlsplit("//" + prefix)
        # Accessing port validates it.
        parts.port
    except ValueError as e:
        raise ConfigError(f"invalid URL ({e})") from e
    return parts.netloc.rpartition("@")[2]


def load_config_file(path: Path | str) -> dict:
    """Load settings from a YAML file."""
    path = Path(path).expanduser()
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping of settings")

    unknown = set(data) - SETTINGS
    if unknown:
        raise ConfigError(f"{path}: unknown settings: {', '.join(sorted(unknown))}")
    return data


def env_settings(environ: Mapping[str, str] | None = None) -> dict:
    """Settings present in the environment."""
    environ = os.environ if environ is None else environ
    return {
        name: environ[var]
        for name, var in ENV_VARS.items()
        if var in environ
    }


def has_env_settings(environ: Mapping[str, str] | None = None) -> bool:
    environ = os.environ if environ is None else environ
    return any(key.startswith(ENV_PREFIX) for key in environ)


def resolve_config(
    flags: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Merge file, environment and flag settings and validate them.

    ``flags`` maps setting names to command-line values; ``None`` means the
    flag was not given. A ``config`` entry (or ``GOVANITY_CONFIG``) names a
    YAML file whose settings have the lowest precedence.
    """
    environ = os.environ if environ is None else environ

    settings: dict[str, Any] = {}
    config_path = flags.get("config") or environ.get(CONFIG_ENV_VAR)
    if config_path:
        settings.update(load_config_file(config_path))
    settings.update(env_settings(environ))
    settings.update({
        name: value for name, value in flags.items()
        if name in SETTINGS and value is not None
    })

    return build_config(settings)


def build_config(settings: Mapping[str, Any]) -> Config:
    """Validate raw settings into a Config."""
    prefix = str(settings.get("prefix") or "").strip()
    if not prefix:
        raise ConfigError("must provide vanity URL prefix")
    host = prefix_host(prefix)

    search_list = split_search(settings.get("search"))
    if not search_list:
        raise ConfigError("search list must contain at least one entry")

    out = str(settings.get("out") or "").strip()
    if not out:
        raise ConfigError("must provide output directory")

    raw_workers = settings.get("workers")
    try:
        workers = 1 if raw_workers in (None, "") else int(raw_workers)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"workers must be an integer, got {raw_workers!r}") from e
    if workers < 1:
        raise ConfigError("workers must be at least 1")

    return Config(
        prefix=prefix,
        search_list=search_list,
        out=Path(out).expanduser(),
        cname=parse_bool(settings.get("cname", False)),
        token=settings.get("token") or None,
        workers=workers,
        prefix_host=host,
    )
