"""Package listers: report the import comment and directory of each package."""

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from ..errors import PackageListError
from .models import PackageListing

logger = logging.getLogger(__name__)

GO_LIST_FORMAT = "-f={{.ImportComment}}:{{.Dir}}"


class PackageLister(Protocol):
    """Anything that can enumerate the packages below a directory."""

    def list_packages(self, directory: Path) -> list[PackageListing]:
        ...


def parse_listing(output: str) -> list[PackageListing]:
    """Parse ``importComment:dir`` lines.

    Packages without an import comment produce lines starting with ``:``;
    they are kept with an empty import path and filtered later. The split is
    on the first colon only, so directories containing colons (Windows drive
    letters) survive.
    """
    listings = []
    for lineno, line in enumerate(output.splitlines(), start=1):
        if not line.strip():
            continue
        import_path, sep, source_dir = line.partition(":")
        if not sep or not source_dir:
            raise PackageListError(f"unexpected go list output on line {lineno}: {line!r}")
        listings.append(PackageListing(import_path=import_path, source_dir=source_dir))
    return listings


class GoListLister:
    """Lists packages by running ``go list`` in the working copy."""

    def __init__(self, go_binary: str = "go", timeout: int = 300):
        self.go_binary = go_binary
        self.timeout = timeout

    def list_packages(self, directory: Path) -> list[PackageListing]:
        cmd = [self.go_binary, "list", GO_LIST_FORMAT, "./..."]
        logger.debug("Running %s in %s", " ".join(cmd), directory)

        try:
            result = subprocess.run(
                cmd,
                cwd=directory,
                capture_output=True,
                text=True,
                errors="surrogateescape",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise PackageListError(f"{self.go_binary} not found") from e
        except subprocess.TimeoutExpired as e:
            raise PackageListError(f"go list timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise PackageListError(
                f"go list exited with status {result.returncode}",
                stderr=result.stderr,
            )

        return parse_listing(result.stdout)
