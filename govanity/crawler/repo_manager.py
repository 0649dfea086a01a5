"""Repository cloning."""

import logging
import subprocess
from pathlib import Path

from ..errors import CloneError

logger = logging.getLogger(__name__)


class RepoManager:
    """Makes shallow working copies of remote repositories."""

    def __init__(
        self,
        depth: int = 1,
        git_binary: str = "git",
        timeout: int = 300,
    ):
        self.depth = depth
        self.git_binary = git_binary
        self.timeout = timeout

    def build_command(self, url: str, dest: Path) -> list[str]:
        cmd = [self.git_binary, "clone"]
        if self.depth > 0:
            cmd.append(f"--depth={self.depth}")
        cmd.extend([url, str(dest)])
        return cmd

    def clone(self, url: str, dest: Path) -> None:
        """Clone ``url`` into ``dest``, which must be empty or missing."""
        cmd = self.build_command(url, dest)
        logger.debug("Running %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise CloneError(f"{self.git_binary} not found") from e
        except subprocess.TimeoutExpired as e:
            raise CloneError(f"clone of {url} timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise CloneError(
                f"clone of {url} failed with status {result.returncode}",
                stderr=result.stderr,
            )
