"""Find vanity-prefixed packages in remote repositories."""

import logging
import tempfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..crawler.models import RepoRef
from ..crawler.repo_manager import RepoManager
from ..errors import GovanityError, PackageListError
from .models import PackageListing, VanityImport
from .packages import GoListLister, PackageLister

logger = logging.getLogger(__name__)

console = Console()


@dataclass
class ExtractionResult:
    """Outcome of scanning one repository."""
    repo: RepoRef
    imports: list[VanityImport] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def path_depth(source_dir: Path, root: Path) -> int:
    """Number of directory levels ``source_dir`` sits below ``root``.

    Both paths must already be symlink-resolved.
    """
    if source_dir == root:
        return 0
    try:
        rel = source_dir.relative_to(root)
    except ValueError:
        raise PackageListError(f"package directory {source_dir} is outside {root}")
    return len(rel.as_posix().split("/"))


class VanityExtractor:
    """Clones repositories and collects packages matching a prefix."""

    def __init__(
        self,
        repo_manager: RepoManager | None = None,
        lister: PackageLister | None = None,
    ):
        self.repo_manager = repo_manager or RepoManager()
        self.lister = lister or GoListLister()

    def extract(self, repo: RepoRef, prefix: str) -> list[VanityImport]:
        """Return the packages in ``repo`` whose import comment starts with ``prefix``.

        The working copy lives in a private temporary directory that is
        removed on every exit path.
        """
        with tempfile.TemporaryDirectory(prefix="govanity") as tmp:
            # go list reports resolved directories; compare against the same form.
            root = Path(tmp).resolve()

            self.repo_manager.clone(repo.clone_url, root)
            listings = self.lister.list_packages(root)

            return [
                self._to_import(listing, repo, root)
                for listing in listings
                if listing.import_path.startswith(prefix)
            ]

    def _to_import(self, listing: PackageListing, repo: RepoRef, root: Path) -> VanityImport:
        try:
            source_dir = Path(listing.source_dir).resolve(strict=True)
        except OSError as e:
            raise PackageListError(f"cannot resolve {listing.source_dir}: {e}") from e

        depth = path_depth(source_dir, root)
        logger.debug("%s at depth %d in %s", listing.import_path, depth, repo.label)
        return VanityImport(
            import_path=listing.import_path,
            repo_url=repo.clone_url,
            path_depth=depth,
        )

    def extract_one(self, repo: RepoRef, prefix: str) -> ExtractionResult:
        """Like ``extract`` but records failures instead of raising them."""
        console.print(f"Pulling {repo.clone_url}")
        try:
            imports = self.extract(repo, prefix)
        except (GovanityError, OSError) as e:
            logger.debug("Extraction failed for %s", repo.label, exc_info=True)
            return ExtractionResult(repo=repo, error=str(e))
        return ExtractionResult(repo=repo, imports=imports)

    def extract_all(
        self,
        repos: list[RepoRef],
        prefix: str,
        workers: int = 1,
    ) -> list[ExtractionResult]:
        """Scan every repository; one failure never stops the others.

        With ``workers > 1`` repositories are scanned on a thread pool.
        Results are returned in input order either way.
        """
        if workers <= 1:
            results = []
            for repo in repos:
                result = self.extract_one(repo, prefix)
                self._report(result)
                results.append(result)
            return results

        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda r: self.extract_one(r, prefix), repos))
        for result in results:
            self._report(result)
        return results

    def _report(self, result: ExtractionResult) -> None:
        if not result.success:
            console.print(f"  [red]✗[/red] {result.repo.label}: {escape(result.error)}")
            return
        for imp in result.imports:
            console.print(escape(f"Found match: {imp.import_path} -> {imp.repo_url}"))
        console.print(f"Found {len(result.imports)} matching packages.")


def collect_imports(results: list[ExtractionResult]) -> list[VanityImport]:
    """Flatten successful results into a single list of imports."""
    imports = []
    for result in results:
        imports.extend(result.imports)
    return imports
