"""Main entry point for govanity."""

import argparse
import logging
import sys

from rich.console import Console
from rich.markup import escape

from .config import Config, has_env_settings, resolve_config
from .crawler.github_client import GitHubClient
from .errors import ConfigError, EnumerationError
from .extractors.vanity import VanityExtractor, collect_imports
from .store.pages import PageWriter, WriteReport

console = Console()
err_console = Console(stderr=True)

EPILOG = """\
Searching usernames/organizations requires multiple GitHub API calls. Rate
limiting is likely to occur without providing an API token.

Example:

  govanity --prefix=pack.ag --search="vcabbage/go-tftp,packag" \\
      --out "$HOME/src/packag.github.io" --cname

This searches the repository vcabbage/go-tftp and all repositories in the
packag organization for Go packages with an import comment beginning with
"pack.ag" (ie, 'package tftp // import "pack.ag/tftp"'). HTML with go-import
and go-source meta tags is written to $HOME/src/packag.github.io.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="govanity",
        description="Generate static go-import pages for vanity import paths. "
                    "Options can be provided via flags or environment variables.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--prefix",
        help="vanity URL prefix to match in import comments (required) [GOVANITY_PREFIX]",
    )
    parser.add_argument(
        "--search",
        help="comma separated list of GitHub usernames/orgs/repos to search (required) [GOVANITY_SEARCH]",
    )
    parser.add_argument(
        "--out",
        help="base directory to write generated files to (required) [GOVANITY_OUT]",
    )
    parser.add_argument(
        "--cname",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="write CNAME file for GitHub Pages (default: false) [GOVANITY_CNAME]",
    )
    parser.add_argument(
        "--token",
        help="GitHub API token to avoid rate limiting (optional) [GOVANITY_GITHUB_TOKEN]",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="repositories to process at once (default: 1) [GOVANITY_WORKERS]",
    )
    parser.add_argument(
        "--config", "-c",
        help="YAML file with default settings [GOVANITY_CONFIG]",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log commands and skipped packages",
    )
    return parser


def run(
    config: Config,
    client: GitHubClient | None = None,
    extractor: VanityExtractor | None = None,
) -> WriteReport:
    """Discover repositories, extract vanity packages and write pages.

    Per-repository and per-file failures are reported and skipped;
    EnumerationError is the only error that escapes.
    """
    console.print(escape(config.summary()))

    client = client or GitHubClient(token=config.token)
    repos = client.discover_repos(config.search_list)
    console.print(f"[bold]Found {len(repos)} repositories[/bold]")

    extractor = extractor or VanityExtractor()
    results = extractor.extract_all(repos, config.prefix, workers=config.workers)
    imports = collect_imports(results)

    writer = PageWriter(config.out, config.prefix)
    report = writer.write_all(imports)
    if config.cname:
        writer.write_cname(config.prefix_host, report)

    failed = [r for r in results if not r.success]
    console.print(f"\n[bold]Done[/bold]")
    console.print(f"  Repositories: {len(results)} ({len(failed)} failed)")
    console.print(f"  Packages: {len(imports)}")
    console.print(f"  Pages written: {len(report.written)}")
    if report.failed or report.skipped:
        console.print(f"  Pages not written: {len(report.failed) + len(report.skipped)}")

    return report


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()

    argv = sys.argv[1:] if argv is None else argv
    if not argv and not has_env_settings():
        parser.print_help(sys.stderr)
        raise SystemExit(2)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = resolve_config(vars(args))
        run(config)
    except (ConfigError, EnumerationError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
