#!/usr/bin/env python3
"""CLI entry point for pushing files through the GitHub content API.

Useful when git push fails behind a proxy or firewall but HTTPS calls to
the API succeed.
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from .core.auth import GitHubAuth
from .core.client import GitHubAPIError, GitHubClient
from .core.git import LocalRepository
from .core.operations import BranchError, PushOperations
from .core.report import Reporter
from .core.resolver import ConfigError, resolve_config
from .core.transport import create_session
from .models.config import PushConfig, PushOptions, PushSettings, SettingsError


EPILOG = """\
examples:
  apipush feature/my-feature
  apipush --branch main --files "src/index.py,README.md"
  apipush -r myorg/myrepo -t ghp_xxxxx
  GITHUB_TOKEN=ghp_xxx apipush --dry-run
"""


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="apipush",
        description="Push files to GitHub via the REST content API",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("branch_arg", nargs="?", metavar="branch", help="Target branch (same as --branch)")
    parser.add_argument("--branch", "-b", help="Target branch name (default: current git branch)")
    parser.add_argument("--repo", "-r", metavar="OWNER/REPO", help="Repository (default: from git remote origin)")
    parser.add_argument("--token", "-t", help="GitHub token (default: GITHUB_TOKEN env var)")
    parser.add_argument("--files", "-f", metavar="LIST", help="Comma-separated files to push (default: all tracked)")
    parser.add_argument("--message", "-m", help='Commit message prefix (default: "Update")')
    parser.add_argument("--proxy", "-p", metavar="URL", help="Proxy URL (default: HTTPS_PROXY / HTTP_PROXY env var)")
    parser.add_argument(
        "--create",
        dest="create",
        action="store_const",
        const=True,
        help="Create branch from the base branch if missing (default)",
    )
    parser.add_argument("--no-create", dest="create", action="store_false", help="Fail if branch doesn't exist")
    parser.set_defaults(create=None)
    parser.add_argument("--base", metavar="NAME", help="Branch to create a missing branch from (default: main)")
    parser.add_argument("--api-url", metavar="URL", help="API root (default: https://api.github.com)")
    parser.add_argument("--config", type=Path, metavar="PATH", help="Settings file (default: ./.apipush.yaml)")
    parser.add_argument("--dry-run", action="store_true", help="Show files without uploading")
    return parser


def options_from_args(args: argparse.Namespace) -> PushOptions:
    """Translate parsed arguments into PushOptions."""
    return PushOptions(
        branch=args.branch or args.branch_arg,
        repo=args.repo,
        token=args.token,
        files=args.files,
        message=args.message,
        proxy=args.proxy,
        create=args.create,
        base_branch=args.base,
        api_url=args.api_url,
        dry_run=args.dry_run,
    )


def run(
    config: PushConfig,
    client: GitHubClient,
    reporter: Reporter,
    base_dir: Path | None = None,
    repo_root: Path | None = None,
) -> int:
    """Ensure the branch and upload every file.

    Per-file failures are reported in the summary and do not change the
    exit status.
    """
    ops = PushOperations(config, client, reporter=reporter, base_dir=base_dir, repo_root=repo_root)

    try:
        summary = ops.push_all()
    except (BranchError, GitHubAPIError) as e:
        reporter.error(str(e))
        return 1

    reporter.summary(summary, config)
    return 0


def _push(args: argparse.Namespace, reporter: Reporter, base_dir: Path) -> int:
    repository = LocalRepository(base_dir)

    try:
        settings = PushSettings.discover(base_dir, args.config)
        config = resolve_config(options_from_args(args), dict(os.environ), repository, settings)
    except (ConfigError, SettingsError) as e:
        reporter.error(str(e))
        return 1

    reporter.header(config)

    if config.dry_run:
        reporter.dry_run(config.files)
        return 0

    session = create_session(config.proxy, warn=reporter.warning)
    client = GitHubClient(GitHubAuth(config.token, config.api_url), session)
    try:
        return run(config, client, reporter, base_dir=base_dir, repo_root=repository.top_level)
    finally:
        client.close()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    reporter = Reporter()

    base_dir = Path.cwd()
    load_dotenv(base_dir / ".env")

    try:
        return _push(args, reporter, base_dir)
    except Exception as e:
        reporter.error(str(e) or type(e).__name__)
        return 1


if __name__ == "__main__":
    sys.exit(main())
