"""CLI entrypoint for ghlabel.

Loads a label template, fetches the repository's current labels, computes the
reconciliation plan and applies (or, with --dry-run, prints) it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from ghlabel import __version__
from ghlabel.config import GhLabelSettings
from ghlabel.github.client import GitHubLabelClient, RemoteError
from ghlabel.logging import configure_logging
from ghlabel.sync.engine import compute_plan
from ghlabel.sync.executor import execute
from ghlabel.template import TemplateError, load_template

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ACTION_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_TEMPLATE_ERROR = 3
EXIT_REMOTE_ERROR = 4

_EPILOG = """\
Example:

    ghlabel --file labels.yml --token abc123 --user rust-lang --repo rust

The file must contain a list of mappings, each with a name and a color. For
example, here is a template for a subset of the default GitHub Issues labels:

    - name: bug
      color: fc2929
    - name: duplicate
      color: cccccc
    - name: enhancement
      color: 84b6eb

By default, every label in the file will be created (or updated, if the color
changed) on GitHub if it doesn't already exist and every label on GitHub not in
the file will be deleted. Limit this behavior with the --no-create and
--no-delete flags, respectively. No output from the program indicates there
were no changes made.

The token may also be supplied via GHLABEL_GITHUB_TOKEN (environment or .env).
It requires the "repo" scope for private repositories, otherwise
"public_repo" is enough.
"""


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from e
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghlabel",
        description=(
            "Automatically creates, updates and deletes labels on GitHub Issues "
            "to match a template"
        ),
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"ghlabel {__version__}"
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        required=True,
        help="Path to a YAML file containing the label template",
    )
    parser.add_argument(
        "-t",
        "--token",
        default=None,
        help="OAuth token for authenticating with GitHub (default: GHLABEL_GITHUB_TOKEN)",
    )
    parser.add_argument(
        "-u",
        "--user",
        required=True,
        help="The name of the user or organization that owns the repository",
    )
    parser.add_argument(
        "-r",
        "--repo",
        required=True,
        help="The name of the repository to apply the label template to",
    )
    parser.add_argument(
        "-e",
        "--endpoint",
        default=None,
        help="API endpoint to use (default: GITHUB_BASE_URL or https://api.github.com)",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Print what the program would do without actually doing it",
    )
    parser.add_argument(
        "--no-create",
        action="store_true",
        help="Do not create labels missing from the repo but present in the file",
    )
    parser.add_argument(
        "--no-delete",
        action="store_true",
        help="Do not delete labels in the repo that are not in the file",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=_positive_int,
        default=1,
        help="Number of label changes to send to GitHub concurrently",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=None,
        help="Logging level for diagnostics on stderr (default: LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    for flag, value in (("--user", args.user), ("--repo", args.repo)):
        if not value.strip():
            parser.error(f"{flag} must not be empty")

    try:
        settings = GhLabelSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment / .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(args.log_level or settings.log_level)

    token = args.token or settings.github_token
    if not token.strip():
        print(
            "A GitHub token is required: pass --token or set GHLABEL_GITHUB_TOKEN",
            file=sys.stderr,
        )
        return EXIT_CONFIG_ERROR

    repository = f"{args.user.strip()}/{args.repo.strip()}"
    base_url = args.endpoint or settings.github_base_url

    try:
        desired = load_template(args.file)
    except TemplateError as e:
        logger.error("Template error", extra={"path": str(args.file)})
        print(f"Invalid label template: {e}", file=sys.stderr)
        return EXIT_TEMPLATE_ERROR

    try:
        client = GitHubLabelClient(token=token, repository=repository, base_url=base_url)
    except RemoteError as e:
        logger.error("Failed to connect", extra={"repo": repository, "status": e.status})
        print(f"Error connecting to {repository}: {e}", file=sys.stderr)
        return EXIT_REMOTE_ERROR

    try:
        try:
            actual = client.list_labels()
        except RemoteError as e:
            logger.error("Failed to list labels", extra={"repo": repository, "status": e.status})
            print(f"Error getting existing labels from the GitHub API: {e}", file=sys.stderr)
            return EXIT_REMOTE_ERROR

        plan = compute_plan(
            desired,
            actual,
            allow_create=not args.no_create,
            allow_delete=not args.no_delete,
        )
        summary = execute(
            plan,
            dry_run=args.dry_run,
            remote=client,
            out=sys.stdout,
            max_workers=args.jobs,
        )

        if not summary.ok:
            print(
                f"{len(summary.failures)} of {len(plan)} label changes failed",
                file=sys.stderr,
            )
            return EXIT_ACTION_FAILED
        return EXIT_OK

    except Exception:
        logger.exception("Label sync failed", extra={"repo": repository})
        return EXIT_ACTION_FAILED

    finally:
        client.close()


if __name__ == "__main__":
    raise SystemExit(main())
