"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import logging
import sys
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from mergedeps.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    InvalidConfigurationValueError,
)
from mergedeps.configuration.reconcile import reconcile_merge_dependencies_configuration
from mergedeps.pipeline.driver import run_merge_dependencies_workflow
from mergedeps.pipeline.exceptions import MergeDependenciesError
from mergedeps.pipeline.models import MergeAction, MergeDecision
from mergedeps.utils.constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_MERGE_COMMAND,
    DEFAULT_STREAM_BUFFER_SIZE,
    DEPENDABOT_USER_ID,
)

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, add_completion=False)


def configure_logging(debug: bool) -> None:
    """Send structlog output to stderr so that it does not interleave with progress lines."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def format_decision(decision: MergeDecision) -> str:
    """Format a decision as a progress line, e.g. '    MERGE acme/api#12   Bump ...'."""
    label = "MERGE" if decision.action == MergeAction.MERGE else "SKIP "
    return f"    {label} {decision.pull_request.reference:<30}  {decision.pull_request.title}"


def echo_decision(decision: MergeDecision) -> None:
    typer.echo(format_decision(decision))


def echo_drained() -> None:
    typer.echo("...")


@typer_app.command(name="mergedeps")
def merge_dependencies_cli(
    org: Annotated[str, Argument(help="GitHub organization whose Dependabot pull requests should be merged.")],
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = DEFAULT_GITHUB_API_URL,
    github_pat_token: Annotated[
        str | None, Option(envvar=["GITHUB_TOKEN", "GITHUB_PAT_TOKEN"], help="GitHub Personal Access Token.", show_default=False)
    ] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[
        int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID (looked up from the organization if omitted).")
    ] = None,
    bot_user_id: Annotated[
        int, Option(envvar="MERGEDEPS_BOT_USER_ID", help="GitHub user ID of the bot whose pull requests are considered.")
    ] = DEPENDABOT_USER_ID,
    merge_command: Annotated[
        str, Option(envvar="MERGEDEPS_MERGE_COMMAND", help="Comment posted to instruct the bot to merge a pull request.")
    ] = DEFAULT_MERGE_COMMAND,
    buffer_size: Annotated[
        int, Option(envvar="MERGEDEPS_BUFFER_SIZE", help="Discovered pull requests buffered while waiting for a decision.")
    ] = DEFAULT_STREAM_BUFFER_SIZE,
    dry_run: Annotated[bool, Option(envvar="MERGEDEPS_DRY_RUN", help="Decide on pull requests without posting merge commands.")] = False,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Approve and merge Dependabot pull requests across every repository of an organization.

    You are asked once per distinct package and target version. Approved
    upgrades are merged by commenting on each matching pull request, which
    Dependabot acts on once the pull request's checks pass.
    """
    configure_logging(debug)

    try:
        config = asyncio.run(
            reconcile_merge_dependencies_configuration(
                org=org,
                github_pat_token=github_pat_token,
                github_app_id=github_app_id,
                github_app_private_key_path=github_app_private_key_path,
                github_app_installation_id=github_app_installation_id,
                github_api_url=github_api_url,
                bot_user_id=bot_user_id,
                merge_command=merge_command,
                buffer_size=buffer_size,
                dry_run=dry_run,
                debug=debug,
            )
        )
    except (GitHubAuthenticationConfigurationUndefinedError, InvalidConfigurationValueError) as e:
        typer.echo(str(e))
        sys.exit(1)

    if config.dry_run:
        typer.echo("Dry run enabled - merge commands will not be posted")

    try:
        result = asyncio.run(
            run_merge_dependencies_workflow(
                config,
                on_decision=echo_decision,
                on_drained=echo_drained,
            )
        )
    except typer.Abort:
        typer.echo("Aborted!")
        sys.exit(1)
    except (MergeDependenciesError, RuntimeError, ValueError) as e:
        typer.echo(str(e))
        sys.exit(1)

    if debug:
        typer.echo(
            f"Decided {len(result.decisions)} pull request(s) across {len(result.verdicts)} upgrade(s): "
            f"{len(result.merged)} merged, {len(result.skipped)} skipped"
        )


def main() -> None:
    """Console script entry point."""
    typer_app()


if __name__ == "__main__":
    main()
