"""Unit tests for the mergedeps command line interface."""

from typing import Any

import pytest
import typer
from pytest import MonkeyPatch
from typer.testing import CliRunner

from mergedeps.configuration import cli
from mergedeps.configuration.models import GitHubAuthenticationType, MergeDependenciesConfig
from mergedeps.pipeline.exceptions import EnumerationError
from mergedeps.pipeline.models import MergeAction, MergeDecision, MergeDependenciesResult, UpgradeIdentity
from tests.unit.fakes import make_pull_request, make_repository

runner = CliRunner()

AUTH_ENV_VARS = [
    "GITHUB_TOKEN",
    "GITHUB_PAT_TOKEN",
    "GITHUB_APP_ID",
    "GITHUB_APP_PRIVATE_KEY_PATH",
    "GITHUB_APP_INSTALLATION_ID",
    "MERGEDEPS_DRY_RUN",
    "MERGEDEPS_MERGE_COMMAND",
    "DEBUG",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: MonkeyPatch) -> None:
    """Make sure credentials from the developer's environment do not leak into tests."""
    for name in AUTH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_decision(number: int, action: MergeAction) -> MergeDecision:
    pull_request = make_pull_request(make_repository("api"), number, "Bump left-pad from 1.0.0 to 1.0.1")
    return MergeDecision(pull_request=pull_request, identity=UpgradeIdentity(package="left-pad", version="1.0.1"), action=action)


def test_format_decision() -> None:
    """Test the MERGE and SKIP progress line layout."""
    assert cli.format_decision(make_decision(1, MergeAction.MERGE)) == (
        "    MERGE acme/api#1                      Bump left-pad from 1.0.0 to 1.0.1"
    )
    assert cli.format_decision(make_decision(2, MergeAction.SKIP)) == (
        "    SKIP  acme/api#2                      Bump left-pad from 1.0.0 to 1.0.1"
    )


def test_missing_org_argument() -> None:
    """Test that the organization argument is required."""
    result = runner.invoke(cli.typer_app, [])

    assert result.exit_code == 2


def test_missing_credentials(monkeypatch: MonkeyPatch) -> None:
    """Test that running without a token prints a configuration error and exits non-zero."""
    result = runner.invoke(cli.typer_app, ["acme"])

    assert result.exit_code == 1
    assert "No GitHub authentication configuration provided" in result.output


def test_run_prints_progress(monkeypatch: MonkeyPatch) -> None:
    """Test that decisions are printed as they are made and the token is read from GITHUB_TOKEN."""
    seen_configs: list[MergeDependenciesConfig] = []

    async def fake_workflow(config: MergeDependenciesConfig, on_decision: Any = None, on_drained: Any = None, **kwargs: Any) -> MergeDependenciesResult:
        seen_configs.append(config)
        decisions = [make_decision(1, MergeAction.MERGE), make_decision(2, MergeAction.SKIP)]
        for decision in decisions:
            on_decision(decision)
        on_drained()
        return MergeDependenciesResult(decisions=decisions, verdicts={"left-pad@1.0.1": True}, merges_triggered=1)

    monkeypatch.setattr(cli, "run_merge_dependencies_workflow", fake_workflow)

    result = runner.invoke(cli.typer_app, ["acme", "--merge-command", "@dependabot squash and merge"], env={"GITHUB_TOKEN": "ghp_test"})

    assert result.exit_code == 0, result.output
    assert "    MERGE acme/api#1" in result.output
    assert "    SKIP  acme/api#2" in result.output
    assert "..." in result.output
    config = seen_configs[0]
    assert config.org == "acme"
    assert config.github_authentication_type == GitHubAuthenticationType.PAT
    assert config.github_pat_token == "ghp_test"
    assert config.merge_command == "@dependabot squash and merge"
    assert config.dry_run is False


def test_run_failure_exits_non_zero(monkeypatch: MonkeyPatch) -> None:
    """Test that a fatal pipeline error is printed and the exit code is 1."""

    async def failing_workflow(config: MergeDependenciesConfig, **kwargs: Any) -> MergeDependenciesResult:
        raise EnumerationError("repositories of organization acme", RuntimeError("Bad credentials"))

    monkeypatch.setattr(cli, "run_merge_dependencies_workflow", failing_workflow)

    result = runner.invoke(cli.typer_app, ["acme"], env={"GITHUB_PAT_TOKEN": "ghp_test"})

    assert result.exit_code == 1
    assert "Failed to list repositories of organization acme: Bad credentials" in result.output


def test_aborted_prompt_exits_non_zero(monkeypatch: MonkeyPatch) -> None:
    """Test that closing stdin at the prompt prints 'Aborted!' instead of an empty error."""

    async def aborted_workflow(config: MergeDependenciesConfig, **kwargs: Any) -> MergeDependenciesResult:
        raise typer.Abort()

    monkeypatch.setattr(cli, "run_merge_dependencies_workflow", aborted_workflow)

    result = runner.invoke(cli.typer_app, ["acme"], env={"GITHUB_TOKEN": "ghp_test"})

    assert result.exit_code == 1
    assert result.output.strip().splitlines()[-1] == "Aborted!"


def test_dry_run_is_announced(monkeypatch: MonkeyPatch) -> None:
    """Test that dry runs are announced before any decision is made."""

    async def fake_workflow(config: MergeDependenciesConfig, **kwargs: Any) -> MergeDependenciesResult:
        assert config.dry_run is True
        return MergeDependenciesResult()

    monkeypatch.setattr(cli, "run_merge_dependencies_workflow", fake_workflow)

    result = runner.invoke(cli.typer_app, ["acme", "--dry-run"], env={"GITHUB_TOKEN": "ghp_test"})

    assert result.exit_code == 0, result.output
    assert "Dry run enabled" in result.output


def test_invalid_buffer_size(monkeypatch: MonkeyPatch) -> None:
    """Test that an unusable buffer size is rejected before contacting GitHub."""
    result = runner.invoke(cli.typer_app, ["acme", "--buffer-size", "0"], env={"GITHUB_TOKEN": "ghp_test"})

    assert result.exit_code == 1
    assert "buffer_size" in result.output
