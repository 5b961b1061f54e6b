"""Command for committing a file to a branch without checking it out."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
	from bgit.git.branch_commit import BranchCommitResult

logger = logging.getLogger(__name__)

# --- Command Argument Annotations ---

PathArg = Annotated[Path, typer.Argument(help="File to commit (relative to the current directory)")]

BranchOpt = Annotated[str, typer.Option("--branch", "-b", metavar="BRANCH", help="Target branch, e.g. feature/foo")]

MessageOpt = Annotated[
	str | None, typer.Option("--message", "-m", metavar="MSG", help='Commit message (defaults to "Update <path>")')
]

PushFlag = Annotated[
	bool | None, typer.Option("--push/--no-push", help="Push to the remote after committing, using your git auth")
]

TrackRemoteFlag = Annotated[
	bool | None,
	typer.Option("--track-remote/--no-track-remote", help="Start a missing local branch from origin/BRANCH"),
]

CreateFlag = Annotated[bool, typer.Option("--create", help="Start a missing branch from HEAD without asking")]

OrphanFlag = Annotated[bool, typer.Option("--orphan", help="Start a missing branch with no parent commit")]

# --- Registration Function ---


def register_command(app: typer.Typer) -> None:
	"""Register the commit command with the CLI app."""

	@app.command(name="commit")
	def commit_command(
		ctx: typer.Context,
		path: PathArg,
		branch: BranchOpt,
		message: MessageOpt = None,
		push: PushFlag = None,
		track_remote: TrackRemoteFlag = None,
		create: CreateFlag = False,
		orphan: OrphanFlag = False,
	) -> None:
		"""
		Commit a file directly to BRANCH without checking it out.

		The current branch, index and working tree are left untouched.
		"""
		_commit_command_impl(
			repo_path=ctx.meta.get("repo"),
			config_file=ctx.meta.get("config_file"),
			path=path,
			branch=branch,
			message=message,
			push=push,
			track_remote=track_remote,
			create=create,
			orphan=orphan,
		)


def _confirm_create_from_head(branch: str) -> bool:
	"""Ask whether a missing branch should be started from HEAD."""
	import questionary

	if not sys.stdin.isatty():
		return False
	return bool(questionary.confirm(f"Branch '{branch}' does not exist. Create it from HEAD?", default=True).ask())


def _print_result(result: BranchCommitResult) -> None:
	from bgit.utils.cli_utils import console, show_warning

	for warning in result.warnings:
		show_warning(warning)
	if result.seeded_from:
		console.print(f"[cyan]✨ Created branch '{result.branch}' from {result.seeded_from}[/cyan]")
	elif result.parent_id is None:
		console.print(f"[cyan]✨ Created branch '{result.branch}' with no parent[/cyan]")
	console.print(f"[green]✅ Committed {result.path} to {result.branch}[/green]", highlight=False)
	console.print(f"   commit {result.commit_id}", highlight=False)
	if result.tree_unchanged:
		console.print("   [yellow](content unchanged; the new commit has the same tree as its parent)[/yellow]")


# --- Implementation Function ---


def _commit_command_impl(
	repo_path: Path | None,
	config_file: Path | None,
	path: Path,
	branch: str,
	message: str | None,
	push: bool | None,
	track_remote: bool | None,
	create: bool,
	orphan: bool,
) -> None:
	"""Actual implementation of the commit command."""
	from bgit.config import ConfigError, ConfigLoader
	from bgit.git.branch_commit import BranchCommitCommand
	from bgit.git.utils import BranchNotFoundError, GitError, PushError, RepoContext
	from bgit.utils.cli_utils import console, exit_with_error, handle_keyboard_interrupt, loading_spinner

	try:
		repo_context = RepoContext(repo_path)
		config = ConfigLoader.get_instance(config_file, repo_root=repo_context.workdir).get

		# CLI > config > default
		should_push = config.commit.push if push is None else push
		should_track = config.commit.track_remote if track_remote is None else track_remote

		command = BranchCommitCommand(repo_context, config)
		options = {
			"message": message,
			"track_remote": should_track,
			"create_from_head": create,
			"orphan": orphan,
			"push": should_push,
		}
		try:
			with loading_spinner(f"Committing {path} to {branch}..."):
				result = command.run(path, branch, **options)
		except BranchNotFoundError:
			if create or orphan or not _confirm_create_from_head(branch):
				raise
			options["create_from_head"] = True
			with loading_spinner(f"Committing {path} to {branch}..."):
				result = command.run(path, branch, **options)

		_print_result(result)
		if result.pushed:
			console.print(f"[green]🚀 Pushed {branch} to {config.remote.name}[/green]")

	except PushError as e:
		if e.result is not None:
			_print_result(e.result)
		exit_with_error(f"The commit was created, but pushing it failed: {e}", exit_code=2)
	except (GitError, ConfigError, OSError) as e:
		logger.debug("bgit commit failed", exc_info=True)
		exit_with_error(str(e), exception=None)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
