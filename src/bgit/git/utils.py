"""Git utilities for bgit."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any

from pygit2 import GitError as Pygit2GitError
from pygit2 import Repository, discover_repository

logger = logging.getLogger(__name__)


class GitError(Exception):
	"""Base exception for Git-related errors."""


class RepositoryNotFoundError(GitError):
	"""Raised when no usable repository can be opened."""


class BranchNotFoundError(GitError):
	"""Raised when the target branch cannot be resolved."""


class PathConflictError(GitError):
	"""Raised when a path segment has the wrong kind of entry in the base tree."""


class ConcurrentBranchMoveError(GitError):
	"""Raised when the branch reference changed between resolution and update."""

	def __init__(self, branch: str, expected: str | None, actual: str | None) -> None:
		"""Store the branch name and the reference values that disagreed."""
		self.branch = branch
		self.expected = expected
		self.actual = actual
		msg = (
			f"Branch '{branch}' moved concurrently: expected {expected or '<absent>'}, "
			f"found {actual or '<absent>'}. Nothing was updated; re-run to retry."
		)
		super().__init__(msg)


class ObjectStoreError(GitError):
	"""Raised when reading or writing objects or references fails."""


class PushError(GitError):
	"""Raised when pushing an already-created commit fails.

	The commit stays in place; ``result`` carries it when the pipeline raised this.
	"""

	result: Any = None


class IdentityError(GitError):
	"""Raised when no author identity is configured."""


class PathOutsideRepositoryError(GitError):
	"""Raised when the file to commit is not inside the work tree."""


def run_git_command(command: list[str], cwd: Path | None = None) -> str:
	"""Run a Git command and return its output.

	Args:
		command: Git command to run
		cwd: Working directory (optional)

	Returns:
		Command output as string

	Raises:
		GitError: If the command fails or git is not installed
	"""
	try:
		result = subprocess.run(  # noqa: S603
			command,
			cwd=cwd,
			capture_output=True,
			text=True,
			check=True,
		)
	except subprocess.CalledProcessError as e:
		error_msg = f"Git command failed: {' '.join(command)}\nError: {e.stderr.strip()}"
		logger.debug(error_msg)
		raise GitError(error_msg) from e
	except FileNotFoundError as e:
		msg = f"Could not run '{command[0]}': executable not found"
		raise GitError(msg) from e
	else:
		return result.stdout


class RepoContext:
	"""Opened repository handle plus the paths bgit needs from it."""

	@staticmethod
	def discover(path: Path | None = None) -> Path:
		"""Find the git directory containing ``path``, searching upward.

		Raises:
			RepositoryNotFoundError: If no repository encloses the path
		"""
		start = path or Path.cwd()
		git_dir = discover_repository(str(start))
		if git_dir is None:
			msg = f"Not a git repository (or any parent up to /): {start}"
			logger.error(msg)
			raise RepositoryNotFoundError(msg)
		return Path(git_dir)

	def __init__(self, path: Path | None = None, *, discover: bool | None = None) -> None:
		"""Open the repository.

		Args:
			path: Repository to open. When omitted, the current directory is
				used as the starting point for upward discovery.
			discover: Force discovery even when ``path`` is given.
		"""
		should_discover = path is None if discover is None else discover
		target = self.discover(path) if should_discover else path
		try:
			self.repo = Repository(str(target))
		except (Pygit2GitError, KeyError) as e:
			msg = f"Could not open git repository at {target}: {e}"
			logger.exception(msg)
			raise RepositoryNotFoundError(msg) from e

		if self.repo.is_bare or self.repo.workdir is None:
			msg = f"Bare repositories are not supported: {self.repo.path}"
			raise RepositoryNotFoundError(msg)

		self.workdir = Path(self.repo.workdir)
		logger.debug("Opened repository %s (workdir %s)", self.repo.path, self.workdir)
