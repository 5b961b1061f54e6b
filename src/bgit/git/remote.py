"""Remote operations, delegated to the user's git CLI so its credentials apply."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bgit.git.utils import GitError, PushError, run_git_command

if TYPE_CHECKING:
	from pathlib import Path

logger = logging.getLogger(__name__)


def fetch_remote(workdir: Path, remote: str = "origin") -> bool:
	"""
	Refresh remote-tracking references before seeding a branch from them.

	A failed fetch is not fatal: seeding then falls back to whatever
	remote-tracking refs are already present.

	Returns:
		True if the fetch succeeded
	"""
	try:
		run_git_command(["git", "-C", str(workdir), "fetch", remote])
	except GitError as e:
		logger.debug("Could not fetch from '%s', using existing remote-tracking refs: %s", remote, e)
		return False
	logger.debug("Fetched from %s", remote)
	return True


def push_branch(workdir: Path, branch: str, remote: str = "origin") -> None:
	"""
	Push ``branch`` to the same name on ``remote``.

	Args:
		workdir: Repository work tree to run git in
		branch: Local branch to push
		remote: Remote name

	Raises:
		PushError: If the push fails. The local commit is not affected.
	"""
	refspec = f"{branch}:{branch}"
	logger.info("Pushing %s to %s", refspec, remote)
	try:
		run_git_command(["git", "-C", str(workdir), "push", remote, refspec])
	except GitError as e:
		msg = f"Failed to push branch '{branch}' to '{remote}': {e}"
		logger.exception(msg)
		raise PushError(msg) from e
	logger.info("Branch '%s' pushed to remote '%s'", branch, remote)
