"""Resolve a branch name to the commit and tree a new commit should build on."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pygit2 import Commit, InvalidSpecError
from pygit2 import GitError as Pygit2GitError

from bgit.git.utils import BranchNotFoundError, ObjectStoreError

if TYPE_CHECKING:
	from pygit2 import Oid, Repository

logger = logging.getLogger(__name__)

LOCAL_PREFIX = "refs/heads/"
REMOTE_PREFIX = "refs/remotes/"


@dataclass(frozen=True)
class BranchResolution:
	"""
	Outcome of resolving a target branch.

	``expected_id`` is the value the branch reference must still hold when the
	commit writer updates it; ``None`` means the reference must still be absent.
	``seed_id`` is set when the local branch does not exist yet and has to be
	created at that commit before the new commit is written.
	"""

	branch: str
	ref_name: str
	parent_id: Oid | None
	base_tree_id: Oid | None
	seed_id: Oid | None = None
	seeded_from: str | None = None

	@property
	def expected_id(self) -> Oid | None:
		"""Reference value the update is conditioned on."""
		return self.parent_id


def branch_ref_name(branch: str) -> str:
	"""Return the full local reference name for a branch."""
	return f"{LOCAL_PREFIX}{branch}"


def _lookup_direct(repo: Repository, ref_name: str) -> Oid | None:
	"""Return the commit a reference ultimately points to, or None if it does not exist."""
	try:
		reference = repo.references.get(ref_name)
	except InvalidSpecError as e:
		msg = f"Invalid reference name '{ref_name}': {e}"
		raise BranchNotFoundError(msg) from e
	if reference is None:
		return None
	try:
		return reference.resolve().target
	except (Pygit2GitError, KeyError) as e:
		msg = f"Reference '{ref_name}' could not be resolved: {e}"
		logger.exception(msg)
		raise ObjectStoreError(msg) from e


def local_branch_exists(repo: Repository, branch: str) -> bool:
	"""Whether ``refs/heads/<branch>`` exists."""
	return _lookup_direct(repo, branch_ref_name(branch)) is not None


def _commit_and_tree(repo: Repository, commit_id: Oid, source: str) -> tuple[Oid, Oid]:
	"""Load a commit and return ``(commit_id, tree_id)``."""
	try:
		commit = repo[commit_id].peel(Commit)
	except (Pygit2GitError, KeyError, ValueError) as e:
		msg = f"{source} points to {commit_id}, which is not a readable commit: {e}"
		logger.exception(msg)
		raise ObjectStoreError(msg) from e
	return commit.id, commit.tree_id


def resolve_branch(
	repo: Repository,
	branch: str,
	*,
	track_remote: bool = False,
	remote: str = "origin",
	create_from_head: bool = False,
	orphan: bool = False,
) -> BranchResolution:
	"""
	Resolve ``branch`` to its tip commit and tree.

	Resolution never writes to the repository. The order of attempts is the
	local branch, then ``<remote>/<branch>`` when ``track_remote`` is set,
	then HEAD when ``create_from_head`` is set, then an empty root commit when
	``orphan`` is set.

	Args:
		repo: Opened repository
		branch: Short branch name such as ``feature/foo``
		track_remote: Seed a missing local branch from its remote-tracking ref
		remote: Remote name used for seeding
		create_from_head: Seed a missing branch from the commit HEAD points to
		orphan: Start a missing branch with no parent commit

	Returns:
		BranchResolution describing the parent commit and base tree

	Raises:
		BranchNotFoundError: If the branch cannot be resolved by any allowed route
		ObjectStoreError: If a reference points at something unreadable
	"""
	if not branch or branch.startswith(("refs/", "-")):
		msg = f"Invalid branch name: '{branch}'"
		raise BranchNotFoundError(msg)

	ref_name = branch_ref_name(branch)

	local_id = _lookup_direct(repo, ref_name)
	if local_id is not None:
		commit_id, tree_id = _commit_and_tree(repo, local_id, ref_name)
		logger.debug("Branch '%s' found locally at %s", branch, commit_id)
		return BranchResolution(branch=branch, ref_name=ref_name, parent_id=commit_id, base_tree_id=tree_id)

	if track_remote:
		remote_ref = f"{REMOTE_PREFIX}{remote}/{branch}"
		remote_id = _lookup_direct(repo, remote_ref)
		if remote_id is not None:
			commit_id, tree_id = _commit_and_tree(repo, remote_id, remote_ref)
			logger.info("Seeding branch '%s' from %s/%s at %s", branch, remote, branch, commit_id)
			return BranchResolution(
				branch=branch,
				ref_name=ref_name,
				parent_id=commit_id,
				base_tree_id=tree_id,
				seed_id=commit_id,
				seeded_from=f"{remote}/{branch}",
			)
		logger.debug("Remote-tracking reference %s not found", remote_ref)

	if create_from_head:
		if repo.head_is_unborn:
			msg = f"Branch '{branch}' not found and HEAD has no commits to start it from"
			raise BranchNotFoundError(msg)
		commit_id, tree_id = _commit_and_tree(repo, repo.head.target, "HEAD")
		logger.info("Seeding branch '%s' from HEAD at %s", branch, commit_id)
		return BranchResolution(
			branch=branch,
			ref_name=ref_name,
			parent_id=commit_id,
			base_tree_id=tree_id,
			seed_id=commit_id,
			seeded_from="HEAD",
		)

	if orphan:
		logger.info("Starting branch '%s' with no parent commit", branch)
		return BranchResolution(branch=branch, ref_name=ref_name, parent_id=None, base_tree_id=None)

	where = f"locally or on {remote}" if track_remote else "locally"
	msg = f"Branch '{branch}' not found {where}"
	raise BranchNotFoundError(msg)
