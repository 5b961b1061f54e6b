"""Write the new commit and advance the branch reference with compare-and-swap."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pygit2 import AlreadyExistsError
from pygit2 import GitError as Pygit2GitError

from bgit.git.utils import ConcurrentBranchMoveError, ObjectStoreError

if TYPE_CHECKING:
	from pygit2 import Oid, Reference, Repository, Signature

	from bgit.git.branch_resolver import BranchResolution

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_TEMPLATE = "Update {path}"


def default_message(rel_path: str, template: str = DEFAULT_MESSAGE_TEMPLATE) -> str:
	"""Build the commit message used when none is given."""
	return template.format(path=rel_path)


def _hex(oid: Oid | None) -> str | None:
	return str(oid) if oid is not None else None


def _summary(message: str) -> str:
	lines = message.strip().splitlines()
	return lines[0] if lines else ""


def _current_target(repo: Repository, ref_name: str) -> tuple[Reference | None, Oid | None]:
	"""Read a branch reference fresh from disk."""
	try:
		reference = repo.references.get(ref_name)
		if reference is None:
			return None, None
		reference = reference.resolve()
	except (Pygit2GitError, KeyError) as e:
		msg = f"Could not read reference '{ref_name}': {e}"
		logger.exception(msg)
		raise ObjectStoreError(msg) from e
	return reference, reference.target


def _seed_branch(repo: Repository, resolution: BranchResolution) -> None:
	"""Create the local branch at its seed commit."""
	seed_id = resolution.seed_id
	try:
		repo.create_reference(
			resolution.ref_name,
			seed_id,
			force=False,
			message=f"branch: Created from {resolution.seeded_from}",
		)
	except AlreadyExistsError:
		_, actual = _current_target(repo, resolution.ref_name)
		if actual != seed_id:
			raise ConcurrentBranchMoveError(resolution.branch, _hex(seed_id), _hex(actual)) from None
		logger.debug("Branch '%s' already created at seed %s", resolution.branch, seed_id)
		return
	except Pygit2GitError as e:
		msg = f"Failed to create branch '{resolution.branch}' at {seed_id}: {e}"
		logger.exception(msg)
		raise ObjectStoreError(msg) from e
	logger.info("Created branch '%s' at %s (from %s)", resolution.branch, seed_id, resolution.seeded_from)


def _create_commit_object(
	repo: Repository,
	tree_id: Oid,
	parents: list[Oid],
	author: Signature,
	committer: Signature,
	message: str,
) -> Oid:
	try:
		return repo.create_commit(None, author, committer, message, tree_id, parents)
	except Pygit2GitError as e:
		msg = f"Failed to write commit object for tree {tree_id}: {e}"
		logger.exception(msg)
		raise ObjectStoreError(msg) from e


def write_commit(
	repo: Repository,
	resolution: BranchResolution,
	tree_id: Oid,
	author: Signature,
	committer: Signature,
	message: str,
) -> Oid:
	"""
	Create a commit for ``tree_id`` and move the branch to it.

	The reference is only updated if it still holds ``resolution.expected_id``.
	If it does not, :class:`ConcurrentBranchMoveError` is raised and the
	reference is left as found. The commit object may already be in the object
	store at that point, but nothing refers to it.

	Args:
		repo: Repository to write into
		resolution: Result of branch resolution for the target branch
		tree_id: Root tree of the new commit
		author: Author signature
		committer: Committer signature
		message: Commit message

	Returns:
		Oid of the new commit

	Raises:
		ConcurrentBranchMoveError: If the branch moved after resolution
		ObjectStoreError: If writing the commit or the reference fails
	"""
	if resolution.seed_id is not None:
		_seed_branch(repo, resolution)

	expected = resolution.expected_id
	parents = [expected] if expected is not None else []
	commit_id = _create_commit_object(repo, tree_id, parents, author, committer, message)
	logger.debug("Wrote commit %s (tree %s, parents %s)", commit_id, tree_id, [str(p) for p in parents])

	reflog = f"bgit: {_summary(message)}"
	reference, actual = _current_target(repo, resolution.ref_name)
	if actual != expected:
		logger.error(
			"Refusing to update %s: expected %s, found %s",
			resolution.ref_name,
			_hex(expected) or "<absent>",
			_hex(actual) or "<absent>",
		)
		raise ConcurrentBranchMoveError(resolution.branch, _hex(expected), _hex(actual))

	if reference is None:
		try:
			repo.create_reference(resolution.ref_name, commit_id, force=False, message=reflog)
		except AlreadyExistsError:
			_, actual = _current_target(repo, resolution.ref_name)
			raise ConcurrentBranchMoveError(resolution.branch, None, _hex(actual)) from None
		except Pygit2GitError as e:
			msg = f"Failed to create branch '{resolution.branch}': {e}"
			logger.exception(msg)
			raise ObjectStoreError(msg) from e
	else:
		# set_target only succeeds if the ref still holds the value it was loaded with
		try:
			reference.set_target(commit_id, message=reflog)
		except Pygit2GitError as e:
			_, actual = _current_target(repo, resolution.ref_name)
			if actual != expected:
				raise ConcurrentBranchMoveError(resolution.branch, _hex(expected), _hex(actual)) from e
			msg = f"Failed to update branch '{resolution.branch}' to {commit_id}: {e}"
			logger.exception(msg)
			raise ObjectStoreError(msg) from e

	logger.info("Advanced %s from %s to %s", resolution.ref_name, _hex(expected) or "<absent>", commit_id)
	return commit_id
