"""Commit a single working-tree file onto a branch without checking it out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pygit2 import GitError as Pygit2GitError
from pygit2 import Signature

from bgit.config import AppConfigSchema
from bgit.git.branch_resolver import local_branch_exists, resolve_branch
from bgit.git.commit_writer import default_message, write_commit
from bgit.git.remote import fetch_remote, push_branch
from bgit.git.tree_rebuilder import split_path, upsert_blob
from bgit.git.utils import IdentityError, ObjectStoreError, PushError
from bgit.utils.path_utils import read_file_snapshot, repo_relative_path

if TYPE_CHECKING:
	from pathlib import Path

	from pygit2 import Oid, Repository

	from bgit.git.utils import RepoContext

logger = logging.getLogger(__name__)


@dataclass
class BranchCommitResult:
	"""What a successful run produced."""

	branch: str
	path: str
	commit_id: Oid
	parent_id: Oid | None
	tree_id: Oid
	tree_unchanged: bool
	seeded_from: str | None = None
	pushed: bool = False
	warnings: list[str] = field(default_factory=list)


def resolve_identity(repo: Repository, config: AppConfigSchema) -> Signature:
	"""
	Build the author/committer signature.

	Configured ``identity.name`` / ``identity.email`` win; otherwise git's
	``user.name`` / ``user.email`` are used (repository, global and system
	levels, as git itself reads them).

	Raises:
		IdentityError: If a name or email is missing
	"""
	git_config = repo.config

	def _lookup(key: str, override: str | None) -> str | None:
		if override:
			return override
		try:
			return git_config[key]
		except KeyError:
			return None

	name = _lookup("user.name", config.identity.name)
	email = _lookup("user.email", config.identity.email)
	if not name or not email:
		msg = (
			"No author identity configured. Set git's user.name and user.email, "
			"or identity.name and identity.email in .bgit.yml"
		)
		raise IdentityError(msg)
	return Signature(name, email)


class BranchCommitCommand:
	"""Runs resolve, rebuild and write for one file, then optionally pushes."""

	def __init__(self, repo_context: RepoContext, config: AppConfigSchema | None = None) -> None:
		"""
		Initialize the command.

		Args:
			repo_context: Opened repository
			config: Application configuration, defaults when omitted
		"""
		self.repo_context = repo_context
		self.repo = repo_context.repo
		self.config = config or AppConfigSchema()

	def _write_blob(self, data: bytes) -> Oid:
		try:
			return self.repo.create_blob(data)
		except Pygit2GitError as e:
			msg = f"Failed to write blob: {e}"
			logger.exception(msg)
			raise ObjectStoreError(msg) from e

	def run(
		self,
		path: Path,
		branch: str,
		message: str | None = None,
		*,
		track_remote: bool = False,
		create_from_head: bool = False,
		orphan: bool = False,
		push: bool = False,
		cwd: Path | None = None,
	) -> BranchCommitResult:
		"""
		Commit ``path`` to ``branch``.

		Nothing outside the object store and the branch reference is written.
		HEAD, the index and the rest of the work tree are not read or changed.

		Args:
			path: File to commit, relative to ``cwd`` or absolute
			branch: Target branch name
			message: Commit message, ``Update <path>`` style default if None
			track_remote: Seed a missing branch from the remote-tracking ref
			create_from_head: Seed a missing branch from HEAD
			orphan: Start a missing branch with no parent
			push: Push the branch after committing
			cwd: Directory relative paths are taken from

		Returns:
			BranchCommitResult for the new commit

		Raises:
			GitError: One of its subclasses for each failure kind; PushError only
				after the commit and branch update have been made
		"""
		workdir = self.repo_context.workdir
		rel_path = repo_relative_path(path, workdir, cwd)
		segments = split_path(rel_path)
		snapshot = read_file_snapshot(workdir / rel_path)

		warnings = []
		remote = self.config.remote.name
		should_fetch = track_remote and self.config.remote.fetch_before_track
		if should_fetch and not local_branch_exists(self.repo, branch) and not fetch_remote(workdir, remote):
			warnings.append(f"Could not fetch from '{remote}'; using the remote-tracking refs already present")

		resolution = resolve_branch(
			self.repo,
			branch,
			track_remote=track_remote,
			remote=remote,
			create_from_head=create_from_head,
			orphan=orphan,
		)

		blob_id = self._write_blob(snapshot.data)
		tree_id = upsert_blob(self.repo, resolution.base_tree_id, segments, blob_id, snapshot.filemode)
		tree_unchanged = tree_id == resolution.base_tree_id
		if tree_unchanged:
			logger.info("%s is unchanged on %s; committing an identical tree", rel_path, branch)

		signature = resolve_identity(self.repo, self.config)
		final_message = message or default_message(str(rel_path), self.config.commit.message_template)
		commit_id = write_commit(self.repo, resolution, tree_id, signature, signature, final_message)

		result = BranchCommitResult(
			branch=branch,
			path=str(rel_path),
			commit_id=commit_id,
			parent_id=resolution.parent_id,
			tree_id=tree_id,
			tree_unchanged=tree_unchanged,
			seeded_from=resolution.seeded_from,
			warnings=warnings,
		)

		if push:
			try:
				push_branch(workdir, branch, remote)
			except PushError as e:
				e.result = result
				raise
			result.pushed = True
		return result
