"""Tests for resolving target branches."""

from __future__ import annotations

import pytest

from bgit.git.branch_resolver import branch_ref_name, local_branch_exists, resolve_branch
from bgit.git.utils import BranchNotFoundError
from tests.base import GitTestBase, make_commit


@pytest.mark.git
class TestResolveBranch(GitTestBase):
	"""Test cases for resolve_branch."""

	def test_existing_local_branch(self) -> None:
		"""Test a local branch resolves to its tip and tip tree."""
		tip = make_commit(self.repo, {"README.md": b"hi"})

		resolution = resolve_branch(self.repo, "main")

		assert resolution.ref_name == "refs/heads/main"
		assert resolution.parent_id == tip
		assert resolution.expected_id == tip
		assert resolution.base_tree_id == self.repo[tip].tree_id
		assert resolution.seed_id is None

	def test_local_branch_wins_over_remote(self) -> None:
		"""Test the remote-tracking ref is ignored when the local branch exists."""
		local = make_commit(self.repo, {"a": b"local"}, "refs/heads/feature/x")
		make_commit(self.repo, {"a": b"remote"}, "refs/remotes/origin/feature/x")

		resolution = resolve_branch(self.repo, "feature/x", track_remote=True)

		assert resolution.parent_id == local
		assert resolution.seed_id is None

	def test_seed_from_remote(self) -> None:
		"""Test a missing local branch is seeded from origin/<branch> on request."""
		remote_tip = make_commit(self.repo, {"a": b"remote"}, "refs/remotes/origin/feature/x")

		resolution = resolve_branch(self.repo, "feature/x", track_remote=True)

		assert resolution.parent_id == remote_tip
		assert resolution.seed_id == remote_tip
		assert resolution.seeded_from == "origin/feature/x"
		# resolution itself never creates the branch
		assert self.branch_target("feature/x") is None

	def test_seed_from_other_remote(self) -> None:
		"""Test the remote name is configurable."""
		remote_tip = make_commit(self.repo, {"a": b"up"}, "refs/remotes/upstream/dev")

		resolution = resolve_branch(self.repo, "dev", track_remote=True, remote="upstream")

		assert resolution.seed_id == remote_tip
		assert resolution.seeded_from == "upstream/dev"

	def test_missing_without_remote_seeding(self) -> None:
		"""Test a missing branch fails when seeding is not requested."""
		make_commit(self.repo, {"a": b"remote"}, "refs/remotes/origin/feature/x")

		with pytest.raises(BranchNotFoundError, match="not found locally$"):
			resolve_branch(self.repo, "feature/x")

	def test_missing_everywhere(self) -> None:
		"""Test the error mentions the remote when it was consulted."""
		make_commit(self.repo, {"a": b"x"})

		with pytest.raises(BranchNotFoundError, match="locally or on origin"):
			resolve_branch(self.repo, "nope", track_remote=True)

	def test_create_from_head(self) -> None:
		"""Test a missing branch can be seeded from HEAD."""
		head_tip = make_commit(self.repo, {"a": b"x"})

		resolution = resolve_branch(self.repo, "topic", create_from_head=True)

		assert resolution.seed_id == head_tip
		assert resolution.seeded_from == "HEAD"

	def test_create_from_unborn_head(self) -> None:
		"""Test seeding from HEAD fails in an empty repository."""
		with pytest.raises(BranchNotFoundError, match="HEAD has no commits"):
			resolve_branch(self.repo, "topic", create_from_head=True)

	def test_orphan(self) -> None:
		"""Test an orphan resolution has no parent and no base tree."""
		resolution = resolve_branch(self.repo, "pages", orphan=True)

		assert resolution.parent_id is None
		assert resolution.base_tree_id is None
		assert resolution.expected_id is None

	@pytest.mark.parametrize("name", ["", "refs/heads/main", "-x", "bad..name", "with space"])
	def test_invalid_names(self, name: str) -> None:
		"""Test invalid branch names are reported as not found."""
		with pytest.raises(BranchNotFoundError):
			resolve_branch(self.repo, name)

	def test_helpers(self) -> None:
		"""Test the reference name and existence helpers."""
		make_commit(self.repo, {"a": b"x"})

		assert branch_ref_name("feature/x") == "refs/heads/feature/x"
		assert local_branch_exists(self.repo, "main")
		assert not local_branch_exists(self.repo, "other")
