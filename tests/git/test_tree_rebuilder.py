"""Tests for splicing a blob into an existing tree."""

from __future__ import annotations

import pytest
from pygit2 import Tree
from pygit2.enums import FileMode

from bgit.git.tree_rebuilder import describe_mode, split_path, upsert_blob
from bgit.git.utils import PathConflictError
from tests.base import GitTestBase, build_tree, tree_entry_id


@pytest.mark.unit
class TestSplitPath:
	"""Test cases for turning relative paths into tree segments."""

	def test_nested_path(self) -> None:
		"""Test a nested path splits on slashes."""
		assert split_path("src/ui/login.rs") == ("src", "ui", "login.rs")

	def test_single_file(self) -> None:
		"""Test a top level file is one segment."""
		assert split_path("README.md") == ("README.md",)

	def test_backslash_is_not_a_separator(self) -> None:
		"""Test a backslash stays inside its segment."""
		assert split_path("a\\b.txt") == ("a\\b.txt",)
		assert split_path("docs/a\\b.txt") == ("docs", "a\\b.txt")

	@pytest.mark.parametrize("bad", ["", "a//b", "../x", "./x", ".git/config", "src/.git/x"])
	def test_rejects_non_plain_paths(self, bad: str) -> None:
		"""Test empty, relative and .git segments are refused."""
		with pytest.raises(PathConflictError):
			split_path(bad)

	def test_describe_mode(self) -> None:
		"""Test entry modes have readable names."""
		assert describe_mode(FileMode.TREE) == "directory"
		assert describe_mode(FileMode.LINK) == "symlink"
		assert describe_mode(0o100600) == "entry with mode 100600"


@pytest.mark.git
class TestUpsertBlob(GitTestBase):
	"""Test cases for rebuilding trees along one path."""

	def test_replaces_file_and_keeps_siblings(self) -> None:
		"""Test only the trees on the path change; siblings keep their ids."""
		base = build_tree(
			self.repo,
			{
				"README.md": b"# readme\n",
				"src": {"ui.rs": b"old", "lib.rs": b"lib", "net": {"http.rs": b"http"}},
				"docs": {"index.md": b"docs"},
			},
		)
		blob = self.repo.create_blob(b"fn main(){}")

		new_root = upsert_blob(self.repo, base, ("src", "ui.rs"), blob)

		assert new_root != base
		assert tree_entry_id(self.repo, new_root, "src/ui.rs") == blob
		for untouched in ("README.md", "docs", "src/lib.rs", "src/net"):
			assert tree_entry_id(self.repo, new_root, untouched) == tree_entry_id(self.repo, base, untouched)
		assert tree_entry_id(self.repo, new_root, "src") != tree_entry_id(self.repo, base, "src")

	def test_identical_content_reproduces_base_tree(self) -> None:
		"""Test re-inserting the same blob yields the same tree id."""
		base = build_tree(self.repo, {"a": {"b": {"c.txt": b"same"}}, "z.txt": b"z"})
		blob = self.repo.create_blob(b"same")

		assert upsert_blob(self.repo, base, ("a", "b", "c.txt"), blob) == base

	def test_mode_change_alone_changes_tree(self) -> None:
		"""Test the same content with an executable mode is a different tree."""
		base = build_tree(self.repo, {"run.sh": b"#!/bin/sh\n"})
		blob = self.repo.create_blob(b"#!/bin/sh\n")

		new_root = upsert_blob(self.repo, base, ("run.sh",), blob, FileMode.BLOB_EXECUTABLE)

		assert new_root != base
		assert self.repo[new_root].peel(Tree)["run.sh"].filemode == FileMode.BLOB_EXECUTABLE

	def test_creates_missing_directories(self) -> None:
		"""Test a path under a missing directory creates it with a single entry."""
		base = build_tree(self.repo, {"README.md": b"r", "src": {"main.rs": b"m"}})
		blob = self.repo.create_blob(b"feature")

		new_root = upsert_blob(self.repo, base, ("new", "feature.rs"), blob)

		root = self.repo[new_root].peel(Tree)
		assert sorted(entry.name for entry in root) == ["README.md", "new", "src"]
		new_dir = self.repo[root["new"].id].peel(Tree)
		assert [entry.name for entry in new_dir] == ["feature.rs"]
		assert root["README.md"].id == tree_entry_id(self.repo, base, "README.md")
		assert root["src"].id == tree_entry_id(self.repo, base, "src")

	def test_no_base_tree(self) -> None:
		"""Test a missing base tree is treated as empty."""
		blob = self.repo.create_blob(b"first")

		new_root = upsert_blob(self.repo, None, ("deep", "er", "file.txt"), blob)

		root = self.repo[new_root].peel(Tree)
		assert [entry.name for entry in root] == ["deep"]
		assert tree_entry_id(self.repo, new_root, "deep/er/file.txt") == blob

	def test_entry_order_is_canonical(self) -> None:
		"""Test an inserted name ends up where git sorts it, not at the end."""
		base = build_tree(self.repo, {"a.txt": b"a", "c.txt": b"c"})
		blob = self.repo.create_blob(b"b")

		new_root = upsert_blob(self.repo, base, ("b.txt",), blob)

		expected = build_tree(self.repo, {"c.txt": b"c", "b.txt": b"b", "a.txt": b"a"})
		assert new_root == expected
		assert [entry.name for entry in self.repo[new_root].peel(Tree)] == ["a.txt", "b.txt", "c.txt"]

	def test_file_where_directory_expected(self) -> None:
		"""Test a blob in place of an intermediate directory is a conflict."""
		base = build_tree(self.repo, {"src": b"i am a file"})
		blob = self.repo.create_blob(b"x")

		with pytest.raises(PathConflictError, match="expected a directory"):
			upsert_blob(self.repo, base, ("src", "ui.rs"), blob)

	def test_symlink_where_directory_expected(self) -> None:
		"""Test a symlink in place of an intermediate directory is a conflict."""
		builder = self.repo.TreeBuilder()
		builder.insert("src", self.repo.create_blob(b"elsewhere"), FileMode.LINK)
		base = builder.write()

		with pytest.raises(PathConflictError, match="symlink"):
			upsert_blob(self.repo, base, ("src", "ui.rs"), self.repo.create_blob(b"x"))

	def test_directory_where_file_expected(self) -> None:
		"""Test a directory at the file's own path is a conflict."""
		base = build_tree(self.repo, {"src": {"ui.rs": b"x"}})

		with pytest.raises(PathConflictError, match="expected a file"):
			upsert_blob(self.repo, base, ("src",), self.repo.create_blob(b"x"))

	def test_rejects_empty_segments(self) -> None:
		"""Test empty and invalid segment lists are refused before any write."""
		blob = self.repo.create_blob(b"x")
		with pytest.raises(PathConflictError):
			upsert_blob(self.repo, None, (), blob)
		with pytest.raises(PathConflictError):
			upsert_blob(self.repo, None, ("a/b",), blob)
