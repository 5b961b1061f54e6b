"""Rebuild a tree so that one path points at a new blob."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from pygit2 import GitError as Pygit2GitError
from pygit2 import Tree
from pygit2.enums import FileMode

from bgit.git.utils import ObjectStoreError, PathConflictError

if TYPE_CHECKING:
	from collections.abc import Sequence

	from pygit2 import Oid, Repository

logger = logging.getLogger(__name__)

FORBIDDEN_SEGMENTS = frozenset({"", ".", "..", ".git"})

_MODE_NAMES = {
	FileMode.BLOB: "file",
	FileMode.BLOB_EXECUTABLE: "executable file",
	FileMode.LINK: "symlink",
	FileMode.TREE: "directory",
	FileMode.COMMIT: "submodule",
}

_REPLACEABLE_LEAF_MODES = frozenset({FileMode.BLOB, FileMode.BLOB_EXECUTABLE, FileMode.LINK})


def describe_mode(filemode: int) -> str:
	"""Return a human readable name for a tree entry mode."""
	return _MODE_NAMES.get(filemode, f"entry with mode {filemode:o}")


def split_path(rel_path: str | PurePosixPath) -> tuple[str, ...]:
	"""
	Split a repository-relative path into tree segments.

	Only ``/`` separates segments; a backslash is an ordinary filename character.

	Raises:
		PathConflictError: If the path is empty or contains ``.``, ``..`` or ``.git``
	"""
	text = str(rel_path)
	segments = tuple(text.split("/"))
	if not text or any(segment in FORBIDDEN_SEGMENTS for segment in segments):
		msg = f"Cannot commit to path '{rel_path}': not a plain repository-relative file path"
		raise PathConflictError(msg)
	return segments


def _load_tree(repo: Repository, tree_id: Oid | None) -> Tree | None:
	if tree_id is None:
		return None
	try:
		return repo[tree_id].peel(Tree)
	except (Pygit2GitError, KeyError, ValueError) as e:
		msg = f"Could not read tree {tree_id}: {e}"
		logger.exception(msg)
		raise ObjectStoreError(msg) from e


def _upsert(
	repo: Repository,
	tree: Tree | None,
	segments: Sequence[str],
	depth: int,
	blob_id: Oid,
	filemode: int,
) -> Oid:
	"""Write the tree for ``segments[:depth]`` with the blob spliced in and return its id."""
	name = segments[depth]
	here = "/".join(segments[: depth + 1])
	existing = tree[name] if tree is not None and name in tree else None
	is_leaf = depth == len(segments) - 1

	if is_leaf:
		if existing is not None and existing.filemode not in _REPLACEABLE_LEAF_MODES:
			msg = f"Path conflict at '{here}': expected a file but the base tree has a {describe_mode(existing.filemode)}"
			raise PathConflictError(msg)
		child_id, child_mode = blob_id, filemode
	else:
		subtree = None
		if existing is not None:
			if existing.filemode != FileMode.TREE:
				msg = (
					f"Path conflict at '{here}': expected a directory but the base tree has a "
					f"{describe_mode(existing.filemode)}"
				)
				raise PathConflictError(msg)
			subtree = _load_tree(repo, existing.id)
		child_id = _upsert(repo, subtree, segments, depth + 1, blob_id, filemode)
		child_mode = FileMode.TREE

	try:
		builder = repo.TreeBuilder(tree) if tree is not None else repo.TreeBuilder()
		builder.insert(name, child_id, child_mode)
		new_id = builder.write()
	except Pygit2GitError as e:
		msg = f"Failed to write tree for '{here}': {e}"
		logger.exception(msg)
		raise ObjectStoreError(msg) from e

	logger.debug("Wrote tree %s for level '%s'", new_id, "/".join(segments[:depth]) or "<root>")
	return new_id


def upsert_blob(
	repo: Repository,
	base_tree_id: Oid | None,
	segments: Sequence[str],
	blob_id: Oid,
	filemode: int = FileMode.BLOB,
) -> Oid:
	"""
	Return the id of a root tree equal to ``base_tree_id`` except at ``segments``.

	Only the trees along the path are rewritten; every sibling entry keeps its
	id. Missing directories are created, and a missing base tree is treated as
	empty. Re-inserting a blob that is already present with the same mode
	yields the base tree id again.

	Args:
		repo: Repository to write objects into
		base_tree_id: Root tree to start from, or None for an empty tree
		segments: Path segments ending in the file name
		blob_id: Blob to place at the path
		filemode: Mode of the new entry

	Returns:
		Oid of the new root tree

	Raises:
		PathConflictError: If a directory segment is not a directory in the base
			tree, or the file name is taken by a directory or submodule
		ObjectStoreError: If reading or writing a tree fails
	"""
	if not segments:
		msg = "Cannot commit to an empty path"
		raise PathConflictError(msg)
	for segment in segments:
		if segment in FORBIDDEN_SEGMENTS or "/" in segment:
			msg = f"Invalid path segment '{segment}' in '{'/'.join(segments)}'"
			raise PathConflictError(msg)

	base_tree = _load_tree(repo, base_tree_id)
	return _upsert(repo, base_tree, segments, 0, blob_id, filemode)
