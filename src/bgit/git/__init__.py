"""Git object-graph operations for bgit."""

from bgit.git.branch_resolver import BranchResolution, resolve_branch
from bgit.git.commit_writer import default_message, write_commit
from bgit.git.tree_rebuilder import split_path, upsert_blob
from bgit.git.utils import (
	BranchNotFoundError,
	ConcurrentBranchMoveError,
	GitError,
	IdentityError,
	ObjectStoreError,
	PathConflictError,
	PathOutsideRepositoryError,
	PushError,
	RepoContext,
	RepositoryNotFoundError,
)

__all__ = [
	"BranchNotFoundError",
	"BranchResolution",
	"ConcurrentBranchMoveError",
	"GitError",
	"IdentityError",
	"ObjectStoreError",
	"PathConflictError",
	"PathOutsideRepositoryError",
	"PushError",
	"RepoContext",
	"RepositoryNotFoundError",
	"default_message",
	"resolve_branch",
	"split_path",
	"upsert_blob",
	"write_commit",
]
