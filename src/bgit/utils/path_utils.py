"""Utilities for locating the file to commit and reading it from disk."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from pygit2.enums import FileMode

from bgit.git.utils import PathOutsideRepositoryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileSnapshot:
	"""Content and tree mode of a file as it is on disk right now."""

	path: Path
	data: bytes
	filemode: int


def repo_relative_path(file_path: Path, workdir: Path, cwd: Path | None = None) -> PurePosixPath:
	"""
	Return ``file_path`` relative to the repository work tree.

	Relative paths are taken from ``cwd`` (the current directory by default).
	Parent directories are resolved, the final component is not, so a
	symlink keeps its own name.

	Raises:
		FileNotFoundError: If the file does not exist
		PathOutsideRepositoryError: If the file is not inside ``workdir``
	"""
	base = cwd or Path.cwd()
	candidate = file_path if file_path.is_absolute() else base / file_path
	candidate = Path(os.path.normpath(candidate))

	if not candidate.exists() and not candidate.is_symlink():
		msg = f"File not found: {candidate}"
		raise FileNotFoundError(msg)
	if candidate.is_dir() and not candidate.is_symlink():
		msg = f"Path conflict: {candidate} is a directory, only single files can be committed"
		raise IsADirectoryError(msg)

	located = candidate.parent.resolve() / candidate.name
	root = workdir.resolve()
	try:
		rel = located.relative_to(root)
	except ValueError as e:
		msg = f"{located} is outside the repository work tree {root}"
		raise PathOutsideRepositoryError(msg) from e

	if not rel.parts or rel.parts[0] == ".git":
		msg = f"{located} is not a committable file inside {root}"
		raise PathOutsideRepositoryError(msg)
	return PurePosixPath(*rel.parts)


def read_file_snapshot(path: Path) -> FileSnapshot:
	"""
	Read a file's bytes and work out its tree mode.

	Symlinks are stored as the link target, executables get ``100755`` and
	everything else ``100644``.
	"""
	info = path.lstat()
	if stat.S_ISLNK(info.st_mode):
		data = os.fsencode(os.readlink(path))
		filemode = FileMode.LINK
	else:
		data = path.read_bytes()
		filemode = FileMode.BLOB_EXECUTABLE if info.st_mode & 0o111 else FileMode.BLOB
	logger.debug("Read %d bytes from %s (mode %o)", len(data), path, filemode)
	return FileSnapshot(path=path, data=data, filemode=int(filemode))
