"""Utility module for bgit."""

from .cli_utils import console, exit_with_error, loading_spinner, show_error, show_warning
from .path_utils import FileSnapshot, read_file_snapshot, repo_relative_path

__all__ = [
	"FileSnapshot",
	"console",
	"exit_with_error",
	"loading_spinner",
	"read_file_snapshot",
	"repo_relative_path",
	"show_error",
	"show_warning",
]
