"""
Logging setup for bgit.

Console output goes through rich; ``--save-log`` adds a file that captures
everything at DEBUG level.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

console = Console(stderr=True)
logger = logging.getLogger(__name__)

LOG_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"


def setup_logging(is_verbose: bool = False, log_file_path: Path | str | None = None) -> None:
	"""
	Route log records to the rich console and, optionally, a log file.

	Calling it again replaces the handlers from the previous call.

	Args:
	    is_verbose: Show DEBUG records on the console instead of WARNING and up
	    log_file_path: File that receives every record, if given

	"""
	console_level = logging.DEBUG if is_verbose else logging.WARNING
	root_logger = logging.getLogger()
	root_logger.handlers.clear()
	root_logger.setLevel(logging.DEBUG if log_file_path else console_level)
	root_logger.addHandler(
		RichHandler(level=console_level, console=console, rich_tracebacks=True, show_time=is_verbose, show_path=is_verbose)
	)

	if log_file_path is None:
		return
	path = Path(log_file_path)
	try:
		path.parent.mkdir(parents=True, exist_ok=True)
		file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
	except OSError as e:
		logger.warning("Not saving a log file, %s is not writable: %s", path, e)
		return
	file_handler.setLevel(logging.DEBUG)
	file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
	root_logger.addHandler(file_handler)
	logger.debug("Logging to file: %s", path)


def _print_summary(title: str, style: str, body: str) -> None:
	console.print()
	console.print(Rule(Text(title, style=f"bold {style}"), style=style))
	console.print(f"\n{body}\n", markup=False, soft_wrap=True)
	console.print(Rule(style=style))
	console.print()


def display_error_summary(error_message: str) -> None:
	"""Print an error between red rules."""
	_print_summary("Error Summary", "red", error_message)


def display_warning_summary(warning_message: str) -> None:
	"""Print a warning between yellow rules."""
	_print_summary("Warning Summary", "yellow", warning_message)
