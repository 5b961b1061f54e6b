"""Global test fixtures and configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from bgit.config import ConfigLoader

if TYPE_CHECKING:
	from collections.abc import Iterator


@pytest.fixture(autouse=True)
def reset_config_loader() -> Iterator[None]:
	"""Make sure a cached configuration never leaks between tests."""
	ConfigLoader.reset_instance()
	yield
	ConfigLoader.reset_instance()
