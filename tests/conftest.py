from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from confdoc.registry import Registry
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def registry() -> Registry:
    """Provide an isolated registry so tests never share build state."""
    return Registry()


@pytest.fixture(autouse=True)
def _reset_confdoc_logger() -> Iterator[None]:
    """Drop handlers a test attached so they do not outlive its captured streams."""
    yield
    logger = logging.getLogger("confdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
