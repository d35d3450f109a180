from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.module_builder import ModuleBuilder


@pytest.fixture
def module_builder(tmp_path: Path) -> ModuleBuilder:
    """Provide a Go module builder rooted at the pytest tmp_path."""
    return ModuleBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_awsmocker_logger() -> Iterator[None]:
    """Undo configure_logging so caplog keeps seeing awsmocker records."""
    yield
    logger = logging.getLogger("awsmocker")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
