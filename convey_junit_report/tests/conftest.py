from pathlib import Path
import logging

import pytest

from convey_junit_report.core.config import CONFIG_ENV_VAR

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch):
    """Keep stray config files and logger handlers from leaking between tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    logger = logging.getLogger("convey_junit_report")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR
