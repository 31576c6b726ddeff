"""Shared test fixtures for the ansilog test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from ansilog.config import ParserConfig
from ansilog.session import Session


SAMPLE_LOG = (
    "2024-01-15T00:14:49.2830954Z ##[group]Operating System\n"
    "2024-01-15T00:14:49.2831846Z Ubuntu\n"
    "2024-01-15T00:14:49.2832204Z 22.04.3\n"
    "2024-01-15T00:14:49.2832638Z LTS\n"
    "2024-01-15T00:14:49.2833085Z ##[endgroup]\n"
    "2024-01-15T00:14:49.2833509Z ##[group]Runner Image\n"
    "2024-01-15T00:14:49.2834023Z Image: ubuntu-22.04\n"
    "2024-01-15T00:14:49.2834552Z Version: 20240107.1.0\n"
    "2024-01-15T00:14:49.2835705Z Included Software: https://github.com/actions/runner-images/blob/ubuntu22/20240107.1/images/ubuntu/Ubuntu2204-Readme.md\n"
    "2024-01-15T00:14:49.2837409Z Image Release: https://github.com/actions/runner-images/releases/tag/ubuntu22%2F20240107.1\n"
    "2024-01-15T00:14:49.2838476Z ##[endgroup]\n"
    "2024-01-15T00:14:49.2838965Z ##[group]Runner Image Provisioner\n"
    "2024-01-15T00:14:49.2839497Z 2.0.321.1\n"
    "2024-01-15T00:14:49.2839965Z ##[endgroup]\n"
)


@pytest.fixture
def config() -> ParserConfig:
    """Create a test config with default values."""
    return ParserConfig(search="", pretty=False, encoding="utf-8", log_level="DEBUG")


@pytest.fixture
def session() -> Session:
    """Create an empty session."""
    return Session()


@pytest.fixture
def sample_log() -> str:
    return SAMPLE_LOG


@pytest.fixture
def loaded_session(session: Session, sample_log: str) -> Session:
    """A session holding the sample GitHub Actions log."""
    session.set_raw(sample_log)
    return session


@pytest.fixture
def log_file(tmp_path: Path, sample_log: str) -> Path:
    path = tmp_path / "job.log"
    path.write_text(sample_log, encoding="utf-8")
    return path
