"""Shared pytest configuration and fixtures."""

import sqlite3
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from photostats.config import Settings, get_settings

# Mirrors the columns of the gallery's photos table that reports read.
PHOTOS_SCHEMA = """\
CREATE TABLE photos (
    id          TEXT PRIMARY KEY,
    title       TEXT,
    storage_key TEXT,
    file_size   INTEGER,
    date_taken  TEXT
);
"""


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run e2e tests that probe the real host",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-e2e"):
        return
    skip_e2e = pytest.mark.skip(reason="Need --run-e2e flag to run")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest.fixture(autouse=True)
def _no_dotenv(request: pytest.FixtureRequest) -> Generator[None]:
    """Block .env loading so a developer's local .env cannot leak into tests."""
    if "e2e" in request.keywords:
        yield
        return

    get_settings.cache_clear()
    original = Settings.model_config.get("env_file")
    Settings.model_config["env_file"] = None

    try:
        yield
    finally:
        Settings.model_config["env_file"] = original
        get_settings.cache_clear()


@pytest.fixture
def photo_db(tmp_path: Path) -> str:
    """Path to an empty SQLite database with the photos table created."""
    db_path = tmp_path / "app.sqlite3"
    conn = sqlite3.connect(db_path)
    conn.executescript(PHOTOS_SCHEMA)
    conn.commit()
    conn.close()
    return str(db_path)


@pytest.fixture
def add_photos(photo_db: str) -> Callable[..., None]:
    """Insert photos as (date_taken, file_size) pairs into ``photo_db``."""

    def _add(*rows: tuple[str | None, int | None]) -> None:
        conn = sqlite3.connect(photo_db)
        with conn:
            start = conn.execute("SELECT count(*) FROM photos").fetchone()[0]
            conn.executemany(
                "INSERT INTO photos (id, title, storage_key, file_size, date_taken) VALUES (?, ?, ?, ?, ?)",
                [
                    (f"p{start + i}", f"Photo {start + i}", f"photos/p{start + i}.jpg", size, taken)
                    for i, (taken, size) in enumerate(rows)
                ],
            )
        conn.close()

    return _add


@pytest.fixture
def mock_settings(tmp_path: Path) -> Generator[Any]:
    """Provide fake settings so tests don't need a .env file.

    Patches get_settings at every import site so cached references are overridden.
    Host introspection paths point into tmp_path, where nothing exists yet.
    """
    fake_settings = type(
        "FakeSettings",
        (),
        {
            "db_path": str(tmp_path / "app.sqlite3"),
            "photos_table": "photos",
            "date_column": "date_taken",
            "size_column": "file_size",
            "api_token": "",
            "worker_pool_url": "",
            "probe_timeout_seconds": 2.0,
            "docker_marker_path": str(tmp_path / ".dockerenv"),
            "cgroup_path": str(tmp_path / "cgroup"),
            "meminfo_path": str(tmp_path / "meminfo"),
            "log_level": "INFO",
        },
    )()
    with (
        patch("photostats.config.get_settings", return_value=fake_settings),
        patch("photostats.probes.containment.get_settings", return_value=fake_settings),
        patch("photostats.probes.memory.get_settings", return_value=fake_settings),
        patch("photostats.store.records.get_settings", return_value=fake_settings),
        patch("photostats.report.assembler.get_settings", return_value=fake_settings),
        patch("photostats.workers.pool.get_settings", return_value=fake_settings),
        patch("photostats.api.main.get_settings", return_value=fake_settings),
    ):
        yield fake_settings
