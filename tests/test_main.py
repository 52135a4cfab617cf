# Rev 1.0.0

"""Command-line entry point against the seeded demo database."""
from __future__ import annotations

import logging

import pytest

import stockdesk.utils.paths as paths
from stockdesk import main as entry


@pytest.fixture(autouse=True)
def _isolated_dirs(monkeypatch, tmp_path):
    monkeypatch.setattr(paths, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(paths, "DATA_HOME", tmp_path / "data")
    monkeypatch.setattr(paths, "DEMO_DB_PATH", tmp_path / "data" / "demo.db")
    yield
    logger = logging.getLogger("stockdesk")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_parse_filters() -> None:
    assert entry._parse_filters(["category=raw", " days =7"]) == {"category": "raw", "days": "7"}
    with pytest.raises(ValueError):
        entry._parse_filters(["category"])


def test_demo_run_loads_requested_pages(tmp_path, caplog) -> None:
    db_path = tmp_path / "cli.db"
    with caplog.at_level(logging.INFO, logger="stockdesk"):
        code = entry.main(["--demo", "--db", str(db_path), "--screen", "products", "--pages", "2"])

    assert code == 0
    assert db_path.exists()
    assert "100 of 120 rows loaded (page 2/3" in caplog.text


def test_demo_run_with_filters(tmp_path, caplog) -> None:
    db_path = tmp_path / "cli.db"
    with caplog.at_level(logging.INFO, logger="stockdesk"):
        code = entry.main(
            ["--demo", "--db", str(db_path), "--screen", "inventory", "--filter", "days=7", "--search", "batch"]
        )

    assert code == 0
    assert "2 active filter(s)" in caplog.text


def test_invalid_filter_exit_code(tmp_path) -> None:
    code = entry.main(["--demo", "--db", str(tmp_path / "cli.db"), "--filter", "category=gadgets"])
    assert code == 2


def test_bad_pages_is_a_usage_error() -> None:
    with pytest.raises(SystemExit):
        entry.main(["--pages", "0"])


def test_blank_filter_still_loads_defaults(tmp_path, caplog) -> None:
    db_path = tmp_path / "cli.db"
    with caplog.at_level(logging.INFO, logger="stockdesk"):
        code = entry.main(["--demo", "--db", str(db_path), "--screen", "products", "--filter", "category="])

    assert code == 0
    assert "50 of 120 rows loaded (page 1/3, 0 active filter(s))" in caplog.text
