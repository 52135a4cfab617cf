# Rev 1.0.0

from __future__ import annotations

import importlib


def test_paths_respect_environment_overrides(monkeypatch, tmp_path) -> None:
    import stockdesk.utils.paths as paths

    custom_data = tmp_path / "data-home"
    custom_state = tmp_path / "state-home"
    monkeypatch.setenv("STOCKDESK_DATA_DIR", str(custom_data))
    monkeypatch.setenv("STOCKDESK_STATE_DIR", str(custom_state))

    try:
        module = importlib.reload(paths)

        assert module.DATA_HOME == custom_data
        assert module.STATE_HOME == custom_state
        assert module.DEMO_DB_PATH == custom_data / "demo.db"
        assert module.LOG_DIR == custom_state / "logs"
        assert (module.MIGRATIONS_DIR / "0001_init.sql").exists()

        module.ensure_runtime_dirs()

        assert module.DEMO_DB_PATH.parent.exists()
        assert module.LOG_DIR.exists()
    finally:
        monkeypatch.delenv("STOCKDESK_DATA_DIR", raising=False)
        monkeypatch.delenv("STOCKDESK_STATE_DIR", raising=False)
        importlib.reload(paths)
