import pytest
import yaml

from formsuites.ui_testing.framework.config_loader import (
    DEFAULT_CONFIG_PATH,
    ConfigLoader,
    EngineSettings,
    LookupTimings,
)
from formsuites.ui_testing.framework.errors import ConfigurationError


def _write_config(tmp_path, data):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(data), encoding="utf-8")
    return config_path


def test_env_override_and_defaults(monkeypatch, tmp_path):
    config_path = _write_config(tmp_path, {"engine": {"button_click_timeout_ms": 5000}})

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("engine.button_click_timeout_ms") == 5000
    assert loader.get("engine.email_reveal_timeout_ms", 10000) == 10000

    ConfigLoader.reset()
    monkeypatch.setenv("ENGINE_BUTTON_CLICK_TIMEOUT_MS", "2500")
    loader = ConfigLoader(config_path=config_path)
    assert loader.get("engine.button_click_timeout_ms", 0) == 2500


def test_reload_updates_values(tmp_path):
    config_path = _write_config(tmp_path, {"engine": {"lookup": {"poll_budget_ms": 5}}})

    loader = ConfigLoader(config_path=config_path)
    assert loader.get("engine.lookup.poll_budget_ms") == 5

    config_path.write_text(yaml.dump({"engine": {"lookup": {"poll_budget_ms": 15}}}), encoding="utf-8")
    loader.reload()
    assert loader.get("engine.lookup.poll_budget_ms") == 15


def test_missing_file_falls_back_to_defaults(tmp_path):
    loader = ConfigLoader(config_path=tmp_path / "absent.yaml")

    assert loader.get("engine.button_click_timeout_ms", 42) == 42
    assert loader.get_section("engine") == {}


def test_invalid_yaml_raises(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("engine: [unclosed", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigLoader(config_path=config_path)


def test_engine_settings_defaults_without_config(tmp_path):
    settings = EngineSettings.from_config(ConfigLoader(config_path=tmp_path / "absent.yaml"))

    assert settings == EngineSettings()
    assert settings.field_timeouts_ms == (10_000, 20_000, 30_000)
    assert settings.lookup == LookupTimings()


def test_engine_settings_read_from_yaml_and_env(monkeypatch, tmp_path):
    config_path = _write_config(
        tmp_path,
        {
            "engine": {
                "field_timeouts_ms": [100, 200],
                "button_click_timeout_ms": 300,
                "lookup": {"panel_timeout_ms": 400, "poll_budget_ms": 500},
            }
        },
    )
    monkeypatch.setenv("ENGINE_LOOKUP_POLL_BUDGET_MS", "750")

    settings = EngineSettings.from_config(ConfigLoader(config_path=config_path))

    assert settings.field_timeouts_ms == (100, 200)
    assert settings.button_click_timeout_ms == 300
    assert settings.lookup.panel_timeout_ms == 400
    assert settings.lookup.poll_budget_ms == 750
    assert settings.lookup.poll_interval_ms == LookupTimings().poll_interval_ms


def test_field_timeouts_from_env_list(monkeypatch, tmp_path):
    monkeypatch.setenv("ENGINE_FIELD_TIMEOUTS_MS", "50, 60")

    settings = EngineSettings.from_config(ConfigLoader(config_path=tmp_path / "absent.yaml"))

    assert settings.field_timeouts_ms == (50, 60)


@pytest.mark.parametrize("timeouts", [[], [100, -1], ["fast"]])
def test_bad_field_timeouts_rejected(tmp_path, timeouts):
    config_path = _write_config(tmp_path, {"engine": {"field_timeouts_ms": timeouts}})

    with pytest.raises(ConfigurationError):
        EngineSettings.from_config(ConfigLoader(config_path=config_path))


def test_shipped_config_matches_defaults():
    assert DEFAULT_CONFIG_PATH.exists()

    settings = EngineSettings.from_config(ConfigLoader())

    assert settings.lookup.poll_budget_ms == 3000
    assert settings.page_loading_timeout_ms == 60_000
