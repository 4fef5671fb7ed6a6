"""
Tests for SimulatorConfig.
"""

import pytest

from wolfram_sim import SessionController, SimulatorConfig

from fakes import FakeTransport


ENV_VARS = [
    "WOLFRAM_SIM_URL",
    "WOLFRAM_SIM_REQUEST_TIMEOUT",
    "WOLFRAM_SIM_UPDATE_INTERVAL_MS",
    "WOLFRAM_SIM_HISTORY_CAP",
    "WOLFRAM_SIM_DEFAULT_EXAMPLE",
    "WOLFRAM_SIM_MAX_STEPS",
    "WOLFRAM_SIM_STOP_ON_FIXED_POINT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFromEnv:

    def test_defaults(self, clean_env):
        config = SimulatorConfig.from_env()

        assert config == SimulatorConfig()
        assert config.server_url == "http://localhost:8080"
        assert config.request_timeout is None
        assert config.max_steps is None
        assert config.stop_on_fixed_point is False

    def test_overrides(self, clean_env):
        clean_env.setenv("WOLFRAM_SIM_URL", "http://sim-host:9000")
        clean_env.setenv("WOLFRAM_SIM_REQUEST_TIMEOUT", "2.5")
        clean_env.setenv("WOLFRAM_SIM_UPDATE_INTERVAL_MS", "250")
        clean_env.setenv("WOLFRAM_SIM_HISTORY_CAP", "10")
        clean_env.setenv("WOLFRAM_SIM_DEFAULT_EXAMPLE", "triangle")
        clean_env.setenv("WOLFRAM_SIM_MAX_STEPS", "100")
        clean_env.setenv("WOLFRAM_SIM_STOP_ON_FIXED_POINT", "yes")

        config = SimulatorConfig.from_env()

        assert config.server_url == "http://sim-host:9000"
        assert config.request_timeout == 2.5
        assert config.update_interval_ms == 250
        assert config.history_cap == 10
        assert config.default_example == "triangle"
        assert config.max_steps == 100
        assert config.stop_on_fixed_point is True

    def test_blank_optional_values_mean_unset(self, clean_env):
        clean_env.setenv("WOLFRAM_SIM_MAX_STEPS", "")
        clean_env.setenv("WOLFRAM_SIM_REQUEST_TIMEOUT", " ")

        config = SimulatorConfig.from_env()

        assert config.max_steps is None
        assert config.request_timeout is None

    def test_invalid_env_value_raises(self, clean_env):
        clean_env.setenv("WOLFRAM_SIM_HISTORY_CAP", "0")
        with pytest.raises(ValueError, match="history_cap"):
            SimulatorConfig.from_env()


class TestValidation:

    @pytest.mark.parametrize("kwargs", [
        {"update_interval_ms": 0},
        {"history_cap": -1},
        {"max_steps": 0},
    ])
    def test_rejects_non_positive(self, kwargs):
        with pytest.raises(ValueError):
            SimulatorConfig(**kwargs)


class TestControllerUsesConfig:

    def test_initial_preferences_come_from_config(self):
        config = SimulatorConfig(update_interval_ms=750, default_example="triangle")
        controller = SessionController(FakeTransport(), config)

        assert controller.state.update_interval_ms == 750
        assert controller.state.selected_example == "triangle"
