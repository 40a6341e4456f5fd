import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fintech_canary.utils import config
from fintech_canary.utils.environment import CANARY_CONFIG, CANARY_LOG_LEVEL, init_env


@pytest.fixture
def basic_config(mocker) -> MagicMock:
    return mocker.patch("logging.basicConfig")


def test_init_env_defaults(basic_config: MagicMock) -> None:
    config.init({"stale": True})
    init_env()
    assert basic_config.call_args.kwargs["level"] == 20
    assert config.get_config() == {}


def test_init_env_log_level(basic_config: MagicMock) -> None:
    init_env(log_level="DEBUG")
    assert os.environ[CANARY_LOG_LEVEL] == "DEBUG"
    assert basic_config.call_args.kwargs["level"] == 10


def test_init_env_config_file(basic_config: MagicMock, tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[pagerduty]\npage_size = 7\n", encoding="utf-8")
    init_env(config_file=str(config_file))
    assert os.environ[CANARY_CONFIG] == str(config_file)
    assert config.pagerduty_settings().page_size == 7


def test_init_env_config_file_from_environment(
    basic_config: MagicMock, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[pagerduty]\ntimeout = 3\n", encoding="utf-8")
    monkeypatch.setenv(CANARY_CONFIG, str(config_file))
    init_env()
    assert config.pagerduty_settings().timeout == 3
