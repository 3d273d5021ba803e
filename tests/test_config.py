import json
from pathlib import Path

import pytest

from api2html.config import AppConfig, dump_config, load_config
from api2html.errors import InvalidConfigurationError


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.toml")
    assert config == AppConfig()
    assert config.defaults.theme == "darkula"
    assert config.defaults.search is True
    assert config.runtime.log_file is None
    assert config.api.enable_local_api is False


def test_load_config_sections(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[defaults]
theme = "github"
search = false
languages = "shell, python"
raw = true

[runtime]
log_file = "logs/runs.jsonl"
max_file_size_mb = 5

[api]
port = 9000
enable_local_api = true
""",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.defaults.theme == "github"
    assert config.defaults.search is False
    assert config.defaults.languages == ("shell", "python")
    assert config.defaults.raw is True
    assert config.runtime.log_file == Path("logs/runs.jsonl")
    assert config.runtime.max_file_size_mb == 5
    assert config.api.port == 9000
    assert config.api.enable_local_api is True


def test_invalid_toml_raises(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[defaults\ntheme = ", encoding="utf-8")
    with pytest.raises(InvalidConfigurationError) as exc:
        load_config(path)
    assert exc.value.code == "CONFIG_INVALID"


def test_dump_config_round_trips_values() -> None:
    payload = json.loads(dump_config(AppConfig()))
    assert payload["defaults"]["theme"] == "darkula"
    assert payload["runtime"]["log_file"] == ""
    assert payload["api"]["port"] == 8000
