from pathlib import Path

import pytest

from domain.errors import ConfigError
from infrastructure.config import ServiceConfig, load_service_config
from infrastructure.constants import DEFAULT_BASE_URL


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "taxonomy_service.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_file(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    cfg = load_service_config(environ={})

    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.timeout_s == 30.0
    assert cfg.max_retries == 5
    assert cfg.retry_delay_s == 10.0


def test_yaml_values_are_loaded(tmp_path) -> None:
    path = _write(tmp_path, "base_url: https://taxonomy.example.test/svc/\nmax_retries: 2\nretry_delay_s: 0.5\n")

    cfg = load_service_config(path, environ={})

    assert cfg.base_url == "https://taxonomy.example.test/svc"
    assert cfg.max_retries == 2
    assert cfg.retry_delay_s == 0.5
    assert cfg.timeout_s == 30.0


def test_environment_overrides_yaml(tmp_path) -> None:
    path = _write(tmp_path, "base_url: https://taxonomy.example.test/svc\nmax_retries: 2\n")

    cfg = load_service_config(
        path,
        environ={
            "ECCAIRS_TAXONOMY_URL": " https://other.example.test/taxonomy-service ",
            "ECCAIRS_MAX_RETRIES": "0",
            "ECCAIRS_TIMEOUT_S": "",
        },
    )

    assert cfg.base_url == "https://other.example.test/taxonomy-service"
    assert cfg.max_retries == 0
    assert cfg.timeout_s == 30.0


def test_empty_yaml_uses_defaults(tmp_path) -> None:
    cfg = load_service_config(_write(tmp_path, ""), environ={})

    assert cfg.base_url == DEFAULT_BASE_URL


def test_blank_url_is_rejected(tmp_path) -> None:
    with pytest.raises(ConfigError, match="not valid"):
        load_service_config(_write(tmp_path, "base_url: '   '\n"), environ={})


def test_negative_retries_are_rejected(tmp_path) -> None:
    with pytest.raises(ConfigError):
        load_service_config(_write(tmp_path, "max_retries: -1\n"), environ={})


def test_non_mapping_yaml_is_rejected(tmp_path) -> None:
    with pytest.raises(ConfigError, match="Expected YAML dict"):
        load_service_config(_write(tmp_path, "- a\n- b\n"), environ={})


def test_missing_explicit_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_service_config(tmp_path / "nope.yaml", environ={})


def test_model_rejects_blank_url() -> None:
    with pytest.raises(ValueError):
        ServiceConfig(base_url="")


def test_bundled_config_is_valid() -> None:
    path = Path(__file__).resolve().parents[2] / "configs" / "taxonomy_service.yaml"

    cfg = load_service_config(path, environ={})

    assert cfg.base_url == DEFAULT_BASE_URL
