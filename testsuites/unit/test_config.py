import pytest
import yaml

from testsuites.ui_testing.framework.config import PortalConfig, load_config
from testsuites.ui_testing.framework.exceptions import ConfigurationError


def test_yaml_values_and_defaults(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.dump({"app": {"base_url": "https://portal.example.com"}, "waits": {"default_timeout": 10}}),
        encoding="utf-8",
    )

    config = load_config(config_path, environ={})

    assert config.base_url == "https://portal.example.com"
    assert config.default_timeout == 10.0
    assert config.poll_interval == 0.5
    assert config.get("waits.missing", 7) == 7
    assert config.source == config_path


def test_env_override_is_typed(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({"browser": {"headless": True}}), encoding="utf-8")

    config = load_config(
        config_path,
        environ={"APP_BASE_URL": "http://env.example.com", "BROWSER_HEADLESS": "false", "WAITS_POLL_INTERVAL": "0.25"},
    )

    assert config.base_url == "http://env.example.com"
    assert config.headless is False
    assert config.poll_interval == 0.25


def test_config_path_from_environment(tmp_path):
    config_path = tmp_path / "other.yaml"
    config_path.write_text(yaml.dump({"credentials": {"email": "admin@example.com"}}), encoding="utf-8")

    config = load_config(environ={"PORTAL_CONFIG": str(config_path)})

    assert config.credentials["email"] == "admin@example.com"


def test_missing_file_falls_back_to_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml", environ={})

    assert config.source is None
    assert config.browser == "chromium"
    assert config.default_state == "Arizona"
    assert config.default_staff_role == "Admin"
    assert config.license_valid_days == 30


@pytest.mark.parametrize("content", ["app: [unclosed", "- just\n- a list\n"], ids=["bad_yaml", "not_mapping"])
def test_invalid_file_raises(tmp_path, content):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(config_path, environ={})


def test_config_is_immutable(tmp_path):
    config = load_config(tmp_path / "absent.yaml", environ={})

    with pytest.raises(AttributeError):
        config.extra = 1
    with pytest.raises(TypeError):
        config.get("app")["base_url"] = "http://changed"


def test_with_overrides_returns_new_value():
    config = PortalConfig({"waits": {"default_timeout": 30}})

    changed = config.with_overrides({"waits.default_timeout": 5, "retry.enabled": False})

    assert config.default_timeout == 30.0
    assert changed.default_timeout == 5.0
    assert changed.get("retry.enabled") is False
