import pytest

from symwizard.core.config import WizardConfig, load_config
from symwizard.core.errors import ConfigError


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path)
    assert config == WizardConfig()
    assert config.platforms == ("ios", "android")
    assert config.folder_prefix == "platforms"


def test_project_root_file_is_picked_up(tmp_path):
    (tmp_path / ".symwizard.yml").write_text(
        "url: https://sentry.example.com/\n"
        "platforms: ios\n"
        "phase_label: Upload dSYMs\n"
    )
    config = load_config(tmp_path)
    assert config.url == "https://sentry.example.com/"
    assert config.platforms == ("ios",)
    assert config.phase_label == "Upload dSYMs"
    assert config.folder_prefix == "platforms"


def test_explicit_config_path(tmp_path):
    path = tmp_path / "custom.yml"
    path.write_text("folder_prefix: native\nplatforms: [android]\n")
    config = load_config(tmp_path, path)
    assert config.folder_prefix == "native"
    assert config.platforms == ("android",)


def test_missing_explicit_config(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path, tmp_path / "absent.yml")


def test_unknown_key_rejected(tmp_path):
    (tmp_path / ".symwizard.yml").write_text("colour: blue\n")
    with pytest.raises(ConfigError) as info:
        load_config(tmp_path)
    assert "colour" in str(info.value)


def test_invalid_yaml(tmp_path):
    (tmp_path / ".symwizard.yml").write_text("url: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_top_level_must_be_mapping(tmp_path):
    (tmp_path / ".symwizard.yml").write_text("- ios\n- android\n")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_merged_ignores_none():
    config = WizardConfig().merged({"url": None, "platforms": ["ios"]})
    assert config.url == WizardConfig().url
    assert config.platforms == ("ios",)
