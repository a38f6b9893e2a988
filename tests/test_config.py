"""
Tests for ResolverConfig and settings loading.
"""

import pytest

pytestmark = pytest.mark.fast

from ngreflector.config import (
    DEFAULTS,
    ResolverConfig,
    get_config_value,
    load_config,
    load_settings,
)
from ngreflector.dependencies import StaticDependencyReader
from ngreflector.exceptions import ConfigError


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Run with no project or user settings file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("NGREFLECTOR_CONFIG", raising=False)
    return tmp_path


class TestResolverConfig:

    def test_defaults_are_conservative(self):
        config = ResolverConfig.no_linking()

        assert config.output_extension == ".template.dart"
        assert config.record_components_as_injectables
        assert config.record_directives_as_injectables
        assert config.record_pipes_as_injectables
        assert config.record_router_annotations_for_components
        assert isinstance(config.dependency_reader, StaticDependencyReader)
        assert config.has_input("foo.dart") is False
        assert config.is_library("foo.template.dart") is False

    def test_immutable(self):
        config = ResolverConfig.no_linking()

        with pytest.raises(AttributeError):
            config.output_extension = ".ng.dart"

    @pytest.mark.parametrize("extension", ["template.dart", "", "."])
    def test_invalid_output_extension(self, extension):
        with pytest.raises(ConfigError):
            ResolverConfig.no_linking(output_extension=extension)

    def test_from_settings_with_overrides(self):
        settings = load_settings({"reflector": {"output_extension": ".ng.dart", "record_pipes_as_injectables": False}})

        config = ResolverConfig.from_settings(settings, record_directives_as_injectables=False)

        assert config.output_extension == ".ng.dart"
        assert config.record_pipes_as_injectables is False
        assert config.record_directives_as_injectables is False
        assert config.record_components_as_injectables is True


class TestSettings:

    def test_no_file_gives_defaults(self, isolated_settings):
        assert load_config() is None
        assert load_settings() == DEFAULTS
        assert get_config_value("reflector.output_extension") == ".template.dart"
        assert get_config_value("reflector.missing", "fallback") == "fallback"

    def test_project_file(self, isolated_settings):
        (isolated_settings / "ngreflector.toml").write_text(
            '[reflector]\noutput_extension = ".ng.dart"\n'
        )

        assert get_config_value("reflector.output_extension") == ".ng.dart"
        assert get_config_value("reflector.record_pipes_as_injectables") is True

    def test_env_file_wins(self, isolated_settings, monkeypatch):
        (isolated_settings / "ngreflector.toml").write_text('[reflector]\noutput_extension = ".ng.dart"\n')
        env_file = isolated_settings / "env.toml"
        env_file.write_text('[reflector]\noutput_extension = ".env.dart"\n')
        monkeypatch.setenv("NGREFLECTOR_CONFIG", str(env_file))

        assert get_config_value("reflector.output_extension") == ".env.dart"

    def test_does_not_mutate_defaults(self):
        load_settings({"reflector": {"record_pipes_as_injectables": False}})

        assert DEFAULTS["reflector"]["record_pipes_as_injectables"] is True

    @pytest.mark.parametrize("raw, message", [
        ({"router": {}}, "Unknown settings section"),
        ({"reflector": {"record_everything": True}}, "Unknown setting"),
        ({"reflector": {"record_pipes_as_injectables": "yes"}}, "must be bool"),
        ({"reflector": 1}, "must be a table"),
    ])
    def test_invalid_settings(self, raw, message):
        with pytest.raises(ConfigError, match=message):
            load_settings(raw)

    def test_invalid_toml(self, isolated_settings):
        (isolated_settings / "ngreflector.toml").write_text("[reflector\n")

        with pytest.raises(ConfigError, match="Invalid settings file"):
            load_config()
