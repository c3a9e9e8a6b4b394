"""
Tests for the generator configuration.
"""

from __future__ import annotations

import json

import pytest

from controllers_to_sdk.pipeline.config import Flavor, SdkGeneratorConfig
from controllers_to_sdk.pipeline.errors import ConfigError

REQUIRED = {"api_input_path": "api", "sdk_output_path": "web/sdk", "sdk_interface_path": "web/sdk-interface.ts"}


class TestSdkGeneratorConfig:
    """Test cases for SdkGeneratorConfig"""

    def test_defaults(self):
        config = SdkGeneratorConfig.from_dict(REQUIRED)
        assert config.flavors == [Flavor.PLAIN]
        assert config.generate_default_sdk_interface
        assert config.overwrite_old_output_dir
        assert config.formatter.enabled
        assert config.output.atomic_write

    @pytest.mark.parametrize("missing", sorted(REQUIRED))
    def test_missing_required_key(self, missing):
        data = {k: v for k, v in REQUIRED.items() if k != missing}
        with pytest.raises(ConfigError, match=missing):
            SdkGeneratorConfig.from_dict(data)

    def test_nested_sections(self):
        config = SdkGeneratorConfig.from_dict(
            {
                **REQUIRED,
                "flavors": ["plain", "rtk"],
                "controller_output": {"export_name": {"remove_suffix": "Controller"}},
                "formatter": {"enabled": False, "timeout": 5},
                "output": {"atomic_write": False},
                "type_overrides": {"Decimal": "string"},
            }
        )
        assert config.flavors == [Flavor.PLAIN, Flavor.RTK]
        assert config.controller_output.export_name.remove_suffix == "Controller"
        assert config.controller_output.file_name.add_suffix == ""
        assert not config.formatter.enabled
        assert config.formatter.timeout == 5
        assert not config.output.atomic_write
        assert config.type_overrides == {"Decimal": "string"}

    @pytest.mark.parametrize("section", ["formatter", "output"])
    def test_unknown_section_key(self, section):
        """An unknown key in a nested section is a configuration error, not a TypeError."""
        with pytest.raises(ConfigError, match=f"Invalid {section} configuration"):
            SdkGeneratorConfig.from_dict({**REQUIRED, section: {"prettyfy": True}})

    def test_unknown_flavor(self):
        with pytest.raises(ConfigError, match="Unknown flavor"):
            SdkGeneratorConfig.from_dict({**REQUIRED, "flavors": ["angular"]})

    def test_from_file_resolves_relative_paths(self, tmp_path):
        config_path = tmp_path / "project" / "sdk-config.json"
        config_path.parent.mkdir()
        config_path.write_text(json.dumps({**REQUIRED, "json_output": "out/sdk.json"}))

        config = SdkGeneratorConfig.from_file(config_path)
        base = config_path.parent.resolve()
        assert config.api_input_path == str(base / "api")
        assert config.sdk_output_path == str(base / "web" / "sdk")
        assert config.sdk_interface_path == str(base / "web" / "sdk-interface.ts")
        assert config.json_output == str(base / "out" / "sdk.json")

    def test_from_file_errors(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            SdkGeneratorConfig.from_file(tmp_path / "missing.json")

        broken = tmp_path / "broken.json"
        broken.write_text("{")
        with pytest.raises(ConfigError, match="Failed to parse"):
            SdkGeneratorConfig.from_file(broken)

        listed = tmp_path / "list.json"
        listed.write_text("[]")
        with pytest.raises(ConfigError, match="JSON object"):
            SdkGeneratorConfig.from_file(listed)

    def test_flavor_output_paths_are_disjoint(self):
        config = SdkGeneratorConfig.from_dict(REQUIRED)
        assert config.flavor_output_path(Flavor.PLAIN).name == "plain"
        assert config.flavor_output_path(Flavor.RTK).name == "rtk"
        assert config.flavor_output_path(Flavor.PLAIN).parent == config.flavor_output_path(Flavor.RTK).parent

    def test_to_dict_round_trip(self):
        config = SdkGeneratorConfig.from_dict({**REQUIRED, "flavors": ["rtk"], "verbose": True})
        assert SdkGeneratorConfig.from_dict(config.to_dict()) == config


if __name__ == "__main__":
    pytest.main([__file__])
