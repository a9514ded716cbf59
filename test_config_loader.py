"""
Unit tests for configuration loader module.
"""

import logging
import tempfile
from pathlib import Path
from unittest.mock import patch, mock_open

from formgen.config_loader import (
    load_config, validate_config, get_default_config, deep_merge,
    get_config_summary, get_config_value, get_logging_level, configure_logging,
    get_synthesis_options
)
from formgen.exceptions import ConfigurationLoadError
from formgen.field_kinds import SynthesisOptions


class TestDeepMerge:
    """Test cases for deep_merge function."""

    def test_deep_merge_simple_dicts(self):
        """Test deep merging of simple dictionaries."""
        base = {'a': 1, 'b': 2}
        update = {'b': 3, 'c': 4}

        result = deep_merge(base, update)

        assert result == {'a': 1, 'b': 3, 'c': 4}
        # Ensure original dicts are not modified
        assert base == {'a': 1, 'b': 2}
        assert update == {'b': 3, 'c': 4}

    def test_deep_merge_nested_dicts(self):
        """Test deep merging of nested dictionaries."""
        base = {
            'app': {'name': 'Base App', 'version': '1.0'},
            'generator': {'typescript': True, 'use_router': True}
        }
        update = {
            'app': {'name': 'Updated App'},
            'generator': {'use_router': False, 'success_route': '/done'}
        }

        result = deep_merge(base, update)

        assert result == {
            'app': {'name': 'Updated App', 'version': '1.0'},
            'generator': {'typescript': True, 'use_router': False, 'success_route': '/done'}
        }

    def test_deep_merge_non_dict_values(self):
        """Test deep merging when values are not dictionaries."""
        base = {'a': {'nested': 1}, 'b': [1, 2, 3]}
        update = {'a': {'nested': 2}, 'b': [4, 5, 6]}

        result = deep_merge(base, update)

        assert result == {'a': {'nested': 2}, 'b': [4, 5, 6]}


class TestGetDefaultConfig:
    """Test cases for get_default_config function."""

    def test_get_default_config_structure(self):
        """Test that default config has expected sections."""
        config = get_default_config()

        for section in ['app', 'logging', 'generator', 'ui']:
            assert section in config

    def test_get_default_config_values(self):
        """Test that default config has expected values."""
        config = get_default_config()

        assert config['app']['name'] == 'Form Code Builder'
        assert config['logging']['level'] == 'INFO'
        assert config['generator']['typescript'] is True
        assert config['generator']['success_route'] == '/success'
        assert config['generator']['min_date'] == '1900-01-01'

    def test_default_config_is_valid(self):
        """Test that the built-in defaults pass validation."""
        assert validate_config(get_default_config()) is True


class TestLoadConfig:
    """Test cases for load_config function."""

    def test_load_config_file_not_exists(self):
        """Test loading config when file doesn't exist."""
        with patch('pathlib.Path.exists', return_value=False):
            config = load_config(Path('nonexistent.yaml'))

            assert config == get_default_config()

    def test_load_config_valid_file(self):
        """Test loading config from valid YAML file."""
        yaml_content = """
app:
  name: "Test Builder"
generator:
  use_router: false
  success_route: "/thanks"
"""

        with patch('builtins.open', mock_open(read_data=yaml_content)):
            with patch('pathlib.Path.exists', return_value=True):
                config = load_config(Path('test.yaml'))

                assert config['app']['name'] == 'Test Builder'
                assert config['generator']['use_router'] is False
                assert config['generator']['success_route'] == '/thanks'
                # Should have defaults for missing values
                assert config['app']['version'] == '1.0.0'
                assert config['generator']['min_date'] == '1900-01-01'

    def test_load_config_invalid_yaml(self):
        """Test loading config with invalid YAML."""
        with patch('builtins.open', mock_open(read_data="invalid: yaml: content: [")):
            with patch('pathlib.Path.exists', return_value=True):
                config = load_config(Path('invalid.yaml'))

                assert config == get_default_config()

    def test_load_config_empty_file(self):
        """Test loading config from empty file."""
        with patch('builtins.open', mock_open(read_data="")):
            with patch('pathlib.Path.exists', return_value=True):
                config = load_config(Path('empty.yaml'))

                assert config == get_default_config()

    def test_load_config_non_dict_content(self):
        """Test loading config with non-dictionary content."""
        with patch('builtins.open', mock_open(read_data="- item1\n- item2")):
            with patch('pathlib.Path.exists', return_value=True):
                config = load_config(Path('list.yaml'))

                assert config == get_default_config()

    def test_load_config_io_error(self):
        """Test loading config when IO error occurs."""
        with patch('builtins.open', side_effect=IOError("Permission denied")):
            with patch('pathlib.Path.exists', return_value=True):
                with patch('formgen.config_loader.log_error_with_context') as mock_log:
                    config = load_config(Path('protected.yaml'))

                assert config == get_default_config()
                error = mock_log.call_args.args[0]
                assert isinstance(error, ConfigurationLoadError)
                assert error.context['original_error_message'] == "Permission denied"

    def test_load_config_real_file(self):
        """Test loading config from a file on disk."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / 'config.yaml'
            config_path.write_text("logging:\n  level: DEBUG\n", encoding='utf-8')

            config = load_config(config_path)

            assert config['logging']['level'] == 'DEBUG'
            assert config['ui']['layout'] == 'wide'


class TestValidateConfig:
    """Test cases for validate_config function."""

    def test_validate_config_missing_sections(self):
        """Test validating config with missing required sections."""
        config = {'app': {'name': 'Test', 'version': '1.0'}}

        assert validate_config(config) is False

    def test_validate_config_missing_app_version(self):
        """Test validating config without app version."""
        config = get_default_config()
        del config['app']['version']

        assert validate_config(config) is False

    def test_validate_config_unknown_logging_level(self):
        """Test validating config with an unknown logging level."""
        config = get_default_config()
        config['logging']['level'] = 'VERBOSE'

        assert validate_config(config) is False

    def test_validate_config_lowercase_logging_level(self):
        """Test that logging levels are case-insensitive."""
        config = get_default_config()
        config['logging']['level'] = 'debug'

        assert validate_config(config) is True

    def test_validate_config_non_boolean_flag(self):
        """Test validating config with a non-boolean mode flag."""
        config = get_default_config()
        config['generator']['typescript'] = 'yes'

        assert validate_config(config) is False

    def test_validate_config_bad_route(self):
        """Test validating config with a relative success route."""
        config = get_default_config()
        config['generator']['success_route'] = 'success'

        assert validate_config(config) is False

    def test_validate_config_bad_min_date(self):
        """Test validating config with a non-ISO min_date."""
        config = get_default_config()
        config['generator']['min_date'] = '01/01/1900'

        assert validate_config(config) is False

    def test_validate_config_bad_layout(self):
        """Test validating config with an unknown page layout."""
        config = get_default_config()
        config['ui']['layout'] = 'full'

        assert validate_config(config) is False


class TestLoggingConfig:
    """Test cases for logging configuration helpers."""

    def test_get_logging_level(self):
        """Test mapping level names to logging constants."""
        assert get_logging_level('DEBUG') == logging.DEBUG
        assert get_logging_level('warning') == logging.WARNING
        assert get_logging_level('nonsense') == logging.INFO

    @patch('logging.basicConfig')
    def test_configure_logging(self, mock_basic_config):
        """Test that configure_logging applies the configured level."""
        config = get_default_config()
        config['logging']['level'] = 'ERROR'

        level = configure_logging(config)

        assert level == logging.ERROR
        mock_basic_config.assert_called_once()
        assert mock_basic_config.call_args.kwargs['level'] == logging.ERROR


class TestSynthesisOptions:
    """Test cases for get_synthesis_options function."""

    def test_defaults(self):
        """Test options built from the default config."""
        assert get_synthesis_options(get_default_config()) == SynthesisOptions()

    def test_custom_values(self):
        """Test options built from custom values."""
        config = get_default_config()
        config['generator']['success_route'] = '/thank-you'
        config['generator']['min_date'] = '2000-06-15'

        options = get_synthesis_options(config)

        assert options.success_route == '/thank-you'
        assert options.min_date == '2000-06-15'

    def test_invalid_values_fall_back(self):
        """Test that invalid values fall back to defaults."""
        config = get_default_config()
        config['generator']['success_route'] = 'thank-you'
        config['generator']['min_date'] = 'yesterday'

        assert get_synthesis_options(config) == SynthesisOptions()

    def test_missing_section(self):
        """Test options when the generator section is absent."""
        assert get_synthesis_options({}) == SynthesisOptions()


class TestConfigSummary:
    """Test cases for summary and value lookup."""

    def test_get_config_summary(self):
        """Test generating config summary."""
        summary = get_config_summary(get_default_config())

        assert summary['app_name'] == 'Form Code Builder'
        assert summary['app_version'] == '1.0.0'
        assert summary['debug_mode'] is False
        assert summary['logging_level'] == 'INFO'
        assert summary['typescript'] is True
        assert summary['success_route'] == '/success'

    def test_get_config_summary_empty_config(self):
        """Test summary of an empty config."""
        summary = get_config_summary({})

        assert summary['app_name'] == 'Unknown'
        assert summary['min_date'] == '1900-01-01'

    def test_get_config_value(self):
        """Test reading nested values with defaults."""
        config = {'ui': {'layout': 'centered'}, 'app': 'broken'}

        assert get_config_value(config, 'ui', 'layout') == 'centered'
        assert get_config_value(config, 'ui', 'page_title', 'X') == 'X'
        assert get_config_value(config, 'app', 'name', 'Y') == 'Y'
        assert get_config_value(config, 'missing', 'key') is None
