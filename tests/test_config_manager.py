"""Tests for configuration management."""

import json
import os
import tempfile
import unittest

import yaml

from dofx.utils.config_manager import ConfigManager, ConfigError, validate_config_value
from dofx.models.core import DofxConfig


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager"""

    def setUp(self):
        """Set up test fixtures"""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, 'test_config.json')

    def tearDown(self):
        """Clean up test fixtures"""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_default_config_loading(self):
        """Test loading default configuration when no file exists"""
        manager = ConfigManager(config_path="nonexistent_file.json")
        config = manager.load_config()

        self.assertIsInstance(config, DofxConfig)
        self.assertEqual(config.encoding, "iso-8859-1")
        self.assertEqual(config.output_suffix, "_cleaned")
        self.assertEqual(config.fitid_length, 9)
        self.assertEqual(config.report_order, "first_seen")
        self.assertEqual(config.error_policy, "abort")
        self.assertIsNone(config.seed)
        self.assertIsNone(config.log_directory)

    def test_json_config_loading(self):
        """Test loading configuration from JSON file"""
        with open(self.config_file, 'w') as f:
            json.dump({
                "encoding": "cp1252",
                "output_suffix": "_dedup",
                "report_order": "identifier",
                "error_policy": "continue",
                "seed": 17
            }, f)

        config = ConfigManager(config_path=self.config_file).load_config()

        self.assertEqual(config.encoding, "cp1252")
        self.assertEqual(config.output_suffix, "_dedup")
        self.assertEqual(config.report_order, "identifier")
        self.assertEqual(config.error_policy, "continue")
        self.assertEqual(config.seed, 17)
        self.assertEqual(config.fitid_length, 9)

    def test_yaml_config_loading(self):
        """Test loading configuration from YAML file"""
        yaml_file = os.path.join(self.temp_dir, 'config.yml')
        with open(yaml_file, 'w') as f:
            yaml.dump({"fitid_length": 12, "fitid_alphabet": "ABC123"}, f)

        config = ConfigManager(config_path=yaml_file).load_config()

        self.assertEqual(config.fitid_length, 12)
        self.assertEqual(config.fitid_alphabet, "ABC123")

    def test_invalid_config_falls_back_to_defaults(self):
        """Invalid values in a config file are rejected as a whole"""
        with open(self.config_file, 'w') as f:
            json.dump({"report_order": "random", "output_suffix": "_x"}, f)

        config = ConfigManager(config_path=self.config_file).load_config()

        self.assertEqual(config.report_order, "first_seen")
        self.assertEqual(config.output_suffix, "_cleaned")

    def test_unsupported_file_format(self):
        txt_file = os.path.join(self.temp_dir, 'config.txt')
        with open(txt_file, 'w') as f:
            f.write("encoding = utf-8")

        config = ConfigManager(config_path=txt_file).load_config()
        self.assertEqual(config.encoding, "iso-8859-1")

    def test_config_caching(self):
        manager = ConfigManager(config_path="nonexistent_file.json")
        self.assertIs(manager.load_config(), manager.load_config())
        first = manager.load_config()
        manager.reset_config()
        self.assertIsNot(manager.load_config(), first)

    def test_update_config(self):
        manager = ConfigManager(config_path="nonexistent_file.json")
        manager.update_config({"seed": 5, "error_policy": "continue"})
        config = manager.load_config()

        self.assertEqual(config.seed, 5)
        self.assertEqual(config.error_policy, "continue")

    def test_update_config_rejects_bad_values(self):
        manager = ConfigManager(config_path="nonexistent_file.json")
        with self.assertRaises(ConfigError):
            manager.update_config({"error_policy": "retry"})
        with self.assertRaises(ConfigError):
            manager.update_config({"no_such_key": 1})

    def test_validate_config_value(self):
        validate_config_value("encoding", "latin-1")
        with self.assertRaises(ConfigError):
            validate_config_value("encoding", "not-a-codec")
        with self.assertRaises(ConfigError):
            validate_config_value("fitid_length", 0)
        with self.assertRaises(ConfigError):
            validate_config_value("fitid_length", True)
        with self.assertRaises(ConfigError):
            validate_config_value("output_suffix", "a/b")
        with self.assertRaises(ConfigError):
            validate_config_value("seed", "abc")

    def test_save_config_template(self):
        """Test generating configuration templates"""
        template_path = os.path.join(self.temp_dir, 'nested', 'template.json')
        ConfigManager().save_config_template(template_path)

        with open(template_path, 'r') as f:
            template = json.load(f)
        self.assertEqual(template["output_suffix"], "_cleaned")
        self.assertEqual(template["encoding"], "iso-8859-1")

        config = ConfigManager(config_path=template_path).load_config()
        self.assertEqual(config.fitid_length, 9)

    def test_save_yaml_template(self):
        template_path = os.path.join(self.temp_dir, 'template.yaml')
        ConfigManager().save_config_template(template_path)

        with open(template_path, 'r') as f:
            template = yaml.safe_load(f)
        self.assertEqual(template["error_policy"], "abort")


if __name__ == '__main__':
    unittest.main()
