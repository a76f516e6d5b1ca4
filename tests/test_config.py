import dataclasses
import os
import tempfile
import unittest
from unittest.mock import patch

from cli_translator.config import Config, create_default_config
from cli_translator.errors import ConfigError, PrerequisiteMissing


class TestConfig(unittest.TestCase):
    """Test cases for the Config class."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.missing_file = os.path.join(self.tmp.name, "missing.toml")

    def test_default_values(self):
        """Test that default values are set correctly."""
        with patch.dict(os.environ, {"OPENAI_API_KEY": "test_key"}, clear=True):
            config = Config.load(self.missing_file)

        self.assertEqual(config.api_key, "test_key")
        self.assertEqual(config.api_url, "https://api.openai.com/v1/chat/completions")
        self.assertEqual(config.model, "gpt-4.1-mini")
        self.assertEqual(config.temperature, 0.0)
        self.assertEqual(config.max_tokens, 512)
        self.assertEqual(config.description, "")
        self.assertTrue(config.backup_dir.endswith(".cli_translator_backups"))
        self.assertFalse(config.verbose)
        self.assertTrue(config.stream_output)
        self.assertIsNone(config.request_timeout)
        if os.name != "nt":
            self.assertEqual(config.shell, "/bin/sh")

    def test_custom_values(self):
        """Test that custom values from environment variables are set correctly."""
        env_vars = {
            "OPENAI_API_KEY": "custom_key",
            "CLI_TRANSLATOR_API_URL": "https://llm.example.com/v1/chat/completions",
            "CLI_TRANSLATOR_MODEL": "custom-model",
            "CLI_TRANSLATOR_TEMPERATURE": "0.3",
            "CLI_TRANSLATOR_MAX_TOKENS": "256",
            "CLI_TRANSLATOR_DESCRIPTION": "Debian 12 on a laptop",
            "CLI_TRANSLATOR_SHELL": "/bin/bash",
            "CLI_TRANSLATOR_BACKUP_DIR": "/custom/backups",
            "CLI_TRANSLATOR_LOG_DIR": "/custom/log/dir",
            "CLI_TRANSLATOR_VERBOSE": "true",
            "CLI_TRANSLATOR_STREAM_OUTPUT": "off",
            "CLI_TRANSLATOR_REQUEST_TIMEOUT": "30",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            config = Config.load(self.missing_file)

        self.assertEqual(config.api_key, "custom_key")
        self.assertEqual(config.api_url, "https://llm.example.com/v1/chat/completions")
        self.assertEqual(config.model, "custom-model")
        self.assertEqual(config.temperature, 0.3)
        self.assertEqual(config.max_tokens, 256)
        self.assertEqual(config.description, "Debian 12 on a laptop")
        self.assertEqual(config.shell, "/bin/bash")
        self.assertEqual(config.backup_dir, "/custom/backups")
        self.assertEqual(config.log_dir, "/custom/log/dir")
        self.assertTrue(config.verbose)
        self.assertFalse(config.stream_output)
        self.assertEqual(config.request_timeout, 30.0)

    def test_file_values_and_env_precedence(self):
        """Values come from the TOML file unless the environment overrides them."""
        path = os.path.join(self.tmp.name, "config.toml")
        with open(path, "w") as f:
            f.write('[api]\nCLI_TRANSLATOR_MODEL = "file-model"\nCLI_TRANSLATOR_MAX_TOKENS = 128\n')
            f.write('[system]\nCLI_TRANSLATOR_DESCRIPTION = "from file"\n')

        with patch.dict(os.environ, {"CLI_TRANSLATOR_MODEL": "env-model"}, clear=True):
            config = Config.load(path)

        self.assertEqual(config.model, "env-model")
        self.assertEqual(config.max_tokens, 128)
        self.assertEqual(config.description, "from file")

    def test_overrides_win(self):
        with patch.dict(os.environ, {"CLI_TRANSLATOR_MODEL": "env-model"}, clear=True):
            config = Config.load(self.missing_file, model="flag-model", verbose=None)

        self.assertEqual(config.model, "flag-model")
        self.assertFalse(config.verbose)

    def test_unknown_override(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigError):
                Config.load(self.missing_file, colour="blue")

    def test_invalid_numbers(self):
        for key, value in (
            ("CLI_TRANSLATOR_MAX_TOKENS", "lots"),
            ("CLI_TRANSLATOR_MAX_TOKENS", "0"),
            ("CLI_TRANSLATOR_TEMPERATURE", "warm"),
            ("CLI_TRANSLATOR_VERBOSE", "maybe"),
        ):
            with self.subTest(key=key, value=value):
                with patch.dict(os.environ, {key: value}, clear=True):
                    with self.assertRaises(ConfigError):
                        Config.load(self.missing_file)

    def test_unreadable_file_is_ignored(self):
        path = os.path.join(self.tmp.name, "broken.toml")
        with open(path, "w") as f:
            f.write("this is = = not toml")

        with patch.dict(os.environ, {}, clear=True):
            config = Config.load(path)

        self.assertEqual(config.model, "gpt-4.1-mini")

    def test_missing_api_key(self):
        """The credential check fails before anything else happens."""
        config = Config(api_key=None, shell=None)
        with self.assertRaises(PrerequisiteMissing) as ctx:
            config.check_prerequisites()
        self.assertIn("OPENAI_API_KEY", str(ctx.exception))

    def test_missing_shell(self):
        config = Config(api_key="key", shell="/nonexistent/bin/zsh-nope")
        with self.assertRaises(PrerequisiteMissing) as ctx:
            config.check_prerequisites()
        self.assertIn("zsh-nope", str(ctx.exception))

    def test_prerequisites_present(self):
        Config(api_key="key", shell=None).check_prerequisites()

    def test_config_is_immutable(self):
        config = Config(api_key="key")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            config.model = "other"

    def test_str_masks_api_key(self):
        text = str(Config(api_key="sk-1234567890abcdef"))
        self.assertNotIn("sk-1234567890abcdef", text)
        self.assertIn("sk-1...cdef", text)

    def test_create_default_config(self):
        path = os.path.join(self.tmp.name, "nested", "config.toml")

        self.assertTrue(create_default_config(path))
        self.assertFalse(create_default_config(path))

        with patch.dict(os.environ, {}, clear=True):
            config = Config.load(path)
        self.assertEqual(config.model, "gpt-4.1-mini")
        self.assertEqual(config.max_tokens, 512)
        self.assertTrue(config.stream_output)


if __name__ == "__main__":
    unittest.main()
