#!/usr/bin/env python3
"""
Tests for configuration loading and validation.

Usage:
    python -m unittest test_config_validator
"""

import os
import tempfile
import textwrap
import unittest
from unittest.mock import patch

from quotebot.config.loader import build_settings, get_config, merge_environment
from quotebot.config.settings import DeliveryMode
from quotebot.config.validator import ConfigValidationError, validate_config


WEBHOOK_URL = "https://discord.com/api/webhooks/123/abc"


class TestValidateConfig(unittest.TestCase):
    def test_webhook_mode_needs_no_bot_token(self):
        with self.assertLogs("quotebot.config.validator", "WARNING") as logs:
            validate_config({"discord_webhook_url": WEBHOOK_URL})
        self.assertTrue(any("AI_API_KEY" in line for line in logs.output))

    def test_bot_mode_requires_token_and_channel(self):
        with self.assertLogs("quotebot.config.validator", "ERROR") as logs:
            with self.assertRaises(ConfigValidationError):
                validate_config({"ai_api_key": "sk"})
        output = "\n".join(logs.output)
        self.assertIn("DISCORD_BOT_TOKEN", output)
        self.assertIn("DISCORD_CHANNEL_ID", output)

    def test_channel_id_must_be_numeric(self):
        with self.assertLogs("quotebot.config.validator", "ERROR"):
            with self.assertRaises(ConfigValidationError):
                validate_config({"discord_bot_token": "t", "discord_channel_id": "general", "ai_api_key": "sk"})

    def test_invalid_cron(self):
        with self.assertLogs("quotebot.config.validator", "ERROR"):
            with self.assertRaises(ConfigValidationError):
                validate_config({"discord_webhook_url": WEBHOOK_URL, "daily_cron": "every day"})

    def test_out_of_range_cron_is_a_config_error(self):
        for cron in ("61 9 * * *", "0 25 * * *", "0 9 * * 9"):
            with self.assertLogs("quotebot.config.validator", "ERROR") as logs:
                with self.assertRaises(ConfigValidationError):
                    validate_config({"discord_webhook_url": WEBHOOK_URL, "ai_api_key": "sk", "daily_cron": cron})
            self.assertIn("Invalid DAILY_CRON", "\n".join(logs.output))

    def test_weekday_ranges_from_sunday_are_valid(self):
        for cron in ("0 9 * * 0-5", "0 9 * * 0-6", "0 9 * * 5-7", "30 8 * * 1-5"):
            validate_config({"discord_webhook_url": WEBHOOK_URL, "ai_api_key": "sk", "daily_cron": cron})

    def test_unknown_timezone(self):
        with self.assertLogs("quotebot.config.validator", "ERROR"):
            with self.assertRaises(ConfigValidationError):
                validate_config({"discord_webhook_url": WEBHOOK_URL, "timezone": "Mars/Olympus_Mons"})

    def test_unknown_language_only_warns(self):
        with self.assertLogs("quotebot.config.validator", "WARNING") as logs:
            validate_config({"discord_webhook_url": WEBHOOK_URL, "ai_api_key": "sk", "language": "FR"})
        self.assertIn("'FR'", logs.output[0])

    def test_half_configured_clickup_warns(self):
        with self.assertLogs("quotebot.config.validator", "WARNING") as logs:
            validate_config({"discord_webhook_url": WEBHOOK_URL, "ai_api_key": "sk", "clickup_token": "pk"})
        self.assertIn("CLICKUP_TEAM_ID", logs.output[0])


class TestBuildSettings(unittest.TestCase):
    def test_defaults(self):
        settings = build_settings({"discord_bot_token": "t", "discord_channel_id": "555"})
        self.assertEqual(settings.delivery_mode, DeliveryMode.BOT)
        self.assertEqual(settings.discord.channel_id, 555)
        self.assertEqual(settings.timezone, "Asia/Yangon")
        self.assertEqual(settings.cron, "0 9 * * *")
        self.assertEqual(settings.language, "EN_MM")
        self.assertFalse(settings.send_now)
        self.assertEqual(settings.ai.api_url, "https://openrouter.ai/api/v1/chat/completions")
        self.assertEqual(settings.ai.model, "qwen/qwen3-coder:free")
        self.assertEqual(settings.ai.max_tokens, 120)
        self.assertEqual(settings.ai.temperature, 0.8)
        self.assertIsNone(settings.ai.api_key)
        self.assertFalse(settings.clickup.enabled)
        self.assertEqual(settings.discord.status_message, "Daily Dev Quotes")

    def test_numeric_options_fall_back_when_not_numeric_or_zero(self):
        for raw in ("abc", "", "0", "nan", None):
            settings = build_settings({"ai_max_tokens": raw, "ai_temperature": raw})
            self.assertEqual(settings.ai.max_tokens, 120)
            self.assertEqual(settings.ai.temperature, 0.8)

        settings = build_settings({"ai_max_tokens": "200", "ai_temperature": "0.3"})
        self.assertEqual(settings.ai.max_tokens, 200)
        self.assertEqual(settings.ai.temperature, 0.3)

    def test_webhook_url_selects_webhook_mode(self):
        settings = build_settings({"discord_webhook_url": WEBHOOK_URL})
        self.assertEqual(settings.delivery_mode, DeliveryMode.WEBHOOK)

    def test_send_now_flag(self):
        self.assertTrue(build_settings({"send_now": "1"}).send_now)
        self.assertFalse(build_settings({"send_now": "0"}).send_now)

    def test_settings_are_immutable(self):
        settings = build_settings({})
        with self.assertRaises(AttributeError):
            settings.language = "MM"


class TestGetConfig(unittest.TestCase):
    def write_yaml(self, text):
        fd, path = tempfile.mkstemp(suffix=".yaml")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(textwrap.dedent(text))
        self.addCleanup(os.remove, path)
        return path

    def test_environment_only(self):
        settings = get_config(environ={
            "CONFIG_PATH": "",
            "DISCORD_WEBHOOK_URL": WEBHOOK_URL,
            "AI_API_KEY": "sk-test",
            "LANGUAGE": "MM",
            "SEND_NOW": "1",
            "CLICKUP_TOKEN": "pk_1",
            "CLICKUP_TEAM_ID": "42",
        })
        self.assertEqual(settings.delivery_mode, DeliveryMode.WEBHOOK)
        self.assertEqual(settings.ai.api_key, "sk-test")
        self.assertEqual(settings.language, "MM")
        self.assertTrue(settings.send_now)
        self.assertTrue(settings.clickup.enabled)

    def test_environment_overrides_yaml(self):
        path = self.write_yaml("""
            discord_bot_token: from-yaml
            discord_channel_id: 555
            ai_api_key: sk-yaml
            language: EN
            daily_cron: "30 8 * * 1-5"
        """)
        settings = get_config(environ={"CONFIG_PATH": path, "LANGUAGE": "EN_MM", "DISCORD_BOT_TOKEN": ""})
        self.assertEqual(settings.discord.bot_token, "from-yaml")
        self.assertEqual(settings.discord.channel_id, 555)
        self.assertEqual(settings.language, "EN_MM")
        self.assertEqual(settings.cron, "30 8 * * 1-5")

    def test_missing_explicit_config_file_exits(self):
        with self.assertLogs(level="ERROR"):
            with self.assertRaises(SystemExit) as ctx:
                get_config(environ={"CONFIG_PATH": "/nonexistent/quotebot.yaml"})
        self.assertEqual(ctx.exception.code, 1)

    def test_non_mapping_yaml_exits(self):
        path = self.write_yaml("- just\n- a list\n")
        with self.assertLogs(level="ERROR"):
            with self.assertRaises(SystemExit):
                get_config(environ={"CONFIG_PATH": path})

    def test_validation_failure_exits(self):
        with self.assertLogs("quotebot.config.validator", "ERROR"):
            with self.assertRaises(SystemExit) as ctx:
                get_config(environ={"CONFIG_PATH": "", "DAILY_CRON": "0 9 * *"})
        self.assertEqual(ctx.exception.code, 1)

    def test_dotenv_is_read_once_and_only_for_the_process_environment(self):
        environ = {"DISCORD_WEBHOOK_URL": WEBHOOK_URL, "AI_API_KEY": "sk", "CONFIG_PATH": ""}
        with patch("quotebot.config.loader.load_dotenv") as load_dotenv:
            get_config(environ=environ)
            load_dotenv.assert_not_called()

            with patch.dict(os.environ, environ, clear=True):
                settings = get_config()
            load_dotenv.assert_called_once_with()
        self.assertEqual(settings.delivery_mode, DeliveryMode.WEBHOOK)

    def test_merge_ignores_unknown_and_empty_variables(self):
        merged = merge_environment({"language": "MM"}, {"LANGUAGE": "", "HOME": "/root", "TIMEZONE": "UTC"})
        self.assertEqual(merged, {"language": "MM", "timezone": "UTC"})


if __name__ == "__main__":
    unittest.main()
