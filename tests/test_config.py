#!/usr/bin/env python3
"""
Unit tests for configuration loading.
"""

import os
import unittest
from unittest.mock import patch

from chat_room_api.app.config import Config, config, get_settings


class TestConfig(unittest.TestCase):
    def setUp(self):
        config.reset()

    def tearDown(self):
        config.reset()

    def test_singleton(self):
        self.assertIs(Config(), config)

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = get_settings()

        self.assertEqual(settings.redis_url, "redis://localhost:6379/0")
        self.assertEqual(settings.chat_namespace, "bate-papo-uol")
        self.assertEqual(settings.chat_port, 5000)
        self.assertEqual(settings.sweep_interval_ms, 15000)
        self.assertEqual(settings.staleness_threshold_ms, 10000)
        self.assertEqual(settings.cors_allow_origins, ["*"])
        self.assertEqual(settings.log_level, "INFO")

    def test_environment_overrides(self):
        env = {
            "REDIS_URL": "redis://cache:6380/1",
            "CHAT_PORT": "8080",
            "STALENESS_THRESHOLD_MS": "30000",
            "CORS_ALLOW_ORIGINS": "http://a.example, http://b.example",
            "LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = get_settings()

        self.assertEqual(settings.redis_url, "redis://cache:6380/1")
        self.assertEqual(settings.chat_port, 8080)
        self.assertEqual(settings.staleness_threshold_ms, 30000)
        self.assertEqual(settings.cors_allow_origins, ["http://a.example", "http://b.example"])
        self.assertEqual(settings.log_level, "DEBUG")

    def test_settings_are_cached(self):
        with patch.dict(os.environ, {"CHAT_PORT": "6000"}, clear=True):
            first = get_settings()
        with patch.dict(os.environ, {"CHAT_PORT": "7000"}, clear=True):
            self.assertIs(get_settings(), first)

    def test_invalid_values(self):
        for env in ({"CHAT_PORT": "http"}, {"SWEEP_INTERVAL_MS": "0"}, {"REDIS_URL": ""}):
            with self.subTest(env=env):
                config.reset()
                with patch.dict(os.environ, env, clear=True):
                    with self.assertRaises(ValueError):
                        get_settings()


if __name__ == "__main__":
    unittest.main()
