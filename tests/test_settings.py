"""Tests for environment-driven settings and shared helpers."""

import logging
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from coursegraph.config import CatalogConfig, OracleConfig, PipelineSettings, SchemaConfig
from coursegraph.core.exceptions import InvalidConfigurationError
from coursegraph.utils.helpers import retry_on_exception, setup_logging, str_to_bool


class TestPipelineSettings(unittest.TestCase):

    def test_defaults(self):
        settings = PipelineSettings.from_env({})
        self.assertEqual(settings.api_key, "")
        self.assertEqual(settings.model, OracleConfig.DEFAULT_MODEL)
        self.assertEqual(settings.base_url, OracleConfig.BASE_URL)
        self.assertEqual(settings.catalog_url, CatalogConfig.OUTLINES_URL)
        self.assertEqual(settings.data_dir, Path("generated_data"))
        self.assertEqual(settings.schema_version, SchemaConfig.SCHEMA_VERSION)
        self.assertEqual(settings.request_timeout, 60)
        self.assertEqual(settings.max_retries, 2)
        self.assertFalse(settings.debug)

    def test_overrides(self):
        settings = PipelineSettings.from_env({
            "OPENROUTER_API_KEY": " sk-test ",
            "LLM_MODEL": "openai/gpt-4o-mini",
            "LLM_BASE_URL": "http://localhost:8080/v1/",
            "DATA_DIR": "/tmp/coursegraph",
            "REQUEST_TIMEOUT": "15",
            "MAX_RETRIES": "0",
            "DEBUG": "yes",
        })
        self.assertEqual(settings.api_key, "sk-test")
        self.assertEqual(settings.model, "openai/gpt-4o-mini")
        self.assertEqual(settings.base_url, "http://localhost:8080/v1")
        self.assertEqual(settings.data_dir, Path("/tmp/coursegraph"))
        self.assertEqual(settings.request_timeout, 15)
        self.assertEqual(settings.max_retries, 0)
        self.assertTrue(settings.debug)

    def test_bad_integer(self):
        with self.assertRaises(InvalidConfigurationError):
            PipelineSettings.from_env({"REQUEST_TIMEOUT": "soon"})

    def test_require_api_key(self):
        with self.assertRaises(InvalidConfigurationError):
            PipelineSettings.from_env({}).require_api_key()
        PipelineSettings.from_env({"OPENROUTER_API_KEY": "sk"}).require_api_key()


class TestHelpers(unittest.TestCase):

    def test_str_to_bool(self):
        for value in ("1", "true", "True", " yes ", "on"):
            self.assertTrue(str_to_bool(value))
        for value in ("0", "false", "", "off", "nope"):
            self.assertFalse(str_to_bool(value))

    @patch("coursegraph.utils.helpers.sleep")
    def test_retry_until_success(self, mock_sleep):
        func = Mock(side_effect=[ConnectionError("down"), "ok"])
        func.__name__ = "fetch"
        wrapped = retry_on_exception(max_retries=2, delay=0.5, exceptions=(ConnectionError,))(func)
        self.assertEqual(wrapped(), "ok")
        self.assertEqual(func.call_count, 2)
        mock_sleep.assert_called_once_with(0.5)

    @patch("coursegraph.utils.helpers.sleep")
    def test_retry_reraises_last_error(self, mock_sleep):
        func = Mock(side_effect=ConnectionError("down"))
        func.__name__ = "fetch"
        wrapped = retry_on_exception(max_retries=1, delay=0, exceptions=(ConnectionError,))(func)
        with self.assertRaises(ConnectionError):
            wrapped()
        self.assertEqual(func.call_count, 2)

    def test_retry_ignores_other_exceptions(self):
        func = Mock(side_effect=ValueError("bad"))
        wrapped = retry_on_exception(max_retries=3, exceptions=(ConnectionError,))(func)
        with self.assertRaises(ValueError):
            wrapped()
        self.assertEqual(func.call_count, 1)

    @patch("coursegraph.utils.helpers.logging.basicConfig")
    def test_setup_logging_quiets_http_loggers(self, mock_basic_config):
        setup_logging(logging.DEBUG)
        self.assertEqual(mock_basic_config.call_args.kwargs["level"], logging.DEBUG)
        self.assertEqual(logging.getLogger("urllib3").level, logging.WARNING)

    @patch("coursegraph.utils.helpers.logging.basicConfig")
    def test_setup_logging_creates_log_directory(self, mock_basic_config):
        tmp = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, tmp, True)
        log_file = tmp / "logs" / "nightly" / "run.log"

        setup_logging(log_file=str(log_file))

        file_handler = mock_basic_config.call_args.kwargs["handlers"][-1]
        self.addCleanup(file_handler.close)
        self.assertEqual(Path(file_handler.baseFilename), log_file)
        self.assertTrue(log_file.parent.is_dir())


if __name__ == '__main__':
    unittest.main()
