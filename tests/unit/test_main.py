"""Unit tests for the server entry point."""

from unittest.mock import MagicMock, patch

import pytest_check as check

import src.main as main_module


class TestServerSettings:
    """Tests for host/port resolution."""

    def test_defaults(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            settings = main_module.server_settings()

        check.equal(settings, {"host": "0.0.0.0", "port": 8000, "log_level": "info"})

    def test_configured_port_and_host(self) -> None:
        env = {"HOST": "127.0.0.1", "PORT": "9123", "LOG_LEVEL": "DEBUG"}
        with patch.dict("os.environ", env, clear=True):
            settings = main_module.server_settings()

        check.equal(settings, {"host": "127.0.0.1", "port": 9123, "log_level": "debug"})


class TestMain:
    """main() serves the single combined app."""

    @patch("uvicorn.run")
    @patch.object(main_module, "build_app")
    def test_runs_combined_app_on_configured_port(
        self, mock_build: MagicMock, mock_run: MagicMock
    ) -> None:
        with patch.dict("os.environ", {"PORT": "9500"}):
            main_module.main()

        mock_build.assert_called_once_with()
        mock_run.assert_called_once()
        check.is_(mock_run.call_args.args[0], mock_build.return_value)
        check.equal(mock_run.call_args.kwargs["port"], 9500)
