import logging
import os

import structlog

from versionbridge.config import LoggingConfig
from versionbridge.utils.structlog_configurator import (
    _add_static_context,
    _configure_handlers,
    _configure_processors,
    _use_json,
    configure_structlog,
    get_logger,
    is_docker_environment,
)


class TestEnvironmentDetection:
    """Test environment detection functions."""

    def test_is_docker_environment__dockerenv(self, mocker):
        """Should return True when /.dockerenv exists."""
        mocker.patch("os.path.exists", return_value=True)
        assert is_docker_environment() is True

    def test_is_docker_environment__env_var(self, mocker):
        """Should return True when DOCKER_CONTAINER env var is set."""
        mocker.patch("os.path.exists", return_value=False)
        mocker.patch.dict(os.environ, {"DOCKER_CONTAINER": "true"})
        assert is_docker_environment() is True

    def test_is_docker_environment_false(self, mocker):
        """Should return False when no Docker indicators present."""
        mocker.patch("os.path.exists", return_value=False)
        mocker.patch.dict(os.environ, {}, clear=True)
        assert is_docker_environment() is False


class TestOutputFormat:
    """Test JSON versus console rendering choice."""

    def test_env_var_forces_json(self, mocker):
        """Should use JSON when VERSIONBRIDGE_JSON_LOGS is true."""
        mocker.patch.dict(os.environ, {"VERSIONBRIDGE_JSON_LOGS": "true"})
        assert _use_json(LoggingConfig(json_logs=False)) is True

    def test_explicit_setting(self, mocker):
        """Should follow an explicit json_logs setting."""
        mocker.patch.dict(os.environ, {}, clear=True)
        mocker.patch(
            "versionbridge.utils.structlog_configurator.is_docker_environment",
            return_value=True,
        )
        assert _use_json(LoggingConfig(json_logs=False)) is False

    def test_auto_detect_docker(self, mocker):
        """Should use JSON inside Docker when json_logs is unset."""
        mocker.patch.dict(os.environ, {}, clear=True)
        mocker.patch(
            "versionbridge.utils.structlog_configurator.is_docker_environment",
            return_value=True,
        )
        assert _use_json(LoggingConfig()) is True


class TestProcessors:
    """Test processor configuration."""

    def test_static_context(self):
        """Should merge static fields into every event."""
        processor = _add_static_context({"service": "versionbridge"})

        event = processor(None, "info", {"event": "hello"})

        assert event == {"event": "hello", "service": "versionbridge"}

    def test_json_renderer_last(self, mocker):
        """Should end with the JSON renderer when JSON output is selected."""
        mocker.patch.dict(os.environ, {}, clear=True)
        processors = _configure_processors(LoggingConfig(json_logs=True))

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_last(self, mocker):
        """Should end with the console renderer otherwise."""
        mocker.patch.dict(os.environ, {}, clear=True)
        processors = _configure_processors(LoggingConfig(json_logs=False))

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_caller_info(self, mocker):
        """Should add call-site parameters when include_caller is set."""
        mocker.patch.dict(os.environ, {}, clear=True)
        processors = _configure_processors(LoggingConfig(json_logs=True, include_caller=True))

        assert any(
            isinstance(p, structlog.processors.CallsiteParameterAdder) for p in processors
        )


class TestConfigure:
    """Test full configuration."""

    def test_configure_handlers_replaces_root_handlers(self):
        """Should leave exactly one handler on the root logger."""
        root_logger = logging.getLogger()
        root_logger.addHandler(logging.NullHandler())

        _configure_handlers(logging.WARNING)

        assert len(root_logger.handlers) == 1
        assert root_logger.level == logging.WARNING

    def test_configure_structlog(self, mocker):
        """Should configure structlog with the requested level."""
        mock_configure = mocker.patch("structlog.configure")

        configure_structlog(LoggingConfig(level="ERROR", json_logs=True))

        kwargs = mock_configure.call_args.kwargs
        assert kwargs["cache_logger_on_first_use"] is True
        assert isinstance(kwargs["processors"][-1], structlog.processors.JSONRenderer)
        assert logging.getLogger().level == logging.ERROR

    def test_get_logger(self):
        """Should return a usable logger."""
        logger = get_logger("versionbridge.test")

        assert hasattr(logger, "info")
