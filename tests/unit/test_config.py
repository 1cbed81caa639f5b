"""
Unit tests for server configuration and the command-line entry point.
"""

import logging

import pytest

from minihttp import __version__
from minihttp.__main__ import build_parser, main
from minihttp.config import ServerConfig


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.max_request_size == 8192
        assert config.timeout is None
        assert config.server_name == "mini-py-http/0.1"
        config.validate()

    def test_level(self):
        assert ServerConfig(log_level="debug").level == logging.DEBUG

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"buffer_size": 0},
        {"max_request_size": 3},
        {"timeout": 0},
        {"log_level": "LOUD"},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()

    def test_port_zero_allowed(self):
        ServerConfig(port=0).validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MINIHTTP_HOST", "127.0.0.1")
        monkeypatch.setenv("MINIHTTP_PORT", "3000")
        monkeypatch.setenv("MINIHTTP_MAX_REQUEST_SIZE", "2048")
        monkeypatch.setenv("MINIHTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("MINIHTTP_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 3000
        assert config.max_request_size == 2048
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ["HOST", "PORT", "MAX_REQUEST_SIZE", "TIMEOUT", "LOG_LEVEL"]:
            monkeypatch.delenv(f"MINIHTTP_{name}", raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    def test_from_env_bad_number(self, monkeypatch):
        monkeypatch.setenv("MINIHTTP_PORT", "eighty")

        with pytest.raises(ValueError):
            ServerConfig.from_env()


class TestCommandLine:
    """Tests for the argument parser and main()."""

    def test_parser_defaults_follow_config(self):
        args = build_parser(ServerConfig(port=9000)).parse_args([])

        assert args.port == 9000
        assert args.host == "0.0.0.0"
        assert args.log_level == "INFO"

    def test_parser_overrides(self):
        args = build_parser(ServerConfig()).parse_args(
            ["-H", "127.0.0.1", "-p", "3000", "--timeout", "1.5",
             "--max-request-size", "512", "-l", "debug"]
        )

        assert args.host == "127.0.0.1"
        assert args.port == 3000
        assert args.timeout == 1.5
        assert args.max_request_size == 512
        assert args.log_level == "DEBUG"

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser(ServerConfig()).parse_args(["--version"])

        assert __version__ in capsys.readouterr().out

    def test_main_invalid_config(self, capsys):
        assert main(["--port", "70000"]) == 2
        assert "Invalid port" in capsys.readouterr().err

    def test_main_invalid_env(self, monkeypatch, capsys):
        monkeypatch.setenv("MINIHTTP_PORT", "eighty")

        assert main([]) == 2
        assert "MINIHTTP_" in capsys.readouterr().err
