"""Tests for resolving the command line into a GlobalConfig."""

import pytest

from rtsp_proxy.config import resolve_config
from rtsp_proxy.exceptions import ConfigurationError, NothingToServe
from rtsp_proxy.models import Credentials, TransportMode, Verbosity


class TestDefaults:
    """Plain invocations."""

    def test_single_url(self):
        config = resolve_config(["rtsp://a/1"])
        assert config.source_urls == ("rtsp://a/1",)
        assert config.rtsp_port == 554
        assert config.verbosity == Verbosity.QUIET
        assert config.transport == TransportMode.normal()
        assert config.default_credentials is None
        assert config.register_proxying is False
        assert config.definitions_file is None

    def test_resolution_is_deterministic(self):
        argv = ["-v", "-p", "8555", "-u", "alice", "secret", "rtsp://a/1", "rtsp://a/2"]
        assert resolve_config(argv) == resolve_config(list(argv))


class TestFlags:
    """Individual flags."""

    def test_verbosity_levels(self):
        assert resolve_config(["-v", "rtsp://a/1"]).verbosity == Verbosity.VERBOSE
        assert resolve_config(["-V", "rtsp://a/1"]).verbosity == Verbosity.VERY_VERBOSE

    def test_last_verbosity_wins(self):
        assert resolve_config(["-V", "-v", "rtsp://a/1"]).verbosity == Verbosity.VERBOSE

    def test_force_tcp(self):
        config = resolve_config(["-t", "rtsp://a/1"])
        assert config.transport.kind == TransportMode.FORCE_TCP
        assert config.transport.engine_tunnel_port == 0xFFFF

    def test_tunnel_over_http(self):
        config = resolve_config(["-T", "8080", "rtsp://a/1"])
        assert config.transport == TransportMode.tunnel_over_http(8080)
        assert config.transport.engine_tunnel_port == 8080

    def test_rtsp_port(self):
        assert resolve_config(["-p", "8555", "rtsp://a/1"]).rtsp_port == 8555

    def test_default_credentials(self):
        config = resolve_config(["-u", "alice", "secret", "rtsp://a/1"])
        assert config.default_credentials == Credentials("alice", "secret")
        assert config.default_username == "alice"
        assert config.default_password == "secret"

    def test_register_proxying_alone_is_enough(self):
        config = resolve_config(["-R"])
        assert config.register_proxying is True
        assert config.source_urls == ()
        assert config.register_auth_db() is None

    def test_register_credentials(self):
        config = resolve_config(["-R", "-U", "reg", "regpass"])
        assert config.register_credentials == Credentials("reg", "regpass")
        auth_db = config.register_auth_db()
        assert auth_db.lookup_password("reg") == "regpass"

    def test_definitions_file_alone_is_enough(self):
        config = resolve_config(["-f", "streams.txt"])
        assert config.definitions_file == "streams.txt"

    def test_flag_order_does_not_matter(self):
        a = resolve_config(["-t", "-p", "9000", "-u", "x", "y", "rtsp://a/1"])
        b = resolve_config(["-u", "x", "y", "-p", "9000", "-t", "rtsp://a/1"])
        assert a == b


class TestRejected:
    """Every rejected combination raises ConfigurationError."""

    @pytest.mark.parametrize("argv", [
        ["-t", "-T", "8080", "rtsp://a/1"],
        ["-T", "8080", "-t", "rtsp://a/1"],
        ["-v", "-t", "-T", "8080", "-R", "-f", "x.txt"],
        ["-t", "-T", "8080", "-u", "a", "b", "-p", "8554", "rtsp://a/1"],
    ])
    def test_force_tcp_and_tunnel_are_exclusive(self, argv):
        with pytest.raises(ConfigurationError):
            resolve_config(argv)

    @pytest.mark.parametrize("argv", [
        ["-x", "rtsp://a/1"],
        ["--port", "80", "rtsp://a/1"],
        ["-h"],
    ])
    def test_unknown_flag(self, argv):
        with pytest.raises(ConfigurationError):
            resolve_config(argv)

    @pytest.mark.parametrize("flag", ["-u", "-U"])
    def test_credentials_need_two_values(self, flag):
        with pytest.raises(ConfigurationError):
            resolve_config(["-R", flag, "only"])
        with pytest.raises(ConfigurationError):
            resolve_config(["-R", flag])

    @pytest.mark.parametrize("flag", ["-p", "-T"])
    @pytest.mark.parametrize("value", ["0", "-1", "65536", "http", "80x", "5_54", " 80", "+80", "\u0665\u0665\u0664"])
    def test_bad_port_values(self, flag, value):
        with pytest.raises(ConfigurationError):
            resolve_config([flag, value, "rtsp://a/1"])

    @pytest.mark.parametrize("argv", [
        ["-tV", "rtsp://a/1"],
        ["-vR"],
        ["-p554", "rtsp://a/1"],
        ["-T8080", "rtsp://a/1"],
        ["-ffile.txt"],
    ])
    def test_flags_must_stand_alone(self, argv):
        with pytest.raises(ConfigurationError):
            resolve_config(argv)

    @pytest.mark.parametrize("flag", ["-p", "-T", "-f"])
    def test_missing_flag_value(self, flag):
        with pytest.raises(ConfigurationError):
            resolve_config(["-R", flag])

    def test_register_credentials_require_register_proxying(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config(["-U", "reg", "regpass", "rtsp://a/1"])
        assert "-R" in exc_info.value.message

    def test_positional_must_be_rtsp(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_config(["rtsp://a/1", "http://a/2"])
        assert "http://a/2" in exc_info.value.message

    @pytest.mark.parametrize("argv", [[], ["-v"], ["-t", "-p", "8554"], ["-u", "a", "b"]])
    def test_nothing_to_serve(self, argv):
        with pytest.raises(NothingToServe):
            resolve_config(argv)

    def test_nothing_to_serve_is_a_configuration_error(self):
        assert issubclass(NothingToServe, ConfigurationError)
