"""
Pytest configuration and fixtures for RTSP proxy tests
"""

import pytest

from rtsp_proxy.engine import Listener, MediaEngine, Session
from rtsp_proxy.exceptions import EngineError


class FakeEngine(MediaEngine):
    """Scripted engine that records every call instead of binding sockets"""

    def __init__(self, busy_ports=(), failing_streams=(), tunnel_ports=(8000,), loop_error=None):
        self.busy_ports = set(busy_ports)
        self.failing_streams = set(failing_streams)
        self.tunnel_ports = set(tunnel_ports)
        self.listener_attempts = []
        self.listener_kwargs = []
        self.published = []
        self.tunnel_attempts = []
        self.loop_runs = 0
        self.loop_error = loop_error
        self.closed = []

    def create_listener(self, port, auth_db=None, register_auth_db=None, register_proxying=False):
        self.listener_attempts.append(port)
        self.listener_kwargs.append({
            "auth_db": auth_db,
            "register_auth_db": register_auth_db,
            "register_proxying": register_proxying,
        })
        if port in self.busy_ports:
            raise EngineError(f"port {port} in use")
        return Listener(port=port, register_proxying=register_proxying, register_auth_db=register_auth_db)

    def publish_session(self, listener, source_url, name, username, password, transport, verbosity):
        if name in self.failing_streams:
            raise EngineError("upstream refused")
        session = Session(name, source_url, username, password, transport, verbosity)
        listener.sessions[name] = session
        self.published.append(session)
        return session

    def playback_url(self, listener, session):
        return f"rtsp://proxy.test:{listener.port}/{session.name}"

    def enable_tunneling(self, listener, port):
        self.tunnel_attempts.append(port)
        if port in self.tunnel_ports:
            listener.tunnel_port = port
            return True
        return False

    def run_event_loop(self, listener):
        self.loop_runs += 1
        if self.loop_error is not None:
            raise self.loop_error

    def close(self, listener):
        self.closed.append(listener.port)


@pytest.fixture
def fake_engine():
    """Engine with every port free"""
    return FakeEngine()


@pytest.fixture
def write_definitions(tmp_path):
    """Write a definitions file and return its path"""

    def _write(content, filename="streams.txt"):
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def make_engine():
    """Factory for scripted engines"""
    return FakeEngine
