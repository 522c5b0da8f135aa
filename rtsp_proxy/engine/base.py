#!/usr/bin/env python3
"""
Base Media Engine Module

This module defines the contract between the bootstrap orchestrator and the
media engine that actually serves RTSP clients and pulls the upstream streams.
It also holds the listener and session records the engine hands back.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the imports
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from rtsp_proxy.models import AuthDatabase, TransportMode, Verbosity

"""
A published proxy session

One relayed upstream stream, reachable by clients under its name.
"""
@dataclass
class Session:
    """A published proxy session"""
    name: str
    source_url: str
    username: Optional[str] = None
    password: Optional[str] = None
    transport: TransportMode = field(default_factory=TransportMode.normal)
    verbosity: Verbosity = Verbosity.QUIET

"""
An RTSP listener created by the engine

Holds the bound port, the published sessions, and the optional HTTP tunneling port.
"""
@dataclass
class Listener:
    """An RTSP listener created by the engine"""
    port: int
    auth_db: Optional[AuthDatabase] = None
    register_proxying: bool = False
    register_auth_db: Optional[AuthDatabase] = None
    sessions: Dict[str, Session] = field(default_factory=dict)
    tunnel_port: Optional[int] = None
    sock: Any = None
    tunnel_sock: Any = None

"""
Media engine contract

Concrete engines bind the sockets, manage the proxy sessions, and run the
event loop. Failures of create_listener and publish_session are reported by
raising EngineError.
"""
class MediaEngine:

    """
    Create the RTSP listener

    @param port: int Port to listen on
    @param auth_db: AuthDatabase Optional client access control database
    @param register_auth_db: AuthDatabase Optional database for REGISTER authentication
    @param register_proxying: bool Whether to accept incoming REGISTER requests
    @return Listener: The bound listener
    @throws EngineError: When the port cannot be used
    """
    def create_listener(self, port: int, auth_db: Optional[AuthDatabase] = None,
                        register_auth_db: Optional[AuthDatabase] = None,
                        register_proxying: bool = False) -> Listener:
        raise NotImplementedError

    """
    Create and publish a proxy session on the listener

    @param listener: Listener Listener to publish on
    @param source_url: str Upstream rtsp url
    @param name: str Published stream name
    @param username: str Optional upstream username
    @param password: str Optional upstream password
    @param transport: TransportMode Upstream transport
    @param verbosity: Verbosity Engine verbosity
    @return Session: The published session
    @throws EngineError: When the session cannot be created
    """
    def publish_session(self, listener: Listener, source_url: str, name: str,
                        username: Optional[str], password: Optional[str],
                        transport: TransportMode, verbosity: Verbosity) -> Session:
        raise NotImplementedError

    """
    Get the url clients use to play a session

    @param listener: Listener Listener the session is published on
    @param session: Session Published session
    @return str: Playback url
    """
    def playback_url(self, listener: Listener, session: Session) -> str:
        raise NotImplementedError

    """
    Set up RTSP-over-HTTP tunneling on a port

    @param listener: Listener Listener to tunnel to
    @param port: int HTTP port to try
    @return bool: True when the port could be used
    """
    def enable_tunneling(self, listener: Listener, port: int) -> bool:
        raise NotImplementedError

    """
    Run the engine event loop
    Blocks; does not return under normal operation.

    @param listener: Listener Listener to serve
    @return None
    """
    def run_event_loop(self, listener: Listener):
        raise NotImplementedError

    """
    Release the sockets held by a listener
    Called once the event loop has stopped, however it stopped.

    @param listener: Listener Listener to release
    @return None
    """
    def close(self, listener: Listener):
        raise NotImplementedError
