#!/usr/bin/env python3
"""
Bootstrap Orchestrator Module

This module drives the ordered server startup of the RTSP Proxy Server:
acquire the RTSP listener port, publish one proxy session per registered
stream, acquire an optional HTTP tunneling port, then hand control to the
engine's event loop. The sequence is linear and runs once.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the imports
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple
from rtsp_proxy.engine import Listener, MediaEngine, Session
from rtsp_proxy.exceptions import EngineError, PublishFailure, ServerUnavailable, TunnelUnavailable
from rtsp_proxy.models import AuthDatabase, GlobalConfig, StreamDefinition
from rtsp_proxy.services import StreamRegistry

# setup the logger
logger = logging.getLogger(__name__)

# fallback listener ports, tried in order after the requested one
STANDARD_RTSP_PORT = 554
ALTERNATE_RTSP_PORT = 8554

# http ports tried for rtsp-over-http tunneling
TUNNEL_PORTS = (80, 8000, 8080)

"""
Bootstrap states, in the only order they are entered
"""
class BootstrapState(str, Enum):
    CREATED = "created"
    ACQUIRING_RTSP_PORT = "acquiring_rtsp_port"
    PUBLISHING_STREAMS = "publishing_streams"
    ACQUIRING_TUNNEL_PORT = "acquiring_tunnel_port"
    SERVING = "serving"

# transition order
_STATE_ORDER = list(BootstrapState)

"""
A stream that was published successfully
"""
@dataclass
class PublishedStream:
    """A stream that was published successfully"""
    name: str
    source_url: str
    playback_url: str
    session: Session

"""
Outcome of a bootstrap run

Only observed when the engine's event loop returns.
"""
@dataclass
class BootstrapResult:
    """Outcome of a bootstrap run"""
    listener: Listener
    rtsp_port: int
    attempted_ports: List[int] = field(default_factory=list)
    published: List[PublishedStream] = field(default_factory=list)
    failures: List[PublishFailure] = field(default_factory=list)
    tunnel_port: Optional[int] = None
    tunnel_error: Optional[TunnelUnavailable] = None

"""
Get the listener ports to try, in order
The requested port, then 554 unless that was the request, then 8554. No port
is tried twice.

@param requested: int Requested rtsp port
@return list: Candidate ports
"""
def candidate_rtsp_ports(requested: int) -> List[int]:

    # setup the candidates
    ports = []
    for port in (requested, STANDARD_RTSP_PORT, ALTERNATE_RTSP_PORT):
        if port not in ports:
            ports.append(port)

    # return them
    return ports

"""
Resolve the upstream credentials for a stream
A stream's own username / password win; missing ones inherit the defaults.

@param definition: StreamDefinition Stream being published
@param config: GlobalConfig Resolved configuration
@return tuple: (username, password), either may be None
"""
def resolve_credentials(definition: StreamDefinition, config: GlobalConfig) -> Tuple[Optional[str], Optional[str]]:
    username = definition.username if definition.username is not None else config.default_username
    password = definition.password if definition.password is not None else config.default_password
    return username, password

"""
Main bootstrap orchestrator class

Coordinates the engine calls that bring the proxy server up.
"""
class BootstrapOrchestrator:

    """
    Initialize the BootstrapOrchestrator

    @param engine: MediaEngine Engine that owns the sockets and sessions
    @param config: GlobalConfig Resolved configuration
    @param registry: StreamRegistry Streams to publish
    @param auth_db: AuthDatabase Optional client access control database
    """
    def __init__(self, engine: MediaEngine, config: GlobalConfig, registry: StreamRegistry,
                 auth_db: Optional[AuthDatabase] = None):

        # hold our class options
        self.engine = engine
        self.config = config
        self.registry = registry
        self.auth_db = auth_db
        self._state = BootstrapState.CREATED

    @property
    def state(self) -> BootstrapState:
        return self._state

    """
    Move to the next state
    The machine only moves forward, one state at a time.

    @param state: BootstrapState State to enter
    @return None
    """
    def _enter(self, state: BootstrapState):

        # make sure we are moving exactly one step forward
        if _STATE_ORDER.index(state) != _STATE_ORDER.index(self._state) + 1:
            raise RuntimeError(f"Invalid bootstrap transition: {self._state.value} -> {state.value}")

        # log it and move on
        logger.debug(f"Bootstrap: {self._state.value} -> {state.value}")
        self._state = state

    """
    Run the whole bootstrap sequence
    Blocks in the engine's event loop once serving.

    @return BootstrapResult: Outcome, returned only if the event loop exits
    @throws ServerUnavailable: When no listener port can be acquired
    @throws RuntimeError: When called more than once
    """
    def run(self) -> BootstrapResult:

        # acquire the listener, this is the one fatal step
        self._enter(BootstrapState.ACQUIRING_RTSP_PORT)
        result = self._acquire_rtsp_port()

        # publish every registered stream
        self._enter(BootstrapState.PUBLISHING_STREAMS)
        self._publish_streams(result)

        # try for a tunneling port
        self._enter(BootstrapState.ACQUIRING_TUNNEL_PORT)
        self._acquire_tunnel_port(result)

        # hand off to the engine, releasing the listener however the loop ends
        self._enter(BootstrapState.SERVING)
        try:
            self.engine.run_event_loop(result.listener)
        finally:
            self.engine.close(result.listener)

        # only reached if the event loop stops
        return result

    """
    Create the RTSP listener on the first usable candidate port

    @return BootstrapResult: Result holding the new listener
    @throws ServerUnavailable: When every candidate port fails
    """
    def _acquire_rtsp_port(self) -> BootstrapResult:

        # setup the REGISTER options
        register_auth_db = self.config.register_auth_db() if self.config.register_proxying else None

        # try each candidate in order
        attempted = []
        last_error = None
        for port in candidate_rtsp_ports(self.config.rtsp_port):
            attempted.append(port)
            try:
                listener = self.engine.create_listener(
                    port,
                    auth_db=self.auth_db,
                    register_auth_db=register_auth_db,
                    register_proxying=self.config.register_proxying,
                )

            # whoops... log it and fall through to the next port
            except EngineError as e:
                last_error = e
                logger.warning(f"Unable to create a RTSP server with port number {port}: {e.message}")
                if port == self.config.rtsp_port and port != STANDARD_RTSP_PORT:
                    logger.warning(f"Trying instead with the standard port numbers ({STANDARD_RTSP_PORT} and {ALTERNATE_RTSP_PORT})...")
                continue

            # we have a listener
            logger.info(f"RTSP server listening on port {port}")
            return BootstrapResult(listener=listener, rtsp_port=port, attempted_ports=attempted)

        # nothing downstream means anything without a listener
        raise ServerUnavailable(attempted, last_error.message if last_error else "")

    """
    Publish a proxy session for every registry entry, in name order
    A failed entry is recorded and logged; the rest are still published.

    @param result: BootstrapResult Result to record into
    @return None
    """
    def _publish_streams(self, result: BootstrapResult):

        # loop over the registry in name order
        for definition in self.registry:

            # work out the credentials to use
            username, password = resolve_credentials(definition, self.config)

            # try to publish it
            try:
                session = self.engine.publish_session(
                    result.listener,
                    definition.url,
                    definition.name,
                    username,
                    password,
                    self.config.transport,
                    self.config.verbosity,
                )
                playback_url = self.engine.playback_url(result.listener, session)

            # whoops... record it and keep going
            except EngineError as e:
                failure = PublishFailure(definition.name, definition.url, e.message)
                result.failures.append(failure)
                logger.error(failure.message)
                continue

            # hold it and tell the operator where to play it
            result.published.append(PublishedStream(definition.name, definition.url, playback_url, session))
            logger.info(f"RTSP stream, proxying the stream \"{definition.url}\"")
            logger.info(f"\tPlay this stream using the URL: {playback_url}")

        # let them know about REGISTER handling
        if self.config.register_proxying:
            logger.info(f"(We handle incoming \"REGISTER\" requests on port {result.rtsp_port})")

        # log the totals
        logger.debug(f"Published {len(result.published)} of {len(self.registry)} streams")

    """
    Try the tunneling ports in order, stopping at the first that works
    Failing all of them only means tunneling is unavailable.

    @param result: BootstrapResult Result to record into
    @return None
    """
    def _acquire_tunnel_port(self, result: BootstrapResult):

        # try each port in order
        for port in TUNNEL_PORTS:
            if self.engine.enable_tunneling(result.listener, port):
                result.tunnel_port = port
                logger.info(f"(We use port {port} for optional RTSP-over-HTTP tunneling.)")
                return

        # none of them worked
        result.tunnel_error = TunnelUnavailable(TUNNEL_PORTS)
        logger.warning("(RTSP-over-HTTP tunneling is not available.)")
