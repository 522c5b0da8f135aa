#!/usr/bin/env python3
"""
Socket Media Engine Module

This module contains the bundled media engine. It binds the RTSP listener and
the HTTP tunneling port as plain TCP sockets, keeps the published sessions,
and runs an asyncio event loop that accepts RTSP clients and serves the
status API on the tunneling port. Handling the RTSP protocol itself is
delegated to a pluggable connection handler.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the imports
import asyncio, logging, socket
from typing import Awaitable, Callable, Optional
from urllib.parse import quote

import uvicorn

from rtsp_proxy.api import create_status_app
from rtsp_proxy.engine.base import Listener, MediaEngine, Session
from rtsp_proxy.exceptions import EngineError
from rtsp_proxy.models import AuthDatabase, TransportMode, Verbosity

# setup the logger
logger = logging.getLogger(__name__)

# the port left out of playback urls
STANDARD_RTSP_PORT = 554

# signature of the per client connection handler
ConnectionHandler = Callable[[Listener, asyncio.StreamReader, asyncio.StreamWriter], Awaitable[None]]

"""
Default client connection handler
Logs the peer and closes the connection.

@param listener: Listener Listener the client connected to
@param reader: asyncio.StreamReader Client reader
@param writer: asyncio.StreamWriter Client writer
@return None
"""
async def close_connection(listener: Listener, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):

    # log who it was
    peer = writer.get_extra_info('peername')
    logger.info(f"RTSP client {peer} connected on port {listener.port}, no protocol handler installed")

    # and close it
    writer.close()
    try:
        await writer.wait_closed()
    except ConnectionError as e:
        logger.debug(f"Error closing connection from {peer}: {e}")

"""
Work out the address clients should use to reach us

@return str: Local IP address, or the loopback address if it cannot be resolved
"""
def local_address() -> str:
    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError:
        return "127.0.0.1"

"""
Socket based media engine

Binds synchronously so a port failure is known immediately, then serves
everything from one asyncio loop.
"""
class SocketEngine(MediaEngine):

    """
    Initialize the SocketEngine

    @param host: str Address to bind, empty for all interfaces
    @param public_host: str Host name used in playback urls
    @param connection_handler: ConnectionHandler Coroutine run for each RTSP client
    @param backlog: int Listen backlog for the bound sockets
    """
    def __init__(self, host: str = "", public_host: Optional[str] = None,
                 connection_handler: Optional[ConnectionHandler] = None, backlog: int = 128):

        # setup the internals
        self.host = host
        self.public_host = public_host or local_address()
        self.connection_handler = connection_handler or close_connection
        self.backlog = backlog
        self.verbosity = Verbosity.QUIET

    """
    Bind and listen on a TCP port

    @param port: int Port to bind
    @return socket.socket: Listening, non-blocking socket
    @throws OSError: When the port cannot be bound
    """
    def _bind(self, port: int) -> socket.socket:

        # setup the socket
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # try to bind it, closing it again if we can't
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, port))
            sock.listen(self.backlog)
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise

        # return it
        return sock

    def create_listener(self, port: int, auth_db: Optional[AuthDatabase] = None,
                        register_auth_db: Optional[AuthDatabase] = None,
                        register_proxying: bool = False) -> Listener:

        # try to bind the port
        try:
            sock = self._bind(port)
        except OSError as e:
            raise EngineError(str(e.strerror or e)) from e

        # port 0 asks the OS to pick, so report what we actually got
        bound_port = sock.getsockname()[1]
        logger.debug(f"Bound RTSP listener on port {bound_port}")

        # return the listener
        return Listener(
            port=bound_port,
            auth_db=auth_db,
            register_proxying=register_proxying,
            register_auth_db=register_auth_db,
            sock=sock,
        )

    def publish_session(self, listener: Listener, source_url: str, name: str,
                        username: Optional[str], password: Optional[str],
                        transport: TransportMode, verbosity: Verbosity) -> Session:

        # session names are the url path, so they have to be unique
        if name in listener.sessions:
            raise EngineError(f"a session named \"{name}\" is already published")

        # setup the session and hold it
        session = Session(
            name=name,
            source_url=source_url,
            username=username,
            password=password,
            transport=transport,
            verbosity=verbosity,
        )
        listener.sessions[name] = session

        # the loudest session decides how chatty the event loop is
        self.verbosity = max(self.verbosity, verbosity)

        # return it
        return session

    def playback_url(self, listener: Listener, session: Session) -> str:

        # the standard port is left out
        if listener.port == STANDARD_RTSP_PORT:
            prefix = f"rtsp://{self.public_host}/"
        else:
            prefix = f"rtsp://{self.public_host}:{listener.port}/"

        # return the url
        return f"{prefix}{quote(session.name)}"

    def enable_tunneling(self, listener: Listener, port: int) -> bool:

        # only one tunneling port per listener
        if listener.tunnel_sock is not None:
            return listener.tunnel_port == port

        # try to bind the port
        try:
            listener.tunnel_sock = self._bind(port)
        except OSError as e:
            logger.debug(f"Unable to use port {port} for RTSP-over-HTTP tunneling: {e.strerror or e}")
            return False

        # hold the port, this engine answers it with the status api rather than rtsp tunneling
        listener.tunnel_port = listener.tunnel_sock.getsockname()[1]
        logger.info(f"Port {listener.tunnel_port} serves the status API; RTSP-over-HTTP tunneling is not handled by this engine")
        return True

    """
    Close the sockets held by a listener

    @param listener: Listener Listener to close
    @return None
    """
    def close(self, listener: Listener):
        logger.debug(f"Closing RTSP listener on port {listener.port}")
        for sock in (listener.sock, listener.tunnel_sock):
            if sock is not None:
                sock.close()

    def run_event_loop(self, listener: Listener):

        # does not return until the loop is stopped
        asyncio.run(self._serve(listener))

    """
    Serve the listener and the optional tunneling port

    @param listener: Listener Listener to serve
    @return None
    """
    async def _serve(self, listener: Listener):

        # wrap the handler so it knows its listener
        async def handle_client(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
            try:
                await self.connection_handler(listener, reader, writer)
            except Exception as e:
                logger.error(f"Error handling RTSP client: {e}")

        # fire up the rtsp listener
        server = await asyncio.start_server(handle_client, sock=listener.sock)
        tasks = [server.serve_forever()]

        # and the status api on the tunneling port, if we got one
        if listener.tunnel_sock is not None:
            app = create_status_app(listener, self)
            status_server = uvicorn.Server(uvicorn.Config(
                app,
                log_level="info" if self.verbosity >= Verbosity.VERBOSE else "warning",
            ))
            tasks.append(status_server.serve(sockets=[listener.tunnel_sock]))

        # now run them all
        async with server:
            await asyncio.gather(*tasks)
