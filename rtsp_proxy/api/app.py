#!/usr/bin/env python3
"""
Status Application Module

Builds the FastAPI application served on the HTTP tunneling port.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the imports
from fastapi import FastAPI

from rtsp_proxy import __version__


def create_status_app(listener, engine) -> FastAPI:
    """Create the FastAPI status app for a listener"""
    app = FastAPI(
        title="RTSP Proxy Server",
        description="Published RTSP proxy sessions and their playback urls",
        version=__version__,
    )

    app.state.listener = listener
    app.state.engine = engine

    from rtsp_proxy.api.routes import router
    app.include_router(router)

    return app
