#!/usr/bin/env python3
"""
API Routes Module

This module defines the status endpoints served on the HTTP tunneling port.
They list the published proxy sessions and the urls clients play them with.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# imports
import logging
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from rtsp_proxy import __version__

# setup the logger
logger = logging.getLogger(__name__)

# setup the api router
router = APIRouter()

"""
Get the listener from application state

@param request: Request FastAPI request object
@return Listener: Listener served by this app
@throws HTTPException: 503 if no listener is attached
"""
def get_listener(request: Request):
    """Get listener from app state"""
    listener = getattr(request.app.state, "listener", None)
    if listener is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return listener

"""
Root endpoint with API information

@return dict: API info
"""
@router.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "RTSP Proxy Server",
        "version": __version__,
        "endpoints": {
            "status": "/status",
            "streams": "/streams",
            "playlist": "/playlist.m3u",
        }
    }

"""
Get service status information

@param request: Request FastAPI request object
@return dict: Listener ports, REGISTER mode and session count
"""
@router.get("/status")
async def get_status(request: Request):
    """Get service status"""
    listener = get_listener(request)

    return {
        "status": "running",
        "rtsp_port": listener.port,
        "tunnel_port": listener.tunnel_port,
        "register_proxying": listener.register_proxying,
        "total_streams": len(listener.sessions),
    }

"""
Get list of all published streams

Returns the name, upstream url, transport and playback url of every
published session, sorted by name.

@param request: Request FastAPI request object
@return dict: List of published streams
"""
@router.get("/streams")
async def get_streams(request: Request):
    """Get list of all published streams"""
    listener = get_listener(request)
    engine = request.app.state.engine

    streams_info = []
    for name in sorted(listener.sessions):
        session = listener.sessions[name]
        streams_info.append({
            "name": name,
            "source_url": session.source_url,
            "transport": str(session.transport),
            "authenticated": session.username is not None,
            "url": engine.playback_url(listener, session),
        })

    return {"streams": streams_info}

"""
Get M3U playlist of all published streams

@param request: Request FastAPI request object
@return PlainTextResponse: M3U playlist content
"""
@router.get("/playlist.m3u")
async def get_playlist(request: Request):
    """Get M3U playlist of all published streams"""
    listener = get_listener(request)
    engine = request.app.state.engine

    # set the first line that we need to output
    lines = ['#EXTM3U']

    # one entry per session
    for name in sorted(listener.sessions):
        lines.append(f'#EXTINF:-1 tvg-name="{name}", {name}')
        lines.append(engine.playback_url(listener, listener.sessions[name]))

    return PlainTextResponse(content="\n".join(lines) + "\n", media_type="audio/x-mpegurl")
