#!/usr/bin/env python3
"""
Engine Package Initialization

This package contains the media engine contract and the bundled socket engine.
It exports the listener and session records along with both engine classes.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""
from .base import Listener, MediaEngine, Session
from .socket_engine import SocketEngine

__all__ = ["Listener", "MediaEngine", "Session", "SocketEngine"]
