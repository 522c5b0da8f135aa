#!/usr/bin/env python3
"""
Services Package Initialization

This package contains the service layer components for the RTSP Proxy Server.
It exports the stream registry and its builder.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""
from .stream_registry import StreamRegistry, build_registry

# hold the necessary modules
__all__ = [
    "StreamRegistry",
    "build_registry",
]
