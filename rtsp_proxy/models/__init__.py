#!/usr/bin/env python3
"""
Models Package Initialization

This package contains all data model definitions for the RTSP Proxy Server.
It exports the stream definition, transport and global configuration models.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""
from .stream import (
    RESERVED_NAME_PREFIX,
    RTSP_SCHEME,
    AuthDatabase,
    Credentials,
    GlobalConfig,
    StreamDefinition,
    TransportMode,
    Verbosity,
)

# hold the necessary modules
__all__ = [
    "RESERVED_NAME_PREFIX",
    "RTSP_SCHEME",
    "AuthDatabase",
    "Credentials",
    "GlobalConfig",
    "StreamDefinition",
    "TransportMode",
    "Verbosity",
]
