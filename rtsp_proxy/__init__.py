#!/usr/bin/env python3
"""
RTSP Proxy Server Package Initialization

This package contains the configuration and bootstrap components of the
RTSP Proxy Server. It exports the version identifier for the application.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# hold the version of the application
__version__ = "1.0.0"
