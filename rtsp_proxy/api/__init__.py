#!/usr/bin/env python3
"""
API Package Initialization

This package contains the status API served on the HTTP tunneling port.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""
from .app import create_status_app

__all__ = ["create_status_app"]
