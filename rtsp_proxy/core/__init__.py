#!/usr/bin/env python3
"""
Core Package Initialization

This package contains the core components for the RTSP Proxy Server.
It exports the bootstrap orchestrator and its result types.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""
from .bootstrap import (
    BootstrapOrchestrator,
    BootstrapResult,
    BootstrapState,
    PublishedStream,
    candidate_rtsp_ports,
    resolve_credentials,
)

__all__ = [
    "BootstrapOrchestrator",
    "BootstrapResult",
    "BootstrapState",
    "PublishedStream",
    "candidate_rtsp_ports",
    "resolve_credentials",
]
