#!/usr/bin/env python3
"""
Stream Data Models Module

This module defines all data models and configuration classes for the RTSP Proxy Server.
It includes models for stream definitions, transport modes, credentials and the
resolved global configuration.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# add our imports
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Optional, Tuple

# names starting with this are handed out to command line urls only
RESERVED_NAME_PREFIX = "proxyStream"

# every proxied source must use this scheme
RTSP_SCHEME = "rtsp://"

# the default rtsp listener port
DEFAULT_RTSP_PORT = 554

"""
Verbosity levels passed down to the media engine

Maps to the -v / -V command line flags.
"""
class Verbosity(IntEnum):
    QUIET = 0
    VERBOSE = 1
    VERY_VERBOSE = 2

"""
Username and password pair

Used for default upstream credentials and for REGISTER authentication.
"""
@dataclass(frozen=True)
class Credentials:
    """Username and password pair"""
    username: str
    password: str

"""
A single proxied stream

Holds the published name, the upstream source url, and optional per-stream
credentials. A credential of None means the global default applies.
"""
@dataclass(frozen=True)
class StreamDefinition:
    """A single proxied stream"""
    name: str
    url: str
    username: Optional[str] = None
    password: Optional[str] = None

    """
    Serialize back to the definitions file line format

    @return str: name url [username [password]]
    """
    def to_line(self) -> str:

        # start with the required fields
        tokens = [self.name, self.url]

        # the password is only positional after a username
        if self.username is not None:
            tokens.append(self.username)
            if self.password is not None:
                tokens.append(self.password)

        # return the joined line
        return " ".join(tokens)

"""
Upstream transport selection

One of normal, force_tcp, or tunnel_over_http (with its port). The
combination of force_tcp and tunnel_over_http cannot be expressed.
"""
@dataclass(frozen=True)
class TransportMode:
    """Upstream transport selection"""
    NORMAL = "normal"
    FORCE_TCP = "force_tcp"
    TUNNEL_OVER_HTTP = "tunnel_over_http"

    # engines that take a single port number read all ones as "tcp, no http"
    TCP_WITHOUT_HTTP_PORT = 0xFFFF

    kind: str = NORMAL
    tunnel_port: Optional[int] = None

    def __post_init__(self):
        if self.kind not in (self.NORMAL, self.FORCE_TCP, self.TUNNEL_OVER_HTTP):
            raise ValueError(f"Unknown transport mode: {self.kind}")
        if (self.kind == self.TUNNEL_OVER_HTTP) != (self.tunnel_port is not None):
            raise ValueError("tunnel_port is required for, and only valid with, tunnel_over_http")

    @classmethod
    def normal(cls) -> "TransportMode":
        return cls(cls.NORMAL)

    @classmethod
    def force_tcp(cls) -> "TransportMode":
        return cls(cls.FORCE_TCP)

    @classmethod
    def tunnel_over_http(cls, port: int) -> "TransportMode":
        return cls(cls.TUNNEL_OVER_HTTP, port)

    @property
    def engine_tunnel_port(self) -> int:
        """Single integer form: 0 normal, 0xFFFF tcp only, otherwise the http port"""
        if self.kind == self.FORCE_TCP:
            return self.TCP_WITHOUT_HTTP_PORT
        return self.tunnel_port or 0

    def __str__(self) -> str:
        if self.kind == self.TUNNEL_OVER_HTTP:
            return f"{self.kind}:{self.tunnel_port}"
        return self.kind

"""
Username to password table handed to the engine

Contains the users allowed to authenticate against a listener.
"""
@dataclass
class AuthDatabase:
    """Username to password table"""
    users: Dict[str, str] = field(default_factory=dict)

    def add_user_record(self, username: str, password: str):
        self.users[username] = password

    def lookup_password(self, username: str) -> Optional[str]:
        return self.users.get(username)

    def __len__(self) -> int:
        return len(self.users)

"""
Main application configuration

Built once by the configuration resolver and passed explicitly to the
registry builder and the bootstrap orchestrator.
"""
@dataclass(frozen=True)
class GlobalConfig:
    """Main application configuration"""
    verbosity: Verbosity = Verbosity.QUIET
    transport: TransportMode = field(default_factory=TransportMode.normal)
    rtsp_port: int = DEFAULT_RTSP_PORT
    default_credentials: Optional[Credentials] = None
    register_proxying: bool = False
    register_credentials: Optional[Credentials] = None
    source_urls: Tuple[str, ...] = ()
    definitions_file: Optional[str] = None

    @property
    def default_username(self) -> Optional[str]:
        return self.default_credentials.username if self.default_credentials else None

    @property
    def default_password(self) -> Optional[str]:
        return self.default_credentials.password if self.default_credentials else None

    """
    Build the REGISTER authentication database

    @return AuthDatabase: populated database, or None when -U was not given
    """
    def register_auth_db(self) -> Optional[AuthDatabase]:

        # nothing to authenticate against
        if self.register_credentials is None:
            return None

        # setup and return the database
        auth_db = AuthDatabase()
        auth_db.add_user_record(self.register_credentials.username, self.register_credentials.password)
        return auth_db
