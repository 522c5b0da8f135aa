#!/usr/bin/env python3
"""
Exception Classes Module

This module defines the error taxonomy of the RTSP Proxy Server. Validation
errors abort startup before any socket is bound, ServerUnavailable is fatal
after binding starts, and publish / tunnel failures are recovered locally.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""


class RelayException(Exception):
    """Base exception for all RTSP proxy errors"""

    def __init__(self, message: str, error_code: str = "RELAY_ERROR"):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ValidationException(RelayException):
    """Invalid input; raised before any network resource is created"""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message, error_code)


class MalformedDefinition(ValidationException):
    """A stream definition line has fewer than two tokens"""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"invalid format string : {line}", "MALFORMED_DEFINITION")


class ReservedName(ValidationException):
    """A user supplied stream name uses the reserved prefix"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"\"proxyStream\" is reserved keyword : {name}", "RESERVED_NAME")


class InvalidSourceURL(ValidationException):
    """A source url does not use the rtsp:// scheme"""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"invalid rtsp url : {url}", "INVALID_SOURCE_URL")


class DuplicateStreamName(ValidationException):
    """A stream name is already present in the registry"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"repeated stream name : {name}", "DUPLICATE_STREAM_NAME")


class DefinitionsFileError(ValidationException):
    """The definitions file cannot be used"""

    def __init__(self, message: str, error_code: str = "DEFINITIONS_FILE_ERROR"):
        super().__init__(message, error_code)


class DefinitionsFileNotFound(DefinitionsFileError):
    """The definitions file does not exist"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"invalid file : {path}", "FILE_NOT_FOUND")


class DefinitionsFileUnreadable(DefinitionsFileError):
    """The definitions file exists but cannot be read"""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"unreadable file : {path} ({reason})", "FILE_UNREADABLE")


class ConfigurationError(ValidationException):
    """Rejected command line invocation"""

    def __init__(self, message: str, error_code: str = "INVALID_CONFIGURATION"):
        super().__init__(message, error_code)


class NothingToServe(ConfigurationError):
    """No urls, no definitions file, and REGISTER proxying disabled"""

    def __init__(self):
        super().__init__(
            "at least one rtsp:// url, -f <file>, or -R is required",
            "NOTHING_TO_SERVE",
        )


class EngineError(RelayException):
    """A media engine call failed"""

    def __init__(self, message: str, error_code: str = "ENGINE_ERROR"):
        super().__init__(message, error_code)


class ServerUnavailable(RelayException):
    """No rtsp listener could be created on any candidate port"""

    def __init__(self, ports, reason: str = ""):
        self.ports = tuple(ports)
        tried = ", ".join(str(p) for p in self.ports)
        message = f"Failed to create RTSP server (tried ports {tried})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, "SERVER_UNAVAILABLE")


class PublishFailure(RelayException):
    """A single stream could not be published"""

    def __init__(self, name: str, url: str, reason: str):
        self.name = name
        self.url = url
        super().__init__(f"Failed to publish stream \"{name}\" ({url}): {reason}", "PUBLISH_FAILURE")


class TunnelUnavailable(RelayException):
    """No port could be used for rtsp-over-http tunneling"""

    def __init__(self, ports):
        self.ports = tuple(ports)
        tried = ", ".join(str(p) for p in self.ports)
        super().__init__(f"RTSP-over-HTTP tunneling is not available (tried ports {tried})", "TUNNEL_UNAVAILABLE")
