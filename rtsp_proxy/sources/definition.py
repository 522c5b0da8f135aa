#!/usr/bin/env python3
"""
Stream Definition Parser Module

This module parses a single stream definition line of the form
"<name> <rtsp-url> [<username> [<password>]]" into a StreamDefinition.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the imports
import logging
from typing import Optional
from rtsp_proxy.exceptions import InvalidSourceURL, MalformedDefinition, ReservedName
from rtsp_proxy.models import RESERVED_NAME_PREFIX, RTSP_SCHEME, StreamDefinition

# setup the logger
logger = logging.getLogger(__name__)

# the most tokens a definition line uses
MAX_DEFINITION_TOKENS = 4

"""
Parse a stream definition line
Tokenizes on whitespace and validates the name and source url. Tokens past
the password are ignored.

@param line: str Raw definition line
@return StreamDefinition: Parsed definition
@throws MalformedDefinition: Fewer than two tokens
@throws ReservedName: Name starts with the reserved prefix
@throws InvalidSourceURL: Url is not rtsp://
"""
def parse_definition(line: str) -> StreamDefinition:

    # split on any run of whitespace
    tokens = line.split()

    # we need at least a name and a url
    if len(tokens) < 2:
        raise MalformedDefinition(line.rstrip("\r\n"))

    # anything past the password is dropped
    if len(tokens) > MAX_DEFINITION_TOKENS:
        logger.warning(f"Ignoring {len(tokens) - MAX_DEFINITION_TOKENS} extra token(s) in definition for {tokens[0]}")

    # validate and return the definition
    return build_definition(
        name=tokens[0],
        url=tokens[1],
        username=_token_at(tokens, 2),
        password=_token_at(tokens, 3),
    )

"""
Build a validated stream definition from its fields
Applies the same name and url rules as a parsed line.

@param name: str Stream name
@param url: str Upstream source url
@param username: str Optional stream specific username
@param password: str Optional stream specific password
@return StreamDefinition: Validated definition
@throws ReservedName: Name starts with the reserved prefix
@throws InvalidSourceURL: Url is not rtsp://
"""
def build_definition(name: str, url: str, username: Optional[str] = None, password: Optional[str] = None) -> StreamDefinition:

    # the reserved prefix belongs to the command line urls
    if name.startswith(RESERVED_NAME_PREFIX):
        raise ReservedName(name)

    # only rtsp sources can be proxied
    if not url.startswith(RTSP_SCHEME):
        raise InvalidSourceURL(url)

    return StreamDefinition(name=name, url=url, username=username, password=password)


def _token_at(tokens, index: int) -> Optional[str]:
    return tokens[index] if len(tokens) > index else None
