#!/usr/bin/env python3
"""
Sources Package Initialization

This package contains the stream definition parser and the definitions file sources.
It exports the parser, the base class, and the concrete text and YAML sources.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the necessary imports
from .definition import build_definition, parse_definition
from .base import DefinitionSource
from .text import TextDefinitionSource
from .yaml_source import YAML_SUFFIXES, YamlDefinitionSource

"""
Pick the source type for a definitions file path

@param path: str Path to the definitions file
@return DefinitionSource: YAML source for .yaml/.yml files, plain text otherwise
"""
def source_for_path(path: str) -> DefinitionSource:
    if str(path).lower().endswith(YAML_SUFFIXES):
        return YamlDefinitionSource(path)
    return TextDefinitionSource(path)

# now hold the modules
__all__ = [
    "build_definition",
    "parse_definition",
    "DefinitionSource",
    "TextDefinitionSource",
    "YamlDefinitionSource",
    "source_for_path",
]
