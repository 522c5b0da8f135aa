#!/usr/bin/env python3
"""
Base Definitions Source Module

This module defines the base class for stream definition files.
It provides the common open / error handling and leaves parsing to subclasses.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the imports
import logging
from pathlib import Path
from typing import List, TextIO
from rtsp_proxy.exceptions import DefinitionsFileNotFound, DefinitionsFileUnreadable
from rtsp_proxy.models import StreamDefinition

# setup the logger
logger = logging.getLogger(__name__)

"""
Base class for definitions sources

Opens the file, maps OS level failures onto the validation taxonomy, and
returns every definition in file order. Any invalid entry aborts the whole load.
"""
class DefinitionSource:

    """
    Initialize the DefinitionSource

    @param path: str Path to the definitions file
    """
    def __init__(self, path: str):

        # setup the internals
        self.path = str(path)

    """
    Load all definitions from the file
    Nothing is returned unless every entry is valid.

    @return list: List of StreamDefinition objects in file order
    @throws DefinitionsFileNotFound: When the file does not exist
    @throws DefinitionsFileUnreadable: When the file cannot be opened or decoded
    """
    def load(self) -> List[StreamDefinition]:

        # make sure it actually exists, a path the OS rejects outright is unreadable
        definitions_file = Path(self.path)
        try:
            exists = definitions_file.exists()
        except OSError as e:
            raise DefinitionsFileUnreadable(self.path, str(e.strerror or e)) from e
        if not exists:
            raise DefinitionsFileNotFound(self.path)

        # try to open and parse it
        try:
            with open(definitions_file, 'r', encoding='utf-8') as f:
                definitions = self._parse(f)

        # whoops... it's there, but we can't read it
        except (OSError, UnicodeDecodeError) as e:
            raise DefinitionsFileUnreadable(self.path, str(e)) from e

        # log it and return them
        logger.debug(f"Loaded {len(definitions)} stream definitions from {self.path}")
        return definitions

    """
    Parse definitions from an open file (implemented by subclasses)

    @param handle: TextIO Open file handle
    @return list: List of StreamDefinition objects
    @throws NotImplementedError: Must be implemented by subclasses
    """
    def _parse(self, handle: TextIO) -> List[StreamDefinition]:
        raise NotImplementedError
