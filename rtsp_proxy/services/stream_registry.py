#!/usr/bin/env python3
"""
Stream Registry Module

This module collects the stream definitions to be proxied, keyed by name.
It enforces name uniqueness and always enumerates entries sorted by name, so
startup logs and publish order are reproducible.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the imports
import logging
from typing import Dict, Iterable, Iterator, List, Optional
from rtsp_proxy.exceptions import DuplicateStreamName
from rtsp_proxy.models import RESERVED_NAME_PREFIX, GlobalConfig, StreamDefinition
from rtsp_proxy.sources import source_for_path

# setup the logger
logger = logging.getLogger(__name__)

"""
Name keyed collection of stream definitions

Built once at startup, then only read.
"""
class StreamRegistry:

    """
    Initialize the StreamRegistry

    @return None
    """
    def __init__(self):

        # setup the internals
        self._definitions: Dict[str, StreamDefinition] = {}

    """
    Insert a definition
    Registries never overwrite; a repeated name is a validation failure.

    @param definition: StreamDefinition Definition to add
    @return None
    @throws DuplicateStreamName: When the name is already registered
    """
    def insert(self, definition: StreamDefinition):

        # no silent overwrites
        if definition.name in self._definitions:
            raise DuplicateStreamName(definition.name)

        # hold it
        self._definitions[definition.name] = definition

    """
    Synthesize definitions for bare command line urls
    A single url is named "proxyStream", several are "proxyStream-1" .. "proxyStream-n"
    by their position among the urls.

    @param urls: Iterable[str] Source urls in command line order
    @return list: The synthesized definitions
    """
    def add_cli_urls(self, urls: Iterable[str]) -> List[StreamDefinition]:

        # hold the urls so we know how many there are
        urls = list(urls)
        added = []

        # loop over each url, numbering from one
        for index, url in enumerate(urls, start=1):

            # one url keeps the bare prefix
            name = RESERVED_NAME_PREFIX if len(urls) == 1 else f"{RESERVED_NAME_PREFIX}-{index}"

            # insert it using the same uniqueness rules
            definition = StreamDefinition(name=name, url=url)
            self.insert(definition)
            added.append(definition)

        # return what we added
        return added

    """
    Load definitions from a file
    The whole file is validated first, so a bad line leaves the registry untouched.

    @param path: str Path to a plain text or YAML definitions file
    @return list: The loaded definitions
    @throws DefinitionsFileNotFound: When the file does not exist
    @throws DefinitionsFileUnreadable: When the file cannot be read
    @throws ValidationException: On the first invalid definition or repeated name
    """
    def load_from_file(self, path: str) -> List[StreamDefinition]:

        # parse everything before touching the registry
        definitions = source_for_path(path).load()

        # check for repeats, both within the file and against what we already hold
        seen = set(self._definitions)
        for definition in definitions:
            if definition.name in seen:
                raise DuplicateStreamName(definition.name)
            seen.add(definition.name)

        # now insert them
        for definition in definitions:
            self.insert(definition)

        # log it and return them
        logger.info(f"Loaded {len(definitions)} stream definitions from {path}")
        return definitions

    """
    Get all definitions sorted by name

    @return list: List of StreamDefinition objects
    """
    def definitions(self) -> List[StreamDefinition]:
        return [self._definitions[name] for name in sorted(self._definitions)]

    def get(self, name: str) -> Optional[StreamDefinition]:
        return self._definitions.get(name)

    def names(self) -> List[str]:
        return sorted(self._definitions)

    def __iter__(self) -> Iterator[StreamDefinition]:
        return iter(self.definitions())

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name) -> bool:
        return name in self._definitions

"""
Build the registry for a resolved configuration
Command line urls claim their names first, then the definitions file is loaded.

@param config: GlobalConfig Resolved configuration
@return StreamRegistry: Populated registry
@throws ValidationException: On any invalid or repeated definition
"""
def build_registry(config: GlobalConfig) -> StreamRegistry:

    # setup the registry
    registry = StreamRegistry()

    # command line urls go first
    registry.add_cli_urls(config.source_urls)

    # then the definitions file, if there is one
    if config.definitions_file:
        registry.load_from_file(config.definitions_file)

    # return it
    return registry
