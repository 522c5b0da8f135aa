#!/usr/bin/env python3
"""
YAML Definitions Source Module

This module reads stream definitions from a YAML list of mappings with the
keys name, url, username and password. Each entry passes the same
validation as a plain text definition line.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the imports
import yaml
from typing import Any, List, TextIO
from rtsp_proxy.exceptions import DefinitionsFileUnreadable, MalformedDefinition
from rtsp_proxy.models import StreamDefinition
from rtsp_proxy.sources.base import DefinitionSource
from rtsp_proxy.sources.definition import build_definition

# file suffixes handled by this source
YAML_SUFFIXES = (".yaml", ".yml")

"""
YAML definitions source

Accepts either a top level list, or a mapping with a "streams" list.
"""
class YamlDefinitionSource(DefinitionSource):

    """
    Parse the YAML document into definitions

    @param handle: TextIO Open file handle
    @return list: List of StreamDefinition objects in file order
    @throws DefinitionsFileUnreadable: When the document is not valid YAML
    @throws MalformedDefinition: When an entry lacks a name or url
    """
    def _parse(self, handle: TextIO) -> List[StreamDefinition]:

        # now open it grab the data as yaml
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as e:
            raise DefinitionsFileUnreadable(self.path, f"invalid YAML: {e}") from e

        # an empty document has nothing in it
        if data is None:
            return []

        # allow the entries to be nested under a streams key, which must then hold a list
        if isinstance(data, dict):
            if not isinstance(data.get('streams'), list):
                raise DefinitionsFileUnreadable(self.path, "expected a \"streams\" list of stream definitions")
            data = data['streams']

        # anything else must be a list
        if not isinstance(data, list):
            raise DefinitionsFileUnreadable(self.path, "expected a list of stream definitions")

        # build each entry
        return [self._build(entry) for entry in data]

    """
    Build a single definition from a mapping entry

    @param entry: Any One item of the YAML list
    @return StreamDefinition: Validated definition
    """
    def _build(self, entry: Any) -> StreamDefinition:

        # we need a mapping with a name and url
        if not isinstance(entry, dict) or not entry.get('name') or not entry.get('url'):
            raise MalformedDefinition(str(entry))

        # hold the optional credentials, an empty one falls back to the default
        username = entry.get('username')
        password = entry.get('password')
        username = None if username == "" else username
        password = None if password == "" else password

        # validate and return it
        return build_definition(
            name=str(entry['name']),
            url=str(entry['url']),
            username=str(username) if username is not None else None,
            password=str(password) if password is not None else None,
        )
