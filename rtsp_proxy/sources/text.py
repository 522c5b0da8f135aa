#!/usr/bin/env python3
"""
Plain text definitions source

One "<name> <rtsp-url> [<username> [<password>]]" definition per line.
"""
# setup the imports
from typing import List, TextIO
from rtsp_proxy.models import StreamDefinition
from rtsp_proxy.sources.base import DefinitionSource
from rtsp_proxy.sources.definition import parse_definition

class TextDefinitionSource(DefinitionSource):

    """
    Parse every line of the file
    Blank lines are not skipped; they fail the parser like any other bad line.

    @param handle: TextIO Open file handle
    @return list: List of StreamDefinition objects in file order
    """
    def _parse(self, handle: TextIO) -> List[StreamDefinition]:

        # hold the definitions
        definitions = []

        # loop over each line, the first bad one raises
        for line in handle:
            definitions.append(parse_definition(line))

        # return the definitions
        return definitions
