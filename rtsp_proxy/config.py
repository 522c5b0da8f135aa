#!/usr/bin/env python3
"""
Configuration Resolver Module

This module turns the raw command line tokens of the RTSP Proxy Server
into a single immutable GlobalConfig. It never prints or exits; every
rejected invocation raises ConfigurationError for the entry point to report.

@package RTSP Proxy Server
@author Kevin Pirnie <me@kpirnie.com>
@copyright Copyright (c) 2025
"""

# setup the imports
import argparse
from typing import Optional, Sequence
from rtsp_proxy.exceptions import ConfigurationError, NothingToServe
from rtsp_proxy.models import (
    RTSP_SCHEME,
    Credentials,
    GlobalConfig,
    TransportMode,
    Verbosity,
)
from rtsp_proxy.models.stream import DEFAULT_RTSP_PORT

# the program name shown in the usage line
PROG_NAME = "rtsp-proxy-server"

# the usage line printed on any rejected invocation
USAGE = (
    f"{PROG_NAME}"
    " [-v|-V]"
    " [-t|-T <http-port>]"
    " [-p <rtspServer-port>]"
    " [-u <username> <password>]"
    " [-R] [-U <username-for-REGISTER> <password-for-REGISTER>]"
    " [-f <back-end rtsp pairs file>]"
    " <rtsp-url-1> ... <rtsp-url-n>"
)

# how many values follow each flag
FLAG_ARITY = {
    "-v": 0, "-V": 0, "-t": 0, "-R": 0,
    "-p": 1, "-T": 1, "-f": 1,
    "-u": 2, "-U": 2,
}

"""
Argument parser that raises instead of exiting

argparse normally prints and calls sys.exit on a bad invocation; the
resolver must stay side effect free.
"""
class RaisingArgumentParser(argparse.ArgumentParser):

    def error(self, message):
        raise ConfigurationError(message)

    def exit(self, status=0, message=None):
        raise ConfigurationError(message.strip() if message else f"exit requested ({status})")

"""
Parse a port number argument

@param value: str Raw token following -p or -T
@return int: Port in the range 1..65535
@throws argparse.ArgumentTypeError: When the token is not a positive 16-bit integer
"""
def port_number(value: str) -> int:

    # it has to be plain ascii digits, no sign, spaces or underscores
    if not (value.isascii() and value.isdigit()):
        raise argparse.ArgumentTypeError(f"invalid port number: '{value}'")
    port = int(value, 10)

    # and it has to fit in 16 bits
    if not 0 < port <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"port number out of range: '{value}'")

    # return it
    return port

"""
Reject flag forms argparse would otherwise accept
Every flag stands alone as its own token, so grouped flags like -tV and
attached values like -p554 are refused. Flag values are skipped, so a value
that happens to start with a dash is left to the parser.

@param argv: Sequence[str] Command line tokens
@return None
@throws ConfigurationError: On a grouped flag or an attached value
"""
def check_flag_forms(argv: Sequence[str]):

    # walk the tokens, stepping over each flag's values
    i = 0
    while i < len(argv):
        token = argv[i]
        if token in FLAG_ARITY:
            i += 1 + FLAG_ARITY[token]
            continue
        if len(token) > 2 and token[:2] in FLAG_ARITY:
            raise ConfigurationError(f"each option must be given on its own: {token}")
        i += 1

"""
Build the command line parser
Each flag declares how many following values it consumes through nargs.

@return RaisingArgumentParser: Configured parser
"""
def build_parser() -> RaisingArgumentParser:

    # setup the parser, no -h since unknown flags are usage errors
    parser = RaisingArgumentParser(prog=PROG_NAME, usage=USAGE, add_help=False, allow_abbrev=False)

    # verbosity, the last one given wins
    parser.add_argument("-v", dest="verbosity", action="store_const", const=Verbosity.VERBOSE,
                        default=Verbosity.QUIET, help="verbose output")
    parser.add_argument("-V", dest="verbosity", action="store_const", const=Verbosity.VERY_VERBOSE,
                        help="more verbose output")

    # upstream transport
    parser.add_argument("-t", dest="force_tcp", action="store_true",
                        help="stream RTP and RTCP over the TCP control connection")
    parser.add_argument("-T", dest="tunnel_port", type=port_number, metavar="http-port",
                        help="stream RTP and RTCP over an HTTP connection")

    # listener port
    parser.add_argument("-p", dest="rtsp_port", type=port_number, default=DEFAULT_RTSP_PORT,
                        metavar="rtspServer-port", help="requested RTSP server port")

    # credentials
    parser.add_argument("-u", dest="credentials", nargs=2, metavar=("username", "password"),
                        help="default credentials for the proxied streams")
    parser.add_argument("-R", dest="register_proxying", action="store_true",
                        help="handle incoming REGISTER requests by proxying the stream")
    parser.add_argument("-U", dest="register_credentials", nargs=2,
                        metavar=("username-for-REGISTER", "password-for-REGISTER"),
                        help="credentials used to authenticate incoming REGISTER requests")

    # definitions file
    parser.add_argument("-f", dest="definitions_file", metavar="back-end rtsp pairs file",
                        help="load additional stream definitions from a file")

    # and whatever is left must be rtsp urls
    parser.add_argument("urls", nargs="*", default=[], metavar="rtsp-url")

    # return it
    return parser

"""
Resolve the command line into a GlobalConfig
Pure function: the same tokens always give the same config or the same failure.

@param argv: Sequence[str] Command line tokens, without the program name
@return GlobalConfig: Resolved configuration
@throws ConfigurationError: On any rejected flag, value or combination
@throws NothingToServe: When there are no urls, no definitions file and no -R
"""
def resolve_config(argv: Sequence[str]) -> GlobalConfig:

    # parse the tokens, arity and type errors raise here
    argv = list(argv)
    check_flag_forms(argv)
    args = build_parser().parse_args(argv)

    # -t and -T cannot both be used
    if args.force_tcp and args.tunnel_port is not None:
        raise ConfigurationError("The -t and -T options cannot both be used!")

    # REGISTER credentials only mean something with REGISTER proxying
    if args.register_credentials is not None and not args.register_proxying:
        raise ConfigurationError("The '-U <username> <password>' option can be used only with -R")

    # the remaining positionals must all look like rtsp urls
    for url in args.urls:
        if not url.startswith(RTSP_SCHEME):
            raise ConfigurationError(f"invalid rtsp url : {url}")

    # there has to be something to serve
    if not args.urls and not args.register_proxying and args.definitions_file is None:
        raise NothingToServe()

    # setup the transport
    if args.force_tcp:
        transport = TransportMode.force_tcp()
    elif args.tunnel_port is not None:
        transport = TransportMode.tunnel_over_http(args.tunnel_port)
    else:
        transport = TransportMode.normal()

    # return the applications configuration
    return GlobalConfig(
        verbosity=args.verbosity,
        transport=transport,
        rtsp_port=args.rtsp_port,
        default_credentials=_credentials(args.credentials),
        register_proxying=args.register_proxying,
        register_credentials=_credentials(args.register_credentials),
        source_urls=tuple(args.urls),
        definitions_file=args.definitions_file,
    )


def _credentials(pair) -> Optional[Credentials]:
    if pair is None:
        return None
    return Credentials(username=pair[0], password=pair[1])
