"""Connection URL schemes understood by the driver.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

The registry is process-wide.  It is populated with the built-in schemes at
import time; register_scheme() adds more and reset() restores the built-in
set.  Existing connections are not affected by either.

Exported Functions:
register_scheme -- Map a URL scheme to a transport scheme and default port.
lookup -- Return the transport scheme and default port for a URL scheme.
schemes -- Return the registered URL schemes.
reset -- Forget registered schemes, restoring the built-in ones.
parse_url -- Split a connection URL into scheme, host, port and options.
"""

__all__ = ['register_scheme', 'lookup', 'schemes', 'reset', 'parse_url']

import re
import threading
from urllib.parse import urlparse, unquote
from typing import Dict, List, Tuple  # pylint: disable=unused-import

from .exception import InterfaceError
from . import protocol

_BUILTIN = {'http': ('http', protocol.HTTP_PORT),
            'https': ('https', protocol.HTTPS_PORT),
            'neo4j': ('http', protocol.HTTP_PORT),
            'neo4j+http': ('http', protocol.HTTP_PORT),
            'neo4j+https': ('https', protocol.HTTPS_PORT)}

_lock = threading.Lock()
_schemes = dict(_BUILTIN)  # type: Dict[str, Tuple[str, int]]

# Prefixes of JDBC-style URLs, e.g. jdbc:neo4j:http://host:7474
_PREFIX_RE = re.compile(r'^(?:jdbc:)?(?:neo4j:)?(?=[a-z0-9+]+://)', re.I)


def register_scheme(name, transport, default_port):
    # type: (str, str, int) -> None
    """Map URL scheme name to a transport scheme ('http' or 'https')."""
    if transport not in ('http', 'https'):
        raise InterfaceError("Unsupported transport scheme: %s" % (transport))
    with _lock:
        _schemes[name.lower()] = (transport, int(default_port))


def lookup(name):
    # type: (str) -> Tuple[str, int]
    """Return (transport scheme, default port) for a URL scheme.

    :raises InterfaceError: If the scheme is not registered.
    """
    with _lock:
        entry = _schemes.get(name.lower())
    if entry is None:
        raise InterfaceError("Unknown connection URL scheme: %s" % (name))
    return entry


def schemes():
    # type: () -> List[str]
    with _lock:
        return sorted(_schemes)


def reset():
    # type: () -> None
    """Restore the registry to the built-in schemes."""
    global _schemes
    with _lock:
        _schemes = dict(_BUILTIN)


def _parse_properties(query):
    # type: (str) -> Dict[str, str]
    """Parse key=value pairs separated by commas or ampersands.

    A key without a value is taken to be 'true'.
    """
    props = {}  # type: Dict[str, str]
    for prop in re.split(r'[,&]', query):
        if not prop:
            continue
        idx = prop.find('=')
        if idx < 0:
            props[unquote(prop)] = 'true'
        else:
            props[unquote(prop[:idx])] = unquote(prop[idx + 1:])
    return props


def parse_url(url):
    # type: (str) -> Tuple[str, str, int, Dict[str, str]]
    """Split a connection URL.

    Accepts neo4j+http://host:7474/?autocommit=true,maxRows=10 as well as
    plain http(s) URLs and jdbc:neo4j:http://... URLs.  User and password
    in the URL are returned as the 'user' and 'password' options.

    :returns: A tuple of (transport scheme, host, port, options); port is
              the scheme's default port if the URL has none.
    :raises InterfaceError: If the URL is invalid or its scheme unknown.
    """
    if not url:
        raise InterfaceError("No connection URL provided.")
    parsed = urlparse(_PREFIX_RE.sub('', url.strip()))
    if not parsed.scheme or not parsed.hostname:
        raise InterfaceError("Invalid connection URL: %s" % (url))

    transport, default_port = lookup(parsed.scheme)
    try:
        port = parsed.port
    except ValueError:
        raise InterfaceError("Invalid port in connection URL: %s" % (url))

    options = _parse_properties(parsed.query)
    if parsed.username:
        options['user'] = unquote(parsed.username)
    if parsed.password:
        options['password'] = unquote(parsed.password)

    return transport, parsed.hostname, port if port is not None else default_port, options
