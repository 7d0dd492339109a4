"""Establish and manage an HTTP session with a Neo4j server.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

__all__ = ["SessionException", "Session", "strToBool"]

# This module owns the HTTP client used to talk to the server.  It knows how
# to reach the server and how to turn transport failures into driver
# exceptions; it knows nothing about transactions.  One request is one round
# trip: there is no retry and redirects are never followed.

import json
import logging
import ssl
from ipaddress import ip_address
from urllib.parse import urlparse
from typing import Any, Dict, Mapping, Optional, Tuple  # pylint: disable=unused-import

import httpx

from .exception import OperationalError, InterfaceError, ProtocolError
from .exception import AmbiguousTransactionOutcomeError
from . import protocol

_log = logging.getLogger(__name__)

# These failures happen before the request reaches the server
_NOT_SENT = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout,
             httpx.UnsupportedProtocol, httpx.ProxyError)


class SessionException(OperationalError):  # pylint: disable=too-many-ancestors
    """Raised for problems encountered with the network session.

    The request was never delivered, so nothing happened on the server.
    """

    pass


def strToBool(s):
    # type: (Any) -> bool
    """Convert an option value to a Python boolean.

    :param s: Value to convert
    :returns: True if the value is true, False if it's false
    :raises ValueError: If the value is not a valid boolean string.
    """
    if isinstance(s, bool):
        return s
    if str(s).lower() == 'true':
        return True
    elif str(s).lower() == 'false':
        return False
    raise ValueError('"%s" is not a valid boolean string' % s)


class HttpReply(object):
    """The parts of an HTTP response the driver cares about."""

    def __init__(self, status, location, body):
        # type: (int, Optional[str], Any) -> None
        self.status = status
        self.location = location
        self.body = body


class Session(object):
    """An HTTP session with a Neo4j server."""

    __isTLSEncrypted = False
    __port = protocol.HTTP_PORT  # type: int
    __client = None              # type: Optional[httpx.Client]
    __debug = False

    @property
    def _client(self):
        # type: () -> httpx.Client
        """Return the HTTP client: raise if it's closed."""
        client = self.__client
        if client is None:
            raise SessionException("Session is closed")
        return client

    def __init__(self, host,            # type: str
                 port=None,             # type: Optional[int]
                 scheme='http',         # type: str
                 timeout=None,          # type: Optional[float]
                 options=None,          # type: Optional[Mapping[str, Any]]
                 **kwargs
                 ):
        # type: (...) -> None
        """Create the HTTP client for a server.

        :param host: Host name or address, optionally with a port.
        :param port: Port; overrides any port given in host.
        :param scheme: 'http' or 'https'.
        :param timeout: Timeout in seconds for each round trip.
        :param options: Session options (see session_options()).
        :param kwargs: Extra arguments for httpx.Client, e.g. transport.
        """
        if options is None:
            options = {}

        if strToBool(options.get('ssl', options.get('secure', 'false'))) \
                or options.get('trustStore') is not None:
            scheme = 'https'
        if scheme not in ('http', 'https'):
            raise InterfaceError("Unsupported transport scheme: %s" % (scheme))
        self.__isTLSEncrypted = scheme == 'https'
        if self.__isTLSEncrypted:
            self.__port = protocol.HTTPS_PORT

        self.__address, _port, ver = self._parse_addr(host, options.get('ipVersion'))
        if port is not None:
            self.__port = int(port)
        elif _port is not None:
            self.__port = _port

        if timeout is None and options.get('timeout') is not None:
            timeout = float(options['timeout'])

        self.__debug = strToBool(options.get('debug', 'false'))

        hostpart = '[%s]' % (self.__address) if ver == 6 else self.__address
        self.__base_url = '%s://%s:%d' % (scheme, hostpart, self.__port)

        auth = None
        if options.get('user') is not None:
            auth = httpx.BasicAuth(options['user'], options.get('password') or '')

        verify = True  # type: Any
        if self.__isTLSEncrypted:
            verify = self.establish_secure_tls_context(options)

        self.__client = httpx.Client(base_url=self.__base_url,
                                     auth=auth,
                                     timeout=timeout,
                                     verify=verify,
                                     follow_redirects=False,
                                     headers={'Accept': 'application/json; charset=UTF-8',
                                              'X-Stream': 'true'},
                                     **kwargs)

    @staticmethod
    def session_options(options):
        # type: (Optional[Mapping[str, Any]]) -> Tuple[Dict[str, Any], Dict[str, Any]]
        """Split into connection parameters and session options.

        Session options control the HTTP client.  Connection parameters
        control the behaviour of the connection (autocommit, maxRows, ...).

        :return: A tuple of (connection parameters, session options).
        """
        opts = ['password', 'user', 'ipVersion', 'ssl', 'secure', 'trustStore',
                'verifyHostname', 'timeout', 'debug']
        session = {}
        parameters = {}
        if options:
            for key, val in options.items():
                if key in opts:
                    session[key] = val
                else:
                    parameters[key] = val
        return parameters, session

    @staticmethod
    def _to_ipaddr(addr):
        # type: (str) -> Tuple[str, int]
        ipaddr = ip_address(addr)
        return (str(ipaddr), ipaddr.version)

    def _parse_addr(self, addr, ipver):
        # type: (str, Optional[str]) -> Tuple[str, Optional[int], int]
        port = None
        try:
            # v4/v6 addr w/o port e.g. 192.168.1.1, 2001:3200:3200::10
            ip, ver = self._to_ipaddr(addr)
        except ValueError:
            # v4/v6 addr w/port e.g. 192.168.1.1:53, [2001::10]:53
            parsed = urlparse('//{}'.format(addr))
            if parsed.hostname is None:
                raise InterfaceError("Invalid Host/IP Address format: %s" % (addr))
            try:
                ip, ver = self._to_ipaddr(parsed.hostname)
                port = parsed.port
            except ValueError:
                parts = addr.split(":")
                if len(parts) == 1:
                    # hostname w/o port e.g. neo0
                    ip = addr
                elif len(parts) == 2:
                    # hostname with port e.g. neo0:7474
                    ip = parts[0]
                    try:
                        port = int(parts[1])
                    except ValueError:
                        raise InterfaceError("Invalid Host/IP Address Format %s" % addr)
                else:
                    raise InterfaceError("Invalid Host/IP Address Format %s" % addr)

                # select v6/v4 for hostname based on user option
                ver = 4
                if ipver == 'v6':
                    ver = 6

        return ip, port, ver

    @staticmethod
    def establish_secure_tls_context(options):
        # type: (Mapping[str, Any]) -> ssl.SSLContext
        """Build the SSL context used to verify the server."""
        sslcontext = ssl.create_default_context(cafile=options.get('trustStore'))
        sslcontext.check_hostname = strToBool(options.get('verifyHostname', "True"))
        if not sslcontext.check_hostname and options.get('trustStore') is None:
            sslcontext.verify_mode = ssl.CERT_NONE
        return sslcontext

    @property
    def tls_encrypted(self):
        # type: () -> bool
        """Return True if the session uses HTTPS."""
        return self.__isTLSEncrypted

    @property
    def address(self):
        # type: () -> str
        """Return the address of the server."""
        return self.__address

    @property
    def port(self):
        # type: () -> int
        """Return the port of the server."""
        return self.__port

    @property
    def base_url(self):
        # type: () -> str
        return self.__base_url

    @property
    def closed(self):
        # type: () -> bool
        return self.__client is None

    def send(self, method, url, body=None):
        # type: (str, str, Optional[Dict[str, Any]]) -> HttpReply
        """Perform one round trip and return the reply.

        :param method: HTTP method.
        :param url: Path relative to the server, or an absolute URL the
                    server returned earlier.
        :param body: JSON request body.
        :raises SessionException: If the request never reached the server.
        :raises AmbiguousTransactionOutcomeError: If the request may have
                    reached the server but no response was received.
        :raises ProtocolError: If the response body is not valid JSON
                    or the URL is malformed.
        """
        client = self._client
        if self.__debug:
            _log.debug("%s %s %s", method, url, json.dumps(body))
        try:
            resp = client.request(method, url, json=body)
        except _NOT_SENT as e:
            raise SessionException("Failed to reach %s: %s" % (self.__base_url, str(e)))
        except httpx.RequestError as e:
            raise AmbiguousTransactionOutcomeError(
                "No response from %s for %s %s: %s" % (self.__base_url, method, url, str(e)))
        except httpx.InvalidURL as e:
            raise ProtocolError("Invalid URL %s: %s" % (url, str(e)))

        content = resp.content
        if self.__debug:
            _log.debug("HTTP %d %s", resp.status_code, content.decode('utf-8', 'replace'))

        parsed = None  # type: Any
        if content.strip():
            try:
                parsed = json.loads(content.decode('utf-8'))
            except ValueError as e:
                raise ProtocolError("Invalid JSON response (HTTP %d): %s"
                                    % (resp.status_code, str(e)))

        return HttpReply(resp.status_code, resp.headers.get('Location'), parsed)

    def close(self):
        # type: () -> None
        """Close the HTTP client."""
        client = self.__client
        if client is None:
            return
        try:
            client.close()
        finally:
            self.__client = None
