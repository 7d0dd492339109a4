"""A module for connecting to a Neo4j server over HTTP.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
Connection -- Class for establishing connection with host.

Exported Functions:
connect -- Creates a connection object.
reset -- Restore the module's global state.
"""

__all__ = ['apilevel', 'threadsafety', 'paramstyle', 'connect',
           'reset', 'Connection']

import re
import copy
from typing import Any, Dict, List, Mapping, Optional, Sequence  # pylint: disable=unused-import

from . import __version__
from .exception import ProgrammingError, ReadOnlyViolationError, ClosedSessionError

from . import batch
from . import cursor
from . import registry
from . import session
from . import transaction
from .statement import Statement
from .result_set import ResultSet  # pylint: disable=unused-import

apilevel = "2.0"
threadsafety = 1
paramstyle = "qmark"

# Keywords of Cypher clauses that change the graph
_MUTATING_RE = re.compile(r'\b(create|relate|delete|set)\b', re.I | re.S)


def connect(url=None,       # type: Optional[str]
            host=None,      # type: Optional[str]
            port=None,      # type: Optional[int]
            user=None,      # type: Optional[str]
            password=None,  # type: Optional[str]
            options=None,   # type: Optional[Mapping[str, Any]]
            **kwargs
            ):
    # type: (...) -> Connection
    """Return a new Neo4j Connection object.

    :param url: Connection URL, e.g. neo4j+http://host:7474/?autocommit=true
    :param host: Hostname (and port if non-default) of the server.
    :param port: Port of the server.
    :param user: Username to connect with.
    :param password: Password to connect with.
    :param options: Connection options.
    :returns: A new Connection object.
    """
    return Connection(url=url, host=host, port=port,
                      user=user, password=password,
                      options=options, **kwargs)


def reset():
    # type: () -> None
    """Reset the module to its initial state.

    Forget any global state maintained by the module.
    NOTE: this does not impact existing connections or cursors.
    It only impacts new connections.
    """
    registry.reset()


class Connection(object):
    """An established connection with a Neo4j server.

    Public Functions:
    close -- Closes the connection, rolling back any open transaction.
    commit -- Commit the open transaction.
    rollback -- Roll back uncommitted changes.
    cursor -- Return a new Cursor object using the connection.
    setautocommit -- Change the auto-commit mode of the connection.
    execute_queries -- Run several statements in one round trip.
    execute_query -- Run one statement.
    server_version -- Return the version reported by the server.

    Private Functions:
    __init__ -- Constructor for the Connection class.
    _check_closed -- Checks if the connection to the host is closed.

    Special Function:
    autocommit (getter) -- Gets the auto-commit mode.
    autocommit (setter) -- Sets the auto-commit mode.
    readonly (getter) -- Whether mutating statements are refused.
    readonly (setter) -- Refuse or allow mutating statements.
    open_transaction_id -- ID of the open server transaction, or 0.

    Deprecated: These names were used in older versions of the driver but they
    are not part of PEP 249.
    auto_commit (getter) -- Gets the value of auto-commit.
    auto_commit (setter) -- Sets the value of auto-commit.
    """

    # PEP 249 recommends that all exceptions be exposed as attributes in the
    # Connection object.
    from .exception import Warning, Error, InterfaceError, DatabaseError
    from .exception import OperationalError, IntegrityError, InternalError
    from .exception import ProgrammingError, NotSupportedError

    __session = None          # type: transaction.TransactionSession
    __readonly = False

    __config = None           # type: Dict[str, Any]

    def __init__(self, url=None,       # type: Optional[str]
                 host=None,            # type: Optional[str]
                 port=None,            # type: Optional[int]
                 user=None,            # type: Optional[str]
                 password=None,        # type: Optional[str]
                 options=None,         # type: Optional[Mapping[str, Any]]
                 **kwargs
                 ):
        # type: (...) -> None
        """Construct a Connection object.

        Values given as arguments override those found in the URL.

        :param url: Connection URL.
        :param host: Host (and port if needed) of the server.
        :param port: Port of the server.
        :param user: Username to connect with.
        :param password: Password to connect with.
        :param options: Connection options.
        :param kwargs: Extra arguments to pass to TransactionSession.
        """
        scheme = 'http'
        allopts = {}  # type: Dict[str, Any]
        if url is not None:
            scheme, url_host, url_port, url_opts = registry.parse_url(url)
            allopts.update(url_opts)
            if host is None:
                host = url_host
                if port is None:
                    port = url_port
        if options:
            allopts.update(options)
        if user is not None:
            allopts['user'] = user
        if password is not None:
            allopts['password'] = password

        if host is None:
            host = 'localhost'

        # Split the options into connection parameters and session options
        params, opts = session.Session.session_options(allopts)

        # Set auto commit to false by default per PEP 249
        if 'autocommit' in kwargs:
            autocommit = session.strToBool(kwargs.pop('autocommit'))
        else:
            autocommit = session.strToBool(params.get('autocommit', 'false'))
        self.__readonly = session.strToBool(params.get('readonly', 'false'))
        try:
            max_rows = int(params.get('maxRows', 0))
        except ValueError:
            raise self.InterfaceError("Invalid maxRows: %s" % (params['maxRows']))

        self.__session = transaction.TransactionSession(
            host, port=port, scheme=scheme, options=opts,
            autocommit=autocommit, max_rows=max_rows, **kwargs)

        logged = dict(allopts)
        logged.pop('password', None)
        self.__config = {'driver_version': __version__,
                         'host': self.__session.address,
                         'port': self.__session.port,
                         'scheme': 'https' if self.__session.tls_encrypted else 'http',
                         'url': self.__session.base_url,
                         'user': allopts.get('user'),
                         'tls_enabled': self.__session.tls_encrypted,
                         'options': logged}

    @property
    def autocommit(self):
        # type: () -> bool
        """Return the value of autocommit for the connection.

        :returns: True if autocommit is enabled.
        """
        self._check_closed()
        return self.__session.autocommit

    @autocommit.setter
    def autocommit(self, value):
        # type: (bool) -> None
        """Set the value of autocommit for the connection.

        :param bool value: True to enable autocommit, False to disable.
        """
        self.setautocommit(value)

    @property
    def auto_commit(self):
        # type: () -> int
        """Return the value of autocommit for the connection.

        DEPRECATED.
        :returns: 0 if autocommit is not enabled, 1 if it is enabled.
        """
        return 1 if self.autocommit else 0

    @auto_commit.setter
    def auto_commit(self, value):
        # type: (int) -> None
        """Set the value of auto_commit for the connection.

        DEPRECATED.
        :param value: 1 to enable autocommit, 0 to disable.
        """
        self.setautocommit(value != 0)

    @property
    def readonly(self):
        # type: () -> bool
        self._check_closed()
        return self.__readonly

    @readonly.setter
    def readonly(self, value):
        # type: (bool) -> None
        self._check_closed()
        self.__readonly = session.strToBool(value)

    @property
    def closed(self):
        # type: () -> bool
        return self.__session.closed

    @property
    def open_transaction_id(self):
        # type: () -> int
        """Return the ID of the open server transaction, or 0 if none."""
        self._check_closed()
        txid = self.__session.open_transaction_id
        return 0 if txid is None else txid

    @property
    def max_rows(self):
        # type: () -> int
        return self.__session.max_rows

    def connection_config(self):
        # type: () -> Dict[str, Any]
        """Returns a copy of the connection configuration.

        Configuration:
          autocommit     :bool: True if autocommit is enabled
          connected      :bool: True if the connection is active
          driver_version :str:  Version of this driver
          host           :str:  Address of the server
          options        :dict: Dictionary of connection options (no password)
          port           :int:  Port of the server
          scheme         :str:  'http' or 'https'
          tls_enabled    :bool: True if we're connected using TLS
          transaction_id :int:  ID of the open transaction, or None
          url            :str:  Base URL of the server
          user           :str:  name of the connected user

        :returns: Copy of the connection config names and values.
                  Modifying these values has no effect on the connection.
        """
        config = copy.deepcopy(self.__config)
        config['connected'] = not self.__session.closed
        config['autocommit'] = None if self.__session.closed else self.__session.autocommit
        config['transaction_id'] = self.__session.open_transaction_id
        return config

    def setautocommit(self, value):
        # type: (bool) -> None
        """Change the auto-commit status of the connection.

        :raises InvalidStateError: If a transaction is open.
        """
        self._check_closed()
        self.__session.autocommit = session.strToBool(value)

    def _check_closed(self):
        # type: () -> None
        """Check if the connection is available.

        :raises ClosedSessionError: If the connection to the host is closed.
        """
        if self.__session.closed:
            raise ClosedSessionError("connection is closed")

    def _check_readonly(self, statements):
        # type: (Sequence[Statement]) -> None
        if not self.__readonly:
            return
        for stmt in statements:
            if _MUTATING_RE.search(stmt.text):
                raise ReadOnlyViolationError(
                    "Connection is read-only, refusing: %s" % (stmt.text))

    def _execute(self, statements):
        # type: (Sequence[Statement]) -> List[ResultSet]
        """Run prepared statements through the guard and the session."""
        self._check_closed()
        self._check_readonly(statements)
        return self.__session.execute(statements)

    def _execute_batch(self, statements):
        # type: (Sequence[Statement]) -> List[int]
        """Run prepared statements as a batch and return update counts."""
        self._check_closed()
        self._check_readonly(statements)
        return batch.execute_batch(self.__session, statements)

    def execute_queries(self, queries, parameters, stats=False):
        # type: (Sequence[str], Sequence[Any], bool) -> List[ResultSet]
        """Run several statements in one round trip.

        :param queries: The statement texts.
        :param parameters: One parameter set (mapping, sequence or None) per
                           statement.
        :param stats: Ask the server for update statistics.
        :returns: One ResultSet per statement.
        """
        self._check_closed()
        if len(queries) != len(parameters):
            raise ProgrammingError("Got %d queries but %d parameter sets"
                                   % (len(queries), len(parameters)))
        stmts = [Statement.build(q, p, stats) for q, p in zip(queries, parameters)]
        return self._execute(stmts)

    def execute_query(self, query, parameters=None, stats=False):
        # type: (str, Any, bool) -> ResultSet
        """Run one statement and return its ResultSet."""
        return self.execute_queries([query], [parameters], stats)[0]

    def server_version(self):
        # type: () -> Optional[str]
        """Return the version reported by the server."""
        self._check_closed()
        return self.__session.server_version()

    def close(self):
        # type: () -> None
        """Close this connection, rolling back any open transaction.

        Closing a closed connection does nothing.
        """
        self.__session.close()

    def commit(self):
        # type: () -> None
        """Commit the current transaction, if one is open."""
        self._check_closed()
        if self.__session.state != transaction.OPEN:
            return
        self.__session.commit()

    def rollback(self):
        # type: () -> None
        """Rollback any uncommitted changes."""
        self._check_closed()
        self.__session.rollback()

    def cursor(self):
        # type: () -> cursor.Cursor
        """Return a new Cursor object using the connection."""
        self._check_closed()
        return cursor.Cursor(self)

    def __enter__(self):
        # Return self to allow use within the 'with' block
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # type: (Any, Any, Any) -> None
        # exc_type is None if the block completed normally.
        try:
            if not self.closed:
                if exc_type is None:
                    self.commit()
                else:
                    self.rollback()
        finally:
            # Always close the connection!
            self.close()
