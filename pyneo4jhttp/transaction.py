"""A module for housing the TransactionSession class.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
TransactionSession -- An HTTP session that tracks the server transaction.

Transaction states:
NONE -- No transaction is held on the server (always the case in autocommit).
OPEN -- The server holds a transaction for this session.
COMMITTED -- The last transaction committed; reported by last_outcome.
ROLLED_BACK -- The last transaction was rolled back, by request, by a failed
               statement, or by the server expiring it.
CLOSED -- The session is closed; every operation fails.
"""

__all__ = ['TransactionSession', 'NONE', 'OPEN', 'COMMITTED',
           'ROLLED_BACK', 'CLOSED']

import logging
import threading
import contextlib
import datetime  # pylint: disable=unused-import
from typing import Any, Dict, Iterable, Iterator, List, Optional  # pylint: disable=unused-import

from .exception import Error, InterfaceError, ClosedSessionError, InvalidStateError
from .exception import TransactionExpiredError, ProtocolError
from .exception import AmbiguousTransactionOutcomeError, db_error_handler

from . import codec
from . import protocol
from . import session
from .statement import Statement  # pylint: disable=unused-import
from .result_set import ResultSet  # pylint: disable=unused-import

_log = logging.getLogger(__name__)

NONE = 'NONE'
OPEN = 'OPEN'
COMMITTED = 'COMMITTED'
ROLLED_BACK = 'ROLLED_BACK'
CLOSED = 'CLOSED'


class TransactionSession(session.Session):
    """An HTTP session that maps statements onto the transactional endpoint.

    Public Functions:
    begin_if_needed -- Open a server transaction if one is required.
    execute -- Run statements, in a transaction or autocommitted.
    commit -- Commit the open transaction, with optional final statements.
    rollback -- Roll back the open transaction, if any.
    close -- Roll back anything open and release the HTTP client.
    server_version -- Ask the server for its version.

    Properties:
    state -- The current transaction state.
    last_outcome -- COMMITTED or ROLLED_BACK for the last finished transaction.
    autocommit -- Whether each execute commits by itself.
    open_transaction_id -- The server ID of the open transaction, or None.
    expires -- When the server will expire the open transaction.
    """

    __state = NONE
    __last_outcome = None   # type: Optional[str]
    __autocommit = False
    __max_rows = 0

    __txid = None           # type: Optional[int]
    __location = None       # type: Optional[str]
    __commit_url = None     # type: Optional[str]
    __expires = None        # type: Optional[datetime.datetime]

    def __init__(self, host,            # type: str
                 autocommit=False,      # type: bool
                 max_rows=0,            # type: int
                 **kwargs
                 ):
        # type: (...) -> None
        """Construct a TransactionSession object.

        :param host: Host (and port if needed) of the server.
        :param autocommit: Initial autocommit mode.
        :param max_rows: Maximum rows kept per result; 0 keeps everything.
        :param kwargs: Extra arguments to pass to Session.
        """
        super(TransactionSession, self).__init__(host, **kwargs)
        self.__lock = threading.Lock()
        self.__autocommit = bool(autocommit)
        self.__max_rows = int(max_rows)

    @property
    def state(self):
        # type: () -> str
        return self.__state

    @property
    def last_outcome(self):
        # type: () -> Optional[str]
        return self.__last_outcome

    @property
    def open_transaction_id(self):
        # type: () -> Optional[int]
        return self.__txid if self.__state == OPEN else None

    @property
    def expires(self):
        # type: () -> Optional[datetime.datetime]
        return self.__expires if self.__state == OPEN else None

    @property
    def max_rows(self):
        # type: () -> int
        return self.__max_rows

    @property
    def autocommit(self):
        # type: () -> bool
        self._check_closed()
        return self.__autocommit

    @autocommit.setter
    def autocommit(self, value):
        # type: (bool) -> None
        self._check_closed()
        value = bool(value)
        if value == self.__autocommit:
            return
        if self.__state == OPEN:
            raise InvalidStateError("Cannot change autocommit while transaction %s is open"
                                    % (self.__txid))
        self.__autocommit = value

    @property
    def closed(self):
        # type: () -> bool
        return self.__state == CLOSED

    def _check_closed(self):
        # type: () -> None
        if self.__state == CLOSED:
            raise ClosedSessionError("connection is closed")

    @contextlib.contextmanager
    def _round_trip(self):
        # type: () -> Iterator[None]
        """Hold the session for one round trip.

        Each round trip depends on the outcome of the previous one, so a
        second caller is refused rather than queued.
        """
        if not self.__lock.acquire(False):
            raise InterfaceError("Session is already in use by another thread")
        try:
            yield
        finally:
            self.__lock.release()

    def _transition(self, state):
        # type: (str) -> None
        _log.debug("transaction %s: %s -> %s", self.__txid, self.__state, state)
        self.__state = state

    def _finish(self, outcome):
        # type: (str) -> None
        """Leave OPEN: record the outcome and forget the identity."""
        self._transition(outcome)
        self.__last_outcome = outcome
        self.__txid = None
        self.__location = None
        self.__commit_url = None
        self.__expires = None
        self._transition(NONE)

    def _expired(self):
        # type: () -> None
        txid = self.__txid
        self._finish(ROLLED_BACK)
        raise TransactionExpiredError("Transaction %s has expired or is unknown to the server"
                                      % (txid), transaction_id=txid)

    def _decode(self, reply, expected):
        # type: (session.HttpReply, int) -> codec.Response
        """Decode a reply, handling what it means for an open transaction."""
        in_transaction = self.__state == OPEN
        if reply.status == 404 and in_transaction:
            self._expired()

        try:
            body = reply.body if reply.body is not None else {}
            if reply.status >= 400 and not (isinstance(body, dict) and body.get(protocol.ERRORS)):
                raise ProtocolError("Unexpected HTTP status %d" % (reply.status))
            resp = codec.decode_response(body, expected, self.__max_rows, reply.location)
        except ProtocolError:
            if in_transaction:
                self._finish(ROLLED_BACK)
            raise

        if in_transaction:
            for err in resp.errors:
                if err.code in protocol.EXPIRED_TRANSACTION_CODES:
                    self._expired()
        return resp

    def _send(self, method, url, body=None):
        # type: (str, str, Optional[Dict[str, Any]]) -> session.HttpReply
        try:
            return self.send(method, url, body)
        except ProtocolError:
            if self.__state == OPEN:
                self._finish(ROLLED_BACK)
            raise

    @staticmethod
    def _raise_failure(resp):
        # type: (codec.Response) -> None
        err = resp.error
        assert err is not None
        position = resp.failed_position
        prior = resp.results if position is None else resp.results[:position]
        db_error_handler(err.code, err.message, results=prior, position=position)

    def _begin(self):
        # type: () -> None
        reply = self._send('POST', protocol.TRANSACTION_PATH, codec.encode_statements([]))
        resp = self._decode(reply, 0)
        if resp.errors:
            self._raise_failure(resp)

        location = resp.location
        if location is None and resp.commit_url is not None \
                and resp.commit_url.endswith(protocol.COMMIT_SUFFIX):
            location = resp.commit_url[:-len(protocol.COMMIT_SUFFIX)]
        if resp.transaction_id is None or location is None or resp.commit_url is None:
            raise ProtocolError("Server did not return a usable transaction identity")

        self.__txid = resp.transaction_id
        self.__location = location
        self.__commit_url = resp.commit_url
        self.__expires = resp.expires
        self._transition(OPEN)

    def begin_if_needed(self):
        # type: () -> None
        """Open a server transaction unless autocommit is on or one is open.

        :raises ProtocolError: If the server does not return an identity.
        """
        self._check_closed()
        if self.__autocommit or self.__state == OPEN:
            return
        with self._round_trip():
            self._begin()

    def execute(self, statements):
        # type: (Iterable[Statement]) -> List[ResultSet]
        """Execute statements in one round trip.

        In autocommit mode the server commits them before responding.
        Otherwise they run in the open transaction (one is begun first if
        needed) and stay uncommitted.

        :returns: One result set per statement, in order.
        :raises StatementError: If a statement fails; the exception carries
                                the results of the statements before it.
        """
        self._check_closed()
        stmts = list(statements)
        if self.__autocommit:
            if not stmts:
                return []
            with self._round_trip():
                reply = self._send('POST',
                                   protocol.TRANSACTION_PATH + protocol.COMMIT_SUFFIX,
                                   codec.encode_statements(stmts))
                resp = self._decode(reply, len(stmts))
                if resp.errors:
                    self._raise_failure(resp)
                return resp.results

        with self._round_trip():
            if self.__state != OPEN:
                self._begin()
            if not stmts:
                return []

            # A failure to respond leaves the transaction as it was
            reply = self._send('POST', self.__location, codec.encode_statements(stmts))
            resp = self._decode(reply, len(stmts))

            if not resp.transaction_open:
                self._finish(ROLLED_BACK)
                if not resp.errors:
                    raise ProtocolError("Server closed transaction without an error")
            elif resp.expires is not None:
                self.__expires = resp.expires

            if resp.errors:
                self._raise_failure(resp)
            return resp.results

    def commit(self, final_statements=()):
        # type: (Iterable[Statement]) -> List[ResultSet]
        """Commit the open transaction.

        :param final_statements: Statements to run just before the commit,
                                 in the same round trip.
        :returns: The results of the final statements.
        :raises InvalidStateError: If no transaction is open.
        :raises StatementError: If a final statement fails; the server has
                                rolled the transaction back.
        """
        self._check_closed()
        if self.__state != OPEN:
            raise InvalidStateError("No transaction is open")
        stmts = list(final_statements)
        with self._round_trip():
            try:
                reply = self._send('POST', self.__commit_url, codec.encode_statements(stmts))
            except AmbiguousTransactionOutcomeError:
                # Either it committed or the server will expire it
                self._finish(ROLLED_BACK)
                raise
            resp = self._decode(reply, len(stmts))
            if resp.errors:
                self._finish(ROLLED_BACK)
                self._raise_failure(resp)
            self._finish(COMMITTED)
            return resp.results

    def rollback(self):
        # type: () -> None
        """Roll back the open transaction; do nothing if none is open."""
        self._check_closed()
        if self.__state != OPEN:
            return
        with self._round_trip():
            try:
                reply = self._send('DELETE', self.__location)
            except AmbiguousTransactionOutcomeError:
                self._finish(ROLLED_BACK)
                raise
            try:
                resp = self._decode(reply, 0)
            except TransactionExpiredError:
                # Nothing left to roll back
                return
            self._finish(ROLLED_BACK)
            if resp.errors:
                self._raise_failure(resp)

    def server_version(self):
        # type: () -> Optional[str]
        """Return the version reported by the server's service root."""
        self._check_closed()
        with self._round_trip():
            reply = self._send('GET', protocol.SERVICE_ROOT_PATH)
        if reply.status >= 400 or not isinstance(reply.body, dict):
            raise ProtocolError("Unexpected service root response (HTTP %d)" % (reply.status))
        version = reply.body.get('neo4j_version')
        return None if version is None else str(version)

    def close(self):
        # type: () -> None
        """Close the session, rolling back any open transaction first.

        Errors from that rollback are logged and ignored.  Safe to call
        more than once.
        """
        if self.__state == CLOSED:
            return
        try:
            if self.__state == OPEN:
                try:
                    self.rollback()
                except Error as e:
                    _log.warning("Rollback of transaction %s on close failed: %s",
                                 self.__txid, str(e))
        finally:
            if self.__state == OPEN:
                self._finish(ROLLED_BACK)
            self._transition(CLOSED)
            super(TransactionSession, self).close()
