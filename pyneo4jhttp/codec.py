"""Encode statements for, and decode responses from, the transactional endpoint.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Everything in this module is stateless: the TransactionSession decides which
URL a body is sent to and what the decoded response means for its state.

Exported Classes:
Response -- A decoded server response.

Exported Functions:
encode_value -- Convert a parameter value into a JSON-compatible value.
encode_statements -- Build the request body for a list of statements.
decode_response -- Turn a response body into result sets and transaction info.
transaction_id_from_url -- Extract the transaction ID from an endpoint URL.
"""

__all__ = ['Response', 'encode_value', 'encode_statements',
           'decode_response', 'transaction_id_from_url']

import re
import decimal
import datetime
from collections.abc import Mapping
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Iterable, List, Optional  # pylint: disable=unused-import

from .exception import DataError, ProtocolError
from . import protocol
from . import datatype
from .statement import Statement  # pylint: disable=unused-import
from .result_set import ResultSet, StatementFailure

_TXID_RE = re.compile(r'/transaction/(\d+)(?:/commit)?/?$')


class Response(object):
    """A decoded response from the transactional endpoint."""

    def __init__(self, results,          # type: List[ResultSet]
                 errors,                 # type: List[StatementFailure]
                 notifications,          # type: List[Dict[str, Any]]
                 transaction_id=None,    # type: Optional[int]
                 location=None,          # type: Optional[str]
                 commit_url=None,        # type: Optional[str]
                 expires=None            # type: Optional[datetime.datetime]
                 ):
        # type: (...) -> None
        self.results = results
        self.errors = errors
        self.notifications = notifications
        self.transaction_id = transaction_id
        self.location = location
        self.commit_url = commit_url
        self.expires = expires

    @property
    def error(self):
        # type: () -> Optional[StatementFailure]
        """Return the first error reported by the server, if any."""
        return self.errors[0] if self.errors else None

    @property
    def failed_position(self):
        # type: () -> Optional[int]
        """Return the index of the statement that failed, if one did."""
        for i, res in enumerate(self.results):
            if res.failed:
                return i
        return None

    @property
    def transaction_open(self):
        # type: () -> bool
        """Return True if the server reports the transaction is still open."""
        return self.commit_url is not None


def encode_value(value):  # pylint: disable=too-many-return-statements
    # type: (Any) -> Any
    """Convert a parameter value into a value the JSON encoder accepts."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, decimal.Decimal):
        return float(value)
    if isinstance(value, datetime.datetime):
        return datatype.timezone_aware(value).isoformat()
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        # The server expects byte arrays as lists of signed bytes
        return [b - 256 if b > 127 else b for b in bytearray(value)]
    if isinstance(value, Mapping):
        return dict((str(k), encode_value(v)) for k, v in value.items())
    if isinstance(value, (list, tuple, set, frozenset)):
        return [encode_value(v) for v in value]
    raise DataError("Unsupported parameter type: %s" % (type(value).__name__))


def encode_statements(statements):
    # type: (Iterable[Statement]) -> Dict[str, Any]
    """Build the request body for a list of statements, preserving order."""
    body = []
    for stmt in statements:
        body.append({protocol.STATEMENT: stmt.text,
                     protocol.PARAMETERS: encode_value(stmt.parameters),
                     protocol.INCLUDE_STATS: stmt.include_stats,
                     protocol.RESULT_DATA_CONTENTS: [protocol.ROW_CONTENT]})
    return {protocol.STATEMENTS: body}


def transaction_id_from_url(url):
    # type: (Optional[str]) -> Optional[int]
    """Return the transaction ID in a transaction or commit URL, or None."""
    if not url:
        return None
    m = _TXID_RE.search(url)
    if m is None:
        return None
    return int(m.group(1))


def _decode_stats(raw):
    # type: (Any) -> Optional[Dict[str, Any]]
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ProtocolError("Invalid statistics in response: %r" % (raw,))
    stats = {}  # type: Dict[str, Any]
    for key, val in raw.items():
        if key == protocol.CONTAINS_UPDATES:
            stats[key] = bool(val)
            continue
        try:
            stats[key] = int(val)
        except (TypeError, ValueError):
            raise ProtocolError("Invalid value for statistic %s: %r" % (key, val))
    return stats


def _decode_result(raw, max_rows):
    # type: (Any, int) -> ResultSet
    if not isinstance(raw, Mapping):
        raise ProtocolError("Invalid result in response: %r" % (raw,))
    columns = raw.get(protocol.COLUMNS)
    if not isinstance(columns, list):
        raise ProtocolError("Result is missing its columns")
    data = raw.get(protocol.DATA, [])
    if not isinstance(data, list):
        raise ProtocolError("Result data is not a list")

    rows = []
    for item in data:
        if max_rows > 0 and len(rows) >= max_rows:
            break
        row = item.get(protocol.ROW_CONTENT) if isinstance(item, Mapping) else None
        if not isinstance(row, list) or len(row) != len(columns):
            raise ProtocolError("Invalid row in response: %r" % (item,))
        rows.append(tuple(row))

    return ResultSet([str(c) for c in columns], rows,
                     _decode_stats(raw.get(protocol.STATS)))


def _decode_error(raw):
    # type: (Any) -> StatementFailure
    if not isinstance(raw, Mapping) or protocol.CODE not in raw:
        raise ProtocolError("Invalid error in response: %r" % (raw,))
    return StatementFailure(str(raw[protocol.CODE]),
                            str(raw.get(protocol.MESSAGE, '')))


def _decode_expires(raw):
    # type: (Any) -> Optional[datetime.datetime]
    if not isinstance(raw, Mapping) or not raw.get(protocol.EXPIRES):
        return None
    try:
        return parsedate_to_datetime(raw[protocol.EXPIRES])
    except (TypeError, ValueError):
        raise ProtocolError("Invalid transaction expiry: %r" % (raw[protocol.EXPIRES],))


def decode_response(body,           # type: Any
                    expected,       # type: int
                    max_rows=0,     # type: int
                    location=None   # type: Optional[str]
                    ):
    # type: (...) -> Response
    """Decode a response to a request that carried `expected` statements.

    The server stops at the first failing statement.  When it reports an
    error, a result set carrying that error is placed right after the results
    of the statements that did execute, so the position of the failure is
    the position of that result set.  If the server already sent a result for
    every statement, the last one is the partial result of the statement
    that failed and carries the error instead.

    :param body: The parsed JSON body.
    :param expected: Number of statements in the request.
    :param max_rows: If positive, keep at most this many rows per result.
    :param location: The Location header of the response, if any.
    :raises ProtocolError: If the body is not a valid response.
    """
    if not isinstance(body, Mapping):
        raise ProtocolError("Response is not a JSON object")

    raw_results = body.get(protocol.RESULTS, [])
    raw_errors = body.get(protocol.ERRORS, [])
    raw_notifications = body.get(protocol.NOTIFICATIONS, [])
    if not isinstance(raw_results, list):
        raise ProtocolError("Response results are not a list")
    if not isinstance(raw_errors, list):
        raise ProtocolError("Response errors are not a list")
    if not isinstance(raw_notifications, list):
        raise ProtocolError("Response notifications are not a list")
    if len(raw_results) > expected:
        raise ProtocolError("Received %d results for %d statements"
                            % (len(raw_results), expected))

    results = [_decode_result(r, max_rows) for r in raw_results]
    errors = [_decode_error(e) for e in raw_errors]

    if not errors and len(results) != expected:
        raise ProtocolError("Received %d results for %d statements"
                            % (len(results), expected))
    if errors and expected > 0:
        if len(results) < expected:
            results.append(ResultSet([], [], error=errors[0]))
        else:
            results[-1].error = errors[0]

    commit_url = body.get(protocol.COMMIT)
    if commit_url is not None and not isinstance(commit_url, str):
        raise ProtocolError("Invalid commit URL: %r" % (commit_url,))

    txid = transaction_id_from_url(location)
    if txid is None:
        txid = transaction_id_from_url(commit_url)

    return Response(results, errors, raw_notifications,
                    transaction_id=txid,
                    location=location,
                    commit_url=commit_url,
                    expires=_decode_expires(body.get(protocol.TRANSACTION)))
