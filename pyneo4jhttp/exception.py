"""Classes containing the exceptions for reporting errors.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

from typing import Any, List, Optional  # pylint: disable=unused-import

from . import protocol

__all__ = ['Warning', 'Error', 'InterfaceError', 'DatabaseError', 'BatchError',
           'DataError', 'OperationalError', 'IntegrityError', 'InternalError',
           'ProgrammingError', 'NotSupportedError',
           'ClosedSessionError', 'InvalidStateError', 'TransactionExpiredError',
           'ProtocolError', 'StatementError', 'AmbiguousTransactionOutcomeError',
           'ReadOnlyViolationError', 'db_error_handler']


class Warning(Exception):  # pylint: disable=redefined-builtin
    def __init__(self, value):
        Exception.__init__(self, value)
        self.__value = value

    def __str__(self):
        return str(self.__value)


class Error(Exception):
    def __init__(self, value):
        Exception.__init__(self, value)
        self.__value = value

    def __str__(self):
        return str(self.__value)


class InterfaceError(Error):
    def __init__(self, value):
        Error.__init__(self, value)


class DatabaseError(Error):
    def __init__(self, value):
        Error.__init__(self, value)


class BatchError(DatabaseError):
    """A batch failed part way through.

    results holds the update counts of the statements the server applied
    before the failure; position is the index of the failing statement.
    """

    results = None   # type: List[int]
    position = None  # type: Optional[int]

    def __init__(self, value, results, position=None):
        DatabaseError.__init__(self, value)
        self.results = results
        self.position = position


class DataError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class OperationalError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class IntegrityError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class InternalError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class ProgrammingError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class NotSupportedError(DatabaseError):
    def __init__(self, value):
        DatabaseError.__init__(self, value)


class ClosedSessionError(InterfaceError):
    """An operation was attempted on a closed connection, session or cursor."""

    def __init__(self, value):
        InterfaceError.__init__(self, value)


class InvalidStateError(ProgrammingError):
    """The operation is not legal in the current transaction state."""

    def __init__(self, value):
        ProgrammingError.__init__(self, value)


class TransactionExpiredError(InvalidStateError):
    """The server no longer knows the transaction this session had open."""

    def __init__(self, value, transaction_id=None):
        InvalidStateError.__init__(self, value)
        self.transaction_id = transaction_id


class ProtocolError(InterfaceError):
    """The server sent a response that could not be understood."""

    def __init__(self, value):
        InterfaceError.__init__(self, value)


class AmbiguousTransactionOutcomeError(OperationalError):
    """The request was sent but its outcome on the server is unknown.

    Retrying a mutating statement after this error is not safe.
    """

    def __init__(self, value):
        OperationalError.__init__(self, value)


class ReadOnlyViolationError(ProgrammingError):
    """A mutating statement was submitted on a read-only connection."""

    def __init__(self, value):
        ProgrammingError.__init__(self, value)


class StatementError(DatabaseError):
    """A statement was rejected by the server.

    code is the server status code, results the result sets of the
    statements executed before it in the same request, and position the
    index of the failing statement within that request.
    """

    code = None      # type: Optional[str]
    results = None   # type: List[Any]
    position = None  # type: Optional[int]

    def __init__(self, value, code=None, results=None, position=None):
        DatabaseError.__init__(self, value)
        self.code = code
        self.results = results if results is not None else []
        self.position = position


class DataStatementError(StatementError, DataError):
    pass


class IntegrityStatementError(StatementError, IntegrityError):
    pass


class OperationalStatementError(StatementError, OperationalError):
    pass


class InternalStatementError(StatementError, InternalError):
    pass


class ProgrammingStatementError(StatementError, ProgrammingError):
    pass


def statement_error_class(error_code):
    # type: (str) -> type
    """Return the StatementError subclass for a server status code."""
    if error_code in protocol.DATA_ERRORS:
        return DataStatementError
    if error_code in protocol.INTEGRITY_ERRORS:
        return IntegrityStatementError
    if error_code.startswith(protocol.OPERATIONAL_ERROR_PREFIXES):
        return OperationalStatementError
    if error_code.startswith(protocol.INTERNAL_ERROR_PREFIXES):
        return InternalStatementError
    if error_code.startswith(protocol.PROGRAMMING_ERROR_PREFIXES):
        return ProgrammingStatementError
    return StatementError


def db_error_handler(error_code,     # type: str
                     error_string,   # type: str
                     results=None,   # type: Optional[List[Any]]
                     position=None   # type: Optional[int]
                     ):
    # type: (...) -> None
    """Raise the exception matching a server status code.

    :raises StatementError: Always; the subclass depends on error_code.
    """
    cls = statement_error_class(error_code)
    raise cls(protocol.lookup_code(error_code) + ': ' + error_string,
              code=error_code, results=results, position=position)
