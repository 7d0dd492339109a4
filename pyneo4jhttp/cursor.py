"""A module for housing the Cursor class.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
Cursor -- Class for representing a statement executed on a connection.
"""

__all__ = ['Cursor']

from typing import Any, Iterable, Iterator, List, Optional, Tuple  # pylint: disable=unused-import

from .exception import Error, ClosedSessionError
from .statement import Statement
from .datatype import TypeObjectFromValue, TypeObject  # pylint: disable=unused-import
from .result_set import ResultSet, Row  # pylint: disable=unused-import
from . import batch

Description = List[Tuple[str, TypeObject, None, None, None, None, None]]


class Cursor(object):
    """Class for representing a statement executed on a connection.

    Public Functions:
    close -- Closes the cursor; further use raises an error.
    execute -- Executes a statement, with optional parameters.
    executemany -- Executes a statement once per parameter set, as one batch.
    fetchone -- Returns the next row of the result, or None.
    fetchmany -- Returns up to size rows of the result.
    fetchall -- Returns the remaining rows of the result.

    Private Functions:
    __init__ -- Constructor for the Cursor class.
    _check_closed -- Checks if the cursor or its connection is closed.
    _reset -- Forget the previous result.
    """

    def __init__(self, connection):
        # type: (Any) -> None
        """Create a Cursor bound to a Connection."""
        self.connection = connection
        self.closed = False
        self.arraysize = 1

        self.description = None     # type: Optional[Description]
        self.rowcount = -1
        self.colcount = -1
        self.query = None           # type: Optional[str]

        self._result_set = None     # type: Optional[ResultSet]

    @property
    def maxrows(self):
        # type: () -> int
        """Return the most rows kept per result; 0 means no limit."""
        return self.connection.max_rows

    def close(self):
        # type: () -> None
        """Close this cursor."""
        self._check_closed()
        self._reset()
        self.closed = True

    def _check_closed(self):
        # type: () -> None
        """Check if the cursor or its connection is closed.

        :raises ClosedSessionError: If either is closed.
        """
        if self.closed:
            raise ClosedSessionError("cursor is closed")
        if self.connection.closed:
            raise ClosedSessionError("connection is closed")

    def _reset(self):
        # type: () -> None
        """Forget the previous result."""
        self.description = None
        self.rowcount = -1
        self.colcount = -1
        self._result_set = None

    @staticmethod
    def _describe(result):
        # type: (ResultSet) -> Description
        """Build the PEP 249 description of a result.

        The server sends no column types, so each column is typed by its
        first non-null value.
        """
        desc = []
        for idx, name in enumerate(result.columns):
            value = None
            for row in result.results:
                if row[idx] is not None:
                    value = row[idx]
                    break
            desc.append((name, TypeObjectFromValue(value), None, None, None, None, None))
        return desc

    def execute(self, operation, parameters=None):
        # type: (str, Any) -> None
        """Execute a statement.

        :param operation: Cypher text; '?' placeholders take positional
                          parameters, $name placeholders take a mapping.
        :param parameters: A sequence or mapping of parameter values.
        """
        self._check_closed()
        self._reset()
        stmt = Statement.build(operation, parameters, include_stats=True)
        self.query = operation

        result = self.connection._execute([stmt])[0]

        self.rowcount = batch.update_count(result)
        if result.has_columns:
            self._result_set = result
            self.colcount = result.col_count
            self.description = self._describe(result)

    def executemany(self, operation, seq_of_parameters):
        # type: (str, Iterable[Any]) -> None
        """Execute a statement once per parameter set in one round trip.

        :raises BatchError: If one execution fails.  Its results are the
                            update counts of the executions before it.
        """
        self._check_closed()
        self._reset()
        stmts = [Statement.build(operation, params, include_stats=True)
                 for params in seq_of_parameters]
        self.query = operation

        counts = self.connection._execute_batch(stmts)

        updates = [count for count in counts if count >= 0]
        if updates:
            self.rowcount = sum(updates)

    def fetchone(self):
        # type: () -> Optional[Row]
        """Return the next row of the result, or None if there are no more."""
        self._check_closed()
        if self._result_set is None:
            raise Error("Previous execute did not produce any results or no call was issued yet")
        return self._result_set.fetchone()

    def fetchmany(self, size=None):
        # type: (Optional[int]) -> List[Row]
        """Return up to size rows, arraysize if size is not given."""
        self._check_closed()

        if size is None:
            size = self.arraysize

        fetched_rows = []
        num_fetched_rows = 0
        while num_fetched_rows < size:
            row = self.fetchone()
            if row is None:
                break
            else:
                fetched_rows.append(row)
                num_fetched_rows += 1

        return fetched_rows

    def fetchall(self):
        # type: () -> List[Row]
        """Return all the remaining rows."""
        self._check_closed()

        fetched_rows = []
        while True:
            row = self.fetchone()
            if row is None:
                break
            else:
                fetched_rows.append(row)

        return fetched_rows

    def __iter__(self):
        # type: () -> Iterator[Row]
        return self

    def __next__(self):
        # type: () -> Row
        row = self.fetchone()
        if row is None:
            raise StopIteration
        return row

    def setinputsizes(self, sizes):
        # type: (Any) -> None
        pass

    def setoutputsize(self, size, column=None):
        # type: (Any, Optional[int]) -> None
        pass
