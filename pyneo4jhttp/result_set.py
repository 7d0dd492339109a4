"""Neo4j HTTP driver result set

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple  # pylint: disable=unused-import

Value = Any
Row = Tuple[Value, ...]


class StatementFailure(object):
    """The error reported by the server for one statement."""

    def __init__(self, code, message):
        # type: (str, str) -> None
        self.code = code
        self.message = message

    def __repr__(self):
        return 'StatementFailure(%r, %r)' % (self.code, self.message)


class ResultSet(object):
    """The outcome of one statement.

    The HTTP endpoint returns every row in the response, so a result set is
    always complete once decoded.
    """

    def __init__(self, columns,       # type: Sequence[str]
                 initial_results,     # type: List[Row]
                 stats=None,          # type: Optional[Dict[str, Any]]
                 error=None           # type: Optional[StatementFailure]
                 ):
        # type: (...) -> None
        self.columns = list(columns)
        self.results = initial_results
        self.results_idx = 0
        self.stats = stats
        self.error = error

    @property
    def col_count(self):
        # type: () -> int
        return len(self.columns)

    @property
    def has_columns(self):
        # type: () -> bool
        """Return True if the statement produced a tabular result."""
        return len(self.columns) > 0

    @property
    def failed(self):
        # type: () -> bool
        return self.error is not None

    def fetchone(self):
        # type: () -> Optional[Row]
        if self.results_idx == len(self.results):
            return None

        res = self.results[self.results_idx]
        self.results_idx += 1
        return res

    def __len__(self):
        return len(self.results)

    def __repr__(self):
        return 'ResultSet(columns=%r, rows=%d, stats=%r, error=%r)' % (
            self.columns, len(self.results), self.stats, self.error)
