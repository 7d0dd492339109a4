"""Run a batch of statements and report update counts.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

__all__ = ['update_count', 'execute_batch', 'RESULT_SET']

from typing import Iterable, List  # pylint: disable=unused-import

from .exception import BatchError, StatementError
from .statement import Statement  # pylint: disable=unused-import
from .result_set import ResultSet  # pylint: disable=unused-import
from .transaction import TransactionSession  # pylint: disable=unused-import
from . import protocol

# Update count of a statement that produced a result set
RESULT_SET = -1


def update_count(result):
    # type: (ResultSet) -> int
    """Return the update count for one statement's result.

    A statement that returned columns counts as a query (-1) whatever its
    statistics say.  Otherwise the count is the number of nodes and
    relationships created or deleted.
    """
    if result.has_columns:
        return RESULT_SET
    if not result.stats:
        return 0
    return sum(int(result.stats.get(key, 0)) for key in protocol.UPDATE_COUNT_KEYS)


def execute_batch(session, statements):
    # type: (TransactionSession, Iterable[Statement]) -> List[int]
    """Execute statements as one round trip and return their update counts.

    The batch follows the session's mode: autocommitted as a whole, or run
    inside the session's transaction and left for the caller to commit.

    :raises BatchError: If a statement fails.  Its results are the counts of
                        the statements before the failing one, and its
                        position is the index of the failing statement.
    """
    stmts = list(statements)
    try:
        results = session.execute(stmts)
    except StatementError as e:
        counts = [update_count(r) for r in e.results]
        position = e.position if e.position is not None else len(counts)
        # The failing statement is always one of the batch
        position = min(position, max(len(stmts) - 1, 0))
        raise BatchError(str(e), counts[:position], position)
    return [update_count(r) for r in results]
