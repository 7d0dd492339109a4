"""
(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

This tests checks for various out-of-order execution situations.
E.g., attempting to run a query after being disconnected from the server.
"""

import pytest

from pyneo4jhttp.exception import Error, ClosedSessionError

from . import result, failure
from . import neo4j_base


class TestNeo4jExecutionFlow(neo4j_base.Neo4jBase):
    def test_commit_after_disconnect(self):
        con = self._connect()

        con.close()

        with pytest.raises(ClosedSessionError) as ex:
            con.commit()
        assert str(ex.value) == 'connection is closed'

    def test_operations_after_disconnect(self):
        con = self._connect()
        con.close()

        for op in (con.rollback, con.cursor, con.server_version,
                   lambda: con.execute_query("RETURN 1"),
                   lambda: con.setautocommit(True),
                   lambda: con.autocommit,
                   lambda: con.open_transaction_id):
            with pytest.raises(ClosedSessionError) as ex:
                op()
            assert str(ex.value) == 'connection is closed'
        assert self.server.requests == []

    def test_close_twice(self):
        con = self._connect()
        con.cursor().execute("CREATE (n)")

        con.close()
        con.close()
        assert con.closed
        assert self.server.paths('DELETE') == ['/db/data/transaction/1']

    def test_close_without_transaction(self):
        con = self._connect()
        con.close()
        assert self.server.requests == []

    def test_execute_after_disconnect(self):
        con = self._connect()

        cursor = con.cursor()
        con.close()

        with pytest.raises(Error) as ex:
            cursor.execute("RETURN 1")
        assert str(ex.value) == 'connection is closed'

    def test_fetchone_after_disconnect(self):
        self.server.script["RETURN 1"] = result(['1'], [[1]])
        con = self._connect()

        cursor = con.cursor()
        cursor.execute("RETURN 1")
        con.close()

        with pytest.raises(Error) as ex:
            cursor.fetchone()
        assert str(ex.value) == 'connection is closed'

    def test_execute_after_close(self):
        con = self._connect()
        cursor = con.cursor()

        cursor.close()

        with pytest.raises(Error) as ex:
            cursor.execute("RETURN 1")
        assert str(ex.value) == 'cursor is closed'

    def test_fetchone_without_execute(self):
        con = self._connect()
        cursor = con.cursor()

        with pytest.raises(Error) as ex:
            cursor.fetchone()
        assert str(ex.value) == 'Previous execute did not produce any results or no call was issued yet'

    def test_fetchone_on_update(self):
        con = self._connect()
        cursor = con.cursor()
        cursor.execute("CREATE (n:Thing)")

        with pytest.raises(Error) as ex:
            cursor.fetchone()
        assert str(ex.value) == 'Previous execute did not produce any results or no call was issued yet'

    def test_fetchone_on_empty(self):
        self.server.script["MATCH (n:None) RETURN n"] = result(['n'])
        con = self._connect()
        cursor = con.cursor()
        cursor.execute("MATCH (n:None) RETURN n")
        assert cursor.fetchone() is None

    def test_fetchone_beyond_eof(self):
        self.server.script["RETURN 1"] = result(['1'], [[1]])
        con = self._connect()
        cursor = con.cursor()

        cursor.execute("RETURN 1")
        cursor.fetchone()
        assert cursor.fetchone() is None

    def test_fetch_after_error(self):
        self.server.script["SYNTAX ERROR"] = failure('Neo.ClientError.Statement.SyntaxError',
                                                     "Invalid input 'Y'")
        con = self._connect()
        cursor = con.cursor()

        with pytest.raises(Error) as e1:
            cursor.execute("SYNTAX ERROR")
        assert str(e1.value) == "Statement.SyntaxError: Invalid input 'Y'"

        with pytest.raises(Error) as e2:
            cursor.fetchone()
        assert str(e2.value) == 'Previous execute did not produce any results or no call was issued yet'

    def test_execute_after_error(self):
        self.server.script["syntax error"] = failure('Neo.ClientError.Statement.SyntaxError')
        self.server.script["RETURN 1"] = result(['1'], [[1]])
        con = self._connect()
        cursor = con.cursor()

        with pytest.raises(Error):
            cursor.execute("syntax error")

        cursor.execute("RETURN 1")
        assert cursor.fetchone() == (1,)
        # The failed statement took the first transaction with it
        assert con.open_transaction_id == 2

    def test_context_manager_commits(self):
        with self._connect() as con:
            con.cursor().execute("CREATE (n)")
        assert con.closed
        assert self.server.committed == ["CREATE (n)"]
        assert self.server.paths('DELETE') == []

    def test_context_manager_rolls_back(self):
        with pytest.raises(RuntimeError):
            with self._connect() as con:
                con.cursor().execute("CREATE (n)")
                raise RuntimeError("abandon")
        assert con.closed
        assert self.server.committed == []
        assert self.server.paths('DELETE') == ['/db/data/transaction/1']
