"""
(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import pytest

from pyneo4jhttp import batch
from pyneo4jhttp import transaction
from pyneo4jhttp.statement import Statement
from pyneo4jhttp.exception import BatchError, ProtocolError
from pyneo4jhttp.result_set import ResultSet

from . import result, failure, omitted
from . import neo4j_base


class TestUpdateCount(object):
    def test_created(self):
        rs = ResultSet([], [], {'nodes_created': 2, 'relationships_created': 1})
        assert batch.update_count(rs) == 3

    def test_deleted(self):
        rs = ResultSet([], [], {'nodes_deleted': 4, 'relationship_deleted': 3,
                                'properties_set': 10, 'contains_updates': True})
        assert batch.update_count(rs) == 7

    def test_columns_win(self):
        rs = ResultSet(['n'], [], {'nodes_created': 5})
        assert batch.update_count(rs) == batch.RESULT_SET == -1

    def test_no_stats(self):
        assert batch.update_count(ResultSet([], [])) == 0


class TestNeo4jBatch(neo4j_base.Neo4jBase):
    def _session(self, autocommit=False):
        sess = transaction.TransactionSession('localhost', autocommit=autocommit,
                                              transport=self.server.transport)
        self.sessions.append(sess)
        return sess

    def test_batch_autocommit(self):
        self.server.script["CREATE (a)-[:R]->(b)"] = result(nodes_created=2,
                                                           relationships_created=1)
        con = self._connect(autocommit=True)
        cursor = con.cursor()
        cursor.executemany("CREATE (a)-[:R]->(b)", [(), (), ()])

        assert cursor.rowcount == 9
        assert len(self.server.requests) == 1
        assert len(self.server.requests[0][2]['statements']) == 3
        assert len(self.server.committed) == 3

    def test_batch_explicit_not_committed(self):
        con = self._connect()
        cursor = con.cursor()
        cursor.executemany("CREATE (n {v: ?})", [(1,), (2,)])

        assert self.server.committed == []
        assert con.open_transaction_id == 1
        assert self.server.paths() == ['/db/data/transaction',
                                       '/db/data/transaction/1']

        con.commit()
        assert len(self.server.committed) == 2

    def test_batch_parameters(self):
        con = self._connect(autocommit=True)
        cursor = con.cursor()
        cursor.executemany("CREATE (n {v: ?, w: ?})", [(1, 'a'), (2, 'b')])

        stmts = self.server.requests[0][2]['statements']
        assert [s['statement'] for s in stmts] == ["CREATE (n {v: $1, w: $2})"] * 2
        assert stmts[0]['parameters'] == {'1': 1, '2': 'a'}
        assert stmts[1]['parameters'] == {'1': 2, '2': 'b'}
        assert stmts[0]['includeStats'] is True

    def test_batch_failure_position(self):
        self.server.script["CREATE (n {v: $1})"] = result(nodes_created=1)
        self.server.script["CREATE (n {v: $1}) SET n:Bad"] = \
            failure('Neo.ClientError.Schema.ConstraintValidationFailed', 'already exists')
        session = self._session(autocommit=True)
        stmts = [Statement.build("CREATE (n {v: ?})", (1,), True),
                 Statement.build("CREATE (n {v: ?})", (2,), True),
                 Statement.build("CREATE (n {v: ?}) SET n:Bad", (3,), True),
                 Statement.build("CREATE (n {v: ?})", (4,), True)]

        with pytest.raises(BatchError) as ex:
            batch.execute_batch(session, stmts)
        assert ex.value.results == [1, 1]
        assert ex.value.position == 2
        assert str(ex.value) == 'Schema.ConstraintValidationFailed: already exists'
        assert self.server.committed == []

    def test_batch_failure_on_last_with_partial_result(self):
        self.server.script["CREATE (n {v: $1})"] = result(nodes_created=1)
        self.server.script["CREATE (n {v: $1}) SET n:Bad"] = \
            failure('Neo.ClientError.Schema.ConstraintValidationFailed', 'already exists',
                    partial=result(['x'], []))
        session = self._session(autocommit=True)
        stmts = [Statement.build("CREATE (n {v: ?})", (1,), True),
                 Statement.build("CREATE (n {v: ?}) SET n:Bad", (2,), True)]

        with pytest.raises(BatchError) as ex:
            batch.execute_batch(session, stmts)
        assert ex.value.position == 1
        assert ex.value.results == [1]

    def test_batch_failure_mid_batch(self):
        self.server.script["CREATE (n {v: $1})"] = result(nodes_created=1)
        self.server.script["BROKEN $1"] = failure('Neo.ClientError.Statement.SyntaxError')
        session = self._session(autocommit=True)
        stmts = [Statement.build("CREATE (n {v: ?})", (1,), True),
                 Statement.build("BROKEN ?", (2,), True),
                 Statement.build("CREATE (n {v: ?})", (3,), True)]

        with pytest.raises(BatchError) as ex:
            batch.execute_batch(session, stmts)
        assert ex.value.position == 1
        assert ex.value.results == [1]

    def test_batch_missing_result(self):
        self.server.script["CREATE (n {v: $1})"] = omitted()
        session = self._session(autocommit=True)

        with pytest.raises(ProtocolError):
            batch.execute_batch(session, [Statement.build("CREATE (n {v: ?})", (1,), True),
                                          Statement.build("CREATE (n {v: ?})", (2,), True)])

    def test_batch_failure_first(self):
        self.server.script["BAD $1"] = failure('Neo.ClientError.Statement.SyntaxError')
        con = self._connect(autocommit=True)
        cursor = con.cursor()

        with pytest.raises(BatchError) as ex:
            cursor.executemany("BAD ?", [(1,), (2,)])
        assert ex.value.results == []
        assert ex.value.position == 0

    def test_batch_failure_in_transaction(self):
        self.server.script["MERGE (n {v: $1})"] = result(nodes_created=1)
        session = self._session()
        session.execute([Statement("CREATE (x)")])
        self.server.script["BROKEN"] = failure('Neo.TransientError.Transaction.DeadlockDetected')
        stmts = [Statement.build("MERGE (n {v: ?})", (1,), True),
                 Statement.build("BROKEN", None, True)]

        with pytest.raises(BatchError) as ex:
            batch.execute_batch(session, stmts)
        assert ex.value.results == [1]
        assert ex.value.position == 1

        # The server rolled the whole transaction back
        assert session.state == transaction.NONE
        assert session.open_transaction_id is None
        assert self.server.committed == []

    def test_batch_with_query(self):
        self.server.script["MATCH (n) RETURN n.v"] = result(['n.v'], [[1]])
        session = self._session(autocommit=True)
        counts = batch.execute_batch(session, [
            Statement("CREATE (n)", include_stats=True),
            Statement("MATCH (n) RETURN n.v", include_stats=True)])
        assert counts == [0, -1]

    def test_empty_batch(self):
        con = self._connect(autocommit=True)
        cursor = con.cursor()
        cursor.executemany("CREATE (n {v: ?})", [])
        assert self.server.requests == []
        assert cursor.rowcount == -1
