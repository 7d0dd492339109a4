"""
(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.
"""

import re
import json
import logging

from typing import Any, Dict, List, Optional, Tuple  # pylint: disable=unused-import

import httpx

_log = logging.getLogger("pyneo4jhttptest")

BASE = 'http://localhost:7474'
EXPIRES = 'Mon, 19 Oct 2026 12:00:00 +0000'

_TX_RE = re.compile(r'^/db/data/transaction/(\d+)(/commit)?$')


def result(columns=(), rows=(), **stats):
    # type: (Any, Any, Any) -> Dict[str, Any]
    """Build the scripted outcome of a statement that succeeds."""
    return {'columns': list(columns),
            'data': [{'row': list(r)} for r in rows],
            'stats': stats}


def failure(code, message='failed', partial=None):
    # type: (str, str, Optional[Dict[str, Any]]) -> Dict[str, Any]
    """Build the scripted outcome of a statement that fails.

    With `partial` the server also sends that result for the failing
    statement before reporting the error.
    """
    outcome = {'code': code, 'message': message}  # type: Dict[str, Any]
    if partial is not None:
        outcome['partial'] = partial
    return outcome


def omitted():
    # type: () -> Dict[str, Any]
    """Build the outcome of a statement that runs but whose result is left out."""
    return {'omit': True}


class FakeServer(object):
    """A scripted Neo4j transactional HTTP endpoint.

    Statements are matched by text against `script`; anything unscripted
    succeeds with no columns and no updates.  Every request is recorded in
    `requests` as (method, path, body) and in `raw` as received.
    """

    def __init__(self):
        # type: () -> None
        self.script = {}       # type: Dict[str, Dict[str, Any]]
        self.requests = []     # type: List[Tuple[str, str, Any]]
        self.raw = []          # type: List[httpx.Request]
        self.open = {}         # type: Dict[int, List[str]]
        self.committed = []    # type: List[str]
        self.inject = []       # type: List[Any]
        self.next_txid = 1
        self.transport = httpx.MockTransport(self.handle)

    def expire(self, txid):
        # type: (int) -> None
        """Forget a transaction as the server does when it times out."""
        del self.open[txid]

    def paths(self, method=None):
        # type: (Optional[str]) -> List[str]
        return [p for m, p, _ in self.requests if method is None or m == method]

    def sent_statements(self):
        # type: () -> List[str]
        """Return the text of every statement sent, in order."""
        out = []
        for _, _, body in self.requests:
            if body:
                out.extend(s['statement'] for s in body.get('statements', []))
        return out

    def _run(self, body):
        # type: (Any) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]], List[str]]
        results = []
        done = []
        for stmt in (body or {}).get('statements', []):
            outcome = self.script.get(stmt['statement'], result())
            if 'code' in outcome:
                error = dict(outcome)
                partial = error.pop('partial', None)
                if partial is not None:
                    results.append(self._strip(stmt, partial))
                return results, [error], done
            done.append(stmt['statement'])
            if outcome.get('omit'):
                continue
            results.append(self._strip(stmt, outcome))
        return results, [], done

    @staticmethod
    def _strip(stmt, outcome):
        # type: (Dict[str, Any], Dict[str, Any]) -> Dict[str, Any]
        res = dict(outcome)
        if not stmt.get('includeStats'):
            res.pop('stats', None)
        return res

    def _tx_body(self, txid, results, errors):
        # type: (int, Any, Any) -> Dict[str, Any]
        return {'commit': '%s/db/data/transaction/%d/commit' % (BASE, txid),
                'results': results,
                'transaction': {'expires': EXPIRES},
                'errors': errors}

    @staticmethod
    def _not_found(txid):
        # type: (int) -> httpx.Response
        return httpx.Response(404, json={
            'results': [],
            'errors': [failure('Neo.ClientError.Transaction.TransactionNotFound',
                               'Unrecognized transaction id %d' % (txid))]})

    def handle(self, request):
        # type: (httpx.Request) -> httpx.Response
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        self.requests.append((request.method, path, body))
        self.raw.append(request)
        _log.debug("%s %s %s", request.method, path, body)

        if self.inject:
            item = self.inject.pop(0)
            if isinstance(item, Exception):
                raise item
            return item

        if request.method == 'GET' and path == '/db/data/':
            return httpx.Response(200, json={'neo4j_version': '3.5.14'})

        if request.method == 'POST' and path == '/db/data/transaction/commit':
            results, errors, done = self._run(body)
            if not errors:
                self.committed.extend(done)
            return httpx.Response(200, json={'results': results, 'errors': errors})

        if request.method == 'POST' and path == '/db/data/transaction':
            txid = self.next_txid
            self.next_txid += 1
            results, errors, done = self._run(body)
            if errors:
                return httpx.Response(200, json={'results': results, 'errors': errors})
            self.open[txid] = done
            return httpx.Response(201, json=self._tx_body(txid, results, []),
                                  headers={'Location': '%s/db/data/transaction/%d'
                                           % (BASE, txid)})

        m = _TX_RE.match(path)
        if m is None:
            return httpx.Response(404)
        txid = int(m.group(1))
        if txid not in self.open:
            return self._not_found(txid)

        if request.method == 'DELETE' and not m.group(2):
            del self.open[txid]
            return httpx.Response(200, json={'results': [], 'errors': []})

        if request.method != 'POST':
            return httpx.Response(405)

        results, errors, done = self._run(body)
        if errors:
            # A failed statement rolls the transaction back
            del self.open[txid]
            return httpx.Response(200, json={'results': results, 'errors': errors})
        self.open[txid].extend(done)
        if m.group(2):
            self.committed.extend(self.open.pop(txid))
            return httpx.Response(200, json={'results': results, 'errors': []})
        return httpx.Response(200, json=self._tx_body(txid, results, []))
