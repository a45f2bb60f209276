"""Stateless request/response access to a wavelet tree.

A caller builds one query, hands it to :func:`execute` and gets back a
:class:`QueryResult` holding either the answer or the contract violation
that prevented one. Nothing is remembered between calls.
"""
from wavelet.errors import WaveletError


class AccessQuery(object):
    name = 'access'
    arity = 1

    def __init__(self, index):
        self.index = index

    def run(self, tree):
        return tree.access(self.index)

    def __repr__(self):
        return f"AccessQuery({self.index})"


class RankQuery(object):
    name = 'rank'
    arity = 2

    def __init__(self, position, value):
        self.position = position
        self.value = value

    def run(self, tree):
        return tree.rank_occurrences(self.position, self.value)

    def __repr__(self):
        return f"RankQuery({self.position}, {self.value})"


class QuantileQuery(object):
    name = 'quantile'
    arity = 3

    def __init__(self, start, end, k):
        self.start = start
        self.end = end
        self.k = k

    def run(self, tree):
        return tree.quantile(self.start, self.end, self.k)

    def __repr__(self):
        return f"QuantileQuery({self.start}, {self.end}, {self.k})"


QUERY_TYPES = {query_type.name: query_type for query_type in (AccessQuery, RankQuery, QuantileQuery)}


class QueryResult(object):
    def __init__(self, query, value=None, error=None):
        self.query = query
        self.value = value
        self.error = error

    @property
    def ok(self):
        return self.error is None

    def __repr__(self):
        if self.ok:
            return f"QueryResult({self.query!r}, value={self.value})"
        return f"QueryResult({self.query!r}, error={self.error!r})"


def execute(tree, query):
    """Run one query against ``tree``; contract violations become failed results."""
    try:
        return QueryResult(query, value=query.run(tree))
    except WaveletError as e:
        return QueryResult(query, error=e)


def parse_query(text):
    """Parse ``"access 3"``, ``"rank 4 50000"`` or ``"quantile 0 4 3"``."""
    tokens = text.split()
    if not tokens:
        raise ValueError("empty query")

    name = tokens[0].lower()
    if name not in QUERY_TYPES:
        raise ValueError(f"unknown query '{tokens[0]}', expected one of {sorted(QUERY_TYPES)}")

    args = tokens[1:]
    query_type = QUERY_TYPES[name]
    if len(args) != query_type.arity:
        raise ValueError(f"'{name}' takes {query_type.arity} integer argument(s), got {len(args)}")
    return query_type(*(int(arg) for arg in args))
