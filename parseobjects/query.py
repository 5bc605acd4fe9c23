# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""

Queries over a remote class.

A `Query` combines the constraints of its ``where`` clause with the
modifiers (limit, skip, order, included and selected keys, read preferences,
hint) that shape the results. Queries are values: every modifier returns a
new query and leaves the original unchanged, so one query can be safely
shared and run from several threads.

>>> from parseobjects.constraints import Key
>>> query = GameScore.query(Key('score') > 100).order(descending('score'))
>>> best = query.limit(10).find()

Each terminal operation (`find()`, `first()`, `count()`, `find_all()`,
`aggregate()`, `distinct()` and their ``_explain`` forms) is available in a
blocking form, an ``_async`` form that calls a callback with a `Success` or
`Failure`, and a ``_future`` form returning a `concurrent.futures.Future`.

A query with a limit of 0 matches nothing: its terminal operations return
an empty result (or raise `ObjectNotFound`, for `first()`) without making a
request.

"""

from copy import copy
import logging

import simplejson as json

import parseobjects.constraints
import parseobjects.dataobject
from parseobjects import api
from parseobjects.command import Command, make_async_method, make_future_method
from parseobjects.errors import InvalidQueryState, ObjectNotFound
from parseobjects.pointer import class_name_of


DEFAULT_LIMIT = 100
FIND_ALL_BATCH_LIMIT = 1000

log = logging.getLogger('parseobjects.query')


class QueryWhere(object):

    """The constraints of a ``where`` clause, grouped by key.

    Constraints on the same key merge into one object, so
    ``greater_than('score', 5)`` and ``less_than('score', 10)`` encode as
    ``{"score": {"$gt": 5, "$lt": 10}}``. A constraint with the same operator
    as an earlier one on its key replaces it. Direct equality cannot be
    combined with operators: an equality replaces the operators on its key,
    and an operator replaces an equality.

    """

    def __init__(self, *constraints):
        self.constraints = {}
        for constraint in parseobjects.constraints.flatten(constraints):
            self._add(constraint)

    def _add(self, constraint):
        existing = self.constraints.get(constraint.key, ())
        if constraint.comparator is None:
            merged = (constraint,)
        else:
            merged = tuple(c for c in existing
                           if c.comparator is not None
                           and c.comparator != constraint.comparator)
            merged += (constraint,)
        self.constraints[constraint.key] = merged

    def merge(self, *constraints):
        """Returns a new `QueryWhere` with `constraints` added to these."""
        where = QueryWhere()
        where.constraints = dict(self.constraints)
        for constraint in parseobjects.constraints.flatten(constraints):
            where._add(constraint)
        return where

    def __len__(self):
        return len(self.constraints)

    def __iter__(self):
        for constraints in self.constraints.values():
            for constraint in constraints:
                yield constraint

    def to_dict(self):
        data = {}
        for key, constraints in self.constraints.items():
            if len(constraints) == 1 and constraints[0].comparator is None:
                data[key] = constraints[0].encode()
            else:
                value = {}
                for constraint in constraints:
                    value.update(constraint.encode())
                data[key] = value
        return data

    def _comparable(self):
        return dict((key, frozenset(constraints))
                    for key, constraints in self.constraints.items())

    def __eq__(self, other):
        if not isinstance(other, QueryWhere):
            return NotImplemented
        return self._comparable() == other._comparable()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(frozenset(self._comparable().items()))

    def __repr__(self):
        return 'QueryWhere(%s)' % json.dumps(self.to_dict(), sort_keys=True)


class Order(object):

    """A sort order on one key."""

    def __init__(self, key, descending=False):
        self.key = key
        self.descending = descending

    def __str__(self):
        if self.descending:
            return '-' + self.key
        return self.key

    def __eq__(self, other):
        if not isinstance(other, Order):
            return NotImplemented
        return (self.key, self.descending) == (other.key, other.descending)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.key, self.descending))

    def __repr__(self):
        if self.descending:
            return 'descending(%r)' % self.key
        return 'ascending(%r)' % self.key


def ascending(key):
    return Order(key)


def descending(key):
    return Order(key, descending=True)


def as_order(order):
    if isinstance(order, Order):
        return order
    if order.startswith('-'):
        return descending(order[1:])
    return ascending(order)


def union(existing, keys):
    """Returns `existing` with the new members of `keys` added, in
    order."""
    result = list(existing or ())
    for key in keys:
        if key not in result:
            result.append(key)
    return tuple(result)


def identity(data):
    return data


class Query(object):

    """A query for objects of the class `cls` matching `constraints`.

    Parameter `cls` is the `ParseObject` subclass results are decoded as, or
    the remote class name of a declared one. Parameter `constraints` are
    `Constraint` instances (or lists of them, as some builders return).

    """

    def __init__(self, cls, *constraints):
        self.cls = cls
        self.class_name = class_name_of(cls)
        self.where = QueryWhere(*constraints)
        self._limit = DEFAULT_LIMIT
        self._skip = 0
        self._order = None
        self._keys = None
        self._include = None
        self._exclude_keys = None
        self._hint = None
        self._read_preference = None
        self._include_read_preference = None
        self._subquery_read_preference = None
        self._pipeline = None

    def _clone(self, **kwargs):
        query = copy(self)
        for name, value in kwargs.items():
            setattr(query, '_' + name, value)
        return query

    def filter(self, *constraints):
        """Returns a new query that also has the given constraints."""
        query = copy(self)
        query.where = self.where.merge(*constraints)
        return query

    def limit(self, value):
        """Returns a new query returning at most `value` objects.

        A limit of 0 makes a query that matches nothing without asking the
        server.

        """
        return self._clone(limit=value)

    def skip(self, value):
        return self._clone(skip=value)

    def order(self, *orders):
        """Returns a new query sorted by `orders`, which are `Order`
        instances or key names prefixed with ``-`` for descending order."""
        if not orders:
            return self._clone(order=None)
        return self._clone(order=tuple(as_order(o) for o in orders))

    def include(self, *keys):
        """Returns a new query that includes the full objects pointed to by
        the fields `keys`."""
        return self._clone(include=union(self._include, keys))

    def include_all(self):
        return self._clone(include=('*',))

    def exclude(self, *keys):
        """Returns a new query that leaves the fields `keys` out of its
        results."""
        return self._clone(exclude_keys=union(self._exclude_keys, keys))

    def select(self, *keys):
        """Returns a new query whose results have only the fields `keys`."""
        return self._clone(keys=union(self._keys, keys))

    def hint(self, value):
        """Returns a new query that asks the server to use the index
        `value`."""
        return self._clone(hint=value)

    def read_preference(self, read, include=None, subquery=None):
        """Returns a new query with the database read preferences for the
        query, its included objects and its subqueries."""
        return self._clone(read_preference=read,
            include_read_preference=include,
            subquery_read_preference=subquery)

    def pipeline(self, stages):
        """Returns a new query that `aggregate()` runs with the pipeline
        `stages`."""
        return self._clone(pipeline=list(stages))

    def _comparable(self):
        return (
            self.class_name, self.where, self._limit, self._skip, self._order,
            frozenset(self._keys) if self._keys is not None else None,
            frozenset(self._include) if self._include is not None else None,
            frozenset(self._exclude_keys) if self._exclude_keys is not None else None,
            self._hint, self._read_preference, self._include_read_preference,
            self._subquery_read_preference,
            json.dumps(self._pipeline, sort_keys=True),
        )

    def __eq__(self, other):
        if not isinstance(other, Query):
            return NotImplemented
        return self._comparable() == other._comparable()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self._comparable())

    def to_dict(self, limit=None, explain=False, count=False):
        """Encodes the query as the body of a find request.

        Modifiers that are not set are left out of the body entirely.

        """
        data = {
            'limit': self._limit if limit is None else limit,
            'skip': self._skip,
        }
        if self._keys is not None:
            data['keys'] = list(self._keys)
        if self._include is not None:
            data['include'] = list(self._include)
        if self._exclude_keys is not None:
            data['excludeKeys'] = list(self._exclude_keys)
        if self._order:
            data['order'] = ','.join(str(o) for o in self._order)
        if self._hint is not None:
            data['hint'] = self._hint
        if explain:
            data['explain'] = True
        if count:
            data['count'] = True
        if self._read_preference is not None:
            data['readPreference'] = self._read_preference
        if self._include_read_preference is not None:
            data['includeReadPreference'] = self._include_read_preference
        if self._subquery_read_preference is not None:
            data['subqueryReadPreference'] = self._subquery_read_preference
        data['_method'] = 'GET'
        data['where'] = self.where.to_dict()
        return data

    def __repr__(self):
        return '%s (%s)' % (self.class_name,
            json.dumps(self.to_dict(), separators=(',', ':')))

    def result_cls(self):
        if isinstance(self.cls, str):
            return parseobjects.dataobject.find_by_class_name(self.cls)
        return self.cls

    def decode_results(self, data):
        cls = self.result_cls()
        return [cls.from_dict(item) for item in data['results']]

    def decode_first(self, data):
        results = self.decode_results(data)
        if not results:
            raise ObjectNotFound('No %s matched the query' % self.class_name)
        return results[0]

    @staticmethod
    def decode_count(data):
        return data['count']

    def find_command(self):
        return Command('POST', api.endpoint_for_class(self.class_name),
            body=self.to_dict(), decode=self.decode_results)

    def first_command(self):
        return Command('POST', api.endpoint_for_class(self.class_name),
            body=self.to_dict(limit=1), decode=self.decode_first)

    def count_command(self):
        return Command('POST', api.endpoint_for_class(self.class_name),
            body=self.to_dict(limit=1, count=True), decode=self.decode_count)

    def find_explain_command(self, decode=None):
        return Command('POST', api.endpoint_for_class(self.class_name),
            body=self.to_dict(explain=True), decode=explain_decoder(decode))

    def first_explain_command(self, decode=None):
        decode_all = explain_decoder(decode)

        def decode_first(data):
            results = decode_all(data)
            if not results:
                raise ObjectNotFound('No %s matched the query' % self.class_name)
            return results[0]

        return Command('POST', api.endpoint_for_class(self.class_name),
            body=self.to_dict(limit=1, explain=True), decode=decode_first)

    def count_explain_command(self, decode=None):
        return Command('POST', api.endpoint_for_class(self.class_name),
            body=self.to_dict(limit=1, explain=True, count=True),
            decode=explain_decoder(decode))

    def aggregate_body(self, pipeline, explain=False):
        data = {}
        if explain:
            data['explain'] = True
        if pipeline is None:
            pipeline = self._pipeline
        if pipeline is not None:
            data['pipeline'] = list(pipeline)
        return data

    def aggregate_command(self, pipeline=None):
        return Command('POST', api.endpoint_for_aggregate(self.class_name),
            body=self.aggregate_body(pipeline), decode=self.decode_results)

    def aggregate_explain_command(self, pipeline=None, decode=None):
        return Command('POST', api.endpoint_for_aggregate(self.class_name),
            body=self.aggregate_body(pipeline, explain=True),
            decode=explain_decoder(decode))

    def distinct_body(self, key, explain=False):
        data = {}
        if explain:
            data['explain'] = True
        if len(self.where):
            data['where'] = self.where.to_dict()
        data['distinct'] = key
        return data

    def distinct_command(self, key):
        return Command('POST', api.endpoint_for_aggregate(self.class_name),
            body=self.distinct_body(key), decode=self.decode_results)

    def distinct_explain_command(self, key, decode=None):
        return Command('POST', api.endpoint_for_aggregate(self.class_name),
            body=self.distinct_body(key, explain=True),
            decode=explain_decoder(decode))

    def _matches_nothing(self, operation):
        if self._limit == 0:
            log.debug('Not running %s for %s: its limit is 0', operation,
                self.class_name)
            return True
        return False

    def find(self, http=None, **kwargs):
        """Returns the list of objects matching the query."""
        if self._matches_nothing('find'):
            return []
        return self.find_command().execute(http=http, **kwargs)

    def first(self, http=None, **kwargs):
        """Returns the first object matching the query.

        Raises `ObjectNotFound` if no object matches.

        """
        if self._matches_nothing('first'):
            raise ObjectNotFound('No %s matched the query' % self.class_name)
        return self.first_command().execute(http=http, **kwargs)

    def count(self, http=None, **kwargs):
        """Returns the number of objects matching the query."""
        if self._matches_nothing('count'):
            return 0
        return self.count_command().execute(http=http, **kwargs)

    def find_all(self, batch_limit=None, http=None, **kwargs):
        """Returns every object matching the query, however many there are.

        The objects are requested `batch_limit` at a time in ascending
        ``objectId`` order, so the query may not have its own skip, order
        or limit; such queries raise `InvalidQueryState` before any request
        is made.

        """
        if self._matches_nothing('find_all'):
            return []
        if self._skip or self._order or self._limit != DEFAULT_LIMIT:
            raise InvalidQueryState('Cannot iterate on a query with sort, '
                'skip, or limit.')
        if batch_limit is None:
            batch_limit = FIND_ALL_BATCH_LIMIT

        page = self.order(ascending('objectId')).limit(batch_limit)
        results = []
        while True:
            found = page.find(http=http, **kwargs)
            log.debug('find_all for %s got %d objects after %d',
                self.class_name, len(found), len(results))
            results.extend(found)
            if len(found) < batch_limit:
                return results
            last = found[-1].object_id
            page = page.filter(parseobjects.constraints.greater_than('objectId', last))

    def aggregate(self, pipeline=None, http=None, **kwargs):
        """Runs the aggregation `pipeline` (by default, the query's own
        `pipeline()`) and returns its results.

        The query's constraints are not part of the request; express them
        as a ``$match`` stage of the pipeline.

        """
        if self._matches_nothing('aggregate'):
            return []
        return self.aggregate_command(pipeline).execute(http=http, **kwargs)

    def distinct(self, key, http=None, **kwargs):
        """Returns the distinct values of `key` over the objects matching
        the query."""
        if self._matches_nothing('distinct'):
            return []
        return self.distinct_command(key).execute(http=http, **kwargs)

    def find_explain(self, decode=None, http=None, **kwargs):
        """Returns the server's plan for `find()`.

        The plan's shape depends on the database; each of its results is
        passed through `decode`, when given.

        """
        if self._matches_nothing('find_explain'):
            return []
        return self.find_explain_command(decode).execute(http=http, **kwargs)

    def first_explain(self, decode=None, http=None, **kwargs):
        if self._matches_nothing('first_explain'):
            raise ObjectNotFound('No %s matched the query' % self.class_name)
        return self.first_explain_command(decode).execute(http=http, **kwargs)

    def count_explain(self, decode=None, http=None, **kwargs):
        if self._matches_nothing('count_explain'):
            return []
        return self.count_explain_command(decode).execute(http=http, **kwargs)

    def aggregate_explain(self, pipeline=None, decode=None, http=None, **kwargs):
        if self._matches_nothing('aggregate_explain'):
            return []
        return self.aggregate_explain_command(pipeline, decode).execute(
            http=http, **kwargs)

    def distinct_explain(self, key, decode=None, http=None, **kwargs):
        if self._matches_nothing('distinct_explain'):
            return []
        return self.distinct_explain_command(key, decode).execute(
            http=http, **kwargs)

    find_async = make_async_method('find')
    first_async = make_async_method('first')
    count_async = make_async_method('count')
    find_all_async = make_async_method('find_all')
    aggregate_async = make_async_method('aggregate')
    distinct_async = make_async_method('distinct')
    find_explain_async = make_async_method('find_explain')
    first_explain_async = make_async_method('first_explain')
    count_explain_async = make_async_method('count_explain')
    aggregate_explain_async = make_async_method('aggregate_explain')
    distinct_explain_async = make_async_method('distinct_explain')

    find_future = make_future_method('find')
    first_future = make_future_method('first')
    count_future = make_future_method('count')
    find_all_future = make_future_method('find_all')
    aggregate_future = make_future_method('aggregate')
    distinct_future = make_future_method('distinct')
    find_explain_future = make_future_method('find_explain')
    first_explain_future = make_future_method('first_explain')
    count_explain_future = make_future_method('count_explain')
    aggregate_explain_future = make_future_method('aggregate_explain')
    distinct_explain_future = make_future_method('distinct_explain')


def explain_decoder(decode=None):
    """Returns a function decoding the ``results`` of an explain response,
    each through `decode` when given."""
    if decode is None:
        decode = identity

    def decode_explain(data):
        return [decode(item) for item in data['results']]

    return decode_explain
