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

Constraints are the predicates of a query's ``where`` clause.

Each builder function in this module returns a `Constraint` (or, for
predicates the backend spells with more than one operator, a list of
them) naming a key, an operator and a value:

>>> from parseobjects.constraints import greater_than, Key
>>> greater_than('score', 100).to_dict()
{'score': {'$gt': 100}}
>>> (Key('name') == 'yarr').to_dict()
{'name': 'yarr'}

Direct equality has no operator and encodes as the bare value. The compound
operators (``$or``, ``$and``, ``$nor``) and ``$relatedTo`` apply to the
whole query rather than one key, so their constraints use the operator as
the key.

Builders are plain functions: they never make requests and never change a
constraint once built.

"""

from datetime import datetime

import simplejson as json

import parseobjects.query
from parseobjects import fields
from parseobjects import types
from parseobjects.pointer import Pointer


EARTH_RADIUS_MILES = 3958.8
EARTH_RADIUS_KILOMETERS = 6371.0


class Value(object):

    """An encodable constraint value.

    Values are one of a closed set of kinds, each knowing its own encoding.
    Use `wrap()` to make one from a plain Python value.

    """

    def encode(self):
        raise NotImplementedError

    def _key(self):
        return json.dumps(self.encode(), sort_keys=True)

    def __eq__(self, other):
        if type(self) != type(other):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, self.encode())


class Scalar(Value):

    """A string, number, boolean or null."""

    def __init__(self, value):
        self.value = value

    def encode(self):
        return self.value


class ArrayValue(Value):

    def __init__(self, values):
        self.values = tuple(wrap(v) for v in values)

    def encode(self):
        return [v.encode() for v in self.values]


class ObjectValue(Value):

    """A JSON object whose members are themselves values."""

    def __init__(self, members):
        self.members = tuple((k, wrap(v)) for k, v in members.items())

    def encode(self):
        return dict((k, v.encode()) for k, v in self.members)


class GeoPointValue(Value):

    def __init__(self, point):
        self.point = point

    def encode(self):
        return self.point.to_dict()


class PointerValue(Value):

    def __init__(self, pointer):
        self.pointer = pointer

    def encode(self):
        return self.pointer.to_dict()


class NestedWhereValue(Value):

    """The ``where`` clause of another query."""

    def __init__(self, where):
        self.where = where

    def encode(self):
        return self.where.to_dict()


class DateValue(Value):

    date_field = fields.Date()

    def __init__(self, date):
        self.date = date

    def encode(self):
        return self.date_field.encode(self.date)


class RelativeTimeValue(Value):

    """A natural language time offset, such as ``3 days ago``, that the
    server resolves against its current time."""

    def __init__(self, text):
        self.text = text

    def encode(self):
        return {'$relativeTime': self.text}


def wrap(value):
    """Returns the `Value` for the plain Python `value`.

    Saved objects are wrapped as pointers to them, so wrapping an unsaved
    object raises `MissingIdentifier`. Values of any kind the backend cannot
    encode raise `TypeError`.

    """
    if isinstance(value, Value):
        return value
    if value is None or isinstance(value, (bool, int, float, str)):
        return Scalar(value)
    if isinstance(value, datetime):
        return DateValue(value)
    if isinstance(value, types.GeoPoint):
        return GeoPointValue(value)
    if isinstance(value, types.Polygon):
        return ObjectValue(value.to_dict())
    if isinstance(value, Pointer):
        return PointerValue(value)
    if isinstance(value, parseobjects.query.QueryWhere):
        return NestedWhereValue(value)
    if isinstance(value, parseobjects.query.Query):
        return NestedWhereValue(value.where)
    if isinstance(value, (list, tuple, set, frozenset)):
        return ArrayValue(value)
    if isinstance(value, dict):
        return ObjectValue(value)
    if hasattr(value, 'object_id') and hasattr(value, 'class_name'):
        return PointerValue(Pointer.from_object(value))
    raise TypeError('Cannot use %r as a constraint value' % (value,))


class Constraint(object):

    """One predicate of a ``where`` clause: `key`, `comparator` and `value`.

    A `comparator` of `None` means direct equality, encoded as
    ``{key: value}``; otherwise the constraint encodes as
    ``{key: {comparator: value}}``.

    """

    __slots__ = ('key', 'comparator', 'value')

    def __init__(self, key, comparator, value):
        object.__setattr__(self, 'key', key)
        object.__setattr__(self, 'comparator', comparator)
        object.__setattr__(self, 'value', wrap(value))

    def __setattr__(self, name, value):
        raise AttributeError('Constraints cannot be changed')

    def encode(self):
        """Returns the encoding of this constraint's value under its key."""
        if self.comparator is None:
            return self.value.encode()
        return {self.comparator: self.value.encode()}

    def to_dict(self):
        return {self.key: self.encode()}

    def __eq__(self, other):
        if not isinstance(other, Constraint):
            return NotImplemented
        return ((self.key, self.comparator, self.value)
                == (other.key, other.comparator, other.value))

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.key, self.comparator, self.value))

    def __repr__(self):
        return 'Constraint(%r, %r, %r)' % (self.key, self.comparator, self.value)


def flatten(constraints):
    """Yields the constraints in `constraints`, expanding the lists that
    builders of several constraints return."""
    for constraint in constraints:
        if isinstance(constraint, (list, tuple)):
            for c in flatten(constraint):
                yield c
        elif isinstance(constraint, Constraint):
            yield constraint
        else:
            raise TypeError('%r is not a Constraint' % (constraint,))


def equal_to(key, value):
    """Matches objects whose `key` is `value`.

    When `value` is a saved object, it is compared as a pointer.

    """
    return Constraint(key, None, value)


def not_equal_to(key, value):
    return Constraint(key, '$ne', value)


def less_than(key, value):
    return Constraint(key, '$lt', value)


def less_than_or_equal_to(key, value):
    return Constraint(key, '$lte', value)


def greater_than(key, value):
    return Constraint(key, '$gt', value)


def greater_than_or_equal_to(key, value):
    return Constraint(key, '$gte', value)


def exists(key):
    return Constraint(key, '$exists', True)


def does_not_exist(key):
    return Constraint(key, '$exists', False)


def matches_regex(key, regex, modifiers=None):
    """Matches string values of `key` against the regular expression
    `regex`.

    Optional parameter `modifiers` holds the regular expression options,
    such as ``i`` for case insensitive matching.

    """
    constraint = Constraint(key, '$regex', regex)
    if modifiers is None:
        return constraint
    return [constraint, Constraint(key, '$options', modifiers)]


def quote(substring):
    """Quotes `substring` so it matches literally inside a regular
    expression."""
    # \E would end the quoted span early.
    return '\\Q%s\\E' % substring.replace('\\E', '\\E\\\\E\\Q')


def contains_string(key, substring, modifiers=None):
    return matches_regex(key, quote(substring), modifiers)


def has_prefix(key, prefix, modifiers=None):
    return matches_regex(key, '^' + quote(prefix), modifiers)


def has_suffix(key, suffix, modifiers=None):
    return matches_regex(key, quote(suffix) + '$', modifiers)


def matches_text(key, text):
    """Matches objects whose `key` matches `text` in a full text search.

    The class must have a text index on `key`.

    """
    return Constraint(key, '$text', {'$search': {'$term': text}})


def contained_in(key, values):
    return Constraint(key, '$in', list(values))


def not_contained_in(key, values):
    return Constraint(key, '$nin', list(values))


def contains_all(key, values):
    """Matches objects whose array `key` contains every one of `values`."""
    return Constraint(key, '$all', list(values))


def contained_by(key, values):
    """Matches objects whose array `key` has no elements beyond `values`."""
    return Constraint(key, '$containedBy', list(values))


def matches_key_in_query(key, query_key, query):
    """Matches objects whose `key` equals the `query_key` of some object
    matched by `query`."""
    return Constraint(key, '$select', {
        'query': {'where': query.where},
        'key': query_key,
    })


def does_not_match_key_in_query(key, query_key, query):
    return Constraint(key, '$dontSelect', {
        'query': {'where': query.where},
        'key': query_key,
    })


def matches_query(key, query):
    """Matches objects whose pointer `key` refers to an object matched by
    `query`."""
    return Constraint(key, '$inQuery', {'where': query.where})


def does_not_match_query(key, query):
    return Constraint(key, '$notInQuery', {'where': query.where})


def compound(operator, queries):
    if len(queries) == 1 and isinstance(queries[0], (list, tuple)):
        queries = queries[0]
    return Constraint(operator, None, [NestedWhereValue(q.where) for q in queries])


def or_(*queries):
    """Matches objects matched by any of `queries`."""
    return compound('$or', queries)


def nor(*queries):
    """Matches objects matched by none of `queries`."""
    return compound('$nor', queries)


def and_(*queries):
    """Matches objects matched by every one of `queries`."""
    return compound('$and', queries)


def related(key, obj):
    """Matches objects in the relation `key` of `obj`, a saved object or a
    `Pointer` to one."""
    if not isinstance(obj, Pointer):
        obj = Pointer.from_object(obj)
    return Constraint('$relatedTo', None, {'key': key, 'object': obj})


def relative(constraint):
    """Makes the time offset `constraint` is built with, such as ``3 days
    ago`` or ``in 2 weeks``, relative to the server's current time.

    >>> relative(greater_than_or_equal_to('createdAt', '3 days ago')).to_dict()
    {'createdAt': {'$gte': {'$relativeTime': '3 days ago'}}}

    """
    value = constraint.value
    if not isinstance(value, Scalar) or not isinstance(value.value, str):
        raise TypeError('Relative time constraints need a string offset, not %r'
            % (value,))
    return Constraint(constraint.key, constraint.comparator,
        RelativeTimeValue(value.value))


def near(key, point):
    """Matches objects with a GeoPoint `key`, sorted nearest to `point`
    first."""
    return Constraint(key, '$nearSphere', point)


def within_radians(key, point, distance, sorted=True):
    """Matches objects with a GeoPoint `key` within `distance` radians of
    `point`.

    When `sorted` is true the results are sorted nearest first.

    """
    if sorted:
        return [near(key, point), Constraint(key, '$maxDistance', distance)]
    return [Constraint(key, '$centerSphere', point),
            Constraint(key, '$geoWithin', distance)]


def within_miles(key, point, distance, sorted=True):
    return within_radians(key, point, distance / EARTH_RADIUS_MILES, sorted)


def within_kilometers(key, point, distance, sorted=True):
    return within_radians(key, point, distance / EARTH_RADIUS_KILOMETERS, sorted)


def within_geo_box(key, southwest, northeast):
    """Matches objects with a GeoPoint `key` inside the box between the
    corners `southwest` and `northeast`."""
    return Constraint(key, '$within', {'$box': [southwest, northeast]})


def within_polygon(key, *points):
    """Matches objects with a GeoPoint `key` inside the polygon with the
    vertices `points`.

    `points` may also be given as a single list or `Polygon`.

    """
    if len(points) == 1:
        points = points[0]
    if isinstance(points, types.Polygon):
        points = points.points
    coordinates = [[p.latitude, p.longitude] for p in points]
    return Constraint(key, '$geoWithin', {'$polygon': coordinates})


def polygon_contains(key, point):
    """Matches objects with a Polygon `key` that contains `point`."""
    return Constraint(key, '$geoIntersects', {'$point': point})


class Key(object):

    """A key that builds constraints with comparison operators.

    >>> (Key('score') > 100).to_dict()
    {'score': {'$gt': 100}}

    Comparing with a saved object builds a pointer equality, and comparing
    with a `Query` builds a ``$inQuery`` (``==``) or ``$notInQuery``
    (``!=``) constraint.

    """

    def __init__(self, name):
        self.name = name

    def __eq__(self, other):
        if isinstance(other, parseobjects.query.Query):
            return matches_query(self.name, other)
        return equal_to(self.name, other)

    def __ne__(self, other):
        if isinstance(other, parseobjects.query.Query):
            return does_not_match_query(self.name, other)
        return not_equal_to(self.name, other)

    def __lt__(self, other):
        return less_than(self.name, other)

    def __le__(self, other):
        return less_than_or_equal_to(self.name, other)

    def __gt__(self, other):
        return greater_than(self.name, other)

    def __ge__(self, other):
        return greater_than_or_equal_to(self.name, other)

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return 'Key(%r)' % self.name
