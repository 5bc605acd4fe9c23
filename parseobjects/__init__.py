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

parseobjects is a client library for Parse-style REST backends.

Define the classes stored on the server as `ParseObject` subclasses with
their fields, then save, fetch, delete and query them as plain Python
objects. parseobjects has:

* declarative conversion between Python objects and the backend's JSON
  encoding, including dates, geographic points and pointers

* a query builder covering the backend's constraint operators, from
  comparisons and regular expressions to geographic and relational queries

* blocking, callback and future forms of every request, sent through the
  `httplib2` library

* batched saves, fetches and deletes with per-object results


Example
=======

    >>> import parseobjects
    >>> from parseobjects import ParseObject, fields
    >>> from parseobjects.constraints import Key
    >>> parseobjects.initialize('applicationId', 'http://localhost:1337/1',
    ...     client_key='clientKey')
    >>> class GameScore(ParseObject):
    ...     score  = fields.Field()
    ...     player = fields.Field()
    ...
    >>> GameScore(score=10, player='Jen').save()
    <GameScore yarr>
    >>> [s.score for s in GameScore.query(Key('score') > 5).find()]
    [10]

"""

__version__ = '1.0.0'
__author__ = 'parseobjects contributors'

from parseobjects import batch, constraints, fields
from parseobjects.api import initialize
from parseobjects.config import Config
from parseobjects.errors import ParseError
from parseobjects.installation import Installation
from parseobjects.objects import ParseObject
from parseobjects.pointer import Pointer
from parseobjects.query import Query, ascending, descending
from parseobjects.result import Failure, Success
from parseobjects.types import GeoPoint, Polygon
from parseobjects.user import User

__all__ = ('initialize', 'ParseObject', 'User', 'Installation', 'Config',
           'Query', 'ascending', 'descending', 'Pointer', 'GeoPoint',
           'Polygon', 'Success', 'Failure', 'ParseError', 'fields',
           'constraints', 'batch')
