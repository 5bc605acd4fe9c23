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

Pointers: references to remote objects by class name and ``objectId``.

A `Pointer` never holds the referenced object's data. It is the value of
pointer fields that were not included in a response, the encoded value of
equality constraints against objects, and a handle that can `fetch()` the
full object.

"""

import logging

import parseobjects.dataobject
from parseobjects import api
from parseobjects import json
from parseobjects.command import Command, make_async_method, make_future_method
from parseobjects.errors import DecodingError, MissingIdentifier


log = logging.getLogger('parseobjects.pointer')


def class_name_of(cls_or_class_name):
    """Returns the remote class name of a `DataObject` class, or the given
    string unchanged."""
    if isinstance(cls_or_class_name, str):
        return cls_or_class_name
    return cls_or_class_name.class_name


def include_params(include_keys):
    """Returns the query string parameters that ask for the pointer fields
    `include_keys` to be included in a response.

    The backend expects the keys as a JSON array, so ``["a", "b"]`` is sent
    as ``include=["a", "b"]``. The key ``*`` includes every pointer field.

    """
    if not include_keys:
        return None
    return {'include': json.dumps(list(include_keys))}


class Pointer(object):

    """A reference to the object with `object_id` in the remote class
    named by `cls_or_class_name`.

    Parameter `cls_or_class_name` is either a `DataObject` class, which is
    also used to decode fetched objects, or a remote class name.

    """

    def __init__(self, cls_or_class_name, object_id):
        if not object_id:
            raise MissingIdentifier('Cannot point to a %s without an objectId'
                % class_name_of(cls_or_class_name))
        self.class_name = class_name_of(cls_or_class_name)
        self.object_id = object_id
        if isinstance(cls_or_class_name, str):
            self.cls = None
        else:
            self.cls = cls_or_class_name

    @classmethod
    def from_object(cls, obj):
        """Returns a pointer to the saved object `obj`.

        Raises `MissingIdentifier` if `obj` has not been saved yet.

        """
        object_id = getattr(obj, 'object_id', None)
        if object_id is None:
            raise MissingIdentifier('Cannot create a pointer to an unsaved %s'
                % type(obj).__name__)
        return cls(type(obj), object_id)

    def to_dict(self):
        return {
            '__type': 'Pointer',
            'className': self.class_name,
            'objectId': self.object_id,
        }

    def __eq__(self, other):
        if not isinstance(other, Pointer):
            return NotImplemented
        return (self.class_name, self.object_id) == (other.class_name, other.object_id)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.class_name, self.object_id))

    def __repr__(self):
        return 'Pointer(%r, %r)' % (self.class_name, self.object_id)

    def has_same_object_id(self, other):
        """Returns whether `other`, a pointer or an object, refers to the
        same remote object as this pointer."""
        return (self.class_name == getattr(other, 'class_name', None)
                and self.object_id == getattr(other, 'object_id', None))

    def target_cls(self):
        if self.cls is not None:
            return self.cls
        try:
            return parseobjects.dataobject.find_by_class_name(self.class_name)
        except KeyError:
            raise DecodingError('No class is declared for remote class %r'
                % self.class_name, field='className')

    def fetch_command(self, include_keys=None):
        cls = self.target_cls()
        return Command('GET', api.endpoint_for_object(self.class_name, self.object_id),
            params=include_params(include_keys), decode=cls.from_dict)

    def fetch(self, include_keys=None, http=None, **kwargs):
        """Fetches the referenced object.

        Optional parameter `include_keys` names pointer fields of the object
        to include in full. Raises `ObjectNotFound` if the object does not
        exist.

        """
        log.debug('Fetching %r', self)
        return self.fetch_command(include_keys).execute(http=http, **kwargs)

    fetch_async = make_async_method('fetch')
    fetch_future = make_future_method('fetch')
