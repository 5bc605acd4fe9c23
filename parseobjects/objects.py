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

`ParseObject` is the base class for objects stored in a remote class.

Declare a subclass for each remote class, with a field for each of its keys:

>>> from parseobjects import fields, objects
>>> class GameScore(objects.ParseObject):
...     score = fields.Field()
...     player = fields.Pointer('Player')
...
>>> score = GameScore(score=10)
>>> score.save()
>>> score.object_id
'yarr'

The remote class name defaults to the subclass's name; set `class_name` on
the subclass to use another.

"""

import logging

from parseobjects import api
from parseobjects import fields
from parseobjects.command import Command, make_async_method, make_future_method
from parseobjects.dataobject import DataObject
from parseobjects.errors import MissingIdentifier
from parseobjects.pointer import Pointer, include_params
from parseobjects.query import Query


log = logging.getLogger('parseobjects.objects')


class ParseObject(DataObject):

    """An object in a remote class, which can be saved, fetched, deleted and
    queried."""

    object_id = fields.Field(api_name='objectId')
    created_at = fields.Datetime(api_name='createdAt')
    updated_at = fields.Datetime(api_name='updatedAt')
    acl = fields.Field(api_name='ACL')

    # Keys the server maintains, never sent in a save.
    read_only_keys = ('objectId', 'createdAt', 'updatedAt')

    def __repr__(self):
        return '<%s %s>' % (type(self).__name__, self.object_id or '(unsaved)')

    @classmethod
    def query(cls, *constraints):
        """Returns a `Query` for objects of this class matching
        `constraints`."""
        return Query(cls, *constraints)

    def endpoint(self):
        if self.object_id is None:
            raise MissingIdentifier('%s has no objectId' % type(self).__name__)
        return api.endpoint_for_object(self.class_name, self.object_id)

    def to_pointer(self):
        """Returns a `Pointer` to this object.

        Raises `MissingIdentifier` if the object has not been saved.

        """
        return Pointer.from_object(self)

    def has_same_object_id(self, other):
        """Returns whether `other` is, or points to, the same remote object
        as this one."""
        return (self.object_id is not None
                and self.class_name == getattr(other, 'class_name', None)
                and self.object_id == getattr(other, 'object_id', None))

    def to_body(self):
        """Encodes the object as the body of a save request."""
        data = self.to_dict()
        for key in self.read_only_keys:
            data.pop(key, None)
        return data

    def is_new(self):
        """Returns whether saving the object creates it on the server."""
        if api.get_configuration().allow_custom_object_id:
            return self.created_at is None
        return self.object_id is None

    def create_body(self):
        """Encodes the object as the body of a request creating it.

        Raises `MissingIdentifier` if objects are created with custom ids
        and this one has none.

        """
        data = self.to_body()
        if api.get_configuration().allow_custom_object_id:
            if self.object_id is None:
                raise MissingIdentifier('%s needs an objectId to be created with '
                    'custom object ids' % type(self).__name__)
            data['objectId'] = self.object_id
        return data

    def decode_saved(self, data):
        if 'updatedAt' not in data and 'createdAt' in data:
            data = dict(data, updatedAt=data['createdAt'])
        self.merge_from_dict(data)
        return self

    def decode_fetched(self, data):
        self.update_from_dict(data)
        return self

    def decode_deleted(self, data):
        return None

    def save_command(self):
        if self.is_new():
            return Command('POST', api.endpoint_for_class(self.class_name),
                body=self.create_body(), decode=self.decode_saved)
        return Command('PUT', self.endpoint(), body=self.to_body(),
            decode=self.decode_saved)

    def fetch_command(self, include_keys=None):
        return Command('GET', self.endpoint(),
            params=include_params(include_keys), decode=self.decode_fetched)

    def delete_command(self):
        return Command('DELETE', self.endpoint(), decode=self.decode_deleted)

    def save(self, http=None, **kwargs):
        """Saves the object, creating it if it is new.

        The server's response (the new `object_id` and timestamps) is merged
        into the object, which is returned.

        """
        log.debug('Saving %r', self)
        return self.save_command().execute(http=http, **kwargs)

    def fetch(self, include_keys=None, http=None, **kwargs):
        """Replaces the object's data with the server's copy.

        Optional parameter `include_keys` names pointer fields to include in
        full; ``["*"]`` includes them all.

        """
        return self.fetch_command(include_keys).execute(http=http, **kwargs)

    def delete(self, http=None, **kwargs):
        self.delete_command().execute(http=http, **kwargs)

    save_async = make_async_method('save')
    fetch_async = make_async_method('fetch')
    delete_async = make_async_method('delete')

    save_future = make_future_method('save')
    fetch_future = make_future_method('fetch')
    delete_future = make_future_method('delete')
