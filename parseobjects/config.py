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

The application's remote config: parameters set on the server and read by
every client.

"""

import logging

from parseobjects import api
from parseobjects import fields
from parseobjects import storage
from parseobjects.command import Command, make_async_method, make_future_method
from parseobjects.dataobject import DataObject


log = logging.getLogger('parseobjects.config')


class Config(DataObject):

    """A snapshot of the remote config parameters, available as the
    `params` dictionary."""

    class_name = '_Config'

    params = fields.Field(default=lambda obj: {})

    @classmethod
    def current(cls):
        """Returns the config last fetched or saved, or `None`."""
        data = api.get_configuration().store.get(storage.CURRENT_CONFIG)
        if data is None:
            return None
        return cls.from_dict(data)

    def make_current(self):
        api.get_configuration().store.set(storage.CURRENT_CONFIG, self.to_dict())

    @classmethod
    def decode_fetched(cls, data):
        config = cls(params=data['params'])
        config.make_current()
        return config

    def decode_saved(self, data):
        saved = bool(data['result'])
        if saved:
            self.make_current()
        log.debug('Config saved: %r', saved)
        return saved

    @classmethod
    def fetch_command(cls):
        return Command('GET', '/config', decode=cls.decode_fetched)

    def save_command(self):
        return Command('PUT', '/config', body={'params': self.params},
            decode=self.decode_saved)

    @classmethod
    def fetch(cls, http=None, **kwargs):
        """Fetches the current remote config."""
        return cls.fetch_command().execute(http=http, **kwargs)

    def save(self, http=None, **kwargs):
        """Updates the remote config parameters to `params`, returning
        whether the server accepted them.

        Saving the config always uses the master key.

        """
        kwargs['use_master_key'] = True
        return self.save_command().execute(http=http, **kwargs)

    fetch_async = classmethod(make_async_method('fetch'))
    fetch_future = classmethod(make_future_method('fetch'))
    save_async = make_async_method('save')
    save_future = make_future_method('save')
