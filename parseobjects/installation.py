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

Installations: the record of this client, in the built-in ``_Installation``
class.

"""

import datetime
import locale
import logging
import uuid

from parseobjects import api
from parseobjects import fields
from parseobjects import storage
from parseobjects.objects import ParseObject


log = logging.getLogger('parseobjects.installation')


def local_time_zone():
    return datetime.datetime.now().astimezone().tzname()


def local_locale_identifier():
    return locale.getlocale()[0]


class Installation(ParseObject):

    class_name = '_Installation'

    installation_id = fields.Field(api_name='installationId')
    device_type = fields.Field(api_name='deviceType')
    device_token = fields.Field(api_name='deviceToken')
    channels = fields.List(fields.Field())
    badge = fields.Field()
    time_zone = fields.Field(api_name='timeZone')
    app_name = fields.Field(api_name='appName')
    app_identifier = fields.Field(api_name='appIdentifier')
    app_version = fields.Field(api_name='appVersion')
    locale_identifier = fields.Field(api_name='localeIdentifier')

    device_type_default = 'python'

    @classmethod
    def current(cls):
        """Returns the installation of this client.

        The first call creates it with a new random `installation_id` and
        the local time zone and locale, and stores it; it is not saved to
        the server until `save()` is called. Concurrent first calls all get
        the same installation.

        """
        store = api.get_configuration().store
        data = store.get_or_set(storage.CURRENT_INSTALLATION,
            lambda: cls.new_installation().to_dict())
        return cls.from_dict(data)

    @classmethod
    def new_installation(cls):
        installation = cls(installation_id=str(uuid.uuid4()).lower(),
                           device_type=cls.device_type_default,
                           time_zone=local_time_zone(),
                           locale_identifier=local_locale_identifier())
        log.debug('Created installation %s', installation.installation_id)
        return installation

    def is_current(self):
        current = api.get_configuration().store.get(storage.CURRENT_INSTALLATION)
        return (current is not None and self.installation_id is not None
                and current.get('installationId') == self.installation_id)

    def make_current(self):
        api.get_configuration().store.set(storage.CURRENT_INSTALLATION, self.to_dict())
        log.debug('Stored installation %s', self.installation_id)

    def update_current(self):
        with api.get_configuration().store.lock:
            if self.is_current():
                self.make_current()

    def decode_saved(self, data):
        super(Installation, self).decode_saved(data)
        self.update_current()
        return self

    def decode_fetched(self, data):
        super(Installation, self).decode_fetched(data)
        self.update_current()
        return self

    def decode_deleted(self, data):
        store = api.get_configuration().store
        with store.lock:
            if self.is_current():
                store.delete(storage.CURRENT_INSTALLATION)
        return None
