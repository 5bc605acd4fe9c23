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

Users, their sessions and the current user.

The current user is the user who last signed up, logged in or became a
session on this client. It is kept in the configured local store, so it
survives restarts when the store is a `storage.FileStore`, and its session
token is sent with every request.

"""

import logging

from parseobjects import api
from parseobjects import fields
from parseobjects import storage
from parseobjects.command import Command, make_async_method, make_future_method
from parseobjects.objects import ParseObject


log = logging.getLogger('parseobjects.user')


class User(ParseObject):

    """A user of the application, in the built-in ``_User`` class."""

    class_name = '_User'

    username = fields.Field()
    email = fields.Field()
    email_verified = fields.Field(api_name='emailVerified')
    password = fields.Field()
    auth_data = fields.Field(api_name='authData')
    session_token = fields.Field(api_name='sessionToken')

    read_only_keys = ParseObject.read_only_keys + ('sessionToken', 'emailVerified')

    @classmethod
    def current(cls):
        """Returns the current user, or `None` if nobody is logged in."""
        data = api.get_configuration().store.get(storage.CURRENT_USER)
        if data is None:
            return None
        return cls.from_dict(data)

    def is_current(self):
        current = api.get_configuration().store.get(storage.CURRENT_USER)
        return (current is not None and self.object_id is not None
                and current.get('objectId') == self.object_id)

    def make_current(self):
        """Stores this user as the current user."""
        data = self.to_dict()
        data.pop('password', None)
        api.get_configuration().store.set(storage.CURRENT_USER, data)
        log.debug('%r is now the current user', self)

    @classmethod
    def clear_current(cls):
        api.get_configuration().store.delete(storage.CURRENT_USER)

    def decode_saved(self, data):
        with api.get_configuration().store.lock:
            is_current = self.is_current()
            super(User, self).decode_saved(data)
            if is_current:
                self.make_current()
        return self

    def decode_fetched(self, data):
        with api.get_configuration().store.lock:
            super(User, self).decode_fetched(data)
            if self.is_current():
                self.make_current()
        return self

    def decode_deleted(self, data):
        with api.get_configuration().store.lock:
            if self.is_current():
                self.clear_current()
        return None

    def decode_signed_up(self, data):
        super(User, self).decode_saved(data)
        self.make_current()
        return self

    @classmethod
    def decode_session(cls, data):
        user = cls.from_dict(data)
        user.make_current()
        return user

    def is_linked(self, auth_type):
        """Returns whether the third party login `auth_type` is linked to
        this user."""
        return bool(self.auth_data and self.auth_data.get(auth_type))

    def signup_command(self):
        return Command('POST', api.endpoint_for_class(self.class_name),
            body=self.create_body(), decode=self.decode_signed_up)

    def signup(self, http=None, **kwargs):
        """Creates this user on the server and makes it the current user."""
        return self.signup_command().execute(http=http, **kwargs)

    @classmethod
    def login_command(cls, username, password):
        return Command('POST', '/login',
            body={'username': username, 'password': password},
            decode=cls.decode_session)

    @classmethod
    def login(cls, username, password, http=None, **kwargs):
        """Logs in as the user `username` and returns that user, who becomes
        the current user."""
        return cls.login_command(username, password).execute(http=http, **kwargs)

    @classmethod
    def login_with_command(cls, auth_type, auth_data):
        return Command('POST', api.endpoint_for_class(cls.class_name),
            body={'authData': {auth_type: auth_data}},
            decode=cls.decode_session)

    @classmethod
    def login_with(cls, auth_type, auth_data, http=None, **kwargs):
        """Logs in (signing up if necessary) with the third party
        credentials `auth_data` of the login provider `auth_type`, such as
        ``anonymous`` or ``apple``."""
        return cls.login_with_command(auth_type, auth_data).execute(
            http=http, **kwargs)

    @classmethod
    def become_command(cls):
        return Command('GET', api.endpoint_for_class(cls.class_name) + '/me',
            decode=cls.decode_session)

    @classmethod
    def become(cls, session_token, http=None, **kwargs):
        """Returns the user of the session `session_token`, who becomes the
        current user."""
        kwargs['session_token'] = session_token
        return cls.become_command().execute(http=http, **kwargs)

    @classmethod
    def logout(cls, http=None, **kwargs):
        """Ends the current user's session.

        The current user is forgotten even when the server could not be
        told.

        """
        try:
            Command('POST', '/logout').execute(http=http, **kwargs)
        finally:
            cls.clear_current()

    signup_async = make_async_method('signup')
    signup_future = make_future_method('signup')
    login_async = classmethod(make_async_method('login'))
    login_future = classmethod(make_future_method('login'))
    login_with_async = classmethod(make_async_method('login_with'))
    login_with_future = classmethod(make_future_method('login_with'))
    become_async = classmethod(make_async_method('become'))
    become_future = classmethod(make_future_method('become'))
    logout_async = classmethod(make_async_method('logout'))
    logout_future = classmethod(make_future_method('logout'))
