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

import unittest

from parseobjects import storage
from parseobjects.errors import ParseError, ServerError
from parseobjects.user import User
from tests import utils


USER_DATA = {
    'objectId': 'yarr',
    'username': 'jen',
    'email': 'jen@example.com',
    'sessionToken': 'r:abc',
    'createdAt': '2021-03-10T20:58:12.000Z',
    'updatedAt': '2021-03-10T20:58:12.000Z',
}


class TestUser(unittest.TestCase):

    def setUp(self):
        self.config = utils.initialize()

    def test_no_current(self):
        self.assertTrue(User.current() is None)

    def test_signup(self):
        h = utils.mock_http(None, {
            'status': 201,
            'content': {'objectId': 'yarr', 'createdAt': '2021-03-10T20:58:12.000Z',
                        'sessionToken': 'r:abc'},
        })
        user = User(username='jen', password='secret', email='jen@example.com')

        user.signup(http=h)

        self.assertEqual(utils.sent_requests(h), [utils.request('POST', '/users',
            body={'username': 'jen', 'password': 'secret', 'email': 'jen@example.com'})])
        self.assertEqual(user.object_id, 'yarr')
        self.assertEqual(user.session_token, 'r:abc')

        current = User.current()
        self.assertEqual(current.object_id, 'yarr')
        self.assertEqual(current.username, 'jen')
        self.assertTrue(current.password is None,
            'The password is never kept in the store')
        self.assertTrue(user.is_current())

    def test_login(self):
        h = utils.mock_http(None, USER_DATA)

        user = User.login('jen', 'secret', http=h)

        self.assertEqual(utils.sent_requests(h), [utils.request('POST', '/login',
            body={'username': 'jen', 'password': 'secret'})])
        self.assertEqual(user.username, 'jen')
        self.assertEqual(user.session_token, 'r:abc')
        self.assertEqual(User.current().object_id, 'yarr')

        h = utils.mock_http(None, {'results': []})
        User.query().find(http=h)
        headers = h.request.call_args[1]['headers']
        self.assertEqual(headers['x-parse-session-token'], 'r:abc',
            "Requests carry the current user's session")

    def test_login_failed(self):
        h = utils.mock_http(None, {
            'status': 404,
            'content': {'code': 101, 'error': 'Invalid username/password.'},
        })
        self.assertRaises(ParseError, User.login, 'jen', 'wrong', http=h)
        self.assertTrue(User.current() is None)

    def test_login_with(self):
        h = utils.mock_http(None, dict(USER_DATA, authData={'anonymous': {'id': '1234'}}))

        user = User.login_with('anonymous', {'id': '1234'}, http=h)

        self.assertEqual(utils.sent_requests(h)[0]['body'],
            {'authData': {'anonymous': {'id': '1234'}}})
        self.assertTrue(user.is_linked('anonymous'))
        self.assertFalse(user.is_linked('apple'))
        self.assertTrue(User.current().is_linked('anonymous'))

    def test_become(self):
        h = utils.mock_http(None, USER_DATA)

        user = User.become('r:other', http=h)

        self.assertEqual(user.object_id, 'yarr')
        h.request.assert_called_once_with(**utils.request('GET', '/users/me',
            headers={'x-parse-session-token': 'r:other'}))
        self.assertEqual(User.current().session_token, 'r:abc')

    def test_logout(self):
        self.config.store.set(storage.CURRENT_USER, USER_DATA)
        h = utils.mock_http(None, {})

        User.logout(http=h)

        h.request.assert_called_once_with(**utils.request('POST', '/logout',
            headers={'x-parse-session-token': 'r:abc'}))
        self.assertTrue(User.current() is None)

    def test_logout_failed(self):
        self.config.store.set(storage.CURRENT_USER, USER_DATA)
        h = utils.mock_http(None, {'status': 500, 'content': ''})

        self.assertRaises(ServerError, User.logout, http=h)
        self.assertTrue(User.current() is None,
            'The current user is forgotten even when logging out fails')

    def test_current_updates(self):
        self.config.store.set(storage.CURRENT_USER, USER_DATA)
        user = User.current()
        user.email = 'new@example.com'
        h = utils.mock_http(None, {'updatedAt': '2021-03-11T08:00:00.000Z'})

        user.save(http=h)

        self.assertEqual(utils.sent_requests(h)[0]['body'],
            {'username': 'jen', 'email': 'new@example.com'},
            'Session tokens are never sent in a save')
        self.assertEqual(User.current().email, 'new@example.com')

        h = utils.mock_http(None, {})
        user.delete(http=h)
        self.assertTrue(User.current() is None)

    def test_other_user_is_not_current(self):
        self.config.store.set(storage.CURRENT_USER, USER_DATA)
        other = User.from_dict({'objectId': 'someone', 'username': 'else'})
        h = utils.mock_http(None, {'objectId': 'someone', 'username': 'else'})

        other.fetch(http=h)

        self.assertFalse(other.is_current())
        self.assertEqual(User.current().username, 'jen')
