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

import socket
import unittest

import httplib2
import mock

from parseobjects import api, storage
from parseobjects.command import Command
from parseobjects.errors import (DecodingError, NotInitialized, ObjectNotFound,
    ParseError, ServerError, TransportError)
from tests import utils


class TestCommand(unittest.TestCase):

    def setUp(self):
        self.config = utils.initialize()

    def test_request(self):
        command = Command('POST', '/classes/GameScore', body={'score': 10})
        request = command.get_request()

        self.assertEqual(request['uri'], 'http://localhost:1337/1/classes/GameScore')
        self.assertEqual(request['method'], 'POST')
        self.assertEqual(request['headers'], utils.HEADERS)
        self.assertEqual(request['body'], '{"score": 10}')

        request = Command('GET', '/config').get_request()
        self.assertTrue('body' not in request, 'Commands without a body send none')

    def test_params(self):
        command = Command('GET', '/classes/GameScore/yarr',
            params={'include': '["yolo", "test"]'})
        self.assertEqual(command.get_request()['uri'],
            'http://localhost:1337/1/classes/GameScore/yarr'
            '?include=%5B%22yolo%22,%20%22test%22%5D')

    def test_headers(self):
        command = Command('GET', '/config')

        headers = command.get_request(use_master_key=True)['headers']
        self.assertEqual(headers['x-parse-master-key'], 'masterKey')

        headers = command.get_request(session_token='r:abc',
            installation_id='inst', headers={'x-extra': 'yes'})['headers']
        self.assertEqual(headers['x-parse-session-token'], 'r:abc')
        self.assertEqual(headers['x-parse-installation-id'], 'inst')
        self.assertEqual(headers['x-extra'], 'yes')

        self.config.store.set(storage.CURRENT_USER,
            {'objectId': 'me', 'sessionToken': 'r:stored'})
        self.config.store.set(storage.CURRENT_INSTALLATION,
            {'installationId': 'stored-inst'})
        headers = command.get_request()['headers']
        self.assertEqual(headers['x-parse-session-token'], 'r:stored',
            "The current user's session is sent by default")
        self.assertEqual(headers['x-parse-installation-id'], 'stored-inst')

    def test_no_master_key(self):
        api.initialize('applicationId', utils.SERVER_URL, client_key='clientKey')
        command = Command('GET', '/config')
        self.assertRaises(NotInitialized, command.get_request, use_master_key=True)

    def test_not_initialized(self):
        api.configuration = None
        try:
            self.assertRaises(NotInitialized, Command('GET', '/config').get_request)
        finally:
            utils.initialize()

    def test_execute(self):
        h = utils.mock_http(None, {'params': {'yolo': 'yarr'}})
        command = Command('GET', '/config', decode=lambda data: data['params'])

        self.assertEqual(command.execute(http=h), {'yolo': 'yarr'})
        h.request.assert_called_once_with(**utils.request('GET', '/config'))

    def test_execute_default_http(self):
        h = utils.mock_http(None, {'result': True})
        utils.initialize(http=h)
        self.assertEqual(Command('PUT', '/config').execute(), {'result': True})
        self.assertEqual(h.request.call_count, 1)

    def test_not_found(self):
        h = utils.mock_http(None, {
            'status': 404,
            'content': {'code': 101, 'error': 'Object not found.'},
        })
        try:
            Command('GET', '/classes/GameScore/nope').execute(http=h)
        except ObjectNotFound as exc:
            self.assertEqual(exc.code, ParseError.OBJECT_NOT_FOUND)
            self.assertEqual(str(exc), 'Object not found. (code 101)')
        else:
            self.fail('execute() did not raise ObjectNotFound')

    def test_server_errors(self):
        h = utils.mock_http(None, {'status': 500, 'content': 'oops'})
        try:
            Command('GET', '/config').execute(http=h)
        except ServerError as exc:
            self.assertEqual(exc.status, 500)
            self.assertEqual(exc.code, ParseError.INTERNAL_SERVER_ERROR)
        else:
            self.fail('execute() did not raise ServerError')

        h = utils.mock_http(None, {'status': 403, 'content': ''})
        try:
            Command('GET', '/config').execute(http=h)
        except ServerError as exc:
            self.assertEqual(exc.status, 403)
            self.assertEqual(exc.code, ParseError.OTHER_CAUSE)
        else:
            self.fail('execute() did not raise ServerError')

    def test_transport_error(self):
        h = mock.NonCallableMock(spec_set=httplib2.Http)
        h.request.side_effect = socket.error('connection refused')
        self.assertRaises(TransportError, Command('GET', '/config').execute, http=h)

        h.request.side_effect = httplib2.ServerNotFoundError('no such host')
        try:
            Command('GET', '/config').execute(http=h)
        except TransportError as exc:
            self.assertEqual(exc.code, ParseError.CONNECTION_FAILED)
        else:
            self.fail('execute() did not raise TransportError')

    def test_decoding_errors(self):
        h = utils.mock_http(None, 'this is not json')
        try:
            Command('GET', '/config').execute(http=h)
        except DecodingError as exc:
            self.assertEqual(exc.code, ParseError.INVALID_JSON)
        else:
            self.fail('execute() did not raise DecodingError')

        h = utils.mock_http(None, {'something': 'else'})
        command = Command('GET', '/config', decode=lambda data: data['params'])
        try:
            command.execute(http=h)
        except DecodingError as exc:
            self.assertEqual(exc.field, 'params')
        else:
            self.fail('execute() did not raise DecodingError')

    def test_no_content(self):
        h = utils.mock_http(None, {'status': 204, 'content': ''})
        self.assertEqual(Command('DELETE', '/classes/GameScore/yarr').execute(http=h),
            None)

    def test_batch_request(self):
        command = Command('PUT', '/classes/GameScore/yarr', body={'score': 11})
        self.assertEqual(command.to_batch_request(), {
            'method': 'PUT',
            'path': '/1/classes/GameScore/yarr',
            'body': {'score': 11},
        })
