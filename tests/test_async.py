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

import threading
import unittest

from parseobjects import batch, fields
from parseobjects.command import Command, inline_queue
from parseobjects.errors import ObjectNotFound, ServerError
from parseobjects.objects import ParseObject
from parseobjects.pointer import Pointer
from parseobjects.result import Failure, Success
from parseobjects.user import User
from tests import utils


class AsyncScore(ParseObject):
    score = fields.Field()


class Collector(object):

    """Records the results delivered to it, waiting for them when asked."""

    def __init__(self):
        self.results = []
        self.threads = []
        self.done = threading.Event()

    def __call__(self, result):
        self.results.append(result)
        self.threads.append(threading.current_thread().name)
        self.done.set()

    def wait(self):
        if not self.done.wait(5):
            raise AssertionError('No result was delivered')
        return self.results[0]


class TestAsync(unittest.TestCase):

    def setUp(self):
        utils.initialize()

    def test_find_async(self):
        h = utils.mock_http(None, {'results': [{'objectId': 'yarr', 'score': 10}]})
        callback = Collector()

        AsyncScore.query().find_async(callback, http=h)

        result = callback.wait()
        self.assertTrue(isinstance(result, Success))
        self.assertEqual(result.value[0].score, 10)
        self.assertTrue(callback.threads[0].startswith('parseobjects-main'),
            'Callbacks run on the main callback queue by default')

    def test_failure_async(self):
        h = utils.mock_http(None, {'results': []})
        callback = Collector()

        AsyncScore.query().first_async(callback, http=h, callback_queue=inline_queue)

        result = callback.wait()
        self.assertTrue(isinstance(result, Failure))
        self.assertTrue(isinstance(result.error, ObjectNotFound))
        self.assertRaises(ObjectNotFound, result.unwrap)

    def test_callback_once(self):
        h = utils.mock_http(None, {'results': [], 'count': 3})
        callback = Collector()

        future = AsyncScore.query().count_async(callback, http=h,
            callback_queue=inline_queue)

        future.result(5)
        self.assertEqual(callback.results, [Success(3)])

    def test_limit_zero_async(self):
        callback = Collector()
        AsyncScore.query().limit(0).find_async(callback, callback_queue=inline_queue)
        self.assertEqual(callback.wait(), Success([]))

    def test_future(self):
        h = utils.mock_http(None, {'results': [{'objectId': 'a'}, {'objectId': 'b'}]})
        future = AsyncScore.query().find_future(http=h)
        self.assertEqual([s.object_id for s in future.result(5)], ['a', 'b'])

        h = utils.mock_http(None, {'status': 500, 'content': ''})
        future = AsyncScore.query().count_future(http=h)
        self.assertRaises(ServerError, future.result, 5)

    def test_object_async(self):
        h = utils.mock_http(None, {
            'status': 201,
            'content': {'objectId': 'yarr', 'createdAt': '2021-03-10T20:58:12.000Z'},
        })
        score = AsyncScore(score=10)
        self.assertTrue(score.save_future(http=h).result(5) is score)
        self.assertEqual(score.object_id, 'yarr')

        h = utils.mock_http(None, {'objectId': 'yarr', 'score': 11})
        callback = Collector()
        score.fetch_async(callback, http=h, callback_queue=inline_queue)
        self.assertEqual(callback.wait().value.score, 11)

        h = utils.mock_http(None, {'objectId': 'yarr', 'score': 12})
        fetched = Pointer(AsyncScore, 'yarr').fetch_future(http=h).result(5)
        self.assertEqual(fetched.score, 12)

    def test_classmethod_async(self):
        h = utils.mock_http(None, {'objectId': 'me', 'username': 'jen',
                                   'sessionToken': 'r:abc'})
        user = User.login_future('jen', 'secret', http=h).result(5)
        self.assertEqual(user.username, 'jen')
        self.assertEqual(User.current().session_token, 'r:abc')

    def test_command_async(self):
        h = utils.mock_http(None, {'params': {}})
        callback = Collector()
        Command('GET', '/config').execute_async(callback, http=h,
            callback_queue=inline_queue)
        self.assertEqual(callback.wait(), Success({'params': {}}))

        h = utils.mock_http(None, {'params': {}})
        self.assertEqual(Command('GET', '/config').execute_future(http=h).result(5),
            {'params': {}})

    def test_batch_async(self):
        scores = [AsyncScore.from_dict({'objectId': 'a'})]
        h = utils.mock_http(None, [{'success': {}}])
        callback = Collector()

        batch.delete_all_async(callback, scores, http=h, callback_queue=inline_queue)

        self.assertEqual(callback.wait(), Success([Success(None)]))

        h = utils.mock_http(None, {'results': [{'objectId': 'a', 'score': 1}]})
        results = batch.fetch_all_future(scores, http=h).result(5)
        self.assertEqual(results[0].unwrap().score, 1)
