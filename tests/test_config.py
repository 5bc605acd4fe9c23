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

from parseobjects.config import Config
from tests import utils


class TestConfig(unittest.TestCase):

    def setUp(self):
        utils.initialize()

    def test_no_current(self):
        self.assertTrue(Config.current() is None)
        self.assertEqual(Config().params, {})

    def test_fetch(self):
        h = utils.mock_http(None, {'params': {'welcome': 'yarr', 'level': 3}})

        config = Config.fetch(http=h)

        self.assertEqual(config.params, {'welcome': 'yarr', 'level': 3})
        self.assertEqual(Config.current().params, {'welcome': 'yarr', 'level': 3})
        h.request.assert_called_once_with(**utils.request('GET', '/config'))

    def test_save(self):
        h = utils.mock_http(None, {'result': True})
        config = Config(params={'welcome': 'yolo'})

        self.assertTrue(config.save(http=h))

        self.assertEqual(utils.sent_requests(h), [utils.request('PUT', '/config',
            body={'params': {'welcome': 'yolo'}},
            headers={'x-parse-master-key': 'masterKey'})])
        self.assertEqual(Config.current().params, {'welcome': 'yolo'})

    def test_save_refused(self):
        h = utils.mock_http(None, {'result': False})
        self.assertFalse(Config(params={'welcome': 'yolo'}).save(http=h))
        self.assertTrue(Config.current() is None)
