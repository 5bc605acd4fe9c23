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

import logging

import httplib2
import mock
import simplejson as json

from parseobjects import api, storage


SERVER_URL = 'http://localhost:1337/1'

HEADERS = {
    'accept': 'application/json',
    'content-type': 'application/json',
    'x-parse-application-id': 'applicationId',
    'x-parse-client-key': 'clientKey',
}


def initialize(**kwargs):
    """Configures the client as every test expects it."""
    kwargs.setdefault('store', storage.MemoryStore())
    return api.initialize('applicationId', SERVER_URL, client_key='clientKey',
        master_key='masterKey', **kwargs)


def make_response(response):
    default_response = {
        'status':       200,
        'content-type': 'application/json',
    }

    if isinstance(response, dict) and ('content' in response or 'status' in response):
        response = dict(response)
        content = response.pop('content', '')
        if not isinstance(content, (str, bytes)):
            content = json.dumps(content)
        response_info = dict(default_response)
        response_info.update(response)
    else:
        response_info = dict(default_response)
        content = response
        if not isinstance(content, (str, bytes)):
            content = json.dumps(content)

    return httplib2.Response(response_info), content


def mock_http(req, resp_or_content):
    """Returns an `httplib2.Http` double that answers with
    `resp_or_content`.

    Parameter `req` is unused by the double itself; tests check it with
    `h.request.assert_called_once_with(**req)` or `sent_requests()`.
    Parameter `resp_or_content` is the response content (a string, or data
    to encode as JSON), or a dictionary of response headers with a
    ``status`` and the content under ``content``.

    """
    h = mock.NonCallableMock(spec_set=httplib2.Http)
    h.request.return_value = make_response(resp_or_content)
    return h


def mock_http_sequence(*responses):
    """Returns an `httplib2.Http` double that answers each request with the
    next of `responses`."""
    h = mock.NonCallableMock(spec_set=httplib2.Http)
    h.request.side_effect = [make_response(r) for r in responses]
    return h


def request(method, path, body=None, headers=None):
    """Returns the keyword arguments a request to `path` is sent with."""
    req = {
        'uri': SERVER_URL + path,
        'method': method,
        'headers': dict(HEADERS, **(headers or {})),
    }
    if body is not None:
        req['body'] = body
    return req


def sent_requests(h):
    """Returns the requests made through `h`, with their JSON bodies
    decoded."""
    requests = []
    for args, kwargs in h.request.call_args_list:
        req = dict(kwargs)
        if 'body' in req:
            req['body'] = json.loads(req['body'])
        requests.append(req)
    return requests


def log():
    import sys
    logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(asctime)s %(levelname)s %(message)s")
