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

Commands: one HTTP request to the API and the decoding of its response.

Every network call the library makes goes through `Command.execute()`, which
builds the request from the client configuration, sends it through an
`httplib2.Http` compatible user agent, turns unsuccessful responses into
`ParseError` exceptions and hands the decoded JSON content to the command's
`decode` function.

Asynchronous forms run the blocking form on a shared worker pool and deliver
a `result.Success` or `result.Failure` to a callback, exactly once, on a
callback queue. The default callback queue, `main_queue`, is a single worker
that runs callbacks in the order their operations completed.

"""

from concurrent.futures import Future, ThreadPoolExecutor
import http.client as httplib
import logging
import socket

import httplib2

from parseobjects import api
from parseobjects import json
from parseobjects.errors import (DecodingError, ObjectNotFound, ParseError,
    ServerError, TransportError)
from parseobjects.result import Failure, Success


executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix='parseobjects')
main_queue = ThreadPoolExecutor(max_workers=1, thread_name_prefix='parseobjects-main')

log = logging.getLogger('parseobjects.command')


def identity(data):
    return data


class Command(object):

    """A request to the API and the function that decodes its response.

    Parameter `method` and `path` locate the request (`path` is relative to
    the configured server URL). Optional parameter `params` are sent in the
    query string and `body`, if not `None`, is sent JSON encoded. Parameter
    `decode` is called with the decoded response content and returns the
    command's result.

    """

    response_has_content = {
        httplib.OK:         True,
        httplib.CREATED:    True,
        httplib.ACCEPTED:   False,
        httplib.NO_CONTENT: False,
    }

    def __init__(self, method, path, params=None, body=None, decode=None):
        self.method = method
        self.path = path
        self.params = params
        self.body = body
        if decode is None:
            decode = identity
        self.decode = decode

    def __repr__(self):
        return '<Command %s %s>' % (self.method, self.path)

    def to_dict(self):
        """Encodes the command as its path, method and body."""
        data = {'path': self.path, 'method': self.method}
        if self.body is not None:
            data['body'] = self.body
        return data

    def to_batch_request(self):
        """Encodes the command as one sub-request of a ``/batch``
        request."""
        data = {
            'method': self.method,
            'path': api.get_configuration().mount_path + self.path,
        }
        if self.body is not None:
            data['body'] = self.body
        return data

    def get_request(self, headers=None, use_master_key=False,
                    session_token=None, installation_id=None):
        """Returns the parameters for sending this command as a dictionary
        of keyword arguments suitable for passing to
        `httplib2.Http.request()`.

        Optional parameter `headers` are also included in the request as HTTP
        headers. Set `use_master_key` to send the configured master key.

        """
        config = api.get_configuration()
        headers = config.headers(use_master_key=use_master_key,
            session_token=session_token, installation_id=installation_id,
            headers=headers)

        # Use 'uri' because httplib2.request does.
        request = dict(uri=config.url_for(self.path, self.params),
                       method=self.method, headers=headers)
        if self.body is not None:
            request['body'] = json.dumps(self.body)
        return request

    @classmethod
    def raise_for_response(cls, url, response, content):
        """Raises the `ParseError` corresponding to an unsuccessful HTTP
        response.

        The backend reports errors as a JSON body such as ``{"code": 101,
        "error": "Object not found."}``; when one is available its code and
        message are used.

        """
        status = response.status
        if 200 <= status < 300:
            return

        code, message = None, None
        try:
            data = json.loads(content)
        except (ValueError, TypeError):
            data = None
        if isinstance(data, dict):
            code = data.get('code')
            message = data.get('error') or data.get('message')
        if message is None:
            message = '%d %s requesting %s' % (status, response.reason, url)

        if code == ParseError.OBJECT_NOT_FOUND:
            raise ObjectNotFound(message)
        if code is None:
            code = (ParseError.INTERNAL_SERVER_ERROR if status >= 500
                    else ParseError.OTHER_CAUSE)
        raise ServerError(message, code=code, status=status)

    def decode_response(self, url, response, content):
        self.raise_for_response(url, response, content)

        data = None
        if self.response_has_content.get(response.status, True) and content:
            try:
                data = json.loads(content)
            except (ValueError, TypeError) as exc:
                raise DecodingError('Invalid JSON in response to %s %s: %s'
                    % (self.method, url, exc), code=ParseError.INVALID_JSON) from exc

        try:
            return self.decode(data)
        except ParseError:
            raise
        except KeyError as exc:
            raise DecodingError('Response to %s %s has no %r member'
                % (self.method, url, exc.args[0]), field=exc.args[0]) from exc
        except (TypeError, ValueError, AttributeError) as exc:
            raise DecodingError('Could not decode response to %s %s: %s'
                % (self.method, url, exc)) from exc

    def execute(self, http=None, **kwargs):
        """Sends the command and returns its decoded result.

        Optional parameter `http` is the user agent object to use. `http`
        objects should be compatible with `httplib2.Http` objects. Other
        keyword parameters are passed to `get_request()`.

        """
        request = self.get_request(**kwargs)
        if http is None:
            http = api.get_configuration().http

        log.debug('Requesting %s %s', request['method'], request['uri'])
        try:
            response, content = http.request(**request)
        except (httplib2.HttpLib2Error, httplib.HTTPException, socket.error) as exc:
            raise TransportError('Could not %s %s: %s'
                % (request['method'], request['uri'], exc)) from exc

        return self.decode_response(request['uri'], response, content)

    def execute_async(self, callback, http=None, callback_queue=None, **kwargs):
        """Sends the command on the worker pool and calls `callback` with
        its `Result`."""
        return call_async(lambda: self.execute(http=http, **kwargs),
            callback, callback_queue)

    def execute_future(self, http=None, **kwargs):
        return call_future(lambda: self.execute(http=http, **kwargs))


class InlineQueue(object):

    """A callback queue that runs each callback right away, on the worker
    that completed the operation."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


inline_queue = InlineQueue()


def deliver(callback, result, callback_queue=None):
    if callback_queue is None:
        callback_queue = main_queue
    return callback_queue.submit(callback, result)


def call_async(fn, callback, callback_queue=None):
    """Calls `fn` on the worker pool, then hands its outcome to `callback`
    as a `Success` or `Failure` on `callback_queue`.

    Returns the worker pool's future for the call.

    """
    def run():
        try:
            result = Success(fn())
        except Exception as exc:
            log.debug('Asynchronous call failed: %r', exc)
            result = Failure(exc)
        deliver(callback, result, callback_queue)

    return executor.submit(run)


def call_future(fn):
    """Calls `fn` asynchronously and returns a `Future` for its value."""
    future = Future()

    def complete(result):
        if result.is_success:
            future.set_result(result.value)
        else:
            future.set_exception(result.error)

    call_async(fn, complete, inline_queue)
    return future


def make_async_method(methodname):
    """Makes a method that runs the blocking method `methodname`
    asynchronously and calls a callback with its `Result`."""
    def asyncmethod(self, callback, *args, **kwargs):
        callback_queue = kwargs.pop('callback_queue', None)
        method = getattr(self, methodname)
        return call_async(lambda: method(*args, **kwargs), callback, callback_queue)
    asyncmethod.__name__ = methodname + '_async'
    asyncmethod.__doc__ = ("Runs `%s()` asynchronously; `callback` receives a "
        "`Success` or `Failure` on `callback_queue`." % methodname)
    return asyncmethod


def make_future_method(methodname):
    """Makes a method that runs the blocking method `methodname`
    asynchronously and returns a `Future` for its value."""
    def futuremethod(self, *args, **kwargs):
        method = getattr(self, methodname)
        return call_future(lambda: method(*args, **kwargs))
    futuremethod.__name__ = methodname + '_future'
    futuremethod.__doc__ = ("Runs `%s()` asynchronously and returns a "
        "`concurrent.futures.Future` for its result." % methodname)
    return futuremethod
