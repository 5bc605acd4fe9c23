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

Exceptions raised by `parseobjects`.

Every error the library reports is a `ParseError`, carrying the backend's
numeric error `code` and a human readable `message`. The subclasses name the
kinds of failure a caller may want to handle separately:

* `MissingIdentifier` when a pointer (or an equality constraint against an
  object) is built from an object that was never saved
* `InvalidQueryState` when a query's modifiers make the requested operation
  impossible, such as iterating with `find_all()` over a skipped query
* `ObjectNotFound` when `first()` or `fetch()` finds nothing
* `DecodingError` when a response does not have the expected shape
* `ServerError` for any other unsuccessful HTTP response
* `TransportError` when the request never got a response at all

"""


class ParseError(Exception):

    """An error reported by the backend or detected by the client.

    Subclasses set a default `code` from the backend's error vocabulary, so
    most can be raised with only a message.

    """

    OTHER_CAUSE = -1
    INTERNAL_SERVER_ERROR = 1
    CONNECTION_FAILED = 100
    OBJECT_NOT_FOUND = 101
    INVALID_QUERY = 102
    INVALID_CLASS_NAME = 103
    MISSING_OBJECT_ID = 104
    INVALID_JSON = 107

    code = OTHER_CAUSE

    def __init__(self, message, code=None):
        super(ParseError, self).__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self):
        return '%s (code %d)' % (self.message, self.code)

    def __repr__(self):
        return '%s(%r, code=%d)' % (type(self).__name__, self.message, self.code)


class MissingIdentifier(ParseError):
    """An object with no ``objectId`` was used where a saved object is
    required."""
    code = ParseError.MISSING_OBJECT_ID


class InvalidQueryState(ParseError):
    """The query's modifiers are incompatible with the requested
    operation."""
    code = ParseError.INVALID_QUERY


class ObjectNotFound(ParseError):
    """No object matched the query or the requested ``objectId``."""
    code = ParseError.OBJECT_NOT_FOUND


class DecodingError(ParseError):

    """The response content could not be decoded into the expected shape.

    When the offending member of the response is known, it is available as
    `field`.

    """

    code = ParseError.OTHER_CAUSE

    def __init__(self, message, code=None, field=None):
        super(DecodingError, self).__init__(message, code=code)
        self.field = field


class ServerError(ParseError):

    """The server answered with an unsuccessful HTTP status.

    The server's error code and message are used when the response body
    provides them; otherwise the HTTP status is reported in the message.
    The HTTP status itself is available as `status`.

    """

    def __init__(self, message, code=None, status=None):
        super(ServerError, self).__init__(message, code=code)
        self.status = status


class TransportError(ParseError):
    """The request failed before any HTTP response was received."""
    code = ParseError.CONNECTION_FAILED


class NotInitialized(ParseError):
    """The client was used before `parseobjects.initialize()` was called."""
    code = ParseError.OTHER_CAUSE
