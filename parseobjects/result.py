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

The outcome of an operation that may have failed without raising: each item
of a batch response, and the value handed to asynchronous callbacks.

A result is either a `Success` holding the value or a `Failure` holding the
`ParseError`; there is no third state.

"""


class Result(object):

    is_success = False

    def unwrap(self):
        """Returns the successful value, or raises the failure's error."""
        raise NotImplementedError


class Success(Result):

    is_success = True

    def __init__(self, value):
        self.value = value

    def unwrap(self):
        return self.value

    def __eq__(self, other):
        return isinstance(other, Success) and self.value == other.value

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return 'Success(%r)' % (self.value,)


class Failure(Result):

    def __init__(self, error):
        self.error = error

    def unwrap(self):
        raise self.error

    def __eq__(self, other):
        return isinstance(other, Failure) and self.error is other.error

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return 'Failure(%r)' % (self.error,)
