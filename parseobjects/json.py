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

JSON coding helpers shared by the request and response layers.

Responses are decoded with `ForgivingDecoder`, which replaces bytes that are
not valid UTF-8 with the Unicode replacement character instead of failing
the whole response.

"""

import simplejson as json


class ForgivingDecoder(json.JSONDecoder):

    """A `JSONDecoder` that tolerates response bodies that are not valid
    UTF-8."""

    def decode(self, s, *args, **kwargs):
        if isinstance(s, bytes):
            s = s.decode('utf-8', 'replace')
        return super(ForgivingDecoder, self).decode(s, *args, **kwargs)


def loads(content):
    """Decodes a response body, retrying forgivingly when it is not valid
    UTF-8."""
    try:
        return json.loads(content)
    except UnicodeDecodeError:
        return json.loads(content, cls=ForgivingDecoder)


def dumps(data):
    """Encodes a request body."""
    return json.dumps(data)
