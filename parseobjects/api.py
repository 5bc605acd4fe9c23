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

Client configuration and the mapping from operations to API paths and
headers.

Call `initialize()` once, before any request is made:

>>> import parseobjects
>>> parseobjects.initialize(application_id='applicationId',
...     client_key='clientKey', server_url='http://localhost:1337/1')

"""

import logging
from urllib.parse import quote, urlencode, urlparse

import httplib2

from parseobjects import storage
from parseobjects.errors import NotInitialized


BATCH_LIMIT = 50

SPECIAL_ENDPOINTS = {
    '_User': '/users',
    '_Installation': '/installations',
}

log = logging.getLogger('parseobjects.api')


class Configuration(object):

    """The settings every request is made with.

    Parameter `http` is the default user agent, an object compatible with
    `httplib2.Http`. Parameter `store` is the `storage.KeyValueStore` that
    keeps the current user, installation and config.

    With `allow_custom_object_id`, objects are created with the `object_id`
    the client gives them, which the server must be set up to accept.
    Whether a save creates or updates an object then depends on whether it
    has a `created_at`.

    """

    content_types = ('application/json',)

    def __init__(self, application_id, server_url, client_key=None,
                 master_key=None, http=None, store=None,
                 allow_custom_object_id=False):
        self.application_id = application_id
        self.server_url = server_url.rstrip('/')
        self.client_key = client_key
        self.master_key = master_key
        if http is None:
            http = httplib2.Http()
        self.http = http
        if store is None:
            store = storage.MemoryStore()
        self.store = store
        self.allow_custom_object_id = allow_custom_object_id

    @property
    def mount_path(self):
        """The path the API is served under, such as ``/1``."""
        return urlparse(self.server_url).path

    def url_for(self, path, params=None):
        url = self.server_url + path
        if params:
            # Keep commas literal so JSON array parameters stay readable.
            url += '?' + urlencode(params, quote_via=quote, safe=',')
        return url

    def headers(self, use_master_key=False, session_token=None,
                installation_id=None, headers=None):
        """Returns the HTTP headers for a request.

        The current user's session token and current installation's id are
        included unless given explicitly.

        """
        result = {
            'accept': ', '.join(self.content_types),
            'content-type': self.content_types[0],
            'x-parse-application-id': self.application_id,
        }
        if self.client_key is not None:
            result['x-parse-client-key'] = self.client_key
        if use_master_key:
            if self.master_key is None:
                raise NotInitialized('Cannot use the master key: none was configured')
            result['x-parse-master-key'] = self.master_key

        if session_token is None:
            session_token = (self.store.get(storage.CURRENT_USER) or {}).get('sessionToken')
        if session_token is not None:
            result['x-parse-session-token'] = session_token
        if installation_id is None:
            installation_id = (self.store.get(storage.CURRENT_INSTALLATION) or {}).get('installationId')
        if installation_id is not None:
            result['x-parse-installation-id'] = installation_id

        if headers:
            result.update(headers)
        return result


configuration = None


def initialize(application_id, server_url, client_key=None, master_key=None,
               http=None, store=None, allow_custom_object_id=False):
    """Configures the client for the backend at `server_url`.

    Returns the new `Configuration`, which is also kept as the module's
    `configuration`.

    """
    global configuration
    configuration = Configuration(application_id, server_url,
        client_key=client_key, master_key=master_key, http=http, store=store,
        allow_custom_object_id=allow_custom_object_id)
    log.debug('Initialized client for %s', configuration.server_url)
    return configuration


def get_configuration():
    if configuration is None:
        raise NotInitialized('parseobjects.initialize() must be called before making requests')
    return configuration


def endpoint_for_class(class_name):
    """Returns the API path of the collection for remote class
    `class_name`.

    The built-in user and installation classes have their own top level
    paths; all other classes live under ``/classes/``.

    """
    try:
        return SPECIAL_ENDPOINTS[class_name]
    except KeyError:
        return '/classes/%s' % class_name


def endpoint_for_object(class_name, object_id):
    return '%s/%s' % (endpoint_for_class(class_name), object_id)


def endpoint_for_aggregate(class_name):
    return '/aggregate/%s' % class_name
