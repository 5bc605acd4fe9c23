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

Local key-value stores for the current user, installation and config.

The query and command layers never touch a store. Only the object layer
(`User.current()`, `Installation.current()`, `Config.current()`) reads and
writes the store configured through `parseobjects.initialize()`, so the
store is the one place shared state lives. Each store serializes access with
its `lock`, which callers also hold across a read and the write that depends
on it.

"""

import logging
import os
import threading

import simplejson as json


CURRENT_USER = 'currentUser'
CURRENT_INSTALLATION = 'currentInstallation'
CURRENT_CONFIG = 'currentConfig'

log = logging.getLogger('parseobjects.storage')


class KeyValueStore(object):

    """The interface of a local store.

    Values are JSON-compatible data (the encoded dictionaries of objects).

    """

    def __init__(self):
        self.lock = threading.RLock()

    def get(self, key):
        """Returns the value stored under `key`, or `None`."""
        raise NotImplementedError

    def set(self, key, value):
        raise NotImplementedError

    def delete(self, key):
        raise NotImplementedError

    def delete_all(self):
        raise NotImplementedError

    def get_or_set(self, key, factory):
        """Returns the value stored under `key`, first storing the result of
        calling `factory` if there is none."""
        with self.lock:
            value = self.get(key)
            if value is None:
                value = factory()
                self.set(key, value)
            return value


class MemoryStore(KeyValueStore):

    """A store that lives only as long as the process."""

    def __init__(self):
        super(MemoryStore, self).__init__()
        self._data = {}

    def get(self, key):
        with self.lock:
            return self._data.get(key)

    def set(self, key, value):
        with self.lock:
            self._data[key] = value

    def delete(self, key):
        with self.lock:
            self._data.pop(key, None)

    def delete_all(self):
        with self.lock:
            self._data.clear()


class FileStore(KeyValueStore):

    """A store persisted as a JSON document at `path`.

    The whole document is rewritten on every change, so this store suits the
    handful of small values the client keeps.

    """

    def __init__(self, path):
        super(FileStore, self).__init__()
        self.path = path

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        with open(self.path) as f:
            return json.load(f)

    def _write(self, data):
        tmp_path = self.path + '.tmp'
        with open(tmp_path, 'w') as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)

    def get(self, key):
        with self.lock:
            return self._read().get(key)

    def set(self, key, value):
        with self.lock:
            data = self._read()
            data[key] = value
            self._write(data)
        log.debug('Stored %r in %s', key, self.path)

    def delete(self, key):
        with self.lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def delete_all(self):
        with self.lock:
            if os.path.exists(self.path):
                os.remove(self.path)
