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

Saving, fetching and deleting many objects at once.

`save_all()` and `delete_all()` send the objects' commands through the
``/batch`` endpoint, `batch_limit` commands per request. Each returns a list
with one `Success` or `Failure` per object, in the order of the objects, so
results can be zipped back to their inputs. One object's failure does not
affect the others.

With `transaction=True` the server applies each batch all or nothing. A
transaction must fit in one batch.

"""

import logging

from parseobjects import api
from parseobjects import constraints
from parseobjects.command import Command, call_async, call_future
from parseobjects.errors import (DecodingError, MissingIdentifier,
    ObjectNotFound, ParseError, ServerError)
from parseobjects.query import Query
from parseobjects.result import Failure, Success


log = logging.getLogger('parseobjects.batch')


def decode_error(error):
    """Returns the `ParseError` for the ``error`` member of a batch
    item."""
    if not isinstance(error, dict):
        return DecodingError('Batch item error %r is not an object' % (error,),
            field='error')
    code = error.get('code', ParseError.OTHER_CAUSE)
    message = error.get('error') or error.get('message') or 'Unknown error'
    if code == ParseError.OBJECT_NOT_FOUND:
        return ObjectNotFound(message)
    return ServerError(message, code=code)


def decode_item(item, decode_success):
    if not isinstance(item, dict):
        return Failure(DecodingError('Batch item %r is not an object' % (item,)))
    if 'success' in item:
        try:
            return Success(decode_success(item['success']))
        except ParseError as exc:
            return Failure(exc)
        except KeyError as exc:
            return Failure(DecodingError('Batch item has no %r member'
                % (exc.args[0],), field=exc.args[0]))
        except (TypeError, ValueError, AttributeError) as exc:
            return Failure(DecodingError('Could not decode batch item: %s' % exc))
    if 'error' in item:
        return Failure(decode_error(item['error']))
    return Failure(DecodingError('Batch item has neither a success nor an '
        'error member', field='success'))


def decode_batch(items, count, decode_success):
    """Decodes the response to a batch of `count` requests into a list of
    `count` results.

    Parameter `decode_success` decodes the ``success`` member of an item. It
    is either one function for every item or a list of one function per
    item. Items the response is missing are reported as `DecodingError`
    failures.

    """
    if not isinstance(items, list):
        raise DecodingError('Batch response %r is not a list' % (items,))
    if callable(decode_success):
        decode_success = [decode_success] * count

    results = []
    for index in range(count):
        if index < len(items):
            results.append(decode_item(items[index], decode_success[index]))
        else:
            results.append(Failure(DecodingError('Batch response has no item %d'
                % index, field=str(index))))
    if len(items) > count:
        log.debug('Ignoring %d unexpected batch response items', len(items) - count)
    return results


def batch_command(commands, transaction=False):
    """Returns the ``/batch`` command for sending `commands` in one
    request."""
    body = {'requests': [c.to_batch_request() for c in commands]}
    if transaction:
        body['transaction'] = True
    decoders = [c.decode for c in commands]
    return Command('POST', '/batch', body=body,
        decode=lambda items: decode_batch(items, len(commands), decoders))


def execute_batched(commands, batch_limit=None, transaction=False, http=None,
                    **kwargs):
    if batch_limit is None:
        batch_limit = api.BATCH_LIMIT
    if batch_limit < 1:
        raise ParseError('The batch limit must be at least 1, not %r' % (batch_limit,))
    if transaction and len(commands) > batch_limit:
        raise ParseError('A transaction of %d requests does not fit in one '
            'batch of %d' % (len(commands), batch_limit))

    results = []
    for start in range(0, len(commands), batch_limit):
        chunk = commands[start:start + batch_limit]
        log.debug('Sending batch of %d requests', len(chunk))
        results.extend(batch_command(chunk, transaction).execute(http=http, **kwargs))
    return results


def save_all(objects, batch_limit=None, transaction=False, http=None, **kwargs):
    """Saves `objects`, returning the result of each save."""
    commands = [obj.save_command() for obj in objects]
    return execute_batched(commands, batch_limit, transaction, http=http, **kwargs)


def delete_all(objects, batch_limit=None, transaction=False, http=None, **kwargs):
    """Deletes `objects`, returning the result of each delete.

    Raises `MissingIdentifier` before sending anything if any of the
    objects was never saved.

    """
    commands = [obj.delete_command() for obj in objects]
    return execute_batched(commands, batch_limit, transaction, http=http, **kwargs)


def fetch_all(objects, include_keys=None, http=None, **kwargs):
    """Fetches `objects`, all of one class, in one query.

    Each object is updated in place with the server's copy, the same way as
    by its `fetch()`, and its result is the object itself, or an
    `ObjectNotFound` failure if the server no longer has it. Raises
    `ParseError` before sending anything if the objects are of more than
    one class.

    """
    objects = list(objects)
    if not objects:
        return []
    for obj in objects:
        if obj.object_id is None:
            raise MissingIdentifier('Cannot fetch an unsaved %s' % type(obj).__name__)

    class_name = objects[0].class_name
    for obj in objects:
        if obj.class_name != class_name:
            raise ParseError('Cannot fetch %s and %s objects together'
                % (class_name, obj.class_name))

    ids = []
    for obj in objects:
        if obj.object_id not in ids:
            ids.append(obj.object_id)
    query = Query(class_name, constraints.contained_in('objectId', ids)).limit(len(ids))
    if include_keys:
        query = query.include(*include_keys)

    command = Command('POST', api.endpoint_for_class(class_name),
        body=query.to_dict(), decode=lambda data: data['results'])
    found = dict((item.get('objectId'), item)
        for item in command.execute(http=http, **kwargs))
    results = []
    for obj in objects:
        if obj.object_id in found:
            results.append(Success(obj.decode_fetched(dict(found[obj.object_id]))))
        else:
            results.append(Failure(ObjectNotFound('%s %s was not found'
                % (obj.class_name, obj.object_id))))
    return results


def save_all_async(callback, objects, callback_queue=None, **kwargs):
    return call_async(lambda: save_all(objects, **kwargs), callback, callback_queue)


def fetch_all_async(callback, objects, callback_queue=None, **kwargs):
    return call_async(lambda: fetch_all(objects, **kwargs), callback, callback_queue)


def delete_all_async(callback, objects, callback_queue=None, **kwargs):
    return call_async(lambda: delete_all(objects, **kwargs), callback, callback_queue)


def save_all_future(objects, **kwargs):
    return call_future(lambda: save_all(objects, **kwargs))


def fetch_all_future(objects, **kwargs):
    return call_future(lambda: fetch_all(objects, **kwargs))


def delete_all_future(objects, **kwargs):
    return call_future(lambda: delete_all(objects, **kwargs))
