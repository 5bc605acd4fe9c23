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

Fields are class attributes for `DataObject` subclasses that provide data
coding functionality for your properties.

Besides plain values, the backend encodes several types specially: dates as
``{"__type": "Date", "iso": ...}``, geographic values as ``GeoPoint`` and
``Polygon`` objects, and references to other objects as ``Pointer``
objects. The fields in this module decode those into `datetime`,
`parseobjects.types` and `parseobjects.pointer.Pointer` values.

"""

from datetime import datetime, tzinfo, timedelta

import parseobjects.dataobject
import parseobjects.pointer
from parseobjects import types


class Property(object):

    """An attribute that can be installed declaratively on a `DataObject` to
    provide data encoding or loading behavior.

    The primary kind of `Property` objects are `Field` and its subclasses.

    """

    def install(self, attrname, cls):
        """Signals to the `Property` that it has been installed on the given
        class as an attribute with the given name.

        This implementation does nothing. Override this method to customize
        the behavior to install an attribute on DataObject classes where your
        field is declared.

        """
        pass


class Field(Property):

    """A property for encoding object attributes as dictionary values and
    decoding dictionary values into object attributes.

    Declare a `Field` instance for each attribute of a `DataObject` that
    should be encoded to or decoded from a dictionary.

    Use a `Field` instance directly for simple `DataObject` attributes that
    can be the same type as their dictionary values. That is, use `Field`
    fields for strings, numbers, and boolean values. If your attribute data
    does need converted, use one of the `Field` subclasses from the
    `parseobjects.fields` module to encode and decode your data as
    appropriate.

    """

    def __init__(self, api_name=None, default=None):
        """Sets the field's matching deserialization field and default value.

        Optional parameter `api_name` is the key of this field's matching
        value in a dictionary. If not given, the attribute name of the field
        when its class was defined is used. (The attribute of the object
        containing the decoded value will always be the attribute name of the
        field as declared.)

        Optional parameter `default` is the default value to use for this
        attribute when the dictionary to decode does not contain a value.
        `default` can be a value or callable function. If `default` is a
        callable function, it is called with the object being decoded and
        should return the default value of the attribute.

        """
        self.api_name = api_name
        self.default  = default

    def install(self, attrname, cls):
        self.attrname = attrname
        if self.api_name is None:
            self.api_name = attrname
        self.of_cls = cls

    def __get__(self, obj, cls):
        """Returns the field's value on the given object instance, or the
        field's default value if no value for the field is available.

        Note the field's value will be decoded from API data if necessary,
        raising any exceptions that the field's `decode()` method may raise.

        """
        if obj is None:
            # Yield the real field instance when gotten through the class.
            return self

        if self.attrname not in obj.__dict__:
            try:
                value = obj.api_data[self.api_name]
            except KeyError:
                if callable(self.default):
                    value = self.default(obj)
                else:
                    value = self.default
            else:
                if value is not None:
                    value = self.decode(value)
            # Store the value so we need decode it only once.
            obj.__dict__[self.attrname] = value

        return obj.__dict__[self.attrname]

    def __set__(self, obj, value):
        obj.__dict__[self.attrname] = value

    def __delete__(self, obj):
        # Delete both the instance and API data, so we'll get a real
        # attribute miss next time and return the field's default.
        obj.__dict__.pop(self.attrname, None)
        obj.api_data.pop(self.api_name, None)

    def decode(self, value):
        """Decodes a dictionary value into a `DataObject` attribute value.

        This implementation returns the `value` parameter unchanged.

        """
        return value

    def encode(self, value):
        """Encodes a `DataObject` attribute value into a dictionary value.

        This implementation returns the `value` parameter unchanged.

        """
        return value


class List(Field):

    """A field representing a homogeneous list of data.

    The elements of the list are decoded through another field specified when
    the `List` is declared.

    """

    def __init__(self, fld, **kwargs):
        """Sets the type of field representing the content of the list.

        Parameter `fld` is another field instance representing the list's
        content. For instance, if the field were to represent a list of
        pointers, `fld` would be a `Pointer` instance.

        """
        super(List, self).__init__(**kwargs)
        self.fld = fld

    def install(self, attrname, cls):
        super(List, self).install(attrname, cls)

        # Make sure our content field knows its owner too.
        self.fld.install(attrname, cls)

    def decode(self, value):
        return [self.fld.decode(v) for v in value]

    def encode(self, value):
        return [self.fld.encode(v) for v in value]


class Dict(List):

    """A field representing a homogeneous mapping of data.

    The elements of the mapping are decoded through another field specified
    when the `Dict` is declared.

    """

    def decode(self, value):
        return dict((k, self.fld.decode(v)) for k, v in value.items())

    def encode(self, value):
        return dict((k, self.fld.encode(v)) for k, v in value.items())


class AcceptsStringCls(object):
    """Mixin for fields with a ``cls`` attribute that can either be a
    ``DataObject`` subclass or a string name of a ``DataObject`` subclass (to
    allow forward references)."""

    def get_cls(self):
        cls = self.__dict__['cls']
        if cls is not None and not callable(cls):
            cls = parseobjects.dataobject.find_by_name(cls)
        return cls

    def set_cls(self, cls):
        self.__dict__['cls'] = cls

    cls = property(get_cls, set_cls)


class Object(AcceptsStringCls, Field):

    """A field representing a nested `DataObject`."""

    def __init__(self, cls, **kwargs):
        """Sets the the `DataObject` class the field represents.

        `cls` may also be the name of a class, in which case the referenced
        class is the leafmost `DataObject` subclass declared with that name.

        """
        super(Object, self).__init__(**kwargs)
        self.cls = cls

    def decode(self, value):
        if value is None:
            if callable(self.default):
                return self.default()
            return self.default
        return self.cls.from_dict(value)

    def encode(self, value):
        return value.to_dict()


class UTC(tzinfo):
    """UTC"""
    ZERO = timedelta(0)

    def utcoffset(self, dt):
        return UTC.ZERO

    def tzname(self, dt):
        return "UTC"

    def dst(self, dt):
        return UTC.ZERO


class Datetime(Field):

    """A field representing a timestamp, such as ``createdAt``.

    Timestamps are ISO 8601 strings in UTC with millisecond precision, for
    example ``2021-03-10T20:58:12.123Z``.

    """

    dateformat = "%Y-%m-%dT%H:%M:%S.%fZ"
    fallback_dateformat = "%Y-%m-%dT%H:%M:%SZ"
    utc = UTC()

    def decode(self, value):
        """Decodes a timestamp string into a `datetime` with UTC tzinfo."""
        if value is None:
            if callable(self.default):
                return self.default()
            return self.default
        for dateformat in (self.dateformat, self.fallback_dateformat):
            try:
                return datetime.strptime(value, dateformat).replace(tzinfo=Datetime.utc)
            except (TypeError, ValueError):
                continue
        raise TypeError('Value to decode %r is not a valid date time stamp' % (value,))

    def encode(self, value):
        """Encodes a `datetime` into a timestamp string.

        A naive `datetime` is taken to already be in UTC.

        """
        if not isinstance(value, datetime):
            raise TypeError('Value to encode %r is not a datetime' % (value,))
        if value.tzinfo is not None:
            value = value.astimezone(Datetime.utc)
        return '%s.%03dZ' % (value.strftime('%Y-%m-%dT%H:%M:%S'),
                             value.microsecond // 1000)


class Date(Datetime):

    """A field representing a date value stored on an object, encoded as
    ``{"__type": "Date", "iso": ...}``."""

    def decode(self, value):
        if isinstance(value, dict):
            if value.get('__type') != 'Date':
                raise TypeError('Value to decode %r is not a Date' % (value,))
            value = value['iso']
        return super(Date, self).decode(value)

    def encode(self, value):
        return {'__type': 'Date', 'iso': super(Date, self).encode(value)}


class GeoPoint(Field):

    """A field representing a `parseobjects.types.GeoPoint`."""

    def decode(self, value):
        return types.GeoPoint.from_dict(value)

    def encode(self, value):
        return value.to_dict()


class Polygon(Field):

    """A field representing a `parseobjects.types.Polygon`."""

    def decode(self, value):
        return types.Polygon.from_dict(value)

    def encode(self, value):
        return value.to_dict()


class Pointer(AcceptsStringCls, Field):

    """A field representing a reference to another object.

    A bare pointer decodes to a `parseobjects.pointer.Pointer`. When the
    referenced object was included in the response (see
    `Query.include()`), the full object decodes to an instance of the target
    class instead.

    Parameter `cls` is the target class or its name. When omitted, the
    target class is found by the pointer's ``className``.

    """

    def __init__(self, cls=None, **kwargs):
        super(Pointer, self).__init__(**kwargs)
        self.cls = cls

    def target_cls(self, class_name):
        cls = self.cls
        if cls is None:
            cls = parseobjects.dataobject.find_by_class_name(class_name)
        return cls

    def decode(self, value):
        if not isinstance(value, dict):
            raise TypeError('Value to decode %r is not a pointer' % (value,))
        if value.get('__type') == 'Pointer':
            return parseobjects.pointer.Pointer(value['className'], value['objectId'])
        cls = self.target_cls(value.get('className'))
        data = dict((k, v) for k, v in value.items()
                    if k not in ('__type', 'className'))
        return cls.from_dict(data)

    def encode(self, value):
        if not isinstance(value, parseobjects.pointer.Pointer):
            value = parseobjects.pointer.Pointer.from_object(value)
        return value.to_dict()
