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

Value types that have a special encoding on the wire: geographic points and
polygons.

"""


class GeoPoint(object):

    """A latitude and longitude pair.

    >>> GeoPoint(10, 20).to_dict()
    {'__type': 'GeoPoint', 'latitude': 10, 'longitude': 20}

    """

    def __init__(self, latitude=0.0, longitude=0.0):
        if not -90.0 <= latitude <= 90.0:
            raise ValueError('latitude should be between -90 and 90 degrees, not %r'
                % (latitude,))
        if not -180.0 <= longitude <= 180.0:
            raise ValueError('longitude should be between -180 and 180 degrees, not %r'
                % (longitude,))
        self.latitude = latitude
        self.longitude = longitude

    def to_dict(self):
        return {
            '__type': 'GeoPoint',
            'latitude': self.latitude,
            'longitude': self.longitude,
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict) or data.get('__type') != 'GeoPoint':
            raise TypeError('Cannot decode %r as a GeoPoint' % (data,))
        return cls(data['latitude'], data['longitude'])

    def __eq__(self, other):
        if not isinstance(other, GeoPoint):
            return NotImplemented
        return (self.latitude, self.longitude) == (other.latitude, other.longitude)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.latitude, self.longitude))

    def __repr__(self):
        return 'GeoPoint(latitude=%r, longitude=%r)' % (self.latitude, self.longitude)


class Polygon(object):

    """A closed shape of three or more `GeoPoint` vertices."""

    def __init__(self, *points):
        if len(points) == 1 and isinstance(points[0], (list, tuple)):
            points = points[0]
        if len(points) < 3:
            raise ValueError('A Polygon needs at least 3 points, not %d' % len(points))
        for point in points:
            if not isinstance(point, GeoPoint):
                raise TypeError('Polygon vertex %r is not a GeoPoint' % (point,))
        self.points = tuple(points)

    @property
    def coordinates(self):
        """The vertices as ``[latitude, longitude]`` pairs."""
        return [[p.latitude, p.longitude] for p in self.points]

    def contains(self, point):
        """Returns whether `point` falls inside this polygon, by ray casting
        over the vertices."""
        inside = False
        vertices = self.points
        j = len(vertices) - 1
        for i in range(len(vertices)):
            a, b = vertices[i], vertices[j]
            if ((a.longitude > point.longitude) != (b.longitude > point.longitude)
                    and point.latitude < (b.latitude - a.latitude)
                    * (point.longitude - a.longitude)
                    / (b.longitude - a.longitude) + a.latitude):
                inside = not inside
            j = i
        return inside

    def to_dict(self):
        return {
            '__type': 'Polygon',
            'coordinates': self.coordinates,
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict) or data.get('__type') != 'Polygon':
            raise TypeError('Cannot decode %r as a Polygon' % (data,))
        return cls([GeoPoint(lat, lng) for lat, lng in data['coordinates']])

    def __eq__(self, other):
        if not isinstance(other, Polygon):
            return NotImplemented
        return self.points == other.points

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self.points)

    def __repr__(self):
        return 'Polygon(%s)' % ', '.join(repr(p) for p in self.points)
