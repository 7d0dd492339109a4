"""A module for housing the datatype classes.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

Exported Classes:
Binary -- Class for a Binary object

Exported Functions:
DateFromTicks -- Converts ticks to a Date object.
TimeFromTicks -- Converts ticks to a Time object.
TimestampFromTicks -- Converts ticks to a Timestamp object.
TypeObjectFromValue -- Returns the TypeObject describing a returned value.

TypeObject Variables:
STRING -- TypeObject(str)
BINARY -- TypeObject(bytes)
NUMBER -- TypeObject(int, float, decimal.Decimal)
DATETIME -- TypeObject(datetime.datetime, datetime.date, datetime.time)
ROWID -- TypeObject()
MAP -- TypeObject(dict): nodes, relationships and maps
LIST -- TypeObject(list): paths and collections
"""

__all__ = ['Date', 'Time', 'Timestamp', 'DateFromTicks', 'TimeFromTicks',
           'TimestampFromTicks', 'Binary', 'STRING', 'BINARY', 'NUMBER',
           'DATETIME', 'ROWID', 'MAP', 'LIST', 'TypeObjectFromValue',
           'LOCALZONE_NAME']

import decimal
from datetime import datetime as Timestamp, date as Date, time as Time
from datetime import tzinfo  # pylint: disable=unused-import
from typing import Any, Union  # pylint: disable=unused-import

import tzlocal

from .exception import DataError

LOCALZONE_NAME = tzlocal.get_localzone_name()
LOCALZONE = tzlocal.get_localzone()


class Binary(bytes):
    """A binary string.

    If passed a string we assume it's encoded as LATIN-1, which ensures that
    the characters 0-255 are considered single-character sequences.
    """

    def __new__(cls, data):
        # type: (Union[str, bytes, bytearray]) -> Binary
        if isinstance(data, str):
            return bytes.__new__(cls, data.encode('latin-1'))
        return bytes.__new__(cls, data)

    @property
    def string(self):
        # type: () -> bytes
        return self


def DateFromTicks(ticks):
    # type: (float) -> Date
    """Convert ticks to a Date object in the local timezone."""
    return TimestampFromTicks(ticks).date()


def TimeFromTicks(ticks, zoneinfo=LOCALZONE):
    # type: (float, tzinfo) -> Time
    """Convert ticks to a naive Time object in the given timezone."""
    return TimestampFromTicks(ticks, zoneinfo).time()


def TimestampFromTicks(ticks, zoneinfo=LOCALZONE):
    # type: (float, tzinfo) -> Timestamp
    """Convert ticks to a timezone-aware Timestamp object."""
    return Timestamp.fromtimestamp(ticks, zoneinfo)


def timezone_aware(tstamp, tz_info=LOCALZONE):
    # type: (Timestamp, tzinfo) -> Timestamp
    """Attach tz_info to a naive timestamp, leaving aware ones alone."""
    if tstamp.tzinfo is not None:
        return tstamp
    return tstamp.replace(tzinfo=tz_info)


class TypeObject(object):
    """A DB-API type object.

    Compares equal to any of the Python types it describes, so that
    cursor.description[i][1] == STRING works as PEP 249 asks.
    """

    def __init__(self, name, *values):
        self.name = name
        self.values = values

    def __eq__(self, other):
        if isinstance(other, TypeObject):
            return self is other
        return other in self.values

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return 'TypeObject(%s)' % (self.name)


STRING = TypeObject('STRING', str)
BINARY = TypeObject('BINARY', bytes, bytearray, Binary)
NUMBER = TypeObject('NUMBER', int, float, bool, decimal.Decimal)
DATETIME = TypeObject('DATETIME', Timestamp, Date, Time)
ROWID = TypeObject('ROWID')
MAP = TypeObject('MAP', dict)
LIST = TypeObject('LIST', list, tuple)
NULL = TypeObject('NULL', type(None))

TYPEMAP = {type(None): NULL,
           str: STRING,
           bool: NUMBER,
           int: NUMBER,
           float: NUMBER,
           decimal.Decimal: NUMBER,
           bytes: BINARY,
           bytearray: BINARY,
           Binary: BINARY,
           Timestamp: DATETIME,
           Date: DATETIME,
           Time: DATETIME,
           dict: MAP,
           list: LIST,
           tuple: LIST,
           }


def TypeObjectFromValue(value):
    # type: (Any) -> TypeObject
    """Return a TypeObject describing a value returned by the server."""
    obj = TYPEMAP.get(type(value))
    if obj is None:
        raise DataError('received value of unknown type "%s"' % (type(value).__name__))
    return obj
