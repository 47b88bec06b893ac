#
# Datefmt -- Named date/time formats with timezone conversion
#
# Copyright (c) 2013, Hard Consulting Corporation.
#
# Datefmt is free software: you can redistribute it and/or modify it under the
# terms of the GNU General Public License as published by the Free Software
# Foundation, either version 3 of the License, or (at your option) any later
# version.  See the LICENSE file at the top of the source tree.
#
# Datefmt is distributed in the hope that it will be useful, but WITHOUT ANY
# WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR
# A PARTICULAR PURPOSE.  See the GNU General Public License for more details.
#

__author__                      = "Perry Kundert"
__email__                       = "perry@hardconsulting.com"
__copyright__                   = "Copyright (c) 2013 Hard Consulting Corporation"
__license__                     = "Dual License: GPLv3 (or later) and Commercial (see LICENSE)"

__all__				= [ 'timestamp', 'EPOCH' ]

import calendar
import datetime
import math

import pytz

EPOCH				= datetime.datetime( 1970, 1, 1, tzinfo=pytz.utc )


class timestamp( object ):
    """An immutable instant: seconds since the epoch, held as two 16-bit words (high, low), plus
    microseconds and picoseconds.  Negative times (before the epoch) have a negative high word; the
    low word is always 0 <= low < 2**16:

        >>> timestamp.from_epoch( 1420995671 )
        <2015-01-11 17:01:11.000 =~= 1420995671.000000>
        >>> timestamp.from_epoch( 1420995671 )[:2]
        (21682, 44119)

    Compares and hashes by instant; renders (via str) in UTC to millisecond precision.

    """
    __slots__			= ( 'high', 'low', 'usec', 'psec' )

    _fmt			= '%Y-%m-%d %H:%M:%S'	# 2014-04-01 10:11:12

    def __init__( self, high=0, low=0, usec=0, psec=0 ):
        if not 0 <= low < 1 << 16:
            raise ValueError( "Invalid low word: %r" % ( low, ))
        if not ( 0 <= usec < 1000000 and 0 <= psec < 1000000 ):
            raise ValueError( "Invalid sub-second fields: %r usec, %r psec" % ( usec, psec ))
        object.__setattr__( self, 'high', int( high ))
        object.__setattr__( self, 'low', int( low ))
        object.__setattr__( self, 'usec', int( usec ))
        object.__setattr__( self, 'psec', int( psec ))

    def __setattr__( self, name, value ):
        raise AttributeError( "timestamp is immutable" )

    @classmethod
    def from_epoch( cls, n ):
        """Decompose integer epoch seconds into the high (bits 16..) and low (bits 0..15) words."""
        n			= int( n )
        return cls( n >> 16, n & 0xFFFF )

    @classmethod
    def from_float( cls, f ):
        """Seconds (with fraction) since the epoch, rounded to the microsecond."""
        if math.isnan( f ) or math.isinf( f ):
            raise ValueError( "Invalid time; expect a finite UNIX timestamp: %r" % ( f, ))
        seconds			= math.floor( f )
        usec			= int( round(( f - seconds ) * 1000000 ))
        if usec >= 1000000:
            seconds,usec	= seconds + 1, usec - 1000000
        n			= int( seconds )
        return cls( n >> 16, n & 0xFFFF, usec )

    @classmethod
    def from_datetime( cls, dt ):
        """Convert a timezone-aware datetime.  Convert the time to a UTC time tuple, then use
        calendar.timegm to compute the UNIX timestamp; a naive datetime is taken to be UTC.

        """
        n			= calendar.timegm( dt.utctimetuple() )
        return cls( n >> 16, n & 0xFFFF, dt.microsecond )

    @property
    def seconds( self ):
        return ( self.high << 16 ) + self.low

    @property
    def value( self ):
        return self.seconds + self.usec / 1000000 + self.psec / 1000000000000

    def datetime( self, tzinfo=None ):
        """The instant as an aware datetime in tzinfo, or in the host's local time if None."""
        dt			= EPOCH + datetime.timedelta( seconds=self.seconds, microseconds=self.usec )
        return dt.astimezone( tzinfo ) if tzinfo is not None else dt.astimezone()

    def _key( self ):
        return ( self.seconds, self.usec, self.psec )

    def __getitem__( self, index ):
        return ( self.high, self.low, self.usec, self.psec )[index]

    def __len__( self ):
        return 4

    def __float__( self ):
        return self.value

    def __int__( self ):
        return self.seconds

    def __hash__( self ):
        return hash( self._key() )

    def __str__( self ):
        dt			= self.datetime( pytz.utc )
        return dt.strftime( self._fmt ) + '.%03d' % ( self.usec // 1000 )

    def __repr__( self ):
        return '<%s =~= %.6f>' % ( self, self.value )

    def __eq__( self, rhs ):
        if not isinstance( rhs, timestamp ):
            return NotImplemented
        return self._key() == rhs._key()
    def __ne__( self, rhs ):
        if not isinstance( rhs, timestamp ):
            return NotImplemented
        return self._key() != rhs._key()
    def __lt__( self, rhs ):
        if not isinstance( rhs, timestamp ):
            return NotImplemented
        return self._key() < rhs._key()
    def __gt__( self, rhs ):
        if not isinstance( rhs, timestamp ):
            return NotImplemented
        return self._key() > rhs._key()
    def __le__( self, rhs ):
        if not isinstance( rhs, timestamp ):
            return NotImplemented
        return self._key() <= rhs._key()
    def __ge__( self, rhs ):
        if not isinstance( rhs, timestamp ):
            return NotImplemented
        return self._key() >= rhs._key()
