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

"""
times.host -- The host's clock, strftime formatter, calendrical parser and ambient timezone

All of these interpret times relative to the ambient local timezone (the TZ environment variable,
or the host's configured zone), unless an explicit UTC flag or tzinfo is supplied.  Every use of
the ambient timezone holds ambient_lock, as does every times.scope.timezone_scope that temporarily
changes it; so, a caller formatting or parsing in local time never observes another thread's
temporary TZ.

"""

__all__				= [ 'ambient_lock', 'now', 'strftime', 'format_time', 'parse_time', 'localize',
                                    'get_ambient_timezone', 'set_ambient_timezone' ]

import datetime
import logging
import os
import re
import threading
import time

import dateutil.parser
import pytz

from ..misc		import timer
from .stamp		import timestamp
from .zones		import local_zone, parse_offset, timezone_info

log				= logging.getLogger( __package__ )

# Held while reading or changing the process-wide TZ; re-entrant, so scoped operations may nest
ambient_lock			= threading.RLock()


def now():
    return timestamp.from_float( timer() )


def get_ambient_timezone():
    """The process-wide TZ setting, or None if unset."""
    return os.environ.get( 'TZ' )

def set_ambient_timezone( name ):
    """Set (or unset, if None) the process-wide TZ, and have the C library re-read it."""
    with ambient_lock:
        if name is None:
            os.environ.pop( 'TZ', None )
        else:
            os.environ['TZ']	= name
        time.tzset()


_directive_re			= re.compile( r'%(?:%|(:{1,2})z)' )

def strftime( dt, pattern ):
    """Format the aware datetime dt.  In addition to the platform strftime directives, support '%:z'
    (+hh:mm) and '%::z' (+hh:mm:ss) UTC offsets.

    """
    def directive( m ):
        colons			= m.group( 1 )
        if not colons:
            return '%%'
        offset			= dt.utcoffset()
        if offset is None:
            return ''
        seconds			= int( offset.total_seconds() )
        sign			= '-' if seconds < 0 else '+'
        hh,mm,ss		= abs( seconds ) // 3600, abs( seconds ) % 3600 // 60, abs( seconds ) % 60
        if len( colons ) == 1:
            return '%s%02d:%02d' % ( sign, hh, mm )
        return '%s%02d:%02d:%02d' % ( sign, hh, mm, ss )
    return dt.strftime( _directive_re.sub( directive, pattern ))


def format_time( pattern, value, utc=False, tzinfo=None ):
    """Render the timestamp value using the strftime pattern; in UTC if utc, else in the supplied
    tzinfo, else in the ambient local timezone.

    """
    if utc:
        tzinfo			= pytz.utc
    if tzinfo is not None:
        return strftime( value.datetime( tzinfo ), pattern )
    with ambient_lock:
        return strftime( value.datetime( local_zone() ), pattern ) # None: the host C library's local time


def localize( dt, tzinfo=None, is_dst=None ):
    """Attach tzinfo to the naive datetime dt.  A pytz zone is localized (so DST is computed correctly;
    unless is_dst is given, nonexistent or ambiguous local times raise); a None tzinfo means the
    ambient local timezone.

    """
    if tzinfo is None:
        with ambient_lock:
            tzinfo		= local_zone()
            if tzinfo is None:
                seconds		= time.mktime( dt.timetuple() )
                return ( datetime.datetime.fromtimestamp( seconds, tz=pytz.utc )
                         .replace( microsecond=dt.microsecond ).astimezone() )
    if hasattr( tzinfo, 'localize' ):
        return tzinfo.localize( dt, is_dst=is_dst )
    return dt.replace( tzinfo=tzinfo )


# YYYY-MM-DD[ T]HH:MM:SS[.ffffff][ ][ZONE]
_datetime_re			= re.compile(
    r'^\s*(\d{4})-(\d{1,2})-(\d{1,2})(?:[Tt]|\s+)(\d{1,2}):(\d{2}):(\d{2})(?:[.,](\d{1,6}))?\s*(\S+)?\s*$' )

def parse_time( text, tzinfo=None, is_dst=None ):
    """Parse a textual time, in the specified timezone (default: ambient local timezone).  If the time
    carries its own timezone, use that instead:

        2014-11-01 01:02:03.456 America/Edmonton
        2015-01-12T02:01:11+09:00
        2014-11-02 01:02:03 MST                (any unambiguous timezone abbreviation)

    Other forms (eg. 'Mon, 12 Jan 2015 02:01:11 +0900') are handed to dateutil's parser.  Be aware that
    attempting to parse nonexistent or ambiguous times (eg. during spring-ahead time gap, or during
    fall-back time overlap) in a generic zone will raise an exception; use a DST-specific
    abbreviation (eg. 'MDT') to be specific.

    Returns a timestamp; any failure raises ValueError.

    """
    if not isinstance( tzinfo, ( datetime.tzinfo, type( None ))):
        tzinfo,is_dst		= timezone_info( tzinfo )
    if tzinfo is None:
        with ambient_lock:
            return _parse_time( text, tzinfo, is_dst )
    return _parse_time( text, tzinfo, is_dst )


def _parse_time( text, tzinfo, is_dst ):
    try:
        m			= _datetime_re.match( text )
        if m:
            terms		= m.groups()
            if terms[7]:
                zone		= terms[7]
                if zone[:1] in ( '+', '-' ) or zone in ( 'Z', 'z' ):
                    offset	= parse_offset( zone )
                    tzinfo,is_dst = datetime.timezone( datetime.timedelta( seconds=offset )), None
                else:
                    tzinfo,is_dst = timezone_info( zone )
            usec		= int(( terms[6] or '0' ).ljust( 6, '0' ))
            naive		= datetime.datetime( *( list( map( int, terms[:6] )) + [ usec ] ))
            dt			= localize( naive, tzinfo, is_dst )
        else:
            dt			= dateutil.parser.parse( text )
            if dt.tzinfo is None:
                dt		= localize( dt, tzinfo, is_dst )
    except Exception as exc:
        raise ValueError( "Invalid time format %r; expect YYYY-MM-DD HH:MM:SS[.###] [TZ]: %s" % ( text, exc ))
    log.trace( "Parsed %r --> %s", text, dt.isoformat() )
    return timestamp.from_datetime( dt )
