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
times.scope -- Format and parse times as if the process were in some other timezone

Whenever the timezone can be resolved to a tzinfo (a pytz zone, a supported abbreviation or a fixed
UTC offset), it is passed directly to the host formatter/parser, and the ambient timezone is never
touched.  A POSIX TZ rule (eg. 'JST-9') is only meaningful to the host C library, so the ambient TZ
is temporarily set to it within a timezone_scope, and restored on exit, even on failure.

The ambient TZ is process-wide; all scopes are serialized by times.host.ambient_lock (re-entrant),
which the host formatter and parser also hold whenever they use the ambient local timezone.  So,
no thread's temporary override is ever observed by another thread's scoped or local-time operation.

"""

__all__				= [ 'timezone_scope', 'format_in_timezone', 'parse_in_timezone' ]

import logging

import pytz

from ..misc		import mutexmethod
from .host		import ambient_lock, format_time, parse_time, get_ambient_timezone, set_ambient_timezone
from .zones		import is_posix_rule, timezone_info

log				= logging.getLogger( __package__ )


class timezone_scope( object ):
    """A context manager making name the ambient timezone for its duration:

        with timezone_scope( 'JST-9' ):
            ...

    The prior TZ (or its absence) is restored on exit, regardless of how the block exits.

    """
    _lock			= ambient_lock

    def __init__( self, name ):
        self.name		= name
        self.prior		= None

    def __enter__( self ):
        self._lock.acquire()
        self.prior		= get_ambient_timezone()
        try:
            log.trace( "TZ=%r --> %r", self.prior, self.name )
            set_ambient_timezone( self.name )
        except Exception:
            self.__exit__( None, None, None )
            raise
        return self

    def __exit__( self, typ, val, tb ):
        try:
            log.trace( "TZ=%r <-- %r%s", self.prior, self.name, " (%s)" % typ.__name__ if typ else "" )
            set_ambient_timezone( self.prior )
        finally:
            self._lock.release()
        return False # suppress no exceptions

    @classmethod
    @mutexmethod( '_lock' )
    def call( cls, name, function, *args, **kwds ):
        """Invoke function( *args, **kwds ) with name as the ambient timezone."""
        with cls( name ):
            return function( *args, **kwds )


def _resolve( name ):
    """Return (tzinfo,is_dst) for the named timezone, or None if only the host C library can interpret it
    as a POSIX TZ rule.  Raises pytz.UnknownTimeZoneError for anything else.

    """
    try:
        return timezone_info( name )
    except pytz.UnknownTimeZoneError:
        if not is_posix_rule( name ):
            raise
    log.detail( "Timezone %r is a POSIX TZ rule; using the host's ambient timezone", name )
    return None


def format_in_timezone( pattern, value, name ):
    """Render the timestamp value with the strftime pattern, as wall-clock time in the named timezone."""
    resolved			= _resolve( name )
    if resolved is None:
        return timezone_scope.call( name, format_time, pattern, value )
    tzinfo,_			= resolved # is_dst is irrelevant; instants are unambiguous
    return format_time( pattern, value, tzinfo=tzinfo )


def parse_in_timezone( text, name ):
    """Parse text as a wall-clock time in the named timezone (unless it carries its own), to a timestamp."""
    resolved			= _resolve( name )
    if resolved is None:
        return timezone_scope.call( name, parse_time, text )
    tzinfo,is_dst		= resolved
    return parse_time( text, tzinfo=tzinfo, is_dst=is_dst )
