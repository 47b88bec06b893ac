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
render -- Format a time by named format or strftime pattern, optionally in some timezone

    >>> render( 'atom', 0, timezone='Asia/Shanghai' )
    '1970-01-01 08:00:00+08:00'
    >>> render( 'atom-utc', '2015-01-12 02:01:11', timezone='Asia/Shanghai' )
    '2015-01-11 18:01:11Z'
    >>> render( '%Y', 0, timezone='UTC' )
    '1970'

"""

__all__				= [ 'NamedFormat', 'LiteralPattern', 'InvalidSelectorError',
                                    'selector', 'normalize', 'render' ]

import collections
import datetime
import logging

from .misc		import type_str_base
from .formats		import FORMATS, UTC, lookup
from .times		import (
    timestamp, now, format_time, parse_time,
    format_in_timezone, parse_in_timezone )

log				= logging.getLogger( __package__ )


class InvalidSelectorError( TypeError ):
    """The format selector is neither a format name nor a strftime pattern."""


NamedFormat			= collections.namedtuple( 'NamedFormat', ('name',) )
LiteralPattern			= collections.namedtuple( 'LiteralPattern', ('pattern',) )

def selector( sel ):
    """Decide once whether sel names a registered format, or is a literal strftime pattern.  A string
    that is a registered format name is a NamedFormat; any other string (eg. '%Y', 'today') is a
    LiteralPattern.  Supply NamedFormat( name ) to insist on a registered name.

    """
    if isinstance( sel, ( NamedFormat, LiteralPattern )):
        return sel
    if not isinstance( sel, type_str_base ):
        raise InvalidSelectorError( "Invalid format selector of %s: %r; expected a format name or pattern" % (
            type( sel ).__name__, sel ))
    if sel in FORMATS:
        return NamedFormat( sel )
    return LiteralPattern( sel )


def normalize( time_input=None, timezone=None ):
    """Convert time_input into a timestamp.  None is now; an int is epoch seconds; a float is epoch
    seconds with fraction; a string is parsed as wall-clock time in the timezone (if supplied, else
    the ambient local timezone), unless it specifies its own; a naive datetime is likewise
    localized.

    """
    if time_input is None:
        return now()
    if isinstance( time_input, timestamp ):
        return time_input
    if isinstance( time_input, bool ):
        raise TypeError( "Invalid time of %s: %r" % ( type( time_input ).__name__, time_input ))
    if isinstance( time_input, int ):
        return timestamp.from_epoch( time_input )
    if isinstance( time_input, float ):
        return timestamp.from_float( time_input )
    if isinstance( time_input, datetime.datetime ):
        if time_input.tzinfo is not None:
            return timestamp.from_datetime( time_input )
        time_input		= time_input.isoformat( ' ' ) # naive; wall-clock time, as if textual
    if isinstance( time_input, type_str_base ):
        if timezone is None:
            return parse_time( time_input )
        return parse_in_timezone( time_input, timezone )
    raise TypeError( "Invalid time of %s: %r" % ( type( time_input ).__name__, time_input ))


def render( sel, time_input=None, timezone=None ):
    """Render time_input (see normalize) using the selected named format or strftime pattern.

    A literal pattern is rendered in UTC iff timezone is exactly 'UTC'.  A named format in 'utc' mode
    (eg. 'atom-utc') is always rendered in UTC; any timezone supplied only affects the parsing of a
    textual time_input.  Otherwise, the time is rendered in the timezone (if any), else in the
    ambient local timezone.

    Raises UnknownFormatError for an unregistered name, InvalidSelectorError for an unusable
    selector; parsing (ValueError) and timezone (pytz.UnknownTimeZoneError) errors propagate.

    """
    sel				= selector( sel )
    if isinstance( sel, NamedFormat ):
        mode,pattern		= lookup( sel.name )
        utc			= mode == UTC
    else:
        pattern			= sel.pattern
        utc			= timezone == 'UTC'

    value			= normalize( time_input, timezone )
    log.detail( "Rendering %s with %r in %s", value, pattern,
                'UTC' if utc else repr( timezone ) if timezone else 'local time' )
    if utc or timezone is None:
        return format_time( pattern, value, utc=utc )
    return format_in_timezone( pattern, value, timezone )
