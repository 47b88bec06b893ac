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
formats -- The registry of named, standards-derived date/time formats

Each name maps to a FormatSpec( mode, pattern ).  A 'utc' mode format is always rendered in UTC,
regardless of any timezone requested; a 'local' mode format is rendered in the requested (or
ambient local) timezone.  The '%:z' directive yields a '+hh:mm' UTC offset.

"""

__all__				= [ 'LOCAL', 'UTC', 'FormatSpec', 'FORMATS', 'UnknownFormatError',
                                    'lookup', 'names' ]

import collections

LOCAL				= 'local'
UTC				= 'utc'

FormatSpec			= collections.namedtuple( 'FormatSpec', ('mode', 'pattern') )

FORMATS				= collections.OrderedDict( (
    ( 'atom',		FormatSpec( LOCAL,	"%Y-%m-%d %H:%M:%S%:z" )),	# 2015-01-12 02:01:11+09:00
    ( 'atom-utc',	FormatSpec( UTC,	"%Y-%m-%d %H:%M:%SZ" )),	# 2015-01-11 17:01:11Z
    ( 'cookie',		FormatSpec( LOCAL,	"%A, %d-%b-%Y %H:%M:%S %Z" )),	# Monday, 12-Jan-2015 02:01:11 JST
    ( 'rfc-822',	FormatSpec( LOCAL,	"%a, %d %b %y %H:%M:%S %z" )),	# Mon, 12 Jan 15 02:01:11 +0900
    ( 'rfc-850',	FormatSpec( LOCAL,	"%A, %d-%b-%y %H:%M:%S %Z" )),	# Monday, 12-Jan-15 02:01:11 JST
    ( 'rfc-1036',	FormatSpec( LOCAL,	"%a, %d %b %y %H:%M:%S %z" )),
    ( 'rfc-1123',	FormatSpec( LOCAL,	"%a, %d %b %Y %H:%M:%S %z" )),	# Mon, 12 Jan 2015 02:01:11 +0900
    ( 'rfc-2822',	FormatSpec( LOCAL,	"%a, %d %b %Y %H:%M:%S %z" )),
    ( 'rfc-3339',	FormatSpec( LOCAL,	"%Y-%m-%d %H:%M:%S%:z" )),
    ( 'rss',		FormatSpec( LOCAL,	"%a, %d %b %Y %H:%M:%S %z" )),
    ( 'w3c',		FormatSpec( LOCAL,	"%Y-%m-%d %H:%M:%S%:z" )),
))


class UnknownFormatError( LookupError ):
    """No format is registered under the requested name."""
    def __init__( self, name ):
        super( UnknownFormatError, self ).__init__( "Unknown date/time format: %r; expected one of: %s" % (
            name, ", ".join( FORMATS )))
        self.name		= name


def lookup( name ):
    """Return the FormatSpec registered under name, or raise UnknownFormatError."""
    try:
        return FORMATS[name]
    except (KeyError, TypeError):
        raise UnknownFormatError( name )


def names():
    return list( FORMATS )
