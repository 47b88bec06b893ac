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
main -- The datefmt command: render a time in a named format or strftime pattern

"""

import argparse
import logging
import re
import sys

from .		import defaults, formats
from .misc	import log_cfg
from .render	import normalize, render
from .times	import support_abbreviations

log				= logging.getLogger( __package__ )


def time_argument( text ):
    """Interpret a command-line time: integer or decimal epoch seconds, otherwise textual."""
    if text is None:
        return None
    if re.match( r'^[+-]?\d+$', text ):
        return int( text )
    if re.match( r'^[+-]?\d*\.\d+$', text ):
        return float( text )
    return text


def main( argv=None ):
    """Render a time (default: now) in the specified format and timezone."""
    ap				= argparse.ArgumentParser(
        description = "Render a date/time in a named standard format or strftime pattern",
        formatter_class = argparse.RawDescriptionHelpFormatter,
        epilog = """\

The named formats are:

    %s

Any other format is taken as a strftime pattern; in addition to the platform's
directives, %%:z renders the UTC offset as +hh:mm.  A TIME may be an integer or
decimal UNIX timestamp, or text such as '2015-01-12 02:01:11'; text is
interpreted in the --timezone (if any) unless it specifies its own.  The
'atom-utc' format is always rendered in UTC.

Defaults may be supplied in a %s file, in section [%s].""" % (
            ", ".join( formats.names() ), defaults.config_name, defaults.config_section ))

    ap.add_argument( '-f', '--format',
                     default=None,
                     help="Format name or strftime pattern (default: %s)" % ( defaults.format_default ))
    ap.add_argument( '-z', '--timezone',
                     default=None,
                     help="Timezone, eg. Asia/Shanghai, UTC, +09:00, JST-9 (default: local)" )
    ap.add_argument( '-a', '--abbreviations', action='append',
                     default=[],
                     help="Support timezone abbreviations for a region, eg. JP, CA, Europe (may be repeated)" )
    ap.add_argument( '-c', '--config',
                     default=None,
                     help="Configuration file (default: search for %s)" % ( defaults.config_name ))
    ap.add_argument( '--list', action='store_true',
                     help="Render the time in every named format" )
    ap.add_argument( '-v', '--verbose', action="count",
                     default=0,
                     help="Display logging information." )
    ap.add_argument( '-l', '--log',
                     help="Log file, if desired" )
    ap.add_argument( 'time', nargs="?",
                     default=None,
                     help="UNIX timestamp or textual time (default: now)" )

    args			= ap.parse_args( argv )

    # Set up logging level (-v...) and --log <file>
    levelmap 			= {
        0: logging.WARNING,
        1: logging.NORMAL,
        2: logging.DETAIL,
        3: logging.INFO,
        4: logging.DEBUG,
        }
    cfg				= dict( log_cfg )
    cfg['level']		= ( levelmap[args.verbose]
                                    if args.verbose in levelmap
                                    else logging.DEBUG )
    if args.log:
        cfg['filename']		= args.log
    logging.basicConfig( **cfg )

    try:
        config			= defaults.config_load( args.config )
        fmt			= args.format or config.get( 'format' ) or defaults.format_default
        zone			= ( args.timezone if args.timezone is not None else config.get( 'timezone' )) or None
        regions			= args.abbreviations or ( config.get( 'abbreviations' ) or '' ).split()
        for region in regions:
            added		= support_abbreviations( region )
            log.normal( "Region %s: added timezone abbreviations %s", region, ", ".join( sorted( added )))

        value			= normalize( time_argument( args.time ), zone )
        if args.list:
            for name in formats.names():
                print( "%-10s %s" % ( name, render( name, value, timezone=zone )))
        else:
            print( render( fmt, value, timezone=zone ))
    except Exception as exc:
        log.warning( "Failed: %s", exc )
        return 1
    return 0


if __name__ == "__main__":
    sys.exit( main() )
