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
defaults -- System-wide default (global) values, and configuration file loading

A configuration file (eg. ~/.datefmt.cfg) may supply defaults for the datefmt command:

    [datefmt]
    format		= rss		# any registered format name, or a strftime pattern
    timezone		= Asia/Tokyo	# empty: the ambient local timezone
    abbreviations	= JP CA		# regions whose timezone abbreviations (eg. JST, MDT) are supported

"""
__all__				= [ 'format_default', 'config_name', 'config_paths', 'config_files',
                                    'config_section', 'ConfigNotFoundError', 'config_load' ]

import configparser
import logging
import os

log				= logging.getLogger( __package__ )

format_default			= 'rfc-3339'	# The datefmt command's default format

# Define the default paths used for configuration files, etc.
config_name			= 'datefmt.cfg'	# Default Datefmt application configuration file
config_section			= 'datefmt'

ConfigNotFoundError		= FileNotFoundError


def config_paths( filename, extra=None ):
    """Yield the Datefmt configuration search paths in *reverse* order of precedence (furthest or most
    general, to nearest or most specific).

    This is the order that is required by configparser; settings configured in "later" files
    override those in "earlier" ones.

    """
    yield os.path.join( os.path.dirname( __file__ ), filename )			# datefmt installation dir
    yield os.path.join( os.getenv( 'APPDATA', os.sep + 'etc' ), filename )	# global app data dir, eg. /etc/
    yield os.path.join( os.path.expanduser( '~' ), '.datefmt', filename )	# user dir, ~username/.datefmt/name
    yield os.path.join( os.path.expanduser( '~' ), '.' + filename )		# user dir, ~username/.name
    for e in extra or []:							# any extra dirs...
        yield os.path.join( e, filename )
    yield filename								# current dir (most specific)

# Default Datefmt configuration files path, In 'configparser' expected order (most general to most specific)
config_files			= list( config_paths( config_name ))


def config_load( filename=None, extra=None ):
    """Load the [datefmt] configuration section, supplying defaults for any missing settings.  If a
    specific filename is given it must exist (or ConfigNotFoundError is raised); otherwise, all the
    standard config_paths are consulted, most general first.

    Comments anywhere via the # symbol (this implies no # allowed in any value).  Allows
    ${<section>:<key>} interpolation.

    """
    config_loader		= configparser.ConfigParser(
        comment_prefixes=('#',), inline_comment_prefixes=('#',),
        allow_no_value=True, empty_lines_in_values=False,
        interpolation=configparser.ExtendedInterpolation() )
    config_loader.read_dict( {
        config_section: {
            'format':		format_default,
            'timezone':		'',
            'abbreviations':	'',
        },
    } )
    if filename:
        if not os.path.exists( filename ):
            raise ConfigNotFoundError( "Configuration file not found: %s" % filename )
        files			= [ filename ]
    else:
        files			= list( config_paths( config_name, extra=extra ))
    loaded			= config_loader.read( files )
    log.detail( "Configuration loaded from: %s", ", ".join( loaded ) or "(defaults)" )
    return config_loader[config_section]
