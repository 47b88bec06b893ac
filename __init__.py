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

from .version		import __version__, __version_info__
from .misc		import log_cfg, mutexmethod, timer, type_str_base
from .formats		import FormatSpec, FORMATS, UnknownFormatError, lookup, names
from .render		import NamedFormat, LiteralPattern, InvalidSelectorError, selector, normalize, render
from .times		import (
    timestamp, now, format_time, parse_time, get_ambient_timezone, set_ambient_timezone,
    timezone_scope, format_in_timezone, parse_in_timezone,
    support_abbreviations, timezone_info, AmbiguousTimeZoneError )
