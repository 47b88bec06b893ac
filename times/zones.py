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
times.zones -- Resolve timezone names into tzinfo objects

A timezone may be named by:

    'Asia/Shanghai'	-- any pytz (IANA) zone name, including 'UTC'
    'JST', 'MDT'	-- an unambiguous (eg. DST-specific) abbreviation; see support_abbreviations
    '+09:00', 'Z'	-- a fixed UTC offset (also '+0900', '+09', '-05:30')

Anything else that looks like a POSIX TZ rule (eg. 'JST-9', 'EST5', '<+0330>-3:30') can only be
interpreted by the host C library, via the ambient TZ environment variable; see is_posix_rule.

"""

__all__				= [ 'get_localzone', 'local_zone', 'zone_names', 'parse_offset', 'format_offset',
                                    'is_posix_rule', 'AmbiguousTimeZoneError', 'zones',
                                    'abbreviation_zones', 'support_abbreviations', 'timezone_info' ]

import bisect
import datetime
import logging
import os
import re
import threading

# Installed packages (eg. pip/setup.py install pytz tzlocal)
import pytz
import tzlocal

from ..misc		import mutexmethod, type_str_base

log				= logging.getLogger( __package__ )


def TZ_wrapper():
    """Wrap get_localzone in a handler that respects a TZ variable before attempting other host-specific
    local timezone detection.  A TZ naming a zone pytz cannot resolve (eg. a POSIX rule 'JST-9')
    yields None: only the host C library knows what it means.

    """
    def decorate( func ):
        def call( *args, **kwds ):
            # TZ environment variable?  Either a tzinfo file or a timezone name.
            tzenv		= os.environ.get( 'TZ' )
            if tzenv:
                if tzenv.startswith( ':' ):
                    tzenv	= tzenv[1:]
                if os.path.isabs( tzenv ) and os.path.exists( tzenv ):
                    with open( tzenv, 'rb' ) as tzfile:
                        return pytz.tzfile.build_tzinfo( 'local', tzfile )
                try:
                    return pytz.timezone( tzenv )
                except pytz.UnknownTimeZoneError:
                    log.detail( "TZ=%r unknown to pytz; deferring to host local time", tzenv )
                    return None
            return func( *args, **kwds )
        return call
    return decorate

get_localzone			= TZ_wrapper()( tzlocal.get_localzone )


def local_zone():
    """The ambient local timezone (re-evaluated on each call, as TZ may change), or None if it is only
    known to the host C library.

    """
    return get_localzone()


def zone_names( region ):
    """Yields all zone names matching region, which may be a single identifier string or iterable.  If
    unrecognized, the supplied region is yielded unmodified.  The pytz {country,common}_timezones
    are consulted; the provided <region> strings may be country codes, or may match the leading
    <region> portion of <region>/<city> timezone names.

    """
    if isinstance( region, type_str_base ):
        region		= [ region ]
    elif region is None:
        region		= []
    for r in region:						# eg. [ 'JP', 'Canada', 'Europe/Berlin' ]
        zones		= pytz.country_timezones.get( r )	# eg 'JP'
        if zones is None:
            zones	= [ z for z in pytz.common_timezones	# eg. 'Canada/Mountain' or 'Europe'
                            if z.startswith( r ) ]
        if zones:
            for z in zones:
                yield z
        else:
            yield r		# Some random unrecognized zone name


_offset_re			= re.compile( r'^([+-])(\d{2})(?::?(\d{2}))?(?::?(\d{2}))?$' )

def parse_offset( term ):
    """Convert a fixed UTC offset like 'Z', '+09:00', '+0900', '+09' or '-05:30:15' into -'ve/+'ve
    seconds east of UTC.  Raises ValueError if term isn't an offset.

    """
    if term in ( 'Z', 'z' ):
        return 0
    m				= _offset_re.match( term )
    if not m:
        raise ValueError( "Invalid offset %r; must be Z or +/-hh[[:]mm[[:]ss]]" % ( term, ))
    sign,hh,mm,ss		= m.groups()
    hh,mm,ss			= int( hh ), int( mm or 0 ), int( ss or 0 )
    if hh > 23 or mm > 59 or ss > 59:
        raise ValueError( "Invalid offset %r; out of range" % ( term, ))
    offset			= ( hh * 60 + mm ) * 60 + ss
    return -offset if sign == '-' else offset

def format_offset( dt, ms=True, symbols='<>' ):
    """Convert a floating point number of -'ve/+'ve seconds into '</> h:mm:ss.sss'"""
    return (( symbols[0] if dt < 0 else symbols[1] ) + "%2d:%02d:" + ( "%06.3f" if ms else "%02d" )) % (
        int( abs( dt ) // 3600 ),
        int( abs( dt ) % 3600 // 60 ),
        abs( dt ) % 60 )


# A POSIX TZ rule: std offset [dst [offset] [,rule]]; names are 3+ letters, or <...> quoted
_posix_name			= r'(?:[A-Za-z]{3,}|<[+-]?[A-Za-z0-9]+>)'
_posix_offset			= r'[+-]?\d{1,2}(?::\d{2}){0,2}'
_posix_re			= re.compile( r'^:?%s%s(?:%s(?:%s)?(?:,[-A-Za-z0-9.,:/]+)?)?$' % (
    _posix_name, _posix_offset, _posix_name, _posix_offset ))

def is_posix_rule( name ):
    return isinstance( name, type_str_base ) and bool( _posix_re.match( name ))


class AmbiguousTimeZoneError( pytz.UnknownTimeZoneError ):
    pass


def _transitions( tzinfo ):
    """The naive UTC transition times of a pytz zone; static zones (eg. 'Etc/GMT+5') have none."""
    return getattr( tzinfo, '_utc_transition_times', [] )

def _probe( tzinfo, dt ):
    """Localize the naive UTC datetime dt into tzinfo, returning (abbrev,is_dst,utcoffset)."""
    loc				= tzinfo.normalize( pytz.utc.localize( dt ).astimezone( tzinfo ))
    return loc.strftime( "%Z" ), bool( loc.dst() ), loc.utcoffset()

def _describe( abb, off, dst ):
    return "%-5s %s %s" % (
        abb, format_offset( off.total_seconds(), ms=False ),
        "dst" if dst else "n/a" if dst is None else "   " )


# A bare timezone abbreviation, eg. 'JST', 'MDT'
_abbreviation_re		= re.compile( r'^[A-Z]{2,5}$' )

def abbreviation_zones( abb, at=None, reach=None ):
    """The pytz common_timezones using the abbreviation abb at, or 'reach' (default: 1/2 year) either
    side of, 'at' (default: now).

    """
    if reach is None:
        reach			= datetime.timedelta( 365/2 )
    if at is None:
        at			= datetime.datetime.now( pytz.utc ).replace( tzinfo=None )
    return [ tz for tz in pytz.common_timezones
             if any( _probe( pytz.timezone( tz ), t )[0] == abb for t in ( at - reach, at, at + reach )) ]


class zones( object ):
    """The table of supported timezone abbreviations, mapping each to its canonical (tzinfo, is_dst,
    utcoffset).  Filled by support_abbreviations for some region(s), or for the zones using an
    abbreviation when it is first resolved by timezone_info.

    """
    _tzabbrev			= {}
    _cls_lock			= threading.RLock()

    @classmethod
    @mutexmethod( '_cls_lock' )
    def support_abbreviations( cls, region, exclude=None, at=None, reach=None, reset=False ):
        """Add all the DST and non-DST abbreviations for the specified region.  If a country code
        (eg. 'JP') is specified, we'll get all its timezones from pytz.country_timezones.
        Otherwise, we'll get all the matching '<region>[/<city>]' zone(s) from pytz's
        common_timezones.  Multiple invocations may be made, to include abbreviations covering
        multiple regions.

        We look for the first time transition within 'at' +/- 'reach' (default: now +/- 1/2 year),
        and probe the zone one day either side of it.  If the abbreviations differ, they are
        registered as DST-specific (eg. 'MST'/'MDT'); if not, the single abbreviation is registered
        with an ambiguous (None) is_dst.  A zone with no transitions in the period yields a single
        non-DST abbreviation (eg. 'JST').

        If multiple zones produce the same abbreviation they must agree on UTC offset, and (for DST
        abbreviations) on every transition in the period, or AmbiguousTimeZoneError is raised and
        the table is left unchanged; eg. 'IST' (Irish Summer Time, 'Europe/Dublin') vs. 'IST'
        (Israel Standard Time, 'Asia/Jerusalem').

        Returns the list of abbreviations newly added.

        """
        if reset and cls._tzabbrev:
            log.detail( "Resetting %d timezone abbreviations: %r", len( cls._tzabbrev ), list( cls._tzabbrev ))
            cls._tzabbrev	= {}
        if reach is None:
            reach		= datetime.timedelta( 365/2 )
        if at is None:
            at			= datetime.datetime.now( pytz.utc ).replace( tzinfo=None )
        oneday			= datetime.timedelta( 1 )

        # Work on a copy; only commit the updated abbreviations if all zones integrate successfully
        abbrev			= cls._tzabbrev.copy()
        incompatible		= []
        exclusions		= set( zone_names( exclude ))
        for tz in zone_names( region ):
            if tz in exclusions:
                log.detail( "%-30s: Ignoring; excluded", tz )
                continue
            tzinfo		= pytz.timezone( tz )
            times		= _transitions( tzinfo )
            nxt			= bisect.bisect( times, at - reach )
            lst			= bisect.bisect( times, at + reach )
            if nxt == len( times ) or nxt == lst:
                abb,dst,off	= _probe( tzinfo, at )
                log.detail( "%-30s: %s: no time change in %s to %s", tzinfo, _describe( abb, off, dst ),
                            at - reach, at + reach )
                details		= [ (abb,dst,off) ]
            else:
                ins		= _probe( tzinfo, times[nxt] - oneday )
                out		= _probe( tzinfo, times[nxt] + oneday )
                if ins[0] == out[0]:
                    # Same name for DST/non-DST (eg. 'Australia/Adelaide'); times in the overlap stay ambiguous
                    log.detail( "%-30s: %s: same abbreviation; ambiguous during DST overlap",
                                tzinfo, _describe( ins[0], ins[2], None ))
                    details	= [ (ins[0],None,ins[2]) ]
                else:
                    details	= [ ins, out ]

            for abb,dst,off in details:
                # Only "XYZ" style abbreviations are usable; not "-03" and the like
                if not abb or not all( l.isalpha() for l in abb ):
                    log.detail( "%-30s: Ignoring %s; invalid abbreviation pattern", tzinfo, abb )
                    continue
                if abb in exclusions:
                    log.detail( "%-30s: Ignoring %s; excluded", tzinfo, abb )
                    continue
                msg		= _describe( abb, off, dst )
                dup		= abb in abbrev
                if dup and not dst:
                    abbtzi,abbdst,abboff = abbrev[abb]
                    if abboff != off:
                        msg    += " x %s in %s; incompatible" % ( _describe( abb, abboff, abbdst ), abbtzi )
                        incompatible.append( "%s: %s" % ( tzinfo, msg ))
                        log.warning( "%-30s: %s", tzinfo, msg )
                        continue
                    if abbdst is None:
                        # Replace an ambiguous zone with a concrete non-DST zone
                        dup	= False
                if dup and dst:
                    msg		= cls._transitions_differ( abb, abbrev[abb][0], tzinfo, at, reach )
                    if msg:
                        incompatible.append( "%s: %s" % ( tzinfo, msg ))
                        log.warning( "%-30s: %s", tzinfo, msg )
                        continue
                ( log.detail if dup else log.normal )( "%-30s: %s%s", tzinfo, msg,
                                                       "; Ignoring duplicate" if dup else "" )
                if not dup:
                    abbrev[abb]	= tzinfo,dst,off
        if incompatible:
            raise AmbiguousTimeZoneError( "%s region(s) incompatible: %s" % ( region, ", ".join( incompatible )))
        added			= list( set( abbrev ) - set( cls._tzabbrev ))
        cls._tzabbrev		= abbrev
        return added

    @staticmethod
    def _transitions_differ( abb, one, two, at, reach ):
        """Describe why zones one and two cannot share DST-specific abbreviation abb in at +/- reach, or
        return None if their transitions are identical.

        """
        spans			= []
        for tzinfo in ( one, two ):
            times		= _transitions( tzinfo )
            nxt			= bisect.bisect( times, at - reach )
            lst			= bisect.bisect( times, at + reach )
            spans.append( [ (dt,off,dst) for dt,(off,dst,_) in zip(
                times[nxt:lst], tzinfo._transition_info[nxt:lst] ) ] )
        if len( spans[0] ) != len( spans[1] ):
            return "%s has %d time changes vs. %d in %s" % ( abb, len( spans[1] ), len( spans[0] ), one )
        if spans[0] != spans[1]:
            return "%s time changes differ vs. %s" % ( abb, one )
        return None

    @classmethod
    def _abbreviation_info( cls, abb ):
        """Support the abbreviation abb from whatever zones presently use it, returning its
        (tzinfo,is_dst).  Zones disagreeing on its meaning (eg. 'IST', 'CST') raise
        AmbiguousTimeZoneError.  Invoked with _cls_lock held.

        """
        found			= abbreviation_zones( abb )
        if found:
            log.normal( "Timezone abbreviation %s: supporting from %s", abb, ", ".join( found ))
            cls.support_abbreviations( found )
        if abb not in cls._tzabbrev:
            raise pytz.UnknownTimeZoneError( abb )
        tzinfo,is_dst,_		= cls._tzabbrev[abb]
        return tzinfo,is_dst

    @classmethod
    @mutexmethod( '_cls_lock' )
    def timezone_info( cls, tzinfo ):
        """Return the (tzinfo,is_dst) of the supplied tz (default is_dst: None).  Accepts either a
        tzinfo, or a string naming a supported abbreviation (is_dst: True/False), a fixed UTC
        offset, or a pytz zone.  An abbreviation not yet supported (eg. 'JST') is supported from the
        zones presently using it.  Raises pytz.UnknownTimeZoneError for anything else.

        """
        is_dst			= None
        if isinstance( tzinfo, type_str_base ):
            if tzinfo in cls._tzabbrev:
                tzinfo,is_dst,_	= cls._tzabbrev[tzinfo]
            elif tzinfo[:1] in ( '+', '-' ) or tzinfo in ( 'Z', 'z' ):
                try:
                    offset	= parse_offset( tzinfo )
                except ValueError as exc:
                    raise pytz.UnknownTimeZoneError( str( exc ))
                tzinfo		= pytz.utc if offset == 0 else datetime.timezone(
                    datetime.timedelta( seconds=offset ))
            else:
                try:
                    tzinfo	= pytz.timezone( tzinfo )
                except pytz.UnknownTimeZoneError:
                    if not _abbreviation_re.match( tzinfo ):
                        raise
                    tzinfo,is_dst = cls._abbreviation_info( tzinfo )
        if not isinstance( tzinfo, datetime.tzinfo ):
            raise pytz.UnknownTimeZoneError( "Expected tzinfo or zone name, not %s" % type( tzinfo ))
        return tzinfo,is_dst


support_abbreviations		= zones.support_abbreviations
timezone_info			= zones.timezone_info
