import datetime
import os
import threading
import time

import pytest
import pytz

from .times import (
    timestamp, now, strftime, format_time, parse_time, get_ambient_timezone, set_ambient_timezone,
    parse_offset, format_offset, is_posix_rule, timezone_info, support_abbreviations, local_zone,
    abbreviation_zones, zones, AmbiguousTimeZoneError,
    timezone_scope, format_in_timezone, parse_in_timezone )

# 2015-01-12 02:01:11 in Japan (+09:00)
JAN12				= 1420995671


@pytest.fixture
def ambient( monkeypatch ):
    """Run with a known ambient timezone, restoring the original TZ afterwards."""
    def setter( name ):
        monkeypatch.setenv( 'TZ', name )
        time.tzset()
    yield setter
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def abbreviations():
    yield support_abbreviations
    support_abbreviations( None, reset=True )


def test_timestamp_epoch():
    ts				= timestamp.from_epoch( 0 )
    assert tuple( ts ) == ( 0, 0, 0, 0 )
    assert ts.seconds == 0 and int( ts ) == 0 and float( ts ) == 0.0
    assert str( ts ) == "1970-01-01 00:00:00.000"

    ts				= timestamp.from_epoch( JAN12 )
    assert ts[:2] == ( 21682, 44119 )
    assert ( ts.high << 16 | ts.low ) == JAN12
    assert ts.usec == ts.psec == 0
    assert repr( ts ) == "<2015-01-11 17:01:11.000 =~= 1420995671.000000>"

    # Before the epoch; the low word stays positive
    ts				= timestamp.from_epoch( -1 )
    assert ts[:2] == ( -1, 0xFFFF )
    assert ts.seconds == -1
    assert str( ts ) == "1969-12-31 23:59:59.000"

    # Beyond 32 bits
    ts				= timestamp.from_epoch( 1 << 40 )
    assert ts[:2] == ( 1 << 24, 0 )


def test_timestamp_float_and_datetime():
    ts				= timestamp.from_float( 1.5 )
    assert tuple( ts ) == ( 0, 1, 500000, 0 )
    assert ts.value == pytest.approx( 1.5 )

    # Rounding to the microsecond carries into the seconds
    assert tuple( timestamp.from_float( 0.9999999 )) == ( 0, 1, 0, 0 )
    assert timestamp.from_float( -0.5 ).seconds == -1
    assert timestamp.from_float( -0.5 ).usec == 500000

    with pytest.raises( ValueError ):
        timestamp.from_float( float( 'nan' ))

    dt				= pytz.timezone( 'Asia/Tokyo' ).localize( datetime.datetime( 2015, 1, 12, 2, 1, 11, 250000 ))
    ts				= timestamp.from_datetime( dt )
    assert ts.seconds == JAN12 and ts.usec == 250000
    assert ts.datetime( pytz.utc ) == dt
    assert ts.datetime( pytz.timezone( 'Asia/Tokyo' )).hour == 2


def test_timestamp_compare():
    a,b				= timestamp.from_epoch( 1 ), timestamp.from_float( 1.000001 )
    assert a < b and b > a and a <= b and b >= a and a != b
    assert a == timestamp.from_epoch( 1 ) == timestamp( 0, 1 )
    assert hash( a ) == hash( timestamp( 0, 1 ))
    assert len( { a, b, timestamp( 0, 1 ) } ) == 2
    assert timestamp.from_epoch( -1 ) < timestamp.from_epoch( 0 )
    assert a != 1

    with pytest.raises( AttributeError ):
        a.low			= 2
    with pytest.raises( ValueError ):
        timestamp( 0, 1 << 16 )
    with pytest.raises( ValueError ):
        timestamp( 0, -1 )
    with pytest.raises( ValueError ):
        timestamp( 0, 0, usec=1000000 )
    for bad in ( 1, 1.0, None, "1970-01-01" ):
        with pytest.raises( TypeError ):
            a < bad
        with pytest.raises( TypeError ):
            a >= bad


def test_host_now():
    before			= time.time()
    ts				= now()
    after			= time.time()
    assert before - 1e-6 <= ts.value <= after + 1e-6


def test_host_strftime():
    tz				= datetime.timezone( -datetime.timedelta( hours=5, minutes=30, seconds=15 ))
    dt				= datetime.datetime( 2015, 1, 12, 2, 1, 11, tzinfo=tz )
    assert strftime( dt, "%%:z %:z %::z %z" ) == "%:z -05:30 -05:30:15 -053015"
    assert strftime( dt, "%Y-%m-%d %H:%M:%S%:z" ) == "2015-01-12 02:01:11-05:30"
    assert strftime( dt.astimezone( pytz.utc ), "%:z %Z" ) == "+00:00 UTC"
    assert strftime( dt, "100%%" ) == "100%"


def test_host_format_time( ambient ):
    ts				= timestamp.from_epoch( JAN12 )
    assert format_time( "%Y-%m-%d %H:%M:%S %Z", ts, utc=True ) == "2015-01-11 17:01:11 UTC"
    assert format_time( "%H:%M %Z", ts, tzinfo=pytz.timezone( 'Asia/Tokyo' )) == "02:01 JST"

    # The utc flag overrides any tzinfo, and any ambient timezone
    ambient( 'America/Edmonton' )
    assert format_time( "%H", ts, utc=True, tzinfo=pytz.timezone( 'Asia/Tokyo' )) == "17"
    assert format_time( "%H %Z %:z", ts ) == "10 MST -07:00"

    # A POSIX TZ rule ambient timezone is handled by the host C library
    ambient( 'JST-9' )
    assert local_zone() is None
    assert format_time( "%H %Z %:z", ts ) == "02 JST +09:00"


def test_host_parse_time( ambient ):
    tokyo			= pytz.timezone( 'Asia/Tokyo' )
    assert parse_time( "2015-01-12 02:01:11", tokyo ).seconds == JAN12
    assert parse_time( "2015-01-12T02:01:11", "Asia/Tokyo" ).seconds == JAN12
    assert parse_time( "2015-01-11 17:01:11", pytz.utc ).seconds == JAN12

    # The time's own zone wins over the supplied one
    assert parse_time( "2015-01-12 02:01:11+09:00", pytz.utc ).seconds == JAN12
    assert parse_time( "2015-01-12T02:01:11 +0900", pytz.utc ).seconds == JAN12
    assert parse_time( "2015-01-11 17:01:11Z", tokyo ).seconds == JAN12
    assert parse_time( "2015-01-12 02:01:11 Asia/Tokyo", pytz.utc ).seconds == JAN12

    # Sub-second precision
    ts				= parse_time( "2015-01-11 17:01:11.25 UTC" )
    assert ts.seconds == JAN12 and ts.usec == 250000

    # Other formats, via dateutil
    assert parse_time( "Mon, 12 Jan 2015 02:01:11 +0900" ).seconds == JAN12
    assert parse_time( "January 12, 2015 02:01:11", tokyo ).seconds == JAN12

    # No zone supplied: the ambient local timezone
    ambient( 'Asia/Tokyo' )
    assert parse_time( "2015-01-12 02:01:11" ).seconds == JAN12
    ambient( 'JST-9' )
    assert parse_time( "2015-01-12 02:01:11" ).seconds == JAN12

    # Nonexistent (spring-ahead gap) wall-clock time in a DST zone
    with pytest.raises( ValueError ):
        parse_time( "2014-03-09 02:30:00", "America/Edmonton" )
    with pytest.raises( ValueError ) as exc_info:
        parse_time( "not a time", tokyo )
    assert "not a time" in str( exc_info.value )
    with pytest.raises( ValueError ):
        parse_time( "2015-13-12 02:01:11", tokyo )
    with pytest.raises( pytz.UnknownTimeZoneError ):
        parse_time( "2015-01-12 02:01:11", "Bogus/Zone" )


def test_host_ambient( monkeypatch ):
    monkeypatch.delenv( 'TZ', raising=False )
    try:
        assert get_ambient_timezone() is None
        set_ambient_timezone( 'Asia/Tokyo' )
        assert get_ambient_timezone() == 'Asia/Tokyo'
        assert os.environ['TZ'] == 'Asia/Tokyo'
        assert time.localtime( 0 ).tm_hour == 9
        set_ambient_timezone( None )
        assert get_ambient_timezone() is None
        assert 'TZ' not in os.environ
    finally:
        monkeypatch.undo()
        time.tzset()


def test_zones_offsets():
    assert parse_offset( 'Z' ) == 0
    assert parse_offset( '+09:00' ) == 9 * 3600
    assert parse_offset( '+0900' ) == 9 * 3600
    assert parse_offset( '+09' ) == 9 * 3600
    assert parse_offset( '-05:30' ) == -( 5 * 3600 + 30 * 60 )
    assert parse_offset( '-05:30:15' ) == -( 5 * 3600 + 30 * 60 + 15 )
    for bad in ( '09:00', '+9', '+25:00', '+09:60', 'UTC+8' ):
        with pytest.raises( ValueError ):
            parse_offset( bad )

    assert format_offset( 9 * 3600, ms=False ) == "> 9:00:00"
    assert format_offset( -1.5 ) == "< 0:00:01.500"


def test_zones_posix_rules():
    for name in ( 'JST-9', 'EST5', 'EST5EDT,M3.2.0,M11.1.0', '<+0330>-3:30', 'UTC+8', ':CET-1CEST' ):
        assert is_posix_rule( name ), name
    for name in ( 'Asia/Tokyo', 'UTC', 'JST', 'bogus', '+09:00', None, 9 ):
        assert not is_posix_rule( name ), name


def test_zones_timezone_info():
    tzinfo,is_dst		= timezone_info( 'Asia/Shanghai' )
    assert tzinfo is pytz.timezone( 'Asia/Shanghai' ) and is_dst is None
    assert timezone_info( 'UTC' )[0] is pytz.utc
    assert timezone_info( 'Z' )[0] is pytz.utc
    assert timezone_info( '+00:00' )[0] is pytz.utc
    tzinfo,_			= timezone_info( '+09:00' )
    assert tzinfo.utcoffset( None ) == datetime.timedelta( hours=9 )
    assert timezone_info( pytz.utc ) == ( pytz.utc, None )
    for bad in ( 'Bogus/Zone', 'JST-9', '+9', 9, None ):
        with pytest.raises( pytz.UnknownTimeZoneError ):
            timezone_info( bad )


def test_zones_abbreviations( abbreviations ):
    assert sorted( abbreviations( 'JP', reset=True )) == [ 'JST' ]
    tzinfo,is_dst		= timezone_info( 'JST' )
    assert tzinfo is pytz.timezone( 'Asia/Tokyo' )
    assert is_dst is False
    assert parse_time( "2015-01-12 02:01:11 JST" ).seconds == JAN12
    assert format_in_timezone( "%H %Z", timestamp.from_epoch( JAN12 ), 'JST' ) == "02 JST"

    # DST-specific abbreviations, relative to a known time to avoid future timezone changes
    added			= abbreviations( 'CA', at=datetime.datetime( 2014, 6, 1 ))
    assert 'MST' in added and 'MDT' in added
    assert parse_time( "2014-04-24 08:00:00 MDT" ).seconds == 1398348000
    assert timezone_info( 'MDT' )[1] is True
    assert timezone_info( 'MST' )[1] is False

    assert abbreviations( None, reset=True ) == []

    # An abbreviation is supported on first use, from the zones presently using it
    assert abbreviation_zones( 'JST' ) == [ 'Asia/Tokyo' ]
    tzinfo,is_dst		= timezone_info( 'JST' )
    assert tzinfo is pytz.timezone( 'Asia/Tokyo' )
    assert is_dst is False
    assert format_in_timezone( "%H %Z", timestamp.from_epoch( JAN12 ), 'JST' ) == "02 JST"

    # Unless those zones disagree on its meaning, or no zone uses it
    with pytest.raises( AmbiguousTimeZoneError ):
        timezone_info( 'CST' )
    assert 'CST' not in zones._tzabbrev
    with pytest.raises( pytz.UnknownTimeZoneError ) as exc_info:
        timezone_info( 'XYZ' )
    assert not isinstance( exc_info.value, AmbiguousTimeZoneError )
    with pytest.raises( pytz.UnknownTimeZoneError ):
        timezone_info( 'Jst' )


def test_scope_restores( monkeypatch ):
    monkeypatch.setenv( 'TZ', 'America/Edmonton' )
    time.tzset()
    try:
        with timezone_scope( 'JST-9' ) as scope:
            assert scope.prior == 'America/Edmonton'
            assert os.environ['TZ'] == 'JST-9'
            assert time.localtime( 0 ).tm_hour == 9
            # Nested scopes on the same thread restore to the enclosing scope
            with timezone_scope( 'UTC' ):
                assert time.localtime( 0 ).tm_hour == 0
            assert os.environ['TZ'] == 'JST-9'
        assert os.environ['TZ'] == 'America/Edmonton'

        # Restored even when the operation fails
        with pytest.raises( KeyError ):
            with timezone_scope( 'JST-9' ):
                raise KeyError( "fails" )
        assert os.environ['TZ'] == 'America/Edmonton'
        assert time.localtime( 0 ).tm_hour == 17 # 1969-12-31 17:00 MST

        # An unset TZ is restored to unset
        monkeypatch.delenv( 'TZ' )
        with timezone_scope( 'JST-9' ):
            assert os.environ['TZ'] == 'JST-9'
        assert 'TZ' not in os.environ
        assert not timezone_scope._lock._is_owned()
    finally:
        monkeypatch.undo()
        time.tzset()


def test_scope_format_parse( ambient ):
    ambient( 'America/Edmonton' )
    ts				= timestamp.from_epoch( JAN12 )

    # Resolvable zones are passed explicitly; POSIX rules via the ambient TZ
    assert format_in_timezone( "%Y-%m-%d %H:%M:%S%:z", ts, 'Asia/Tokyo' ) == "2015-01-12 02:01:11+09:00"
    assert format_in_timezone( "%Y-%m-%d %H:%M:%S%:z", ts, '+09:00' ) == "2015-01-12 02:01:11+09:00"
    assert format_in_timezone( "%Y-%m-%d %H:%M:%S%:z %Z", ts, 'JST-9' ) == "2015-01-12 02:01:11+09:00 JST"
    assert format_in_timezone( "%H %Z", ts, 'UTC' ) == "17 UTC"
    assert parse_in_timezone( "2015-01-12 02:01:11", 'Asia/Tokyo' ) == ts
    assert parse_in_timezone( "2015-01-12 02:01:11", 'JST-9' ) == ts
    assert parse_in_timezone( "2015-01-12 02:01:11", '+09:00' ) == ts
    assert os.environ['TZ'] == 'America/Edmonton'

    # Failures leave the ambient timezone untouched
    for name in ( 'Bogus/Zone', 'JST-9', 'Asia/Tokyo' ):
        with pytest.raises( ( AttributeError, pytz.UnknownTimeZoneError )):
            format_in_timezone( "%H", None if name != 'Bogus/Zone' else ts, name )
        assert os.environ['TZ'] == 'America/Edmonton'
        with pytest.raises( ( ValueError, pytz.UnknownTimeZoneError )):
            parse_in_timezone( "garbage" if name != 'Bogus/Zone' else "2015-01-12 02:01:11", name )
        assert os.environ['TZ'] == 'America/Edmonton'
    assert time.localtime( 0 ).tm_hour == 17

    # Idempotent
    assert format_in_timezone( "%c %Z", ts, 'JST-9' ) == format_in_timezone( "%c %Z", ts, 'JST-9' )


def test_scope_threads( ambient ):
    """Concurrent scoped operations never observe each other's ambient timezone, nor do concurrent
    operations in the ambient local timezone."""
    ambient( 'UTC' )
    ts				= timestamp.from_epoch( 0 )
    failures			= []
    expect			= { 'JST-9': "09 JST", 'EST5': "19 EST", 'IST-5:30': "05 IST" }

    def worker( name ):
        for _ in range( 200 ):
            got			= format_in_timezone( "%H %Z", ts, name )
            if got != expect[name]:
                failures.append( ( name, got ))
            with timezone_scope( name ):
                if os.environ.get( 'TZ' ) != name:
                    failures.append( ( name, os.environ.get( 'TZ' )))

    def local():
        for _ in range( 600 ):
            got			= format_time( "%H %Z", ts )
            if got != "00 UTC":
                failures.append( ( 'local', got ))
            if parse_time( "1970-01-01 00:00:00" ) != ts:
                failures.append( ( 'local', 'parse' ))

    threads			= [ threading.Thread( target=worker, args=( n, )) for n in expect ]
    threads.append( threading.Thread( target=local ))
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert not failures
    assert os.environ['TZ'] == 'UTC'
