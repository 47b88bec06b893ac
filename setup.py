from setuptools import setup

import os

HERE				= os.path.dirname( os.path.abspath( __file__ ))

__version__			= None
__version_info__		= None
exec( open( os.path.join( HERE, 'version.py' ), 'r' ).read() )

console_scripts			= [
    'datefmt		= datefmt.main:main',
]

entry_points			= {
    'console_scripts': 		console_scripts,
}

def requirements( name ):
    """Remove whitespace, elide blank lines and comments"""
    return list(
        ''.join( r.split() )
        for r in open( os.path.join( HERE, name )).readlines()
        if r.strip() and not r.strip().startswith( '#' )
    )

install_requires		= requirements( "requirements.txt" )
tests_require			= requirements( "requirements-tests.txt" )

# Since setuptools is retiring tests_require, add it as an option
extras_require			= {
    'tests':			tests_require,
}

package_dir			= {
    "datefmt":			".",
    "datefmt.times":		"./times",
}

long_description		= """\
Datefmt renders times in named, standards-derived formats (ATOM, Cookie, RFC
822/850/1036/1123/2822/3339, RSS, W3C) or in any strftime pattern, optionally
converting to a target timezone.

Times may be the current moment, a UNIX timestamp, or text parsed in a source
timezone.  Timezones may be IANA zone names, fixed UTC offsets, DST-specific
abbreviations (eg. MST/MDT) or POSIX TZ rules (eg. JST-9); the latter are
interpreted by the host C library, by temporarily (and thread-safely) changing
the process's ambient TZ.
"""

classifiers			= [
    "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
    "License :: Other/Proprietary License",
    "Programming Language :: Python :: 3",
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Text Processing :: Filters"
]

setup(
    name			= "datefmt",
    version			= __version__,
    install_requires		= install_requires,
    extras_require		= extras_require,
    packages			= list( package_dir.keys() ),
    package_dir			= package_dir,
    zip_safe			= False,
    entry_points		= entry_points,
    author			= "Perry Kundert",
    author_email		= "perry@hardconsulting.com",
    description			= "Datefmt renders date/times in named standard formats, with timezone conversion",
    long_description		= long_description,
    license			= "Dual License; GPLv3 and Proprietary",
    keywords			= "date time format timezone RFC 2822 RFC 3339 ATOM RSS W3C",
    classifiers			= classifiers,
)
