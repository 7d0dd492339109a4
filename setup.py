#!/usr/bin/env python

"""Set up the Neo4j HTTP Python Driver package.

(C) Copyright 2013-2025 Dassault Systemes SE.  All Rights Reserved.

This software is licensed under a BSD 3-Clause License.
See the LICENSE file provided with this software.

This package can be installed using pip as follows:

    pip install pyneo4jhttp

To install with the test requirements:

    pip install 'pyneo4jhttp[test]'
"""

import os
import re

from setuptools import setup

with open(os.path.join(os.path.dirname(__file__), 'pyneo4jhttp', '__init__.py')) as v:
    m = re.search(r"^ *__version__ *= *'(.*?)'", v.read(), re.M)
    if m is None:
        raise RuntimeError("Cannot detect version in pyneo4jhttp/__init__.py")
    VERSION = m.group(1)

readme = os.path.join(os.path.dirname(__file__), 'README.rst')

setup(
    name='pyneo4jhttp',
    version=VERSION,
    description='PEP 249 driver for the Neo4j transactional HTTP endpoint',
    keywords='neo4j cypher graph database dbapi',
    packages=['pyneo4jhttp'],
    license='BSD License',
    long_description=open(readme).read(),
    python_requires='>=3.8',
    install_requires=['httpx>=0.23', 'tzlocal>=4.0'],
    extras_require=dict(test=['pytest']),
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Database :: Front-Ends',
    ],
)
