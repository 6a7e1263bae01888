#!/usr/bin/env python
"""
credhub-api - Python client for the CredHub credential management API.

Stores, retrieves, generates, regenerates and deletes typed, versioned
credentials through an injected authenticated HTTP transport.
"""

import os
from setuptools import setup, find_packages

# Read the README for long description
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Version
VERSION = '0.1.0'

setup(
    name='credhub-api',
    version=VERSION,
    description='Client library for the CredHub credential management API',
    long_description=long_description,
    long_description_content_type='text/markdown',

    license='MIT',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Security',
        'Topic :: System :: Systems Administration',
    ],

    keywords='credhub credentials secrets uaa oauth2 cloudfoundry',

    packages=find_packages(exclude=['tests', 'tests.*']),

    python_requires='>=3.10',

    install_requires=[
        'PyYAML>=6.0',
        'requests>=2.30.0',
    ],

    extras_require={
        'dev': [
            'pytest>=7.0',
        ],
    },
)
