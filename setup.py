#!/usr/bin/env python
from setuptools import setup
setup(
    name='parseobjects',
    version='1.0.0',
    description='a client library for Parse-style REST backends',
    author='parseobjects contributors',

    packages=['parseobjects'],
    python_requires='>=3.7',
    install_requires=['simplejson>=3.3.0', 'httplib2>=0.10.3'],
    extras_require={
        'test': ['mock', 'pytest'],
    },
)
