# -*- coding: utf-8 -*-
import os
import sys

from setuptools import setup, find_packages

def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()

if sys.version_info[:2] < (3, 6):
    print('stompcore requires Python version 3.6 or later (%s detected).' % '.'.join(map(str, sys.version_info[:2])))
    sys.exit(-1)

tests_require = ['mock', 'twisted']

setup(
    name = 'stompcore',
    version = '1.0a1',
    description = 'STOMP 1.0, 1.1 and 1.2 client protocol engine: frame codec, incremental parser, broker dialects, heart-beats, and session state machine.',
    license = 'Apache License 2.0',
    packages = find_packages(exclude=['stompcore.tests']),
    long_description = read('README.txt'),
    keywords = 'stomp activemq rabbitmq apollo openmq',
    include_package_data = True,
    zip_safe = True,
    python_requires = '>=3.6',
    install_requires = [
        'simplejson'
    ],
    tests_require = tests_require,
    extras_require = {
        'test': tests_require
    },
    test_suite = 'stompcore.tests',
    classifiers = [
        'Development Status :: 3 - Alpha',
        'Topic :: System :: Networking',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
        'Intended Audience :: Developers',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries :: Python Modules'
    ],
)
