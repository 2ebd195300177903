# Licensed to the Apache Software Foundation (ASF) under one or more
# contributor license agreements.  See the NOTICE file distributed with
# this work for additional information regarding copyright ownership.
# The ASF licenses this file to You under the Apache License, Version 2.0
# (the "License"); you may not use this file except in compliance with
# the License.  You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
import re
import fnmatch

from setuptools import setup

# NOTE: setup.py must not import gcezone, which depends on requests and
# certifi.

# Names that are excluded from globbing results:
EXCLUDE_NAMES = ['{arch}', 'CVS', '.cvsignore', '_darcs',
                 'RCS', 'SCCS', '.svn', '__pycache__']
EXCLUDE_PATTERNS = ['*.py[cdo]', '*.s[ol]', '.#*', '*~', '*.py']


def get_packages(dname, pkgname=None, results=None, ignore=None):
    """
    Get all packages which are under dname.
    """
    bname = os.path.basename(dname)
    ignore = ignore or []
    if bname in ignore:
        return []
    if results is None:
        results = []
    if pkgname is None:
        pkgname = []
    subfiles = os.listdir(dname)
    abssubfiles = [os.path.join(dname, x) for x in subfiles]

    if '__init__.py' in subfiles:
        results.append(pkgname + [bname])
        for subdir in filter(os.path.isdir, abssubfiles):
            get_packages(subdir, pkgname=pkgname + [bname],
                         results=results, ignore=ignore)
    res = ['.'.join(result) for result in results]
    return res


def get_data_files(dname, parent):
    """
    Get the non Python files below ``dname``, relative to the ``parent``
    package directory. These are the JSON fixtures of the test suite.
    """
    result = []
    for directory, subdirectories, filenames in os.walk(dname):
        for exname in EXCLUDE_NAMES:
            if exname in subdirectories:
                subdirectories.remove(exname)
        for filename in filenames:
            if any(fnmatch.fnmatch(filename, p) for p in EXCLUDE_PATTERNS):
                continue
            file_path = os.path.join(directory, filename)
            result.append(file_path.replace(parent + os.sep, ''))
    return result


INSTALL_REQUIREMENTS = [
    'requests>=2.5.0',
    'certifi',
]

TEST_REQUIREMENTS = [
    'mock',
    'requests_mock',
    'pytest',
] + INSTALL_REQUIREMENTS


def read_version_string():
    version = None
    cwd = os.path.dirname(os.path.abspath(__file__))
    version_file = os.path.join(cwd, 'gcezone/__init__.py')

    with open(version_file) as fp:
        content = fp.read()

    match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]",
                      content, re.M)

    if match:
        version = match.group(1)
        return version

    raise Exception('Cannot find version in gcezone/__init__.py')


setup(
    name='gcezone',
    version=read_version_string(),
    description='Zone scoped helpers for Google Compute Engine disks,' +
                ' instances and operations.',
    long_description=open('README.rst').read(),
    install_requires=INSTALL_REQUIREMENTS,
    python_requires=">=3.6, <4",
    packages=get_packages('gcezone'),
    package_dir={
        'gcezone': 'gcezone',
    },
    package_data={
        'gcezone': get_data_files('gcezone', parent='gcezone'),
    },
    license='Apache License (2.0)',
    tests_require=TEST_REQUIREMENTS,
    extras_require={
        'test': TEST_REQUIREMENTS,
    },
    zip_safe=False,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
    ]
)
