# Copyright 2015 Google Inc. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS-IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""GCE system variables collector build and packaging script."""

import re
from setuptools import setup

LONG_DESCRIPTION = (
    'Collects variables describing the Google Compute Engine instance the\n'
    'process runs on (project, zone, region, instance name, network\n'
    'interface addresses, instance labels) for substitution into probe\n'
    'configuration.\n')

# Determine the current version of the package without importing it, since
# importing "gcesysvars" requires its dependencies to be installed.
version = None
with open('src/gcesysvars/version.py', 'r') as version_file:
  version_pattern = re.compile(r"^\s*__version__\s*=\s*'([0-9.]*)'")
  for line in version_file:
    match = version_pattern.match(line)
    if match:
      version = match.groups()[0]
assert version

setup(
    name='gce-sysvars',
    description='GCE system variables collector',
    long_description=LONG_DESCRIPTION,
    author='Google Inc.',
    version=version,
    python_requires='>=3.7',
    install_requires=[
        'google-api-python-client',
        'google-auth>=1.0.0',
        'google-auth-httplib2',
        'httplib2',
        'pyyaml',
        'requests',
    ],
    extras_require={
        'test': [
            'absl-py',
            'pytest',
            'requests-mock',
        ],
    },
    package_dir={'': 'src'},
    packages=['gcesysvars'],
    license='Apache License, Version 2.0',
    keywords='google cloud compute engine metadata',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
    ])
