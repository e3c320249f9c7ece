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
"""Reads an optional YAML configuration file for the collector.

Example Usage:
  try:
    config = config_reader.OpenAndRead()
  except config_reader.Error as e:
    ...

  collector = gce_vars.GceVarsCollector(
      metadata_client.MetadataClient(timeout_sec=config.metadata_timeout_sec),
      logger,
      max_nics=config.max_nics)

Example file:
  max_nics: 4
  metadata_timeout_sec: 2
  compute_timeout_sec: 10
"""

import os
import sys
import yaml

# Number of NICs allowed on a VM.
MAX_NICS = 8

_DEFAULTS = {
    'max_nics': MAX_NICS,
    'metadata_timeout_sec': 5,
    'compute_timeout_sec': 30,
}


class Error(Exception):
  """Generic error class that other errors in this module inherit from."""
  pass


class YAMLLoadError(Error):
  """Thrown when reading an opened file fails."""
  pass


class ParseError(Error):
  """Thrown when there is a problem with the YAML structure."""
  pass


class UnknownConfigKeyError(Error):
  """Thrown when the YAML contains an unsupported keyword."""
  pass


class InvalidValueError(Error):
  """Thrown when a YAML key has a value of the wrong type or range."""
  pass


class Config(object):
  """Configuration object that Read() returns to the caller."""

  def __init__(self, max_nics=MAX_NICS, metadata_timeout_sec=5,
               compute_timeout_sec=30):
    self.max_nics = max_nics
    self.metadata_timeout_sec = metadata_timeout_sec
    self.compute_timeout_sec = compute_timeout_sec


def OpenAndRead(relative_path='gcesysvars.yaml'):
  """Attempts to find the yaml configuration file, then read it.

  Args:
    relative_path: Optional relative path override.

  Returns:
    A Config object if the open and read were successful, None if the file
    does not exist (which is not considered an error).

  Raises:
    Error (some subclass): As thrown by the called Read() function.
  """
  try:
    with open(os.path.join(sys.path[0], relative_path), 'r') as f:
      return Read(f)
  except IOError:
    return None


def Read(f):
  """Reads and returns Config data from a yaml file.

  Args:
    f: Yaml file to parse.

  Returns:
    Config object as defined in this file.

  Raises:
    Error (some subclass): If there is a problem loading or parsing the file.
  """
  try:
    yaml_data = yaml.safe_load(f)
  except yaml.YAMLError as e:
    raise ParseError('%s' % e)
  except IOError as e:
    raise YAMLLoadError('%s' % e)

  # An empty file means all defaults.
  if yaml_data is None:
    return Config()

  if not isinstance(yaml_data, dict):
    raise ParseError('Configuration must be a mapping')

  _CheckData(yaml_data)

  values = dict(_DEFAULTS)
  values.update(yaml_data)
  return Config(**values)


def _CheckData(yaml_data):
  """Checks data for illegal keys and values."""
  unknown_keys = set(yaml_data) - set(_DEFAULTS)
  if unknown_keys:
    raise UnknownConfigKeyError(
        'Unknown keys in configuration: %s' % unknown_keys)

  max_nics = yaml_data.get('max_nics', MAX_NICS)
  # bool is an int subclass, but "max_nics: yes" is a mistake.
  if (not isinstance(max_nics, int) or isinstance(max_nics, bool) or
      not 1 <= max_nics <= MAX_NICS):
    raise InvalidValueError(
        'max_nics must be an integer between 1 and %d' % MAX_NICS)

  for key in ('metadata_timeout_sec', 'compute_timeout_sec'):
    value = yaml_data.get(key, _DEFAULTS[key])
    if (not isinstance(value, (int, float)) or isinstance(value, bool) or
        value <= 0):
      raise InvalidValueError('%s must be a positive number' % key)
