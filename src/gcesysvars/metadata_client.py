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
"""Reads values from the GCE metadata server.

The metadata server is only reachable from inside a GCE instance (or a GKE
node). All requests carry the "Metadata-Flavor: Google" header, without which
the server refuses to answer.
"""

import os

import requests

_METADATA_HOST_ENV_VARIABLE = 'GCE_METADATA_HOST'
_DEFAULT_METADATA_HOST = 'metadata.google.internal'
_METADATA_HEADER = {'Metadata-Flavor': 'Google'}

# Timeout for a single metadata request. The metadata server is local to the
# instance, so anything slower than this means it is not there.
_DEFAULT_TIMEOUT_SEC = 5


class Error(Exception):
  """Generic error class that other errors in this module inherit from."""
  pass


class MetadataError(Error):
  """Thrown when the metadata server cannot be queried for a path."""

  def __init__(self, path, message):
    super(MetadataError, self).__init__(
        'metadata request for %s failed: %s' % (path, message))
    self.path = path


class NotDefinedError(MetadataError):
  """Thrown when the metadata server has no value for the requested path."""

  def __init__(self, path):
    super(NotDefinedError, self).__init__(path, 'not defined')


class MetadataClient(object):
  """Client for the instance-local metadata server.

  Attributes:
    host: metadata server host (and optional port).
    timeout_sec: timeout of a single HTTP request.
  """

  def __init__(self, host=None, timeout_sec=_DEFAULT_TIMEOUT_SEC):
    self.host = (host or os.environ.get(_METADATA_HOST_ENV_VARIABLE) or
                 _DEFAULT_METADATA_HOST)
    self.timeout_sec = timeout_sec

  def OnGCE(self):
    """Returns True if the current host is a GCE instance."""
    # An explicitly configured metadata host is a statement that we are on
    # GCE (or a test emulating it).
    if os.environ.get(_METADATA_HOST_ENV_VARIABLE):
      return True

    try:
      response = requests.get(
          'http://%s' % self.host,
          headers=_METADATA_HEADER,
          timeout=self.timeout_sec)
    except requests.exceptions.RequestException:
      return False

    return response.headers.get('Metadata-Flavor') == 'Google'

  def Get(self, path):
    """Reads a single metadata value.

    Args:
      path: metadata path relative to computeMetadata/v1, for example
          "instance/network-interfaces/0/ip".

    Returns:
      Raw response body.

    Raises:
      NotDefinedError: if the metadata server returned 404 for the path.
      MetadataError: on any other HTTP or transport failure.
    """
    url = 'http://%s/computeMetadata/v1/%s' % (self.host, path)
    try:
      response = requests.get(
          url, headers=_METADATA_HEADER, timeout=self.timeout_sec)
    except requests.exceptions.RequestException as e:
      raise MetadataError(path, '%s' % e)

    if response.status_code == 404:
      raise NotDefinedError(path)
    if response.status_code != 200:
      raise MetadataError(path, 'status code %d' % response.status_code)

    return response.text

  def _GetTrimmed(self, path):
    return self.Get(path).strip()

  def ProjectID(self):
    return self._GetTrimmed('project/project-id')

  def NumericProjectID(self):
    return self._GetTrimmed('project/numeric-project-id')

  def InstanceID(self):
    return self._GetTrimmed('instance/id')

  def InstanceName(self):
    return self._GetTrimmed('instance/name')

  def Zone(self):
    # Example of response text: projects/123456789/zones/us-central1-a. So we
    # strip everything before the last /.
    return self._GetTrimmed('instance/zone').split('/')[-1]

  def InternalIP(self):
    return self._GetTrimmed('instance/network-interfaces/0/ip')

  def ExternalIP(self):
    return self._GetTrimmed(
        'instance/network-interfaces/0/access-configs/0/external-ip')

  def InstanceAttributeValue(self, attr):
    """Returns the value of a custom instance metadata attribute."""
    return self.Get('instance/attributes/%s' % attr)
