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
"""Fetches instance labels from the Compute Engine API.

Labels are not exposed by the metadata server, so this module talks to the
management API instead. This needs credentials with read-only access to the
compute API, which the instance's service account may not have.
"""

import socket

import google_auth_httplib2
import googleapiclient
import googleapiclient.discovery
import googleapiclient.errors
import httplib2

import google.auth
import google.auth.exceptions

# API scope we are requesting for application default credentials.
_COMPUTE_READONLY_SCOPE = [
    'https://www.googleapis.com/auth/compute.readonly'
]

_DEFAULT_HTTP_TIMEOUT_SECONDS = 30


class ComputeClientError(Exception):
  """Used to indicate the Compute API client cannot be created."""


def BuildComputeService(timeout_sec=_DEFAULT_HTTP_TIMEOUT_SECONDS):
  """Creates an authorized Compute Engine v1 API client.

  Args:
    timeout_sec: HTTP timeout for API requests.

  Returns:
    Discovery based compute service object.

  Raises:
    ComputeClientError: if credentials or the client cannot be set up.
  """
  try:
    credentials, _ = google.auth.default(scopes=_COMPUTE_READONLY_SCOPE)
    http = httplib2.Http(timeout=timeout_sec)
    http = google_auth_httplib2.AuthorizedHttp(credentials, http)

    return googleapiclient.discovery.build(
        'compute', 'v1', http=http, cache_discovery=False)
  except (google.auth.exceptions.GoogleAuthError,
          googleapiclient.errors.Error, httplib2.HttpLib2Error,
          socket.error) as e:
    raise ComputeClientError(
        'error creating compute service to get instance labels: %s' % e)


def GetInstanceLabels(service, project, zone, instance, logger):
  """Returns labels of a GCE instance.

  Failures of the API call are logged and reported as "no labels", since
  missing compute API access must not fail initialization.

  Args:
    service: compute service created by BuildComputeService.
    project: project id of the instance.
    zone: zone of the instance.
    instance: instance name.
    logger: logging.Logger for the failure warning.

  Returns:
    Dictionary of label key to label value. Empty if the instance has no
    labels or the API call failed.
  """
  try:
    # The discovery client validates parameters while building the request
    # and raises TypeError for values not matching the API patterns, e.g. an
    # empty or uppercase instance name taken from HOSTNAME.
    request = service.instances().get(
        project=project, zone=zone, instance=instance)
    response = request.execute()
  except (TypeError, googleapiclient.errors.Error,
          google.auth.exceptions.GoogleAuthError, httplib2.HttpLib2Error,
          socket.error) as e:
    logger.warning(
        'Error while fetching the instance resource using GCE API: %s. '
        'Continuing without labels info.', e)
    return {}

  return dict(response.get('labels') or {})
