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
"""Detects whether the process runs as a Kubernetes pod."""

import os

# Set by the kubelet in every container it starts.
_KUBERNETES_ENV_VARIABLE = 'KUBERNETES_SERVICE_HOST'

_NAMESPACE_FILE = '/var/run/secrets/kubernetes.io/serviceaccount/namespace'


def IsKubernetes():
  """Returns True if running inside a Kubernetes pod."""
  return bool(os.environ.get(_KUBERNETES_ENV_VARIABLE))


def KubernetesNamespace(namespace_file=_NAMESPACE_FILE):
  """Returns namespace of the current pod, or '' if it cannot be read."""
  try:
    with open(namespace_file, 'r') as f:
      return f.read().strip()
  except IOError:
    return ''
