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
"""Collects system variables describing the GCE instance we are running on.

The variables are written into a flat string to string dictionary that the
caller later uses for substitution in probe configuration. Collection steps
produce typed records; they are flattened into the dictionary one stage at a
time, so variables of the stages that succeeded stay in the dictionary when
a later stage fails.
"""

import collections
import os

from . import compute_client
from . import config_reader
from . import kubernetes
from . import metadata_client

# Prefix of variables holding instance labels, so that labels cannot shadow
# built-in variables.
_LABEL_PREFIX = 'label_'

# Value used for optional fields that are not available.
_UNDEFINED = 'undefined'

_NIC_IP_PATH = 'instance/network-interfaces/%d/ip'
_NIC_IPV6_PATH = 'instance/network-interfaces/%d/ipv6s'


class Error(Exception):
  """Generic error class that other errors in this module inherit from."""
  pass


class MetadataFieldError(Error):
  """Thrown when a mandatory variable cannot be read from metadata."""

  def __init__(self, name, cause):
    super(MetadataFieldError, self).__init__(
        'error while getting %s from metadata: %s' % (name, cause))
    self.name = name


class LabelsError(Error):
  """Thrown when instance labels cannot be fetched at all."""


Identity = collections.namedtuple(
    'Identity', ['project', 'project_id', 'instance_id'])


class InstanceAttributes(
    collections.namedtuple('InstanceAttributes', [
        'instance', 'zone', 'internal_ip', 'external_ip',
        'instance_template', 'machine_type'
    ])):
  """Instance level variables, available on GCE but not on GKE."""
  __slots__ = ()

  @property
  def region(self):
    return RegionFromZone(self.zone)

  def AsVariables(self):
    variables = self._asdict()
    variables['region'] = self.region
    return dict(variables)


class NetworkInterface(
    collections.namedtuple('NetworkInterface', ['index', 'ip', 'ipv6'])):
  """Addresses of a single NIC. ipv6 is None if the NIC has no IPv6."""
  __slots__ = ()

  @property
  def is_primary(self):
    return self.index == 0

  def AsVariables(self):
    variables = {'nic_%d_ip' % self.index: self.ip}
    if self.ipv6 is not None:
      # Keyed by the metadata path, which existing configs refer to.
      variables[_NIC_IPV6_PATH % self.index] = self.ipv6
      if self.is_primary:
        variables['internal_ipv6_ip'] = self.ipv6
    return variables


def RegionFromZone(zone):
  """Strips the zone suffix, e.g. us-central1-a -> us-central1."""
  return '-'.join(zone.split('-')[:-1])


def _LastPathSegment(value):
  return value.split('/')[-1]


class GceVarsCollector(object):
  """Populates system variables from the GCE metadata server.

  A collector performs one full collection per Collect() call. Nothing is
  cached between calls and no request is retried.
  """

  def __init__(self,
               metadata,
               logger,
               max_nics=config_reader.MAX_NICS,
               compute_timeout_sec=30):
    """Class constructor.

    Args:
      metadata: metadata_client.MetadataClient (or compatible object).
      logger: logging.Logger to report soft failures to.
      max_nics: number of network interface slots to probe.
      compute_timeout_sec: HTTP timeout of the Compute API client.
    """
    self._metadata = metadata
    self._logger = logger
    self.max_nics = max_nics
    self.compute_timeout_sec = compute_timeout_sec

    #
    # Collaborators (only replaced by unit test)
    #

    self.is_kubernetes = kubernetes.IsKubernetes
    self.kubernetes_namespace = kubernetes.KubernetesNamespace
    self.build_compute_service = compute_client.BuildComputeService
    self.get_instance_labels = compute_client.GetInstanceLabels
    self.environ = os.environ

  def Collect(self, variables):
    """Adds GCE variables to the dictionary.

    Args:
      variables: dictionary of variable name to value, updated in place.

    Returns:
      True if running on GCE, False otherwise. Nothing is added when not
      running on GCE.

    Raises:
      Error (some subclass): if a mandatory variable cannot be determined.
          Only raised once GCE has been detected, so a raised error implies
          GCE was detected (the platform flag would have been True).
          Variables collected before the failure are left in the dictionary.
    """
    if not self._metadata.OnGCE():
      return False

    identity = self._CollectIdentity()
    variables.update(identity._asdict())

    # If running on Kubernetes, don't bother setting rest of the variables.
    # They may not be available and they are not very relevant for the
    # Kubernetes use case.
    if self.is_kubernetes():
      variables['namespace'] = self.kubernetes_namespace()
      return True

    attributes = self._CollectInstanceAttributes()
    variables.update(attributes.AsVariables())

    for nic in self._EnumerateNics():
      variables.update(nic.AsVariables())

    labels = self._FetchLabels(identity.project, attributes.zone,
                               attributes.instance)
    for key, value in labels.items():
      variables[_LABEL_PREFIX + key] = value

    return True

  def _CollectIdentity(self):
    """Reads variables available on both GCE and GKE metadata servers."""
    return Identity(
        project=self._GetMandatory('project', self._metadata.ProjectID),
        project_id=self._GetMandatory('project_id',
                                      self._metadata.NumericProjectID),
        instance_id=self._GetMandatory('instance_id',
                                       self._metadata.InstanceID))

  def _CollectInstanceAttributes(self):
    """Reads instance level variables, applying per-field fallbacks."""
    try:
      instance = self._metadata.InstanceName()
    except metadata_client.Error as e:
      self._logger.warning(
          'Error getting instance name on GCE, using HOSTNAME environment '
          'variable: %s', e)
      instance = self.environ.get('HOSTNAME', '')

    zone = self._GetMandatory('zone', self._metadata.Zone)
    internal_ip = self._GetMandatory('internal_ip', self._metadata.InternalIP)
    external_ip = self._GetMandatory('external_ip', self._metadata.ExternalIP)

    # instance_template may not be defined, depending on how the instance was
    # created.
    try:
      instance_template = _LastPathSegment(
          self._metadata.InstanceAttributeValue('instance-template'))
    except metadata_client.Error:
      self._logger.info('No instance_template found. Defaulting to %s.',
                        _UNDEFINED)
      instance_template = _UNDEFINED

    try:
      machine_type = _LastPathSegment(
          self._metadata.Get('instance/machine-type'))
    except metadata_client.Error:
      self._logger.info('Could not fetch machine type. Defaulting to %s.',
                        _UNDEFINED)
      machine_type = _UNDEFINED

    return InstanceAttributes(
        instance=instance,
        zone=zone,
        internal_ip=internal_ip,
        external_ip=external_ip,
        instance_template=instance_template,
        machine_type=machine_type)

  def _EnumerateNics(self):
    """Returns NetworkInterface records of the NICs present on the instance.

    Every slot is probed independently: a missing NIC in one slot does not
    imply that the later slots are empty.
    """
    nics = []
    for i in range(self.max_nics):
      # If there is no private IP for the NIC, the NIC doesn't exist.
      try:
        ip = self._metadata.Get(_NIC_IP_PATH % i)
      except metadata_client.Error:
        continue

      try:
        ipv6 = self._metadata.Get(_NIC_IPV6_PATH % i).strip()
      except metadata_client.Error:
        self._logger.debug('VM does not have ipv6 ip on interface# %d', i)
        ipv6 = None

      nics.append(NetworkInterface(index=i, ip=ip, ipv6=ipv6))

    return nics

  def _FetchLabels(self, project, zone, instance):
    """Returns instance labels, or {} if the Compute API call fails.

    Raises:
      LabelsError: if the Compute API client cannot be created.
    """
    try:
      service = self.build_compute_service(self.compute_timeout_sec)
    except compute_client.ComputeClientError as e:
      raise LabelsError('%s' % e)

    return self.get_instance_labels(service, project, zone, instance,
                                    self._logger)

  def _GetMandatory(self, name, fn):
    try:
      return fn()
    except metadata_client.Error as e:
      raise MetadataFieldError(name, e)
