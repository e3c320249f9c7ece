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
"""System variables describing the GCE instance the process runs on.

Usage:
  variables = {}
  on_gce = gcesysvars.Collect(variables)

On GCE the dictionary receives variables like "project", "zone", "region",
"instance", "nic_0_ip" and "label_<key>" for every instance label.
"""

import logging

from . import config_reader
from . import gce_vars
from . import metadata_client
from . import version

__version__ = version.__version__

Error = gce_vars.Error


def Collect(variables, logger=None, config=None):
  """Adds GCE system variables to the dictionary.

  Args:
    variables: dictionary of variable name to value, updated in place.
    logger: logging.Logger for warnings. Defaults to the "gcesysvars" logger.
    config: config_reader.Config. If not provided, gcesysvars.yaml next to the
        main script is read, falling back to defaults if there is none.

  Returns:
    True if running on GCE, False otherwise.

  Raises:
    gcesysvars.Error: if running on GCE but a mandatory variable cannot be
        determined.
    config_reader.Error: if the configuration file is invalid.
  """
  if logger is None:
    logger = logging.getLogger('gcesysvars')

  if config is None:
    config = config_reader.OpenAndRead() or config_reader.Config()

  collector = gce_vars.GceVarsCollector(
      metadata_client.MetadataClient(timeout_sec=config.metadata_timeout_sec),
      logger,
      max_nics=config.max_nics,
      compute_timeout_sec=config.compute_timeout_sec)
  return collector.Collect(variables)
