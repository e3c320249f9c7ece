"""Tests for the gcesysvars package entry point."""

import logging
from unittest import mock

from absl.testing import absltest

import gcesysvars
from gcesysvars import config_reader
from gcesysvars import gce_vars


class CollectTest(absltest.TestCase):

  def setUp(self):
    patcher = mock.patch.object(gce_vars, 'GceVarsCollector')
    self._collector_class = patcher.start()
    self.addCleanup(patcher.stop)

    self._collector = self._collector_class.return_value
    self._collector.Collect.return_value = True

  def testCollectWithConfig(self):
    config = config_reader.Config(max_nics=3, metadata_timeout_sec=1,
                                  compute_timeout_sec=9)
    logger = logging.getLogger('test')
    variables = {}

    self.assertTrue(gcesysvars.Collect(variables, logger, config))

    args, kwargs = self._collector_class.call_args
    metadata, collector_logger = args
    self.assertEqual(1, metadata.timeout_sec)
    self.assertIs(logger, collector_logger)
    self.assertEqual({'max_nics': 3, 'compute_timeout_sec': 9}, kwargs)
    self._collector.Collect.assert_called_once_with(variables)

  def testCollectDefaults(self):
    with mock.patch.object(config_reader, 'OpenAndRead', return_value=None):
      self.assertTrue(gcesysvars.Collect({}))

    args, kwargs = self._collector_class.call_args
    self.assertEqual('gcesysvars', args[1].name)
    self.assertEqual(config_reader.MAX_NICS, kwargs['max_nics'])

  def testNotOnGCE(self):
    self._collector.Collect.return_value = False

    self.assertFalse(
        gcesysvars.Collect({}, config=config_reader.Config()))

  def testErrorPropagates(self):
    self._collector.Collect.side_effect = gce_vars.MetadataFieldError(
        'zone', 'not defined')

    with self.assertRaises(gcesysvars.Error):
      gcesysvars.Collect({}, config=config_reader.Config())


if __name__ == '__main__':
  absltest.main()
