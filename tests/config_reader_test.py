"""Tests for config_reader."""

import os
import sys
from unittest import mock

from io import StringIO

from absl.testing import absltest
from gcesysvars import config_reader


class StringIOOpen(object):
  """An open for StringIO that supports "with" semantics."""

  def __init__(self, data):
    self.file_obj = StringIO(data)

  def __enter__(self):
    return self.file_obj

  def __exit__(self, type, value, traceback):  # pylint: disable=redefined-builtin
    pass


class ConfigReaderTest(absltest.TestCase):

  def testOpenAndReadSuccess(self):
    data = """
      max_nics: 2
    """
    with mock.patch('gcesysvars.config_reader.open', create=True) as m:
      m.return_value = StringIOOpen(data)
      config = config_reader.OpenAndRead()
      m.assert_called_with(os.path.join(sys.path[0], 'gcesysvars.yaml'), 'r')

    self.assertEqual(2, config.max_nics)
    self.assertEqual(5, config.metadata_timeout_sec)
    self.assertEqual(30, config.compute_timeout_sec)

  def testOpenAndReadFileNotFound(self):
    with mock.patch('gcesysvars.config_reader.open', create=True,
                    side_effect=IOError('IO Error')):
      self.assertIsNone(config_reader.OpenAndRead())

  def testReadDataSuccess(self):
    data = """
      max_nics: 4
      metadata_timeout_sec: 1.5
      compute_timeout_sec: 10
    """
    config = config_reader.Read(StringIO(data))

    self.assertEqual(4, config.max_nics)
    self.assertEqual(1.5, config.metadata_timeout_sec)
    self.assertEqual(10, config.compute_timeout_sec)

  def testEmptyFile(self):
    config = config_reader.Read(StringIO(''))
    self.assertEqual(config_reader.MAX_NICS, config.max_nics)

  def testYAMLParseError(self):
    with self.assertRaises(config_reader.ParseError):
      config_reader.Read(StringIO('max_nics: [1'))

  def testNotAMapping(self):
    with self.assertRaises(config_reader.ParseError):
      config_reader.Read(StringIO('- max_nics'))

  def testUnknownConfigKey(self):
    with self.assertRaises(config_reader.UnknownConfigKeyError):
      config_reader.Read(StringIO('max_nic: 2'))

  def testMaxNicsOutOfRange(self):
    for value in ('0', '9', 'yes', 'two'):
      with self.assertRaises(config_reader.InvalidValueError):
        config_reader.Read(StringIO('max_nics: %s' % value))

  def testTimeoutNotPositive(self):
    with self.assertRaises(config_reader.InvalidValueError):
      config_reader.Read(StringIO('metadata_timeout_sec: 0'))
    with self.assertRaises(config_reader.InvalidValueError):
      config_reader.Read(StringIO('compute_timeout_sec: fast'))


if __name__ == '__main__':
  absltest.main()
