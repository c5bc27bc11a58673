import pathlib
import tempfile
import unittest

from telemetry_buffer.config import BufferManagerConfig, config_from_mapping, load_config
from telemetry_buffer.core.buffer_manager import BufferManager
from telemetry_buffer.core.clock import MonotonicClock
from telemetry_buffer.core.models import ChannelSpec, OverflowPolicy
from telemetry_buffer.errors import ConfigurationError

YAML_TEXT = """\
buffer_manager:
  filename: robot_log.mat
  window_size: 50
  auto_save: true
  overflow: reject
  clock: monotonic
  channels:
    - name: joint_pos
      dimensions: [6, 1]
    - name: rot
      rows: 3
      cols: 3
unrelated: 1
"""


class BufferManagerConfigTest(unittest.TestCase):
    def test_defaults_for_empty_mapping(self):
        cfg = config_from_mapping(None)
        self.assertEqual(cfg, BufferManagerConfig())

    def test_load_yaml_with_nested_block(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "buffers.yaml"
            path.write_text(YAML_TEXT, encoding="utf-8")

            cfg = load_config(path)

        self.assertEqual(cfg.filename, "robot_log.mat")
        self.assertEqual(cfg.window_size, 50)
        self.assertTrue(cfg.auto_save)
        self.assertIs(cfg.overflow, OverflowPolicy.REJECT)
        self.assertEqual(cfg.channels, (ChannelSpec("joint_pos", 6, 1), ChannelSpec("rot", 3, 3)))
        self.assertIsInstance(cfg.make_clock(), MonotonicClock)

    def test_from_config_builds_manager(self):
        cfg = config_from_mapping(
            {"filename": "run.mat", "window_size": 3, "channels": [["pos", 3, 1]]}
        )
        manager = BufferManager.from_config(cfg)

        self.assertEqual(manager.container_name, "run")
        self.assertEqual(manager.window_size, 3)
        self.assertEqual([spec.name for spec in manager.channels], ["pos"])
        self.assertFalse(manager.auto_save)

    def test_bad_values_raise_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            config_from_mapping({"overflow": "drop_everything"})
        with self.assertRaises(ConfigurationError):
            config_from_mapping({"clock": "sundial"})
        with self.assertRaises(ConfigurationError):
            config_from_mapping({"window_size": "many"})

    def test_missing_file_and_non_mapping_document(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = pathlib.Path(tmpdir)
            with self.assertRaises(ConfigurationError):
                load_config(root / "absent.yaml")

            listing = root / "list.yaml"
            listing.write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertRaises(ConfigurationError):
                load_config(listing)


if __name__ == "__main__":
    unittest.main()
