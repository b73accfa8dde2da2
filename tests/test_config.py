import dataclasses
import os
import shutil
import tempfile
import unittest
from sqlitebuilder import config
from sqlitebuilder.config import OS, BuildConfig, BuildMode
from sqlitebuilder.errors import ConfigurationError


class TestConfigFile(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.sample_config = {
            "sqlite3": {"source": "system"},
            "build": {"build_mode": "debug", "dry_run": True},
        }

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_load_config_not_found(self):
        """Loading a missing config returns an empty dict."""
        self.assertEqual(config.load_config(path=self.test_dir), {})

    def test_save_and_load_config(self):
        config.save_config(self.sample_config, path=self.test_dir)
        self.assertTrue(os.path.exists(os.path.join(self.test_dir, config.CONFIG_FILE)))
        self.assertEqual(config.load_config(path=self.test_dir), self.sample_config)

    def test_malformed_config(self):
        with open(os.path.join(self.test_dir, config.CONFIG_FILE), "w") as f:
            f.write("[sqlite3\nsource = ")
        with self.assertRaises(ConfigurationError):
            config.load_config(path=self.test_dir)

    def test_flatten_options(self):
        self.assertEqual(config.flatten_options(self.sample_config), {
            "sqlite3.source": "system",
            "build.build_mode": "debug",
            "build.dry_run": True,
        })

    def test_parse_defines(self):
        self.assertEqual(
            config.parse_defines(["sqlite3.source=url", "sqlite3.url=https://x/y.zip?a=b"]),
            {"sqlite3.source": "url", "sqlite3.url": "https://x/y.zip?a=b"},
        )
        with self.assertRaises(ConfigurationError):
            config.parse_defines(["sqlite3.source"])

    def test_get_option(self):
        self.assertEqual(config.get_option({"a.b": "c"}, "a.b"), "c")
        self.assertIsNone(config.get_option({}, "a.b"))
        with self.assertRaises(ConfigurationError):
            config.get_option({"a.b": True}, "a.b")


class TestBuildConfig(unittest.TestCase):

    def test_from_options_uses_build_table(self):
        conf = BuildConfig.from_options(
            "/pkg",
            conf={"build": {"target_os": "android", "build_mode": "debug", "dry_run": True, "out_dir": "out"}},
        )
        self.assertIs(conf.target_os, OS.ANDROID)
        self.assertIs(conf.build_mode, BuildMode.DEBUG)
        self.assertTrue(conf.dry_run)
        self.assertEqual(conf.out_dir, os.path.join(os.path.abspath("/pkg"), "out"))

    def test_explicit_arguments_win(self):
        conf = BuildConfig.from_options(
            "/pkg",
            conf={"build": {"build_mode": "debug"}},
            overrides={"build.dry_run": "true"},
            target_os="windows",
            build_mode="release",
        )
        self.assertIs(conf.target_os, OS.WINDOWS)
        self.assertIs(conf.build_mode, BuildMode.RELEASE)
        self.assertTrue(conf.dry_run)

    def test_defaults(self):
        conf = BuildConfig.from_options("/pkg")
        self.assertIs(conf.target_os, OS.host())
        self.assertIs(conf.build_mode, BuildMode.RELEASE)
        self.assertFalse(conf.dry_run)
        self.assertEqual(conf.out_dir, os.path.join(os.path.abspath("/pkg"), ".sqlitebuilder", "build"))

    def test_invalid_values(self):
        with self.assertRaises(ConfigurationError):
            BuildConfig.from_options("/pkg", target_os="beos")
        with self.assertRaises(ConfigurationError):
            BuildConfig.from_options("/pkg", build_mode="profile")
        with self.assertRaises(ConfigurationError):
            BuildConfig.from_options("/pkg", overrides={"build.dry_run": "maybe"})

    def test_immutable(self):
        options = {"sqlite3.source": "system"}
        conf = BuildConfig(OS.LINUX, BuildMode.RELEASE, False, "/pkg/out", "/pkg", options)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            conf.dry_run = True
        with self.assertRaises(TypeError):
            conf.options["sqlite3.source"] = "url"
        options["sqlite3.source"] = "url"
        self.assertEqual(conf.options["sqlite3.source"], "system")


if __name__ == "__main__":
    unittest.main()
