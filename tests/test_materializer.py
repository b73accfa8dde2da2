import gzip
import os
import pathlib
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock
from sqlitebuilder.build_output import BuildOutput
from sqlitebuilder.config import OS, BuildConfig, BuildMode
from sqlitebuilder.materializer import materialize_source
from sqlitebuilder.sources import SourceStrategy, SystemSource, UrlSource, VendoredSource

AMALGAMATION = b"/* sqlite3 amalgamation */\n" + b"int sqlite3_libversion_number(void) { return 3045000; }\n" * 5000


class TestMaterializeSource(unittest.TestCase):

    def setUp(self):
        self.package_root = tempfile.mkdtemp()
        self.out_dir = os.path.join(self.package_root, "out")
        os.makedirs(self.out_dir)
        self.config = BuildConfig(OS.LINUX, BuildMode.RELEASE, False, self.out_dir, self.package_root)
        self.output = BuildOutput()
        self.logger = MagicMock()

    def tearDown(self):
        shutil.rmtree(self.package_root)

    def _write_archive(self, data=AMALGAMATION):
        os.makedirs(os.path.join(self.package_root, "assets"))
        archive = os.path.join(self.package_root, "assets", "sqlite3.c.gz")
        with gzip.open(archive, "wb") as f:
            f.write(data)
        return archive

    def test_system_stub(self):
        path = materialize_source(SystemSource(), self.config, self.output, self.logger)
        self.assertEqual(path, os.path.join(self.out_dir, "sqlite3.c"))
        with open(path, "rb") as f:
            self.assertEqual(f.read(), b"#include <sqlite3.h>\n")
        self.assertEqual(self.output.dependencies, [])

    def test_vendored_matches_archive(self):
        archive = self._write_archive()
        path = materialize_source(VendoredSource(), self.config, self.output, self.logger)

        with gzip.open(archive, "rb") as f:
            expected = f.read()
        with open(path, "rb") as f:
            self.assertEqual(f.read(), expected)

        uri = pathlib.Path(archive).resolve().as_uri()
        self.assertEqual(self.output.dependencies.count(uri), 1)
        self.assertFalse(os.path.exists(path + ".tmp"))

    def test_url_fails_before_writing(self):
        existing = os.path.join(self.out_dir, "sqlite3.c")
        with open(existing, "wb") as f:
            f.write(b"previous")

        with self.assertRaises(NotImplementedError):
            materialize_source(UrlSource("https://example.com/a.zip"), self.config, self.output, self.logger)

        with open(existing, "rb") as f:
            self.assertEqual(f.read(), b"previous")
        self.assertEqual(os.listdir(self.out_dir), ["sqlite3.c"])

    def test_failed_stream_leaves_no_partial_file(self):
        def broken_chunks():
            yield b"int half"
            raise OSError("disk went away")

        source = MagicMock(strategy=SourceStrategy.SYSTEM)
        source.open.return_value = broken_chunks()

        with self.assertRaises(OSError):
            materialize_source(source, self.config, self.output, self.logger)
        self.assertEqual(os.listdir(self.out_dir), [])

    def _damaged_archives(self):
        data = gzip.compress(AMALGAMATION)
        truncated = data[:len(data) // 2]
        corrupt = bytearray(data)
        for i in range(20, 60):
            corrupt[i] ^= 0xFF
        return {"truncated": truncated, "corrupt": bytes(corrupt)}

    def test_damaged_archive_is_an_io_error(self):
        os.makedirs(os.path.join(self.package_root, "assets"))
        archive = os.path.join(self.package_root, "assets", "sqlite3.c.gz")
        for name, data in self._damaged_archives().items():
            with self.subTest(name):
                with open(archive, "wb") as f:
                    f.write(data)
                with self.assertRaises(OSError) as cm:
                    materialize_source(VendoredSource(), self.config, BuildOutput(), self.logger)
                self.assertIn("Could not decompress", str(cm.exception))
                self.assertEqual(os.listdir(self.out_dir), [])

    def test_missing_archive_raises(self):
        with self.assertRaises(FileNotFoundError):
            materialize_source(VendoredSource(), self.config, self.output, self.logger)
        self.assertEqual(os.listdir(self.out_dir), [])


if __name__ == "__main__":
    unittest.main()
