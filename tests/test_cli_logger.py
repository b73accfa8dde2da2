import os
import shutil
import tempfile
import unittest
from sqlitebuilder.cli_logger import Logger, default_log_file, read_log_lines


class TestLogger(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.log_file = default_log_file(self.test_dir)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_nothing_written_until_opened(self):
        logger = Logger(self.log_file)
        logger.info("console only")
        self.assertFalse(os.path.exists(self.log_file))

    def test_context_manager_writes_and_closes(self):
        with Logger(self.log_file) as logger:
            self.assertTrue(logger.is_open)
            logger.info("Starting sqlite3 build")
            logger.debug("Config: ...")
            logger.success("done")
        self.assertFalse(logger.is_open)

        levels = [level for level, _ in read_log_lines(self.log_file)]
        self.assertEqual(levels, ["INFO", "DEBUG", "SUCCESS"])

    def test_exception_is_recorded(self):
        with self.assertRaises(ValueError):
            with Logger(self.log_file):
                raise ValueError("broken archive")

        lines = list(read_log_lines(self.log_file))
        self.assertTrue(all(level == "TRACEBACK" for level, _ in lines))
        self.assertIn("ValueError: broken archive", lines[-1][1])

    def test_reopen_truncates(self):
        with Logger(self.log_file) as logger:
            logger.info("first build")
        with Logger(self.log_file) as logger:
            logger.info("second build")
        lines = [line for _, line in read_log_lines(self.log_file)]
        self.assertEqual(len(lines), 1)
        self.assertIn("second build", lines[0])


if __name__ == "__main__":
    unittest.main()
