import os
import tempfile
import unittest

from worker_tasks.utils.env_loader import env_bool, env_float, load_env_from_file, parse_env_line


class TestEnvLoader(unittest.TestCase):

    def setUp(self):
        # Store original environment variables to restore them later
        self.original_environ = os.environ.copy()
        self.temp_dir = tempfile.TemporaryDirectory()
        self.test_env_file_path = os.path.join(self.temp_dir.name, ".env.test")

    def tearDown(self):
        os.environ.clear()
        os.environ.update(self.original_environ)
        self.temp_dir.cleanup()

    def create_test_env_file(self, content):
        with open(self.test_env_file_path, 'w') as f:
            f.write(content)

    def test_parse_env_line(self):
        self.assertEqual(parse_env_line("KEY=value"), ("KEY", "value"))
        self.assertEqual(parse_env_line("export KEY = 'quoted value'"), ("KEY", "quoted value"))
        self.assertEqual(parse_env_line('KEY="a=b"'), ("KEY", "a=b"))
        self.assertIsNone(parse_env_line("# comment"))
        self.assertIsNone(parse_env_line("   "))
        self.assertIsNone(parse_env_line("NO_EQUALS_SIGN"))
        self.assertIsNone(parse_env_line("=value"))

    def test_load_env_from_file(self):
        self.create_test_env_file(
            "# settings\n"
            "WORKER_TEST_KEY1=value1\n"
            "\n"
            "WORKER_TEST_KEY2=\"value 2\"\n"
            "malformed line\n"
        )
        self.assertTrue(load_env_from_file(self.test_env_file_path))
        self.assertEqual(os.environ["WORKER_TEST_KEY1"], "value1")
        self.assertEqual(os.environ["WORKER_TEST_KEY2"], "value 2")

    def test_existing_values_kept_unless_override(self):
        os.environ["WORKER_TEST_EXISTING"] = "original"
        self.create_test_env_file("WORKER_TEST_EXISTING=from_file\n")

        load_env_from_file(self.test_env_file_path)
        self.assertEqual(os.environ["WORKER_TEST_EXISTING"], "original")

        load_env_from_file(self.test_env_file_path, override=True)
        self.assertEqual(os.environ["WORKER_TEST_EXISTING"], "from_file")

    def test_missing_file(self):
        self.assertFalse(load_env_from_file(os.path.join(self.temp_dir.name, "absent.env")))

    def test_env_bool(self):
        os.environ["WORKER_TEST_FLAG"] = "false"
        self.assertFalse(env_bool("WORKER_TEST_FLAG", True))
        os.environ["WORKER_TEST_FLAG"] = "Yes"
        self.assertTrue(env_bool("WORKER_TEST_FLAG", False))
        self.assertTrue(env_bool("WORKER_TEST_UNSET_FLAG", True))

    def test_env_float(self):
        os.environ["WORKER_TEST_NUMBER"] = "12.5"
        self.assertEqual(env_float("WORKER_TEST_NUMBER", 1.0), 12.5)
        os.environ["WORKER_TEST_NUMBER"] = "twelve"
        self.assertEqual(env_float("WORKER_TEST_NUMBER", 1.0), 1.0)
        self.assertEqual(env_float("WORKER_TEST_UNSET_NUMBER", 3.0), 3.0)


if __name__ == '__main__':
    unittest.main()
