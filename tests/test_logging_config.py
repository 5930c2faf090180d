import json
import logging
import os
import tempfile
import unittest

from onchain_ad_agent.logging_config import PACKAGE_LOGGER, StructuredFormatter, setup_logging


class TestStructuredFormatter(unittest.TestCase):
    def test_includes_context(self):
        record = logging.LogRecord("onchain_ad_agent.test", logging.INFO, __file__, 10, "uploaded %s", ("a.png",), None)
        record.context = {"event_type": "s3_upload"}
        entry = json.loads(StructuredFormatter().format(record))
        self.assertEqual(entry["message"], "uploaded a.png")
        self.assertEqual(entry["level"], "INFO")
        self.assertEqual(entry["context"], {"event_type": "s3_upload"})


class TestSetupLogging(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
        self.tmpdir.cleanup()

    def test_file_handler_receives_package_logs(self):
        log_file = os.path.join(self.tmpdir.name, "logs", "agent.log")
        setup_logging("INFO", log_file)

        logging.getLogger("onchain_ad_agent.core.storage").info("hello", extra={"context": {"k": "v"}})

        with open(log_file) as f:
            entries = [json.loads(line) for line in f if line.strip()]
        self.assertEqual(entries[-1]["message"], "hello")
        self.assertEqual(entries[-1]["context"], {"k": "v"})

    def test_level(self):
        logger = setup_logging("ERROR")
        self.assertEqual(logger.level, logging.ERROR)
        self.assertEqual(len(logger.handlers), 1)


if __name__ == "__main__":
    unittest.main()
