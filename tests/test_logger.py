import logging
import os
import tempfile
import unittest
from tcnav.logger import (
    ColoredFormatter, LogContext, LogLevel, configure_logging, get_logger, level_value, setup_logger
)


class TestLogger(unittest.TestCase):

    def tearDown(self):
        root = logging.getLogger("tcnav")
        for handler in root.handlers:
            handler.close()
        root.handlers = []
        root.setLevel(logging.NOTSET)

    def test_trace_level(self):
        self.assertEqual(logging.getLevelName(5), "TRACE")
        self.assertEqual(level_value("trace"), LogLevel.TRACE.value)
        self.assertEqual(level_value(logging.DEBUG), logging.DEBUG)
        with self.assertRaises(ValueError):
            level_value("VERBOSE")

    def test_get_logger_namespace(self):
        self.assertEqual(get_logger("fusion.tightly").name, "tcnav.fusion.tightly")
        self.assertEqual(get_logger("tcnav.gnss").name, "tcnav.gnss")
        self.assertEqual(get_logger("tcnav").name, "tcnav")

    def test_setup_logger_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "tcnav.log")
            logger = setup_logger(level="DEBUG", log_file=path, console=False)
            get_logger("fusion.tightly").debug("Detect receiver clock jump")
            for handler in logger.handlers:
                handler.flush()
                handler.close()
            with open(path) as f:
                content = f.read()
        self.assertIn("tcnav.fusion.tightly", content)
        self.assertIn("Detect receiver clock jump", content)

    def test_log_context(self):
        logger = setup_logger(level="WARNING", console=False)
        with LogContext(logger, "TRACE"):
            self.assertEqual(logger.level, LogLevel.TRACE.value)
        self.assertEqual(logger.level, logging.WARNING)

    def test_colored_formatter_keeps_record(self):
        record = logging.LogRecord("tcnav", logging.WARNING, __file__, 1, "msg", None, None)
        text = ColoredFormatter('%(levelname)s %(message)s').format(record)
        self.assertIn("\033[33m", text)
        self.assertEqual(record.levelname, "WARNING")

    def test_configure_logging(self):
        root = configure_logging({
            'level': 'WARNING',
            'console': False,
            'log_file': None,
            'module_levels': {'tcnav.fusion.tightly': 'DEBUG'},
        })
        try:
            self.assertEqual(root.level, logging.WARNING)
            self.assertEqual(logging.getLogger('tcnav.fusion.tightly').level, logging.DEBUG)
            self.assertFalse(logging.getLogger('tcnav.gnss').isEnabledFor(logging.INFO))
        finally:
            logging.getLogger('tcnav.fusion.tightly').setLevel(logging.NOTSET)

    def test_configure_logging_rejects_unknown_level(self):
        with self.assertRaises(ValueError):
            configure_logging({'module_levels': {'tcnav.gnss': 'LOUD'}})


if __name__ == '__main__':
    unittest.main()
