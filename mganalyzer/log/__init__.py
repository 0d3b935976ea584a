"""Utility functionality for logging.
"""
import contextlib
import os
import sys

import logbook

from mganalyzer import utils

LOG_NAME = "mg-analyzer"
CONSOLE_FORMAT = "[{record.level_name}] {record.message}"
FILE_FORMAT = "[{record.time:%Y-%m-%dT%H:%MZ}] [{record.level_name}] {record.message}"

logger = logbook.Logger(LOG_NAME)
logger_cl = logbook.Logger(LOG_NAME + "-commands")
logger_stdout = logbook.Logger(LOG_NAME + "-stdout")

def _is_cl(record, _):
    return record.channel == LOG_NAME + "-commands"

def _is_stdout(record, _):
    return record.channel == LOG_NAME + "-stdout"

def _not_cl(record, handler):
    return not _is_cl(record, handler) and not _is_stdout(record, handler)

def _not_stdout(record, handler):
    return not _is_stdout(record, handler)

class CloseableNestedSetup(logbook.NestedSetup):
    def close(self):
        for obj in self.objects:
            if hasattr(obj, "close"):
                obj.close()

def _create_console_handler(debug=False):
    # commands are echoed to the console only in debug mode
    return CloseableNestedSetup([
        logbook.NullHandler(),
        logbook.StreamHandler(sys.stderr, format_string=CONSOLE_FORMAT,
                              level="DEBUG" if debug else "INFO",
                              filter=_not_stdout if debug else _not_cl, bubble=True)])

def _create_file_handler(log_dir):
    logbook.set_datetime_format("utc")
    return CloseableNestedSetup([
        logbook.FileHandler(os.path.join(log_dir, "%s.log" % LOG_NAME),
                            format_string=FILE_FORMAT, level="INFO",
                            filter=_not_cl, bubble=True),
        logbook.FileHandler(os.path.join(log_dir, "%s-debug.log" % LOG_NAME),
                            format_string=FILE_FORMAT, level="DEBUG",
                            filter=_not_cl, bubble=True),
        logbook.FileHandler(os.path.join(log_dir, "%s-commands.log" % LOG_NAME),
                            format_string=FILE_FORMAT, level="DEBUG",
                            filter=_is_cl, bubble=True)])

def setup_console_logging(debug=False):
    """Send log messages to stderr, prefixed by their level.

    Returns the pushed handler so callers can pop it when finished.
    """
    handler = _create_console_handler(debug)
    handler.push_application()
    return handler

@contextlib.contextmanager
def file_logging(log_dir):
    """Additionally write run, debug and command logs into log_dir.
    """
    utils.safe_makedir(log_dir)
    handler = _create_file_handler(log_dir)
    try:
        with handler.applicationbound():
            yield handler
    finally:
        handler.close()
