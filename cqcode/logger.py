import logging
import sys
import os
from datetime import datetime

import cqcode.util as u

# ANSI colour codes
COLORS = {
    'DBG': '\033[36m',   # cyan
    'INF': '\033[32m',   # green
    'WRN': '\033[33m',   # yellow
    'ERR': '\033[31m',   # red
    'CRT': '\033[91m\033[1m',  # bright red, bold
    'RST': '\033[0m'
}

# Console output goes to stderr so that rendered messages on stdout stay clean
IS_TTY = sys.stderr.isatty()


class CustomFormatter(logging.Formatter):
    # DEBUG -> DBG, shown as [DBG]
    short_names = {
        'DEBUG': 'DBG',
        'INFO': 'INF',
        'WARNING': 'WRN',
        'ERROR': 'ERR',
        'CRITICAL': 'CRT',
    }

    def __init__(self, use_color: bool = IS_TTY):
        super().__init__()
        self.use_color = use_color

    def _level_tag(self, levelname: str) -> str:
        short = self.short_names.get(levelname, levelname.upper()[:3])
        tag = f'[{self.short_names.get(levelname, levelname)}]'
        if self.use_color and short in COLORS:
            return COLORS[short] + tag + COLORS['RST']
        return tag

    def _source(self, record) -> str:
        try:
            path = os.path.relpath(record.pathname)
        except ValueError:
            # different drive on Windows
            path = record.pathname
        return f"{path}:{record.lineno}"

    def format(self, record):
        stamp = datetime.fromtimestamp(record.created).strftime('[%Y-%m-%d %H:%M:%S]')
        return f"{stamp} {self._level_tag(record.levelname)} | {self._source(record)} | {record.getMessage()}"


def _console_level() -> int:
    name = (u.get_env('CQCODE_LOG_LEVEL') or 'INFO').strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


# Shared package logger
logger = logging.getLogger('cqcode')
logger.setLevel(logging.DEBUG)

# Drop handlers left over from a previous import (e.g. importlib.reload)
if logger.handlers:
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
logger.propagate = False

console_handler = logging.StreamHandler(sys.stderr)
console_handler.setFormatter(CustomFormatter())
console_handler.setLevel(_console_level())
logger.addHandler(console_handler)

# File output is opt-in: a library must not create directories on import
LOG_DIR = u.get_log_dir()
LOG_FILE_PATH = None

if LOG_DIR:
    os.makedirs(LOG_DIR, exist_ok=True)
    # e.g. 20250915-150316060.log, millisecond precision
    _log_filename = datetime.now().strftime("%Y%m%d-%H%M%S%f")[:-3] + ".log"
    LOG_FILE_PATH = os.path.join(LOG_DIR, _log_filename)

    file_handler = logging.FileHandler(LOG_FILE_PATH, encoding='utf-8')
    file_formatter = logging.Formatter(
        '[%(asctime)s] [%(levelname)s] | %(filename)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_formatter)
    file_handler.setLevel(logging.DEBUG)
    logger.addHandler(file_handler)


def get_logger(name=None):
    """Return the configured logger (all modules share one instance)."""
    return logger
