"""
Logging setup shared by the Flask app and the import scripts
"""
import logging
import os
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOG_FILE = os.getenv('LOG_FILE', os.path.join('logs', 'league.log'))


def setup_logging(level: str = LOG_LEVEL, log_file: str = LOG_FILE):
    """Send log records to a UTF-8 log file and to the console"""
    log_dir = os.path.dirname(os.path.abspath(log_file))
    os.makedirs(log_dir, exist_ok=True)

    # Clear any existing handlers to avoid duplicates
    root = logging.getLogger()
    root.handlers = []

    file_handler = logging.FileHandler(log_file, encoding='utf-8', mode='a')
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)-8s %(filename)-24.24s%(lineno)-5d%(funcName)-28.28s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] [%(levelname)-7s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    ))

    root.addHandler(file_handler)
    root.addHandler(console_handler)
    root.setLevel(level)

    logging.info(f"Logging configured to {log_file} at level {level}")
