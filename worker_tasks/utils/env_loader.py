"""
Environment variable loading utility.

This module provides functions to load environment variables from files.
"""
import os
import logging

logger = logging.getLogger(__name__)


def parse_env_line(line):
    """
    Parse one ``KEY=VALUE`` line of an env file.

    Args:
        line: Raw line from the file.

    Returns:
        (key, value) tuple, or None for blank lines, comments and lines
        without an ``=``.
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return None
    if line.startswith('export '):
        line = line[len('export '):].lstrip()
    if '=' not in line:
        return None

    key, value = line.split('=', 1)
    key = key.strip()
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        value = value[1:-1]
    if not key:
        return None
    return key, value


def load_env_from_file(file_path, override=False):
    """
    Load environment variables from a file.

    Variables already present in the environment are kept unless
    ``override`` is set.

    Args:
        file_path: Path to the environment variable file.
        override: Replace values that are already set.

    Returns:
        True if file was loaded successfully, False otherwise.
    """
    if not os.path.exists(file_path):
        logger.debug(f"Environment file not found: {file_path}")
        return False

    try:
        with open(file_path, 'r') as f:
            for line_number, line in enumerate(f, start=1):
                parsed = parse_env_line(line)
                if parsed is None:
                    if line.strip() and not line.strip().startswith('#'):
                        logger.warning(f"Skipping malformed line {line_number} in {file_path}")
                    continue
                key, value = parsed
                if override or key not in os.environ:
                    os.environ[key] = value

        logger.info(f"Loaded environment variables from {file_path}")
        return True
    except OSError as e:
        logger.error(f"Error loading environment variables from {file_path}: {str(e)}")
        return False


def env_bool(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def env_float(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid numeric value for {name}: {raw!r}. Using default {default}.")
        return default
