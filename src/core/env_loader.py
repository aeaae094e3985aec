#!/usr/bin/env python3
"""
Environment variable loader with .env file support.

Loads ``KEY=VALUE`` pairs from the project's .env file; variables already set
in the environment win.
"""

import os
from pathlib import Path
import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent


def load_env_file(env_file_path: Union[str, Path] = ".env", project_root: Optional[Path] = None) -> int:
    """
    Load environment variables from a .env file if it exists.

    Args:
        env_file_path: Path to the .env file, relative to the project root
        project_root: Directory to resolve the path against

    Returns:
        Number of variables loaded
    """
    env_path = (project_root or PROJECT_ROOT) / env_file_path

    if not env_path.exists():
        logger.debug(f"No .env file found at {env_path}")
        return 0

    try:
        with open(env_path, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except OSError as e:
        logger.error(f"Error loading .env file {env_path}: {e}")
        return 0

    loaded_count = 0
    for line_num, line in enumerate(lines, 1):
        line = line.strip()

        # Skip empty lines and comments
        if not line or line.startswith('#'):
            continue

        if '=' not in line:
            logger.warning(f"Invalid .env format at line {line_num}: {line}")
            continue

        key, value = line.split('=', 1)
        key = key.strip()
        value = value.strip()

        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]

        if key not in os.environ:
            os.environ[key] = value
            loaded_count += 1
            logger.debug(f"Loaded {key} from .env")
        else:
            logger.debug(f"Skipped {key} (already in environment)")

    logger.info(f"Loaded {loaded_count} variables from {env_path}")
    return loaded_count


def get_env_var(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Get environment variable with optional default and required validation.

    Raises:
        ValueError: If required variable is missing
    """
    value = os.environ.get(key, default)

    if required and not value:
        raise ValueError(f"Required environment variable {key} is not set")

    return value


# Auto-load .env file when module is imported
load_env_file()
