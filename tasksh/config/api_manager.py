"""
API key lookup for tasksh.

The key is only ever read from the environment; tasksh never stores it.
"""

import logging
import os
from typing import Optional

from tasksh.generator.constants import API_KEY_ENV

logger = logging.getLogger(__name__)


def get_api_key() -> Optional[str]:
    """
    Retrieve the OpenAI API key from the environment.

    Returns:
        str or None: The API key if set, None otherwise.
    """
    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        logger.debug(f"Using API key from environment variable {API_KEY_ENV}")
    return api_key


def is_api_key_valid(api_key: Optional[str]) -> bool:
    """
    Check that an API key is usable.

    Args:
        api_key (Optional[str]): The API key to check.

    Returns:
        bool: True if the key is a non-blank string, False otherwise.
    """
    if not api_key or not isinstance(api_key, str):
        return False

    return bool(api_key.strip())
