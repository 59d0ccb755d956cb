import os
from typing import Any

from geminiflow.utils.logger import logger


def get_env_var(var_name: str, default_value: Any = None) -> Any:
    """Read an environment variable. Logs a warning when it is unset and has no default."""
    value = os.environ.get(var_name, default_value)
    if value is None:
        logger.warning(f"Environment variable '{var_name}' not found")
    return value
