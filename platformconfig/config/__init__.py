"""
config - Access the platform deployment metadata of the process environment.

This module provides:
- Config: decoded routes, relationships, variables, application and raw properties.
- config: create a Config bound to the process environment.
- load_env_file: load a synthetic environment from a YAML file.
"""

from .env_file import load_env_file  # noqa: F401
from .errors import (  # noqa: F401
    BuildTimeVariableAccessError,
    CredentialsNotFoundError,
    NoCredentialFormatterFoundError,
    NotValidPlatformError,
    PlatformConfigError,
    RouteNotFoundError,
    VariableDecodeError,
)
from .platform_config import Config, PlatformState, config  # noqa: F401
