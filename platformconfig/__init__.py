from .config import (  # noqa: F401
    BuildTimeVariableAccessError,
    Config,
    CredentialsNotFoundError,
    NoCredentialFormatterFoundError,
    NotValidPlatformError,
    PlatformConfigError,
    PlatformState,
    RouteNotFoundError,
    VariableDecodeError,
    config,
)
