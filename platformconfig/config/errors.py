from ..common import compat_typing as t


class PlatformConfigError(Exception):
    """Base class of all errors raised by platformconfig"""


class NotValidPlatformError(PlatformConfigError):
    """Platform data was requested outside of a platform deployment"""

    def __init__(self, name: t.Optional[str] = None) -> None:
        self.name = name
        if name:
            msg = f'You are not running on a platform, so the {name} variable is not available.'
        else:
            msg = 'You are not running on a platform, so platform data is not available.'
        super().__init__(msg)


class BuildTimeVariableAccessError(PlatformConfigError):
    """A runtime-only value was requested during the build"""

    def __init__(self, name: t.Optional[str] = None) -> None:
        self.name = name
        if name:
            msg = f'The {name} variable is not available during build time.'
        else:
            msg = 'Runtime data is not available during build time.'
        super().__init__(msg)


class _LookupMessageMixin:
    # KeyError would quote the message as repr
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ''


class NoCredentialFormatterFoundError(_LookupMessageMixin, PlatformConfigError, KeyError):
    def __init__(self, formatter_name: str) -> None:
        self.formatter_name = formatter_name
        super().__init__(
            f'There is no credential formatter named {formatter_name} registered. '
            'Did you remember to call register_formatter()?'
        )


class RouteNotFoundError(_LookupMessageMixin, PlatformConfigError, KeyError):
    """No route matches the requested id or flag"""


class CredentialsNotFoundError(PlatformConfigError, IndexError):
    def __init__(self, relationship: str, index: int = 0) -> None:
        self.relationship = relationship
        self.index = index
        super().__init__(f'No relationship defined: {relationship}[{index}]. Check your app configuration file.')


class VariableDecodeError(PlatformConfigError, ValueError):
    """A structural variable is present but is not base64 encoded JSON"""

    def __init__(self, variable: str, reason: str) -> None:
        self.variable = variable
        self.reason = reason
        super().__init__(f'Failed to decode environment variable {variable}: {reason}')
