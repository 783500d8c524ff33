import copy
import enum
import os
import threading

from ..common import compat_typing as t
from ..common.decorators import deprecated
from ..common.encoding import decode_base64_json
from ..logger import get_logger
from .errors import (
    BuildTimeVariableAccessError,
    CredentialsNotFoundError,
    NoCredentialFormatterFoundError,
    NotValidPlatformError,
    RouteNotFoundError,
    VariableDecodeError,
)
from .formatters import BUILTIN_FORMATTERS, CredentialFormatter, Credentials

logger = get_logger('config')

DEFAULT_PREFIX = 'PLATFORM_'
# Set by the process host rather than the platform, never prefixed
UNPREFIXED_VARIABLES = ('PORT', 'SOCKET')
# base64 JSON variables, all of them hold a JSON object
STRUCTURAL_VARIABLES = ('ROUTES', 'RELATIONSHIPS', 'VARIABLES', 'APPLICATION')
LOCAL_FLAG = 'PLATFORMCONFIG_ALLOW_LOCAL'

Route: t.TypeAlias = t.Dict[str, t.Any]


def _is_true(value: t.Optional[str]) -> bool:
    return (value or '').lower() in ('true', '1', 'yes', 'y')


def _env_flag(name: str) -> bool:
    return _is_true(os.getenv(name))


class PlatformState(enum.Enum):
    NOT_A_PLATFORM = 'not_a_platform'
    BUILD = 'build'
    RUNTIME = 'runtime'


# (is_valid_platform, has ENVIRONMENT) -> state
_STATE_TABLE = {
    (False, False): PlatformState.NOT_A_PLATFORM,
    (False, True): PlatformState.NOT_A_PLATFORM,
    (True, False): PlatformState.BUILD,
    (True, True): PlatformState.RUNTIME,
}


class _PlatformVariable:
    """Read-only property over a single scalar environment variable.

    Reading it on an instance checks the platform state first, and raises
    `NotValidPlatformError` / `BuildTimeVariableAccessError` with the property name.
    """

    def __init__(self, var_name: str, runtime_only: bool = False) -> None:
        self.var_name = var_name
        self.runtime_only = runtime_only
        self.name = var_name.lower()

    def __set_name__(self, owner: t.Type[t.Any], name: str) -> None:
        self.name = name

    def __get__(self, instance: t.Optional['Config'], owner: t.Optional[t.Type[t.Any]] = None) -> t.Any:
        if instance is None:
            return self
        instance._ensure_valid(self.name)
        if self.runtime_only:
            instance._ensure_runtime(self.name)
        return instance._get_value(self.var_name)

    def __set__(self, instance: 'Config', value: t.Any) -> None:
        raise AttributeError(f'{self.name} is read-only')


class Config:
    """Typed access to the deployment metadata a platform injects into the process environment.

    The environment is decoded once in the constructor. Routes and relationships only exist
    at runtime, variables and the application definition already exist during the build.

    Example usage:

        ```python
        from platformconfig import config

        cfg = config()
        if cfg.in_runtime():
            db = cfg.credentials('database')
        ```

    Set `PLATFORMCONFIG_ALLOW_LOCAL` (or pass `allow_local=True`) to also read routes and
    relationships outside of a platform when `ENVIRONMENT` and `BRANCH` are both absent, eg: on a
    local machine with tunnelled services. With an injected `environ`, the flag is read from that
    mapping instead of the process environment.
    """

    ALLOW_LOCAL = _env_flag(LOCAL_FLAG)

    app_dir = _PlatformVariable('APP_DIR')
    application_name = _PlatformVariable('APPLICATION_NAME')
    project = _PlatformVariable('PROJECT')
    tree_id = _PlatformVariable('TREE_ID')
    project_entropy = _PlatformVariable('PROJECT_ENTROPY')

    branch = _PlatformVariable('BRANCH', runtime_only=True)
    environment = _PlatformVariable('ENVIRONMENT', runtime_only=True)
    document_root = _PlatformVariable('DOCUMENT_ROOT', runtime_only=True)
    smtp_host = _PlatformVariable('SMTP_HOST', runtime_only=True)
    port = _PlatformVariable('PORT', runtime_only=True)
    socket = _PlatformVariable('SOCKET', runtime_only=True)

    def __init__(
        self,
        environ: t.Optional[t.Mapping[str, str]] = None,
        prefix: str = DEFAULT_PREFIX,
        *,
        allow_local: t.Optional[bool] = None,
        strict_decode: bool = True,
    ) -> None:
        self.environ: t.Dict[str, str] = dict(os.environ if environ is None else environ)
        self.prefix = prefix
        if allow_local is None:
            # an injected environment carries its own flag
            allow_local = self.ALLOW_LOCAL if environ is None else _is_true(self.environ.get(LOCAL_FLAG))
        self.allow_local = allow_local
        self.strict_decode = strict_decode

        self._routes: t.Dict[str, Route] = {}
        self._relationships: t.Dict[str, t.List[Credentials]] = {}
        self._variables: t.Dict[str, t.Any] = {}
        self._application: t.Dict[str, t.Any] = {}
        self._formatters: t.Dict[str, CredentialFormatter] = dict(BUILTIN_FORMATTERS)
        self._formatters_lock = threading.Lock()

        logger.debug(f'Platform state: {self.state.value}, prefix: {prefix}')
        if self.in_runtime() or self.in_local():
            self._routes = self._load_routes()
            self._relationships = self._decode_variable('RELATIONSHIPS')
        if self.is_valid_platform():
            self._variables = self._decode_variable('VARIABLES')
            self._application = self._decode_variable('APPLICATION')

    @classmethod
    def _reload(cls) -> None:
        """Reload to accept new environment variables. Mainly used in unit tests."""
        cls.ALLOW_LOCAL = _env_flag(LOCAL_FLAG)

    @classmethod
    def from_env_file(
        cls, config_file: t.Optional[str] = None, env_tag: str = 'default', prefix: str = DEFAULT_PREFIX, **kwargs: t.Any
    ) -> 'Config':
        """Create a Config from a YAML env file instead of the process environment

        Args:
            config_file (str, optional): env file path, defaults to `PLATFORMCONFIG_ENV_FILE`.
            env_tag (str, optional): which environment of the file to use. Defaults to 'default'.
            prefix (str, optional): variable prefix. Defaults to 'PLATFORM_'.
            kwargs (Any): extra args pass to Config
        """
        from .env_file import load_env_file

        return cls(load_env_file(config_file, env_tag=env_tag, prefix=prefix), prefix=prefix, **kwargs)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} state={self.state.value} prefix={self.prefix!r}>'

    # raw environment

    def _variable_name(self, name: str) -> str:
        name = name.upper()
        if name in UNPREFIXED_VARIABLES:
            return name
        return self.prefix + name

    def _get_value(self, name: str) -> t.Optional[str]:
        """Value of a logical variable, None if it is absent or empty"""
        return self.environ.get(self._variable_name(name)) or None

    def _decode_variable(self, name: str) -> t.Dict[str, t.Any]:
        var_name = self._variable_name(name)
        raw = self._get_value(name)
        if raw is None:
            return {}
        try:
            value = decode_base64_json(raw)
            if not isinstance(value, dict):
                raise ValueError(f'expected a JSON object, got {type(value).__name__}')
        except ValueError as e:
            # binascii.Error, UnicodeDecodeError and JSONDecodeError are all ValueError
            error = VariableDecodeError(var_name, str(e))
            if self.strict_decode:
                raise error from e
            logger.warning(f'{error}, ignored')
            return {}
        logger.debug(f'Decoded {var_name}: {len(value)} entries')
        return value

    def _load_routes(self) -> t.Dict[str, Route]:
        routes = self._decode_variable('ROUTES')
        for url, route in routes.items():
            if not isinstance(route, dict):
                error = VariableDecodeError(self._variable_name('ROUTES'), f'route {url} is not a JSON object')
                if self.strict_decode:
                    raise error
                logger.warning(f'{error}, ignored')
                return {}
            route['url'] = url
        return routes

    # state

    def _has(self, name: str) -> bool:
        return self._get_value(name) is not None

    @property
    def state(self) -> PlatformState:
        return _STATE_TABLE[(self.is_valid_platform(), self._has('ENVIRONMENT'))]

    def is_valid_platform(self) -> bool:
        """Whether the code is running on a platform deployment, build or runtime"""
        return self._has('APPLICATION_NAME')

    def in_build(self) -> bool:
        return self.state is PlatformState.BUILD

    def in_runtime(self) -> bool:
        return self.state is PlatformState.RUNTIME

    def in_local(self) -> bool:
        """Local access to routes/relationships is allowed, outside a platform and without runtime markers"""
        if not self.allow_local or self.is_valid_platform():
            return False
        return not self._has('ENVIRONMENT') and not self._has('BRANCH')

    def on_dedicated(self) -> bool:
        return self.is_valid_platform() and self._get_value('MODE') == 'enterprise'

    @deprecated('on_enterprise() is deprecated, use on_dedicated() instead')
    def on_enterprise(self) -> bool:
        return self.on_dedicated()

    def on_production(self) -> t.Optional[bool]:
        """Whether the current branch is the production one, None outside of runtime"""
        if not self.in_runtime():
            return None
        production_branch = 'production' if self.on_dedicated() else 'master'
        return self._get_value('BRANCH') == production_branch

    # guards

    def _ensure_valid(self, name: t.Optional[str] = None) -> None:
        if not self.is_valid_platform():
            raise NotValidPlatformError(name)

    def _ensure_runtime(self, name: t.Optional[str] = None) -> None:
        if self.in_build():
            raise BuildTimeVariableAccessError(name)

    def _ensure_runtime_data(self, name: str) -> None:
        if self.in_local():
            return
        self._ensure_valid(name)
        self._ensure_runtime(name)

    # routes

    def routes(self) -> t.Dict[str, Route]:
        """All routes, keyed by URL, in the order they were defined"""
        self._ensure_runtime_data('routes')
        return copy.deepcopy(self._routes)

    def get_route(self, route_id: str) -> Route:
        """Get the first route with the given id

        Raises:
            RouteNotFoundError: no route has this id
        """
        for route in self.routes().values():
            if route.get('id') == route_id:
                return route
        raise RouteNotFoundError(f'No such route id found: {route_id}')

    def get_primary_route(self) -> Route:
        for route in self.routes().values():
            if route.get('primary') is True:
                return route
        raise RouteNotFoundError('No primary route found. This is not expected, please check your routes.')

    def get_upstream_routes(self, app_name: t.Optional[str] = None) -> t.Dict[str, Route]:
        """Routes that point to an application rather than redirect

        Args:
            app_name (str, optional): only return routes to this application.
                The dedicated flavour of the upstream name (`<app_name>:http`) also matches.

        Returns:
            Dict[str, Route]: routes keyed by URL
        """
        if app_name is None:
            accepted: t.Optional[t.Tuple[str, ...]] = None
        else:
            accepted = (app_name, f'{app_name}:http')

        def _match(route: Route) -> bool:
            upstream = route.get('upstream')
            if accepted is None:
                return bool(upstream)
            return upstream in accepted

        return {url: route for url, route in self.routes().items() if _match(route)}

    # relationships

    def credentials(self, relationship: str, index: int = 0) -> Credentials:
        """Get the credentials of a relationship

        Args:
            relationship (str): relationship name, as defined in the app configuration
            index (int, optional): which service of the relationship. Defaults to 0.

        Raises:
            NotValidPlatformError: not running on a platform
            BuildTimeVariableAccessError: relationships do not exist during build
            CredentialsNotFoundError: the relationship or index is not defined

        Returns:
            Credentials: host, port, scheme, username etc. of the service
        """
        self._ensure_runtime_data('relationships')
        entries = self._relationships.get(relationship) or []
        if index < 0 or index >= len(entries):
            raise CredentialsNotFoundError(relationship, index)
        return copy.deepcopy(entries[index])

    def relationships(self) -> t.Dict[str, t.List[Credentials]]:
        """All relationships, each a list of credentials"""
        self._ensure_runtime_data('relationships')
        return copy.deepcopy(self._relationships)

    def has_relationship(self, name: str) -> bool:
        return bool(self._relationships.get(name))

    # variables / application

    def variable(self, name: str, default: t.Any = None) -> t.Any:
        """Get a custom variable, `default` if it is not defined or not running on a platform"""
        if not self.is_valid_platform():
            return default
        return copy.deepcopy(self._variables.get(name, default))

    def variables(self) -> t.Dict[str, t.Any]:
        self._ensure_valid('variables')
        return copy.deepcopy(self._variables)

    def application(self) -> t.Dict[str, t.Any]:
        self._ensure_valid('application')
        return copy.deepcopy(self._application)

    # credential formatters

    def register_formatter(self, name: str, formatter: CredentialFormatter) -> t.Self:
        """Register a credential formatter, replacing any formatter of the same name

        Args:
            name (str): formatter name, used by `formatted_credentials()`
            formatter (Callable): takes the credentials of a relationship, returns anything

        Returns:
            Config: self, so registrations can be chained
        """
        with self._formatters_lock:
            if name in self._formatters:
                logger.debug(f'Replacing credential formatter: {name}')
            self._formatters[name] = formatter
        return self

    def formatted_credentials(self, relationship: str, formatter_name: str) -> t.Any:
        """Credentials of the first service of a relationship, in the shape the formatter returns"""
        with self._formatters_lock:
            formatter = self._formatters.get(formatter_name)
        if formatter is None:
            raise NoCredentialFormatterFoundError(formatter_name)
        return formatter(self.credentials(relationship))


def config() -> Config:
    """Create a Config bound to the current process environment"""
    return Config()
