import os
import pathlib

import yaml

from ..common import compat_typing as t
from ..common.encoding import encode_base64_json
from ..logger import get_logger
from .platform_config import DEFAULT_PREFIX, STRUCTURAL_VARIABLES, UNPREFIXED_VARIABLES

logger = get_logger('env_file')

ENV_FILE_BASE_NAME = 'PlatformEnv.yml'


def find_env_file() -> str:
    """Find the env file to use when none is given.

    Searched in order:
        - env variable: PLATFORMCONFIG_ENV_FILE
        - Current working directory
        - <HOME>/.platformconfig/

    Returns:
        str: file path, empty string if not found
    """
    env_file = os.getenv('PLATFORMCONFIG_ENV_FILE', '')
    if env_file:
        return env_file
    for _dir in (pathlib.Path('.'), pathlib.Path.home() / '.platformconfig'):
        candidate = _dir / ENV_FILE_BASE_NAME
        if candidate.is_file():
            return str(candidate)
    return ''


def _to_env_value(key: str, value: t.Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        # YAML booleans, keep the JSON spelling
        return 'true' if value else 'false'
    if isinstance(value, (dict, list)):
        raise ValueError(f'{key}: only {", ".join(STRUCTURAL_VARIABLES)} may be given as a mapping or list')
    return str(value)


def load_env_file(
    config_file: t.Optional[t.Union[str, pathlib.Path]] = None, env_tag: str = 'default', prefix: str = DEFAULT_PREFIX
) -> t.Dict[str, str]:
    """Load a synthetic platform environment from a YAML file

    The file maps env tags to variables, the prefix may be omitted from variable names.
    Routes, relationships, variables and application may be written as plain YAML,
    they are base64 JSON encoded as the platform does:

        ```yaml
        default:
            APPLICATION_NAME: app
            ENVIRONMENT: main
            PORT: 8888
            RELATIONSHIPS:
                database:
                  - host: localhost
                    port: 3306
        ```

    Args:
        config_file (str, optional): path of the YAML file. Defaults to `find_env_file()`.
        env_tag (str, optional): top level key to use. Defaults to 'default'.
        prefix (str, optional): prefix added to variable names. Defaults to 'PLATFORM_'.

    Raises:
        FileNotFoundError: no env file found
        KeyError: env_tag not in env file
        ValueError: env file has an unexpected structure

    Returns:
        Dict[str, str]: environment mapping to pass to Config
    """
    config_file = config_file or find_env_file()
    if not config_file:
        raise FileNotFoundError(f'Could not find env file: {ENV_FILE_BASE_NAME}')
    with open(config_file, 'r', encoding='utf-8') as f:
        raw_data = yaml.safe_load(f)
    if not isinstance(raw_data, dict):
        raise ValueError(f'Env file {config_file} must contain a mapping of env tags')
    if env_tag not in raw_data:
        raise KeyError(f'Env tag {env_tag} not found in {config_file}')
    tag_data = raw_data[env_tag] or {}
    if not isinstance(tag_data, dict):
        raise ValueError(f'Env tag {env_tag} in {config_file} must be a mapping of variables')

    environ: t.Dict[str, str] = {}
    for key, value in tag_data.items():
        if value is None:
            continue
        key = str(key).upper()
        name = key[len(prefix) :] if key.startswith(prefix.upper()) else key
        key = name if name in UNPREFIXED_VARIABLES else prefix + name
        if name in STRUCTURAL_VARIABLES and isinstance(value, (dict, list)):
            environ[key] = encode_base64_json(value)
        else:
            environ[key] = _to_env_value(key, value)
    logger.debug(f'Loaded {len(environ)} variables from {config_file}/{env_tag}')
    return environ
