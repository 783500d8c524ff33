# pylint: disable=unused-import
# flake8: noqa: F401
# ruff: noqa: F401

from .common.encoding import decode_base64_json, encode_base64_json
from .config import (
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
    load_env_file,
)
from .config.formatters import puppeteer_formatter, solr_node_formatter
from .logger import get_logger
