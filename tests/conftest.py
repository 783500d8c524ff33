import copy
from typing import Any, Dict

import pytest

from platformconfig.common.encoding import encode_base64_json

BASE_URL = 'main-7rqtwti-gcpjkefjk4wc2.us-2.example.site'

ROUTES: Dict[str, Any] = {
    f'https://www.{BASE_URL}/': {
        'primary': True,
        'id': 'main',
        'type': 'upstream',
        'upstream': 'app',
        'original_url': 'https://www.{default}/',
        'attributes': {},
    },
    f'https://{BASE_URL}/': {
        'primary': False,
        'id': None,
        'type': 'redirect',
        'to': f'https://www.{BASE_URL}/',
        'original_url': 'https://{default}/',
    },
    f'http://www.{BASE_URL}/': {
        'primary': False,
        'id': None,
        'type': 'redirect',
        'to': f'https://www.{BASE_URL}/',
        'original_url': 'http://www.{default}/',
    },
    f'http://{BASE_URL}/': {
        'primary': False,
        'id': None,
        'type': 'redirect',
        'to': f'https://{BASE_URL}/',
        'original_url': 'http://{default}/',
    },
    f'https://blog.{BASE_URL}/': {
        'primary': False,
        'id': 'blog',
        'type': 'upstream',
        'upstream': 'app',
        'original_url': 'https://blog.{default}/',
    },
    f'https://api.{BASE_URL}/': {
        'primary': False,
        'id': None,
        'type': 'upstream',
        'upstream': 'api',
        'original_url': 'https://api.{default}/',
    },
}

RELATIONSHIPS: Dict[str, Any] = {
    'database': [
        {
            'scheme': 'mysql',
            'type': 'mysql:10.2',
            'host': 'database.internal',
            'port': 3306,
            'path': 'main',
            'username': 'user',
            'password': 'secret-pw',
            'rel': 'mysql',
        }
    ],
    'solr': [
        {
            'scheme': 'solr',
            'type': 'solr:8.0',
            'host': 'solr.internal',
            'port': 8080,
            'path': '/x/collection1',
            'rel': 'solr',
        }
    ],
    'headless': [
        {
            'scheme': 'http',
            'type': 'chrome-headless:73',
            'host': 'headless.internal',
            'ip': '169.254.16.215',
            'port': 9222,
            'rel': 'http',
        }
    ],
    'empty': [],
}

VARIABLES: Dict[str, Any] = {
    'somevar': 'someval',
    'env:DEBUG': 'false',
    'nested': {'list': [1, 2, 3]},
}

APPLICATION: Dict[str, Any] = {
    'name': 'app',
    'type': 'python:3.11',
    'build': {'flavor': 'none'},
    'web': {'commands': {'start': 'gunicorn app:app'}},
}

BUILD_ENV = {
    'PLATFORM_APPLICATION_NAME': 'app',
    'PLATFORM_APP_DIR': '/app',
    'PLATFORM_PROJECT': 'test-project',
    'PLATFORM_TREE_ID': 'abc123',
    'PLATFORM_PROJECT_ENTROPY': 'def789',
}

RUNTIME_ENV = {
    'PLATFORM_BRANCH': 'feature-x',
    'PLATFORM_ENVIRONMENT': 'feature-x-hgi456',
    'PLATFORM_DOCUMENT_ROOT': '/app/web',
    'PLATFORM_SMTP_HOST': '1.2.3.4',
    'PORT': '8080',
    'SOCKET': 'unix://tmp/blah.sock',
}


def make_build_env() -> Dict[str, str]:
    env = dict(BUILD_ENV)
    env['PLATFORM_APPLICATION'] = encode_base64_json(APPLICATION)
    env['PLATFORM_VARIABLES'] = encode_base64_json(VARIABLES)
    return env


def make_runtime_env() -> Dict[str, str]:
    env = make_build_env()
    env['PLATFORM_ROUTES'] = encode_base64_json(ROUTES)
    env['PLATFORM_RELATIONSHIPS'] = encode_base64_json(RELATIONSHIPS)
    env.update(RUNTIME_ENV)
    return env


@pytest.fixture
def build_env() -> Dict[str, str]:
    return make_build_env()


@pytest.fixture
def runtime_env() -> Dict[str, str]:
    return make_runtime_env()


@pytest.fixture
def routes_data() -> Dict[str, Any]:
    return copy.deepcopy(ROUTES)


@pytest.fixture
def platform_data() -> Dict[str, Any]:
    """The decoded content of the structural variables in `runtime_env`"""
    return copy.deepcopy(
        {'routes': ROUTES, 'relationships': RELATIONSHIPS, 'variables': VARIABLES, 'application': APPLICATION}
    )

