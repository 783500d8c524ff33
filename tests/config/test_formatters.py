from typing import Any, Dict, List

import pytest

from platformconfig import (
    BuildTimeVariableAccessError,
    Config,
    CredentialsNotFoundError,
    NoCredentialFormatterFoundError,
    NotValidPlatformError,
)
from platformconfig.config.formatters import puppeteer_formatter, solr_node_formatter


def test_formatter_not_found(runtime_env: Dict[str, str]) -> None:
    c = Config(runtime_env)
    with pytest.raises(NoCredentialFormatterFoundError) as e:
        c.formatted_credentials('database', 'not-existing')
    assert e.value.formatter_name == 'not-existing'
    assert 'not-existing' in str(e.value)
    # checked before the relationship
    for relationship in ('missing', 'database'):
        with pytest.raises(NoCredentialFormatterFoundError):
            Config({}).formatted_credentials(relationship, 'not-existing')


def test_registered_formatter(runtime_env: Dict[str, str]) -> None:
    c = Config(runtime_env)
    calls: List[Dict[str, Any]] = []

    def formatter(credentials: Dict[str, Any]) -> str:
        calls.append(credentials)
        return 'stuff'

    assert c.register_formatter('test', formatter) is c
    assert c.formatted_credentials('database', 'test') == 'stuff'
    assert calls == [c.credentials('database')]

    # overwrite
    c.register_formatter('test', lambda creds: f"{creds['scheme']}://{creds['host']}:{creds['port']}/{creds['path']}")
    assert c.formatted_credentials('database', 'test') == 'mysql://database.internal:3306/main'
    # registry is per instance
    with pytest.raises(NoCredentialFormatterFoundError):
        Config(runtime_env).formatted_credentials('database', 'test')


def test_formatter_errors_from_credentials(runtime_env: Dict[str, str], build_env: Dict[str, str]) -> None:
    with pytest.raises(CredentialsNotFoundError):
        Config(runtime_env).formatted_credentials('missing', 'solr-node')
    with pytest.raises(BuildTimeVariableAccessError):
        Config(build_env).formatted_credentials('solr', 'solr-node')
    with pytest.raises(NotValidPlatformError):
        Config({}).formatted_credentials('solr', 'solr-node')


def test_solr_node_formatter(runtime_env: Dict[str, str]) -> None:
    c = Config(runtime_env)
    formatted = c.formatted_credentials('solr', 'solr-node')
    assert formatted == {
        'host': 'solr.internal',
        'port': 8080,
        'protocol': 'http',
        'core': 'collection1',
    }
    assert solr_node_formatter({'host': 'h', 'port': 1, 'path': 'solr/core2/'})['core'] == 'core2'
    assert solr_node_formatter({'host': 'h', 'port': 1, 'path': 'main'})['core'] == 'main'


def test_puppeteer_formatter(runtime_env: Dict[str, str]) -> None:
    c = Config(runtime_env)
    assert c.formatted_credentials('headless', 'puppeteer') == 'http://169.254.16.215:9222'
    assert puppeteer_formatter({'ip': '10.0.0.1', 'port': 9222}) == 'http://10.0.0.1:9222'


if __name__ == '__main__':
    # Breakpoints do not work with coverage, disable coverage for debugging
    pytest.main([__file__, '--no-cov', '--log-cli-level=DEBUG'])
