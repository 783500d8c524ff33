"""Built-in credential formatters.

A formatter takes one credential record of a relationship and returns whatever
shape a client library expects. New ones are added with `Config.register_formatter`.
"""

from ..common import compat_typing as t

Credentials: t.TypeAlias = t.Dict[str, t.Any]
CredentialFormatter: t.TypeAlias = t.Callable[[Credentials], t.Any]


def solr_node_formatter(credentials: Credentials) -> t.Dict[str, t.Any]:
    """Connection options for the solr-node client

    The core name is the last segment of the relationship path, eg: `/solr/collection1` -> `collection1`
    """
    path = str(credentials.get('path') or '')
    return {
        'host': credentials['host'],
        'port': credentials['port'],
        'protocol': 'http',
        'core': path.rstrip('/').split('/')[-1],
    }


def puppeteer_formatter(credentials: Credentials) -> str:
    """Browser URL of a headless chrome service, for puppeteer.connect()"""
    return f"http://{credentials['ip']}:{credentials['port']}"


BUILTIN_FORMATTERS: t.Dict[str, CredentialFormatter] = {
    'solr-node': solr_node_formatter,
    'puppeteer': puppeteer_formatter,
}
