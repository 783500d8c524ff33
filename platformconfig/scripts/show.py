import argparse
import logging
import sys
from typing import Any, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

try:
    # Run from `python -m platformconfig.scripts.show`
    from ..config import Config, PlatformConfigError, PlatformState
    from ..logger import MultiLineFormatter
except ImportError:
    from platformconfig.config import Config, PlatformConfigError, PlatformState
    from platformconfig.logger import MultiLineFormatter

RAW_PROPERTIES = [
    'application_name',
    'app_dir',
    'project',
    'tree_id',
    'project_entropy',
    'branch',
    'environment',
    'document_root',
    'smtp_host',
    'port',
    'socket',
]
SECRET_KEYS = ('password', 'secret', 'token')
MASK = '******'
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _read_property(cfg: Config, name: str) -> str:
    try:
        value = getattr(cfg, name)
    except PlatformConfigError as e:
        return f'[dim]{e}[/dim]'
    return '' if value is None else str(value)


def _masked(key: str, value: Any, show_credentials: bool) -> str:
    if not show_credentials and any(s in key.lower() for s in SECRET_KEYS) and value:
        return MASK
    return '' if value is None else str(value)


def properties_table(cfg: Config) -> Table:
    table = Table('Property', 'Value', title='Properties', box=box.SIMPLE)
    for name in RAW_PROPERTIES:
        table.add_row(name, _read_property(cfg, name))
    return table


def routes_table(cfg: Config) -> Table:
    table = Table('URL', 'Type', 'Upstream / To', 'Id', 'Primary', title='Routes', box=box.SIMPLE)
    for url, route in cfg.routes().items():
        table.add_row(
            url,
            str(route.get('type', '')),
            str(route.get('upstream') or route.get('to') or ''),
            str(route.get('id') or ''),
            'yes' if route.get('primary') is True else '',
        )
    return table


def relationships_table(cfg: Config, show_credentials: bool = False) -> Table:
    table = Table('Relationship', 'Index', 'Credentials', title='Relationships', box=box.SIMPLE)
    for name, entries in cfg.relationships().items():
        for index, creds in enumerate(entries):
            text = ', '.join(f'{k}={_masked(k, v, show_credentials)}' for k, v in creds.items())
            table.add_row(name, str(index), text)
    return table


def show(cfg: Config, console: Optional[Console] = None, show_credentials: bool = False) -> int:
    """Print what the platform environment contains, return the exit code"""
    console = console or Console()
    local = cfg.in_local()
    state = 'local' if local and cfg.state is PlatformState.NOT_A_PLATFORM else cfg.state.value
    console.print(f'Platform state: [bold]{state}[/bold]')
    if cfg.state is PlatformState.NOT_A_PLATFORM and not local:
        console.print('Not running on a platform, no APPLICATION_NAME found.')
        return 1
    if cfg.is_valid_platform():
        console.print(properties_table(cfg))
        if cfg.in_runtime():
            console.print(f'Dedicated: {cfg.on_dedicated()}, production: {cfg.on_production()}')
    if cfg.in_runtime() or local:
        console.print(routes_table(cfg))
        console.print(relationships_table(cfg, show_credentials))
    if cfg.is_valid_platform():
        console.print(f'Variables: {", ".join(cfg.variables()) or "-"}')
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Show the platform configuration of the current environment')
    parser.add_argument('--env-file', help='read the environment from a YAML env file instead of the process')
    parser.add_argument('--env-tag', default='default', help='env tag in the env file')
    parser.add_argument('--prefix', default='PLATFORM_', help='platform variable prefix')
    parser.add_argument('--local', action='store_true', help='allow routes and relationships without runtime markers')
    parser.add_argument('--show-credentials', action='store_true', help='do not mask passwords')
    parser.add_argument(
        '--log-level', default='WARNING', type=str.upper, choices=LOG_LEVELS, help='python logging level'
    )
    args = parser.parse_args(argv)

    handler = logging.StreamHandler()
    handler.setFormatter(MultiLineFormatter('[%(asctime)s] %(levelname)s - %(message)s'))
    logging.basicConfig(level=args.log_level, handlers=[handler])

    kwargs = {'allow_local': True} if args.local else {}
    try:
        if args.env_file:
            cfg = Config.from_env_file(args.env_file, env_tag=args.env_tag, prefix=args.prefix, **kwargs)
        else:
            cfg = Config(prefix=args.prefix, **kwargs)
    except (OSError, KeyError, ValueError) as e:
        print(f'Failed to load platform config: {e}', file=sys.stderr)
        return 2
    return show(cfg, show_credentials=args.show_credentials)


if __name__ == '__main__':
    sys.exit(main())
