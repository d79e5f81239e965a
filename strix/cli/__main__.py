"""Strix CLI - Main Entry Point.

Commands:
    routes - Compile a module and list its routes (handlers are not invoked)
    graph  - Show the provider dependency tree and resolution order
    boot   - Run a full bootstrap, including simulated dispatch

TARGET is an import path of the form ``package.module:ModuleClass``.
"""

import importlib
import json
import logging
import os
import sys
from typing import Any, Optional

import click

from . import __version__, __cli_name__
from .utils.colors import (
    success, error, warning, info, dim, bold,
    banner, section, kv, table,
    _CHECK, _CROSS,
)
from ..faults import StrixError


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# ═══════════════════════════════════════════════════════════════════════════
# Custom Click help formatter
# ═══════════════════════════════════════════════════════════════════════════


class StrixGroup(click.Group):
    """Click group subclass with branded help output."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        if ctx.parent is None:
            banner("Strix", subtitle=f"v{__version__}  {_CHECK}  annotation-driven bootstrap")
            click.echo()

        super().format_help(ctx, formatter)

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Format command listing with aligned columns."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=48)))

        if commands:
            with formatter.section(click.style("Commands", fg="cyan", bold=True)):
                max_len = max(len(c[0]) for c in commands) + 2
                for name, help_text in commands:
                    formatter.write(f"  {click.style(name.ljust(max_len), fg='green')} {help_text}\n")


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════


def load_target(target: str) -> Any:
    """
    Import ``package.module:Attr`` and return the attribute.

    Raises:
        click.BadParameter: If the path is malformed or does not import
    """
    module_path, sep, attr_path = target.partition(":")
    if not sep or not module_path or not attr_path:
        raise click.BadParameter(
            f"expected 'package.module:ModuleClass', got {target!r}",
            param_hint="TARGET",
        )

    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        obj = importlib.import_module(module_path)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import {module_path!r}: {exc}", param_hint="TARGET") from exc

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.BadParameter(
                f"module {module_path!r} has no attribute {attr_path!r}",
                param_hint="TARGET",
            ) from None
    return obj


def _fail(exc: StrixError, verbose: bool, as_json: bool = False) -> None:
    if as_json:
        click.echo(json.dumps({"error": exc.to_dict()}, indent=2, default=str))
        sys.exit(1)

    headline, _, details = exc.message.partition("\n")
    error(f"  {_CROSS} [{exc.code}] {headline}")
    if verbose and details:
        for line in details.strip("\n").splitlines():
            dim(f"    {line}")
    sys.exit(1)


def _load_config(config_path: Optional[str], **overrides):
    from ..config import load_config
    return load_config(config_path, overrides={k: v for k, v in overrides.items() if v is not None})


# ═══════════════════════════════════════════════════════════════════════════
# Commands
# ═══════════════════════════════════════════════════════════════════════════


@click.group(cls=StrixGroup)
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Show full error details')
@click.pass_context
def cli(ctx, verbose: bool):
    """Inspect and boot annotated modules.

    \b
    Quick start:
      strix routes myapp.main:AppModule
      strix graph myapp.main:AppModule
      strix boot myapp.main:AppModule
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose


@cli.command('routes')
@click.argument('target')
@click.option('--json', 'as_json', is_flag=True, help='Print the route table as JSON')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='YAML config file')
@click.pass_context
def routes(ctx, target: str, as_json: bool, config_path: Optional[str]):
    """
    Compile TARGET and list its routes in compilation order.

    Providers and controllers are constructed; handlers are not invoked.

    Examples:
      strix routes myapp.main:AppModule
      strix routes myapp.main:AppModule --json
    """
    from ..controller import RouteTable, compile_routes
    from ..manifest import get_manifest
    from ..metadata import default_store

    module = load_target(target)
    try:
        config = _load_config(config_path)
        manifest = get_manifest(default_store, module)
        table_ = RouteTable(compile_routes(module, duplicate_policy=config.duplicate_policy))
    except StrixError as exc:
        _fail(exc, ctx.obj['verbose'], as_json)
        return

    if as_json:
        data = table_.to_dict()
        data["module"] = {"name": manifest.name, "fingerprint": manifest.fingerprint()}
        click.echo(json.dumps(data, indent=2))
        return

    section(f"Routes ({len(table_)})")
    if not table_:
        dim("  No routes declared")
        return

    table(
        ["Method", "Path", "Handler"],
        [
            [e.verb.value, e.full_path, f"{e.controller.__name__}.{e.method_name}()"]
            for e in table_
        ],
    )

    shadowed = table_.duplicates()
    if shadowed:
        click.echo()
        for (verb, path), group in shadowed.items():
            warning(f"  ! {verb.value} {path} declared {len(group)} times; the last one wins")


@cli.command('graph')
@click.argument('target')
@click.pass_context
def graph(ctx, target: str):
    """
    Show TARGET's provider dependency tree and resolution order.

    Nothing is constructed. Exits non-zero if a cycle or a missing
    provider is found.

    Examples:
      strix graph myapp.main:AppModule
    """
    from ..di import Container, DependencyGraph
    from ..manifest import get_manifest
    from ..metadata import default_store

    module = load_target(target)
    try:
        manifest = get_manifest(default_store, module)
        container = Container(default_store, providers=manifest.providers + manifest.controllers)
        dep_graph = DependencyGraph.from_container(container)

        section(f"Dependencies of {manifest.name}")
        click.echo(dep_graph.get_tree_view())
        click.echo()

        missing = dep_graph.missing()
        order = dep_graph.get_resolution_order()
    except StrixError as exc:
        _fail(exc, ctx.obj['verbose'])
        return

    section("Resolution order")
    for i, token in enumerate(order, 1):
        click.echo(f"  {bold(str(i) + '.')} {token.__qualname__}")

    if missing:
        click.echo()
        for dependee, deps in missing.items():
            names = ", ".join(getattr(d, "__qualname__", repr(d)) for d in deps)
            error(f"  {_CROSS} {dependee.__qualname__} needs unregistered {names}")
        sys.exit(1)


@cli.command('boot')
@click.argument('target')
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    help='Logging level (default from config)',
)
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='YAML config file')
@click.option('--no-dispatch', is_flag=True, help='Skip the simulated handler invocation')
@click.pass_context
def boot(ctx, target: str, log_level: Optional[str], config_path: Optional[str], no_dispatch: bool):
    """
    Bootstrap TARGET: construct providers, compile routes, and invoke
    each handler once.

    Examples:
      strix boot myapp.main:AppModule
      strix boot myapp.main:AppModule --log-level DEBUG
    """
    from ..engine import bootstrap

    module = load_target(target)
    try:
        config = _load_config(
            config_path,
            log_level=log_level.upper() if log_level else None,
            simulate_dispatch=False if no_dispatch else None,
        )
        logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
        app = bootstrap(module, config=config)
    except StrixError as exc:
        _fail(exc, ctx.obj['verbose'])
        return

    click.echo()
    success(f"  {_CHECK} Bootstrapped {app.manifest.name}")
    kv("Providers", str(len(app.manifest.providers)))
    kv("Controllers", str(len(app.manifest.controllers)))
    kv("Routes", str(len(app.routes)))
    kv("Fingerprint", app.manifest.fingerprint())
    if not config.simulate_dispatch:
        info("  Handlers were not invoked")


def main():
    """Entry point for `strix` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
