"""Command line interface: ``carafe --app module:name <command>``."""
from __future__ import annotations

import ast
import os
import sys
import typing as t
from operator import itemgetter

import click
from werkzeug.utils import import_string

if t.TYPE_CHECKING:
    from types import ModuleType
    from carafe.app import Carafe


class NoAppException(click.UsageError):
    """Raised if an application cannot be found or loaded."""


def find_best_app(module: ModuleType) -> Carafe:
    """Return the application held by ``module``.

    Looks for an ``app`` or ``application`` attribute, then for a single
    :class:`~carafe.app.Carafe` instance, then for a ``create_app``
    factory called without arguments.
    """
    from carafe.app import Carafe

    for attr_name in ("app", "application"):
        app = getattr(module, attr_name, None)
        if isinstance(app, Carafe):
            return app

    matches = [v for v in module.__dict__.values() if isinstance(v, Carafe)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise NoAppException(
            f"Detected multiple applications in module '{module.__name__}'."
            f" Use '{module.__name__}:name' to specify the correct one."
        )

    factory = getattr(module, "create_app", None)
    if callable(factory):
        app = factory()
        if isinstance(app, Carafe):
            return app

    raise NoAppException(
        f"Failed to find an application or factory in module '{module.__name__}'."
        f" Use '{module.__name__}:name' to specify one."
    )


def find_app_by_string(module: ModuleType, app_name: str) -> Carafe:
    """Resolve ``app_name``, an attribute name or a call to a factory with
    literal arguments such as ``create_app("dev")``."""
    from carafe.app import Carafe

    try:
        expr = ast.parse(app_name.strip(), mode="eval").body
    except SyntaxError:
        raise NoAppException(
            f"Failed to parse {app_name!r} as an attribute name or function call."
        ) from None

    if isinstance(expr, ast.Name):
        name, args, kwargs = expr.id, [], {}
    elif isinstance(expr, ast.Call) and isinstance(expr.func, ast.Name):
        name = expr.func.id
        try:
            args = [ast.literal_eval(arg) for arg in expr.args]
            kwargs = {
                kw.arg: ast.literal_eval(kw.value)
                for kw in expr.keywords
                if kw.arg is not None
            }
        except ValueError:
            raise NoAppException(
                f"Failed to parse arguments as literal values: {app_name!r}."
            ) from None
    else:
        raise NoAppException(
            f"Failed to parse {app_name!r} as an attribute name or function call."
        )

    try:
        attr = getattr(module, name)
    except AttributeError as e:
        raise NoAppException(
            f"Failed to find attribute {name!r} in {module.__name__!r}."
        ) from e

    app = attr(*args, **kwargs) if callable(attr) and not isinstance(attr, Carafe) else attr
    if isinstance(app, Carafe):
        return app

    raise NoAppException(
        f"A valid application was not obtained from '{module.__name__}:{app_name}'."
    )


def locate_app(import_str: str) -> Carafe:
    module_name, _, app_name = import_str.partition(":")
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    try:
        module = import_string(module_name)
    except ImportError as e:
        raise NoAppException(f"Could not import {module_name!r}: {e}") from None
    if app_name:
        return find_app_by_string(module, app_name)
    return find_best_app(module)


class ScriptInfo:
    """Carries the ``--app`` value to commands and loads it once."""

    def __init__(self, app_import_path: str | None = None) -> None:
        self.app_import_path = app_import_path
        self._loaded_app: Carafe | None = None

    def load_app(self) -> Carafe:
        if self._loaded_app is None:
            import_path = self.app_import_path or os.environ.get("CARAFE_APP")
            if not import_path:
                raise NoAppException(
                    "Could not locate an application. Use the '--app' option"
                    " or the 'CARAFE_APP' environment variable."
                )
            self._loaded_app = locate_app(import_path)
        return self._loaded_app


pass_script_info = click.make_pass_decorator(ScriptInfo, ensure=True)


@click.group(name="carafe", help="Management commands for carafe applications.")
@click.option(
    "--app",
    "-A",
    metavar="IMPORT",
    help="The application to load, as 'module:name' or 'module:create_app()'.",
)
@click.pass_context
def cli(ctx: click.Context, app: str | None) -> None:
    ctx.obj = ScriptInfo(app_import_path=app)


@cli.command("routes", short_help="Show the routes of the app.")
@click.option(
    "--sort",
    "-s",
    type=click.Choice(("endpoint", "methods", "controller", "rule")),
    default="endpoint",
    help="Column to sort routes by.",
)
@pass_script_info
def routes_command(info: ScriptInfo, sort: str) -> None:
    app = info.load_app()
    routes = list(app.routes)
    if not routes:
        click.echo("No routes were registered.")
        return

    rows = []
    for route in routes:
        methods = ", ".join(sorted(route.methods)) if route.methods else "*"
        rows.append([
            route.endpoint,
            methods,
            f"{route.controller.__name__}.{route.action}",
            route.rule,
        ])

    headers = ["Endpoint", "Methods", "Controller", "Rule"]
    rows.sort(key=itemgetter(headers.index(sort.capitalize())))
    rows.insert(0, headers)
    widths = [max(len(row[i]) for row in rows) for i in range(len(headers))]
    rows.insert(1, ["-" * w for w in widths])
    template = "  ".join(f"{{{i}:<{w}}}" for i, w in enumerate(widths))
    for row in rows:
        click.echo(template.format(*row).rstrip())


@cli.command("run", short_help="Run a development server.")
@click.option("--host", "-h", default="127.0.0.1", help="The interface to bind to.")
@click.option("--port", "-p", default=5000, help="The port to bind to.")
@click.option("--debug/--no-debug", default=None, help="Enable debug mode and the reloader.")
@pass_script_info
def run_command(info: ScriptInfo, host: str, port: int, debug: bool | None) -> None:
    app = info.load_app()
    click.echo(f" * Serving carafe app '{app.name}' (env: {app.config['ENV']})")
    app.run(host=host, port=port, debug=debug)


def main() -> None:
    cli.main(prog_name="carafe")
