"""rank1 command-line interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import click

from rank1typeable import __version__
from rank1typeable.codec import decode, encode
from rank1typeable.config import Rank1Config, build_registry, find_config, load_config
from rank1typeable.errors import DecodeError, DiagnosticRenderer, TypeExprError, UnifyError
from rank1typeable.parser import parse_type
from rank1typeable.printer import TypeRepPrinter
from rank1typeable.registry import Registry
from rank1typeable.rewrite import normalize
from rank1typeable.types import TypeRep
from rank1typeable.unification import fun_result_ty, is_instance_of


@dataclass
class _Session:
    config: Rank1Config
    registry: Registry
    printer: TypeRepPrinter
    renderer: DiagnosticRenderer

    def parse(self, source: str) -> TypeRep:
        try:
            return parse_type(source, self.registry, self.config.printer.variable_prefix)
        except TypeExprError as e:
            for diag in e.diagnostics:
                click.echo(self.renderer.render(diag), err=True)
            raise SystemExit(1)

    def fail(self, error: UnifyError, *notes: str) -> NoReturn:
        click.echo(self.renderer.render(error.to_diagnostic(*notes)), err=True)
        raise SystemExit(1)


def _load_config(config_path: str | None) -> Rank1Config:
    if config_path is not None:
        return load_config(Path(config_path))
    try:
        return load_config(find_config(Path.cwd()))
    except FileNotFoundError:
        return Rank1Config()


@click.group()
@click.version_option(__version__, prog_name="rank1")
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to rank1.toml (default: search upwards from the current directory).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log unification steps to stderr.")
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool, no_color: bool) -> None:
    """Rank-1 polymorphic type representations: instance checks and application."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s - %(levelname)s - %(message)s",
        )
    try:
        config = _load_config(config_path)
        registry = build_registry(config)
    except (ValueError, OSError) as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)
    ctx.obj = _Session(
        config=config,
        registry=registry,
        printer=TypeRepPrinter(config.printer.variable_prefix),
        renderer=DiagnosticRenderer(color=config.printer.color and not no_color),
    )


@main.command()
@click.argument("required")
@click.argument("actual")
@click.pass_obj
def check(session: _Session, required: str, actual: str) -> None:
    """Check that a term of type ACTUAL can be used where REQUIRED is expected."""
    t_required = session.parse(required)
    t_actual = session.parse(actual)
    error = is_instance_of(t_required, t_actual)
    if error is not None:
        session.fail(
            error,
            f"required: {session.printer.show(t_required)}",
            f"actual:   {session.printer.show(t_actual)}",
        )
    click.echo(
        f"ok: {session.printer.show(t_actual)} is an instance of "
        f"{session.printer.show(t_required)}"
    )


@main.command()
@click.argument("function")
@click.argument("argument")
@click.pass_obj
def apply(session: _Session, function: str, argument: str) -> None:
    """Print the result type of applying FUNCTION to ARGUMENT."""
    t_fun = session.parse(function)
    t_arg = session.parse(argument)
    result = fun_result_ty(t_fun, t_arg)
    if isinstance(result, UnifyError):
        session.fail(result, f"cannot apply {session.printer.show(t_fun)}")
    click.echo(session.printer.show(result))


@main.command(name="normalize")
@click.argument("type_expr", metavar="TYPE")
@click.pass_obj
def normalize_cmd(session: _Session, type_expr: str) -> None:
    """Renumber the variables of TYPE in first-occurrence order."""
    click.echo(session.printer.show(normalize(session.parse(type_expr))))


@main.command()
@click.argument("type_expr", metavar="TYPE")
@click.pass_obj
def show(session: _Session, type_expr: str) -> None:
    """Print TYPE in canonical form."""
    click.echo(session.printer.show(session.parse(type_expr)))


@main.command(name="encode")
@click.argument("type_expr", metavar="TYPE")
@click.pass_obj
def encode_cmd(session: _Session, type_expr: str) -> None:
    """Print the binary encoding of TYPE as hex."""
    click.echo(encode(session.parse(type_expr)).hex())


@main.command(name="decode")
@click.argument("hex_data", metavar="HEX")
@click.pass_obj
def decode_cmd(session: _Session, hex_data: str) -> None:
    """Decode a hex-encoded type representation."""
    try:
        t = decode(bytes.fromhex(hex_data))
    except DecodeError as e:
        click.echo(session.renderer.render(e.to_diagnostic()), err=True)
        raise SystemExit(1)
    except ValueError as e:
        click.echo(f"error: invalid hex: {e}", err=True)
        raise SystemExit(1)
    click.echo(session.printer.show(t))
