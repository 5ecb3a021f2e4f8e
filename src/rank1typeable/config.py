"""TOML config loading for rank1.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from rank1typeable.printer import DEFAULT_VARIABLE_PREFIX
from rank1typeable.registry import Registry

CONFIG_NAME = "rank1.toml"


@dataclass
class PrinterConfig:
    variable_prefix: str = DEFAULT_VARIABLE_PREFIX
    color: bool = True


@dataclass(frozen=True)
class ConstructorDecl:
    package: str
    module: str
    name: str


@dataclass
class Rank1Config:
    printer: PrinterConfig = field(default_factory=PrinterConfig)
    constructors: list[ConstructorDecl] = field(default_factory=list)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find rank1.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> Rank1Config:
    """Parse a rank1.toml file into a Rank1Config."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = Rank1Config()

    if "printer" in data:
        prn = data["printer"]
        prefix = prn.get("variable_prefix", DEFAULT_VARIABLE_PREFIX)
        if not prefix or not prefix[0].isupper() or not prefix.isalnum():
            raise ValueError(
                f"{path}: printer.variable_prefix must be a capitalized "
                f"alphanumeric name, got {prefix!r}"
            )
        config.printer = PrinterConfig(
            variable_prefix=prefix,
            color=prn.get("color", True),
        )

    for entry in data.get("constructor", []):
        try:
            decl = ConstructorDecl(
                package=entry["package"],
                module=entry["module"],
                name=entry["name"],
            )
        except KeyError as e:
            raise ValueError(f"{path}: [[constructor]] entry is missing {e}") from e
        config.constructors.append(decl)

    return config


def build_registry(config: Rank1Config) -> Registry:
    """The built-in registry extended with the constructors declared in config."""
    registry = Registry.with_builtins()
    for decl in config.constructors:
        registry.register(decl.package, decl.module, decl.name)
    return registry
