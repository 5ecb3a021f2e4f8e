"""Type constructor identities and the process-wide constructor registry.

Every named type constructor is a ``TyCon`` with a 16-byte fingerprint
derived from its ``(package, module, name)`` triple. The registry hands out
one ``TyCon`` per triple and keeps the reserved sentinels the engine needs
internally (variable tag, Peano numerals, skolem marker).
"""

from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass, field
from typing import Iterator

FINGERPRINT_SIZE = 16


@dataclass(frozen=True, order=True)
class TyCon:
    """A named type constructor. Compared, hashed and ordered by fingerprint."""

    fingerprint: bytes
    package: str = field(compare=False)
    module: str = field(compare=False)
    name: str = field(compare=False)

    def __post_init__(self) -> None:
        if len(self.fingerprint) != FINGERPRINT_SIZE:
            raise ValueError(
                f"fingerprint must be {FINGERPRINT_SIZE} bytes, "
                f"got {len(self.fingerprint)}"
            )

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}"

    def __str__(self) -> str:
        return self.name


def fingerprint_of(package: str, module: str, name: str) -> bytes:
    """Stable fingerprint for a constructor triple."""
    digest = hashlib.blake2b(digest_size=FINGERPRINT_SIZE)
    for part in (package, module, name):
        digest.update(part.encode("utf-8"))
        digest.update(b"\0")
    return digest.digest()


class Registry:
    """Table from ``(package, module, name)`` to ``TyCon``."""

    def __init__(self) -> None:
        self._by_triple: dict[tuple[str, str, str], TyCon] = {}
        self._by_fingerprint: dict[bytes, TyCon] = {}
        self._by_name: dict[str, list[TyCon]] = {}
        self._classes: dict[type, TyCon] = {}
        self._lock = threading.Lock()

    @classmethod
    def with_builtins(cls) -> Registry:
        """A fresh registry holding the built-in and reserved constructors."""
        registry = cls()
        for tycon in REGISTRY:
            registry._add(tycon)
        for py_type, tycon in REGISTRY._classes.items():
            registry._classes[py_type] = tycon
        return registry

    def register(self, package: str, module: str, name: str) -> TyCon:
        """Return the constructor for a triple, creating it on first use."""
        key = (package, module, name)
        with self._lock:
            existing = self._by_triple.get(key)
            if existing is not None:
                return existing
            tycon = TyCon(fingerprint_of(package, module, name), package, module, name)
            self._add(tycon)
            return tycon

    def _add(self, tycon: TyCon) -> None:
        clash = self._by_fingerprint.get(tycon.fingerprint)
        if clash is not None and (clash.package, clash.module, clash.name) != (
            tycon.package, tycon.module, tycon.name
        ):
            raise ValueError(
                f"fingerprint collision between {clash.qualified_name} "
                f"and {tycon.qualified_name}"
            )
        self._by_triple[(tycon.package, tycon.module, tycon.name)] = tycon
        self._by_fingerprint[tycon.fingerprint] = tycon
        self._by_name.setdefault(tycon.name, []).append(tycon)

    def register_class(self, py_type: type, tycon: TyCon | None = None) -> TyCon:
        """Associate a Python class with a constructor (derived from the class if omitted)."""
        if tycon is None:
            package = py_type.__module__.partition(".")[0]
            tycon = self.register(package, py_type.__module__, py_type.__qualname__)
        with self._lock:
            self._classes[py_type] = tycon
        return tycon

    def tycon_for_class(self, py_type: type) -> TyCon:
        tycon = self._classes.get(py_type)
        if tycon is not None:
            return tycon
        return self.register_class(py_type)

    def lookup(self, name: str, module: str | None = None) -> TyCon | None:
        """Find a constructor by display name, optionally qualified by module.

        Reserved sentinels are never returned. Raises ``LookupError`` when an
        unqualified name is ambiguous.
        """
        candidates = [
            tc for tc in self._by_name.get(name, [])
            if tc.module != RESERVED_MODULE and tc.module != NAMESPACE_MODULE
        ]
        if module is not None:
            candidates = [tc for tc in candidates if tc.module == module]
        if not candidates:
            return None
        if len(candidates) > 1:
            modules = ", ".join(sorted(tc.module for tc in candidates))
            raise LookupError(f"ambiguous type constructor '{name}' (in {modules})")
        return candidates[0]

    def lookup_fingerprint(self, fingerprint: bytes) -> TyCon | None:
        return self._by_fingerprint.get(fingerprint)

    def __contains__(self, tycon: object) -> bool:
        return isinstance(tycon, TyCon) and tycon.fingerprint in self._by_fingerprint

    def __iter__(self) -> Iterator[TyCon]:
        return iter(list(self._by_fingerprint.values()))

    def __len__(self) -> int:
        return len(self._by_fingerprint)


# ── The default registry ────────────────────────────────────────

PACKAGE = "rank1typeable"
PRIM_MODULE = "rank1typeable.prim"
RESERVED_MODULE = "rank1typeable.reserved"
NAMESPACE_MODULE = "rank1typeable.namespace"

REGISTRY = Registry()

# Built-in constructors
FUN_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "->")
LIST_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "[]")
UNIT_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "()")
SOLO_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "Solo")
INT_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "Int")
BOOL_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "Bool")
CHAR_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "Char")
DOUBLE_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "Double")
STRING_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "String")
BYTES_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "Bytes")
MAYBE_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "Maybe")
EITHER_TYCON = REGISTRY.register(PACKAGE, PRIM_MODULE, "Either")

REGISTRY.register_class(bool, BOOL_TYCON)
REGISTRY.register_class(int, INT_TYCON)
REGISTRY.register_class(float, DOUBLE_TYCON)
REGISTRY.register_class(str, STRING_TYCON)
REGISTRY.register_class(bytes, BYTES_TYCON)
REGISTRY.register_class(type(None), UNIT_TYCON)

# Reserved sentinels
VAR_TYCON = REGISTRY.register(PACKAGE, RESERVED_MODULE, "Any")
TAG_TYCON = REGISTRY.register(PACKAGE, RESERVED_MODULE, "T")
ZERO_TYCON = REGISTRY.register(PACKAGE, RESERVED_MODULE, "Zero")
SUCC_TYCON = REGISTRY.register(PACKAGE, RESERVED_MODULE, "Succ")
SKOLEM_TYCON = REGISTRY.register(PACKAGE, RESERVED_MODULE, "Skolem")


def tuple_tycon(arity: int) -> TyCon:
    """The tuple constructor of the given arity (2 or more)."""
    if arity < 2:
        raise ValueError(f"tuple arity must be at least 2, got {arity}")
    return REGISTRY.register(PACKAGE, PRIM_MODULE, "(" + "," * (arity - 1) + ")")


def is_tuple_tycon(tycon: TyCon) -> bool:
    return tycon.name.startswith("(,")


def namespace_tycon(prefix: str) -> TyCon:
    """Marker wrapping a variable index that was alpha-renamed under ``prefix``."""
    return REGISTRY.register(PACKAGE, NAMESPACE_MODULE, prefix)


def is_namespace_tycon(tycon: TyCon) -> bool:
    return tycon.package == PACKAGE and tycon.module == NAMESPACE_MODULE


for _arity in range(2, 8):
    tuple_tycon(_arity)
