"""Runtime type representations with rank-1 type variables.

A ``TypeRep`` is one of three immutable node kinds:

* ``TyConApp``: a named constructor applied to argument trees (``Maybe Int``);
* ``TyVarApp``: a bound type variable, optionally applied to extra arguments
  (``ANY ANY1`` is a higher-kinded variable applied to another variable);
* ``SkolemApp``: a rigid placeholder that replaced a variable during an
  instance check.

``split_tycon_app`` views every node as a constructor application. Variables
and skolems are lowered to the reserved sentinel constructors: a variable is
``Any`` applied to ``[T, index, *args]`` and a skolem is ``Skolem`` applied to
``[index, *args]``, where ``index`` is a ``Zero``/``Succ`` numeral wrapped in
one namespace marker per alpha-renaming. ``mk_tycon_app`` lifts those shapes
back, so the two are total inverses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import reduce
from typing import Callable, Iterable, TypeVar

from rank1typeable.registry import (
    BOOL_TYCON,
    BYTES_TYCON,
    CHAR_TYCON,
    DOUBLE_TYCON,
    EITHER_TYCON,
    FUN_TYCON,
    INT_TYCON,
    LIST_TYCON,
    MAYBE_TYCON,
    REGISTRY,
    SKOLEM_TYCON,
    SOLO_TYCON,
    STRING_TYCON,
    SUCC_TYCON,
    TAG_TYCON,
    UNIT_TYCON,
    VAR_TYCON,
    ZERO_TYCON,
    Registry,
    TyCon,
    is_namespace_tycon,
    namespace_tycon,
    tuple_tycon,
)


# ── Nodes ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Var:
    """Identity of a type variable: an index plus alpha-renaming prefixes."""

    index: int
    namespace: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"variable index must be non-negative, got {self.index}")
        object.__setattr__(self, "namespace", tuple(self.namespace))

    def renamed(self, prefix: str) -> Var:
        return Var(self.index, self.namespace + (prefix,))


class TypeRep(ABC):
    """Base class of the type representation nodes."""

    __slots__ = ()

    args: tuple[TypeRep, ...]

    @abstractmethod
    def with_args(self, args: Iterable[TypeRep]) -> TypeRep:
        """The same head applied to ``args`` instead."""

    def __str__(self) -> str:
        from rank1typeable.printer import show

        return show(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


@dataclass(frozen=True, repr=False)
class TyConApp(TypeRep):
    tycon: TyCon
    args: tuple[TypeRep, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        if self.tycon in (VAR_TYCON, SKOLEM_TYCON) and _lift(self.tycon, self.args) is not None:
            raise ValueError(
                f"'{self.tycon.name}' applied to an index is a variable; "
                "build it with mk_tycon_app or make_variable"
            )

    def with_args(self, args: Iterable[TypeRep]) -> TyConApp:
        return TyConApp(self.tycon, tuple(args))


@dataclass(frozen=True, repr=False)
class TyVarApp(TypeRep):
    var: Var
    args: tuple[TypeRep, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def with_args(self, args: Iterable[TypeRep]) -> TyVarApp:
        return TyVarApp(self.var, tuple(args))


@dataclass(frozen=True, repr=False)
class SkolemApp(TypeRep):
    var: Var
    args: tuple[TypeRep, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def with_args(self, args: Iterable[TypeRep]) -> SkolemApp:
        return SkolemApp(self.var, tuple(args))


# ── Sentinel encoding ───────────────────────────────────────────

ZERO = TyConApp(ZERO_TYCON)
TAG = TyConApp(TAG_TYCON)


def index_tree(var: Var) -> TyConApp:
    """The Peano numeral for ``var``, wrapped in its namespace markers."""
    tree = ZERO
    for _ in range(var.index):
        tree = TyConApp(SUCC_TYCON, (tree,))
    for prefix in var.namespace:
        tree = TyConApp(namespace_tycon(prefix), (tree,))
    return tree


def var_of_index_tree(tree: TypeRep) -> Var | None:
    """Inverse of ``index_tree``; ``None`` if ``tree`` is not a numeral."""
    namespace: list[str] = []
    while (
        isinstance(tree, TyConApp)
        and is_namespace_tycon(tree.tycon)
        and len(tree.args) == 1
    ):
        namespace.append(tree.tycon.name)
        tree = tree.args[0]
    index = 0
    while isinstance(tree, TyConApp) and tree.tycon == SUCC_TYCON and len(tree.args) == 1:
        index += 1
        tree = tree.args[0]
    if not (isinstance(tree, TyConApp) and tree.tycon == ZERO_TYCON and not tree.args):
        return None
    return Var(index, tuple(reversed(namespace)))


def _lift(tycon: TyCon, args: tuple[TypeRep, ...]) -> TypeRep | None:
    if tycon == VAR_TYCON and len(args) >= 2 and args[0] == TAG:
        var = var_of_index_tree(args[1])
        if var is not None:
            return TyVarApp(var, args[2:])
    elif tycon == SKOLEM_TYCON and len(args) >= 1:
        var = var_of_index_tree(args[0])
        if var is not None:
            return SkolemApp(var, args[1:])
    return None


def split_tycon_app(t: TypeRep) -> tuple[TyCon, tuple[TypeRep, ...]]:
    """Split a type into a constructor and its arguments."""
    if isinstance(t, TyConApp):
        return t.tycon, t.args
    if isinstance(t, TyVarApp):
        return VAR_TYCON, (TAG, index_tree(t.var), *t.args)
    if isinstance(t, SkolemApp):
        return SKOLEM_TYCON, (index_tree(t.var), *t.args)
    raise TypeError(f"not a type representation: {t!r}")


def mk_tycon_app(tycon: TyCon, args: Iterable[TypeRep] = ()) -> TypeRep:
    """Inverse of ``split_tycon_app``."""
    args = tuple(args)
    lifted = _lift(tycon, args)
    if lifted is not None:
        return lifted
    return TyConApp(tycon, args)


def apply_args(t: TypeRep, extra: Iterable[TypeRep]) -> TypeRep:
    """Apply ``t`` to further arguments."""
    extra = tuple(extra)
    if not extra:
        return t
    return t.with_args(t.args + extra)


# ── Builders ────────────────────────────────────────────────────


def mk_fun(arg: TypeRep, result: TypeRep) -> TyConApp:
    return TyConApp(FUN_TYCON, (arg, result))


def mk_funs(*types: TypeRep) -> TypeRep:
    """Right-nested function type: ``mk_funs(a, b, c)`` is ``a -> b -> c``."""
    if not types:
        raise ValueError("mk_funs needs at least one type")
    return reduce(lambda acc, t: mk_fun(t, acc), reversed(types[:-1]), types[-1])


def mk_list(element: TypeRep) -> TyConApp:
    return TyConApp(LIST_TYCON, (element,))


def mk_tuple(*elements: TypeRep) -> TyConApp:
    if not elements:
        return UNIT
    if len(elements) == 1:
        return TyConApp(SOLO_TYCON, elements)
    return TyConApp(tuple_tycon(len(elements)), elements)


def make_variable(var: Var, args: Iterable[TypeRep] = ()) -> TyVarApp:
    return TyVarApp(var, tuple(args))


def mk_var(index: int, *args: TypeRep) -> TyVarApp:
    return TyVarApp(Var(index), args)


def as_variable(t: TypeRep) -> tuple[Var, tuple[TypeRep, ...]] | None:
    """``(var, extra_args)`` if ``t`` is a variable application."""
    if isinstance(t, TyVarApp):
        return t.var, t.args
    return None


INT = TyConApp(INT_TYCON)
BOOL = TyConApp(BOOL_TYCON)
CHAR = TyConApp(CHAR_TYCON)
DOUBLE = TyConApp(DOUBLE_TYCON)
STRING = TyConApp(STRING_TYCON)
BYTES = TyConApp(BYTES_TYCON)
UNIT = TyConApp(UNIT_TYCON)
MAYBE = TyConApp(MAYBE_TYCON)
EITHER = TyConApp(EITHER_TYCON)

V0, V1, V2, V3, V4, V5, V6, V7, V8, V9 = (Var(i) for i in range(10))
ANY, ANY1, ANY2, ANY3, ANY4, ANY5, ANY6, ANY7, ANY8, ANY9 = (
    TyVarApp(Var(i)) for i in range(10)
)


# ── Queries ─────────────────────────────────────────────────────


def occurs(var: Var, t: TypeRep) -> bool:
    """True if ``var`` appears anywhere in ``t``, including extra arguments."""
    if isinstance(t, TyVarApp) and t.var == var:
        return True
    return any(occurs(var, arg) for arg in t.args)


def type_vars(t: TypeRep) -> list[Var]:
    """Distinct variables of ``t`` in left-to-right first-occurrence order."""
    seen: dict[Var, None] = {}

    def walk(node: TypeRep) -> None:
        if isinstance(node, TyVarApp):
            seen.setdefault(node.var)
        for arg in node.args:
            walk(arg)

    walk(t)
    return list(seen)


# ── Reflection ──────────────────────────────────────────────────


def type_of(value: object, registry: Registry | None = None) -> TypeRep:
    """The type representation of a Python value.

    Objects (or their classes) may provide a ``__typerep__`` attribute holding
    a ``TypeRep``; that takes precedence. Tuples and lists are inspected
    element-wise; everything else maps to a nullary constructor registered
    for the value's class.
    """
    if registry is None:
        registry = REGISTRY
    rep = getattr(value, "__typerep__", None)
    if isinstance(rep, TypeRep):
        return rep
    if isinstance(value, tuple):
        return mk_tuple(*(type_of(v, registry) for v in value))
    if isinstance(value, list):
        if not value:
            return mk_list(ANY)
        first = type_of(value[0], registry)
        for item in value[1:]:
            other = type_of(item, registry)
            if other != first:
                raise ValueError(f"heterogeneous list: {first} and {other}")
        return mk_list(first)
    return TyConApp(registry.tycon_for_class(type(value)))


_F = TypeVar("_F", bound=Callable)


def with_typerep(rep: TypeRep) -> Callable[[_F], _F]:
    """Decorator attaching a type representation to a function."""

    def decorate(fn: _F) -> _F:
        fn.__typerep__ = rep
        return fn

    return decorate
