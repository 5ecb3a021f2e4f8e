"""Tree rewrites used around unification."""

from __future__ import annotations

from typing import Mapping

from rank1typeable.types import (
    SkolemApp,
    TyVarApp,
    TypeRep,
    Var,
    apply_args,
    type_vars,
)


def substitute(mapping: Mapping[Var, TypeRep], t: TypeRep) -> TypeRep:
    """Simultaneously replace the variables bound in ``mapping``.

    A replaced variable keeps its extra arguments: substituting ``Maybe`` for
    ``m`` in ``m Int`` gives ``Maybe Int``.
    """
    if not mapping:
        return t
    args = tuple(substitute(mapping, arg) for arg in t.args)
    if isinstance(t, TyVarApp):
        head = mapping.get(t.var)
        if head is None:
            return TyVarApp(t.var, args)
        return apply_args(head, args)
    return t.with_args(args)


def skolemize(t: TypeRep) -> TypeRep:
    """Replace every variable with a rigid skolem of the same index."""
    args = tuple(skolemize(arg) for arg in t.args)
    if isinstance(t, TyVarApp):
        return SkolemApp(t.var, args)
    return t.with_args(args)


def alpha_rename(prefix: str, t: TypeRep) -> TypeRep:
    """Move every variable of ``t`` into the ``prefix`` namespace."""
    args = tuple(alpha_rename(prefix, arg) for arg in t.args)
    if isinstance(t, TyVarApp):
        return TyVarApp(t.var.renamed(prefix), args)
    return t.with_args(args)


def normalize(t: TypeRep) -> TypeRep:
    """Renumber variables ``ANY``, ``ANY1``, ... in first-occurrence order."""
    return substitute(
        {var: TyVarApp(Var(i)) for i, var in enumerate(type_vars(t))},
        t,
    )
