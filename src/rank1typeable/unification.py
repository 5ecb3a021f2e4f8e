"""Syntactic unification over type representations.

``is_instance_of`` and ``fun_result_ty`` are the two questions the engine
answers; both are built on ``unify``. Failures are returned as ``UnifyError``
values rather than raised.
"""

from __future__ import annotations

import logging
from typing import Iterator, Mapping

from rank1typeable.errors import UnifyError
from rank1typeable.rewrite import alpha_rename, normalize, skolemize, substitute
from rank1typeable.types import (
    TyVarApp,
    TypeRep,
    Var,
    mk_fun,
    occurs,
)

logger = logging.getLogger(__name__)

Equation = tuple[TypeRep, TypeRep]


class Substitution(Mapping[Var, TypeRep]):
    """Bindings from variables to types, in the order they were made."""

    def __init__(self, bindings: Mapping[Var, TypeRep] | None = None) -> None:
        self._bindings: dict[Var, TypeRep] = dict(bindings or {})

    def __getitem__(self, var: Var) -> TypeRep:
        return self._bindings[var]

    def __iter__(self) -> Iterator[Var]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def apply(self, t: TypeRep) -> TypeRep:
        return substitute(self._bindings, t)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{TyVarApp(v)} := {t}" for v, t in self._bindings.items())
        return f"Substitution({pairs})"


def unify(t1: TypeRep, t2: TypeRep) -> Substitution | UnifyError:
    """Most general substitution making ``t1`` and ``t2`` equal.

    Variables are bound eagerly: each new binding is applied to the pending
    equations and to every earlier binding, so the accumulated substitution
    is idempotent and no variable is bound twice.
    """
    logger.debug("unify %s ~ %s", t1, t2)
    bindings: dict[Var, TypeRep] = {}
    # A stack; the top is the next equation to solve.
    pending: list[Equation] = [(t1, t2)]

    def push_pairs(lhs_args, rhs_args) -> None:
        pending.extend(reversed(list(zip(lhs_args, rhs_args))))

    while pending:
        lhs, rhs = pending.pop()
        if lhs == rhs:
            continue

        if isinstance(lhs, TyVarApp) and not lhs.args:
            var = lhs.var
            if occurs(var, rhs):
                logger.debug("occurs check failed: %s in %s", lhs, rhs)
                return UnifyError.occurs_check(lhs, rhs)
            binding = {var: rhs}
            bindings = {v: substitute(binding, t) for v, t in bindings.items()}
            bindings[var] = rhs
            pending = [(substitute(binding, l), substitute(binding, r)) for l, r in pending]
            logger.debug("bind %s := %s", lhs, rhs)
            continue

        if isinstance(lhs, TyVarApp):
            # Higher-kinded variable: match the head, then the arguments.
            if isinstance(rhs, TyVarApp):
                head: TypeRep = TyVarApp(rhs.var)
            else:
                head = rhs.with_args(())
            if len(lhs.args) != len(rhs.args):
                logger.debug("arity mismatch: %s ~ %s", lhs, rhs)
                return UnifyError.mismatch(lhs, rhs)
            push_pairs(lhs.args, rhs.args)
            pending.append((TyVarApp(lhs.var), head))
            continue

        if isinstance(rhs, TyVarApp):
            pending.append((rhs, lhs))
            continue

        lhs_head, rhs_head = lhs.with_args(()), rhs.with_args(())
        if lhs_head != rhs_head:
            logger.debug("constructor mismatch: %s ~ %s", lhs_head, rhs_head)
            return UnifyError.mismatch(lhs_head, rhs_head)
        if len(lhs.args) != len(rhs.args):
            logger.debug("arity mismatch: %s ~ %s", lhs, rhs)
            return UnifyError.mismatch(lhs, rhs)
        push_pairs(lhs.args, rhs.args)

    return Substitution(bindings)


def is_instance_of(t1: TypeRep, t2: TypeRep) -> UnifyError | None:
    """``None`` if a term of type ``t2`` can be used where ``t1`` is required.

    The variables of ``t1`` are skolemized first, so they stay rigid while
    those of ``t2`` may be specialized. The relation is not symmetric:
    ``ANY -> ANY1`` can be used as ``ANY -> ANY`` but not the other way round.
    """
    result = unify(skolemize(t1), t2)
    if isinstance(result, UnifyError):
        return result
    return None


def fun_result_ty(fun: TypeRep, arg: TypeRep) -> TypeRep | UnifyError:
    """The type of applying a function of type ``fun`` to an ``arg``.

    The two types are renamed apart first, so variables that share an index
    in the independently built schemas do not interfere.
    """
    result = TyVarApp(Var(0))
    subst = unify(alpha_rename("f", fun), mk_fun(alpha_rename("x", arg), result))
    if isinstance(subst, UnifyError):
        return subst
    return normalize(subst.apply(result))
