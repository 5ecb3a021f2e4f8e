"""Render type representations as type expressions.

Precedence follows the usual conventions: application binds tighter than
``->``, which is right-associative.
"""

from __future__ import annotations

from rank1typeable.registry import FUN_TYCON, LIST_TYCON, is_tuple_tycon
from rank1typeable.types import SkolemApp, TyConApp, TyVarApp, TypeRep, Var

DEFAULT_VARIABLE_PREFIX = "ANY"
SKOLEM_PREFIX = "Skolem"

_ARROW_PREC = 8
_APP_PREC = 9
_ARG_PREC = 10


class TypeRepPrinter:
    """Pretty-printer for ``TypeRep`` trees."""

    def __init__(self, variable_prefix: str = DEFAULT_VARIABLE_PREFIX) -> None:
        self.variable_prefix = variable_prefix

    def show(self, t: TypeRep) -> str:
        return self._show(t, 0)

    def variable_name(self, var: Var, prefix: str | None = None) -> str:
        name = (prefix or self.variable_prefix) + (str(var.index) if var.index else "")
        if var.namespace:
            name += "@" + ".".join(var.namespace)
        return name

    def _show(self, t: TypeRep, prec: int) -> str:
        if isinstance(t, TyVarApp):
            return self._show_applied(self.variable_name(t.var), t.args, prec)
        if isinstance(t, SkolemApp):
            return self._show_applied(self.variable_name(t.var, SKOLEM_PREFIX), t.args, prec)
        if not isinstance(t, TyConApp):
            raise TypeError(f"not a type representation: {t!r}")

        tycon, args = t.tycon, t.args
        if not args:
            return tycon.name
        if tycon == LIST_TYCON and len(args) == 1:
            return f"[{self._show(args[0], 0)}]"
        if tycon == FUN_TYCON and len(args) == 2:
            text = f"{self._show(args[0], _APP_PREC)} -> {self._show(args[1], _ARROW_PREC)}"
            return _paren(prec > _ARROW_PREC, text)
        if is_tuple_tycon(tycon) and len(args) == tycon.name.count(",") + 1:
            return "(" + ",".join(self._show(a, 0) for a in args) + ")"
        return self._show_applied(tycon.name, args, prec)

    def _show_applied(self, head: str, args: tuple[TypeRep, ...], prec: int) -> str:
        if not args:
            return head
        text = head + " " + " ".join(self._show(a, _ARG_PREC) for a in args)
        return _paren(prec > _APP_PREC, text)


def _paren(wrap: bool, text: str) -> str:
    return f"({text})" if wrap else text


_DEFAULT = TypeRepPrinter()


def show(t: TypeRep) -> str:
    """Render ``t`` with the default variable prefix."""
    return _DEFAULT.show(t)
