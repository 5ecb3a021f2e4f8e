"""Tests for rendering type representations."""

from __future__ import annotations

import pytest

from rank1typeable.parser import parse_type
from rank1typeable.printer import TypeRepPrinter, show
from rank1typeable.registry import EITHER_TYCON, LIST_TYCON, MAYBE_TYCON, tuple_tycon
from rank1typeable.types import (
    ANY,
    ANY1,
    BOOL,
    CHAR,
    INT,
    UNIT,
    V0,
    V2,
    SkolemApp,
    TyConApp,
    TyVarApp,
    Var,
    mk_fun,
    mk_list,
    mk_tuple,
    mk_var,
)


def _maybe(t):
    return TyConApp(MAYBE_TYCON, (t,))


class TestShow:
    @pytest.mark.parametrize("t, expected", [
        (INT, "Int"),
        (mk_fun(INT, BOOL), "Int -> Bool"),
        (mk_fun(INT, mk_fun(BOOL, CHAR)), "Int -> Bool -> Char"),
        (mk_fun(mk_fun(INT, BOOL), CHAR), "(Int -> Bool) -> Char"),
        (mk_list(mk_fun(INT, INT)), "[Int -> Int]"),
        (mk_tuple(INT, BOOL, CHAR), "(Int,Bool,Char)"),
        (mk_tuple(mk_fun(INT, BOOL), INT), "(Int -> Bool,Int)"),
        (_maybe(_maybe(INT)), "Maybe (Maybe Int)"),
        (TyConApp(EITHER_TYCON, (INT, mk_fun(INT, BOOL))), "Either Int (Int -> Bool)"),
        (mk_fun(_maybe(INT), INT), "Maybe Int -> Int"),
        (mk_var(12), "ANY12"),
        (mk_var(0, ANY1), "ANY ANY1"),
        (_maybe(mk_var(0, ANY1)), "Maybe (ANY ANY1)"),
        (mk_fun(mk_var(0, INT), ANY), "ANY Int -> ANY"),
        (SkolemApp(V0), "Skolem"),
        (SkolemApp(V2, (INT,)), "Skolem2 Int"),
        (TyVarApp(Var(1, ("f", "x"))), "ANY1@f.x"),
        (UNIT, "()"),
        (TyConApp(LIST_TYCON), "[]"),
        (mk_tuple(INT), "Solo Int"),
        (TyConApp(tuple_tycon(3), (INT,)), "(,,) Int"),
    ])
    def test_renders(self, t, expected):
        assert show(t) == expected

    def test_custom_variable_prefix(self):
        printer = TypeRepPrinter("T")
        assert printer.show(mk_fun(ANY, mk_list(ANY1))) == "T -> [T1]"

    def test_skolems_ignore_the_variable_prefix(self):
        assert TypeRepPrinter("T").show(SkolemApp(V2)) == "Skolem2"

    def test_rejects_foreign_objects(self):
        with pytest.raises(TypeError):
            show("Int")


class TestStrAndRepr:
    def test_str_uses_the_default_printer(self):
        assert str(mk_fun(ANY, INT)) == "ANY -> Int"

    def test_repr_names_the_node(self):
        assert repr(mk_list(INT)) == "TyConApp('[Int]')"
        assert repr(ANY1) == "TyVarApp('ANY1')"
        assert repr(SkolemApp(V0)) == "SkolemApp('Skolem')"


class TestAgreesWithParser:
    @pytest.mark.parametrize("source", [
        "Int",
        "ANY -> ANY1 -> ANY",
        "(Bool -> ANY) -> [ANY]",
        "Maybe (Either Int ANY3) -> ()",
        "ANY2 (Maybe ANY) -> ANY2 Int",
        "(Int,[Char],ANY -> ANY)",
        "Solo Bool",
    ])
    def test_show_of_parse_is_identity(self, source):
        assert show(parse_type(source)) == source

    def test_custom_prefix_round_trips(self):
        t = parse_type("T -> T1 T", variable_prefix="T")
        assert TypeRepPrinter("T").show(t) == "T -> T1 T"
