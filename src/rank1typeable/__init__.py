"""Runtime type representations with support for rank-1 polymorphic types."""

from __future__ import annotations

__version__ = "0.1.0"

from rank1typeable.codec import decode, encode
from rank1typeable.errors import DecodeError, TypeExprError, UnifyError, UnifyErrorKind
from rank1typeable.parser import parse_type
from rank1typeable.printer import show
from rank1typeable.registry import REGISTRY, Registry, TyCon
from rank1typeable.rewrite import alpha_rename, normalize, skolemize, substitute
from rank1typeable.types import (
    ANY,
    ANY1,
    ANY2,
    ANY3,
    ANY4,
    ANY5,
    ANY6,
    ANY7,
    ANY8,
    ANY9,
    BOOL,
    BYTES,
    CHAR,
    DOUBLE,
    INT,
    STRING,
    UNIT,
    V0,
    V1,
    V2,
    V3,
    V4,
    V5,
    V6,
    V7,
    V8,
    V9,
    SkolemApp,
    TyConApp,
    TypeRep,
    TyVarApp,
    Var,
    apply_args,
    as_variable,
    make_variable,
    mk_fun,
    mk_funs,
    mk_list,
    mk_tuple,
    mk_tycon_app,
    mk_var,
    occurs,
    split_tycon_app,
    type_of,
    type_vars,
    with_typerep,
)
from rank1typeable.unification import Substitution, fun_result_ty, is_instance_of, unify

__all__ = [
    "ANY", "ANY1", "ANY2", "ANY3", "ANY4", "ANY5", "ANY6", "ANY7", "ANY8", "ANY9",
    "BOOL", "BYTES", "CHAR", "DOUBLE", "INT", "STRING", "UNIT",
    "V0", "V1", "V2", "V3", "V4", "V5", "V6", "V7", "V8", "V9",
    "REGISTRY", "DecodeError", "Registry", "SkolemApp", "Substitution", "TyCon",
    "TyConApp", "TyVarApp", "TypeExprError", "TypeRep", "UnifyError", "UnifyErrorKind",
    "Var", "alpha_rename", "apply_args", "as_variable", "decode", "encode",
    "fun_result_ty", "is_instance_of", "make_variable", "mk_fun", "mk_funs",
    "mk_list", "mk_tuple", "mk_tycon_app", "mk_var", "normalize", "occurs",
    "parse_type", "show", "skolemize", "split_tycon_app", "substitute", "type_of",
    "type_vars", "unify", "with_typerep",
]
