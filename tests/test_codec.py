"""Tests for binary encoding and decoding of type representations."""

from __future__ import annotations

import struct

import pytest

from rank1typeable.codec import MAX_DEPTH, decode, encode
from rank1typeable.errors import DecodeError
from rank1typeable.parser import parse_type
from rank1typeable.registry import (
    FINGERPRINT_SIZE,
    INT_TYCON,
    REGISTRY,
    VAR_TYCON,
    TyCon,
    fingerprint_of,
)
from rank1typeable.types import (
    ANY1,
    INT,
    V2,
    SkolemApp,
    TyConApp,
    TyVarApp,
    Var,
    mk_list,
    mk_var,
    type_of,
)


def _field(text: str) -> bytes:
    data = text.encode("utf-8")
    return struct.pack(">Q", len(data)) + data


class TestRoundTrip:
    @pytest.mark.parametrize("source", [
        "Int",
        "ANY -> ANY1 -> ANY",
        "(Bool -> ANY) -> [ANY]",
        "ANY12 (Maybe ANY3) -> Either String ()",
        "(Int,Bool,Char)",
    ])
    def test_parsed_types(self, source):
        t = parse_type(source)
        assert decode(encode(t)) == t

    def test_skolems_and_namespaced_variables(self):
        t = SkolemApp(V2, (TyVarApp(Var(1, ("f", "x"))),))
        assert decode(encode(t)) == t

    def test_reflected_value(self):
        t = type_of([(1, "a")])
        assert decode(encode(t)) == t

    def test_large_variable_index(self):
        t = mk_var(5000, INT)
        assert decode(encode(t)) == t

    def test_large_skolem_index_in_namespace(self):
        t = SkolemApp(Var(3000, ("f",)))
        assert decode(encode(t)) == t

    def test_nesting_up_to_the_limit(self):
        t = INT
        for _ in range(MAX_DEPTH):
            t = mk_list(t)
        data = encode(t)
        assert data.endswith(encode(INT))
        assert isinstance(decode(data), TyConApp)


class TestWireFormat:
    def test_nullary_constructor_layout(self):
        expected = (
            INT_TYCON.fingerprint
            + _field("rank1typeable")
            + _field("rank1typeable.prim")
            + _field("Int")
            + struct.pack(">Q", 0)
        )
        assert encode(INT) == expected

    def test_children_follow_the_count(self):
        data = encode(mk_list(INT))
        header = (
            FINGERPRINT_SIZE
            + len(_field("rank1typeable"))
            + len(_field("rank1typeable.prim"))
            + len(_field("[]"))
        )
        assert data[header : header + 8] == struct.pack(">Q", 1)
        assert data[header + 8 :] == encode(INT)

    def test_variables_travel_as_the_reserved_constructor(self):
        assert encode(ANY1)[:FINGERPRINT_SIZE] == VAR_TYCON.fingerprint

    def test_unknown_constructor_decodes_without_registry(self):
        fingerprint = fingerprint_of("remote", "remote.widgets", "Widget")
        widget = TyCon(fingerprint, "remote", "remote.widgets", "Widget")
        t = TyConApp(widget, (INT,))
        decoded = decode(encode(t))
        assert decoded == t
        assert decoded.tycon.name == "Widget"
        assert decoded.tycon.module == "remote.widgets"
        assert REGISTRY.lookup_fingerprint(fingerprint) is None


class TestMalformedInput:
    def test_empty(self):
        with pytest.raises(DecodeError, match="unexpected end"):
            decode(b"")

    def test_truncated(self):
        with pytest.raises(DecodeError):
            decode(encode(mk_list(INT))[:-1])

    def test_trailing_bytes(self):
        with pytest.raises(DecodeError, match="trailing"):
            decode(encode(INT) + b"\x00")

    def test_invalid_utf8(self):
        data = INT_TYCON.fingerprint + struct.pack(">Q", 2) + b"\xff\xfe"
        with pytest.raises(DecodeError, match="UTF-8"):
            decode(data)

    def test_decode_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            decode(b"\x00")

    def test_nesting_beyond_the_limit(self):
        list_header = encode(mk_list(INT))[: -len(encode(INT))]
        data = list_header * (MAX_DEPTH + 1) + encode(INT)
        with pytest.raises(DecodeError, match="nested deeper"):
            decode(data)

    def test_deep_truncated_input(self):
        list_header = encode(mk_list(INT))[: -len(encode(INT))]
        with pytest.raises(DecodeError):
            decode(list_header * 5000)

    def test_offset_is_reported(self):
        with pytest.raises(DecodeError) as exc:
            decode(encode(INT) + b"\x00\x00")
        assert exc.value.offset == len(encode(INT))
