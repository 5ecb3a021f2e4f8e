"""Binary serialization of type representations.

Each node is written as its constructor view (see ``split_tycon_app``)::

    fingerprint (16 bytes)
    package     (u64 big-endian length, UTF-8 bytes)
    module      (u64 big-endian length, UTF-8 bytes)
    name        (u64 big-endian length, UTF-8 bytes)
    child count (u64 big-endian)
    children    (recursively, in order)

Decoding rebuilds constructors from the encoded fields alone; no registry
lookup is needed, so a receiver can decode types it has never seen.

Both directions walk the tree with an explicit stack. A variable index is a
``Succ`` chain as long as the index itself, so index chains do not count
towards ``MAX_DEPTH``; any other nesting deeper than that is rejected.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from rank1typeable.errors import DecodeError
from rank1typeable.registry import FINGERPRINT_SIZE, SUCC_TYCON, TyCon, is_namespace_tycon
from rank1typeable.types import TypeRep, mk_tycon_app, split_tycon_app

MAX_DEPTH = 256

_U64 = struct.Struct(">Q")


def encode(t: TypeRep) -> bytes:
    out = bytearray()
    pending = [t]
    while pending:
        tycon, args = split_tycon_app(pending.pop())
        out += tycon.fingerprint
        for text in (tycon.package, tycon.module, tycon.name):
            data = text.encode("utf-8")
            out += _U64.pack(len(data))
            out += data
        out += _U64.pack(len(args))
        pending.extend(reversed(args))
    return bytes(out)


def decode(data: bytes) -> TypeRep:
    """Decode exactly one type representation from ``data``."""
    reader = _Reader(bytes(data))
    t = reader.read_typerep()
    if reader.pos != len(reader.data):
        raise DecodeError(f"{len(reader.data) - reader.pos} trailing byte(s)", reader.pos)
    return t


def _is_index_marker(tycon: TyCon) -> bool:
    return tycon == SUCC_TYCON or is_namespace_tycon(tycon)


@dataclass
class _Frame:
    tycon: TyCon
    count: int
    nested: bool
    args: list[TypeRep] = field(default_factory=list)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def _take(self, size: int) -> bytes:
        if self.pos + size > len(self.data):
            raise DecodeError(
                f"unexpected end of input, needed {size} byte(s)", self.pos
            )
        chunk = self.data[self.pos : self.pos + size]
        self.pos += size
        return chunk

    def _read_u64(self) -> int:
        (value,) = _U64.unpack(self._take(_U64.size))
        return value

    def _read_text(self) -> str:
        start = self.pos
        raw = self._take(self._read_u64())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid UTF-8 in constructor field: {e.reason}", start) from e

    def _read_tycon(self) -> TyCon:
        fingerprint = self._take(FINGERPRINT_SIZE)
        package = self._read_text()
        module = self._read_text()
        name = self._read_text()
        return TyCon(fingerprint, package, module, name)

    def read_typerep(self) -> TypeRep:
        stack: list[_Frame] = []
        depth = 0
        while True:
            start = self.pos
            tycon = self._read_tycon()
            count = self._read_u64()
            if count:
                nested = not _is_index_marker(tycon)
                if nested:
                    depth += 1
                    if depth > MAX_DEPTH:
                        raise DecodeError(f"type nested deeper than {MAX_DEPTH} levels", start)
                stack.append(_Frame(tycon, count, nested))
                continue

            node = mk_tycon_app(tycon)
            # Close every frame this node completes.
            while stack:
                frame = stack[-1]
                frame.args.append(node)
                if len(frame.args) < frame.count:
                    break
                stack.pop()
                if frame.nested:
                    depth -= 1
                node = mk_tycon_app(frame.tycon, frame.args)
            else:
                return node
