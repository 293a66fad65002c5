# filename: huffman_container.py

"""
Container format for compressed artifacts.

Layout (little-endian):

    bytes[0:4]      uint32 header length H
    bytes[4:4+H]    UTF-8 JSON header {"freqTable": [[symbol, count], ...], "padding": p}
    bytes[4+H:]     packed payload

Text symbols travel as one-character JSON strings and byte symbols as JSON
integers, so the header alone tells the decoder which kind of sequence to
rebuild. The frequency table is written in canonical (ascending symbol) order.
"""

import json
import struct
from dataclasses import dataclass

from huffman_core import FormatError, canonical_order

HEADER_LENGTH = struct.Struct("<I")

TEXT = "text"
BINARY = "binary"


@dataclass(frozen=True)
class CompressedArtifact:
    freq_table: dict
    padding: int
    payload: bytes

    @property
    def kind(self):
        return symbol_kind(self.freq_table)


def symbol_kind(freq_table):
    first = next(iter(freq_table))
    return TEXT if isinstance(first, str) else BINARY


def serialize(artifact):
    header = {
        "freqTable": [[symbol, count] for symbol, count in canonical_order(artifact.freq_table)],
        "padding": artifact.padding,
    }
    # ASCII escaping keeps every code point (lone surrogates included) encodable
    header_bytes = json.dumps(header, separators=(",", ":")).encode("utf-8")
    return HEADER_LENGTH.pack(len(header_bytes)) + header_bytes + bytes(artifact.payload)


def deserialize(blob):
    blob = bytes(blob)
    if len(blob) < HEADER_LENGTH.size:
        raise FormatError(f"container is {len(blob)} bytes, too short for a header length")

    (header_length,) = HEADER_LENGTH.unpack_from(blob)
    header_end = HEADER_LENGTH.size + header_length
    if header_end > len(blob):
        raise FormatError(
            f"header length {header_length} exceeds the {len(blob) - HEADER_LENGTH.size} bytes available"
        )

    try:
        header = json.loads(blob[HEADER_LENGTH.size:header_end].decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise FormatError(f"header is not valid UTF-8 JSON: {exc}") from exc
    if not isinstance(header, dict):
        raise FormatError("header must be a JSON object")
    for key in ("freqTable", "padding"):
        if key not in header:
            raise FormatError(f"header is missing {key!r}")

    freq_table = _parse_freq_table(header["freqTable"])
    padding = header["padding"]
    if isinstance(padding, bool) or not isinstance(padding, int) or not 0 <= padding <= 7:
        raise FormatError(f"padding must be an integer between 0 and 7, got {padding!r}")

    payload = blob[header_end:]
    if padding > len(payload) * 8:
        raise FormatError(f"padding of {padding} bits exceeds a {len(payload)}-byte payload")

    return CompressedArtifact(freq_table, padding, payload)


def _parse_freq_table(entries):
    if not isinstance(entries, list) or not entries:
        raise FormatError("freqTable must be a non-empty list")

    freq_table = {}
    kinds = set()
    for entry in entries:
        if not isinstance(entry, list) or len(entry) != 2:
            raise FormatError(f"freqTable entry {entry!r} is not a [symbol, count] pair")
        symbol, count = entry
        kinds.add(_check_symbol(symbol))
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise FormatError(f"count for {symbol!r} must be a positive integer, got {count!r}")
        if symbol in freq_table:
            raise FormatError(f"symbol {symbol!r} appears twice in freqTable")
        freq_table[symbol] = count

    if len(kinds) > 1:
        raise FormatError("freqTable mixes text and byte symbols")
    return dict(canonical_order(freq_table))


def _check_symbol(symbol):
    if isinstance(symbol, str):
        if len(symbol) != 1:
            raise FormatError(f"text symbol {symbol!r} must be a single character")
        return TEXT
    if isinstance(symbol, int) and not isinstance(symbol, bool):
        if not 0 <= symbol <= 255:
            raise FormatError(f"byte symbol {symbol} is outside 0-255")
        return BINARY
    raise FormatError(f"symbol {symbol!r} is neither a character nor a byte")
