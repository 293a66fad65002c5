# filename: huffman_service.py

from collections import Counter
from dataclasses import dataclass

from huffman_bits import pack_bits, unpack_bits
from huffman_container import BINARY, CompressedArtifact, deserialize, serialize
from huffman_core import DecodeError, HuffmanLogic
from huffman_io import COMPRESSED_NAME, default_output_name, read_input, write_output


@dataclass(frozen=True)
class CompressionStats:
    original_size: int
    compressed_size: int
    symbol_count: int
    alphabet_size: int
    payload_bits: int

    @property
    def ratio(self):
        return self.compressed_size / self.original_size if self.original_size else 0.0

    def describe(self):
        return (
            f"Original size: {self.original_size} bytes, "
            f"Compressed size: {self.compressed_size} bytes"
        )


def _symbols(data):
    if isinstance(data, str):
        return data
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected str or a bytes-like object, got {type(data).__name__}")


def _byte_size(data):
    return len(data.encode("utf-8", "surrogatepass")) if isinstance(data, str) else len(data)


class HuffmanService:
    def __init__(self):
        self.logic = HuffmanLogic()

    def compress(self, data):
        data = _symbols(data)
        freqs = self.logic.count_frequencies(data)
        codes = self.logic.build_codes(freqs)
        payload, padding = pack_bits(data, codes)
        return serialize(CompressedArtifact(freqs, padding, payload))

    def decompress(self, blob):
        artifact = deserialize(blob)
        # The decoder rebuilds the same tree from the transmitted table
        codes = self.logic.build_codes(artifact.freq_table)
        symbols = unpack_bits(artifact.payload, artifact.padding, codes)
        if Counter(symbols) != artifact.freq_table:
            raise DecodeError(
                f"decoded {len(symbols)} symbols that do not match the transmitted frequency table"
            )
        if artifact.kind == BINARY:
            return bytes(symbols)
        return "".join(symbols)

    def stats(self, data, blob):
        data = _symbols(data)
        artifact = deserialize(blob)
        return CompressionStats(
            original_size=_byte_size(data),
            compressed_size=len(blob),
            symbol_count=len(data),
            alphabet_size=len(artifact.freq_table),
            payload_bits=len(artifact.payload) * 8 - artifact.padding,
        )

    def compress_file(self, src, out_dir=".", binary=False):
        data = read_input(src, binary=binary)
        return write_output(self.compress(data), COMPRESSED_NAME, out_dir)

    def decompress_file(self, src, out_dir="."):
        data = self.decompress(read_input(src, binary=True))
        return write_output(data, default_output_name(data), out_dir)


def compress(data):
    return HuffmanService().compress(data)


def decompress(blob):
    return HuffmanService().decompress(blob)
