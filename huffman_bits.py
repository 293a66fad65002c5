# filename: huffman_bits.py

from bitarray import bitarray

from huffman_core import DecodeError, UnknownSymbolError


def pack_bits(data, codes):
    """Concatenate the codeword of every symbol and pack it into bytes.

    Bits are laid out most-significant first. The stream is padded with
    zero bits up to the next byte boundary and the number of bits added
    (0-7) is returned next to the payload.
    """
    table = {symbol: bitarray(code, endian="big") for symbol, code in codes.items()}
    bits = bitarray(endian="big")
    try:
        bits.encode(table, data)
    except (KeyError, ValueError) as exc:
        missing = next((symbol for symbol in data if symbol not in table), None)
        if missing is None:
            raise
        raise UnknownSymbolError(missing) from exc
    padding = bits.fill()
    return bits.tobytes(), padding


def unpack_bits(payload, padding, codes):
    if isinstance(padding, bool) or not isinstance(padding, int) or not 0 <= padding <= 7:
        raise DecodeError(f"padding must be between 0 and 7, got {padding!r}")

    bits = bitarray(endian="big")
    bits.frombytes(bytes(payload))
    if padding > len(bits):
        raise DecodeError(f"padding of {padding} bits exceeds a {len(bits)}-bit payload")
    if padding:
        del bits[-padding:]

    reverse_codes = {code: symbol for symbol, code in codes.items()}
    longest = max((len(code) for code in reverse_codes), default=0)

    out = []
    current = ""
    for bit in bits.to01():
        current += bit
        if current in reverse_codes:
            out.append(reverse_codes[current])
            current = ""
        elif len(current) >= longest:
            raise DecodeError(f"bit string {current!r} matches no codeword")
    if current:
        raise DecodeError(f"bit stream ended inside a codeword ({len(current)} bits left over)")
    return out
