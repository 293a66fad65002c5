# filename: huffman_io.py

"""File-backed stand-ins for the presentation layer around the codec."""

from pathlib import Path

COMPRESSED_NAME = "compressed.huff"
DECOMPRESSED_NAME = "decompressed.txt"
DECOMPRESSED_BINARY_NAME = "decompressed.bin"


def read_input(path, binary=False):
    """Read a file as UTF-8 text, or as raw bytes when ``binary`` is set.

    Text is read without newline translation so a round trip through the
    codec reproduces the file byte for byte.
    """
    if binary:
        return Path(path).read_bytes()
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_output(data, suggested_name, directory="."):
    """Write ``data`` to ``directory/suggested_name`` and return the path."""
    output_dir = Path(directory)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / suggested_name
    if isinstance(data, str):
        with open(output_path, "w", encoding="utf-8", newline="") as f:
            f.write(data)
    else:
        output_path.write_bytes(bytes(data))
    return output_path


def default_output_name(data):
    return DECOMPRESSED_NAME if isinstance(data, str) else DECOMPRESSED_BINARY_NAME
