import struct
import numpy as np
from typing import Any

DJB2_SEED = 5381
U64_MASK = (1 << 64) - 1

SUPPORTED_ELEMENT_TYPES = (str, int, float)


def djb2(text: str | bytes) -> int:
    """
    Daniel J. Bernstein's string hash: hash = hash * 33 + byte, starting at 5381.
    Text is hashed over its UTF-8 bytes and the result wraps to 64 bits.
    """
    data = text.encode('utf-8') if isinstance(text, str) else text
    h = DJB2_SEED
    for byte in data:
        h = ((h << 5) + h + byte) & U64_MASK
    return h


def odd_hash(text: str | bytes) -> int:
    """Return 2 * djb2(text) + 1 wrapped to 64 bits, which is always odd"""
    return ((djb2(text) << 1) | 1) & U64_MASK


def to_text(value: str | int | float) -> str:
    """Convert the given element to its canonical text"""
    if isinstance(value, str):
        return value
    return str(value)


def native_bytes(value: str | int | float) -> bytes:
    """
    Convert the given element to the bytes of its native representation.
    Text is UTF-8, ints are minimal signed little-endian, floats are IEEE-754 doubles.
    """
    if isinstance(value, str):
        return value.encode('utf-8')
    if isinstance(value, int):
        length = value.bit_length() // 8 + 1
        return value.to_bytes(length, 'little', signed=True)
    return struct.pack('<d', value)


def _is_bool(value: Any) -> bool:
    return isinstance(value, (bool, np.bool_))


def normalize(value: Any, element_type: type) -> str | int | float:
    """
    Check the given value against the filter's element type and convert numpy
    scalars to the plain Python type. Raises TypeError for anything else.
    """
    if element_type is str:
        if isinstance(value, str):
            return value
    elif element_type is int:
        if isinstance(value, (int, np.integer)) and not _is_bool(value):
            return int(value)
    elif element_type is float:
        if isinstance(value, (int, float, np.integer, np.floating)) and not _is_bool(value):
            try:
                return float(value)
            except OverflowError as e:
                raise TypeError(f'{value!r} is too large for a float Bloom filter') from e
    raise TypeError(f'{type(value).__name__} values are not supported by a '
                    f'{element_type.__name__} Bloom filter')


def check_element_type(element_type: Any):
    """Raise TypeError unless element_type is one of SUPPORTED_ELEMENT_TYPES"""
    if element_type not in SUPPORTED_ELEMENT_TYPES:
        supported = ', '.join(t.__name__ for t in SUPPORTED_ELEMENT_TYPES)
        raise TypeError(f'Unsupported element type {element_type!r}, expected one of: {supported}')
