import struct
import numpy as np
import pytest
from helper import check_element_type, djb2, native_bytes, normalize, odd_hash, to_text


def test_djb2_empty_is_seed():
    assert djb2('') == 5381
    assert djb2(b'') == 5381


def test_djb2_known_value():
    assert djb2('a') == 5381 * 33 + ord('a')
    assert djb2('ab') == (5381 * 33 + ord('a')) * 33 + ord('b')


def test_djb2_differs_by_length_and_content():
    hashes = {djb2('a'), djb2('aa'), djb2('aaa'), djb2('b')}
    assert len(hashes) == 4


def test_djb2_order_sensitive():
    assert djb2('ab') != djb2('ba')


def test_djb2_str_matches_utf8_bytes():
    assert djb2('héllo') == djb2('héllo'.encode('utf-8'))


def test_djb2_wraps_to_64_bits():
    h = djb2('x' * 1000)
    assert 0 <= h < 2**64


@pytest.mark.parametrize('text', ['', 'a', 'hello', '12345678901234567890', 'x' * 500])
def test_odd_hash_is_odd(text):
    h = odd_hash(text)
    assert h % 2 == 1
    assert h < 2**64


def test_to_text():
    assert to_text('abc') == 'abc'
    assert to_text(42) == '42'
    assert to_text(1.5) == '1.5'


def test_native_bytes():
    assert native_bytes('ab') == b'ab'
    assert native_bytes(0) == b'\x00'
    assert native_bytes(1) == b'\x01'
    assert native_bytes(-1) == b'\xff'
    assert native_bytes(128) == b'\x80\x00'
    assert native_bytes(1.5) == struct.pack('<d', 1.5)


def test_native_bytes_of_number_differs_from_its_text():
    assert native_bytes(12) != native_bytes('12')


def test_normalize_accepts_supported_values():
    assert normalize('a', str) == 'a'
    assert normalize(3, int) == 3
    assert type(normalize(np.int64(3), int)) is int
    assert normalize(2, float) == 2.0
    assert type(normalize(np.float32(0.5), float)) is float


@pytest.mark.parametrize('value, element_type', [
    (1, str),
    ('1', int),
    (1.0, int),
    (True, int),
    (np.bool_(True), float),
    ('1.0', float),
    (None, str),
    (b'abc', str),
])
def test_normalize_rejects_unsupported_values(value, element_type):
    with pytest.raises(TypeError):
        normalize(value, element_type)


@pytest.mark.parametrize('element_type', [bytes, bool, list, complex, 'str'])
def test_check_element_type_rejects(element_type):
    with pytest.raises(TypeError):
        check_element_type(element_type)


@pytest.mark.parametrize('element_type', [str, int, float])
def test_check_element_type_accepts(element_type):
    check_element_type(element_type)


def test_normalize_rejects_int_too_large_for_float():
    with pytest.raises(TypeError) as excinfo:
        normalize(10**400, float)
    assert isinstance(excinfo.value.__cause__, OverflowError)
