import enum
import logging
import math
import mmh3
from bitarray import bitarray
from typing import Generic, TypeVar
from helper import check_element_type, native_bytes, normalize, odd_hash, to_text

logger = logging.getLogger(__name__)

T = TypeVar('T', str, int, float)

DEFAULT_LOG2_NUM_BITS = 8
DEFAULT_NUM_HASHES = 5
# 2^33 bits = 1 GiB
MAX_LOG2_NUM_BITS = 33


class ParameterError(enum.IntFlag):
    NONE = 0
    SIZE = 0x1
    HASH_COUNT = 0x2
    ALL = SIZE | HASH_COUNT


class BitArrayAllocationError(MemoryError):
    """The bit array could not be allocated at the requested size."""

    def __init__(self, num_bits: int):
        super().__init__(f'Could not allocate a bit array of {num_bits} bits')
        self.num_bits = num_bits


class BloomFilter(Generic[T]):
    def __init__(
            self,
            log2_num_bits: int = DEFAULT_LOG2_NUM_BITS,
            num_hashes: int = DEFAULT_NUM_HASHES,
            element_type: type = str,
    ):
        """
        Bloom filter over a bit array of 2**log2_num_bits bits.

        Probe positions come from enhanced double hashing (Dillinger & Manolios):
        h1 is MurmurHash3 over the element's native bytes, h2 is djb2 over its
        text forced odd so that it is coprime with the power-of-two array size.

        Out-of-range parameters never raise. They are clamped to the nearest
        usable value and recorded in error_flags.

        Args:
            log2_num_bits (int): Base-2 log of the bit array size, 0 to 33
            num_hashes (int): Number of probe positions per element, at least 1
            element_type (type): str, int or float
        """
        check_element_type(element_type)
        self.element_type = element_type
        self.bit_array = bitarray()
        self._log2_num_bits = 0
        self._hash_count = 1
        self._inserted_count = 0
        self._error_flags = ParameterError.NONE
        self.set_log2_num_bits(log2_num_bits)
        self.set_hash_count(num_hashes)

    @classmethod
    def from_options(cls, options) -> 'BloomFilter':
        options.validate()
        return cls(options.log2_num_bits, options.num_hashes, options.element_type)

    def insert(self, value: T):
        for index in self.hashes(value):
            self.bit_array[index] = 1
        self._inserted_count += 1

    def contains(self, value: T) -> bool:
        """False means definitely not inserted, True means probably inserted."""
        for index in self.hashes(value):
            if not self.bit_array[index]:
                return False
        return True

    def __contains__(self, value: T) -> bool:
        return self.contains(value)

    def first_hash(self, value: T) -> int:
        value = normalize(value, self.element_type)
        h, _ = mmh3.hash64(native_bytes(value), signed=False)
        return h & self._mask

    def second_hash(self, value: T) -> int:
        value = normalize(value, self.element_type)
        # text elements are hashed as-is, numbers through their text form
        text = value if isinstance(value, str) else to_text(value)
        return odd_hash(text) & self._mask

    def hashes(self, value: T) -> list[int]:
        """
        Return hash_count probe positions:
        hashes[0] = h1, then a += b, b += i at each step, all mod bit_count.
        """
        a = self.first_hash(value)
        b = self.second_hash(value)
        mask = self._mask
        hashes = [a]
        for i in range(1, self._hash_count):
            a = (a + b) & mask
            b = (b + i) & mask
            hashes.append(a)
        return hashes

    def set_log2_num_bits(self, log2_num_bits: int) -> bool:
        """
        Reallocate the bit array with 2**log2_num_bits bits, all unset.
        Values above 33 are clamped to 33 and negative values to 0; in both
        cases the SIZE flag is raised and False is returned.
        """
        _check_int('log2_num_bits', log2_num_bits)
        successful = 0 <= log2_num_bits <= MAX_LOG2_NUM_BITS
        if successful:
            clamped = log2_num_bits
        else:
            clamped = MAX_LOG2_NUM_BITS if log2_num_bits > MAX_LOG2_NUM_BITS else 0
            logger.warning('log2_num_bits=%d is out of range, using %d', log2_num_bits, clamped)

        self.bit_array = _allocate(1 << clamped)
        self._log2_num_bits = clamped
        logger.debug('Allocated bit array of %d bits', len(self.bit_array))

        if successful:
            self.clear_error(ParameterError.SIZE)
        else:
            self._error_flags |= ParameterError.SIZE
        return successful

    def set_hash_count(self, num_hashes: int) -> bool:
        """Set the number of hash functions, clamping values below 1 to 1."""
        _check_int('num_hashes', num_hashes)
        if num_hashes < 1:
            logger.warning('num_hashes=%d is out of range, using 1', num_hashes)
            self._hash_count = 1
            self._error_flags |= ParameterError.HASH_COUNT
            return False

        self._hash_count = num_hashes
        self.clear_error(ParameterError.HASH_COUNT)
        return True

    def set_optimal_hash_count(self, max_expected_entries: int) -> bool:
        """
        Set the hash count minimizing the false positive rate for the current
        array size, floor(ln 2 * bit_count / max_expected_entries).

        Returns False when the optimum is below 1 and had to be clamped. The
        HASH_COUNT flag is cleared regardless, since the caller did not pick
        the value.
        """
        _check_int('max_expected_entries', max_expected_entries)
        if max_expected_entries < 1:
            raise ValueError(f'max_expected_entries must be positive, got {max_expected_entries}')
        num_hashes = int(math.log(2) * self.bit_count / max_expected_entries)
        successful = self.set_hash_count(num_hashes)
        self.clear_error(ParameterError.HASH_COUNT)
        return successful

    def clear_error(self, flags: ParameterError | int = ParameterError.ALL):
        self._error_flags &= ~ParameterError(flags & ParameterError.ALL)

    @property
    def error_flags(self) -> ParameterError:
        return self._error_flags

    @property
    def has_error(self) -> bool:
        return self._error_flags != ParameterError.NONE

    @property
    def bit_count(self) -> int:
        return len(self.bit_array)

    @property
    def log2_num_bits(self) -> int:
        return self._log2_num_bits

    @property
    def hash_count(self) -> int:
        return self._hash_count

    @property
    def inserted_count(self) -> int:
        return self._inserted_count

    def fill_ratio(self) -> float:
        """Fraction of bits currently set."""
        return self.bit_array.count(1) / self.bit_count

    @property
    def _mask(self) -> int:
        return self.bit_count - 1

    def __repr__(self):
        return (f'{type(self).__name__}(element_type={self.element_type.__name__}, '
                f'bit_count={self.bit_count}, hash_count={self.hash_count}, '
                f'inserted_count={self.inserted_count}, error_flags={self.error_flags!r})')


def _check_int(name: str, value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f'{name} must be an int, got {type(value).__name__}')


def _allocate(num_bits: int) -> bitarray:
    try:
        bits = bitarray(num_bits)
        bits.setall(0)
    except MemoryError as e:
        raise BitArrayAllocationError(num_bits) from e
    return bits
