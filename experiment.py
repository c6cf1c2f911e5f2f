import logging
import numpy as np
from dataclasses import dataclass
from typing import Collection
from bloom import BloomFilter, ParameterError
from experiment_base import ExperimentBase
from options import ExperimentOptions

logger = logging.getLogger(__name__)

U64_MAX = np.iinfo(np.uint64).max


class ExperimentError(RuntimeError):
    pass


@dataclass
class ExperimentResult:
    num_entries: int
    num_challenges: int
    total_size_bits: int
    bit_count: int
    hash_count: int
    optimal_hash_count_set: bool
    true_positive_rate: float
    estimated_true_positive_rate: float
    false_positive_rate: float
    estimated_false_positive_rate: float


def generate_test_set(size: int, rng: np.random.Generator, exclude: Collection[str] = ()) -> set[str]:
    """
    Generate `size` distinct decimal strings of random unsigned 64-bit integers,
    none of which are in `exclude`.
    """
    entries: set[str] = set()
    while len(entries) < size:
        draws = rng.integers(0, U64_MAX, size=size - len(entries), dtype=np.uint64, endpoint=True)
        for draw in draws:
            entry = str(draw)
            if entry not in exclude:
                entries.add(entry)
    return entries


def total_size_bits(entries: Collection[str]) -> int:
    """Total size of the strings in bits, counting one terminator byte per string"""
    return sum((len(entry) + 1) * 8 for entry in entries)


def estimated_false_positive_rate(num_bits: int, num_hashes: int, num_entries: int) -> float:
    """(1 - (1 - 1/m)^(kn))^k, computed in log space"""
    if num_entries == 0:
        return 0.0
    m, k, n = num_bits, num_hashes, num_entries
    # m == 1 gives log(0); the limit is handled correctly by exp(-inf) == 0
    with np.errstate(divide='ignore'):
        return float(np.exp(k * np.log(1 - np.exp(k * n * np.log1p(-1.0 / m)))))


class FalsePositiveExperiment(ExperimentBase):
    def __init__(self, options: ExperimentOptions):
        super().__init__()
        options.validate()
        self.log2_num_bits = options.log2_num_bits
        self.num_entries = options.num_entries
        self.num_challenges = options.num_challenges
        self.seed = options.seed

    def run(self, log_file: str | None = None) -> ExperimentResult:
        """
        Fill a text Bloom filter with a random test set, then measure the true
        positive rate on that set and the false positive rate on a disjoint one.
        """
        self.log_file = open(log_file, 'w') if log_file else None
        self.indent = 0
        try:
            return self._run()
        finally:
            if self.log_file:
                self.log_file.close()
                self.log_file = None

    def _run(self) -> ExperimentResult:
        rng = np.random.default_rng(self.seed)

        bloom = BloomFilter(self.log2_num_bits)
        if bloom.error_flags & ParameterError.SIZE:
            raise ExperimentError('Failed to set the size of filter list.')

        test_set = generate_test_set(self.num_entries, rng)
        total_size = total_size_bits(test_set)
        self.log_write('TEST SETTING')
        self.log_indent()
        self.log_write(f'Entries: {self.num_entries}')
        self.log_write(f'Total data size: {total_size} bits')
        self.log_write(f'Seed: {self.seed}')
        self.log_deindent()

        optimal_hash_count_set = bloom.set_optimal_hash_count(self.num_entries)
        if not optimal_hash_count_set:
            logger.warning('Failed to set optimal number of hash functions')
        self.log_write('BLOOM FILTER SETTING')
        self.log_indent()
        self.log_write(f'Filter size: {bloom.bit_count} bits')
        self.log_write(f'Hash functions: {bloom.hash_count}')
        self.log_write(f'Optimal hash count set? {optimal_hash_count_set}')
        self.log_deindent()

        for entry in test_set:
            bloom.insert(entry)
        self.log_write(f'Fill ratio: {self.log_as_str(bloom.fill_ratio())}')

        true_positives = sum(1 for entry in test_set if bloom.contains(entry))
        true_positive_rate = true_positives / self.num_entries

        challenge_set = generate_test_set(self.num_challenges, rng, exclude=test_set)
        false_positives = sum(1 for entry in challenge_set if bloom.contains(entry))
        false_positive_rate = false_positives / self.num_challenges
        estimated_fp = estimated_false_positive_rate(bloom.bit_count, bloom.hash_count, self.num_entries)

        self.log_write('BLOOM FILTER TEST')
        self.log_indent()
        self.log_write(f'True positives: {true_positives} / {self.num_entries}')
        self.log_write(f'False positives: {false_positives} / {self.num_challenges}')
        self.log_write(f'Estimated false positive rate: {self.log_as_str(estimated_fp)}')
        self.log_deindent()

        return ExperimentResult(
            num_entries=self.num_entries,
            num_challenges=self.num_challenges,
            total_size_bits=total_size,
            bit_count=bloom.bit_count,
            hash_count=bloom.hash_count,
            optimal_hash_count_set=optimal_hash_count_set,
            true_positive_rate=true_positive_rate,
            estimated_true_positive_rate=1.0,
            false_positive_rate=false_positive_rate,
            estimated_false_positive_rate=estimated_fp,
        )
