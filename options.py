from dataclasses import dataclass
from helper import SUPPORTED_ELEMENT_TYPES


@dataclass
class FilterOptions:
    log2_num_bits: int = 8
    num_hashes: int = 5
    element_type: type = str

    def validate(self):
        # Ranges are not checked here: the filter clamps them and sets its error flags
        assert isinstance(self.log2_num_bits, int) and not isinstance(self.log2_num_bits, bool)
        assert isinstance(self.num_hashes, int) and not isinstance(self.num_hashes, bool)
        assert self.element_type in SUPPORTED_ELEMENT_TYPES


@dataclass
class ExperimentOptions:
    log2_num_bits: int = 13
    num_entries: int = 1024
    num_challenges: int = 1024
    seed: int | None = None

    def validate(self):
        assert isinstance(self.log2_num_bits, int)
        assert isinstance(self.num_entries, int)
        assert isinstance(self.num_challenges, int)
        assert self.seed is None or isinstance(self.seed, int)
        assert self.num_entries > 0
        assert self.num_challenges > 0
        assert self.seed is None or 0 <= self.seed < 2**32
