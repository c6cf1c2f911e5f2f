import argparse
import logging
import sys
from experiment import ExperimentError, FalsePositiveExperiment
from options import ExperimentOptions

DEFAULTS = ExperimentOptions()

EPILOG = """examples:
  %(prog)s
  %(prog)s 15
  %(prog)s 15 4096
  %(prog)s 15 4096 1000000
  %(prog)s 15 4096 1000000 1234
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Measure the false positive rate of a Bloom filter against its estimate.',
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('log2_num_bits', nargs='?', type=int, default=DEFAULTS.log2_num_bits,
                        help=f'base-2 log of the filter size in bits (default {DEFAULTS.log2_num_bits})')
    parser.add_argument('num_entries', nargs='?', type=int, default=DEFAULTS.num_entries,
                        help=f'number of entries to insert (default {DEFAULTS.num_entries})')
    parser.add_argument('num_challenges', nargs='?', type=int, default=DEFAULTS.num_challenges,
                        help=f'number of non-members used to test false positives (default {DEFAULTS.num_challenges})')
    parser.add_argument('seed', nargs='?', type=int, default=None,
                        help='random seed (default: random)')
    parser.add_argument('--log-file', default=None, help='write a trace of the experiment to this file')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    return parser


def parse_options(args: argparse.Namespace) -> ExperimentOptions:
    # Non-positive counts fall back to the defaults
    return ExperimentOptions(
        log2_num_bits=args.log2_num_bits,
        num_entries=args.num_entries if args.num_entries > 0 else DEFAULTS.num_entries,
        num_challenges=args.num_challenges if args.num_challenges > 0 else DEFAULTS.num_challenges,
        seed=args.seed % 2**32 if args.seed is not None else None,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        result = FalsePositiveExperiment(parse_options(args)).run(args.log_file)
    except ExperimentError as e:
        print(e, file=sys.stderr)
        return 1

    print('[Test setting]')
    print(f'The number of entries         : {result.num_entries}')
    print(f'The total data size           : {result.total_size_bits} [bits]')
    print()
    print('[Bloom filter setting]')
    print(f'The filter size               : {result.bit_count} [bits]')
    print(f'The number of hash functions  : {result.hash_count}')
    print()
    print('[Bloom filter test]')
    print(f'True Positive Rate            : {result.true_positive_rate:g}')
    print(f'Estimated True Positive Rate  : {result.estimated_true_positive_rate:g}')
    print(f'False Positive Rate           : {result.false_positive_rate:g}')
    print(f'Estimated False Positive Rate : {result.estimated_false_positive_rate:g}')
    return 0


if __name__ == "__main__":
    sys.exit(main())
