#!/usr/bin/env python
import argparse
import logging
import sys
import time

import numpy as np

from pairhmm.config import PairHMMConfig
from pairhmm.dataset import read_testcases, write_results, max_lengths

logger = logging.getLogger('pairhmm')


def main(args):
    if args.config is not None:
        config = PairHMMConfig.from_json(args.config)
    else:
        config = PairHMMConfig()
    for key in ('implementation', 'backend', 'max_haplotype_length',
                'max_read_length'):
        value = getattr(args, key)
        if value is not None:
            setattr(config, key, value)
    if args.no_tiering:
        config.tiered = False

    source = sys.stdin if args.input == '-' else args.input
    testcases, expected = read_testcases(source)
    logger.info('Read %d test cases', len(testcases))
    hmm = config.build(*max_lengths(testcases))
    logger.info('Computing with %r', hmm)

    start = time.time()
    results = hmm.compute_likelihoods(testcases)
    elapsed = (time.time() - start) * 1000

    if args.output is None:
        write_results(results, sys.stdout)
    else:
        with open(args.output, 'w') as handle:
            write_results(results, handle)

    logger.info('done in %.3fms', elapsed)
    if getattr(hmm, 'escalations', 0):
        logger.info('%d computations escalated to double precision',
                    hmm.escalations)
    known = ~np.isnan(expected)
    if known.any():
        diff = np.abs(np.asarray(results)[known] - expected[known])
        logger.info('Max absolute deviation from expected: %g', diff.max())


if __name__ == '__main__':
    parser = argparse.ArgumentParser(
        description='Compute pair HMM read likelihoods')
    parser.add_argument(
        'input', nargs='?', default='-',
        help='Test case table, one record per line (default stdin)')
    parser.add_argument(
        '-o', '--output', help='Output file (default stdout)',
        required=False, type=str, default=None)
    parser.add_argument(
        '--config', help='JSON configuration file',
        required=False, type=str, default=None)
    parser.add_argument(
        '--implementation',
        help='Pair HMM implementation {exact, original, logless}',
        required=False, type=str, default=None,
        choices=['exact', 'original', 'logless'])
    parser.add_argument(
        '--backend', help='Kernel backend {numba, torch}',
        required=False, type=str, default=None,
        choices=['numba', 'torch'])
    parser.add_argument(
        '--no-tiering', action='store_true',
        help='Compute in double precision only, no single precision pass')
    parser.add_argument(
        '--max-haplotype-length', required=False, type=int, default=None,
        help='Longest haplotype (default longest in the input)')
    parser.add_argument(
        '--max-read-length', required=False, type=int, default=None,
        help='Longest read (default longest in the input)')
    parser.add_argument(
        '-v', '--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr)
    main(args)
