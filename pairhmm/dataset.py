import csv
from collections import namedtuple
import numpy as np
import pandas as pd


Testcase = namedtuple(
    'Testcase',
    ['haplotype', 'read', 'read_quals', 'insertion_gop', 'deletion_gop',
     'overall_gcp'])

QUAL_OFFSET = 33
columns = ['haplotype', 'read', 'read_quals', 'insertion_gop',
           'deletion_gop', 'overall_gcp']


def decode_quals(s, offset=QUAL_OFFSET):
    """ Phred+33 ASCII string to raw phred values. """
    q = np.frombuffer(s.encode('ascii'), dtype=np.uint8).astype(np.int64)
    if len(q) and q.min() < offset:
        raise ValueError(f'`{s}` is not phred+{offset} encoded')
    return (q - offset).astype(np.uint8)


def encode_quals(q, offset=QUAL_OFFSET):
    return (np.asarray(q, dtype=np.uint8) + offset).tobytes().decode('ascii')


def read_table(path):
    """ Read a whitespace delimited table of test cases.

    Parameters
    ----------
    path : str or file-like
        One record per line: haplotype, read and the four quality
        strings (phred+33), optionally followed by an expected log10
        likelihood.

    Returns
    -------
    pd.DataFrame
        Columns ``haplotype``, ``read``, ``read_quals``,
        ``insertion_gop``, ``deletion_gop``, ``overall_gcp`` and
        ``expected`` (NaN when absent).
    """
    # '#' and '"' are valid phred+33 characters
    df = pd.read_table(path, header=None, sep=r'\s+',
                       quoting=csv.QUOTE_NONE, dtype=str,
                       keep_default_na=False)
    if df.shape[1] not in (6, 7):
        raise ValueError(f'Expected 6 or 7 columns, found {df.shape[1]}')
    if df.shape[1] == 6:
        df[6] = np.nan
    df.columns = columns + ['expected']
    df['expected'] = pd.to_numeric(df['expected'])
    return df


def read_testcases(path):
    """ Parse test cases from a table, see ``read_table``.

    Returns
    -------
    testcases : list of Testcase
    expected : np.ndarray
        Expected log10 likelihoods, NaN where not given.
    """
    df = read_table(path)
    testcases = [
        Testcase(row.haplotype, row.read,
                 decode_quals(row.read_quals),
                 decode_quals(row.insertion_gop),
                 decode_quals(row.deletion_gop),
                 decode_quals(row.overall_gcp))
        for row in df.itertuples(index=False)]
    return testcases, df['expected'].values.astype(np.float64)


def max_lengths(testcases):
    """ Longest haplotype and read among the test cases. """
    hap = max((len(tc.haplotype) for tc in testcases), default=1)
    read = max((len(tc.read) for tc in testcases), default=1)
    return hap, read


def write_results(results, handle):
    """ One log10 likelihood per line, in input order. """
    for x in results:
        handle.write(f'{x}\n')
