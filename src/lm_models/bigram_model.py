"""
Bigram frequency table over the 27-symbol alphabet (A-Z plus blank).

The table is the reference language model for decipherment: it maps each
ordered pair of normalized symbols to the number of times that pair occurs
in a reference corpus.

Normalization of a pair (a, b):
  letter    + letter     -> (A, B)
  letter    + nonletter  -> (A, " ")
  nonletter + letter     -> (" ", B)
  nonletter + nonletter  -> (" ", " ")

Pairs never span two corpus lines. Pairs that never occur have no entry;
an empty corpus gives an empty table, under which every key scores 0 and
the sampler accepts every proposal.
"""

import logging
import pathlib
from types import MappingProxyType
from typing import Iterable, Iterator, List, Tuple

from nltk.probability import FreqDist
from nltk.util import bigrams

from utils.constants import MIN_DISTINCT_BIGRAMS
from utils.formatting import clean_corpus_line
from utils.key_codec import normalize_text
from utils.load_cipher import read_corpus_lines

logger = logging.getLogger(__name__)

Bigram = Tuple[str, str]


class BigramFrequencyTable:
    """Read-only mapping from symbol pairs to positive corpus counts.

    Built once and passed by reference to whatever needs to score text.
    """

    def __init__(self, counts: FreqDist, num_lines: int = 0):
        """Freeze a frequency distribution into a table.

        Args:
            counts: Bigram counts; non-positive entries are dropped.
            num_lines: Number of corpus lines the counts came from.
        """
        self._freqdist = FreqDist({pair: count for pair, count in counts.items() if count > 0})
        self._counts = MappingProxyType(dict(self._freqdist))
        self._total = sum(self._counts.values())
        self.num_lines = num_lines

    @property
    def counts(self) -> MappingProxyType:
        return self._counts

    @property
    def total(self) -> int:
        """Sum of all bigram counts."""
        return self._total

    def get(self, bigram: Bigram, default: int = 0) -> int:
        return self._counts.get(bigram, default)

    def most_common(self, n: int = 10) -> List[Tuple[Bigram, int]]:
        return self._freqdist.most_common(n)

    def __getitem__(self, bigram: Bigram) -> int:
        return self._counts[bigram]

    def __contains__(self, bigram: object) -> bool:
        return bigram in self._counts

    def __iter__(self) -> Iterator[Bigram]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"BigramFrequencyTable(distinct={len(self)}, total={self.total}, lines={self.num_lines})"


def text_bigram_counts(text: str) -> FreqDist:
    """Count the normalized bigrams of a single string.

    Unlike the corpus builder, the string is treated as one sequence,
    including any newlines it contains.
    """
    return FreqDist(bigrams(normalize_text(text)))


def build_bigram_table(lines: Iterable[str]) -> BigramFrequencyTable:
    """Build a bigram table from lines of reference text.

    Args:
        lines: Lines of the reference corpus. Trailing line terminators
               are ignored.

    Returns:
        BigramFrequencyTable: Counts of every adjacent pair within a line.
    """
    counts = FreqDist()
    num_lines = 0
    for line in lines:
        num_lines += 1
        counts.update(bigrams(normalize_text(line.rstrip("\r\n"))))
    return BigramFrequencyTable(counts, num_lines=num_lines)


def check_table(table: BigramFrequencyTable, minimum: int = MIN_DISTINCT_BIGRAMS) -> bool:
    """Warn when a table is too sparse to guide the sampler.

    Args:
        table: The reference table.
        minimum: Fewest distinct bigrams considered usable.

    Returns:
        bool: True if the table has at least `minimum` distinct bigrams.
    """
    if len(table) < minimum:
        logger.warning(
            f"Reference table has only {len(table)} distinct bigrams (minimum {minimum}); "
            f"scores will barely distinguish keys and the sampler degrades to a random walk"
        )
        return False
    return True


def load_bigram_table(filepath: pathlib.Path, clean: bool = False, spell_numbers: bool = False) -> BigramFrequencyTable:
    """Load a reference corpus from disk and build its bigram table.

    Args:
        filepath: Path to a plain-text corpus, read line by line.
        clean: If True, transliterate each line to ASCII first.
        spell_numbers: If True (and `clean`), spell out digits as words.

    Returns:
        BigramFrequencyTable: The finished table.
    """
    logger.info(f"Building bigram table from {filepath}...")
    lines = read_corpus_lines(filepath)
    if clean:
        lines = (clean_corpus_line(line, spell_numbers=spell_numbers) for line in lines)
    table = build_bigram_table(lines)

    logger.info("Bigram table built!")
    logger.info(f"  - Lines: {table.num_lines:,}")
    logger.info(f"  - Distinct bigrams: {len(table)}")
    logger.info(f"  - Total bigrams: {table.total:,}")
    logger.debug(f"  - Most common: {table.most_common(5)}")
    check_table(table)
    return table
