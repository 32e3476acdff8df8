import math
from typing import Dict

from lm_models.bigram_model import BigramFrequencyTable, text_bigram_counts
from utils.constants import BLANK
from utils.key_codec import apply_key, normalize_text, validate_key


class BigramScorer:
    """Scores plaintext hypotheses against a reference bigram table.

    The score of a text is the sum over its bigrams of
    count_in_text * ln(count_in_reference). It is a monotonic proxy for the
    log-likelihood of the text under the reference model and is only
    meaningful when compared with the score of another key for the same
    ciphertext.

    With the default smoothing of 0, bigrams missing from the reference
    contribute nothing. A positive smoothing value adds a pseudo-count to
    every reference bigram, so missing bigrams contribute ln(smoothing)
    and present ones ln(count + smoothing).
    """

    def __init__(self, table: BigramFrequencyTable, smoothing: float = 0.0):
        """Initialize the scorer.

        Args:
            table: Reference bigram counts, shared and never modified.
            smoothing: Additive pseudo-count; 0 keeps the skip-missing rule.
        """
        if smoothing < 0:
            raise ValueError(f"smoothing must be non-negative, got {smoothing}")
        self.table = table
        self.smoothing = smoothing
        self._log_counts: Dict[int, float] = {}

    def _log_count(self, count: int) -> float:
        log_count = self._log_counts.get(count)
        if log_count is None:
            log_count = math.log(count + self.smoothing)
            self._log_counts[count] = log_count
        return log_count

    def log_score_text(self, plaintext: str) -> float:
        """
        Calculates the log-score of an already decrypted text.

        Leading and trailing blanks are ignored.
        """
        return self._score_normalized(normalize_text(plaintext))

    def _score_normalized(self, text: str) -> float:
        target_counts = text_bigram_counts(text.strip(BLANK))

        total = 0.0
        for bigram, count in target_counts.items():
            reference_count = self.table.get(bigram)
            if reference_count > 0:
                total += count * self._log_count(reference_count)
            elif self.smoothing > 0:
                total += count * self._log_count(0)
        return total

    def score(self, key: str, ciphertext: str) -> float:
        """Decrypt `ciphertext` with `key` and score the result.

        Args:
            key: Candidate decryption key.
            ciphertext: The text under attack.

        Returns:
            float: Higher is more English-like.
        """
        return self._score_normalized(apply_key(key, ciphertext))


def score(key: str, text: str, table: BigramFrequencyTable) -> float:
    """Score the decryption of `text` under `key` against `table`."""
    return BigramScorer(table).score(validate_key(key), text)
