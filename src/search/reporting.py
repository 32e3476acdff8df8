import logging
from typing import List, Optional

from utils.constants import LOG_INTERVAL, PLAINTEXT_LENGTH_TO_SHOW
from utils.formatting import preview
from utils.key_codec import apply_key, count_correct_mappings, validate_key

logger = logging.getLogger(__name__)


class ProgressReporter:
    """Logs snapshots of the decryption while a sampler runs.

    Attach an instance to MetropolisSampler.run as a callback.
    """

    def __init__(self, ciphertext: str, log_interval: int = LOG_INTERVAL,
                 preview_length: int = PLAINTEXT_LENGTH_TO_SHOW,
                 encryption_key: Optional[str] = None):
        """
        Args:
            ciphertext: The text being attacked.
            log_interval: Log every this many iterations.
            preview_length: Characters of the decryption to show.
            encryption_key: Ground-truth key, when known, to report
                            how many letters are already mapped correctly.
        """
        if log_interval < 1:
            raise ValueError(f"log_interval must be at least 1, got {log_interval}")
        self.ciphertext = ciphertext
        self.log_interval = log_interval
        self.preview_length = preview_length
        self.encryption_key = validate_key(encryption_key) if encryption_key is not None else None

    def __call__(self, iteration: int, key: str, score: float) -> None:
        if iteration % self.log_interval != 0:
            return
        plaintext = apply_key(key, self.ciphertext)
        logger.info(f"Iteration {iteration}:")
        logger.info(f"  Current score: {score:.2f}")
        if self.encryption_key is not None:
            correct = count_correct_mappings(self.encryption_key, key)
            logger.info(f"  Correct mappings: {correct}/26")
        logger.info(f"  Current plaintext: {preview(plaintext, self.preview_length)}")


class AcceptanceTrace:
    """Records the score and whether the key moved at every iteration.

    Args:
        initial_key: The sampler's key before its first iteration, so the
                     first proposal is judged like every other one.
    """

    def __init__(self, initial_key: str):
        self.scores: List[float] = []
        self.moves: List[bool] = []
        self._last_key = validate_key(initial_key)

    def __call__(self, iteration: int, key: str, score: float) -> None:
        # Only an accepted proposal changes the key
        self.moves.append(key != self._last_key)
        self._last_key = key
        self.scores.append(score)

    @property
    def acceptance_rate(self) -> float:
        if not self.moves:
            return 0.0
        return sum(self.moves) / len(self.moves)
