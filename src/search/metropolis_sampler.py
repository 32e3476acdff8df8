"""
Metropolis-Hastings sampler for simple substitution ciphers.

The state of the chain is a single decryption key (a permutation of the 26
letters). Each iteration:

1. Proposes a neighbouring key by swapping two letter mappings.
2. Scores the decryption the proposal implies against the reference bigram
   table (a log-space score, so differences are log likelihood ratios).
3. Accepts with probability min(1, exp(proposed_score - current_score)).

There is no convergence test; the chain runs for a fixed number of
iterations and the caller judges the decryption. Observers attached to
`run` see every iteration, which is where progress reporting lives.
"""

import math
import random
import logging
import sys
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple

from lm_models.bigram_model import check_table
from lm_models.bigram_scorer import BigramScorer
from search.key_proposals import propose_swap
from utils.constants import TOTAL_ITERATIONS, PLAINTEXT_LENGTH_TO_SHOW
from utils.formatting import preview
from utils.key_codec import apply_key, random_key, validate_key

logger = logging.getLogger(__name__)

IterationCallback = Callable[[int, str, float], None]


class SamplerResult(NamedTuple):
    key: str
    score: float
    best_key: str
    best_score: float
    plaintext: str
    iterations: int
    accepted: int
    seed: Optional[int] = None

    @property
    def acceptance_rate(self) -> float:
        if self.iterations == 0:
            return 0.0
        return self.accepted / self.iterations


def acceptance_probability(proposed_score: float, current_score: float) -> float:
    """Metropolis acceptance probability for two log-space scores.

    Returns min(1, exp(proposed_score - current_score)) without ever
    exponentiating a positive difference, so large improvements cannot
    overflow. Differences below about -745 underflow exp() and are clamped
    to the smallest positive float, keeping the result in (0, 1].
    """
    delta = proposed_score - current_score
    if delta >= 0.0:
        return 1.0
    return max(math.exp(delta), sys.float_info.min)


class MetropolisSampler:
    def __init__(self,
                 ciphertext: str,
                 scorer: BigramScorer,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 initial_key: Optional[str] = None):
        """
        Initializes the sampler with the ciphertext, the scorer and a random source.

        Args:
            ciphertext: The encrypted text to attack.
            scorer: Scorer holding the reference bigram table.
            seed: Seed for a private random generator (ignored if `rng` is given).
            rng: Random generator to use instead of creating one.
            initial_key: Starting decryption key; drawn at random if omitted.
        """
        self._ciphertext = ciphertext
        self.scorer = scorer
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)

        check_table(scorer.table)

        if initial_key is None:
            self.current_key = random_key(self.rng)
        else:
            self.current_key = validate_key(initial_key)
        self.current_score = self.scorer.score(self.current_key, self._ciphertext)

        self.best_key = self.current_key
        self.best_score = self.current_score
        self.iteration = 0

    @property
    def ciphertext(self) -> str:
        return self._ciphertext

    def decrypt(self, key: Optional[str] = None) -> str:
        """Decrypt the ciphertext with `key`, or with the current key."""
        return apply_key(key if key is not None else self.current_key, self._ciphertext)

    def step(self) -> bool:
        """
        Performs one Metropolis-Hastings transition.

        Returns:
            bool: True if the proposed key was accepted.
        """
        proposed_key = propose_swap(self.current_key, self.rng)
        proposed_score = self.scorer.score(proposed_key, self._ciphertext)

        ap = acceptance_probability(proposed_score, self.current_score)
        accepted = self.rng.random() <= ap
        if accepted:
            self.current_key = proposed_key
            self.current_score = proposed_score

            if self.current_score > self.best_score:
                self.best_key = self.current_key
                self.best_score = self.current_score

        logger.debug(f"Proposal {proposed_key} score={proposed_score:.2f} ap={ap:.4f} accepted={accepted}")
        self.iteration += 1
        return accepted

    def run(self, num_iterations: int = TOTAL_ITERATIONS,
            callbacks: Iterable[IterationCallback] = ()) -> SamplerResult:
        """
        Runs the chain for a fixed number of iterations.

        Args:
            num_iterations: Number of proposals to make.
            callbacks: Observers called as callback(iteration, key, score)
                       after every iteration with the chain's current state.
                       The index is zero-based and keeps counting across
                       repeated runs of the same sampler.

        Returns:
            SamplerResult: Final and best keys with their scores and the
                           number of accepted proposals.
        """
        if num_iterations < 0:
            raise ValueError(f"num_iterations must be non-negative, got {num_iterations}")
        callbacks = list(callbacks)

        logger.info(f"Starting Metropolis-Hastings sampling for {num_iterations} iterations...")
        logger.info(f"Initial score: {self.current_score:.2f}")
        logger.info(f"Initial key: {self.current_key}")

        accepted = 0
        for _ in range(num_iterations):
            if self.step():
                accepted += 1
            for callback in callbacks:
                callback(self.iteration - 1, self.current_key, self.current_score)

        plaintext = self.decrypt()
        logger.info("Sampling complete!")
        logger.info(f"Final score: {self.current_score:.2f} (best {self.best_score:.2f})")
        if num_iterations:
            logger.info(f"Acceptance rate: {accepted / num_iterations:.2%}")
        logger.info(f"Final key: {self.current_key}")
        logger.info(f"Final plaintext: {preview(plaintext, PLAINTEXT_LENGTH_TO_SHOW)}")

        return SamplerResult(
            key=self.current_key,
            score=self.current_score,
            best_key=self.best_key,
            best_score=self.best_score,
            plaintext=plaintext,
            iterations=num_iterations,
            accepted=accepted,
            seed=self.seed,
        )


def run_chains(ciphertext: str,
               scorer: BigramScorer,
               num_chains: int,
               num_iterations: int = TOTAL_ITERATIONS,
               seed: Optional[int] = None,
               callbacks: Iterable[IterationCallback] = ()) -> Tuple[SamplerResult, List[SamplerResult]]:
    """Run independent chains and keep the one with the highest final score.

    Each chain gets its own generator, seeded from a master generator, so
    a single seed reproduces the whole run. Chains share only the scorer,
    which is read-only.

    Args:
        ciphertext: The encrypted text to attack.
        scorer: Scorer holding the reference bigram table.
        num_chains: How many chains to run.
        num_iterations: Iterations per chain.
        seed: Master seed.
        callbacks: Observers attached to every chain.

    Returns:
        Tuple of (best_result, all_results).
    """
    if num_chains < 1:
        raise ValueError(f"num_chains must be at least 1, got {num_chains}")
    callbacks = list(callbacks)

    master = random.Random(seed)
    results: List[SamplerResult] = []
    for chain in range(num_chains):
        chain_seed = master.randrange(2**32)
        logger.info(f"Chain {chain + 1}/{num_chains} (seed {chain_seed})")
        sampler = MetropolisSampler(ciphertext, scorer, seed=chain_seed)
        results.append(sampler.run(num_iterations, callbacks))

    best = max(results, key=lambda result: result.score)
    logger.info(f"Best chain final score: {best.score:.2f} (seed {best.seed})")
    return best, results
