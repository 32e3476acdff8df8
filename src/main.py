import argparse
import logging
import pathlib
import random
from typing import Optional, Tuple

from lm_models.bigram_model import load_bigram_table
from lm_models.bigram_scorer import BigramScorer
from search.metropolis_sampler import MetropolisSampler, run_chains
from search.reporting import ProgressReporter
from utils.constants import DEFAULT_CORPUS_PATH, LOG_INTERVAL, TOTAL_ITERATIONS
from utils.formatting import format_text
from utils.key_codec import apply_key, count_correct_mappings, random_key
from utils.load_cipher import load_cipher, load_ciphertext

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recover the key of a simple substitution cipher with Metropolis-Hastings sampling."
    )
    parser.add_argument("--corpus", type=pathlib.Path, default=DEFAULT_CORPUS_PATH,
                        help="reference text used to build the bigram table")
    parser.add_argument("--clean-corpus", action="store_true",
                        help="transliterate corpus lines to ASCII before counting")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--ciphertext", help="ciphertext given inline")
    source.add_argument("--ciphertext-file", type=pathlib.Path, help="file holding the ciphertext")
    source.add_argument("--cipher-json", type=pathlib.Path,
                        help='JSON file with "ciphertext" and an optional encryption "key"')
    source.add_argument("--plaintext-file", type=pathlib.Path,
                        help="demo mode: encrypt this text with a random key, then decrypt it")
    parser.add_argument("--iterations", type=int, default=TOTAL_ITERATIONS)
    parser.add_argument("--log-interval", type=int, default=LOG_INTERVAL)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--chains", type=int, default=1)
    parser.add_argument("--smoothing", type=float, default=0.0,
                        help="additive pseudo-count for bigrams missing from the corpus")
    return parser.parse_args(argv)


def load_target(args: argparse.Namespace, rng: random.Random) -> Tuple[str, Optional[str]]:
    """Return (ciphertext, encryption_key) for the selected input."""
    if args.ciphertext is not None:
        return args.ciphertext, None
    if args.ciphertext_file is not None:
        return load_ciphertext(args.ciphertext_file), None
    if args.cipher_json is not None:
        return load_cipher(args.cipher_json)

    plaintext = load_ciphertext(args.plaintext_file)
    encryption_key = random_key(rng)
    logger.info(f"Demo mode: encrypting {args.plaintext_file} with key {encryption_key}")
    return apply_key(encryption_key, plaintext), encryption_key


def main(argv=None) -> int:
    args = parse_args(argv)

    table = load_bigram_table(args.corpus, clean=args.clean_corpus)
    scorer = BigramScorer(table, smoothing=args.smoothing)

    rng = random.Random(args.seed)
    ciphertext, encryption_key = load_target(args, rng)
    reporter = ProgressReporter(ciphertext, log_interval=args.log_interval, encryption_key=encryption_key)

    logger.info("=" * 60)
    logger.info(f"Metropolis-Hastings decipherment ({args.chains} chain(s), {args.iterations} iterations)")
    logger.info("=" * 60)

    if args.chains > 1:
        result, _ = run_chains(ciphertext, scorer, args.chains, args.iterations,
                               seed=args.seed, callbacks=[reporter])
    else:
        sampler = MetropolisSampler(ciphertext, scorer, rng=rng)
        result = sampler.run(args.iterations, callbacks=[reporter])

    logger.info(f"Decryption key: {result.key}")
    logger.info(f"Decrypted text: {format_text(result.plaintext)}")
    if encryption_key is not None:
        correct = count_correct_mappings(encryption_key, result.key)
        logger.info(f"Correctly recovered letters: {correct}/26")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
