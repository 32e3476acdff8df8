import random

from utils.constants import ALPHABET


def propose_swap(key: str, rng: random.Random) -> str:
    """Propose a neighbouring key by exchanging two letter mappings.

    Two distinct letters are drawn without replacement, found in `key`,
    and their positions swapped. The input key is left untouched and the
    result differs from it in exactly two positions, so it is always a
    valid permutation.

    Args:
        key: The current substitution key.
        rng: Random source owned by the caller.

    Returns:
        str: The proposed key.
    """
    first, second = rng.sample(ALPHABET, 2)
    i, j = key.index(first), key.index(second)

    letters = list(key)
    letters[i], letters[j] = letters[j], letters[i]
    return "".join(letters)
