import random
from typing import Optional

from utils.constants import ALPHABET, BLANK

_LETTER_INDEX = {letter: i for i, letter in enumerate(ALPHABET)}


def normalize_char(char: str) -> str:
    """Map a single character onto the 27-symbol alphabet.

    Letters are case-folded to uppercase; everything else (digits,
    punctuation, whitespace, non-ASCII letters) becomes the blank symbol.
    """
    upper = char.upper()
    if upper in _LETTER_INDEX:
        return upper
    return BLANK


def normalize_text(text: str) -> str:
    return "".join(normalize_char(char) for char in text)


def is_valid_key(key: str) -> bool:
    """Return True if `key` is a permutation of the 26 letters."""
    return isinstance(key, str) and len(key) == len(ALPHABET) and set(key) == set(ALPHABET)


def validate_key(key: str) -> str:
    """Return `key` unchanged, or raise ValueError if it is not a permutation.

    Args:
        key: Candidate substitution key.

    Returns:
        str: The same key.

    Raises:
        ValueError: If the key is not a bijection over the alphabet.
    """
    if not is_valid_key(key):
        raise ValueError(f"Key must be a permutation of {ALPHABET}, got {key!r}")
    return key


def apply_key(key: str, text: str) -> str:
    """Apply a substitution key to text.

    The letter at position i of `key` replaces the i-th letter of the
    canonical alphabet. The same function encrypts (with an arbitrary
    permutation) and decrypts (with the inverse permutation). Non-letters
    are replaced by the blank symbol, so the output has exactly the length
    of the input.

    Args:
        key: A permutation of the 26 uppercase letters.
        text: Text to transform.

    Returns:
        str: The transformed text, uppercase letters and blanks only.
    """
    translated = []
    for char in text:
        index = _LETTER_INDEX.get(char.upper())
        translated.append(BLANK if index is None else key[index])
    return "".join(translated)


def random_key(rng: Optional[random.Random] = None) -> str:
    """Draw a uniformly random permutation of the alphabet."""
    rng = rng if rng is not None else random.Random()
    letters = list(ALPHABET)
    rng.shuffle(letters)
    return "".join(letters)


def invert_key(key: str) -> str:
    """Return the key that undoes `key` under apply_key."""
    inverse = [""] * len(ALPHABET)
    for i, letter in enumerate(key):
        inverse[_LETTER_INDEX[letter]] = ALPHABET[i]
    return "".join(inverse)


def compose_keys(first: str, second: str) -> str:
    """Key equivalent to applying `first` and then `second`."""
    return "".join(second[_LETTER_INDEX[letter]] for letter in first)


def count_correct_mappings(encryption_key: str, decryption_key: str) -> int:
    """Count letters that survive an encrypt/decrypt round trip unchanged.

    This compares the composition of the two keys against the identity
    permutation; 26 means the decryption key is exactly right.
    """
    composed = compose_keys(encryption_key, decryption_key)
    return sum(1 for letter, mapped in zip(ALPHABET, composed) if letter == mapped)


def symbol_error_rate(encryption_key: str, decryption_key: str) -> float:
    """Proportion of letters that a decryption key maps incorrectly."""
    return 1 - count_correct_mappings(encryption_key, decryption_key) / len(ALPHABET)
