import json
import logging
import os
import pathlib
from typing import Iterator, Optional, Tuple

from utils.key_codec import validate_key

logger = logging.getLogger(__name__)


def read_corpus_lines(filepath: pathlib.Path) -> Iterator[str]:
    """Yield the lines of a reference corpus without their line terminators.

    Args:
        filepath: Path to a plain-text corpus file.

    Yields:
        str: One line of text at a time.

    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Corpus file not found: {filepath}")

    with open(filepath, encoding="utf-8", errors="replace") as f:
        for line in f:
            yield line.rstrip("\r\n")


def load_ciphertext(filepath: pathlib.Path) -> str:
    """Read a ciphertext file as one undifferentiated string."""
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Ciphertext file not found: {filepath}")
    with open(filepath, encoding="utf-8", errors="replace") as f:
        return f.read()


def load_cipher(filepath: pathlib.Path) -> Tuple[str, Optional[str]]:
    """Read a cipher from a JSON file.

    Args:
        filepath: The path to the JSON file.

    Returns:
        Tuple of (ciphertext, encryption_key) where:
        - ciphertext is the encrypted passage
        - encryption_key is the 26-letter key used to produce it, or None
          when the ground truth is unknown

    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Cipher file not found: {filepath}")
    with open(filepath, encoding="utf-8") as f:
        data = json.load(f)
    ciphertext = data["ciphertext"]
    encryption_key = data.get("key")
    if encryption_key is not None:
        encryption_key = validate_key(encryption_key.upper())
    logger.info(f"Loaded cipher of {len(ciphertext)} characters from {filepath}")
    return ciphertext, encryption_key
