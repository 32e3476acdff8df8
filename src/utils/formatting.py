from unidecode import unidecode
import re
from num2words import num2words
from parameter_validator import parameter_validator, strongly_typed

from utils.constants import BLANK


def numbers_to_words(text: str) -> str:
	"""Convert all numbers in the input text to their word representations.

	Args:
			text (str): The input text containing numbers.

	Returns:
		str: The text with numbers converted to words.

	"""

	def replace_number(match: re.Match) -> str:
		number_str = match.group()
		if "." in number_str:
			return num2words(float(number_str))
		return num2words(int(number_str))

	return re.sub(r"\d+(\.\d+)?", replace_number, text)


def clean_corpus_line(line: str, spell_numbers: bool = False) -> str:
    """
    Prepares one line of reference text for bigram counting.

    1. Transliterates to ASCII (e.g., "niño" -> "nino") so accented
       letters are counted as the letters they carry.
    2. Optionally converts numbers to words ("12" -> "twelve").

    Case and punctuation are left alone; the bigram builder folds both.
    """
    line = line.rstrip("\r\n")
    if spell_numbers:
        line = numbers_to_words(line)
    return unidecode(line)


@parameter_validator(text=strongly_typed)
def format_text(text: str) -> str:
    """
    Cleans a plaintext or decryption for display.

    1. Transliterates to ASCII and converts to uppercase.
    2. Replaces anything that is not A-Z with a blank.
    3. Collapses runs of blanks into one and trims the ends.
    """
    text = unidecode(text).upper()
    text = re.sub(r"[^A-Z]", BLANK, text)
    text = re.sub(r" +", BLANK, text).strip()
    return text


def preview(text: str, length: int) -> str:
    """Shorten text for log output."""
    if len(text) <= length:
        return text
    return f"{text[:length]}..."
