import pathlib
import string

ALPHABET = string.ascii_uppercase
BLANK = " "
SYMBOLS = ALPHABET + BLANK

TOTAL_ITERATIONS = 20000
LOG_INTERVAL = 500
PLAINTEXT_LENGTH_TO_SHOW = 100

# Below this many distinct bigrams the scores stop guiding the walk
MIN_DISTINCT_BIGRAMS = 100

PROJECT_ROOT = pathlib.Path(__file__).parent.parent.parent
DATA_PATH = PROJECT_ROOT / "data"
CORPUS_PATH = DATA_PATH / "corpus"
DEFAULT_CORPUS_PATH = CORPUS_PATH / "english.txt"
