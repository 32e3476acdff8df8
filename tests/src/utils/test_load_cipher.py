import json

import pytest

from utils.constants import ALPHABET
from utils.load_cipher import load_cipher, load_ciphertext, read_corpus_lines


class TestReadCorpusLines:

    def test_yields_lines_without_terminators(self, tmp_path):
        corpus = tmp_path / "corpus.txt"
        corpus.write_text("first line\nsecond line\n\nlast", encoding="utf-8")

        assert list(read_corpus_lines(corpus)) == ["first line", "second line", "", "last"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(read_corpus_lines(tmp_path / "missing.txt"))

    def test_undecodable_bytes_are_replaced(self, tmp_path):
        corpus = tmp_path / "corpus.txt"
        corpus.write_bytes(b"ab\xffcd\n")

        lines = list(read_corpus_lines(corpus))
        assert len(lines) == 1
        assert lines[0].startswith("ab") and lines[0].endswith("cd")


class TestLoadCipher:

    def test_ciphertext_and_key(self, tmp_path):
        key = ALPHABET[::-1]
        path = tmp_path / "cipher.json"
        path.write_text(json.dumps({"ciphertext": "GSV JFRXP", "key": key.lower()}), encoding="utf-8")

        ciphertext, encryption_key = load_cipher(path)

        assert ciphertext == "GSV JFRXP"
        assert encryption_key == key

    def test_key_is_optional(self, tmp_path):
        path = tmp_path / "cipher.json"
        path.write_text(json.dumps({"ciphertext": "XYZ"}), encoding="utf-8")

        assert load_cipher(path) == ("XYZ", None)

    def test_invalid_key(self, tmp_path):
        path = tmp_path / "cipher.json"
        path.write_text(json.dumps({"ciphertext": "XYZ", "key": "ABC"}), encoding="utf-8")

        with pytest.raises(ValueError):
            load_cipher(path)

    def test_missing_ciphertext(self, tmp_path):
        path = tmp_path / "cipher.json"
        path.write_text(json.dumps({"key": ALPHABET}), encoding="utf-8")

        with pytest.raises(KeyError):
            load_cipher(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_cipher(tmp_path / "missing.json")


def test_load_ciphertext_keeps_newlines(tmp_path):
    path = tmp_path / "cipher.txt"
    path.write_text("ABC\nDEF\n", encoding="utf-8")

    assert load_ciphertext(path) == "ABC\nDEF\n"
