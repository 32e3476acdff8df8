import logging
import random

import pytest

from search.reporting import AcceptanceTrace, ProgressReporter
from utils.constants import ALPHABET
from utils.key_codec import apply_key, invert_key, random_key


class TestProgressReporter:
    """Test periodic progress logging."""

    @pytest.fixture
    def encryption_key(self):
        return random_key(random.Random(17))

    @pytest.fixture
    def ciphertext(self, encryption_key):
        return apply_key(encryption_key, "a short message for the reporter")

    def test_logs_only_on_interval(self, ciphertext, caplog):
        reporter = ProgressReporter(ciphertext, log_interval=10)

        with caplog.at_level(logging.INFO, logger="search.reporting"):
            for i in range(25):
                reporter(i, ALPHABET, -1.0)

        assert "Iteration 0:" in caplog.text
        assert "Iteration 10:" in caplog.text
        assert "Iteration 20:" in caplog.text
        assert "Iteration 5:" not in caplog.text

    def test_logs_decryption_preview(self, ciphertext, encryption_key, caplog):
        reporter = ProgressReporter(ciphertext, log_interval=1, preview_length=7)

        with caplog.at_level(logging.INFO, logger="search.reporting"):
            reporter(0, invert_key(encryption_key), 12.5)

        assert "A SHORT..." in caplog.text
        assert "12.50" in caplog.text

    def test_reports_correct_mappings_with_ground_truth(self, ciphertext, encryption_key, caplog):
        reporter = ProgressReporter(ciphertext, log_interval=1, encryption_key=encryption_key)

        with caplog.at_level(logging.INFO, logger="search.reporting"):
            reporter(0, invert_key(encryption_key), 0.0)

        assert "Correct mappings: 26/26" in caplog.text

    def test_no_mapping_report_without_ground_truth(self, ciphertext, caplog):
        reporter = ProgressReporter(ciphertext, log_interval=1)

        with caplog.at_level(logging.INFO, logger="search.reporting"):
            reporter(0, ALPHABET, 0.0)

        assert "Correct mappings" not in caplog.text

    @pytest.mark.parametrize("log_interval", [0, -5])
    def test_invalid_interval(self, ciphertext, log_interval):
        with pytest.raises(ValueError):
            ProgressReporter(ciphertext, log_interval=log_interval)

    def test_invalid_ground_truth_key(self, ciphertext):
        with pytest.raises(ValueError):
            ProgressReporter(ciphertext, encryption_key="NOT A KEY")


class TestAcceptanceTrace:
    """Test the acceptance trace observer."""

    def test_records_scores(self):
        trace = AcceptanceTrace(ALPHABET)
        for i, score in enumerate([1.0, 2.0, 2.0]):
            trace(i, ALPHABET, score)
        assert trace.scores == [1.0, 2.0, 2.0]

    def test_acceptance_rate_counts_key_changes(self):
        trace = AcceptanceTrace(ALPHABET)
        other = ALPHABET[1] + ALPHABET[0] + ALPHABET[2:]

        trace(0, ALPHABET, 0.0)
        trace(1, other, 0.0)
        trace(2, other, 0.0)
        trace(3, ALPHABET, 0.0)
        trace(4, other, 0.0)
        trace(5, other, 0.0)

        assert trace.moves == [False, True, False, True, True, False]
        assert trace.acceptance_rate == 0.5

    def test_empty_trace(self):
        assert AcceptanceTrace(ALPHABET).acceptance_rate == 0.0

    def test_first_iteration_is_recorded(self):
        trace = AcceptanceTrace(ALPHABET)
        trace(0, ALPHABET[::-1], 0.0)

        assert trace.moves == [True]
        assert trace.acceptance_rate == 1.0

    def test_invalid_initial_key(self):
        with pytest.raises(ValueError):
            AcceptanceTrace("ABC")
