"""Unit Tests for core utilities."""

from datetime import timedelta
from unittest.mock import patch

from modules.backend.core.utils import (
    generate_id,
    next_timestamp,
    random_alphanumeric,
    utc_now,
)


class TestNextTimestamp:
    def test_without_previous_returns_now(self):
        before = utc_now()
        stamp = next_timestamp(None)
        assert stamp >= before

    def test_moves_past_previous_when_clock_is_behind(self):
        future = utc_now() + timedelta(seconds=30)
        assert next_timestamp(future) == future + timedelta(microseconds=1)

    def test_moves_past_previous_when_clock_has_not_advanced(self):
        frozen = utc_now()
        with patch("modules.backend.core.utils.utc_now", return_value=frozen):
            assert next_timestamp(frozen) > frozen

    def test_uses_clock_when_it_is_ahead(self):
        past = utc_now() - timedelta(seconds=30)
        assert next_timestamp(past) > past + timedelta(microseconds=1)

    def test_naive_utc(self):
        assert next_timestamp(None).tzinfo is None


class TestIds:
    def test_generate_id_is_unique(self):
        assert generate_id() != generate_id()

    def test_random_alphanumeric_length_and_alphabet(self):
        value = random_alphanumeric(32)
        assert len(value) == 32
        assert value.isalnum()
        assert value.isascii()
