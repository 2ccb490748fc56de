"""亂數來源與時間計算測試"""
import pytest

from core.exceptions import EntropyUnavailable
from services import entropy_service
from services.entropy_service import SystemEntropySource
from services.timing_service import next_minute_boundary, preview_instant, to_iso


class TestSystemEntropySource:

    def test_sample_length_and_provider(self):
        source = SystemEntropySource(provider="secrets")
        sample = source.sample(16)
        assert len(sample) == 16
        assert len(sample.hex()) == 32
        assert source.name == "secrets"

    def test_samples_are_not_reused(self):
        source = SystemEntropySource()
        assert source.sample(16).data != source.sample(16).data

    def test_too_short_rejected(self):
        with pytest.raises(ValueError):
            SystemEntropySource().sample(4)

    def test_os_failure_propagates(self, monkeypatch):
        def broken(n):
            raise OSError("getrandom failed")

        monkeypatch.setattr(entropy_service.secrets, "token_bytes", broken)
        with pytest.raises(EntropyUnavailable):
            SystemEntropySource().sample(16)


class TestTiming:

    @pytest.mark.parametrize("now, expected", [
        (0, 60000),
        (1, 60000),
        (59999, 60000),
        (60000, 120000),
        (60001, 120000),
    ])
    def test_next_minute_boundary_is_strictly_after(self, now, expected):
        assert next_minute_boundary(now) == expected

    def test_preview_instant(self):
        assert preview_instant(120000) == 85000
        assert preview_instant(120000, lead_ms=10000) == 110000

    def test_to_iso(self):
        assert to_iso(0) == "1970-01-01T00:00:00.000Z"
        assert to_iso(60060000) == "1970-01-01T16:41:00.000Z"
        assert to_iso(1234) == "1970-01-01T00:00:01.234Z"
