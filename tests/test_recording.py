"""Tests for motion recordings and synthetic streams."""

from __future__ import annotations

from pathlib import Path

import pytest

from jumprec.core.exceptions import RecordingError
from jumprec.core.types import MotionSample
from jumprec.sensors.recording import HEADER, load_recording, save_recording
from jumprec.sensors.synthetic import (
    JumpProfile,
    synthesize_baseline,
    synthesize_jumps,
)


class TestRecording:
    """Tests for CSV recording I/O."""

    def test_round_trip(self, tmp_path: Path) -> None:
        samples, flags = synthesize_jumps(2, noise_sigma=0.02, seed=1)
        path = tmp_path / "recordings" / "session.csv"

        save_recording(path, samples, flags)
        loaded, loaded_flags = load_recording(path)

        assert loaded == samples
        assert loaded_flags == flags

    def test_header(self, tmp_path: Path) -> None:
        path = tmp_path / "session.csv"
        save_recording(path, synthesize_baseline(0.05))

        first_line = path.read_text().splitlines()[0]

        assert first_line == "Timestamp,AX,AY,AZ,RX,RY,RZ,Jump"
        assert tuple(first_line.split(",")) == HEADER

    def test_unlabeled_save(self, tmp_path: Path) -> None:
        path = tmp_path / "session.csv"
        save_recording(path, synthesize_baseline(0.1))

        _, flags = load_recording(path)

        assert flags == [False] * 10

    def test_out_of_order_timestamps(self, tmp_path: Path) -> None:
        path = tmp_path / "session.csv"
        path.write_text(
            "Timestamp,AX,AY,AZ,RX,RY,RZ,Jump\n"
            "0.00,0,0,0,0,0,0,0\n"
            "0.02,0,0,0,0,0,0,0\n"
            "0.01,0,0,0,0,0,0,0\n"
        )

        with pytest.raises(RecordingError, match="not increasing"):
            load_recording(path)

    def test_bad_header(self, tmp_path: Path) -> None:
        path = tmp_path / "session.csv"
        path.write_text("t,x,y,z\n0.0,0,0,0\n")

        with pytest.raises(RecordingError):
            load_recording(path)

    def test_bad_row(self, tmp_path: Path) -> None:
        path = tmp_path / "session.csv"
        path.write_text("Timestamp,AX,AY,AZ,RX,RY,RZ,Jump\n0.0,abc,0,0,0,0,0,0\n")

        with pytest.raises(RecordingError):
            load_recording(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RecordingError):
            load_recording(tmp_path / "missing.csv")

    def test_label_count_mismatch(self, tmp_path: Path) -> None:
        samples = synthesize_baseline(0.1)

        with pytest.raises(RecordingError):
            save_recording(tmp_path / "session.csv", samples, [True])


class TestSyntheticStreams:
    """Tests for scripted sample streams."""

    def test_jump_layout(self) -> None:
        samples, flags = synthesize_jumps(3)

        assert len(samples) == 3 * 60 + 50
        assert [i for i, flag in enumerate(flags) if flag] == [18, 78, 138]
        takeoff = samples[18]
        assert takeoff.vertical_acceleration == 1.8
        assert takeoff.total_acceleration == pytest.approx(2.0, abs=0.01)
        assert samples[10].vertical_acceleration == -0.4

    def test_timestamps_strictly_increase(self) -> None:
        samples, _ = synthesize_jumps(5, start_time=12.5, lead_in=0.3)

        assert samples[0].timestamp == 12.5
        assert all(b.timestamp > a.timestamp for a, b in zip(samples, samples[1:]))

    def test_slower_cadence_pads_cycles(self) -> None:
        samples, flags = synthesize_jumps(2, cadence_hz=1.0, trailing=0.0)

        assert len(samples) == 200
        assert [i for i, flag in enumerate(flags) if flag] == [18, 118]

    def test_cadence_too_fast(self) -> None:
        with pytest.raises(ValueError):
            synthesize_jumps(3, cadence_hz=5.0)

    def test_noise_is_reproducible(self) -> None:
        first, _ = synthesize_jumps(1, noise_sigma=0.05, seed=42)
        second, _ = synthesize_jumps(1, noise_sigma=0.05, seed=42)

        assert first == second
        assert first != synthesize_jumps(1)[0]

    def test_baseline_is_quiet(self) -> None:
        samples = synthesize_baseline(3.0)

        assert len(samples) == 300
        assert all(isinstance(s, MotionSample) for s in samples)
        assert all(s.total_acceleration == 0.0 for s in samples)

    def test_profile_length(self) -> None:
        profile = JumpProfile(landing_samples=4)

        assert profile.length == 56
        assert profile.takeoff_offset == 18
        assert profile.accelerations().shape == (56, 3)
