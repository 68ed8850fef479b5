import json

import pytest

import demo_session
from demo_session import main
from tests.conftest import sitting_position, squat_position


def test_simulated_webcam_session(capsys):
    assert main(["--mode", "squat", "--frames", "6", "--seed", "5"]) == 0
    out = capsys.readouterr().out
    assert "squat (webcam)" in out
    assert "Frames:          6" in out


def test_video_session_json(capsys):
    assert main(["--mode", "sitting", "--video", "5", "--seed", "2", "--smooth", "--json"]) == 0
    out = capsys.readouterr().out
    summary = json.loads(out[out.index("{"):])
    assert summary["total_frames"] == 10
    assert summary["kind"] == "upload"


def test_replay_session(tmp_path, capsys):
    path = tmp_path / "replay.json"
    path.write_text(json.dumps([sitting_position().to_dict()] * 4))
    assert main(["--mode", "sitting", "--replay", str(path)]) == 0
    assert "Frames:          4" in capsys.readouterr().out


def test_zero_length_video_is_rejected():
    with pytest.raises(ValueError):
        main(["--mode", "sitting", "--video", "0"])


class FakeDetector:
    """Stands in for PoseDetector: yields a clip with one empty and one partial frame."""

    def __init__(self):
        self.closed = False

    def iter_video(self, path, mode):
        yield 1, 0.0, squat_position()
        yield 2, 0.5, None
        yield 3, 1.0, squat_position(left_knee=None)
        yield 4, 1.5, squat_position()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.closed = True


def test_video_file_session(monkeypatch, capsys):
    detector = FakeDetector()
    monkeypatch.setattr(demo_session, "open_detector", lambda: detector)

    assert main(["--mode", "squat", "--video-file", "clip.mp4"]) == 0
    out = capsys.readouterr().out
    assert "squat (upload)" in out
    assert "no person detected" in out
    assert "skipped: " in out
    assert "Frames:          2" in out
    assert detector.closed
