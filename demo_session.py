#!/usr/bin/env python3
"""
Posture Engine - Simulated Session Demo
Runs the analysis engine over a simulated webcam session or video clip and
prints one line per observation plus the session summary.

Usage:
    python demo_session.py --mode sitting --frames 20
    python demo_session.py --mode squat --video 45 --seed 7
    python demo_session.py --mode sitting --replay fixtures.json
    python demo_session.py --mode squat --video-file clip.mp4
"""

import argparse
import json
import logging

from Posture_Engine.core.engine import PostureAnalysisEngine
from Posture_Engine.core.session import SessionRecorder, SessionKind
from Posture_Engine.exceptions import MissingLandmarkError
from Posture_Engine.sources import (
    ReplayLandmarkSource, SimulatedLandmarkSource, VideoLandmarkSource, SmoothedLandmarkSource
)

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Posture Engine session demo")
    parser.add_argument("--mode", "-m", choices=["sitting", "squat"], default="sitting", help="Analysis mode")
    parser.add_argument("--frames", "-n", type=int, default=20, help="Webcam ticks to simulate")
    parser.add_argument("--video", type=float, default=None, help="Simulate an uploaded clip of this many seconds")
    parser.add_argument("--replay", default=None, help="Replay positions from a JSON file")
    parser.add_argument("--video-file", default=None,
                        help="Detect landmarks in a video file (needs the detector extra)")
    parser.add_argument("--seed", type=int, default=None, help="Noise seed")
    parser.add_argument("--smooth", action="store_true", help="Kalman-smooth landmarks")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def open_detector():
    # Imported here so the demo runs without mediapipe/opencv installed
    from Posture_Engine.detectors.pose_detector import PoseDetector
    return PoseDetector()


def detect_video(path, mode) -> ReplayLandmarkSource:
    """Run the pose detector over a clip; frames without a person are dropped."""
    with open_detector() as detector:
        positions = []
        for frame_number, t, position in detector.iter_video(path, mode):
            if position is None:
                print(f"  #{frame_number:3d}  {t:6.1f}s  no person detected")
                continue
            positions.append(position)
    logger.info("%s: %d frames with a detected pose", path, len(positions))
    return ReplayLandmarkSource(positions, mode)


def build_source(args):
    if args.replay:
        return ReplayLandmarkSource.from_json(args.replay, args.mode), SessionKind.UPLOAD
    if args.video_file:
        return detect_video(args.video_file, args.mode), SessionKind.UPLOAD
    if args.video is not None:
        return VideoLandmarkSource(args.mode, args.video, seed=args.seed), SessionKind.UPLOAD
    return SimulatedLandmarkSource(args.mode, seed=args.seed, frames=args.frames), SessionKind.WEBCAM


def run(args) -> int:
    source, kind = build_source(args)
    if args.smooth:
        source = SmoothedLandmarkSource(source)

    engine = PostureAnalysisEngine()
    recorder = SessionRecorder(source.mode, kind)

    print(f"Posture Engine - {source.mode.value} ({kind.value})")
    for frame_number, position in source:
        try:
            analysis = engine.analyze(position, frame_number, source.mode)
        except MissingLandmarkError as e:
            print(f"  #{frame_number:3d}  skipped: {e}")
            continue
        recorder.record(analysis, position.timestamp or 0.0)
        top = analysis.primary_issue.message if analysis.primary_issue else "-"
        print(f"  #{frame_number:3d}  score {analysis.overall_score:5.1f}  "
              f"{analysis.score_band:<10s}  conf {analysis.confidence:.2f}  {top}")

    if not len(recorder):
        print("No observations.")
        return 1

    summary = recorder.summary()
    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return 0

    print("\n" + "=" * 50)
    print(f"  Frames:          {summary.total_frames}")
    print(f"  Good posture:    {summary.good_posture_percentage:.1f}%")
    print(f"  Average score:   {summary.average_score:.1f}")
    print(f"  Avg confidence:  {summary.average_confidence:.2f}")
    print(f"  Critical issues: {summary.critical_issues}")
    for rec in summary.recommendations:
        print(f"   - {rec}")
    print("=" * 50)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
