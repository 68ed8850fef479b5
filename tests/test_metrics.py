import logging

import pytest

from Posture_Engine.core.landmarks import BodyPosition, Landmark, PostureMode
from Posture_Engine.core.metrics import (
    PostureMetrics, derive_metrics, derive_sitting_metrics, derive_squat_metrics, neck_tilt_degrees
)
from Posture_Engine.exceptions import MissingLandmarkError
from tests.conftest import sitting_position, squat_position


class TestLandmarks:
    def test_parse_formats(self):
        assert Landmark.parse((0.1, 0.2)) == Landmark(0.1, 0.2)
        assert Landmark.parse({'x': 0.1, 'y': 0.2, 'visibility': 0.7}) == Landmark(0.1, 0.2, 0.0, 0.7)
        assert Landmark.parse([0.1, 0.2, 0.3, 0.9]).to_tuple() == (0.1, 0.2, 0.3, 0.9)

    def test_grouped_layout(self):
        position = BodyPosition.from_dict({
            'head': {'x': 0.5, 'y': 0.2},
            'shoulders': {'left': {'x': 0.4, 'y': 0.35}, 'right': {'x': 0.6, 'y': 0.36}},
            'hips': {'x': 0.5, 'y': 0.5},
            'knees': {'left': {'x': 0.42, 'y': 0.7}, 'right': {'x': 0.58, 'y': 0.7}},
            'ankles': {'left': {'x': 0.4, 'y': 0.9}, 'right': {'x': 0.6, 'y': 0.9}},
            'timestamp': 12.5,
        })
        assert position.missing(PostureMode.SQUAT) == []
        assert position['right_shoulder'] == Landmark(0.6, 0.36)
        assert position.timestamp == 12.5

    def test_missing_landmarks_fail_fast(self):
        position = sitting_position(spine=None, neck=None)
        with pytest.raises(MissingLandmarkError) as exc:
            position.require(PostureMode.SITTING)
        assert exc.value.missing == ('neck', 'spine')
        assert exc.value.mode == 'sitting'
        assert isinstance(exc.value, KeyError)

    def test_positions_are_hashable_by_value(self):
        a = sitting_position()
        b = BodyPosition.from_dict(a.to_dict())
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b, sitting_position(spine=(0.6, 0.5))}) == 2

    def test_out_of_range_is_logged_not_fatal(self, caplog):
        position = sitting_position(hips=(0.5, 1.2))
        with caplog.at_level(logging.WARNING):
            position.require(PostureMode.SITTING)
        assert position.out_of_range() == ['hips']
        assert 'hips' in caplog.text


class TestSittingMetrics:
    def test_upright(self):
        metrics = derive_sitting_metrics(sitting_position())
        assert metrics.neck_angle == pytest.approx(0.0, abs=1e-9)
        assert metrics.back_curvature == pytest.approx(0.0)
        assert metrics.shoulder_alignment == pytest.approx(0.0)
        assert metrics.overall_stability == pytest.approx(1.0)

    def test_not_applicable_fields_are_zero(self):
        metrics = derive_sitting_metrics(sitting_position(spine=(0.6, 0.5)))
        assert (metrics.hip_alignment, metrics.knee_tracking, metrics.squat_depth) == (0, 0, 0)

    @pytest.mark.parametrize("head,expected", [
        ((0.5, 0.15), 0.0),    # straight above the neck
        ((0.6, 0.15), 45.0),   # 45 deg forward lean
        ((0.5, 0.35), 0.0),    # straight below folds to vertical too
    ])
    def test_neck_angle_is_tilt_from_vertical(self, head, expected):
        metrics = derive_sitting_metrics(sitting_position(head=head))
        assert metrics.neck_angle == pytest.approx(expected, abs=1e-9)

    @pytest.mark.parametrize("head_x", [0.6, 0.4])
    def test_neck_tilt_ignores_direction(self, head_x):
        position = sitting_position(head=(head_x, 0.15))
        assert neck_tilt_degrees(position) == pytest.approx(45.0)

    def test_neck_angle_clamped_to_valid_range(self):
        metrics = derive_sitting_metrics(sitting_position(head=(0.7, 0.25)))
        assert metrics.neck_angle == pytest.approx(60.0)

    def test_slouch_and_shoulders(self):
        metrics = derive_sitting_metrics(sitting_position(
            spine=(0.42, 0.5), left_shoulder=(0.35, 0.40), right_shoulder=(0.65, 0.35),
        ))
        assert metrics.back_curvature == pytest.approx(0.08)
        assert metrics.shoulder_alignment == pytest.approx(0.05)

    def test_stability_has_floor(self):
        metrics = derive_sitting_metrics(sitting_position(hips=(0.1, 0.65)))
        assert metrics.overall_stability == pytest.approx(0.5)

    def test_pure(self):
        position = sitting_position(head=(0.58, 0.16))
        assert derive_sitting_metrics(position) == derive_sitting_metrics(position)


class TestSquatMetrics:
    def test_full_depth(self):
        metrics = derive_squat_metrics(squat_position())
        assert metrics.squat_depth == pytest.approx(1.0)
        assert metrics.knee_tracking == pytest.approx(0.02)
        assert metrics.back_curvature == pytest.approx(0.0)
        assert metrics.neck_angle == 0.0
        assert metrics.shoulder_alignment == 0.0

    def test_depth_monotonic_and_bounded(self):
        depths = [derive_squat_metrics(squat_position(hips=(0.5, y))).squat_depth
                  for y in (0.4, 0.5, 0.55, 0.6, 0.65, 0.7, 0.8)]
        assert depths == sorted(depths)
        assert depths[0] == 0.0
        assert depths[-1] == 1.0
        assert depths[3] == pytest.approx(0.5)

    def test_depth_stays_full_below_knees(self):
        at_knees = derive_squat_metrics(squat_position(hips=(0.5, 0.7))).squat_depth
        below = derive_squat_metrics(squat_position(hips=(0.5, 0.8))).squat_depth
        assert at_knees == below == pytest.approx(1.0)

    def test_knee_tracking_uses_worst_side(self):
        metrics = derive_squat_metrics(squat_position(left_knee=(0.45, 0.7), right_knee=(0.48, 0.7)))
        assert metrics.knee_tracking == pytest.approx(0.12)

    def test_forward_lean(self):
        metrics = derive_squat_metrics(squat_position(
            left_shoulder=(0.6, 0.45), right_shoulder=(0.8, 0.45), hips=(0.4, 0.65),
        ))
        assert metrics.back_curvature == pytest.approx(0.3)

    def test_missing_knee(self):
        with pytest.raises(MissingLandmarkError):
            derive_metrics(squat_position(left_knee=None), PostureMode.SQUAT)

    def test_to_dict(self):
        assert set(PostureMetrics().to_dict()) == {
            'neck_angle', 'back_curvature', 'shoulder_alignment', 'hip_alignment',
            'knee_tracking', 'squat_depth', 'overall_stability',
        }
