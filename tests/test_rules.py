import pytest

from Posture_Engine.core.metrics import PostureMetrics
from Posture_Engine.core.rules import (
    IssueType, PostureRule, evaluate_rules, squat_rules, sitting_rules, unique
)

STABLE = 1.0


def squat_issues(stability=STABLE, **metrics):
    defaults = dict(squat_depth=0.5)
    defaults.update(metrics)
    issues, _ = evaluate_rules(squat_rules(), PostureMetrics(**defaults), stability, 0.0)
    return issues


def sitting_issues(stability=STABLE, **metrics):
    defaults = dict(neck_angle=17.0, back_curvature=0.21)
    defaults.update(metrics)
    issues, _ = evaluate_rules(sitting_rules(), PostureMetrics(**defaults), stability, 0.0)
    return issues


def types(issues):
    return [i.type for i in issues]


class TestSquatRules:
    def test_knee_valgus_threshold_is_strict(self):
        assert IssueType.CRITICAL not in types(squat_issues(knee_tracking=0.15))
        issues = squat_issues(knee_tracking=0.1500001)
        assert types(issues) == [IssueType.CRITICAL]
        assert issues[0].severity == 9

    def test_forward_lean(self):
        assert squat_issues(back_curvature=0.4) == []
        assert [i.severity for i in squat_issues(back_curvature=0.41)] == [8]

    def test_depth_and_shoulders(self):
        issues = squat_issues(squat_depth=0.29, shoulder_alignment=0.11)
        assert [(i.type, i.severity) for i in issues] == [
            (IssueType.WARNING, 6), (IssueType.WARNING, 5),
        ]

    def test_instability(self):
        assert [i.severity for i in squat_issues(stability=0.59)] == [3]
        assert squat_issues(stability=0.6) == []

    def test_excellent_form(self):
        issues = squat_issues(squat_depth=0.8, knee_tracking=0.02, back_curvature=0.1)
        assert types(issues) == [IssueType.GOOD]
        assert issues[0].severity == 0

    def test_all_rules_fire_independently_in_tier_order(self):
        issues = squat_issues(stability=0.1, knee_tracking=0.3, back_curvature=0.5,
                              squat_depth=0.1, shoulder_alignment=0.2)
        assert [i.severity for i in issues] == [9, 8, 6, 5, 3]

    def test_tips(self):
        metrics = PostureMetrics(knee_tracking=0.3, back_curvature=0.5, squat_depth=0.1)
        _, tips = evaluate_rules(squat_rules(), metrics, STABLE, 0.0)
        assert tips == [
            "Focus on knee alignment - imagine pushing the floor apart with your feet",
            "Improve ankle flexibility with calf stretches",
            "Practice bodyweight squats to improve depth",
        ]


class TestSittingRules:
    def test_neck_angle_20_triggers_nothing(self):
        assert sitting_issues(neck_angle=20) == []

    def test_neck_angle_just_above_20_is_warning(self):
        issues = sitting_issues(neck_angle=20.0001)
        assert [(i.type, i.severity) for i in issues] == [(IssueType.WARNING, 6)]

    def test_neck_tier_boundary_at_35(self):
        assert [(i.type, i.severity) for i in sitting_issues(neck_angle=35)] == [(IssueType.WARNING, 6)]
        assert [(i.type, i.severity) for i in sitting_issues(neck_angle=35.0001)] == [(IssueType.CRITICAL, 9)]

    def test_slouch_tiers(self):
        assert [i.severity for i in sitting_issues(back_curvature=0.25)] == []
        assert [i.severity for i in sitting_issues(back_curvature=0.26)] == [4]
        assert [i.severity for i in sitting_issues(back_curvature=0.5)] == [4]
        assert [i.severity for i in sitting_issues(back_curvature=0.51)] == [8]

    def test_shoulder_imbalance(self):
        assert [i.severity for i in sitting_issues(shoulder_alignment=0.09)] == [5]

    def test_fidgeting(self):
        assert [i.type for i in sitting_issues(stability=0.69)] == [IssueType.MINOR]

    def test_excellent_posture(self):
        issues = sitting_issues(neck_angle=10, back_curvature=0.1, shoulder_alignment=0.01)
        assert types(issues) == [IssueType.GOOD]
        assert issues[0].message.startswith("Excellent sitting posture")


def test_issue_carries_timestamp_and_serializes():
    issues, _ = evaluate_rules(sitting_rules(), PostureMetrics(neck_angle=40), STABLE, 123.0)
    assert issues[0].timestamp == 123.0
    assert issues[0].to_dict()['type'] == 'critical'


def test_recommendation_tips_are_deduplicated():
    tip = "Stand up and stretch"
    rules = [
        PostureRule('a', IssueType.WARNING, 1, "a", "a", lambda m, s: True, tip=tip),
        PostureRule('b', IssueType.WARNING, 1, "b", "b", lambda m, s: True, tip=tip),
    ]
    issues, tips = evaluate_rules(rules, PostureMetrics(), STABLE, 0.0)
    assert len(issues) == 2
    assert tips == [tip]


def test_unique_keeps_first_seen_order():
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
