import pytest

from app.services import gamification


@pytest.mark.parametrize("points,badge", [
    (0, "Guardian"),
    (999, "Guardian"),
    (1000, "Protector"),
    (1999, "Protector"),
    (2000, "Master"),
    (15000, "Master"),
])
def test_badge_boundaries(points, badge):
    assert gamification.badge_for_points(points)[0] == badge


def test_badge_emojis():
    assert gamification.badge_for_points(0) == ("Guardian", "🌱")
    assert gamification.badge_for_points(1000) == ("Protector", "🌳")
    assert gamification.badge_for_points(2000) == ("Master", "👑")


def test_next_badge():
    assert gamification.next_badge(0) == (1000, "Protector", "🌳")
    assert gamification.next_badge(1000) == (2000, "Master", "👑")
    assert gamification.next_badge(2500) is None


def test_progress_percentage():
    assert gamification.progress_percentage(0) == 0
    assert gamification.progress_percentage(500) == 50
    assert gamification.progress_percentage(1500) == 50
    assert gamification.progress_percentage(2000) == 100


def test_report_award_default():
    assert gamification.report_award() == 50
