from datetime import datetime, timezone

import pytest

from app.services.analytics_service import _month_keys, get_analytics_service


def _incident(db, doc_id, status, created_at, city=None, inside=False):
    db.collection("incidents").document(doc_id).set({
        "status": status,
        "created_at": created_at,
        "location": {"latitude": 0, "longitude": 0, "city": city},
        "mangrove_detection": {"is_in_mangrove_area": inside},
    })


def _user(db, doc_id, role, points, is_active=True):
    db.collection("users").document(doc_id).set({"role": role, "points": points, "is_active": is_active})


def test_month_keys_cross_year_boundary():
    now = datetime(2024, 2, 15, tzinfo=timezone.utc)
    assert _month_keys(now, 4) == [(2023, 11), (2023, 12), (2024, 1), (2024, 2)]


def test_community_stats_empty(db):
    assert get_analytics_service().community_stats() == {
        "total_users": 0,
        "total_incidents": 0,
        "total_points": 0,
        "average_points_per_user": 0,
    }


def test_community_and_admin_stats(db):
    _user(db, "u1", "citizen", 100)
    _user(db, "u2", "citizen", 51, is_active=False)
    _user(db, "a1", "admin", 0)
    now = datetime(2024, 3, 1, tzinfo=timezone.utc)
    _incident(db, "i1", "pending", now)
    _incident(db, "i2", "resolved", now)

    community = get_analytics_service().community_stats()
    assert community["total_users"] == 3
    assert community["total_points"] == 151
    assert community["average_points_per_user"] == 50

    admin = get_analytics_service().admin_stats()
    assert admin["admin_users"] == 1
    assert admin["regular_users"] == 2
    assert admin["active_users"] == 2
    assert admin["pending_incidents"] == 1
    assert admin["resolved_incidents"] == 1


def test_incident_analytics(db):
    now = datetime(2024, 3, 20, tzinfo=timezone.utc)
    _incident(db, "i1", "pending", datetime(2024, 3, 2, tzinfo=timezone.utc), city="Mumbai", inside=True)
    _incident(db, "i2", "approved", datetime(2024, 3, 5, tzinfo=timezone.utc), city="Mumbai")
    _incident(db, "i3", "pending", datetime(2024, 1, 9, tzinfo=timezone.utc), city="Kolkata", inside=True)
    _incident(db, "i4", "rejected", datetime(2023, 6, 1, tzinfo=timezone.utc))

    result = get_analytics_service().incident_analytics(months=3, now=now)

    assert result["total_incidents"] == 4
    assert result["incidents_this_month"] == 2
    assert result["status_distribution"] == {"pending": 2, "approved": 1, "rejected": 1}
    assert result["monthly_trend"] == [
        {"month": "2024-01", "label": "Jan", "count": 1},
        {"month": "2024-02", "label": "Feb", "count": 0},
        {"month": "2024-03", "label": "Mar", "count": 2},
    ]
    assert result["top_locations"] == [
        {"location": "Mumbai", "count": 2},
        {"location": "Kolkata", "count": 1},
        {"location": "Unknown", "count": 1},
    ]
    assert result["in_mangrove_area"] == 2


def test_incident_analytics_rejects_zero_months(db):
    with pytest.raises(ValueError):
        get_analytics_service().incident_analytics(months=0)
