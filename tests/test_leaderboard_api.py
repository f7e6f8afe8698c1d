def test_leaderboard_orders_by_points(client, signup, db):
    low, headers = signup(email="low@example.com", name="Low")
    high, _ = signup(email="high@example.com", name="High")
    gone, _ = signup(email="gone@example.com", name="Gone")
    users = db.collection("users")
    users.document(low["id"]).update({"points": 100})
    users.document(high["id"]).update({"points": 1200, "badge": "Protector"})
    users.document(gone["id"]).update({"points": 5000, "is_active": False})

    board = client.get("/leaderboard", headers=headers).json()

    assert [(e["rank"], e["name"], e["points"]) for e in board] == [(1, "High", 1200), (2, "Low", 100)]
    assert board[0]["badge"] == "Protector"

    limited = client.get("/leaderboard", params={"limit": 1}, headers=headers).json()
    assert [e["name"] for e in limited] == ["High"]

    mine = client.get("/leaderboard/me", headers=headers).json()
    assert mine["rank"] == 2


def test_leaderboard_requires_login(client):
    assert client.get("/leaderboard").status_code == 401


def test_community_stats(client, signup, submit):
    _, headers = signup(email="a@example.com")
    _, other = signup(email="b@example.com")
    submit(headers)
    submit(headers)
    submit(other)

    stats = client.get("/analytics/community", headers=headers).json()
    assert stats == {
        "total_users": 2,
        "total_incidents": 3,
        "total_points": 150,
        "average_points_per_user": 75,
    }
