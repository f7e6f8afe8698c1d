"""
Seed script for the Mangrove Watch mock DB or Firestore.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Force mock DB even if FIREBASE configured: python scripts/seed_db.py --apply --force-mock

Behavior:
  - Loads `db_seed.json` from repo root.
  - Creates each user through the auth service (password hashed, role permissions and badge set).
    Existing e-mails are skipped.
  - Submits each incident as its reporter, so the reporter earns points like a real submission.

NOTE: When applying to real Firestore, ensure `FIREBASE_CREDENTIALS_PATH` and `USE_MOCK_DB=false` are set in `.env`.
"""

import argparse
import json
import os

from app.core.settings import settings
from app.models.incident import IncidentCreate
from app.models.user import UserRole


def load_seed(path: str = "./db_seed.json") -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def seed_users(users: list, apply: bool = False) -> dict:
    """Create seed accounts. Returns {email: user} for accounts that exist afterwards."""
    from app.services.auth_service import AuthError, get_auth_service
    from app.services.user_service import get_user_service

    created = {}
    for entry in users:
        email = entry["email"].lower()
        print(f"Preparing user: {email} ({entry['role']})")
        if not apply:
            continue

        existing = get_user_service().get_user_by_email(email)
        if existing:
            print(f"Exists: {email}")
            created[email] = existing
            continue

        try:
            role = UserRole(entry["role"])
            if role == UserRole.CITIZEN:
                user = get_auth_service().signup(email, entry["password"], entry["name"])["user"]
            else:
                user = get_auth_service().create_staff_user(email, entry["password"], entry["name"], role)
            created[email] = user
            print(f"Wrote: users/{user['id']}")
        except (AuthError, ValueError) as e:
            print(f"Failed to create {email}: {e}")
    return created


def seed_incidents(incidents: list, users: dict, apply: bool = False):
    from app.services.incident_service import get_incident_service

    for entry in incidents:
        reporter = entry["reporter"].lower()
        print(f"Preparing incident by {reporter}: {entry['description'][:40]}...")
        if not apply:
            continue

        user = users.get(reporter)
        if user is None:
            print(f"Skipped: reporter {reporter} not found")
            continue

        try:
            data = IncidentCreate(description=entry["description"], location=entry["location"])
            incident = get_incident_service().submit_incident(user, data)
            print(f"Wrote: incidents/{incident['id']} (+{incident.get('points_awarded', 0)} points)")
        except Exception as e:
            print(f"Failed to write incident for {reporter}: {e}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--force-mock", action="store_true", help="Force use of mock DB even if FIREBASE configured")
    args = parser.parse_args()

    seed_path = os.path.join(os.getcwd(), "db_seed.json")
    if not os.path.exists(seed_path):
        print(f"Seed file not found: {seed_path}")
        return

    seed = load_seed(seed_path)

    if args.force_mock:
        print("Forcing mock DB usage for this run.")
        settings.USE_MOCK_DB = True

    users = seed_users(seed.get("users", []), apply=args.apply)
    seed_incidents(seed.get("incidents", []), users, apply=args.apply)

    if args.apply:
        print("Seeding completed.")
    else:
        print("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
