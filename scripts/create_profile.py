"""
Create a caller profile and print its API token.

Usage:
    python scripts/create_profile.py recruiter@example.com [credits]

The token is shown once; only its SHA-256 hash is stored.
"""
import sys

from cv_screener.core.config import settings
from cv_screener.core.security import generate_api_token, hash_api_token
from cv_screener.database import SessionLocal, init_db
from cv_screener.models.profile import Profile


def create_profile(email: str, credits: int):
    init_db()
    db = SessionLocal()
    try:
        existing = db.query(Profile).filter(Profile.email == email).first()
        if existing:
            print(f"Profile {email} already exists. Skipping.")
            return

        token = generate_api_token()
        profile = Profile(email=email, credits=credits, api_token_hash=hash_api_token(token))
        db.add(profile)
        db.commit()
        db.refresh(profile)
        print(f"Created profile {profile.id} -> {email} ({credits} credits)")
        print(f"API token: {token}")
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    create_profile(sys.argv[1], int(sys.argv[2]) if len(sys.argv) > 2 else settings.default_credits)
