"""
Pytest configuration and shared fixtures.
"""

import os

# Must be set before config.py is imported
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from typing import Dict, Any

from app import app as flask_app
from models import db


LONG_BIO = (
    "Lifestyle and fashion creator sharing daily outfits, thrift hauls and honest "
    "product reviews with an engaged audience across India."
)


@pytest.fixture
def creator_profile() -> Dict[str, Any]:
    """Creator profile with every checklist field filled in."""
    return {
        "user_type": "creator",
        "email": "asha@example.com",
        "full_name": "Asha Rao",
        "location": "Mumbai",
        "niche": "Fashion,Lifestyle",
        "handle": "@asha.styles",
        "follower_count": 50000,
        "engagement_rate": 4.2,
        "bio": LONG_BIO,
        "avatar_url": "https://cdn.example.com/asha.png",
    }


@pytest.fixture
def brand_profile() -> Dict[str, Any]:
    """Brand profile with every checklist field filled in."""
    return {
        "user_type": "brand",
        "email": "team@threadco.example",
        "full_name": "Thread Co",
        "website": "https://threadco.example",
        "niche": "Fashion",
        "marketing_budget": 600,
        "follower_count": 10000,
        "location": "Mumbai",
        "goal": "Launch summer collection",
        "bio": "Sustainable cotton basics made in India, looking for honest creators.",
        "avatar_url": "https://cdn.example.com/threadco.png",
    }


@pytest.fixture
def app():
    flask_app.config["TESTING"] = True
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
    yield flask_app
    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def make_client(app):
    """Factory returning a logged-in test client for a new user."""

    def _make(email, user_type, password="Secret123", **profile_fields):
        client = app.test_client()
        response = client.post("/signup", json={
            "email": email,
            "password": password,
            "user_type": user_type,
        })
        assert response.status_code == 201, response.get_json()
        if profile_fields:
            response = client.post("/profile", json=profile_fields)
            assert response.status_code == 200, response.get_json()
        client.profile_id = response.get_json()["profile"]["id"]
        return client

    return _make


@pytest.fixture
def creator_client(make_client):
    return make_client(
        "asha@example.com", "creator",
        full_name="Asha Rao", location="Mumbai", niche="Fashion",
        follower_count=50000, engagement_rate=4.2,
    )


@pytest.fixture
def brand_client(make_client):
    return make_client(
        "team@threadco.example", "brand",
        full_name="Thread Co", location="Mumbai", niche="Fashion",
        marketing_budget=600,
    )
