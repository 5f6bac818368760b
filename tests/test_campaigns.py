"""
Tests for the campaign workflow.
"""

import pytest
from campaigns import TRANSITIONS


def _campaign(**overrides):
    data = {
        "title": "Summer drop",
        "budget": 25000,
        "deliverables": "2 reels and 3 stories",
        "start_date": "2026-11-01",
        "end_date": "2026-11-30",
    }
    data.update(overrides)
    return data


@pytest.fixture
def offered_campaign(creator_client, brand_client):
    response = brand_client.post("/campaigns", json=_campaign(creator_id=creator_client.profile_id))
    assert response.status_code == 201
    return response.get_json()["campaign"]


class TestTransitions:
    """The status table itself."""

    def test_terminal_states(self):
        assert TRANSITIONS["rejected"] == set()
        assert TRANSITIONS["completed"] == set()

    def test_proposed_moves(self):
        assert TRANSITIONS["proposed"] == {"accepted", "rejected"}


class TestCreateCampaign:
    """Test creating campaigns."""

    def test_brand_creates_offer(self, offered_campaign, creator_client):
        assert offered_campaign["status"] == "proposed"
        assert offered_campaign["creator_id"] == creator_client.profile_id
        assert offered_campaign["start_date"].startswith("2026-11-01")

        notifications = creator_client.get("/notifications").get_json()["notifications"]
        assert notifications[0]["type"] == "campaign_proposed"

    def test_creator_cannot_create(self, creator_client):
        response = creator_client.post("/campaigns", json=_campaign())
        assert response.status_code == 403

    def test_invalid_campaign(self, brand_client):
        response = brand_client.post("/campaigns", json=_campaign(budget=-1, title=""))
        assert response.status_code == 400
        assert len(response.get_json()["errors"]) == 2

    def test_oversized_budget_rejected(self, brand_client):
        response = brand_client.post("/campaigns", json=_campaign(budget=10**20))
        assert response.status_code == 400
        assert response.get_json()["type"] == "ValidationError"
        assert brand_client.get("/campaigns").get_json()["campaigns"] == []

    def test_boolean_creator_id_rejected(self, creator_client, brand_client):
        response = brand_client.post("/campaigns", json=_campaign(creator_id=True))
        assert response.status_code == 400

    def test_unknown_creator(self, brand_client):
        response = brand_client.post("/campaigns", json=_campaign(creator_id=999))
        assert response.status_code == 404

    def test_open_campaign_visible_to_creators(self, brand_client, make_client):
        brand_client.post("/campaigns", json=_campaign())
        creator = make_client("other@example.com", "creator")

        campaigns = creator.get("/campaigns").get_json()["campaigns"]
        assert len(campaigns) == 1
        assert campaigns[0]["creator_id"] is None


class TestCampaignWorkflow:
    """Test accept, reject and complete."""

    def test_accept_then_complete(self, offered_campaign, creator_client, brand_client):
        campaign_id = offered_campaign["id"]

        accepted = creator_client.post(f"/campaigns/{campaign_id}/accept").get_json()["campaign"]
        assert accepted["status"] == "accepted"

        completed = brand_client.post(f"/campaigns/{campaign_id}/complete").get_json()["campaign"]
        assert completed["status"] == "completed"

        detail = creator_client.get(f"/campaigns/{campaign_id}").get_json()
        assert detail["brand"]["id"] == brand_client.profile_id
        assert detail["creator"]["id"] == creator_client.profile_id

    def test_accepting_open_campaign_assigns_creator(self, brand_client, creator_client):
        campaign_id = brand_client.post("/campaigns", json=_campaign()).get_json()["campaign"]["id"]

        accepted = creator_client.post(f"/campaigns/{campaign_id}/accept").get_json()["campaign"]
        assert accepted["creator_id"] == creator_client.profile_id

    def test_reject(self, offered_campaign, creator_client, brand_client):
        response = creator_client.post(f"/campaigns/{offered_campaign['id']}/reject")
        assert response.get_json()["campaign"]["status"] == "rejected"

        notifications = brand_client.get("/notifications").get_json()["notifications"]
        assert notifications[0]["type"] == "campaign_rejected"

    def test_cannot_complete_proposed(self, offered_campaign, brand_client):
        response = brand_client.post(f"/campaigns/{offered_campaign['id']}/complete")
        assert response.status_code == 409
        assert response.get_json()["type"] == "InvalidTransition"

    def test_cannot_reject_after_accept(self, offered_campaign, creator_client):
        creator_client.post(f"/campaigns/{offered_campaign['id']}/accept")
        response = creator_client.post(f"/campaigns/{offered_campaign['id']}/reject")
        assert response.status_code == 409

    def test_brand_cannot_accept(self, offered_campaign, brand_client):
        response = brand_client.post(f"/campaigns/{offered_campaign['id']}/accept")
        assert response.status_code == 403

    def test_creator_cannot_complete(self, offered_campaign, creator_client):
        creator_client.post(f"/campaigns/{offered_campaign['id']}/accept")
        response = creator_client.post(f"/campaigns/{offered_campaign['id']}/complete")
        assert response.status_code == 403

    def test_other_creator_cannot_see_offer(self, offered_campaign, make_client):
        other = make_client("other@example.com", "creator")
        assert other.get(f"/campaigns/{offered_campaign['id']}").status_code == 403

    def test_unknown_action(self, offered_campaign, brand_client):
        assert brand_client.post(f"/campaigns/{offered_campaign['id']}/archive").status_code == 404


class TestListCampaigns:
    """Test listing and status filters."""

    def test_filter_by_status(self, offered_campaign, brand_client):
        brand_client.post("/campaigns", json=_campaign(title="Winter drop"))

        assert len(brand_client.get("/campaigns").get_json()["campaigns"]) == 2
        proposed = brand_client.get("/campaigns?status=proposed").get_json()["campaigns"]
        assert len(proposed) == 2
        assert brand_client.get("/campaigns?status=completed").get_json()["campaigns"] == []

    def test_unknown_status(self, brand_client):
        assert brand_client.get("/campaigns?status=archived").status_code == 400
