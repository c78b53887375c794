import pytest
from fastapi.testclient import TestClient

from partnerhub.api import deps
from partnerhub.core.config import settings
from partnerhub.core.security import create_access_token
from partnerhub.main import app

API = settings.API_V1_STR


@pytest.fixture
def client(db):
    def _get_test_db():
        yield db

    app.dependency_overrides[deps.get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _auth(user_id, role="member", organization_id=None):
    token = create_access_token(user_id, role, organization_id=organization_id)
    return {"Authorization": f"Bearer {token}"}


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestAuthentication:
    def test_missing_token_is_rejected(self, client):
        response = client.get(f"{API}/health-score/statistics")
        assert response.status_code == 401

    def test_invalid_token_is_rejected(self, client):
        response = client.get(
            f"{API}/health-score/statistics",
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Could not validate credentials"

    def test_unknown_role_is_rejected(self, client):
        response = client.get(f"{API}/health-score/statistics", headers=_auth("u1", role="owner"))
        assert response.status_code == 403

    def test_role_claim_is_case_insensitive(self, client, make_project):
        make_project()

        response = client.post(f"{API}/health-score/recalculate-all", headers=_auth("u1", role="Admin"))

        assert response.status_code == 200
        assert response.json()["totalProjects"] == 1

    def test_mixed_case_member_role_can_search(self, client):
        response = client.get(f"{API}/search", params={"q": "x"}, headers=_auth("u1", role="Member"))
        assert response.status_code == 200


class TestHealthScoreEndpoints:
    def test_breakdown_uses_camel_case(self, client, make_project, make_task):
        project = make_project(budget=1000, actual_cost=200)
        make_task(project, status="todo")

        response = client.get(f"{API}/projects/{project.id}/health-score", headers=_auth("u1"))

        assert response.status_code == 200
        body = response.json()
        assert body["onTimeRate"] == 100
        assert body["completionRate"] == 0
        assert body["budgetHealth"] == 80
        assert body["totalScore"] == 66
        assert body["details"]["totalTasks"] == 1
        assert body["details"]["actualCost"] == 200

    def test_unknown_project_returns_404(self, client):
        response = client.get(f"{API}/projects/nope/health-score", headers=_auth("u1"))

        assert response.status_code == 404
        assert response.json() == {
            "error": True,
            "message": 'Project with ID "nope" not found',
            "status_code": 404,
        }

    def test_recalculate_returns_updated_project(self, client, make_project, make_task):
        project = make_project(health_score=100)
        make_task(project, status="todo")

        response = client.post(
            f"{API}/projects/{project.id}/health-score/recalculate", headers=_auth("u1")
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == project.id
        assert body["healthScore"] == 70
        assert body["ownerId"] == project.owner_id

    def test_recalculate_unknown_project_returns_404(self, client):
        response = client.post(f"{API}/projects/nope/health-score/recalculate", headers=_auth("u1"))
        assert response.status_code == 404

    def test_recalculate_all_requires_privileged_role(self, client, make_project):
        make_project()

        response = client.post(f"{API}/health-score/recalculate-all", headers=_auth("u1"))

        assert response.status_code == 403
        assert response.json()["message"] == "The caller doesn't have enough privileges"

    def test_recalculate_all(self, client, make_project):
        make_project()
        make_project(status="draft")

        response = client.post(f"{API}/health-score/recalculate-all", headers=_auth("u1", role="manager"))

        assert response.status_code == 200
        assert response.json() == {"totalProjects": 1, "updatedProjects": 1, "errors": []}

    def test_statistics(self, client, make_project):
        make_project(health_score=30)
        make_project(health_score=90)

        response = client.get(f"{API}/health-score/statistics", headers=_auth("u1"))

        assert response.status_code == 200
        body = response.json()
        assert body["totalProjects"] == 2
        assert body["averageScore"] == 60
        assert body["projectsAtRisk"] == 1
        assert body["scoreDistribution"] == {"excellent": 1, "good": 0, "fair": 0, "poor": 1}

    def test_project_listing(self, client, make_project):
        draft = make_project(status="draft")
        live = make_project()

        response = client.get(f"{API}/health-score/projects", headers=_auth("u1"))

        assert response.status_code == 200
        body = response.json()
        assert [item["projectId"] for item in body] == [draft.id, live.id]
        assert body[0]["healthScore"] == 0
        assert body[1]["breakdown"]["totalScore"] == 100


class TestSearchEndpoint:
    def test_search_scoped_to_caller(self, client, make_user, make_project):
        alice = make_user(role="member")
        mine = make_project(owner=alice, name="Nova launch")
        make_project(name="Nova audit")

        response = client.get(f"{API}/search", params={"q": "nova"}, headers=_auth(alice.id))

        assert response.status_code == 200
        body = response.json()
        assert [item["id"] for item in body["projects"]] == [mine.id]
        assert body["projects"][0]["relevance"] == 80
        assert body["total"] == 1

    def test_search_type_filter(self, client, make_partner):
        make_partner(company_name="Nova Labs", organization_id="org-1")

        response = client.get(
            f"{API}/search",
            params={"q": "nova", "type": "partners"},
            headers=_auth("u1", organization_id="org-1"),
        )

        body = response.json()
        assert len(body["partners"]) == 1
        assert body["projects"] == []
        assert body["tasks"] == []

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_out_of_range(self, client, limit):
        response = client.get(f"{API}/search", params={"q": "x", "limit": limit}, headers=_auth("u1"))
        assert response.status_code == 422

    def test_unknown_type(self, client):
        response = client.get(f"{API}/search", params={"type": "users"}, headers=_auth("u1"))
        assert response.status_code == 422
