"""Tests for module listing and recommendation routes."""


class TestListModules:
    def test_lists_registry_modules(self, client):
        body = client.get("/modules").json()
        assert [m["module_id"] for m in body] == ["core", "combat", "loot", "empty"]
        assert body[0] == {
            "module_id": "core",
            "label": "Core",
            "prerequisites": [],
            "checklist_size": 3,
            "feature_count": 3,
        }
        assert body[2]["feature_count"] == 0


class TestRecommendationsRoute:
    def test_ranked_list(self, client):
        response = client.post("/modules/core/recommendations", json={})
        assert response.status_code == 200
        body = response.json()
        assert [r["item"]["id"] for r in body] == ["c-1", "c-3", "c-2"]
        assert body[0]["score"] == 26
        assert body[0]["breakdown"]["urgency"] == 12
        assert body[0]["pattern"] is None

    def test_checked_items_excluded(self, client):
        body = client.post(
            "/modules/core/recommendations", json={"checklist": {"c-1": True}},
        ).json()
        assert [r["item"]["id"] for r in body] == ["c-3", "c-2"]

    def test_patterns_and_history(self, client):
        payload = {
            "patterns": [{
                "id": "p1",
                "title": "Sprint tuning",
                "module_id": "core",
                "approach": "component",
                "success_rate": 0.9,
                "session_count": 4,
                "pitfalls": ["Forgetting FOV reset"],
            }],
            "task_history": [
                {"module_id": "core", "prompt": "Sprint feels floaty", "status": "failed"},
            ],
        }
        body = client.post("/modules/core/recommendations", json=payload).json()
        sprint = next(r for r in body if r["item"]["id"] == "c-2")
        assert sprint["pattern"]["id"] == "p1"
        assert sprint["pitfalls"] == ["Forgetting FOV reset", "Previous failure on similar task"]

    def test_evaluator_recommendation(self, client):
        payload = {
            "evaluator_recommendations": [
                {"module_id": "core", "title": "Polish everything", "priority": "critical"},
            ],
        }
        body = client.post("/modules/core/recommendations", json=payload).json()
        assert body[0]["item"]["id"] == "c-3"
        assert body[0]["score"] == 50

    def test_invalid_history_status(self, client):
        payload = {"task_history": [{"module_id": "core", "prompt": "x", "status": "maybe"}]}
        response = client.post("/modules/core/recommendations", json=payload)
        assert response.status_code == 422

    def test_unknown_module(self, client):
        assert client.post("/modules/mystery/recommendations", json={}).json() == []


class TestTopRecommendationRoute:
    def test_top(self, client):
        body = client.post("/modules/core/recommendations/top", json={}).json()
        assert body["item"]["id"] == "c-1"

    def test_unknown_module_is_null(self, client):
        response = client.post("/modules/mystery/recommendations/top", json={})
        assert response.status_code == 200
        assert response.json() is None


class TestNextModulesRoute:
    def test_recommends_dependent(self, client):
        payload = {"progress": {"core": {"c-1": True, "c-2": True}}}
        body = client.post("/modules/core/next-modules", json=payload).json()
        assert body["recommended"] == [
            {"module_id": "combat", "label": "Combat", "reason": "Ready — builds on this module"},
        ]
        assert body["unmet_prerequisites"] == []

    def test_unmet_prerequisites(self, client):
        body = client.post("/modules/loot/next-modules", json={}).json()
        assert body["recommended"] == []
        assert [p["module_id"] for p in body["unmet_prerequisites"]] == ["core", "combat"]

    def test_explicit_sizes(self, client):
        payload = {"progress": {"core": {"c-1": True}}, "sizes": {"core": 2}}
        body = client.post("/modules/core/next-modules", json=payload).json()
        assert [r["module_id"] for r in body["recommended"]] == ["combat"]
