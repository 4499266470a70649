def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": "0.1.0"}


def test_root_lists_endpoints(client):
    data = client.get("/").json()
    assert data["endpoints"]["search"].startswith("/api/search")


def test_profile_missing_returns_404(client):
    resp = client.get("/api/profile")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Profile not found"


def test_profile_is_a_singleton(client, seeded):
    resp = client.post("/api/profile", json={"name": "Someone Else", "email": "else@example.com"})
    assert resp.status_code == 409
    assert resp.json()["error"] == "Profile already exists"


def test_profile_update(client, seeded):
    resp = client.put("/api/profile", json={"linkedin": "https://linkedin.com/in/ada", "name": None})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["linkedin"] == "https://linkedin.com/in/ada"
    assert data["name"] == "Ada Lovelace"
    assert data["github"] == "https://github.com/ada"


def test_profile_rejects_invalid_email(client):
    resp = client.post("/api/profile", json={"name": "Ada", "email": "not-an-email"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"


def test_list_skills_ordered_by_proficiency(client, seeded):
    body = client.get("/api/skills").json()
    assert body["count"] == 5
    assert [s["name"] for s in body["data"]] == ["Python", "FastAPI", "React", "PostgreSQL", "Docker"]


def test_list_skills_by_category(client, seeded):
    body = client.get("/api/skills", params={"category": "Backend"}).json()
    assert {s["name"] for s in body["data"]} == {"Python", "FastAPI"}


def test_top_skills(client, seeded):
    body = client.get("/api/skills/top", params={"limit": 2}).json()
    assert [s["name"] for s in body["data"]] == ["Python", "FastAPI"]


def test_skill_proficiency_bounds(client):
    for proficiency in (0, 6):
        resp = client.post("/api/skills", json={"name": "Go", "proficiency": proficiency})
        assert resp.status_code == 400
        assert "proficiency" in resp.json()["message"]


def test_duplicate_skill_name(client, seeded):
    resp = client.post("/api/skills", json={"name": "Python", "proficiency": 3})
    assert resp.status_code == 409
    assert resp.json()["error"] == "Duplicate skill"

    resp = client.put(f"/api/skills/{seeded['skills']['React']}", json={"name": "Python"})
    assert resp.status_code == 409


def test_update_skill(client, seeded):
    skill_id = seeded["skills"]["Docker"]
    resp = client.put(f"/api/skills/{skill_id}", json={"proficiency": 3, "category": "DevOps"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert (data["name"], data["proficiency"], data["category"]) == ("Docker", 3, "DevOps")


def test_missing_skill_returns_404(client):
    resp = client.get("/api/skills/999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Skill not found", "message": "No skill found with id 999"}


def test_project_includes_linked_skills(client, seeded):
    resp = client.get(f"/api/projects/{seeded['projects']['Portfolio API']}")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert [s["name"] for s in data["skills"]] == ["FastAPI", "PostgreSQL", "Python"]


def test_list_projects_by_skill(client, seeded):
    body = client.get("/api/projects", params={"skill": "react"}).json()
    assert {p["title"] for p in body["data"]} == {"React", "React Native"}


def test_project_with_unknown_skill(client, seeded):
    resp = client.post("/api/projects", json={"title": "Ghost", "skill_ids": [seeded["skills"]["Python"], 999]})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid skill reference"
    assert "999" in resp.json()["message"]


def test_update_project_replaces_skills(client, seeded):
    project_id = seeded["projects"]["React"]
    resp = client.put(
        f"/api/projects/{project_id}",
        json={"description": "Shared components", "skill_ids": [seeded["skills"]["Python"]]},
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["title"] == "React"
    assert data["description"] == "Shared components"
    assert [s["name"] for s in data["skills"]] == ["Python"]


def test_deleting_skill_unlinks_projects(client, seeded):
    resp = client.delete(f"/api/skills/{seeded['skills']['PostgreSQL']}")
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    data = client.get(f"/api/projects/{seeded['projects']['Portfolio API']}").json()["data"]
    assert [s["name"] for s in data["skills"]] == ["FastAPI", "Python"]


def test_delete_project(client, seeded):
    project_id = seeded["projects"]["React Native"]
    assert client.delete(f"/api/projects/{project_id}").status_code == 200
    assert client.get(f"/api/projects/{project_id}").status_code == 404
    # Linked skill survives
    assert client.get(f"/api/skills/{seeded['skills']['React']}").status_code == 200


def test_work_ordering_current_first(client, seeded):
    body = client.get("/api/work").json()
    assert [w["company"] for w in body["data"]] == ["Acme Corp", "Globex"]
    assert body["data"][0]["current"] is True


def test_work_date_range_validation(client, seeded):
    resp = client.post(
        "/api/work",
        json={"company": "Initech", "position": "Engineer", "start_date": "2020-01-01", "end_date": "2019-01-01"},
    )
    assert resp.status_code == 400

    resp = client.put(f"/api/work/{seeded['work']['Globex']}", json={"end_date": "2017-01-01"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid date range"


def test_update_and_delete_work(client, seeded):
    work_id = seeded["work"]["Acme Corp"]
    resp = client.put(f"/api/work/{work_id}", json={"current": False, "end_date": "2024-03-31"})
    assert resp.status_code == 200
    assert resp.json()["data"]["end_date"] == "2024-03-31"

    assert client.delete(f"/api/work/{work_id}").status_code == 200
    assert client.get(f"/api/work/{work_id}").status_code == 404
