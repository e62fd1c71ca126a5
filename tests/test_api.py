"""HTTP-level tests for the students and plans routers."""


def _student_payload(**overrides):
	payload = {
		"student_id": "STU003",
		"name": "Emma Johnson",
		"course": "Web Development",
		"attendance_percentage": 68,
		"quiz_scores": [65, 58, 62, 55, 60, 52, 58, 55],
		"assignments_submitted": 6,
		"total_assignments": 10,
		"engagement_score": 55,
	}
	payload.update(overrides)
	return payload


def test_health(client):
	assert client.get("/health").json() == {"status": "ok"}
	assert client.get("/info").json()["gemini_configured"] is False


def test_create_student_scores_risk(client):
	r = client.post("/students", json=_student_payload())
	assert r.status_code == 201
	body = r.json()
	assert body["risk_score"] == 50
	assert body["risk_level"] == "Medium"
	assert body["risk_factors"][0] == "Below average attendance"


def test_create_duplicate_student(client):
	client.post("/students", json=_student_payload())
	r = client.post("/students", json=_student_payload())
	assert r.status_code == 409


def test_create_student_validates_ranges(client):
	r = client.post("/students", json=_student_payload(attendance_percentage=140))
	assert r.status_code == 422


def test_list_and_stats(client, marcus):
	client.post("/students", json=_student_payload())

	names = [s["name"] for s in client.get("/students").json()]
	assert names == ["Emma Johnson", "Marcus Chen"]

	high = client.get("/students", params={"risk_level": "High"}).json()
	assert [s["student_id"] for s in high] == ["STU001"]

	assert client.get("/students/stats").json() == {"total": 2, "high": 1, "medium": 1, "low": 0}


def test_get_missing_student(client):
	assert client.get("/students/NOPE").status_code == 404


def test_reassess_student(client, marcus):
	r = client.post("/students/STU001/assess")
	assert r.status_code == 200
	assert r.json()["risk_score"] == 100


def test_generate_and_track_plan(client, marcus):
	r = client.post("/plans/students/STU001/generate")
	assert r.status_code == 201
	plan_id = r.json()["plan_id"]

	active = client.get("/plans/students/STU001/active").json()
	assert active["plan_id"] == plan_id
	assert active["provenance"] == {"kind": "manual"}
	assert active["daily_study_hours"] == 4

	r = client.post(f"/plans/{plan_id}/schedule/0", json={"completed": True})
	assert r.status_code == 200
	assert r.json()["schedule"][0]["completed"] is True
	assert round(r.json()["progress_percentage"], 2) == 16.67

	client.post(f"/plans/{plan_id}/schedule/1", json={"completed": True})
	r = client.post(f"/plans/{plan_id}/schedule/2", json={"completed": True})
	assert r.json()["progress_percentage"] == 50.0


def test_regenerate_keeps_history(client, marcus):
	first = client.post("/plans/students/STU001/generate").json()["plan_id"]
	second = client.post("/plans/students/STU001/generate").json()["plan_id"]

	history = client.get("/plans/students/STU001/history").json()
	assert [p["plan_id"] for p in history] == [second, first]
	assert [p["is_active"] for p in history] == [True, False]


def test_generate_for_missing_student(client):
	assert client.post("/plans/students/NOPE/generate").status_code == 404


def test_plan_errors(client, marcus):
	assert client.get("/plans/students/STU001/active").status_code == 404
	assert client.get("/plans/missing").status_code == 404

	plan_id = client.post("/plans/students/STU001/generate").json()["plan_id"]
	assert client.post(f"/plans/{plan_id}/schedule/6", json={}).status_code == 400
	assert client.post("/plans/missing/schedule/0", json={}).status_code == 404


def test_patch_student_moves_risk_level(client, marcus):
	r = client.patch("/students/STU001", json={
		"attendance_percentage": 95,
		"quiz_scores": [92, 88, 95, 90],
		"assignments_submitted": 10,
		"engagement_score": 92,
	})
	assert r.status_code == 200
	assert r.json()["risk_level"] == "Low"
	assert r.json()["risk_factors"] == []

	client.post("/plans/students/STU001/generate")
	active = client.get("/plans/students/STU001/active").json()
	assert active["risk_level"] == "Low"
	assert active["daily_study_hours"] == 2


def test_patch_student_errors(client, marcus):
	assert client.patch("/students/NOPE", json={"name": "X"}).status_code == 404
	assert client.patch("/students/STU001", json={"engagement_score": -1}).status_code == 422


def test_delete_student(client, marcus):
	assert client.delete("/students/STU001").status_code == 204
	assert client.get("/students/STU001").status_code == 404
	assert client.delete("/students/STU001").status_code == 404
