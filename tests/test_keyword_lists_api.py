from fastapi import status


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_create_and_list(client, make_profile):
    _, token = make_profile()

    created = client.post(
        "/api/keyword-lists",
        json={"name": "Backend", "keywords": [" python ", "django", ""]},
        headers=_auth(token),
    )

    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["keywords"] == ["python", "django"]

    listed = client.get("/api/keyword-lists", headers=_auth(token))
    assert [item["name"] for item in listed.json()] == ["Backend"]

def test_lists_are_private(client, make_profile):
    _, owner_token = make_profile("owner@example.com")
    _, other_token = make_profile("other@example.com")
    client.post("/api/keyword-lists", json={"name": "Backend", "keywords": ["python"]}, headers=_auth(owner_token))

    assert client.get("/api/keyword-lists", headers=_auth(other_token)).json() == []

def test_blank_keywords_rejected(client, make_profile):
    _, token = make_profile()

    response = client.post("/api/keyword-lists", json={"name": "Empty", "keywords": ["  "]}, headers=_auth(token))

    assert response.status_code == 422
    assert response.json()["success"] is False

def test_keyword_lists_need_a_token(client):
    assert client.get("/api/keyword-lists").status_code == status.HTTP_401_UNAUTHORIZED

def test_profile(client, make_profile):
    profile, token = make_profile(credits=7)

    response = client.get("/api/profile", headers=_auth(token))

    assert response.json() == {"id": profile.id, "email": "recruiter@example.com", "credits": 7}

def test_analyze_with_saved_list(client, make_profile, fake_ai, fake_pdf):
    _, token = make_profile()
    list_id = client.post(
        "/api/keyword-lists", json={"name": "Data", "keywords": ["spark", "airflow"]}, headers=_auth(token)
    ).json()["id"]

    response = client.post(
        "/api/analyze",
        data={"keyword_list_id": str(list_id)},
        files=[("files", ("cv.pdf", b"text", "application/pdf"))],
        headers=_auth(token),
    )

    submission_id = response.json()["submissionId"]
    results = client.get(f"/api/results/{submission_id}").json()
    assert results["analysisKeywords"] == ["spark", "airflow"]
