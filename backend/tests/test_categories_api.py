URL = "/api/admin/categories"


async def _create(client, headers, **fields):
    payload = {"name": "Grammar", "type": "course", **fields}
    response = await client.post(URL, json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()["category"]


async def test_requires_authentication(client):
    response = await client.get(URL)
    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required", "code": "AUTH_REQUIRED"}


async def test_requires_admin_role(client, instructor_headers):
    response = await client.get(URL, headers=instructor_headers)
    assert response.status_code == 401
    assert response.json()["error"] == "Admin access required"


async def test_create_fills_defaults(client, admin_headers):
    category = await _create(client, admin_headers, name="  Vocabulary ")
    assert category["name"] == "Vocabulary"
    assert category["color"] == "#6366f1"
    assert category["icon"] == "folder"
    assert category["is_active"] is True
    assert category["id"]


async def test_create_missing_fields(client, admin_headers):
    response = await client.post(URL, json={"name": "Grammar"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


async def test_list_is_sorted_and_active_only(client, admin_headers):
    await _create(client, admin_headers, name="Writing")
    await _create(client, admin_headers, name="Business English")
    retired = await _create(client, admin_headers, name="Pronunciation")
    await client.delete(URL, params={"id": retired["id"]}, headers=admin_headers)

    response = await client.get(URL, headers=admin_headers)
    assert [c["name"] for c in response.json()["categories"]] == ["Business English", "Writing"]

    response = await client.get(URL, params={"include_inactive": "true"}, headers=admin_headers)
    assert [c["name"] for c in response.json()["categories"]] == ["Business English", "Pronunciation", "Writing"]


async def test_update(client, admin_headers):
    category = await _create(client, admin_headers)
    response = await client.put(
        URL,
        json={"id": category["id"], "name": "Grammar II", "type": "quiz", "color": "#000000"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    updated = response.json()["category"]
    assert updated["name"] == "Grammar II"
    assert updated["type"] == "quiz"
    assert updated["color"] == "#000000"
    assert updated["icon"] == "folder"


async def test_update_unknown_category(client, admin_headers):
    response = await client.put(URL, json={"id": "missing", "name": "X", "type": "course"}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Category not found"}


async def test_update_requires_id(client, admin_headers):
    response = await client.put(URL, json={"name": "X", "type": "course"}, headers=admin_headers)
    assert response.status_code == 400


async def test_delete_is_soft(client, admin_headers):
    category = await _create(client, admin_headers)
    response = await client.delete(URL, params={"id": category["id"]}, headers=admin_headers)
    assert response.json() == {"success": True}

    response = await client.get(URL, params={"include_inactive": "true"}, headers=admin_headers)
    assert response.json()["categories"][0]["is_active"] is False


async def test_delete_requires_id(client, admin_headers):
    response = await client.delete(URL, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Category ID is required"}


async def test_blank_name_rejected(client, admin_headers):
    response = await client.post(URL, json={"name": "   ", "type": "course"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}

    category = await _create(client, admin_headers)
    response = await client.put(
        URL, json={"id": category["id"], "name": " ", "type": "course"}, headers=admin_headers
    )
    assert response.status_code == 400
