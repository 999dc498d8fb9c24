URL = "/api/admin/generate-quiz"


async def test_requires_instructor(client, student_headers, fake_generator):
    response = await client.post(URL, json={"topic": "Fractions"})
    assert response.status_code == 401
    assert response.json()["code"] == "AUTH_REQUIRED"

    response = await client.post(URL, json={"topic": "Fractions"}, headers=student_headers)
    assert response.status_code == 401
    assert response.json()["error"] == "Instructor access required"
    assert fake_generator.requests == []


async def test_blank_topic_rejected(client, instructor_headers, fake_generator):
    for body in ({"topic": "   "}, {"subject": "Math"}, {"topic": 42}):
        response = await client.post(URL, json=body, headers=instructor_headers)
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Topic is required and must be a non-empty string",
        }
    assert fake_generator.requests == []


async def test_invalid_json_body(client, instructor_headers, fake_generator):
    response = await client.post(
        URL, content="{topic", headers={**instructor_headers, "Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["success"] is False

    response = await client.post(URL, json=["Fractions"], headers=instructor_headers)
    assert response.status_code == 400


async def test_defaults_are_filled(client, instructor_headers, fake_generator):
    response = await client.post(
        URL,
        json={"topic": " Fractions ", "subject": "", "questionTypes": [], "customPrompt": None},
        headers=instructor_headers,
    )
    assert response.status_code == 200

    request = fake_generator.requests[0]
    assert request.topic == "Fractions"
    assert request.subject == "General Knowledge"
    assert request.question_count == 5
    assert request.difficulty == "intermediate"
    assert request.question_types == ["multiple_choice", "true_false"]
    assert request.language == "english"
    assert request.explanation_language == "english"
    assert request.custom_prompt is None

    body = response.json()
    assert body["success"] is True
    assert body["quiz"] == {"title": "Quiz: Fractions", "questions": []}
    assert body["request"]["subject"] == "General Knowledge"
    assert body["request"]["questionCount"] == 5
    assert "debugInfo" not in body


async def test_debug_info_only_on_request(client, admin_headers, fake_generator):
    response = await client.post(
        URL, json={"topic": "Fractions", "includeDebugInfo": True}, headers=admin_headers
    )
    assert response.json()["debugInfo"] == {"prompt": "p", "systemPrompt": "s", "rawResponse": "{}"}


async def test_out_of_range_options(client, instructor_headers, fake_generator):
    response = await client.post(
        URL, json={"topic": "Fractions", "difficulty": "expert"}, headers=instructor_headers
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["details"][0]["field"] == "difficulty"

    response = await client.post(
        URL, json={"topic": "Fractions", "questionCount": 0}, headers=instructor_headers
    )
    assert response.status_code == 400


async def test_generator_failure(client, instructor_headers, fake_generator):
    fake_generator.result = {"success": False, "error": "AI service unavailable"}
    response = await client.post(URL, json={"topic": "Fractions"}, headers=instructor_headers)
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "AI service unavailable"}


async def test_generator_exception(client, instructor_headers, fake_generator):
    fake_generator.error = RuntimeError("connection reset")
    response = await client.post(URL, json={"topic": "Fractions"}, headers=instructor_headers)
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "connection reset"}


async def test_generator_exception_without_message(client, instructor_headers, fake_generator):
    fake_generator.error = RuntimeError()
    response = await client.post(URL, json={"topic": "Fractions"}, headers=instructor_headers)
    assert response.status_code == 500
    assert response.json()["error"] == "Internal server error occurred during quiz generation"


async def test_options(client, instructor_headers):
    response = await client.get(URL, headers=instructor_headers)
    body = response.json()
    assert body["defaults"]["subject"] == "General Knowledge"
    assert body["defaults"]["questionTypes"] == ["multiple_choice", "true_false"]
    assert "ordering" in body["questionTypes"]
    assert body["languages"] == ["english", "khmer"]


async def test_health(client, instructor_headers, fake_generator):
    response = await client.get(f"{URL}/health", headers=instructor_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}
