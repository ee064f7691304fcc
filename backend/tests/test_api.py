"""
After School Lessons Backend — HTTP API Tests
===============================================

What:  End-to-end tests through the FastAPI app with HTTPX, backed by a
       real SQLite store.

What we test:
    ✅ GET /, /lessons, /search response shapes
    ✅ POST /order → 201 with orderId and the stored order
    ✅ PUT /lessons/{id} → updated lesson, 400 / 404 paths
    ✅ Malformed JSON bodies → 400 invalid_argument
    ✅ GET /images/{file} → file or JSON 404
    ✅ Store failures → 500 store_unavailable with a generic message
    ✅ X-Request-ID on every response, one access line per request
    ✅ Oversized spaces rejected; free-form order spaces accepted
"""

import logging
import uuid

import pytest
from starlette.requests import Request

from afterschool.exceptions import StoreUnavailableError
from afterschool.main import create_app
from afterschool.middleware.access import describe_target
from afterschool.routes.dependencies import get_lesson_repository, get_order_repository


class TestIndexAndHealth:

    def test_app_registers_every_route(self, images_dir):
        app = create_app(images_dir=images_dir)
        routes = {(method, route.path) for route in app.routes for method in (getattr(route, "methods", None) or ())}

        assert {
            ("GET", "/"),
            ("GET", "/health"),
            ("GET", "/lessons"),
            ("GET", "/search"),
            ("PUT", "/lessons/{lesson_id}"),
            ("POST", "/order"),
            ("GET", "/images/{file_path:path}"),
        } <= routes

    @pytest.mark.asyncio
    async def test_index_lists_endpoints(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Welcome to After School Classes API"
        assert set(body["endpoints"]) == {"lessons", "search", "order", "updateLesson", "images"}

    @pytest.mark.asyncio
    async def test_health_connected(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_generated_and_echoed(self, test_client):
        generated = await test_client.get("/")
        echoed = await test_client.get("/", headers={"X-Request-ID": "abc123"})

        assert generated.headers["X-Request-ID"]
        assert echoed.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_access_line_names_the_lesson(self, test_client, seeded_lessons, caplog):
        lesson_id = str(seeded_lessons[0].id)

        with caplog.at_level(logging.INFO, logger="afterschool.access"):
            await test_client.put(
                f"/lessons/{lesson_id}",
                json={"spaces": 2},
                headers={"X-Request-ID": "trace-1", "User-Agent": "storefront/1.0"},
            )

        lines = [r.getMessage() for r in caplog.records if r.name == "afterschool.access"]
        assert len(lines) == 1
        assert f"lesson={lesson_id}" in lines[0]
        assert "[trace-1]" in lines[0]
        assert "storefront/1.0" in lines[0]
        assert "-> 200" in lines[0]

    @pytest.mark.asyncio
    async def test_health_is_not_access_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="afterschool.access"):
            await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "afterschool.access"]

    @pytest.mark.asyncio
    async def test_unknown_route_is_json_404(self, test_client):
        response = await test_client.get("/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestLessonsEndpoints:

    @pytest.mark.asyncio
    async def test_list_lessons(self, test_client, seeded_lessons):
        response = await test_client.get("/lessons")

        assert response.status_code == 200
        body = response.json()
        assert [lesson["subject"] for lesson in body] == [lesson.subject for lesson in seeded_lessons]
        first = body[0]
        assert first["_id"] == str(seeded_lessons[0].id)
        assert first["price"] == 100
        assert first["spaces"] == 5
        assert first["icon"] == "fa-calculator"
        assert "id" not in first

    @pytest.mark.asyncio
    async def test_list_lessons_empty(self, test_client):
        response = await test_client.get("/lessons")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_fractional_price_kept(self, test_client, seeded_lessons):
        body = (await test_client.get("/lessons")).json()
        assert body[-1]["price"] == 92.5

    @pytest.mark.asyncio
    async def test_search(self, test_client, seeded_lessons):
        response = await test_client.get("/search", params={"q": "math"})

        assert response.status_code == 200
        assert [lesson["subject"] for lesson in response.json()] == ["Mathematics"]

    @pytest.mark.asyncio
    async def test_search_without_query_lists_all(self, test_client, seeded_lessons):
        everything = (await test_client.get("/lessons")).json()

        assert (await test_client.get("/search")).json() == everything
        assert (await test_client.get("/search", params={"q": ""})).json() == everything

    @pytest.mark.asyncio
    async def test_search_price_text_matches_json(self, test_client, seeded_lessons):
        assert (await test_client.get("/search", params={"q": ".0"})).json() == []

        response = await test_client.get("/search", params={"q": "100"})
        assert [lesson["price"] for lesson in response.json()] == [100]

    @pytest.mark.asyncio
    async def test_search_percent_is_literal(self, test_client, seeded_lessons):
        response = await test_client.get("/search", params={"q": "%"})

        assert response.status_code == 200
        assert response.json() == []


class TestUpdateLessonSpaces:

    @pytest.mark.asyncio
    async def test_update_returns_lesson(self, test_client, seeded_lessons):
        lesson_id = str(seeded_lessons[0].id)

        response = await test_client.put(f"/lessons/{lesson_id}", json={"spaces": 3})

        assert response.status_code == 200
        assert response.json()["_id"] == lesson_id
        assert response.json()["spaces"] == 3
        listed = (await test_client.get("/lessons")).json()
        assert listed[0]["spaces"] == 3

    @pytest.mark.asyncio
    async def test_negative_spaces_is_400(self, test_client, seeded_lessons):
        lesson_id = str(seeded_lessons[0].id)

        response = await test_client.put(f"/lessons/{lesson_id}", json={"spaces": -1})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_argument"
        assert body["message"] == "Spaces cannot be negative"
        assert (await test_client.get("/lessons")).json()[0]["spaces"] == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"spaces": "three"}, {"spaces": 1.5}, {"spaces": True}, [3]])
    async def test_invalid_spaces_is_400(self, test_client, seeded_lessons, body):
        response = await test_client.put(f"/lessons/{seeded_lessons[0].id}", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_argument"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("spaces", [2**31, 2**64])
    async def test_spaces_too_large_is_400(self, test_client, seeded_lessons, spaces):
        lesson_id = str(seeded_lessons[0].id)

        response = await test_client.put(f"/lessons/{lesson_id}", json={"spaces": spaces})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_argument"
        assert response.json()["details"]["field"] == "spaces"
        assert (await test_client.get("/lessons")).json()[0]["spaces"] == 5

    @pytest.mark.asyncio
    async def test_unknown_lesson_is_404(self, test_client, seeded_lessons):
        missing = str(uuid.uuid4())

        response = await test_client.put(f"/lessons/{missing}", json={"spaces": 2})

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert missing in body["message"]

    @pytest.mark.asyncio
    async def test_malformed_id_is_400(self, test_client, seeded_lessons):
        response = await test_client.put("/lessons/12345", json={"spaces": 2})

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "id"

    @pytest.mark.asyncio
    async def test_bad_body_checked_before_id(self, test_client):
        response = await test_client.put(f"/lessons/{uuid.uuid4()}", json={"spaces": -3})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client, seeded_lessons):
        response = await test_client.put(
            f"/lessons/{seeded_lessons[0].id}",
            content=b"{spaces: ",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_argument"


class TestCreateOrder:

    @pytest.mark.asyncio
    async def test_create_order(self, test_client, seeded_lessons):
        lesson_ids = [str(seeded_lessons[0].id), str(seeded_lessons[0].id)]
        payload = {"name": "Jo", "phone": "555", "lessonIds": lesson_ids, "spaces": 2}

        response = await test_client.post("/order", json=payload)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Order created successfully"
        assert body["orderId"] == body["order"]["_id"]
        assert body["order"]["lessonIds"] == lesson_ids
        assert body["order"]["spaces"] == 2
        assert body["order"]["orderDate"]

    @pytest.mark.asyncio
    async def test_order_does_not_change_spaces(self, test_client, seeded_lessons):
        payload = {"name": "Jo", "phone": "555", "lessonIds": [str(seeded_lessons[0].id)], "spaces": 5}

        await test_client.post("/order", json=payload)

        assert (await test_client.get("/lessons")).json()[0]["spaces"] == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("spaces", [1.5, "two", None])
    async def test_free_form_spaces_accepted(self, test_client, spaces):
        payload = {"name": "Jo", "phone": "555", "lessonIds": ["x"], "spaces": spaces}

        response = await test_client.post("/order", json=payload)

        assert response.status_code == 201
        assert response.json()["order"]["spaces"] == spaces

    @pytest.mark.asyncio
    async def test_missing_fields_is_400(self, test_client):
        response = await test_client.post("/order", json={"name": "Jo"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_argument"
        assert body["message"] == "Missing required fields"
        assert "phone" in body["details"]["fields"]

    @pytest.mark.asyncio
    async def test_empty_lesson_ids_is_400(self, test_client):
        response = await test_client.post("/order", json={"name": "Jo", "phone": "555", "lessonIds": []})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/order",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400


class TestImages:

    @pytest.mark.asyncio
    async def test_serves_existing_image(self, test_client):
        response = await test_client.get("/images/mathematics.svg")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert b"<svg" in response.content

    @pytest.mark.asyncio
    async def test_missing_image_is_json_404(self, test_client):
        response = await test_client.get("/images/missing.svg")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert "missing.svg" in body["message"]


class _FailingLessons:
    async def list(self):
        raise StoreUnavailableError(context={"operation": "list_lessons", "error_type": "OperationalError"})

    async def search(self, query):
        return await self.list()


class _FailingOrders:
    async def create(self, command):
        raise StoreUnavailableError(context={"operation": "create_order", "error_type": "OperationalError"})


class TestStoreUnavailable:

    @pytest.mark.asyncio
    async def test_list_store_failure_is_500(self, app, test_client):
        app.dependency_overrides[get_lesson_repository] = lambda: _FailingLessons()

        response = await test_client.get("/lessons")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "store_unavailable"
        assert body["details"] is None
        assert "OperationalError" not in body["message"]

    @pytest.mark.asyncio
    async def test_order_store_failure_is_500(self, app, test_client):
        app.dependency_overrides[get_order_repository] = lambda: _FailingOrders()

        response = await test_client.post(
            "/order", json={"name": "Jo", "phone": "555", "lessonIds": ["x"]}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "store_unavailable"

    @pytest.mark.asyncio
    async def test_health_reports_unreachable_store(self, app, test_client):
        async def refuse():
            raise StoreUnavailableError(message="Could not connect to the lesson store")

        app.state.database.connect = refuse

        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


def _request(path, query=b"", headers=()):
    return Request({
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": query,
        "headers": [(k.encode(), v.encode()) for k, v in headers],
    })


class TestAccessSummary:
    """describe_target() never includes body contents."""

    @pytest.mark.parametrize(
        "path,query,headers,expected",
        [
            ("/search", b"q=art", (), "q='art'"),
            ("/images/art-design.svg", b"", (), "image=art-design.svg"),
            ("/lessons/abc", b"", (("content-length", "13"),), "lesson=abc body=13B"),
            ("/order", b"", (("content-length", "80"),), "body=80B"),
            ("/lessons", b"", (), ""),
        ],
    )
    def test_describe_target(self, path, query, headers, expected):
        assert describe_target(_request(path, query, headers)) == expected
