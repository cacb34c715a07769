"""Tests for payload sanitization."""

import pytest
from httpx import AsyncClient

from natours.utils.sanitizers import (
    clean_xss,
    collapse_polluted_params,
    has_operator_key,
    strip_mongo_operators,
)


class TestMongoOperatorStripping:
    """Keys that look like query operators are removed."""

    def test_operator_keys_detected(self):
        assert has_operator_key("$gt")
        assert has_operator_key("profile.email")
        assert not has_operator_key("price$")
        assert not has_operator_key("name")
        assert not has_operator_key(3)

    def test_nested_operators_removed(self):
        payload = {
            "email": {"$gt": ""},
            "$where": "sleep(1000)",
            "tags": [{"$ne": 1}, "ok"],
            "address.city": "Lisbon",
            "name": "Jonas",
        }

        cleaned, changed = strip_mongo_operators(payload)

        assert changed is True
        assert cleaned == {"email": {}, "tags": [{}, "ok"], "name": "Jonas"}

    def test_clean_payload_unchanged(self):
        payload = {"name": "Jonas", "ratings": [4, 5], "price": {"gte": "100"}}

        cleaned, changed = strip_mongo_operators(payload)

        assert changed is False
        assert cleaned == payload

    def test_replace_with(self):
        cleaned, changed = strip_mongo_operators(
            {"$gt": 1, "a.b": 2}, replace_with="_"
        )

        assert changed is True
        assert cleaned == {"_gt": 1, "a_b": 2}


class TestXSSClean:
    """Markup in strings is escaped."""

    def test_script_tags_escaped(self):
        result = clean_xss("<script>alert('xss')</script>Hello")

        assert "<script>" not in result
        assert "&lt;script>" in result
        assert "Hello" in result

    def test_nested_values(self):
        result = clean_xss({"a": ["<b>x</b>", 3], "b": {"c": "<img src=x onerror=alert(1)>"}})

        assert result["a"][0] == "&lt;b>x&lt;/b>"
        assert result["a"][1] == 3
        assert "<img" not in result["b"]["c"]

    def test_plain_text_preserved(self):
        assert clean_xss("The Forest Hiker") == "The Forest Hiker"
        assert clean_xss(None) is None
        assert clean_xss(4.5) == 4.5

    def test_ampersands_and_angle_brackets_kept_without_markup(self):
        assert clean_xss("Rock & Roll > Jazz") == "Rock & Roll > Jazz"
        assert clean_xss("Sea & <b>Sky</b>") == "Sea & &lt;b>Sky&lt;/b>"

    def test_keys_escaped(self):
        result = clean_xss({"<script>alert(1)</script>": "x", "ok": {"<i>": 1}, 3: "y"})

        assert result == {
            "&lt;script>alert(1)&lt;/script>": "x",
            "ok": {"&lt;i>": 1},
            3: "y",
        }


class TestParameterPollution:
    """Repeated parameters collapse to their last value."""

    def test_last_value_wins(self):
        cleaned, polluted = collapse_polluted_params(
            {"sort": ["price", "-duration"], "name": "x"}
        )

        assert cleaned == {"sort": "-duration", "name": "x"}
        assert polluted == {"sort": ["price", "-duration"]}

    def test_whitelisted_params_keep_all_values(self):
        cleaned, polluted = collapse_polluted_params(
            {"duration": ["5", "9"], "sort": ["a", "b"]},
            whitelist={"duration"},
        )

        assert cleaned == {"duration": ["5", "9"], "sort": "b"}
        assert "duration" not in polluted


class TestSanitizingMiddleware:
    """Payloads reaching routes are free of operators and markup."""

    @pytest.mark.asyncio
    async def test_json_body_sanitized(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/echo",
            json={
                "name": "<script>alert(1)</script>",
                "$where": "1 == 1",
                "nested": {"a.b": 1, "ok": {"$gt": ""}},
            },
        )

        assert response.status_code == 200
        assert response.json()["body"] == {
            "name": "&lt;script>alert(1)&lt;/script>",
            "nested": {"ok": {}},
        }

    @pytest.mark.asyncio
    async def test_json_array_body_sanitized(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/echo",
            json=[{"$set": {"role": "admin"}, "name": "<b>x</b>"}],
        )

        assert response.json()["body"] == [{"name": "&lt;b>x&lt;/b>"}]

    @pytest.mark.asyncio
    async def test_query_sanitized(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/echo",
            params=[
                ("price[$gt]", "1"),
                ("name", "<i>hi</i>"),
                ("sort", "price"),
                ("sort", "duration"),
                ("duration", "5"),
                ("duration", "9"),
            ],
        )

        data = response.json()
        assert data["query"] == {
            "name": "&lt;i>hi&lt;/i>",
            "sort": "duration",
            "duration": ["5", "9"],
        }
        assert data["query_polluted"] == {"sort": ["price", "duration"]}

    @pytest.mark.asyncio
    async def test_urlencoded_body_sanitized(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/echo",
            data={
                "name": "<i>x</i>",
                "price": ["1", "2"],
                "role": ["user", "admin"],
                "email[$ne]": "x",
            },
        )

        assert response.json()["body"] == {
            "name": "&lt;i>x&lt;/i>",
            "price": ["1", "2"],
            "role": "admin",
        }

    @pytest.mark.asyncio
    async def test_json_body_keeps_repeated_values(self, client: AsyncClient):
        """Parameter pollution rules apply to query strings and forms only."""
        response = await client.post("/api/v1/echo", json={"role": ["user", "admin"]})

        assert response.json()["body"] == {"role": ["user", "admin"]}

    @pytest.mark.asyncio
    async def test_stored_documents_sanitized(self, client: AsyncClient, tour_payload):
        tour_payload["summary"] = "<script>document.cookie</script>Nice"

        response = await client.post("/api/v1/tours", json=tour_payload)

        assert response.status_code == 201
        summary = response.json()["data"]["data"]["summary"]
        assert "<script>" not in summary
        assert summary.startswith("&lt;script>")

    @pytest.mark.asyncio
    async def test_body_keys_escaped(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/echo", json={"<script>alert(1)</script>": "x"}
        )

        assert response.json()["body"] == {"&lt;script>alert(1)&lt;/script>": "x"}

    @pytest.mark.asyncio
    async def test_query_keys_escaped(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/echo", params={"<script>alert(1)</script>": "1"}
        )

        query = response.json()["query"]
        assert query == {"&lt;script>alert(1)&lt;/script>": "1"}

    @pytest.mark.asyncio
    async def test_ampersands_survive_storage_and_filters(
        self, client: AsyncClient, tour_payload
    ):
        tour_payload["name"] = "Sea & Sky Tour"

        response = await client.post("/api/v1/tours", json=tour_payload)

        tour = response.json()["data"]["data"]
        assert tour["name"] == "Sea & Sky Tour"
        assert tour["slug"] == "sea-sky-tour"

        response = await client.get("/api/v1/tours", params={"name": "Sea & Sky Tour"})
        assert response.json()["results"] == 1
        assert response.json()["data"]["data"][0]["name"] == "Sea & Sky Tour"
