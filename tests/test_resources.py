"""Tests for the tour, user, review and booking endpoints."""

import pytest
from httpx import AsyncClient

from natours.core.security import verify_password
from natours.services.repository import Repositories

TOURS = "/api/v1/tours"


async def create_tour(client: AsyncClient, payload: dict, **changes) -> dict:
    response = await client.post(TOURS, json={**payload, **changes})
    assert response.status_code == 201, response.text
    return response.json()["data"]["data"]


async def create_user(client: AsyncClient, payload: dict, **changes) -> dict:
    response = await client.post("/api/v1/users", json={**payload, **changes})
    assert response.status_code == 201, response.text
    return response.json()["data"]["data"]


class TestTours:
    """Tests for tour endpoints."""

    @pytest.mark.asyncio
    async def test_create_tour(self, client: AsyncClient, tour_payload):
        response = await client.post(TOURS, json=tour_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        tour = body["data"]["data"]
        assert tour["id"]
        assert tour["createdAt"]
        assert tour["slug"] == "the-forest-hiker"
        assert tour["maxGroupSize"] == 25
        assert tour["ratingsAverage"] == 4.5

    @pytest.mark.asyncio
    async def test_create_tour_from_form(self, client: AsyncClient, tour_payload):
        response = await client.post(TOURS, data={k: str(v) for k, v in tour_payload.items()})

        assert response.status_code == 201
        assert response.json()["data"]["data"]["duration"] == 5

    @pytest.mark.asyncio
    async def test_discount_must_be_below_price(self, client: AsyncClient, tour_payload):
        response = await client.post(TOURS, json={**tour_payload, "priceDiscount": 500})

        assert response.status_code == 400
        assert "Discount price should be below regular price" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_get_update_delete(self, client: AsyncClient, tour_payload):
        tour = await create_tour(client, tour_payload)
        url = f"{TOURS}/{tour['id']}"

        response = await client.get(url)
        assert response.status_code == 200
        assert response.json()["data"]["data"]["name"] == "The Forest Hiker"

        response = await client.patch(url, json={"price": 499})
        assert response.status_code == 200
        updated = response.json()["data"]["data"]
        assert updated["price"] == 499
        assert updated["duration"] == 5

        response = await client.delete(url)
        assert response.status_code == 204
        assert response.content == b""

        response = await client.get(url)
        assert response.status_code == 404
        assert response.json()["message"] == "No tour found with that ID"

    @pytest.mark.asyncio
    async def test_update_rejects_invalid_values(self, client: AsyncClient, tour_payload):
        tour = await create_tour(client, tour_payload)

        response = await client.patch(f"{TOURS}/{tour['id']}", json={"difficulty": "extreme"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_tour(self, client: AsyncClient):
        assert (await client.patch(f"{TOURS}/nope", json={"price": 1})).status_code == 404
        assert (await client.delete(f"{TOURS}/nope")).status_code == 404

    @pytest.mark.asyncio
    async def test_filter_sort_fields_and_pages(self, client: AsyncClient, tour_payload):
        await create_tour(client, tour_payload)
        await create_tour(client, tour_payload, name="The Sea Explorer", price=497)
        await create_tour(client, tour_payload, name="The Snow Adventurer", price=997)
        await create_tour(client, tour_payload, name="The City Wanderer", price=1197)

        response = await client.get(
            TOURS, params={"price[gte]": "450", "sort": "-price", "fields": "name,price"}
        )
        body = response.json()
        assert body["results"] == 3
        assert [t["price"] for t in body["data"]["data"]] == [1197, 997, 497]
        assert set(body["data"]["data"][0]) == {"id", "name", "price"}

        response = await client.get(TOURS, params={"sort": "price", "limit": "2", "page": "2"})
        body = response.json()
        assert body["results"] == 2
        assert body["total"] == 4
        assert [t["price"] for t in body["data"]["data"]] == [997, 1197]

    @pytest.mark.asyncio
    async def test_top_five_cheap(self, client: AsyncClient, tour_payload):
        for index in range(6):
            await create_tour(
                client,
                tour_payload,
                name=f"The Forest Hiker {index}",
                ratingsAverage=4.9 if index < 2 else 4.0,
                price=100 + index,
            )

        response = await client.get(f"{TOURS}/top-5-cheap")

        body = response.json()
        assert body["results"] == 5
        names = [t["name"] for t in body["data"]["data"]]
        assert names == [
            "The Forest Hiker 0",
            "The Forest Hiker 1",
            "The Forest Hiker 2",
            "The Forest Hiker 3",
            "The Forest Hiker 4",
        ]


class TestUsers:
    """Tests for user endpoints."""

    @pytest.mark.asyncio
    async def test_password_hashed_and_hidden(
        self, client: AsyncClient, repositories: Repositories, user_payload
    ):
        user = await create_user(client, user_payload)

        assert "password" not in user
        assert "passwordConfirm" not in user
        assert user["role"] == "user"
        assert user["active"] is True

        stored = await repositories.users.get(user["id"])
        assert stored["password"].startswith("$argon2")
        assert verify_password("TestPass123!", stored["password"])
        assert "passwordConfirm" not in stored

    @pytest.mark.asyncio
    async def test_list_hides_passwords(self, client: AsyncClient, user_payload):
        await create_user(client, user_payload)

        response = await client.get("/api/v1/users")

        assert response.json()["results"] == 1
        assert "password" not in response.json()["data"]["data"][0]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client: AsyncClient, user_payload):
        await create_user(client, user_payload)

        response = await client.post("/api/v1/users", json=user_payload)

        assert response.status_code == 400
        assert "Duplicate field value: email" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_passwords_must_match(self, client: AsyncClient, user_payload):
        user_payload["passwordConfirm"] = "Different123!"

        response = await client.post("/api/v1/users", json=user_payload)

        assert response.status_code == 400
        assert "Passwords are not the same!" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_invalid_email(self, client: AsyncClient, user_payload):
        user_payload["email"] = "not-an-email"

        response = await client.post("/api/v1/users", json=user_payload)

        assert response.status_code == 400


class TestReviews:
    """Tests for review endpoints."""

    @pytest.mark.asyncio
    async def test_nested_reviews(self, client: AsyncClient, tour_payload, user_payload):
        tour = await create_tour(client, tour_payload)
        other = await create_tour(client, tour_payload, name="The Sea Explorer")
        user = await create_user(client, user_payload)

        response = await client.post(
            f"{TOURS}/{tour['id']}/reviews",
            json={"review": "Amazing!", "rating": 5, "user": user["id"]},
        )
        assert response.status_code == 201
        assert response.json()["data"]["data"]["tour"] == tour["id"]

        await client.post(
            f"{TOURS}/{other['id']}/reviews",
            json={"review": "Fine", "rating": 3, "user": user["id"]},
        )

        response = await client.get(f"{TOURS}/{tour['id']}/reviews")
        body = response.json()
        assert body["results"] == 1
        assert body["data"]["data"][0]["review"] == "Amazing!"

        response = await client.get("/api/v1/reviews")
        assert response.json()["results"] == 2

    @pytest.mark.asyncio
    async def test_review_for_missing_tour(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/reviews",
            json={"review": "Hmm", "rating": 2, "tour": "missing", "user": "u1"},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "No tour found with that ID"

        response = await client.get(f"{TOURS}/missing/reviews")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_rating_range(self, client: AsyncClient, tour_payload):
        tour = await create_tour(client, tour_payload)

        response = await client.post(
            f"{TOURS}/{tour['id']}/reviews",
            json={"review": "Too good", "rating": 6, "user": "u1"},
        )

        assert response.status_code == 400


class TestBookings:
    """Tests for booking endpoints."""

    @pytest.mark.asyncio
    async def test_booking_requires_tour_and_user(
        self, client: AsyncClient, tour_payload, user_payload
    ):
        tour = await create_tour(client, tour_payload)

        response = await client.post(
            "/api/v1/bookings", json={"tour": tour["id"], "user": "ghost", "price": 397}
        )
        assert response.status_code == 404
        assert response.json()["message"] == "No user found with that ID"

        user = await create_user(client, user_payload)
        response = await client.post(
            "/api/v1/bookings", json={"tour": tour["id"], "user": user["id"], "price": 397}
        )
        assert response.status_code == 201
        assert response.json()["data"]["data"]["paid"] is True


class TestViews:
    """Tests for the site pages."""

    @pytest.mark.asyncio
    async def test_tour_page(self, client: AsyncClient, tour_payload):
        await create_tour(client, tour_payload)

        response = await client.get("/tour/the-forest-hiker")

        assert response.status_code == 200
        assert response.json()["title"] == "The Forest Hiker Tour"
        assert response.json()["reviews"] == []

    @pytest.mark.asyncio
    async def test_unknown_tour_page(self, client: AsyncClient):
        response = await client.get("/tour/nowhere")

        assert response.status_code == 404
        assert response.json()["message"] == "There is no tour with that name."
