#!/usr/bin/env python
"""
Seed data script for development and testing.

Usage:
    python scripts/seed_data.py [BASE_URL]

Posts sample users, tours and reviews to a running server through the
public API (default http://localhost:3000). Stay under the API rate
limit: one run issues well under a hundred requests.
"""

import asyncio
import sys

import httpx

USERS = [
    {"name": "Leo Gillespie", "email": "leo@example.com", "role": "lead-guide"},
    {"name": "Lisa Brown", "email": "lisa@example.com", "role": "guide"},
    {"name": "Jonas Schmedtmann", "email": "jonas@example.com", "role": "user"},
    {"name": "Ayla Cornell", "email": "ayla@example.com", "role": "user"},
]

TOURS = [
    {
        "name": "The Forest Hiker",
        "duration": 5,
        "maxGroupSize": 25,
        "difficulty": "easy",
        "price": 397,
        "ratingsAverage": 4.7,
        "summary": "Breathtaking hike through the Canadian Banff National Park",
        "imageCover": "tour-1-cover.jpg",
        "startDates": ["2027-04-25T09:00:00Z", "2027-07-20T09:00:00Z"],
    },
    {
        "name": "The Sea Explorer",
        "duration": 7,
        "maxGroupSize": 15,
        "difficulty": "medium",
        "price": 497,
        "ratingsAverage": 4.8,
        "summary": "Exploring the jaw-dropping US east coast by foot and by boat",
        "imageCover": "tour-2-cover.jpg",
        "startDates": ["2027-06-19T09:00:00Z"],
    },
    {
        "name": "The Snow Adventurer",
        "duration": 4,
        "maxGroupSize": 10,
        "difficulty": "difficult",
        "price": 997,
        "priceDiscount": 897,
        "ratingsAverage": 4.5,
        "summary": "Exciting adventure in the snow with snowboarding and skiing",
        "imageCover": "tour-3-cover.jpg",
        "startDates": ["2028-01-05T10:00:00Z"],
    },
    {
        "name": "The City Wanderer",
        "duration": 9,
        "maxGroupSize": 20,
        "difficulty": "easy",
        "price": 1197,
        "ratingsAverage": 4.6,
        "summary": "Living the life of Wanderlust in the US' most beautiful cities",
        "imageCover": "tour-4-cover.jpg",
        "startDates": ["2027-03-11T10:00:00Z"],
    },
]

REVIEWS = [
    ("Amazing tour, every day was an adventure!", 5),
    ("Guides were great, food could be better.", 4),
    ("Worth every penny, would book again.", 5),
]

DEFAULT_PASSWORD = "test1234"


async def seed_database(base_url: str) -> None:
    """Create sample documents through the API."""
    async with httpx.AsyncClient(base_url=f"{base_url}/api/v1", timeout=10) as client:
        print("Creating users...")
        users = []
        for user in USERS:
            response = await client.post(
                "/users",
                json={**user, "password": DEFAULT_PASSWORD, "passwordConfirm": DEFAULT_PASSWORD},
            )
            response.raise_for_status()
            users.append(response.json()["data"]["data"])

        print("Creating tours...")
        tours = []
        for tour in TOURS:
            response = await client.post("/tours", json=tour)
            response.raise_for_status()
            tours.append(response.json()["data"]["data"])

        print("Creating reviews...")
        reviewers = [u for u in users if u["role"] == "user"]
        count = 0
        for i, tour in enumerate(tours):
            for j, (text, rating) in enumerate(REVIEWS[: (i % len(REVIEWS)) + 1]):
                response = await client.post(
                    f"/tours/{tour['id']}/reviews",
                    json={
                        "review": text,
                        "rating": rating,
                        "user": reviewers[(i + j) % len(reviewers)]["id"],
                    },
                )
                response.raise_for_status()
                count += 1

    print("\n" + "=" * 50)
    print("Data seeded successfully!")
    print("=" * 50)
    print("\nCreated:")
    print(f"  - {len(users)} users")
    print(f"  - {len(tours)} tours")
    print(f"  - {count} reviews")
    print(f"\nUser password: {DEFAULT_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(seed_database(sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3000"))
