"""Seed demo data by calling the Storefront HTTP API.

Registers a demo user (or reuses it if it already exists), logs in and creates
a few products so the cart endpoints have something to work with.

Usage:
    python scripts/seed_demo.py [base_url]

The default base URL is http://localhost:8000.
This script is convenience only and does not require DB access.
"""
import sys

import httpx

DEMO_EMAIL = "demo+user@example.com"
DEMO_PASSWORD = "password123"

DEMO_PRODUCTS = [
    {"name": "Espresso beans 1kg", "price": 24.90, "description": "Dark roast", "stock": 40},
    {"name": "Hand grinder", "price": 59.00, "description": "Ceramic burrs", "stock": 12},
    {"name": "Milk jug", "price": 14.50, "stock": 25},
]


def login(client: httpx.Client, email: str, password: str) -> str:
    r = client.post("/api/users/login", json={"email": email, "password": password})
    r.raise_for_status()
    return r.json()["access_token"]


def seed(client: httpx.Client, email: str = DEMO_EMAIL, password: str = DEMO_PASSWORD) -> dict:
    r = client.post(
        "/api/users/register",
        json={"name": "Demo User", "email": email, "password": password},
    )
    if r.status_code == 201:
        print(f"Registered user: {email}")
    elif r.status_code == 400:
        print(f"User {email} already exists, logging in")
    else:
        r.raise_for_status()

    token = login(client, email, password)
    headers = {"Authorization": f"Bearer {token}"}

    product_ids = []
    for payload in DEMO_PRODUCTS:
        r = client.post("/api/products", json=payload, headers=headers)
        r.raise_for_status()
        product = r.json()
        product_ids.append(product["id"])
        print(f"Created product {product['id']}: {product['name']}")

    return {"token": token, "product_ids": product_ids}


def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"
    print(f"Seeding demo data into {base_url}")
    try:
        with httpx.Client(base_url=base_url, timeout=5.0) as client:
            result = seed(client)
    except httpx.HTTPError as e:
        print(f"Seeding failed: {e}")
        sys.exit(1)

    print("\nReady. Try:")
    print(f'  curl -H "Authorization: Bearer {result["token"]}" {base_url}/api/cart')


if __name__ == "__main__":
    main()
