import re
from typing import Dict, Iterable, List, Optional
from urllib.parse import quote

from sqlalchemy.orm import Session

from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.user_repo import UserRepository
from storefront.utils.log import get_logger
from storefront.utils.transactions import smart_transaction

log = get_logger("seed")

DEMO_USER_EMAIL = "test@example.com"

DEMO_PRODUCTS = [
    {"name": "Wireless Headphones", "price_cents": 19999},
    {"name": "Smart Watch", "price_cents": 29999},
    {"name": "4K Webcam", "price_cents": 14999},
    {"name": "Portable Speaker", "price_cents": 7999},
    {"name": "USB-C Hub", "price_cents": 4999},
    {"name": "Mechanical Keyboard", "price_cents": 12999},
    {"name": "Wireless Mouse", "price_cents": 3999},
    {"name": "Monitor Stand", "price_cents": 5999},
    {"name": "Laptop Stand", "price_cents": 3499},
    {"name": "External SSD", "price_cents": 14999},
    {"name": "USB-C Cable", "price_cents": 1499},
    {"name": "Wireless Charger", "price_cents": 2999},
    {"name": "LED Desk Lamp", "price_cents": 4499},
    {"name": "Desk Organizer", "price_cents": 2499},
    {"name": "Phone Mount", "price_cents": 1999},
]


def slugify(name: str) -> str:
    slug = re.sub(r"\s+", "-", name.lower())
    return re.sub(r"[^a-z0-9-]", "", slug)[:40]


def image_for(name: str) -> str:
    return f"https://picsum.photos/seed/{quote(slugify(name))}/600/600"


def normalize_entry(entry: Dict) -> Optional[Dict]:
    """
    Accept a catalogue entry in either shape we see in fixtures:
    {"price_cents": 1999} or {"price": 19.99}. Entries without a name are
    skipped.
    """
    name = (entry.get("name") or entry.get("title") or "").strip()
    if not name:
        return None
    if entry.get("price_cents") is not None:
        price_cents = int(entry["price_cents"])
    else:
        price_cents = int(round(float(entry.get("price", 0)) * 100))
    return {
        "name": name,
        "price_cents": price_cents,
        "description": entry.get("description") or "Product from our collection",
        "image": entry.get("image") or image_for(name),
    }


def seed_products(db: Session, entries: Iterable[Dict]) -> List:
    repo = ProductRepository(db)
    products = []
    with smart_transaction(db):
        for raw in entries:
            ent = normalize_entry(raw)
            if ent is None:
                continue
            products.append(repo.create_or_update(**ent))
    log.info("Seeded %d products", len(products))
    return products


def seed_demo_data(db: Session) -> List:
    """Idempotently load the demo catalogue and the demo shopper."""
    products = seed_products(db, DEMO_PRODUCTS)
    with smart_transaction(db):
        UserRepository(db).get_or_create(DEMO_USER_EMAIL, "Test User")
    return products
