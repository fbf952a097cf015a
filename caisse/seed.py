# caisse/seed.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.orm import Session

from .models import Category, Product

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"


def _sanitize_seed_key(raw: str) -> str:
    k = (raw or "").strip().replace("\\", "/")
    k = k.split("/")[-1].strip().lower()
    return k or "fr"


def available_seeds() -> list[str]:
    return sorted(p.name for p in DATA_DIR.iterdir() if (p / "seed.json").is_file())


def load_seed(locale: str) -> dict[str, Any]:
    key = _sanitize_seed_key(locale)
    seed_path = DATA_DIR / key / "seed.json"

    if not seed_path.exists():
        raise FileNotFoundError(
            f"Seed '{key}' not found.\nAvailable seeds: {available_seeds()}"
        )

    try:
        return json.loads(seed_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {seed_path}: {e}") from e


def seed_categories(seed: dict[str, Any]) -> list[dict[str, str]]:
    out: list[dict[str, str]] = []
    for c in seed.get("categories") or []:
        if not isinstance(c, dict):
            continue
        cid = str(c.get("id") or "").strip()
        label = str(c.get("label") or "").strip()
        color = str(c.get("color") or "").strip()
        if cid and label and color:
            out.append({"id": cid, "label": label, "color": color})
    return out


def seed_products(seed: dict[str, Any]) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for p in seed.get("products") or []:
        if not isinstance(p, dict):
            continue
        pid = str(p.get("id") or "").strip()
        name = str(p.get("name") or "").strip()
        category_id = str(p.get("category_id") or "").strip()
        if not (pid and name and category_id):
            continue
        out.append(
            {
                "id": pid,
                "name": name,
                "price": int(p.get("price") or 0),
                "category_id": category_id,
            }
        )
    return out


def create_default_data(session: Session, locale: str) -> None:
    """Insert the default catalog for `locale`, leaving rows that already exist untouched."""
    seed = load_seed(locale)
    categories = seed_categories(seed)
    products = seed_products(seed)

    if categories:
        session.execute(insert(Category).values(categories).on_conflict_do_nothing())
    if products:
        session.execute(insert(Product).values(products).on_conflict_do_nothing())

    logger.info(
        "Seeded %d categories and %d products (locale=%s)",
        len(categories), len(products), _sanitize_seed_key(locale),
    )
