"""Reset the post collection to a known set of sample posts."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from diylifestyle.auth.sessions import flash
from diylifestyle.db.database import get_db
from diylifestyle.db.queries import posts as post_queries

logger = logging.getLogger(__name__)

router = APIRouter(tags=["seed"])

SEED_POSTS = [
    {
        "title": "Upcycled Pallet Coffee Table",
        "img": "https://images.unsplash.com/photo-1555041469-a586c61ea9bc",
        "body": "Sand two pallets, stack them, add caster wheels and a glass top.",
    },
    {
        "title": "Mason Jar Herb Garden",
        "img": "https://images.unsplash.com/photo-1466692476868-aef1dfb1e735",
        "body": "Drill drainage holes, add pebbles and soil, plant basil, mint and parsley.",
    },
    {
        "title": "Rope Wrapped Planter",
        "img": "https://images.unsplash.com/photo-1485955900006-10f4d324d411",
        "body": "Wrap jute rope around a plain pot with a hot glue gun, bottom to top.",
    },
    {
        "title": "Floating Wall Shelves",
        "img": "https://images.unsplash.com/photo-1594026112284-02bb6f3352fe",
        "body": "Mount hidden brackets into studs and slide the shelf boards over them.",
    },
]


@router.get("/seed")
async def seed(request: Request):
    db = await get_db()
    count = await post_queries.replace_all_posts(db, SEED_POSTS)
    logger.info("Seeded %d posts", count)
    flash(request, "success", f"Loaded {count} sample posts.")
    return RedirectResponse("/diylifestyle/index", status_code=303)
