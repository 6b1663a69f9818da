from __future__ import annotations

from fastapi import APIRouter, Request

from diylifestyle.web.templating import render

router = APIRouter(tags=["homepage"])


@router.get("/")
async def homepage(request: Request):
    return render(request, "home.html")
