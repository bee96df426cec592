"""Liveness probe."""

from fastapi import APIRouter


router = APIRouter()


@router.get("/test")
async def liveness() -> str:
    return "test ok"
