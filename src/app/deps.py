# src/app/deps.py (singletons expostos como dependencias)

from __future__ import annotations

from typing import AsyncIterator

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client, create_client

from src.app.config import settings
from src.app.infra.db.base import RecipeRepository
from src.app.infra.db.supabase_recipes_repo import SupabaseRecipeRepository

_client: Client | None = None

def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def get_recipe_repository(supa: Client = Depends(get_supabase)) -> RecipeRepository:
    return SupabaseRecipeRepository(supa, table_name=settings.RECIPES_TABLE)


def create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        headers={"User-Agent": settings.HTTP_USER_AGENT},
    )


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with create_http_client() as client:
        yield client


auth_scheme = HTTPBearer(auto_error=False)

class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None

async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser:
    """
    Recebe Authorization: Bearer <access_token> do Supabase,
    valida no GoTrue e retorna dados minimos do usuario.
    Sessoes anonimas do Supabase tambem sao aceitas.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    token = cred.credentials
    try:
        res = supa.auth.get_user(token)
        user = res.user if res else None
        if not user:
            raise HTTPException(status_code=401, detail="Invalid token")

        name = None
        meta = getattr(user, "user_metadata", None) or {}
        if isinstance(meta, dict):
            name = meta.get("name")

        return CurrentUser(id=str(user.id), email=user.email, name=name)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid/expired token")
