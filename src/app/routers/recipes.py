# src/app/routers/recipes.py
from __future__ import annotations

import logging
import time

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status
from starlette.concurrency import run_in_threadpool

from src.app.deps import CurrentUser, get_current_user, get_http_client, get_recipe_repository
from src.app.domain.errors import InvalidDraftError, RecipeNotFoundError, RecipeRepositoryError
from src.app.infra.db.base import RecipeRepository
from src.app.schemas.recipes import (
    PreviewRequest,
    PreviewResponse,
    RecipeListResponse,
    RecipeOptionsResponse,
    RecipeResponse,
    SaveRecipeRequest,
    SaveRecipeResponse,
)
from src.services import recipes as recipe_service
from src.services.errors import InvalidURLError, ServiceError
from src.services.ingredients import TAG_OPTIONS, UNIT_OPTIONS
from src.services.preview import build_preview

log = logging.getLogger("recipes")
router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("/preview", response_model=PreviewResponse)
async def preview_url(
    body: PreviewRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
) -> PreviewResponse:
    t0 = time.time()
    log.info("preview.start url=%s", body.url)
    try:
        result = await build_preview(body.url, client)
    except InvalidURLError as exc:
        raise HTTPException(status_code=400, detail="url is required") from exc
    except ServiceError as exc:
        dt = time.time() - t0
        log.warning("preview.fail url=%s dt=%.2fs error=%s", body.url, dt, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Falha ao resolver URL") from exc

    dt = time.time() - t0
    log.info(
        "preview.ok url=%s canonical=%s provider=%s dt=%.2fs",
        body.url,
        result.canonical_url,
        result.provider.value,
        dt,
    )
    return PreviewResponse.from_result(result)


@router.post("", response_model=SaveRecipeResponse)
async def save_recipe(
    body: SaveRecipeRequest,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> SaveRecipeResponse:
    log.info("save.start owner=%s canonical=%s", user.id, body.draft.canonicalUrl)
    try:
        recipe_id = await run_in_threadpool(
            recipe_service.save_recipe,
            repo,
            str(user.id),
            body.draft.to_domain(),
        )
    except InvalidDraftError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RecipeRepositoryError as exc:
        log.exception("save.fail owner=%s error=%s", user.id, exc)
        raise HTTPException(status_code=500, detail="saveRecipe failed") from exc

    log.info("save.ok owner=%s recipe=%s", user.id, recipe_id)
    return SaveRecipeResponse(id=recipe_id)


@router.get("/options", response_model=RecipeOptionsResponse)
async def recipe_options() -> RecipeOptionsResponse:
    return RecipeOptionsResponse(units=list(UNIT_OPTIONS), tags=list(TAG_OPTIONS))


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> RecipeListResponse:
    try:
        records, total = await run_in_threadpool(
            recipe_service.list_recipes,
            repo,
            str(user.id),
            limit,
            offset,
        )
    except RecipeRepositoryError as exc:
        log.exception("list.fail owner=%s error=%s", user.id, exc)
        raise HTTPException(status_code=500, detail="Falha ao listar receitas") from exc

    items = [RecipeResponse.from_record(record) for record in records]
    return RecipeListResponse(items=items, total=total, limit=limit, offset=offset)


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> RecipeResponse:
    try:
        record = await run_in_threadpool(
            recipe_service.get_recipe,
            repo,
            str(user.id),
            recipe_id,
        )
    except RecipeNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Receita nao encontrada") from exc
    except RecipeRepositoryError as exc:
        log.exception("get.fail owner=%s recipe=%s error=%s", user.id, recipe_id, exc)
        raise HTTPException(status_code=500, detail="Falha ao buscar receita") from exc

    return RecipeResponse.from_record(record)
