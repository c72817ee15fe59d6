"""Swagger UI documentation served under /docs."""

from fastapi import APIRouter, Request
from fastapi.openapi.docs import (
    get_swagger_ui_html,
    get_swagger_ui_oauth2_redirect_html,
)
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

DOCS_INDEX = "/docs/index.html"

router = APIRouter(prefix="/docs", include_in_schema=False)


@router.get("")
async def docs_redirect() -> RedirectResponse:
    return RedirectResponse(DOCS_INDEX, status_code=301)


@router.get("/index.html")
async def swagger_ui(request: Request) -> HTMLResponse:
    return get_swagger_ui_html(
        openapi_url="/docs/doc.json",
        title=f"{request.app.title} - Swagger UI",
        oauth2_redirect_url="/docs/oauth2-redirect.html",
    )


@router.get("/doc.json")
async def openapi_document(request: Request) -> JSONResponse:
    return JSONResponse(request.app.openapi())


@router.get("/oauth2-redirect.html")
async def swagger_ui_redirect() -> HTMLResponse:
    return get_swagger_ui_oauth2_redirect_html()
