"""Root endpoint."""

from fastapi import APIRouter
from starlette.responses import Response

HELLO_WORLD = "Hello, World!"

router = APIRouter(tags=["Root"])


@router.get(
    "/",
    summary="Hello World endpoint",
    response_class=Response,
    responses={200: {"content": {"text/plain": {"example": HELLO_WORLD}}}},
)
async def hello_world() -> Response:
    """Return a fixed greeting.

    Failures writing the body are logged by ``WriteErrorMiddleware``.
    """
    # Exact header; media_type would append a charset
    return Response(HELLO_WORLD, headers={"Content-Type": "text/plain"})
