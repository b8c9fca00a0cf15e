import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from tubely.api.limits import BodySizeLimitMiddleware
from tubely.models.errors import RequestBodyTooLarge

LIMIT = 1024


async def echo_length(request: Request):
    body = await request.body()
    return JSONResponse({"received": len(body)})


async def guarded(request: Request):
    return JSONResponse({"error": "Couldn't find bearer token"}, status_code=401)


async def too_large(request: Request, exc: RequestBodyTooLarge):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@pytest.fixture
def client():
    app = Starlette(
        routes=[
            Route("/upload/video", echo_length, methods=["POST"]),
            Route("/upload/guarded", guarded, methods=["POST"]),
            Route("/other", echo_length, methods=["POST"]),
        ],
        exception_handlers={RequestBodyTooLarge: too_large},
    )
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=LIMIT, path_prefixes=("/upload/",))
    return TestClient(app)


def chunks(total, size=100):
    sent = 0
    while sent < total:
        n = min(size, total - sent)
        sent += n
        yield b"x" * n


def test_body_exactly_at_limit_passes(client):
    response = client.post("/upload/video", content=b"x" * LIMIT)
    assert response.status_code == 200
    assert response.json() == {"received": LIMIT}


def test_declared_length_over_limit_is_refused(client):
    response = client.post("/upload/video", content=b"x" * (LIMIT + 1))
    assert response.status_code == 400
    assert response.json() == {"error": "Request body too large"}


def test_streamed_body_at_limit_passes(client):
    response = client.post("/upload/video", content=chunks(LIMIT))
    assert response.status_code == 200
    assert response.json() == {"received": LIMIT}


def test_streamed_body_over_limit_is_refused(client):
    response = client.post("/upload/video", content=chunks(LIMIT + 1))
    assert response.status_code == 400
    assert response.json() == {"error": "Request body too large"}


def test_other_paths_are_not_limited(client):
    response = client.post("/other", content=b"x" * (LIMIT * 4))
    assert response.status_code == 200


def test_route_answers_before_the_limit_applies(client):
    response = client.post("/upload/guarded", content=b"x" * (LIMIT + 1))
    assert response.status_code == 401
