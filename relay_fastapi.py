
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
import httpx

from worker_forwarding import WORKER_BASE_URL, ForwardResult, forward_request

FORWARDED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
    )


# Shared async HTTP client with connection pooling
http_client = create_http_client()


def get_http_client() -> httpx.AsyncClient:
    """Dependency returning the outbound client; overridden in tests."""
    return http_client


app = FastAPI(title="Worker Data Relay (FastAPI)")

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def to_response(result: ForwardResult) -> JSONResponse:
    return JSONResponse(result.envelope(), status_code=result.status_code)


@app.api_route("/api/worker-data", methods=FORWARDED_METHODS)
async def worker_data(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Relay the request to the existing Worker and wrap its reply."""
    result = await forward_request(
        client,
        request.method,
        request.headers.raw,
        codes=request.query_params.get("codes"),
        body=request.stream(),
    )
    return to_response(result)


@app.get("/healthz")
async def healthz():
    return {"ok": True, "upstream": WORKER_BASE_URL}


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on shutdown."""
    await http_client.aclose()
