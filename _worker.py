"""
Cloudflare Workers entry point for the Worker Data Relay.
For Cloudflare Workers (Python runtime).

The FastAPI app is imported and exported for Cloudflare's Python runtime,
which handles the ASGI conversion.
"""

from relay_fastapi import app

__all__ = ["app"]
