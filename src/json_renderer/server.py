"""
Dev replay server.

Serves a recorded patch stream from `POST /api/generate` as NDJSON, so a
UIStream (or `json-renderer stream`) can be exercised without a live
generator:

    app = create_replay_app(Path("login-form.ndjson").read_text().splitlines(), delay=0.05)
    uvicorn.run(app, port=8787)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from typing import Any

from fastapi import FastAPI
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

NDJSON_MEDIA_TYPE = "application/x-ndjson"


class GenerateRequest(BaseModel):
    """Body of a generate request."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str
    context: dict[str, Any] | None = None
    current_tree: dict[str, Any] | None = Field(default=None, alias="currentTree")


def create_replay_app(lines: Iterable[str], delay: float = 0.0) -> FastAPI:
    """
    Build a FastAPI app that replays patch lines.

    Args:
        lines: Patch lines, replayed verbatim (one per response line).
        delay: Seconds to sleep before each line.

    Returns:
        FastAPI app with `POST /api/generate` and `GET /health`.
    """
    recorded = [line.rstrip("\r\n") for line in lines]

    app = FastAPI(title="json-renderer replay server")

    async def replay() -> AsyncIterator[bytes]:
        for line in recorded:
            if delay:
                await asyncio.sleep(delay)
            yield (line + "\n").encode("utf-8")

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "lines": len(recorded)}

    @app.post("/api/generate")
    async def generate(request: GenerateRequest) -> StreamingResponse:
        logger.info(f"Replaying {len(recorded)} lines for prompt: {request.prompt[:60]!r}")
        return StreamingResponse(
            replay(),
            media_type=NDJSON_MEDIA_TYPE,
            headers={"Cache-Control": "no-cache"},
        )

    return app
