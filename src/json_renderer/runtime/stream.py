"""
Streaming tree builder.

Consumes a chunked NDJSON patch stream and builds a tree incrementally.
Chunks may split lines (and UTF-8 sequences) anywhere; complete lines are
applied in arrival order and the trailing partial line is applied once the
stream ends.

UIStream wraps this for a generator endpoint: `send()` POSTs a prompt and
streams the response, and a newer `send()` cancels the older one.
"""

from __future__ import annotations

import asyncio
import codecs
import contextlib
import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable
from typing import Any

import httpx

from json_renderer.core.errors import StreamTransportError
from json_renderer.core.patches import apply_patch, empty_tree, parse_patch_line

logger = logging.getLogger(__name__)

Chunk = bytes | str
TreeCallback = Callable[[dict[str, Any]], None]
ErrorCallback = Callable[[Exception], None]
ChunkSource = contextlib.AbstractAsyncContextManager[AsyncIterable[Chunk]]

DEFAULT_TIMEOUT = 60.0


# =============================================================================
# Line buffering
# =============================================================================


class PatchLineBuffer:
    """Incremental UTF-8 decoder and newline splitter."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, chunk: Chunk) -> list[str]:
        """Add a chunk and return the lines it completed."""
        text = chunk if isinstance(chunk, str) else self._decoder.decode(chunk)
        *lines, self._pending = (self._pending + text).split("\n")
        return lines

    def flush(self) -> str | None:
        """Return the trailing partial line, if it has any content."""
        rest = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return rest if rest.strip() else None


async def build_tree(
    chunks: AsyncIterable[Chunk],
    on_update: TreeCallback | None = None,
    tree: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build a tree from a chunked patch stream.

    Args:
        chunks: Async iterable of bytes or str chunks.
        on_update: Called with the new tree after each applied patch.
        tree: Starting tree; an empty tree if omitted.

    Returns:
        The final tree.
    """
    buffer = PatchLineBuffer()
    current = dict(tree) if tree is not None else empty_tree()

    def apply_line(line: str) -> None:
        nonlocal current
        patch = parse_patch_line(line)
        if patch is None:
            return
        current = apply_patch(current, patch)
        logger.debug(f"Applied {patch.op} {patch.path}")
        if on_update is not None:
            on_update(current)

    async for chunk in chunks:
        for line in buffer.feed(chunk):
            apply_line(line)

    rest = buffer.flush()
    if rest is not None:
        apply_line(rest)

    return current


# =============================================================================
# Stream session
# =============================================================================


class UIStream:
    """
    A cancelable, last-writer-wins tree stream.

    State is exposed as `tree` (the latest snapshot, kept on transport
    errors), `is_streaming` and `error`. An aborted or superseded stream
    returns None from its `send()`/`consume()` call and is not an error.

    Example:
        stream = UIStream("http://127.0.0.1:8787/api/generate", on_update=print)
        tree = await stream.send("A login form")
    """

    def __init__(
        self,
        api: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        on_update: TreeCallback | None = None,
        on_complete: TreeCallback | None = None,
        on_error: ErrorCallback | None = None,
    ):
        self.api = api
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.on_update = on_update
        self.on_complete = on_complete
        self.on_error = on_error
        self._client = client

        self.tree: dict[str, Any] | None = None
        self.is_streaming = False
        self.error: Exception | None = None
        self._task: asyncio.Task[dict[str, Any] | None] | None = None

    async def send(self, prompt: str, context: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """
        POST a prompt to the generator endpoint and stream the reply.

        The request body is `{"prompt", "context", "currentTree"}`, where
        currentTree is the tree from the previous stream (or an empty tree).
        """
        if not self.api:
            raise ValueError("UIStream.send() needs an api URL")
        body = {
            "prompt": prompt,
            "context": context,
            "currentTree": self.tree if self.tree is not None else empty_tree(),
        }
        return await self._run(self._http_chunks(body))

    async def consume(self, chunks: AsyncIterable[Chunk]) -> dict[str, Any] | None:
        """Stream patches from any async chunk source."""
        return await self._run(contextlib.nullcontext(chunks))

    def abort(self) -> None:
        """Cancel the in-flight stream, if any. The partial tree is kept."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            logger.debug("Aborting stream")
            task.cancel()
        self.is_streaming = False

    def clear(self) -> None:
        self.tree = None
        self.error = None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _run(self, source: ChunkSource) -> dict[str, Any] | None:
        self.abort()
        task = asyncio.create_task(self._stream(source))
        self._task = task
        self.is_streaming = True
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            # Our own task was cancelled from outside: propagate
            if current is not None and current.cancelling():
                raise
            return None

    async def _stream(self, source: ChunkSource) -> dict[str, Any] | None:
        me = asyncio.current_task()
        self.tree = empty_tree()
        self.error = None
        self.is_streaming = True
        logger.debug("Stream started")

        def publish(tree: dict[str, Any]) -> None:
            self.tree = tree
            if self.on_update is not None:
                self.on_update(tree)

        try:
            async with source as chunks:
                tree = await build_tree(chunks, on_update=publish)
        except Exception as e:
            self.error = e
            logger.error(f"Stream failed: {e}")
            if self.on_error is not None:
                self.on_error(e)
            return self.tree
        finally:
            if self._task is me:
                self.is_streaming = False

        logger.debug(f"Stream finished with {len(tree['elements'])} elements")
        if self.on_complete is not None:
            self.on_complete(tree)
        return tree

    @contextlib.asynccontextmanager
    async def _http_chunks(self, body: dict[str, Any]) -> AsyncIterator[AsyncIterable[bytes]]:
        client = self._client or httpx.AsyncClient(timeout=self.timeout)
        try:
            async with client.stream("POST", self.api, json=body, headers=self.headers) as response:
                if response.is_error:
                    raise StreamTransportError(
                        f"HTTP error: {response.status_code}", status_code=response.status_code
                    )
                yield response.aiter_bytes()
        except httpx.HTTPError as e:
            raise StreamTransportError(f"Stream request failed: {e}") from e
        finally:
            if client is not self._client:
                await client.aclose()
