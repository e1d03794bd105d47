"""Folding of streamed provider deltas into cumulative answer snapshots."""

from collections.abc import AsyncGenerator, AsyncIterable

from pydantic import BaseModel, Field

from research_chat.models.schemas import AgentResponse, GroundingChunk


class StreamDelta(BaseModel):
    """Incremental piece of a provider response.

    Attributes:
        text: Newly generated text.
        grounding_chunks: Citations reported alongside this piece.
    """

    text: str = ""
    grounding_chunks: list[GroundingChunk] = Field(default_factory=list)


async def accumulate_snapshots(
    deltas: AsyncIterable[StreamDelta],
) -> AsyncGenerator[AgentResponse, None]:
    """Yield one cumulative snapshot per delta.

    Text only ever grows by concatenation. Citations are deduplicated by URI
    across the whole turn: the first chunk seen for a URI is kept, later ones
    are dropped. Chunks without a web source are ignored.

    Args:
        deltas: Provider deltas in arrival order.

    Yields:
        AgentResponse with all text so far and the citations collected so far.
    """
    text = ""
    citations: list[GroundingChunk] = []
    seen_uris: set[str] = set()

    async for delta in deltas:
        text += delta.text

        for chunk in delta.grounding_chunks:
            uri = chunk.uri
            if uri is None or uri in seen_uris:
                continue
            seen_uris.add(uri)
            citations.append(chunk)

        yield AgentResponse(
            text=text,
            grounding_chunks=list(citations) if citations else None,
        )
