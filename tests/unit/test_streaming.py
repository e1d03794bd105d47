"""Unit tests for folding provider deltas into cumulative snapshots."""

from collections.abc import AsyncIterator

import pytest_check as check

from research_chat.agent.streaming import StreamDelta, accumulate_snapshots
from research_chat.models.schemas import AgentResponse, GroundingChunk, WebSource


def _chunk(uri: str, title: str | None = None) -> GroundingChunk:
    return GroundingChunk(web=WebSource(uri=uri, title=title))


async def _iterate(deltas: list[StreamDelta]) -> AsyncIterator[StreamDelta]:
    for delta in deltas:
        yield delta


async def _collect(deltas: list[StreamDelta]) -> list[AgentResponse]:
    return [snapshot async for snapshot in accumulate_snapshots(_iterate(deltas))]


class TestTextAccumulation:
    """Tests for cumulative text snapshots."""

    async def test_snapshots_grow_by_concatenation(self) -> None:
        """Three chunks produce three cumulative snapshots."""
        snapshots = await _collect(
            [StreamDelta(text="Hel"), StreamDelta(text="lo "), StreamDelta(text="World")]
        )

        assert [s.text for s in snapshots] == ["Hel", "Hello ", "Hello World"]

    async def test_each_snapshot_extends_the_previous(self) -> None:
        """Text never shrinks or resets between snapshots."""
        snapshots = await _collect([StreamDelta(text=c) for c in "streaming"])

        for previous, current in zip(snapshots, snapshots[1:], strict=False):
            check.is_true(current.text.startswith(previous.text))
            check.greater(len(current.text), len(previous.text))

    async def test_empty_stream_yields_nothing(self) -> None:
        """No deltas means no snapshots."""
        assert await _collect([]) == []

    async def test_sequence_is_not_restartable(self) -> None:
        """A consumed snapshot stream cannot be iterated again."""
        stream = accumulate_snapshots(_iterate([StreamDelta(text="once")]))

        first = [s async for s in stream]
        second = [s async for s in stream]

        check.equal(len(first), 1)
        check.equal(second, [])


class TestCitationDeduplication:
    """Tests for citation handling across a turn."""

    async def test_citations_absent_until_first_arrives(self) -> None:
        """grounding_chunks stays None until a citation is collected."""
        snapshots = await _collect(
            [
                StreamDelta(text="a"),
                StreamDelta(text="b", grounding_chunks=[_chunk("https://example.gov")]),
            ]
        )

        check.is_none(snapshots[0].grounding_chunks)
        check.equal(len(snapshots[1].grounding_chunks or []), 1)

    async def test_duplicate_uri_kept_once_with_first_title(self) -> None:
        """The same URI in two chunks appears once, keeping the first title."""
        snapshots = await _collect(
            [
                StreamDelta(text="a", grounding_chunks=[_chunk("https://a.gov", "First")]),
                StreamDelta(
                    text="b",
                    grounding_chunks=[
                        _chunk("https://b.edu", "Other"),
                        _chunk("https://a.gov", "Second"),
                    ],
                ),
            ]
        )

        final = snapshots[-1].grounding_chunks or []
        uris = [c.uri for c in final]
        check.equal(uris, ["https://a.gov", "https://b.edu"])
        check.equal(final[0].web.title, "First")

    async def test_duplicates_within_one_delta(self) -> None:
        """Duplicates inside a single delta are also dropped."""
        snapshots = await _collect(
            [
                StreamDelta(
                    grounding_chunks=[_chunk("https://x.org", "X"), _chunk("https://x.org", "Y")]
                )
            ]
        )

        assert snapshots[0].grounding_chunks == [_chunk("https://x.org", "X")]

    async def test_chunks_without_web_source_are_ignored(self) -> None:
        """Non-web grounding chunks are not collected."""
        snapshots = await _collect([StreamDelta(text="a", grounding_chunks=[GroundingChunk()])])

        assert snapshots[0].grounding_chunks is None

    async def test_earlier_snapshots_are_not_mutated(self) -> None:
        """Later citations do not leak into earlier snapshots."""
        snapshots = await _collect(
            [
                StreamDelta(grounding_chunks=[_chunk("https://one.gov")]),
                StreamDelta(grounding_chunks=[_chunk("https://two.gov")]),
            ]
        )

        check.equal(len(snapshots[0].grounding_chunks or []), 1)
        check.equal(len(snapshots[1].grounding_chunks or []), 2)
