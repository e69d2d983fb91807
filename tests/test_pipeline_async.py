"""Async lifecycle: suspension, concurrent passes and cancellation."""

from __future__ import annotations

import asyncio

import pytest

from kumi import (
    NodeState,
    RenderPass,
    async_render_pass,
    get_render_pass,
    get_stack,
    run_async,
    slot_marker,
)

from .components import Card, Panel
from .conftest import RecordingHost


class TestRunAsync:
    @pytest.mark.asyncio
    async def test_nested_with_awaitable_captures(self, host: RecordingHost) -> None:
        async with async_render_pass(host) as rp:
            panel, card = Panel(), Card()

            async def inner() -> str:
                await asyncio.sleep(0)
                return "leaf"

            async def outer() -> str:
                return await run_async(card, rp, inner)

            html = await run_async(panel, rp, outer)

        assert html == "<Panel><Card>leaf</Card></Panel>"
        assert card.parent is panel
        assert get_stack(rp).balanced

    @pytest.mark.asyncio
    async def test_render_route_hook(self, host: RecordingHost) -> None:
        class Compact(Card):
            def render_route(self) -> str:
                return "compact.html"

        async with async_render_pass(host) as rp:
            await run_async(Compact(), rp, lambda: "x")

        assert host.routes() == ["compact.html"]

    @pytest.mark.asyncio
    async def test_plain_capture_is_accepted(self, host: RecordingHost) -> None:
        async with async_render_pass(host) as rp:
            html = await run_async(Card(), rp, lambda: "sync body")
        assert html == "<Card>sync body</Card>"

    @pytest.mark.asyncio
    async def test_slot_marker(self, host: RecordingHost) -> None:
        async with async_render_pass(host) as rp:
            card = Card()

            async def capture() -> str:
                await run_async(slot_marker("footer"), rp, lambda: "F")
                return "body"

            await run_async(card, rp, capture)

        assert card.get_slot("footer") == "F"
        assert host.calls[0].slots == frozenset({"footer"})

    @pytest.mark.asyncio
    async def test_stack_unchanged_across_suspension(self, host: RecordingHost) -> None:
        async with async_render_pass(host) as rp:
            card = Card()
            seen = []

            async def capture() -> str:
                seen.append(get_stack(rp).snapshot())
                await asyncio.sleep(0)
                seen.append(get_stack(rp).snapshot())
                return ""

            await run_async(card, rp, capture)

        assert seen == [(card,), (card,)]


class TestConcurrentPasses:
    @pytest.mark.asyncio
    async def test_interleaved_passes_do_not_mix(self, host: RecordingHost) -> None:
        async def render(label: str) -> tuple[RenderPass, str]:
            async with async_render_pass(host) as rp:

                async def leaf() -> str:
                    await asyncio.sleep(0)
                    return label

                async def middle() -> str:
                    return await run_async(Card(title=label), rp, leaf)

                html = await run_async(Card(title=label), rp, middle)
                return rp, html

        results = await asyncio.gather(*(render(label) for label in "abcd"))

        for (rp, html), label in zip(results, "abcd", strict=True):
            assert html == f"<Card><Card>{label}</Card></Card>"
            assert get_stack(rp).balanced
            assert len(rp.nodes) == 2

        for call in host.calls:
            labels = {node.title for node in call.stack}
            assert labels == {call.model.title}
        assert get_render_pass() is None


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancelled_node_pops_itself(self, host: RecordingHost) -> None:
        rp = RenderPass(host=host)
        started = asyncio.Event()
        card = Card()

        async def capture() -> str:
            started.set()
            await asyncio.Event().wait()
            return ""

        task = asyncio.create_task(run_async(card, rp, capture))
        await started.wait()
        assert get_stack(rp).top is card

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert get_stack(rp).balanced
        assert card.state is NodeState.FAILED

    @pytest.mark.asyncio
    async def test_host_failure_async(self, host: RecordingHost) -> None:
        panel, card = Panel(), Card()

        def fail(model: object) -> str:
            raise LookupError("gone")

        host.templates[card.template_route] = fail
        async with async_render_pass(host) as rp:

            async def capture() -> str:
                return await run_async(card, rp, lambda: "")

            with pytest.raises(LookupError):
                await run_async(panel, rp, capture)

        assert get_stack(rp).balanced
        assert panel.state is NodeState.FAILED
