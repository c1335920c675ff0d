"""Tests for the response assembler."""

import asyncio

import pytest

from solis_modbus.domain.exceptions import (
    InverterConnectionError,
    RequestInProgressError,
    ResponseTimeoutError,
)
from solis_modbus.infrastructure.protocol import FramingMode, ResponseAssembler
from solis_modbus.infrastructure.state_machines import AssemblerState
from tests.doubles import exception_response, read_response

FRAME = read_response([0x0000, 0x0384])  # 9 bytes

# asyncio may wake a timer up to one clock tick early
TOLERANCE = 0.005


def make_assembler(protocol, **kwargs):
    kwargs.setdefault("quiet_window", 0.02)
    kwargs.setdefault("deadline", 0.2)
    return ResponseAssembler(protocol=protocol, **kwargs)


class TestLengthFraming:
    """Frames complete as soon as the expected length is reached."""

    @pytest.mark.asyncio
    async def test_complete_frame_in_one_chunk(self, protocol):
        assembler = make_assembler(protocol)
        generation = assembler.begin(len(FRAME))

        assembler.feed(FRAME)

        assert assembler.state == AssemblerState.COMPLETE
        assert await assembler.wait(generation) == FRAME
        assert assembler.state == AssemblerState.IDLE

    @pytest.mark.asyncio
    async def test_chunk_boundaries_do_not_matter(self, protocol):
        """Every split of the same bytes yields the same frame."""
        splits = [[FRAME[:i], FRAME[i:]] for i in range(1, len(FRAME))]
        splits.append([FRAME[i : i + 1] for i in range(len(FRAME))])

        for chunks in splits:
            assembler = make_assembler(protocol)
            generation = assembler.begin(len(FRAME))
            for chunk in chunks:
                assembler.feed(chunk)
            assert await assembler.wait(generation) == FRAME

    @pytest.mark.asyncio
    async def test_chunks_arriving_over_time(self, protocol):
        loop = asyncio.get_running_loop()
        assembler = make_assembler(protocol)
        generation = assembler.begin(len(FRAME))

        loop.call_later(0.001, assembler.feed, FRAME[:2])
        loop.call_later(0.005, assembler.feed, FRAME[2:6])
        loop.call_later(0.010, assembler.feed, FRAME[6:])

        assert await assembler.wait(generation) == FRAME

    @pytest.mark.asyncio
    async def test_length_from_prefix_when_not_given(self, protocol):
        assembler = make_assembler(protocol, quiet_window=5.0, deadline=10.0)
        generation = assembler.begin()

        assembler.feed(FRAME[:3])
        assert assembler.state == AssemblerState.AWAITING_RESPONSE
        assembler.feed(FRAME[3:])

        assert assembler.state == AssemblerState.COMPLETE
        assert await assembler.wait(generation) == FRAME

    @pytest.mark.asyncio
    @pytest.mark.parametrize("cuts", [(1, 3), (2, 5), (1, 2)])
    async def test_gaps_shorter_than_quiet_window_across_prefix(self, protocol, cuts):
        """Learning the length mid-frame must not let an earlier quiet timer split it."""
        loop = asyncio.get_running_loop()
        assembler = make_assembler(protocol, quiet_window=0.05, deadline=1.0)
        generation = assembler.begin()
        first, second = cuts

        assembler.feed(FRAME[:first])
        loop.call_later(0.03, assembler.feed, FRAME[first:second])
        loop.call_later(0.06, assembler.feed, FRAME[second:])

        assert await assembler.wait(generation) == FRAME

    @pytest.mark.asyncio
    async def test_exception_frame_completes_at_five_bytes(self, protocol):
        frame = exception_response(0x02)
        assembler = make_assembler(protocol, quiet_window=5.0, deadline=10.0)
        generation = assembler.begin(7)

        assembler.feed(frame)

        assert await assembler.wait(generation) == frame

    @pytest.mark.asyncio
    async def test_trailing_bytes_are_dropped(self, protocol):
        assembler = make_assembler(protocol)
        generation = assembler.begin(len(FRAME))

        assembler.feed(FRAME + b"\xAA\xBB")

        assert await assembler.wait(generation) == FRAME

    @pytest.mark.asyncio
    async def test_quiet_window_used_while_length_unknown(self):
        """Without a codec or expected length, silence ends the frame."""
        assembler = ResponseAssembler(quiet_window=0.02, deadline=1.0)
        generation = assembler.begin()

        assembler.feed(FRAME)

        assert await assembler.wait(generation) == FRAME


class TestQuietWindowFraming:
    """Compatibility mode: a frame ends after the line goes quiet."""

    @pytest.mark.asyncio
    async def test_frame_ends_on_silence(self, protocol):
        loop = asyncio.get_running_loop()
        assembler = make_assembler(
            protocol, framing_mode=FramingMode.QUIET_WINDOW, quiet_window=0.03
        )
        generation = assembler.begin(len(FRAME))

        assembler.feed(FRAME[:4])
        loop.call_later(0.01, assembler.feed, FRAME[4:])
        start = loop.time()

        assert await assembler.wait(generation) == FRAME
        assert loop.time() - start >= 0.03

    @pytest.mark.asyncio
    async def test_framing_mode_accepts_string(self, protocol):
        assembler = make_assembler(protocol, framing_mode="quiet_window")
        assert assembler.framing_mode is FramingMode.QUIET_WINDOW


class TestDeadline:
    """The overall deadline bounds every exchange."""

    @pytest.mark.asyncio
    async def test_timeout_when_frame_incomplete(self, protocol):
        assembler = make_assembler(protocol, deadline=0.05)
        generation = assembler.begin(len(FRAME))
        assembler.feed(FRAME[:4])

        with pytest.raises(ResponseTimeoutError):
            await assembler.wait(generation)

        assert assembler.state == AssemblerState.IDLE
        assert assembler.active_generation is None

    @pytest.mark.asyncio
    async def test_timeout_when_silent(self, protocol):
        assembler = make_assembler(protocol, deadline=0.05)
        generation = assembler.begin(len(FRAME))

        with pytest.raises(ResponseTimeoutError):
            await assembler.wait(generation)

    @pytest.mark.asyncio
    async def test_late_bytes_do_not_leak_into_next_request(self, protocol):
        """The tail of a timed-out reply is discarded, not prepended."""
        assembler = make_assembler(protocol, deadline=0.05)
        first = assembler.begin(len(FRAME))
        assembler.feed(FRAME[:4])
        with pytest.raises(ResponseTimeoutError):
            await assembler.wait(first)

        assembler.feed(FRAME[4:])
        next_frame = read_response([85])
        second = assembler.begin(len(next_frame))
        assembler.feed(next_frame)

        assert second != first
        assert await assembler.wait(second) == next_frame


class TestGenerations:
    """One outstanding request, identified by a generation token."""

    @pytest.mark.asyncio
    async def test_bytes_while_idle_are_discarded(self, protocol):
        assembler = make_assembler(protocol)
        assembler.feed(b"\x01\x04")

        generation = assembler.begin(len(FRAME))
        assembler.feed(FRAME)

        assert await assembler.wait(generation) == FRAME

    @pytest.mark.asyncio
    async def test_second_begin_rejected_while_outstanding(self, protocol):
        assembler = make_assembler(protocol)
        generation = assembler.begin(len(FRAME))

        with pytest.raises(RequestInProgressError):
            assembler.begin(len(FRAME))

        assembler.cancel(generation)

    @pytest.mark.asyncio
    async def test_generations_increase(self, protocol):
        assembler = make_assembler(protocol)
        first = assembler.begin(len(FRAME))
        assembler.cancel(first)
        second = assembler.begin(len(FRAME))
        assembler.cancel(second)

        assert second > first

    @pytest.mark.asyncio
    async def test_cancel_returns_to_idle(self, protocol):
        assembler = make_assembler(protocol)
        generation = assembler.begin(len(FRAME))

        assembler.cancel(generation)

        assert assembler.state == AssemblerState.IDLE
        assert assembler.active_generation is None

    @pytest.mark.asyncio
    async def test_wait_unknown_generation(self, protocol):
        assembler = make_assembler(protocol)
        with pytest.raises(ValueError):
            await assembler.wait(42)

    @pytest.mark.asyncio
    async def test_cancelled_waiter_releases_assembler(self, protocol):
        assembler = make_assembler(protocol, deadline=5.0)
        generation = assembler.begin(len(FRAME))
        task = asyncio.ensure_future(assembler.wait(generation))
        await asyncio.sleep(0)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert assembler.state == AssemblerState.IDLE


class TestTransportFailure:
    """Transport errors are delivered to the outstanding request."""

    @pytest.mark.asyncio
    async def test_fail_raises_in_waiter(self, protocol):
        assembler = make_assembler(protocol)
        generation = assembler.begin(len(FRAME))

        assembler.fail(generation, InverterConnectionError("port vanished"))

        with pytest.raises(InverterConnectionError):
            await assembler.wait(generation)
        assert assembler.state == AssemblerState.IDLE

    @pytest.mark.asyncio
    async def test_fail_for_stale_generation_ignored(self, protocol):
        assembler = make_assembler(protocol)
        generation = assembler.begin(len(FRAME))

        assembler.fail(generation + 1, InverterConnectionError("stale"))
        assembler.feed(FRAME)

        assert await assembler.wait(generation) == FRAME


class TestConstruction:
    @pytest.mark.parametrize("kwargs", [{"quiet_window": 0}, {"deadline": -1}])
    def test_rejects_non_positive_durations(self, kwargs):
        with pytest.raises(ValueError):
            ResponseAssembler(**kwargs)


class TestQuietLineAfterTimeout:
    """A timed-out reply may still be arriving when the next request is due."""

    @pytest.mark.asyncio
    async def test_no_wait_without_timeout(self, protocol):
        loop = asyncio.get_running_loop()
        assembler = make_assembler(protocol, quiet_window=0.5)
        generation = assembler.begin(len(FRAME))
        assembler.feed(FRAME)
        await assembler.wait(generation)

        started = loop.time()
        await assembler.wait_for_quiet_line()

        assert loop.time() - started < 0.1

    @pytest.mark.asyncio
    async def test_waits_one_quiet_window_after_timeout(self, protocol):
        loop = asyncio.get_running_loop()
        assembler = make_assembler(protocol, quiet_window=0.05, deadline=0.05)
        generation = assembler.begin(len(FRAME))
        with pytest.raises(ResponseTimeoutError):
            await assembler.wait(generation)

        timed_out = loop.time()
        await assembler.wait_for_quiet_line()

        assert loop.time() - timed_out >= 0.05 - TOLERANCE

    @pytest.mark.asyncio
    async def test_late_bytes_extend_the_wait(self, protocol):
        loop = asyncio.get_running_loop()
        assembler = make_assembler(protocol, quiet_window=0.05, deadline=0.05)
        generation = assembler.begin(len(FRAME))
        with pytest.raises(ResponseTimeoutError):
            await assembler.wait(generation)

        loop.call_later(0.03, assembler.feed, FRAME)
        started = loop.time()
        await assembler.wait_for_quiet_line()

        assert loop.time() - started >= 0.08 - TOLERANCE

    @pytest.mark.asyncio
    async def test_wait_bounded_by_deadline(self, protocol):
        loop = asyncio.get_running_loop()
        assembler = make_assembler(protocol, quiet_window=0.05, deadline=0.1)
        generation = assembler.begin(len(FRAME))
        with pytest.raises(ResponseTimeoutError):
            await assembler.wait(generation)

        chatter = [loop.call_later(0.02 * i, assembler.feed, b"\x00") for i in range(1, 20)]
        started = loop.time()
        await assembler.wait_for_quiet_line()
        for handle in chatter:
            handle.cancel()

        assert loop.time() - started < 0.3
