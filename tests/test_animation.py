from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import pytest

from pyfleet.animation import Animator, interpolate
from pyfleet.models.position import Position


@dataclass
class FakeClock:
    """Loop-independent clock whose sleep advances time instantly."""

    now: float = 0.0

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.now += delay
        await asyncio.sleep(0)


@dataclass
class RecordingMarker:
    positions: list[Position] = field(default_factory=list)

    def set_position(self, position: Position) -> None:
        self.positions.append(position)

    def set_label(self, text: str) -> None:
        pass


class ExplodingMarker:
    calls = 0

    def set_position(self, position: Position) -> None:
        self.calls += 1
        raise RuntimeError("marker gone")

    def set_label(self, text: str) -> None:
        pass


def _animator(clock: FakeClock, frame: float = 0.1) -> Animator:
    return Animator(frame_interval=frame, clock=clock, sleep=clock.sleep)


def test_interpolate_clamps_t() -> None:
    a, b = Position(0, 0), Position(10, 20)
    assert interpolate(a, b, -1) == a
    assert interpolate(a, b, 2) == b
    assert interpolate(a, b, 0.25) == Position(2.5, 5.0)


@pytest.mark.asyncio
async def test_animation_ends_exactly_at_target() -> None:
    clock = FakeClock()
    marker = RecordingMarker()
    task = _animator(clock).animate("A", marker, Position(0, 0), Position(1, 2), duration=0.5)

    assert task is not None
    await task

    assert marker.positions[0] == Position(0, 0)
    assert marker.positions[-1] == Position(1, 2)
    assert len(marker.positions) >= 3
    lats = [p.lat for p in marker.positions]
    assert lats == sorted(lats)
    for p in marker.positions:
        assert p.lon == pytest.approx(2 * p.lat)


@pytest.mark.asyncio
async def test_zero_duration_jumps_in_one_frame() -> None:
    clock = FakeClock()
    marker = RecordingMarker()
    task = _animator(clock).animate("A", marker, Position(0, 0), Position(1, 1), duration=0)
    assert task is not None
    await task

    assert marker.positions == [Position(1, 1)]


@pytest.mark.asyncio
async def test_newer_animation_supersedes_older_one() -> None:
    clock = FakeClock()
    animator = _animator(clock)
    marker = RecordingMarker()

    first = animator.animate("A", marker, Position(0, 0), Position(1, 1), duration=0.5)
    second = animator.animate("A", marker, Position(1, 1), Position(2, 2), duration=0.5)
    assert first is not None and second is not None
    await asyncio.gather(first, second)

    assert animator.generation("A") == 2
    assert marker.positions[-1] == Position(2, 2)
    assert all(p.lat >= 1 for p in marker.positions)


@pytest.mark.asyncio
async def test_superseded_mid_flight_stops_moving() -> None:
    clock = FakeClock()
    animator = _animator(clock)
    old_marker = RecordingMarker()
    new_marker = RecordingMarker()

    first = animator.animate("A", old_marker, Position(0, 0), Position(1, 1), duration=1.0)
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    moved_before = len(old_marker.positions)
    second = animator.animate("A", new_marker, Position(1, 1), Position(2, 2), duration=1.0)
    assert first is not None and second is not None
    await asyncio.gather(first, second)

    assert moved_before >= 1
    assert len(old_marker.positions) <= moved_before + 1
    assert old_marker.positions[-1] != Position(1, 1)
    assert new_marker.positions[-1] == Position(2, 2)


@pytest.mark.asyncio
async def test_different_vehicles_animate_independently() -> None:
    clock = FakeClock()
    animator = _animator(clock)
    a, b = RecordingMarker(), RecordingMarker()

    tasks = [
        animator.animate("A", a, Position(0, 0), Position(1, 1), duration=0.3),
        animator.animate("B", b, Position(5, 5), Position(6, 6), duration=0.3),
    ]
    await asyncio.gather(*[t for t in tasks if t is not None])

    assert a.positions[-1] == Position(1, 1)
    assert b.positions[-1] == Position(6, 6)


@pytest.mark.asyncio
async def test_forget_aborts_running_animation() -> None:
    clock = FakeClock()
    animator = _animator(clock)
    marker = RecordingMarker()

    task = animator.animate("A", marker, Position(0, 0), Position(1, 1), duration=0.5)
    animator.forget("A")
    assert task is not None
    await task

    assert marker.positions == []
    assert animator.generation("A") == 0


@pytest.mark.asyncio
async def test_missing_inputs_are_noop() -> None:
    animator = Animator()
    marker = RecordingMarker()

    assert animator.animate("A", None, Position(0, 0), Position(1, 1)) is None
    assert animator.animate("A", marker, None, Position(1, 1)) is None
    assert animator.animate("A", marker, Position(0, 0), None) is None
    assert marker.positions == []
    assert animator.generation("A") == 0


@pytest.mark.asyncio
async def test_marker_failure_ends_animation_quietly() -> None:
    clock = FakeClock()
    marker = ExplodingMarker()
    task = _animator(clock).animate("A", marker, Position(0, 0), Position(1, 1), duration=0.5)
    assert task is not None
    await task

    assert marker.calls == 1


@pytest.mark.asyncio
async def test_aclose_cancels_running_animations() -> None:
    animator = Animator(frame_interval=0.01)
    marker = RecordingMarker()
    task = animator.animate("A", marker, Position(0, 0), Position(1, 1), duration=30)
    await asyncio.sleep(0.03)

    assert animator.running == 1
    await animator.aclose()

    assert task is not None and task.done()
    assert animator.running == 0


def test_without_event_loop_marker_jumps_to_target() -> None:
    marker = RecordingMarker()
    result = Animator().animate("A", marker, Position(0, 0), Position(3, 3))

    assert result is None
    assert marker.positions == [Position(3, 3)]
