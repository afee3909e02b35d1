from __future__ import annotations

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Mapping

from src.app.ports.output import ILocationProvider
from src.app.services.fleet_store import FleetStore
from src.domain.exceptions import NetworkError, UnknownBikeError
from src.domain.models import (
    OPERATING_AREA,
    BoundingBox,
    LocationSample,
    TrackingMode,
    TrackingTarget,
)

logger = logging.getLogger(__name__)

DEFAULT_TICK_PERIOD_S = 0.5


class Sampler(ABC):
    """Produces one location sample for a tracked bike per tick."""

    mode: TrackingMode

    @abstractmethod
    def ensure_trackable(self, target: TrackingTarget) -> None:
        """Raise if ``target`` can never be sampled in this mode."""

    @abstractmethod
    async def sample(self, target: TrackingTarget, *, sequence: int) -> LocationSample:
        raise NotImplementedError


@dataclass(slots=True)
class SyntheticSampler(Sampler):
    fleet: FleetStore
    mode: TrackingMode = field(default=TrackingMode.SYNTHETIC, init=False)

    def ensure_trackable(self, target: TrackingTarget) -> None:
        self.fleet.get(target.bike_number)

    async def sample(self, target: TrackingTarget, *, sequence: int) -> LocationSample:
        # Only the tracked record moves; the rest of the fleet is left alone.
        fleet = self.fleet.advance(bike_numbers=(target.bike_number,))
        record = next((r for r in fleet if r.bike_number == target.bike_number), None)
        if record is None:
            raise UnknownBikeError(
                f"Bike {target.bike_number!r} left the fleet while tracked"
            )

        loc = record.current_location
        return LocationSample(
            bike_number=record.bike_number,
            latitude=loc.latitude,
            longitude=loc.longitude,
            updated_at=loc.updated_at,
            mode=self.mode,
            sequence=sequence,
            speed_kmh=loc.speed_kmh,
            heading_radians=loc.heading_radians,
            battery_percent=loc.battery_percent,
            signal_quality=loc.signal_quality,
            user_email=record.rider_email,
        )


@dataclass(slots=True)
class LiveSampler(Sampler):
    provider: ILocationProvider
    timeout_s: float = 2.0
    area: BoundingBox = OPERATING_AREA
    mode: TrackingMode = field(default=TrackingMode.LIVE, init=False)

    def ensure_trackable(self, target: TrackingTarget) -> None:
        if target.trip_id is None:
            raise ValueError(f"Bike {target.bike_number!r} has no trip to follow")

    async def sample(self, target: TrackingTarget, *, sequence: int) -> LocationSample:
        if target.trip_id is None:
            raise NetworkError(f"Bike {target.bike_number!r} has no trip id")

        try:
            live = await asyncio.wait_for(
                self.provider.latest_location(target.trip_id), timeout=self.timeout_s
            )
        except asyncio.TimeoutError as exc:
            raise NetworkError(
                f"Location lookup for trip {target.trip_id} timed out"
            ) from exc

        # Backend fixes are pinned into the same box as simulated ones.
        lat, lon = self.area.clamp(live.latitude, live.longitude)
        return LocationSample(
            bike_number=target.bike_number,
            latitude=lat,
            longitude=lon,
            updated_at=live.recorded_at,
            mode=self.mode,
            sequence=sequence,
            user_email=live.user_email,
        )


@dataclass(slots=True)
class TrackingSession:
    """Follows one selected bike, publishing a sample every ``period_s``.

    Idle until ``select`` is called. Selecting (again) disarms the running
    ticker before the new one is armed, so at most one ticker exists per
    session. Ticks are serialized and each result is only published if the
    selection it was taken for is still current.

    ``samples`` maps bike number to the most recent sample for that bike.
    """

    samplers: Mapping[TrackingMode, Sampler]
    period_s: float = DEFAULT_TICK_PERIOD_S
    samples: dict[str, LocationSample] = field(default_factory=dict)
    last_error: str | None = None

    _target: TrackingTarget | None = field(default=None, init=False)
    _mode: TrackingMode = field(default=TrackingMode.SYNTHETIC, init=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)
    _generation: int = field(default=0, init=False)
    _sequence: int = field(default=0, init=False)
    _tick_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False
    )

    @property
    def target(self) -> TrackingTarget | None:
        return self._target

    @property
    def mode(self) -> TrackingMode:
        return self._mode

    @property
    def is_tracking(self) -> bool:
        return self._task is not None and not self._task.done()

    def latest(self, bike_number: str) -> LocationSample | None:
        return self.samples.get(bike_number)

    async def select(
        self, target: TrackingTarget, *, mode: TrackingMode = TrackingMode.SYNTHETIC
    ) -> LocationSample | None:
        """Start following ``target``; returns the first sample if one was taken."""

        self.samplers[mode].ensure_trackable(target)

        await self._disarm()
        self._target = target
        self._mode = mode
        self.last_error = None
        generation = self._generation

        first = await self._tick(generation)
        self._task = asyncio.create_task(
            self._run(generation), name=f"tracking-{target.bike_number}"
        )
        return first

    async def set_mode(self, mode: TrackingMode) -> None:
        if self._target is None:
            self._mode = mode
            return
        await self.select(self._target, mode=mode)

    async def clear(self) -> None:
        await self._disarm()
        self._target = None

    async def tick(self) -> LocationSample | None:
        """Take one sample for the current selection right now."""

        return await self._tick(self._generation)

    async def _disarm(self) -> None:
        self._generation += 1
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        # A ticker that already died was logged by _run; teardown still proceeds.
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await task

    async def _run(self, generation: int) -> None:
        try:
            while generation == self._generation:
                await asyncio.sleep(self.period_s)
                await self._tick(generation)
        except Exception:
            logger.exception("Tracking ticker for %s stopped", self._target)
            raise

    async def _tick(self, generation: int) -> LocationSample | None:
        async with self._tick_lock:
            target = self._target
            if target is None or generation != self._generation:
                return None

            self._sequence += 1
            sequence = self._sequence
            try:
                sample = await self.samplers[self._mode].sample(
                    target, sequence=sequence
                )
            except (NetworkError, UnknownBikeError) as exc:
                logger.warning("No sample for bike %s: %s", target.bike_number, exc)
                self.last_error = str(exc)
                return None

            if generation != self._generation:
                return None

            self.samples[target.bike_number] = sample
            self.last_error = None
            return sample


@dataclass(slots=True)
class TrackingSessionRegistry:
    """Keeps one TrackingSession per consumer (e.g. per open dashboard)."""

    session_factory: Callable[[], TrackingSession]
    _sessions: dict[str, TrackingSession] = field(default_factory=dict, init=False)

    def get(self, session_id: str) -> TrackingSession | None:
        return self._sessions.get(session_id)

    async def select(
        self,
        session_id: str,
        target: TrackingTarget,
        *,
        mode: TrackingMode = TrackingMode.SYNTHETIC,
    ) -> TrackingSession:
        """Point ``session_id`` at ``target``; a new session is kept only on success."""

        session = self._sessions.get(session_id)
        if session is not None:
            await session.select(target, mode=mode)
            return session

        session = self.session_factory()
        try:
            await session.select(target, mode=mode)
        except BaseException:
            await session.clear()
            raise

        # Another request may have registered this id while we were sampling.
        previous = self._sessions.pop(session_id, None)
        self._sessions[session_id] = session
        if previous is not None:
            await previous.clear()
        return session

    async def discard(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        await session.clear()
        return True

    async def close_all(self) -> None:
        sessions, self._sessions = self._sessions, {}
        for session_id, session in sessions.items():
            try:
                await session.clear()
            except Exception:
                logger.exception("Failed to stop tracking session %s", session_id)
