"""Tracked-object registry: per-tick updates and best-object selection.

A tick computes the observer's Earth-fixed position once, updates every
tracked object against it, then reselects the strongest visible object.
Collaborators (propagator, sidereal time, frame rotation, signal model)
are passed in, so the registry can be driven by stubs in tests.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterator

import numpy as np
from numpy.typing import NDArray

from skytrack.core.frames import GeodeticPoint, TopocentricFix, ecef_to_geodetic, ecef_to_topocentric
from skytrack.core.observer import ObserverLocation
from skytrack.core.propagation import PropagationError, StateVector, propagate, sidereal_angle
from skytrack.core.rotation import inertial_to_fixed
from skytrack.core.signal import NO_SIGNAL, SignalState, evaluate
from skytrack.core.tle import TLE

logger = logging.getLogger(__name__)

Propagator = Callable[[Any, datetime], StateVector]
SiderealClock = Callable[[datetime], float]
FrameRotator = Callable[[NDArray[np.float64], float], NDArray[np.float64]]
SignalModel = Callable[[float, float], SignalState]


class TrackingState(Enum):
    """Where an object stands in the per-tick update cycle."""

    UNINITIALIZED = "uninitialized"
    PROPAGATED = "propagated"
    VISIBLE = "visible"
    NOT_VISIBLE = "not_visible"


def _zero_vector() -> NDArray[np.float64]:
    return np.zeros(3, dtype=np.float64)


@dataclass(eq=False)
class TrackedObject:
    """One catalog entry and the values derived for it on the last tick.

    Only the owning Registry writes to these fields.
    """

    identity: str
    elements: Any = field(repr=False)
    position_eci: NDArray[np.float64] = field(default_factory=_zero_vector, repr=False)
    velocity_eci: NDArray[np.float64] = field(default_factory=_zero_vector, repr=False)
    position_ecef: NDArray[np.float64] = field(default_factory=_zero_vector, repr=False)
    subpoint: GeodeticPoint | None = None
    topocentric: TopocentricFix | None = None
    signal: SignalState = NO_SIGNAL
    is_active_selection: bool = False
    last_update: datetime | None = None
    state: TrackingState = TrackingState.UNINITIALIZED

    @property
    def visible(self) -> bool:
        return self.signal.visible

    @property
    def signal_strength(self) -> float:
        return self.signal.signal_strength

    @property
    def bars_active(self) -> int:
        return self.signal.bars_active

    @property
    def catalog_key(self) -> int | None:
        """NORAD number when the elements are a TLE."""
        return getattr(self.elements, "norad_id", None)


class Registry:
    """Catalog of tracked objects with a single active (best) selection.

    Args:
        propagator: ``(elements, time) -> StateVector``; raises
            PropagationError on failure.
        sidereal: ``time -> radians``.
        to_fixed: ``(inertial_vector, angle) -> ecef_vector``.
        signal_model: ``(elevation_deg, range_km) -> SignalState``.
    """

    def __init__(
        self,
        propagator: Propagator = propagate,
        sidereal: SiderealClock = sidereal_angle,
        to_fixed: FrameRotator = inertial_to_fixed,
        signal_model: SignalModel = evaluate,
    ) -> None:
        self._propagator = propagator
        self._sidereal = sidereal
        self._to_fixed = to_fixed
        self._signal_model = signal_model
        self._objects: dict[str, TrackedObject] = {}
        self._active: TrackedObject | None = None
        self._tick_lock = threading.Lock()

    # --- catalog management ---

    def add(self, identity: str, elements: Any) -> TrackedObject:
        """Register a new object.

        Raises:
            ValueError: If elements are missing or the identity is taken.
        """
        if elements is None:
            raise ValueError(f"No elements supplied for {identity!r}")

        with self._tick_lock:
            if identity in self._objects:
                raise ValueError(f"Object {identity!r} is already tracked")
            obj = TrackedObject(identity=identity, elements=elements)
            self._objects[identity] = obj
        logger.debug("Tracking %s", identity)
        return obj

    def add_tle(self, tle: TLE) -> TrackedObject:
        return self.add(tle.label, tle)

    def remove(self, identity: str) -> None:
        """Stop tracking an object. Raises KeyError if it is unknown."""
        with self._tick_lock:
            obj = self._objects.pop(identity)
            if obj is self._active:
                obj.is_active_selection = False
                self._active = None

    def clear(self) -> None:
        with self._tick_lock:
            self._objects.clear()
            self._active = None

    def get(self, identity: str) -> TrackedObject | None:
        return self._objects.get(identity)

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[TrackedObject]:
        return iter(list(self._objects.values()))

    def __contains__(self, identity: object) -> bool:
        return identity in self._objects

    # --- per-tick update ---

    def update_all(self, observer: ObserverLocation, time: datetime) -> None:
        """Run one tick for every tracked object.

        Concurrent callers are serialized; each tick runs to completion
        before the next starts.
        """
        with self._tick_lock:
            observer_ecef = observer.to_ecef()
            for obj in self._objects.values():
                self.update_one(obj, observer_ecef, time)
            self.reselect_active()
            logger.debug(
                "Tick at %s: %d/%d visible, best=%s",
                time, self.visible_count(), len(self._objects),
                self._active.identity if self._active else None,
            )

    def update_one(self, obj: TrackedObject, observer_ecef: NDArray[np.float64], time: datetime) -> None:
        """Update one object's derived fields. Never raises on propagation failure."""
        try:
            state = self._propagator(obj.elements, time)
        except PropagationError as exc:
            logger.warning("Propagation failed for %s: %s", obj.identity, exc)
            obj.signal = NO_SIGNAL
            obj.state = TrackingState.UNINITIALIZED
            return

        obj.position_eci = state.position_km
        obj.velocity_eci = state.velocity_km_s
        obj.state = TrackingState.PROPAGATED

        obj.position_ecef = self._to_fixed(state.position_km, self._sidereal(time))
        obj.subpoint = ecef_to_geodetic(obj.position_ecef)
        obj.topocentric = ecef_to_topocentric(observer_ecef, obj.position_ecef)
        obj.signal = self._signal_model(obj.topocentric.elevation_deg, obj.topocentric.range_km)
        obj.state = TrackingState.VISIBLE if obj.signal.visible else TrackingState.NOT_VISIBLE
        obj.last_update = time

    def reselect_active(self) -> TrackedObject | None:
        """Select the strongest visible object; earlier catalog entries win ties."""
        if self._active is not None:
            self._active.is_active_selection = False
            self._active = None

        best: TrackedObject | None = None
        for obj in self._objects.values():
            if obj.visible and obj.signal_strength > 0:
                if best is None or obj.signal_strength > best.signal_strength:
                    best = obj

        if best is not None:
            best.is_active_selection = True
            self._active = best
        return best

    # --- queries ---

    def best(self) -> TrackedObject | None:
        """The current active selection, or None when nothing qualifies."""
        return self._active

    def get_visible_sorted(self) -> list[TrackedObject]:
        """Visible objects, strongest first; equal strengths keep catalog order."""
        visible = [obj for obj in self._objects.values() if obj.visible]
        return sorted(visible, key=lambda o: o.signal_strength, reverse=True)

    def visible_count(self) -> int:
        return sum(1 for obj in self._objects.values() if obj.visible)


def describe(obj: TrackedObject) -> dict[str, Any]:
    """Display strings for an object's last fix."""
    topo = obj.topocentric or TopocentricFix(0.0, 0.0, 0.0)
    return {
        "name": obj.identity,
        "distance": f"{topo.range_km:.0f} km",
        "elevation": f"{topo.elevation_deg:.1f}°",
        "azimuth": f"{topo.azimuth_deg:.1f}°",
        "signal": f"{obj.signal_strength:.0f}%",
        "visible": obj.visible,
    }
