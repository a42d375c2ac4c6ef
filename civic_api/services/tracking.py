"""Worker location tracking.

Each worker gets a LocationTracker: a small observer channel. Location
producers (the REST location endpoint, the Socket.IO ``location_update``
event) publish coordinates into it; subscribers receive a LocationUpdate
with distance/ETA recomputed for every task in the tracker's snapshot.
"""

import logging
import threading
from dataclasses import dataclass, field

from civic_api.utils.geo import (
    Coordinate,
    estimate_distance_km,
    estimate_eta_minutes,
    format_eta,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskProximity:
    """Distance and ETA from an observer to one task."""

    task_id: int
    distance_km: float
    eta_minutes: int

    @property
    def duration(self):
        return format_eta(self.eta_minutes)

    def to_dict(self):
        return {
            'task_id': self.task_id,
            'distance': self.distance_km,
            'eta_minutes': self.eta_minutes,
            'duration': self.duration,
        }


@dataclass(frozen=True)
class LocationUpdate:
    """What subscribers receive on every published location."""

    worker_id: int
    coordinate: Coordinate
    proximities: list = field(default_factory=list)

    def to_dict(self):
        return {
            'worker_id': self.worker_id,
            'location': self.coordinate.to_dict(),
            'tasks': [p.to_dict() for p in self.proximities],
        }


def task_location(task):
    """Return (task_id, Coordinate) for a task dict or model, or None if it has no location."""
    if isinstance(task, dict):
        task_id = task.get('id')
        lat, lng = task.get('latitude'), task.get('longitude')
    else:
        task_id = task.id
        lat, lng = task.latitude, task.longitude
    if lat is None or lng is None:
        return None
    return task_id, Coordinate(lat, lng)


def compute_proximities(observer, tasks, precision=1):
    """Distance/ETA from ``observer`` to each task, nearest first.

    Distances are rounded to ``precision`` decimals; ETAs come from the
    unrounded distance. Tasks without coordinates are skipped.
    """
    proximities = []
    for task in tasks:
        located = task_location(task)
        if located is None:
            continue
        task_id, target = located
        km = estimate_distance_km(observer, target)
        proximities.append(TaskProximity(
            task_id=task_id,
            distance_km=round(km, precision),
            eta_minutes=estimate_eta_minutes(km),
        ))
    proximities.sort(key=lambda p: (p.distance_km, p.task_id))
    return proximities


class LocationTracker:
    """Location channel for a single worker."""

    def __init__(self, worker_id):
        self.worker_id = worker_id
        self._lock = threading.Lock()
        self._subscribers = []
        self._tasks = []
        self._last_coordinate = None

    @property
    def last_coordinate(self):
        return self._last_coordinate

    def subscribe(self, callback):
        """Register ``callback(update)``. Returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)
        return unsubscribe

    def set_tasks(self, tasks, notify=True):
        """Replace the task snapshot.

        With ``notify`` and a known location, subscribers get the recomputed
        proximities straight away.
        """
        snapshot = [located for located in (task_location(t) for t in tasks) if located]
        with self._lock:
            self._tasks = snapshot
            coordinate = self._last_coordinate
        if notify and coordinate is not None:
            return self._deliver(coordinate)
        return None

    def publish(self, coordinate):
        """Record a new location and push recomputed proximities to subscribers."""
        with self._lock:
            self._last_coordinate = coordinate
        return self._deliver(coordinate)

    def _deliver(self, coordinate):
        with self._lock:
            tasks = [{'id': task_id, 'latitude': c.latitude, 'longitude': c.longitude}
                     for task_id, c in self._tasks]
            subscribers = list(self._subscribers)
        update = LocationUpdate(
            worker_id=self.worker_id,
            coordinate=coordinate,
            proximities=compute_proximities(coordinate, tasks),
        )
        for callback in subscribers:
            try:
                callback(update)
            except Exception as e:
                logger.error(f'Location subscriber failed for worker {self.worker_id}: {e}', exc_info=True)
        return update


class TrackerRegistry:
    """One LocationTracker per worker id, plus the socket sessions feeding them.

    A tracker lives while at least one socket session of its worker is bound.
    Session bookkeeping and tracker creation/removal happen under one lock so
    a session can never subscribe to a tracker that is being discarded.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._trackers = {}
        self._sessions = {}  # sid -> (worker_id, unsubscribe)

    def get(self, worker_id):
        with self._lock:
            return self._get_locked(worker_id)

    def find(self, worker_id):
        """The worker's tracker, or None when no session has created one."""
        with self._lock:
            return self._trackers.get(worker_id)

    def discard(self, worker_id):
        with self._lock:
            return self._trackers.pop(worker_id, None)

    def __contains__(self, worker_id):
        with self._lock:
            return worker_id in self._trackers

    def __len__(self):
        with self._lock:
            return len(self._trackers)

    def bind_session(self, session_id, worker_id, callback):
        """Subscribe ``callback`` to the worker's tracker for one socket session."""
        with self._lock:
            previous = self._sessions.pop(session_id, None)
            unsubscribe = self._get_locked(worker_id).subscribe(callback)
            self._sessions[session_id] = (worker_id, unsubscribe)
            if previous is not None:
                self._drop_locked(*previous)
        return unsubscribe

    def release_session(self, session_id):
        """Drop a socket session's subscription; discard the tracker once nobody listens.

        Returns the worker id the session belonged to, or None.
        """
        with self._lock:
            entry = self._sessions.pop(session_id, None)
            if entry is None:
                return None
            self._drop_locked(*entry)
            return entry[0]

    def _get_locked(self, worker_id):
        tracker = self._trackers.get(worker_id)
        if tracker is None:
            tracker = LocationTracker(worker_id)
            self._trackers[worker_id] = tracker
        return tracker

    def _drop_locked(self, worker_id, unsubscribe):
        unsubscribe()
        if not any(wid == worker_id for wid, _ in self._sessions.values()):
            self._trackers.pop(worker_id, None)
