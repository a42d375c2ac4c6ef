"""
Tests for the worker location channel.
"""

import threading

import pytest

from civic_api.services.tracking import (
    LocationTracker,
    TaskProximity,
    TrackerRegistry,
    compute_proximities,
)
from civic_api.utils.geo import Coordinate

WORKER = Coordinate(22.5743, 88.4348)

TASKS = [
    {'id': 3, 'latitude': 22.5695, 'longitude': 88.4280},  # ~0.88 km
    {'id': 2, 'latitude': 22.5720, 'longitude': 88.4370},  # ~0.34 km
    {'id': 1, 'latitude': 22.5760, 'longitude': 88.4348},  # ~0.19 km
]


class TestComputeProximities:
    """Tests for compute_proximities"""

    def test_sorted_nearest_first(self):
        result = compute_proximities(WORKER, TASKS)
        assert [p.task_id for p in result] == [1, 2, 3]

    def test_rounds_to_one_decimal(self):
        result = compute_proximities(WORKER, TASKS)
        assert [p.distance_km for p in result] == [0.2, 0.3, 0.9]

    def test_custom_precision(self):
        nearest = compute_proximities(WORKER, TASKS, precision=2)[0]
        assert nearest.distance_km == 0.19

    def test_eta_from_unrounded_distance(self):
        result = compute_proximities(WORKER, TASKS)
        assert [p.eta_minutes for p in result] == [0, 1, 2]
        assert result[0].duration == '0 min'

    def test_skips_tasks_without_location(self):
        tasks = TASKS + [{'id': 4, 'latitude': None, 'longitude': None}]
        assert len(compute_proximities(WORKER, tasks)) == 3

    def test_accepts_model_like_objects(self):
        class Task:
            id = 7
            latitude = 22.5760
            longitude = 88.4348

        result = compute_proximities(WORKER, [Task()])
        assert result[0].task_id == 7

    def test_to_dict(self):
        proximity = TaskProximity(task_id=1, distance_km=0.2, eta_minutes=0)
        assert proximity.to_dict() == {
            'task_id': 1,
            'distance': 0.2,
            'eta_minutes': 0,
            'duration': '0 min',
        }


class TestLocationTracker:
    """Tests for LocationTracker"""

    def test_publish_delivers_to_subscribers(self):
        tracker = LocationTracker(worker_id=5)
        tracker.set_tasks(TASKS)
        received = []
        tracker.subscribe(received.append)

        update = tracker.publish(WORKER)

        assert received == [update]
        assert update.worker_id == 5
        assert update.coordinate == WORKER
        assert [p.task_id for p in update.proximities] == [1, 2, 3]
        assert tracker.last_coordinate == WORKER

    def test_every_publish_recomputes(self):
        tracker = LocationTracker(worker_id=5)
        tracker.set_tasks(TASKS)
        received = []
        tracker.subscribe(received.append)

        tracker.publish(WORKER)
        tracker.publish(Coordinate(22.5695, 88.4280))

        assert len(received) == 2
        assert received[1].proximities[0].task_id == 3
        assert received[1].proximities[0].distance_km == 0

    def test_publish_is_idempotent(self):
        tracker = LocationTracker(worker_id=5)
        tracker.set_tasks(TASKS)
        first = tracker.publish(WORKER)
        second = tracker.publish(WORKER)
        assert first == second

    def test_unsubscribe(self):
        tracker = LocationTracker(worker_id=5)
        received = []
        unsubscribe = tracker.subscribe(received.append)
        unsubscribe()
        unsubscribe()
        tracker.publish(WORKER)
        assert received == []

    def test_failing_subscriber_does_not_block_others(self):
        tracker = LocationTracker(worker_id=5)
        received = []

        def broken(update):
            raise RuntimeError('socket gone')

        tracker.subscribe(broken)
        tracker.subscribe(received.append)
        tracker.publish(WORKER)

        assert len(received) == 1

    def test_set_tasks_notifies_when_location_known(self):
        tracker = LocationTracker(worker_id=5)
        received = []
        tracker.subscribe(received.append)

        assert tracker.set_tasks(TASKS) is None
        assert received == []

        tracker.publish(WORKER)
        tracker.set_tasks(TASKS[:1])

        assert len(received) == 2
        assert [p.task_id for p in received[-1].proximities] == [3]

    def test_set_tasks_without_notify(self):
        tracker = LocationTracker(worker_id=5)
        received = []
        tracker.subscribe(received.append)
        tracker.publish(WORKER)

        tracker.set_tasks(TASKS, notify=False)

        assert len(received) == 1

    def test_update_to_dict(self):
        tracker = LocationTracker(worker_id=5)
        tracker.set_tasks(TASKS)
        payload = tracker.publish(WORKER).to_dict()
        assert payload['worker_id'] == 5
        assert payload['location'] == {'latitude': 22.5743, 'longitude': 88.4348}
        assert payload['tasks'][0]['task_id'] == 1


class TestTrackerRegistry:
    """Tests for TrackerRegistry"""

    def test_one_tracker_per_worker(self):
        registry = TrackerRegistry()
        assert registry.get(1) is registry.get(1)
        assert registry.get(1) is not registry.get(2)
        assert len(registry) == 2

    def test_discard(self):
        registry = TrackerRegistry()
        registry.get(1)
        registry.discard(1)
        assert 1 not in registry
        assert registry.discard(1) is None

    def test_sessions_share_worker_tracker(self):
        registry = TrackerRegistry()
        phone, tablet = [], []
        registry.bind_session('sid-phone', 1, phone.append)
        registry.bind_session('sid-tablet', 1, tablet.append)

        registry.get(1).publish(WORKER)
        assert len(phone) == 1
        assert len(tablet) == 1

        assert registry.release_session('sid-phone') == 1
        assert 1 in registry

        registry.get(1).publish(WORKER)
        assert len(phone) == 1
        assert len(tablet) == 2

        registry.release_session('sid-tablet')
        assert 1 not in registry

    def test_rebinding_session_replaces_subscription(self):
        registry = TrackerRegistry()
        received = []
        registry.bind_session('sid', 1, received.append)
        registry.bind_session('sid', 1, received.append)

        registry.get(1).publish(WORKER)

        assert len(received) == 1

    def test_release_unknown_session(self):
        assert TrackerRegistry().release_session('nope') is None

    def test_rebinding_keeps_tracker_state(self):
        registry = TrackerRegistry()
        registry.bind_session('sid', 1, lambda update: None)
        tracker = registry.get(1)
        tracker.publish(WORKER)

        registry.bind_session('sid', 1, lambda update: None)

        assert registry.find(1) is tracker
        assert tracker.last_coordinate == WORKER

    def test_rebinding_to_another_worker_discards_old_tracker(self):
        registry = TrackerRegistry()
        registry.bind_session('sid', 1, lambda update: None)

        registry.bind_session('sid', 2, lambda update: None)

        assert 1 not in registry
        assert 2 in registry

    def test_find_does_not_create(self):
        registry = TrackerRegistry()
        assert registry.find(1) is None
        assert len(registry) == 0

    def test_release_waits_for_bind_in_progress(self):
        registry = TrackerRegistry()
        registry.bind_session('sid-a', 1, lambda update: None)
        tracker = registry.find(1)
        original_subscribe = tracker.subscribe
        released = []
        releaser = threading.Thread(target=lambda: released.append(registry.release_session('sid-a')))

        def subscribe_while_other_session_leaves(callback):
            releaser.start()
            releaser.join(timeout=0.2)
            return original_subscribe(callback)

        tracker.subscribe = subscribe_while_other_session_leaves
        received = []
        registry.bind_session('sid-b', 1, received.append)
        releaser.join(timeout=2)

        assert released == [1]
        assert registry.find(1) is tracker
        tracker.publish(WORKER)
        assert len(received) == 1
