"""Glue between stored worker locations and the in-memory tracking channels."""

from flask import current_app
from civic_api import db
from civic_api.services.issues import assigned_tasks
from civic_api.services.tracking import LocationUpdate, compute_proximities


def get_trackers():
    return current_app.extensions['location_trackers']


def refresh_tracker_tasks(worker_id, notify=True):
    """Reload the worker's active tasks into their location tracker.

    Workers without an open socket have no tracker; returns None for them.
    """
    tracker = get_trackers().find(worker_id)
    if tracker is not None:
        tracker.set_tasks(assigned_tasks(worker_id, include_completed=False), notify=notify)
    return tracker


def record_worker_location(worker, coordinate):
    """Persist a worker's position and publish it on their location channel.

    Returns the LocationUpdate, which is also delivered to open sockets when
    the worker has any.
    """
    worker.update_location(coordinate)
    db.session.commit()
    tasks = assigned_tasks(worker.id, include_completed=False)
    tracker = get_trackers().find(worker.id)
    if tracker is None:
        return LocationUpdate(
            worker_id=worker.id,
            coordinate=coordinate,
            proximities=compute_proximities(coordinate, tasks),
        )
    tracker.set_tasks(tasks, notify=False)
    return tracker.publish(coordinate)
