"""Citizen issue report routes (submit, list own, view, nearby)."""

from flask import Blueprint, request, jsonify
from civic_api import db
from civic_api.constants import (
    DEFAULT_PRIORITY,
    STATUS_PENDING,
    STATUS_COMPLETED,
    STATUSES,
    normalize_category,
)
from civic_api.models import Issue, User
from civic_api.services.issues import generate_issue_number, can_view_issue
from civic_api.utils import token_required
from civic_api.utils.geo import (
    get_bounding_box,
    longitude_ranges,
    estimate_distance_km,
    parse_coordinate,
)
from civic_api.utils.validation import validate_report, sanitize_text
from math import isfinite
from sqlalchemy import or_
import logging

logger = logging.getLogger(__name__)

reports_bp = Blueprint('reports', __name__)

DEFAULT_RADIUS_KM = 5
MAX_RADIUS_KM = 100


@reports_bp.route('', methods=['POST'])
@token_required
def create_report(current_user_id):
    """Submit a new issue report.

    Required: title, description, category, latitude, longitude
    Optional: priority (default 'medium'), address, gps_accuracy, photos
    """
    try:
        data = request.get_json(silent=True) or {}

        error = validate_report(data)
        if error:
            return jsonify({'error': error}), 400

        reporter = db.session.get(User, current_user_id)
        if not reporter:
            return jsonify({'error': 'User not found'}), 404

        coordinate = parse_coordinate(data['latitude'], data['longitude'])
        photos = data.get('photos') or []
        if not isinstance(photos, list):
            return jsonify({'error': 'photos must be a list of URLs'}), 400

        issue = Issue(
            issue_number=generate_issue_number(),
            title=sanitize_text(data['title']),
            description=sanitize_text(data['description']),
            category=normalize_category(data['category']),
            priority=str(data.get('priority') or DEFAULT_PRIORITY).lower(),
            status=STATUS_PENDING,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            address=sanitize_text(data.get('address')),
            gps_accuracy=data.get('gps_accuracy'),
            photos=photos,
            reporter_id=reporter.id
        )

        db.session.add(issue)
        db.session.commit()

        logger.info(f'Issue reported: {issue.issue_number} by user {reporter.id}')

        return jsonify({
            'message': 'Report submitted successfully',
            'issue': issue.to_dict()
        }), 201
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error creating report: {str(e)}', exc_info=True)
        return jsonify({'error': str(e)}), 500


@reports_bp.route('/mine', methods=['GET'])
@token_required
def get_my_reports(current_user_id):
    """Get issues reported by the current user, newest first."""
    try:
        issues = Issue.query.filter_by(
            reporter_id=current_user_id
        ).order_by(Issue.created_at.desc(), Issue.id.desc()).all()

        return jsonify({
            'issues': [issue.to_dict() for issue in issues],
            'total': len(issues)
        }), 200
    except Exception as e:
        logger.error(f'Error listing reports: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500


@reports_bp.route('/nearby', methods=['GET'])
def get_nearby_reports():
    """Get open issues around a location, nearest first.

    Query params:
        - latitude, longitude: Centre point (required)
        - radius: Search radius in km (default 5, max 100)
        - status: Status filter (default: all non-completed)

    Uses bounding box pre-filter + Haversine exact distance.
    """
    center = parse_coordinate(request.args.get('latitude'), request.args.get('longitude'))
    status = request.args.get('status')
    try:
        radius = float(request.args.get('radius', DEFAULT_RADIUS_KM))
    except ValueError:
        return jsonify({'error': 'radius must be a positive number'}), 400

    if not isfinite(radius) or radius <= 0:
        return jsonify({'error': 'radius must be a positive number'}), 400
    radius = min(radius, MAX_RADIUS_KM)
    if status and status not in STATUSES:
        return jsonify({'error': f"Invalid status. Must be one of: {', '.join(STATUSES)}"}), 400

    try:
        min_lat, max_lat, min_lng, max_lng = get_bounding_box(center, radius)
        query = Issue.query.filter(
            Issue.latitude >= min_lat,
            Issue.latitude <= max_lat,
            or_(*[
                Issue.longitude.between(low, high)
                for low, high in longitude_ranges(min_lng, max_lng)
            ])
        )
        if status:
            query = query.filter(Issue.status == status)
        else:
            query = query.filter(Issue.status != STATUS_COMPLETED)

        results = []
        for issue in query.all():
            dist = estimate_distance_km(center, issue.coordinate())
            if dist <= radius:
                issue_dict = issue.to_dict()
                issue_dict['distance'] = round(dist, 2)
                results.append(issue_dict)

        results.sort(key=lambda item: item['distance'])

        return jsonify({
            'issues': results,
            'total': len(results),
            'radius': radius
        }), 200
    except Exception as e:
        logger.error(f'Error in get_nearby_reports: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500


@reports_bp.route('/<int:issue_id>', methods=['GET'])
@token_required
def get_report(current_user_id, issue_id):
    """Get a single issue (reporter, assigned worker or admin)."""
    try:
        issue = db.session.get(Issue, issue_id)
        if not issue:
            return jsonify({'error': 'Issue not found'}), 404

        user = db.session.get(User, current_user_id)
        if not user or not can_view_issue(user, issue):
            return jsonify({'error': 'You do not have access to this issue'}), 403

        return jsonify(issue.to_dict()), 200
    except Exception as e:
        logger.error(f'Error fetching report {issue_id}: {e}', exc_info=True)
        return jsonify({'error': str(e)}), 500
