"""
Tests for health checks and token handling.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from civic_api import create_app

from conftest import TEST_SECRET, make_token


class TestHealth:

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json == {'status': 'ok'}

    def test_api_health(self, client):
        response = client.get('/api/health')

        assert response.status_code == 200
        assert response.json == {'status': 'ok'}


class TestTokens:

    def test_missing_token(self, client, db_session):
        response = client.get('/api/reports/mine')

        assert response.status_code == 401
        assert response.json['error'] == 'Token is missing'

    def test_invalid_token(self, client, citizen):
        response = client.get('/api/reports/mine', headers={
            'Authorization': f"Bearer {make_token(citizen['id'], secret='another-secret')}"
        })

        assert response.status_code == 401
        assert response.json['error'] == 'Token is invalid'

    def test_expired_token(self, client, citizen):
        token = jwt.encode({
            'user_id': citizen['id'],
            'exp': datetime.now(timezone.utc) - timedelta(minutes=5),
        }, TEST_SECRET, algorithm='HS256')

        response = client.get('/api/reports/mine', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401
        assert response.json['error'] == 'Token has expired'

    def test_token_without_user_id(self, client, db_session):
        token = jwt.encode({'sub': 'someone'}, TEST_SECRET, algorithm='HS256')

        response = client.get('/api/reports/mine', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 401

    def test_raw_token_accepted(self, client, citizen):
        response = client.get('/api/reports/mine', headers={'Authorization': make_token(citizen['id'])})

        assert response.status_code == 200

    def test_deleted_user_on_role_route(self, client, db_session):
        response = client.get('/api/worker/tasks', headers={'Authorization': f'Bearer {make_token(424242)}'})

        assert response.status_code == 401


class TestAppFactory:

    def test_unknown_config_name(self):
        with pytest.raises(ValueError, match='Unknown config'):
            create_app('staging')

    def test_production_requires_secret(self, monkeypatch):
        monkeypatch.delenv('JWT_SECRET_KEY', raising=False)

        with pytest.raises(RuntimeError, match='JWT_SECRET_KEY'):
            create_app('production')
