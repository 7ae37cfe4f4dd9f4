"""Route tests for the Vehicle Records API and the public listing.

Tests:
- Authentication runs first: 401 for every method without a valid token
- GET list / GET by id / 404
- POST upsert: validation (400, no DB write), coercion, defaults, re-post
- DELETE: 204 regardless of existence, 400 without id
- 405 for other methods, 500 with the error message
- /api/vehicles-public: available-only, admin fields hidden, GET only
"""
from unittest.mock import patch, MagicMock

import pytest
from firebase_admin import auth as firebase_auth

from dealerhub.app import app
from dealerhub.core.exceptions import ConfigurationError
from dealerhub.inventory.services.vehicle_payload import VEHICLE_COLUMNS

ADMIN = '/api/vehicles-admin'
PUBLIC = '/api/vehicles-public'
AUTH = {'Authorization': 'Bearer valid-token'}

_ROUTES = 'dealerhub.inventory.routes'
_PUBLIC = 'dealerhub.inventory.public_routes'
_FIREBASE = 'dealerhub.core.auth.firebase'


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as c:
        yield c


@pytest.fixture
def repo():
    mock_repo = MagicMock()
    with patch(f'{_ROUTES}._vehicle_repo', mock_repo):
        yield mock_repo


@pytest.fixture
def authed():
    with patch(f'{_FIREBASE}.verify_token', return_value={'uid': 'staff-1'}) as mock_verify:
        yield mock_verify


def _stored(**overrides):
    """A row as the repository returns it (already serialized)."""
    row = {column: None for column in VEHICLE_COLUMNS}
    row.update({
        'id': '0b5c1a1e-6c0d-4a8e-9d55-2f3f3c7b9a10',
        'make': 'Toyota',
        'model': 'Hilux',
        'stock_number': 'ST001',
        'branch': 'Main',
        'images': ['a.jpg'],
        'features': [],
        'status': 'draft',
        'price': 350000,
        'created_at': '2026-10-19T08:00:00+00:00',
        'updated_at': '2026-10-19T08:00:00+00:00',
    })
    row.update(overrides)
    return row


# ═══════════════════════════════════════════════
# Authentication
# ═══════════════════════════════════════════════

class TestAuthentication:

    @pytest.mark.parametrize('method', ['get', 'post', 'delete', 'put', 'patch', 'options'])
    def test_missing_token_is_401_for_every_method(self, client, repo, method):
        resp = getattr(client, method)(ADMIN, json={'make': 'Toyota'})

        assert resp.status_code == 401
        assert resp.get_json() == {'success': False, 'error': 'Unauthorized'}
        assert not repo.method_calls

    def test_router_rejected_method_without_token_is_401(self, client, repo):
        resp = client.open(ADMIN, method='TRACE')

        assert resp.status_code == 401
        assert resp.get_json() == {'success': False, 'error': 'Unauthorized'}
        assert not repo.method_calls

    def test_non_bearer_scheme(self, client, repo):
        resp = client.get(ADMIN, headers={'Authorization': 'Basic dXNlcjpwdw=='})
        assert resp.status_code == 401

    def test_empty_bearer_token(self, client, repo):
        resp = client.get(ADMIN, headers={'Authorization': 'Bearer '})
        assert resp.status_code == 401

    @patch(f'{_FIREBASE}.get_firebase_app')
    @patch(f'{_FIREBASE}.firebase_auth.verify_id_token')
    def test_rejected_token(self, mock_verify, mock_app, client, repo):
        mock_verify.side_effect = firebase_auth.InvalidIdTokenError('bad signature')

        resp = client.get(ADMIN, headers=AUTH)

        assert resp.status_code == 401
        assert not repo.method_calls

    @patch(f'{_FIREBASE}.get_firebase_app')
    @patch(f'{_FIREBASE}.firebase_auth.verify_id_token')
    def test_expired_token(self, mock_verify, mock_app, client, repo):
        mock_verify.side_effect = firebase_auth.ExpiredIdTokenError('expired', cause=None)

        resp = client.post(ADMIN, headers=AUTH, json={'make': 'Toyota'})

        assert resp.status_code == 401

    @patch(f'{_FIREBASE}.get_firebase_app')
    @patch(f'{_FIREBASE}.firebase_auth.verify_id_token')
    def test_verified_token_passes(self, mock_verify, mock_app, client, repo):
        mock_verify.return_value = {'uid': 'staff-1'}
        repo.list_recent.return_value = []

        resp = client.get(ADMIN, headers=AUTH)

        assert resp.status_code == 200
        mock_verify.assert_called_once_with('valid-token', app=mock_app.return_value)

    @patch(f'{_FIREBASE}.get_firebase_app')
    def test_misconfigured_firebase_is_500(self, mock_app, client, repo):
        mock_app.side_effect = ConfigurationError('Missing env: FIREBASE_ADMIN_PROJECT_ID')

        resp = client.get(ADMIN, headers=AUTH)

        assert resp.status_code == 500
        assert resp.get_json()['error'] == 'Missing env: FIREBASE_ADMIN_PROJECT_ID'


# ═══════════════════════════════════════════════
# GET
# ═══════════════════════════════════════════════

class TestGet:

    def test_list(self, client, repo, authed):
        repo.list_recent.return_value = [_stored(id='b'), _stored(id='a')]

        resp = client.get(ADMIN, headers=AUTH)

        assert resp.status_code == 200
        vehicles = resp.get_json()['vehicles']
        assert [v['id'] for v in vehicles] == ['b', 'a']
        assert vehicles[0]['stockNumber'] == 'ST001'
        assert 'stock_number' not in vehicles[0]
        repo.list_recent.assert_called_once_with()

    def test_list_empty(self, client, repo, authed):
        repo.list_recent.return_value = []

        resp = client.get(ADMIN, headers=AUTH)

        assert resp.get_json() == {'vehicles': []}

    def test_get_by_id_trims(self, client, repo, authed):
        repo.get_by_id.return_value = _stored(id='veh-1')

        resp = client.get(f'{ADMIN}?id=%20veh-1%20', headers=AUTH)

        assert resp.status_code == 200
        assert resp.get_json()['vehicle']['id'] == 'veh-1'
        repo.get_by_id.assert_called_once_with('veh-1')

    def test_get_unknown_id_is_404(self, client, repo, authed):
        repo.get_by_id.return_value = None

        resp = client.get(f'{ADMIN}?id=missing', headers=AUTH)

        assert resp.status_code == 404
        assert resp.get_json()['error'] == 'Not Found'

    def test_blank_id_lists(self, client, repo, authed):
        repo.list_recent.return_value = []

        client.get(f'{ADMIN}?id=%20%20', headers=AUTH)

        repo.list_recent.assert_called_once()
        repo.get_by_id.assert_not_called()


# ═══════════════════════════════════════════════
# POST (upsert)
# ═══════════════════════════════════════════════

class TestUpsert:

    def test_create_example(self, client, repo, authed):
        """POST {make, model, stockNumber, branch, images, price:'350000'}"""
        repo.upsert.side_effect = lambda row: dict(
            row, created_at='2026-10-19T08:00:00+00:00', updated_at='2026-10-19T08:00:00+00:00')

        resp = client.post(ADMIN, headers=AUTH, json={
            'make': 'Toyota', 'model': 'Hilux', 'stockNumber': 'ST001',
            'branch': 'Main', 'images': ['a.jpg'], 'price': '350000',
        })

        assert resp.status_code == 200
        vehicle = resp.get_json()['vehicle']
        assert vehicle['id']
        assert vehicle['status'] == 'draft'
        assert vehicle['price'] == 350000
        assert isinstance(vehicle['price'], int)
        assert vehicle['images'] == ['a.jpg']
        assert vehicle['createdAt'] == '2026-10-19T08:00:00+00:00'

    def test_update_passes_supplied_id(self, client, repo, authed):
        repo.upsert.return_value = _stored(
            id='veh-1', price=340000, updated_at='2026-10-19T09:00:00+00:00')

        resp = client.post(ADMIN, headers=AUTH, json={
            'id': 'veh-1', 'make': 'Toyota', 'model': 'Hilux', 'stockNumber': 'ST001',
            'branch': 'Main', 'images': ['a.jpg'], 'price': 340000,
        })

        row = repo.upsert.call_args[0][0]
        assert row['id'] == 'veh-1'
        assert row['price'] == 340000
        vehicle = resp.get_json()['vehicle']
        assert vehicle['id'] == 'veh-1'
        assert vehicle['price'] == 340000
        assert vehicle['createdAt'] == '2026-10-19T08:00:00+00:00'
        assert vehicle['updatedAt'] == '2026-10-19T09:00:00+00:00'

    def test_invalid_json(self, client, repo, authed):
        resp = client.post(ADMIN, headers=AUTH, data='{not json', content_type='application/json')

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Invalid JSON'
        repo.upsert.assert_not_called()

    def test_empty_body(self, client, repo, authed):
        resp = client.post(ADMIN, headers=AUTH)

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Invalid JSON'

    def test_json_array_rejected(self, client, repo, authed):
        resp = client.post(ADMIN, headers=AUTH, json=[{'make': 'Toyota'}])

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Invalid JSON'

    def test_body_without_json_content_type(self, client, repo, authed):
        repo.upsert.side_effect = lambda row: row

        resp = client.post(ADMIN, headers=AUTH, content_type='text/plain',
                           data='{"make":"VW","model":"Polo","stockNumber":"S9","branch":"Main","images":["x.jpg"]}')

        assert resp.status_code == 200

    def test_missing_required_fields(self, client, repo, authed):
        resp = client.post(ADMIN, headers=AUTH, json={
            'make': 'Toyota', 'model': '  ', 'stockNumber': 'ST001',
            'branch': 'Main', 'images': ['a.jpg'],
        })

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Missing required fields'
        repo.upsert.assert_not_called()

    def test_empty_images_no_write(self, client, repo, authed):
        resp = client.post(ADMIN, headers=AUTH, json={
            'make': 'Toyota', 'model': 'Hilux', 'stockNumber': 'ST001',
            'branch': 'Main', 'images': [],
        })

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'At least one image is required'
        repo.upsert.assert_not_called()


# ═══════════════════════════════════════════════
# DELETE / other methods / errors
# ═══════════════════════════════════════════════

class TestDelete:

    def test_delete_existing(self, client, repo, authed):
        repo.delete.return_value = 1

        resp = client.delete(f'{ADMIN}?id=veh-1', headers=AUTH)

        assert resp.status_code == 204
        assert resp.data == b''
        repo.delete.assert_called_once_with('veh-1')

    def test_delete_missing_row_still_204(self, client, repo, authed):
        repo.delete.return_value = 0

        resp = client.delete(f'{ADMIN}?id=ghost', headers=AUTH)

        assert resp.status_code == 204

    def test_delete_without_id(self, client, repo, authed):
        resp = client.delete(ADMIN, headers=AUTH)

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Missing id'
        repo.delete.assert_not_called()


class TestMethodsAndErrors:

    @pytest.mark.parametrize('method', ['put', 'patch', 'options'])
    def test_unsupported_method(self, client, repo, authed, method):
        resp = getattr(client, method)(ADMIN, headers=AUTH, json={})

        assert resp.status_code == 405
        assert resp.get_json()['error'] == 'Method Not Allowed'
        assert not repo.method_calls

    def test_router_rejected_method_with_token_is_405(self, client, repo, authed):
        resp = client.open(ADMIN, method='TRACE', headers=AUTH)

        assert resp.status_code == 405
        assert resp.get_json()['error'] == 'Method Not Allowed'
        authed.assert_called_once_with('valid-token')

    def test_database_error_message_returned(self, client, repo, authed):
        repo.list_recent.side_effect = RuntimeError('connection refused')

        resp = client.get(ADMIN, headers=AUTH)

        assert resp.status_code == 500
        assert resp.get_json()['error'] == 'connection refused'

    def test_error_without_message(self, client, repo, authed):
        repo.list_recent.side_effect = RuntimeError()

        resp = client.get(ADMIN, headers=AUTH)

        assert resp.status_code == 500
        assert resp.get_json()['error'] == 'Internal Server Error'

    def test_configuration_error_message(self, client, repo, authed):
        repo.get_by_id.side_effect = ConfigurationError('Missing env: NEON_DATABASE_URL')

        resp = client.get(f'{ADMIN}?id=veh-1', headers=AUTH)

        assert resp.status_code == 500
        assert resp.get_json()['error'] == 'Missing env: NEON_DATABASE_URL'


# ═══════════════════════════════════════════════
# Public listing
# ═══════════════════════════════════════════════

class TestPublicListing:

    @pytest.fixture
    def public_repo(self):
        mock_repo = MagicMock()
        with patch(f'{_PUBLIC}._vehicle_repo', mock_repo):
            yield mock_repo

    def test_list_without_auth(self, client, public_repo):
        public_repo.list_public.return_value = [_stored(status='available', cost_price=300000)]

        resp = client.get(PUBLIC)

        assert resp.status_code == 200
        vehicle = resp.get_json()['vehicles'][0]
        assert vehicle['status'] == 'available'
        assert 'costPrice' not in vehicle
        assert 'previousOwner' not in vehicle

    def test_get_available_vehicle(self, client, public_repo):
        public_repo.get_public_by_id.return_value = _stored(id='veh-1', status='available')

        resp = client.get(f'{PUBLIC}?id=veh-1')

        assert resp.status_code == 200
        assert resp.get_json()['vehicle']['id'] == 'veh-1'

    def test_unlisted_vehicle_is_404(self, client, public_repo):
        public_repo.get_public_by_id.return_value = None

        resp = client.get(f'{PUBLIC}?id=draft-1')

        assert resp.status_code == 404

    def test_post_not_allowed(self, client, public_repo):
        resp = client.post(PUBLIC, json={})

        assert resp.status_code == 405
        public_repo.list_public.assert_not_called()


class TestHealth:

    def test_health(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'ok'
