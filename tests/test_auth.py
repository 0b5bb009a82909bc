import uuid

import pytest
from django.core.management import call_command
from django.contrib.auth.models import AnonymousUser

from authentication.models import CustomUser
from authentication.permissions import actor_for_user
from orders.lifecycle import Actor

pytestmark = pytest.mark.django_db


def test_login_returns_role_and_actor(api_client, kitchen_user):
    response = api_client.post('/auth/login/', {'email': 'kitchen@kalye.test', 'password': 'Str0ng-pass!'}, format='json')
    assert response.status_code == 200
    assert response.data['role'] == 'kitchen'
    assert response.data['actor'] == 'kitchen'
    assert response.data['user']['email'] == 'kitchen@kalye.test'
    assert 'access' in response.data and 'refresh' in response.data


def test_login_with_bad_password(api_client, manager):
    response = api_client.post('/auth/login/', {'email': 'manager@kalye.test', 'password': 'nope'}, format='json')
    assert response.status_code == 401
    assert response.data['error'] is True


def test_actor_mapping(manager, cashier, kitchen_user):
    assert actor_for_user(manager) == Actor.STAFF
    assert actor_for_user(cashier) == Actor.STAFF
    assert actor_for_user(kitchen_user) == Actor.KITCHEN
    assert actor_for_user(AnonymousUser()) == Actor.CUSTOMER
    assert actor_for_user(None) == Actor.CUSTOMER


def test_my_role(kitchen_client):
    response = kitchen_client.get('/profile/role/')
    assert response.data == {'role': 'kitchen', 'actor': 'kitchen', 'is_back_office': False, 'is_kitchen': True}


def test_staff_list_is_back_office_only(manager_client, kitchen_client):
    assert manager_client.get('/staff/').status_code == 200
    response = kitchen_client.get('/staff/')
    assert response.status_code == 403
    assert response.data['code'] == 'permission_denied'
    assert response.data['message'] == 'Permission denied'


def test_manager_creates_kitchen_account(manager_client):
    response = manager_client.post('/staff/', {
        'email': 'line@kalye.test', 'first_name': 'Line', 'last_name': 'Cook', 'role': 'kitchen',
        'password': 'An0ther-pass!', 'confirm_password': 'An0ther-pass!',
    }, format='json')
    assert response.status_code == 201
    user = CustomUser.objects.get(email='line@kalye.test')
    assert user.check_password('An0ther-pass!')
    assert 'password' not in response.data


def test_profile_cannot_change_role(kitchen_client, kitchen_user):
    kitchen_client.patch('/profile/', {'role': 'manager', 'first_name': 'Chef'}, format='json')
    kitchen_user.refresh_from_db()
    assert kitchen_user.role == 'kitchen'
    assert kitchen_user.first_name == 'Chef'


def test_health_check_is_public(api_client):
    response = api_client.get('/health/')
    assert response.status_code == 200
    assert response.data['status'] == 'ok'


def test_error_envelope_for_unauthenticated(api_client):
    response = api_client.get('/orders/')
    assert response.status_code == 401
    assert set(response.data) == {'error', 'code', 'message', 'details', 'status_code'}
    assert response.data['code'] == 'not_authenticated'
    assert response.data['status_code'] == 401


def test_cashier_cannot_manage_staff(api_client, cashier, manager):
    api_client.force_authenticate(user=cashier)
    assert api_client.get('/staff/').status_code == 403
    response = api_client.post('/staff/', {
        'email': 'boss@kalye.test', 'first_name': 'New', 'last_name': 'Boss', 'role': 'manager',
        'password': 'An0ther-pass!', 'confirm_password': 'An0ther-pass!',
    }, format='json')
    assert response.status_code == 403
    assert api_client.delete(f'/staff/{manager.id}/').status_code == 403
    assert CustomUser.objects.filter(pk=manager.pk).exists()


def test_unknown_staff_id_returns_envelope(manager_client):
    response = manager_client.get(f'/staff/{uuid.uuid4()}/')
    assert response.status_code == 404
    assert response.data['code'] == 'not_found'
    assert response.data['message'] == 'Resource not found'


def test_migrations_match_models():
    # Exits non-zero when models have changes with no migration
    call_command('makemigrations', '--check', '--dry-run', verbosity=0)
