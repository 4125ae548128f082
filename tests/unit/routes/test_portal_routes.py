"""Tests for business entity, notification and folder endpoints."""
import pytest


@pytest.fixture
def user_id(db_session, user_factory):
    return user_factory.create(db_session).id


class TestBusinessRoutes:

    def test_formation_order(self, client, login_as, user_id):
        login_as(user_id)
        resp = client.post('/api/business-entities', json={
            'name': 'Acme LLC', 'entityType': 'LLC', 'state': 'Delaware',
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert (body['state'], body['status']) == ('DE', 'draft')

        listed = client.get('/api/business-entities').get_json()
        assert [b['id'] for b in listed] == [body['id']]
        assert client.get(f"/api/business-entities/{body['id']}").status_code == 200

    def test_missing_fields(self, client, login_as, user_id):
        login_as(user_id)
        resp = client.post('/api/business-entities', json={'name': 'Acme'})
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'entityType'

    def test_unknown_business(self, client, login_as, user_id):
        login_as(user_id)
        assert client.get('/api/business-entities/999').status_code == 404


class TestNotificationRoutes:

    def test_list_count_and_read(self, client, login_as, db_session, user_factory, notification_factory):
        user = user_factory.create(db_session)
        user_id = user.id
        first_id = notification_factory.create(db_session, user=user, category='orders').id
        notification_factory.create(db_session, user=user, category='compliance')
        login_as(user_id)

        assert len(client.get('/api/notifications').get_json()) == 2
        assert len(client.get('/api/notifications?category=orders').get_json()) == 1
        assert client.get('/api/notifications/unread-count').get_json() == {'count': 2}

        resp = client.patch(f'/api/notifications/{first_id}/read')
        assert resp.get_json()['isRead'] is True
        assert len(client.get('/api/notifications?includeRead=false').get_json()) == 1

        assert client.patch('/api/notifications/read-all').get_json() == {'success': True, 'updated': 1}
        assert client.get('/api/notifications/unread-count').get_json() == {'count': 0}

    def test_bad_limit(self, client, login_as, user_id):
        login_as(user_id)
        assert client.get('/api/notifications?limit=lots').status_code == 400

    def test_limit_is_clamped(self, client, login_as, db_session, user_factory, notification_factory):
        user = user_factory.create(db_session)
        user_id = user.id
        notification_factory.create(db_session, user=user)
        notification_factory.create(db_session, user=user)
        login_as(user_id)

        for limit in ('-1', '0'):
            resp = client.get(f'/api/notifications?limit={limit}')
            assert resp.status_code == 200
            assert len(resp.get_json()) == 1

    def test_bad_include_read_flag(self, client, login_as, user_id):
        login_as(user_id)
        resp = client.get('/api/notifications?includeRead=sometimes')
        assert resp.status_code == 400
        assert resp.get_json()['field'] == 'includeRead'

    def test_read_someone_elses(self, client, login_as, db_session, user_factory, notification_factory):
        owner = user_factory.create(db_session)
        notification_id = notification_factory.create(db_session, user=owner).id
        login_as(user_factory.create(db_session).id)
        assert client.patch(f'/api/notifications/{notification_id}/read').status_code == 404


class TestFolderRoutes:

    def test_create_list_delete(self, client, login_as, user_id):
        login_as(user_id)
        created = client.post('/api/folders', json={'name': 'Tax', 'color': '#ff0000'})
        assert created.status_code == 201
        folder_id = created.get_json()['id']

        assert [f['name'] for f in client.get('/api/folders').get_json()] == ['Tax']
        assert client.delete(f'/api/folders/{folder_id}').status_code == 200
        assert client.get('/api/folders').get_json() == []

    def test_system_folder_is_protected(self, client, login_as, db_session, user_factory, folder_factory):
        user = user_factory.create(db_session)
        user_id = user.id
        folder_id = folder_factory.create(db_session, user=user, is_system_folder=True).id
        login_as(user_id)
        assert client.delete(f'/api/folders/{folder_id}').status_code == 409
