"""
Functional tests running the full WSGI app through WebTest
"""

import json
import pytest
from webtest import TestApp

from booking_api import main
from booking_api.models import DBSession
from booking_api.models.booking import BookingAnswer, STATUS_BOOKED
from booking_api.models.user import User
from booking_api.exceptions import ConfigurationError

from booking_api.auth import AuthService

from conftest import build_site_data, ADMIN_PASSWORD

EXPERT = 'mod/booking:expertoptionform'


@pytest.fixture
def testapp():
    app = main({}, **{'sqlalchemy.url': 'sqlite://'})
    yield TestApp(app)
    DBSession.remove()


@pytest.fixture
def site(testapp):
    return build_site_data(DBSession)


@pytest.fixture
def token_for(testapp, site):
    def _token(userid):
        return {'Authorization': f'Bearer {AuthService.generate_token(userid, "user")}'}
    return _token


class TestHealthAndLogin:

    def test_health(self, testapp):
        response = testapp.get('/health')

        assert response.json['status'] == 'healthy'
        assert 'Access-Control-Allow-Origin' in response.headers

    def test_login(self, testapp, site):
        response = testapp.post_json('/auth/login', {'username': 'admin', 'password': ADMIN_PASSWORD})

        assert response.json['token']
        assert response.json['user']['id'] == site.admin

    def test_login_wrong_password(self, testapp, site):
        response = testapp.post_json('/auth/login', {'username': 'admin', 'password': 'wrong'}, status=401)

        assert response.json['error'] is True
        assert response.json['error_code'] == 'AUTH_ERROR'

    def test_login_deactivated(self, testapp, site):
        admin = DBSession.query(User).filter_by(id=site.admin).one()
        admin.active = False
        DBSession.commit()

        response = testapp.post_json('/auth/login', {'username': 'admin', 'password': ADMIN_PASSWORD}, status=401)

        assert response.json['message'] == 'Account is deactivated'


def test_main_requires_database_url():
    with pytest.raises(ConfigurationError) as excinfo:
        main({})

    assert excinfo.value.details == {'config_key': 'sqlalchemy.url'}


class TestWebservices:

    def test_categories_require_login(self, testapp, site):
        response = testapp.get('/webservice/categories', status=401)

        assert response.json['error_code'] == 'HTTP_401'

    def test_categories_with_token(self, testapp, site):
        login = testapp.post_json('/auth/login', {'username': 'admin', 'password': ADMIN_PASSWORD})
        headers = {'Authorization': f"Bearer {login.json['token']}"}

        response = testapp.get('/webservice/categories', headers=headers)

        assert [r['id'] for r in response.json] == [0, site.sports, site.languages]
        assert response.json[0]['coursecount'] == 4

    def test_save_then_status(self, testapp, site, token_for):
        payload = json.dumps([{'id': 50, 'checked': 0}, {'id': 70, 'checked': 1}])
        testapp.post_json('/webservice/optionformconfig', {
            'contextid': site.swimming_ctx, 'capability': EXPERT, 'json': payload
        }, headers=token_for(site.configurator))

        response = testapp.get('/webservice/optionformconfig/status', {
            'fieldid': 70, 'contextid': site.summer_ctx, 'capability': EXPERT
        }, headers=token_for(site.configurator))

        assert response.json['statusname'] == 'show'

    def test_save_forbidden(self, testapp, site, token_for):
        response = testapp.post_json('/webservice/optionformconfig', {
            'contextid': site.swimming_ctx, 'capability': EXPERT, 'json': '[]'
        }, headers=token_for(site.manager), status=403)

        assert response.json['error_code'] == 'ACCESS_DENIED'


class TestManageUsers:

    def test_confirm_booking(self, testapp, site, token_for):
        response = testapp.post_json(
            f'/manageusers/{site.pool}/action/confirmbooking',
            {'id': site.waiting_ben, 'data': json.dumps({'id': site.waiting_ben})},
            headers=token_for(site.manager)
        )

        assert response.json['success'] == 1
        answer = DBSession.query(BookingAnswer).filter_by(id=site.waiting_ben).one()
        assert answer.waitinglist == STATUS_BOOKED

    def test_soft_failure_is_200(self, testapp, site, token_for):
        response = testapp.post_json(
            f'/manageusers/{site.pool}/action/deletebooking',
            {'id': site.waiting_ben, 'data': json.dumps({'id': site.waiting_ben})},
            headers=token_for(site.outsider)
        )

        assert response.status_int == 200
        assert response.json['success'] == 0


    def test_reorder_with_bad_ids_is_400(self, testapp, site, token_for):
        response = testapp.post_json(
            f'/manageusers/{site.pool}/action/reorderrows',
            {'id': 0, 'data': json.dumps({'ids': ['abc']})},
            headers=token_for(site.manager),
            status=400
        )

        assert response.json['error_code'] == 'VALIDATION_ERROR'

    def test_listing_refused_without_capability(self, testapp, site, token_for):
        response = testapp.get(f'/manageusers/{site.pool}', headers=token_for(site.outsider), status=403)

        assert response.json['error_code'] == 'ACCESS_DENIED'


class TestPages:

    def test_optionformconfig_page(self, testapp, site, token_for):
        response = testapp.get('/optionformconfig', headers=token_for(site.configurator))

        assert response.content_type == 'text/html'
        assert 'mod/booking:reducedoptionform5' in response.text

    def test_optionformconfig_page_forbidden(self, testapp, site, token_for):
        response = testapp.get('/optionformconfig', headers=token_for(site.manager), status=403)

        assert response.json['error_code'] == 'ACCESS_DENIED'

    def test_edit_optiontemplate_page(self, testapp, site, token_for):
        response = testapp.get(
            f'/booking/{site.summer_cm}/optiontemplates/{site.template}/edit',
            headers=token_for(site.manager)
        )

        assert 'Summer courses' in response.text
        assert 'Template option' in response.text

    def test_edit_missing_template(self, testapp, site, token_for):
        response = testapp.get(
            f'/booking/{site.summer_cm}/optiontemplates/9999/edit',
            headers=token_for(site.manager),
            status=404
        )

        assert response.json['error_code'] == 'RESOURCE_NOT_FOUND'

    def test_edit_requires_login(self, testapp, site):
        testapp.get(f'/booking/{site.summer_cm}/optiontemplates/{site.template}/edit', status=401)
