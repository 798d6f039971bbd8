"""Tests for the REST API."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from fundpulse.config import Settings
from fundpulse.exceptions import NoDataAvailable, UpstreamRequestFailure
from fundpulse.models import NavHistory, NavPoint, SyncResult
from fundpulse.pulsedb import PulseDBClient
from fundpulse.returns import summarize
from fundpulse.webapp.db import get_db, seed_sample_data
from fundpulse.webapp.routes import create_app
from fundpulse.webapp.services import build_services


@pytest.fixture
def services(tmp_path):
    settings = Settings(database_path=tmp_path / "api.sqlite")
    client = MagicMock(spec=PulseDBClient)
    svc = build_services(settings, client=client)
    with get_db(svc.db_path) as conn:
        seed_sample_data(conn)
    return svc


@pytest.fixture
def client(services):
    app = create_app(services=services)
    app.config['TESTING'] = True
    return app.test_client()


def sample_history(period='1Y'):
    points = [NavPoint(date(2023, 6, 1), 100.0), NavPoint(date(2024, 6, 1), 110.0)]
    return NavHistory(scheme_code='112277', period=period, frequency='day',
                      data_points=points, summary=summarize(points))


class TestFundEndpoints:

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'ok'

    def test_list_funds(self, client):
        response = client.get('/api/funds?search=hdfc&limit=2')
        data = response.get_json()
        assert response.status_code == 200
        assert data['total'] == 3
        assert data['totalPages'] == 2
        assert len(data['funds']) == 2

    def test_list_funds_by_category(self, client):
        data = client.get('/api/funds?category=Debt').get_json()
        assert data['total'] == 2
        assert all(f['category'] == 'Debt' for f in data['funds'])

    def test_fund_detail(self, client):
        response = client.get('/api/funds/INF090I01EN6')
        data = response.get_json()
        assert response.status_code == 200
        assert data['scheme_name'] == 'SBI Small Cap Fund - Growth'
        assert data['returns'] == {'1Y': 35.2, '3Y': 22.1, '5Y': 19.8}
        assert set(data['exit_load']) == {'period', 'rate', 'remark'}

    def test_fund_not_found(self, client):
        response = client.get('/api/funds/does-not-exist')
        assert response.status_code == 404
        assert response.get_json() == {'error': {'message': 'Fund not found'}}

    def test_categories(self, client):
        data = client.get('/api/categories').get_json()
        names = [c['name'] for c in data['categories']]
        assert names == ['Debt', 'Equity', 'Hybrid']
        equity = next(c for c in data['categories'] if c['name'] == 'Equity')
        assert 'Large Cap' in equity['subCategories']

    def test_unknown_route(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert response.get_json()['error']['message'] == 'Route GET /api/nothing-here not found'


class TestNavHistoryEndpoint:

    def test_invalid_period(self, client, services):
        response = client.get('/api/funds/112277/nav-history?period=2Y')
        assert response.status_code == 400
        assert 'Invalid period' in response.get_json()['error']['message']
        services.client.get_nav_history_for_period.assert_not_called()

    def test_default_period_and_cache(self, client, services):
        services.client.get_nav_history_for_period.return_value = sample_history()

        first = client.get('/api/funds/112277/nav-history')
        second = client.get('/api/funds/112277/nav-history')

        assert first.status_code == second.status_code == 200
        assert first.get_json() == second.get_json()
        assert first.get_json()['summary']['absolute_return'] == pytest.approx(10.0)
        services.client.get_nav_history_for_period.assert_called_once_with('112277', '1Y')
        assert services.cache.get('nav-history:112277:1Y') is not None

    def test_no_data(self, client, services):
        services.client.get_nav_history_for_period.side_effect = NoDataAvailable(
            "No NAV history data returned")
        response = client.get('/api/funds/112277/nav-history?period=5Y')
        assert response.status_code == 502
        assert response.get_json()['error']['message'] == "No NAV history data returned"
        assert services.cache.get('nav-history:112277:5Y') is None


class TestCalculatorEndpoint:

    def test_cached(self, client, services):
        payload = {'scheme_code': '112277', 'current_nav': 110.0,
                   'current_date': '2024-06-01', 'periods': {'6M': None}}
        services.client.get_calculator_data.return_value = payload

        assert client.get('/api/funds/112277/calculator-data').get_json() == payload
        assert client.get('/api/funds/112277/calculator-data').get_json() == payload
        services.client.get_calculator_data.assert_called_once_with('112277')

    def test_projections_for_amount(self, client, services):
        services.client.get_calculator_data.return_value = {
            'scheme_code': '112277', 'current_nav': 12.0, 'current_date': '2023-02-01',
            'periods': {
                '6M': {'start_date': '2023-01-01', 'start_nav': 10.0, 'end_nav': 12.0,
                       'months': 1, 'monthly_navs': [{'date': '2023-01-01', 'nav': 10.0}]},
                '1Y': None,
            },
        }

        plain = client.get('/api/funds/112277/calculator-data').get_json()
        projected = client.get('/api/funds/112277/calculator-data?amount=5000').get_json()

        assert 'projections' not in plain
        assert projected['projections']['1Y'] is None
        assert projected['projections']['6M']['lumpsum']['current_value'] == pytest.approx(6000.0)
        assert projected['projections']['6M']['sip']['months'] == 1
        services.client.get_calculator_data.assert_called_once_with('112277')

    @pytest.mark.parametrize('amount', ['lots', '0', '-100', 'nan'])
    def test_invalid_amount(self, client, services, amount):
        response = client.get(f'/api/funds/112277/calculator-data?amount={amount}')
        assert response.status_code == 400
        assert 'amount' in response.get_json()['error']['message']
        services.client.get_calculator_data.assert_not_called()

    def test_upstream_failure(self, client, services):
        services.client.get_calculator_data.side_effect = UpstreamRequestFailure(
            '/rest/api/v1/mf/nav-history', 'timeout')
        response = client.get('/api/funds/112277/calculator-data')
        assert response.status_code == 502
        assert 'stack' not in response.get_json()['error']


class TestSyncEndpoint:

    def test_manual_sync(self, client, services):
        services.sync = MagicMock()
        services.sync.sync_funds.return_value = SyncResult(synced_count=3, error_count=1, duration=0.5)

        response = client.post('/api/sync', json={'limit': 5})
        assert response.status_code == 200
        assert response.get_json() == {
            'message': 'Sync completed',
            'syncedCount': 3,
            'errorCount': 1,
            'duration': 0.5,
        }
        services.sync.sync_categories.assert_called_once()
        services.sync.sync_funds.assert_called_once_with(5)

    def test_default_limit(self, client, services):
        services.sync = MagicMock()
        services.sync.sync_funds.return_value = SyncResult()
        client.post('/api/sync')
        services.sync.sync_funds.assert_called_once_with(100)

    def test_bad_limit(self, client, services):
        services.sync = MagicMock()
        response = client.post('/api/sync', json={'limit': 'lots'})
        assert response.status_code == 400
        assert response.get_json() == {'error': {'message': 'limit must be an integer'}}
        services.sync.sync_funds.assert_not_called()


class TestErrorDetail:

    def test_stack_in_development(self, tmp_path):
        settings = Settings(database_path=tmp_path / "dev.sqlite", environment='development')
        svc = build_services(settings, client=MagicMock(spec=PulseDBClient))
        svc.client.get_calculator_data.side_effect = RuntimeError("kaboom")
        client = create_app(services=svc).test_client()

        response = client.get('/api/funds/1/calculator-data')
        assert response.status_code == 500
        error = response.get_json()['error']
        assert error['message'] == 'kaboom'
        assert 'RuntimeError' in error['stack']
