import importlib
import json
import sys
from datetime import timedelta
from unittest import mock

import pytest
from django.db import DatabaseError

from sync import health
from sync.health import format_bytes, format_uptime


class TestFormatting:

    @pytest.mark.parametrize('delta, expected', [
        (timedelta(seconds=42), '42s'),
        (timedelta(minutes=3, seconds=5), '3m 5s'),
        (timedelta(hours=2, minutes=1, seconds=9), '2h 1m 9s'),
        (timedelta(days=3, hours=4, minutes=5), '3d 4h 5m'),
    ])
    def test_uptime(self, delta, expected):
        assert format_uptime(delta) == expected

    def test_bytes(self):
        assert format_bytes(512) == '512 B'
        assert format_bytes(1536) == '1.5 KB'
        assert format_bytes(5 * 1024 * 1024) == '5 MB'


@pytest.mark.django_db
class TestSyncAndMenu:

    def test_sync_info_counts(self, api_client, make_product, make_staff, make_order):
        make_product()
        make_staff()
        make_order()
        data = api_client.get('/api/sync/info').json()['data']

        assert data['product_count'] == 1
        assert data['staff_count'] == 1
        assert data['waiting_transaction_count'] == 1
        assert 'last_sync' in data

    def test_sync_health(self, api_client):
        body = api_client.get('/api/sync/health').json()
        assert body['success'] is True
        assert body['data']['status'] == 'healthy'

    def test_menu_items_are_compact(self, api_client, make_product):
        make_product(categories='["C1"]')
        make_product(product_id='P2', name='Old dish', status=False)
        data = api_client.get('/api/menu/items').json()['data']

        assert len(data) == 1
        assert data[0]['categories'] == ['C1']
        assert data[0]['is_active'] is True

    def test_menu_sync_hides_staff_codes(self, api_client, make_staff, make_category, make_table):
        make_staff()
        make_category()
        make_table()
        data = api_client.get('/api/menu/sync').json()['data']

        assert 'daily_code' not in data['staff'][0]
        assert data['categories'][0]['category_name'] == 'Mains'
        assert data['tables'][0]['table_id'] == 'T1'
        assert data['sync_info']['table_count'] == 1


@pytest.mark.django_db
class TestHealth:

    def test_basic(self, api_client):
        body = api_client.get('/api/health').json()
        assert body['status'] == 'healthy'
        assert body['message'] == 'PottaAPI is running successfully'

    def test_detailed(self, api_client):
        body = api_client.get('/api/health/detailed').json()
        assert body['api']['name'] == 'PottaAPI'
        assert body['database']['connected'] is True
        memory = body['system']['memory_usage']
        if memory['available']:
            assert memory['peak_resident_bytes'] > 0

    def test_database_failure_is_503(self, api_client):
        with mock.patch('sync.health.sync_counts', side_effect=DatabaseError('disk I/O error')):
            response = api_client.get('/api/health/database')
        assert response.status_code == 503
        assert response.json()['status'] == 'unhealthy'

    def test_database_statistics(self, api_client, make_product):
        make_product()
        body = api_client.get('/api/health/database').json()
        assert body['statistics']['products'] == 1
        assert body['statistics']['total_items'] == 1

    def test_memory_unavailable_on_windows(self):
        with mock.patch.object(health.sys, 'platform', 'win32'):
            assert health.process_memory() == {'available': False}


class TestPlatformImports:

    def test_urlconf_loads_without_resource_module(self, monkeypatch):
        """getrusage is Unix-only; the Windows desktop must still be able to serve the API"""
        import potta.urls
        import sync.urls

        monkeypatch.setitem(sys.modules, 'resource', None)
        for package, child in ((potta, 'urls'), (sync, 'urls'), (sync, 'views'), (sync, 'health')):
            monkeypatch.setattr(package, child, getattr(package, child))
            monkeypatch.delitem(sys.modules, f"{package.__name__}.{child}")

        urlconf = importlib.import_module('potta.urls')

        assert urlconf.urlpatterns


@pytest.mark.django_db
class TestNetwork:

    def test_qr_string(self, api_client):
        with mock.patch('sync.views.primary_ip_address', return_value='192.168.1.20'):
            body = api_client.get('/api/network/qr-string').json()

        assert body['message'] == 'QR code data generated'
        data = body['data']
        assert data['ip'] == '192.168.1.20'
        qr = json.loads(data['qr_string'])
        assert qr['type'] == 'pottapos_api'
        assert qr['url'] == f"http://192.168.1.20:{data['port']}"
