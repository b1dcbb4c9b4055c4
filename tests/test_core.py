from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from django.db import IntegrityError
from django.test import override_settings

from core.database import DatabaseNotFoundError, candidate_paths, database_uri, locate_database, require_database
from core.exceptions import ResourceNotFound, custom_exception_handler
from core.formatting import format_currency, format_rate, round_money, time_ago
from core.pagination import normalize_paging, paginate


class TestPagination:

    @pytest.mark.parametrize('raw, expected', [
        ((1, 50), (1, 50)),
        ((0, 0), (1, 50)),
        (('x', 'y'), (1, 50)),
        ((3, 500), (3, 100)),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_paging(*raw) == expected

    def test_paginate_list(self):
        page = paginate(list(range(7)), 2, 3)
        assert page['items'] == [3, 4, 5]
        assert page['total_pages'] == 3
        assert page['has_next_page'] is True
        assert page['has_previous_page'] is True

    def test_last_page(self):
        page = paginate(list(range(7)), 3, 3)
        assert page['items'] == [6]
        assert page['has_next_page'] is False


class TestFormatting:

    def test_round_money_half_up(self):
        assert round_money(Decimal('2.505')) == Decimal('2.51')
        assert round_money('0.125') == Decimal('0.13')

    def test_currency(self):
        assert format_currency(Decimal('13117.50')) == 'XAF 13,118'

    def test_rate(self):
        assert format_rate(Decimal('19.2500')) == '19.25'
        assert format_rate(Decimal('18.00')) == '18'

    def test_time_ago(self):
        now = datetime(2026, 1, 1, 12, 0, 0)
        assert time_ago(now - timedelta(seconds=10), now) == 'Just now'
        assert time_ago(now - timedelta(minutes=5), now) == '5 min ago'
        assert time_ago(now - timedelta(hours=3), now) == '3h ago'
        assert time_ago(now - timedelta(days=2), now) == '2d ago'


class TestExceptionHandler:

    def test_api_exception_uses_error_envelope(self):
        response = custom_exception_handler(ResourceNotFound('Table not found', 'No table T9'), {})
        assert response.status_code == 404
        assert response.data['error'] == 'Table not found'
        assert response.data['details'] == 'No table T9'
        assert 'timestamp' in response.data

    def test_integrity_error(self):
        response = custom_exception_handler(IntegrityError('UNIQUE constraint failed'), {})
        assert response.status_code == 400
        assert response.data['error'] == 'Database integrity error'

    def test_value_error_is_bad_request(self):
        response = custom_exception_handler(ValueError('Cart items are not valid JSON'), {})
        assert response.status_code == 400
        assert response.data['details'] == 'Cart items are not valid JSON'

    def test_timeout(self):
        assert custom_exception_handler(TimeoutError('slow'), {}).status_code == 408

    def test_unexpected_error_hides_details(self):
        with override_settings(DEBUG=False):
            response = custom_exception_handler(RuntimeError('secret path /var/db'), {})
        assert response.status_code == 500
        assert response.data['details'] == 'An unexpected error occurred'


class TestDatabaseLocator:

    def test_explicit_path_comes_first(self, tmp_path):
        explicit = tmp_path / 'custom.db'
        paths = candidate_paths('pottadb.db', [str(tmp_path)], tmp_path / 'app', explicit)
        assert paths[0] == explicit
        assert paths[1] == tmp_path / 'pottadb.db'

    def test_finds_file_in_search_path(self, tmp_path):
        (tmp_path / 'pottadb.db').write_bytes(b'')
        assert locate_database('pottadb.db', [str(tmp_path)]) == tmp_path / 'pottadb.db'

    def test_missing_file(self, tmp_path):
        assert locate_database('nothere.db', [str(tmp_path)], tmp_path) is None

    def test_uri_opens_read_write_without_creating(self, tmp_path):
        assert database_uri(tmp_path / 'pottadb.db').endswith('pottadb.db?mode=rw')

    def test_require_database_lists_checked_paths(self, tmp_path, settings):
        settings.POTTA_DATABASE = dict(settings.POTTA_DATABASE, FILE_NAME='nothere.db', PATH=None, SEARCH_PATHS=[str(tmp_path)])
        with pytest.raises(DatabaseNotFoundError) as excinfo:
            require_database()
        assert str(tmp_path / 'nothere.db') in excinfo.value.checked_paths
