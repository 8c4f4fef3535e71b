"""Tests for live discovery through the search provider."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from app.errors import UpstreamError
from app.services.search import (
    CustomSearchClient,
    build_query,
    extract_domain,
    normalize_item,
    start_index,
)


def _response(status_code, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload if payload is not None else {}
    return resp


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestQueryShaping:
    def test_build_query_skips_empty_terms(self):
        assert build_query('calculus', None, '', '  ', 'video') == 'calculus video'

    def test_build_query_keeps_order(self):
        assert build_query('b', 'a', 'c') == 'b a c'

    def test_build_query_all_empty(self):
        assert build_query(None, '') == ''

    def test_start_index_first_page(self):
        assert start_index(1, 10) == 1

    def test_start_index_second_page(self):
        assert start_index(2, 10) == 11

    def test_start_index_custom_page_size(self):
        assert start_index(3, 5) == 11


class TestExtractDomain:
    def test_returns_host(self):
        assert extract_domain('https://www.coursera.org/learn/ml') == 'www.coursera.org'

    def test_malformed_url_is_unknown(self):
        assert extract_domain('not-a-url') == 'unknown'

    def test_missing_host_is_unknown(self):
        assert extract_domain('https://') == 'unknown'

    def test_none_is_unknown(self):
        assert extract_domain(None) == 'unknown'


class TestNormalizeItem:
    def test_full_item(self):
        item = {
            'title': 'T',
            'snippet': 'S',
            'link': 'https://edx.org/course/x',
            'pagemap': {
                'cse_thumbnail': [{'src': 'https://img/t.png'}],
                'metatags': [{'date.published': '2024-02-01'}],
            },
        }
        result = normalize_item(item, subject='Math')
        assert result == {
            'title': 'T',
            'description': 'S',
            'url': 'https://edx.org/course/x',
            'source': 'edx.org',
            'thumbnail': 'https://img/t.png',
            'date_published': '2024-02-01',
            'subject': 'Math',
        }

    def test_item_without_pagemap(self):
        result = normalize_item({'title': 'T', 'link': 'https://a.org'})
        assert result['thumbnail'] is None
        assert result['date_published'] is None
        assert result['description'] is None


# ---------------------------------------------------------------------------
# CustomSearchClient
# ---------------------------------------------------------------------------

class TestCustomSearchClient:
    def _client(self, session, **kwargs):
        kwargs.setdefault('retries', 2)
        kwargs.setdefault('backoff', 0)
        return CustomSearchClient('key', 'cx', session=session, **kwargs)

    def test_sends_provider_params_with_timeout(self):
        session = MagicMock()
        session.get.return_value = _response(200, {'items': []})
        client = self._client(session, timeout=3, site_restrict='coursera.org')

        assert client.list('calculus', 11, 10) == {'items': []}

        _, kwargs = session.get.call_args
        assert kwargs['timeout'] == 3
        assert kwargs['params'] == {
            'key': 'key', 'cx': 'cx', 'q': 'calculus', 'start': 11, 'num': 10,
            'siteSearch': 'coursera.org',
        }

    def test_retries_transient_status(self):
        session = MagicMock()
        session.get.side_effect = [_response(503), _response(200, {'items': []})]
        client = self._client(session)

        assert client.list('q', 1, 10) == {'items': []}
        assert session.get.call_count == 2

    def test_retries_network_errors_then_gives_up(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError('boom')
        client = self._client(session, retries=2)

        with pytest.raises(UpstreamError):
            client.list('q', 1, 10)
        assert session.get.call_count == 3

    def test_timeout_becomes_upstream_error(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout('slow')
        client = self._client(session, retries=0)

        with pytest.raises(UpstreamError):
            client.list('q', 1, 10)

    def test_client_error_is_not_retried(self):
        session = MagicMock()
        session.get.return_value = _response(
            400, {'error': {'message': 'Invalid Value'}}
        )
        client = self._client(session)

        with pytest.raises(UpstreamError) as exc:
            client.list('q', 1, 50)
        assert 'Invalid Value' in exc.value.message
        assert session.get.call_count == 1

    def test_persistent_server_error(self):
        session = MagicMock()
        session.get.return_value = _response(500)
        client = self._client(session, retries=1)

        with pytest.raises(UpstreamError):
            client.list('q', 1, 10)
        assert session.get.call_count == 2


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

class TestDiscoverResources:
    """GET /resources"""

    def test_keyword_scenario(self, client, search_client):
        resp = client.get('/resources?keyword=calculus&page=1&limit=5')
        assert resp.status_code == 200
        assert search_client.calls == [{'query': 'calculus', 'start': 1, 'num': 5}]
        data = resp.get_json()
        assert data['query'] == 'calculus'
        assert data['pagination'] == {'page': 1, 'limit': 5, 'total_results': 1234}

    def test_second_page_start_index(self, client, search_client):
        client.get('/resources?keyword=calculus&page=2&limit=10')
        assert search_client.calls[0]['start'] == 11
        assert search_client.calls[0]['num'] == 10

    def test_defaults_page_and_limit(self, client, search_client):
        client.get('/resources?keyword=algebra')
        assert search_client.calls[0]['start'] == 1
        assert search_client.calls[0]['num'] == 10

    def test_filter_order(self, client, search_client):
        client.get('/resources?difficulty=beginner&type=video&subject=math&keyword=derivatives')
        assert search_client.calls[0]['query'] == 'derivatives math video beginner level'

    def test_normalizes_items_and_echoes_filters(self, client, search_client):
        data = client.get('/resources?subject=math&difficulty=beginner').get_json()
        first, broken = data['resources']
        assert first['source'] == 'www.khanacademy.org'
        assert first['thumbnail'] == 'https://img.example.org/calc.png'
        assert first['subject'] == 'math'
        assert first['difficulty'] == 'beginner'
        assert broken['source'] == 'unknown'

    def test_no_filters_returns_400(self, client, search_client):
        resp = client.get('/resources')
        assert resp.status_code == 400
        assert search_client.calls == []

    def test_invalid_page_returns_400(self, client, search_client):
        assert client.get('/resources?keyword=x&page=0').status_code == 400
        assert client.get('/resources?keyword=x&limit=abc').status_code == 400

    def test_no_items_is_empty_list(self, client, search_client):
        search_client.payload = {'searchInformation': {'totalResults': '0'}}
        data = client.get('/resources?keyword=zzz').get_json()
        assert data['resources'] == []
        assert data['pagination']['total_results'] == 0

    def test_upstream_failure_returns_502(self, client, search_client):
        search_client.error = UpstreamError('Search provider rejected the request: HTTP 400')
        resp = client.get('/resources?keyword=calculus&limit=50')
        assert resp.status_code == 502
        assert resp.get_json()['error_code'] == 'UPSTREAM_ERROR'


class TestSearchByQuery:
    """GET /resources/search"""

    def test_raw_query(self, client, search_client):
        resp = client.get('/resources/search?query=linear+algebra&page=3&limit=5')
        assert resp.status_code == 200
        assert search_client.calls == [{'query': 'linear algebra', 'start': 11, 'num': 5}]

    def test_missing_query_returns_400(self, client, search_client):
        assert client.get('/resources/search').status_code == 400


class TestSearchByFilters:
    """POST /resources/search"""

    def test_body_filters_order(self, client, search_client):
        resp = client.post(
            '/resources/search',
            data=json.dumps({'type': 'video', 'topic': 'limits', 'subject': 'calculus', 'page': 2, 'limit': 5}),
            content_type='application/json',
        )
        assert resp.status_code == 200
        assert search_client.calls == [{'query': 'calculus limits video', 'start': 6, 'num': 5}]
        item = resp.get_json()['resources'][0]
        assert item['search_params']['topic'] == 'limits'

    def test_null_filters_are_skipped(self, client, search_client):
        resp = client.post(
            '/resources/search',
            data=json.dumps({'subject': None, 'topic': 'limits', 'difficulty': '  '}),
            content_type='application/json',
        )
        assert resp.status_code == 200
        assert search_client.calls == [{'query': 'limits', 'start': 1, 'num': 10}]

    def test_empty_body_filters_return_400(self, client, search_client):
        resp = client.post(
            '/resources/search',
            data=json.dumps({'subject': '', 'page': 1}),
            content_type='application/json',
        )
        assert resp.status_code == 400
        assert search_client.calls == []
