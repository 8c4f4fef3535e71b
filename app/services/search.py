"""Live resource discovery through the Google Custom Search JSON API.

Domain filters (keyword, subject, type, difficulty, ...) are flattened into
one free-text query; results are normalized into resource summaries.
"""

import logging
import time
from urllib.parse import urlparse

import requests
from flask import current_app

from app.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

CUSTOM_SEARCH_URL = 'https://www.googleapis.com/customsearch/v1'

# Transient provider statuses worth another attempt
_RETRY_STATUSES = {429, 500, 502, 503, 504}


class CustomSearchClient:
    """Thin wrapper around the provider's ``cse.list`` call."""

    def __init__(self, api_key, engine_id, timeout=10, retries=2, backoff=0.5,
                 site_restrict='', session=None):
        self.api_key = api_key
        self.engine_id = engine_id
        self.timeout = timeout
        self.retries = retries
        self.backoff = backoff
        self.site_restrict = site_restrict
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=config['GOOGLE_API_KEY'],
            engine_id=config['SEARCH_ENGINE_ID'],
            timeout=config['SEARCH_TIMEOUT'],
            retries=config['SEARCH_RETRIES'],
            backoff=config['SEARCH_BACKOFF'],
            site_restrict=config['SEARCH_SITE_RESTRICT'],
        )

    def list(self, query: str, start: int, num: int) -> dict:
        """Run one search and return the provider's raw JSON payload."""
        params = {
            'key': self.api_key,
            'cx': self.engine_id,
            'q': query,
            'start': start,
            'num': num,
        }
        if self.site_restrict:
            params['siteSearch'] = self.site_restrict

        for attempt in range(self.retries + 1):
            last_attempt = attempt == self.retries
            try:
                response = self.session.get(
                    CUSTOM_SEARCH_URL, params=params, timeout=self.timeout
                )
            except requests.RequestException as e:
                logger.warning(
                    'Search request failed (attempt %d/%d): %s',
                    attempt + 1, self.retries + 1, e,
                )
                if last_attempt:
                    raise UpstreamError(f'Search provider unreachable: {e}') from e
                self._sleep(attempt)
                continue

            if response.status_code in _RETRY_STATUSES and not last_attempt:
                logger.warning(
                    'Search provider returned %d (attempt %d/%d), retrying',
                    response.status_code, attempt + 1, self.retries + 1,
                )
                self._sleep(attempt)
                continue

            if response.status_code >= 400:
                raise UpstreamError(
                    f'Search provider rejected the request: {_provider_message(response)}'
                )

            try:
                return response.json()
            except ValueError as e:
                raise UpstreamError('Search provider returned invalid JSON') from e

        # Loop always returns or raises on the last attempt
        raise UpstreamError('Search provider unavailable')

    def _sleep(self, attempt):
        if self.backoff:
            time.sleep(self.backoff * (2 ** attempt))


def _provider_message(response):
    try:
        return response.json()['error']['message']
    except (ValueError, KeyError, TypeError):
        return f'HTTP {response.status_code}'


def get_search_client():
    return current_app.extensions['search_client']


# ---------------------------------------------------------------------------
# Query and result shaping
# ---------------------------------------------------------------------------

def build_query(*terms) -> str:
    """Join the non-empty terms with single spaces. Order is preserved."""
    return ' '.join(t.strip() for t in terms if t and t.strip())


def start_index(page: int, page_size: int) -> int:
    """1-based offset of the first result on ``page``."""
    return (page - 1) * page_size + 1


def extract_domain(url) -> str:
    """Host segment of ``url``, or ``'unknown'`` when it has none."""
    if not isinstance(url, str) or '//' not in url:
        return 'unknown'
    try:
        host = urlparse(url).hostname
    except ValueError:
        return 'unknown'
    return host or 'unknown'


def normalize_item(item: dict, **metadata) -> dict:
    pagemap = item.get('pagemap') or {}
    thumbnails = pagemap.get('cse_thumbnail') or [{}]
    metatags = pagemap.get('metatags') or [{}]
    result = {
        'title': item.get('title'),
        'description': item.get('snippet'),
        'url': item.get('link'),
        'source': extract_domain(item.get('link')),
        'thumbnail': thumbnails[0].get('src'),
        'date_published': metatags[0].get('date.published'),
    }
    result.update(metadata)
    return result


def search(query: str, page: int = 1, page_size: int = 10, **metadata):
    """Search the provider and return ``(items, total_results)``.

    Extra keyword arguments are echoed into every normalized item.
    """
    if not query:
        raise ValidationError('At least one search term is required')

    data = get_search_client().list(query, start_index(page, page_size), page_size)

    items = [normalize_item(item, **metadata) for item in data.get('items') or []]
    try:
        total = int((data.get('searchInformation') or {}).get('totalResults', 0))
    except (TypeError, ValueError):
        total = 0
    logger.debug('Search %r page %d returned %d items', query, page, len(items))
    return items, total
