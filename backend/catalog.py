"""catalog.py - stateless proxy to The Movie Database (TMDB).

Upstream JSON is returned verbatim. No caching, no retries.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class CatalogClient:
    def __init__(self, api_key: Optional[str], base_url: str = 'https://api.themoviedb.org/3',
                 transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 15):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.transport = transport
        self.timeout = timeout

    async def _get(self, path: str, params: Dict[str, Any], failure: str) -> Dict[str, Any]:
        if not self.api_key:
            raise ConfigurationError('TMDB API key not configured')
        params = {'api_key': self.api_key, **params}
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                resp = await client.get(f'{self.base_url}{path}', params=params, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.error('TMDB request %s failed: %s', path, exc)
            raise UpstreamError(failure) from exc
        if resp.status_code != 200:
            logger.error('TMDB request %s returned %s', path, resp.status_code)
            raise UpstreamError(failure)
        return resp.json()

    async def search(self, query: Optional[str] = None, genre: Optional[str] = None,
                     year: Optional[str] = None, page: int = 1) -> Dict[str, Any]:
        """Search by text, else discover by genre/year, else list popular movies."""
        params: Dict[str, Any] = {'page': page}
        if query and query.strip():
            path = '/search/movie'
            params['query'] = query
            if year:
                params['year'] = year
        elif genre or year:
            path = '/discover/movie'
            if genre:
                params['with_genres'] = genre
            if year:
                params['year'] = year
            params['sort_by'] = 'popularity.desc'
        else:
            path = '/movie/popular'
        return await self._get(path, params, 'Failed to search movies')

    async def genres(self) -> Dict[str, Any]:
        return await self._get('/genre/movie/list', {}, 'Failed to fetch genres')
