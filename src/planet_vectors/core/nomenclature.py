"""Feature-name lookups against the planetary nomenclature web service.

Failures never raise: they come back as ``FeatureSearchResult(ok=False)`` with
a logged warning, and there is no retry. An empty ``records`` list with
``ok=True`` just means no hits.
"""

import logging
from typing import Optional

import httpx

from planet_vectors.models import FeatureSearchResult

logger = logging.getLogger(__name__)

NOMENCLATURE_URL = "https://planetarynames.wr.usgs.gov/SearchResults"
REQUEST_TIMEOUT = 30.0


def _records(payload) -> list[dict]:
    if isinstance(payload, list):
        return [r for r in payload if isinstance(r, dict)]
    if isinstance(payload, dict):
        for key in ("results", "features", "records"):
            if isinstance(payload.get(key), list):
                return [r for r in payload[key] if isinstance(r, dict)]
        return [payload] if payload else []
    return []


async def _search(params: dict[str, str], client: httpx.AsyncClient,
                  base_url: str) -> tuple[Optional[list[dict]], Optional[str]]:
    try:
        response = await client.get(base_url, params=params)
        response.raise_for_status()
        return _records(response.json()), None
    except httpx.TimeoutException as exc:
        logger.warning("Nomenclature search timed out: %s", exc)
        return None, f"timed out: {exc}"
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "Nomenclature search returned HTTP %s", exc.response.status_code
        )
        return None, f"HTTP {exc.response.status_code}"
    except httpx.HTTPError as exc:
        logger.warning("Nomenclature search failed: %s", exc)
        return None, str(exc)
    except ValueError as exc:
        logger.warning("Nomenclature search returned invalid JSON: %s", exc)
        return None, f"invalid response: {exc}"


async def _run(target: str, query: str, params: dict[str, str],
               client: Optional[httpx.AsyncClient], base_url: str) -> FeatureSearchResult:
    params = {"target": target.strip().upper(), "displayType": "JSON", **params}
    if client is None:
        async with httpx.AsyncClient(
            timeout=REQUEST_TIMEOUT, headers={"User-Agent": "planet-vectors/0.1"}
        ) as own_client:
            records, error = await _search(params, own_client, base_url)
    else:
        records, error = await _search(params, client, base_url)

    if records is None:
        return FeatureSearchResult(ok=False, target=target, query=query, error=error)
    logger.debug("Nomenclature search %r on %s: %d hits", query, target, len(records))
    return FeatureSearchResult(ok=True, target=target, query=query, records=records)


async def search_feature_names(
    target: str, feature_name: str, *,
    client: Optional[httpx.AsyncClient] = None,
    base_url: str = NOMENCLATURE_URL,
) -> FeatureSearchResult:
    """Search named features on a body, e.g. ("Mars", "Olympus")."""
    return await _run(target, feature_name, {"feature": feature_name}, client, base_url)


async def search_feature_type(
    target: str, feature_type: str, *,
    client: Optional[httpx.AsyncClient] = None,
    base_url: str = NOMENCLATURE_URL,
) -> FeatureSearchResult:
    """List every named feature of one type on a body, e.g. ("Mars", "Crater, craters")."""
    return await _run(target, feature_type, {"featureType": feature_type}, client, base_url)
