"""Course catalog download from the outlines REST API."""

import logging
from typing import Any, List, Optional

import requests

from ..config.constants import CatalogConfig
from ..core.exceptions import CatalogFetchError
from ..models.course import CourseInfo
from ..utils import retry_on_exception

logger = logging.getLogger(__name__)


class CatalogClient:
    """Fetches course outlines and condenses them into CourseInfo entries."""

    def __init__(self, url: str = CatalogConfig.OUTLINES_URL, timeout: int = 60,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", CatalogConfig.USER_AGENT)
        self.logger = logging.getLogger(self.__class__.__name__)

    @retry_on_exception(max_retries=2, delay=2.0, exceptions=(requests.ConnectionError, requests.Timeout))
    def _get(self) -> requests.Response:
        return self.session.get(self.url, timeout=self.timeout)

    def fetch_outlines(self) -> Any:
        """
        Download the raw outlines payload.

        Raises:
            CatalogFetchError: On network failure, HTTP error, or a non-JSON body
        """
        self.logger.info(f"Fetching course outlines from {self.url}")
        try:
            response = self._get()
            response.raise_for_status()
        except requests.HTTPError as e:
            raise CatalogFetchError(f"Failed to fetch outlines: {e}") from e
        except requests.RequestException as e:
            raise CatalogFetchError(f"Could not reach {self.url}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise CatalogFetchError(f"Outlines response is not JSON: {e}") from e

    @staticmethod
    def condense(payload: Any) -> List[CourseInfo]:
        """
        Reduce an outlines payload to the fields the parser needs.

        Accepts either a bare list of outlines or ``{"data": [...]}``.
        Outlines without a department or number are dropped.
        """
        outlines = payload.get("data") if isinstance(payload, dict) else payload
        if not isinstance(outlines, list):
            raise CatalogFetchError("Outlines payload must be a list or contain a 'data' list")

        courses = []
        for outline in outlines:
            if not isinstance(outline, dict):
                continue
            try:
                courses.append(CourseInfo.from_dict(outline))
            except ValueError:
                logger.debug(f"Skipping outline without identity: {outline!r}")
        return courses
