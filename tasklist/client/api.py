"""HTTP client for the task list JSON API."""

import logging
from typing import Any, Dict, List, Optional

import requests

from .. import config
from ..errors import ApiError
from ..schemas import TaskRead

logger = logging.getLogger(__name__)


class TodoApiClient:
    """Thin wrapper over the four ``/todos`` endpoints.

    ``session`` may be any requests-compatible session object (it only needs
    ``request(method, url, json=..., timeout=...)``); a ``requests.Session``
    is created when none is given.
    """

    def __init__(self, base_url: str = None, session=None, timeout: float = None):
        self.base_url = (base_url or config.SERVER_URL).rstrip('/')
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT_SECONDS

    def _request(self, method: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/todos"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"{method} {url} failed: {e}") from e
        try:
            body = response.json()
        except ValueError:
            body = None
        if not 200 <= response.status_code < 300:
            raise ApiError(f"{method} {url} returned {response.status_code}", response.status_code, body)
        return body

    def list_tasks(self) -> List[TaskRead]:
        data = self._request('GET')
        return [TaskRead.model_validate(item) for item in (data or [])]

    def create_task(self, fields: Dict[str, Any]) -> TaskRead:
        """Create a task from JSON-shaped fields (no id) and return it with its id."""
        data = self._request('POST', {'input': fields})
        return TaskRead.model_validate(data)

    def update_task(self, task: TaskRead) -> TaskRead:
        data = self._request('PATCH', {'input': task.to_json()})
        return TaskRead.model_validate(data)

    def delete_tasks(self, ids: List[int]) -> int:
        data = self._request('DELETE', {'ids': list(ids)})
        return int((data or {}).get('count', 0))
