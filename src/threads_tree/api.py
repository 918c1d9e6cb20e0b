"""Read-only client for the remote Threads REST API."""

import requests
from loguru import logger

from threads_tree.config import API_BASE_URL, API_TIMEOUT, API_TOKEN_FILES
from threads_tree.core.importer.json_reader import parse_threads_data
from threads_tree.models.entity import ThreadsData


class ThreadsApi:
    """Fetch threads from the hosted API (bearer-token authenticated)."""

    def __init__(self, base_url: str | None = None) -> None:
        url = base_url or API_BASE_URL
        if not url:
            msg = "No API URL configured, pass one or set THREADS_API_URL"
            raise RuntimeError(msg)
        self.base_url = url.rstrip("/")
        self.sess = requests.Session()

        api_token_name: str | None = None
        for token_path in API_TOKEN_FILES:
            try:
                self.api_token = token_path.read_text(encoding="utf-8").strip()
                api_token_name = str(token_path)
                break
            except FileNotFoundError:
                pass
        else:
            msg = f"Cannot find threads API token file, was looking at {API_TOKEN_FILES!r}"
            raise RuntimeError(msg)

        logger.debug("API ready: {!r}, token from {!r}", self.base_url, api_token_name)

    def fetch_threads(self) -> list[dict]:
        """GET /threads and return the raw thread records."""
        logger.debug("Making request: GET {}/threads", self.base_url)
        r = self.sess.get(
            f"{self.base_url}/threads",
            headers={"Authorization": f"Bearer {self.api_token}"},
            timeout=API_TIMEOUT,
        )
        r.raise_for_status()
        rv = r.json()
        threads = rv.get("threads") if isinstance(rv, dict) else None
        if not isinstance(threads, list):
            msg = f"API call failed: GET /threads -> unexpected body {str(rv)[:64]!r}"
            raise RuntimeError(msg)
        return threads

    def load(self) -> ThreadsData:
        """Snapshot of the remote threads. The API exposes no containers or groups."""
        return parse_threads_data({"threads": self.fetch_threads()})
