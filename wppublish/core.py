import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class WordPressAPI:
    # cf https://make.wordpress.org/core/2020/11/05/application-passwords-integration-guide/

    def __init__(self, host, username, app_password, *, timeout=DEFAULT_TIMEOUT):
        self.host = host.rstrip("/")
        self.session = requests.Session()
        self.session.headers.update({"Cache-Control": "no-cache"})
        self.session.auth = (username, app_password)
        self.username = username
        self.timeout = timeout

    def endpoint_url(self, endpoint):
        return f"{self.host}/wp-json/{endpoint}"

    def _request(self, method, endpoint, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        r = self.session.request(method, self.endpoint_url(endpoint), **kwargs)
        if not (200 <= r.status_code < 300):
            logger.debug("%s %s -> %s: %s", method, endpoint, r.status_code, r.text)
        r.raise_for_status()
        return r.json()

    def get(self, endpoint, **params):
        return self._request("GET", endpoint, params=params)

    def paged(self, endpoint, per_page=10, **params):
        page = 1
        page_data = None
        while page_data is None or len(page_data) == per_page:
            page_data = self.get(endpoint, page=page, per_page=per_page, **params)
            yield from page_data
            page += 1

    def post(self, endpoint, **kwargs):
        return self._request("POST", endpoint, **kwargs)

    def put(self, endpoint, **kwargs):
        return self._request("PUT", endpoint, **kwargs)

    @classmethod
    def from_settings(cls, settings):
        return cls(settings.base_url, settings.username, settings.app_password,
                   timeout=settings.timeout)

    def __repr__(self):
        return f"<WordPressAPI {self.host} as {self.username}>"
