import requests

from marvin.services.errors import ServiceError

DEFAULT_TIMEOUT = 10.0


def _send(method: str, url: str, service: str, timeout: float, **kwargs) -> requests.Response:
    try:
        r = requests.request(method, url, timeout=timeout, **kwargs)
    except requests.Timeout as e:
        raise ServiceError(service, f"timed out after {timeout:g}s", retryable=True) from e
    except requests.ConnectionError as e:
        raise ServiceError(service, f"connection failed: {e}", retryable=True) from e
    except requests.RequestException as e:
        raise ServiceError(service, str(e)) from e

    if not r.ok:
        raise ServiceError(service, f"API error: {r.status_code}", retryable=r.status_code >= 500)
    return r


def get(url: str, service: str, timeout: float = DEFAULT_TIMEOUT, **kwargs) -> requests.Response:
    return _send("GET", url, service, timeout, **kwargs)


def post(url: str, service: str, timeout: float = DEFAULT_TIMEOUT, **kwargs) -> requests.Response:
    return _send("POST", url, service, timeout, **kwargs)


def json_body(r: requests.Response, service: str):
    try:
        return r.json()
    except ValueError as e:
        raise ServiceError(service, "malformed JSON body") from e
