from marvin.services import http
from marvin.services.errors import ServiceError


class OnlineBrain:
    """
    Remote language model behind a small proxy.
    POST {"message": ...} -> {"choices": [{"message": {"content": ...}}]}
    """

    service = "llm"

    def __init__(self, proxy_url: str, timeout: float = http.DEFAULT_TIMEOUT):
        self.proxy_url = proxy_url
        self.timeout = timeout

    def ask(self, message: str) -> str:
        r = http.post(self.proxy_url, self.service, self.timeout, json={"message": message})
        data = http.json_body(r, self.service)
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ServiceError(self.service, "malformed response body") from e
        if not isinstance(content, str) or not content.strip():
            raise ServiceError(self.service, "empty completion")
        return content.strip()
