class ServiceError(Exception):
    """A remote call failed. `retryable` is True for timeouts, dropped connections and 5xx."""

    def __init__(self, service: str, detail: str, retryable: bool = False):
        super().__init__(f"{service}: {detail}")
        self.service = service
        self.detail = detail
        self.retryable = retryable
