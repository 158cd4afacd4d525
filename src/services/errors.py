class ServiceError(Exception):
    pass


class InvalidURLError(ServiceError):
    pass


class FetchFailedError(ServiceError):
    pass


class NetworkTimeoutError(ServiceError):
    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(f"Network timeout after {timeout_seconds}s: {url}")
        self.url = url
        self.timeout_seconds = timeout_seconds


class MetadataUnavailableError(ServiceError):
    def __init__(self, provider: str, reason: str):
        super().__init__(f"{provider} metadata unavailable: {reason}")
        self.provider = provider
        self.reason = reason
