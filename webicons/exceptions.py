"""webicons specific exceptions."""


class IconError(Exception):
    """Base class for failures surfaced while resolving an icon blob."""


class IconFetchError(IconError):
    """Raised when an icon request completes with a status other than 200."""

    url: str
    status_code: int

    def __init__(self, url: str, status_code: int) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Got HTTP status {status_code} trying to load {url}.")


class IconTransportError(IconError):
    """Raised on a network error or a timeout while requesting an icon."""

    url: str

    def __init__(self, url: str, cause: str = "") -> None:
        self.url = url
        message = f"Error while getting {url}."
        if cause:
            message = f"{message} {cause}"
        super().__init__(message)


class IconDecodeError(IconError):
    """Raised when the downloaded bytes can't be decoded as an image."""

    url: str

    def __init__(self, url: str, cause: str = "") -> None:
        self.url = url
        message = f"Error while loading image from {url}."
        if cause:
            message = f"{message} {cause}"
        super().__init__(message)


class IconStoreError(IconError):
    """Raised when the icon store can't be opened or read."""

    pass


class CacheAdapterError(Exception):
    """Exception raised when a cache adapter operation fails."""

    pass


class CacheEntryError(ValueError):
    """Exception raised for cache entries that can't be deserialized."""

    pass
