'''Error types raised by the feed core. Per-source errors are contained by the aggregator.'''


class FeedError(Exception):
    '''Base class for all rssfeed errors.'''


class ParseError(FeedError):
    '''Payload could not be traversed as feed markup at all.'''


class FetchError(FeedError):
    '''Base class for failures retrieving a feed payload.'''


class NetworkError(FetchError):
    '''Transport-level failure (DNS, refused connection, broken stream...).'''


class FetchTimeoutError(FetchError, TimeoutError):
    '''The response did not arrive before the fetch deadline.'''


class HttpStatusError(FetchError):
    '''Server answered with a non-2xx status.'''

    def __init__(self, status_code: int, url: str = '') -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f'HTTP {status_code} for {url}' if url else f'HTTP {status_code}')


class ConfigError(FeedError, ValueError):
    '''Invalid configuration, e.g. a non-positive refresh interval or page size.'''
