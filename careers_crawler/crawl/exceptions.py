"""Fatal crawl errors."""


class CrawlError(Exception):
    """The renderer failed on a page after all attempts; the run cannot continue.

    Attributes:
        page_number: Page that could not be loaded
        url: URL of that page
        attempts: Number of render attempts made
    """

    def __init__(self, message: str, page_number: int, url: str, attempts: int) -> None:
        super().__init__(message)
        self.page_number = page_number
        self.url = url
        self.attempts = attempts
