import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "info") -> None:
    """Configure root logging once for the server and the polling client."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # httpx logs every request at INFO, which drowns the poller output
    logging.getLogger("httpx").setLevel(logging.WARNING)
