import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stderr at the given level."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
    # boto3/azure are chatty at INFO
    for noisy_logger in ("botocore", "boto3", "urllib3", "azure"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)
