import logging
from logging import Logger


def create_logger(is_production, log_url, name: str = "assistant_files") -> Logger:
    if is_production == "yes":
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
            handlers=[logging.StreamHandler(), logging.FileHandler(log_url)]
        )
    else:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    # The OpenAI SDK logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logger: Logger = logging.getLogger(name)
    return logger
