import logging
import os

DEBUG = os.getenv("DEBUG", False)

logging.basicConfig(
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    level=logging.INFO,
)

# HTTP and SDK loggers print request URLs, and the model catalog URL carries the API key.
for noisy_logger in ("httpx", "urllib3", "google_genai"):
    logging.getLogger(noisy_logger).setLevel(logging.ERROR)

logger = logging.getLogger("geminiflow")
logger.setLevel(logging.DEBUG if DEBUG else logging.INFO)
