import logging


class HealthCheckFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return "/_stcore/health" not in msg and "/healthz" not in msg


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    for logger_name in ["tornado.access", "streamlit.web.server"]:
        logger = logging.getLogger(logger_name)
        logger.addFilter(HealthCheckFilter())
    # request lines from the Notion SDK transport are noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
