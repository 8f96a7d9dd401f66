import json
import logging
import re
import traceback
from datetime import datetime, timezone

LOGGER_NAME = "ai_orch"

MASK = "***MASKED***"


class ApiKeyFilter(logging.Filter):
    """Masks provider credentials in log records before they reach a handler."""

    KEY_PATTERN = re.compile(
        # key=VALUE in URL query strings
        r"(?P<prefix>key=)(?P<key1>[^&\s\"']+)"
        r"|"
        # Bearer tokens and Gemini header values
        r"(?P<header_prefix>Bearer\s+|Authorization:\s*Bearer\s*|x-goog-api-key['\"]?:\s*['\"]?)(?P<key2>[^\"'\s,}]+)"
        r"|"
        # Known formats: Google AIza..., Groq gsk_..., OpenAI-style sk-...
        r"(?P<key3>"
        r"AIzaSy[A-Za-z0-9\-_]{33}|"
        r"gsk_[A-Za-z0-9]{20,}|"
        r"sk-[a-zA-Z0-9\-_]{20,}"
        r")"
    )

    # Credentials registered at runtime (exact match)
    KNOWN_KEYS = set()

    @classmethod
    def add_sensitive_keys(cls, keys):
        """Registers credentials to be explicitly masked."""
        if not keys:
            return
        cls.KNOWN_KEYS.update(str(k) for k in keys if k)

    def mask(self, s: str) -> str:
        def replacer(match):
            if match.group("prefix"):
                return f"{match.group('prefix')}{MASK}"
            if match.group("header_prefix"):
                return f"{match.group('header_prefix')}{MASK}"
            return MASK

        s = self.KEY_PATTERN.sub(replacer, s)

        for key in self.KNOWN_KEYS:
            if key in s:
                s = s.replace(key, MASK)
        return s

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self.mask(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: self.mask(v) if isinstance(v, str) else v
                    for k, v in record.args.items()
                }
            else:
                record.args = tuple(
                    self.mask(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )
        return True


class JSONFormatter(logging.Formatter):
    """
    Formats log records as a JSON string.
    """

    def format(self, record):
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }

        if record.exc_info:
            log_record["exception"] = "".join(
                traceback.format_exception(*record.exc_info)
            )

        return json.dumps(log_record, ensure_ascii=False)


def setup_json_logging(level: int = logging.INFO):
    """
    Sets up the root logger to use the JSONFormatter with credential masking.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    handler.addFilter(ApiKeyFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    # httpx logs full request URLs; filter at the source as well as the handler
    for logger_name in ["httpx", "httpcore"]:
        lib_logger = logging.getLogger(logger_name)
        lib_logger.filters.clear()
        lib_logger.addFilter(ApiKeyFilter())
        lib_logger.propagate = True

    logging.getLogger(LOGGER_NAME).info("JSON logging configured.")
