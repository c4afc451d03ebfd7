# --- Standard library imports ---
import sys
import logging


# --- Custom log levels ---
NOTICE = 25   # Between INFO (20) and WARNING (30), mirrors syslog "notice"
logging.addLevelName(NOTICE, "NOTICE")

# --- Format configuration constants ---
LOG_LEVEL_EMOJIS = {
    logging.DEBUG: "🧱",
    logging.INFO: "🟢",
    NOTICE: "🔔",
    logging.WARNING: "⚠️ ",
    logging.ERROR: "❌",
    logging.CRITICAL: "🔥",
}

LEVEL_NAME_MAP = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}

# --- Formatters ---
class EmojiFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        """
        Formatter that prepends an emoji per
        log level and shortens log level names.
        """
        record.levelemoji = LOG_LEVEL_EMOJIS.get(record.levelno, "")
        record.levelname = LEVEL_NAME_MAP.get(record.levelname, record.levelname)
        return super().format(record)

# --- Public logging setup API ---
def resolve_level(name: str, default: int = logging.INFO) -> int:
    """
    Translate a level name ("DEBUG", "notice", ...) into its number.
    Unknown names fall back to `default`.
    """
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default

def setup_logging(level=logging.INFO) -> None:
    """
    Configure global logging with emoji decorations.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = EmojiFormatter(
        fmt="%(asctime)s %(levelemoji)s %(name)s:%(funcName)s → %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)

def get_logger(name: str) -> logging.Logger:
    """
    Return a namespaced logger for any module.
    """
    return logging.getLogger(f"route_watch.{name}")
