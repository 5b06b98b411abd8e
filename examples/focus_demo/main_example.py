"""
Demonstration of named loggers with runtime focus.

Three subsystems log through children of the global logger. Focusing on one
of them silences the rest until unfocus() is called.

    FOCUSLOG_TYPE=pretty python examples/focus_demo/main_example.py
"""

from focuslog import logger

# Children copy the level at creation, so configure the root first
logger.with_level("trace")

db = logger.get_logger("db")
http = logger.get_logger("http")
cache = logger.get_logger("cache")


def serve_requests():
    http.info("request served", "path", "/orders", "status", 200)
    db.debug("query executed", "table", "orders", "rows", 12)
    cache.trace("cache miss", key="orders:12")


def main():
    logger.info("demo starting")
    serve_requests()

    # Only the database logger gets through while focused
    logger.focus("db")
    serve_requests()
    logger.unfocus()

    try:
        try:
            raise ConnectionError("connection refused")
        except ConnectionError as exc:
            raise RuntimeError("could not open session") from exc
    except RuntimeError as exc:
        db.with_group("pool").error("session failed", exc, "attempt", 3)

    logger.success("demo finished")


if __name__ == "__main__":
    main()
