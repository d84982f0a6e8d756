from __future__ import annotations

from app.connections.mongo import init_mongo, close_mongo
from app.simulation.seed import seed
from app.utils.config import configure_logging


def main() -> None:
    configure_logging()
    init_mongo()
    try:
        seed()
    finally:
        close_mongo()


if __name__ == "__main__":
    main()
