import logging

import uvicorn

from .config import HOST, LOG_LEVEL, PORT


def main() -> None:
    logging.basicConfig(
        level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    uvicorn.run("roomrelay.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
