"""Run the todo API with uvicorn: ``python -m todo_api``."""

import uvicorn

from todo_api import config


def main() -> None:
    uvicorn.run("todo_api.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
