import uvicorn

from .config import get_config
from .main import app


def main():
    config = get_config()
    uvicorn.run(app, host=config.api.host, port=config.api.port)


if __name__ == "__main__":
    main()
