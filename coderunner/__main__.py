import argparse

import uvicorn

from coderunner.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the code runner API")
    parser.add_argument("--host", default=settings.server.host)
    parser.add_argument("--port", type=int, default=settings.server.port)
    args = parser.parse_args()

    uvicorn.run("coderunner.main:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
