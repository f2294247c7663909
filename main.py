import sys
import asyncio
import argparse
import logging
from mangashelf.core.config import LOG_LEVEL


def extract(url: str, site: str) -> int:
    from mangashelf.services.extractor import ChapterImageExtractor

    async def run():
        extractor = ChapterImageExtractor()
        try:
            return await extractor.extract(url, site)
        finally:
            await extractor.close()

    result = asyncio.run(run())
    for src in result.images:
        print(src)
    if not result.ok:
        print(f"{result.status.value}: {result.error or 'no images found'}", file=sys.stderr)
        return 1
    return 0


def serve(host: str, port: int) -> int:
    import uvicorn
    uvicorn.run("mangashelf.main:app", host=host, port=port)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(prog="mangashelf")
    sub = parser.add_subparsers(dest="command", required=True)

    p_serve = sub.add_parser("serve", help="run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)

    p_extract = sub.add_parser("extract", help="print the page images of a chapter")
    p_extract.add_argument("url")
    p_extract.add_argument("--site", default="")

    args = parser.parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL)

    if args.command == "serve":
        return serve(args.host, args.port)
    return extract(args.url, args.site)

if __name__ == "__main__":
    sys.exit(main())
