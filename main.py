"""
mdox

Command-line entry point for the mdox markdown viewer/editor state engine.
Opens a document (file or URL) through the session core and prints the
rendered HTML and/or the linked documents discovered from it.
"""

import argparse
import asyncio
import logging
import sys

import config
from mdox.controllers import ApplicationController

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdox",
        description="Open a markdown document and inspect what the viewer would show.",
    )
    parser.add_argument("file", nargs="?", help="Markdown file to open")
    parser.add_argument("--url", help="Open a remote markdown document instead of a file")
    parser.add_argument("--links", action="store_true", help="List linked documents")
    parser.add_argument("--html", action="store_true", help="Print the rendered HTML")
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {config.APP_VERSION}")
    return parser


async def run(args: argparse.Namespace) -> int:
    app = ApplicationController()
    if not app.initialize_application():
        return 1

    session = app.get_session_controller()
    try:
        if args.url:
            opened = await session.open_url(args.url)
        else:
            opened = await session.open_root(args.file)

        if not opened:
            error = session.error
            print(error.user_message if error else "Failed to open document", file=sys.stderr)
            return 1

        if args.html:
            print(session.session.rendered_html)

        if args.links:
            await app.get_linked_documents_controller().wait_until_idle()
            for document in session.linked_documents:
                print(f"{document.title}\t{document.locator}")

        if not (args.html or args.links):
            print(session.identity.label)
        return 0
    finally:
        await app.shutdown()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.file and not args.url:
        parser.error("a FILE or --url is required")

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting {config.APP_NAME} {config.APP_VERSION}")
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
