"""Command-line entry point: publish a directory of Markdown files to WordPress."""

import argparse
import logging
import sys

from dotenv import load_dotenv

from .config import BLOCK_FORMATS, Settings
from .errors import ConfigError
from .sync import sync_markdown_directory

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG = 2


def build_parser():
    parser = argparse.ArgumentParser(
        prog="wppublish",
        description="Publish a directory of Markdown files to WordPress through the REST API.",
    )
    parser.add_argument("root", nargs="?", default=None,
                        help="directory holding the Markdown posts (default: $POSTS_DIR or ./docs)")
    parser.add_argument("--force", action="store_const", const=True, default=None,
                        help="publish every file, ignoring git change detection")
    parser.add_argument("--publish-drafts", action="store_const", const=True, default=None,
                        help="switch drafts created or updated by this run to published")
    parser.add_argument("--block-format", choices=BLOCK_FORMATS, default=None,
                        help="'gfm' renders HTML into the block attributes, 'markdown' embeds the raw text")
    parser.add_argument("--theme", default=None, help="code highlighting theme stored with gfm blocks")
    parser.add_argument("--replace-media", action="store_const", const=True, default=None,
                        help="replace media library files that have the same file name")
    parser.add_argument("--workers", type=int, default=None, help="documents published in parallel")
    parser.add_argument("--timeout", type=float, default=None, help="seconds to wait for each request")
    parser.add_argument("--no-progress", dest="progress", action="store_false", help="hide the progress bar")
    parser.add_argument("--debug", action="store_true", help="verbose logging, including failed responses")
    return parser


def main(argv=None, environ=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if environ is None:
        load_dotenv()

    logger.info("Starting WordPress publishing process...")
    try:
        settings = Settings.from_env(
            environ,
            root=args.root,
            force=args.force,
            publish_drafts=args.publish_drafts,
            block_format=args.block_format,
            theme=args.theme,
            replace_media=args.replace_media,
            workers=args.workers,
            timeout=args.timeout,
            progress=args.progress and sys.stderr.isatty(),
            debug=args.debug,
        )
        summary = sync_markdown_directory(settings)
    except ConfigError as e:
        logger.error("Fatal error: %s", e)
        return EXIT_CONFIG

    print(summary.report())
    return EXIT_OK if summary.ok else EXIT_FAILURES


def run():
    sys.exit(main())
