"""
Publish Markdown files to Confluence wiki.

Parses Markdown files, converts Markdown content into Atlassian Document Format (ADF) with PlantUML diagrams as macro
extensions, and invokes Confluence API endpoints to publish content, optionally in Confluence Storage Format (XHTML).

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import argparse
import logging
import os.path
import sys
import typing
from io import StringIO
from pathlib import Path
from typing import Any, Iterable, Sequence

from . import __version__
from .domain import ConfluencePageID, DocumentOptions
from .environment import ArgumentError, ConnectionProperties, storage_format_enabled
from .extra import override


class Arguments(argparse.Namespace):
    mdpath: Path
    domain: str | None
    path: str | None
    username: str | None
    api_key: str | None
    personal_access_token: str | None
    space: str | None
    loglevel: str
    root_page: str | None
    use_storage_format: bool | None
    skip_unpublished: bool
    title_from_heading: bool
    local: bool
    output: str | None
    headers: dict[str, str] | None


class KwargsAppendAction(argparse.Action):
    """Append key-value pairs to a dictionary."""

    @override
    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: None | str | Sequence[Any],
        option_string: str | None = None,
    ) -> None:
        try:
            d = dict(map(lambda x: x.split("=", 1), typing.cast(Sequence[str], values)))
        except ValueError:
            raise argparse.ArgumentError(
                self,
                f'Could not parse argument "{values}". It should follow the format: k1=v1 k2=v2 ...',
            ) from None
        setattr(namespace, self.dest, d)


class PositionalOnlyHelpFormatter(argparse.HelpFormatter):
    def _format_usage(
        self,
        usage: str | None,
        actions: Iterable[argparse.Action],
        groups: Iterable[argparse._MutuallyExclusiveGroup],  # pyright: ignore[reportPrivateUsage]
        prefix: str | None,
    ) -> str:
        # filter only positional arguments
        positional_actions = [a for a in actions if not a.option_strings]

        # format usage string with only positional arguments
        usage_str = super()._format_usage(usage, positional_actions, groups, prefix).rstrip()

        # insert [OPTIONS] as a placeholder for all options (detailed below)
        usage_str += " [OPTIONS]\n"

        return usage_str


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(formatter_class=PositionalOnlyHelpFormatter)
    parser.prog = os.path.basename(os.path.dirname(__file__))
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("mdpath", help="Path to Markdown file or directory to convert and publish.")
    parser.add_argument("-d", "--domain", help="Confluence organization domain.")
    parser.add_argument("-p", "--path", help="Base path for Confluence (default: '/wiki/').")
    parser.add_argument("-u", "--username", help="Confluence user name.")
    parser.add_argument(
        "-a",
        "--api-key",
        dest="api_key",
        help="Confluence API key. Refer to documentation how to obtain one.",
    )
    parser.add_argument(
        "--personal-access-token",
        dest="personal_access_token",
        help="Personal access token for Confluence Server and Data Center. User keys are mapped to account IDs.",
    )
    parser.add_argument(
        "-s",
        "--space",
        help="Confluence space key for pages to be published.",
    )
    parser.add_argument(
        "-l",
        "--loglevel",
        choices=[
            logging.getLevelName(level).lower()
            for level in (
                logging.DEBUG,
                logging.INFO,
                logging.WARN,
                logging.ERROR,
                logging.CRITICAL,
            )
        ],
        default=logging.getLevelName(logging.INFO),
        help="Use this option to set the log verbosity.",
    )
    parser.add_argument(
        "-r",
        dest="root_page",
        help="Root Confluence page to create new pages. If omitted, will raise exception when creating new pages.",
    )
    parser.add_argument(
        "--storage-format",
        dest="use_storage_format",
        action="store_const",
        const=True,
        default=None,
        help="Submit pages in Confluence Storage Format (XHTML). (Default, unless overridden by CONFLUENCE_USE_STORAGE_FORMAT.)",
    )
    parser.add_argument(
        "--no-storage-format",
        dest="use_storage_format",
        action="store_const",
        const=False,
        help="Submit pages in Atlassian Document Format (ADF).",
    )
    parser.add_argument(
        "--skip-unpublished",
        dest="skip_unpublished",
        action="store_true",
        default=True,
        help="Skip documents whose front-matter sets 'connie-publish' to false. (Default.)",
    )
    parser.add_argument(
        "--no-skip-unpublished",
        dest="skip_unpublished",
        action="store_false",
        help="Publish documents irrespective of 'connie-publish' in front-matter.",
    )
    parser.add_argument(
        "--title-from-heading",
        dest="title_from_heading",
        action="store_true",
        default=False,
        help="Use the first heading as page title when front-matter has no title.",
    )
    parser.add_argument(
        "--no-title-from-heading",
        dest="title_from_heading",
        action="store_false",
        help="Use the file name as page title when front-matter has no title. (Default.)",
    )
    parser.add_argument(
        "--local",
        action="store_true",
        default=False,
        help="Write Confluence Storage Format or ADF files locally without invoking Confluence API.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Directory to write files to with --local (default: next to the Markdown files).",
    )
    parser.add_argument(
        "--headers",
        nargs="+",
        required=False,
        action=KwargsAppendAction,
        metavar="KEY=VALUE",
        help="Apply custom headers to all Confluence API requests.",
    )
    return parser


def get_help() -> str:
    parser = get_parser()
    with StringIO() as buf:
        parser.print_help(file=buf)
        return buf.getvalue()


def main() -> None:
    parser = get_parser()
    args = Arguments()
    parser.parse_args(namespace=args)

    args.mdpath = Path(args.mdpath)

    logging.basicConfig(
        level=getattr(logging, args.loglevel.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
    )

    options = DocumentOptions(
        root_page_id=ConfluencePageID(args.root_page) if args.root_page else None,
        skip_unpublished=args.skip_unpublished,
        title_from_heading=args.title_from_heading,
    )
    if args.local:
        from .local import LocalConverter

        try:
            use_storage_format = storage_format_enabled(args.use_storage_format)
        except ArgumentError as e:
            parser.error(str(e))
        out_dir = Path(args.output) if args.output else None
        LocalConverter(options, out_dir, use_storage_format).process(args.mdpath)
    else:
        from requests import HTTPError, JSONDecodeError

        from .api import ConfluenceAPI
        from .publisher import Publisher

        try:
            properties = ConnectionProperties(
                domain=args.domain,
                base_path=args.path,
                user_name=args.username,
                api_key=args.api_key,
                personal_access_token=args.personal_access_token,
                space_key=args.space,
                use_storage_format=args.use_storage_format,
                headers=args.headers,
            )
        except ArgumentError as e:
            parser.error(str(e))
        try:
            with ConfluenceAPI(properties) as api:
                Publisher(api, options).process(args.mdpath)
        except HTTPError as err:
            logging.error(err)

            # print details for a response with JSON body
            if err.response is not None:
                try:
                    logging.error(err.response.json())
                except JSONDecodeError:
                    pass

            sys.exit(1)


if __name__ == "__main__":
    main()
