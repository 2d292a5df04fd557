# Copyright (c) 2025, NVIDIA CORPORATION.  All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import argparse
import os
import sys

from loguru import logger

from assets_packager.core.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_CONFIG_PATH,
    DEFAULT_CSS_BUNDLE_TO,
    DEFAULT_CSS_SOURCE,
    DEFAULT_JS_BUNDLE_TO,
    DEFAULT_JS_SOURCE,
)
from assets_packager.core.errors import ConfigurationError, PackagerError
from assets_packager.core.options import (
    OnlyFilter,
    PackagerOptions,
    ScriptOptions,
    StylesheetOptions,
    expand_asset_hosts,
)
from assets_packager.package_info import __version__
from assets_packager.packager import AssetsPackager


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        msg = f"expected a positive integer, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        msg = f"expected a non-negative integer, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _asset_hosts(value: str) -> list[str]:
    try:
        return expand_asset_hosts(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assetspkg",
        description="Bundles, minifies and compresses the stylesheet and script groups of a project.",
    )
    parser.add_argument("-r", "--root", type=str, default=None, help="Root directory of the project (default: cwd)")
    parser.add_argument(
        "-c", "--config", type=str, default=None, help=f"Assets config file (default: <root>/{DEFAULT_CONFIG_PATH})"
    )
    parser.add_argument(
        "-j",
        "--concurrent",
        type=_positive_int,
        default=DEFAULT_CONCURRENCY,
        help="Number of files or groups processed at the same time",
    )
    parser.add_argument("-g", "--gzip", action="store_true", help="Also write gzipped bundles")
    parser.add_argument(
        "-b", "--cache-boosters", action="store_true", help="Stamp bundle filenames with a hash of their content"
    )
    parser.add_argument(
        "-n", "--no-embed-version", action="store_true", help="Also write stylesheets without embedded resources"
    )
    parser.add_argument(
        "-e", "--embed-all", action="store_true", help="Embed all eligible resources, not only ?embed ones"
    )
    parser.add_argument(
        "-a", "--asset-hosts", type=_asset_hosts, default=[], help="Asset hosts, e.g. assets[0-3].example.com"
    )
    parser.add_argument("--no-minify-js", action="store_true", help="Do not minify scripts")
    parser.add_argument(
        "-i", "--indent", type=_non_negative_int, default=None, help="Pretty-print scripts that are not minified"
    )
    parser.add_argument(
        "--line-break-at", type=_positive_int, default=None, help="Wrap minified scripts at about this many columns"
    )
    parser.add_argument("-o", "--only", type=str, default=None, help="Comma-separated list of bundles to build")
    parser.add_argument("--css-source", type=str, default=DEFAULT_CSS_SOURCE)
    parser.add_argument("--css-bundle-to", type=str, default=DEFAULT_CSS_BUNDLE_TO)
    parser.add_argument("--js-source", type=str, default=DEFAULT_JS_SOURCE)
    parser.add_argument("--js-bundle-to", type=str, default=DEFAULT_JS_BUNDLE_TO)
    parser.add_argument("-v", "--version", action="version", version=__version__)
    return parser


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(args)


def options_from_args(args: argparse.Namespace) -> PackagerOptions:
    """Turn parsed arguments into options, checking the config file, then the root."""
    root = os.path.abspath(args.root or os.curdir)
    config = os.path.abspath(args.config) if args.config else os.path.join(root, DEFAULT_CONFIG_PATH)

    if not os.path.isfile(config):
        msg = f'"{config}" is missing'
        raise ConfigurationError(msg)
    if not os.path.isdir(root):
        msg = f'"{root}" could not be found'
        raise ConfigurationError(msg)

    return PackagerOptions(
        root=root,
        config=config,
        concurrent=args.concurrent,
        gzip=args.gzip,
        cache_boosters=args.cache_boosters,
        only=OnlyFilter.parse(args.only),
        css=StylesheetOptions(
            source=args.css_source,
            bundle_to=args.css_bundle_to,
            embed_all=args.embed_all,
            safe_embed=args.no_embed_version,
            asset_hosts=args.asset_hosts,
        ),
        js=ScriptOptions(
            source=args.js_source,
            bundle_to=args.js_bundle_to,
            minify=not args.no_minify_js,
            indent=args.indent,
            line_break_at=args.line_break_at,
        ),
    )


def _below_warning(record: dict) -> bool:
    return record["level"].no < logger.level("WARNING").no


def configure_logging() -> list[int]:
    """Progress goes to stdout, warnings and errors to stderr."""
    logger.remove()
    return [
        logger.add(sys.stdout, format="{message}", level="INFO", filter=_below_warning),
        logger.add(sys.stderr, format="{message}", level="WARNING"),
    ]


def main(args: list[str] | None = None) -> int:
    if args is None:
        args = sys.argv[1:]
    if not args:
        build_parser().print_help(sys.stdout)
        return 0

    parsed = parse_args(args)
    handler_ids = configure_logging()
    try:
        AssetsPackager(options_from_args(parsed)).process()
    except PackagerError as e:
        logger.error(str(e))
        return 1
    finally:
        for handler_id in handler_ids:
            logger.remove(handler_id)
    return 0
