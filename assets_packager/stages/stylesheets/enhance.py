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

from __future__ import annotations

import base64
import itertools
import os
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from assets_packager.core.constants import MAX_EMBED_SIZE
from assets_packager.tasks import BundleVariant
from assets_packager.utils.file_utils import get_fs, gzip_text
from assets_packager.utils.hash_utils import calculate_md5_stamp

if TYPE_CHECKING:
    from collections.abc import Iterator

    import fsspec

URL_RE = re.compile(r"""url\(\s*(['"]?)([^'")]+)\1\s*\)""")
EXTERNAL_URL_RE = re.compile(r"^(?:[a-z][a-z0-9+.-]*:|//)", re.IGNORECASE)
EMBED_MARKER = "embed"

MIME_TYPES = {
    "eot": "application/vnd.ms-fontobject",
    "gif": "image/gif",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "otf": "font/otf",
    "png": "image/png",
    "svg": "image/svg+xml",
    "ttf": "font/ttf",
    "webp": "image/webp",
    "woff": "font/woff",
    "woff2": "font/woff2",
}


@dataclass
class EnhancedStylesheet:
    """Both views of an enhanced stylesheet.

    ``not_embedded`` is only produced when a non-embedding variant was asked for.
    """

    embedded: BundleVariant
    not_embedded: BundleVariant | None = None


@dataclass
class _Reference:
    embedded: str
    plain: str


class StylesheetEnhancer:
    """Rewrites ``url(...)`` references of a minified stylesheet.

    Local references are rewritten to root-absolute, stamped URLs, optionally
    spread over asset hosts in round-robin order. References marked with
    ``?embed`` (or all of them with ``force_embed``) are inlined as base64
    data URIs in the embedded view when the file is a known image or font type
    no larger than ``MAX_EMBED_SIZE``. External and ``data:`` URLs are kept.

    Args:
        root_path: Directory every local URL resolves against, ``/``-prefixed or not.
        pregzip: Also produce gzip-compressed bytes for each view.
        force_embed: Embed every eligible reference, marked or not.
        no_embed_version: Also produce the view without data URIs.
        asset_hosts: Host names to prefix rewritten URLs with.
        crypted_stamp: Stamp URLs with the file's MD5 instead of its mtime.
    """

    def __init__(  # noqa: PLR0913
        self,
        root_path: str,
        *,
        pregzip: bool = False,
        force_embed: bool = False,
        no_embed_version: bool = False,
        asset_hosts: list[str] | None = None,
        crypted_stamp: bool = False,
        fs: fsspec.AbstractFileSystem | None = None,
    ):
        self.root_path = os.path.abspath(root_path)
        self.pregzip = pregzip
        self.force_embed = force_embed
        self.no_embed_version = no_embed_version
        self.asset_hosts = list(asset_hosts or [])
        self.crypted_stamp = crypted_stamp
        self.fs = fs or get_fs(self.root_path)

    def process(self, css: str) -> EnhancedStylesheet:
        hosts = itertools.cycle(self.asset_hosts) if self.asset_hosts else None
        embedded_parts: list[str] = []
        plain_parts: list[str] = []
        position = 0

        for match in URL_RE.finditer(css):
            reference = self._reference(match, hosts)
            embedded_parts.extend((css[position : match.start()], reference.embedded))
            plain_parts.extend((css[position : match.start()], reference.plain))
            position = match.end()
        embedded_parts.append(css[position:])
        plain_parts.append(css[position:])

        embedded = self._variant("".join(embedded_parts))
        not_embedded = self._variant("".join(plain_parts)) if self.no_embed_version else None
        return EnhancedStylesheet(embedded=embedded, not_embedded=not_embedded)

    def _variant(self, plain: str) -> BundleVariant:
        return BundleVariant(plain=plain, compressed=gzip_text(plain) if self.pregzip else None)

    def _reference(self, match: re.Match, hosts: Iterator[str] | None) -> _Reference:
        original = match.group(0)
        url = match.group(2).strip()
        if EXTERNAL_URL_RE.match(url):
            return _Reference(original, original)

        path, _, query = url.partition("?")
        path = path.split("#", 1)[0]
        local_path = os.path.normpath(os.path.join(self.root_path, path.lstrip("/")))
        if os.path.commonpath([local_path, self.root_path]) != self.root_path:
            logger.warning(f"Reference {url} points outside of {self.root_path}, leaving it as is")
            return _Reference(original, original)
        if not self.fs.isfile(local_path):
            logger.warning(f"Referenced file {local_path} not found, leaving {url} as is")
            return _Reference(original, original)

        info = self.fs.info(local_path)
        rewritten = f"url({self._rewrite(local_path, info, hosts)})"

        wants_embed = self.force_embed or EMBED_MARKER in query.split("&")
        data_uri = self._data_uri(local_path, info) if wants_embed else None
        return _Reference(embedded=f"url({data_uri})" if data_uri else rewritten, plain=rewritten)

    def _rewrite(self, local_path: str, info: dict, hosts: Iterator[str] | None) -> str:
        relative = os.path.relpath(local_path, self.root_path).replace(os.sep, "/")
        if self.crypted_stamp:
            stamp = calculate_md5_stamp(self.fs.cat_file(local_path))
        else:
            stamp = str(int(info.get("mtime") or 0))
        url = f"/{relative}?{stamp}"
        if hosts is not None:
            url = f"//{next(hosts)}{url}"
        return url

    def _data_uri(self, local_path: str, info: dict) -> str | None:
        extension = os.path.splitext(local_path)[1].lstrip(".").lower()
        mime_type = MIME_TYPES.get(extension)
        if mime_type is None:
            logger.debug(f"Not embedding {local_path}: unsupported type")
            return None
        if (info.get("size") or 0) > MAX_EMBED_SIZE:
            logger.debug(f"Not embedding {local_path}: larger than {MAX_EMBED_SIZE} bytes")
            return None
        encoded = base64.b64encode(self.fs.cat_file(local_path)).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"
