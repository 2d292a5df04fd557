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

import base64
import gzip
import hashlib
import os

import pytest

from assets_packager.core.constants import MAX_EMBED_SIZE
from assets_packager.stages.stylesheets import StylesheetEnhancer

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
MTIME = 1_300_000_000


@pytest.fixture
def root(tmp_path, write_files):
    write_files(
        tmp_path,
        {
            "images/logo.png": PNG_BYTES,
            "images/icon.png": PNG_BYTES + b"-icon",
            "fonts/big.woff": b"x" * (MAX_EMBED_SIZE + 1),
            "docs/readme.txt": "text",
        },
    )
    for relative in ["images/logo.png", "images/icon.png", "fonts/big.woff", "docs/readme.txt"]:
        os.utime(tmp_path / relative, (MTIME, MTIME))
    return tmp_path


class TestStylesheetEnhancer:
    """Test cases for StylesheetEnhancer."""

    def test_external_urls_are_kept(self, root):
        css = "a{background:url(http://cdn.example.com/a.png)}b{background:url(//cdn/b.png)}c{src:url(data:x)}"

        result = StylesheetEnhancer(str(root)).process(css)

        assert result.embedded.plain == css
        assert result.not_embedded is None

    def test_local_urls_are_stamped(self, root):
        css = "a{background:url('/images/logo.png')}b{background:url(images/icon.png)}"

        result = StylesheetEnhancer(str(root)).process(css)

        assert result.embedded.plain == (
            f"a{{background:url(/images/logo.png?{MTIME})}}b{{background:url(/images/icon.png?{MTIME})}}"
        )

    def test_crypted_stamp(self, root):
        result = StylesheetEnhancer(str(root), crypted_stamp=True).process("a{background:url(/images/logo.png)}")

        digest = hashlib.md5(PNG_BYTES).hexdigest()  # noqa: S324
        assert result.embedded.plain == f"a{{background:url(/images/logo.png?{digest})}}"

    def test_embed_marker(self, root):
        css = "a{background:url(/images/logo.png?embed)}"

        result = StylesheetEnhancer(str(root), no_embed_version=True).process(css)

        encoded = base64.b64encode(PNG_BYTES).decode("ascii")
        assert result.embedded.plain == f"a{{background:url(data:image/png;base64,{encoded})}}"
        assert result.not_embedded.plain == f"a{{background:url(/images/logo.png?{MTIME})}}"

    def test_force_embed_respects_size_and_type(self, root):
        css = "a{background:url(/images/logo.png)}b{src:url(/fonts/big.woff)}c{x:url(/docs/readme.txt)}"

        result = StylesheetEnhancer(str(root), force_embed=True).process(css)

        assert "data:image/png;base64," in result.embedded.plain
        assert f"url(/fonts/big.woff?{MTIME})" in result.embedded.plain
        assert f"url(/docs/readme.txt?{MTIME})" in result.embedded.plain

    def test_asset_hosts_rotate(self, root):
        css = (
            "a{background:url(/images/logo.png)}"
            "b{background:url(/images/icon.png)}"
            "c{background:url(/images/logo.png)}"
        )
        enhancer = StylesheetEnhancer(str(root), asset_hosts=["assets0.example.com", "assets1.example.com"])

        plain = enhancer.process(css).embedded.plain

        assert plain == (
            f"a{{background:url(//assets0.example.com/images/logo.png?{MTIME})}}"
            f"b{{background:url(//assets1.example.com/images/icon.png?{MTIME})}}"
            f"c{{background:url(//assets0.example.com/images/logo.png?{MTIME})}}"
        )
        # rotation starts over for every stylesheet
        assert enhancer.process(css).embedded.plain == plain

    def test_missing_file_is_left_alone(self, root, log_capture):
        css = "a{background:url(/images/missing.png)}"

        result = StylesheetEnhancer(str(root)).process(css)

        assert result.embedded.plain == css
        assert "WARNING" in log_capture.getvalue()
        assert "missing.png" in log_capture.getvalue()

    def test_pregzip(self, root):
        css = "a{background:url(/images/logo.png?embed)}"

        result = StylesheetEnhancer(str(root), pregzip=True, no_embed_version=True).process(css)

        assert gzip.decompress(result.embedded.compressed).decode() == result.embedded.plain
        assert gzip.decompress(result.not_embedded.compressed).decode() == result.not_embedded.plain
