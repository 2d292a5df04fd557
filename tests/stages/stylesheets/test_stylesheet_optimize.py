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

from unittest.mock import Mock

import pytest

from assets_packager.core.constants import AssetType
from assets_packager.core.errors import MinificationError
from assets_packager.core.options import PackagerOptions, StylesheetOptions
from assets_packager.stages.stylesheets import EnhancedStylesheet, StylesheetOptimizeStage
from assets_packager.tasks import AssetGroupTask, BundleVariant


def _task(*sources: str) -> AssetGroupTask:
    task = AssetGroupTask.for_group(AssetType.STYLESHEETS, "all")
    task.sources = list(sources)
    return task


class TestStylesheetOptimizeStage:
    """Test cases for StylesheetOptimizeStage."""

    @pytest.mark.asyncio
    async def test_concatenates_in_order_and_minifies(self, tmp_path):
        stage = StylesheetOptimizeStage(PackagerOptions(root=str(tmp_path), config="assets.yml"))

        result = await stage.process(_task("a {\n  color: red;\n}\n", "b { margin: 0 }\n"))

        assert result.payload.primary.plain == "a{color:red}b{margin:0}"
        assert result.payload.primary.compressed is None
        assert result.payload.no_embed is None

    def test_builds_enhancer_from_options(self, tmp_path):
        options = PackagerOptions(
            root=str(tmp_path),
            config="assets.yml",
            gzip=True,
            cache_boosters=True,
            css=StylesheetOptions(embed_all=True, safe_embed=True, asset_hosts=["assets0.example.com"]),
        )

        enhancer = StylesheetOptimizeStage(options).enhancer

        assert enhancer.root_path == str(tmp_path)
        assert enhancer.pregzip
        assert enhancer.force_embed
        assert enhancer.no_embed_version
        assert enhancer.crypted_stamp
        assert enhancer.asset_hosts == ["assets0.example.com"]

    @pytest.mark.asyncio
    async def test_payload_comes_from_enhancer(self, tmp_path):
        enhancer = Mock()
        enhancer.process.return_value = EnhancedStylesheet(
            embedded=BundleVariant("embedded", b"gz"), not_embedded=BundleVariant("plain")
        )
        stage = StylesheetOptimizeStage(
            PackagerOptions(root=str(tmp_path), config="assets.yml"), minifier=str.upper, enhancer=enhancer
        )

        result = await stage.process(_task("a", "b"))

        enhancer.process.assert_called_once_with("AB")
        assert result.payload.primary == BundleVariant("embedded", b"gz")
        assert result.payload.no_embed == BundleVariant("plain")

    @pytest.mark.asyncio
    async def test_minifier_failure_names_the_group(self, tmp_path):
        def failing_minifier(css: str) -> str:
            raise RuntimeError(css)

        stage = StylesheetOptimizeStage(
            PackagerOptions(root=str(tmp_path), config="assets.yml"), minifier=failing_minifier
        )

        with pytest.raises(MinificationError, match="stylesheet group 'all'"):
            await stage.process(_task("a{}"))
