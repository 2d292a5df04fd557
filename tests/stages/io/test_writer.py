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

import gzip
import hashlib

import pytest

from assets_packager.core.constants import AssetType
from assets_packager.core.options import PackagerOptions
from assets_packager.stages.io import BundleWriterStage
from assets_packager.tasks import AssetGroupTask, BundlePayload, BundleVariant
from assets_packager.utils.cache_stamps import CacheStampStore
from assets_packager.utils.file_utils import gzip_text


@pytest.fixture
def bundled(tmp_path):
    directory = tmp_path / "public" / "stylesheets" / "bundled"
    directory.mkdir(parents=True)
    return directory


def _task(payload: BundlePayload) -> AssetGroupTask:
    task = AssetGroupTask.for_group(AssetType.STYLESHEETS, "all")
    task.data = ["one.css", "two.css"]
    task.payload = payload
    return task


class TestBundleWriterStage:
    """Test cases for BundleWriterStage."""

    @pytest.mark.asyncio
    async def test_plain_output(self, tmp_path, bundled, log_capture):
        options = PackagerOptions(root=str(tmp_path), config="assets.yml")

        result = await BundleWriterStage(options).process(_task(BundlePayload(BundleVariant("a{color:red}"))))

        assert (bundled / "all.css").read_text() == "a{color:red}"
        assert not (bundled / "all.css.gz").exists()
        assert result.written == [str(bundled / "all.css")]
        assert "  Processed stylesheets group 'all' - squeezing 2 file(s)" in log_capture.getvalue()

    @pytest.mark.asyncio
    async def test_all_variants(self, tmp_path, bundled):
        options = PackagerOptions(root=str(tmp_path), config="assets.yml", gzip=True)
        payload = BundlePayload(
            primary=BundleVariant("embedded", gzip_text("embedded")),
            no_embed=BundleVariant("plain", gzip_text("plain")),
        )

        result = await BundleWriterStage(options).process(_task(payload))

        assert (bundled / "all.css").read_text() == "embedded"
        assert gzip.decompress((bundled / "all.css.gz").read_bytes()) == b"embedded"
        assert (bundled / "all-noembed.css").read_text() == "plain"
        assert gzip.decompress((bundled / "all-noembed.css.gz").read_bytes()) == b"plain"
        assert sorted(result.written) == sorted(
            str(bundled / name) for name in ["all.css", "all.css.gz", "all-noembed.css", "all-noembed.css.gz"]
        )

    @pytest.mark.asyncio
    async def test_cache_boosters(self, tmp_path, bundled):
        options = PackagerOptions(root=str(tmp_path), config="assets.yml", cache_boosters=True)
        stamps = CacheStampStore(str(tmp_path / ".assets.yml.json"))

        await BundleWriterStage(options, stamps).process(_task(BundlePayload(BundleVariant("a{color:red}"))))

        digest = hashlib.md5(b"a{color:red}").hexdigest()  # noqa: S324
        assert (bundled / f"all-{digest}.css").read_text() == "a{color:red}"
        assert not (bundled / "all.css").exists()
        assert stamps.as_dict() == {"stylesheets/all": digest}
