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

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import rcssmin

from assets_packager.core.errors import MinificationError
from assets_packager.core.options import PackagerOptions
from assets_packager.stages.base import ProcessingStage
from assets_packager.stages.stylesheets.enhance import StylesheetEnhancer
from assets_packager.tasks import AssetGroupTask, BundlePayload


@dataclass
class StylesheetOptimizeStage(ProcessingStage[AssetGroupTask, AssetGroupTask]):
    """Concatenates, minifies and enhances the stylesheets of a group.

    The embedded rendition becomes the primary payload; the rendition without
    data URIs is only built when ``css.safe_embed`` is on.

    Args:
        options: Options of the current run.
        minifier: CSS minifier. Defaults to rcssmin.
        enhancer: Embeds and rewrites ``url(...)`` references. Built from ``options`` when not given.
    """

    options: PackagerOptions
    minifier: Callable[[str], str] = field(default=rcssmin.cssmin)
    enhancer: StylesheetEnhancer | None = None
    _name: str = "stylesheet_optimize"

    def __post_init__(self):
        if self.enhancer is None:
            self.enhancer = StylesheetEnhancer(
                self.options.root,
                pregzip=self.options.gzip,
                force_embed=self.options.css.embed_all,
                no_embed_version=self.options.css.safe_embed,
                asset_hosts=self.options.css.asset_hosts,
                crypted_stamp=self.options.cache_boosters,
            )

    def inputs(self) -> list[str]:
        return ["sources"]

    def outputs(self) -> list[str]:
        return ["payload"]

    async def process(self, task: AssetGroupTask) -> AssetGroupTask:
        css = "".join(task.sources)
        try:
            minified = self.minifier(css)
        except Exception as e:
            msg = f"Minifying stylesheet group '{task.group}' failed: {e}"
            raise MinificationError(msg) from e

        enhanced = await asyncio.to_thread(self.enhancer.process, minified)
        task.payload = BundlePayload(primary=enhanced.embedded, no_embed=enhanced.not_embedded)
        return task

    def get_config(self) -> dict[str, Any]:
        return {
            **super().get_config(),
            "embed_all": self.options.css.embed_all,
            "safe_embed": self.options.css.safe_embed,
            "asset_hosts": len(self.options.css.asset_hosts),
        }
