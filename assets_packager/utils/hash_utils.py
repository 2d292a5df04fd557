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

import hashlib
import os

from assets_packager.core.constants import GZIP_SUFFIX, NO_EMBED_SUFFIX


def calculate_md5_stamp(data: str | bytes) -> str:
    """Return the lowercase hex MD5 digest of ``data``.

    Text is hashed as UTF-8. The digest ends up in bundle filenames and in the
    cache stamp table, so it must stay stable across runs.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def final_path(base_path: str, stamp: str | None) -> str:
    """Return the bundle path for ``base_path``, stamped with ``stamp`` if given.

    ``bundled/all.css`` becomes ``bundled/all-<stamp>.css``.
    """
    if stamp is None:
        return base_path
    stem, extension = os.path.splitext(base_path)
    return f"{stem}-{stamp}{extension}"


def no_embed_path(path: str) -> str:
    stem, extension = os.path.splitext(path)
    return f"{stem}{NO_EMBED_SUFFIX}{extension}"


def gzip_path(path: str) -> str:
    return path + GZIP_SUFFIX
