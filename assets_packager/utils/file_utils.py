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
import gzip
import os
import posixpath
from pathlib import Path

import fsspec
from fsspec.core import get_filesystem_class, split_protocol
from loguru import logger

from assets_packager.core.constants import DIRECTORY_MODE


def get_fs(path: str, storage_options: dict[str, str] | None = None) -> fsspec.AbstractFileSystem:
    if not storage_options:
        storage_options = {}
    protocol, path = split_protocol(path)
    return get_filesystem_class(protocol)(**storage_options)


def make_dir(root: str, directory: str, fs: fsspec.AbstractFileSystem | None = None) -> None:
    """Create every missing segment between ``root`` and ``directory``.

    Segments are created one at a time, in order. Several group processors may
    race to create a shared parent, so "already exists" is tolerated; any other
    filesystem error propagates.

    Args:
        root: Existing directory the target must live under.
        directory: Directory to materialize.
        fs: The filesystem to use.
    """
    fs = fs or get_fs(root)
    relative = os.path.relpath(directory, root)
    if relative == os.curdir:
        return
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        msg = f"Directory {directory} is not under root {root}"
        raise ValueError(msg)

    current = root
    for part in Path(relative).parts:
        current = os.path.join(current, part)
        if fs.exists(current):
            continue
        try:
            fs.mkdir(current, create_parents=False, mode=DIRECTORY_MODE)
        except FileExistsError:
            logger.debug(f"Directory {current} was created concurrently")


def _gather_extension(path: str) -> str:
    name = posixpath.basename(path.rstrip("/"))
    return posixpath.splitext(name)[1][1:].casefold()


def get_all_file_paths_under(
    path: str,
    recurse_subdirectories: bool = False,
    keep_extensions: str | list[str] | None = None,
    fs: fsspec.AbstractFileSystem | None = None,
) -> list[str]:
    """List the files a directory, file or glob pattern stands for.

    Args:
        path: A directory, a single file or a glob pattern. A path that does
            not exist yields no files.
        recurse_subdirectories: Descend into subdirectories of matched directories.
        keep_extensions: Only keep files with these extensions (case-insensitive,
            leading dot optional).
        fs: Filesystem to list on. Derived from ``path`` when not given.

    Returns:
        Matching file paths, sorted and without duplicates.
    """
    fs = fs or get_fs(path)
    allowed_exts = (
        None
        if keep_extensions is None
        else {
            e.casefold().lstrip(".")
            for e in ([keep_extensions] if isinstance(keep_extensions, str) else keep_extensions)
        }
    )
    try:
        roots = fs.expand_path(path, recursive=False)
    except FileNotFoundError:
        roots = []
    records = []

    for root in roots:
        if fs.isdir(root):
            entries = fs.find(root, maxdepth=None if recurse_subdirectories else 1, withdirs=False)
        elif fs.exists(root):
            entries = [root]
        else:
            entries = []

        for raw_path in entries:
            if (allowed_exts is None) or (_gather_extension(raw_path) in allowed_exts):
                records.append(raw_path)

    return sorted(set(records))


def read_text(path: str, fs: fsspec.AbstractFileSystem | None = None) -> str:
    fs = fs or get_fs(path)
    return fs.cat_file(path).decode("utf-8")


def write_bytes(path: str, data: bytes, fs: fsspec.AbstractFileSystem | None = None) -> None:
    fs = fs or get_fs(path)
    fs.pipe_file(path, data)
    logger.debug(f"Written {len(data)} bytes to {path}")


def write_text(path: str, data: str, fs: fsspec.AbstractFileSystem | None = None) -> None:
    write_bytes(path, data.encode("utf-8"), fs)


async def read_text_async(path: str, fs: fsspec.AbstractFileSystem | None = None) -> str:
    return await asyncio.to_thread(read_text, path, fs)


async def write_bytes_async(path: str, data: bytes, fs: fsspec.AbstractFileSystem | None = None) -> None:
    await asyncio.to_thread(write_bytes, path, data, fs)


async def write_text_async(path: str, data: str, fs: fsspec.AbstractFileSystem | None = None) -> None:
    await asyncio.to_thread(write_text, path, data, fs)


def gzip_text(data: str) -> bytes:
    """Compress ``data`` with a fixed header timestamp so reruns are byte-identical."""
    return gzip.compress(data.encode("utf-8"), mtime=0)
