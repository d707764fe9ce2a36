# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/devsetup/utils/helpers.py

from __future__ import annotations

import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional


@contextmanager
def pushd(path: str | Path) -> Iterator[Path]:
    """
    Change into ``path`` for the duration of the block.

    The previous working directory is restored on every exit path,
    including exceptions raised inside the block.
    """
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield Path(path)
    finally:
        os.chdir(previous)


def which(command: str, *, path: Optional[str] = None) -> Optional[str]:
    return shutil.which(command, path=path)


def is_installed(command: str) -> bool:
    return which(command) is not None
