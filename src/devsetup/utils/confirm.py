# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from typing import Protocol

import typer

log = logging.getLogger("devsetup")


class Confirmer(Protocol):
    def ask(self, prompt: str, default: bool = False) -> bool: ...


class TyperConfirmer:
    """Blocks on the terminal until the user answers."""

    def ask(self, prompt: str, default: bool = False) -> bool:
        return typer.confirm(f" -> {prompt}", default=default)


class DefaultConfirmer:
    """Answers every prompt with its default (--yes)."""

    def ask(self, prompt: str, default: bool = False) -> bool:
        log.info("auto-answering %r with %s", prompt, "yes" if default else "no")
        return default
