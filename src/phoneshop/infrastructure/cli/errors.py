"""Shared error handling for the CLI commands."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import click

from phoneshop.domain.exceptions import DomainException


@contextmanager
def domain_errors() -> Iterator[None]:
    """Turn a DomainException into a ClickException carrying its code."""
    try:
        yield
    except DomainException as exc:
        raise click.ClickException(f"[{exc.code}] {exc}")
