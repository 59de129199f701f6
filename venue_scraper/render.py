"""Render engine interface used by the venue scraper.

The pipeline never talks to a browser directly. It opens pages through a
:class:`RenderEngine` and works with the returned :class:`PageHandle`, which
keeps the browser dependency behind a boundary that tests can fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .models import ElementText


class RenderError(RuntimeError):
    """Raised when a render engine fails to load or inspect a page."""


class RenderTimeout(RenderError):
    """Raised when navigation or a wait condition exceeds its timeout."""


@dataclass(slots=True)
class NavigationOptions:
    """How long to wait, and for what, when opening a page."""

    timeout_ms: int
    wait_until: str = "networkidle"


class PageHandle(Protocol):
    """A rendered page inside an isolated browsing context."""

    url: str

    async def title(self) -> str:
        ...

    async def content(self) -> str:
        """Return the serialized DOM of the rendered page."""
        ...

    async def query(self, selector: str) -> list[ElementText]:
        """Return text and ``href`` of every element matching *selector*."""
        ...

    async def click(self, selector: str, *, text_pattern: str | None = None) -> bool:
        """Click the first element matching *selector* (and *text_pattern*).

        Returns False when no such element exists.
        """
        ...

    async def wait_for_count(self, selector: str, more_than: int, timeout_ms: int) -> None:
        """Wait until more than *more_than* elements match *selector*.

        Raises :class:`RenderTimeout` when the condition is not met in time.
        """
        ...

    async def close(self) -> None:
        ...


class RenderEngine(Protocol):
    """Opens pages. One engine is shared by every worker of a run."""

    async def start(self) -> None:
        """Acquire the underlying renderer.

        Raises :class:`RenderError` when it cannot be started.
        """
        ...

    async def open(self, url: str, options: NavigationOptions) -> PageHandle:
        """Open *url* in a fresh browsing context and wait for it to settle.

        Raises :class:`RenderError` (or :class:`RenderTimeout`) on failure;
        the context is released before the exception propagates.
        """
        ...

    async def aclose(self) -> None:
        ...
