"""
================================================================================
Locators
================================================================================

Immutable (strategy, selector) values used by page objects and the element
actions engine. Conversion to a Playwright selector string happens only in
the driver adapter.

Usage:
    SUBMIT = By.xpath("//button[@type='submit']")
    EMAIL = By.css("input[name='email']")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass


STRATEGIES = ("css", "xpath", "id", "name", "text", "testid")


@dataclass(frozen=True)
class By:
    """A strategy tag plus selector string identifying zero or more nodes."""

    strategy: str
    selector: str

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown locator strategy: {self.strategy}")
        if not self.selector:
            raise ValueError("Locator selector must not be empty")

    @classmethod
    def css(cls, selector: str) -> "By":
        return cls("css", selector)

    @classmethod
    def xpath(cls, selector: str) -> "By":
        return cls("xpath", selector)

    @classmethod
    def id(cls, value: str) -> "By":
        return cls("id", value)

    @classmethod
    def name(cls, value: str) -> "By":
        return cls("name", value)

    @classmethod
    def text(cls, value: str) -> "By":
        return cls("text", value)

    @classmethod
    def testid(cls, value: str) -> "By":
        return cls("testid", value)

    def to_playwright(self) -> str:
        """Render as a Playwright selector engine string."""
        if self.strategy == "css":
            return f"css={self.selector}"
        if self.strategy == "xpath":
            return f"xpath={self.selector}"
        if self.strategy == "id":
            return f"css=[id=\"{self.selector}\"]"
        if self.strategy == "name":
            return f"css=[name=\"{self.selector}\"]"
        if self.strategy == "testid":
            return f"css=[data-testid=\"{self.selector}\"]"
        return f"text={self.selector}"

    def __str__(self) -> str:
        return f"{self.strategy}={self.selector}"


__all__ = ["By", "STRATEGIES"]
