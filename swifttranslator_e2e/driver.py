"""Browser capability surface used by the runner, and its Playwright implementation."""

from __future__ import annotations

from typing import Any, Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .errors import FatalDriverError, ObservationError

# The real input and output boxes share these classes; the output one has no textarea.
BOX_SELECTOR = "div.w-full.h-80.p-3.rounded-lg.ring-1.ring-slate-300.whitespace-pre-wrap"
INPUT_ROLE = "textbox"
INPUT_NAME = "Input Your Singlish Text Here."


class UIDriver(Protocol):
    def navigate(self, url: str) -> None: ...

    def locate_by_role(self, role: str, name: str) -> Any: ...

    def locate_by_selector(self, selector: str) -> Any: ...

    def is_visible(self, element: Any) -> bool: ...

    def set_value(self, element: Any, text: str) -> None: ...

    def append_keystrokes(self, element: Any, text: str, per_char_delay_s: float) -> None: ...

    def read_text(self, element: Any) -> str: ...

    def current_url(self) -> str: ...

    def await_resume(self) -> None: ...

    def screenshot(self, path: str) -> None: ...


def input_box(driver: UIDriver) -> Any:
    return driver.locate_by_role(INPUT_ROLE, INPUT_NAME)


def output_box(driver: UIDriver) -> Any:
    return driver.locate_by_selector(BOX_SELECTOR)


class PlaywrightDriver:
    """`UIDriver` over a Playwright sync `Page`. Elements are `Locator`s."""

    def __init__(self, page: Page, read_timeout_ms: int = 2000):
        self.page = page
        self.read_timeout_ms = read_timeout_ms

    def navigate(self, url: str) -> None:
        try:
            self.page.goto(url, wait_until="domcontentloaded")
        except PlaywrightError as e:
            raise FatalDriverError(f"Could not load {url}: {e}") from e

    def locate_by_role(self, role: str, name: str) -> Locator:
        return self.page.get_by_role(role, name=name)

    def locate_by_selector(self, selector: str) -> Locator:
        # Skip the box that wraps the textarea.
        return self.page.locator(selector).filter(has_not=self.page.locator("textarea")).first

    def is_visible(self, element: Locator) -> bool:
        try:
            return element.is_visible()
        except PlaywrightError as e:
            raise ObservationError(f"Could not check visibility: {e}") from e

    def set_value(self, element: Locator, text: str) -> None:
        try:
            element.fill(text)
        except PlaywrightError as e:
            raise ObservationError(f"Could not fill input: {e}") from e

    def append_keystrokes(self, element: Locator, text: str, per_char_delay_s: float) -> None:
        try:
            element.click()
            element.press_sequentially(text, delay=per_char_delay_s * 1000)
        except PlaywrightError as e:
            raise ObservationError(f"Could not type into input: {e}") from e

    def read_text(self, element: Locator) -> str:
        try:
            return (element.text_content(timeout=self.read_timeout_ms) or "").strip()
        except PlaywrightTimeoutError as e:
            raise ObservationError(f"Output element vanished: {e}") from e
        except PlaywrightError as e:
            raise ObservationError(f"Could not read output: {e}") from e

    def current_url(self) -> str:
        return self.page.url

    def await_resume(self) -> None:
        # A manual refresh fires a fresh `load` event; wait for it with no timeout.
        try:
            self.page.wait_for_event("load", timeout=0)
        except PlaywrightError as e:
            raise FatalDriverError(f"Page closed while waiting for a refresh: {e}") from e

    def screenshot(self, path: str) -> None:
        try:
            self.page.screenshot(path=path)
        except PlaywrightError as e:
            raise ObservationError(f"Could not take screenshot: {e}") from e
