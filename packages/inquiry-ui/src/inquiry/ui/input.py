"""The input driver.

:class:`Input` owns the terminal while a single question is active. It keeps
track of the row the question started on (``base_row``), scrolls the screen
when the question would overflow the bottom, and re-renders the question
after every key it handles.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Any, Generic, Iterable, Protocol, TypeVar

from inquiry.ui.backend import ClearType, terminal_state
from inquiry.ui.keys import KeyCode, KeyModifiers
from inquiry.ui.layout import Layout, Size
from inquiry.ui.style import dark_red

if TYPE_CHECKING:
    from inquiry.ui.backend import Backend
    from inquiry.ui.keys import KeyEvent

logger = logging.getLogger(__name__)


class Validation(enum.Enum):
    """Outcome of validating a prompt when Enter is pressed."""

    #: Submit the answer.
    FINISH = "finish"
    #: Keep the prompt open; the prompt has updated itself.
    CONTINUE = "continue"


class PromptWidget(Protocol):
    """A root widget the driver can run."""

    def render(self, layout: Layout, backend: Backend) -> None: ...

    def height(self, layout: Layout) -> int: ...

    def cursor_pos(self, layout: Layout) -> tuple[int, int]: ...

    def handle_key(self, key: KeyEvent) -> bool: ...

    def validate(self) -> Validation:
        """Called on Enter. Raise ``ValueError`` with a one-line message to reject."""
        ...

    def finish(self) -> Any:
        """The answer, called once validation returned FINISH."""
        ...

    def has_default(self) -> bool: ...

    def finish_default(self) -> Any:
        """The default answer, called when Esc is pressed and there is one."""
        ...


P = TypeVar("P", bound=PromptWidget)


def _is_ctrl_c(key: KeyEvent) -> bool:
    return (
        key.code is KeyCode.CHAR
        and key.char == "c"
        and KeyModifiers.CONTROL in key.modifiers
    )


class Input(Generic[P]):
    """Renders *prompt* and feeds it keys until it is answered."""

    def __init__(self, prompt: P, backend: Backend, hide_cursor: bool = False) -> None:
        self.prompt = prompt
        self.backend = backend
        self.hide_cursor = hide_cursor
        self._size = Size(0, 0)
        self._base_row = 0

    @property
    def base_row(self) -> int:
        return self._base_row

    def _layout(self) -> Layout:
        return Layout.new(0, self._size).with_offset(0, self._base_row)

    def _adjust_scrollback(self, height: int) -> None:
        th = self._size.height
        if self._base_row >= th - height:
            dist = min(self._base_row + height - th + 1, self._base_row)
            if dist <= 0:
                return
            logger.debug("scrolling up %d lines to fit %d rows", dist, height)
            self._base_row -= dist
            self.backend.scroll_up(dist)
            self.backend.move_cursor_to(0, self._base_row)

    def _set_cursor_pos(self) -> None:
        col, row = self.prompt.cursor_pos(self._layout())
        self.backend.move_cursor_to(col, self._base_row + row)

    def _clear(self) -> None:
        self.backend.move_cursor_to(0, self._base_row)
        self.backend.clear(ClearType.FROM_CURSOR_DOWN)

    def _render(self) -> None:
        self._size = self.backend.size()
        height = self.prompt.height(self._layout())
        self._adjust_scrollback(height)
        self._clear()

        self.prompt.render(self._layout(), self.backend)

        self._set_cursor_pos()
        self.backend.flush()

    def _show_error(self, message: str) -> None:
        height = self.prompt.height(self._layout()) + 1
        self._adjust_scrollback(height)

        self.backend.move_cursor_to(0, self._base_row + height - 1)
        self.backend.clear(ClearType.FROM_CURSOR_DOWN)
        self.backend.write_styled(dark_red(">>"))
        self.backend.write(f" {message}")

        self._set_cursor_pos()
        self.backend.flush()

    def _move_below(self) -> None:
        height = self.prompt.height(self._layout())
        self.backend.move_cursor_to(0, self._base_row + height)
        self.backend.flush()

    def run(self, events: Iterable[KeyEvent]) -> Any:
        """Run until the prompt is answered and return the answer.

        Leaves the cursor at the start of the (now cleared) question row, so
        the caller can print the answered question there.

        Raises ``KeyboardInterrupt`` on Ctrl-C and ``EOFError`` when the input
        ends. Terminal state is restored in every case.
        """
        self._size = self.backend.size()

        with terminal_state(self.backend, self.hide_cursor):
            _, self._base_row = self.backend.get_cursor_pos()
            self._render()

            for key in events:
                if _is_ctrl_c(key):
                    self._move_below()
                    raise KeyboardInterrupt

                if key.code is KeyCode.NULL:
                    self._move_below()
                    raise EOFError

                if key.code is KeyCode.ESC and self.prompt.has_default():
                    self._clear()
                    return self.prompt.finish_default()

                if key.code is KeyCode.ENTER:
                    try:
                        validation = self.prompt.validate()
                    except ValueError as e:
                        logger.debug("validation failed: %s", e)
                        self._show_error(str(e))
                        continue

                    if validation is Validation.FINISH:
                        self._clear()
                        return self.prompt.finish()
                    handled = True
                else:
                    handled = self.prompt.handle_key(key)

                if handled:
                    self._render()

        raise EOFError
