"""Question kinds built on the widgets.

Every question pairs a :class:`~inquiry.ui.widgets.Prompt` header with a body
widget drawn right after it, and implements the
:class:`~inquiry.ui.input.PromptWidget` protocol so :class:`~inquiry.ui.input.Input`
can run it. :func:`ask` runs a question and prints the answered form::

    ✔ Pick a colour · red
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence, Union

from inquiry.ui.backend import TerminalBackend
from inquiry.ui.config import get_config
from inquiry.ui.events import Events
from inquiry.ui.input import Input, Validation
from inquiry.ui.keybindings import Movement
from inquiry.ui.keys import KeyCode, KeyModifiers
from inquiry.ui.select import List, Select
from inquiry.ui.style import (
    ARROW,
    BOX_LIGHT_HORIZONTAL,
    SQUARE,
    SQUARE_FILLED,
    Color,
    cyan,
    dark_grey,
    light_green,
)
from inquiry.ui.utils import visible_width
from inquiry.ui.widgets import CharInput, Prompt, StringInput, Text, write_finished_message

if TYPE_CHECKING:
    from inquiry.ui.backend import Backend
    from inquiry.ui.keys import KeyEvent
    from inquiry.ui.layout import Layout
    from inquiry.ui.widget import Widget

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


@dataclass
class Choice:
    """A selectable entry. ``value`` defaults to ``text``."""

    text: str
    value: Any = None

    def __post_init__(self) -> None:
        if self.value is None:
            self.value = self.text


@dataclass
class Separator:
    """A non-selectable line between choices."""

    text: str = field(default=BOX_LIGHT_HORIZONTAL * 15)


ChoiceItem = Union[Choice, Separator]


def _to_item(item: ChoiceItem | str) -> ChoiceItem:
    if isinstance(item, (Choice, Separator)):
        return item
    return Choice(item)


class ChoiceList(List):
    """Choices and separators laid out one per row (or more when wrapped).

    With ``checkboxes`` enabled each choice carries a checked flag, drawn as
    a filled or empty square in front of its text.
    """

    def __init__(
        self,
        items: Iterable[ChoiceItem | str],
        page_size: int | None = None,
        should_loop: bool | None = None,
        checkboxes: bool = False,
    ) -> None:
        config = get_config()
        self.items: list[ChoiceItem] = [_to_item(item) for item in items]
        self._texts = [Text(item.text) for item in self.items]
        self._page_size = page_size if page_size is not None else config.page_size
        self._should_loop = should_loop if should_loop is not None else config.should_loop
        self.checked: list[bool] | None = [False] * len(self.items) if checkboxes else None

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> ChoiceItem:
        return self.items[index]

    def is_selectable(self, index: int) -> bool:
        return isinstance(self.items[index], Choice)

    def page_size(self) -> int:
        return self._page_size

    def should_loop(self) -> bool:
        return self._should_loop

    def _prefix(self, index: int, hovered: bool) -> str:
        prefix = f"{ARROW} " if hovered else "  "
        if self.checked is not None and self.is_selectable(index):
            prefix += f"{SQUARE_FILLED if self.checked[index] else SQUARE} "
        return prefix

    def _text_layout(self, index: int, layout: Layout) -> Layout:
        indent = visible_width(self._prefix(index, False))
        return layout.with_offset(layout.offset_x + indent, layout.offset_y).with_line_offset(0)

    def height_at(self, index: int, layout: Layout) -> int:
        return self._texts[index].height(self._text_layout(index, layout))

    def render_item(
        self, index: int, hovered: bool, layout: Layout, backend: Backend
    ) -> None:
        text = self._texts[index]
        text_layout = self._text_layout(index, layout)

        if isinstance(self.items[index], Separator):
            backend.write("  ")
            backend.set_fg(Color.DARK_GREY)
            text.render(text_layout, backend)
            backend.set_fg(Color.RESET)
            return

        if hovered:
            backend.write_styled(cyan(f"{ARROW} "))
        else:
            backend.write("  ")

        if self.checked is not None:
            if self.checked[index]:
                backend.write_styled(light_green(f"{SQUARE_FILLED} "))
            else:
                backend.write_styled(dark_grey(f"{SQUARE} "))

        if hovered:
            backend.set_fg(Color.CYAN)
        text.render(text_layout, backend)
        if hovered:
            backend.set_fg(Color.RESET)


# ---------------------------------------------------------------------------
# Base question
# ---------------------------------------------------------------------------


class Question:
    """A prompt header followed by a body widget on the same line."""

    #: Whether the driver should hide the terminal cursor.
    hide_cursor = False

    def __init__(self, prompt: Prompt) -> None:
        self.prompt = prompt

    @property
    def message(self) -> str:
        return self.prompt.message

    def body(self) -> Widget:
        raise NotImplementedError

    def render(self, layout: Layout, backend: Backend) -> None:
        self.prompt.render(layout, backend)
        self.body().render(layout, backend)

    def height(self, layout: Layout) -> int:
        # the body starts on the prompt's last row
        return self.prompt.height(layout) + self.body().height(layout) - 1

    def cursor_pos(self, layout: Layout) -> tuple[int, int]:
        prompt_pos = self.prompt.cursor_pos(layout)
        col, row = self.body().cursor_pos(layout.with_cursor_pos(prompt_pos))
        return col, prompt_pos[1] + row

    def handle_key(self, key: KeyEvent) -> bool:
        return self.body().handle_key(key)

    def validate(self) -> Validation:
        return Validation.FINISH

    def finish(self) -> Any:
        raise NotImplementedError

    def has_default(self) -> bool:
        return False

    def finish_default(self) -> Any:
        raise ValueError(f"{type(self).__name__} has no default")

    def format_answer(self, answer: Any) -> str:
        return str(answer)

    def write_answer(self, answer: Any, backend: Backend) -> None:
        backend.write_styled(cyan(self.format_answer(answer)))


# ---------------------------------------------------------------------------
# Select
# ---------------------------------------------------------------------------


class SelectPrompt(Question):
    """Pick one choice from a list. Answers with the :class:`Choice`."""

    def __init__(
        self,
        message: str,
        choices: Iterable[ChoiceItem | str],
        default: int | None = None,
        page_size: int | None = None,
        should_loop: bool | None = None,
    ) -> None:
        super().__init__(Prompt(message))
        self.hide_cursor = get_config().hide_cursor
        self.select = Select(ChoiceList(choices, page_size, should_loop))
        if default is not None:
            if not 0 <= default < len(self.select.list) or not self.select.list.is_selectable(
                default
            ):
                raise ValueError(f"default {default} is not a selectable choice")
            self.select.set_at(default)

    def body(self) -> Select[ChoiceList]:
        return self.select

    def finish(self) -> Choice:
        return self.select.selected

    def format_answer(self, answer: Choice) -> str:
        return answer.text


class MultiSelectPrompt(Question):
    """Check any number of choices.

    Space toggles the hovered choice, ``a`` toggles all of them and ``i``
    inverts the selection. Answers with the checked choices in list order.
    """

    def __init__(
        self,
        message: str,
        choices: Iterable[ChoiceItem | str],
        checked: Sequence[int] = (),
        page_size: int | None = None,
        should_loop: bool | None = None,
    ) -> None:
        super().__init__(Prompt(message))
        self.hide_cursor = get_config().hide_cursor
        self.select = Select(ChoiceList(choices, page_size, should_loop, checkboxes=True))
        for index in checked:
            if not self.choices.is_selectable(index):
                raise ValueError(f"choice {index} cannot be checked")
            self._checked[index] = True

    @property
    def choices(self) -> ChoiceList:
        return self.select.list

    @property
    def _checked(self) -> list[bool]:
        checked = self.choices.checked
        assert checked is not None
        return checked

    def body(self) -> Select[ChoiceList]:
        return self.select

    def _selectable(self) -> list[int]:
        return [i for i in range(len(self.choices)) if self.choices.is_selectable(i)]

    def handle_key(self, key: KeyEvent) -> bool:
        if key.code is KeyCode.CHAR and not (
            key.modifiers & (KeyModifiers.CONTROL | KeyModifiers.ALT)
        ):
            if key.char == " ":
                at = self.select.at
                self._checked[at] = not self._checked[at]
                return True
            if key.char == "a":
                selectable = self._selectable()
                value = not all(self._checked[i] for i in selectable)
                for i in selectable:
                    self._checked[i] = value
                return True
            if key.char == "i":
                for i in self._selectable():
                    self._checked[i] = not self._checked[i]
                return True

        return self.select.handle_key(key)

    def finish(self) -> list[Choice]:
        return [
            item
            for item, checked in zip(self.choices.items, self._checked)
            if checked and isinstance(item, Choice)
        ]

    def format_answer(self, answer: list[Choice]) -> str:
        return ", ".join(choice.text for choice in answer)


# ---------------------------------------------------------------------------
# Text entry
# ---------------------------------------------------------------------------


class InputPrompt(Question):
    """Free text. An empty answer falls back to ``default`` when given."""

    def __init__(
        self,
        message: str,
        default: str | None = None,
        validate: Callable[[str], None] | None = None,
        mask: str | None = None,
    ) -> None:
        super().__init__(Prompt(message, hint=default))
        self.default = default
        self._validate = validate
        self.input = StringInput(mask=mask)

    def body(self) -> StringInput:
        return self.input

    def validate(self) -> Validation:
        if not self.input.has_value() and self.has_default():
            return Validation.FINISH
        if self._validate is not None:
            self._validate(self.input.value)
        return Validation.FINISH

    def finish(self) -> str:
        if not self.input.has_value() and self.default is not None:
            return self.default
        return self.input.finish()

    def has_default(self) -> bool:
        return self.default is not None

    def finish_default(self) -> str:
        if self.default is None:
            raise ValueError("InputPrompt has no default")
        return self.default

    def format_answer(self, answer: str) -> str:
        if self.input.mask is not None:
            return self.input.mask * len(answer)
        return answer


def _yes_no(c: str) -> str | None:
    return c if c in ("y", "Y", "n", "N") else None


class ConfirmPrompt(Question):
    """Yes or no, typed as a single ``y`` or ``n``."""

    def __init__(self, message: str, default: bool | None = None) -> None:
        if default is None:
            hint = "y/n"
        elif default:
            hint = "Y/n"
        else:
            hint = "y/N"
        super().__init__(Prompt(message, hint=hint))
        self.default = default
        self.input = CharInput(_yes_no)

    def body(self) -> CharInput:
        return self.input

    def validate(self) -> Validation:
        if self.input.value is None and self.default is None:
            raise ValueError("Please enter y or n")
        return Validation.FINISH

    def finish(self) -> bool:
        if self.input.value is None:
            return self.finish_default()
        return self.input.value.lower() == "y"

    def has_default(self) -> bool:
        return self.default is not None

    def finish_default(self) -> bool:
        if self.default is None:
            raise ValueError("ConfirmPrompt has no default")
        return self.default

    def format_answer(self, answer: bool) -> str:
        return "Yes" if answer else "No"


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


def int_filter_map_char(c: str) -> str | None:
    return c if c in "0123456789" or c in ("-", "+") else None


def float_filter_map_char(c: str) -> str | None:
    if int_filter_map_char(c) is not None or c in (".", "e", "E"):
        return c
    return None


_NUMBER_STEPS: dict[Movement, int] = {
    Movement.UP: 1,
    Movement.DOWN: -1,
    Movement.PAGE_UP: 10,
    Movement.PAGE_DOWN: -10,
}


class _NumberPrompt(Question):
    """Shared behaviour of :class:`IntPrompt` and :class:`FloatPrompt`."""

    number_type: Callable[[str], Any]
    filter_map_char: Callable[[str], str | None]

    def __init__(
        self,
        message: str,
        default: Any = None,
        validate: Callable[[Any], None] | None = None,
    ) -> None:
        hint = self.format_answer(default) if default is not None else None
        super().__init__(Prompt(message, hint=hint))
        self.default = default
        self._validate = validate
        self.input = StringInput(type(self).filter_map_char)

    def body(self) -> StringInput:
        return self.input

    def parse(self) -> Any:
        """Parse the typed value, raising ``ValueError`` when it is not a number."""
        return type(self).number_type(self.input.value)

    def handle_key(self, key: KeyEvent) -> bool:
        if self.input.handle_key(key):
            return True

        movement = Movement.from_key(key)
        step = _NUMBER_STEPS.get(movement) if movement is not None else None
        if step is None:
            return False

        try:
            n = self.parse()
        except ValueError:
            return False

        self.input.set_value(self.format_answer(n + step))
        return True

    def validate(self) -> Validation:
        if not self.input.has_value() and self.has_default():
            return Validation.FINISH
        n = self.parse()
        if self._validate is not None:
            self._validate(n)
        return Validation.FINISH

    def finish(self) -> Any:
        if not self.input.has_value() and self.default is not None:
            return self.default
        return self.parse()

    def has_default(self) -> bool:
        return self.default is not None

    def finish_default(self) -> Any:
        if self.default is None:
            raise ValueError(f"{type(self).__name__} has no default")
        return self.default


class IntPrompt(_NumberPrompt):
    number_type = int
    filter_map_char = staticmethod(int_filter_map_char)


class FloatPrompt(_NumberPrompt):
    number_type = float
    filter_map_char = staticmethod(float_filter_map_char)

    def format_answer(self, answer: float) -> str:
        if answer != 0 and math.isfinite(answer) and abs(math.log10(abs(answer))) > 19:
            return f"{answer:e}"
        return str(answer)


# ---------------------------------------------------------------------------
# ask
# ---------------------------------------------------------------------------


def ask(
    question: Question,
    backend: Backend | None = None,
    events: Iterable[KeyEvent] | None = None,
) -> Any:
    """Run *question* and return its answer.

    The question is replaced by ``✔ <message> · <answer>`` once answered.
    Defaults to the process terminal for both output and input.
    """
    if backend is None:
        backend = TerminalBackend()
    if events is None:
        events = Events()

    answer = Input(question, backend, hide_cursor=question.hide_cursor).run(events)
    logger.debug("%s answered", type(question).__name__)

    write_finished_message(question.message, backend)
    question.write_answer(answer, backend)
    backend.write("\n")
    backend.flush()
    return answer
