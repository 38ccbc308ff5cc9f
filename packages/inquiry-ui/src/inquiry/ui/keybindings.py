"""Movement keybindings.

Navigation-aware widgets never look at raw key codes for movement; they ask
:meth:`Movement.from_key`, which consults the process-wide
:class:`KeybindingsManager`.
"""

from __future__ import annotations

import enum

from inquiry.ui.keys import KeyEvent, KeyId


class Movement(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "pageUp"
    PAGE_DOWN = "pageDown"
    HOME = "home"
    END = "end"
    PREV_WORD = "prevWord"
    NEXT_WORD = "nextWord"

    @classmethod
    def from_key(cls, key: KeyEvent) -> Movement | None:
        """Return the movement *key* is bound to, if any."""
        return get_keybindings().movement_for(key)


KeybindingsConfig = dict[Movement, KeyId | list[KeyId]]

DEFAULT_KEYBINDINGS: dict[Movement, KeyId | list[KeyId]] = {
    Movement.UP: ["up", "ctrl+p"],
    Movement.DOWN: ["down", "ctrl+n"],
    Movement.LEFT: ["left", "ctrl+b"],
    Movement.RIGHT: ["right", "ctrl+f"],
    Movement.PAGE_UP: "pageUp",
    Movement.PAGE_DOWN: "pageDown",
    Movement.HOME: ["home", "ctrl+a"],
    Movement.END: ["end", "ctrl+e"],
    Movement.PREV_WORD: ["ctrl+left", "alt+left", "alt+b"],
    Movement.NEXT_WORD: ["ctrl+right", "alt+right", "alt+f"],
}


class KeybindingsManager:
    """Maps key identifiers to movements."""

    def __init__(self, config: KeybindingsConfig | None = None) -> None:
        self._movement_to_keys: dict[Movement, list[KeyId]] = {}
        self._key_to_movement: dict[KeyId, Movement] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: KeybindingsConfig) -> None:
        self._movement_to_keys.clear()
        self._key_to_movement.clear()

        for movement, keys in DEFAULT_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._movement_to_keys[movement] = list(key_array)

        # Override with user config
        for movement, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._movement_to_keys[movement] = list(key_array)

        for movement, key_array in self._movement_to_keys.items():
            for key in key_array:
                self._key_to_movement[key] = movement

    def movement_for(self, key: KeyEvent) -> Movement | None:
        return self._key_to_movement.get(key.key_id)

    def matches(self, key: KeyEvent, movement: Movement) -> bool:
        return key.key_id in self._movement_to_keys.get(movement, [])

    def get_keys(self, movement: Movement) -> list[KeyId]:
        """Get keys bound to a movement."""
        return self._movement_to_keys.get(movement, [])

    def set_config(self, config: KeybindingsConfig) -> None:
        self._build_maps(config)


_global_keybindings: KeybindingsManager | None = None


def get_keybindings() -> KeybindingsManager:
    global _global_keybindings
    if _global_keybindings is None:
        _global_keybindings = KeybindingsManager()
    return _global_keybindings


def set_keybindings(manager: KeybindingsManager | None) -> None:
    global _global_keybindings
    _global_keybindings = manager
