"""Apply one frame of keyboard input to a single-line text buffer."""

from __future__ import annotations

from dataclasses import dataclass

from imcore.api.input_events import KeyEvent, Modifiers
from imcore.api.input_snapshot import KeyboardSnapshot
from imcore.api.memory_entries import CursorRange

_LEFT_KEYS = frozenset({"arrowleft", "left"})
_RIGHT_KEYS = frozenset({"arrowright", "right"})


@dataclass(frozen=True, slots=True)
class TextEditOutcome:
    text: str
    cursor: CursorRange
    changed: bool = False
    copied: str = ""


def _selected(text: str, cursor: CursorRange) -> str:
    start, end = cursor.sorted()
    return text[start:end]


def _delete_selection(text: str, cursor: CursorRange) -> tuple[str, CursorRange]:
    start, end = cursor.sorted()
    return text[:start] + text[end:], CursorRange.one(start)


def _insert(text: str, cursor: CursorRange, value: str) -> tuple[str, CursorRange]:
    text, cursor = _delete_selection(text, cursor)
    index = cursor.primary
    return text[:index] + value + text[index:], CursorRange.one(index + len(value))


def _move(cursor: CursorRange, index: int, *, extend: bool) -> CursorRange:
    return CursorRange(index, cursor.secondary if extend else index)


def _printable(value: str) -> str:
    return "".join(ch for ch in value if ch >= " " and ch != "\x7f")


def _ordered_events(keyboard: KeyboardSnapshot) -> tuple[KeyEvent, ...]:
    if keyboard.events:
        return keyboard.events
    # Snapshots built without an event stream carry only edge sets and text.
    synthesized = [
        KeyEvent("key_down", key, keyboard.modifiers) for key in sorted(keyboard.pressed_keys)
    ]
    synthesized.extend(KeyEvent("char", value, keyboard.modifiers) for value in keyboard.text)
    return tuple(synthesized)


def apply_text_input(text: str, cursor: CursorRange, keyboard: KeyboardSnapshot) -> TextEditOutcome:
    """Return the buffer and cursor after this frame's key and text events."""
    original = text
    cursor = cursor.clamp(len(text))
    copied: list[str] = []
    for event in _ordered_events(keyboard):
        modifiers: Modifiers = event.modifiers if event.modifiers.any else keyboard.modifiers
        if event.event_type == "char":
            value = _printable(event.value)
            if value and not modifiers.ctrl:
                text, cursor = _insert(text, cursor, value)
            continue
        if event.event_type != "key_down":
            continue
        key = event.value.strip().lower()
        if modifiers.ctrl and key in {"a", "c", "x"}:
            if key == "a":
                cursor = CursorRange(len(text), 0)
            elif not cursor.is_empty:
                copied.append(_selected(text, cursor))
                if key == "x":
                    text, cursor = _delete_selection(text, cursor)
            continue
        if key == "backspace":
            if not cursor.is_empty:
                text, cursor = _delete_selection(text, cursor)
            elif cursor.primary > 0:
                index = cursor.primary
                text = text[: index - 1] + text[index:]
                cursor = CursorRange.one(index - 1)
        elif key == "delete":
            if not cursor.is_empty:
                text, cursor = _delete_selection(text, cursor)
            elif cursor.primary < len(text):
                index = cursor.primary
                text = text[:index] + text[index + 1 :]
        elif key in _LEFT_KEYS:
            if not modifiers.shift and not cursor.is_empty:
                cursor = CursorRange.one(cursor.sorted()[0])
            else:
                cursor = _move(cursor, max(0, cursor.primary - 1), extend=modifiers.shift)
        elif key in _RIGHT_KEYS:
            if not modifiers.shift and not cursor.is_empty:
                cursor = CursorRange.one(cursor.sorted()[1])
            else:
                cursor = _move(cursor, min(len(text), cursor.primary + 1), extend=modifiers.shift)
        elif key == "home":
            cursor = _move(cursor, 0, extend=modifiers.shift)
        elif key == "end":
            cursor = _move(cursor, len(text), extend=modifiers.shift)
    return TextEditOutcome(
        text=text,
        cursor=cursor,
        changed=text != original,
        copied="\n".join(copied),
    )
