"""Key table and dispatcher tests.

Bindings are data, so most checks enumerate the tables directly.
"""

from __future__ import annotations

import unittest

from lazypick.keymap import (
    DEFAULT_BINDINGS,
    NAVIGATION_BINDINGS,
    TEXT_ENTRY_BINDINGS,
    KeyDispatcher,
    build_bindings,
    is_chord,
    resolve_key,
)
from lazypick.transitions import (
    Activate,
    Cancel,
    ClearQuery,
    DeleteCharacter,
    GoBack,
    HalfPage,
    JumpToFirst,
    JumpToLast,
    MoveSelection,
    SwitchMode,
    TypeCharacter,
)
from lazypick.types import Mode


class KeyTableTests(unittest.TestCase):
    def test_navigation_table(self) -> None:
        expected = {
            "j": MoveSelection(1),
            "DOWN": MoveSelection(1),
            "k": MoveSelection(-1),
            "UP": MoveSelection(-1),
            "gg": JumpToFirst(),
            "G": JumpToLast(),
            "CTRL_D": HalfPage(1),
            "CTRL_U": HalfPage(-1),
            "ENTER": Activate(),
            "l": Activate(),
            "h": GoBack(),
            "-": GoBack(),
            "i": SwitchMode(Mode.TEXT_ENTRY),
            "/": SwitchMode(Mode.TEXT_ENTRY),
            "ESC": Cancel(),
            "q": Cancel(),
            "CTRL_C": Cancel(),
        }
        for key, transition in expected.items():
            with self.subTest(key=key):
                self.assertEqual(resolve_key(Mode.NAVIGATION, key), transition)

    def test_text_entry_table(self) -> None:
        expected = {
            "ESC": SwitchMode(Mode.NAVIGATION),
            "ENTER": Activate(),
            "BACKSPACE": DeleteCharacter(),
            "CTRL_U": ClearQuery(),
            "CTRL_C": Cancel(),
        }
        self.assertEqual(dict(TEXT_ENTRY_BINDINGS), expected)

    def test_every_mode_has_a_cancel_and_activate_binding(self) -> None:
        for mode, table in DEFAULT_BINDINGS.items():
            with self.subTest(mode=mode):
                self.assertIn(Cancel(), table.values())
                self.assertIn(Activate(), table.values())

    def test_unmapped_navigation_keys_are_ignored(self) -> None:
        for key in ("x", "z", "TAB", "DELETE"):
            self.assertIsNone(resolve_key(Mode.NAVIGATION, key))

    def test_unmapped_printable_text_entry_keys_type_themselves(self) -> None:
        for key in ("x", "j", "q", " ", "é"):
            self.assertEqual(resolve_key(Mode.TEXT_ENTRY, key), TypeCharacter(key))
        self.assertIsNone(resolve_key(Mode.TEXT_ENTRY, "TAB"))

    def test_chords_are_lowercase_multi_character_bindings(self) -> None:
        self.assertTrue(is_chord("gg"))
        self.assertFalse(is_chord("g"))
        self.assertFalse(is_chord("DOWN"))
        self.assertFalse(is_chord("CTRL_D"))


class KeyDispatcherTests(unittest.TestCase):
    def test_gg_chord_jumps_to_first(self) -> None:
        dispatcher = KeyDispatcher()

        self.assertIsNone(dispatcher.dispatch(Mode.NAVIGATION, "g"))
        self.assertEqual(dispatcher.pending, "g")
        self.assertEqual(dispatcher.dispatch(Mode.NAVIGATION, "g"), JumpToFirst())
        self.assertEqual(dispatcher.pending, "")

    def test_broken_chord_falls_back_to_second_key(self) -> None:
        dispatcher = KeyDispatcher()

        dispatcher.dispatch(Mode.NAVIGATION, "g")
        self.assertEqual(dispatcher.dispatch(Mode.NAVIGATION, "j"), MoveSelection(1))
        self.assertEqual(dispatcher.pending, "")

    def test_named_key_cancels_pending_chord(self) -> None:
        dispatcher = KeyDispatcher()

        dispatcher.dispatch(Mode.NAVIGATION, "g")
        self.assertEqual(dispatcher.dispatch(Mode.NAVIGATION, "DOWN"), MoveSelection(1))
        self.assertEqual(dispatcher.pending, "")

    def test_chord_prefix_is_typed_in_text_entry(self) -> None:
        dispatcher = KeyDispatcher()

        self.assertEqual(dispatcher.dispatch(Mode.TEXT_ENTRY, "g"), TypeCharacter("g"))
        self.assertEqual(dispatcher.pending, "")

    def test_uppercase_key_is_not_treated_as_chord_prefix(self) -> None:
        dispatcher = KeyDispatcher()

        self.assertEqual(dispatcher.dispatch(Mode.NAVIGATION, "G"), JumpToLast())
        self.assertEqual(dispatcher.dispatch(Mode.NAVIGATION, "D"), None)
        self.assertEqual(dispatcher.pending, "")

    def test_bound_keys_split_chords_into_characters(self) -> None:
        keys = KeyDispatcher().bound_keys(Mode.NAVIGATION)

        self.assertIn("g", keys)
        self.assertNotIn("gg", keys)
        self.assertEqual(len(keys), len(set(keys)))
        for key in NAVIGATION_BINDINGS:
            if not is_chord(key):
                self.assertIn(key, keys)


class BuildBindingsTests(unittest.TestCase):
    def test_overrides_add_and_replace_bindings(self) -> None:
        bindings = build_bindings({"x": "cancel", "j": "up"}, {"TAB": "clear"})

        self.assertEqual(bindings[Mode.NAVIGATION]["x"], Cancel())
        self.assertEqual(bindings[Mode.NAVIGATION]["j"], MoveSelection(-1))
        self.assertEqual(bindings[Mode.TEXT_ENTRY]["TAB"], ClearQuery())
        self.assertEqual(NAVIGATION_BINDINGS["j"], MoveSelection(1))

    def test_none_unbinds_key(self) -> None:
        bindings = build_bindings({"q": "none"})

        self.assertNotIn("q", bindings[Mode.NAVIGATION])
        self.assertIsNone(resolve_key(Mode.NAVIGATION, "q", bindings))

    def test_unknown_action_is_logged_and_skipped(self) -> None:
        with self.assertLogs("lazypick.keymap", level="WARNING"):
            bindings = build_bindings({"x": "teleport"})

        self.assertNotIn("x", bindings[Mode.NAVIGATION])

    def test_custom_chord_binding_dispatches(self) -> None:
        dispatcher = KeyDispatcher(build_bindings({"zz": "last"}))

        self.assertIsNone(dispatcher.dispatch(Mode.NAVIGATION, "z"))
        self.assertEqual(dispatcher.dispatch(Mode.NAVIGATION, "z"), JumpToLast())


if __name__ == "__main__":
    unittest.main()
