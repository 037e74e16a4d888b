"""Picker view renderer tests."""

from __future__ import annotations

import copy
import unittest
from pathlib import Path

from lazypick.render import (
    STYLE_DIRECTORY,
    STYLE_HEADER,
    STYLE_MESSAGE,
    STYLE_SELECTED,
    Highlight,
    abbreviate_home,
    footer_line,
    list_rows_for_height,
    render,
)
from lazypick.session import PickerSession, recompute_viewport
from lazypick.text import display_width
from lazypick.types import Entry, Mode


def _session(count: int = 3, *, selected: int = 1, height: int = 10, query: str = "") -> PickerSession:
    root = Path("/home/user/project")
    results = [Entry(name="src", path=root / "src", is_directory=True)]
    results += [Entry(name=f"file{i}.py", path=root / f"file{i}.py", is_directory=False) for i in range(1, count)]
    session = PickerSession(
        working_directory=root,
        query=query,
        results=results,
        selected_index=selected,
        viewport_height=list_rows_for_height(height),
    )
    recompute_viewport(session)
    return session


class RenderLayoutTests(unittest.TestCase):
    def test_header_prompt_separator_then_entries(self) -> None:
        session = _session(3, query="fi")
        view = render(session, 40, 10, home=Path("/home/user"))

        self.assertEqual(
            list(view.lines),
            [
                "📁 ~/project",
                "> fi",
                "─" * 40,
                "> 📁 src",
                "  📄 file1.py",
                "  📄 file2.py",
            ],
        )
        self.assertIn(Highlight(0, STYLE_HEADER), view.highlights)
        self.assertIn(Highlight(3, STYLE_SELECTED), view.highlights)

    def test_cursor_marker_only_in_text_entry_mode(self) -> None:
        session = _session(query="ab")
        session.mode = Mode.TEXT_ENTRY

        self.assertEqual(render(session, 40, 10).lines[1], "> ab_")

    def test_selected_directory_uses_selection_style_only(self) -> None:
        session = _session(3, selected=1)
        view = render(session, 40, 10)

        styles_on_row = [highlight.style for highlight in view.highlights if highlight.line_index == 3]
        self.assertEqual(styles_on_row, [STYLE_SELECTED])

    def test_unselected_directory_gets_directory_style(self) -> None:
        session = _session(3, selected=2)
        view = render(session, 40, 10)

        self.assertIn(Highlight(3, STYLE_DIRECTORY), view.highlights)
        self.assertIn(Highlight(4, STYLE_SELECTED), view.highlights)
        self.assertEqual(view.lines[4], "> 📄 file1.py")

    def test_only_viewport_rows_are_rendered(self) -> None:
        session = _session(10, selected=8, height=6)
        view = render(session, 40, 6)

        self.assertEqual(len(view.lines), 6)
        self.assertEqual(session.scroll_offset, 6)
        self.assertEqual(view.lines[3:], ("  📄 file5.py", "  📄 file6.py", "> 📄 file7.py"))

    def test_empty_results_show_message(self) -> None:
        session = PickerSession(working_directory=Path("/tmp"))
        view = render(session, 30, 8)

        self.assertEqual(view.lines[3], "  no matches")
        self.assertIn(Highlight(3, STYLE_MESSAGE), view.highlights)

        session.refresh_pending = True
        self.assertEqual(render(session, 30, 8).lines[3], "  searching…")

    def test_lines_never_exceed_width(self) -> None:
        session = _session(3)
        session.results[1] = Entry(name="x" * 100, path=Path("/tmp/x"), is_directory=False)
        view = render(session, 20, 10)

        for line in view.lines:
            self.assertLessEqual(display_width(line), 20)

    def test_long_working_directory_keeps_its_tail(self) -> None:
        session = PickerSession(working_directory=Path("/very/long/path/to/some/deeply/nested/target"))
        header = render(session, 24, 8, home=Path("/home/nobody")).lines[0]

        self.assertTrue(header.endswith("nested/target"))
        self.assertIn("…", header)
        self.assertLessEqual(display_width(header), 24)

    def test_render_is_pure(self) -> None:
        session = _session(6, selected=4, height=6)
        snapshot = copy.deepcopy(session)

        first = render(session, 30, 6)
        second = render(session, 30, 6)

        self.assertEqual(first, second)
        self.assertEqual(session, snapshot)


class RenderHelperTests(unittest.TestCase):
    def test_abbreviate_home(self) -> None:
        home = Path("/home/user")
        self.assertEqual(abbreviate_home(Path("/home/user"), home), "~")
        self.assertEqual(abbreviate_home(Path("/home/user/a/b"), home), "~/a/b")
        self.assertEqual(abbreviate_home(Path("/etc"), home), "/etc")

    def test_list_rows_for_height_reserves_chrome(self) -> None:
        self.assertEqual(list_rows_for_height(10), 7)
        self.assertEqual(list_rows_for_height(2), 1)

    def test_footer_reports_mode_and_count(self) -> None:
        session = _session(1)
        footer = footer_line(session, 200)

        self.assertTrue(footer.startswith("-- NORMAL -- | 1 entry | Filter: <empty>"))
        session.mode = Mode.TEXT_ENTRY
        session.query = "ma"
        self.assertIn("-- INSERT -- | 1 entry | Filter: ma", footer_line(session, 200))


if __name__ == "__main__":
    unittest.main()
