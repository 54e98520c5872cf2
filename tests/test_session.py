from __future__ import annotations

import tempfile
import threading
import unittest
from pathlib import Path

from _fake_engine import FakeEngine, fake_pdf_bytes

from restyle_pdf.contracts import ErrorCode, PipelineStage, RestyleConfig
from restyle_pdf.errors import PipelineBusyError
from restyle_pdf.module import RestyleSession
from restyle_pdf.sources import MISSING_FILES_MESSAGE, NOT_A_PDF_MESSAGE, SourceFile


def _pdf(sizes: list[tuple[float, float]], name: str = "doc.pdf") -> SourceFile:
    return SourceFile.from_bytes(fake_pdf_bytes(sizes), name=name, media_type="application/pdf")


class TestRestyleSession(unittest.TestCase):
    def test_happy_path_then_reselect_clears_result(self) -> None:
        session = RestyleSession(engine=FakeEngine())
        self.assertEqual(session.state, PipelineStage.IDLE)
        self.assertFalse(session.can_run)

        self.assertTrue(session.select_content(_pdf([(200, 100)], "content.pdf")))
        self.assertTrue(session.select_style(_pdf([(100, 100)], "style.pdf")))
        self.assertTrue(session.can_run)

        result = session.run()
        self.assertTrue(result.ok)
        self.assertEqual(session.state, PipelineStage.DONE)
        self.assertEqual(session.result_bytes, fake_pdf_bytes([(100, 100)]))
        self.assertIsNone(session.error)
        self.assertFalse(session.running)

        self.assertTrue(session.select_style(_pdf([(50, 50)], "style2.pdf")))
        self.assertIsNone(session.result_bytes)
        self.assertEqual(session.state, PipelineStage.IDLE)

    def test_invalid_selection_keeps_previous_file(self) -> None:
        session = RestyleSession(engine=FakeEngine())
        good = _pdf([(1, 1)], "content.pdf")
        self.assertTrue(session.select_content(good))

        txt = SourceFile.from_bytes(b"hello", name="notes.txt", media_type="text/plain")
        self.assertFalse(session.select_content(txt))
        self.assertIs(session.content, good)
        self.assertEqual(session.error.message, NOT_A_PDF_MESSAGE)
        self.assertIsNone(session.error.code)

        oversized = SourceFile(name="big.pdf", size=11 * 1024 * 1024, media_type="application/pdf", data=b"x")
        self.assertFalse(session.select_content(oversized))
        self.assertEqual(session.error.message, "The content PDF must be smaller than 10MB.")
        self.assertIs(session.content, good)

    def test_reselecting_same_file_is_idempotent(self) -> None:
        session = RestyleSession(engine=FakeEngine())
        src = _pdf([(1, 1)], "content.pdf")

        session.select_style(SourceFile.from_bytes(b"x", name="x.doc", media_type="application/msword"))
        self.assertIsNotNone(session.error)

        self.assertTrue(session.select_content(src))
        first = (session.content, session.style, session.error, session.result, session.state)
        self.assertTrue(session.select_content(src))
        second = (session.content, session.style, session.error, session.result, session.state)
        self.assertEqual(first, second)
        self.assertIsNone(session.error)

    def test_run_without_both_files(self) -> None:
        session = RestyleSession(engine=FakeEngine())
        session.select_content(_pdf([(1, 1)]))
        result = session.run()
        self.assertFalse(result.ok)
        self.assertEqual(session.state, PipelineStage.FAILED)
        self.assertEqual(session.error.message, MISSING_FILES_MESSAGE)

    def test_corrupt_style_leaves_content_selection(self) -> None:
        session = RestyleSession(engine=FakeEngine())
        content = _pdf([(10, 20)], "content.pdf")
        session.select_content(content)
        session.select_style(SourceFile.from_bytes(b"not a pdf", name="style.pdf", media_type="application/pdf"))

        result = session.run()
        self.assertFalse(result.ok)
        self.assertEqual(session.state, PipelineStage.FAILED)
        self.assertEqual(session.error.code, ErrorCode.STYLE_PARSE_ERROR)
        self.assertIsNone(session.result_bytes)
        self.assertIs(session.content, content)

    def test_new_run_clears_previous_error(self) -> None:
        session = RestyleSession(engine=FakeEngine())
        session.select_content(_pdf([]))
        session.select_style(_pdf([(1, 1)]))
        self.assertEqual(session.run().error.code, ErrorCode.CONTENT_EMPTY)

        session.select_content(_pdf([(1, 1)]))
        result = session.run()
        self.assertTrue(result.ok)
        self.assertIsNone(session.error)

    def test_second_run_while_in_flight_is_rejected(self) -> None:
        seen: list[BaseException] = []
        states: list[PipelineStage] = []

        def reenter() -> None:
            states.append(session.state)
            for attempt in (session.run, lambda: session.select_content(_pdf([(5, 5)]))):
                try:
                    attempt()
                except PipelineBusyError as e:
                    seen.append(e)

        session = RestyleSession(engine=FakeEngine(on_load=reenter))
        session.select_content(_pdf([(1, 1)]))
        session.select_style(_pdf([(1, 1)]))

        result = session.run()
        self.assertTrue(result.ok)
        # reentered once per loaded document, both attempts refused each time
        self.assertEqual(len(seen), 4)
        self.assertEqual(states, [PipelineStage.LOADING, PipelineStage.LOADING])
        self.assertFalse(session.running)

    def test_concurrent_selections_are_not_busy(self) -> None:
        session = RestyleSession(engine=FakeEngine())
        sources = [_pdf([(i + 1, i + 1)], f"content{i}.pdf") for i in range(8)]
        barrier = threading.Barrier(len(sources))
        accepted: list[bool] = []
        errors: list[BaseException] = []

        def select(src: SourceFile) -> None:
            barrier.wait()
            try:
                accepted.append(session.select_content(src))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=select, args=(src,)) for src in sources]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertEqual(accepted, [True] * len(sources))
        self.assertIn(session.content, sources)
        self.assertFalse(session.running)

    def test_save_result_uses_dated_name(self) -> None:
        session = RestyleSession(RestyleConfig(output_prefix="resultado"), engine=FakeEngine())
        with self.assertRaises(ValueError):
            session.save_result()

        session.select_content(_pdf([(1, 1)]))
        session.select_style(_pdf([(2, 2)]))
        session.run()

        with tempfile.TemporaryDirectory() as d:
            written = session.save_result(out_dir=Path(d))
            self.assertRegex(written.name, r"^resultado_\d{4}-\d{2}-\d{2}\.pdf$")
            self.assertEqual(written.read_bytes(), session.result_bytes)


if __name__ == "__main__":
    unittest.main()
