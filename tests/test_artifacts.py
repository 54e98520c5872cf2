from __future__ import annotations

import datetime as dt
import hashlib
import json
import tempfile
import unittest
from pathlib import Path

from restyle_pdf.artifacts import result_filename, serialize_restyle_result, write_result_pdf
from restyle_pdf.contracts import ErrorCode, PipelineStage, RestyleError, RestyleResult


class TestArtifacts(unittest.TestCase):
    def test_result_filename(self) -> None:
        self.assertEqual(result_filename(dt.date(2025, 1, 31)), "resultado_2025-01-31.pdf")
        self.assertEqual(result_filename(dt.date(2025, 1, 31), prefix="out"), "out_2025-01-31.pdf")

    def test_manifest_summarizes_bytes(self) -> None:
        pdf = b"%PDF-1.7 fake"
        r = RestyleResult(ok=True, stage=PipelineStage.DONE, pdf_bytes=pdf, page_count=1, target_size=(10.0, 20.0))
        s1 = serialize_restyle_result(r)
        self.assertEqual(s1, serialize_restyle_result(r))

        d = json.loads(s1)
        self.assertEqual(d["result"], {"byte_length": len(pdf), "sha256": hashlib.sha256(pdf).hexdigest()})
        self.assertNotIn("pdf_bytes", d)
        self.assertEqual(d["target_size"], [10.0, 20.0])

    def test_manifest_untagged_error(self) -> None:
        r = RestyleResult(
            ok=False,
            stage=PipelineStage.VALIDATING,
            error=RestyleError(code=None, message="The selected file is not a valid PDF."),
        )
        d = json.loads(serialize_restyle_result(r))
        self.assertEqual(d["error"], {"code": None, "message": "The selected file is not a valid PDF.", "detail": None})

        r = RestyleResult(
            ok=False,
            stage=PipelineStage.SERIALIZING,
            error=RestyleError(code=ErrorCode.SAVE_ERROR, message="x", detail="y"),
        )
        self.assertEqual(json.loads(serialize_restyle_result(r))["error"]["code"], "SAVE_ERROR")

    def test_write_refuses_failed_results(self) -> None:
        failed = RestyleResult(ok=False, stage=PipelineStage.LOADING)
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(ValueError):
                write_result_pdf(result=failed, out_dir=Path(d))
            self.assertEqual(list(Path(d).iterdir()), [])


if __name__ == "__main__":
    unittest.main()
