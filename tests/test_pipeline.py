from __future__ import annotations

import json
import tempfile
from pathlib import Path
import unittest

from tasting_report import config
from tasting_report.models import reset_engine
from tasting_report.pipeline.ingest import load_document, load_report
from tasting_report.schema import ReportInput


class SchemaTests(unittest.TestCase):
    def test_envelope_is_unwrapped(self) -> None:
        report = ReportInput.from_dict({"reportJsonParam": {"report": {"reportName": "Fall"}}})
        self.assertEqual(report.meta.name, "Fall")

    def test_absent_lists_are_empty(self) -> None:
        report = ReportInput.from_dict({"report": {}, "photos": None, "tastings": "oops"})
        self.assertEqual(report.summary, ())
        self.assertEqual(report.photos, ())
        self.assertEqual(report.details, ())

    def test_nested_fields(self) -> None:
        report = ReportInput.from_dict(
            {
                "report": {
                    "client": [{"identifier": "Acme"}, {"identifier": "Other"}],
                    "reportDate": {"date": "1/2/24"},
                    "logoUrl": "https://example.com/logo.png",
                },
                "photos": [{"image": {"url": "https://example.com/p.jpg"}}, {"image": None}],
                "tastings": [{"scheduledDate": {"date": "5/6/2025"}, "totalConsumersSampledR": 30}],
                "comments": [{"comment": "<p>Hi</p>"}, {"comment": None}],
            }
        )
        self.assertEqual(report.meta.client, "Acme")
        self.assertEqual(report.meta.report_date, "1/2/24")
        self.assertEqual([p.url for p in report.photos], ["https://example.com/p.jpg", None])
        self.assertEqual(report.details[0].scheduled_date, "5/6/2025")
        self.assertEqual(report.details[0].sampled, 30)
        self.assertEqual([c.text for c in report.feedback], ["<p>Hi</p>", None])
        self.assertEqual(
            report.image_urls(),
            ["https://example.com/logo.png", "https://example.com/p.jpg", None],
        )


class IngestTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        config.set_out_dir(Path(self.temp_dir.name))
        reset_engine()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_invalid_json_is_rejected(self) -> None:
        path = Path(self.temp_dir.name) / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_document(path)

    def test_empty_document_is_rejected(self) -> None:
        path = Path(self.temp_dir.name) / "empty.json"
        path.write_text("{}", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_document(path)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_document(Path(self.temp_dir.name) / "nope.json")

    def test_load_report(self) -> None:
        path = Path(self.temp_dir.name) / "ok.json"
        path.write_text(json.dumps({"report": {"reportName": "Ok"}}), encoding="utf-8")
        self.assertEqual(load_report(path).meta.name, "Ok")


if __name__ == "__main__":
    unittest.main()
