"""End-to-end tests of the command line actions that need no network access."""

import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import pandas as pd

from coursegraph.main import build_parser, main
from coursegraph.models.course import CourseInfo, CourseRecord
from coursegraph.models.requirements import CourseRequirement, GroupLogic, RequirementGroup
from coursegraph.storage import JsonRecordStore


class TestMain(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        self.store = JsonRecordStore(self.tmp)
        env = patch.dict(os.environ, {"DATA_DIR": str(self.tmp), "OPENROUTER_API_KEY": ""})
        env.start()
        self.addCleanup(env.stop)
        self.addCleanup(shutil.rmtree, self.tmp, True)

    def run_main(self, *argv):
        with patch("coursegraph.main.load_dotenv"), self.assertRaises(SystemExit) as ctx:
            main(list(argv))
        return ctx.exception.code

    def test_parser_rejects_unknown_action(self):
        with self.assertRaises(SystemExit):
            build_parser().parse_args(["crawl"])

    def test_links_writes_csv_tables(self):
        self.store.save_records([
            CourseRecord(department="CMPT", number="120", original_title="Intro"),
            CourseRecord(
                department="CMPT", number="125", original_title="Intro II",
                prerequisite=RequirementGroup(logic=GroupLogic.ONE_OF, children=[
                    CourseRequirement(department="CMPT", number="120"),
                    CourseRequirement(department="CMPT", number="130"),
                ]),
            ),
        ])
        self.assertEqual(self.run_main("links"), 0)

        nodes = pd.read_csv(self.tmp / "nodes.csv", keep_default_na=False)
        links = pd.read_csv(self.tmp / "links.csv")
        self.assertEqual(sorted(nodes["id"]), ["CMPT 120", "CMPT 125", "CMPT 130"])
        self.assertEqual(list(links["value"]), [0.5, 0.5])

    def test_links_without_records_fails(self):
        self.assertEqual(self.run_main("links"), 1)

    def test_validate_reports_invalid_records(self):
        self.store.records_path.write_text('[{"department": "CMPT", "number": "225"}]')
        with self.assertLogs("coursegraph", level="ERROR") as logs:
            self.assertEqual(self.run_main("validate"), 1)
        self.assertTrue(any("schema_version: Missing required property" in line for line in logs.output))

    def test_validate_accepts_empty_store(self):
        self.assertEqual(self.run_main("validate"), 0)

    def test_parse_without_api_key_fails(self):
        self.store.save_catalog([CourseInfo(department="CMPT", number="225", prerequisites="CMPT 125")])
        with self.assertLogs("coursegraph", level="ERROR") as logs:
            self.assertEqual(self.run_main("parse"), 1)
        self.assertTrue(any("OPENROUTER_API_KEY" in line for line in logs.output))

    def test_parse_unknown_course_fails(self):
        self.assertEqual(self.run_main("parse", "--course", "CMPT 999"), 1)

    def test_stats(self):
        self.assertEqual(self.run_main("stats"), 0)


if __name__ == '__main__':
    unittest.main()
