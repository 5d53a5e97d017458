import json
import pathlib
import subprocess
import sys
import tempfile
import unittest


class SchemaExportScriptTests(unittest.TestCase):
    def setUp(self) -> None:
        project_root = pathlib.Path(__file__).resolve().parents[1]
        self.script_path = project_root / "scripts" / "export_dashboard_schemas.py"

    def test_cli_writes_catalog_and_family_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            output_dir = pathlib.Path(tmpdir)
            completed = subprocess.run(
                [sys.executable, str(self.script_path), "--output", tmpdir, "--pretty"],
                check=True,
                capture_output=True,
                text=True,
            )

            self.assertIn("Wrote 6 schema files", completed.stdout)

            catalog = json.loads((output_dir / "catalog.json").read_text())
            self.assertIn("frequency_response_record", catalog)
            self.assertIn("smaart_bundle", catalog)

            record_schema = json.loads((output_dir / "frequency-response-record.schema.json").read_text())
            self.assertEqual(record_schema["title"], "FrequencyResponseRecord")
            self.assertIn("stiDegradation", record_schema["properties"])

            mode_schema = json.loads((output_dir / "room-mode.schema.json").read_text())
            self.assertEqual(mode_schema["title"], "RoomMode")

    def test_cli_family_filter(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            output_dir = pathlib.Path(tmpdir)
            subprocess.run(
                [sys.executable, str(self.script_path), "--output", tmpdir, "--family", "heatmap_cell"],
                check=True,
                capture_output=True,
                text=True,
            )
            written = sorted(path.name for path in output_dir.iterdir())
            self.assertEqual(written, ["catalog.json", "heatmap-cell.schema.json"])
            catalog = json.loads((output_dir / "catalog.json").read_text())
            self.assertEqual(list(catalog), ["heatmap_cell"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
