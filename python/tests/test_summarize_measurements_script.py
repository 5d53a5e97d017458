import json
import pathlib
import subprocess
import sys
import tempfile
import unittest

CSV_EXPORT = (
    "Frequency_Hz,Magnitude_dB,Phase_deg,STI,STI_Degradation_%,position,Color\n"
    "63,88.1,-30,0.95,0,Host A (Reference),#10b981\n"
    "1000,83.4,5,0.67,29.5,Host C (Talent),#f59e0b\n"
)

SMAART_LOG = (
    "Filter\tBand\tRT60\tT20\tT30\n"
    "Octave\t125Hz\t0.52\t0.50\t0.51\n"
    "Octave\t500Hz\t0.36\t0.35\t0.37\n"
    "STI\t0.62\t0.64\t0.66\n"
)


class SummarizeMeasurementsScriptTests(unittest.TestCase):
    def setUp(self) -> None:
        project_root = pathlib.Path(__file__).resolve().parents[1]
        self.script_path = project_root / "scripts" / "summarize_measurements.py"

    def test_cli_outputs_json_and_writes_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = pathlib.Path(tmpdir)
            csv_path = root / "sweep.csv"
            csv_path.write_text(CSV_EXPORT, encoding="utf-8")
            log_path = root / "room.txt"
            log_path.write_text(SMAART_LOG, encoding="utf-8")
            modes_path = root / "out" / "modes.csv"
            heatmap_path = root / "out" / "heatmap.csv"
            response_path = root / "out" / "response.csv"

            completed = subprocess.run(
                [
                    sys.executable,
                    str(self.script_path),
                    "--csv",
                    str(csv_path),
                    "--smaart",
                    str(log_path),
                    "--panels",
                    "2_inch=4,11_inch=0",
                    "--json",
                    "--pretty",
                    "--modes-output",
                    str(modes_path),
                    "--heatmap-output",
                    str(heatmap_path),
                    "--response-output",
                    str(response_path),
                    "--seed",
                    "9",
                ],
                check=True,
                capture_output=True,
                text=True,
            )

            payload = json.loads(completed.stdout)
            self.assertEqual(payload["room"]["name"], "Studio 8")
            self.assertEqual(payload["csv"]["rows"], 2)
            self.assertEqual(payload["csv"]["positions"], ["Host A (Reference)", "Host C (Talent)"])
            self.assertEqual(payload["smaart"]["rt60_by_freq"], {"125": 0.52, "500": 0.36})
            self.assertEqual(payload["treatment"]["panels"]["counts"]["2_inch"], 4)
            self.assertEqual(payload["treatment"]["panels"]["counts"]["11_inch"], 0)
            self.assertEqual(payload["treatment"]["current_sti"], 0.62)
            self.assertGreaterEqual(payload["treatment"]["predicted_sti"], 0.62)
            self.assertLessEqual(payload["treatment"]["predicted_sti"], 1.0)
            self.assertEqual(payload["modes"][0]["label"], "1L")

            modes_lines = modes_path.read_text(encoding="utf-8").splitlines()
            self.assertEqual(modes_lines[0], "frequency,type,axis,label")
            self.assertEqual(len(modes_lines), len(payload["modes"]) + 1)

            heatmap_lines = heatmap_path.read_text(encoding="utf-8").splitlines()
            self.assertEqual(heatmap_lines[0], "position,frequency,degradation")
            self.assertEqual(len(heatmap_lines), 49)

            response_lines = response_path.read_text(encoding="utf-8").splitlines()
            self.assertTrue(response_lines[0].startswith("frequency,Host A (Reference),"))
            self.assertEqual(len(response_lines), 32)

    def test_seeded_response_output_is_reproducible(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            outputs = []
            for name in ("a.csv", "b.csv"):
                path = pathlib.Path(tmpdir) / name
                subprocess.run(
                    [sys.executable, str(self.script_path), "--response-output", str(path), "--seed", "4"],
                    check=True,
                    capture_output=True,
                    text=True,
                )
                outputs.append(path.read_text(encoding="utf-8"))
            self.assertEqual(outputs[0], outputs[1])

    def test_cli_text_summary(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            log_path = pathlib.Path(tmpdir) / "room.txt"
            log_path.write_text(SMAART_LOG, encoding="utf-8")
            completed = subprocess.run(
                [sys.executable, str(self.script_path), "--smaart", str(log_path)],
                check=True,
                capture_output=True,
                text=True,
            )
            self.assertIn("Room: Studio 8", completed.stdout)
            self.assertIn("RT60 bands: 2", completed.stdout)
            self.assertIn("Average STI: 0.62", completed.stdout)
            self.assertIn("Treatment: 25 panels", completed.stdout)
            self.assertIn("Average RT60: 0.44 s -> ", completed.stdout)
            self.assertIn("STI: 0.62 -> ", completed.stdout)

    def test_cli_rejects_bad_panel_spec(self) -> None:
        completed = subprocess.run(
            [sys.executable, str(self.script_path), "--panels", "9_inch=2"],
            capture_output=True,
            text=True,
        )
        self.assertNotEqual(completed.returncode, 0)
        self.assertIn("Unknown panel kind", completed.stderr)

    def test_json_output_renders_unparseable_cells_as_null(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            csv_path = pathlib.Path(tmpdir) / "sweep.csv"
            csv_path.write_text("Frequency_Hz,Magnitude_dB\nabc,80\n", encoding="utf-8")
            completed = subprocess.run(
                [sys.executable, str(self.script_path), "--csv", str(csv_path), "--json"],
                check=True,
                capture_output=True,
                text=True,
            )
            self.assertNotIn("NaN", completed.stdout)
            payload = json.loads(completed.stdout)
            self.assertEqual(payload["csv"]["records"], [{"frequency": None, "magnitude": 80.0}])

    def test_csv_with_byte_order_mark_or_latin1_text_is_read(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = pathlib.Path(tmpdir)
            bom_path = root / "bom.csv"
            bom_path.write_bytes(b"\xef\xbb\xbfFrequency_Hz,position\n100,Mid Room\n")
            latin_path = root / "latin.csv"
            latin_path.write_bytes(b"Frequency_Hz,position\n200,Caf\xe9 Corner\n")
            for path, frequency, position in ((bom_path, 100.0, "Mid Room"), (latin_path, 200.0, "Café Corner")):
                completed = subprocess.run(
                    [sys.executable, str(self.script_path), "--csv", str(path), "--json"],
                    check=True,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                )
                payload = json.loads(completed.stdout)
                self.assertEqual(payload["csv"]["records"][0]["frequency"], frequency)
                self.assertEqual(payload["csv"]["positions"], [position])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
