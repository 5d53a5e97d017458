import io
import math
import pathlib
import sys
import unittest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from studio_core import FrequencyResponseRecord, parse_frequency_response_csv, records_to_rows

HEADER = "Frequency_Hz,Magnitude_dB,Phase_deg,STI,STI_Degradation_%,position,Color"


class FrequencyResponseCsvTests(unittest.TestCase):
    def test_parses_all_known_columns(self) -> None:
        payload = f"{HEADER}\n100,82.5,-12.0,0.67,29.5,Host C (Talent),#f59e0b\n"
        records = parse_frequency_response_csv(payload)
        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertEqual(record.frequency_hz, 100.0)
        self.assertEqual(record.magnitude_db, 82.5)
        self.assertEqual(record.phase_deg, -12.0)
        self.assertEqual(record.sti, 0.67)
        self.assertEqual(record.sti_degradation_pct, 29.5)
        self.assertEqual(record.position, "Host C (Talent)")
        self.assertEqual(record.color, "#f59e0b")

    def test_column_order_comes_from_header_and_unknown_columns_are_dropped(self) -> None:
        payload = "Notes,Magnitude_dB,Frequency_Hz\nfoo,90.1,63\nbar,88.0,125\n"
        records = parse_frequency_response_csv(payload)
        self.assertEqual([r.frequency_hz for r in records], [63.0, 125.0])
        self.assertEqual([r.magnitude_db for r in records], [90.1, 88.0])
        self.assertIsNone(records[0].phase_deg)
        self.assertEqual(records_to_rows(records)[0], {"frequency": 63.0, "magnitude": 90.1})

    def test_header_order_does_not_change_values(self) -> None:
        first = parse_frequency_response_csv("Frequency_Hz,Magnitude_dB,STI\n63,90.1,0.7\n125,88.0,0.6\n")
        second = parse_frequency_response_csv("STI,Frequency_Hz,Magnitude_dB\n0.7,63,90.1\n0.6,125,88.0\n")
        self.assertEqual(first, second)

    def test_blank_lines_are_skipped(self) -> None:
        payload = f"\n{HEADER}\n\n20,80,0,0.9,1,Mid Room,#fff\n   \n40,81,0,0.9,1,Mid Room,#fff\n"
        records = parse_frequency_response_csv(payload)
        self.assertEqual([r.frequency_hz for r in records], [20.0, 40.0])

    def test_unparseable_numbers_become_nan(self) -> None:
        payload = "Frequency_Hz,Magnitude_dB\nabc,\n"
        (record,) = parse_frequency_response_csv(payload)
        self.assertTrue(math.isnan(record.frequency_hz))
        assert record.magnitude_db is not None
        self.assertTrue(math.isnan(record.magnitude_db))

    def test_short_row_leaves_missing_cells_unset(self) -> None:
        payload = "Frequency_Hz,Magnitude_dB,position\n250,77.0\n"
        (record,) = parse_frequency_response_csv(payload)
        self.assertEqual(record.frequency_hz, 250.0)
        self.assertEqual(record.magnitude_db, 77.0)
        self.assertIsNone(record.position)
        self.assertNotIn("position", record.to_dict())

    def test_missing_frequency_column_yields_nan_frequency(self) -> None:
        payload = "Magnitude_dB\n70\n"
        (record,) = parse_frequency_response_csv(payload)
        self.assertTrue(math.isnan(record.frequency_hz))
        self.assertEqual(record.magnitude_db, 70.0)

    def test_empty_and_header_only_inputs(self) -> None:
        self.assertEqual(parse_frequency_response_csv(""), [])
        self.assertEqual(parse_frequency_response_csv("\n\n"), [])
        self.assertEqual(parse_frequency_response_csv(f"{HEADER}\n"), [])

    def test_accepts_text_stream(self) -> None:
        stream = io.StringIO("Frequency_Hz,STI\n1000,0.71\n")
        (record,) = parse_frequency_response_csv(stream)
        self.assertEqual(record.sti, 0.71)

    def test_to_dict_uses_dashboard_keys(self) -> None:
        record = FrequencyResponseRecord(
            frequency_hz=500.0,
            magnitude_db=84.0,
            phase_deg=3.0,
            sti=0.58,
            sti_degradation_pct=38.9,
            position="NE Corner",
            color="#ef4444",
        )
        self.assertEqual(
            record.to_dict(),
            {
                "frequency": 500.0,
                "magnitude": 84.0,
                "phase": 3.0,
                "sti": 0.58,
                "stiDegradation": 38.9,
                "position": "NE Corner",
                "color": "#ef4444",
            },
        )


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
