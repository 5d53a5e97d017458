import unittest
from unittest import mock

import services.gateway.app.main as gateway_main


class GatewayMetricsHelpersTests(unittest.TestCase):
    def test_record_http_metrics_uses_counter_and_histogram(self) -> None:
        histogram = mock.Mock()
        counter = mock.Mock()
        with mock.patch.object(gateway_main, "REQUEST_LATENCY", histogram), mock.patch.object(
            gateway_main, "REQUEST_COUNTER", counter
        ):
            gateway_main._record_http_metrics("/measurements/csv", "POST", "200", 0.42)
        histogram.labels.assert_called_once_with(endpoint="/measurements/csv", method="POST")
        histogram.labels.return_value.observe.assert_called_once_with(0.42)
        counter.labels.assert_called_once_with(endpoint="/measurements/csv", method="POST", status="200")
        counter.labels.return_value.inc.assert_called_once()

    def test_observe_parse_duration_tracks_histogram(self) -> None:
        histogram = mock.Mock()
        with mock.patch.object(gateway_main, "PARSE_LATENCY", histogram):
            with gateway_main._observe_parse_duration("smaart_log"):
                pass
        histogram.labels.assert_called_once_with(parser="smaart_log")
        histogram.labels.return_value.observe.assert_called_once()

    def test_observe_parse_duration_records_on_error(self) -> None:
        histogram = mock.Mock()
        with mock.patch.object(gateway_main, "PARSE_LATENCY", histogram):
            with self.assertRaises(RuntimeError):
                with gateway_main._observe_parse_duration("frequency_response_csv"):
                    raise RuntimeError("boom")
        histogram.labels.return_value.observe.assert_called_once()

    def test_csv_upload_payload_is_timed(self) -> None:
        histogram = mock.Mock()
        with mock.patch.object(gateway_main, "PARSE_LATENCY", histogram):
            gateway_main._csv_upload_payload("Frequency_Hz\n20\n")
        histogram.labels.assert_called_once_with(parser="frequency_response_csv")

    def test_update_dataset_metrics_sets_gauge_for_each_kind(self) -> None:
        gauge = mock.Mock()
        label_calls: dict[str, mock.Mock] = {}

        def label_side_effect(*, kind: str):  # type: ignore[override]
            label_mock = mock.Mock()
            label_calls[kind] = label_mock
            return label_mock

        gauge.labels.side_effect = label_side_effect
        store = mock.Mock()
        store.kind_counts.return_value = {"csv": 3, "smaart": 1}
        with mock.patch.object(gateway_main, "DATASET_GAUGE", gauge):
            gateway_main._update_dataset_metrics(store)

        self.assertEqual(set(label_calls.keys()), gateway_main.VALID_KINDS)
        for kind, label_mock in label_calls.items():
            expected = float(store.kind_counts.return_value.get(kind, 0))
            label_mock.set.assert_called_once_with(expected)


if __name__ == "__main__":
    unittest.main()
