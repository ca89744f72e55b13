"""
Tests for the MetricRegistry — fixed gauges and per-status-code gauges.
"""

from __future__ import annotations

from traefik_exporter.exporter.registry import MetricRegistry


class TestFixedInstruments:

    def test_fixed_names(self):
        registry = MetricRegistry()

        names = [g.name for g in registry.fixed_instruments()]

        assert names == [
            "traefik_up",
            "traefik_uptime",
            "traefik_request_response_time_total",
            "traefik_request_response_time_avg",
        ]

    def test_up_starts_false(self):
        assert MetricRegistry().up.get() == 0

    def test_custom_namespace(self):
        registry = MetricRegistry(namespace="edge")
        assert registry.up.name == "edge_up"


class TestEnsureInstrument:

    def test_creates_labeled_gauge(self):
        registry = MetricRegistry()

        gauge = registry.ensure_current_instrument("200")

        assert gauge.name == "traefik_request_count_current"
        assert gauge.labels == {"statusCode": "200"}
        assert gauge.get() == 0

    def test_idempotent(self):
        registry = MetricRegistry()

        first = registry.ensure_current_instrument("200")
        second = registry.ensure_current_instrument("200")

        assert first is second
        assert registry.current_status_codes == ["200"]

    def test_total_map_independent(self):
        registry = MetricRegistry()

        total = registry.ensure_total_instrument("200")

        assert total.name == "traefik_request_count_total"
        assert registry.current_status_codes == []
        assert registry.total_status_codes == ["200"]
        assert total is not registry.ensure_current_instrument("200")


class TestReset:

    def test_reset_zeroes_current_only(self):
        registry = MetricRegistry()
        registry.ensure_current_instrument("200").set(5)
        registry.ensure_total_instrument("200").set(100)

        registry.reset_current_to_zero()

        assert registry.ensure_current_instrument("200").get() == 0
        assert registry.ensure_total_instrument("200").get() == 100

    def test_reset_keeps_instruments(self):
        registry = MetricRegistry()
        registry.ensure_current_instrument("500")

        registry.reset_current_to_zero()

        assert registry.current_status_codes == ["500"]


class TestAllInstruments:

    def test_order_fixed_current_total(self):
        registry = MetricRegistry()
        registry.ensure_total_instrument("404")
        registry.ensure_current_instrument("200")

        instruments = registry.all_instruments()

        assert [g.name for g in instruments[:4]] == [
            g.name for g in registry.fixed_instruments()
        ]
        assert instruments[4].name == "traefik_request_count_current"
        assert instruments[5].name == "traefik_request_count_total"

    def test_each_instrument_once(self):
        registry = MetricRegistry()
        for code in ("200", "200", "404"):
            registry.ensure_current_instrument(code)
            registry.ensure_total_instrument(code)

        instruments = registry.all_instruments()

        assert len(instruments) == 4 + 2 + 2
        assert len({id(g) for g in instruments}) == len(instruments)

    def test_descriptors_match_instruments(self):
        registry = MetricRegistry()
        registry.ensure_current_instrument("200")

        descriptors = registry.descriptors()

        assert len(descriptors) == 5
        assert descriptors[-1].const_labels == (("statusCode", "200"),)
