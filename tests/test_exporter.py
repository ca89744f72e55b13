"""
Tests for the Exporter facade wired to a mocked Traefik endpoint.
"""

from __future__ import annotations

import httpx

from traefik_exporter.exporter import Exporter, MetricRegistry
from traefik_exporter.observability.build_info import BuildInfoCollector
from traefik_exporter.observability.metrics import CollectorRegistry
from traefik_exporter.scrape.client import HealthClient
from traefik_exporter.scrape.errors import NetworkFailure
from tests.conftest import ScriptedClient, json_response, record


class TestDescribe:

    def test_fixed_descriptors_before_first_scrape(self):
        exporter = Exporter(ScriptedClient())

        names = [d.name for d in exporter.describe()]

        assert names == [
            "traefik_up",
            "traefik_uptime",
            "traefik_request_response_time_total",
            "traefik_request_response_time_avg",
        ]

    def test_includes_materialized_codes(self):
        exporter = Exporter(ScriptedClient([record(current={"200": 1}, total={"404": 2})]))
        exporter.collect()

        descriptors = exporter.describe()

        labeled = [(d.name, dict(d.const_labels)) for d in descriptors[4:]]
        assert labeled == [
            ("traefik_request_count_current", {"statusCode": "200"}),
            ("traefik_request_count_total", {"statusCode": "404"}),
        ]

    def test_shares_given_registry(self):
        registry = MetricRegistry()
        exporter = Exporter(ScriptedClient(), registry=registry)
        assert exporter.registry is registry


class TestCollectOverHttp:

    def test_full_scrape(self, make_client, health_payload):
        exporter = Exporter(make_client(json_response(health_payload)))

        points = exporter.collect()

        by_key = {(p.name, p.labels.get("statusCode")): p.value for p in points}
        assert by_key[("traefik_up", None)] == 1
        assert by_key[("traefik_uptime", None)] == 3723.5
        assert by_key[("traefik_request_count_current", "200")] == 5
        assert by_key[("traefik_request_count_total", "404")] == 3
        assert exporter.last_error is None

    def test_upstream_503_yields_only_up(self, make_client):
        exporter = Exporter(make_client(json_response({}, status_code=503)))

        points = exporter.collect()

        assert [(p.name, p.value) for p in points] == [("traefik_up", 0)]
        assert exporter.last_error.status_code == 503

    def test_malformed_json_yields_only_up(self, make_client):
        exporter = Exporter(
            make_client(lambda request: httpx.Response(200, content=b"{not json"))
        )

        points = exporter.collect()

        assert [(p.name, p.value) for p in points] == [("traefik_up", 0)]

    def test_unparseable_uri_yields_only_up(self):
        exporter = Exporter(HealthClient("http://host:abc/x", timeout=0.5))

        points = exporter.collect()
        exporter.close()

        assert [(p.name, p.value) for p in points] == [("traefik_up", 0)]
        assert isinstance(exporter.last_error, NetworkFailure)

    def test_close_closes_client(self):
        client = ScriptedClient()
        Exporter(client).close()
        assert client.closed is True


class TestRenderedPage:

    def test_build_info_survives_failed_scrape(self, make_client):
        registry = CollectorRegistry()
        registry.register(Exporter(make_client(json_response({}, status_code=500))))
        registry.register(BuildInfoCollector())

        text = registry.export_prometheus()

        assert "traefik_up 0\n" in text
        assert "traefik_exporter_build_info{" in text
        assert "traefik_uptime" not in text

    def test_labeled_series_rendered(self, make_client, health_payload):
        registry = CollectorRegistry()
        registry.register(Exporter(make_client(json_response(health_payload))))

        text = registry.export_prometheus()

        assert "# TYPE traefik_request_count_total gauge" in text
        assert 'traefik_request_count_total{statusCode="200"} 100\n' in text
        assert 'traefik_request_count_current{statusCode="200"} 5\n' in text
        assert text.count("# HELP traefik_request_count_total ") == 1
