"""Decoding and encoding envelopes through JSON and YAML."""

import json
from datetime import datetime, timezone
from ipaddress import IPv4Address

import pytest
import yaml

from intermodal import DecodeError, Envelope, Format, Header, Manifest, decode, decode_envelope, decode_header, encode, load
from payloads import CpuMetrics, NetstatConnections, TcpState


class TestCpuBlob:
    def test_decodes_into_header(self, cpu_blob):
        header = decode_header(cpu_blob)
        assert header.manifest.kind == "cpu"
        assert header.manifest.version == 1
        assert header.manifest.labels["foo"] == "bar"
        assert header.manifest.ctime == datetime(2020, 8, 25, 14, 41, 40, tzinfo=timezone.utc)

    def test_decodes_into_envelope(self, cpu_blob):
        envelope = decode_envelope(cpu_blob, CpuMetrics)
        assert envelope.payload.interval_seconds == 10
        assert len(envelope.payload.idle_percent) == 6
        assert envelope.payload.idle_percent[2] == 85

    def test_bytes_accepted(self, cpu_blob):
        assert decode_header(cpu_blob.encode()).manifest.kind == "cpu"

    def test_incompatible_payload_type_fails(self, cpu_blob):
        with pytest.raises(DecodeError) as excinfo:
            decode_envelope(cpu_blob, str)
        assert excinfo.value.code == "decode_error"
        assert "payload" in excinfo.value.details["errors"][0]["loc"]

    def test_string_payload_into_structured_type_fails(self, cpu_blob):
        data = json.loads(cpu_blob)
        data["payload"] = "80,81,85"
        with pytest.raises(DecodeError):
            decode_envelope(json.dumps(data), CpuMetrics)

    def test_missing_payload_field_fails_whole_decode(self, cpu_blob):
        data = json.loads(cpu_blob)
        del data["payload"]["idle_percent"]
        with pytest.raises(DecodeError):
            decode_envelope(json.dumps(data), CpuMetrics)

    def test_projection_matches_envelope_manifest(self, manifest):
        envelope = Envelope[CpuMetrics](manifest=manifest, payload=CpuMetrics(interval_seconds=5, idle_percent=[1]))
        assert decode_header(encode(envelope)).manifest == envelope.manifest


class TestManifestDecoding:
    @pytest.mark.parametrize("field", ["domain", "scope", "kind", "version", "origin", "ctime"])
    def test_missing_required_field_fails(self, cpu_blob, field):
        data = json.loads(cpu_blob)
        del data["manifest"][field]
        with pytest.raises(DecodeError) as excinfo:
            decode_header(json.dumps(data))
        assert excinfo.value.details["errors"][0]["type"] == "missing"

    @pytest.mark.parametrize("bad", ["one", "1", True, 1.0, -1])
    def test_version_must_be_integer(self, cpu_blob, bad):
        data = json.loads(cpu_blob)
        data["manifest"]["version"] = bad
        with pytest.raises(DecodeError):
            decode_header(json.dumps(data))

    def test_ctime_must_be_timestamp(self, cpu_blob):
        data = json.loads(cpu_blob)
        data["manifest"]["ctime"] = "last tuesday"
        with pytest.raises(DecodeError):
            decode_header(json.dumps(data))

    def test_absent_labels_decode_empty_and_stay_absent(self, cpu_blob):
        data = json.loads(cpu_blob)
        del data["manifest"]["labels"]
        header = decode_header(json.dumps(data))
        assert header.manifest.labels == {}
        assert "labels" not in json.loads(encode(header.manifest))
        assert "labels" not in json.loads(encode(header))["manifest"]

    def test_empty_labels_not_emitted_as_placeholder(self, manifest):
        text = encode(manifest.replace(labels={}))
        assert "labels" not in text
        assert "null" not in text

    def test_sub_second_precision_kept(self, cpu_blob):
        blob = cpu_blob.replace("14:41:40Z", "14:41:40.123456Z")
        assert decode_header(blob).manifest.ctime.microsecond == 123456

    def test_offset_timestamp_normalized(self, cpu_blob):
        blob = cpu_blob.replace("14:41:40Z", "16:41:40+02:00")
        ctime = decode_header(blob).manifest.ctime
        assert ctime == datetime(2020, 8, 25, 14, 41, 40, tzinfo=timezone.utc)
        assert json.loads(encode(Header(manifest=decode_header(blob).manifest)))["manifest"]["ctime"] == "2020-08-25T14:41:40Z"


class TestOpenWorld:
    def test_extra_top_level_fields_ignored(self, cpu_blob):
        data = json.loads(cpu_blob)
        data["trace"] = {"id": "abc"}
        data["manifest"]["unexpected"] = 42
        blob = json.dumps(data)
        assert decode_header(blob).manifest.kind == "cpu"
        assert decode_envelope(blob, CpuMetrics).payload.idle_percent[0] == 80

    def test_manifest_decodes_directly_from_manifest_block(self, cpu_blob):
        block = json.dumps(json.loads(cpu_blob)["manifest"])
        assert decode(block, Manifest).origin == "host-03"


class TestRoundTrip:
    @pytest.mark.parametrize("fmt", [Format.JSON, Format.YAML])
    def test_envelope_round_trip(self, manifest, fmt):
        envelope = Envelope[CpuMetrics](
            manifest=manifest,
            payload=CpuMetrics(interval_seconds=10, idle_percent=[80, 81, 85, 90, 91, 92]),
        )
        again = decode_envelope(encode(envelope, fmt), CpuMetrics, fmt)
        assert again == envelope
        assert again.manifest.labels == {"foo": "bar"}

    def test_yaml_output_is_plain_yaml(self, manifest):
        data = yaml.safe_load(encode(Header(manifest=manifest), Format.YAML))
        assert data["manifest"]["kind"] == "cpu"
        assert data["manifest"]["ctime"] == "2020-08-25T14:41:40.123456Z"


class TestNetstatFixtures:
    def test_json_fixture(self, fixtures_dir):
        path = fixtures_dir / "netstat.connections.example.org.json"
        assert load(path, Header).manifest.kind == "netstat"

        netstat = load(path, Envelope[NetstatConnections])
        assert netstat.manifest.scope == "connections"
        assert len(netstat.payload.connections) == 2
        first = netstat.payload.connections[0]
        assert first.local_addr == IPv4Address("127.0.0.1")
        assert first.remote_addr is None
        assert first.state is TcpState.LISTEN

    def test_legacy_content_name_is_written_as_payload(self, fixtures_dir):
        netstat = load(fixtures_dir / "netstat.connections.example.org.json", Envelope[NetstatConnections])
        data = json.loads(encode(netstat))
        assert "payload" in data
        assert "content" not in data

    def test_yaml_matches_json(self, fixtures_dir):
        from_json = load(fixtures_dir / "netstat.connections.example.org.json", Envelope[NetstatConnections])
        from_yaml = load(fixtures_dir / "netstat.connections.example.org.yaml", Envelope[NetstatConnections])
        assert from_yaml.manifest.ctime == from_json.manifest.ctime
        assert from_yaml.manifest.ctime.microsecond == 250000
        assert from_yaml.payload == from_json.payload

    def test_yaml_header(self, fixtures_dir):
        header = load(fixtures_dir / "netstat.connections.example.org.yaml", Header)
        assert header.manifest.origin == "host-07.example.org"


class TestFormat:
    def test_from_path(self):
        assert Format.from_path("a.json") is Format.JSON
        assert Format.from_path("a.YML") is Format.YAML
        assert Format.from_path("a.yaml") is Format.YAML

    def test_unknown_suffix(self):
        with pytest.raises(DecodeError) as excinfo:
            Format.from_path("a.txt")
        assert excinfo.value.code == "unknown_format"

    def test_malformed_input(self):
        with pytest.raises(DecodeError) as excinfo:
            decode_header("{not json")
        assert excinfo.value.code == "malformed_input"

    def test_scalar_yaml_rejected(self):
        with pytest.raises(DecodeError):
            decode_header("just a string", Format.YAML)
