"""Envelope classification and per-variant decoding."""

import json

import pytest
from pydantic import ValidationError

from tempest_wx import (
    ArityTooSmall,
    DecodeError,
    DeviceStatus,
    EvtPrecip,
    EvtStrike,
    HubStatus,
    Malformed,
    MissingDiscriminator,
    MissingField,
    ObsAir,
    ObsSky,
    ObsSt,
    RapidWind,
    TypeMismatch,
    Unknown,
    classify_and_decode,
    decode,
    parse_envelope,
)
from tempest_wx.decoder import is_known

SAMPLES = {
    "evt_precip": {
        "serial_number": "SK-00008453", "type": "evt_precip", "hub_sn": "HB-00000001",
        "evt": [1493322445],
    },
    "evt_strike": {
        "serial_number": "AR-00004049", "type": "evt_strike", "hub_sn": "HB-00000001",
        "evt": [1493322445, 27, 3848],
    },
    "rapid_wind": {
        "serial_number": "SK-00008453", "type": "rapid_wind", "hub_sn": "HB-00000001",
        "ob": [1493322445, 2.3, 128],
    },
    "obs_air": {
        "serial_number": "AR-00004049", "type": "obs_air", "hub_sn": "HB-00000001",
        "obs": [[1493164835, 835.0, 10.0, 45, 0, 0, 3.46, 1]],
        "firmware_revision": 17,
    },
    "obs_sky": {
        "serial_number": "SK-00008453", "type": "obs_sky", "hub_sn": "HB-00000001",
        "obs": [[1493321340, 9000, 10, 0.0, 2.6, 4.6, 7.4, 187, 3.12, 1, 130, None, 0, 3]],
        "firmware_revision": 29,
    },
    "obs_st": {
        "serial_number": "ST-00000512", "type": "obs_st", "hub_sn": "HB-00013030",
        "obs": [[1588948614, 0.18, 0.22, 0.27, 144, 6, 1017.57, 22.37, 50.26, 328, 0.03, 3,
                 0.0, 0, 0, 0, 2.410, 1]],
        "firmware_revision": 129,
    },
    "device_status": {
        "serial_number": "AR-00004049", "type": "device_status", "hub_sn": "HB-00000001",
        "timestamp": 1510855923, "uptime": 2189, "voltage": 3.50, "firmware_revision": 17,
        "rssi": -17, "hub_rssi": -87, "sensor_status": 0, "debug": 0,
    },
    "hub_status": {
        "serial_number": "HB-00000001", "type": "hub_status", "firmware_revision": "35",
        "uptime": 1670133, "rssi": -62, "timestamp": 1495724691, "reset_flags": "BOR,PIN,POR",
        "seq": 48, "fs": [1, 0, 15675411, 524288], "radio_stats": [2, 1, 0, 3, 2839],
        "mqtt_stats": [1, 0],
    },
    "light_debug": {
        "serial_number": "ST-00000512", "type": "light_debug", "hub_sn": "HB-00013030",
        "ob": [1588948614, 800, 0, 0, 0],
    },
}

EXPECTED = {
    "evt_precip": EvtPrecip,
    "evt_strike": EvtStrike,
    "rapid_wind": RapidWind,
    "obs_air": ObsAir,
    "obs_sky": ObsSky,
    "obs_st": ObsSt,
    "device_status": DeviceStatus,
    "hub_status": HubStatus,
    "light_debug": Unknown,
}


# nesting far past the interpreter recursion limit
DEEP = '{"type": "evt_precip", "x": ' + "[" * 100000 + "]" * 100000 + "}"


def envelope(kind: str, **changes) -> str:
    body = dict(SAMPLES[kind])
    body.update(changes)
    return json.dumps(body)


class TestClassification:
    @pytest.mark.parametrize("kind", sorted(EXPECTED))
    def test_every_variant_decodes(self, kind):
        record = decode(envelope(kind))
        assert isinstance(record, EXPECTED[kind])
        assert record.type == kind

    def test_known_discriminators(self):
        assert all(is_known(k) for k in EXPECTED if k != "light_debug")
        assert not is_known("light_debug")

    def test_accepts_bytes(self):
        record = decode(envelope("evt_precip").encode("utf-8"))
        assert isinstance(record, EvtPrecip)


class TestConcreteScenarios:
    def test_precip_event(self):
        raw = '{"serial_number":"SK-00008453","type":"evt_precip","hub_sn":"HB-00000001","evt":[1493322445]}'
        record = classify_and_decode(raw)
        assert isinstance(record, EvtPrecip)
        assert record.serial_number == "SK-00008453"
        assert record.evt.epoch == 1493322445

    def test_strike_event(self):
        raw = ('{"serial_number":"SK-00008453","type":"evt_strike","hub_sn":"HB-00000001",'
               '"evt":[1493322445,27,3848]}')
        record = classify_and_decode(raw)
        assert isinstance(record, EvtStrike)
        assert (record.evt.epoch, record.evt.distance, record.evt.energy) == (1493322445, 27, 3848)

    def test_rapid_wind_missing_direction(self):
        raw = ('{"serial_number":"SK-00008453","type":"rapid_wind","hub_sn":"HB-00000001",'
               '"ob":[1493322445,2.3]}')
        result = classify_and_decode(raw)
        assert isinstance(result, ArityTooSmall)
        assert (result.minimum, result.actual) == (3, 2)


class TestVariantFields:
    def test_rapid_wind(self):
        record = decode(envelope("rapid_wind"))
        assert record.ob.wind_speed == 2.3
        assert record.ob.wind_direction == 128

    def test_obs_air(self):
        record = decode(envelope("obs_air"))
        row = record.latest
        assert row.station_pressure == 835.0
        assert row.relative_humidity == 45
        assert row.battery == 3.46
        assert row.report_interval == 1
        assert record.firmware_revision == 17

    def test_obs_sky_nullable_rain_day(self):
        row = decode(envelope("obs_sky")).latest
        assert row.rain_day is None
        assert row.precipitation_type == 0
        assert row.wind_sample_interval == 3
        assert row.wind_direction == 187

    def test_obs_st(self):
        record = decode(envelope("obs_st"))
        assert len(record.obs) == 1
        row = record.latest
        assert row.epoch == 1588948614
        assert row.station_pressure == 1017.57
        assert row.relative_humidity == 50.26
        assert row.battery == 2.41

    def test_obs_rows_keep_order(self):
        first = SAMPLES["obs_air"]["obs"][0]
        second = [1493164895] + first[1:]
        record = decode(envelope("obs_air", obs=[first, second]))
        assert [r.epoch for r in record.obs] == [1493164835, 1493164895]
        assert record.latest.epoch == 1493164895

    def test_empty_obs(self):
        record = decode(envelope("obs_st", obs=[]))
        assert record.obs == ()
        assert record.latest is None

    def test_obs_summary_passthrough(self):
        record = decode(envelope("obs_st", summary={"pressure_trend": "steady"}))
        assert record.summary == {"pressure_trend": "steady"}

    def test_device_status(self):
        record = decode(envelope("device_status"))
        assert record.voltage == 3.5
        assert record.rssi == -17
        assert record.hub_rssi == -87
        assert record.sensor_status == 0

    def test_device_status_bitmask_kept_opaque(self):
        record = decode(envelope("device_status", sensor_status=655871))
        assert record.sensor_status == 655871

    def test_hub_status(self):
        record = decode(envelope("hub_status"))
        assert record.firmware_revision == "35"
        assert record.radio_stats.network_id == 2839
        assert record.radio_stats.radio_status == 3
        assert record.fs == (1, 0, 15675411, 524288)
        assert record.mqtt_stats == (1, 0)
        assert record.reset_flag_set == {"BOR", "PIN", "POR"}

    def test_hub_status_without_internal_counters(self):
        body = dict(SAMPLES["hub_status"])
        del body["fs"], body["mqtt_stats"]
        record = decode(json.dumps(body))
        assert record.fs is None
        assert record.mqtt_stats is None


class TestOptionalSuffix:
    def test_air_without_report_interval(self):
        row = SAMPLES["obs_air"]["obs"][0][:7]
        record = decode(envelope("obs_air", obs=[row]))
        assert record.latest.report_interval is None

    def test_sky_without_two_trailing_slots(self):
        row = SAMPLES["obs_sky"]["obs"][0][:12]
        record = decode(envelope("obs_sky", obs=[row]))
        assert record.latest.precipitation_type is None
        assert record.latest.wind_sample_interval is None

    def test_st_without_report_interval(self):
        row = SAMPLES["obs_st"]["obs"][0][:17]
        record = decode(envelope("obs_st", obs=[row]))
        assert record.latest.report_interval is None
        assert record.latest.battery == 2.41

    def test_newer_firmware_extra_slots(self):
        row = SAMPLES["obs_st"]["obs"][0] + [42, 7]
        record = decode(envelope("obs_st", obs=[row]))
        assert record.latest.report_interval == 1


class TestArity:
    @pytest.mark.parametrize("kind,field,value,minimum", [
        ("evt_precip", "evt", [], 1),
        ("evt_strike", "evt", [1493322445, 27], 3),
        ("rapid_wind", "ob", [1493322445], 3),
        ("hub_status", "radio_stats", [2, 1, 0, 3], 5),
    ])
    def test_short_arrays(self, kind, field, value, minimum):
        result = classify_and_decode(envelope(kind, **{field: value}))
        assert isinstance(result, ArityTooSmall)
        assert result.minimum == minimum
        assert result.actual == len(value)
        assert result.path == field

    def test_short_obs_row_reports_row(self):
        rows = [SAMPLES["obs_st"]["obs"][0], [1588948614, 0.18]]
        result = classify_and_decode(envelope("obs_st", obs=rows))
        assert isinstance(result, ArityTooSmall)
        assert result.minimum == 17
        assert result.path == "obs[1]"


class TestFailures:
    @pytest.mark.parametrize("raw", ["", "not json", "{", "[1, 2]", "42", '{"type": NaN}', DEEP])
    def test_malformed(self, raw):
        assert isinstance(classify_and_decode(raw), Malformed)

    def test_invalid_utf8_bytes(self):
        assert isinstance(classify_and_decode(b'{"type": "\xff"}'), Malformed)

    @pytest.mark.parametrize("body", [{"serial_number": "SK-1"}, {"type": None}, {"type": ""}])
    def test_missing_discriminator(self, body):
        assert isinstance(classify_and_decode(json.dumps(body)), MissingDiscriminator)

    def test_non_string_discriminator(self):
        result = classify_and_decode('{"type": 7}')
        assert isinstance(result, TypeMismatch)
        assert result.name == "type"

    def test_missing_hub_sn(self):
        body = dict(SAMPLES["evt_precip"])
        del body["hub_sn"]
        result = classify_and_decode(json.dumps(body))
        assert isinstance(result, MissingField)
        assert result.name == "hub_sn"

    def test_missing_array(self):
        body = dict(SAMPLES["rapid_wind"])
        del body["ob"]
        result = classify_and_decode(json.dumps(body))
        assert isinstance(result, MissingField)
        assert result.name == "ob"

    def test_missing_scalar(self):
        body = dict(SAMPLES["device_status"])
        del body["voltage"]
        result = classify_and_decode(json.dumps(body))
        assert isinstance(result, MissingField)
        assert result.name == "voltage"

    def test_string_where_number_expected(self):
        result = classify_and_decode(envelope("evt_strike", evt=[1493322445, "27", 3848]))
        assert isinstance(result, TypeMismatch)
        assert (result.name, result.expected, result.actual) == ("distance", "integer", "string")

    def test_numeric_serial_rejected(self):
        result = classify_and_decode(envelope("evt_precip", serial_number=8453))
        assert isinstance(result, TypeMismatch)
        assert result.name == "serial_number"

    def test_hub_firmware_must_be_string(self):
        result = classify_and_decode(envelope("hub_status", firmware_revision=35))
        assert isinstance(result, TypeMismatch)
        assert result.name == "firmware_revision"

    def test_decode_raises(self):
        with pytest.raises(DecodeError):
            decode("{}")

    def test_classify_never_raises_decode_errors(self):
        for raw in ("", "{}", '{"type": "rapid_wind"}', envelope("obs_st", obs="nope")):
            assert isinstance(classify_and_decode(raw), DecodeError)


class TestUnknown:
    def test_passthrough_keeps_payload(self):
        record = decode(envelope("light_debug"))
        assert record.type == "light_debug"
        assert record.serial_number == "ST-00000512"
        assert record.hub_sn == "HB-00013030"
        assert record.payload == {"ob": (1588948614, 800, 0, 0, 0)}
        assert record.to_wire() == SAMPLES["light_debug"]

    def test_passthrough_without_header(self):
        record = decode('{"type": "ack", "id": "abc"}')
        assert isinstance(record, Unknown)
        assert record.serial_number is None
        assert record.payload == {"id": "abc"}

    @pytest.mark.parametrize("kind", ["summary", "obs_future", "EVT_PRECIP", "evt_precip "])
    def test_policy_is_consistent(self, kind):
        assert isinstance(classify_and_decode(json.dumps({"type": kind})), Unknown)

    @pytest.mark.parametrize("header", [
        {"serial_number": 42},
        {"hub_sn": ["HB-00013030"]},
        {"serial_number": None, "hub_sn": {"id": 1}},
    ])
    def test_non_string_header_stays_in_payload(self, header):
        result = classify_and_decode(json.dumps({"type": "obs_future", **header}))
        assert isinstance(result, Unknown)
        assert result.serial_number is None
        assert result.hub_sn is None
        assert result.to_wire() == {"type": "obs_future", **header}

    def test_deeply_nested_payload_never_raises(self):
        # parses, but may be too deep to rebuild read-only under the recursion limit
        raw = '{"type": "deep_debug", "x": ' + "[" * 900 + "]" * 900 + "}"
        assert isinstance(classify_and_decode(raw), (Unknown, Malformed))


class TestRecords:
    def test_records_are_immutable(self):
        record = decode(envelope("evt_precip"))
        with pytest.raises(ValidationError):
            record.serial_number = "SK-99999999"
        with pytest.raises(ValidationError):
            record.evt.epoch = 0

    def test_free_form_objects_are_read_only(self):
        record = decode(envelope("obs_st", summary={"pressure_trend": "steady", "trend": [1, 2]}))
        with pytest.raises(TypeError):
            record.summary["pressure_trend"] = "rising"
        assert record.summary["trend"] == (1, 2)

        unknown = decode(envelope("light_debug"))
        with pytest.raises(TypeError):
            unknown.payload["ob"] = []
        with pytest.raises(AttributeError):
            unknown.payload["ob"].append(0)
        assert unknown.payload["ob"] == (1588948614, 800, 0, 0, 0)

    def test_free_form_objects_dump_as_plain_json(self):
        record = decode(envelope("obs_st", summary={"pressure_trend": "steady", "trend": [1, 2]}))
        assert record.model_dump()["summary"] == {"pressure_trend": "steady", "trend": [1, 2]}
        assert record.to_wire()["summary"] == {"pressure_trend": "steady", "trend": [1, 2]}
        assert decode(envelope("light_debug")).model_dump(mode="json")["payload"] == {
            "ob": [1588948614, 800, 0, 0, 0]}

    def test_direct_construction_still_validates(self):
        with pytest.raises(ValidationError):
            EvtPrecip(serial_number="SK-00008453", evt={"epoch": 1493322445})

    def test_header_identifiers_round_trip(self):
        for kind in EXPECTED:
            wire = decode(envelope(kind)).to_wire()
            assert wire["serial_number"] == SAMPLES[kind]["serial_number"]
            if "hub_sn" in SAMPLES[kind]:
                assert wire["hub_sn"] == SAMPLES[kind]["hub_sn"]

    def test_to_wire_repacks_arrays(self):
        assert decode(envelope("evt_strike")).to_wire() == SAMPLES["evt_strike"]
        assert decode(envelope("hub_status")).to_wire()["radio_stats"] == [2, 1, 0, 3, 2839]
        assert decode(envelope("obs_sky")).to_wire()["obs"] == SAMPLES["obs_sky"]["obs"]

    def test_parse_envelope_exposes_header(self):
        env = parse_envelope(envelope("rapid_wind"))
        assert env.discriminator == "rapid_wind"
        assert env.serial_number == "SK-00008453"
        assert env.hub_sn == "HB-00000001"
