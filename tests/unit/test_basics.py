import pytest
from pydantic import ValidationError

from conductor import config
from conductor.domain import ConductorError, DataType, Emit, ErrorCode, Registration
from conductor.domain.models import RegistrationResult, schema_from_json, schema_to_json
from conductor.infrastructure.db_factory import build_dsn
from conductor.producers.coercion import coerce_value
from conductor.producers.identity import assign_producer_id
from scripts import simulate_producer


def test_get_settings_defaults():
    settings = config.Settings()
    assert settings.db_port > 0
    assert settings.catalog_table
    assert settings.pool_min_size <= settings.pool_max_size


def test_settings_field_defaults():
    fields = config.Settings.model_fields
    assert fields["db_host"].default == "localhost"
    assert fields["db_port"].default == 8812
    assert fields["db_user"].default == "admin"
    assert fields["db_name"].default == "qdb"
    assert fields["catalog_table"].default == "producers"
    assert fields["partition_by"].default is None
    assert fields["strict_identifiers"].default is False


def test_settings_reject_unknown_partition_unit():
    with pytest.raises(ValidationError):
        config.Settings(partition_by="FORTNIGHT")


def test_build_dsn():
    settings = config.Settings(
        db_host="db", db_port=8812, db_user="admin", db_password="quest", db_name="qdb"
    )
    assert build_dsn(settings) == "postgresql://admin:quest@db:8812/qdb"


def test_error_code_identifiers_are_stable():
    assert [(code.value, code.identifier) for code in ErrorCode] == [
        (0, "NoError"),
        (1, "TimestampDefined"),
        (2, "NoMembers"),
        (3, "InvalidColumnNames"),
        (4, "TooManyColumns"),
        (5, "InternalError"),
        (6, "InvalidUuid"),
        (7, "NameInvalid"),
        (8, "Unregistered"),
        (9, "InvalidData"),
        (10, "InvalidSchema"),
    ]
    assert ErrorCode.from_identifier("Unregistered") is ErrorCode.UNREGISTERED
    assert str(ErrorCode.INVALID_DATA) == "InvalidData"
    with pytest.raises(ValueError):
        ErrorCode.from_identifier("Nope")


def test_conductor_error_carries_code_and_message():
    exc = ConductorError(ErrorCode.UNREGISTERED, "no producer abc")
    assert exc.code is ErrorCode.UNREGISTERED
    assert str(exc) == "Unregistered: no producer abc"


def test_data_type_column_types():
    assert {dt.value: dt.column_type for dt in DataType} == {
        "Int": "long",
        "Float": "float",
        "Time": "timestamp",
        "String": "string",
        "Binary": "binary",
        "Bool": "boolean",
        "Double": "double",
    }


def test_schema_json_round_trip_and_errors():
    schema = {"x": DataType.INT, "when": DataType.TIME}
    assert schema_from_json(schema_to_json(schema)) == schema
    with pytest.raises(ValueError):
        schema_from_json('{"x": "Decimal"}')
    with pytest.raises(ValueError):
        schema_from_json("[]")


def test_registration_accepts_wire_names():
    registration = Registration.model_validate(
        {"name": "station", "schema": {"x": "Int"}, "use_custom_id": "sensor-1"}
    )
    assert registration.producer_schema == {"x": DataType.INT}
    assert registration.custom_id == "sensor-1"


def test_registration_rejects_unknown_type():
    with pytest.raises(ValidationError):
        Registration(name="station", schema={"x": "Decimal"})


def test_emit_rejects_negative_timestamp():
    with pytest.raises(ValidationError):
        Emit(uuid="abc", timestamp=-1, data={})


@pytest.mark.parametrize("timestamp", [True, "5", 5.0])
def test_emit_timestamp_is_not_coerced(timestamp):
    with pytest.raises(ValidationError):
        Emit(uuid="abc", timestamp=timestamp, data={})


def test_registration_result_id_only_on_success():
    assert RegistrationResult(error=ErrorCode.NO_ERROR, id="abc").id == "abc"
    assert RegistrationResult(error=ErrorCode.NAME_INVALID).id is None
    with pytest.raises(ValidationError):
        RegistrationResult(error=ErrorCode.NO_ERROR)
    with pytest.raises(ValidationError):
        RegistrationResult(error=ErrorCode.INTERNAL_ERROR, id="abc")


def test_assign_producer_id():
    custom = Registration(name="station", schema={"x": "Int"}, use_custom_id="sensor-1")
    generated = Registration(name="station", schema={"x": "Int"})
    assert assign_producer_id(custom) == "sensor-1"
    first, second = assign_producer_id(generated), assign_producer_id(generated)
    assert first != second
    assert len(first) == 36


def test_simulated_readings_fit_station_schema():
    readings = list(simulate_producer._generate_readings(rows=5, seed=123))
    assert len(readings) == 5
    assert readings == list(simulate_producer._generate_readings(rows=5, seed=123))
    for reading in readings:
        assert set(reading) == set(simulate_producer.STATION_SCHEMA)
        for column, value in reading.items():
            coerce_value(value, simulate_producer.STATION_SCHEMA[column])
