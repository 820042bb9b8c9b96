import pytest

from ifexcore.types import (
    CallRequest,
    CallResponse,
    CallStatus,
    Constraints,
    EnumDefinition,
    EnumOption,
    MethodSignature,
    Parameter,
    ServiceEndpoint,
    ServiceFilter,
    ServiceInfo,
    ServiceStatus,
    StructDefinition,
    Transport,
    Type,
    ValidationResult,
)


@pytest.mark.parametrize(
    "status, expected",
    [
        (ServiceStatus.AVAILABLE, True),
        (ServiceStatus.STARTING, True),
        (ServiceStatus.STOPPING, False),
        (ServiceStatus.UNAVAILABLE, False),
        (ServiceStatus.ERROR, False),
    ],
)
def test_is_available(status, expected):
    assert ServiceInfo(name="svc", status=status).is_available() is expected


def test_service_info_defaults_available():
    info = ServiceInfo()
    assert info.status is ServiceStatus.AVAILABLE
    assert info.is_available()
    assert info.endpoint.transport is Transport.GRPC


def test_parameter_defaults():
    param = Parameter(name="zone", type=Type.STRING)
    assert param.is_optional is False
    assert param.is_array is False
    assert param.default_value is None
    assert param.constraints == Constraints()


def test_mutable_defaults_are_independent():
    first = MethodSignature(method_name="a")
    second = MethodSignature(method_name="b")
    first.input_parameters.append(Parameter(name="x"))
    first.metadata["x-key"] = "value"
    assert second.input_parameters == []
    assert second.metadata == {}

    e1, e2 = ServiceEndpoint(), ServiceEndpoint()
    e1.properties["k"] = "v"
    assert e2.properties == {}


def test_call_request_default_timeout():
    assert CallRequest(service_name="echo_service").timeout_ms == 5000


def test_call_response_defaults():
    response = CallResponse()
    assert response.success is False
    assert response.status is CallStatus.INTERNAL_ERROR
    assert response.result_json == ""


def test_validation_result_defaults():
    result = ValidationResult()
    assert result.valid is True
    assert result.errors == []
    other = ValidationResult()
    result.errors.append("problem")
    assert other.errors == []


def test_service_filter_defaults():
    flt = ServiceFilter()
    assert flt.show_all is False
    assert flt.name_pattern is None
    assert flt.transport is None
    assert flt.metadata_filters == {}


def test_struct_and_enum_definitions():
    struct_def = StructDefinition(name="point", members=[Parameter(name="x", type=Type.INT32)])
    assert [m.name for m in struct_def.members] == ["x"]

    enum_def = EnumDefinition(
        name="mode",
        datatype=Type.UINT8,
        options=[EnumOption(name="auto", value=0), EnumOption(name="manual", value=1)],
    )
    assert [o.value for o in enum_def.options] == [0, 1]
    assert enum_def.datatype is Type.UINT8


def test_type_members_in_declared_order_and_usable_by_name():
    assert [t.name for t in Type] == [
        "UINT8",
        "UINT16",
        "UINT32",
        "UINT64",
        "INT8",
        "INT16",
        "INT32",
        "INT64",
        "FLOAT",
        "DOUBLE",
        "BOOLEAN",
        "STRING",
        "BYTES",
        "STRUCT",
        "ARRAY",
        "ENUM",
    ]
    assert len({t.value for t in Type}) == len(list(Type))

    param = Parameter(name="delay_ms", type=Type["UINT32"], type_name="uint32")
    assert param.type is Type.UINT32
    assert param.type_name == "uint32"