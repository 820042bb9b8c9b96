"""Core data model for IFEX service descriptions, discovery and calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional

VERSION = "0.1.0"
VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0


class Type(Enum):
    """Basic IFEX data types."""

    UINT8 = auto()
    UINT16 = auto()
    UINT32 = auto()
    UINT64 = auto()
    INT8 = auto()
    INT16 = auto()
    INT32 = auto()
    INT64 = auto()
    FLOAT = auto()
    DOUBLE = auto()
    BOOLEAN = auto()
    STRING = auto()
    BYTES = auto()
    STRUCT = auto()
    ARRAY = auto()
    ENUM = auto()


@dataclass
class Constraints:
    """Value and size limits attached to a parameter."""

    min: Optional[float] = None
    max: Optional[float] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None


@dataclass
class Parameter:
    """A method parameter or struct member."""

    name: str = ""
    type: Type = Type.STRING
    type_name: str = ""
    description: str = ""
    is_optional: bool = False
    is_array: bool = False
    default_value: Optional[str] = None
    constraints: Constraints = field(default_factory=Constraints)


@dataclass
class MethodSignature:
    """Full description of one service method."""

    service_name: str = ""
    namespace_name: str = ""
    method_name: str = ""
    description: str = ""
    input_parameters: List[Parameter] = field(default_factory=list)
    output_parameters: List[Parameter] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)


class Transport(Enum):
    """Transport a service endpoint is reachable over."""

    GRPC = auto()
    HTTP_REST = auto()
    DBUS = auto()
    SOMEIP = auto()
    MQTT = auto()


@dataclass
class ServiceEndpoint:
    """Where and how a service can be reached."""

    address: str = ""
    transport: Transport = Transport.GRPC
    properties: Dict[str, str] = field(default_factory=dict)


class ServiceStatus(Enum):
    """Lifecycle state of a service."""

    AVAILABLE = auto()
    STARTING = auto()
    STOPPING = auto()
    UNAVAILABLE = auto()
    ERROR = auto()


@dataclass
class ServiceInfo:
    """Everything known about a registered service."""

    name: str = ""
    version: str = ""
    description: str = ""
    endpoint: ServiceEndpoint = field(default_factory=ServiceEndpoint)
    methods: List[MethodSignature] = field(default_factory=list)
    ifex_schema: str = ""
    last_seen: float = 0.0
    status: ServiceStatus = ServiceStatus.AVAILABLE

    def is_available(self) -> bool:
        """Whether the service can accept new requests."""
        return self.status in (ServiceStatus.AVAILABLE, ServiceStatus.STARTING)


@dataclass
class ServiceFilter:
    """Criteria for querying the discovery service."""

    name_pattern: Optional[str] = None
    has_method: Optional[str] = None
    transport: Optional[Transport] = None
    metadata_filters: Dict[str, str] = field(default_factory=dict)
    show_all: bool = False


@dataclass
class CallRequest:
    """A dynamic method call to be dispatched."""

    service_name: str = ""
    method_name: str = ""
    parameters_json: str = ""
    timeout_ms: int = 5000


class CallStatus(Enum):
    """Outcome category of a dispatched call."""

    SUCCESS = auto()
    TIMEOUT = auto()
    SERVICE_UNAVAILABLE = auto()
    METHOD_NOT_FOUND = auto()
    INVALID_PARAMETERS = auto()
    INTERNAL_ERROR = auto()


@dataclass
class CallResponse:
    """Result of a dispatched method call."""

    success: bool = False
    status: CallStatus = CallStatus.INTERNAL_ERROR
    result_json: str = ""
    error_message: str = ""
    duration_ms: int = 0


@dataclass
class ValidationResult:
    """Outcome of validating call parameters."""

    valid: bool = True
    errors: List[str] = field(default_factory=list)


@dataclass
class StructDefinition:
    """A named struct type and its members."""

    name: str = ""
    description: str = ""
    members: List[Parameter] = field(default_factory=list)


@dataclass
class EnumOption:
    """One named value of an enumeration."""

    name: str = ""
    description: str = ""
    value: int = 0


@dataclass
class EnumDefinition:
    """A named enumeration with its underlying type and options."""

    name: str = ""
    description: str = ""
    datatype: Type = Type.INT32
    options: List[EnumOption] = field(default_factory=list)