"""Parsing and querying of IFEX YAML service descriptions."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from ifexcore.types import (
    EnumDefinition,
    EnumOption,
    MethodSignature,
    Parameter,
    StructDefinition,
    Type,
    ValidationResult,
)

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES = {
    "uint8": Type.UINT8,
    "uint16": Type.UINT16,
    "uint32": Type.UINT32,
    "uint64": Type.UINT64,
    "int8": Type.INT8,
    "int16": Type.INT16,
    "int32": Type.INT32,
    "int64": Type.INT64,
    "float": Type.FLOAT,
    "double": Type.DOUBLE,
    "boolean": Type.BOOLEAN,
    "string": Type.STRING,
    "bytes": Type.BYTES,
}

_INTEGER_TYPES = frozenset(
    {
        Type.UINT8,
        Type.UINT16,
        Type.UINT32,
        Type.UINT64,
        Type.INT8,
        Type.INT16,
        Type.INT32,
        Type.INT64,
        Type.ENUM,
    }
)


class ParserError(ValueError):
    """Raised when an IFEX document cannot be read or is malformed."""


def type_to_string(type_: Type) -> str:
    """Return the IFEX spelling of a type, such as ``uint8`` or ``struct``."""
    return type_.name.lower()


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _require_str(node: Dict[Any, Any], key: str, context: str) -> str:
    value = node.get(key)
    if value is None or isinstance(value, (dict, list)):
        raise ParserError(f"Invalid IFEX YAML: missing or invalid '{key}' in {context}")
    return _scalar_text(value)


def _optional_str(node: Dict[Any, Any], key: str, default: str = "") -> str:
    value = node.get(key)
    if value is None or isinstance(value, (dict, list)):
        return default
    return _scalar_text(value)


def _optional_int(node: Dict[Any, Any], key: str, default: int) -> int:
    value = node.get(key)
    if _is_integer(value):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def _sequence(node: Dict[Any, Any], key: str) -> Iterable[Dict[Any, Any]]:
    value = node.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParserError(f"Invalid IFEX YAML: '{key}' must be a sequence")
    for item in value:
        if not isinstance(item, dict):
            raise ParserError(f"Invalid IFEX YAML: entries of '{key}' must be mappings")
    return value


def _emit(value: Any) -> str:
    text = yaml.safe_dump(value, default_flow_style=False, sort_keys=False, allow_unicode=True)
    if text.endswith("\n...\n"):
        text = text[: -len("...\n")]
    return text.rstrip("\n")


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise ParserError(f"Invalid IFEX YAML: constraint '{key}' must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ParserError(f"Invalid IFEX YAML: constraint '{key}' must be a number") from exc


def _as_count(value: Any, key: str) -> int:
    if not _is_integer(value) or value < 0:
        raise ParserError(f"Invalid IFEX YAML: constraint '{key}' must be a non-negative integer")
    return value


class Parser:
    """An IFEX service description, parsed and ready for lookup and validation."""

    def __init__(self, ifex_yaml: str) -> None:
        self._ifex_yaml = ifex_yaml
        self._service_name = ""
        self._major_version = 1
        self._minor_version = 0
        self._service_description = ""
        self._methods: List[MethodSignature] = []
        self._struct_names: List[str] = []
        self._enum_names: List[str] = []
        self._struct_definitions: Dict[str, StructDefinition] = {}
        self._enum_definitions: Dict[str, EnumDefinition] = {}

        try:
            root = next(iter(yaml.safe_load_all(ifex_yaml)), None)
        except yaml.YAMLError as exc:
            logger.error("Failed to parse IFEX YAML: %s", exc)
            raise ParserError(f"Invalid IFEX YAML: {exc}") from exc
        if not isinstance(root, dict):
            raise ParserError("Invalid IFEX YAML: document root must be a mapping")
        self._parse_service(root)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "Parser":
        """Read and parse an IFEX document from a file."""
        try:
            text = Path(file_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ParserError(f"Failed to open file: {file_path}") from exc
        return cls(text)

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def service_version(self) -> str:
        return f"{self._major_version}.{self._minor_version}"

    @property
    def service_description(self) -> str:
        return self._service_description

    @property
    def method_names(self) -> List[str]:
        return [method.method_name for method in self._methods]

    def has_method(self, method_name: str) -> bool:
        """Whether the service declares a method with this name."""
        return any(method.method_name == method_name for method in self._methods)

    def _find_method(self, method_name: str) -> Optional[MethodSignature]:
        return next((m for m in self._methods if m.method_name == method_name), None)

    def method_signature(self, method_name: str) -> MethodSignature:
        """Return the signature of a method; raise KeyError if it is unknown."""
        method = self._find_method(method_name)
        if method is None:
            raise KeyError(f"Method not found: {method_name}")
        return method

    @property
    def all_methods(self) -> List[MethodSignature]:
        return list(self._methods)

    def validate_parameters(self, method_name: str, parameters_json: str) -> ValidationResult:
        """Check a JSON object of call parameters against a method's inputs."""
        result = ValidationResult()
        method = self._find_method(method_name)
        if method is None:
            result.valid = False
            result.errors.append(f"Method not found: {method_name}")
            return result

        try:
            params = json.loads(parameters_json)
        except json.JSONDecodeError as exc:
            result.valid = False
            result.errors.append(f"Invalid JSON: {exc}")
            return result

        if not isinstance(params, dict):
            result.valid = False
            result.errors.append("Parameters must be a JSON object")
            return result

        for param in method.input_parameters:
            if param.name not in params:
                if not param.is_optional:
                    result.valid = False
                    result.errors.append(f"Missing required parameter: {param.name}")
                continue
            if not self._value_matches(params[param.name], param):
                result.valid = False
                expected = type_to_string(param.type)
                if param.is_array:
                    expected += " array"
                result.errors.append(
                    f"Invalid type for parameter '{param.name}': expected {expected}"
                )

        known = {param.name for param in method.input_parameters}
        for key in sorted(params):
            if key not in known:
                result.valid = False
                result.errors.append(f"Unexpected parameter: {key}")

        return result

    @property
    def struct_names(self) -> List[str]:
        return list(self._struct_names)

    @property
    def enum_names(self) -> List[str]:
        return list(self._enum_names)

    def struct_definition(self, struct_name: str) -> Optional[StructDefinition]:
        """Return the named struct definition, or None."""
        return self._struct_definitions.get(struct_name)

    def enum_definition(self, enum_name: str) -> Optional[EnumDefinition]:
        """Return the named enum definition, or None."""
        return self._enum_definitions.get(enum_name)

    @property
    def all_struct_definitions(self) -> List[StructDefinition]:
        return list(self._struct_definitions.values())

    @property
    def all_enum_definitions(self) -> List[EnumDefinition]:
        return list(self._enum_definitions.values())

    @property
    def ifex_yaml(self) -> str:
        return self._ifex_yaml

    def _parse_service(self, root: Dict[Any, Any]) -> None:
        self._service_name = _require_str(root, "name", "service")
        self._major_version = _optional_int(root, "major_version", 1)
        self._minor_version = _optional_int(root, "minor_version", 0)
        self._service_description = _optional_str(root, "description")
        for namespace in _sequence(root, "namespaces"):
            self._parse_namespace(namespace)

    def _parse_namespace(self, ns: Dict[Any, Any]) -> None:
        namespace_name = _require_str(ns, "name", "namespace")

        for enum_node in _sequence(ns, "enumerations"):
            enum_def = EnumDefinition(
                name=_require_str(enum_node, "name", "enumeration"),
                description=_optional_str(enum_node, "description"),
            )
            enum_def.datatype = self._parse_type(
                _require_str(enum_node, "datatype", f"enumeration {enum_def.name}")
            )
            for option_node in _sequence(enum_node, "options"):
                value = option_node.get("value")
                if not _is_integer(value):
                    raise ParserError(
                        f"Invalid IFEX YAML: enum option value must be an integer in {enum_def.name}"
                    )
                enum_def.options.append(
                    EnumOption(
                        name=_require_str(option_node, "name", f"enumeration {enum_def.name}"),
                        description=_optional_str(option_node, "description"),
                        value=value,
                    )
                )
            self._enum_names.append(enum_def.name)
            self._enum_definitions[enum_def.name] = enum_def

        for struct_node in _sequence(ns, "structs"):
            struct_def = StructDefinition(
                name=_require_str(struct_node, "name", "struct"),
                description=_optional_str(struct_node, "description"),
            )
            struct_def.members = [
                self._parse_parameter(member) for member in _sequence(struct_node, "members")
            ]
            self._struct_names.append(struct_def.name)
            self._struct_definitions[struct_def.name] = struct_def

        for method_node in _sequence(ns, "methods"):
            method = MethodSignature(
                service_name=self._service_name,
                namespace_name=namespace_name,
                method_name=_require_str(method_node, "name", "method"),
                description=_optional_str(method_node, "description"),
            )
            method.input_parameters = [
                self._parse_parameter(p) for p in _sequence(method_node, "input")
            ]
            method.output_parameters = [
                self._parse_parameter(p) for p in _sequence(method_node, "output")
            ]
            for key, value in method_node.items():
                key_text = _scalar_text(key)
                if key_text.startswith("x-"):
                    method.metadata[key_text] = _emit(value)
            self._methods.append(method)

    def _parse_parameter(self, node: Dict[Any, Any]) -> Parameter:
        param = Parameter(
            name=_require_str(node, "name", "parameter"),
            description=_optional_str(node, "description"),
        )

        if node.get("datatype") is not None:
            datatype = _require_str(node, "datatype", f"parameter {param.name}")
        elif node.get("type") is not None:
            datatype = _require_str(node, "type", f"parameter {param.name}")
        else:
            raise ParserError(f"Parameter missing 'datatype' field: {param.name}")
        param.type_name = datatype

        if len(datatype) > 2 and datatype.endswith("[]"):
            param.is_array = True
            datatype = datatype[:-2]
        param.type = self._parse_type(datatype)

        if "mandatory" in node:
            mandatory = node["mandatory"]
            if not isinstance(mandatory, bool):
                raise ParserError(
                    f"Invalid IFEX YAML: 'mandatory' must be a boolean for {param.name}"
                )
            param.is_optional = not mandatory

        if "default" in node:
            param.default_value = _emit(node["default"])

        constraints = node.get("constraints")
        if isinstance(constraints, dict):
            if constraints.get("min") is not None:
                param.constraints.min = _as_float(constraints["min"], "min")
            if constraints.get("max") is not None:
                param.constraints.max = _as_float(constraints["max"], "max")
            if constraints.get("min_items") is not None:
                param.constraints.min_items = _as_count(constraints["min_items"], "min_items")
            if constraints.get("max_items") is not None:
                param.constraints.max_items = _as_count(constraints["max_items"], "max_items")

        return param

    def _parse_type(self, type_str: str) -> Type:
        primitive = _PRIMITIVE_TYPES.get(type_str)
        if primitive is not None:
            return primitive
        if type_str in self._enum_names:
            return Type.ENUM
        if type_str in self._struct_names:
            return Type.STRUCT
        return Type.STRING

    @staticmethod
    def _value_matches(value: Any, param: Parameter) -> bool:
        if param.is_array:
            return isinstance(value, list)
        if param.type is Type.BOOLEAN:
            return isinstance(value, bool)
        if param.type in _INTEGER_TYPES:
            return _is_integer(value)
        if param.type in (Type.FLOAT, Type.DOUBLE):
            return _is_number(value)
        if param.type in (Type.STRING, Type.BYTES):
            return isinstance(value, str)
        if param.type is Type.STRUCT:
            return isinstance(value, dict)
        if param.type is Type.ARRAY:
            return isinstance(value, list)
        return False