# ifexcore

Core building blocks for working with IFEX service descriptions: a YAML
interface parser with JSON parameter validation, and the shared data model
for services, methods, parameters and calls.

## Installation

```
pip install ifexcore
```

## Parsing an IFEX description

```python
from ifexcore.parser import Parser

parser = Parser("""
name: echo_service
major_version: 1
minor_version: 0
description: Simple echo service
namespaces:
  - name: basic
    methods:
      - name: echo
        input:
          - name: message
            datatype: string
            mandatory: true
        output:
          - name: response
            datatype: string
""")

parser.service_name         # "echo_service"
parser.service_version      # "1.0"
parser.method_names         # ["echo"]
parser.has_method("echo")   # True

signature = parser.method_signature("echo")
signature.input_parameters[0].name   # "message"
```

A description can also be loaded with `Parser.from_file(path)`. A document
that is not valid YAML, whose root is not a mapping, or that misses a
required field such as the service `name` raises `ParserError` (a
`ValueError`). Asking `method_signature` for an unknown method raises
`KeyError`.

Parameters may give their type as `datatype` or `type`; a trailing `[]`
marks an array. Enumerations and structs declared in a namespace are
available through `enum_names`, `struct_names`, `enum_definition(name)`,
`struct_definition(name)`, `all_enum_definitions` and
`all_struct_definitions`. Method keys starting with `x-` are kept as YAML
text in `MethodSignature.metadata`. The original text is available as
`parser.ifex_yaml`, and `type_to_string(Type.UINT8)` gives `"uint8"`.

## Validating call parameters

```python
result = parser.validate_parameters("echo", '{"message": "hi"}')
result.valid    # True

result = parser.validate_parameters("echo", "{}")
result.valid    # False
result.errors   # ["Missing required parameter: message"]
```

Validation reports an unknown method, invalid JSON, a non-object payload,
missing required parameters, values of the wrong JSON type and parameters
the method does not declare.

## Data model

`ifexcore.types` holds the dataclasses and enums shared across services:
`Type`, `Constraints`, `Parameter`, `MethodSignature`, `Transport`,
`ServiceEndpoint`, `ServiceStatus`, `ServiceInfo` (with `is_available()`),
`ServiceFilter`, `CallRequest`, `CallStatus`, `CallResponse`,
`ValidationResult`, `StructDefinition`, `EnumOption` and `EnumDefinition`.

## What this package does not do

It describes services but does not talk to them: there is no discovery
client, no call dispatcher, no server and no helpers for resolving network
addresses. The service and call types are plain data for other code to fill
in.