"""Constructor argument decoding and JSON-safe serialization."""

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, encode_hex

from .exceptions import ConstructorDecodingError, UnsupportedAbiTypeError

# A constructor parameter as it appears in a JSON ABI:
# {"name": ..., "type": ..., "components": [...]}
AbiParam = Dict[str, Any]


class AbiKind(Enum):
    """
    Kinds of ABI values a constructor argument can hold.

    Value strings match the base type names of the ABI type grammar.
    """

    ADDRESS = "address"
    BOOL = "bool"
    FIXED_BYTES = "bytesN"
    INT = "int"
    UINT = "uint"
    STRING = "string"
    FUNCTION = "function"
    BYTES = "bytes"
    TUPLE = "tuple"
    ARRAY = "T[]"
    FIXED_ARRAY = "T[k]"


def classify_abi_type(type_str: str) -> AbiKind:
    """
    Map a JSON ABI type string to its value kind.

    Args:
        type_str: Type as declared in the ABI, e.g. "uint256", "tuple[]"

    Returns:
        AbiKind of the outermost type

    Raises:
        UnsupportedAbiTypeError: If the type has no known kind (e.g. fixed-point)
    """
    if type_str.endswith("[]"):
        return AbiKind.ARRAY
    if type_str.endswith("]"):
        return AbiKind.FIXED_ARRAY
    if type_str == "tuple" or type_str.startswith("("):
        return AbiKind.TUPLE

    for kind in (AbiKind.ADDRESS, AbiKind.BOOL, AbiKind.STRING, AbiKind.FUNCTION, AbiKind.BYTES):
        if type_str == kind.value:
            return kind

    if type_str.startswith("bytes"):
        return AbiKind.FIXED_BYTES
    if type_str.startswith("uint"):
        return AbiKind.UINT
    if type_str.startswith("int"):
        return AbiKind.INT

    raise UnsupportedAbiTypeError(f"Unsupported ABI type '{type_str}'")


def abi_type_string(param: AbiParam) -> str:
    """
    Build the decoder type string for a parameter.

    Tuples expand to their component types, e.g. "(address,uint256)[]".
    """
    type_str = param["type"]
    if type_str.startswith("tuple"):
        suffix = type_str[len("tuple"):]
        components = ",".join(abi_type_string(c) for c in param.get("components", []))
        return f"({components}){suffix}"
    if type_str.startswith("function"):
        # Packed address + selector
        return "bytes24" + type_str[len("function"):]
    return type_str


def serialize_value(param: AbiParam, value: Any) -> Any:
    """
    Convert one decoded ABI value into its JSON-safe form.

    Args:
        param: Parameter specification the value was decoded against
        value: Value returned by the decoder

    Returns:
        String for scalar kinds, dict keyed by component name for tuples

    Raises:
        UnsupportedAbiTypeError: For array and fixed-size array parameters
    """
    match classify_abi_type(param["type"]):
        case AbiKind.ADDRESS:
            return str(value)
        case AbiKind.BOOL:
            # Strings, not JSON booleans, for compatibility with existing logs
            return "true" if value else "false"
        case AbiKind.FIXED_BYTES | AbiKind.FUNCTION:
            return encode_hex(value)
        case AbiKind.INT | AbiKind.UINT:
            return str(value)
        case AbiKind.STRING:
            return value
        case AbiKind.BYTES:
            # Keeps the offset and length words of the single-value encoding
            return abi_encode(["bytes"], [value]).hex()
        case AbiKind.TUPLE:
            return extract_constructor_inputs(param.get("components", []), value)
        case AbiKind.ARRAY:
            raise UnsupportedAbiTypeError(
                f"Found array in parameter '{param.get('name', '')}' "
                f"({param['type']}), not implemented"
            )
        case AbiKind.FIXED_ARRAY:
            raise UnsupportedAbiTypeError(
                f"Found fixed array in parameter '{param.get('name', '')}' "
                f"({param['type']}), not implemented"
            )


def extract_constructor_inputs(
    params: Sequence[AbiParam], values: Sequence[Any]
) -> Dict[str, Any]:
    """
    Serialize decoded values into a mapping keyed by parameter name.

    Keys follow parameter declaration order.

    Raises:
        ValueError: If params and values differ in length
    """
    if len(params) != len(values):
        raise ValueError(
            f"Got {len(values)} decoded values for {len(params)} parameters"
        )

    result: Dict[str, Any] = {}
    for param, value in zip(params, values):
        result[param.get("name", "")] = serialize_value(param, value)
    return result


def decode_constructor_arguments(
    params: Optional[List[AbiParam]], raw_arguments: str
) -> Dict[str, Any]:
    """
    Decode hex-encoded constructor arguments into a JSON-safe mapping.

    Args:
        params: Constructor inputs from the ABI, None if there is no constructor
        raw_arguments: ABI-encoded arguments as hex, with or without 0x prefix

    Returns:
        Mapping of parameter name -> serialized value; empty without parameters

    Raises:
        UnsupportedAbiTypeError: If any parameter is array-typed
        ConstructorDecodingError: If the bytes are not hex or do not match the parameters
    """
    if not params:
        return {}

    types = [abi_type_string(p) for p in params]
    try:
        values = abi_decode(types, decode_hex(raw_arguments))
    except (DecodingError, ValueError) as e:
        # ValueError covers malformed hex
        raise ConstructorDecodingError(
            f"Could not decode constructor arguments as ({','.join(types)}): {e}"
        ) from e
    return extract_constructor_inputs(params, values)
