"""Unit tests for constructor argument decoding and serialization."""

import pytest
from eth_abi import encode
from eth_abi.exceptions import DecodingError

from forge_deployments.abi import (
    AbiKind,
    abi_type_string,
    classify_abi_type,
    decode_constructor_arguments,
    extract_constructor_inputs,
    serialize_value,
)
from forge_deployments.exceptions import ConstructorDecodingError, UnsupportedAbiTypeError

OWNER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestClassifyAbiType:
    """Test the classify_abi_type function."""

    @pytest.mark.parametrize(
        "type_str,kind",
        [
            ("address", AbiKind.ADDRESS),
            ("bool", AbiKind.BOOL),
            ("bytes1", AbiKind.FIXED_BYTES),
            ("bytes32", AbiKind.FIXED_BYTES),
            ("int24", AbiKind.INT),
            ("int256", AbiKind.INT),
            ("uint8", AbiKind.UINT),
            ("uint256", AbiKind.UINT),
            ("string", AbiKind.STRING),
            ("function", AbiKind.FUNCTION),
            ("bytes", AbiKind.BYTES),
            ("tuple", AbiKind.TUPLE),
            ("uint256[]", AbiKind.ARRAY),
            ("tuple[]", AbiKind.ARRAY),
            ("address[2]", AbiKind.FIXED_ARRAY),
            ("uint8[][3]", AbiKind.FIXED_ARRAY),
        ],
    )
    def test_classifies_types(self, type_str, kind):
        """Test that each declared type maps to its value kind."""
        assert classify_abi_type(type_str) == kind

    def test_unknown_type_raises(self):
        """Test that fixed-point and other unknown types are rejected."""
        with pytest.raises(UnsupportedAbiTypeError):
            classify_abi_type("fixed128x18")


class TestAbiTypeString:
    """Test the abi_type_string function."""

    def test_scalar_type_unchanged(self):
        """Test that scalar types are passed through."""
        assert abi_type_string({"name": "x", "type": "uint256"}) == "uint256"

    def test_nested_tuple_expanded(self):
        """Test that tuples expand their components recursively."""
        param = {
            "name": "config",
            "type": "tuple[]",
            "components": [
                {"name": "a", "type": "uint8"},
                {
                    "name": "inner",
                    "type": "tuple",
                    "components": [
                        {"name": "b", "type": "address"},
                        {"name": "c", "type": "bool"},
                    ],
                },
            ],
        }
        assert abi_type_string(param) == "(uint8,(address,bool))[]"

    def test_function_decoded_as_bytes24(self):
        """Test that the function type is decoded as its packed 24 bytes."""
        assert abi_type_string({"name": "cb", "type": "function"}) == "bytes24"


class TestSerializeValue:
    """Test the serialize_value function."""

    def test_bool_is_string(self):
        """Test that booleans are written as strings, not JSON booleans."""
        assert serialize_value({"name": "b", "type": "bool"}, True) == "true"
        assert serialize_value({"name": "b", "type": "bool"}, False) == "false"

    def test_large_uint_is_decimal_string(self):
        """Test that integers beyond 64 bits keep full precision."""
        value = 2**256 - 1
        assert serialize_value({"name": "x", "type": "uint256"}, value) == str(value)

    def test_negative_int(self):
        """Test that signed integers keep their sign."""
        assert serialize_value({"name": "x", "type": "int24"}, -887272) == "-887272"

    def test_fixed_bytes_hex(self):
        """Test that fixed-size bytes become 0x-prefixed hex."""
        assert serialize_value({"name": "s", "type": "bytes4"}, b"\xde\xad\xbe\xef") == "0xdeadbeef"

    def test_string_passthrough(self):
        """Test that strings are not altered."""
        assert serialize_value({"name": "s", "type": "string"}, "Wrapped Ether") == "Wrapped Ether"

    def test_address_passthrough(self):
        """Test that addresses are written as received."""
        assert serialize_value({"name": "a", "type": "address"}, OWNER) == OWNER

    def test_dynamic_bytes_keeps_encoding_frame(self):
        """Test that dynamic bytes are re-encoded with offset and length words."""
        result = serialize_value({"name": "d", "type": "bytes"}, b"\xca\xfe")

        assert not result.startswith("0x")
        assert result[:64] == f"{32:064x}"  # offset
        assert result[64:128] == f"{2:064x}"  # length
        assert result[128:132] == "cafe"
        assert len(result) == 3 * 64

    def test_array_raises(self):
        """Test that arrays are rejected instead of serialized."""
        with pytest.raises(UnsupportedAbiTypeError, match="array"):
            serialize_value({"name": "xs", "type": "uint256[]"}, (1, 2))

    def test_fixed_array_raises(self):
        """Test that fixed-size arrays are rejected instead of serialized."""
        with pytest.raises(UnsupportedAbiTypeError, match="fixed array"):
            serialize_value({"name": "xs", "type": "address[2]"}, (OWNER, OWNER))


class TestExtractConstructorInputs:
    """Test the extract_constructor_inputs function."""

    def test_keys_in_declaration_order(self):
        """Test that the mapping follows parameter order."""
        params = [
            {"name": "z", "type": "uint8"},
            {"name": "a", "type": "bool"},
        ]
        result = extract_constructor_inputs(params, (1, True))
        assert list(result.keys()) == ["z", "a"]

    def test_length_mismatch_raises(self):
        """Test that mismatched params and values are a caller error."""
        with pytest.raises(ValueError):
            extract_constructor_inputs([{"name": "x", "type": "uint8"}], ())

    def test_empty(self):
        """Test that no parameters give an empty mapping."""
        assert extract_constructor_inputs([], ()) == {}


class TestDecodeConstructorArguments:
    """Test the decode_constructor_arguments function."""

    def test_decodes_scalar_arguments(self):
        """Test decoding a constructor with every scalar kind."""
        params = [
            {"name": "owner", "type": "address"},
            {"name": "supply", "type": "uint256"},
            {"name": "paused", "type": "bool"},
            {"name": "name", "type": "string"},
            {"name": "salt", "type": "bytes32"},
            {"name": "data", "type": "bytes"},
            {"name": "tick", "type": "int24"},
            {"name": "callback", "type": "function"},
        ]
        raw = encode(
            ["address", "uint256", "bool", "string", "bytes32", "bytes", "int24", "bytes24"],
            [OWNER, 10**30, False, "Token", b"\x01" * 32, b"\xde\xad", -60, b"\x11" * 24],
        ).hex()

        result = decode_constructor_arguments(params, raw)

        assert list(result.keys()) == [p["name"] for p in params]
        assert result["owner"].lower() == OWNER.lower()
        assert result["supply"] == "1000000000000000000000000000000"
        assert result["paused"] == "false"
        assert result["name"] == "Token"
        assert result["salt"] == "0x" + "01" * 32
        assert result["data"] == encode(["bytes"], [b"\xde\xad"]).hex()
        assert result["tick"] == "-60"
        assert result["callback"] == "0x" + "11" * 24

    def test_accepts_0x_prefix(self):
        """Test that raw arguments may carry a 0x prefix."""
        params = [{"name": "fee", "type": "uint24"}]
        raw = "0x" + encode(["uint24"], [3000]).hex()
        assert decode_constructor_arguments(params, raw) == {"fee": "3000"}

    def test_nested_tuple_leaves(self):
        """Test that nested tuples produce nested mappings with every leaf."""
        params = [
            {
                "name": "config",
                "type": "tuple",
                "components": [
                    {"name": "a", "type": "uint8"},
                    {
                        "name": "inner",
                        "type": "tuple",
                        "components": [
                            {"name": "b", "type": "address"},
                            {"name": "c", "type": "bool"},
                        ],
                    },
                ],
            },
            {"name": "after", "type": "string"},
        ]
        raw = encode(["(uint8,(address,bool))", "string"], [(7, (OWNER, True)), "x"]).hex()

        result = decode_constructor_arguments(params, raw)

        assert result["config"]["a"] == "7"
        assert result["config"]["inner"]["b"].lower() == OWNER.lower()
        assert result["config"]["inner"]["c"] == "true"
        assert result["after"] == "x"

    def test_array_parameter_fails(self):
        """Test that an array constructor argument fails rather than being dropped."""
        params = [
            {"name": "owner", "type": "address"},
            {"name": "holders", "type": "address[]"},
        ]
        raw = encode(["address", "address[]"], [OWNER, [OWNER]]).hex()

        with pytest.raises(UnsupportedAbiTypeError):
            decode_constructor_arguments(params, raw)

    def test_fixed_array_in_tuple_fails(self):
        """Test that arrays nested inside tuples are also rejected."""
        params = [
            {
                "name": "config",
                "type": "tuple",
                "components": [{"name": "ids", "type": "uint256[2]"}],
            }
        ]
        raw = encode(["(uint256[2])"], [([1, 2],)]).hex()

        with pytest.raises(UnsupportedAbiTypeError):
            decode_constructor_arguments(params, raw)

    def test_no_constructor(self):
        """Test that a missing constructor yields an empty mapping."""
        assert decode_constructor_arguments(None, "") == {}

    def test_constructor_without_parameters(self):
        """Test that a constructor with no inputs yields an empty mapping."""
        assert decode_constructor_arguments([], "") == {}

    def test_truncated_arguments_fail(self):
        """Test that too few argument bytes raise a library error."""
        params = [{"name": "x", "type": "uint256"}]

        with pytest.raises(ConstructorDecodingError, match="uint256") as exc_info:
            decode_constructor_arguments(params, "")

        assert isinstance(exc_info.value.__cause__, DecodingError)

    def test_truncated_arguments_caught_as_value_error(self):
        """Test that decoding failures can be caught as ValueError."""
        params = [{"name": "owner", "type": "address"}]
        raw = encode(["address"], [OWNER]).hex()[:40]

        with pytest.raises(ValueError):
            decode_constructor_arguments(params, raw)

    def test_invalid_hex_fails(self):
        """Test that non-hex argument strings raise a library error."""
        params = [{"name": "x", "type": "uint256"}]

        with pytest.raises(ConstructorDecodingError):
            decode_constructor_arguments(params, "zz")
