"""
ECDSA signature parsing and recovery
"""

from typing import Any

from setto_crypto.encoding import is_hex, strip_0x
from setto_crypto.evm.types import EcdsaSignature
from setto_crypto.exceptions import DecodeError, ValidationError

SIGNATURE_HEX_LENGTH = 130


def parse_signature(signature: str) -> EcdsaSignature:
    """
    Split a 65-byte signature into (v, r, s).

    Wallets return either a legacy recovery byte (27/28) or a bare recovery
    id (0/1); the latter is shifted into legacy form.

    Args:
        signature: 0x-prefixed hex string, 130 hex chars after the prefix

    Returns:
        EcdsaSignature with v in {27, 28} and 32-byte r, s

    Raises:
        DecodeError: If the signature is not exactly 65 bytes of hex or the
            recovery byte is not one of 0, 1, 27, 28
    """
    body = strip_0x(signature)
    if len(body) != SIGNATURE_HEX_LENGTH:
        raise DecodeError(
            f"Signature must be 65 bytes ({SIGNATURE_HEX_LENGTH} hex chars), got {len(body)}",
            signature,
        )
    if not is_hex(body):
        raise DecodeError("Signature contains non-hex characters", signature)

    r = "0x" + body[0:64].lower()
    s = "0x" + body[64:128].lower()
    v = int(body[128:130], 16)
    if v < 27:
        v += 27
    if v not in (27, 28):
        raise DecodeError(f"Invalid recovery byte: {int(body[128:130], 16)}", signature)

    return EcdsaSignature(v=v, r=r, s=s)


def _coerce_value(types: dict[str, Any], type_name: str, value: Any) -> Any:
    if type_name.endswith("]"):
        base = type_name[: type_name.rindex("[")]
        return [_coerce_value(types, base, item) for item in value]
    if type_name in types:
        return {
            field["name"]: _coerce_value(types, field["type"], value[field["name"]])
            for field in types[type_name]
            if field["name"] in value
        }
    if type_name.startswith(("uint", "int")) and isinstance(value, str):
        try:
            return int(value, 16) if value[:2] in ("0x", "0X") else int(value, 10)
        except ValueError as e:
            raise ValidationError(f"{type_name} field is not an integer: {value!r}") from e
    return value


def normalize_typed_data(typed_data: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of *typed_data* with integer fields given as strings
    converted to int.

    Wallets accept decimal strings for uintN fields (and this package sends
    amounts that way); eth_account's encoder is given plain ints.
    """
    types = typed_data["types"]
    return {
        **typed_data,
        "domain": _coerce_value(types, "EIP712Domain", typed_data["domain"]),
        "message": _coerce_value(types, typed_data["primaryType"], typed_data["message"]),
    }


def recover_typed_data_signer(typed_data: dict[str, Any], signature: str) -> str:
    """Recover the checksummed address that produced *signature* over *typed_data*"""
    from eth_account import Account
    from eth_account.messages import encode_typed_data

    normalized = parse_signature(signature).to_hex()
    encoded = encode_typed_data(full_message=normalize_typed_data(typed_data))
    return Account.recover_message(encoded, signature=normalized)
