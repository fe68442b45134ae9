"""
Type definitions for EVM permit signing
"""

from typing import Any

from pydantic import BaseModel, Field

UINT48_MAX = (1 << 48) - 1
UINT160_MAX = (1 << 160) - 1
UINT256_MAX = (1 << 256) - 1


class EIP712Domain(BaseModel):
    """EIP-712 domain of an EIP-2612 token

    ``version`` differs per token (USDC uses "2", most tokens "1") and must
    come from the token itself.
    """

    name: str
    version: str
    chain_id: int = Field(alias="chainId", ge=0)
    verifying_contract: str = Field(alias="verifyingContract")

    class Config:
        populate_by_name = True

    def to_typed_data(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


class PermitMessage(BaseModel):
    """EIP-2612 Permit message"""

    owner: str
    spender: str
    value: str
    nonce: int = Field(ge=0)
    deadline: int = Field(ge=0)


class EcdsaSignature(BaseModel):
    """ECDSA signature split into legacy (v, r, s) form"""

    v: int = Field(ge=27, le=28)
    r: str
    s: str

    def to_hex(self) -> str:
        """Repack as 65-byte ``r || s || v`` hex string"""
        return "0x" + self.r[2:] + self.s[2:] + format(self.v, "02x")


class ERC20PermitSignature(BaseModel):
    """Permit signature data for the on-chain permit() call"""

    value: str
    deadline: int
    v: int
    r: str
    s: str


class SignERC20PermitResult(BaseModel):
    """Result of an EIP-2612 signing request"""

    permit_signature: ERC20PermitSignature = Field(alias="permitSignature")
    signer_address: str = Field(alias="signerAddress")
    typed_data: dict[str, Any] = Field(alias="typedData")

    class Config:
        populate_by_name = True


class ERC20AllowanceInfo(BaseModel):
    """Current ERC-20 allowance and whether it covers the required amount"""

    allowance: int = Field(ge=0)
    is_sufficient: bool = Field(alias="isSufficient")

    class Config:
        populate_by_name = True


class Permit2Allowance(BaseModel):
    """On-chain Permit2 allowance for an (owner, token, spender) triple"""

    amount: int = Field(ge=0, le=UINT160_MAX)
    expiration: int = Field(ge=0, le=UINT48_MAX)
    nonce: int = Field(ge=0, le=UINT48_MAX)


class PermitDetails(BaseModel):
    """Permit2 PermitDetails struct"""

    token: str
    amount: str
    expiration: int = Field(ge=0, le=UINT48_MAX)
    nonce: int = Field(ge=0, le=UINT48_MAX)


class PermitSingle(BaseModel):
    """Permit2 PermitSingle struct (the EIP-712 primary type)"""

    details: PermitDetails
    spender: str
    sig_deadline: int = Field(alias="sigDeadline", ge=0)

    class Config:
        populate_by_name = True


class SignPermit2Result(BaseModel):
    """Result of a Permit2 signing request"""

    permit_single: PermitSingle = Field(alias="permitSingle")
    signature: str
    signer_address: str = Field(alias="signerAddress")

    class Config:
        populate_by_name = True
