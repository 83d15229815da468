"""
Voucher signing and verification (EIP-712 typed data).

The digest is a pure function of the signing domain and the voucher's
{redeemer, price, amount, data} fields:

    digest = keccak256(0x1901 || domainSeparator || hashStruct(voucher))

Recovery is a separate primitive over (digest, signature) so the
security-critical check can be tested in isolation from the sale engine.
Signing is done with eth-account's own typed-data encoder, so every signature
produced here also cross-checks the hand-built digest.
"""

from __future__ import annotations

from typing import Any, Dict

from eth_abi import encode
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError
from eth_utils import keccak

from domain.errors import InvalidSignatureError
from domain.voucher import SigningDomain, Voucher

EIP712_DOMAIN_TYPE: str = (
    "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
VOUCHER_TYPE: str = "NFTVoucher(address redeemer,uint256 price,uint256 amount,bytes data)"

EIP712_DOMAIN_TYPEHASH: bytes = keccak(text=EIP712_DOMAIN_TYPE)
VOUCHER_TYPEHASH: bytes = keccak(text=VOUCHER_TYPE)

SIGNATURE_LENGTH: int = 65


def domain_separator(domain: SigningDomain) -> bytes:
    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                EIP712_DOMAIN_TYPEHASH,
                keccak(text=domain.name),
                keccak(text=domain.version),
                domain.chain_id,
                domain.verifying_contract,
            ],
        )
    )


def voucher_struct_hash(voucher: Voucher) -> bytes:
    # Dynamic `bytes` members are hashed before encoding.
    return keccak(
        encode(
            ["bytes32", "address", "uint256", "uint256", "bytes32"],
            [
                VOUCHER_TYPEHASH,
                voucher.redeemer,
                voucher.price,
                voucher.amount,
                keccak(voucher.data),
            ],
        )
    )


def voucher_digest(voucher: Voucher, domain: SigningDomain) -> bytes:
    """
    32-byte digest a voucher signature is made over.

    The signature field of `voucher` is not part of the digest.
    """
    return keccak(b"\x19\x01" + domain_separator(domain) + voucher_struct_hash(voucher))


def recover_signer(digest: bytes, signature: bytes) -> str:
    """
    Recover the checksummed address that produced `signature` over `digest`.

    Accepts 65-byte (r, s, v) signatures with v in {0, 1, 27, 28}.

    Raises:
        InvalidSignatureError: If the signature is malformed or unrecoverable.
    """
    if len(digest) != 32:
        raise InvalidSignatureError(f"Digest must be 32 bytes, got {len(digest)}")
    if len(signature) != SIGNATURE_LENGTH:
        raise InvalidSignatureError(
            f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}"
        )

    r = int.from_bytes(signature[0:32], "big")
    s = int.from_bytes(signature[32:64], "big")
    v = signature[64]
    if v >= 27:
        v -= 27
    if v not in (0, 1):
        raise InvalidSignatureError(f"Invalid signature recovery id: {signature[64]}")

    try:
        public_key = keys.Signature(vrs=(v, r, s)).recover_public_key_from_msg_hash(digest)
    except (BadSignature, KeyValidationError) as e:
        raise InvalidSignatureError(f"Unrecoverable signature: {e}") from e

    return public_key.to_checksum_address()


def recover_voucher_signer(voucher: Voucher, domain: SigningDomain) -> str:
    return recover_signer(voucher_digest(voucher, domain), voucher.signature)


def typed_data_for(voucher: Voucher, domain: SigningDomain) -> Dict[str, Any]:
    """Full EIP-712 message, as wallets and `eth_signTypedData_v4` expect it."""

    return {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
            "NFTVoucher": [
                {"name": "redeemer", "type": "address"},
                {"name": "price", "type": "uint256"},
                {"name": "amount", "type": "uint256"},
                {"name": "data", "type": "bytes"},
            ],
        },
        "primaryType": "NFTVoucher",
        "domain": {
            "name": domain.name,
            "version": domain.version,
            "chainId": domain.chain_id,
            "verifyingContract": domain.verifying_contract,
        },
        "message": {
            "redeemer": voucher.redeemer,
            "price": voucher.price,
            "amount": voucher.amount,
            "data": voucher.data,
        },
    }


def sign_voucher(voucher: Voucher, private_key: str | bytes, domain: SigningDomain) -> Voucher:
    """
    Sign `voucher` off-chain and return a copy carrying the signature.

    Example:
        unsigned = Voucher(redeemer=buyer, price=100, amount=1)
        voucher = sign_voucher(unsigned, signer_key, SigningDomain.for_sale(config))
    """
    signable = encode_typed_data(full_message=typed_data_for(voucher, domain))
    signed = Account.sign_message(signable, private_key=private_key)
    return voucher.with_signature(bytes(signed.signature))


__all__ = [
    "domain_separator",
    "voucher_struct_hash",
    "voucher_digest",
    "recover_signer",
    "recover_voucher_signer",
    "typed_data_for",
    "sign_voucher",
]
