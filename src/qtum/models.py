"""Pydantic models for Qtum node RPC results."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


ZERO_CONTRACT_ADDRESS = "0" * 40

OP_CALL = "OP_CALL"
OP_CREATE = "OP_CREATE"
OP_SENDER = "OP_SENDER"

# version, gas limit, gas price, payload[, contract address], opcode
_CALL_TOKENS = 6
_CREATE_TOKENS = 5


class BlockHeader(BaseModel):
    """Result of ``getblockheader``."""

    hash: str = Field(..., description="Block hash")
    height: int = Field(..., description="Block height")
    time: int = Field(..., description="Block timestamp (unix seconds)")
    nonce: int = Field(default=0, description="Block nonce")
    difficulty: float = Field(default=0, description="Block difficulty")
    hash_state_root: str = Field(
        default="", description="EVM state root", alias="hashStateRoot"
    )
    previous_block_hash: str = Field(
        default="",
        description="Parent block hash, empty for genesis",
        alias="previousblockhash",
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def is_genesis_block(self) -> bool:
        """Return True for the height 0 block."""
        return self.height == 0


class Block(BaseModel):
    """Result of ``getblock`` with verbosity 1."""

    hash: str = Field(..., description="Block hash")
    height: int = Field(..., description="Block height")
    size: int = Field(..., description="Serialized block size in bytes")
    merkle_root: str = Field(..., description="Merkle root", alias="merkleroot")
    nonce: int = Field(default=0, description="Block nonce")
    tx: list[str] = Field(default_factory=list, description="Transaction ids")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TransactionDetail(BaseModel):
    """Wallet detail entry of ``gettransaction``."""

    address: str | None = None
    category: str | None = None
    amount: Decimal | None = None
    label: str = ""
    vout: int | None = None

    model_config = ConfigDict(extra="ignore")


class Transaction(BaseModel):
    """Result of the wallet-level ``gettransaction``."""

    txid: str = Field(..., description="Transaction id")
    hex: str = Field(..., description="Raw transaction hex")
    block_hash: str = Field(default="", alias="blockhash")
    block_index: int = Field(default=0, alias="blockindex")
    generated: bool = Field(default=False, description="Coinbase/coinstake flag")
    confirmations: int = 0
    details: list[TransactionDetail] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def is_pending(self) -> bool:
        """Return True while the transaction is not in a block."""
        return self.block_hash == ""


class ScriptSig(BaseModel):
    """Input unlocking script."""

    asm: str = ""
    hex: str = ""


class TransactionInput(BaseModel):
    """Decoded transaction input (``vin`` entry)."""

    txid: str | None = Field(default=None, description="Referenced tx id")
    vout: int | None = Field(default=None, description="Referenced output index")
    coinbase: str | None = Field(default=None, description="Coinbase data")
    script_sig: ScriptSig | None = Field(default=None, alias="scriptSig")
    sequence: int | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def is_coinbase(self) -> bool:
        return self.coinbase is not None


class ScriptPubKey(BaseModel):
    """Output locking script."""

    asm: str = ""
    hex: str = ""
    type: str = ""
    addresses: list[str] = Field(default_factory=list)
    address: str | None = None

    model_config = ConfigDict(extra="ignore")

    def first_address(self) -> str | None:
        """Return the destination address, whichever field the node used."""
        if self.address:
            return self.address
        if self.addresses:
            return self.addresses[0]
        return None


class TransactionOutput(BaseModel):
    """Decoded transaction output (``vout`` entry)."""

    value: Decimal = Field(..., description="Amount in QTUM")
    n: int = Field(..., description="Output index")
    script_pub_key: ScriptPubKey = Field(..., alias="scriptPubKey")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ContractInfo(BaseModel):
    """Smart-contract invocation carried by a transaction output script."""

    from_: str = Field(..., description="Sender hex address", alias="from")
    to: str | None = Field(..., description="Contract hex address, None on create")
    gas_used: int = Field(..., description="Gas reported by the script")
    gas_price: int = Field(..., description="Gas price in satoshi")
    user_input: str = Field(..., description="Call data or contract bytecode")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


def _parse_script_number(token: str) -> int:
    """Parse an ASM number token.

    Small script numbers are rendered in decimal; larger pushes come out as
    little-endian hex bytes.
    """
    if token.lstrip("-").isdigit():
        return int(token)
    return int.from_bytes(bytes.fromhex(token), "little")


def parse_contract_script(asm: str) -> ContractInfo | None:
    """Parse an ``OP_CALL``/``OP_CREATE`` output script.

    Args:
        asm: ``scriptPubKey.asm`` of an output

    Returns:
        ContractInfo, or None when the script does not invoke a contract

    Raises:
        ValueError: If the script ends in a contract opcode but is malformed

    Example:
        >>> info = parse_contract_script(
        ...     "4 250000 40 a9059cbb 1e6f89d7399081b4f8f8aa1ae2805a5efff2f960 OP_CALL"
        ... )
        >>> info.gas_used, info.to
        (250000, '1e6f89d7399081b4f8f8aa1ae2805a5efff2f960')
    """
    tokens = asm.split()
    if not tokens or tokens[-1] not in (OP_CALL, OP_CREATE):
        return None

    sender = ZERO_CONTRACT_ADDRESS
    if OP_SENDER in tokens:
        idx = tokens.index(OP_SENDER)
        # address type, sender address, signature, OP_SENDER
        if idx < 3:
            msg = f"malformed OP_SENDER script: {asm}"
            raise ValueError(msg)
        sender = tokens[idx - 2].lower()
        tokens = tokens[idx + 1 :]

    opcode = tokens[-1]
    expected = _CALL_TOKENS if opcode == OP_CALL else _CREATE_TOKENS
    if len(tokens) != expected:
        msg = f"malformed {opcode} script: {asm}"
        raise ValueError(msg)

    try:
        gas_limit = _parse_script_number(tokens[1])
        gas_price = _parse_script_number(tokens[2])
    except ValueError:
        msg = f"malformed gas fields in {opcode} script: {asm}"
        raise ValueError(msg) from None

    return ContractInfo(
        from_=sender,
        to=tokens[4].lower() if opcode == OP_CALL else None,
        gas_used=gas_limit,
        gas_price=gas_price,
        user_input=tokens[3].lower(),
    )


class DecodedRawTransaction(BaseModel):
    """Result of ``decoderawtransaction``."""

    txid: str = Field(..., description="Transaction id")
    vins: list[TransactionInput] = Field(default_factory=list, alias="vin")
    vouts: list[TransactionOutput] = Field(default_factory=list, alias="vout")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def calc_amount(self) -> Decimal:
        """Sum of all output values in QTUM."""
        return sum((vout.value for vout in self.vouts), Decimal(0))

    def extract_contract_info(self) -> ContractInfo | None:
        """Return the first contract invocation found in the outputs."""
        for vout in self.vouts:
            info = parse_contract_script(vout.script_pub_key.asm)
            if info is not None:
                return info
        return None


class RawTransaction(DecodedRawTransaction):
    """Result of ``getrawtransaction`` in verbose mode."""

    hex: str = ""
    block_hash: str = Field(default="", alias="blockhash")
    confirmations: int = 0

    def is_pending(self) -> bool:
        """Return True while the transaction is not in a block."""
        return self.block_hash == ""


class TransactionOut(BaseModel):
    """Result of ``gettxout``."""

    best_block: str = Field(..., alias="bestblock")
    confirmations: int = 0
    value: Decimal = Field(..., description="Amount in QTUM")
    script_pub_key: ScriptPubKey = Field(..., alias="scriptPubKey")
    coinbase: bool = False

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


__all__ = [
    "Block",
    "BlockHeader",
    "ContractInfo",
    "DecodedRawTransaction",
    "RawTransaction",
    "ScriptPubKey",
    "Transaction",
    "TransactionDetail",
    "TransactionInput",
    "TransactionOut",
    "TransactionOutput",
    "parse_contract_script",
]
