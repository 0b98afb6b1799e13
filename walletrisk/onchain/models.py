"""
Data models for on-chain observations.

Explorer responses are validated at the boundary with pydantic (string-typed
numbers coerced, unknown keys ignored) and converted into frozen dataclasses
that the analysis engine consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

WEI_PER_ETHER = 10**18


class ExplorerTransactionItem(BaseModel):
    """One item of an Etherscan-compatible `account/txlist` result."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    hash: str = Field("", description="Transaction hash")
    from_address: str = Field("", alias="from")
    to_address: str = Field("", alias="to")
    value: int = Field(0, ge=0, description="Transferred value in wei")
    time_stamp: int = Field(..., alias="timeStamp", description="Unix timestamp (seconds)")
    gas: int = 0
    gas_price: int = Field(0, alias="gasPrice")
    gas_used: int = Field(0, alias="gasUsed")
    is_error: bool = Field(False, alias="isError")

    @field_validator("value", "gas", "gas_price", "gas_used", "is_error", mode="before")
    @classmethod
    def blank_as_zero(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0
        return v


@dataclass(frozen=True)
class Transaction:
    """Normalized explorer transaction."""

    hash: str
    from_address: str
    to_address: str
    value: int  # wei
    timestamp: int  # unix seconds
    gas: int = 0
    gas_price: int = 0
    gas_used: int = 0
    is_error: bool = False

    @property
    def value_ether(self) -> float:
        return self.value / WEI_PER_ETHER

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> "Transaction":
        """Build from a single txlist item; raises pydantic.ValidationError on bad shape."""
        parsed = ExplorerTransactionItem.model_validate(item)
        return cls(
            hash=parsed.hash,
            from_address=parsed.from_address.lower(),
            to_address=parsed.to_address.lower(),
            value=parsed.value,
            timestamp=parsed.time_stamp,
            gas=parsed.gas,
            gas_price=parsed.gas_price,
            gas_used=parsed.gas_used,
            is_error=parsed.is_error,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "from": self.from_address,
            "to": self.to_address,
            "value": str(self.value),
            "timestamp": self.timestamp,
            "gas": self.gas,
            "gas_price": self.gas_price,
            "gas_used": self.gas_used,
            "is_error": self.is_error,
        }


@dataclass(frozen=True)
class WalletObservation:
    """
    Snapshot of a wallet's on-chain state for one analysis pass.

    Transactions are kept oldest-first; first/last are None when the wallet
    has no history.
    """

    address: str
    transaction_count: int
    balance: int  # wei
    transactions: tuple[Transaction, ...] = ()
    first_transaction: Transaction | None = None
    last_transaction: Transaction | None = None

    @classmethod
    def from_transactions(
        cls,
        address: str,
        transactions: list[Transaction] | tuple[Transaction, ...],
        balance: int = 0,
    ) -> "WalletObservation":
        ordered = tuple(sorted(transactions, key=lambda tx: tx.timestamp))
        return cls(
            address=address.lower(),
            transaction_count=len(ordered),
            balance=max(0, int(balance)),
            transactions=ordered,
            first_transaction=ordered[0] if ordered else None,
            last_transaction=ordered[-1] if ordered else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "transaction_count": self.transaction_count,
            "balance": str(self.balance),
            "first_transaction": self.first_transaction.to_dict() if self.first_transaction else None,
            "last_transaction": self.last_transaction.to_dict() if self.last_transaction else None,
        }


@dataclass(frozen=True)
class BehaviorPattern:
    """Independent behavioral flags derived from a WalletObservation."""

    rapid_transactions: bool = False
    suspicious_gas_usage: bool = False
    unusual_amounts: bool = False
    details: dict[str, Any] = field(default_factory=dict, compare=False)
    """Thresholds and observed values behind each flag."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "rapid_transactions": self.rapid_transactions,
            "suspicious_gas_usage": self.suspicious_gas_usage,
            "unusual_amounts": self.unusual_amounts,
            "details": self.details,
        }
