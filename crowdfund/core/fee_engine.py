"""Fee Engine — platform fee on a successful raise.

Invariants:
    - compute_fee is PURE and integral: floor(amount_raised * fee_rate / fee_scale_factor)
    - 0 <= fee <= amount_raised whenever the configuration validated
    - Configuration is checked once at startup, never on the operation path
"""

from dataclasses import dataclass

from crowdfund.core.errors import ConfigurationError


def compute_fee(amount_raised: int, fee_rate: int, fee_scale_factor: int) -> int:
    """Platform share of a successful raise, truncated toward zero."""
    return amount_raised * fee_rate // fee_scale_factor


def validate_fee_config(fee_rate: int, fee_scale_factor: int) -> None:
    if fee_scale_factor <= 0:
        raise ConfigurationError(
            f"fee_scale_factor must be positive, got {fee_scale_factor}",
        )
    if fee_rate < 0 or fee_rate > fee_scale_factor:
        raise ConfigurationError(
            f"fee_rate must be within [0, {fee_scale_factor}], got {fee_rate}",
        )


@dataclass(frozen=True)
class FeeConfig:
    """Immutable fee rate / scale factor pair."""
    fee_rate: int
    fee_scale_factor: int

    def __post_init__(self) -> None:
        validate_fee_config(self.fee_rate, self.fee_scale_factor)

    def fee_for(self, amount_raised: int) -> int:
        return compute_fee(amount_raised, self.fee_rate, self.fee_scale_factor)

    def split(self, amount_raised: int) -> tuple[int, int]:
        """(fee, owner payout) for a successful raise."""
        fee = self.fee_for(amount_raised)
        return fee, amount_raised - fee
