"""Account & Platform Routes — token balances and the fee configuration.

Invariants:
    - Read-only: nothing here moves tokens
    - Balances read through the Value-Transfer Port (balance_of)
"""

from fastapi import APIRouter, Depends

from crowdfund.schemas.project import BalanceResponse, PlatformResponse
from crowdfund.services.ledger_runtime import LedgerRuntime, get_runtime

router = APIRouter(prefix="/api/v1", tags=["accounts"])


@router.get("/accounts/{account}/balance", response_model=BalanceResponse)
async def get_balance(account: str, runtime: LedgerRuntime = Depends(get_runtime)):
    return BalanceResponse(account=account, balance=runtime.tokens.balance_of(account))


@router.get("/platform", response_model=PlatformResponse)
async def get_platform(runtime: LedgerRuntime = Depends(get_runtime)):
    """Fee configuration and custody account of this ledger."""
    controller = runtime.controller
    return PlatformResponse(
        fee_rate=controller.fees.fee_rate,
        fee_scale_factor=controller.fees.fee_scale_factor,
        fee_recipient=controller.fee_recipient,
        custody_account=controller.custody,
        project_count=controller.count(),
    )
