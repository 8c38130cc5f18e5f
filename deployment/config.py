"""Deployment settings read from the environment.

Every value can be overridden with a ``FLASHLOAN_*`` environment variable or
a ``.env`` file in the working directory. Defaults reproduce the mainnet-fork
integration setup: DAI borrowed from dYdX Solo, with the receiver funded
from a DAI whale to cover fees.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
import os

from dotenv import load_dotenv

DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
SOLO = "0x1E0447b19BB6EcFdAe1e4AE1694b0C3659614e4e"
DAI_WHALE = "0x16463c0fdB6BA9618909F5b120ea1581618C1b9E"
DEFAULT_DEPLOYER = "accounts[0]"

TOKEN_DECIMALS = 18
FUND_AMOUNT = 200 * 10**TOKEN_DECIMALS
BORROW_AMOUNT = 1_000_000 * 10**TOKEN_DECIMALS


@dataclass(frozen=True)
class DeploymentSettings:
    asset: str = DAI
    pool_account: str = SOLO
    whale_account: str = DAI_WHALE
    deployer: str = DEFAULT_DEPLOYER
    fund_amount: int = FUND_AMOUNT
    borrow_amount: int = BORROW_AMOUNT
    pool_liquidity: int = 10 * BORROW_AMOUNT
    whale_balance: int = 10 * FUND_AMOUNT
    fee_constant: int = 2
    fee_bps: Optional[int] = None
    log_level: str = "INFO"


@lru_cache
def get_settings() -> DeploymentSettings:
    load_dotenv()
    return settings_from_env(os.environ)


def settings_from_env(env) -> DeploymentSettings:
    defaults = DeploymentSettings()
    fee_bps = env.get("FLASHLOAN_FEE_BPS", "")
    return DeploymentSettings(
        asset=env.get("FLASHLOAN_ASSET", defaults.asset),
        pool_account=env.get("FLASHLOAN_POOL_ACCOUNT", defaults.pool_account),
        whale_account=env.get("FLASHLOAN_WHALE_ACCOUNT", defaults.whale_account),
        deployer=env.get("FLASHLOAN_DEPLOYER", defaults.deployer),
        fund_amount=_int_setting(env, "FLASHLOAN_FUND_AMOUNT", defaults.fund_amount),
        borrow_amount=_int_setting(env, "FLASHLOAN_BORROW_AMOUNT", defaults.borrow_amount),
        pool_liquidity=_int_setting(env, "FLASHLOAN_POOL_LIQUIDITY", defaults.pool_liquidity),
        whale_balance=_int_setting(env, "FLASHLOAN_WHALE_BALANCE", defaults.whale_balance),
        fee_constant=_int_setting(env, "FLASHLOAN_FEE_CONSTANT", defaults.fee_constant),
        fee_bps=int(fee_bps) if fee_bps.strip() else None,
        log_level=env.get("FLASHLOAN_LOG_LEVEL", defaults.log_level).upper(),
    )


def _int_setting(env, name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
