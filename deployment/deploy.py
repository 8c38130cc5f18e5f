"""Wire a ledger, pool, and receiver into one deployed flash loan orchestrator."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import hashlib
import logging

from flash_receiver.receiver import FlashloanReceiver
from flash_receiver.strategies import Strategy
from flashloan_controller.orchestrator import FlashloanOrchestrator
from ledger.ledger import Ledger
from lending_pool.fees import ConstantFee, FeePolicy, ProportionalFee
from lending_pool.pool import LendingPool

from .config import DeploymentSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deployment:
    address: str
    deployer: str
    nonce: int
    orchestrator: FlashloanOrchestrator

    def to_dict(self) -> Dict[str, object]:
        return {
            "address": self.address,
            "deployer": self.deployer,
            "nonce": self.nonce,
            "pool": self.orchestrator.pool.account,
        }


class ContractDeployer:
    """Hands out CREATE-style addresses derived from (deployer, nonce)."""

    def __init__(self) -> None:
        self._nonces: Dict[str, int] = {}

    def next_address(self, deployer: str) -> Tuple[str, int]:
        nonce = self._nonces.get(deployer, 0)
        self._nonces[deployer] = nonce + 1
        return contract_address(deployer, nonce), nonce


def contract_address(deployer: str, nonce: int) -> str:
    digest = hashlib.sha256(f"{deployer}:{nonce}".encode("utf-8")).hexdigest()
    return "0x" + digest[-40:]


def build_fee_policy(settings: DeploymentSettings) -> FeePolicy:
    if settings.fee_bps is not None:
        return ProportionalFee(bps=settings.fee_bps)
    return ConstantFee(settings.fee_constant)


_DEFAULT_DEPLOYER = ContractDeployer()


def deploy_flashloan(
    ledger: Ledger,
    settings: Optional[DeploymentSettings] = None,
    strategy: Optional[Strategy] = None,
    deployer: Optional[ContractDeployer] = None,
) -> Deployment:
    settings = settings or get_settings()
    deployer = deployer or _DEFAULT_DEPLOYER
    address, nonce = deployer.next_address(settings.deployer)

    pool = LendingPool(ledger, settings.pool_account, fee_policy=build_fee_policy(settings))
    receiver = FlashloanReceiver(ledger, address, pool.account, strategy=strategy)
    orchestrator = FlashloanOrchestrator(ledger, pool, receiver)

    logger.info("Contract deployed to: %s", address)
    return Deployment(
        address=address,
        deployer=settings.deployer,
        nonce=nonce,
        orchestrator=orchestrator,
    )
