from .config import (
    BORROW_AMOUNT,
    DAI,
    DAI_WHALE,
    FUND_AMOUNT,
    SOLO,
    DeploymentSettings,
    get_settings,
    settings_from_env,
)
from .deploy import ContractDeployer, Deployment, build_fee_policy, contract_address, deploy_flashloan

__all__ = [
    "BORROW_AMOUNT",
    "ContractDeployer",
    "DAI",
    "DAI_WHALE",
    "Deployment",
    "DeploymentSettings",
    "FUND_AMOUNT",
    "SOLO",
    "build_fee_policy",
    "contract_address",
    "deploy_flashloan",
    "get_settings",
    "settings_from_env",
]
