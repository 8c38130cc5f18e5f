"""Settings and deployment wiring tests."""

import unittest

from deployment.config import (
    BORROW_AMOUNT,
    DAI,
    FUND_AMOUNT,
    SOLO,
    DeploymentSettings,
    settings_from_env,
)
from deployment.deploy import ContractDeployer, build_fee_policy, contract_address, deploy_flashloan
from flashloan_controller.states import FlashloanState
from ledger.ledger import Ledger
from lending_pool.fees import ConstantFee, ProportionalFee


class DeploymentSettingsTests(unittest.TestCase):
    def test_defaults_match_mainnet_fork_setup(self) -> None:
        settings = settings_from_env({})

        self.assertEqual(settings, DeploymentSettings())
        self.assertEqual(settings.asset, DAI)
        self.assertEqual(settings.pool_account, SOLO)
        self.assertEqual(settings.fund_amount, 200 * 10**18)
        self.assertEqual(settings.borrow_amount, 1_000_000 * 10**18)
        self.assertIsNone(settings.fee_bps)

    def test_environment_overrides(self) -> None:
        settings = settings_from_env(
            {
                "FLASHLOAN_ASSET": "USDC",
                "FLASHLOAN_BORROW_AMOUNT": "500",
                "FLASHLOAN_FEE_BPS": "9",
                "FLASHLOAN_LOG_LEVEL": "debug",
            }
        )

        self.assertEqual(settings.asset, "USDC")
        self.assertEqual(settings.borrow_amount, 500)
        self.assertEqual(settings.fee_bps, 9)
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.fund_amount, FUND_AMOUNT)

    def test_blank_values_fall_back_to_defaults(self) -> None:
        settings = settings_from_env({"FLASHLOAN_FUND_AMOUNT": " ", "FLASHLOAN_FEE_BPS": ""})
        self.assertEqual(settings.fund_amount, FUND_AMOUNT)
        self.assertIsNone(settings.fee_bps)

    def test_invalid_integer_fails_loudly(self) -> None:
        with self.assertRaises(ValueError):
            settings_from_env({"FLASHLOAN_BORROW_AMOUNT": "a lot"})

    def test_fee_policy_selection(self) -> None:
        self.assertEqual(build_fee_policy(DeploymentSettings()), ConstantFee(2))
        self.assertEqual(
            build_fee_policy(DeploymentSettings(fee_bps=9, fee_constant=7)),
            ProportionalFee(bps=9),
        )


class DeployFlashloanTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ledger = Ledger()
        self.deployer = ContractDeployer()
        self.settings = DeploymentSettings(deployer="0xdeployer")

    def test_addresses_are_deterministic_per_nonce(self) -> None:
        first = deploy_flashloan(self.ledger, self.settings, deployer=self.deployer)
        second = deploy_flashloan(self.ledger, self.settings, deployer=self.deployer)

        self.assertEqual(first.address, contract_address("0xdeployer", 0))
        self.assertEqual(second.address, contract_address("0xdeployer", 1))
        self.assertNotEqual(first.address, second.address)
        self.assertTrue(first.address.startswith("0x"))
        self.assertEqual(len(first.address), 42)
        self.assertEqual(ContractDeployer().next_address("0xdeployer")[0], first.address)

    def test_deployment_is_wired_to_the_receiver_address(self) -> None:
        deployment = deploy_flashloan(self.ledger, self.settings, deployer=self.deployer)

        self.assertEqual(deployment.orchestrator.address, deployment.address)
        self.assertEqual(deployment.orchestrator.pool.account, SOLO)
        self.assertIsNone(deployment.orchestrator.user)
        self.assertEqual(deployment.to_dict()["pool"], SOLO)

    def test_deployed_contract_executes_a_loan(self) -> None:
        deployment = deploy_flashloan(self.ledger, self.settings, deployer=self.deployer)
        self.ledger.credit(SOLO, DAI, 2 * BORROW_AMOUNT)
        self.ledger.credit(deployment.address, DAI, FUND_AMOUNT)

        result = deployment.orchestrator.initiate_flashloan(DAI, BORROW_AMOUNT)

        self.assertEqual(result.state, FlashloanState.COMPLETED)
        self.assertEqual(self.ledger.balance(SOLO, DAI), 2 * BORROW_AMOUNT + 2)
        self.assertEqual(deployment.orchestrator.user, deployment.address)

    def test_deployment_logs_address(self) -> None:
        with self.assertLogs("deployment.deploy", level="INFO") as logs:
            deployment = deploy_flashloan(self.ledger, self.settings, deployer=self.deployer)

        self.assertIn(f"Contract deployed to: {deployment.address}", logs.output[0])


if __name__ == "__main__":
    unittest.main()
