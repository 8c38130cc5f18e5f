"""Local-first FastAPI shell over one in-memory flash loan deployment."""

from __future__ import annotations

import html
from dataclasses import replace
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from deployment.config import DeploymentSettings, get_settings
from deployment.deploy import ContractDeployer, Deployment, deploy_flashloan
from flashloan_controller.orchestrator import StateTransitionError
from harness.impersonation import HarnessError, ImpersonationHarness
from ledger.errors import FlashloanError
from ledger.ledger import Ledger

app = FastAPI(title="Flashloan Operator", description="Local-first flash loan shell")

_LEDGER = Ledger()
_HARNESS = ImpersonationHarness(_LEDGER)
_DEPLOYER = ContractDeployer()
_STATE: Dict[str, Optional[Deployment]] = {"deployment": None}


class DeployRequest(BaseModel):
    deployer: Optional[str] = None
    pool_account: Optional[str] = None
    fee: Optional[int] = None
    fee_bps: Optional[int] = None


class SeedRequest(BaseModel):
    account: str
    asset: str
    amount: int


class ImpersonateRequest(BaseModel):
    account: str
    enabled: bool = True


class TransferRequest(BaseModel):
    sender: str
    recipient: str
    asset: str
    amount: int


class FlashloanRequest(BaseModel):
    asset: str
    amount: int
    initiator: Optional[str] = None


@app.middleware("http")
async def _local_only(request: Request, call_next):
    client = request.client
    if client is not None:
        host = client.host
        if host not in {"127.0.0.1", "::1", "testclient"}:
            return JSONResponse({"error": "Remote access disabled."}, status_code=403)
    return await call_next(request)


async def _handle_flashloan_error(request: Request, exc: FlashloanError):
    return JSONResponse(
        {
            "error": str(exc),
            "kind": exc.kind.value,
            "events": [{"message": event.message, "value": event.value} for event in exc.events],
        },
        status_code=400,
    )


async def _handle_errors(request: Request, exc: Exception):
    return JSONResponse({"error": str(exc)}, status_code=400)


app.add_exception_handler(FlashloanError, _handle_flashloan_error)
for _exc_class in (HarnessError, StateTransitionError, ValueError):
    app.add_exception_handler(_exc_class, _handle_errors)


@app.get("/", response_class=HTMLResponse)
async def dashboard() -> HTMLResponse:
    return HTMLResponse(_render_dashboard())


@app.post("/api/deploy")
async def deploy(payload: DeployRequest):
    settings = _settings_for(payload)
    deployment = deploy_flashloan(_LEDGER, settings, deployer=_DEPLOYER)
    _STATE["deployment"] = deployment
    return deployment.to_dict()


@app.post("/api/harness/seed")
async def harness_seed(payload: SeedRequest):
    _HARNESS.seed(payload.account, payload.asset, payload.amount)
    return {"balance": _LEDGER.balance(payload.account, payload.asset)}


@app.post("/api/harness/impersonate")
async def harness_impersonate(payload: ImpersonateRequest):
    if payload.enabled:
        _HARNESS.impersonate(payload.account)
    else:
        _HARNESS.stop_impersonating(payload.account)
    return {"impersonated": list(_HARNESS.impersonated)}


@app.post("/api/harness/transfer")
async def harness_transfer(payload: TransferRequest):
    _HARNESS.transfer(payload.sender, payload.recipient, payload.asset, payload.amount)
    return {
        "sender_balance": _LEDGER.balance(payload.sender, payload.asset),
        "recipient_balance": _LEDGER.balance(payload.recipient, payload.asset),
    }


@app.get("/api/balances")
async def balances(account: Optional[str] = None, asset: Optional[str] = None):
    entries = [
        {"account": entry.account, "asset": entry.asset, "amount": entry.amount}
        for entry in _LEDGER.balances()
        if (account is None or entry.account == account)
        and (asset is None or entry.asset == asset)
    ]
    return {"balances": entries}


@app.post("/api/flashloan")
def flashloan(payload: FlashloanRequest):
    deployment = _require_deployment()
    result = deployment.orchestrator.initiate_flashloan(
        payload.asset, payload.amount, initiator=payload.initiator
    )
    response = result.to_dict()
    response["user"] = deployment.orchestrator.user
    return response


@app.get("/api/user")
async def user():
    deployment = _require_deployment()
    return {"address": deployment.address, "user": deployment.orchestrator.user}


def _settings_for(payload: DeployRequest) -> DeploymentSettings:
    settings = get_settings()
    if payload.deployer:
        settings = replace(settings, deployer=payload.deployer)
    if payload.pool_account:
        settings = replace(settings, pool_account=payload.pool_account)
    if payload.fee is not None:
        settings = replace(settings, fee_constant=payload.fee, fee_bps=None)
    if payload.fee_bps is not None:
        settings = replace(settings, fee_bps=payload.fee_bps)
    return settings


def _require_deployment() -> Deployment:
    deployment = _STATE["deployment"]
    if deployment is None:
        raise ValueError("No contract deployed.")
    return deployment


def _render_dashboard() -> str:
    deployment = _STATE["deployment"]
    if deployment is None:
        status = "<p>No contract deployed.</p>"
    else:
        status = (
            f"<p>Contract: <code>{html.escape(deployment.address)}</code></p>"
            f"<p>Pool: <code>{html.escape(deployment.orchestrator.pool.account)}</code></p>"
            f"<p>User: <code>{html.escape(str(deployment.orchestrator.user))}</code></p>"
        )
    rows = "".join(
        f"<tr><td>{html.escape(entry.account)}</td>"
        f"<td>{html.escape(entry.asset)}</td>"
        f"<td>{entry.amount}</td></tr>"
        for entry in _LEDGER.balances()
    )
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset=\"UTF-8\" />
  <title>Flashloan Operator</title>
</head>
<body>
  <h1>Flashloan Operator</h1>
  {status}
  <h2>Balances</h2>
  <table>
    <tr><th>Account</th><th>Asset</th><th>Amount</th></tr>
    {rows}
  </table>
</body>
</html>
"""


def _reset_state() -> None:
    global _LEDGER, _HARNESS, _DEPLOYER
    _LEDGER = Ledger()
    _HARNESS = ImpersonationHarness(_LEDGER)
    _DEPLOYER = ContractDeployer()
    _STATE["deployment"] = None
