from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from datetime import datetime
from urllib.parse import parse_qs
import secrets

app = FastAPI(title="Mock Starling Server", version="1.0.0")

EXPIRED_BODY = {"error": "invalid_token", "error_description": "Access token has expired"}
INVALID_BODY = {"error": "invalid_token", "error_description": "Invalid access token"}


def _feed_item(uid, minor_units, direction, time, reference):
    return {
        "feedItemUid": uid,
        "direction": direction,
        "status": "SETTLED",
        "amount": {"currency": "GBP", "minorUnits": minor_units},
        "transactionTime": time,
        "reference": reference,
        "counterPartyName": reference,
        "spendingCategory": "GENERAL",
        "source": "MASTER_CARD",
    }


def _parse_time(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class MockBank:
    """In-memory bank: one account, a week of feed items, savings goals and OAuth tokens"""

    def __init__(self):
        self.reset()

    def reset(self):
        self.client_id = "mock-client"
        self.client_secret = "mock-secret"
        self.access_token = "mock-access-0"
        self.refresh_token = "mock-refresh-0"
        self.expired_tokens = set()
        self.refresh_calls = 0
        self.accounts = [
            {
                "accountUid": "acc-1",
                "name": "Personal",
                "accountType": "PRIMARY",
                "defaultCategory": "cat-1",
                "currency": "GBP",
            }
        ]
        self.feed_items = [
            _feed_item("tx-1", 435, "OUT", "2026-01-19T08:15:00.000Z", "Coffee"),
            _feed_item("tx-2", 520, "OUT", "2026-01-21T12:30:00.000Z", "Lunch"),
            _feed_item("tx-3", 87, "OUT", "2026-01-25T23:59:59.000Z", "Snack"),
            _feed_item("tx-4", 150000, "IN", "2026-01-23T09:00:00.000Z", "Salary"),
            _feed_item("tx-5", 999, "OUT", "2026-01-26T00:00:00.000Z", "Next week"),
        ]
        self.goals = {}
        self.transfers = {}

    def expire_access_token(self):
        self.expired_tokens.add(self.access_token)
        self.access_token = f"mock-access-{secrets.token_hex(4)}"


bank = MockBank()


def _auth_error(request: Request):
    token = request.headers.get("authorization", "").removeprefix("Bearer ")
    if token == bank.access_token:
        return None
    body = EXPIRED_BODY if token in bank.expired_tokens else INVALID_BODY
    return JSONResponse(status_code=401, content=body)


def _not_found(message):
    return JSONResponse(status_code=404, content={"success": False, "errors": [{"message": message}]})


def _account_exists(account_uid):
    return any(acc["accountUid"] == account_uid for acc in bank.accounts)


@app.get("/health")
def health(): return {"status": "ok"}


@app.post("/oauth/access-token")
async def access_token(request: Request):
    form = {k: v[0] for k, v in parse_qs((await request.body()).decode()).items()}
    bank.refresh_calls += 1
    if (
        form.get("grant_type") != "refresh_token"
        or form.get("client_id") != bank.client_id
        or form.get("client_secret") != bank.client_secret
        or form.get("refresh_token") != bank.refresh_token
    ):
        return JSONResponse(status_code=400, content={"error": "invalid_grant", "error_description": "Refresh token is invalid"})

    bank.expired_tokens.add(bank.access_token)
    bank.access_token = f"mock-access-{secrets.token_hex(4)}"
    bank.refresh_token = f"mock-refresh-{secrets.token_hex(4)}"
    return {
        "access_token": bank.access_token,
        "refresh_token": bank.refresh_token,
        "token_type": "Bearer",
        "expires_in": 86400,
    }


@app.get("/api/v2/accounts")
def get_accounts(request: Request):
    if (error := _auth_error(request)) is not None:
        return error
    return {"accounts": bank.accounts}


@app.get("/api/v2/feed/account/{account_uid}/category/{category_uid}/transactions-between")
def get_transactions_between(
    request: Request,
    account_uid: str,
    category_uid: str,
    minTransactionTimestamp: str,
    maxTransactionTimestamp: str,
):
    if (error := _auth_error(request)) is not None:
        return error
    if not _account_exists(account_uid):
        return _not_found("Account not found")

    low, high = _parse_time(minTransactionTimestamp), _parse_time(maxTransactionTimestamp)
    items = [item for item in bank.feed_items if low <= _parse_time(item["transactionTime"]) <= high]
    return {"feedItems": items}


@app.get("/api/v2/account/{account_uid}/savings-goals")
def get_savings_goals(request: Request, account_uid: str):
    if (error := _auth_error(request)) is not None:
        return error
    if not _account_exists(account_uid):
        return _not_found("Account not found")
    return {"savingsGoalList": list(bank.goals.values())}


@app.put("/api/v2/account/{account_uid}/savings-goals")
async def create_savings_goal(request: Request, account_uid: str):
    if (error := _auth_error(request)) is not None:
        return error
    if not _account_exists(account_uid):
        return _not_found("Account not found")

    body = await request.json()
    if not body.get("name"):
        return JSONResponse(status_code=400, content={"success": False, "errors": [{"message": "name is required"}]})

    goal_uid = f"goal-{secrets.token_hex(4)}"
    bank.goals[goal_uid] = {
        "savingsGoalUid": goal_uid,
        "name": body["name"],
        "state": "ACTIVE",
        "target": body.get("target"),
        "totalSaved": {"currency": body["currency"], "minorUnits": 0},
    }
    return {"savingsGoalUid": goal_uid, "success": True}


@app.put("/api/v2/account/{account_uid}/savings-goals/{goal_uid}/add-money/{transfer_uid}")
async def add_money(request: Request, account_uid: str, goal_uid: str, transfer_uid: str):
    if (error := _auth_error(request)) is not None:
        return error
    if goal_uid not in bank.goals:
        return _not_found("Savings goal not found")

    # Replayed key is a no-op returning the original outcome
    if transfer_uid in bank.transfers:
        return bank.transfers[transfer_uid]

    body = await request.json()
    bank.goals[goal_uid]["totalSaved"]["minorUnits"] += body["amount"]["minorUnits"]
    bank.transfers[transfer_uid] = {"transferUid": transfer_uid, "success": True}
    return bank.transfers[transfer_uid]
