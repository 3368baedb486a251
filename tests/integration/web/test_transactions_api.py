"""
거래 API 통합 테스트

/api/transactions 생성/수정/삭제와 계좌 잔액, 오류 응답 형식, 목록 필터
"""

import httpx
import pytest

from tests.integration.web.api_helpers import create_account, create_transaction, get_balance


class TestTransactionScenario:
    """HTTP로 진행하는 잔액 시나리오"""

    async def test_scenario(self, user_client: httpx.AsyncClient) -> None:
        """수입 → 지출 → 변경 없는 수정 → 수입 삭제 → 이체 → 입금 계좌 없는 이체"""
        account1 = await create_account(user_client, "Account 1")
        account2 = await create_account(user_client, "Account 2", kind="Bank", opening_balance=1000)

        income = await create_transaction(user_client, account1["id"], 1000, "income")
        assert await get_balance(user_client, account1["id"]) == 1000

        expense = await create_transaction(user_client, account1["id"], 200, "expense")
        assert await get_balance(user_client, account1["id"]) == 800

        response = await user_client.put(f"/api/transactions/{expense['id']}", json={"amount": 200})
        assert response.status_code == 200
        assert await get_balance(user_client, account1["id"]) == 800

        response = await user_client.delete(f"/api/transactions/{income['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Transaction deleted", "id": income["id"]}
        assert await get_balance(user_client, account1["id"]) == -200

        await create_transaction(
            user_client,
            account2["id"],
            500,
            "transfer",
            destination_account_id=account1["id"],
        )
        assert await get_balance(user_client, account2["id"]) == 500
        assert await get_balance(user_client, account1["id"]) == 300

        response = await user_client.post(
            "/api/transactions",
            json={
                "date": "2024-05-03T09:00:00Z",
                "amount": 100,
                "kind": "transfer",
                "category_id": "transfer",
                "source_account_id": account2["id"],
            },
        )
        assert response.status_code == 400
        assert response.json()["error"] == "MissingDestination"
        assert await get_balance(user_client, account2["id"]) == 500


class TestCreateTransaction:
    """거래 생성"""

    async def test_created_record(self, user_client: httpx.AsyncClient) -> None:
        """201 + 저장된 레코드"""
        account = await create_account(user_client)

        response = await user_client.post(
            "/api/transactions",
            json={
                "date": "2024-05-01T18:00:00+09:00",
                "description": "Lunch",
                "amount": 1200,
                "kind": "expense",
                "category_id": "food",
                "source_account_id": account["id"],
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["amount"] == 1200
        assert body["status"] == "cleared"
        assert body["destination_account_id"] is None
        assert body["date"] == "2024-05-01T09:00:00+00:00"

    async def test_unknown_account(self, user_client: httpx.AsyncClient) -> None:
        """없는 계좌 → 400 InvalidReference"""
        response = await user_client.post(
            "/api/transactions",
            json={
                "date": "2024-05-01T09:00:00Z",
                "amount": 100,
                "kind": "income",
                "category_id": "salary",
                "source_account_id": "missing",
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidReference"

    @pytest.mark.parametrize("overrides", [
        {"kind": "refund"},
        {"amount": 0},
        {"amount": -10},
        {"amount": "100"},
        {"amount": 10.5},
        {"amount": 2**63},
        {"balance": 100},
    ])
    async def test_invalid_body(self, user_client: httpx.AsyncClient, overrides: dict) -> None:
        """형식 오류 → 400 ValidationError, 잔액 그대로"""
        account = await create_account(user_client)
        body = {
            "date": "2024-05-01T09:00:00Z",
            "amount": 100,
            "kind": "income",
            "category_id": "salary",
            "source_account_id": account["id"],
        }
        body.update(overrides)

        response = await user_client.post("/api/transactions", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"
        assert await get_balance(user_client, account["id"]) == 0

    async def test_destination_on_expense(self, user_client: httpx.AsyncClient) -> None:
        """지출에 입금 계좌 → 400 MissingDestination"""
        wallet = await create_account(user_client)
        bank = await create_account(user_client, "Bank", kind="Bank")

        response = await user_client.post(
            "/api/transactions",
            json={
                "date": "2024-05-01T09:00:00Z",
                "amount": 100,
                "kind": "expense",
                "category_id": "food",
                "source_account_id": wallet["id"],
                "destination_account_id": bank["id"],
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "MissingDestination"

    async def test_other_users_account(
        self,
        user_client: httpx.AsyncClient,
        other_client: httpx.AsyncClient,
    ) -> None:
        """다른 사용자의 계좌로 거래 → 400 InvalidReference, 잔액 그대로"""
        foreign = await create_account(other_client, opening_balance=100)

        response = await user_client.post(
            "/api/transactions",
            json={
                "date": "2024-05-01T09:00:00Z",
                "amount": 50,
                "kind": "expense",
                "category_id": "food",
                "source_account_id": foreign["id"],
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidReference"
        assert await get_balance(other_client, foreign["id"]) == 100

    async def test_balance_overflow(self, user_client: httpx.AsyncClient) -> None:
        """잔액이 64비트 정수를 넘는 수입 → 400 BalanceOutOfRange, 계좌는 계속 조회 가능"""
        account = await create_account(user_client, "Huge", kind="Bank", opening_balance=2**63 - 10)

        response = await user_client.post(
            "/api/transactions",
            json={
                "date": "2024-05-01T09:00:00Z",
                "amount": 1000,
                "kind": "income",
                "category_id": "salary",
                "source_account_id": account["id"],
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "BalanceOutOfRange"
        assert await get_balance(user_client, account["id"]) == 2**63 - 10
        listed = await user_client.get("/api/transactions", params={"account_id": account["id"]})
        assert listed.json()["total"] == 0


class TestUpdateTransaction:
    """거래 수정"""

    async def test_change_amount(self, user_client: httpx.AsyncClient) -> None:
        """금액 변경 → 차액 반영"""
        account = await create_account(user_client, opening_balance=1000)
        txn = await create_transaction(user_client, account["id"], 300, "expense")

        response = await user_client.put(f"/api/transactions/{txn['id']}", json={"amount": 100})

        assert response.status_code == 200
        assert response.json()["amount"] == 100
        assert await get_balance(user_client, account["id"]) == 900

    async def test_transfer_to_expense(self, user_client: httpx.AsyncClient) -> None:
        """입금 계좌를 null로 보내며 지출로 변경"""
        wallet = await create_account(user_client, opening_balance=1000)
        bank = await create_account(user_client, "Bank", kind="Bank")
        txn = await create_transaction(
            user_client, wallet["id"], 400, "transfer", destination_account_id=bank["id"]
        )

        response = await user_client.put(
            f"/api/transactions/{txn['id']}",
            json={"kind": "expense", "destination_account_id": None},
        )

        assert response.status_code == 200
        assert response.json()["destination_account_id"] is None
        assert await get_balance(user_client, wallet["id"]) == 600
        assert await get_balance(user_client, bank["id"]) == 0

    async def test_transfer_to_expense_keeping_destination(self, user_client: httpx.AsyncClient) -> None:
        """입금 계좌를 남긴 채 지출로 변경 → 400, 변화 없음"""
        wallet = await create_account(user_client, opening_balance=1000)
        bank = await create_account(user_client, "Bank", kind="Bank")
        txn = await create_transaction(
            user_client, wallet["id"], 400, "transfer", destination_account_id=bank["id"]
        )

        response = await user_client.put(f"/api/transactions/{txn['id']}", json={"kind": "expense"})

        assert response.status_code == 400
        assert response.json()["error"] == "MissingDestination"
        assert await get_balance(user_client, wallet["id"]) == 600
        assert await get_balance(user_client, bank["id"]) == 400

    async def test_forbidden_field(self, user_client: httpx.AsyncClient) -> None:
        """허용되지 않은 필드 → 400"""
        account = await create_account(user_client)
        txn = await create_transaction(user_client, account["id"], 100, "income")

        response = await user_client.put(f"/api/transactions/{txn['id']}", json={"owner_id": "someone"})

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    async def test_not_found(self, user_client: httpx.AsyncClient) -> None:
        """없는 거래 → 404"""
        response = await user_client.put("/api/transactions/missing", json={"amount": 5})

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"


class TestDeleteTransaction:
    """거래 삭제"""

    async def test_not_found(self, user_client: httpx.AsyncClient) -> None:
        """없는 거래 → 404"""
        response = await user_client.delete("/api/transactions/missing")

        assert response.status_code == 404

    async def test_other_users_transaction(
        self,
        user_client: httpx.AsyncClient,
        other_client: httpx.AsyncClient,
    ) -> None:
        """다른 사용자의 거래 → 404, 잔액 그대로"""
        account = await create_account(user_client)
        txn = await create_transaction(user_client, account["id"], 100, "income")

        response = await other_client.delete(f"/api/transactions/{txn['id']}")

        assert response.status_code == 404
        assert await get_balance(user_client, account["id"]) == 100


class TestListTransactions:
    """거래 목록"""

    async def test_filters_and_paging(self, user_client: httpx.AsyncClient) -> None:
        """필터, 페이지, 날짜 내림차순"""
        wallet = await create_account(user_client)
        bank = await create_account(user_client, "Bank", kind="Bank")
        await create_transaction(user_client, wallet["id"], 100, "expense", date="2024-05-01T00:00:00Z", description="Coffee")
        await create_transaction(user_client, bank["id"], 5000, "income", date="2024-05-02T00:00:00Z")
        await create_transaction(
            user_client, bank["id"], 700, "transfer",
            date="2024-05-03T00:00:00Z", destination_account_id=wallet["id"],
        )

        everything = (await user_client.get("/api/transactions")).json()
        by_wallet = (await user_client.get("/api/transactions", params={"account_id": wallet["id"]})).json()
        by_kind = (await user_client.get("/api/transactions", params={"kind": "income"})).json()
        by_date = (await user_client.get(
            "/api/transactions",
            params={"start_date": "2024-05-02T00:00:00Z", "end_date": "2024-05-02T23:59:59Z"},
        )).json()
        searched = (await user_client.get("/api/transactions", params={"search_term": "coff"})).json()
        paged = (await user_client.get("/api/transactions", params={"page": 2, "page_size": 2})).json()

        assert everything["total"] == 3
        assert [t["amount"] for t in everything["data"]] == [700, 5000, 100]
        assert {t["amount"] for t in by_wallet["data"]} == {100, 700}
        assert [t["amount"] for t in by_kind["data"]] == [5000]
        assert [t["amount"] for t in by_date["data"]] == [5000]
        assert [t["amount"] for t in searched["data"]] == [100]
        assert paged["total_pages"] == 2
        assert [t["amount"] for t in paged["data"]] == [100]

    async def test_get_single(self, user_client: httpx.AsyncClient, other_client: httpx.AsyncClient) -> None:
        """단건 조회 (다른 사용자는 404)"""
        account = await create_account(user_client)
        txn = await create_transaction(user_client, account["id"], 100, "income")

        assert (await user_client.get(f"/api/transactions/{txn['id']}")).json() == txn
        assert (await other_client.get(f"/api/transactions/{txn['id']}")).status_code == 404
