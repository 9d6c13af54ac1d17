"""
Tests for reference data, flip event and bank link endpoints.
"""


def create_account(client, code, name, account_type):
    return client.post("/accounts", json={
        "code": code, "name": name, "account_type": account_type,
    }).json()["id"]


class TestJobs:

    def test_create_and_close_job(self, client):
        job = client.post("/jobs", json={"name": "Smith kitchen"}).json()
        assert job["status"] == "open"

        response = client.patch(f"/jobs/{job['id']}/status", json={
            "status": "closed", "end_date": "2024-05-31",
        })

        assert response.status_code == 200
        assert response.json()["end_date"] == "2024-05-31"
        assert client.get("/jobs", params={"status": "open"}).json() == []

    def test_unknown_lead_source_returns_404(self, client):
        response = client.post("/jobs", json={"name": "Jones bath", "lead_source_id": 5})
        assert response.status_code == 404

    def test_installer_full_name(self, client):
        response = client.post("/installers", json={"first_name": "Ray", "last_name": "Diaz"})

        assert response.status_code == 201
        assert response.json()["full_name"] == "Ray Diaz"


class TestDeals:

    def test_deal_accounts_must_have_right_type(self, client):
        expense = create_account(client, "62014", "Flip Rehab Materials", "expense")

        response = client.post("/deals", json={
            "nickname": "Elm St", "deal_type": "flip", "asset_account_id": expense,
        })

        assert response.status_code == 400
        assert "not an asset account" in response.json()["detail"]

    def test_same_asset_and_loan_account_returns_422(self, client):
        asset = create_account(client, "63001", "Elm St Property", "asset")

        response = client.post("/deals", json={
            "nickname": "Elm St", "deal_type": "flip",
            "asset_account_id": asset, "loan_account_id": asset,
        })

        assert response.status_code == 422

    def test_rehab_category_code_unique(self, client):
        client.post("/rehab-categories", json={"code": "KIT", "name": "Kitchen"})
        response = client.post("/rehab-categories", json={"code": "KIT", "name": "Kitchen 2"})
        assert response.status_code == 400


class TestFlipEvents:

    def test_acquisition_event(self, client):
        bank = create_account(client, "1000", "Checking", "asset")
        asset = create_account(client, "63001", "Elm St Property", "asset")
        loan = create_account(client, "64001", "Elm St Loan", "liability")
        create_account(client, "62016", "Flip Closing Costs", "expense")
        deal = client.post("/deals", json={
            "nickname": "Elm St", "deal_type": "flip",
            "asset_account_id": asset, "loan_account_id": loan,
        }).json()

        response = client.post("/flips/events", json={
            "event_type": "acquisition",
            "deal_id": deal["id"],
            "date": "2024-05-01",
            "cash_account_id": bank,
            "purchase_amount": "146000.00",
            "loan_amount": "128223.00",
            "closing_costs": "18000.00",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["description"] == "Elm St - Purchase"
        assert len(data["lines"]) == 4

    def test_unknown_deal_returns_404(self, client):
        bank = create_account(client, "1000", "Checking", "asset")

        response = client.post("/flips/events", json={
            "event_type": "holding",
            "deal_id": 99,
            "date": "2024-05-01",
            "cash_account_id": bank,
            "amount": "10.00",
        })

        assert response.status_code == 404


class TestBankLinks:

    def test_create_link_hides_token(self, client):
        response = client.post("/bank-sync/links", json={
            "access_token": "access-sandbox-123", "institution_name": "First Bank",
        })

        assert response.status_code == 201
        data = response.json()
        assert "access_token" not in data
        assert data["cursor"] is None

    def test_sync_unknown_link_returns_404(self, client):
        assert client.post("/bank-sync/links/42/sync").status_code == 404

    def test_no_staged_rows(self, client):
        assert client.get("/bank-sync/imported").json() == []
