"""
Claim Ledger Unit Tests
Tests for allowlist/claims/ledger.py
"""
import pytest

from allowlist.claims import ClaimLedger
from allowlist.schemas.errors import AlreadyClaimedException, ErrorCodes


class TestMarkClaimed:

    def test_mark_then_has_claimed(self):
        ledger = ClaimLedger()
        assert not ledger.has_claimed(0, "alice")

        record = ledger.mark_claimed(0, "alice", amount="100")

        assert ledger.has_claimed(0, "alice")
        assert record.key == (0, "alice")
        assert record.amount == "100"
        assert (0, "alice") in ledger
        assert len(ledger) == 1

    def test_second_mark_rejected(self):
        ledger = ClaimLedger()
        ledger.mark_claimed(0, "alice")
        with pytest.raises(AlreadyClaimedException) as exc_info:
            ledger.mark_claimed(0, "alice")
        assert exc_info.value.code == ErrorCodes.ALREADY_CLAIMED
        assert "version 0" in exc_info.value.message
        assert len(ledger) == 1

    def test_versions_are_independent(self):
        ledger = ClaimLedger()
        ledger.mark_claimed(0, "alice")
        ledger.mark_claimed(1, "alice")
        assert ledger.has_claimed(0, "alice")
        assert ledger.has_claimed(1, "alice")
        assert not ledger.has_claimed(2, "alice")

    def test_beneficiaries_are_independent(self):
        ledger = ClaimLedger()
        ledger.mark_claimed(0, "alice")
        assert not ledger.has_claimed(0, "bob")


class TestReserve:

    def test_reserve_commits_on_success(self):
        ledger = ClaimLedger()
        with ledger.reserve(0, "alice", amount="100") as record:
            record.transfer_ref = "tx_1"
        assert ledger.get_record(0, "alice").transfer_ref == "tx_1"

    def test_reserve_rolls_back_on_error(self):
        ledger = ClaimLedger()
        with pytest.raises(RuntimeError):
            with ledger.reserve(0, "alice"):
                assert ledger.has_claimed(0, "alice")
                raise RuntimeError("transfer blew up")
        assert not ledger.has_claimed(0, "alice")
        assert len(ledger) == 0

    def test_reserve_rejects_existing(self):
        ledger = ClaimLedger()
        ledger.mark_claimed(0, "alice")
        with pytest.raises(AlreadyClaimedException):
            with ledger.reserve(0, "alice"):
                pass
        # The existing record survives
        assert ledger.has_claimed(0, "alice")


class TestPrune:

    def test_prune_drops_older_versions(self):
        ledger = ClaimLedger()
        ledger.mark_claimed(0, "alice")
        ledger.mark_claimed(1, "alice")
        ledger.mark_claimed(2, "bob")

        assert ledger.prune(2) == 2
        assert not ledger.has_claimed(0, "alice")
        assert not ledger.has_claimed(1, "alice")
        assert ledger.has_claimed(2, "bob")

    def test_prune_nothing(self):
        ledger = ClaimLedger()
        ledger.mark_claimed(3, "alice")
        assert ledger.prune(3) == 0
        assert len(ledger) == 1

    def test_records_for_version(self):
        ledger = ClaimLedger()
        ledger.mark_claimed(0, "alice")
        ledger.mark_claimed(0, "bob")
        ledger.mark_claimed(1, "alice")
        assert {r.beneficiary for r in ledger.records_for_version(0)} == {"alice", "bob"}

    def test_record_to_dict(self):
        ledger = ClaimLedger()
        record = ledger.mark_claimed(0, "alice", amount="1.50000000", token="USDC")
        data = record.to_dict()
        assert data["beneficiary"] == "alice"
        assert data["token"] == "USDC"
        assert data["transfer_ref"] is None
