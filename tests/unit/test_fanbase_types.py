"""Unit tests for fanbase record types and argument validation."""

import pytest

from src.fanbase.errors import ErrorCode, FanbaseError
from src.fanbase.types import (
    MAX_METADATA_URI_BYTES,
    MAX_TOKEN_SUPPLY,
    LaunchToken,
    LaunchTokenMetadata,
    Token,
    MAX_TOKEN_ID,
    validate_account_id,
    validate_amount,
    validate_token_id,
)
from tests.testing_utils import make_metadata


class TestLaunchTokenMetadata:
    """Byte bounds are enforced when metadata is built."""

    def test_oversized_uri_rejected(self) -> None:
        with pytest.raises(FanbaseError) as exc_info:
            LaunchTokenMetadata(
                name="n",
                mime_type="text/plain",
                metadata_uri="u" * (MAX_METADATA_URI_BYTES + 1),
                supply=1,
            )
        assert exc_info.value.code == ErrorCode.INVALID_ARGUMENT
        assert exc_info.value.details["field"] == "metadata_uri"

    def test_name_bound_counts_bytes(self) -> None:
        """Multi-byte characters count by their UTF-8 size."""
        with pytest.raises(FanbaseError):
            LaunchTokenMetadata(name="€" * 86, mime_type="m", metadata_uri="u", supply=1)
        LaunchTokenMetadata(name="€" * 85, mime_type="m", metadata_uri="u", supply=1)

    @pytest.mark.parametrize("supply", [-1, MAX_TOKEN_SUPPLY + 1, True, "3"])
    def test_bad_supply_rejected(self, supply: object) -> None:
        with pytest.raises(FanbaseError):
            LaunchTokenMetadata(name="n", mime_type="m", metadata_uri="u", supply=supply)  # type: ignore[arg-type]

    def test_from_dict(self) -> None:
        meta = LaunchTokenMetadata.from_dict(
            {"name": "n", "mime_type": "m", "metadata_uri": "u", "supply": 4}
        )
        assert meta.supply == 4

    @pytest.mark.parametrize("data", [["x"], "name", None, 7])
    def test_from_dict_rejects_non_mapping(self, data: object) -> None:
        with pytest.raises(FanbaseError) as exc_info:
            LaunchTokenMetadata.from_dict(data)  # type: ignore[arg-type]
        assert exc_info.value.code == ErrorCode.INVALID_ARGUMENT

    def test_from_dict_missing_field(self) -> None:
        with pytest.raises(FanbaseError) as exc_info:
            LaunchTokenMetadata.from_dict({"name": "n"})
        assert exc_info.value.code == ErrorCode.INVALID_ARGUMENT


class TestLaunchTokenSupply:
    """Tests for issued/destroyed bookkeeping."""

    def test_sold_out_after_supply_issued(self) -> None:
        launch_token = LaunchToken.new(1, "alice", 10, make_metadata(supply=2))
        assert not launch_token.is_sold_out()

        launch_token.bump_issued()
        launch_token.bump_issued()
        assert launch_token.is_sold_out()

    def test_destroy_keeps_total_supply(self) -> None:
        launch_token = LaunchToken.new(1, "alice", 10, make_metadata(supply=2))
        launch_token.bump_issued()

        launch_token.bump_destroyed_and_decrease_supply()

        assert launch_token.supply == 1
        assert launch_token.destroyed == 1
        assert launch_token.total_supply() == 2
        assert not launch_token.is_sold_out()

    def test_supply_floors_at_zero(self) -> None:
        launch_token = LaunchToken.new(1, "alice", 10, make_metadata(supply=1))
        launch_token.supply = 0
        launch_token.bump_destroyed_and_decrease_supply()
        assert launch_token.supply == 0

    def test_token_copies_launch_fields(self) -> None:
        launch_token = LaunchToken.new(7, "alice", 10, make_metadata(name="Poster"))
        token = Token.new("acct", 3, launch_token)

        data = token.to_dict()
        assert data["launch_id"] == 7
        assert data["creator"] == "alice"
        assert data["name"] == "Poster"
        assert data["price"] is None
        assert launch_token.to_dict()["issued"] == 0


class TestValidateAmount:
    """Balances must be non-negative integers."""

    @pytest.mark.parametrize("amount", [-1, 1.5, True, None, "10"])
    def test_rejected(self, amount: object) -> None:
        with pytest.raises(FanbaseError) as exc_info:
            validate_amount("price", amount)  # type: ignore[arg-type]
        assert exc_info.value.code == ErrorCode.INVALID_ARGUMENT

    def test_zero_accepted(self) -> None:
        validate_amount("price", 0)


class TestValidateIds:
    """Token ids are plain integers and account ids are non-empty strings."""

    @pytest.mark.parametrize("token_id", [True, False, "1", 1.0, None, -1, MAX_TOKEN_ID + 1])
    def test_token_id_rejected(self, token_id: object) -> None:
        with pytest.raises(FanbaseError) as exc_info:
            validate_token_id("token_id", token_id)  # type: ignore[arg-type]
        assert exc_info.value.code == ErrorCode.INVALID_ARGUMENT
        assert exc_info.value.details["field"] == "token_id"

    @pytest.mark.parametrize("token_id", [0, 1, MAX_TOKEN_ID])
    def test_token_id_accepted(self, token_id: int) -> None:
        validate_token_id("token_id", token_id)

    @pytest.mark.parametrize("account", ["", None, 3, ["bob_acct"]])
    def test_account_rejected(self, account: object) -> None:
        with pytest.raises(FanbaseError) as exc_info:
            validate_account_id("receiver", account)  # type: ignore[arg-type]
        assert exc_info.value.code == ErrorCode.INVALID_ARGUMENT

    def test_account_accepted(self) -> None:
        validate_account_id("receiver", "bob_acct")
