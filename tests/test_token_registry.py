"""Tests for the token registry mint, ownership and transfer rules."""

import threading

import pytest

from nfdns.registry.errors import (
    DuplicateIdentifierError,
    NotOwnerError,
    UnauthorizedError,
    UnknownTokenError,
)
from nfdns.registry.models import Collection, TokenRecord, parse_token_id
from nfdns.registry.token_registry import TokenRegistry

MINTER = "0xminter"
ACCOUNT1 = "0xaccount1"
ACCOUNT2 = "0xaccount2"
ACCOUNT3 = "0xaccount3"

TOKEN1 = 1
TOKEN2 = 2


def _registry() -> TokenRegistry:
    return TokenRegistry(Collection(name="BlueCat", symbol="BCat", minting_authority=MINTER))


def _minted() -> TokenRegistry:
    reg = _registry()
    reg.mint(TOKEN1, ACCOUNT1, "token 1 URI", caller=MINTER)
    reg.mint(TOKEN2, ACCOUNT2, "token 2 URI", caller=MINTER)
    return reg


# --- Collection ---


def test_collection_properties():
    reg = _registry()
    assert reg.name == "BlueCat"
    assert reg.symbol == "BCat"
    assert reg.minting_authority == MINTER


# --- Reads on unminted tokens ---


def test_unminted_token_does_not_exist():
    reg = _registry()
    assert not reg.exists(9999)
    assert reg.total_supply() == 0

    with pytest.raises(UnknownTokenError):
        reg.owner_of(9999)
    with pytest.raises(UnknownTokenError):
        reg.token_uri(9999)


def test_unknown_token_error_is_a_key_error():
    reg = _registry()
    with pytest.raises(KeyError):
        reg.owner_of("missing")


# --- Mint ---


def test_mint_records_owner_and_uri():
    reg = _registry()
    record = reg.mint(TOKEN1, ACCOUNT1, "token 1 URI", caller=MINTER)

    assert isinstance(record, TokenRecord)
    assert record.minted_at
    assert reg.exists(TOKEN1)
    assert reg.owner_of(TOKEN1) == ACCOUNT1
    assert reg.token_uri(TOKEN1) == "token 1 URI"
    assert reg.total_supply() == 1


def test_mint_duplicate_identifier_rejected():
    reg = _registry()
    reg.mint(TOKEN1, ACCOUNT1, "token 1 URI", caller=MINTER)

    with pytest.raises(DuplicateIdentifierError):
        reg.mint(TOKEN1, ACCOUNT2, "token 2 URI", caller=MINTER)

    assert reg.owner_of(TOKEN1) == ACCOUNT1
    assert reg.token_uri(TOKEN1) == "token 1 URI"
    assert reg.total_supply() == 1


def test_mint_duplicate_reported_regardless_of_caller():
    reg = _registry()
    reg.mint(TOKEN1, ACCOUNT1, "token 1 URI", caller=MINTER)

    with pytest.raises(DuplicateIdentifierError):
        reg.mint(TOKEN1, ACCOUNT1, "token 1 URI", caller=ACCOUNT3)


def test_mint_requires_minting_authority():
    reg = _registry()

    with pytest.raises(UnauthorizedError):
        reg.mint(TOKEN1, ACCOUNT1, "token 1 URI", caller=ACCOUNT1)

    assert not reg.exists(TOKEN1)
    assert reg.total_supply() == 0


def test_mint_rejects_empty_owner():
    reg = _registry()
    with pytest.raises(ValueError):
        reg.mint(TOKEN1, "", "token 1 URI", caller=MINTER)
    assert reg.total_supply() == 0


def test_mint_rejects_non_scalar_identifier():
    reg = _registry()
    with pytest.raises(TypeError):
        reg.mint(1.5, ACCOUNT1, "", caller=MINTER)
    with pytest.raises(TypeError):
        reg.mint(True, ACCOUNT1, "", caller=MINTER)


def test_integer_and_string_identifiers_are_distinct():
    reg = _registry()
    reg.mint(1, ACCOUNT1, "", caller=MINTER)
    reg.mint("1", ACCOUNT2, "", caller=MINTER)

    assert reg.total_supply() == 2
    assert reg.owner_of(1) == ACCOUNT1
    assert reg.owner_of("1") == ACCOUNT2


def test_multiple_unique_tokens_and_ownership():
    reg = _minted()

    assert reg.total_supply() == 2
    assert reg.exists(TOKEN1)
    assert reg.exists(TOKEN2)
    assert not reg.exists(9999)
    assert reg.owner_of(TOKEN1) == ACCOUNT1
    assert reg.owner_of(TOKEN2) == ACCOUNT2


def test_tokens_snapshot_in_mint_order():
    reg = _minted()
    assert [r.token_id for r in reg.tokens()] == [TOKEN1, TOKEN2]


# --- Transfer ---


def test_transfer_by_non_owner_unauthorized():
    reg = _minted()

    with pytest.raises(UnauthorizedError):
        reg.transfer(ACCOUNT2, ACCOUNT3, TOKEN2, caller=ACCOUNT1)

    assert reg.owner_of(TOKEN2) == ACCOUNT2


def test_transfer_with_wrong_from_not_owner():
    reg = _minted()

    # ACCOUNT2 asks to move TOKEN1 as if it held it
    with pytest.raises(NotOwnerError):
        reg.transfer(ACCOUNT2, ACCOUNT3, TOKEN1, caller=ACCOUNT2)

    with pytest.raises(NotOwnerError):
        reg.transfer(ACCOUNT1, ACCOUNT3, TOKEN2, caller=ACCOUNT1)

    assert reg.owner_of(TOKEN1) == ACCOUNT1
    assert reg.owner_of(TOKEN2) == ACCOUNT2


def test_transfer_unknown_token_reported_first():
    reg = _minted()

    with pytest.raises(UnknownTokenError):
        reg.transfer(ACCOUNT3, ACCOUNT1, 9999, caller=ACCOUNT2)


def test_transfer_not_owner_reported_before_unauthorized():
    reg = _minted()

    # Both from and caller are wrong; the ownership mismatch wins
    with pytest.raises(NotOwnerError):
        reg.transfer(ACCOUNT3, ACCOUNT1, TOKEN2, caller=ACCOUNT1)


def test_transfer_by_owner_succeeds():
    reg = _minted()

    record = reg.transfer(ACCOUNT2, ACCOUNT3, TOKEN2, caller=ACCOUNT2)

    assert record.owner == ACCOUNT3
    assert reg.owner_of(TOKEN2) == ACCOUNT3
    assert reg.token_uri(TOKEN2) == "token 2 URI"
    assert reg.owner_of(TOKEN1) == ACCOUNT1
    assert reg.total_supply() == 2


def test_previous_owner_cannot_transfer_again():
    reg = _minted()
    reg.transfer(ACCOUNT2, ACCOUNT3, TOKEN2, caller=ACCOUNT2)

    with pytest.raises(NotOwnerError):
        reg.transfer(ACCOUNT2, ACCOUNT1, TOKEN2, caller=ACCOUNT2)

    reg.transfer(ACCOUNT3, ACCOUNT1, TOKEN2, caller=ACCOUNT3)
    assert reg.owner_of(TOKEN2) == ACCOUNT1


def test_minting_authority_has_no_transfer_privilege():
    reg = _minted()

    with pytest.raises(UnauthorizedError):
        reg.transfer(ACCOUNT1, ACCOUNT3, TOKEN1, caller=MINTER)


def test_transfer_rejects_empty_recipient():
    reg = _minted()
    with pytest.raises(ValueError):
        reg.transfer(ACCOUNT1, "", TOKEN1, caller=ACCOUNT1)
    assert reg.owner_of(TOKEN1) == ACCOUNT1


def test_empty_recipient_reported_after_ordered_checks():
    reg = _minted()

    with pytest.raises(UnknownTokenError):
        reg.transfer(ACCOUNT1, "", 9999, caller=ACCOUNT1)
    with pytest.raises(NotOwnerError):
        reg.transfer(ACCOUNT3, "", TOKEN1, caller=ACCOUNT3)
    with pytest.raises(UnauthorizedError):
        reg.transfer(ACCOUNT1, "", TOKEN1, caller=ACCOUNT2)


def test_mint_empty_owner_reported_after_duplicate_and_authority():
    reg = _minted()

    with pytest.raises(DuplicateIdentifierError):
        reg.mint(TOKEN1, "", "token 1 URI", caller=MINTER)
    with pytest.raises(UnauthorizedError):
        reg.mint(3, "", "token 3 URI", caller=ACCOUNT3)
    assert reg.total_supply() == 2


def test_every_identifier_operation_rejects_non_scalar_identifiers():
    reg = _minted()

    with pytest.raises(TypeError):
        reg.exists(1.0)
    with pytest.raises(TypeError):
        reg.owner_of(1.0)
    with pytest.raises(TypeError):
        reg.token_uri(True)
    with pytest.raises(TypeError):
        reg.transfer(ACCOUNT1, ACCOUNT3, 1.0, caller=ACCOUNT1)
    assert reg.owner_of(TOKEN1) == ACCOUNT1


# --- Concurrency ---


def _race(count, action):
    """Run ``action(i)`` on ``count`` threads released together."""
    barrier = threading.Barrier(count)
    successes = []
    failures = []

    def run(i):
        barrier.wait()
        try:
            successes.append(action(i))
        except Exception as exc:
            failures.append(exc)

    threads = [threading.Thread(target=run, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return successes, failures


def test_concurrent_mints_of_same_identifier():
    reg = _registry()

    successes, failures = _race(16, lambda i: reg.mint(TOKEN1, f"0xowner{i}", "", caller=MINTER))

    assert len(successes) == 1
    assert len(failures) == 15
    assert all(isinstance(exc, DuplicateIdentifierError) for exc in failures)
    assert reg.total_supply() == 1
    assert reg.owner_of(TOKEN1) == successes[0].owner


def test_concurrent_transfers_of_same_token():
    reg = _minted()

    successes, failures = _race(
        16, lambda i: reg.transfer(ACCOUNT1, f"0xdest{i}", TOKEN1, caller=ACCOUNT1)
    )

    assert len(successes) == 1
    assert len(failures) == 15
    assert all(isinstance(exc, NotOwnerError) for exc in failures)
    assert reg.owner_of(TOKEN1) == successes[0].owner
    assert reg.total_supply() == 2

# --- Models ---


def test_parse_token_id():
    assert parse_token_id("42") == 42
    assert parse_token_id(" 7 ") == 7
    assert parse_token_id("blue.cat") == "blue.cat"
    assert parse_token_id("-1") == "-1"
