"""
Pytest configuration and fixtures for BitBadges Toolkit tests.
"""

import copy
import json

import pytest

from registry.tokens import TokenRegistry, MAINNET_COINS
from validator.core import ValidationEngine

USDC_DENOM = "ibc/F082B65C88E4B6D5EF1DB243CDA1D331D002759E938A0F5CD3FFDC5D53B3E349"
USDC_BACKING_ADDRESS = "bb1a7m8394e8u98w8uwle49dds8caexmcvqwgcadtp264gvt28uygmsdlgm0a"
CREATOR = "bb1wskntnrxxnq9x2f95wuyf0z9fezr3azw2dc0ld"

MAX_UINT64 = "18446744073709551615"

SKELETON_TRANSACTION = {
    "messages": [
        {
            "typeUrl": "/tokenization.MsgUniversalUpdateCollection",
            "value": {
                "creator": CREATOR,
                "collectionId": "0",
                "validTokenIds": [{"start": "1", "end": "10"}],
                "tokenMetadata": [
                    {
                        "tokenIds": [{"start": "1", "end": "10"}],
                        "uri": "ipfs://metadata/{id}",
                        "customData": ""
                    }
                ],
                "collectionPermissions": {
                    "canDeleteCollection": [],
                    "canUpdateValidTokenIds": []
                },
                "collectionApprovals": [
                    {
                        "fromListId": "Mint",
                        "toListId": "All",
                        "initiatedByListId": "All",
                        "transferTimes": [{"start": "1", "end": MAX_UINT64}],
                        "tokenIds": [{"start": "1", "end": "10"}],
                        "ownershipTimes": [{"start": "1", "end": MAX_UINT64}],
                        "approvalId": "public-mint",
                        "approvalCriteria": {
                            "overridesFromOutgoingApprovals": True
                        }
                    }
                ],
                "standards": []
            }
        }
    ],
    "memo": ""
}


def subscription_approval(order_flags=None, duration="2592000000"):
    """Mint approval of a subscription collection."""
    flags = {
        "useOverallNumTransfers": False,
        "usePerToAddressNumTransfers": False,
        "usePerFromAddressNumTransfers": False,
        "usePerInitiatedByAddressNumTransfers": False,
        "useMerkleChallengeLeafIndex": False,
    }
    flags.update(order_flags if order_flags is not None else {"useOverallNumTransfers": True})

    return {
        "fromListId": "Mint",
        "toListId": "All",
        "initiatedByListId": "All",
        "transferTimes": [{"start": "1", "end": MAX_UINT64}],
        "tokenIds": [{"start": "1", "end": "1"}],
        "ownershipTimes": [{"start": "1", "end": MAX_UINT64}],
        "approvalId": "subscription-mint",
        "approvalCriteria": {
            "overridesFromOutgoingApprovals": True,
            "coinTransfers": [
                {
                    "to": CREATOR,
                    "coins": [{"denom": "ubadge", "amount": "1000000000"}],
                    "overrideFromWithApproverAddress": False,
                    "overrideToWithInitiator": False
                }
            ],
            "predeterminedBalances": {
                "manualBalances": [],
                "incrementedBalances": {
                    "startBalances": [
                        {
                            "amount": "1",
                            "tokenIds": [{"start": "1", "end": "1"}],
                            "ownershipTimes": [{"start": "1", "end": MAX_UINT64}]
                        }
                    ],
                    "incrementTokenIdsBy": "0",
                    "incrementOwnershipTimesBy": "0",
                    "durationFromTimestamp": duration,
                    "allowOverrideTimestamp": True
                },
                "orderCalculationMethod": flags
            }
        }
    }


@pytest.fixture
def skeleton_transaction():
    """Minimal well-formed collection creation transaction."""
    return copy.deepcopy(SKELETON_TRANSACTION)


@pytest.fixture
def collection_value(skeleton_transaction):
    """Value object of the skeleton's collection message."""
    return skeleton_transaction["messages"][0]["value"]


@pytest.fixture
def subscription_transaction(skeleton_transaction):
    """Well-formed subscription collection transaction."""
    value = skeleton_transaction["messages"][0]["value"]
    value["standards"] = ["Subscriptions"]
    value["validTokenIds"] = [{"start": "1", "end": "1"}]
    value["tokenMetadata"][0]["tokenIds"] = [{"start": "1", "end": "1"}]
    value["collectionApprovals"] = [subscription_approval()]
    return skeleton_transaction


@pytest.fixture
def make_subscription_approval():
    """Factory for subscription Mint approvals."""
    return subscription_approval


@pytest.fixture
def engine():
    """Validation engine with every default rule."""
    return ValidationEngine({"validator_id": "test_validator"})


@pytest.fixture
def token_registry():
    """Fresh registry over the mainnet coin table."""
    return TokenRegistry(MAINNET_COINS)


@pytest.fixture
def write_json(tmp_path):
    """Write a document to a temporary JSON file and return its path."""
    def _write(document, name="tx.json"):
        path = tmp_path / name
        path.write_text(json.dumps(document))
        return str(path)
    return _write


# Test markers for different test categories
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "concurrency: mark test as a concurrency test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# Pytest collection hooks
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test paths and names."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in item.name:
            item.add_marker(pytest.mark.integration)

        if "concurrent" in item.name or "thread" in item.name:
            item.add_marker(pytest.mark.concurrency)

        if "slow" in item.name or "large" in item.name:
            item.add_marker(pytest.mark.slow)
