"""Statically declared operations per endpoint category.

Each name is both the SDK function name and the stem of its module under
``<sdk>/api/<endpoint>/_methods/``. Keep the lists in sync with the SDK when
it gains or drops methods.
"""

from __future__ import annotations

from typing import Iterable, Literal, Mapping

from scripts.apidocs.errors import NotFoundError

Endpoint = Literal["info", "exchange"]

ENDPOINTS: tuple[Endpoint, ...] = ("info", "exchange")

DEFAULT_SKIPPED_METHODS: tuple[str, ...] = ("multiSig",)

# Remote specs owned by this tool; anything else on GitBook is left alone.
SLUG_PREFIX = "hl-"

METHODS: dict[Endpoint, tuple[str, ...]] = {
    "info": (
        "activeAssetData",
        "alignedQuoteTokenInfo",
        "allMids",
        "allPerpMetas",
        "blockDetails",
        "candleSnapshot",
        "clearinghouseState",
        "delegations",
        "delegatorHistory",
        "delegatorRewards",
        "delegatorSummary",
        "exchangeStatus",
        "extraAgents",
        "frontendOpenOrders",
        "fundingHistory",
        "gossipRootIps",
        "historicalOrders",
        "isVip",
        "l2Book",
        "leadingVaults",
        "legalCheck",
        "liquidatable",
        "marginTable",
        "maxBuilderFee",
        "maxMarketOrderNtls",
        "meta",
        "metaAndAssetCtxs",
        "openOrders",
        "orderStatus",
        "perpDeployAuctionStatus",
        "perpDexLimits",
        "perpDexs",
        "perpsAtOpenInterestCap",
        "portfolio",
        "preTransferCheck",
        "predictedFundings",
        "recentTrades",
        "referral",
        "spotClearinghouseState",
        "spotDeployState",
        "spotMeta",
        "spotMetaAndAssetCtxs",
        "spotPairDeployAuctionStatus",
        "subAccounts",
        "tokenDetails",
        "twapHistory",
        "txDetails",
        "userDetails",
        "userFees",
        "userFills",
        "userFillsByTime",
        "userFunding",
        "userNonFundingLedgerUpdates",
        "userRateLimit",
        "userRole",
        "userToMultiSigSigners",
        "userTwapSliceFills",
        "userTwapSliceFillsByTime",
        "userVaultEquities",
        "validatorL1Votes",
        "validatorSummaries",
        "vaultDetails",
        "vaultSummaries",
        "webData2",
    ),
    "exchange": (
        "agentEnableDexAbstraction",
        "approveAgent",
        "approveBuilderFee",
        "batchModify",
        "cancel",
        "cancelByCloid",
        "cDeposit",
        "claimRewards",
        "convertToMultiSigUser",
        "createSubAccount",
        "createVault",
        "cSignerAction",
        "cValidatorAction",
        "cWithdraw",
        "evmUserModify",
        "modify",
        "multiSig",
        "noop",
        "order",
        "perpDeploy",
        "registerReferrer",
        "reserveRequestWeight",
        "scheduleCancel",
        "setDisplayName",
        "setReferrer",
        "spotDeploy",
        "spotSend",
        "spotUser",
        "subAccountModify",
        "subAccountSpotTransfer",
        "subAccountTransfer",
        "tokenDelegate",
        "twapCancel",
        "twapOrder",
        "updateIsolatedMargin",
        "updateLeverage",
        "usdClassTransfer",
        "usdSend",
        "vaultDistribute",
        "vaultModify",
        "vaultTransfer",
        "withdraw3",
    ),
}


def is_valid_endpoint(name: str) -> bool:
    return name in ENDPOINTS


def spec_slug(endpoint: str, method: str) -> str:
    return f"{SLUG_PREFIX}{endpoint}-{method}"


def list_methods(
    endpoint: str,
    skipped: Iterable[str] = (),
    registry: Mapping[str, Iterable[str]] = METHODS,
) -> list[str]:
    """Return the operations declared for ``endpoint``, minus ``skipped``.

    Order follows the registry declaration. An endpoint missing from the
    registry raises NotFoundError; an empty method list is returned as-is.
    """
    if endpoint not in registry:
        raise NotFoundError(f"No methods registered for endpoint '{endpoint}'")
    skip = set(skipped)
    return [name for name in registry[endpoint] if name not in skip]
