"""Configuration constants for forge-deployments library."""

# Factory contracts whose pool init code hash is recorded with the deployment.
# Maps contract name to the zero-argument getter returning the bytes32 hash.
POOL_INIT_CODE_HASH_GETTERS = {
    "UniswapV2Factory": "INIT_CODE_PAIR_HASH()",
    "UniswapV3Factory": "POOL_INIT_CODE_HASH()",
}

FACTORY_CONTRACT_NAMES = frozenset(POOL_INIT_CODE_HASH_GETTERS)

# Environment variables read when a parameter is not passed explicitly
RPC_URL_ENV = "RPC_URL"
EXPLORER_API_KEY_ENV = "ETHERSCAN_API_KEY"
EXPLORER_API_URL_ENV = "EXPLORER_API_URL"

DEFAULT_EXPLORER_API_URL = "https://api.etherscan.io/v2/api"

# Seconds before an explorer or RPC request is abandoned
REQUEST_TIMEOUT = 30

# Indentation of the deployment log JSON on disk
JSON_INDENT = 2
