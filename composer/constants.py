"""Protocol constants for relayer composition.

Centralizes well-known addresses and relayer encoding parameters.
"""

# Balancer V2 Vault (same address on every supported network)
BALANCER_VAULT = "0xba12222222228d8ba445958a75a0704d566bf2c8"

# Largest uint256, used for "unlimited" balance/allowance overrides
MAX_UINT256 = 2**256 - 1

# Chained reference prefixes (first two bytes of the 32-byte reference).
# Temporary references are cleared by the relayer after the first read.
CHAINED_REFERENCE_TEMP_PREFIX = 0xBA10
CHAINED_REFERENCE_READONLY_PREFIX = 0xBA11

# Any value whose top 12 bits match 0xba1 is a chained reference
CHAINED_REFERENCE_MASK = 0xFFF << 244
CHAINED_REFERENCE_PREFIX_BITS = 0xBA1 << 244

# Gas limit for read-only multicall simulation
STATIC_CALL_GAS_LIMIT = 8_000_000

# Number of basis points in 100% (slippage is expressed in bps)
BPS_PER_ONE = 10_000
