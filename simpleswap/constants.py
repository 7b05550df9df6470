"""Protocol constants for the pool engine."""

# Maximum uint256 value; every reserve, amount and claim must fit in it
UINT256_MAX = 2**256 - 1

# Fixed-point scale for spot prices (1e18 = one unit of B per unit of A)
PRICE_SCALE = 10**18

# Fee arithmetic is done in basis points: effective_in = in * (10000 - fee_bps) / 10000
FEE_DENOMINATOR = 10_000

# Standard 0.3% trading fee (997/1000 multiplier)
DEFAULT_FEE_BPS = 30

# Address of the pool's own account on every asset ledger
DEFAULT_CUSTODY = "0x5151515151515151515151515151515151515151"
