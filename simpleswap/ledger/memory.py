"""In-memory fungible asset ledger.

Reference implementation of the AssetLedger contract with ERC-20 semantics:
the deployer receives the initial supply, only the owner can mint, and
third-party pulls consume an allowance granted with ``approve``.
"""

from __future__ import annotations

from collections import defaultdict

import structlog

from simpleswap.constants import UINT256_MAX
from simpleswap.ledger.base import InsufficientAllowance, InsufficientBalance, Unauthorized
from simpleswap.models.types import normalize_address
from simpleswap.safe_int import S, to_amount

logger = structlog.get_logger()


class InMemoryLedger:
    """Balances and allowances of one asset held in process memory."""

    def __init__(
        self,
        address: str,
        name: str,
        symbol: str,
        owner: str,
        initial_supply: int = 0,
        decimals: int = 18,
    ) -> None:
        self.address = normalize_address(address, validate=True)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.owner = normalize_address(owner, validate=True)
        self._balances: defaultdict[str, int] = defaultdict(int)
        self._allowances: defaultdict[tuple[str, str], int] = defaultdict(int)
        self._total_supply = 0
        if initial_supply:
            self._mint(self.owner, initial_supply)

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def allowance(self, holder: str, spender: str) -> int:
        return self._allowances.get((normalize_address(holder), normalize_address(spender)), 0)

    def approve(self, holder: str, spender: str, amount: int) -> bool:
        """Let ``spender`` pull up to ``amount`` from ``holder``."""
        to_amount(amount)
        self._allowances[(normalize_address(holder), normalize_address(spender))] = amount
        logger.debug(
            "ledger_approval",
            asset=self.symbol,
            holder=holder[-8:],
            spender=spender[-8:],
            amount=amount,
        )
        return True

    def mint(self, caller: str, to: str, amount: int) -> bool:
        """Create ``amount`` new units for ``to``. Owner only.

        Raises:
            Unauthorized: If caller is not the ledger owner
        """
        if normalize_address(caller) != self.owner:
            raise Unauthorized("not the owner")
        self._mint(normalize_address(to), amount)
        return True

    def transfer(self, sender: str, payee: str, amount: int) -> bool:
        """Move ``amount`` from ``sender`` to ``payee``.

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        self._move(normalize_address(sender), normalize_address(payee), amount)
        return True

    def transfer_from(self, operator: str, payer: str, payee: str, amount: int) -> bool:
        """Move ``amount`` from ``payer`` to ``payee`` using ``operator``'s allowance.

        An operator moving its own funds needs no allowance. An allowance of
        2**256 - 1 is treated as unlimited and is not decremented.

        Raises:
            InsufficientAllowance: If the allowance is below amount
            InsufficientBalance: If payer holds less than amount
        """
        operator_norm = normalize_address(operator)
        payer_norm = normalize_address(payer)
        to_amount(amount)

        slot = (payer_norm, operator_norm)
        allowed = self._allowances.get(slot, 0)
        if operator_norm != payer_norm and allowed < amount:
            raise InsufficientAllowance(
                f"{self.symbol}: allowance {allowed} of {operator[-8:]} below {amount}"
            )

        self._move(payer_norm, normalize_address(payee), amount)
        if operator_norm != payer_norm and allowed != UINT256_MAX:
            self._allowances[slot] = allowed - amount
        return True

    def _mint(self, to: str, amount: int) -> None:
        to_amount(amount)
        self._total_supply = (S(self._total_supply) + S(amount)).value
        self._balances[to] = self._balances.get(to, 0) + amount
        logger.debug("ledger_mint", asset=self.symbol, to=to[-8:], amount=amount)

    def _move(self, sender: str, payee: str, amount: int) -> None:
        to_amount(amount)
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol}: balance {balance} of {sender[-8:]} below {amount}"
            )
        self._balances[sender] = balance - amount
        self._balances[payee] = self._balances.get(payee, 0) + amount
        logger.debug(
            "ledger_transfer",
            asset=self.symbol,
            sender=sender[-8:],
            payee=payee[-8:],
            amount=amount,
        )
