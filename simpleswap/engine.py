"""Pool engine: liquidity provisioning, withdrawal and exact-input swaps.

PoolEngine is the only component that changes pool state. It is stateless
between calls: reserves and positions live in the PoolStore it is given,
balances live in the asset ledgers.

Every mutating operation is one atomic unit of work:

1. All checks (deadline, path, slippage floors, claims) run first.
2. Store writes are staged in a StoreTransaction.
3. Custody moves run against the ledgers. If any move fails, the moves that
   already succeeded are compensated in reverse order.
4. The staged writes are committed. The event is emitted once the engine
   lock is released, so listeners may call back into the engine.

A failing call therefore leaves reserves, positions and ledger balances as
they were. Calls are serialized by an engine-wide lock, and a call made from
inside an in-progress operation on the same thread (a ledger re-entering
the engine) is rejected.

Share accounting: a provision mints a claim equal to the raw sum of the two
deposited amounts, and a withdrawal pays ``claim * reserve / (reserve_a +
reserve_b)`` per side. Claims are therefore denominated in mixed units and
are not comparable across pools with different price levels or decimals.
This is the intended accounting of this engine, not a geometric-mean LP
token. The final burn of a pool pays out whatever both reserves hold, which
keeps rounding dust and swap drift from stranding funds.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, replace

import structlog

from simpleswap.amm.constant_product import ConstantProduct, constant_product
from simpleswap.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from simpleswap.errors import (
    Expired,
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientLiquidity,
    InsufficientOutput,
    ReentrantCall,
    TransferFailed,
    UnsupportedPath,
)
from simpleswap.events import (
    EventListener,
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    SwapExecuted,
)
from simpleswap.ledger.base import AssetLedger, LedgerError
from simpleswap.models.types import normalize_address
from simpleswap.pools.pair import PairKey, pair_key
from simpleswap.pools.store import Pool, PoolStore
from simpleswap.safe_int import S, to_amount

logger = structlog.get_logger()


@dataclass(frozen=True)
class LiquidityResult:
    """Outcome of a provisioning call."""

    amount_a: int
    amount_b: int
    liquidity: int


@dataclass(frozen=True)
class _CustodyMove:
    token: str
    source: str
    destination: str
    amount: int


class CustodyBatch:
    """Custody moves of one operation, undone together if the operation fails.

    ``pull`` moves funds from a payer into pool custody, ``pay`` moves funds
    from custody to a recipient. When the batch exits with an exception every
    completed move is reversed, newest first.
    """

    def __init__(self, ledgers: Mapping[str, AssetLedger], custody: str) -> None:
        self._ledgers = ledgers
        self._custody = custody
        self._done: list[_CustodyMove] = []

    def __enter__(self) -> CustodyBatch:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:  # type: ignore[no-untyped-def]
        if exc_type is not None:
            self._unwind()
        return False

    def ledger(self, token: str) -> AssetLedger:
        ledger = self._ledgers.get(token)
        if ledger is None:
            raise TransferFailed(f"No ledger for asset {token}")
        return ledger

    def pull(self, token: str, payer: str, amount: int) -> None:
        """Move ``amount`` of ``token`` from ``payer`` into custody."""
        ledger = self.ledger(token)
        self._run(
            lambda: ledger.transfer_from(self._custody, payer, self._custody, amount),
            f"pull {amount} {token[-8:]} from {payer[-8:]}",
        )
        self._done.append(_CustodyMove(token, payer, self._custody, amount))

    def pay(self, token: str, payee: str, amount: int) -> None:
        """Move ``amount`` of ``token`` from custody to ``payee``."""
        ledger = self.ledger(token)
        self._run(
            lambda: ledger.transfer(self._custody, payee, amount),
            f"pay {amount} {token[-8:]} to {payee[-8:]}",
        )
        self._done.append(_CustodyMove(token, self._custody, payee, amount))

    @staticmethod
    def _run(move: Callable[[], bool], description: str) -> None:
        try:
            ok = move()
        except LedgerError as err:
            raise TransferFailed(f"Ledger rejected {description}: {err}") from err
        if not ok:
            raise TransferFailed(f"Ledger rejected {description}")

    def _unwind(self) -> None:
        while self._done:
            move = self._done.pop()
            try:
                self.ledger(move.token).transfer(move.destination, move.source, move.amount)
            except (LedgerError, TransferFailed):
                logger.error(
                    "custody_unwind_failed",
                    token=move.token,
                    source=move.source,
                    destination=move.destination,
                    amount=move.amount,
                )
                raise
            logger.warning(
                "custody_move_reverted",
                token=move.token[-8:],
                source=move.source[-8:],
                destination=move.destination[-8:],
                amount=move.amount,
            )


class PoolEngine:
    """Constant-product liquidity pools over a keyed PoolStore.

    Args:
        store: Pool and position state (a fresh PoolStore per engine in tests)
        ledgers: Asset ledger per asset address
        config: Fee, price scale and custody address
        clock: Returns the current unix time; used for deadline checks
        amm: Pool math implementation (injectable for testing)
    """

    def __init__(
        self,
        store: PoolStore,
        ledgers: Mapping[str, AssetLedger],
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        clock: Callable[[], float] = time.time,
        amm: ConstantProduct = constant_product,
    ) -> None:
        self.store = store
        self.config = config
        self.clock = clock
        self.amm = amm
        self._ledgers = {normalize_address(token): ledger for token, ledger in ledgers.items()}
        self._listeners: list[EventListener] = []
        self._lock = threading.Lock()
        self._owner: int | None = None

    # --- Collaborators ---

    def register_ledger(self, token: str, ledger: AssetLedger) -> None:
        """Attach the ledger holding balances of ``token``."""
        self._ledgers[normalize_address(token, validate=True)] = ledger

    def subscribe(self, listener: EventListener) -> None:
        """Register a callback receiving every committed event.

        Listeners run after the operation has released the engine lock, so a
        listener may query or call mutating operations. Exceptions raised by a
        listener are logged and never reach the caller of the operation.
        """
        self._listeners.append(listener)

    # --- Operations ---

    def add_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
        *,
        sender: str,
    ) -> LiquidityResult:
        """Deposit both assets of a pair and mint a liquidity claim to ``to``.

        Into an empty pool the desired amounts are taken as-is and set the
        initial price. Otherwise the deposit is matched to the current
        reserve ratio without exceeding either desired amount; the minimums
        bound how far the matched side may fall.

        Returns:
            LiquidityResult with the deposited amounts and the minted claim

        Raises:
            Expired: Deadline has passed
            IdenticalAssets: token_a equals token_b
            InsufficientAAmount / InsufficientBAmount: Matched amount below minimum
            InsufficientLiquidity: A deposit side would be zero
            TransferFailed: Payer's ledger rejected a pull
        """
        with self._operation("add_liquidity") as committed:
            self._check_deadline(deadline)
            for name, value in (
                ("amount_a_desired", amount_a_desired),
                ("amount_b_desired", amount_b_desired),
                ("amount_a_min", amount_a_min),
                ("amount_b_min", amount_b_min),
            ):
                to_amount(value, name)
            key = pair_key(token_a, token_b)
            token_a, token_b = normalize_address(token_a), normalize_address(token_b)
            sender, to = self._account(sender), self._account(to)

            staged = self.store.begin()
            pool = staged.get_pool(key)
            reserve_a, reserve_b = pool.get_reserves(token_a)

            amount_a, amount_b = self.amm.optimal_amounts(
                reserve_a,
                reserve_b,
                amount_a_desired,
                amount_b_desired,
                amount_a_min,
                amount_b_min,
            )
            if amount_a == 0 or amount_b == 0:
                raise InsufficientLiquidity(f"Deposit of {amount_a}/{amount_b} leaves a side empty")

            liquidity = (S(amount_a) + S(amount_b)).value
            updated = pool.with_reserves(
                token_a,
                (S(reserve_a) + S(amount_a)).value,
                (S(reserve_b) + S(amount_b)).value,
            )
            total_shares = (S(pool.total_shares) + S(liquidity)).value
            staged.put_pool(replace(updated, total_shares=total_shares))
            staged.put_shares(to, key, (S(staged.get_shares(to, key)) + S(liquidity)).value)

            with self._custody() as custody:
                custody.pull(token_a, sender, amount_a)
                custody.pull(token_b, sender, amount_b)

            staged.commit()
            committed.append(
                LiquidityAdded(
                    provider=sender,
                    token_a=token_a,
                    token_b=token_b,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    liquidity=liquidity,
                )
            )
            return LiquidityResult(amount_a=amount_a, amount_b=amount_b, liquidity=liquidity)

    def remove_liquidity(
        self,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
        *,
        sender: str,
    ) -> tuple[int, int]:
        """Burn ``liquidity`` of the sender's claim and pay out both assets to ``to``.

        Each side is paid ``liquidity * reserve / (reserve_a + reserve_b)``,
        rounded down. Burning the last outstanding claim of the pool pays out
        both reserves in full, so a fully withdrawn pool is empty.

        Returns:
            (amount_a, amount_b) paid out, in argument order

        Raises:
            Expired: Deadline has passed
            InsufficientLiquidity: Claim is zero, exceeds the sender's position,
                exceeds the pool's combined reserves or would leave a one-sided
                pool
            InsufficientAAmount / InsufficientBAmount: Payout below minimum
            TransferFailed: A ledger rejected a payout
        """
        with self._operation("remove_liquidity") as committed:
            self._check_deadline(deadline)
            to_amount(liquidity, "liquidity")
            to_amount(amount_a_min, "amount_a_min")
            to_amount(amount_b_min, "amount_b_min")
            key = pair_key(token_a, token_b)
            token_a, token_b = normalize_address(token_a), normalize_address(token_b)
            sender, to = self._account(sender), self._account(to)

            if liquidity == 0:
                raise InsufficientLiquidity("Nothing to withdraw")

            staged = self.store.begin()
            shares = staged.get_shares(sender, key)
            if shares < liquidity:
                raise InsufficientLiquidity(f"Claim {shares} below requested {liquidity}")

            pool = staged.get_pool(key)
            reserve_a, reserve_b = pool.get_reserves(token_a)
            if liquidity == pool.total_shares:
                # Last outstanding claim takes whatever rounding left behind
                amount_a, amount_b = reserve_a, reserve_b
            else:
                amount_a, amount_b = self.amm.withdrawal_amounts(liquidity, reserve_a, reserve_b)
            if (amount_a == reserve_a) != (amount_b == reserve_b):
                raise InsufficientLiquidity("Withdrawal would leave a one-sided pool")
            if amount_a < amount_a_min:
                raise InsufficientAAmount(f"Withdrawal of {amount_a} below minimum {amount_a_min}")
            if amount_b < amount_b_min:
                raise InsufficientBAmount(f"Withdrawal of {amount_b} below minimum {amount_b_min}")

            updated = pool.with_reserves(
                token_a,
                (S(reserve_a) - S(amount_a)).value,
                (S(reserve_b) - S(amount_b)).value,
            )
            total_shares = (S(pool.total_shares) - S(liquidity)).value
            staged.put_pool(replace(updated, total_shares=total_shares))
            staged.put_shares(sender, key, (S(shares) - S(liquidity)).value)

            with self._custody() as custody:
                custody.pay(token_a, to, amount_a)
                custody.pay(token_b, to, amount_b)

            staged.commit()
            committed.append(
                LiquidityRemoved(
                    provider=sender,
                    token_a=token_a,
                    token_b=token_b,
                    amount_a=amount_a,
                    amount_b=amount_b,
                )
            )
            return amount_a, amount_b

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        to: str,
        deadline: int,
        *,
        sender: str,
    ) -> list[int]:
        """Swap exactly ``amount_in`` of ``path[0]`` for at least ``amount_out_min`` of ``path[1]``.

        Only direct two-asset paths are supported. The engine fee is taken
        from the input before the constant-product formula is applied.

        Returns:
            [amount_in, amount_out]

        Raises:
            Expired: Deadline has passed
            UnsupportedPath: Path is not exactly two assets
            IdenticalAssets: Both path entries are the same asset
            InsufficientInput: amount_in is zero
            InsufficientLiquidity: Pool has no reserves
            InsufficientOutput: Output below amount_out_min or zero
            TransferFailed: A ledger rejected the pull or the payout
        """
        with self._operation("swap") as committed:
            self._check_deadline(deadline)
            to_amount(amount_in, "amount_in")
            to_amount(amount_out_min, "amount_out_min")
            if isinstance(path, str) or len(path) != 2:
                raise UnsupportedPath(
                    f"Only direct two-asset paths are supported, got {len(path)} hops"
                )
            key = pair_key(path[0], path[1])
            token_in, token_out = normalize_address(path[0]), normalize_address(path[1])
            sender, to = self._account(sender), self._account(to)

            staged = self.store.begin()
            pool = staged.get_pool(key)
            reserve_in, reserve_out = pool.get_reserves(token_in)
            amount_out = self.amm.get_amount_out(
                amount_in, reserve_in, reserve_out, self.config.fee_multiplier
            )
            if amount_out < amount_out_min:
                raise InsufficientOutput(f"Output {amount_out} below minimum {amount_out_min}")
            if amount_out == 0:
                raise InsufficientOutput("Swap output rounds to zero")

            staged.put_pool(
                pool.with_reserves(
                    token_in,
                    (S(reserve_in) + S(amount_in)).value,
                    (S(reserve_out) - S(amount_out)).value,
                )
            )

            with self._custody() as custody:
                custody.pull(token_in, sender, amount_in)
                custody.pay(token_out, to, amount_out)

            staged.commit()
            committed.append(
                SwapExecuted(
                    sender=sender,
                    token_in=token_in,
                    token_out=token_out,
                    amount_in=amount_in,
                    amount_out=amount_out,
                )
            )
            return [amount_in, amount_out]

    # --- Queries ---

    def get_price(self, token_a: str, token_b: str) -> int:
        """Units of token_b per unit of token_a, scaled by ``config.price_scale``.

        Raises:
            NoLiquidity: Pool has no token_a reserve
        """
        with self._read():
            reserve_a, reserve_b = self._pool(token_a, token_b).get_reserves(token_a)
        return self.amm.spot_price(reserve_a, reserve_b, self.config.price_scale)

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Fee-free constant-product output for arbitrary reserves."""
        return self.amm.quote_output(
            to_amount(amount_in, "amount_in"),
            to_amount(reserve_in, "reserve_in"),
            to_amount(reserve_out, "reserve_out"),
        )

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B matching ``amount_a`` at the ratio reserve_b / reserve_a."""
        return self.amm.quote(
            to_amount(amount_a, "amount_a"),
            to_amount(reserve_a, "reserve_a"),
            to_amount(reserve_b, "reserve_b"),
        )

    def get_reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        """Reserves of the pair, ordered as the arguments."""
        with self._read():
            return self._pool(token_a, token_b).get_reserves(token_a)

    def get_liquidity(self, holder: str, token_a: str, token_b: str) -> int:
        """Liquidity claim of ``holder`` on the pair."""
        key = pair_key(token_a, token_b)
        with self._read():
            return self.store.get_shares(holder, key)

    def get_pool(self, token_a: str, token_b: str) -> Pool:
        with self._read():
            return self._pool(token_a, token_b)

    # --- Internals ---

    def _pool(self, token_a: str, token_b: str) -> Pool:
        key: PairKey = pair_key(token_a, token_b)
        return self.store.get_pool(key)

    @staticmethod
    def _account(address: str) -> str:
        return normalize_address(address, validate=True)

    def _check_deadline(self, deadline: int) -> None:
        now = self.clock()
        if now > deadline:
            raise Expired(f"Deadline {deadline} passed at {int(now)}")

    def _custody(self) -> CustodyBatch:
        return CustodyBatch(self._ledgers, self.config.custody)

    @contextmanager
    def _operation(self, name: str) -> Iterator[list[PoolEvent]]:
        """Serialize a mutating operation and reject re-entry from the same thread.

        Yields the list the operation appends its events to once committed.
        They are emitted after the lock is released, so listeners may call
        back into the engine.
        """
        if self._owner == threading.get_ident():
            raise ReentrantCall(f"{name} called while another operation is in progress")
        committed: list[PoolEvent] = []
        with self._lock:
            self._owner = threading.get_ident()
            try:
                yield committed
            except Exception as err:
                logger.warning(
                    "pool_operation_rejected",
                    operation=name,
                    error=type(err).__name__,
                    detail=str(err),
                )
                raise
            finally:
                self._owner = None
        for event in committed:
            self._emit(event)

    @contextmanager
    def _read(self) -> Iterator[None]:
        # Reads from inside an operation (ledger callbacks) see committed state
        if self._owner == threading.get_ident():
            yield
            return
        with self._lock:
            yield

    def _emit(self, event: PoolEvent) -> None:
        logger.info(event.name, **event.as_log())
        for listener in self._listeners:
            # The operation has already committed; a failing listener must not report it as failed
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "event_listener_failed",
                    event_name=event.name,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )


_default_engine: PoolEngine | None = None
_default_engine_lock = threading.Lock()


def get_default_engine() -> PoolEngine:
    """Return the process-wide engine, creating it on first use.

    The default engine starts with an empty store and no asset ledgers;
    hosts attach ledgers with ``register_ledger``. Fee and custody come from
    the environment (see EngineConfig.from_env).
    """
    global _default_engine
    with _default_engine_lock:
        if _default_engine is None:
            config = EngineConfig.from_env()
            logger.info("default_engine_created", fee_bps=config.fee_bps, custody=config.custody)
            _default_engine = PoolEngine(store=PoolStore(), ledgers={}, config=config)
        return _default_engine
