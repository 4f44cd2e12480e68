"""Ledger engine for simulated portfolio accounting."""

import math
import threading
from datetime import datetime
from typing import Callable, Iterable, Optional, Union

from simfolio.feed.base import BasePriceFeed
from simfolio.ledger.accrual import maturity_from_tenure, monthly_accrual
from simfolio.models import (
    FixedIncomeInstrument,
    LedgerError,
    LedgerResult,
    LedgerState,
    MarketInstrument,
    PortfolioSummary,
    Position,
    TransactionRecord,
)
from simfolio.portfolio import summarize

AnyInstrument = Union[MarketInstrument, FixedIncomeInstrument]

# Quantities this close to the held amount count as selling all of it
QUANTITY_REL_TOLERANCE = 1e-9


def _pnl_percent(pnl: float, cost_basis: float) -> float:
    return (pnl / cost_basis * 100) if cost_basis > 0 else 0.0


def _is_positive(number: float) -> bool:
    return math.isfinite(number) and number > 0


def _same_quantity(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=QUANTITY_REL_TOLERANCE)


class Ledger:
    """Owns a virtual cash balance, open positions and the transaction log.

    Every public operation runs under one re-entrant lock, so no caller
    can observe a position or the cash balance half-updated. Rejected
    operations return a failed LedgerResult and leave the ledger
    untouched; they never raise.
    """

    DEFAULT_STARTING_BALANCE = 10000.0

    def __init__(
        self,
        starting_balance: float = DEFAULT_STARTING_BALANCE,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the ledger.

        Args:
            starting_balance: Initial virtual cash.
            clock: Callable returning the current time. Defaults to datetime.now.

        Raises:
            ValueError: If starting_balance is negative or not finite.
        """
        if not (math.isfinite(starting_balance) and starting_balance >= 0):
            raise ValueError(f"Starting balance must be non-negative, got {starting_balance}")

        self._starting_balance = float(starting_balance)
        self._clock = clock or datetime.now
        self._lock = threading.RLock()

        self._cash = self._starting_balance
        self._positions: dict[str, Position] = {}
        self._transactions: list[TransactionRecord] = []
        self._market: dict[str, AnyInstrument] = {}
        self._last_refreshed_at: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    @property
    def starting_balance(self) -> float:
        return self._starting_balance

    @property
    def cash_balance(self) -> float:
        with self._lock:
            return self._cash

    @property
    def market(self) -> list[AnyInstrument]:
        """Latest known instrument for every symbol seen in a snapshot."""
        with self._lock:
            return list(self._market.values())

    def get_instrument(self, symbol: str) -> Optional[AnyInstrument]:
        with self._lock:
            return self._market.get(symbol)

    def get_position(self, symbol: str) -> Optional[Position]:
        with self._lock:
            return self._positions.get(symbol)

    def get_transactions(self) -> list[TransactionRecord]:
        """Revertible transactions, oldest first."""
        with self._lock:
            return list(self._transactions)

    def get_state(self) -> LedgerState:
        """Get a read-only snapshot of cash, positions and refresh time."""
        with self._lock:
            return LedgerState(
                cash_balance=self._cash,
                positions=list(self._positions.values()),
                last_refreshed_at=self._last_refreshed_at,
                transaction_count=len(self._transactions),
            )

    def get_aggregate(self) -> PortfolioSummary:
        """Get portfolio totals, recomputed from the current positions."""
        with self._lock:
            return summarize(list(self._positions.values()))

    # ------------------------------------------------------------------
    # Trading
    # ------------------------------------------------------------------

    def buy(
        self,
        instrument: Union[AnyInstrument, str],
        amount: float,
        quantity: Optional[float] = None,
    ) -> LedgerResult:
        """Invest a credit amount in an instrument.

        Args:
            instrument: Instrument to buy, or a symbol from the latest snapshot.
            amount: Credit amount to spend.
            quantity: Units bought. Defaults to amount / current price.

        Returns:
            LedgerResult with the new or updated position.
        """
        with self._lock:
            if isinstance(instrument, str):
                resolved = self._market.get(instrument)
                if resolved is None:
                    return LedgerResult.failure(
                        LedgerError.UNKNOWN_SYMBOL,
                        f"Unknown symbol: {instrument}",
                    )
                instrument = resolved

            amount = float(amount)
            if not _is_positive(amount):
                return LedgerResult.failure(
                    LedgerError.INVALID_AMOUNT,
                    f"Amount must be positive, got {amount}",
                )

            if quantity is None:
                quantity = amount / instrument.current_price
            quantity = float(quantity)
            if not _is_positive(quantity):
                return LedgerResult.failure(
                    LedgerError.INVALID_QUANTITY,
                    f"Quantity must be positive, got {quantity}",
                )

            if (
                isinstance(instrument, FixedIncomeInstrument)
                and amount < instrument.minimum_investment
            ):
                return LedgerResult.failure(
                    LedgerError.BELOW_MINIMUM_INVESTMENT,
                    f"Minimum investment for {instrument.symbol} is "
                    f"{instrument.minimum_investment:.2f}, got {amount:.2f}",
                )

            if amount > self._cash:
                return LedgerResult.failure(
                    LedgerError.INSUFFICIENT_FUNDS,
                    f"Insufficient balance. Required: {amount:.2f}, Available: {self._cash:.2f}",
                )

            now = self._clock()
            existing = self._positions.get(instrument.symbol)
            if existing is None:
                position = self._open_position(instrument, amount, quantity, now)
            else:
                position = self._add_to_position(existing, instrument, amount, quantity)

            record = TransactionRecord(
                kind="buy",
                instrument=instrument,
                amount=amount,
                quantity=quantity,
                prior_position=existing,
                cash_before=self._cash,
                timestamp=now,
            )

            self._positions[instrument.symbol] = position
            self._cash -= amount
            self._transactions.append(record)

            return LedgerResult(
                ok=True,
                message=f"Bought {quantity:g} {instrument.symbol} for {amount:.2f}",
                position=position,
                transaction=record,
            )

    def _open_position(
        self,
        instrument: AnyInstrument,
        amount: float,
        quantity: float,
        now: datetime,
    ) -> Position:
        """Build a position for a symbol that is not held yet."""
        if isinstance(instrument, FixedIncomeInstrument):
            return Position(
                symbol=instrument.symbol,
                name=instrument.name,
                category=instrument.category,
                quantity=quantity,
                average_price=instrument.current_price,
                current_price=instrument.current_price,
                value=amount,
                change_24h=0.0,
                opened_at=now,
                interest_rate=instrument.interest_rate,
                tenure=instrument.tenure,
                maturity_date=maturity_from_tenure(now, instrument.tenure),
            )

        return Position(
            symbol=instrument.symbol,
            name=instrument.name,
            category=instrument.category,
            quantity=quantity,
            average_price=instrument.current_price,
            current_price=instrument.current_price,
            value=amount,
            change_24h=instrument.change_24h,
            opened_at=now,
        )

    def _add_to_position(
        self,
        existing: Position,
        instrument: AnyInstrument,
        amount: float,
        quantity: float,
    ) -> Position:
        """Merge a buy into a held position using weighted average cost."""
        total_qty = existing.quantity + quantity
        total_cost = existing.cost_basis + amount
        new_avg = total_cost / total_qty
        value = total_qty * instrument.current_price
        pnl = value - total_cost

        return existing.model_copy(update={
            "quantity": total_qty,
            "average_price": new_avg,
            "current_price": instrument.current_price,
            "value": value,
            "pnl": pnl,
            "pnl_percent": _pnl_percent(pnl, total_cost),
        })

    def sell(self, symbol: str, quantity: float) -> LedgerResult:
        """Sell units of a held position at its current price.

        Args:
            symbol: Symbol of the position.
            quantity: Units to sell. A quantity within floating-point noise
                of the holding sells all of it.

        Returns:
            LedgerResult with the remaining position, or removed=True when
            the whole position was sold.
        """
        with self._lock:
            quantity = float(quantity)
            if not _is_positive(quantity):
                return LedgerResult.failure(
                    LedgerError.INVALID_QUANTITY,
                    f"Quantity must be positive, got {quantity}",
                )

            existing = self._positions.get(symbol)
            if existing is None:
                return LedgerResult.failure(
                    LedgerError.NO_POSITION,
                    f"No position in {symbol}",
                )

            if _same_quantity(quantity, existing.quantity):
                quantity = existing.quantity
            elif quantity > existing.quantity:
                return LedgerResult.failure(
                    LedgerError.INSUFFICIENT_QUANTITY,
                    f"Cannot sell {quantity:g} {symbol}, holding {existing.quantity:g}",
                )

            sale_value = quantity * existing.current_price
            remaining_qty = existing.quantity - quantity

            if quantity < existing.quantity:
                value = remaining_qty * existing.current_price
                cost_basis = remaining_qty * existing.average_price
                pnl = value - cost_basis
                remaining: Optional[Position] = existing.model_copy(update={
                    "quantity": remaining_qty,
                    "value": value,
                    "pnl": pnl,
                    "pnl_percent": _pnl_percent(pnl, cost_basis),
                })
            else:
                remaining = None

            record = TransactionRecord(
                kind="sell",
                instrument=self._instrument_at_sale(existing),
                amount=sale_value,
                quantity=quantity,
                prior_position=existing,
                position_index=list(self._positions).index(symbol),
                cash_before=self._cash,
                timestamp=self._clock(),
            )

            if remaining is None:
                del self._positions[symbol]
            else:
                self._positions[symbol] = remaining
            self._cash += sale_value
            self._transactions.append(record)

            return LedgerResult(
                ok=True,
                message=f"Sold {quantity:g} {symbol} for {sale_value:.2f}",
                position=remaining,
                removed=remaining is None,
                transaction=record,
            )

    def _instrument_at_sale(self, position: Position) -> AnyInstrument:
        """Describe the instrument a position is being sold at."""
        known = self._market.get(position.symbol)
        if known is not None:
            return known.model_copy(update={"current_price": position.current_price})

        if position.is_fixed_income:
            return FixedIncomeInstrument(
                symbol=position.symbol,
                name=position.name,
                category=position.category.value,
                current_price=position.current_price,
                interest_rate=position.interest_rate or 0.0,
                tenure=position.tenure or "1 year",
            )

        return MarketInstrument(
            symbol=position.symbol,
            name=position.name,
            category=position.category.value,
            current_price=position.current_price,
            change_24h=position.change_24h,
        )

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def reprice(self, snapshot: Iterable[AnyInstrument]) -> int:
        """Apply a price snapshot to all open positions.

        Positions missing from the snapshot keep their last prices, and
        snapshot symbols that are not held are only remembered for buys.
        Cash and the transaction log are never touched.

        Args:
            snapshot: Instruments with current prices.

        Returns:
            Number of positions repriced.
        """
        incoming = {instrument.symbol: instrument for instrument in snapshot}
        with self._lock:
            self._market.update(incoming)

            repriced = 0
            for symbol, position in list(self._positions.items()):
                instrument = incoming.get(symbol)
                if instrument is None:
                    continue
                self._positions[symbol] = self._repriced(position, instrument)
                repriced += 1

            self._last_refreshed_at = self._clock()
            return repriced

    def _repriced(self, position: Position, instrument: AnyInstrument) -> Position:
        if position.is_fixed_income:
            principal = position.quantity * position.current_price
            pnl = monthly_accrual(principal, position.interest_rate or 0.0)
            return position.model_copy(update={
                "value": principal + pnl,
                "pnl": pnl,
                "pnl_percent": _pnl_percent(pnl, position.cost_basis),
                "change_24h": 0.0,
            })

        price = instrument.current_price
        value = position.quantity * price
        cost_basis = position.cost_basis
        pnl = value - cost_basis
        return position.model_copy(update={
            "current_price": price,
            "value": value,
            "pnl": pnl,
            "pnl_percent": _pnl_percent(pnl, cost_basis),
            "change_24h": instrument.change_24h,
        })

    def refresh(self, feed: BasePriceFeed) -> int:
        """Fetch a snapshot from a feed and apply it.

        The fetch runs without holding the ledger lock; only applying the
        snapshot is serialized with trades.

        Args:
            feed: Price feed to fetch from.

        Returns:
            Number of positions repriced.
        """
        snapshot = feed.fetch_snapshot()
        return self.reprice(snapshot)

    # ------------------------------------------------------------------
    # Reversal
    # ------------------------------------------------------------------

    def revert_last(self) -> LedgerResult:
        """Undo the most recent buy or sell.

        The affected position is restored from the snapshot stored with the
        transaction, and cash goes back to what it was before the trade.
        Each call pops one transaction, so repeated calls walk further back.

        Returns:
            LedgerResult with the reverted transaction and restored position.
        """
        with self._lock:
            if not self._transactions:
                return LedgerResult.failure(
                    LedgerError.NOTHING_TO_REVERT,
                    "No transaction to revert",
                )

            record = self._transactions.pop()
            prior = record.prior_position

            if prior is None:
                self._positions.pop(record.symbol, None)
            elif record.symbol in self._positions:
                self._positions[record.symbol] = prior
            else:
                # Put a closed position back where it was listed before the sell
                items = list(self._positions.items())
                index = record.position_index if record.position_index is not None else len(items)
                items.insert(index, (record.symbol, prior))
                self._positions = dict(items)
            self._cash = record.cash_before

            return LedgerResult(
                ok=True,
                message=f"Reverted {record.kind} of {record.quantity:g} {record.symbol}",
                position=prior,
                removed=prior is None,
                transaction=record,
            )

    def reset(self) -> None:
        """Clear positions and history and restore the starting balance."""
        with self._lock:
            self._positions.clear()
            self._transactions.clear()
            self._cash = self._starting_balance
