"""SQLAlchemy unit of work: one session, one database transaction.

Entering opens a fresh session and binds every repository to it.
``commit()`` makes the whole event durable; leaving the block without a
commit rolls it all back.  Storage conflicts raised on commit surface as
ConcurrencyConflictError.
"""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from phoneshop.domain.unit_of_work import UnitOfWork
from phoneshop.infrastructure.persistence.conflicts import translating_conflicts
from phoneshop.infrastructure.persistence.sql_party_repository import SqlPartyRepository
from phoneshop.infrastructure.persistence.sql_purchase_repository import SqlPurchaseRepository
from phoneshop.infrastructure.persistence.sql_repair_job_repository import (
    SqlRepairJobRepository,
)
from phoneshop.infrastructure.persistence.sql_sale_repository import SqlSaleRepository
from phoneshop.infrastructure.persistence.sql_settlement_repository import (
    SqlSettlementRepository,
)
from phoneshop.infrastructure.persistence.sql_stock_unit_repository import (
    SqlStockUnitRepository,
)
from phoneshop.logging_config import get_logger

logger = get_logger("persistence.uow")


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> UnitOfWork:
        self._session = self._session_factory()
        self.parties = SqlPartyRepository(self._session)
        self.units = SqlStockUnitRepository(self._session)
        self.repairs = SqlRepairJobRepository(self._session)
        self.sales = SqlSaleRepository(self._session)
        self.purchases = SqlPurchaseRepository(self._session)
        self.settlements = SqlSettlementRepository(self._session)
        return super().__enter__()

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
            if exc_type is not None:
                logger.warning(
                    "transaction_rolled_back",
                    extra={"error": exc_type.__name__, "code": getattr(exc, "code", None)},
                )
        finally:
            self._session.close()  # type: ignore[union-attr]
            self._session = None

    def commit(self) -> None:
        with translating_conflicts("commit"):
            self._session.commit()  # type: ignore[union-attr]
        logger.debug("transaction_committed")

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
