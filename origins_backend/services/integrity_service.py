import logging

from ..models.provenance_models import IntegrityReport
from .ledger_service import LedgerClient

logger = logging.getLogger(__name__)


class IntegrityProber:
    """System-wide Ledger health signal, separate from any one asset's chain state."""

    def __init__(self, ledger_client: LedgerClient):
        self.ledger_client = ledger_client

    def check(self) -> IntegrityReport:
        report = self.ledger_client.verify_integrity()
        if not report.valid:
            logger.warning(f"Ledger integrity not confirmed (totalEntries={report.totalEntries}, at {report.lastVerified})")
        return report
