"""Payment mode normalization."""

from dataclasses import dataclass
from typing import Any

CODE_ALIASES: dict[str, str] = {
    "COD": "COD",
    "CASH ON DELIVERY": "COD",
    "CASH": "COD",
    "SPLIT PAYMENT": "SPLIT",
    "SPLIT": "SPLIT",
    "ADVANCE": "ADVANCE",
    "ADVANCE PAYMENT": "ADVANCE",
    "CREDIT": "CREDIT_CYCLE",
    "CREDIT CYCLE": "CREDIT_CYCLE",
    "CREDIT_CYCLE": "CREDIT_CYCLE",
    "EOM": "END_OF_MONTH",
    "END OF MONTH": "END_OF_MONTH",
    "END_OF_MONTH": "END_OF_MONTH",
    "UPI": "UPI",
    "NET BANKING": "NET_BANKING",
    "NET_BANKING": "NET_BANKING",
    "NEFT": "NET_BANKING",
    "RTGS": "NET_BANKING",
    "CHEQUE": "CHEQUE",
    "CHECK": "CHEQUE",
    "OTHER": "OTHER",
}

LABELS: dict[str, str] = {
    "COD": "Cash on Delivery",
    "SPLIT": "Split Payment",
    "ADVANCE": "Advance Payment",
    "CREDIT_CYCLE": "Credit Cycle",
    "END_OF_MONTH": "End of Month",
    "UPI": "UPI",
    "NET_BANKING": "Net Banking",
    "CHEQUE": "Cheque",
    "OTHER": "Other",
}

CREDIT_CODES = frozenset({"CREDIT_CYCLE", "END_OF_MONTH"})


@dataclass(frozen=True)
class PaymentTerms:
    code: str
    label: str
    credit_days: int | None = None

    @property
    def is_cod(self) -> bool:
        return self.code == "COD"

    @property
    def is_advance(self) -> bool:
        return self.code == "ADVANCE"

    @property
    def is_credit(self) -> bool:
        return self.code in CREDIT_CODES

    def display(self) -> str:
        if not self.code:
            return "N/A"
        if self.code == "CREDIT_CYCLE" and self.credit_days:
            return f"Credit Cycle ({self.credit_days} days)"
        return self.label


def normalize_payment_mode(raw: Any, credit_days: int | None = None) -> PaymentTerms:
    """
    Map free-text or structured payment modes to a canonical code.

    Accepts a string ("Cash on Delivery", "neft") or a mapping with ``code``
    or ``label``. Unknown values keep their upper-cased text as the code.
    """
    if isinstance(raw, dict):
        credit_days = raw.get("creditDays", raw.get("credit_days", credit_days))
        raw = raw.get("code") or raw.get("label") or ""

    text = str(raw or "").strip().upper()
    if not text:
        return PaymentTerms(code="", label="")

    code = CODE_ALIASES.get(text, text)
    return PaymentTerms(
        code=code,
        label=LABELS.get(code, code),
        credit_days=credit_days if isinstance(credit_days, int) else None,
    )
