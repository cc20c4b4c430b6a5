from dataclasses import dataclass


@dataclass
class PaymentMethod:
    id: str  # tag stored on expenses, e.g. "VISA"
    label: str  # human readable, e.g. "Tarjeta de crédito Visa"
    account_id: str  # account an expense paid this way is drawn from

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "account_id": self.account_id}
