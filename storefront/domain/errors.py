# storefront/domain/errors.py
from typing import Dict


class CheckoutValidationError(ValueError):
    """Dane klienta nie przeszly walidacji (blad per pole)."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


class EmptyCartError(ValueError):
    def __init__(self, message: str = "Seu carrinho está vazio."):
        super().__init__(message)


class DeliverySelectionError(ValueError):
    pass


class CheckoutStepError(ValueError):
    pass


class HandoffConfigError(ValueError):
    def __init__(self, message: str = "WhatsApp da loja não configurado."):
        super().__init__(message)


class BackendError(RuntimeError):
    pass


class NotFoundError(LookupError):
    pass
