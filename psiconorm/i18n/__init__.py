"""Portuguese (pt-BR) message catalogues."""

from psiconorm.i18n.pt_messages import ClassificationMessages, ValidationMessages, WarningMessages

__all__ = ["ClassificationMessages", "ValidationMessages", "WarningMessages"]
