"""
AML collaborator: third-party compliance risk signal.
"""

from walletrisk.aml.models import CRITICAL_INDICATOR_CODE, AmlResult, RiskIndicator
from walletrisk.aml.provider import AmlProvider, MetaSleuthClient, describe_aml, should_auto_block

__all__ = [
    "CRITICAL_INDICATOR_CODE",
    "AmlResult",
    "RiskIndicator",
    "AmlProvider",
    "MetaSleuthClient",
    "describe_aml",
    "should_auto_block",
]
