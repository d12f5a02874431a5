"""Operators wrapping the external tools the pipeline drives."""

from torbootstrap.operators.apt import AptOperator
from torbootstrap.operators.base import Operator
from torbootstrap.operators.firewall import FirewallOperator
from torbootstrap.operators.golang import GoOperator
from torbootstrap.operators.service import ServiceOperator
from torbootstrap.operators.system import SystemOperator

__all__ = [
    "AptOperator",
    "FirewallOperator",
    "GoOperator",
    "Operator",
    "ServiceOperator",
    "SystemOperator",
]
