"""
latticekit factory - building components and models from optics table records
"""

from latticekit.factory.type_factory import (
    TypeFactory,
    ComponentBuilder,
    momentum_to_brho,
    normalize_record,
    multipole_keyword,
)
from latticekit.factory.table_driver import DriverConfiguration, OpticsTableModelBuilder

__all__ = [
    'TypeFactory',
    'ComponentBuilder',
    'momentum_to_brho',
    'normalize_record',
    'multipole_keyword',
    'DriverConfiguration',
    'OpticsTableModelBuilder',
]
