"""
Component type factory for latticekit.

The factory turns one record of an optics table (a mapping of column name to
value) into accelerator components. Builders are registered per table
keyword; the built-in builders are described in component_types.yaml.
Model construction never depends on how components are produced: the factory
is a collaborator of the table driver, not of the model constructor.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Type
import logging
import math
import os

import yaml
from pydantic import ValidationError

from ..components import (
    AcceleratorComponent, Drift, Marker, Monitor, Quadrupole, SectorBend,
    Sextupole, Octupole, Kicker, RFCavity, Solenoid,
)
from ..model.types import ComponentTypeError

logger = logging.getLogger(__name__)

# brho [T m] = p [GeV/c] / 0.299792458 for unit charge
SPEED_OF_LIGHT_GEV = 0.299792458

ComponentBuilder = Callable[[Mapping[str, Any], float], List[AcceleratorComponent]]

component_classes: Dict[str, Type[AcceleratorComponent]] = {
    'Drift': Drift,
    'Marker': Marker,
    'Monitor': Monitor,
    'Quadrupole': Quadrupole,
    'SectorBend': SectorBend,
    'Sextupole': Sextupole,
    'Octupole': Octupole,
    'Kicker': Kicker,
    'RFCavity': RFCavity,
    'Solenoid': Solenoid,
}


def _load_component_types_from_yaml() -> dict:
    yaml_path = os.path.join(os.path.dirname(__file__), 'component_types.yaml')
    if not os.path.exists(yaml_path):
        raise FileNotFoundError(f"component_types.yaml not found at {yaml_path}")
    with open(yaml_path, 'r') as f:
        data = yaml.safe_load(f)
    return check_component_type_specs(data)


def check_component_type_specs(data: Any) -> dict:
    """Check a keyword table and convert its scale factors to floats.

    Raises:
        ValueError: If the table is not a mapping of keyword to entry, names an
                    unknown component type or has a non-numeric scale factor.
    """
    if not isinstance(data, dict):
        raise ValueError("component_types.yaml is malformed: root should be a mapping")
    for keyword, spec in data.items():
        if not isinstance(spec, dict) or spec.get('type') not in component_classes:
            raise ValueError(f"component_types.yaml: keyword '{keyword}' has an unknown component type")
        scale = spec.get('scale') or {}
        for field_name, factor in scale.items():
            try:
                scale[field_name] = float(factor)
            except (TypeError, ValueError):
                raise ValueError(
                    f"component_types.yaml: scale of '{field_name}' for keyword '{keyword}' "
                    f"is not a number: {factor!r}"
                )
    return data

try:
    component_type_specs = _load_component_types_from_yaml()
except Exception as e:
    raise RuntimeError(f"Failed to load component types from component_types.yaml: {e}")


def momentum_to_brho(momentum: float) -> float:
    """Magnetic rigidity in T·m of a unit-charge particle with momentum in GeV/c."""
    return momentum / SPEED_OF_LIGHT_GEV


def normalize_record(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Upper-case column names and strip quotes from string values."""
    normalized = {}
    for key, value in record.items():
        if isinstance(value, str):
            value = value.strip().strip('"')
        normalized[str(key).strip().upper()] = value
    return normalized


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


def multipole_keyword(record: Mapping[str, Any]) -> str:
    """Resolve a thin MULTIPOLE record to the keyword of its leading order.

    The first non-zero integrated strength among K1L, K2L and K3L decides the
    type; a multipole with none of them set is a marker.
    """
    for column, keyword in (('K1L', 'QUADRUPOLE'), ('K2L', 'SEXTUPOLE'), ('K3L', 'OCTUPOLE')):
        value = record.get(column)
        if not _is_missing(value) and float(value) != 0.0:
            return keyword
    return 'MARKER'


class TypeFactory:
    """
    Registry of component builders keyed by optics table keyword.

    A builder receives the (normalized) record and the reference rigidity
    brho and returns zero or more components.

    Example:
        >>> factory = TypeFactory()
        >>> factory.get_instance({'NAME': 'QF', 'KEYWORD': 'QUADRUPOLE', 'L': 0.5, 'K1L': 0.4}, brho=10.0)
        [Quadrupole(name=QF, length=0.5)]
    """

    def __init__(self, use_builtin_types: bool = True):
        self._builders: Dict[str, ComponentBuilder] = {}
        self._missing_columns: Set[str] = set()
        if use_builtin_types:
            for keyword, spec in component_type_specs.items():
                self.register(keyword, self._make_table_builder(keyword, spec))

    # === Registry ===

    def register(self, keyword: str, builder: ComponentBuilder):
        """Register a builder for a table keyword, replacing any existing one."""
        if not callable(builder):
            raise TypeError("Component builder must be callable.")
        keyword = keyword.upper()
        if keyword in self._builders:
            logger.debug(f"Replacing builder for keyword '{keyword}'")
        self._builders[keyword] = builder

    def unregister(self, keyword: str):
        keyword = keyword.upper()
        if keyword in self._builders:
            del self._builders[keyword]
        else:
            logger.warning(f"Keyword '{keyword}' not found in type factory")

    def is_registered(self, keyword: str) -> bool:
        keyword = keyword.upper()
        return keyword == 'MULTIPOLE' or keyword in self._builders

    def get_registered_keywords(self) -> List[str]:
        return sorted(self._builders)

    # === Construction ===

    def get_instance(self, record: Mapping[str, Any], brho: float) -> List[AcceleratorComponent]:
        """Build the components described by one table record.

        Args:
            record: Column name -> value mapping; must provide NAME and KEYWORD.
            brho: Reference rigidity in T·m.

        Returns:
            List of components, possibly empty.

        Raises:
            ComponentTypeError: If the keyword is unknown or the record
                                values are invalid for the component type.
        """
        row = normalize_record(record)
        keyword = str(row.get('KEYWORD', '')).upper()
        if keyword == 'MULTIPOLE':
            keyword = multipole_keyword(row)

        builder = self._builders.get(keyword)
        if builder is None:
            raise ComponentTypeError(
                f"No component builder registered for keyword '{keyword}'. "
                f"Registered keywords: {self.get_registered_keywords()}"
            )
        try:
            return list(builder(row, brho))
        except (ValidationError, ValueError, TypeError) as e:
            raise ComponentTypeError(
                f"Invalid {keyword} record '{row.get('NAME')}': {e}"
            ) from e

    def _column(self, row: Mapping[str, Any], column: str) -> Optional[float]:
        value = row.get(column)
        if _is_missing(value):
            if column not in self._missing_columns:
                self._missing_columns.add(column)
                logger.warning(f"Column '{column}' not present in table; using component default")
            return None
        return float(value)

    def _make_table_builder(self, keyword: str, spec: dict) -> ComponentBuilder:
        component_class = component_classes[spec['type']]
        columns = spec.get('columns', {}) or {}
        integrated = spec.get('integrated', {}) or {}
        scale = spec.get('scale', {}) or {}
        fixed = spec.get('fixed', {}) or {}
        rectangular = bool(spec.get('rectangular', False))

        def build(row: Mapping[str, Any], brho: float) -> List[AcceleratorComponent]:
            name = str(row.get('NAME', '')).strip()
            if not name:
                raise ComponentTypeError(f"{keyword} record without a NAME")
            length = self._column(row, 'L') or 0.0
            kwargs: Dict[str, Any] = dict(fixed)

            for field_name, column in columns.items():
                value = self._column(row, column)
                if value is not None:
                    kwargs[field_name] = value * scale.get(field_name, 1.0)
            for field_name, column in integrated.items():
                value = self._column(row, column)
                if value is not None:
                    kwargs[field_name] = value / length if length > 0 else value

            if rectangular:
                length = _rbend_to_sbend(length, kwargs)

            _add_fields(spec['type'], kwargs, length, brho)
            return [component_class(name=name, length=length, **kwargs)]

        return build


def _rbend_to_sbend(chord_length: float, kwargs: Dict[str, Any]) -> float:
    """Convert rectangular-bend geometry to sector-bend geometry in place.

    Returns the arc length; pole face angles grow by half the bend angle.
    """
    angle = kwargs.get('angle', 0.0)
    if angle == 0.0 or chord_length == 0.0:
        return chord_length
    half = angle / 2.0
    kwargs['e1'] = kwargs.get('e1', 0.0) + half
    kwargs['e2'] = kwargs.get('e2', 0.0) + half
    arc_length = chord_length * half / math.sin(half)
    if 'k1' in kwargs and chord_length > 0:
        # integrated strength was divided by the chord length
        kwargs['k1'] = kwargs['k1'] * chord_length / arc_length
    return arc_length


def _add_fields(component_type: str, kwargs: Dict[str, Any], length: float, brho: float):
    """Fill in magnetic fields from normalized strengths and the rigidity."""
    if component_type == 'Quadrupole':
        kwargs['field_gradient'] = brho * kwargs.get('k1', 0.0)
    elif component_type == 'SectorBend':
        angle = kwargs.get('angle', 0.0)
        kwargs['field'] = brho * angle / length if length > 0 else 0.0
    elif component_type == 'Solenoid':
        kwargs['field'] = brho * kwargs.get('ks', 0.0)
