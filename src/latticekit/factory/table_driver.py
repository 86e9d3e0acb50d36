"""
Model construction from optics table records.

OpticsTableModelBuilder walks the rows of an optics listing (one mapping per
row, or a pandas DataFrame) and drives an AcceleratorModelConstructor: LINE
rows open and close frames, every other row is turned into components by a
TypeFactory and appended in order. Reading the listing from disk is left to
the caller.
"""

from typing import Any, Iterable, List, Mapping, Optional, Set, Union
import logging

import pandas as pd
from pydantic import Field, field_validator

from ..components import Drift
from ..model.accelerator_model import AcceleratorModel
from ..model.constructor import AcceleratorModelConstructor
from ..model.frames import LatticeFrame
from ..model.types import ConstructorConfiguration, ConstructionStateError
from ..models.base import PhysicsBaseModel
from ..models.validators import validate_log_level, validate_momentum
from .type_factory import TypeFactory, _is_missing, momentum_to_brho, normalize_record

STRUCTURE_PREFIXES = ('M_', 'S_', 'G_')


class DriverConfiguration(PhysicsBaseModel):
    """Configuration of an optics table driver."""
    name: str = Field(default="optics", min_length=1, description="Driver name, used for logging")
    momentum: float = Field(description="Reference momentum (GeV/c)")
    flat_lattice: bool = Field(default=False, description="Build without any nested frames")
    honour_structure: bool = Field(
        default=False,
        description="Build every LINE as a frame; if False only LINEs prefixed M_, S_ or G_",
    )
    ignore_zero_length_types: Set[str] = Field(
        default_factory=set, description="Keywords skipped when their length is zero"
    )
    drift_types: Set[str] = Field(default_factory=set, description="Keywords built as drifts")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('momentum')
    @classmethod
    def validate_momentum_range(cls, v):
        return validate_momentum(v)

    @field_validator('ignore_zero_length_types', 'drift_types')
    @classmethod
    def upper_case_keywords(cls, v):
        return {keyword.upper() for keyword in v}

    @field_validator('log_level')
    @classmethod
    def check_log_level(cls, v):
        return validate_log_level(v)


class OpticsTableModelBuilder:
    """
    Builds an AcceleratorModel from optics table records.

    Args:
        config: Driver configuration (reference momentum and build options)
        factory: Type factory used to build components (default: built-in types)
        constructor_config: Configuration handed to the model constructor

    Example:
        >>> builder = OpticsTableModelBuilder(DriverConfiguration(momentum=10.0))
        >>> model = builder.construct_model([
        ...     {'NAME': 'D1', 'KEYWORD': 'DRIFT', 'L': 1.0},
        ...     {'NAME': 'QF', 'KEYWORD': 'QUADRUPOLE', 'L': 0.5, 'K1L': 0.2},
        ... ])
        >>> model.lattice.size()
        2
    """

    def __init__(
        self,
        config: DriverConfiguration,
        factory: Optional[TypeFactory] = None,
        constructor_config: Optional[ConstructorConfiguration] = None,
    ):
        self.config = config.model_copy(deep=True)
        self.factory = factory or TypeFactory()
        self.constructor = AcceleratorModelConstructor(constructor_config)
        self._open_lines: List[str] = []
        self.skipped: List[str] = []
        self._row_count = 0

        self.logger = logging.getLogger(f"{__name__}.{config.name}")
        self.logger.setLevel(getattr(logging, config.log_level))

    @property
    def brho(self) -> float:
        return momentum_to_brho(self.config.momentum)

    def treat_type_as_drift(self, keyword: str):
        """Build every row with this keyword as a drift of the row's length."""
        self.config.drift_types = self.config.drift_types | {keyword}

    def ignore_zero_length_type(self, keyword: str):
        """Skip rows with this keyword when their length is zero."""
        self.config.ignore_zero_length_types = self.config.ignore_zero_length_types | {keyword}

    def construct_model(self, rows: Union[pd.DataFrame, Iterable[Mapping[str, Any]]]) -> AcceleratorModel:
        """Build a model from the rows of an optics table.

        Args:
            rows: Table rows, each providing at least NAME, KEYWORD and L.

        Returns:
            The finished model.

        Raises:
            ConstructionStateError: If LINE rows do not open and close in
                                    matching pairs.
            ComponentTypeError: If a row cannot be built.
        """
        self.start_new_model()
        self.append_model(rows)
        return self.get_model()

    def start_new_model(self):
        """Discard any model in progress and start an empty one."""
        self.constructor.start_new_model()
        self._open_lines = []
        self.skipped = []
        self._row_count = 0

    def append_model(
        self,
        rows: Union[pd.DataFrame, Iterable[Mapping[str, Any]]],
        momentum: Optional[float] = None,
    ):
        """Append the rows of a table to the model in progress.

        Tables appended one after another form one continuous beamline; each
        table may have its own reference momentum. A model is started if none
        is in progress.

        Args:
            rows: Table rows, each providing at least NAME, KEYWORD and L.
            momentum: Reference momentum of this table in GeV/c
                      (default: config.momentum).

        Raises:
            ConstructionStateError: If the table leaves a LINE open.
            ComponentTypeError: If a row cannot be built.
            ValueError: If momentum is out of range.
        """
        if not self.constructor.has_model():
            self.start_new_model()
        if momentum is None:
            momentum = self.config.momentum
        brho = momentum_to_brho(validate_momentum(momentum))

        if isinstance(rows, pd.DataFrame):
            rows = rows.to_dict(orient='records')

        start_size = self.constructor.get_current_model().lattice.size()
        row_count = 0
        for record in rows:
            row_count += 1
            self._append_row(normalize_record(record), brho)
        self._row_count += row_count

        if self._open_lines:
            raise ConstructionStateError(f"Table ended with unclosed LINE(s): {self._open_lines}")
        self.logger.debug(
            f"Appended {row_count} rows at p0={momentum} GeV/c: "
            f"{self.constructor.get_current_model().lattice.size() - start_size} components"
        )

    def get_model(self) -> AcceleratorModel:
        """Finish the model in progress and hand it over."""
        model = self.constructor.finish()
        self.logger.info(
            f"Built model from {self._row_count} rows: "
            f"{model.lattice.size()} components, {len(self.skipped)} rows skipped"
        )
        return model

    def _append_row(self, row: Mapping[str, Any], brho: float):
        name = str(row.get('NAME', '')).strip()
        keyword = str(row.get('KEYWORD', '')).strip().upper()
        length = row.get('L')
        length = 0.0 if _is_missing(length) else float(length)

        if keyword == 'LINE':
            self._handle_line(name)
            return

        if keyword in self.config.drift_types:
            self.constructor.append_component(Drift(name=name, length=length))
            return

        if length == 0.0 and keyword in self.config.ignore_zero_length_types:
            self.logger.debug(f"Ignoring zero-length {keyword} '{name}'")
            self.skipped.append(name)
            return

        if not self.factory.is_registered(keyword):
            if length > 0.0:
                self.logger.warning(f"Unknown keyword '{keyword}' for '{name}'; built as a drift of {length} m")
                self.constructor.append_component(Drift(name=name, length=length))
            else:
                self.logger.warning(f"Unknown keyword '{keyword}' for zero-length '{name}'; ignored")
                self.skipped.append(name)
            return

        for component in self.factory.get_instance(row, brho):
            self.constructor.append_component(component)

    def _handle_line(self, name: str):
        """Open a frame for a LINE, or close it on the LINE's second appearance."""
        if self.config.flat_lattice:
            return
        if not self.config.honour_structure and not name.startswith(STRUCTURE_PREFIXES):
            return

        if self._open_lines and self._open_lines[-1] == name:
            self.constructor.close_frame()
            self._open_lines.pop()
            self.logger.debug(f"Closed LINE '{name}'")
        else:
            self.constructor.open_frame(LatticeFrame(name=name))
            self._open_lines.append(name)
            self.logger.debug(f"Opened LINE '{name}'")
