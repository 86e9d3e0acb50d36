"""
Test suite for the component type factory.
"""

import logging
import math

import pytest

from latticekit.components import Drift, Marker, Monitor, Quadrupole, SectorBend, Sextupole, Kicker, RFCavity, Solenoid
from latticekit.factory import TypeFactory, momentum_to_brho, normalize_record, multipole_keyword
from latticekit.factory.type_factory import check_component_type_specs, component_type_specs
from latticekit.model import ComponentTypeError

BRHO = 10.0


@pytest.fixture
def factory():
    return TypeFactory()


def build_one(factory, **record):
    components = factory.get_instance(record, BRHO)
    assert len(components) == 1
    return components[0]


class TestHelpers:
    """Test the module-level helpers."""

    def test_momentum_to_brho(self):
        assert momentum_to_brho(0.299792458) == pytest.approx(1.0)
        assert momentum_to_brho(18.0) == pytest.approx(60.04153)

    def test_normalize_record(self):
        record = normalize_record({'name': '"QF"', ' keyword ': 'QUADRUPOLE', 'l': 0.5})
        assert record == {'NAME': 'QF', 'KEYWORD': 'QUADRUPOLE', 'L': 0.5}

    def test_multipole_keyword(self):
        assert multipole_keyword({'K1L': 0.1, 'K2L': 0.0}) == 'QUADRUPOLE'
        assert multipole_keyword({'K1L': 0.0, 'K2L': 0.5}) == 'SEXTUPOLE'
        assert multipole_keyword({'K3L': 2.0}) == 'OCTUPOLE'
        assert multipole_keyword({'K1L': float('nan')}) == 'MARKER'
        assert multipole_keyword({}) == 'MARKER'

    def test_type_table_loaded(self):
        assert component_type_specs['QUADRUPOLE']['type'] == 'Quadrupole'
        assert component_type_specs['RBEND']['rectangular'] is True

    def test_scale_factors_are_numbers(self):
        factor = component_type_specs['RFCAVITY']['scale']['frequency']
        assert isinstance(factor, float)
        assert factor == 1e6

    def test_check_component_type_specs(self):
        specs = check_component_type_specs({'RFCAVITY': {'type': 'RFCavity', 'scale': {'frequency': '1.0e6'}}})
        assert specs['RFCAVITY']['scale']['frequency'] == 1e6
        with pytest.raises(ValueError, match="not a number"):
            check_component_type_specs({'RFCAVITY': {'type': 'RFCavity', 'scale': {'frequency': 'MHz'}}})
        with pytest.raises(ValueError, match="WIGGLER"):
            check_component_type_specs({'WIGGLER': {'type': 'Wiggler'}})
        with pytest.raises(ValueError, match="mapping"):
            check_component_type_specs(['DRIFT'])


class TestRegistry:
    """Test builder registration."""

    def test_builtin_keywords(self, factory):
        keywords = factory.get_registered_keywords()
        for keyword in ('DRIFT', 'MARKER', 'QUADRUPOLE', 'SBEND', 'RBEND', 'RFCAVITY', 'SOLENOID'):
            assert keyword in keywords
        assert keywords == sorted(keywords)

    def test_multipole_always_registered(self, factory):
        assert factory.is_registered('MULTIPOLE')
        assert factory.is_registered('multipole')
        assert 'MULTIPOLE' not in factory.get_registered_keywords()

    def test_empty_factory(self):
        factory = TypeFactory(use_builtin_types=False)
        assert factory.get_registered_keywords() == []
        assert not factory.is_registered('DRIFT')

    def test_register_custom_builder(self, factory):
        def build_wiggler(row, brho):
            half = row['L'] / 2.0
            return [Drift(name=f"{row['NAME']}_1", length=half), Drift(name=f"{row['NAME']}_2", length=half)]

        factory.register('wiggler', build_wiggler)
        assert factory.is_registered('WIGGLER')
        components = factory.get_instance({'NAME': 'W1', 'KEYWORD': 'WIGGLER', 'L': 3.0}, BRHO)
        assert [c.name for c in components] == ['W1_1', 'W1_2']
        assert sum(c.length for c in components) == pytest.approx(3.0)

    def test_builder_may_return_nothing(self, factory):
        factory.register('PLACEHOLDER', lambda row, brho: [])
        assert factory.get_instance({'NAME': 'P1', 'KEYWORD': 'PLACEHOLDER'}, BRHO) == []

    def test_builder_errors_are_wrapped(self, factory):
        def build_broken(row, brho):
            return [Drift(name=row['NAME'], length=row['L'] * 'm')]

        factory.register('BROKEN', build_broken)
        with pytest.raises(ComponentTypeError, match="B1"):
            factory.get_instance({'NAME': 'B1', 'KEYWORD': 'BROKEN', 'L': 1.5}, BRHO)

    def test_register_requires_callable(self, factory):
        with pytest.raises(TypeError):
            factory.register('BAD', "not a builder")

    def test_unregister(self, factory, caplog):
        factory.unregister('solenoid')
        assert not factory.is_registered('SOLENOID')
        with caplog.at_level(logging.WARNING):
            factory.unregister('SOLENOID')
        assert "not found" in caplog.text

    def test_unknown_keyword(self, factory):
        with pytest.raises(ComponentTypeError, match="WIGGLER"):
            factory.get_instance({'NAME': 'W1', 'KEYWORD': 'WIGGLER', 'L': 1.0}, BRHO)


class TestBuiltinBuilders:
    """Test the table-driven builders."""

    def test_drift_and_marker(self, factory):
        drift = build_one(factory, NAME='D1', KEYWORD='DRIFT', L=2.0)
        assert isinstance(drift, Drift)
        assert drift.length == 2.0
        marker = build_one(factory, NAME='IP6', KEYWORD='MARKER', L=0.0)
        assert isinstance(marker, Marker)

    def test_monitor_planes(self, factory):
        assert build_one(factory, NAME='BPM1', KEYWORD='MONITOR', L=0.0).plane == 'both'
        assert build_one(factory, NAME='BPM2', KEYWORD='HMONITOR', L=0.0).plane == 'horizontal'
        monitor = build_one(factory, NAME='BPM3', KEYWORD='VMONITOR', L=0.0)
        assert isinstance(monitor, Monitor)
        assert monitor.plane == 'vertical'

    def test_quadrupole_strength_per_length(self, factory):
        quad = build_one(factory, NAME='QF', KEYWORD='QUADRUPOLE', L=0.5, K1L=0.4)
        assert isinstance(quad, Quadrupole)
        assert quad.k1 == pytest.approx(0.8)
        assert quad.field_gradient == pytest.approx(8.0)

    def test_lower_case_columns(self, factory):
        quad = build_one(factory, name='QF', keyword='quadrupole', l=0.5, k1l=0.4)
        assert quad.name == 'QF'
        assert quad.k1 == pytest.approx(0.8)

    def test_thin_multipole(self, factory):
        quad = build_one(factory, NAME='MQ1', KEYWORD='MULTIPOLE', L=0.0, K1L=0.05, K2L=0.0)
        assert isinstance(quad, Quadrupole)
        assert quad.length == 0.0
        assert quad.k1 == pytest.approx(0.05)

        sext = build_one(factory, NAME='MS1', KEYWORD='MULTIPOLE', L=0.0, K1L=0.0, K2L=1.2)
        assert isinstance(sext, Sextupole)
        assert sext.k2 == pytest.approx(1.2)

        marker = build_one(factory, NAME='MM1', KEYWORD='MULTIPOLE', L=0.0, K1L=0.0, K2L=0.0, K3L=0.0)
        assert isinstance(marker, Marker)

    def test_sector_bend(self, factory):
        bend = build_one(factory, NAME='B1', KEYWORD='SBEND', L=2.0, ANGLE=0.02, E1=0.0, E2=0.0, K1L=0.0)
        assert isinstance(bend, SectorBend)
        assert bend.angle == pytest.approx(0.02)
        assert bend.field == pytest.approx(BRHO * 0.02 / 2.0)

    def test_rectangular_bend(self, factory):
        angle = 0.2
        bend = build_one(factory, NAME='RB1', KEYWORD='RBEND', L=2.0, ANGLE=angle, E1=0.0, E2=0.0)
        assert isinstance(bend, SectorBend)
        assert bend.length == pytest.approx(2.0 * (angle / 2) / math.sin(angle / 2))
        assert bend.length > 2.0
        assert bend.e1 == pytest.approx(angle / 2)
        assert bend.e2 == pytest.approx(angle / 2)

    def test_straight_rectangular_bend(self, factory):
        bend = build_one(factory, NAME='RB0', KEYWORD='RBEND', L=1.0, ANGLE=0.0)
        assert bend.length == 1.0
        assert bend.e1 == 0.0

    def test_kickers(self, factory):
        hkick = build_one(factory, NAME='HC1', KEYWORD='HKICKER', L=0.0, HKICK=1e-4)
        assert isinstance(hkick, Kicker)
        assert hkick.hkick == pytest.approx(1e-4)
        assert hkick.vkick == 0.0
        vkick = build_one(factory, NAME='VC1', KEYWORD='VKICKER', L=0.0, VKICK=-2e-4)
        assert vkick.vkick == pytest.approx(-2e-4)

    def test_rf_cavity_frequency_in_mhz(self, factory):
        cavity = build_one(factory, NAME='RF1', KEYWORD='RFCAVITY', L=1.0, VOLT=4.0, FREQ=591.0, LAG=0.5)
        assert isinstance(cavity, RFCavity)
        assert cavity.frequency == pytest.approx(591e6)
        assert cavity.voltage == 4.0

    def test_solenoid_field(self, factory):
        solenoid = build_one(factory, NAME='SOL1', KEYWORD='SOLENOID', L=4.0, KS=0.1)
        assert isinstance(solenoid, Solenoid)
        assert solenoid.field == pytest.approx(1.0)

    def test_missing_column_keeps_default(self, factory, caplog):
        with caplog.at_level(logging.WARNING):
            first = build_one(factory, NAME='RF1', KEYWORD='RFCAVITY', L=1.0, VOLT=4.0)
            build_one(factory, NAME='RF2', KEYWORD='RFCAVITY', L=1.0, VOLT=4.0)
        assert first.frequency == 1e8
        assert caplog.text.count("Column 'FREQ' not present") == 1

    def test_nan_column_treated_as_missing(self, factory):
        quad = build_one(factory, NAME='QF', KEYWORD='QUADRUPOLE', L=0.5, K1L=float('nan'))
        assert quad.k1 == 0.0

    def test_invalid_record(self, factory):
        with pytest.raises(ComponentTypeError, match="QX"):
            factory.get_instance({'NAME': 'QX', 'KEYWORD': 'QUADRUPOLE', 'L': -1.0}, BRHO)
        with pytest.raises(ComponentTypeError):
            factory.get_instance({'NAME': 'M1', 'KEYWORD': 'MARKER', 'L': 0.5}, BRHO)
        with pytest.raises(ComponentTypeError):
            factory.get_instance({'NAME': '', 'KEYWORD': 'DRIFT', 'L': 1.0}, BRHO)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
