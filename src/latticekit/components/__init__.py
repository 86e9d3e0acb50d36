"""
latticekit components - leaf entities placed in the frame tree
"""

from latticekit.components.component import AcceleratorComponent
from latticekit.components.drift import Drift
from latticekit.components.marker import Marker
from latticekit.components.monitor import Monitor
from latticekit.components.quadrupole import Quadrupole
from latticekit.components.bend import SectorBend
from latticekit.components.sextupole import Sextupole
from latticekit.components.octupole import Octupole
from latticekit.components.kicker import Kicker
from latticekit.components.rfcavity import RFCavity
from latticekit.components.solenoid import Solenoid

__all__ = [
    'AcceleratorComponent',
    'Drift',
    'Marker',
    'Monitor',
    'Quadrupole',
    'SectorBend',
    'Sextupole',
    'Octupole',
    'Kicker',
    'RFCavity',
    'Solenoid',
]
