"""
Demo: Building a FODO ring model

This script builds the same two-cell FODO ring twice: once by driving the
model constructor directly, once from optics table rows through the table
driver. Both models give the same flat lattice.
"""

# === Setup ===
from latticekit.model import AcceleratorModelConstructor, LatticeFrame, ComponentFrame
from latticekit.components import Quadrupole, Drift, Marker
from latticekit.factory import DriverConfiguration, OpticsTableModelBuilder
import yaml

qf = Quadrupole(name="QF", length=0.5, k1=0.8)
qd = Quadrupole(name="QD", length=0.5, k1=-0.8)

# === Incremental construction ===
constructor = AcceleratorModelConstructor()
constructor.append_component(Marker(name="START"))
for cell in ("CELL1", "CELL2"):
    constructor.open_frame(LatticeFrame(name=cell))
    constructor.append_component(qf)     # the same quadrupole instance in every cell
    constructor.append_drift(2.0)
    constructor.append_component(qd)
    constructor.append_drift(2.0)
    constructor.close_frame()

# A pre-built matching section spliced in as one sub-tree
matching = LatticeFrame(name="MATCH")
matching.append_frame(ComponentFrame(component=Drift(name="DM1", length=1.0)))
matching.append_frame(ComponentFrame(component=Quadrupole(name="QM1", length=0.3, k1=0.4)))
constructor.append_frame(matching)

print("\n" + "="*80)
print("MODEL STATISTICS")
print("="*80)
constructor.report_statistics()

model = constructor.finish()
print(model.to_dataframe())

# === Construction from optics table rows ===
rows = [{'NAME': 'START', 'KEYWORD': 'MARKER', 'L': 0.0}]
for cell in ("CELL1", "CELL2"):
    rows += [
        {'NAME': cell, 'KEYWORD': 'LINE', 'L': 0.0},
        {'NAME': 'QF', 'KEYWORD': 'QUADRUPOLE', 'L': 0.5, 'K1L': 0.4},
        {'NAME': 'D1', 'KEYWORD': 'DRIFT', 'L': 2.0},
        {'NAME': 'QD', 'KEYWORD': 'QUADRUPOLE', 'L': 0.5, 'K1L': -0.4},
        {'NAME': 'D2', 'KEYWORD': 'DRIFT', 'L': 2.0},
        {'NAME': cell, 'KEYWORD': 'LINE', 'L': 0.0},
    ]

builder = OpticsTableModelBuilder(DriverConfiguration(momentum=18.0, honour_structure=True))
table_model = builder.construct_model(rows)

print("\n" + "="*80)
print("MODEL FROM OPTICS TABLE")
print("="*80)
print(table_model.to_dataframe())
print(f"Quadrupole gradient at 18 GeV/c: {table_model.get_components('Quadrupole')[0].field_gradient:.3f} T/m")

print("\n" + "="*80)
print("FRAME TREE")
print("="*80)
print(yaml.safe_dump(table_model.to_yaml_dict()['frames'], sort_keys=False))

# === Two tables appended into one beamline ===
extraction = [
    {'NAME': 'M_EXTRACTION', 'KEYWORD': 'LINE', 'L': 0.0},
    {'NAME': 'DX', 'KEYWORD': 'DRIFT', 'L': 3.0},
    {'NAME': 'QX', 'KEYWORD': 'QUADRUPOLE', 'L': 0.5, 'K1L': 0.2},
    {'NAME': 'M_EXTRACTION', 'KEYWORD': 'LINE', 'L': 0.0},
]
builder.start_new_model()
builder.append_model(rows)
builder.append_model(extraction, momentum=17.5)
joined_model = builder.get_model()

print("\n" + "="*80)
print("RING AND EXTRACTION LINE")
print("="*80)
print(joined_model.to_dataframe())
