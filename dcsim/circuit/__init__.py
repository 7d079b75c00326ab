"""DC circuit analysis for the circuit builder canvas.

Provides node extraction, Norton-equivalent stamping, nodal analysis
by Gaussian elimination, Kirchhoff checks, and per-component power and
display values.
"""
