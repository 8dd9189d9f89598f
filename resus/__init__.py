"""
resus-clock: pediatric cardiac-arrest protocol timer and training simulator.

Subpackages:
- clock: 1-second tick source driving all elapsed-time state
- protocol: live resuscitation state machine, dosing, event log, debrief
- simulation: scenarios, stochastic rhythm model, scoring and hints
- delivery: Typer/Rich terminal front end
"""

__version__ = "1.0.0"
