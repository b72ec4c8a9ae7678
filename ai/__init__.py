"""
ai package – Enemy decision making, encounter progression and session tooling.

Modules:
    ai_core            – Enemy brain (AIBrain): chase, engage, telegraphed attacks, boss abilities
    phase_system       – Five-phase progression state machine (PhaseConfig, PhaseSystem)
    stats              – Session statistics tracking and chaos-trend plot
    simulation_runner  – Headless autopilot sessions
"""
