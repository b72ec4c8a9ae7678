"""systems package – Events, projectiles, abilities, combat, and the encounter director."""

from .events import EventKind, GameEvent, EventQueue, Theme, select_theme
from .projectile_system import ProjectileSystem, Projectile
from .ability_system import Ability, AbilityPhase, ChaosPulse, BossBlast, ProjectileVolley
from .combat_system import CombatSystem, CombatResult
