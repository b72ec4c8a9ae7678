"""entities package – Actor base, Player, and Enemy."""

from .actor import Actor, AnimState, AnimationDescriptor, ANIMATIONS
from .player import Player, Intent, SpecialPhase
from .enemy import Enemy
