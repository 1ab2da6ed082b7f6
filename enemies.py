# -*- coding: utf-8 -*-
########################
# enemies.py
########################
# Purpose:
# - Beat-driven enemy behavior: static, random walk, or attack when adjacent to the player.
#
# Design notes:
# - No Qt usage. Enemies share the beat signal with the player but none of the timing judgement.
# - Enemies only avoid walls, the player's tile and each other. Hazard tiles do not affect them.
# - Randomness comes from an injected random.Random so sessions are reproducible with a seed.
# - Any landed attack defeats an enemy.
#
########################
# Interfaces:
# Public enums:
# - class EnemyKind(enum.Enum): STATIC | WANDERER | AGGRESSIVE
#
# Public dataclasses:
# - Enemy(actor_id: str, position: GridPos, kind: EnemyKind, is_defeated: bool)
#
# Public classes:
# - class EnemyController
#   - __init__(motion: ActorMotionController, events: GameEventQueue, rng: random.Random, *, attack_damage: int = 1)
#   - on_beat(enemies: Sequence[Enemy], player: Actor) -> None
#   - hit_at(enemies: Sequence[Enemy], position: GridPos, damage: int) -> list[Enemy]
#
# Inputs:
# - BeatFired from the session loop, the player's Actor, attack targets from resolved actions.
#
# Outputs:
# - MoveCommitted, AttackLanded and EnemyDefeated events; player damage through ActorMotionController.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
import logging
import random
from typing import List, Sequence

from actor_motion import Actor, ActorMotionController
from game_events import AttackLanded, EnemyDefeated, GameEventQueue, MoveCommitted
from gameplay_models import CARDINAL_DIRECTIONS, GridPos

_LOGGER = logging.getLogger(__name__)

RANDOM_WALK_ATTEMPTS = 4


class EnemyKind(enum.Enum):
    STATIC = "static"
    WANDERER = "wanderer"
    AGGRESSIVE = "aggressive"


@dataclass
class Enemy:
    actor_id: str
    position: GridPos
    kind: EnemyKind
    is_defeated: bool = False


class EnemyController:
    def __init__(
        self,
        motion: ActorMotionController,
        events: GameEventQueue,
        rng: random.Random,
        *,
        attack_damage: int = 1,
    ) -> None:
        self._motion = motion
        self._events = events
        self._rng = rng
        self._attack_damage = int(attack_damage)

    def on_beat(self, enemies: Sequence[Enemy], player: Actor) -> None:
        for enemy in enemies:
            if enemy.is_defeated or enemy.kind == EnemyKind.STATIC:
                continue

            if enemy.kind == EnemyKind.AGGRESSIVE and enemy.position.manhattan_distance(player.position) == 1:
                self._events.publish(
                    AttackLanded(actor_id=enemy.actor_id, position=player.position, damage=self._attack_damage)
                )
                self._motion.apply_damage(player, self._attack_damage)
            else:
                self._move_randomly(enemy, enemies, player)

            if enemy.position == player.position:
                self._motion.apply_damage(player, self._attack_damage)

    def hit_at(self, enemies: Sequence[Enemy], position: GridPos, damage: int) -> List[Enemy]:
        defeated: List[Enemy] = []
        if int(damage) <= 0:
            return defeated
        for enemy in enemies:
            if enemy.is_defeated or enemy.position != position:
                continue
            enemy.is_defeated = True
            _LOGGER.info("%s defeated at (%d, %d)", enemy.actor_id, position.x, position.y)
            self._events.publish(EnemyDefeated(actor_id=enemy.actor_id))
            defeated.append(enemy)
        return defeated

    def _move_randomly(self, enemy: Enemy, enemies: Sequence[Enemy], player: Actor) -> None:
        grid = self._motion.grid
        for _attempt in range(RANDOM_WALK_ATTEMPTS):
            direction = self._rng.choice(CARDINAL_DIRECTIONS)
            target = grid.target_position(enemy.position, direction)
            if target is None or not grid.is_walkable(target.x, target.y):
                continue
            if target == player.position:
                continue
            if any(other is not enemy and not other.is_defeated and other.position == target for other in enemies):
                continue

            from_pos = enemy.position
            enemy.position = target
            self._events.publish(MoveCommitted(actor_id=enemy.actor_id, from_pos=from_pos, to_pos=target))
            return
