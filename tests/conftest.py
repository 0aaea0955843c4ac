"""Shared fixtures for the simulation tests."""
from __future__ import annotations

import random

import pytest

from survival_server.models.world import World
from survival_server.services.combat_service import CombatResolver
from survival_server.services.game_service import GameService
from survival_server.services.intent_service import IntentProcessor
from survival_server.services.spawner import Spawner


@pytest.fixture()
def world() -> World:
    return World(now=0.0)


@pytest.fixture()
def resolver() -> CombatResolver:
    return CombatResolver()


@pytest.fixture()
def processor() -> IntentProcessor:
    return IntentProcessor()


@pytest.fixture()
def game() -> GameService:
    return GameService(spawner=Spawner(random.Random(42)), clock=lambda: 0.0)
