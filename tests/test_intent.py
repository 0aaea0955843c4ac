"""Tests for intent parsing and the intent processor."""
from __future__ import annotations

import json

import pytest

from survival_server.config import settings
from survival_server.models.intent import Intent, parse_intent
from survival_server.models.world import World
from survival_server.services.intent_service import IntentProcessor, railgun_damage


def _intent(**data) -> Intent:
    return parse_intent(data)


def test_missing_fields_default_to_inert() -> None:
    intent = parse_intent({"keys": {"w": True}})
    assert intent.keys.w is True
    assert intent.joystick.x == 0 and intent.joystick.y == 0
    assert intent.mouse.down is False
    assert intent.mouse.rightDown is False
    assert not intent.mouse.has_aim


@pytest.mark.parametrize("payload", ["garbage", None, [1, 2], {"keys": {"w": [1, 2]}}])
def test_malformed_payload_becomes_inert_intent(payload) -> None:
    assert parse_intent(payload) == Intent()


def test_movement_accumulates_keys_and_joystick(world: World, processor: IntentProcessor) -> None:
    player = world.add_player("p1")
    processor.apply(world, "p1", _intent(keys={"w": True, "d": True}), now=0)
    assert (player.x, player.y) == (405, 295)

    processor.apply(world, "p1", _intent(joystick={"x": 1, "y": 0.5}), now=0)
    assert (player.x, player.y) == pytest.approx((410, 297.5))


def test_movement_is_clamped_inside_margin(world: World, processor: IntentProcessor) -> None:
    player = world.add_player("p1")
    player.x, player.y = 22, 578
    processor.apply(world, "p1", _intent(keys={"a": True, "s": True}), now=0)
    assert (player.x, player.y) == (settings.WORLD_MARGIN, settings.WORLD_HEIGHT - settings.WORLD_MARGIN)


def test_dead_or_unknown_players_are_ignored(world: World, processor: IntentProcessor) -> None:
    player = world.add_player("p1")
    player.health = 0
    processor.apply(world, "p1", _intent(keys={"d": True}, mouse={"x": 0, "y": 0, "down": True}), now=1000)
    processor.apply(world, "ghost", _intent(keys={"d": True}), now=1000)
    assert player.x == settings.PLAYER_START_X
    assert not world.bullets


def test_primary_fire_aims_normalised_bullet(world: World, processor: IntentProcessor) -> None:
    world.add_player("p1")
    processor.apply(world, "p1", _intent(mouse={"x": 430, "y": 340, "down": True}), now=1000)
    (bullet,) = world.bullets.values()
    assert (bullet.x, bullet.y) == (400, 300)
    assert (bullet.dx, bullet.dy) == pytest.approx((4.8, 6.4))
    assert bullet.life == settings.BULLET_LIFE
    assert bullet.ownerId == "p1"


def test_primary_fire_respects_server_side_cooldown(world: World, processor: IntentProcessor) -> None:
    world.add_player("p1")
    fire = _intent(mouse={"x": 500, "y": 300, "down": True}, lastShot=0)
    processor.apply(world, "p1", fire, now=1000)
    processor.apply(world, "p1", fire, now=1100)
    assert len(world.bullets) == 1
    processor.apply(world, "p1", fire, now=1250)
    assert len(world.bullets) == 2


def test_client_cooldown_policy_trusts_echoed_timestamp(world: World) -> None:
    processor = IntentProcessor(cooldown_policy="client")
    world.add_player("p1")
    fire = _intent(mouse={"x": 500, "y": 300, "down": True}, lastShot=0)
    for now in (1000, 1010, 1020):
        processor.apply(world, "p1", fire, now=now)
    assert len(world.bullets) == 3


def test_zero_length_aim_fires_nothing(world: World, processor: IntentProcessor) -> None:
    player = world.add_player("p1")
    player.railgunCharge = 0.5
    processor.apply(world, "p1", _intent(mouse={"x": 400, "y": 300, "down": True}), now=1000)
    assert not world.bullets
    assert player.railgunCharge == 0.5


def test_railgun_charges_while_held(world: World, processor: IntentProcessor) -> None:
    player = world.add_player("p1")
    hold = _intent(mouse={"x": 500, "y": 300, "rightDown": True})
    for _ in range(3):
        processor.apply(world, "p1", hold, now=0)
    assert player.railgunCharge == pytest.approx(3 * settings.RAILGUN_CHARGE_PER_TICK)

    player.railgunCharge = 0.999
    processor.apply(world, "p1", hold, now=0)
    assert player.railgunCharge == 1.0
    assert not world.bullets


def test_full_charge_release_deals_maximum_damage(world: World, processor: IntentProcessor) -> None:
    player = world.add_player("p1")
    player.railgunCharge = 1.0
    processor.apply(world, "p1", _intent(mouse={"x": 500, "y": 300}), now=0)
    (beam,) = world.bullets.values()
    assert beam.type == "railgun"
    assert beam.damage == 300
    assert (beam.x, beam.y) == (400, 300)
    assert (beam.endX, beam.endY) == pytest.approx((1400, 300))
    assert beam.life == settings.RAILGUN_LIFE
    assert beam.hitEnemies == set()
    assert player.railgunCharge == 0


def test_tiny_charge_release_deals_minimum_damage(world: World, processor: IntentProcessor) -> None:
    player = world.add_player("p1")
    player.railgunCharge = 0.03
    processor.apply(world, "p1", _intent(mouse={"x": 400, "y": 100}), now=0)
    (beam,) = world.bullets.values()
    assert beam.damage == 5
    assert (beam.endX, beam.endY) == pytest.approx((400, -700))


def test_railgun_damage_curve() -> None:
    assert railgun_damage(0.05) == 5
    assert railgun_damage(0.525) == pytest.approx(152.5)
    assert railgun_damage(1.0) == 300


def test_release_without_aim_keeps_charge(world: World, processor: IntentProcessor) -> None:
    player = world.add_player("p1")
    player.railgunCharge = 0.4
    processor.apply(world, "p1", Intent(), now=0)
    assert player.railgunCharge == 0.4
    assert not world.bullets


def test_unknown_cooldown_policy_is_rejected() -> None:
    with pytest.raises(ValueError):
        IntentProcessor(cooldown_policy="honour-system")


@pytest.mark.parametrize("bad", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_numbers_become_inert_intent(bad: float) -> None:
    assert parse_intent({"mouse": {"x": bad, "y": 300, "down": True}}) == Intent()
    assert parse_intent({"joystick": {"x": bad}}) == Intent()
    assert parse_intent({"lastShot": bad}) == Intent()


def test_infinite_aim_release_keeps_charge_and_fires_nothing(
    world: World, processor: IntentProcessor
) -> None:
    player = world.add_player("p1")
    player.railgunCharge = 0.5
    release = parse_intent(json.loads('{"mouse": {"x": Infinity, "y": 300, "rightDown": false}}'))
    processor.apply(world, "p1", release, now=1000)

    assert not world.bullets
    assert player.railgunCharge == 0.5
    json.dumps(world.snapshot(), allow_nan=False)
