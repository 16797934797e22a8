from __future__ import annotations

import random
import threading

from snake_server import constants
from snake_server.food import Food, Obstacle
from snake_server.grid import Grid, Point
from snake_server.world import World


def _place(world: World, name: str, body: list[Point], direction: Point = Point(0, 1)) -> int:
    player_id = world.add_player(name, "#fff")
    snake = world.snakes[player_id]
    snake.body = list(body)
    snake.direction = direction
    return player_id


def _add_food(world: World, position: Point, kind: str = "banana", points: int = 2) -> Food:
    food = Food(position=position, kind=kind, points=points)
    world.food[food.id] = food
    return food


def test_new_world_places_obstacles_and_food() -> None:
    world = World(grid=Grid(40, 30, rng=random.Random(2)))
    assert 0 < len(world.obstacles) <= constants.OBSTACLE_COUNT
    assert len(world.food) == constants.TARGET_FOOD_COUNT
    obstacle_cells = {o.position for o in world.obstacles.values()}
    assert not obstacle_cells & {f.position for f in world.food.values()}
    for cell in obstacle_cells:
        assert Grid.manhattan(cell, world.grid.center) > constants.OBSTACLE_SAFE_RADIUS


def test_add_player_defaults(world: World) -> None:
    player_id = world.add_player("ada", "#123456")
    snake = world.snakes[player_id]
    assert len(snake.body) == 1
    assert snake.direction == Point(0, 1)
    assert snake.score == 1
    assert snake.color == "#123456"


def test_player_ids_are_unique(world: World) -> None:
    ids = {world.add_player(f"p{i}", "#fff") for i in range(50)}
    assert len(ids) == 50


def test_remove_player_is_a_noop_when_absent(world: World) -> None:
    player_id = world.add_player("ada", "#fff")
    assert world.remove_player(player_id) is not None
    assert world.remove_player(player_id) is None
    assert world.snakes == {}


def test_set_direction_unknown_player(world: World) -> None:
    assert world.set_direction(999_999, Point(1, 0)) is False


def test_set_direction_reversal_sequence(world: World) -> None:
    player_id = _place(world, "ada", [Point(5, 5), Point(5, 4), Point(5, 3)])
    assert world.set_direction(player_id, Point(0, 1))
    assert not world.set_direction(player_id, Point(0, -1))
    assert world.snakes[player_id].direction == Point(0, 1)


def test_eating_food_grows_by_its_points(world: World) -> None:
    player_id = _place(world, "ada", [Point(5, 5)])
    food = _add_food(world, Point(5, 6), points=2)

    summary = world.update()

    snake = world.snakes[player_id]
    assert snake.body == [Point(5, 6), Point(5, 5), Point(5, 5)]
    assert snake.score == 3
    assert food.id not in world.food
    assert summary.eaten == [(player_id, food.id)]
    assert summary.changed


def test_moving_without_food_shifts_by_one(world: World) -> None:
    player_id = _place(world, "ada", [Point(5, 5), Point(5, 4), Point(5, 3)])
    world.update()
    snake = world.snakes[player_id]
    assert snake.body == [Point(5, 6), Point(5, 5), Point(5, 4)]
    assert snake.score == 1


def test_movement_wraps_around_edges(world: World) -> None:
    player_id = _place(world, "ada", [Point(39, 10)], direction=Point(1, 0))
    world.update()
    assert world.snakes[player_id].head == Point(0, 10)

    other = _place(world, "bob", [Point(3, 0)], direction=Point(0, -1))
    world.update()
    assert world.snakes[other].head == Point(3, 29)


def test_obstacle_collision_resets_and_penalises(world: World) -> None:
    player_id = _place(world, "ada", [Point(5, 5), Point(5, 4), Point(5, 3)])
    world.snakes[player_id].score = 10
    obstacle = Obstacle(position=Point(5, 6))
    world.obstacles[obstacle.id] = obstacle
    _add_food(world, Point(5, 6))

    summary = world.update()

    snake = world.snakes[player_id]
    assert len(snake.body) == 1
    assert snake.score == 7
    assert snake.head != obstacle.position
    assert summary.collisions == [player_id]
    assert summary.eaten == []


def test_food_is_replenished_when_low(world: World) -> None:
    summary = world.update()
    assert summary.food_spawned == constants.TARGET_FOOD_COUNT
    assert len(world.food) == constants.TARGET_FOOD_COUNT
    assert summary.changed


def test_idle_world_without_players_does_not_change() -> None:
    world = World(grid=Grid(40, 30, rng=random.Random(8)), obstacle_count=0)
    summary = world.update()
    assert summary.player_count == 0
    assert not summary.changed


def test_connected_player_keeps_broadcasts_going() -> None:
    world = World(grid=Grid(40, 30, rng=random.Random(8)), obstacle_count=0)
    world.add_player("ada", "#fff")
    summary = world.update()
    assert summary.player_count == 1
    assert summary.changed


def test_contested_food_goes_to_exactly_one_snake(world: World) -> None:
    first = _place(world, "ada", [Point(5, 5)], direction=Point(0, 1))
    second = _place(world, "bob", [Point(5, 7)], direction=Point(0, -1))
    food = _add_food(world, Point(5, 6), points=3)

    summary = world.update()

    assert len(summary.eaten) == 1
    winner_id, eaten_id = summary.eaten[0]
    assert eaten_id == food.id
    assert winner_id in (first, second)
    loser_id = second if winner_id == first else first
    assert world.snakes[winner_id].score == 4
    assert len(world.snakes[winner_id].body) == 4
    assert world.snakes[loser_id].score == 1
    assert len(world.snakes[loser_id].body) == 1


def test_snakes_pass_through_each_other_and_themselves(world: World) -> None:
    a = _place(world, "ada", [Point(5, 5)], direction=Point(1, 0))
    b = _place(world, "bob", [Point(6, 5), Point(7, 5)], direction=Point(0, 1))
    c = _place(world, "cy", [Point(1, 1), Point(1, 2), Point(2, 2), Point(2, 1)], direction=Point(1, 0))
    world.update()
    assert world.snakes[a].head == Point(6, 5)
    assert world.snakes[b].head == Point(6, 6)
    assert world.snakes[c].head == Point(2, 1)
    assert world.snakes[c].score == 1


def test_snapshot_lists_every_entity(world: World) -> None:
    _place(world, "ada", [Point(1, 1)])
    _add_food(world, Point(2, 2), kind="golden", points=10)
    obstacle = Obstacle(position=Point(30, 25), kind="tree")
    world.obstacles[obstacle.id] = obstacle

    snapshot = world.snapshot()

    assert [s["name"] for s in snapshot["snakes"]] == ["ada"]
    assert snapshot["food"][0]["kind"] == "golden"
    assert snapshot["food"][0]["points"] == 10
    assert snapshot["obstacles"] == [obstacle.to_dict()]


def test_stats(world: World) -> None:
    world.add_player("ada", "#fff")
    world.update()
    stats = world.stats()
    assert stats["players"] == 1
    assert stats["tick"] == 1
    assert stats["obstacles"] == 0


def test_commands_and_ticks_do_not_corrupt_state(world: World) -> None:
    ids = [world.add_player(f"p{i}", "#fff") for i in range(5)]
    directions = [Point(0, 1), Point(1, 0), Point(0, -1), Point(-1, 0)]

    def _steer() -> None:
        for step in range(300):
            world.set_direction(ids[step % len(ids)], directions[step % 4])

    def _tick() -> None:
        for _ in range(100):
            world.update()

    threads = [threading.Thread(target=_steer), threading.Thread(target=_tick)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert world.tick == 100
    for snake in world.snakes.values():
        assert snake.body
        for cell in snake.body:
            assert 0 <= cell.x < 40 and 0 <= cell.y < 30


def test_direction_change_steers_the_next_tick(world: World) -> None:
    player_id = _place(world, "ada", [Point(5, 5), Point(5, 4)])
    assert world.set_direction(player_id, Point(1, 0))
    world.update()
    assert world.snakes[player_id].head == Point(6, 5)
