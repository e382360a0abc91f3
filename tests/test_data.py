from dungeonrs.data import Layer, Level, Name, Project, Transform
from dungeonrs.world import World


def test_project_bundle_contents():
    bundle = Project.new("Roadside Inn")
    assert bundle[0] == Name("Roadside Inn")
    assert {type(c) for c in bundle} == {Name, Project, Transform}


def test_name_str():
    assert str(Name("Ground Floor")) == "Ground Floor"


def test_identity_is_origin():
    assert Transform.IDENTITY == Transform.from_xyz(0, 0, 0)
    assert Transform.IDENTITY.translation == (0.0, 0.0, 0.0)


def test_level_is_placed_at_origin():
    world = World()
    level = world.spawn(Level.new("Ground Floor"))
    assert world.get(level, Transform) == Transform.IDENTITY
    assert world.has(level, Level)


def test_layer_keeps_transform():
    world = World()
    layer = world.spawn(Layer.new("Walls", Transform.from_xyz(1, 2, 3)))
    assert world.get(layer, Transform).translation == (1.0, 2.0, 3.0)
    assert world.get(layer, Name) == Name("Walls")


def test_hierarchy_spawns():
    world = World()
    project = world.spawn(
        Project.new("Roadside Inn"),
        children=[(Level.new("Ground Floor"), [Layer.new("Walls", Transform.IDENTITY)])],
    )
    assert [e for e, _ in world.query(Project)] == [project]
    (level,) = world.children(project)
    assert str(world.get(level, Name)) == "Ground Floor"
    (layer,) = world.children(level)
    assert world.has(layer, Layer)
    assert str(world.get(layer, Name)) == "Walls"