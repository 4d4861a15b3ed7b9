import logging
import textwrap
import uuid
from pathlib import Path

import pytest
import yaml

from regionstore.errors import DifferenceSaveError, StorageError
from regionstore.flags import BUILD, GREETING, PVP, State, UnknownFlag
from regionstore.geometry import Cuboid, Global, Polygonal, RegionGeometry
from regionstore.models import Domain, Region, RegionDifference
from regionstore.storage import FILE_HEADER, YamlFileOptions, YamlRegionFile
from regionstore.storage import yaml_file
from regionstore.vectors import BlockVector2, BlockVector3

OWNER_ID = uuid.UUID("3d1c4c53-2a9b-4f1e-9f7a-0c52e0b4ab01")


def write(path: Path, text: str) -> None:
    path.write_text(textwrap.dedent(text), encoding="utf-8")


def by_id(regions):
    return {r.id: r for r in regions}


def sample_regions():
    spawn = Region(
        "spawn",
        Cuboid(BlockVector3(-10, 0, -10), BlockVector3(10, 128, 10)),
        priority=10,
        flags={BUILD: State.DENY, GREETING: "Welcome!", UnknownFlag("custom"): [1, 2]},
        owners=Domain(players={"alice"}, unique_ids={OWNER_ID}),
        members=Domain(groups={"builders"}),
    )
    market = Region(
        "market",
        Polygonal([BlockVector2(0, 0), BlockVector2(20, 0), BlockVector2(20, 20)], 60, 90),
        priority=5,
        flags={PVP: State.DENY},
        parent="spawn",
    )
    world = Region("__global__", Global(), priority=0)
    return {spawn, market, world}


def test_round_trip_preserves_every_field(region_file, registry):
    regions = sample_regions()
    region_file.save_all(regions)

    loaded = region_file.load_all(registry)

    assert loaded == regions
    assert by_id(loaded)["market"].parent == "spawn"
    assert by_id(loaded)["spawn"].owners.unique_ids == {OWNER_ID}


def test_missing_file_loads_as_empty_set(tmp_path: Path, registry):
    store = YamlRegionFile("world", tmp_path / "nope" / "regions.yml")
    assert store.load_all(registry) == set()


def test_empty_file_and_missing_regions_section_load_empty(region_file, registry):
    write(region_file.path, "")
    assert region_file.load_all(registry) == set()
    write(region_file.path, "other: 1\n")
    assert region_file.load_all(registry) == set()


def test_entry_without_type_is_skipped_with_warning(region_file, registry, caplog):
    write(
        region_file.path,
        """
        regions:
            broken:
                priority: 1
            ok:
                type: global
                priority: 0
        """,
    )
    with caplog.at_level(logging.WARNING):
        loaded = region_file.load_all(registry)

    assert set(by_id(loaded)) == {"ok"}
    messages = [rec.getMessage() for rec in caplog.records]
    assert any("Undefined region type for region 'broken'" in m for m in messages)
    assert any("\tpriority: 1" in m for m in messages)


def test_unknown_type_is_skipped_with_warning(region_file, registry, caplog):
    write(
        region_file.path,
        """
        regions:
            ball:
                type: sphere
                priority: 1
            ok:
                type: global
                priority: 0
        """,
    )
    with caplog.at_level(logging.WARNING):
        loaded = region_file.load_all(registry)

    assert set(by_id(loaded)) == {"ok"}
    assert any("Unknown region type 'sphere'" in rec.getMessage() for rec in caplog.records)


def test_entry_missing_required_field_is_dropped(region_file, registry, caplog):
    write(
        region_file.path,
        """
        regions:
            nopriority:
                type: global
            nocorner:
                type: cuboid
                min: {x: 0, y: 0, z: 0}
                priority: 1
            ok:
                type: global
                priority: 3
        """,
    )
    with caplog.at_level(logging.WARNING):
        loaded = region_file.load_all(registry)

    assert set(by_id(loaded)) == {"ok"}
    messages = [rec.getMessage() for rec in caplog.records]
    assert any("'nopriority'" in m and "will disappear" in m for m in messages)
    assert any("'nocorner'" in m and "'max'" in m for m in messages)


def test_non_mapping_entry_is_skipped(region_file, registry, caplog):
    write(
        region_file.path,
        """
        regions:
            weird: [1, 2, 3]
            ok:
                type: global
                priority: 0
        """,
    )
    with caplog.at_level(logging.WARNING):
        loaded = region_file.load_all(registry)
    assert set(by_id(loaded)) == {"ok"}
    assert any("'weird'" in rec.getMessage() for rec in caplog.records)


def test_cuboid_corners_normalized_on_load(region_file, registry):
    write(
        region_file.path,
        """
        regions:
            box:
                type: cuboid
                min: {x: 5, y: 5, z: 5}
                max: {x: 1, y: 1, z: 1}
                priority: 0
        """,
    )
    (box,) = region_file.load_all(registry)
    assert box.geometry.min == BlockVector3(1, 1, 1)
    assert box.geometry.max == BlockVector3(5, 5, 5)


def test_malformed_uuid_drops_only_that_value(region_file, registry, caplog):
    write(
        region_file.path,
        f"""
        regions:
            home:
                type: global
                priority: 0
                owners:
                    players: [bob, '']
                    unique-ids: ['{OWNER_ID}', 'garbage']
        """,
    )
    with caplog.at_level(logging.WARNING):
        (home,) = region_file.load_all(registry)
    assert home.owners == Domain(players={"bob"}, unique_ids={OWNER_ID})
    assert home.members == Domain()
    assert any("garbage" in rec.getMessage() for rec in caplog.records)


def test_parents_only_point_into_loaded_set(region_file, registry):
    write(
        region_file.path,
        """
        regions:
            child:
                type: global
                priority: 0
                parent: dropped
            grandchild:
                type: global
                priority: 0
                parent: child
            dropped:
                priority: 0
            self:
                type: global
                priority: 0
                parent: self
        """,
    )
    loaded = by_id(region_file.load_all(registry))

    assert set(loaded) == {"child", "grandchild", "self"}
    assert loaded["grandchild"].parent == "child"
    assert loaded["child"].parent is None
    assert loaded["self"].parent is None
    for region in loaded.values():
        assert region.parent is None or region.parent in loaded


def test_invalid_yaml_raises_storage_error(region_file, registry):
    write(region_file.path, "regions: [unclosed\n")
    with pytest.raises(StorageError) as ei:
        region_file.load_all(registry)
    assert ei.value.path == region_file.path
    assert ei.value.__cause__ is not None


def test_non_mapping_root_raises_storage_error(region_file, registry):
    write(region_file.path, "- just\n- a list\n")
    with pytest.raises(StorageError):
        region_file.load_all(registry)


def test_unreadable_file_raises_storage_error(tmp_path: Path, registry):
    directory = tmp_path / "regions.yml"
    directory.mkdir()
    with pytest.raises(StorageError):
        YamlRegionFile("world", directory).load_all(registry)


def test_each_load_returns_fresh_instances(region_file, registry):
    region_file.save_all(sample_regions())
    first = by_id(region_file.load_all(registry))
    second = by_id(region_file.load_all(registry))
    assert first == second
    assert first["spawn"] is not second["spawn"]


def test_saved_file_has_header_and_expected_shape(region_file):
    region_file.save_all(sample_regions())

    text = region_file.path.read_text(encoding="utf-8")
    assert text.startswith(FILE_HEADER + "\n")
    data = yaml.safe_load(text)
    spawn = data["regions"]["spawn"]
    assert spawn["type"] == "cuboid"
    assert spawn["min"] == {"x": -10, "y": 0, "z": -10}
    assert spawn["flags"] == {"build": "deny", "custom": [1, 2], "greeting": "Welcome!"}
    assert spawn["owners"] == {"players": ["alice"], "unique-ids": [str(OWNER_ID)]}
    assert spawn["members"] == {"groups": ["builders"]}
    assert "parent" not in spawn
    market = data["regions"]["market"]
    assert market["type"] == "poly2d"
    assert market["points"][1] == {"x": 20, "z": 0}
    assert market["parent"] == "spawn"
    assert data["regions"]["__global__"] == {
        "type": "global",
        "priority": 0,
        "flags": {},
        "owners": {},
        "members": {},
    }


def test_saving_empty_set_keeps_header(region_file, registry):
    region_file.save_all(set())
    text = region_file.path.read_text(encoding="utf-8")
    assert text.startswith(FILE_HEADER)
    assert not yaml.safe_load(text)["regions"]
    assert region_file.load_all(registry) == set()


def test_save_replaces_previous_contents(region_file, registry):
    region_file.save_all(sample_regions())
    region_file.save_all({Region("only", Global(), priority=1)})
    assert set(by_id(region_file.load_all(registry))) == {"only"}
    assert not region_file.temp_path.exists()


def test_temp_file_sits_beside_target(tmp_path: Path):
    store = YamlRegionFile("world", tmp_path / "regions.yml")
    assert store.temp_path == tmp_path / "regions.yml.tmp"
    custom = YamlRegionFile("world", tmp_path / "regions.yml", options=YamlFileOptions(temp_suffix=".new"))
    assert custom.temp_path == tmp_path / "regions.yml.new"


def test_unknown_geometry_saved_with_class_name_and_skipped_on_load(region_file, registry, caplog):
    class Cylinder(RegionGeometry):
        pass

    region_file.save_all({Region("tube", Cylinder(), priority=0), Region("g", Global())})
    data = yaml.safe_load(region_file.path.read_text(encoding="utf-8"))
    assert data["regions"]["tube"]["type"].endswith("Cylinder")

    with caplog.at_level(logging.WARNING):
        loaded = region_file.load_all(registry)
    assert set(by_id(loaded)) == {"g"}


def test_falls_back_to_delete_then_rename(region_file, registry, monkeypatch):
    region_file.save_all({Region("old", Global())})

    def refuse(src, dst):
        raise PermissionError("target is busy")

    monkeypatch.setattr(yaml_file.os, "replace", refuse)
    region_file.save_all({Region("new", Global())})

    assert set(by_id(region_file.load_all(registry))) == {"new"}


def test_rename_failure_raises_with_absolute_path(region_file, monkeypatch):
    def refuse(src, dst):
        raise PermissionError("nope")

    monkeypatch.setattr(yaml_file.os, "replace", refuse)
    monkeypatch.setattr(yaml_file.os, "rename", refuse)

    with pytest.raises(StorageError) as ei:
        region_file.save_all({Region("x", Global())})
    assert str(region_file.path.absolute()) in str(ei.value)


@pytest.mark.parametrize(
    "difference",
    [
        RegionDifference(),
        RegionDifference(changed={Region("a", Global())}),
        RegionDifference(removed={Region("b", Global())}),
    ],
)
def test_save_changes_is_unsupported(region_file, difference):
    with pytest.raises(DifferenceSaveError):
        region_file.save_changes(difference)
    assert not region_file.path.exists()


def test_injected_logger_receives_entry_warnings(tmp_path: Path, registry, caplog):
    sink = logging.getLogger("test.region.sink")
    store = YamlRegionFile("world", tmp_path / "regions.yml", log=sink)
    write(store.path, "regions:\n    bad:\n        priority: 1\n")
    with caplog.at_level(logging.WARNING, logger="test.region.sink"):
        assert store.load_all(registry) == set()
    assert [rec.name for rec in caplog.records] == ["test.region.sink"]


@pytest.mark.parametrize(
    "bad_entry",
    [
        "type: global\n        priority: .inf",
        "type: global\n        priority: .nan",
        "type: cuboid\n        min: {x: 0, y: .inf, z: 0}\n        max: {x: 1, y: 1, z: 1}\n        priority: 0",
        "type: poly2d\n        min-y: -.inf\n        max-y: 10\n        priority: 0",
    ],
)
def test_non_finite_numbers_drop_only_their_entry(region_file, registry, caplog, bad_entry):
    region_file.path.write_text(
        "regions:\n"
        "    bad:\n"
        f"        {bad_entry}\n"
        "    ok:\n"
        "        type: global\n"
        "        priority: 2\n",
        encoding="utf-8",
    )
    with caplog.at_level(logging.WARNING):
        loaded = region_file.load_all(registry)

    assert set(by_id(loaded)) == {"ok"}
    assert any("'bad'" in rec.getMessage() and "will disappear" in rec.getMessage() for rec in caplog.records)


def test_non_finite_flag_values_are_dropped(region_file, registry):
    region_file.path.write_text(
        "regions:\n"
        "    bad:\n"
        "        type: global\n"
        "        priority: 0\n"
        "        flags: {heal-amount: .inf, price: .nan, greeting: hi}\n"
        "    ok:\n"
        "        type: global\n"
        "        priority: 1\n",
        encoding="utf-8",
    )
    loaded = by_id(region_file.load_all(registry))

    assert set(loaded) == {"bad", "ok"}
    assert loaded["bad"].flags == {GREETING: "hi"}


def test_header_keeps_original_wording(region_file):
    region_file.save_all(set())
    text = region_file.path.read_text(encoding="utf-8")
    assert "# hand, be aware that A SINGLE MISTYPED CHARACTER CAN CORRUPT THE FILE. If\n" in text
    assert "# the region store is unable to parse the file, your regions will FAIL TO LOAD and\n" in text
    assert "# REMEMBER TO KEEP PERIODICAL BACKUPS.\n" in text
