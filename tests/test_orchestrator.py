"""End-to-end tests for porttrack.orchestrator."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from porttrack.orchestrator import Orchestrator
from porttrack.registry import RegistryError
from tests._fixtures.source_builder import SourceTreeBuilder

_CONFIG = """
reference:
  grammar: java
  sources:
    - path: yarn/block
      category: block
    - path: yarn/entity
      category: auto
target:
  grammar: rust
  sources:
    - path: steel/blocks
      category: block
    - path: steel/entity
      category: entity
registry:
  classes: steel/classes.json
  families:
    block:
      category: block
      entries: blocks
      generated: steel/generated/blocks.rs
      pattern: 'vanilla_blocks\\s*::\\s*(?P<id>\\w+)\\s*,\\s*Box\\s*::\\s*new\\s*\\(\\s*(?P<type>\\w+)\\s*::'
      normalize: lower
output:
  directory: out
"""


def _write_project(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(
        {
            ".porttrack.yml": _CONFIG,
            "yarn/block/BarrelBlock.java": """
                package net.minecraft.block;

                public class BarrelBlock extends BlockWithEntity {
                    protected ActionResult onUse(BlockState state) { return null; }
                    public void randomTick(BlockState state) {}
                    public String toString() { return "barrel"; }
                }
            """,
            "yarn/block/BlockWithEntity.java": """
                package net.minecraft.block;

                public abstract class BlockWithEntity extends Block {
                    protected ActionResult onUse(BlockState state) { return null; }
                }
            """,
            "yarn/block/HopperBlock.java": """
                package net.minecraft.block;

                public class HopperBlock extends BlockWithEntity {
                    public void scheduledTick(BlockState state) {}
                }
            """,
            "yarn/entity/ZombieEntity.java": """
                package net.minecraft.entity;

                public class ZombieEntity extends HostileEntity {
                    public void tick() {}
                    public boolean damage(DamageSource source, float amount) { return true; }
                }
            """,
            "yarn/entity/ai/MeleeAttackGoal.java": """
                package net.minecraft.entity.ai.goal;

                public class MeleeAttackGoal extends Goal {
                    public boolean canStart() { return true; }
                    public void tick() {}
                }
            """,
            "steel/blocks/barrel.rs": """
                impl BlockBehaviour for BarrelBehavior {
                    fn use_without_item(&self) {}
                }
            """,
            "steel/entity/zombie.rs": """
                impl ZombieEntity {
                    pub fn tick(&mut self) {}
                }
            """,
            "steel/generated/blocks.rs": """
                pub fn register(registry: &mut Registry) {
                    registry.set(vanilla_blocks :: BARREL , Box :: new (BarrelBehavior :: new (vanilla_blocks :: BARREL)));
                }
            """,
        }
    )
    source_tree.write_json(
        "steel/classes.json",
        {
            "blocks": [
                {"name": "barrel", "class": "BarrelBlock"},
                {"name": "hopper", "class": "HopperBlock"},
            ],
            "items": [],
        },
    )


def test_run_scores_registry_and_name_matched_classes(source_tree: SourceTreeBuilder) -> None:
    _write_project(source_tree)

    outcome = Orchestrator().run(source_tree.path())

    records = {record.class_name: record for record in outcome.result.classes}
    assert list(records) == ["BarrelBlock", "HopperBlock", "MeleeAttackGoal", "ZombieEntity"]

    barrel = records["BarrelBlock"]
    assert barrel.class_type == "block"
    assert [(m.method_name, m.status.value) for m in barrel.methods] == [
        ("onUse", "Implemented"),
        ("randomTick", "NotImplemented"),
    ]
    assert barrel.percentage_implemented == 50.0

    assert records["HopperBlock"].percentage_implemented == 0.0
    assert records["MeleeAttackGoal"].class_type == "ai_goal"
    assert records["MeleeAttackGoal"].percentage_implemented == 0.0

    zombie = records["ZombieEntity"]
    assert zombie.class_type == "entity"
    assert [(m.method_name, m.status.value) for m in zombie.methods] == [
        ("tick", "Implemented"),
        ("damage", "NotImplemented"),
    ]

    summaries = {summary.category: summary for summary in outcome.summaries}
    assert list(summaries) == ["block", "entity", "ai_goal"]
    assert (summaries["block"].implemented, summaries["block"].tracked) == (1, 3)


def test_run_writes_raw_records_and_analysis(source_tree: SourceTreeBuilder) -> None:
    _write_project(source_tree)

    outcome = Orchestrator().run(source_tree.path())

    out = source_tree.path("out")
    assert sorted(path.name for path in outcome.written) == ["analysis.json", "reference.json", "target.json"]
    reference = json.loads((out / "reference.json").read_text(encoding="utf-8"))
    by_name = {entry["class_name"]: entry for entry in reference}
    assert by_name["BlockWithEntity"]["is_real_class"] is False
    assert by_name["BarrelBlock"]["is_real_class"] is True
    assert by_name["BarrelBlock"]["methods"] == ["onUse", "randomTick", "toString"]
    target = json.loads((out / "target.json").read_text(encoding="utf-8"))
    assert {entry["class_name"] for entry in target} == {"BarrelBehavior", "ZombieEntity"}
    analysis = json.loads((out / "analysis.json").read_text(encoding="utf-8"))
    assert [entry["class_name"] for entry in analysis["classes"]] == [
        "BarrelBlock",
        "HopperBlock",
        "MeleeAttackGoal",
        "ZombieEntity",
    ]


def test_repeated_runs_produce_identical_reports(source_tree: SourceTreeBuilder, tmp_path: Path) -> None:
    _write_project(source_tree)
    orchestrator = Orchestrator()

    orchestrator.run(source_tree.path(), output_dir=tmp_path / "first")
    orchestrator.run(source_tree.path(), output_dir=tmp_path / "second")

    for name in ("reference.json", "target.json", "analysis.json"):
        assert (tmp_path / "first" / name).read_bytes() == (tmp_path / "second" / name).read_bytes()


def test_no_write_leaves_output_directory_untouched(source_tree: SourceTreeBuilder) -> None:
    _write_project(source_tree)

    outcome = Orchestrator().run(source_tree.path(), write=False)

    assert outcome.written == []
    assert not source_tree.path("out").exists()


def test_missing_registry_table_aborts_before_writing(source_tree: SourceTreeBuilder) -> None:
    _write_project(source_tree)
    source_tree.path("steel/classes.json").unlink()

    with pytest.raises(RegistryError):
        Orchestrator().run(source_tree.path())

    assert not source_tree.path("out").exists()


def test_missing_source_roots_are_skipped(source_tree: SourceTreeBuilder) -> None:
    source_tree.write(
        {
            ".porttrack.yml": """
                reference:
                  sources:
                    - path: nowhere
                      category: entity
                registry:
                  families: {}
            """,
        }
    )

    outcome = Orchestrator().run(source_tree.path(), write=False)

    assert outcome.reference == []
    assert outcome.result.classes == []


def test_explicit_config_file_keeps_project_path_as_root(source_tree: SourceTreeBuilder, tmp_path: Path) -> None:
    _write_project(source_tree)
    config_file = tmp_path / "elsewhere" / "porttrack.yml"
    config_file.parent.mkdir()
    source_tree.path(".porttrack.yml").rename(config_file)

    config = Orchestrator().load_config(source_tree.path(), config_file)

    assert config.root == source_tree.path().resolve()
    assert config.registry.classes == source_tree.path().resolve() / "steel/classes.json"
