"""Tests for the Java declaration extractor."""

from __future__ import annotations

from pathlib import Path

from porttrack.extractors import JavaExtractor
from porttrack.graph import aggregate, classify
from porttrack.models import TypeKind

_BARREL = b"""
package net.minecraft.block;

import net.minecraft.util.ActionResult;

public class BarrelBlock extends BlockWithEntity implements Waterloggable, InventoryProvider {
    public BarrelBlock(Settings settings) {
        super(settings);
    }

    @Override
    protected ActionResult onUse(BlockState state, World world) {
        return ActionResult.SUCCESS;
    }

    @Override
    public void randomTick(BlockState state) {
    }

    @Override
    protected ActionResult onUse(BlockState state) {
        return ActionResult.PASS;
    }
}
"""

_BASE = b"""
package net.minecraft.block;

public abstract class BlockWithEntity extends Block {
    protected void onStateReplaced(BlockState state) {
    }
}
"""


def test_extracts_methods_superclass_and_interfaces() -> None:
    graph = aggregate(JavaExtractor().extract(_BARREL))

    barrel = graph.get("BarrelBlock")
    assert barrel is not None
    assert barrel.methods == ("onUse", "randomTick")
    assert barrel.supertype == "BlockWithEntity"
    assert set(barrel.interfaces) == {"Waterloggable", "InventoryProvider"}


def test_each_method_yields_its_own_match() -> None:
    matches = list(JavaExtractor().extract(_BASE))

    assert [(match.type_name, match.method_name, match.supertype) for match in matches] == [
        ("BlockWithEntity", "onStateReplaced", "Block")
    ]


def test_class_without_methods_produces_no_matches() -> None:
    source = b"public class Marker extends Base { private int count; }"

    assert list(JavaExtractor().extract(source)) == []


def test_generic_and_qualified_supertypes_use_simple_names() -> None:
    source = b"""
public class PigEntity extends AnimalEntity<PigEntity> implements java.util.function.Supplier<String> {
    public String get() { return "oink"; }
}
"""

    graph = aggregate(JavaExtractor().extract(source))

    pig = graph.get("PigEntity")
    assert pig is not None
    assert pig.supertype == "AnimalEntity"
    assert pig.interfaces == ("Supplier",)


def test_nested_classes_are_separate_declarations() -> None:
    source = b"""
public class Outer {
    public void outerMethod() {}

    public static class Inner extends Outer {
        public void innerMethod() {}
    }
}
"""

    graph = aggregate(JavaExtractor().extract(source))

    assert graph.names() == ["Inner", "Outer"]
    assert graph.get("Outer").methods == ("outerMethod",)  # type: ignore[union-attr]
    assert graph.get("Inner").methods == ("innerMethod",)  # type: ignore[union-attr]
    assert classify(graph) == {"Inner": TypeKind.CONCRETE, "Outer": TypeKind.ABSTRACT}


def test_supports_only_java_sources() -> None:
    extractor = JavaExtractor()

    assert extractor.supports(Path("BarrelBlock.java"))
    assert not extractor.supports(Path("barrel.rs"))


def test_constructor_only_subclass_leaves_supertype_concrete() -> None:
    source = b"""
class Base { void run() {} }
class Child extends Base { Child() {} }
"""

    graph = aggregate(JavaExtractor().extract(source))

    assert graph.names() == ["Base"]
    assert classify(graph) == {"Base": TypeKind.CONCRETE}
