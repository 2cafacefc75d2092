"""Per-category output catalog: field kinds, default merge strategies, base outputs."""

from __future__ import annotations

from typing import Any

from permitlogic.model.policy import Category, FieldKind, MergeStrategy

OUTPUT_FIELD_KINDS: dict[Category, dict[str, FieldKind]] = {
    Category.ESCORT: {
        "front_escorts": FieldKind.NUMBER,
        "rear_escorts": FieldKind.NUMBER,
        "height_pole": FieldKind.BOOLEAN,
        "front_distance_min_ft": FieldKind.NUMBER,
        "front_distance_max_ft": FieldKind.NUMBER,
        "rear_distance_min_ft": FieldKind.NUMBER,
        "rear_distance_max_ft": FieldKind.NUMBER,
        "notes": FieldKind.LIST,
    },
    Category.PERMIT: {
        "types": FieldKind.LIST,
        "estimated_cost": FieldKind.NUMBER,
        "processing_days": FieldKind.NUMBER,
    },
    Category.SPEED: {
        "max_mph": FieldKind.NUMBER,
        "min_mph": FieldKind.NUMBER,
    },
    Category.HOURS: {
        "windows": FieldKind.LIST,
        "blackout_periods": FieldKind.LIST,
        "exclude_weekends": FieldKind.BOOLEAN,
        "exclude_holidays": FieldKind.BOOLEAN,
    },
    Category.ROUTE: {
        "restrictions": FieldKind.LIST,
    },
    Category.UTILITY: {
        "notice_hours": FieldKind.NUMBER,
        "types": FieldKind.LIST,
    },
    Category.DIMENSION: {
        "max_width_ft": FieldKind.NUMBER,
        "max_height_ft": FieldKind.NUMBER,
        "max_length_ft": FieldKind.NUMBER,
        "max_weight_lbs": FieldKind.NUMBER,
    },
}

DEFAULT_MERGE_STRATEGIES: dict[Category, dict[str, MergeStrategy]] = {
    Category.ESCORT: {
        "front_escorts": MergeStrategy.MAX,
        "rear_escorts": MergeStrategy.MAX,
        "height_pole": MergeStrategy.UNION,
        "front_distance_min_ft": MergeStrategy.MIN,
        "front_distance_max_ft": MergeStrategy.MAX,
        "rear_distance_min_ft": MergeStrategy.MIN,
        "rear_distance_max_ft": MergeStrategy.MAX,
        "notes": MergeStrategy.UNION,
    },
    Category.PERMIT: {
        "types": MergeStrategy.UNION,
        "estimated_cost": MergeStrategy.MAX,
        "processing_days": MergeStrategy.MAX,
    },
    Category.SPEED: {
        "max_mph": MergeStrategy.MIN,
        "min_mph": MergeStrategy.MAX,
    },
    Category.HOURS: {
        "windows": MergeStrategy.INTERSECTION,
        "blackout_periods": MergeStrategy.UNION,
        "exclude_weekends": MergeStrategy.UNION,
        "exclude_holidays": MergeStrategy.UNION,
    },
    Category.ROUTE: {
        "restrictions": MergeStrategy.UNION,
    },
    Category.UTILITY: {
        "notice_hours": MergeStrategy.MAX,
        "types": MergeStrategy.UNION,
    },
    Category.DIMENSION: {
        "max_width_ft": MergeStrategy.MIN,
        "max_height_ft": MergeStrategy.MIN,
        "max_length_ft": MergeStrategy.MIN,
        "max_weight_lbs": MergeStrategy.MIN,
    },
}

DEFAULT_BASE_OUTPUTS: dict[Category, dict[str, Any]] = {
    Category.ESCORT: {"front_escorts": 0, "rear_escorts": 0, "height_pole": False},
    Category.PERMIT: {"types": []},
    Category.SPEED: {},
    Category.HOURS: {},
    Category.ROUTE: {"restrictions": []},
    Category.UTILITY: {"notice_hours": 0, "types": []},
    Category.DIMENSION: {},
}

STRATEGY_FIELD_KINDS: dict[MergeStrategy, frozenset[FieldKind]] = {
    MergeStrategy.MAX: frozenset({FieldKind.NUMBER}),
    MergeStrategy.MIN: frozenset({FieldKind.NUMBER}),
    MergeStrategy.SUM: frozenset({FieldKind.NUMBER}),
    MergeStrategy.FIRST: frozenset(FieldKind),
    MergeStrategy.LAST: frozenset(FieldKind),
    MergeStrategy.UNION: frozenset({FieldKind.LIST, FieldKind.BOOLEAN}),
    MergeStrategy.INTERSECTION: frozenset({FieldKind.LIST, FieldKind.BOOLEAN}),
}

FALLBACK_MERGE_STRATEGY: MergeStrategy = MergeStrategy.LAST
