"""Built-in attribute catalog for oversize/overweight load evaluation."""

from __future__ import annotations

from permitlogic.model.attributes import Attribute, ValueKind

ROAD_TYPES: tuple[str, ...] = ("two_lane", "multi_lane", "interstate", "all")
PERMIT_TYPES: tuple[str, ...] = ("oversize", "overweight", "mobile_home", "superload")
TIMES_OF_DAY: tuple[str, ...] = ("day", "night", "all")
TRAFFIC_DIRECTIONS: tuple[str, ...] = ("one_way", "two_way")

DEFAULT_ATTRIBUTES: tuple[Attribute, ...] = (
    Attribute("width_ft", ValueKind.NUMBER, unit="ft", label="Width"),
    Attribute("height_ft", ValueKind.NUMBER, unit="ft", label="Height"),
    Attribute("length_ft", ValueKind.NUMBER, unit="ft", label="Combined Length"),
    Attribute("front_overhang_ft", ValueKind.NUMBER, unit="ft", label="Front Overhang"),
    Attribute("rear_overhang_ft", ValueKind.NUMBER, unit="ft", label="Rear Overhang"),
    Attribute("left_overhang_ft", ValueKind.NUMBER, unit="ft", label="Left Overhang"),
    Attribute("right_overhang_ft", ValueKind.NUMBER, unit="ft", label="Right Overhang"),
    Attribute("gross_weight_lbs", ValueKind.NUMBER, unit="lbs", label="Gross Weight"),
    Attribute("axle_weight_lbs", ValueKind.NUMBER, unit="lbs", label="Axle Weight"),
    Attribute("axle_count", ValueKind.NUMBER, label="Axle Count"),
    Attribute("num_lanes_same_direction", ValueKind.NUMBER, label="Lanes In Travel Direction"),
    Attribute("min_speed_capable_mph", ValueKind.NUMBER, unit="mph", label="Min Speed Capable"),
    Attribute("road_type", ValueKind.ENUM, values=ROAD_TYPES, label="Road Type"),
    Attribute("permit_type", ValueKind.ENUM, values=PERMIT_TYPES, label="Permit Type"),
    Attribute("time_of_day", ValueKind.ENUM, values=TIMES_OF_DAY, label="Time of Day"),
    Attribute("bridge_traffic_direction", ValueKind.ENUM, values=TRAFFIC_DIRECTIONS, label="Bridge Traffic"),
    Attribute("on_bridge", ValueKind.BOOLEAN, label="On Bridge"),
    Attribute("urban_area", ValueKind.BOOLEAN, label="Urban Area"),
    Attribute("is_mobile_home", ValueKind.BOOLEAN, label="Mobile Home"),
    Attribute("is_modular_housing", ValueKind.BOOLEAN, label="Modular Housing"),
    Attribute("divisible_load", ValueKind.BOOLEAN, label="Divisible Load"),
    Attribute("police_escort", ValueKind.BOOLEAN, label="Police Escort"),
    Attribute("restriction_solo_occupy", ValueKind.BOOLEAN, label="Bridge Solo Occupancy"),
    Attribute("restriction_reduced_speed", ValueKind.BOOLEAN, label="Bridge Reduced Speed"),
)
