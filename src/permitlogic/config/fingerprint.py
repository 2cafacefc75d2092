"""Config fingerprinting for reproducible evaluation runs."""

from __future__ import annotations

import hashlib
import json

from permitlogic.config.model import PermitLogicConfig


def config_fingerprint(config: PermitLogicConfig) -> str:
    """Return a stable hash fingerprint of the resolved config."""
    payload = {
        "attributes": [
            {
                "name": attribute.name,
                "kind": attribute.kind.value,
                "unit": attribute.unit,
                "values": list(attribute.values),
            }
            for attribute in config.attributes
        ],
        "merge_strategies": {
            category.value: {field: strategy.value for field, strategy in sorted(fields.items())}
            for category, fields in sorted(config.merge_strategies.items())
        },
        "base_outputs": {category.value: fields for category, fields in sorted(config.base_outputs.items())},
        "strict_facts": config.strict_facts,
    }
    blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()
