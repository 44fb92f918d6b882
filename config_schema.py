"""
Termina Configuration Schema - Self-Validating Run Configuration

Loads EngineConfig from JSON/YAML files, validates it against a Draft 2020-12
JSON schema, and self-heals bad input into safe defaults with warnings.

Consumed by:
- termina_cli.py (run, validate-config)
- termina.cycle (via the EngineConfig it produces)

Design Principles:
- Self-validating: Can't create invalid config
- Self-healing: Invalid input → safe defaults + warnings (non-strict mode)
- Strict mode: Invalid input → ValueError
- Round-trip: save() output loads back to an equal config
"""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml
from jsonschema import Draft202012Validator

from termina.constants import MAX_CYCLES_BEFORE_BREAK, SELF_REFERENTIAL_EPSILON
from termina.types_config import Catalyst, EngineConfig, DEFAULT_CATALYST, VARIANTS


__all__ = [
    'load',
    'load_dict',
    'default',
    'save',
    'to_dict',
    'validate',
]


# =============================================================================
# JSON Schema Definition (Draft 2020-12)
# =============================================================================

_JSON_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "TerminaConfig",
    "description": "Termina engine run configuration",
    "type": "object",
    "required": ["variant"],
    "properties": {
        "variant": {
            "type": "string",
            "description": "Engine preset the remaining fields override",
            "enum": sorted(VARIANTS),
        },
        "track_bias_alignment": {
            "type": "boolean",
            "description": "Track destruction bias and alignment drift",
        },
        "self_referential_epsilon": {
            "type": "number",
            "description": "|joy - pain| below this counts as a self-referential loop",
            "exclusiveMinimum": 0,
        },
        "max_cycles_before_break": {
            "type": "integer",
            "description": "Cycle on which the solve step fires",
            "minimum": 1,
        },
        "random_seed": {
            "type": ["integer", "null"],
            "description": "Seed for the numpy random source",
        },
        "tenant_id": {
            "type": "string",
            "minLength": 1,
        },
        "catalyst": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "emotional_noise": {"type": "number", "minimum": 0},
                "memories": {"type": "array", "items": {"type": "string"}},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}

_KNOWN_FIELDS = frozenset(_JSON_SCHEMA["properties"])
_KNOWN_CATALYST_FIELDS = frozenset(_JSON_SCHEMA["properties"]["catalyst"]["properties"])

# Compiled once at import
Draft202012Validator.check_schema(_JSON_SCHEMA)
_COMPILED_VALIDATOR = Draft202012Validator(_JSON_SCHEMA)


# =============================================================================
# Module-Level Functions
# =============================================================================

def load(path: str, validate: bool = True, strict: bool = False) -> EngineConfig:
    """
    Load config from JSON/YAML file.

    Args:
        path: Path to config file
        validate: Whether to validate (default True)
        strict: If True, raise on invalid; if False, self-heal with warnings

    Returns:
        Validated, frozen EngineConfig instance

    Raises:
        FileNotFoundError: If path doesn't exist
        ValueError: If strict=True and validation fails, or the file is not valid JSON
        yaml.YAMLError: If a YAML file does not parse
    """
    path_obj = Path(path)

    if not path_obj.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    content = path_obj.read_text()

    if path_obj.suffix in ('.yaml', '.yml'):
        data = yaml.safe_load(content)
    else:
        data = json.loads(content)

    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping, got {type(data).__name__}")

    return load_dict(data, validate, strict)


def load_dict(data: Dict[str, Any], validate: bool = True,
              strict: bool = False) -> EngineConfig:
    """Build an EngineConfig from an already-parsed mapping."""
    data = dict(data)
    if isinstance(data.get('variant'), str):
        data['variant'] = data['variant'].upper()
    return _create_config(data, validate, strict)


def default(variant: str = "OMEGA") -> EngineConfig:
    """
    Return the preset config for a variant.

    Raises:
        ValueError: If variant is unknown
    """
    key = variant.upper()
    if key not in VARIANTS:
        raise ValueError(f"Unknown variant '{variant}'. Must be one of: {sorted(VARIANTS)}")
    return VARIANTS[key]


def to_dict(config: EngineConfig) -> Dict[str, Any]:
    """Serialize config in the file format load() accepts."""
    return {
        "variant": config.variant_name,
        "track_bias_alignment": config.track_bias_alignment,
        "self_referential_epsilon": config.self_referential_epsilon,
        "max_cycles_before_break": config.max_cycles_before_break,
        "random_seed": config.random_seed,
        "tenant_id": config.tenant_id,
        "catalyst": {
            "name": config.catalyst.name,
            "emotional_noise": config.catalyst.emotional_noise,
            "memories": list(config.catalyst.memories),
        },
    }


def save(config: EngineConfig, path: str) -> None:
    """
    Write config to file.

    Args:
        config: EngineConfig to write
        path: File path to write to (.json or .yaml)
    """
    data = to_dict(config)
    path_obj = Path(path)

    if path_obj.suffix in ('.yaml', '.yml'):
        content = yaml.safe_dump(data, default_flow_style=False, sort_keys=True)
    else:
        content = json.dumps(data, indent=2, sort_keys=True)

    path_obj.write_text(content)


def validate(data: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """
    Validate config data against the schema.

    Returns: (is_valid, errors)
    """
    errors = [
        f"Schema: {'/'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
        for err in _COMPILED_VALIDATOR.iter_errors(data)
    ]
    return len(errors) == 0, errors


# =============================================================================
# Internal Functions
# =============================================================================

def _self_heal(data: Dict[str, Any], warns: List[str]) -> Dict[str, Any]:
    """
    Apply self-healing to config data.

    Self-healing behavior:
    - Missing or unknown variant → OMEGA, add warning
    - Out-of-range value → clamp or reset to default, add warning
    - Unknown field → ignore, add warning
    """
    healed = dict(data)

    if healed.get('variant') not in VARIANTS:
        warns.append(f"Unknown variant {healed.get('variant')!r}, using default: OMEGA")
        healed['variant'] = "OMEGA"

    for field in set(healed) - _KNOWN_FIELDS:
        del healed[field]
        warns.append(f"Ignoring unknown field: {field}")

    if 'track_bias_alignment' in healed and not isinstance(healed['track_bias_alignment'], bool):
        warns.append("track_bias_alignment must be boolean, using preset value")
        del healed['track_bias_alignment']

    if 'self_referential_epsilon' in healed:
        val = healed['self_referential_epsilon']
        if not isinstance(val, (int, float)) or isinstance(val, bool) or val <= 0:
            healed['self_referential_epsilon'] = SELF_REFERENTIAL_EPSILON
            warns.append(f"Reset self_referential_epsilon from {val!r} to {SELF_REFERENTIAL_EPSILON}")

    if 'max_cycles_before_break' in healed:
        val = healed['max_cycles_before_break']
        if isinstance(val, float) and val.is_integer():
            healed['max_cycles_before_break'] = int(val)
        elif not isinstance(val, int) or isinstance(val, bool):
            healed['max_cycles_before_break'] = MAX_CYCLES_BEFORE_BREAK
            warns.append(f"Reset max_cycles_before_break from {val!r} to {MAX_CYCLES_BEFORE_BREAK}")
        elif val < 1:
            healed['max_cycles_before_break'] = 1
            warns.append(f"Clamped max_cycles_before_break from {val} to 1")

    if 'random_seed' in healed:
        val = healed['random_seed']
        if val is not None and (not isinstance(val, int) or isinstance(val, bool)):
            healed['random_seed'] = None
            warns.append(f"Dropped non-integer random_seed {val!r}")

    if 'tenant_id' in healed and (not isinstance(healed['tenant_id'], str)
                                  or not healed['tenant_id']):
        warns.append(f"Invalid tenant_id {healed['tenant_id']!r}, using default")
        del healed['tenant_id']

    catalyst = healed.get('catalyst')
    if catalyst is not None:
        if not isinstance(catalyst, dict):
            warns.append("catalyst must be a mapping, using default catalyst")
            del healed['catalyst']
        else:
            catalyst = dict(catalyst)
            for field in set(catalyst) - _KNOWN_CATALYST_FIELDS:
                del catalyst[field]
                warns.append(f"Ignoring unknown catalyst field: {field}")
            noise = catalyst.get('emotional_noise')
            if noise is not None:
                if not isinstance(noise, (int, float)) or isinstance(noise, bool):
                    catalyst['emotional_noise'] = DEFAULT_CATALYST.emotional_noise
                    warns.append(f"Reset emotional_noise from {noise!r} to default")
                elif noise < 0:
                    catalyst['emotional_noise'] = 0.0
                    warns.append(f"Clamped emotional_noise from {noise} to 0.0")
            if 'name' in catalyst and (not isinstance(catalyst['name'], str)
                                       or not catalyst['name']):
                warns.append(f"Invalid catalyst name {catalyst['name']!r}, using default")
                del catalyst['name']
            memories = catalyst.get('memories')
            if memories is not None and (not isinstance(memories, list)
                                         or not all(isinstance(m, str) for m in memories)):
                warns.append("catalyst memories must be a list of strings, using default")
                del catalyst['memories']
            healed['catalyst'] = catalyst

    return healed


def _create_config(data: Dict[str, Any], validate_data: bool, strict: bool) -> EngineConfig:
    """
    Internal factory for creating EngineConfig from data.

    Handles validation and self-healing. Fields absent from data fall back to
    the chosen variant's preset.
    """
    all_warnings: List[str] = []

    if validate_data:
        is_valid, errors = validate(data)

        if not is_valid:
            if strict:
                raise ValueError("Config validation failed:\n" + "\n".join(f"  - {e}" for e in errors))
            data = _self_heal(data, all_warnings)
            is_valid, errors = validate(data)
            if not is_valid:
                raise ValueError("Config validation failed after self-healing:\n" +
                                 "\n".join(f"  - {e}" for e in errors))

    for w in all_warnings:
        warnings.warn(f"TerminaConfig: {w}", UserWarning, stacklevel=3)

    preset = default(data.get('variant', 'OMEGA'))
    cat_data = data.get('catalyst') or {}
    catalyst = Catalyst(
        name=cat_data.get('name', preset.catalyst.name),
        emotional_noise=float(cat_data.get('emotional_noise', preset.catalyst.emotional_noise)),
        memories=tuple(cat_data.get('memories', preset.catalyst.memories)),
    )

    return EngineConfig(
        catalyst=catalyst,
        variant_name=preset.variant_name,
        track_bias_alignment=bool(data.get('track_bias_alignment', preset.track_bias_alignment)),
        self_referential_epsilon=float(
            data.get('self_referential_epsilon', preset.self_referential_epsilon)
        ),
        max_cycles_before_break=int(
            data.get('max_cycles_before_break', preset.max_cycles_before_break)
        ),
        random_seed=data.get('random_seed', preset.random_seed),
        tenant_id=data.get('tenant_id', preset.tenant_id),
    )
