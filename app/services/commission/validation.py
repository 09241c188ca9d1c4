"""Structural checks run on a commission structure before it is saved."""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from types import SimpleNamespace
from typing import Any, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from app.schemas.commission import (
    CommissionStructureConfig,
    FlatRateStructure,
    ProfitSharingStructure,
    StructureValidationResult,
    TargetBasedStructure,
    TieredStructure,
)

_structure_adapter = TypeAdapter(CommissionStructureConfig)

_STRUCTURE_MODELS = (FlatRateStructure, TieredStructure, TargetBasedStructure, ProfitSharingStructure)


def _is_finite(value: Any) -> bool:
    return isinstance(value, Decimal) and value.is_finite()


def _is_percentage(value: Any) -> bool:
    return _is_finite(value) and 0 <= value <= 100


def _as_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        return None


def validate_commission_structure(structure: Any) -> StructureValidationResult:
    """
    Check a structure for internal consistency, collecting every violation.

    Accepts a parsed structure config or a raw mapping. A mapping that does
    not parse is still checked field by field, so its parse errors are
    reported alongside every other violation. Never raises.
    """
    if isinstance(structure, Mapping):
        try:
            structure = _structure_adapter.validate_python(structure)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(p) for p in err['loc']) or 'structure'}: {err['msg']}"
                for err in exc.errors()
            ]
            for error in _mapping_errors(structure):
                if error not in errors:
                    errors.append(error)
            return StructureValidationResult(valid=False, errors=errors)

    if not isinstance(structure, _STRUCTURE_MODELS):
        return StructureValidationResult(valid=False, errors=["Commission structure is required"])

    errors = _common_errors(structure.name, structure.base_rate)
    if isinstance(structure, TieredStructure):
        errors.extend(_tier_errors(structure.tiers))
    if isinstance(structure, TargetBasedStructure):
        errors.extend(_target_errors(structure.target_amount))

    return StructureValidationResult(valid=not errors, errors=errors)


def _mapping_errors(data: Mapping) -> List[str]:
    """Run the structural checks on whatever fields of a raw mapping are readable."""
    name = data.get("name")
    errors = _common_errors(name if isinstance(name, str) else "", _as_decimal(data.get("base_rate", 0)))

    structure_type = data.get("type")
    if structure_type == "tiered":
        raw_tiers = data.get("tiers")
        if not isinstance(raw_tiers, (list, tuple)):
            raw_tiers = []
        tiers = [
            SimpleNamespace(
                min_amount=_as_decimal(t.get("min_amount")) if isinstance(t, Mapping) else None,
                max_amount=_as_decimal(t.get("max_amount")) if isinstance(t, Mapping) else None,
                rate=_as_decimal(t.get("rate")) if isinstance(t, Mapping) else None,
            )
            for t in raw_tiers
        ]
        errors.extend(_tier_errors(tiers))
    elif structure_type == "target-based":
        errors.extend(_target_errors(_as_decimal(data.get("target_amount"))))

    return errors


def _common_errors(name: Optional[str], base_rate: Any) -> List[str]:
    errors: List[str] = []
    if not (name or "").strip():
        errors.append("Commission structure name is required")
    if not _is_percentage(base_rate):
        errors.append("Base rate must be between 0 and 100")
    return errors


def _target_errors(target: Any) -> List[str]:
    if not _is_finite(target) or target <= 0:
        return ["Target-based commission structure must have a positive target amount"]
    return []


def _tier_errors(tiers: Sequence[Any]) -> List[str]:
    errors: List[str] = []

    if not tiers:
        errors.append("Tiered commission structure must have at least one tier")

    for level, tier in enumerate(tiers, start=1):
        bounds_finite = True
        if not _is_finite(tier.min_amount):
            errors.append(f"Tier {level}: Minimum amount must be a finite number")
            bounds_finite = False
        elif tier.min_amount < 0:
            errors.append(f"Tier {level}: Minimum amount cannot be negative")

        if not _is_finite(tier.max_amount):
            errors.append(f"Tier {level}: Maximum amount must be a finite number")
            bounds_finite = False

        if bounds_finite and tier.max_amount <= tier.min_amount:
            errors.append(f"Tier {level}: Maximum amount must be greater than minimum amount")

        if not _is_percentage(tier.rate):
            errors.append(f"Tier {level}: Rate must be between 0 and 100")

    # Adjacent tiers must share their boundary
    for level in range(1, len(tiers)):
        previous, current = tiers[level - 1], tiers[level]
        if not (_is_finite(previous.max_amount) and _is_finite(current.min_amount)):
            continue
        if current.min_amount != previous.max_amount:
            errors.append(f"Gap or overlap detected between tier {level} and tier {level + 1}")

    return errors
