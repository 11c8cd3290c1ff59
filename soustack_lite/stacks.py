"""
Modelo de capacidades ("stacks") de un documento.

Convención canónica: claves sin versión (`"prep": 1`). Las claves legacy
`"<name>@<version>"` solo se leen y se migran; nunca se escriben.

Operaciones:
- `is_enabled(stacks, name)`
- `enable(stacks, name)` / `disable(stacks, name)`
- `migrate(stacks)` (y `plan_migration`, que además informa qué payloads hay
  que reubicar en `Document.extensions`)
- `capabilities(stacks)`: vista tipada `Capability(name, declared, legacy_payload)`

Ninguna función muta el mapping recibido.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)


STACK_KEYS: Tuple[str, ...] = (
    "prep",
    "equipment",
    "timed",
    "storage",
    "scaling",
    "structured",
    "referenced",
    "illustrated",
)

DECLARED = 1
"""Sentinel de declaración (`"timed": 1`)."""

# Payloads legacy que tienen un campo canónico en el documento:
# capacidad → clave dentro de `Document.extensions`
RELOCATION_TARGETS: Dict[str, str] = {
    "prep": "prepItems",
}


@dataclass(frozen=True)
class Capability:
    """
    Vista tipada de una capacidad dentro de `stacks`.

    Attributes:
        name:
            Nombre de la capacidad (uno de `STACK_KEYS`).
        declared:
            True si existe la clave sin versión.
        legacy_payload:
            Payload de la clave legacy (`name@v`) que sigue sin migrar, si hay.
        legacy_key:
            Clave legacy de donde sale `legacy_payload`.
    """
    name: str
    declared: bool
    legacy_payload: Optional[Any] = None
    legacy_key: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return self.declared or self.legacy_key is not None


class StackMigration(NamedTuple):
    """
    Resultado de `plan_migration`.

    `stacks` es el mismo objeto de entrada si no hubo cambios.
    `relocations` mapea clave de `extensions` → payload a reubicar.
    """
    stacks: Mapping[str, Any]
    relocations: Dict[str, Any]


def split_key(key: str) -> Tuple[str, Optional[str]]:
    """
    `"prep@1"` → `("prep", "1")`; `"prep"` → `("prep", None)`.
    """
    if "@" not in key:
        return key, None
    name, _, version = key.partition("@")
    return name, version


def _legacy_keys(stacks: Mapping[str, Any], name: str) -> List[str]:
    prefix = f"{name}@"
    return [k for k in stacks if isinstance(k, str) and k.startswith(prefix)]


def is_enabled(stacks: Any, name: str) -> bool:
    """
    True si está la clave sin versión o cualquier clave legacy `name@<v>`.
    """
    if not isinstance(stacks, Mapping):
        return False
    if name in stacks:
        return True
    return bool(_legacy_keys(stacks, name))


def enable(stacks: Any, name: str) -> Dict[str, Any]:
    """
    Declara la capacidad. No toca claves legacy: reubicar payloads es trabajo
    de `migrate`.
    """
    base = dict(stacks) if isinstance(stacks, Mapping) else {}
    base[name] = DECLARED
    return base


def disable(stacks: Any, name: str) -> Dict[str, Any]:
    """
    Quita la declaración sin versión. Las claves legacy quedan intactas.
    """
    base = dict(stacks) if isinstance(stacks, Mapping) else {}
    base.pop(name, None)
    return base


def is_sentinel(payload: Any) -> bool:
    """True para el payload de pura declaración (`1` / `True`)."""
    return payload is True or (
        isinstance(payload, (int, float)) and not isinstance(payload, bool) and payload == DECLARED
    )


def is_prep_payload(payload: Any) -> bool:
    """Lista de `{text: str, ...}`: forma reconocida de `prep@v`."""
    return isinstance(payload, list) and all(
        isinstance(entry, Mapping) and isinstance(entry.get("text"), str)
        for entry in payload
    )


def plan_migration(stacks: Any) -> StackMigration:
    """
    Migración canónica de claves legacy.

    Para cada clave `name@v` (con `name` en `STACK_KEYS`) cuya clave sin
    versión no exista:

    - payload sentinel → se reemplaza por la declaración sin versión;
    - payload reconocido (`prep@v` con lista de `{text}`) → queda solo la
      declaración y el payload se informa en `relocations["prepItems"]`;
    - cualquier otro payload → se preserva bajo la clave legacy hasta que
      exista una regla.

    Si nada cambia devuelve el MISMO objeto `stacks` (los llamadores usan la
    identidad para decidir si persistir).
    """
    if not isinstance(stacks, Mapping):
        return StackMigration(stacks={}, relocations={})

    next_stacks: Optional[Dict[str, Any]] = None
    relocations: Dict[str, Any] = {}

    for key in list(stacks):
        if not isinstance(key, str):
            continue
        name, version = split_key(key)
        if version is None or name not in STACK_KEYS:
            continue
        current = next_stacks if next_stacks is not None else stacks
        if name in current:
            continue

        payload = stacks[key]
        target = RELOCATION_TARGETS.get(name)
        if is_sentinel(payload):
            relocated = None
        elif target == "prepItems" and is_prep_payload(payload):
            relocated = payload
        else:
            logger.debug("Clave legacy %s sin regla de migración, se preserva", key)
            continue

        if next_stacks is None:
            next_stacks = dict(stacks)
        del next_stacks[key]
        next_stacks[name] = DECLARED
        if relocated is not None and target:
            relocations.setdefault(target, []).extend(relocated)
        logger.debug("Clave legacy %s migrada a %s", key, name)

    if next_stacks is None:
        return StackMigration(stacks=stacks, relocations={})
    return StackMigration(stacks=next_stacks, relocations=relocations)


def migrate(stacks: Any) -> Mapping[str, Any]:
    """
    Devuelve los stacks migrados (mismo objeto si no hubo cambios).

    Idempotente: `migrate(migrate(s)) == migrate(s)`.
    """
    return plan_migration(stacks).stacks


def capabilities(stacks: Any) -> List[Capability]:
    """
    Proyección tipada de `stacks` sobre las capacidades conocidas, en el orden
    de `STACK_KEYS`. Solo incluye las habilitadas.
    """
    if not isinstance(stacks, Mapping):
        return []
    out: List[Capability] = []
    for name in STACK_KEYS:
        declared = name in stacks
        legacy = _legacy_keys(stacks, name)
        if not declared and not legacy:
            continue
        legacy_key = legacy[0] if legacy else None
        out.append(
            Capability(
                name=name,
                declared=declared,
                legacy_payload=stacks[legacy_key] if legacy_key else None,
                legacy_key=legacy_key,
            )
        )
    return out


def legacy_payload(stacks: Any, name: str) -> Optional[Any]:
    """Payload de la primera clave legacy de `name`, si existe."""
    if not isinstance(stacks, Mapping):
        return None
    keys = _legacy_keys(stacks, name)
    return stacks[keys[0]] if keys else None
