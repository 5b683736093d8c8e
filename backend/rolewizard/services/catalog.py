from __future__ import annotations
"""Read-only capability & scope catalogs.

Both catalogs are plain immutable objects built once per app (see
``rolewizard.create_app``) and passed explicitly into the selection engine and
scope composer. Nothing here is a module-level singleton so tests can build
synthetic catalogs freely::

    catalog = CapabilityCatalog.from_entries([
        {'cap': 'A', 'area': 'x', 'label': 'A', 'depends_on': []},
        {'cap': 'B', 'area': 'x', 'label': 'B', 'depends_on': ['A']},
    ])
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from rolewizard.errors import CatalogError, InvalidScope, UnknownCapability


@dataclass(frozen=True)
class Capability:
    key: str
    area: str
    label: str
    depends_on: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {'cap': self.key, 'area': self.area, 'label': self.label, 'depends_on': list(self.depends_on)}


class CapabilityCatalog:
    def __init__(self, capabilities: Iterable[Capability]):
        self._caps: Dict[str, Capability] = {}
        for cap in capabilities:
            if cap.key in self._caps:
                raise CatalogError(f'Duplicate capability {cap.key}')
            self._caps[cap.key] = cap
        reverse: Dict[str, List[str]] = {k: [] for k in self._caps}
        for cap in self._caps.values():
            for dep in cap.depends_on:
                if dep not in self._caps:
                    raise CatalogError(f'Capability {cap.key} depends on unknown {dep}')
                reverse[dep].append(cap.key)
        self._dependents = {k: tuple(v) for k, v in reverse.items()}

    @classmethod
    def from_entries(cls, entries: Iterable[Mapping[str, Any]]) -> 'CapabilityCatalog':
        caps = []
        for raw in entries:
            try:
                key = raw['cap']
            except KeyError:
                raise CatalogError('Capability entry missing cap')
            caps.append(Capability(
                key=key,
                area=raw.get('area') or '',
                label=raw.get('label') or key,
                # dict.fromkeys keeps first occurrence order while dropping repeats
                depends_on=tuple(dict.fromkeys(raw.get('depends_on') or raw.get('dependsOn') or [])),
            ))
        return cls(caps)

    @classmethod
    def from_json_file(cls, path: str) -> 'CapabilityCatalog':
        with open(path, encoding='utf-8') as f:
            return cls.from_entries(json.load(f))

    def __contains__(self, key: object) -> bool:
        return key in self._caps

    def __iter__(self):
        return iter(self._caps.values())

    def __len__(self) -> int:
        return len(self._caps)

    def get(self, key: str) -> Capability:
        try:
            return self._caps[key]
        except KeyError:
            raise UnknownCapability(key)

    def depends_on(self, key: str) -> Tuple[str, ...]:
        return self.get(key).depends_on

    def dependents(self, key: str) -> Tuple[str, ...]:
        """Capabilities listing ``key`` directly in their depends_on."""
        self.get(key)
        return self._dependents[key]

    def areas(self) -> List[str]:
        return list(dict.fromkeys(c.area for c in self._caps.values()))

    def by_area(self) -> Dict[str, List[Capability]]:
        grouped: Dict[str, List[Capability]] = {}
        for cap in self._caps.values():
            grouped.setdefault(cap.area, []).append(cap)
        return grouped

    def in_area(self, area: str) -> List[Capability]:
        return [c for c in self._caps.values() if c.area == area]

    def as_list(self) -> List[Dict[str, Any]]:
        return [c.as_dict() for c in self._caps.values()]


@dataclass(frozen=True)
class ScopeOption:
    value: str
    label: str = ''
    description: str = ''


@dataclass(frozen=True)
class ScopeCategory:
    key: str
    label: str
    description: str = ''
    options: Tuple[ScopeOption, ...] = field(default_factory=tuple)

    @property
    def values(self) -> Tuple[str, ...]:
        return tuple(o.value for o in self.options)


class ScopeCatalog:
    def __init__(self, categories: Iterable[ScopeCategory]):
        self._categories: Dict[str, ScopeCategory] = {c.key: c for c in categories}

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> 'ScopeCatalog':
        categories = []
        for key, spec in raw.items():
            options = []
            for opt in spec.get('options') or []:
                # bare strings are accepted as options for compact catalogs
                if isinstance(opt, str):
                    options.append(ScopeOption(value=opt, label=opt))
                else:
                    options.append(ScopeOption(value=opt['value'], label=opt.get('label', opt['value']), description=opt.get('description', '')))
            if not options:
                raise CatalogError(f'Scope category {key} has no options')
            categories.append(ScopeCategory(key=key, label=spec.get('label', key), description=spec.get('description', ''), options=tuple(options)))
        return cls(categories)

    @classmethod
    def from_json_file(cls, path: str) -> 'ScopeCatalog':
        with open(path, encoding='utf-8') as f:
            return cls.from_mapping(json.load(f))

    def __contains__(self, category: object) -> bool:
        return category in self._categories

    def __iter__(self):
        return iter(self._categories.values())

    def categories(self) -> List[str]:
        return list(self._categories)

    def get(self, category: str) -> ScopeCategory:
        try:
            return self._categories[category]
        except KeyError:
            raise InvalidScope(category)

    def allowed_values(self, category: str) -> Tuple[str, ...]:
        return self.get(category).values

    def as_dict(self) -> Dict[str, Any]:
        return {
            c.key: {
                'label': c.label,
                'description': c.description,
                'options': [{'value': o.value, 'label': o.label, 'description': o.description} for o in c.options],
            }
            for c in self._categories.values()
        }


def build_catalogs(capability_path: Optional[str] = None, scope_path: Optional[str] = None) -> Tuple[CapabilityCatalog, ScopeCatalog]:
    """Build catalogs from JSON overrides or the bundled defaults."""
    if capability_path:
        capabilities = CapabilityCatalog.from_json_file(capability_path)
    else:
        from rolewizard.constants.capabilities import CAPABILITIES
        capabilities = CapabilityCatalog.from_entries(CAPABILITIES)
    if scope_path:
        scopes = ScopeCatalog.from_json_file(scope_path)
    else:
        from rolewizard.constants.scopes import SCOPES
        scopes = ScopeCatalog.from_mapping(SCOPES)
    return capabilities, scopes


__all__ = ['Capability', 'CapabilityCatalog', 'ScopeOption', 'ScopeCategory', 'ScopeCatalog', 'build_catalogs']
