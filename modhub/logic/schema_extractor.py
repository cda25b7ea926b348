"""
modhub/logic/schema_extractor.py
================================

Turns a settings object (or a flat list of wrapped config entries) into
ordered :class:`SectionInfo` / :class:`FieldInfo` lists.

Member discovery for settings objects, in order:

1. dataclass fields
2. instance attributes (``vars(obj)``)
3. annotated or plain-valued class attributes, ``__slots__`` members and
   properties, walking the MRO base-first (``ClassVar`` constants excluded)

Public plain members are included unless marked hidden. Members holding
a wrapped entry (and properties, which may only expose entries) are
included only when their :class:`FieldMeta` names a display name or a
section. A member that cannot be read or described is skipped; a whole
object that cannot be introspected yields ``[]``.
"""

from __future__ import annotations

import dataclasses
import inspect
import re
import types
import typing
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from core.logging.logic.logger import Logger, logger as default_logger
from modhub.models.config_entry import (
    entry_description,
    entry_location,
    entry_value_type,
    is_wrapped_entry,
)
from modhub.models.constraint import ChoiceConstraint, Constraint, constraint_from_acceptable, range_from_tuple
from modhub.models.field_info import MISSING, EntryBinding, FieldInfo, MemberBinding
from modhub.models.field_kind import kind_for_type
from modhub.models.mod_attributes import FieldMeta, get_field_meta, get_section_meta
from modhub.models.section_info import SectionInfo

DEFAULT_SECTION = "General"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def format_field_name(name: str) -> str:
    """``EnableFeature`` -> ``Enable Feature``; underscores become spaces."""
    text = _CAMEL_BOUNDARY.sub(" ", name.replace("_", " "))
    return " ".join(text.split())


def _own_annotations(klass: type) -> Dict[str, Any]:
    try:
        return inspect.get_annotations(klass)
    except Exception:  # noqa: BLE001
        return {}


def _is_class_var(name: str, hints: Dict[str, Any], annotated: Dict[str, Any]) -> bool:
    if name in hints:
        return typing.get_origin(hints[name]) is typing.ClassVar or hints[name] is typing.ClassVar
    raw = annotated.get(name)
    # unresolved string annotation under postponed evaluation
    return isinstance(raw, str) and raw.replace("typing.", "").startswith("ClassVar")


def _is_plain_value(attr: Any) -> bool:
    """Class attribute holding data rather than behavior."""
    if callable(attr) or isinstance(attr, types.ModuleType):
        return False
    return not hasattr(type(attr), "__get__")


def _constraint_from_meta(meta: FieldMeta) -> Constraint:
    if meta.value_range is not None:
        return range_from_tuple(meta.value_range)
    if meta.choices:
        return ChoiceConstraint(tuple(meta.choices))
    return None


class SchemaExtractor:
    def __init__(self, logger: Logger | None = None) -> None:
        self._logger = logger or default_logger
        # classes whose zero-value instance is being built right now
        self._constructing: Set[type] = set()

    # ------------------------------------------------------------------ #
    #  Settings objects                                                  #
    # ------------------------------------------------------------------ #
    def extract(self, settings_obj: Any, *, mod_id: str = "") -> List[SectionInfo]:
        if settings_obj is None:
            return []
        try:
            return self._extract(settings_obj, mod_id)
        except Exception as exc:  # noqa: BLE001
            self._logger.log(
                "SchemaExtractor",
                "ExtractionFailed",
                level="WARNING",
                reference_id=mod_id or None,
                message=f"{type(settings_obj).__name__}: {exc}",
            )
            return []

    def _extract(self, obj: Any, mod_id: str) -> List[SectionInfo]:
        cls = type(obj)
        section_meta = get_section_meta(cls)
        default_section = section_meta.name if section_meta else DEFAULT_SECTION
        default_order = section_meta.order if section_meta else 0

        defaults = self._zero_instance(cls)
        hints = self._type_hints(cls)

        sections: Dict[str, SectionInfo] = {}
        declared_order: Dict[str, int] = {}

        for name, is_property in self._iter_members(obj, hints):
            try:
                meta = get_field_meta(cls, name)
                if meta is not None and meta.hidden:
                    continue
                value = getattr(obj, name)
                if is_wrapped_entry(value):
                    if meta is None or not meta.tagged:
                        continue
                    info = self._entry_field(name, value, meta)
                elif is_property or callable(value) or isinstance(value, types.ModuleType):
                    continue
                else:
                    info = self._member_field(obj, name, value, meta or FieldMeta(), defaults, hints)
            except Exception as exc:  # noqa: BLE001
                self._logger.log(
                    "SchemaExtractor",
                    "MemberSkipped",
                    level="DEBUG",
                    reference_id=mod_id or None,
                    message=f"{cls.__name__}.{name}: {exc}",
                )
                continue

            section_name = meta.section if meta is not None and meta.section else default_section
            if meta is not None and meta.section_order is not None:
                declared_order.setdefault(section_name, meta.section_order)
            section = sections.get(section_name)
            if section is None:
                section = sections[section_name] = SectionInfo(section_name)
            section.fields.append(info)

        for section in sections.values():
            fallback = default_order if section.name == default_section else 0
            section.order = declared_order.get(section.name, fallback)
            section.sort_fields()

        # sorted() is stable: equal order keys keep first-seen order
        return sorted(sections.values(), key=lambda s: s.order)

    def _iter_members(self, obj: Any, hints: Dict[str, Any]) -> Iterator[Tuple[str, bool]]:
        """Yield ``(member name, is_property)`` in discovery order."""
        cls = type(obj)
        seen: Set[str] = set()

        def _fresh(name: str) -> bool:
            if name.startswith("_") or name in seen:
                return False
            seen.add(name)
            return True

        if dataclasses.is_dataclass(obj):
            for f in dataclasses.fields(obj):
                if _fresh(f.name):
                    yield f.name, False

        try:
            instance_attrs = list(vars(obj))
        except TypeError:
            instance_attrs = []
        for name in instance_attrs:
            if _fresh(name):
                yield name, False

        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            annotated = _own_annotations(klass)
            for name, attr in klass.__dict__.items():
                if _is_class_var(name, hints, annotated):
                    continue
                if isinstance(attr, property):
                    if _fresh(name):
                        yield name, True
                elif isinstance(attr, types.MemberDescriptorType) or name in annotated or _is_plain_value(attr):
                    if _fresh(name):
                        yield name, False

    # ------------------------------------------------------------------ #
    #  Field builders                                                    #
    # ------------------------------------------------------------------ #
    def _entry_field(self, name: str, entry: Any, meta: FieldMeta) -> FieldInfo:
        text, acceptable = entry_description(entry)
        binding = EntryBinding(entry)
        value_type = entry_value_type(entry)
        return FieldInfo(
            name=name,
            display_name=meta.name or name,
            binding=binding,
            kind=kind_for_type(value_type),
            value_type=value_type,
            tooltip=meta.tooltip if meta.tooltip is not None else text,
            constraint=_constraint_from_meta(meta) or constraint_from_acceptable(acceptable),
            advanced=meta.advanced,
            read_only=meta.read_only,
            percentage=meta.percentage,
            fmt=meta.fmt,
            order=meta.order,
            default_value=entry.default_value,
            initial_value=binding.get(),
        )

    def _member_field(
        self,
        obj: Any,
        name: str,
        value: Any,
        meta: FieldMeta,
        defaults: Any,
        hints: Dict[str, Any],
    ) -> FieldInfo:
        value_type = hints.get(name)
        if not isinstance(value_type, type):
            value_type = type(value) if value is not None else None
        default = MISSING
        if defaults is not None:
            try:
                default = getattr(defaults, name)
            except Exception:  # noqa: BLE001 - fall back to the initial value on reset
                default = MISSING
        return FieldInfo(
            name=name,
            display_name=meta.name or name,
            binding=MemberBinding(obj, name),
            kind=kind_for_type(value_type),
            value_type=value_type,
            tooltip=meta.tooltip or "",
            constraint=_constraint_from_meta(meta),
            advanced=meta.advanced,
            read_only=meta.read_only,
            percentage=meta.percentage,
            fmt=meta.fmt,
            order=meta.order,
            default_value=default,
            initial_value=value,
        )

    def _zero_instance(self, cls: type) -> Optional[Any]:
        if cls in self._constructing:
            return None
        self._constructing.add(cls)
        try:
            return cls()
        except Exception as exc:  # noqa: BLE001
            self._logger.log(
                "SchemaExtractor",
                "NoDefaultInstance",
                level="DEBUG",
                message=f"{cls.__name__}: {exc}",
            )
            return None
        finally:
            self._constructing.discard(cls)

    @staticmethod
    def _type_hints(cls: type) -> Dict[str, Any]:
        try:
            return typing.get_type_hints(cls)
        except Exception:  # noqa: BLE001 - unresolved forward refs
            return {}

    # ------------------------------------------------------------------ #
    #  Wrapped entries of discovered plugins                             #
    # ------------------------------------------------------------------ #
    def extract_entries(self, entries: Iterable[Any], *, mod_id: str = "") -> List[SectionInfo]:
        """Group entries by their own section label, in enumeration order."""
        sections: Dict[str, SectionInfo] = {}
        for entry in entries:
            try:
                section_name, key = entry_location(entry)
                text, acceptable = entry_description(entry)
                binding = EntryBinding(entry)
                value_type = entry_value_type(entry)
                info = FieldInfo(
                    name=key,
                    display_name=format_field_name(key),
                    binding=binding,
                    kind=kind_for_type(value_type),
                    value_type=value_type,
                    tooltip=text,
                    constraint=constraint_from_acceptable(acceptable),
                    default_value=entry.default_value,
                    initial_value=binding.get(),
                )
            except Exception as exc:  # noqa: BLE001
                self._logger.log(
                    "SchemaExtractor",
                    "EntrySkipped",
                    level="DEBUG",
                    reference_id=mod_id or None,
                    message=str(exc),
                )
                continue
            section_name = section_name or DEFAULT_SECTION
            section = sections.get(section_name)
            if section is None:
                section = sections[section_name] = SectionInfo(section_name, order=len(sections))
            section.fields.append(info)
        for section in sections.values():
            section.sort_fields()
        return list(sections.values())
