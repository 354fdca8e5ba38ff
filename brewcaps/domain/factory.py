"""
Builds devices from named capability bundles.

A bundle ("kind") maps to an ordered list of capability ids with their options.
Callers only name the kind; which classes back a grinder or a WiFi machine is
decided here.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from brewcaps.bundles import get_bundles, load_bundle, read_bundle_file
from brewcaps.config import Settings, get_settings
from brewcaps.domain.capabilities import BREW, build_capability, get_capability_type
from brewcaps.domain.device import Device, new_device
from brewcaps.domain.errors import InvalidDeviceConfiguration, UnknownDeviceKind

CapabilitySpec = Union[str, Tuple[str, Mapping[str, Any]], Mapping[str, Any]]


@dataclass(frozen=True)
class Bundle:
    kind: str
    capabilities: Tuple[Tuple[str, Mapping[str, Any]], ...]
    description: str = ""
    source: Optional[str] = field(default=None, compare=False)

    @property
    def capability_ids(self) -> Tuple[str, ...]:
        return tuple(cid for cid, _ in self.capabilities)


def _normalize_spec(spec: CapabilitySpec) -> Tuple[str, dict[str, Any]]:
    if isinstance(spec, str):
        return spec, {}
    if isinstance(spec, Mapping):
        if "id" not in spec:
            raise InvalidDeviceConfiguration(f"Capability entry without 'id': {dict(spec)}")
        return str(spec["id"]), dict(spec.get("options") or {})
    capability_id, options = spec
    return capability_id, dict(options or {})


class DeviceFactory:
    """
    Registry of device kinds and the entry point for building devices.

    Args:
        settings: Runtime settings; ``delay_scale`` scales simulated delays and
            ``bundles_path`` names a directory of extra bundle files.
        load_defaults: Register the bundles shipped with the package.
    """

    def __init__(self, settings: Optional[Settings] = None, load_defaults: bool = True) -> None:
        self.settings = settings or get_settings()
        self._bundles: dict[str, Bundle] = {}
        if load_defaults:
            for kind in get_bundles():
                self.register_bundle(load_bundle(kind), source=f"package:{kind}")
        if self.settings.bundles_path:
            self.load_directory(self.settings.bundles_path)

    def register(
        self,
        kind: str,
        capabilities: Iterable[CapabilitySpec],
        description: str = "",
        replace: bool = False,
        source: Optional[str] = None,
    ) -> Bundle:
        if not kind or not kind.strip():
            raise InvalidDeviceConfiguration("Bundle kind must be non-empty.")
        kind = kind.strip()
        if kind in self._bundles and not replace:
            raise InvalidDeviceConfiguration(f"Bundle '{kind}' is already registered.")

        entries = [_normalize_spec(spec) for spec in capabilities]
        ids = [cid for cid, _ in entries]
        if BREW not in ids:
            raise InvalidDeviceConfiguration(f"Bundle '{kind}' must include '{BREW}'.")
        if len(set(ids)) != len(ids):
            raise InvalidDeviceConfiguration(f"Bundle '{kind}' repeats a capability: {ids}")
        for cid in ids:
            get_capability_type(cid)

        bundle = Bundle(
            kind=kind,
            capabilities=tuple((cid, options) for cid, options in entries),
            description=description,
            source=source,
        )
        self._bundles[kind] = bundle
        return bundle

    def register_bundle(self, data: Mapping[str, Any], replace: bool = False, source: Optional[str] = None) -> Bundle:
        kind = data.get("kind")
        if not isinstance(kind, str):
            raise InvalidDeviceConfiguration(f"Bundle definition without a kind: {dict(data)}")
        return self.register(
            kind,
            data.get("capabilities") or [],
            description=data.get("description", ""),
            replace=replace,
            source=source,
        )

    def load_directory(self, path: Union[str, Path], replace: bool = True) -> list[Bundle]:
        directory = Path(path)
        if not directory.is_dir():
            raise InvalidDeviceConfiguration(f"Bundle directory not found: {directory}")
        loaded = []
        for file in sorted(directory.glob("*.json")):
            try:
                data = read_bundle_file(file)
            except (OSError, ValueError) as exc:
                raise InvalidDeviceConfiguration(f"Bad bundle file {file}: {exc}") from exc
            loaded.append(self.register_bundle(data, replace=replace, source=str(file)))
        return loaded

    def unregister(self, kind: str) -> None:
        if kind not in self._bundles:
            raise UnknownDeviceKind(kind, self._bundles)
        del self._bundles[kind]

    def kinds(self) -> list[str]:
        return sorted(self._bundles)

    def bundle(self, kind: str) -> Bundle:
        try:
            return self._bundles[kind]
        except KeyError:
            raise UnknownDeviceKind(kind, self._bundles) from None

    def create(
        self,
        kind: str,
        make: str,
        model: str,
        overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> Device:
        """
        Build a device of a registered kind.

        Args:
            kind: Registered bundle name (e.g. ``"grinder"``).
            make: Manufacturer name.
            model: Model name.
            overrides: Per-capability option overrides, e.g.
                ``{"grind": {"fault": "burr jammed"}}``.

        Raises:
            UnknownDeviceKind: If ``kind`` was never registered.
            InvalidDeviceConfiguration: If the resulting device is invalid.
        """
        bundle = self.bundle(kind)
        overrides = overrides or {}
        unknown = set(overrides) - set(bundle.capability_ids)
        if unknown:
            raise InvalidDeviceConfiguration(f"Overrides for capabilities not in '{kind}': {sorted(unknown)}")

        capabilities = []
        for capability_id, options in bundle.capabilities:
            merged = {**copy.deepcopy(dict(options)), **dict(overrides.get(capability_id, {}))}
            if "delay" in merged:
                merged["delay"] = float(merged["delay"]) * self.settings.delay_scale
            capabilities.append(build_capability(capability_id, **merged))
        return new_device(make, model, capabilities)


@lru_cache
def default_factory() -> DeviceFactory:
    return DeviceFactory()


def create_device(
    kind: str,
    make: str,
    model: str,
    overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> Device:
    return default_factory().create(kind, make, model, overrides=overrides)

