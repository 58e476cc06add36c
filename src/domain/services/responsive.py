from __future__ import annotations

from typing import Any, Mapping

from src.domain.entities.asset import AssetEntity
from src.domain.entities.breakpoint import Breakpoint
from src.domain.errors import AssetNotFoundError
from src.domain.interfaces import AssetSource
from src.domain.services.context import ResponsiveContext

DEFAULT_LABEL = "default"

# Parameters that describe the request rather than any breakpoint
_RESERVED = ("src",)


class Responsive:
    """All breakpoints of one asset for one rendering request.

    ``parameters`` is the flat bag coming from the caller. Keys prefixed with
    a configured breakpoint label (``lg:ratio``) only apply to that
    breakpoint; every other key applies to all breakpoints unless a
    breakpoint overrides it.
    """

    def __init__(
        self,
        reference: Any,
        parameters: Mapping[str, Any],
        context: ResponsiveContext,
        assets: AssetSource | None = None,
    ) -> None:
        self.context = context
        self.parameters = dict(parameters)
        self.asset = self._retrieve_asset(reference, assets)
        self._breakpoints: list[Breakpoint] | None = None

    @staticmethod
    def _retrieve_asset(reference: Any, assets: AssetSource | None) -> AssetEntity:
        if isinstance(reference, AssetEntity):
            return reference
        if isinstance(reference, Mapping):
            reference = reference.get("id") or reference.get("url") or reference.get("path")
        if not reference or assets is None:
            raise AssetNotFoundError(reference)
        return assets.resolve(reference)

    def _labels(self) -> list[str]:
        return [DEFAULT_LABEL, *self.context.config.breakpoints.keys()]

    def parameters_by_breakpoint(self) -> dict[str, dict[str, Any]]:
        labels = self._labels()
        grouped: dict[str, dict[str, Any]] = {DEFAULT_LABEL: {}}
        for key, value in self.parameters.items():
            if key in _RESERVED:
                continue
            prefix, sep, option = key.partition(":")
            if sep and prefix in labels:
                grouped.setdefault(prefix, {})[option] = value
            else:
                grouped[DEFAULT_LABEL][key] = value
        return grouped

    def breakpoints(self) -> list[Breakpoint]:
        if self._breakpoints is not None:
            return self._breakpoints

        grouped = self.parameters_by_breakpoint()
        defaults = grouped[DEFAULT_LABEL]

        breakpoints = [Breakpoint(self.asset, DEFAULT_LABEL, 0, defaults, self.context)]
        for label, min_width in self.context.config.breakpoints.items():
            if label not in grouped:
                continue
            params = {**defaults, **grouped[label]}
            breakpoints.append(Breakpoint(self.asset, label, min_width, params, self.context))

        breakpoints.sort(key=lambda bp: bp.min_width)
        self._breakpoints = breakpoints
        return breakpoints

    def default_breakpoint(self) -> Breakpoint:
        for breakpoint in self.breakpoints():
            if breakpoint.min_width == 0:
                return breakpoint
        raise LookupError("No default breakpoint")  # pragma: no cover

    def asset_height(self) -> int | None:
        return self.context.calculator.calculate_for_img_tag(self.default_breakpoint()).height
